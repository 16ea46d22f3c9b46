"""Tests for document key validation and key extraction."""

from dataclasses import dataclass, field
from typing import Optional

import pytest
from pydantic import BaseModel, ConfigDict, Field

from arango_ops_exceptions import InvalidArgumentError
from document_operations import InvalidKeyError, extract_key, is_valid_key, validate_key


class User(BaseModel):
    key: Optional[str] = Field(None, alias="_key")
    name: str = ""


class Loose(BaseModel):
    model_config = ConfigDict(extra="allow")


@dataclass
class Edge:
    key: str = field(metadata={"alias": "_key"})
    weight: float = 1.0


class Order:
    def __init__(self, number: str):
        self.number = number

    def document_key(self) -> str:
        return self.number


@pytest.mark.parametrize("key", ["alice", "a", "A-b_c:d.e@f(g)+h,i=j;k$l!m*n'o%p", "x" * 254, "123"])
def test_valid_keys(key):
    validate_key(key)
    assert is_valid_key(key)


@pytest.mark.parametrize(
    "key", ["", "users/alice", "with space", "ümlaut", "x" * 255, "a#b", "a?b", "alice\n", "\nalice"]
)
def test_invalid_keys(key):
    with pytest.raises(InvalidKeyError) as exc_info:
        validate_key(key)
    assert exc_info.value.key == key
    assert not is_valid_key(key)


def test_non_string_key_is_rejected():
    with pytest.raises(InvalidKeyError):
        validate_key(42)


def test_invalid_key_error_is_invalid_argument():
    with pytest.raises(InvalidArgumentError):
        validate_key("a/b")


def test_extract_key_from_mapping():
    assert extract_key({"_key": "alice", "age": 31}) == "alice"


def test_extract_key_from_mapping_without_key():
    with pytest.raises(InvalidArgumentError):
        extract_key({"age": 31})


def test_extract_key_from_pydantic_alias():
    assert extract_key(User(_key="bob")) == "bob"


def test_extract_key_from_pydantic_extra():
    assert extract_key(Loose.model_validate({"_key": "carol"})) == "carol"


def test_extract_key_from_pydantic_without_value():
    with pytest.raises(InvalidArgumentError):
        extract_key(User(name="nobody"))


def test_extract_key_from_dataclass_metadata():
    assert extract_key(Edge(key="e1")) == "e1"


def test_extract_key_from_protocol():
    assert extract_key(Order("o-17")) == "o-17"


def test_extract_key_from_none():
    with pytest.raises(InvalidArgumentError, match="nil"):
        extract_key(None)


@pytest.mark.parametrize("document", ["alice", 17, ["_key", "alice"]])
def test_extract_key_from_unsupported_shape(document):
    with pytest.raises(InvalidArgumentError) as exc_info:
        extract_key(document)
    assert type(document).__name__ in str(exc_info.value)


def test_extracted_key_must_be_string():
    with pytest.raises(InvalidArgumentError):
        extract_key({"_key": 5})


@pytest.mark.asyncio
async def test_key_with_trailing_newline_sends_no_request(collection_manager, stub_connection):
    with pytest.raises(InvalidKeyError):
        await collection_manager.read_document("alice\n")
    assert stub_connection.request_count == 0
