"""
Document Key Validator

Checks document keys against the server's key naming rules before they are
placed in a request path, and extracts the key from a document value when a
batch update or replace is called without explicit keys.

Typical usage from external projects:

    from document_operations import validate_key, extract_key

    validate_key("alice")               # ok
    validate_key("users/alice")         # raises InvalidKeyError

    extract_key({"_key": "alice", "age": 31})   # "alice"
"""

import dataclasses
import logging
import re
from typing import Any, Mapping, Protocol, runtime_checkable

from pydantic import BaseModel

from arango_ops_exceptions import InvalidArgumentError
from document_operations.document_ops_exceptions import InvalidKeyError

logger = logging.getLogger(__name__)

KEY_FIELD = "_key"

# Maximum key length accepted by the server
MAX_KEY_LENGTH = 254

_VALID_KEY_PATTERN = re.compile(r"[A-Za-z0-9_\-:.@()+,=;$!*'%]+")


@runtime_checkable
class HasDocumentKey(Protocol):
    """
    Capability for document types that know their own key.

    Implement this on custom document classes to make them usable in batch
    updates and replaces without explicit keys:

        class Order:
            def document_key(self) -> str:
                return self.order_number
    """

    def document_key(self) -> str:
        ...


def is_valid_key(key: Any) -> bool:
    return (
        isinstance(key, str)
        and 0 < len(key) <= MAX_KEY_LENGTH
        and _VALID_KEY_PATTERN.fullmatch(key) is not None
    )


def validate_key(key: Any) -> None:
    """
    Validate a document key.

    Keys must be non-empty strings of at most 254 characters built from
    letters, digits and the punctuation _ - : . @ ( ) + , = ; $ ! * ' %.

    Raises:
        InvalidKeyError: If the key breaks any of these rules
    """
    if not isinstance(key, str):
        raise InvalidKeyError(f"Key must be a string, got {type(key).__name__}", key=key)
    if not key:
        raise InvalidKeyError("Key must not be empty", key=key)
    if len(key) > MAX_KEY_LENGTH:
        raise InvalidKeyError(
            f"Key is {len(key)} characters long, maximum is {MAX_KEY_LENGTH}", key=key
        )
    if not _VALID_KEY_PATTERN.fullmatch(key):
        raise InvalidKeyError(f"Invalid key '{key}'", key=key)


def extract_key(document: Any) -> str:
    """
    Find the key of a document value.

    Resolution order:
    1. objects implementing HasDocumentKey
    2. mappings, through their "_key" entry
    3. pydantic models, through the field aliased "_key" (or a "_key" extra)
    4. dataclasses, through the field declaring metadata {"alias": "_key"}

    Raises:
        InvalidArgumentError: If the document is None, has no key, or has an
                              unsupported shape
    """
    if document is None:
        raise InvalidArgumentError("Document is nil")

    if isinstance(document, HasDocumentKey):
        return _as_key_string(document.document_key(), document)

    if isinstance(document, Mapping):
        key = document.get(KEY_FIELD)
        if key is None:
            raise InvalidArgumentError(f"Document contains no '{KEY_FIELD}' entry")
        return _as_key_string(key, document)

    if isinstance(document, BaseModel):
        for name, field in type(document).model_fields.items():
            if KEY_FIELD in (field.alias, field.serialization_alias, name):
                return _as_key_string(getattr(document, name), document)
        extra = document.model_extra or {}
        if extra.get(KEY_FIELD) is not None:
            return _as_key_string(extra[KEY_FIELD], document)
        raise InvalidArgumentError(f"Document contains no '{KEY_FIELD}' field")

    if dataclasses.is_dataclass(document) and not isinstance(document, type):
        for field in dataclasses.fields(document):
            if field.metadata.get("alias") == KEY_FIELD:
                return _as_key_string(getattr(document, field.name), document)
        raise InvalidArgumentError(f"Document contains no '{KEY_FIELD}' field")

    raise InvalidArgumentError(
        f"Document must be a mapping, pydantic model, dataclass or implement "
        f"document_key(). Got {type(document).__name__}"
    )


def _as_key_string(key: Any, document: Any) -> str:
    if not isinstance(key, str):
        raise InvalidArgumentError(
            f"Key of {type(document).__name__} must be a string, got {type(key).__name__}"
        )
    return key
