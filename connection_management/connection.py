"""
Transport Primitives

Defines the request/response pair exchanged with the database server and the
abstract Connection every operation manager talks to. Managers never touch
HTTP details directly: they build a Request, hand it to Connection.do() and
inspect the returned Response through check_status() and parse_body().

Typical usage:

    request = connection.new_request("GET", "_db/_system/_api/document/users/alice")
    response = await connection.do(request)
    response.check_status(200)
    sink = PayloadSink()
    response.parse_body("", sink)
"""

import dataclasses
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional, Tuple

from pydantic import BaseModel

from arango_ops_exceptions import (
    ConflictError,
    DecodeError,
    InvalidArgumentError,
    NotFoundError,
    PreconditionFailedError,
    ResponseError,
)

logger = logging.getLogger(__name__)

# Status codes with a dedicated exception type
_STATUS_ERRORS = {
    404: NotFoundError,
    409: ConflictError,
    412: PreconditionFailedError,
}


def to_jsonable(value: Any) -> Any:
    """
    Convert a document value into plain JSON-compatible data.

    Pydantic models are dumped by alias so fields declared as ``Field(alias="_key")``
    reach the server under their wire name. Dataclass fields may declare the same
    through ``field(metadata={"alias": "_key"})``.

    Raises:
        InvalidArgumentError: If the value has no JSON object/array representation
    """
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            f.metadata.get("alias", f.name): getattr(value, f.name)
            for f in dataclasses.fields(value)
        }
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    raise InvalidArgumentError(
        f"Cannot use value of type {type(value).__name__} as a request body"
    )


class Request:
    """
    A pending request: method, relative path, query parameters, headers and body.
    """

    def __init__(self, method: str, path: str):
        self.method = method
        self.path = path
        self.query: Dict[str, str] = {}
        self.headers: Dict[str, str] = {}
        self.body: Optional[bytes] = None

    def set_query(self, name: str, value: str) -> "Request":
        self.query[name] = value
        return self

    def set_header(self, name: str, value: str) -> "Request":
        self.headers[name] = value
        return self

    def set_body(self, value: Any) -> "Request":
        """
        Serialize value as the JSON request body.

        Raises:
            InvalidArgumentError: If value cannot be serialized
        """
        try:
            self.body = json.dumps(to_jsonable(value)).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise InvalidArgumentError(f"Cannot serialize request body: {e}") from e
        self.headers.setdefault("Content-Type", "application/json")
        return self

    def __repr__(self) -> str:
        return f"Request({self.method} {self.path} query={self.query})"


class Response:
    """
    A received response with lazy JSON decoding of its body.
    """

    def __init__(self, status_code: int, content: bytes = b"", headers: Optional[Mapping[str, str]] = None):
        self.status_code = status_code
        self.content = content
        self.headers = dict(headers or {})
        self._decoded: Optional[Tuple[Any]] = None

    def json(self) -> Any:
        """
        Decode the body as JSON.

        Raises:
            DecodeError: If the body is empty or not valid JSON
        """
        if self._decoded is None:
            if not self.content:
                raise DecodeError(f"Response with status {self.status_code} has an empty body")
            try:
                self._decoded = (json.loads(self.content),)
            except ValueError as e:
                raise DecodeError(f"Response body is not valid JSON: {e}") from e
        return self._decoded[0]

    def check_status(self, *accepted: int) -> None:
        """
        Verify the status code is one of the accepted codes.

        Raises:
            NotFoundError: For 404
            ConflictError: For 409
            PreconditionFailedError: For 412
            ResponseError: For any other status outside the accepted set
        """
        if self.status_code in accepted:
            return

        message = f"Unexpected status {self.status_code}, expected one of {list(accepted)}"
        error_num = None
        try:
            body = self.json()
        except DecodeError:
            body = None
        if isinstance(body, dict):
            error_num = body.get("errorNum")
            message = body.get("errorMessage") or message

        error_class = _STATUS_ERRORS.get(self.status_code, ResponseError)
        raise error_class(message, status_code=self.status_code, error_num=error_num)

    def parse_body(self, field: str, sink: Any) -> None:
        """
        Decode one envelope of the body into sink.

        Args:
            field: Name of the envelope ("edge", "vertex", "old", "new"), or ""
                   for the whole body
            sink: Object with a receive(payload) method

        Raises:
            DecodeError: If the body is not JSON, the envelope is missing or the
                         sink rejects the payload
        """
        body = self.json()
        if field:
            if not isinstance(body, dict) or field not in body:
                raise DecodeError(f"Response body has no '{field}' envelope")
            payload = body[field]
        else:
            payload = body
        sink.receive(payload)

    def __repr__(self) -> str:
        return f"Response(status={self.status_code}, {len(self.content)} bytes)"


class Connection(ABC):
    """
    Abstract transport to the database server.

    Implementations own whatever network resources they need and release
    them in aclose().
    """

    def new_request(self, method: str, path: str) -> Request:
        """Create a request for a path relative to the server endpoint."""
        return Request(method, path.lstrip("/"))

    @abstractmethod
    async def do(self, request: Request) -> Response:
        """Send the request and return the server's response."""

    async def aclose(self) -> None:
        """Release transport resources."""
        return None
