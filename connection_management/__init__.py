"""
Connection Management Module

Transport layer for the database REST API.

Key capabilities:
- Request/Response primitives with JSON body encoding and envelope decoding
- Status classification into NotFoundError, ConflictError, PreconditionFailedError
  and the generic ResponseError
- An abstract Connection that operation managers depend on, so tests and
  alternative transports can be injected
- HTTPConnection: pooled httpx.AsyncClient with tenacity retries for
  transport-level failures
"""

from .connection import Connection, Request, Response, to_jsonable
from .http_connection import HTTPConnection
from .connection_exceptions import (
    ConnectionError,
    ConnectionClosedError,
    MaxRetriesExceededError
)

__all__ = [
    'Connection',
    'Request',
    'Response',
    'to_jsonable',
    'HTTPConnection',
    'ConnectionError',
    'ConnectionClosedError',
    'MaxRetriesExceededError',
]
