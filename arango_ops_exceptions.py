"""
Arango Operations Exceptions

This module defines custom exceptions for the arango_ops package
to provide clear error handling and reporting.
"""

from typing import Any, Optional


class ArangoOpsError(Exception):
    """Base exception for all arango_ops errors"""
    pass


class ConnectionError(ArangoOpsError):
    """Raised when the database server cannot be reached"""
    pass


class OperationTimeoutError(ArangoOpsError):
    """Raised when an operation times out"""
    pass


class ConfigurationError(ArangoOpsError):
    """Raised when configuration is invalid or missing"""
    pass


class InvalidArgumentError(ArangoOpsError):
    """Raised when caller input is malformed (nil document, wrong shape, count mismatch)"""
    pass


class DecodeError(ArangoOpsError):
    """
    Raised when a response body does not match the expected envelope shape.

    Attributes:
        meta: Document metadata decoded before the failure, if any
    """

    def __init__(self, message: str, meta: Optional[Any] = None):
        super().__init__(message)
        self.meta = meta


class ResponseError(ArangoOpsError):
    """
    Raised when the server answers with a status outside the accepted set.

    Attributes:
        status_code: HTTP status code of the response
        error_num: Server specific error number, if the body carried one
    """

    def __init__(self, message: str, status_code: int, error_num: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
        self.error_num = error_num


class NotFoundError(ResponseError):
    """Raised when the addressed document, collection or index does not exist (404)"""
    pass


class ConflictError(ResponseError):
    """Raised when a write violates a unique constraint or duplicates a key (409)"""
    pass


class PreconditionFailedError(ResponseError):
    """Raised when a revision precondition does not hold (412)"""
    pass
