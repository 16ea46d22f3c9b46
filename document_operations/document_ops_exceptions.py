"""
Document Operations Exceptions

Exception hierarchy for document operations. The error kinds shared with the
transport (NotFoundError, ConflictError, DecodeError, ...) live in
arango_ops_exceptions and are re-exported here so callers can import every
document error from one place.
"""

from typing import Any, Dict, List, Optional

from arango_ops_exceptions import (
    ArangoOpsError,
    ConflictError,
    DecodeError,
    InvalidArgumentError,
    NotFoundError,
    PreconditionFailedError,
    ResponseError,
)


class InvalidKeyError(InvalidArgumentError):
    """
    Raised when a document key does not follow the key naming rules.

    Attributes:
        key: The rejected key
    """

    def __init__(self, message: str, key: Any = None):
        super().__init__(message)
        self.key = key


class DocumentOperationError(ArangoOpsError):
    """
    Base exception for document operation errors that are not tied to a
    single request/response exchange.
    """
    pass


class BatchPartialFailureError(DocumentOperationError):
    """
    Raised by BatchOperationResult.raise_for_failures() when some items failed.

    Attributes:
        message: Human-readable error message
        successful_count: Number of items that succeeded
        failed_count: Number of items that failed
        failed_indices: Indices of the failed items in the input collection
        error_details: Mapping of failed index to the exception recorded for it

    Example:
        ```python
        result = await manager.create_documents(docs)
        try:
            result.raise_for_failures()
        except BatchPartialFailureError as e:
            for index, error in e.error_details.items():
                logger.error(f"Document {index} failed: {error}")
        ```
    """

    def __init__(
        self,
        message: str,
        successful_count: int,
        failed_count: int,
        failed_indices: List[int],
        error_details: Optional[Dict[int, Exception]] = None
    ):
        super().__init__(message)
        self.successful_count = successful_count
        self.failed_count = failed_count
        self.failed_indices = failed_indices
        self.error_details = error_details or {}

    @property
    def total_count(self) -> int:
        """Total number of items in the batch."""
        return self.successful_count + self.failed_count

    @property
    def success_rate(self) -> float:
        """Success rate as a percentage (0-100)."""
        if self.total_count == 0:
            return 0.0
        return (self.successful_count / self.total_count) * 100.0


__all__ = [
    'ArangoOpsError',
    'BatchPartialFailureError',
    'ConflictError',
    'DecodeError',
    'DocumentOperationError',
    'InvalidArgumentError',
    'InvalidKeyError',
    'NotFoundError',
    'PreconditionFailedError',
    'ResponseError',
]
