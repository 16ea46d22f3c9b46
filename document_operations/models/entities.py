"""
Document Entities

Pydantic models for document metadata and batch operation results.

Typical usage from external projects:

    from document_operations import DocumentMeta, BatchOperationResult

    meta = await manager.create_document({"name": "alice"})
    print(meta.key, meta.rev)

    result = await manager.create_documents(docs)
    for meta, error in zip(result.metas, result.errors):
        ...
    print(f"Success rate: {result.success_rate:.2f}%")
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from document_operations.document_ops_exceptions import BatchPartialFailureError


class OperationStatus(str, Enum):
    """
    Overall status of a batch operation.
    """
    SUCCESS = "success"
    FAILED = "failed"
    PARTIAL = "partial"  # Some items succeeded and some failed


class OverwriteMode(str, Enum):
    """
    What the server does when a created document's key already exists.
    """
    IGNORE = "ignore"
    REPLACE = "replace"
    UPDATE = "update"
    CONFLICT = "conflict"


class DocumentMeta(BaseModel):
    """
    Identity of a stored document as returned by a successful operation.

    The zero value (all fields empty) stands for "no metadata", which is what
    silent operations and failed batch items report.
    """
    id: str = Field("", alias="_id", description="Collection-qualified document id")
    key: str = Field("", alias="_key", description="Document key within its collection")
    rev: str = Field("", alias="_rev", description="Revision of the document after the operation")
    old_rev: Optional[str] = Field(None, alias="_oldRev", description="Revision before an update, replace or remove")

    class Config:
        populate_by_name = True
        frozen = True
        extra = "ignore"

    @property
    def is_empty(self) -> bool:
        return not (self.id or self.key or self.rev)


class BatchItemResult(BaseModel):
    """
    Outcome of one item of a batch: either meta (success) or error (failure).
    """
    index: int
    meta: Optional[DocumentMeta] = None
    error: Optional[Exception] = None

    class Config:
        arbitrary_types_allowed = True
        frozen = True

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, index: int, meta: DocumentMeta) -> "BatchItemResult":
        return cls(index=index, meta=meta)

    @classmethod
    def failure(cls, index: int, error: Exception) -> "BatchItemResult":
        return cls(index=index, error=error)


class BatchOperationResult(BaseModel):
    """
    Per-item results of a batch operation, in input order.

    metas and errors are parallel views with one entry per input item:
    metas[i] is DocumentMeta() wherever errors[i] is set, and errors[i] is
    None wherever metas[i] holds real metadata.
    """
    operation: str
    items: List[BatchItemResult] = Field(default_factory=list)

    @property
    def metas(self) -> List[DocumentMeta]:
        return [item.meta if item.ok else DocumentMeta() for item in self.items]

    @property
    def errors(self) -> List[Optional[Exception]]:
        return [item.error for item in self.items]

    @property
    def successful_count(self) -> int:
        return sum(1 for item in self.items if item.ok)

    @property
    def failed_count(self) -> int:
        return len(self.items) - self.successful_count

    @property
    def total_count(self) -> int:
        return len(self.items)

    @property
    def success_rate(self) -> float:
        """Success rate as a percentage."""
        if self.total_count == 0:
            return 0.0
        return (self.successful_count / self.total_count) * 100

    @property
    def status(self) -> OperationStatus:
        if self.failed_count == 0:
            return OperationStatus.SUCCESS
        if self.successful_count == 0:
            return OperationStatus.FAILED
        return OperationStatus.PARTIAL

    def raise_for_failures(self) -> None:
        """
        Raises:
            BatchPartialFailureError: If any item failed
        """
        failed = [item for item in self.items if not item.ok]
        if not failed:
            return
        raise BatchPartialFailureError(
            f"{self.operation}: {len(failed)} of {self.total_count} items failed",
            successful_count=self.successful_count,
            failed_count=len(failed),
            failed_indices=[item.index for item in failed],
            error_details={item.index: item.error for item in failed}
        )
