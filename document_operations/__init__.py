"""
Document Operations Module

Provides document-level CRUD for collections, vertex collections and edge
collections:
- Reading, creating, updating, replacing and removing single documents
- The same operations over ordered batches, with one result per input item
- Key validation and key extraction from documents
- Per-call options (return old/new, silent, wait for sync, overwrite mode, ...)
- Performance timing of batch operations

Typical usage from external projects:

    from document_operations import (
        DocumentManager,
        PayloadSink,
        with_return_new,
        with_overwrite_mode,
        OverwriteMode,
        BatchPartialFailureError
    )

    manager = DocumentManager.for_edge_collection(connection, "_system", "social", "knows")

    new_docs = [PayloadSink(), PayloadSink()]
    result = await manager.create_documents(
        [{"_from": "persons/a", "_to": "persons/b"}, {"_from": "persons/b", "_to": "persons/c"}],
        options=[with_return_new(new_docs)]
    )
    try:
        result.raise_for_failures()
    except BatchPartialFailureError as e:
        print(f"Partial failure: {e.successful_count} succeeded, {e.failed_count} failed")
"""

# Core manager (primary interface)
from .core.manager import DocumentManager

# Configuration
from .document_ops_config import DocumentOperationConfig

# Call options
from .core.context import (
    CallOption,
    ContextSettings,
    apply_context_settings,
    extract_context_settings,
    with_ignore_revisions,
    with_keep_null,
    with_merge_objects,
    with_overwrite_mode,
    with_return_new,
    with_return_old,
    with_revision,
    with_silent,
    with_wait_for_sync
)

# Keys
from .core.validator import HasDocumentKey, extract_key, is_valid_key, validate_key

# Data models
from .models.entities import (
    BatchItemResult,
    BatchOperationResult,
    DocumentMeta,
    OperationStatus,
    OverwriteMode
)
from .models.sinks import DictSink, ListItemSink, PayloadSink, as_sink

# Timing utilities
from .utils.timing import OperationStats, OperationTiming, PerformanceTimer

# Exceptions
from .document_ops_exceptions import (
    ArangoOpsError,
    BatchPartialFailureError,
    ConflictError,
    DecodeError,
    DocumentOperationError,
    InvalidArgumentError,
    InvalidKeyError,
    NotFoundError,
    PreconditionFailedError,
    ResponseError
)

__all__ = [
    # Primary interface
    'DocumentManager',
    'DocumentOperationConfig',
    # Call options
    'CallOption',
    'ContextSettings',
    'apply_context_settings',
    'extract_context_settings',
    'with_ignore_revisions',
    'with_keep_null',
    'with_merge_objects',
    'with_overwrite_mode',
    'with_return_new',
    'with_return_old',
    'with_revision',
    'with_silent',
    'with_wait_for_sync',
    # Keys
    'HasDocumentKey',
    'extract_key',
    'is_valid_key',
    'validate_key',
    # Models
    'BatchItemResult',
    'BatchOperationResult',
    'DocumentMeta',
    'OperationStatus',
    'OverwriteMode',
    'DictSink',
    'ListItemSink',
    'PayloadSink',
    'as_sink',
    # Utilities
    'OperationStats',
    'OperationTiming',
    'PerformanceTimer',
    # Exceptions
    'ArangoOpsError',
    'BatchPartialFailureError',
    'ConflictError',
    'DecodeError',
    'DocumentOperationError',
    'InvalidArgumentError',
    'InvalidKeyError',
    'NotFoundError',
    'PreconditionFailedError',
    'ResponseError'
]
