"""
Data Models

Pydantic models for document metadata, batch results and response sinks.
"""

from .entities import (
    BatchItemResult,
    BatchOperationResult,
    DocumentMeta,
    OperationStatus,
    OverwriteMode
)
from .sinks import DictSink, ListItemSink, PayloadSink, as_sink

__all__ = [
    'BatchItemResult',
    'BatchOperationResult',
    'DocumentMeta',
    'OperationStatus',
    'OverwriteMode',
    'DictSink',
    'ListItemSink',
    'PayloadSink',
    'as_sink'
]
