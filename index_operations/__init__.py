"""
Index Operations Module

Read-only access to index descriptors returned by the server, and removal of
indexes.

Typical usage from external projects:

    from index_operations import Index, IndexType

    index = Index.from_descriptor(
        {"id": "users/1234", "type": "hash", "fields": ["email"], "unique": True},
        connection,
        "_system"
    )
    if index.type == IndexType.HASH and index.is_unique:
        await index.remove()
"""

from .core.manager import Index
from .models.entities import IndexDescriptor, IndexType

__all__ = ['Index', 'IndexDescriptor', 'IndexType']
