"""
Index Models
"""

from .entities import IndexDescriptor, IndexType

__all__ = ['IndexDescriptor', 'IndexType']
