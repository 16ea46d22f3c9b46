"""
Core Document Operation Components

Contains the document manager, the key validator and the call option handling.
"""

from .manager import DocumentManager
from .validator import HasDocumentKey, extract_key, is_valid_key, validate_key

__all__ = ['DocumentManager', 'HasDocumentKey', 'extract_key', 'is_valid_key', 'validate_key']
