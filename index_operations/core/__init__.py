"""
Core Index Components
"""

from .manager import Index

__all__ = ['Index']
