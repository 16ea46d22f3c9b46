"""
Utility modules for document operations.
"""

from .timing import OperationStats, OperationTiming, PerformanceTimer

__all__ = ['OperationStats', 'OperationTiming', 'PerformanceTimer']
