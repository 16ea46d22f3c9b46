"""
Operation Timing Utilities

Measures document operations and aggregates the measurements per operation
name. History is bounded so long-running clients do not grow without limit.
"""

import logging
import statistics
import time
from collections import deque
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Deque, Dict, List, Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class OperationTiming(BaseModel):
    """
    One measured operation.

    Attributes:
        operation_name: Name of the operation that was timed
        execution_time: Wall time in seconds
        timestamp: When the operation started
        success: Whether the operation completed without raising
        metadata: Caller-provided details (collection, item counts, ...)
    """
    operation_name: str
    execution_time: float = Field(0.0, description="Execution time in seconds")
    timestamp: datetime = Field(default_factory=datetime.now)
    success: bool = True
    metadata: Dict[str, Any] = Field(default_factory=dict)


class OperationStats(BaseModel):
    """
    Aggregated timings for all recorded operations with the same name.
    """
    operation_name: str
    total_operations: int = 0
    failed_operations: int = 0
    average_execution_time: float = 0.0
    median_execution_time: float = 0.0
    max_execution_time: float = 0.0
    p95_execution_time: float = 0.0

    @property
    def success_rate(self) -> float:
        """Success rate as a percentage."""
        if self.total_operations == 0:
            return 0.0
        return (self.total_operations - self.failed_operations) / self.total_operations * 100.0


class PerformanceTimer:
    """
    Records OperationTiming entries through the time_operation() context manager.

    Args:
        enabled: When False, time_operation() still yields a timing object but
                 nothing is recorded
        max_history: Number of most recent timings kept
    """

    def __init__(self, enabled: bool = True, max_history: int = 1000):
        self._enabled = enabled
        self._history: Deque[OperationTiming] = deque(maxlen=max_history)

    @asynccontextmanager
    async def time_operation(self, operation_name: str, metadata: Optional[Dict[str, Any]] = None):
        """
        Time the body of an async with block.

        The yielded OperationTiming may be enriched with metadata inside the
        block; it is recorded when the block exits, also on failure.
        """
        timing = OperationTiming(operation_name=operation_name, metadata=metadata or {})
        start = time.perf_counter()
        try:
            yield timing
        except BaseException:
            timing.success = False
            raise
        finally:
            timing.execution_time = time.perf_counter() - start
            if self._enabled:
                self._history.append(timing)
                logger.debug(
                    f"Operation '{operation_name}' {'succeeded' if timing.success else 'failed'} "
                    f"in {timing.execution_time * 1000:.2f}ms"
                )

    def get_timing_history(self) -> List[OperationTiming]:
        return list(self._history)

    def get_operation_stats(self, operation_name: str) -> Optional[OperationStats]:
        """
        Returns:
            OperationStats for operation_name, or None if nothing was recorded
        """
        timings = [t for t in self._history if t.operation_name == operation_name]
        if not timings:
            return None

        times = sorted(t.execution_time for t in timings)
        p95 = statistics.quantiles(times, n=20)[18] if len(times) > 1 else times[0]
        return OperationStats(
            operation_name=operation_name,
            total_operations=len(timings),
            failed_operations=sum(1 for t in timings if not t.success),
            average_execution_time=statistics.mean(times),
            median_execution_time=statistics.median(times),
            max_execution_time=times[-1],
            p95_execution_time=p95
        )

    def get_summary(self) -> Dict[str, OperationStats]:
        names = {t.operation_name for t in self._history}
        return {name: self.get_operation_stats(name) for name in sorted(names)}

    def clear_history(self) -> None:
        self._history.clear()
