"""
Document Operations Configuration

Per-manager knobs for document operations. Call-level behavior (silent,
return old/new, wait for sync, overwrite mode) is passed explicitly with each
call as options; this configuration only holds what stays constant for a
manager's lifetime.
"""

from dataclasses import dataclass
from typing import Dict, Any, Optional
import logging

from arango_ops_exceptions import InvalidArgumentError

logger = logging.getLogger(__name__)


@dataclass
class DocumentOperationConfig:
    """
    Configuration for a DocumentManager.

    Attributes:
        default_wait_for_sync: Wait-for-sync value used when a call passes no
                               with_wait_for_sync option. None leaves durability
                               to the collection's own setting.
        enable_timing: Whether batch operations are timed and recorded.
        max_batch_size: Largest accepted batch. 0 means unlimited.

    Example:
        ```python
        config = DocumentOperationConfig(default_wait_for_sync=True)
        manager = DocumentManager.for_collection(connection, "_system", "users", config=config)
        ```
    """

    default_wait_for_sync: Optional[bool] = None
    enable_timing: bool = True
    max_batch_size: int = 0

    def __post_init__(self):
        """Validate configuration parameters after initialization."""
        if self.max_batch_size < 0:
            raise ValueError("max_batch_size must be non-negative")

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'DocumentOperationConfig':
        """
        Create configuration from a dictionary, ignoring unknown keys.
        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered_dict = {k: v for k, v in config_dict.items() if k in valid_fields}
        ignored = set(config_dict) - valid_fields
        if ignored:
            logger.debug(f"Ignoring unknown document config keys: {sorted(ignored)}")

        return cls(**filtered_dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'default_wait_for_sync': self.default_wait_for_sync,
            'enable_timing': self.enable_timing,
            'max_batch_size': self.max_batch_size
        }

    def check_batch_size(self, item_count: int) -> None:
        """
        Raises:
            InvalidArgumentError: If item_count exceeds max_batch_size
        """
        if self.max_batch_size and item_count > self.max_batch_size:
            raise InvalidArgumentError(
                f"Batch of {item_count} items exceeds maximum ({self.max_batch_size})"
            )
