"""Configuration system for DazzleUtils.

This module defines how users specify the behaviour of the deep tree mapper,
the task queue and the recursive directory reader. Each configuration is a
plain dataclass with a ``validate()`` method returning a list of problems.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Callable, Any, List


class TraversalOrder(Enum):
    """When the iteratee runs relative to a node's children."""
    PRE_ORDER = "pre"      # Parent before children
    POST_ORDER = "post"    # Children before parent


@dataclass
class MapDeepConfig:
    """Configuration for :func:`dazzleutils.tree.map_deep`."""

    order: TraversalOrder = TraversalOrder.PRE_ORDER
    iterate_collections: bool = True   # Call iteratee for dicts and lists
    iterate_scalars: bool = True       # Call iteratee for everything else

    @property
    def post_order(self) -> bool:
        return self.order is TraversalOrder.POST_ORDER

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []
        if not isinstance(self.order, TraversalOrder):
            errors.append(f"order must be a TraversalOrder, got {self.order!r}")
        return errors


@dataclass
class TaskQueueConfig:
    """Configuration for :class:`dazzleutils.aio.TaskQueue`.

    Both throttling policies are optional and may be combined. When both
    are set, the interval gate is consulted before the concurrency gate.
    """

    limit: Optional[int] = None         # Max jobs running at the same time
    interval: Optional[float] = None    # Min seconds between two job starts
    debug: bool = False                 # Emit queue lifecycle log records

    # Convenience constructors for common configurations

    @classmethod
    def throttled(cls, limit: int) -> 'TaskQueueConfig':
        """Create config that only bounds concurrency.

        Args:
            limit: Maximum number of jobs running simultaneously

        Returns:
            TaskQueueConfig with a concurrency limit
        """
        return cls(limit=limit)

    @classmethod
    def rate_limited(cls, interval: float, limit: Optional[int] = None) -> 'TaskQueueConfig':
        """Create config that spaces job starts apart.

        Args:
            interval: Minimum seconds between successive job starts
            limit: Optional concurrency limit applied on top

        Returns:
            TaskQueueConfig with a minimum start interval
        """
        return cls(limit=limit, interval=interval)

    @property
    def is_unbounded(self) -> bool:
        return not self.limit and not self.interval

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if self.limit is not None:
            if isinstance(self.limit, bool) or not isinstance(self.limit, int):
                errors.append("limit must be an integer")
            elif self.limit <= 0:
                errors.append("limit must be positive")

        if self.interval is not None:
            if isinstance(self.interval, bool) or not isinstance(self.interval, (int, float)):
                errors.append("interval must be a number of seconds")
            elif self.interval < 0:
                errors.append("interval cannot be negative")

        return errors


@dataclass
class ReadDirConfig:
    """Configuration for :func:`dazzleutils.aio.read_dir_recursively`."""

    # Called with (file_path, stat_result); return False to drop the entry.
    # A dropped directory is not descended into.
    filter: Optional[Callable[[str, Any], bool]] = None

    absolute_file_paths: bool = False   # Report absolute paths instead of root-relative
    include_dirs: bool = False          # Report directories alongside files
    include_stats: bool = False         # Report DirEntryResult(file_path, stats)

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []
        if self.filter is not None and not callable(self.filter):
            errors.append("filter must be callable")
        return errors


def ensure_valid(config: Any) -> Any:
    """Raise ValueError if ``config.validate()`` reports any problem.

    Args:
        config: Any configuration dataclass from this module

    Returns:
        The same config, for chaining
    """
    errors = config.validate()
    if errors:
        raise ValueError(f"Invalid {type(config).__name__}: {'; '.join(errors)}")
    return config
