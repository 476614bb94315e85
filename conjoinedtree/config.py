"""Configuration system for ConjoinedTree.

This module defines where searches and filters look in the tree and how
the tree executes them, including whether the two axes are walked in
parallel and what happens when accumulation caches are invalidated.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Callable, Any, List


class Location(Enum):
    """Which node variants a search or filter visits.

    Searching leaves only walks the first axis, since every leaf is
    reachable from it and walking both axes would report each leaf twice.
    """
    ALL = "all"          # Branch and leaf nodes
    BRANCH = "branch"    # Branch nodes only
    LEAF = "leaf"        # Leaf nodes only


class Axis(Enum):
    """The two independent hierarchies of a tree."""
    FIRST = 1
    SECOND = 2

    @property
    def opposite(self) -> 'Axis':
        return Axis.SECOND if self is Axis.FIRST else Axis.FIRST


@dataclass
class PerformanceConfig:
    """Configuration for how the two axes are walked."""

    parallel: bool = True                 # One worker per root for ALL/BRANCH
    num_workers: Optional[int] = 2        # Worker threads when parallel

    def effective_workers(self) -> int:
        """Number of workers to start for a dual-root walk.

        Returns:
            1 when parallelism is disabled, otherwise the configured count
            capped at 2 since there is never more than one task per root.
        """
        if not self.parallel:
            return 1
        if self.num_workers is None:
            return 2
        return max(1, min(self.num_workers, 2))


@dataclass
class TreeConfig:
    """Complete configuration for a ConjoinedTwinTree.

    The tree validates this at construction and refuses to start with an
    inconsistent configuration.
    """

    performance: PerformanceConfig = field(default_factory=PerformanceConfig)

    # Called with the top-level branch whenever its subtree is invalidated
    on_invalidate: Optional[Callable[[Any], None]] = None

    @classmethod
    def sequential(cls) -> 'TreeConfig':
        """Create config that walks both axes on the calling thread.

        Returns:
            TreeConfig with parallel traversal disabled
        """
        return cls(performance=PerformanceConfig(parallel=False, num_workers=1))

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if self.performance.num_workers is not None and self.performance.num_workers <= 0:
            errors.append("num_workers must be positive")

        if self.performance.parallel and self.performance.num_workers == 1:
            errors.append("parallel traversal requires num_workers greater than 1")

        if self.on_invalidate is not None and not callable(self.on_invalidate):
            errors.append("on_invalidate must be callable")

        return errors
