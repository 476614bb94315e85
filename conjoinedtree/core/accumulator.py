"""Branch accumulation for ConjoinedTree.

An accumulator turns the visible leaves where a branch meets an
opposite-axis branch into one value, such as a subtotal in a pivot table.
Each branch caches these values per opposite branch in an
AccumulationCache, which is cleared lazily after invalidation.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple, TYPE_CHECKING

from ..config import Location
from .traverser import BreadthFirstTraverser

if TYPE_CHECKING:
    from .node import BranchNode, LeafNode


class AccumulationCache:
    """Per-branch store of accumulated values keyed by opposite branch.

    Values are valid only while the cache is not dirty, and only for the
    accumulator they were computed with (``accumulator``). The top-level
    branch of a subtree also tracks whether any cache below it holds
    values (``subtree_populated``), so leaf inserts know when they must
    invalidate.
    """

    def __init__(self):
        self._values: Dict['BranchNode', Any] = {}
        self._dirty = False
        self.accumulator: Optional[Callable[..., Any]] = None
        self.subtree_populated = False

    @property
    def is_dirty(self) -> bool:
        return self._dirty

    def invalidate(self) -> None:
        """Mark cached values stale; they are dropped on the next read."""
        self._dirty = True

    def clear(self) -> None:
        self._values.clear()
        self.accumulator = None

    def holds(self, accumulator: Callable[..., Any]) -> bool:
        """Check whether the values are fresh results of ``accumulator``."""
        return not self._dirty and self.accumulator is not None and self.accumulator == accumulator

    def fill(self, items: Iterable[Tuple['BranchNode', Any]],
             accumulator: Optional[Callable[..., Any]] = None) -> None:
        """Store freshly computed values and clear the dirty flag."""
        self._values.update(items)
        self.accumulator = accumulator
        self._dirty = False

    def get(self, branch: 'BranchNode') -> Optional[Any]:
        return self._values.get(branch)

    def __len__(self) -> int:
        return len(self._values)


def group_visible_leaves(branch: 'BranchNode') -> Dict['BranchNode', List['LeafNode']]:
    """Group a branch's visible descendant leaves by opposite-axis parent.

    Hidden nodes and everything below them are skipped.

    Args:
        branch: Branch whose subtree is walked

    Returns:
        Ordered mapping opposite branch -> leaves, in breadth-first order
    """
    opposite = branch.axis.opposite
    groups: Dict['BranchNode', List['LeafNode']] = {}
    for node, _ in BreadthFirstTraverser(Location.ALL).traverse(branch):
        if node.is_leaf():
            groups.setdefault(node.parent_on(opposite), []).append(node)
    return groups


class BranchAccumulator(ABC):
    """Base class for accumulators passed to ``get_accumulated_values``.

    Two accumulators of the same class and configuration compare equal,
    so a fresh ``SumAccumulator()`` reuses values cached by another one.
    """

    @abstractmethod
    def __call__(self, leaves: Sequence['LeafNode'], branch: 'BranchNode') -> Any:
        """Reduce the leaves where a branch meets ``branch`` to one value.

        Args:
            leaves: Visible leaves of the group, in breadth-first order
            branch: Opposite-axis branch the group sits under

        Returns:
            Accumulated value
        """
        pass

    def _identity(self) -> Tuple[Any, ...]:
        return ()

    def __eq__(self, other: object) -> bool:
        if type(self) is not type(other):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash((type(self), self._identity()))


class ValueAccumulator(BranchAccumulator):
    """Accumulator that reduces leaf values; None values are dropped first."""

    def __call__(self, leaves: Sequence['LeafNode'], branch: 'BranchNode') -> Any:
        values = [leaf.value for leaf in leaves if leaf.value is not None]
        return self.aggregate(values)

    @abstractmethod
    def aggregate(self, values: List[Any]) -> Any:
        """Aggregate multiple values into one.

        Args:
            values: Leaf values (never None)

        Returns:
            Aggregated value
        """
        pass


class SumAccumulator(ValueAccumulator):
    """Sums leaf values; an empty group sums to 0."""

    def aggregate(self, values: List[Any]) -> Any:
        return sum(values)


class MaxAccumulator(ValueAccumulator):
    """Largest leaf value."""

    def aggregate(self, values: List[Any]) -> Any:
        return max(values) if values else None


class MinAccumulator(ValueAccumulator):
    """Smallest leaf value."""

    def aggregate(self, values: List[Any]) -> Any:
        return min(values) if values else None


class AverageAccumulator(ValueAccumulator):
    """Arithmetic mean of leaf values."""

    def aggregate(self, values: List[Any]) -> Any:
        return sum(values) / len(values) if values else None


class CountAccumulator(BranchAccumulator):
    """Number of visible leaves, including those holding None."""

    def __call__(self, leaves: Sequence['LeafNode'], branch: 'BranchNode') -> Any:
        return len(leaves)


class CustomAccumulator(BranchAccumulator):
    """Accumulator that uses a user-provided function.

    Allows custom aggregation without subclassing. Two instances wrapping
    the same function compare equal.
    """

    def __init__(self, accumulate_func: Callable[[Sequence['LeafNode'], 'BranchNode'], Any]):
        """Initialize with custom accumulation function.

        Args:
            accumulate_func: Function(leaves, opposite_branch) -> Any
        """
        self.accumulate_func = accumulate_func

    def __call__(self, leaves: Sequence['LeafNode'], branch: 'BranchNode') -> Any:
        return self.accumulate_func(leaves, branch)

    def _identity(self) -> Tuple[Any, ...]:
        return (self.accumulate_func,)
