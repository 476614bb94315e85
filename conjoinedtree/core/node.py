"""Node model for ConjoinedTree.

A tree is made of two roots, one per axis. Each root owns a hierarchy of
branches, and the bottom branches of both hierarchies share the same leaf
nodes: a leaf sits in exactly one children list on each axis. The node
classes here form a closed set of variants (root, branch, leaf) and carry
the mutation operations, so structural invariants are enforced at the
point where the structure changes.
"""

import functools
import logging
import weakref
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, List, Optional, Tuple, Sequence

from ..config import Axis
from ..errors import (
    IndexOutOfRangeError,
    StructuralViolationError,
    UnsupportedOperationError,
)
from . import invalidation
from .accumulator import AccumulationCache, group_visible_leaves

logger = logging.getLogger(__name__)

Comparator = Callable[['TreeNode', 'TreeNode'], int]


class NodeKind(Enum):
    """The variant of a node."""
    ROOT = "root"
    BRANCH = "branch"
    LEAF = "leaf"


class TreeNode(ABC):
    """Abstract base class for every node in a conjoined twin tree.

    Nodes compare and hash by identity: two leaves holding the same value
    are still two different cells, and paths of nodes can be used as
    dictionary keys.

    Mutation and sort operations exist on every node so callers can treat
    nodes uniformly, but only containers (roots and branches) implement
    them. Leaves raise UnsupportedOperationError.
    """

    def __init__(self, value: Any = None, visible: bool = False):
        self._value = value
        self._visible = visible
        self._children: List['TreeNode'] = []

    @property
    @abstractmethod
    def kind(self) -> NodeKind:
        """Return the variant of this node."""
        pass

    @property
    @abstractmethod
    def axis(self) -> Optional[Axis]:
        """Return the axis this node belongs to (None for leaves)."""
        pass

    @property
    def value(self) -> Any:
        return self._value

    @property
    def branch_value(self) -> Any:
        """Value of this node if it is a branch, otherwise None."""
        return self._value if self.kind is NodeKind.BRANCH else None

    @property
    def leaf_value(self) -> Any:
        """Value of this node if it is a leaf, otherwise None."""
        return self._value if self.kind is NodeKind.LEAF else None

    @property
    def children(self) -> Tuple['TreeNode', ...]:
        """Snapshot of the ordered children of this node."""
        return tuple(self._children)

    def is_leaf(self) -> bool:
        return self.kind is NodeKind.LEAF

    def is_branch(self) -> bool:
        return self.kind is NodeKind.BRANCH

    def is_root(self) -> bool:
        return self.kind is NodeKind.ROOT

    def is_visible(self) -> bool:
        return self._visible

    def set_visible(self, visible: bool) -> None:
        """Show or hide this node.

        Subclasses publish invalidation events when the change can affect
        accumulated values.
        """
        self._visible = bool(visible)

    def has_leaf_children(self) -> bool:
        """Check whether the children of this node are leaves."""
        return bool(self._children) and self._children[0].is_leaf()

    def has_branch_children(self) -> bool:
        """Check whether the children of this node are branches."""
        return bool(self._children) and self._children[0].is_branch()

    # Mutation interface, implemented by ContainerNode

    def add_branch(self, value: Any, index: Optional[int] = None) -> 'BranchNode':
        raise UnsupportedOperationError(
            f"add_branch is not supported on {self.kind.value} nodes")

    def add_leaf(self, value: Any, other_parent: 'TreeNode',
                 index: Optional[int] = None, updated: bool = False) -> 'LeafNode':
        raise UnsupportedOperationError(
            f"add_leaf is not supported on {self.kind.value} nodes")

    def delete(self, node: 'TreeNode') -> 'TreeNode':
        raise UnsupportedOperationError(
            f"delete is not supported on {self.kind.value} nodes")

    def sort_children(self, comparator: Comparator) -> None:
        raise UnsupportedOperationError(
            f"sort is not supported on {self.kind.value} nodes")

    def __str__(self) -> str:
        return str(self._value)

    def __repr__(self) -> str:
        hidden = "" if self._visible else ", hidden"
        return f"{self.__class__.__name__}({self._value!r}{hidden})"


class ContainerNode(TreeNode):
    """A node that owns children: a root or a branch.

    Children of one container are homogeneous. Once a container holds a
    branch it can only take branches, and once it holds a leaf it can only
    take leaves.
    """

    def add_branch(self, value: Any, index: Optional[int] = None) -> 'BranchNode':
        """Create a visible branch under this node.

        Args:
            value: Branch value
            index: Position in the children list (None appends)

        Returns:
            The new BranchNode

        Raises:
            IndexOutOfRangeError: If index is outside 0..len(children)
            StructuralViolationError: If this node already holds leaves
        """
        if self.has_leaf_children():
            raise StructuralViolationError(
                f"Cannot add branch {value!r} to {self!r}: it already holds leaves")
        self._check_index(index)

        branch = BranchNode(value, parent=self, visible=True)
        self._insert_child(branch, index)
        return branch

    def add_leaf(self, value: Any, other_parent: TreeNode,
                 index: Optional[int] = None, updated: bool = False) -> 'LeafNode':
        """Create a leaf shared by this branch and a branch on the other axis.

        The leaf is inserted at ``index`` in this node's children and always
        appended to ``other_parent``'s children.

        Args:
            value: Leaf value
            other_parent: Branch on the opposite axis
            index: Position in this node's children (None appends)
            updated: Mark both parents' top-level subtrees dirty

        Returns:
            The new LeafNode

        Raises:
            IndexOutOfRangeError: If index is outside 0..len(children)
            StructuralViolationError: If either parent cannot hold leaves or
                both parents are on the same axis
        """
        self._check_leaf_parent(self)
        self._check_leaf_parent(other_parent)
        if self.axis is other_parent.axis:
            raise StructuralViolationError(
                f"Leaf parents {self!r} and {other_parent!r} are on the same axis")
        self._check_index(index)

        leaf = LeafNode(value, self, other_parent, visible=True)
        self._insert_child(leaf, index)
        other_parent._children.append(leaf)

        # Caches already computed in either subtree would go stale otherwise
        if updated or invalidation.has_cached_values(self) \
                or invalidation.has_cached_values(other_parent):
            invalidation.leaf_changed(self)
            invalidation.leaf_changed(other_parent)

        return leaf

    def delete(self, node: TreeNode) -> TreeNode:
        """Delete a child of this node.

        Nothing happens unless ``node`` is visible and is a direct child of
        this node. Deleting a branch deletes its whole subtree, and every
        leaf in it is also removed from its parent on the other axis.

        Args:
            node: Child to delete

        Returns:
            The node passed in

        Raises:
            UnsupportedOperationError: If node is a root
        """
        if node.is_root():
            raise UnsupportedOperationError("Root nodes cannot be deleted")

        if node.is_visible() and self._contains(node):
            if node.is_branch():
                removed = _delete_descendants(node)
                self._remove_child(node)
                logger.debug("Deleted branch %r with %d leaves", node, removed)
            else:
                _detach_leaf(node, self)

        return node

    def sort_children(self, comparator: Comparator) -> None:
        """Stable in-place sort of the direct children.

        Args:
            comparator: Function(a, b) -> negative, zero or positive
        """
        self._children.sort(key=functools.cmp_to_key(comparator))

    def _check_index(self, index: Optional[int]) -> None:
        if index is not None and not 0 <= index <= len(self._children):
            raise IndexOutOfRangeError(index, len(self._children))

    @staticmethod
    def _check_leaf_parent(parent: TreeNode) -> None:
        if not parent.is_branch():
            raise StructuralViolationError(
                f"Leaves can only be attached to branches, not {parent!r}")
        if parent.has_branch_children():
            raise StructuralViolationError(
                f"Cannot add leaf to {parent!r}: it already holds branches")

    def _insert_child(self, child: TreeNode, index: Optional[int]) -> None:
        if index is None:
            self._children.append(child)
        else:
            self._children.insert(index, child)

    def _contains(self, node: TreeNode) -> bool:
        return any(child is node for child in self._children)

    def _remove_child(self, node: TreeNode) -> None:
        for i, child in enumerate(self._children):
            if child is node:
                del self._children[i]
                return


class RootNode(ContainerNode):
    """One of the two entry points of a tree.

    A root has no value and no parent, is always visible and cannot be
    deleted or hidden.
    """

    def __init__(self, axis: Axis, on_invalidate: Optional[Callable[['BranchNode'], None]] = None):
        super().__init__(value=None, visible=True)
        self._axis = axis
        self.on_invalidate = on_invalidate

    @property
    def kind(self) -> NodeKind:
        return NodeKind.ROOT

    @property
    def axis(self) -> Axis:
        return self._axis

    @property
    def parent(self) -> None:
        return None

    def set_visible(self, visible: bool) -> None:
        raise UnsupportedOperationError("Root nodes cannot be hidden")

    def __repr__(self) -> str:
        return f"RootNode(axis={self._axis.name})"


class BranchNode(ContainerNode):
    """An internal node on one axis.

    The parent link is a weak back-reference; a branch is kept alive by
    its parent's children list, never the other way round.
    """

    def __init__(self, value: Any, parent: ContainerNode, visible: bool = False):
        super().__init__(value=value, visible=visible)
        self._parent_ref = weakref.ref(parent)
        self._axis = parent.axis
        self._cache = AccumulationCache()

    @property
    def kind(self) -> NodeKind:
        return NodeKind.BRANCH

    @property
    def axis(self) -> Axis:
        return self._axis

    @property
    def parent(self) -> Optional[ContainerNode]:
        return self._parent_ref()

    @property
    def cache(self) -> AccumulationCache:
        return self._cache

    def is_dirty(self) -> bool:
        return self._cache.is_dirty

    def mark_dirty(self) -> None:
        self._cache.invalidate()

    def set_visible(self, visible: bool) -> None:
        changed = self._visible != bool(visible)
        super().set_visible(visible)
        if changed:
            invalidation.branch_changed(self)

    def ancestors(self) -> List['BranchNode']:
        """Ancestor branches from the top level down to the direct parent.

        The root is not included, so a top-level branch has no ancestors.
        """
        chain = []
        parent = self.parent
        while parent is not None and parent.is_branch():
            chain.append(parent)
            parent = parent.parent
        chain.reverse()
        return chain

    def hierarchy(self) -> Tuple['BranchNode', ...]:
        """Full hierarchy path from the top level down to this branch."""
        return tuple(self.ancestors()) + (self,)

    def top_level(self) -> 'BranchNode':
        """The ancestor directly under the root (self if top-level)."""
        node = self
        parent = node.parent
        while parent is not None and parent.is_branch():
            node = parent
            parent = node.parent
        return node

    def get_accumulated_values(self, accumulator: Callable[[Sequence['LeafNode'], 'BranchNode'], Any],
                               other_branch: 'BranchNode') -> Any:
        """Aggregate this branch's visible leaves that meet ``other_branch``.

        Leaves are grouped by their direct parent on the opposite axis and
        each group is aggregated once. Results are cached until a leaf in
        this branch's top-level subtree changes or a different
        accumulator is passed.

        Args:
            accumulator: Function(leaves, opposite_branch) -> value; must be
                pure since results are cached; accumulators that compare
                equal share cached values
            other_branch: Opposite-axis bottom branch to look up

        Returns:
            The aggregated value, or None if no visible leaf of this branch
            sits under ``other_branch``
        """
        if not self._cache.holds(accumulator):
            self._cache.clear()
            groups = group_visible_leaves(self)
            self._cache.fill(
                ((branch, accumulator(leaves, branch)) for branch, leaves in groups.items()),
                accumulator)
            invalidation.note_cached(self)
            logger.debug("Recomputed %d accumulated values for %r", len(self._cache), self)

        return self._cache.get(other_branch)


class LeafNode(TreeNode):
    """A cell shared by one bottom branch on each axis.

    ``parent1`` is the branch the leaf was added through and ``parent2``
    the branch on the other axis. Both links are weak; the leaf is owned
    by the two parents' children lists.
    """

    def __init__(self, value: Any, parent1: BranchNode, parent2: BranchNode, visible: bool = False):
        super().__init__(value=value, visible=visible)
        self._parent1_ref = weakref.ref(parent1)
        self._parent2_ref = weakref.ref(parent2)

    @property
    def kind(self) -> NodeKind:
        return NodeKind.LEAF

    @property
    def axis(self) -> None:
        return None

    @property
    def parent1(self) -> Optional[BranchNode]:
        return self._parent1_ref()

    @property
    def parent2(self) -> Optional[BranchNode]:
        return self._parent2_ref()

    def other_parent(self, parent: TreeNode) -> Optional[BranchNode]:
        """Return the parent that is not ``parent``."""
        parent1 = self.parent1
        return self.parent2 if parent1 is parent else parent1

    def parent_on(self, axis: Axis) -> Optional[BranchNode]:
        """Return the parent that lives on ``axis``."""
        parent1 = self.parent1
        if parent1 is not None and parent1.axis is axis:
            return parent1
        return self.parent2

    def parents1(self) -> Tuple[BranchNode, ...]:
        """Hierarchy path of the first parent."""
        return self.parent1.hierarchy()

    def parents2(self) -> Tuple[BranchNode, ...]:
        """Hierarchy path of the second parent."""
        return self.parent2.hierarchy()

    def set_visible(self, visible: bool) -> None:
        changed = self._visible != bool(visible)
        super().set_visible(visible)
        if changed:
            invalidation.leaf_changed(self.parent1)
            invalidation.leaf_changed(self.parent2)


def _detach_leaf(leaf: LeafNode, parent: ContainerNode) -> None:
    """Remove a leaf from ``parent`` and from its parent on the other axis."""
    other = leaf.other_parent(parent)
    invalidation.leaf_changed(parent)
    invalidation.leaf_changed(other)
    parent._remove_child(leaf)
    if other is not None:
        other._remove_child(leaf)


def _delete_descendants(branch: BranchNode) -> int:
    """Remove every descendant of ``branch``, depth first.

    Hidden descendants are removed too, so no leaf is left behind in a
    children list on the other axis.

    Returns:
        Number of leaves removed
    """
    removed = 0
    for child in list(branch._children):
        if child.is_leaf():
            _detach_leaf(child, branch)
            removed += 1
        else:
            removed += _delete_descendants(child)
            branch._remove_child(child)
    return removed
