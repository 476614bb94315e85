"""Sort engine for ConjoinedTree.

Group sorting applies one comparator per level below a start node, so
each level of a hierarchy can be ordered independently and in its own
direction. Leaf-driven sorting orders the leaves of one bottom branch and
derives the matching order of the opposite axis from them, without
touching the opposite axis itself.

Comparators are ``cmp``-style functions returning a negative number, zero
or a positive number.
"""

from typing import Any, Callable, List, Optional, Sequence, TYPE_CHECKING

from ..errors import UnsupportedOperationError
from .traverser import Path, hierarchy_path

if TYPE_CHECKING:
    from .node import BranchNode, TreeNode

Comparator = Callable[['TreeNode', 'TreeNode'], int]


def _node_value(node: 'TreeNode') -> Any:
    return node.value


def ascending(key: Optional[Callable[['TreeNode'], Any]] = None) -> Comparator:
    """Comparator ordering nodes by ``key`` (the node value by default)."""
    key = key or _node_value

    def compare(a: 'TreeNode', b: 'TreeNode') -> int:
        ka, kb = key(a), key(b)
        return (ka > kb) - (ka < kb)

    return compare


def descending(key: Optional[Callable[['TreeNode'], Any]] = None) -> Comparator:
    """Comparator ordering nodes by ``key`` in reverse."""
    forward = ascending(key)

    def compare(a: 'TreeNode', b: 'TreeNode') -> int:
        return -forward(a, b)

    return compare


def sort_tree(start: 'TreeNode', *comparators: Comparator) -> None:
    """Sort each level below ``start`` with its own comparator.

    ``comparators[0]`` orders the children of start, ``comparators[1]``
    the grandchildren within each child, and so on. Levels beyond the last
    comparator keep their order.

    Raises:
        UnsupportedOperationError: If start is a leaf
    """
    if start.is_leaf():
        raise UnsupportedOperationError("sort is not supported on leaf nodes")
    _sort_level(start, comparators, 0)


def _sort_level(node: 'TreeNode', comparators: Sequence[Comparator], level: int) -> None:
    if level < len(comparators) and not node.is_leaf():
        node.sort_children(comparators[level])
        for child in node.children:
            _sort_level(child, comparators, level + 1)


def get_sorted_branches(unsorted_paths: Sequence[Sequence['BranchNode']],
                        branch_parent: 'BranchNode') -> List[Path]:
    """Derive the opposite axis order from the leaf order of a branch.

    Each visible leaf of ``branch_parent`` contributes the hierarchy path of
    its parent on the other axis, in leaf order, so two leaves under one
    opposite branch contribute its path twice. Paths from ``unsorted_paths``
    that no leaf points to (empty intersections) are put first, in their
    original order. A leaf whose path is not in ``unsorted_paths``, for
    instance because its other parent was hidden, contributes nothing.
    ``unsorted_paths`` itself is left untouched.

    Args:
        unsorted_paths: Current paths of the opposite axis
        branch_parent: Bottom branch whose leaves drive the order

    Returns:
        Reordered list of paths
    """
    known = [tuple(path) for path in unsorted_paths]
    known_set = set(known)

    sorted_paths = []
    for leaf in branch_parent.children:
        if not (leaf.is_leaf() and leaf.is_visible()):
            continue
        path = hierarchy_path(leaf, branch_parent)
        if path in known_set:
            sorted_paths.append(path)

    resolved = set(sorted_paths)
    if len(resolved) < len(known_set):
        missing = [path for path in known if path not in resolved]
        sorted_paths = missing + sorted_paths

    return sorted_paths


def sort_leafs_and_traverse(unsorted_paths: Sequence[Sequence['BranchNode']],
                            branch: 'BranchNode',
                            comparator: Optional[Comparator] = None) -> List[Path]:
    """Sort the leaves of ``branch`` and return the derived opposite order.

    Leaves are sorted by ascending value when no comparator is given.
    """
    branch.sort_children(comparator or ascending())
    return get_sorted_branches(unsorted_paths, branch)
