"""High-level API for ConjoinedTree.

This module provides simple, functional interfaces for common tasks on a
conjoined twin tree: building one from cell data, finding and counting
nodes, and laying the tree out as a matrix.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from .config import Location, TreeConfig
from .core.node import BranchNode, ContainerNode, LeafNode, TreeNode
from .core.traverser import BreadthFirstTraverser, Path
from .tree import ConjoinedTwinTree

ValuePath = Tuple[Any, ...]


@dataclass
class Matrix:
    """A tree laid out as a table.

    ``values[i][j]`` is the cell where ``rows[i]`` meets ``columns[j]``, or
    None when no visible leaf sits there.
    """
    rows: List[Path] = field(default_factory=list)
    columns: List[Path] = field(default_factory=list)
    values: List[List[Any]] = field(default_factory=list)

    def row_labels(self) -> List[ValuePath]:
        return [tuple(branch.value for branch in path) for path in self.rows]

    def column_labels(self) -> List[ValuePath]:
        return [tuple(branch.value for branch in path) for path in self.columns]


def build_tree(
    cells: Mapping[Tuple[ValuePath, ValuePath], Any],
    rows: Optional[Iterable[ValuePath]] = None,
    columns: Optional[Iterable[ValuePath]] = None,
    config: Optional[TreeConfig] = None,
) -> ConjoinedTwinTree:
    """Build a tree from cell data keyed by row and column value paths.

    Args:
        cells: Mapping (row_values, column_values) -> leaf value, in the
            order leaves should be added
        rows: Row value paths to create up front, fixing their order
        columns: Column value paths to create up front
        config: Configuration for the new tree

    Returns:
        The populated ConjoinedTwinTree

    Example:
        >>> tree = build_tree({
        ...     (("A",), ("P",)): 1, (("A",), ("Q",)): 2,
        ...     (("B",), ("P",)): 3, (("B",), ("Q",)): 4,
        ... })
        >>> to_matrix(tree).values
        [[1, 2], [3, 4]]
    """
    tree = ConjoinedTwinTree(config)
    row_index: Dict[ValuePath, BranchNode] = {}
    column_index: Dict[ValuePath, BranchNode] = {}

    for path in rows or ():
        _ensure_path(tree.root1, tuple(path), row_index)
    for path in columns or ():
        _ensure_path(tree.root2, tuple(path), column_index)

    for (row_path, column_path), value in cells.items():
        row = _ensure_path(tree.root1, tuple(row_path), row_index)
        column = _ensure_path(tree.root2, tuple(column_path), column_index)
        row.add_leaf(value, column)

    return tree


def find_nodes(
    tree: ConjoinedTwinTree,
    predicate: Callable[[TreeNode], bool],
    location: Location = Location.ALL,
) -> Iterator[TreeNode]:
    """Find visible nodes that match a predicate.

    Args:
        tree: Tree to search
        predicate: Function that returns True for matching nodes
        location: ALL, BRANCH or LEAF

    Yields:
        Nodes that match the predicate
    """
    yield from tree.search(predicate, location)


def count_nodes(tree: ConjoinedTwinTree, location: Location = Location.ALL) -> int:
    """Count visible nodes at a location."""
    return len(tree.search(lambda node: True, location))


def get_leaf_nodes(tree: ConjoinedTwinTree) -> Iterator[LeafNode]:
    """Get all visible leaves, each once."""
    yield from tree.search(lambda node: True, Location.LEAF)


def to_matrix(tree: ConjoinedTwinTree,
              accessor: Optional[Callable[[LeafNode], Any]] = None) -> Matrix:
    """Lay the visible part of the tree out as a row x column table.

    Args:
        tree: Tree to lay out
        accessor: Function(leaf) -> cell value (defaults to the leaf value)

    Returns:
        Matrix with row paths, column paths and cell values
    """
    accessor = accessor or (lambda leaf: leaf.value)
    rows = tree.rows()
    columns = tree.columns()
    cells = tree.traverse_leafs(rows)

    values = []
    for row in rows:
        row_cells = cells.get(row, {})
        values.append([
            accessor(row_cells[column]) if column in row_cells else None
            for column in columns
        ])

    return Matrix(rows=rows, columns=columns, values=values)


def get_tree_stats(tree: ConjoinedTwinTree) -> Dict[str, Any]:
    """Get statistics about a tree, hidden nodes included.

    Returns:
        Dictionary with per-axis branch counts and depths, leaf counts and
        visible/hidden totals
    """
    stats: Dict[str, Any] = {
        'branches': {},
        'max_depth': {},
        'leaf_nodes': 0,
        'visible_nodes': 0,
        'hidden_nodes': 0,
    }

    for root in (tree.root1, tree.root2):
        axis = root.axis.name.lower()
        stats['branches'][axis] = 0
        stats['max_depth'][axis] = 0
        traverser = BreadthFirstTraverser(Location.ALL, visible_only=False, prune_hidden=False)
        for node, depth in traverser.traverse(root):
            if node.is_leaf():
                # Every leaf hangs off both axes; count it from the first
                if root is tree.root1:
                    stats['leaf_nodes'] += 1
                else:
                    continue
            else:
                stats['branches'][axis] += 1
                stats['max_depth'][axis] = max(stats['max_depth'][axis], depth)

            if node.is_visible():
                stats['visible_nodes'] += 1
            else:
                stats['hidden_nodes'] += 1

    stats['total_nodes'] = stats['visible_nodes'] + stats['hidden_nodes']
    return stats


# Helper functions

def _ensure_path(root: ContainerNode, values: ValuePath,
                 index: Dict[ValuePath, BranchNode]) -> BranchNode:
    """Return the branch at ``values`` below root, creating missing levels."""
    if not values:
        raise ValueError("Branch paths must have at least one level")

    parent: ContainerNode = root
    for depth in range(1, len(values) + 1):
        prefix = values[:depth]
        branch = index.get(prefix)
        if branch is None:
            branch = parent.add_branch(prefix[-1])
            index[prefix] = branch
        parent = branch
    return parent
