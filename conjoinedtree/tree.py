"""The ConjoinedTwinTree façade.

A conjoined twin tree is two trees with separate roots and branches that
share their leaves. It stores two-dimensional views of multidimensional
data, such as a pivot table: the first root holds the row hierarchy, the
second root the column hierarchy, and each leaf is the cell where a row
meets a column.

Usage:
    tree = ConjoinedTwinTree()
    a = tree.root1.add_branch("A")
    b = tree.root1.add_branch("B")
    p = tree.root2.add_branch("P")
    q = tree.root2.add_branch("Q")
    a.add_leaf(1, p)
    a.add_leaf(2, q)
    b.add_leaf(3, p)
    b.add_leaf(4, q)

builds::

                   root2
                  /     \\
                "P" --- "Q"
                 |       |
          "A" -- 1 ----- 2
         /       |       |
    root1        |       |
         \\       |       |
          "B" -- 3 ----- 4
"""

import logging
from typing import Dict, List, Optional, Sequence

from .config import Axis, Location, TreeConfig
from .errors import ConfigurationError
from .core.node import BranchNode, LeafNode, RootNode, TreeNode
from .core.search import Predicate, TreeSearcher
from .core.sorting import (
    Comparator,
    get_sorted_branches,
    sort_leafs_and_traverse,
    sort_tree,
)
from .core.traverser import BreadthFirstTraverser, Path, traverse_branches, traverse_leafs

logger = logging.getLogger(__name__)


class ConjoinedTwinTree:
    """Owns the two roots and exposes the tree operations.

    Structural edits (add_branch, add_leaf, delete) are made on the nodes
    themselves; the tree provides the operations that span an axis or
    both axes.
    """

    def __init__(self, config: Optional[TreeConfig] = None):
        """Create an empty tree.

        Args:
            config: Tree configuration (defaults to TreeConfig())

        Raises:
            ConfigurationError: If the configuration is invalid
        """
        self.config = config or TreeConfig()
        errors = self.config.validate()
        if errors:
            raise ConfigurationError(errors)

        self._root1 = RootNode(Axis.FIRST, on_invalidate=self.config.on_invalidate)
        self._root2 = RootNode(Axis.SECOND, on_invalidate=self.config.on_invalidate)
        self._searcher = TreeSearcher(self._root1, self._root2, self.config.performance)

    @property
    def root1(self) -> RootNode:
        """Root of the first axis (rows)."""
        return self._root1

    @property
    def root2(self) -> RootNode:
        """Root of the second axis (columns)."""
        return self._root2

    def get_root(self, axis: Axis) -> RootNode:
        return self._root1 if axis is Axis.FIRST else self._root2

    # Search and filter

    def search(self, predicate: Predicate, location: Location = Location.ALL) -> List[TreeNode]:
        """Find visible nodes matching a predicate.

        Args:
            predicate: Function(node) -> truthy for matches
            location: ALL, BRANCH or LEAF

        Returns:
            Matching nodes (empty list if none)
        """
        return self._searcher.search(predicate, location)

    def filter(self, predicate: Predicate, location: Location = Location.ALL) -> None:
        """Show nodes for which the predicate holds and hide the rest.

        Hiding a node hides its whole subtree. Hidden nodes stay in the
        tree and are skipped by search, traversal, deletion and
        accumulation.

        Args:
            predicate: Function(node) -> truthy to keep the node visible
            location: ALL, BRANCH or LEAF
        """
        self._searcher.filter(predicate, location)

    def show_all(self) -> None:
        """Make every node on both axes visible again."""
        shown = 0
        for root in (self._root1, self._root2):
            traverser = BreadthFirstTraverser(Location.ALL, visible_only=False, prune_hidden=False)
            for node, _ in traverser.traverse(root):
                if not node.is_visible():
                    node.set_visible(True)
                    shown += 1
        logger.debug("show_all made %d nodes visible", shown)

    # Sorting

    def sort(self, start: TreeNode, *comparators: Comparator) -> None:
        """Sort each level below ``start`` with its own comparator.

        Args:
            start: Root or branch to start from
            *comparators: One comparator per level, nearest level first

        Raises:
            UnsupportedOperationError: If start is a leaf
        """
        sort_tree(start, *comparators)

    def sort_leafs_and_traverse(self, unsorted_paths: Sequence[Sequence[BranchNode]],
                                branch: BranchNode,
                                comparator: Optional[Comparator] = None) -> List[Path]:
        """Sort a bottom branch's leaves and return the derived opposite order."""
        return sort_leafs_and_traverse(unsorted_paths, branch, comparator)

    def get_sorted_branches(self, unsorted_paths: Sequence[Sequence[BranchNode]],
                            branch_parent: BranchNode) -> List[Path]:
        """Opposite-axis paths in the order of ``branch_parent``'s leaves."""
        return get_sorted_branches(unsorted_paths, branch_parent)

    # Traversal

    def traverse_branches(self, start: TreeNode) -> List[Path]:
        """Flatten the visible hierarchy below ``start`` into branch paths."""
        return traverse_branches(start)

    def traverse_leafs(self, paths: Sequence[Sequence[BranchNode]]) -> Dict[Path, Dict[Path, LeafNode]]:
        """Map each path and opposite-axis path to the leaf where they meet."""
        return traverse_leafs(paths)

    def rows(self) -> List[Path]:
        """Visible branch paths of the first axis."""
        return traverse_branches(self._root1)

    def columns(self) -> List[Path]:
        """Visible branch paths of the second axis."""
        return traverse_branches(self._root2)

    def __repr__(self) -> str:
        return (f"ConjoinedTwinTree(root1={len(self._root1.children)} branches, "
                f"root2={len(self._root2.children)} branches)")
