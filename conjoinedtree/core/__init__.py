"""Core abstractions for ConjoinedTree.

This package contains the node model and the engines that operate on it:
invalidation, accumulation, traversal, search/filter and sorting.
"""

from .node import TreeNode, ContainerNode, RootNode, BranchNode, LeafNode, NodeKind
from .accumulator import (
    AccumulationCache,
    BranchAccumulator,
    ValueAccumulator,
    SumAccumulator,
    MaxAccumulator,
    MinAccumulator,
    CountAccumulator,
    AverageAccumulator,
    CustomAccumulator,
)
from .traverser import (
    TreeTraverser,
    BreadthFirstTraverser,
    BranchPathTraverser,
    VisitedSet,
    traverse_branches,
    traverse_leafs,
)
from .search import TreeSearcher
from .sorting import ascending, descending, sort_tree, get_sorted_branches, sort_leafs_and_traverse

__all__ = [
    "TreeNode",
    "ContainerNode",
    "RootNode",
    "BranchNode",
    "LeafNode",
    "NodeKind",
    "AccumulationCache",
    "BranchAccumulator",
    "ValueAccumulator",
    "SumAccumulator",
    "MaxAccumulator",
    "MinAccumulator",
    "CountAccumulator",
    "AverageAccumulator",
    "CustomAccumulator",
    "TreeTraverser",
    "BreadthFirstTraverser",
    "BranchPathTraverser",
    "VisitedSet",
    "traverse_branches",
    "traverse_leafs",
    "TreeSearcher",
    "ascending",
    "descending",
    "sort_tree",
    "get_sorted_branches",
    "sort_leafs_and_traverse",
]
