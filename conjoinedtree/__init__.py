"""ConjoinedTree - two trees that share their leaves.

ConjoinedTree models pivot-table-like data as a graph with two independent
hierarchies (rows and columns) whose leaf cells are shared between them.
Either axis can be edited, filtered or sorted on its own while the other
axis sees the same cells.

Quick start:
━━━━━━━━━━━━━━━━━━━━━━━━━━
    from conjoinedtree import ConjoinedTwinTree, Location

    tree = ConjoinedTwinTree()
    a = tree.root1.add_branch("A")
    p = tree.root2.add_branch("P")
    a.add_leaf(1, p)
    tree.search(lambda node: node.leaf_value == 1, Location.LEAF)
━━━━━━━━━━━━━━━━━━━━━━━━━━
"""

import logging

__version__ = "0.1.0"

from .config import Axis, Location, PerformanceConfig, TreeConfig
from .errors import (
    ConjoinedTreeError,
    StructuralViolationError,
    UnsupportedOperationError,
    IndexOutOfRangeError,
    ConfigurationError,
)
from .core import (
    TreeNode,
    RootNode,
    BranchNode,
    LeafNode,
    NodeKind,
    BranchAccumulator,
    ValueAccumulator,
    SumAccumulator,
    MaxAccumulator,
    MinAccumulator,
    CountAccumulator,
    AverageAccumulator,
    CustomAccumulator,
    ascending,
    descending,
)
from .tree import ConjoinedTwinTree
from .api import (
    Matrix,
    build_tree,
    find_nodes,
    count_nodes,
    get_leaf_nodes,
    to_matrix,
    get_tree_stats,
)
from .logging_config import setup_logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    # Config
    "Axis",
    "Location",
    "PerformanceConfig",
    "TreeConfig",
    # Errors
    "ConjoinedTreeError",
    "StructuralViolationError",
    "UnsupportedOperationError",
    "IndexOutOfRangeError",
    "ConfigurationError",
    # Nodes
    "TreeNode",
    "RootNode",
    "BranchNode",
    "LeafNode",
    "NodeKind",
    # Accumulators
    "BranchAccumulator",
    "ValueAccumulator",
    "SumAccumulator",
    "MaxAccumulator",
    "MinAccumulator",
    "CountAccumulator",
    "AverageAccumulator",
    "CustomAccumulator",
    # Sorting
    "ascending",
    "descending",
    # Tree and API
    "ConjoinedTwinTree",
    "Matrix",
    "build_tree",
    "find_nodes",
    "count_nodes",
    "get_leaf_nodes",
    "to_matrix",
    "get_tree_stats",
    "setup_logging",
]
