"""Test fixtures for ConjoinedTree consumers.

These fixtures check the structural invariants of a tree through its
public interface, so a consumer's test suite can verify that its own
edits keep the tree consistent.
"""

from typing import Any, Dict, List, Sequence, Tuple

from ..config import Location
from ..core.node import BranchNode, LeafNode, TreeNode
from ..core.traverser import BreadthFirstTraverser
from ..tree import ConjoinedTwinTree


def build_scenario_tree() -> Tuple[ConjoinedTwinTree, Dict[str, TreeNode]]:
    """Build the two-by-two reference tree.

    Rows A, B under the first root, columns P, Q under the second, and
    leaves 1=(A,P), 2=(A,Q), 3=(B,P), 4=(B,Q).

    Returns:
        The tree and a name -> node mapping ("A", "P", "1", ...)
    """
    tree = ConjoinedTwinTree()
    a = tree.root1.add_branch("A")
    b = tree.root1.add_branch("B")
    p = tree.root2.add_branch("P")
    q = tree.root2.add_branch("Q")
    nodes: Dict[str, TreeNode] = {"A": a, "B": b, "P": p, "Q": q}
    nodes["1"] = a.add_leaf(1, p)
    nodes["2"] = a.add_leaf(2, q)
    nodes["3"] = b.add_leaf(3, p)
    nodes["4"] = b.add_leaf(4, q)
    return tree, nodes


class TreeTestHelper:
    """Public test fixture for verifying tree invariants.

    Example:
        helper = TreeTestHelper(tree)
        helper.assert_dual_parent_symmetry()
        assert helper.values(tree.root1.children[0].children) == [1, 2]
    """

    def __init__(self, tree: ConjoinedTwinTree):
        self._tree = tree

    def all_nodes(self, root: TreeNode) -> List[TreeNode]:
        """Every node below ``root``, hidden ones included."""
        traverser = BreadthFirstTraverser(Location.ALL, visible_only=False, prune_hidden=False)
        return [node for node, _ in traverser.traverse(root)]

    def all_leaves(self) -> List[LeafNode]:
        """Every leaf of the tree, each once, hidden ones included."""
        return [node for node in self.all_nodes(self._tree.root1) if node.is_leaf()]

    def assert_dual_parent_symmetry(self) -> None:
        """Every leaf sits in both of its parents' children, one per axis."""
        first = [n for n in self.all_nodes(self._tree.root1) if n.is_leaf()]
        second = [n for n in self.all_nodes(self._tree.root2) if n.is_leaf()]
        assert {id(n) for n in first} == {id(n) for n in second}, \
            "Leaf sets reachable from the two roots differ"

        for leaf in first:
            parent1, parent2 = leaf.parent1, leaf.parent2
            assert parent1 is not None and parent2 is not None, f"{leaf!r} lost a parent"
            assert any(c is leaf for c in parent1.children), f"{leaf!r} missing from {parent1!r}"
            assert any(c is leaf for c in parent2.children), f"{leaf!r} missing from {parent2!r}"
            assert parent1.axis is not parent2.axis, f"{leaf!r} has both parents on one axis"

    def assert_cascade_hidden(self, node: TreeNode) -> None:
        """A hidden node has no visible descendant."""
        assert not node.is_visible(), f"{node!r} is visible"
        for descendant in self.all_nodes(node):
            assert not descendant.is_visible(), f"{descendant!r} under {node!r} is visible"

    def assert_homogeneous_children(self) -> None:
        """No container mixes branch and leaf children."""
        for root in (self._tree.root1, self._tree.root2):
            for node in [root] + self.all_nodes(root):
                kinds = {child.kind for child in node.children}
                assert len(kinds) <= 1, f"{node!r} mixes {kinds}"

    @staticmethod
    def values(nodes: Sequence[TreeNode]) -> List[Any]:
        """Values of ``nodes`` in order."""
        return [node.value for node in nodes]

    @staticmethod
    def path_values(paths: Sequence[Sequence[BranchNode]]) -> List[Tuple[Any, ...]]:
        """Branch values of each path, for readable assertions."""
        return [tuple(branch.value for branch in path) for path in paths]
