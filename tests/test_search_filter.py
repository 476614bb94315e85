"""Tests for search, filter and show_all.

Every behavior is checked with parallel and sequential traversal, which
must agree.
"""

import logging
import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from conjoinedtree import ConjoinedTwinTree, Location, PerformanceConfig, SumAccumulator, TreeConfig
from conjoinedtree.core import TreeSearcher
from conjoinedtree.core.search import hide_subtree
from conjoinedtree.testing import TreeTestHelper


CONFIGS = {
    "parallel": TreeConfig(),
    "sequential": TreeConfig.sequential(),
}


@pytest.fixture(params=sorted(CONFIGS))
def tree(request):
    """Rows A, B; columns P, Q; leaves 1=(A,P), 2=(A,Q), 3=(B,P), 4=(B,Q)."""
    tree = ConjoinedTwinTree(CONFIGS[request.param])
    a = tree.root1.add_branch("A")
    b = tree.root1.add_branch("B")
    p = tree.root2.add_branch("P")
    q = tree.root2.add_branch("Q")
    leaves = [a.add_leaf(1, p), a.add_leaf(2, q), b.add_leaf(3, p), b.add_leaf(4, q)]
    tree.nodes = {"A": a, "B": b, "P": p, "Q": q}
    tree.nodes.update((str(leaf.value), leaf) for leaf in leaves)
    return tree


def values(nodes):
    return TreeTestHelper.values(nodes)


class TestSearch:
    """Test searching visible nodes."""

    def test_leaf_search_reports_each_leaf_once(self, tree):
        found = tree.search(lambda node: node.leaf_value == 1, Location.LEAF)
        assert found == [tree.nodes["1"]]

    def test_leaf_search_never_matches_branches(self, tree):
        found = tree.search(lambda node: True, Location.LEAF)
        assert values(found) == [1, 2, 3, 4]

    def test_branch_search_covers_both_axes(self, tree):
        found = tree.search(lambda node: True, Location.BRANCH)
        assert values(found) == ["A", "B", "P", "Q"]

    def test_branch_search_by_value(self, tree):
        found = tree.search(lambda node: node.branch_value == "Q", Location.BRANCH)
        assert found == [tree.nodes["Q"]]

    def test_all_search_reports_shared_leaves_once(self, tree):
        found = tree.search(lambda node: True, Location.ALL)
        assert len(found) == 8
        assert len({id(node) for node in found}) == 8

    def test_all_search_logs_claimed_node_count(self, tree, caplog):
        with caplog.at_level(logging.DEBUG, logger="conjoinedtree.core.search"):
            tree.search(lambda node: node.is_leaf(), Location.ALL)
        assert "claimed 8 nodes, matched 4" in caplog.text

    def test_all_search_orders_first_axis_results_first(self, tree):
        found = tree.search(lambda node: node.is_branch(), Location.ALL)
        assert values(found) == ["A", "B", "P", "Q"]

    def test_no_match_returns_empty_list(self, tree):
        assert tree.search(lambda node: node.value == "missing") == []

    def test_hidden_nodes_are_not_found(self, tree):
        tree.nodes["A"].set_visible(False)
        found = tree.search(lambda node: True, Location.LEAF)
        assert values(found) == [3, 4]

    def test_hidden_subtree_is_not_found_from_other_axis(self, tree):
        """Leaves under a hidden row are hidden too, so P does not surface them."""
        tree.filter(lambda node: node.branch_value != "A", Location.BRANCH)
        found = tree.search(lambda node: node.is_leaf(), Location.ALL)
        assert sorted(values(found)) == [3, 4]


class TestFilter:
    """Test filtering visibility."""

    def test_leaf_filter(self, tree):
        tree.filter(lambda node: node.leaf_value != 2, Location.LEAF)

        assert not tree.nodes["2"].is_visible()
        assert tree.nodes["1"].is_visible()
        assert tree.nodes["A"].is_visible()

    def test_branch_filter_cascades_to_leaves(self, tree):
        tree.filter(lambda node: node.branch_value != "A", Location.BRANCH)

        helper = TreeTestHelper(tree)
        helper.assert_cascade_hidden(tree.nodes["A"])
        assert not tree.nodes["1"].is_visible()
        assert not tree.nodes["2"].is_visible()
        assert tree.nodes["P"].is_visible()

    def test_filter_is_reversible(self, tree):
        tree.filter(lambda node: node.branch_value != "A", Location.BRANCH)
        tree.filter(lambda node: True, Location.BRANCH)

        assert tree.nodes["A"].is_visible()
        # Leaves are outside the branch walk and stay hidden
        assert not tree.nodes["1"].is_visible()

        tree.filter(lambda node: True, Location.LEAF)
        assert tree.nodes["1"].is_visible()

    def test_all_filter_hides_column_and_its_leaves(self, tree):
        tree.filter(lambda node: node.value != "Q", Location.ALL)

        assert not tree.nodes["Q"].is_visible()
        assert not tree.nodes["2"].is_visible()
        assert not tree.nodes["4"].is_visible()
        assert tree.nodes["1"].is_visible()
        assert tree.nodes["3"].is_visible()

    def test_filtered_nodes_stay_in_tree(self, tree):
        tree.filter(lambda node: False, Location.ALL)

        assert len(tree.root1.children) == 2
        assert len(tree.nodes["A"].children) == 2
        assert tree.search(lambda node: True) == []

    def test_show_all(self, tree):
        tree.filter(lambda node: False, Location.ALL)
        tree.show_all()

        assert values(tree.search(lambda node: True, Location.LEAF)) == [1, 2, 3, 4]
        assert tree.search(lambda node: True, Location.BRANCH) == [
            tree.nodes["A"], tree.nodes["B"], tree.nodes["P"], tree.nodes["Q"]]


class TestHideSubtree:
    """Test the cascade helper."""

    def test_counts_hidden_descendants(self, tree):
        count = hide_subtree(tree.nodes["B"])
        assert count == 2
        assert tree.nodes["B"].is_visible()
        assert not tree.nodes["3"].is_visible()


class TestSearcherWorkers:
    """Test worker selection."""

    @pytest.mark.parametrize("parallel,num_workers,expected", [
        (False, 1, 1),
        (False, 8, 1),
        (True, 2, 2),
        (True, 8, 2),
        (True, None, 2),
    ])
    def test_effective_workers(self, parallel, num_workers, expected):
        config = PerformanceConfig(parallel=parallel, num_workers=num_workers)
        assert config.effective_workers() == expected

    def test_parallel_and_sequential_agree(self):
        trees = {}
        for name, config in CONFIGS.items():
            tree = ConjoinedTwinTree(config)
            for r in range(5):
                row = tree.root1.add_branch(f"r{r}")
                for c in range(4):
                    if r == 0:
                        tree.root2.add_branch(f"c{c}")
                    row.add_leaf(r * 10 + c, tree.root2.children[c])
            tree.filter(lambda node: node.leaf_value is None or node.leaf_value % 3, Location.ALL)
            trees[name] = tree

        results = {name: sorted(str(value) for value in values(tree.search(lambda node: True)))
                   for name, tree in trees.items()}
        assert results["parallel"] == results["sequential"]

    def test_searcher_defaults_to_parallel(self):
        tree = ConjoinedTwinTree()
        searcher = TreeSearcher(tree.root1, tree.root2)
        assert searcher.performance.effective_workers() == 2


@pytest.mark.slow
class TestLargeTree:
    """Search, filter and accumulation over a large grid."""

    ROWS = 300
    COLUMNS = 40

    def build(self, config):
        tree = ConjoinedTwinTree(config)
        columns = [tree.root2.add_branch(f"c{c}") for c in range(self.COLUMNS)]
        for group in range(self.ROWS // 10):
            top = tree.root1.add_branch(f"g{group}")
            for r in range(10):
                row = top.add_branch(f"r{group * 10 + r}")
                for c, column in enumerate(columns):
                    row.add_leaf((group * 10 + r) * self.COLUMNS + c, column)
        return tree

    def test_large_grid_parallel_matches_sequential(self):
        visible = {}
        for name, config in CONFIGS.items():
            tree = self.build(config)
            tree.filter(lambda node: node.leaf_value is None or node.leaf_value % 7, Location.ALL)
            found = tree.search(lambda node: node.is_leaf(), Location.ALL)
            visible[name] = sorted(node.value for node in found)

        assert visible["parallel"] == visible["sequential"]
        assert len(visible["parallel"]) == self.ROWS * self.COLUMNS - len(
            range(0, self.ROWS * self.COLUMNS, 7))

    def test_large_grid_accumulation(self):
        tree = self.build(TreeConfig())
        total = SumAccumulator()
        first_column = tree.root2.children[0]

        for group in tree.root1.children:
            expected = sum(leaf.value
                           for row in group.children
                           for leaf in row.children
                           if leaf.parent2 is first_column)
            assert group.get_accumulated_values(total, first_column) == expected
