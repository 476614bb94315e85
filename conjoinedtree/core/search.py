"""Search and filter engine for ConjoinedTree.

Both operations walk the tree breadth-first from the children of the
roots. Leaf-only walks start from the first root alone, since every leaf
hangs off both axes. Walks over ALL or BRANCH visit both roots, one
worker per root when parallel traversal is enabled; only the shared
VisitedSet is written by both workers.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, List, Optional, TYPE_CHECKING

from ..config import Location, PerformanceConfig
from .traverser import BreadthFirstTraverser, VisitedSet

if TYPE_CHECKING:
    from .node import RootNode, TreeNode

logger = logging.getLogger(__name__)

Predicate = Callable[['TreeNode'], Any]


def _matches_location(node: 'TreeNode', location: Location) -> bool:
    if location is Location.LEAF:
        return node.is_leaf()
    if location is Location.BRANCH:
        return node.is_branch()
    return True


def hide_subtree(node: 'TreeNode') -> int:
    """Force every descendant of ``node`` hidden.

    Returns:
        Number of descendants hidden
    """
    count = 0
    for child in node.children:
        child.set_visible(False)
        count += 1
        count += hide_subtree(child)
    return count


class TreeSearcher:
    """Runs search and filter walks over the two roots of a tree."""

    def __init__(self, root1: 'RootNode', root2: 'RootNode',
                 performance: Optional[PerformanceConfig] = None):
        self.root1 = root1
        self.root2 = root2
        self.performance = performance or PerformanceConfig()

    def search(self, predicate: Predicate, location: Location = Location.ALL) -> List['TreeNode']:
        """Find visible nodes matching ``predicate``.

        Hidden nodes and their descendants are never matched.

        Args:
            predicate: Function(node) -> truthy for matches
            location: Which node variants to match

        Returns:
            Matching nodes, first-root results before second-root results
        """
        visited = VisitedSet() if location is Location.ALL else None

        def worker(root: 'RootNode') -> List['TreeNode']:
            traverser = BreadthFirstTraverser(location)
            return [node for node, _ in traverser.traverse(root, visited)
                    if _matches_location(node, location) and predicate(node)]

        results: List['TreeNode'] = []
        for partial in self._run(worker, location):
            results.extend(partial)
        if visited is not None:
            logger.debug("Search over both axes claimed %d nodes, matched %d",
                         len(visited), len(results))
        return results

    def filter(self, predicate: Predicate, location: Location = Location.ALL) -> None:
        """Set visibility of each visited node to ``predicate(node)``.

        Hiding a node hides its whole subtree. Nodes are never deleted or
        reordered, so filtering again with an inclusive predicate shows
        them again.

        Args:
            predicate: Function(node) -> truthy to keep the node visible
            location: Which node variants the predicate is applied to
        """
        visited = VisitedSet() if location is Location.ALL else None

        def worker(root: 'RootNode') -> List['TreeNode']:
            traverser = BreadthFirstTraverser(location, visible_only=False)
            rejected = []
            for node, _ in traverser.traverse(root, visited):
                if not _matches_location(node, location):
                    continue
                visible = bool(predicate(node))
                node.set_visible(visible)
                if not visible:
                    rejected.append(node)
            return rejected

        rejected = [node for partial in self._run(worker, location) for node in partial]

        # Cascade only after both walks finish, so a leaf shown by one
        # worker cannot outlive the hide of its parent on the other axis
        cascaded = sum(hide_subtree(node) for node in rejected)
        logger.debug("Filter over %s hid %d nodes and %d descendants",
                     location.name, len(rejected), cascaded)

    def _run(self, worker: Callable[['RootNode'], Any], location: Location) -> List[Any]:
        """Run ``worker`` once per relevant root and join the results."""
        if location is Location.LEAF:
            return [worker(self.root1)]

        roots = [self.root1, self.root2]
        workers = self.performance.effective_workers()
        if workers < 2:
            return [worker(root) for root in roots]

        logger.debug("Walking both axes with %d workers", workers)
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(worker, roots))
