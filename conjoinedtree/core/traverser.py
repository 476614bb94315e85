"""Traversal strategies for ConjoinedTree.

Traversers walk one axis of the tree. The breadth-first traverser backs
search, filter and accumulation; the branch path traverser flattens an
axis into table rows (or columns), and ``traverse_leafs`` maps every
row/column intersection to the leaf that sits there.
"""

import threading
from abc import ABC, abstractmethod
from collections import deque
from typing import Deque, Dict, Iterator, List, Optional, Sequence, Set, Tuple, TYPE_CHECKING

from ..config import Location

if TYPE_CHECKING:
    from .node import BranchNode, LeafNode, TreeNode

Path = Tuple['BranchNode', ...]


class VisitedSet:
    """Thread-safe set of nodes already claimed by a traversal.

    Shared between the two per-root workers of an ALL search or filter so
    a leaf reachable from both roots is handled once.
    """

    def __init__(self):
        self._ids: Set[int] = set()
        self._lock = threading.Lock()

    def claim(self, node: 'TreeNode') -> bool:
        """Mark node visited.

        Returns:
            True if the caller is the first to claim the node
        """
        key = id(node)
        with self._lock:
            if key in self._ids:
                return False
            self._ids.add(key)
            return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._ids)


class TreeTraverser(ABC):
    """Abstract base class for traversal strategies over one axis."""

    def __init__(self, location: Location = Location.ALL):
        """Initialize traverser.

        Args:
            location: Which node variants the traversal descends into
        """
        self.location = location

    @abstractmethod
    def traverse(self,
                 start: 'TreeNode',
                 visited: Optional[VisitedSet] = None) -> Iterator[Tuple['TreeNode', int]]:
        """Traverse the tree below ``start`` (start itself is not yielded).

        Args:
            start: Starting node, typically a root
            visited: Shared set used to skip nodes already claimed

        Yields:
            Tuples of (node, depth) where the children of start have depth 1
        """
        pass

    def _should_explore(self, node: 'TreeNode') -> bool:
        """Check if children of a node should be queued.

        Branch-only traversals stop above the leaves; the other locations
        always descend.
        """
        if not node.children:
            return False
        if self.location is Location.BRANCH:
            return node.has_branch_children()
        return True


class BreadthFirstTraverser(TreeTraverser):
    """Breadth-first traversal that prunes hidden subtrees.

    Hidden nodes are never descended into. With ``visible_only`` they are
    not yielded either; without it they are yielded so a caller such as
    filter can change their visibility.

    Visibility is checked after the caller resumes the generator, so a
    node hidden by the caller while it is being yielded is not descended
    into.
    """

    def __init__(self, location: Location = Location.ALL,
                 visible_only: bool = True, prune_hidden: bool = True):
        super().__init__(location)
        self.visible_only = visible_only
        self.prune_hidden = prune_hidden

    def traverse(self,
                 start: 'TreeNode',
                 visited: Optional[VisitedSet] = None) -> Iterator[Tuple['TreeNode', int]]:
        queue: Deque[Tuple['TreeNode', int]] = deque((child, 1) for child in start.children)

        while queue:
            node, depth = queue.popleft()

            # Skip if another worker got here first
            if visited is not None and not visited.claim(node):
                continue

            if node.is_visible() or not self.visible_only:
                yield (node, depth)

            if (node.is_visible() or not self.prune_hidden) and self._should_explore(node):
                for child in node.children:
                    queue.append((child, depth + 1))


class BranchPathTraverser:
    """Flattens the branch hierarchy of one axis into ordered paths.

    Each path runs from the first level below the start node down to a
    bottom branch (a branch whose children are leaves, or which has no
    children). Hidden branches are skipped together with their subtree.
    """

    def traverse(self, start: 'TreeNode') -> List[Path]:
        """Collect every visible top-to-bottom branch path.

        Args:
            start: Starting node, typically a root

        Returns:
            List of paths, each a tuple of BranchNodes
        """
        paths: List[Path] = []
        if start.has_branch_children():
            for child in start.children:
                if child.is_visible():
                    self._descend(child, (), paths)
        return paths

    def _descend(self, node: 'BranchNode', prefix: Path, paths: List[Path]) -> None:
        path = prefix + (node,)
        if node.has_branch_children():
            for child in node.children:
                if child.is_visible():
                    self._descend(child, path, paths)
        else:
            # Bottom of the hierarchy
            paths.append(path)


def traverse_branches(start: 'TreeNode') -> List[Path]:
    """Flatten the visible branch hierarchy below ``start`` into paths."""
    return BranchPathTraverser().traverse(start)


def traverse_leafs(paths: Sequence[Sequence['BranchNode']]) -> Dict[Path, Dict[Path, 'LeafNode']]:
    """Map each path and each opposite-axis path to the leaf where they meet.

    Args:
        paths: Output of traverse_branches for one axis

    Returns:
        Ordered mapping path -> (other-axis path -> leaf). Hidden leaves are
        omitted.
    """
    matrix: Dict[Path, Dict[Path, 'LeafNode']] = {}
    for path in paths:
        path = tuple(path)
        if not path:
            continue
        bottom = path[-1]
        cells: Dict[Path, 'LeafNode'] = {}
        for leaf in bottom.children:
            if leaf.is_leaf() and leaf.is_visible():
                cells[hierarchy_path(leaf, bottom)] = leaf
        matrix[path] = cells
    return matrix


def hierarchy_path(leaf: 'LeafNode', parent: 'BranchNode') -> Path:
    """Hierarchy path of the leaf's parent on the other side from ``parent``."""
    return leaf.other_parent(parent).hierarchy()
