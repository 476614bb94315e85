"""Accumulation cache invalidation events.

Any change to the leaves of a branch marks every branch in the whole
top-level subtree containing it as dirty, not just the ancestor chain.
Caches are recomputed lazily on the next read.

The functions here are the only place dirty flags are set.
"""

import logging
from collections import deque
from typing import Deque, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .node import BranchNode, TreeNode

logger = logging.getLogger(__name__)


def invalidate_subtree(top: 'BranchNode') -> int:
    """Mark ``top`` and every branch below it dirty.

    The root's ``on_invalidate`` listener, if any, is notified once with
    ``top`` after marking.

    Args:
        top: Top-level branch whose subtree changed

    Returns:
        Number of branches marked dirty
    """
    count = 0
    queue: Deque['TreeNode'] = deque([top])
    while queue:
        branch = queue.popleft()
        branch.mark_dirty()
        count += 1
        if branch.has_branch_children():
            queue.extend(branch.children)

    top.cache.subtree_populated = False

    root = top.parent
    listener = getattr(root, 'on_invalidate', None)
    if listener is not None:
        listener(top)

    logger.debug("Invalidated %d branches under %r", count, top)
    return count


def leaf_changed(parent: Optional['TreeNode']) -> int:
    """Publish that a leaf under ``parent`` was added, removed, shown or hidden.

    Args:
        parent: Direct branch parent of the leaf (None or a root is ignored)

    Returns:
        Number of branches marked dirty
    """
    if parent is None or not parent.is_branch():
        return 0
    return invalidate_subtree(parent.top_level())


def branch_changed(branch: 'BranchNode') -> int:
    """Publish that a branch was shown or hidden."""
    return invalidate_subtree(branch.top_level())


def note_cached(branch: 'BranchNode') -> None:
    """Record that a cache in ``branch``'s top-level subtree holds values."""
    branch.top_level().cache.subtree_populated = True


def has_cached_values(branch: 'TreeNode') -> bool:
    """Check whether any cache in ``branch``'s top-level subtree may be read stale."""
    if not branch.is_branch():
        return False
    return branch.top_level().cache.subtree_populated
