"""High-level API for DazzlePrefs.

This module provides simple, functional interfaces over the process-wide
preference tree and over tree walking. These functions wrap the more
complex object-oriented API for ease of use in simple cases.
"""

from typing import List, Optional

from ._common.config import Scope, StoreConfig
from .adapter import PreferenceAdapter
from .core.traverser import create_traverser
from .lifecycle import require_active
from .node import PreferenceNode
from .tree import PreferenceTree


def configure(config: StoreConfig) -> None:
    """Configure the process-wide tree. Must be called before its first use.

    Example:
        >>> configure(StoreConfig.on_disk("/var/lib/myapp/prefs"))
    """
    PreferenceTree.configure(config)


def user_root() -> PreferenceNode:
    """Return the root of the process-wide user preference tree."""
    return PreferenceTree.default().user_root()


def system_root() -> PreferenceNode:
    """Return the root of the process-wide system preference tree."""
    return PreferenceTree.default().system_root()


def import_preferences(stream) -> Scope:
    """Import an XML document into the process-wide tree of its declared scope.

    Example:
        >>> with open("exported.xml", "rb") as fh:
        ...     import_preferences(fh)
        >>> user_root().sync()
    """
    return PreferenceTree.default().import_preferences(stream)


def walk(node: PreferenceNode,
         strategy: str = "dfs_pre",
         max_depth: Optional[int] = None) -> List[PreferenceNode]:
    """Return node and its descendants in traversal order.

    The walk is taken as a snapshot under the tree lock, so the result
    is safe to iterate while the tree changes.

    Args:
        node: Starting node (must not be removed)
        strategy: Traversal strategy (bfs, dfs_pre, dfs_post)
        max_depth: Maximum depth below node (None = unlimited)

    Returns:
        List of nodes
    """
    traverser = create_traverser(strategy, PreferenceAdapter())
    with node.tree.lock:
        require_active(node, "walk")
        return [descendant for descendant, _ in traverser.traverse(node, max_depth=max_depth)]


def subtree_paths(node: PreferenceNode, strategy: str = "dfs_pre") -> List[str]:
    """Return the absolute paths of node and its descendants.

    Example:
        >>> subtree_paths(tree.user_root())
        ['/', '/a', '/a/b']
    """
    with node.tree.lock:
        return [descendant.absolute_path() for descendant in walk(node, strategy)]
