"""Core abstractions for DazzlePrefs.

This module contains the abstract base classes the preference tree is
walked through.
"""

from .node import TreeNode
from .adapter import TreeAdapter
from .traverser import (
    TreeTraverser,
    BreadthFirstTraverser,
    DepthFirstPreOrderTraverser,
    DepthFirstPostOrderTraverser,
    create_traverser,
)

__all__ = [
    "TreeNode",
    "TreeAdapter",
    "TreeTraverser",
    "BreadthFirstTraverser",
    "DepthFirstPreOrderTraverser",
    "DepthFirstPostOrderTraverser",
    "create_traverser",
]
