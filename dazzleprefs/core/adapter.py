"""TreeAdapter abstraction for DazzlePrefs.

The TreeAdapter provides the navigation logic for a specific tree
structure, decoupling the node representation from the traversal mechanism.
"""

from abc import ABC, abstractmethod
from typing import Iterator, Optional
from .node import TreeNode


class TreeAdapter(ABC):
    """Abstract adapter for navigating a tree structure.

    While TreeNode is just a data container, the adapter knows HOW to
    navigate the specific tree type.
    """

    @abstractmethod
    def get_children(self, node: TreeNode) -> Iterator[TreeNode]:
        """Get an iterator of child nodes for the given node.

        Args:
            node: The parent node

        Returns:
            Iterator yielding child TreeNode instances
        """
        pass

    @abstractmethod
    def get_parent(self, node: TreeNode) -> Optional[TreeNode]:
        """Get the parent node of the given node.

        Args:
            node: The child node

        Returns:
            Parent TreeNode or None if node is root
        """
        pass

    def get_depth(self, node: TreeNode) -> int:
        """Calculate the depth of a node in the tree.

        Default implementation walks up to root.

        Args:
            node: The node to get depth for

        Returns:
            Depth where root = 0
        """
        depth = 0
        current = node
        while True:
            parent = self.get_parent(current)
            if parent is None:
                break
            depth += 1
            current = parent
        return depth

    def get_ancestors(self, node: TreeNode) -> Iterator[TreeNode]:
        """Get the ancestors of a node, root first (excluding the node itself).

        Args:
            node: The node to get ancestors for

        Returns:
            Iterator yielding ancestors from the root downwards
        """
        chain = []
        current = self.get_parent(node)
        while current is not None:
            chain.append(current)
            current = self.get_parent(current)
        return reversed(chain)
