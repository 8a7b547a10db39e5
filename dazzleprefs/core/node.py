"""TreeNode abstraction for DazzlePrefs.

The TreeNode is the minimal interface the traversal machinery needs.
Navigation logic is delegated to the TreeAdapter, so the same walkers
serve removal, flushing and export.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict


class TreeNode(ABC):
    """Abstract base class for nodes the traversers can walk.

    Navigation (how to get children, parents, etc.) is handled by the
    TreeAdapter, allowing the same node type to be traversed in different ways.
    """

    @abstractmethod
    def identifier(self) -> str:
        """Return a unique identifier for this node.

        This identifier must be:
        - Unique within the tree
        - Stable for the duration of one traversal

        Returns:
            str: Unique, stable identifier for this node
        """
        pass

    @abstractmethod
    def is_leaf(self) -> bool:
        """Check if this node is a leaf (has no children).

        Leaf nodes don't need to be traversed deeper.

        Returns:
            bool: True if this node has no children, False otherwise
        """
        pass

    @abstractmethod
    def metadata(self) -> Dict[str, Any]:
        """Return lightweight metadata about this node.

        Returns:
            Dict[str, Any]: Metadata dictionary
        """
        pass

    def __str__(self) -> str:
        """String representation defaults to identifier."""
        return self.identifier()
