"""Base definitions for backing store implementations.

A backing store keeps the durable image of both scopes of a preference
tree. Nodes are addressed by (absolute path, scope). The store knows
nothing about node lifecycle; PersistenceCoordinator decides what to
write and when.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Mapping, Tuple

from .._common.config import Scope


class BackingStore(ABC):
    """Abstract durable medium for preference trees.

    Implementations must raise BackingStoreError (chaining the original
    exception) for any I/O failure, and must not retry internally.
    """

    @abstractmethod
    def read_node(self, absolute_path: str, scope: Scope) -> Tuple[Dict[str, str], List[str]]:
        """Read a node's durable values and child names.

        Args:
            absolute_path: Path of the node
            scope: Tree the node belongs to

        Returns:
            (values, child_names). A node the store does not know yields ({}, []).
            Values keep the order they were written in.
        """
        pass

    @abstractmethod
    def write_node(self, absolute_path: str, scope: Scope, values: Mapping[str, str]) -> None:
        """Replace a node's durable values.

        The node and all of its ancestors exist in the store afterwards.
        """
        pass

    @abstractmethod
    def remove_node(self, absolute_path: str, scope: Scope) -> None:
        """Forget a node and its durable subtree. Unknown paths are a no-op."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
