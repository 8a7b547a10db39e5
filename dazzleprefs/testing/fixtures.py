"""Test fixtures for DazzlePrefs consumers.

These fixtures provide isolated trees, a store that fails on demand and
controlled access to persisted state for testing purposes, without
exposing implementation details as part of the public API.
"""

from typing import Dict, List, Mapping, Optional, Set, Tuple

from .._common.config import Scope, StoreConfig
from ..backends.base import BackingStore
from ..backends.memory import MemoryBackingStore
from ..errors import BackingStoreError
from ..tree import PreferenceTree


def make_tree(store: Optional[BackingStore] = None) -> PreferenceTree:
    """Create an isolated tree, in memory unless a store is given.

    Example:
        store = MemoryBackingStore()
        first, second = make_tree(store), make_tree(store)
        # first and second behave like two processes sharing a store
    """
    if store is None:
        store = MemoryBackingStore()
    return PreferenceTree(StoreConfig.in_memory(), store=store)


class FailingBackingStore(BackingStore):
    """Backing store whose selected operations raise BackingStoreError.

    Operations not listed in `failing` are delegated to an in-memory store,
    so failures can be switched on after some data was written.
    """

    OPERATIONS = frozenset({"read_node", "write_node", "remove_node"})

    def __init__(self, failing: Optional[Set[str]] = None):
        self.failing = set(self.OPERATIONS if failing is None else failing)
        self.delegate = MemoryBackingStore()
        self.calls: List[Tuple[str, str]] = []

    def _maybe_fail(self, operation: str, absolute_path: str) -> None:
        self.calls.append((operation, absolute_path))
        if operation in self.failing:
            cause = OSError(f"simulated {operation} failure")
            raise BackingStoreError(f"{operation}({absolute_path!r}) failed") from cause

    def read_node(self, absolute_path: str, scope: Scope):
        self._maybe_fail("read_node", absolute_path)
        return self.delegate.read_node(absolute_path, scope)

    def write_node(self, absolute_path: str, scope: Scope, values: Mapping[str, str]) -> None:
        self._maybe_fail("write_node", absolute_path)
        self.delegate.write_node(absolute_path, scope, values)

    def remove_node(self, absolute_path: str, scope: Scope) -> None:
        self._maybe_fail("remove_node", absolute_path)
        self.delegate.remove_node(absolute_path, scope)


class TreeTestHelper:
    """Public test fixture for verifying persisted state.

    Example:
        helper = TreeTestHelper(tree)
        tree.user_root().node("a").flush()
        assert "/a" in helper.stored_paths(Scope.USER)
    """

    def __init__(self, tree: PreferenceTree):
        self._tree = tree

    def stored_paths(self, scope: Scope) -> List[str]:
        """Return every path the backing store knows for scope, sorted."""
        found = []

        def _collect(path: str) -> None:
            found.append(path)
            _, children = self._tree.store.read_node(path, scope)
            for name in children:
                _collect(path + name if path == "/" else path + "/" + name)

        _collect("/")
        return sorted(found)

    def stored_values(self, scope: Scope, absolute_path: str) -> Dict[str, str]:
        """Return the durable values of one node."""
        values, _ = self._tree.store.read_node(absolute_path, scope)
        return values

    def pending_removals(self, scope: Scope) -> List[str]:
        """Return removed paths not yet pushed to the store."""
        return self._tree.coordinator.pending_removals(scope)
