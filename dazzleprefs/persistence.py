"""Flush/sync coordination between a preference tree and its backing store.

The coordinator shares the tree lock. It holds the lock only long enough
to snapshot (flush) or merge (sync); every backing store call happens
with the lock released, so slow I/O never blocks unrelated node
operations. Store failures propagate as BackingStoreError and are never
retried here.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, List, Set, Tuple

from ._common.config import Scope
from .adapter import PreferenceAdapter
from .backends.base import BackingStore
from .core.traverser import BreadthFirstTraverser
from .errors import BackingStoreError, InvalidArgumentError, NullInputError
from .lifecycle import require_active
from .paths import is_within, join_path, validate_name

logger = logging.getLogger(__name__)


@dataclass
class StoredNode:
    """A node's durable image as read from the backing store."""
    values: Dict[str, str]
    children: Dict[str, 'StoredNode'] = field(default_factory=dict)


class PersistenceCoordinator:
    """Pushes node state to, and pulls it from, a BackingStore.

    Removals are remembered until the next flush or sync that covers
    them, so the store forgets removed subtrees.
    """

    def __init__(self, store: BackingStore, lock: threading.RLock):
        """Initialize the coordinator.

        Args:
            store: Durable medium for both scopes
            lock: The owning tree's lock
        """
        self.store = store
        self._lock = lock
        self._pending_removals: Set[Tuple[Scope, str]] = set()
        self._adapter = PreferenceAdapter()

    def record_removal(self, scope: Scope, absolute_path: str) -> None:
        """Remember that a subtree was removed. Caller holds the tree lock."""
        self._pending_removals.add((scope, absolute_path))

    def pending_removals(self, scope: Scope) -> List[str]:
        with self._lock:
            return sorted(path for (s, path) in self._pending_removals if s is scope)

    def _take_removals(self, scope: Scope, under: str) -> List[str]:
        # Caller holds the tree lock. Pending removals of ancestors are
        # taken too; nothing is read or written beneath a stale image.
        taken = sorted(
            path for (s, path) in self._pending_removals
            if s is scope and (is_within(path, under) or is_within(under, path))
        )
        for path in taken:
            self._pending_removals.discard((scope, path))
        return taken

    def _apply_removals(self, scope: Scope, paths: List[str]) -> None:
        for index, path in enumerate(paths):
            try:
                self.store.remove_node(path, scope)
            except BackingStoreError:
                # Keep what was not applied for the next attempt
                with self._lock:
                    self._pending_removals.update((scope, p) for p in paths[index:])
                raise
            logger.debug("Removed %s:%s from backing store", scope.value, path)

    def _snapshot(self, node) -> List[Tuple[str, Dict[str, str]]]:
        # Caller holds the tree lock; ancestors come before descendants
        traverser = BreadthFirstTraverser(self._adapter)
        return [
            (descendant.absolute_path(), dict(descendant.state.values))
            for descendant, _ in traverser.traverse(node)
        ]

    def flush(self, node) -> None:
        """Make a node's subtree durable.

        For a removed node, only its pending removal is pushed.

        Raises:
            BackingStoreError: If the store fails
        """
        scope = node.scope
        with self._lock:
            path = node.absolute_path()
            removals = self._take_removals(scope, path)
            snapshot = [] if node.is_removed() else self._snapshot(node)

        self._apply_removals(scope, removals)
        for node_path, values in snapshot:
            self.store.write_node(node_path, scope, values)
        logger.debug("Flushed %s:%s (%d node(s), %d removal(s))",
                     scope.value, path, len(snapshot), len(removals))

    def _pull(self, scope: Scope, path: str) -> StoredNode:
        values, child_names = self.store.read_node(path, scope)
        stored = StoredNode(values)
        for name in child_names:
            try:
                validate_name(name)
            except (NullInputError, InvalidArgumentError) as exc:
                logger.warning("Skipping invalid node name %r under %s: %s", name, path, exc)
                continue
            stored.children[name] = self._pull(scope, join_path(path, name))
        return stored

    def _merge(self, node, stored: StoredNode) -> None:
        # Caller holds the tree lock; store values win over local ones
        state = node.state
        state.values.update(stored.values)
        for name, child in stored.children.items():
            self._merge(node._child(name, create=True), child)

    def sync(self, node) -> None:
        """Reconcile a node's subtree with the backing store.

        Pending removals are pushed first, then the durable image is read
        and merged (store wins on conflicting keys, local-only keys and
        nodes are kept, missing nodes are created), and finally the merged
        subtree is flushed.

        Raises:
            InvalidStateError: If node has been removed
            BackingStoreError: If the store fails
        """
        scope = node.scope
        with self._lock:
            require_active(node, "sync")
            path = node.absolute_path()
            removals = self._take_removals(scope, path)

        self._apply_removals(scope, removals)
        stored = self._pull(scope, path)

        with self._lock:
            # The node may have been removed while the store was read
            require_active(node, "sync")
            self._merge(node, stored)
        logger.debug("Synced %s:%s", scope.value, path)
        self.flush(node)
