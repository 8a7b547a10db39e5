"""In-memory backing store.

Holds the durable image in a process-local dictionary. Two trees built on
the same MemoryBackingStore instance behave like two process instances
sharing one store, which is what flush/sync are about.
"""

import threading
from typing import Dict, List, Mapping, Tuple

from .._common.config import Scope
from ..paths import ROOT_PATH, is_within, parent_path, split_absolute
from .base import BackingStore


class MemoryBackingStore(BackingStore):
    """Backing store kept in a dict keyed by (scope, absolute path)."""

    def __init__(self):
        self._nodes: Dict[Tuple[Scope, str], Dict[str, str]] = {}
        self._lock = threading.Lock()

    def read_node(self, absolute_path: str, scope: Scope) -> Tuple[Dict[str, str], List[str]]:
        with self._lock:
            values = dict(self._nodes.get((scope, absolute_path), {}))
            children = sorted(
                split_absolute(path)[-1]
                for (node_scope, path) in self._nodes
                if node_scope is scope
                and path != ROOT_PATH
                and parent_path(path) == absolute_path
            )
        return values, children

    def write_node(self, absolute_path: str, scope: Scope, values: Mapping[str, str]) -> None:
        with self._lock:
            self._nodes[(scope, absolute_path)] = dict(values)
            ancestor = absolute_path
            while ancestor != ROOT_PATH:
                ancestor = parent_path(ancestor)
                self._nodes.setdefault((scope, ancestor), {})

    def remove_node(self, absolute_path: str, scope: Scope) -> None:
        with self._lock:
            doomed = [
                key for key in self._nodes
                if key[0] is scope and is_within(key[1], absolute_path)
            ]
            for key in doomed:
                del self._nodes[key]

    def paths(self, scope: Scope) -> List[str]:
        """Return every stored absolute path of a scope, sorted."""
        with self._lock:
            return sorted(path for (node_scope, path) in self._nodes if node_scope is scope)

    def __repr__(self) -> str:
        return f"MemoryBackingStore(nodes={len(self._nodes)})"
