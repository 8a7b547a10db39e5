"""PreferenceNode - an addressable point in a preference tree.

A node holds an insertion-ordered map of string keys to string values
and owns its child nodes. Handles are shared, never snapshots: once a
node (or one of its ancestors) is removed, every handle to it sees the
removal.

Every operation takes the owning tree's lock. Validation happens before
any mutation, so a rejected call leaves the node unchanged.
"""

import logging
from typing import Any, Dict, List, Optional

from . import codec
from . import xmlcodec
from ._common.config import Scope
from .core.node import TreeNode
from .errors import NullInputError
from .lifecycle import ActiveState, RemovedState, require_active, remove_subtree
from .paths import ROOT_PATH, SEPARATOR, parse_path

logger = logging.getLogger(__name__)


class PreferenceNode(TreeNode):
    """A node in a user- or system-scoped preference tree.

    Nodes are created by PreferenceTree (roots) and by node() (everything
    else); do not instantiate directly.
    """

    def __init__(self, tree, scope: Scope, name: str, parent: Optional['PreferenceNode']):
        self._tree = tree
        self._scope = scope
        self._name = name
        self._state = ActiveState(parent=parent)

    @property
    def state(self):
        """The node's ActiveState or RemovedState."""
        return self._state

    @property
    def tree(self):
        return self._tree

    @property
    def scope(self) -> Scope:
        return self._scope

    # Identity - always allowed

    def name(self) -> str:
        """Return this node's name relative to its parent ("" for a root)."""
        return self._name

    def absolute_path(self) -> str:
        """Return the absolute path, joining ancestor names with '/'.

        A removed node answers with the path it had when removed.
        """
        with self._tree.lock:
            state = self._state
            if not state.active:
                return state.absolute_path
            names = []
            node = self
            while node._state.parent is not None:
                names.append(node._name)
                node = node._state.parent
            if not names:
                return ROOT_PATH
            return SEPARATOR + SEPARATOR.join(reversed(names))

    def is_user_node(self) -> bool:
        return self._scope is Scope.USER

    def is_removed(self) -> bool:
        return not self._state.active

    # Navigation

    def parent(self) -> Optional['PreferenceNode']:
        """Return the owning node, or None for a root."""
        with self._tree.lock:
            return require_active(self, "parent").parent

    def node(self, path: str) -> 'PreferenceNode':
        """Return the node at path, creating it and any missing ancestors.

        Args:
            path: Absolute path, or path relative to this node

        Raises:
            InvalidStateError: If this node has been removed
            NullInputError: If path is None
            InvalidArgumentError: If path is malformed
        """
        with self._tree.lock:
            require_active(self, "node")
            spec = parse_path(path)
            current = self._tree.root(self._scope) if spec.absolute else self
            for segment in spec.segments:
                current = current._child(segment, create=True)
            return current

    def node_exists(self, path: str) -> bool:
        """Check whether the node at path exists, without creating anything.

        On a removed node, only the empty path is allowed and answers False.
        """
        if path is None:
            raise NullInputError("path must not be None")
        with self._tree.lock:
            if path == "" and not self._state.active:
                return False
            require_active(self, "node_exists")
            spec = parse_path(path)
            current = self._tree.root(self._scope) if spec.absolute else self
            for segment in spec.segments:
                current = current._child(segment, create=False)
                if current is None:
                    return False
            return True

    def children_names(self) -> List[str]:
        """Return the names of the immediate children, sorted."""
        with self._tree.lock:
            return sorted(require_active(self, "children_names").children)

    def _child(self, name: str, create: bool) -> Optional['PreferenceNode']:
        # Caller holds the tree lock and has checked self is active
        children = self._state.children
        child = children.get(name)
        if child is None and create:
            child = PreferenceNode(self._tree, self._scope, name, self)
            children[name] = child
            logger.debug("Created node %s", child.absolute_path())
        return child

    def _retire(self, removed: RemovedState) -> None:
        # Only lifecycle.remove_subtree performs this transition
        self._state = removed

    # String values

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Return the value stored for key, or default if there is none."""
        codec.check_key(key)
        with self._tree.lock:
            return require_active(self, "get").values.get(key, default)

    def put(self, key: str, value: str) -> None:
        """Associate value with key in this node."""
        codec.check_key(key)
        codec.check_value(value)
        with self._tree.lock:
            require_active(self, "put").values[key] = value

    def remove(self, key: str) -> None:
        """Remove the value for key, if any."""
        codec.check_key(key)
        with self._tree.lock:
            require_active(self, "remove").values.pop(key, None)

    def keys(self) -> List[str]:
        """Return the keys of this node in first-insertion order."""
        with self._tree.lock:
            return list(require_active(self, "keys").values)

    def clear(self) -> None:
        """Remove every key/value pair of this node; children are untouched."""
        with self._tree.lock:
            require_active(self, "clear").values.clear()

    def items(self) -> List[tuple]:
        """Return (key, value) pairs in first-insertion order."""
        with self._tree.lock:
            return list(require_active(self, "items").values.items())

    # Typed values

    def put_int(self, key: str, value: int) -> None:
        self.put(key, codec.encode_int(value))

    def get_int(self, key: str, default: int) -> int:
        return codec.decode_int(self.get(key), default)

    def put_long(self, key: str, value: int) -> None:
        self.put(key, codec.encode_long(value))

    def get_long(self, key: str, default: int) -> int:
        return codec.decode_long(self.get(key), default)

    def put_float(self, key: str, value: float) -> None:
        self.put(key, codec.encode_float(value))

    def get_float(self, key: str, default: float) -> float:
        return codec.decode_float(self.get(key), default)

    def put_double(self, key: str, value: float) -> None:
        self.put(key, codec.encode_double(value))

    def get_double(self, key: str, default: float) -> float:
        return codec.decode_double(self.get(key), default)

    def put_boolean(self, key: str, value: bool) -> None:
        self.put(key, codec.encode_boolean(value))

    def get_boolean(self, key: str, default: bool) -> bool:
        return codec.decode_boolean(self.get(key), default)

    def put_byte_array(self, key: str, value: bytes) -> None:
        """Store binary data (at most codec.MAX_BYTES_LENGTH bytes) as Base64."""
        self.put(key, codec.encode_bytes(value))

    def get_byte_array(self, key: str, default: Optional[bytes]) -> Optional[bytes]:
        return codec.decode_bytes(self.get(key), default)

    # Lifecycle and persistence

    def remove_node(self) -> None:
        """Remove this node and all of its descendants.

        Raises:
            UnsupportedOperationError: If this is a root
            InvalidStateError: If this node was already removed
        """
        with self._tree.lock:
            path = remove_subtree(self)
            self._tree.coordinator.record_removal(self._scope, path)

    def flush(self) -> None:
        """Make this node's subtree (or its removal) durable."""
        self._tree.coordinator.flush(self)

    def sync(self) -> None:
        """Reconcile this node's subtree with the backing store."""
        self._tree.coordinator.sync(self)

    # Interchange

    def export_node(self, stream) -> None:
        """Write this node's own key/value pairs as an XML document."""
        xmlcodec.export_node(self, stream)

    def export_subtree(self, stream) -> None:
        """Write this node and all descendants as an XML document."""
        xmlcodec.export_subtree(self, stream)

    # TreeNode interface

    def identifier(self) -> str:
        return f"{self._scope.value}:{self.absolute_path()}"

    def is_leaf(self) -> bool:
        state = self._state
        return not state.active or not state.children

    def metadata(self) -> Dict[str, Any]:
        with self._tree.lock:
            state = self._state
            return {
                'name': self._name,
                'path': self.absolute_path(),
                'scope': self._scope.value,
                'removed': not state.active,
                'key_count': len(state.values) if state.active else 0,
                'child_count': len(state.children) if state.active else 0,
            }

    def __repr__(self) -> str:
        suffix = ", removed" if not self._state.active else ""
        return f"PreferenceNode({self._scope.value}:{self.absolute_path()!r}{suffix})"
