"""Node lifecycle: the Active -> Removed state machine.

A node's data lives in an ActiveState. Removal swaps it for a
RemovedState that only remembers where the node used to be, so the data
of a removed node is unreachable by construction. require_active() is the
single gate every data-touching operation goes through.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .adapter import PreferenceAdapter
from .core.traverser import DepthFirstPostOrderTraverser
from .errors import InvalidStateError, UnsupportedOperationError

logger = logging.getLogger(__name__)


# Operations a removed node still answers. Everything else raises InvalidStateError.
# node_exists is only allowed with the empty path (and then returns False).
ALLOWED_WHEN_REMOVED = frozenset({
    "name",
    "absolute_path",
    "is_user_node",
    "is_removed",
    "node_exists",
    "flush",
})


@dataclass
class ActiveState:
    """Data held by a live node."""
    parent: Optional[Any]
    children: Dict[str, Any] = field(default_factory=dict)
    values: Dict[str, str] = field(default_factory=dict)

    active = True


@dataclass(frozen=True)
class RemovedState:
    """What a removed node remembers: its absolute path at removal time."""
    absolute_path: str

    active = False


def require_active(node, operation: str) -> ActiveState:
    """Return the node's ActiveState or raise InvalidStateError.

    Args:
        node: PreferenceNode being operated on
        operation: Name of the operation, for the error message

    Raises:
        InvalidStateError: If the node has been removed
    """
    state = node.state
    if not state.active:
        raise InvalidStateError(
            f"{operation}() not allowed: node {state.absolute_path!r} has been removed"
        )
    return state


def remove_subtree(node) -> str:
    """Remove node and every descendant, then detach it from its parent.

    Must be called with the tree lock held. Descendants are retired
    children-first so each one can still compute its path from live
    ancestors.

    Args:
        node: Active, non-root PreferenceNode

    Returns:
        The absolute path the node had

    Raises:
        UnsupportedOperationError: If node is a root
        InvalidStateError: If node was already removed
    """
    state = require_active(node, "remove_node")
    if state.parent is None:
        raise UnsupportedOperationError("Can't remove the root node")

    parent_state = require_active(state.parent, "remove_node")
    path = node.absolute_path()

    traverser = DepthFirstPostOrderTraverser(PreferenceAdapter())
    retired = 0
    for descendant, _ in traverser.traverse(node):
        descendant._retire(RemovedState(descendant.absolute_path()))
        retired += 1

    del parent_state.children[node.name()]
    logger.debug("Removed %s (%d node(s))", path, retired)
    return path
