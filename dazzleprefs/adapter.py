"""Preference tree adapter for DazzlePrefs.

This adapter lets the generic traversers walk live preference nodes.
It reads node state directly and takes no locks; callers walk the tree
while holding the tree lock.
"""

from typing import Iterator, Optional
from .core.adapter import TreeAdapter


class PreferenceAdapter(TreeAdapter):
    """Adapter for preference node traversal.

    Children are yielded ordered by name. Removed nodes have neither
    children nor a parent.
    """

    def get_children(self, node) -> Iterator:
        """Get live child nodes, sorted by name."""
        state = node.state
        if not state.active:
            return
        for name in sorted(state.children):
            yield state.children[name]

    def get_parent(self, node) -> Optional[object]:
        """Get the owning node, or None for a root or a removed node."""
        state = node.state
        if not state.active:
            return None
        return state.parent
