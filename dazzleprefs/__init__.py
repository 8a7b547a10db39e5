"""DazzlePrefs - Hierarchical Persistent Preference Store.

DazzlePrefs keeps preferences in two trees (user and system) of named
nodes, each node holding string key/value pairs, persisted through a
pluggable backing store and exchangeable as XML.

Quick start:
━━━━━━━━━━━━━━━━━━━━━━━━━━
    import dazzleprefs

    node = dazzleprefs.user_root().node("com/example/app")
    node.put_int("width", 640)
    node.flush()
━━━━━━━━━━━━━━━━━━━━━━━━━━
"""

__version__ = "0.1.0"

from ._common.config import (
    MAX_KEY_LENGTH,
    MAX_VALUE_LENGTH,
    MAX_NAME_LENGTH,
    Scope,
    BackendKind,
    StoreConfig,
)
from .errors import (
    PreferencesError,
    NullInputError,
    InvalidArgumentError,
    InvalidStateError,
    UnsupportedOperationError,
    InvalidFormatError,
    BackingStoreError,
)
from .backends import BackingStore, MemoryBackingStore, FileSystemBackingStore
from .node import PreferenceNode
from .tree import PreferenceTree
from .api import (
    configure,
    user_root,
    system_root,
    import_preferences,
    walk,
    subtree_paths,
)

__all__ = [
    "__version__",
    # Config
    "MAX_KEY_LENGTH",
    "MAX_VALUE_LENGTH",
    "MAX_NAME_LENGTH",
    "Scope",
    "BackendKind",
    "StoreConfig",
    # Errors
    "PreferencesError",
    "NullInputError",
    "InvalidArgumentError",
    "InvalidStateError",
    "UnsupportedOperationError",
    "InvalidFormatError",
    "BackingStoreError",
    # Stores
    "BackingStore",
    "MemoryBackingStore",
    "FileSystemBackingStore",
    # Tree
    "PreferenceNode",
    "PreferenceTree",
    # API
    "configure",
    "user_root",
    "system_root",
    "import_preferences",
    "walk",
    "subtree_paths",
]
