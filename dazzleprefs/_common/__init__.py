"""Common components shared by every DazzlePrefs module.

This internal package contains pure configuration and constants. It
should NOT be imported directly by users.

Important: This package must NEVER import from the node, tree or backend
modules at import time to avoid circular dependencies.
"""

from .config import (
    MAX_KEY_LENGTH,
    MAX_VALUE_LENGTH,
    MAX_NAME_LENGTH,
    Scope,
    BackendKind,
    StoreConfig,
)

__all__ = [
    'MAX_KEY_LENGTH',
    'MAX_VALUE_LENGTH',
    'MAX_NAME_LENGTH',
    'Scope',
    'BackendKind',
    'StoreConfig',
]
