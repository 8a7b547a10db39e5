"""Backing stores for DazzlePrefs.

Backing stores implement the BackingStore interface for different
durable media.
"""

from .base import BackingStore
from .memory import MemoryBackingStore
from .filesystem import FileSystemBackingStore

__all__ = [
    "BackingStore",
    "MemoryBackingStore",
    "FileSystemBackingStore",
]
