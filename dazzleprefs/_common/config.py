"""Configuration system for DazzlePrefs.

This module defines the fixed limits of the preference model, the two
scopes a tree is partitioned into, and how users choose where a tree's
durable image lives.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, List, Union


# Maximum length of string allowed as a key.
MAX_KEY_LENGTH = 80

# Maximum length of string allowed as a value.
MAX_VALUE_LENGTH = 8192

# Maximum length of a node name.
MAX_NAME_LENGTH = 80

# Environment variables read by StoreConfig.from_env()
ENV_BACKEND = "DAZZLEPREFS_BACKEND"
ENV_HOME = "DAZZLEPREFS_HOME"

DEFAULT_HOME = "~/.dazzleprefs"


class Scope(Enum):
    """Partition of the preference tree.

    Each scope has its own independent root and backing store image.
    The values are the literal `type` attribute used by the XML format.
    """
    USER = "user"
    SYSTEM = "system"


class BackendKind(Enum):
    """Which backing store medium holds the durable image."""
    MEMORY = "memory"          # Process-local, lost at exit
    FILESYSTEM = "filesystem"  # One directory per node under base_dir


@dataclass
class StoreConfig:
    """Complete configuration for a preference tree.

    This is the primary way users specify where preferences are persisted.
    PreferenceTree validates it and builds the backing store from it.
    """

    backend: BackendKind = BackendKind.FILESYSTEM
    base_dir: Path = field(default_factory=lambda: Path(DEFAULT_HOME).expanduser())

    # Convenience constructors for common configurations

    @classmethod
    def in_memory(cls) -> 'StoreConfig':
        """Create config for a process-local store.

        Returns:
            StoreConfig whose flush/sync never touch the disk
        """
        return cls(backend=BackendKind.MEMORY)

    @classmethod
    def on_disk(cls, base_dir: Union[str, Path]) -> 'StoreConfig':
        """Create config for a file system store rooted at base_dir.

        Args:
            base_dir: Directory that will hold the user/ and system/ images

        Returns:
            StoreConfig for a FileSystemBackingStore
        """
        return cls(backend=BackendKind.FILESYSTEM, base_dir=Path(base_dir).expanduser())

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> 'StoreConfig':
        """Create config from DAZZLEPREFS_* environment variables.

        DAZZLEPREFS_BACKEND selects `memory` or `filesystem` (default),
        DAZZLEPREFS_HOME overrides the base directory (default ~/.dazzleprefs).
        Unknown backend names are kept as-is and reported by validate().

        Args:
            environ: Mapping to read instead of os.environ

        Returns:
            StoreConfig built from the environment
        """
        environ = os.environ if environ is None else environ
        raw_backend = environ.get(ENV_BACKEND, BackendKind.FILESYSTEM.value).strip().lower()
        try:
            backend = BackendKind(raw_backend)
        except ValueError:
            backend = raw_backend
        home = environ.get(ENV_HOME) or DEFAULT_HOME
        return cls(backend=backend, base_dir=Path(home).expanduser())

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if not isinstance(self.backend, BackendKind):
            choices = ', '.join(kind.value for kind in BackendKind)
            errors.append(f"Unknown backend: {self.backend!r}. Choose from: {choices}")

        if self.backend == BackendKind.FILESYSTEM:
            if self.base_dir is None or str(self.base_dir) == "":
                errors.append("base_dir required when backend is filesystem")
            elif Path(self.base_dir).exists() and not Path(self.base_dir).is_dir():
                errors.append(f"base_dir is not a directory: {self.base_dir}")

        return errors

    def create_store(self):
        """Build the backing store described by this configuration."""
        # Imported here; the backends depend on this module
        from ..backends import MemoryBackingStore, FileSystemBackingStore

        if self.backend == BackendKind.MEMORY:
            return MemoryBackingStore()
        return FileSystemBackingStore(self.base_dir)
