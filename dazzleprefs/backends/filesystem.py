"""File system backing store for DazzlePrefs.

Each node is a directory under `<base_dir>/<scope>/`; its values live in
a `prefs.xml` map document inside that directory, and its children are
its subdirectories. Node names made only of lowercase ASCII letters,
digits and `-` are stored as-is; any other name is stored as `_` followed
by its Base32 encoding. Both forms are single-case, so sibling names that
differ only in case stay apart on case-insensitive file systems.
"""

import base64
import binascii
import logging
import os
import re
import shutil
import tempfile
import threading
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple, Union

from .._common.config import Scope
from ..errors import BackingStoreError, InvalidFormatError
from ..paths import split_absolute
from .. import xmlcodec
from .base import BackingStore

logger = logging.getLogger(__name__)

PREFS_FILE = "prefs.xml"
ENCODED_PREFIX = "_"

_PLAIN_NAME_RE = re.compile(r"[a-z0-9-]+", re.ASCII)


def encode_dir_name(name: str) -> str:
    """Map a node name to the directory name that stores it."""
    if _PLAIN_NAME_RE.fullmatch(name):
        return name
    encoded = base64.b32encode(name.encode("utf-8")).decode("ascii")
    return ENCODED_PREFIX + encoded.rstrip("=")


def decode_dir_name(dir_name: str) -> Optional[str]:
    """Map a directory name back to its node name; None if it is not one of ours."""
    if _PLAIN_NAME_RE.fullmatch(dir_name):
        return dir_name
    if not dir_name.startswith(ENCODED_PREFIX):
        return None
    encoded = dir_name[len(ENCODED_PREFIX):]
    padded = encoded + "=" * (-len(encoded) % 8)
    try:
        return base64.b32decode(padded.encode("ascii"), casefold=True).decode("utf-8")
    except (binascii.Error, UnicodeError, ValueError):
        return None


class FileSystemBackingStore(BackingStore):
    """Backing store that keeps one directory per node.

    Writes are atomic per node: the map document is written to a
    temporary file in the node directory and renamed over prefs.xml.
    """

    def __init__(self, base_dir: Union[str, Path]):
        """Initialize the store.

        Args:
            base_dir: Directory holding the user/ and system/ images.
                Created on first write.
        """
        self.base_dir = Path(base_dir)
        self._lock = threading.Lock()

    def node_dir(self, absolute_path: str, scope: Scope) -> Path:
        """Return the directory that stores the node at absolute_path."""
        directory = self.base_dir / scope.value
        for name in split_absolute(absolute_path):
            directory = directory / encode_dir_name(name)
        return directory

    def read_node(self, absolute_path: str, scope: Scope) -> Tuple[Dict[str, str], List[str]]:
        directory = self.node_dir(absolute_path, scope)
        prefs_file = directory / PREFS_FILE
        with self._lock:
            try:
                if not directory.is_dir():
                    return {}, []
                values = {}
                if prefs_file.is_file():
                    with prefs_file.open("rb") as fh:
                        values = xmlcodec.import_map(fh)
                children = []
                for entry in directory.iterdir():
                    if not entry.is_dir():
                        continue
                    name = decode_dir_name(entry.name)
                    if name is None:
                        logger.warning("Ignoring foreign directory %s", entry)
                        continue
                    children.append(name)
            except OSError as exc:
                logger.error("Failed to read %s: %s", directory, exc)
                raise BackingStoreError(f"Cannot read preferences at {directory}: {exc}") from exc
            except InvalidFormatError as exc:
                logger.error("Corrupt preferences file %s: %s", prefs_file, exc)
                raise BackingStoreError(f"Corrupt preferences file {prefs_file}: {exc}") from exc
        return values, sorted(children)

    def write_node(self, absolute_path: str, scope: Scope, values: Mapping[str, str]) -> None:
        directory = self.node_dir(absolute_path, scope)
        with self._lock:
            tmp_name = None
            try:
                directory.mkdir(parents=True, exist_ok=True)
                with tempfile.NamedTemporaryFile(
                        "wb", dir=directory, prefix=".prefs-", suffix=".tmp", delete=False) as fh:
                    tmp_name = fh.name
                    xmlcodec.export_map(values, fh)
                os.replace(tmp_name, directory / PREFS_FILE)
                tmp_name = None
            except OSError as exc:
                logger.error("Failed to write %s: %s", directory, exc)
                raise BackingStoreError(f"Cannot write preferences at {directory}: {exc}") from exc
            finally:
                if tmp_name is not None and os.path.exists(tmp_name):
                    os.unlink(tmp_name)

    def remove_node(self, absolute_path: str, scope: Scope) -> None:
        directory = self.node_dir(absolute_path, scope)
        with self._lock:
            try:
                if directory.is_dir():
                    shutil.rmtree(directory)
            except OSError as exc:
                logger.error("Failed to remove %s: %s", directory, exc)
                raise BackingStoreError(f"Cannot remove preferences at {directory}: {exc}") from exc

    def __repr__(self) -> str:
        return f"FileSystemBackingStore(base_dir={str(self.base_dir)!r})"
