"""Path parsing and validation for preference trees.

Paths are `/`-separated node names. A leading `/` makes the path absolute
(resolved from the root of the same tree); otherwise it is resolved
relative to the node it is passed to. The empty path names the node
itself and `/` names the root.
"""

from typing import NamedTuple, Tuple

from ._common.config import MAX_NAME_LENGTH
from .errors import NullInputError, InvalidArgumentError


SEPARATOR = "/"
ROOT_PATH = "/"


def is_utf8_encodable(text: str) -> bool:
    """Check that text holds no lone surrogates, so it can be written as UTF-8."""
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


class PathSpec(NamedTuple):
    """A parsed path: whether it is absolute and its segment names."""
    absolute: bool
    segments: Tuple[str, ...]


def parse_path(path: str) -> PathSpec:
    """Parse a path string into its segments.

    Args:
        path: Relative or absolute path

    Returns:
        PathSpec with the ordered segment names

    Raises:
        NullInputError: If path is None
        InvalidArgumentError: On consecutive or trailing slashes, or
            a segment longer than MAX_NAME_LENGTH
    """
    if path is None:
        raise NullInputError("path must not be None")
    if not isinstance(path, str):
        raise InvalidArgumentError(f"path must be a str, not {type(path).__name__}")

    if path == ROOT_PATH:
        return PathSpec(True, ())

    absolute = path.startswith(SEPARATOR)
    body = path[1:] if absolute else path
    if not body:
        return PathSpec(absolute, ())

    if body.endswith(SEPARATOR):
        raise InvalidArgumentError(f"Path ends with slash: {path!r}")

    segments = tuple(body.split(SEPARATOR))
    for segment in segments:
        if not segment:
            raise InvalidArgumentError(f"Consecutive slashes in path: {path!r}")
        if len(segment) > MAX_NAME_LENGTH:
            raise InvalidArgumentError(
                f"Node name {segment[:20]!r}... too long ({len(segment)} > {MAX_NAME_LENGTH})"
            )
        if not is_utf8_encodable(segment):
            raise InvalidArgumentError(f"Node name {segment[:20]!r} is not encodable as UTF-8")
    return PathSpec(absolute, segments)


def validate_name(name: str) -> str:
    """Validate a single node name read from a document or a store.

    Raises:
        NullInputError: If name is None
        InvalidArgumentError: If name is empty, too long or contains a slash
    """
    if name is None:
        raise NullInputError("node name must not be None")
    if not isinstance(name, str):
        raise InvalidArgumentError(f"node name must be a str, not {type(name).__name__}")
    if not name:
        raise InvalidArgumentError("node name must not be empty")
    if SEPARATOR in name:
        raise InvalidArgumentError(f"Node name {name!r} contains '/'")
    if len(name) > MAX_NAME_LENGTH:
        raise InvalidArgumentError(f"Node name too long ({len(name)} > {MAX_NAME_LENGTH})")
    if not is_utf8_encodable(name):
        raise InvalidArgumentError(f"Node name {name!r} is not encodable as UTF-8")
    return name


def join_path(parent_path: str, name: str) -> str:
    """Compose the absolute path of a child from its parent's absolute path."""
    if parent_path == ROOT_PATH:
        return ROOT_PATH + name
    return parent_path + SEPARATOR + name


def split_absolute(absolute_path: str) -> Tuple[str, ...]:
    """Split an absolute path into its names; the root yields ()."""
    return parse_path(absolute_path).segments


def parent_path(absolute_path: str) -> str:
    """Return the absolute path of the parent; the root is its own parent."""
    if absolute_path == ROOT_PATH:
        return ROOT_PATH
    head, _, _ = absolute_path.rpartition(SEPARATOR)
    return head or ROOT_PATH


def is_within(absolute_path: str, ancestor_path: str) -> bool:
    """Check if absolute_path equals ancestor_path or lies beneath it."""
    if ancestor_path == ROOT_PATH or absolute_path == ancestor_path:
        return True
    return absolute_path.startswith(ancestor_path + SEPARATOR)
