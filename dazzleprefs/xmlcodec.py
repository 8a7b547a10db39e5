"""XML interchange format for preference trees.

Export produces a byte-exact document (UTF-8, two-space indent, trailing
newline):

    <?xml version="1.0" encoding="UTF-8" standalone="no"?>
    <!DOCTYPE preferences SYSTEM "http://java.sun.com/dtd/preferences.dtd">
    <preferences EXTERNAL_XML_VERSION="1.0">
      <root type="user">
        <map>
          <entry key="a" value="value"/>
        </map>
        <node name="a">
          <map/>
        </node>
      </root>
    </preferences>

Import parses the same shape with xml.etree.ElementTree, validates the
whole document first and only then writes it into the tree of the
declared scope. The map document variant (a bare <map>) is the on-disk
format of FileSystemBackingStore.
"""

import io
import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Tuple
from xml.sax.saxutils import escape

from . import codec
from ._common.config import Scope
from .adapter import PreferenceAdapter
from .core.traverser import DepthFirstPreOrderTraverser
from .errors import (
    NullInputError,
    InvalidArgumentError,
    InvalidFormatError,
)
from .lifecycle import require_active
from .paths import validate_name

logger = logging.getLogger(__name__)

EXTERNAL_XML_VERSION = "1.0"
MAP_XML_VERSION = "1.0"
PREFS_DTD_URI = "http://java.sun.com/dtd/preferences.dtd"

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8" standalone="no"?>'
INDENT = "  "

_VERSION_RE = re.compile(r"([0-9]+)\.([0-9]+)", re.ASCII)

# Characters that must be escaped inside a double-quoted attribute
_ATTRIBUTE_ENTITIES = {
    '"': "&quot;",
    "\t": "&#9;",
    "\n": "&#10;",
    "\r": "&#13;",
}


def quote_attribute(value: str) -> str:
    """Escape a string for use inside a double-quoted XML attribute."""
    return escape(value, _ATTRIBUTE_ENTITIES)


def _entry_line(depth: int, key: str, value: str) -> str:
    return f'{INDENT * depth}<entry key="{quote_attribute(key)}" value="{quote_attribute(value)}"/>'


def _map_lines(depth: int, entries: List[Tuple[str, str]]) -> List[str]:
    if not entries:
        return [f"{INDENT * depth}<map/>"]
    lines = [f"{INDENT * depth}<map>"]
    lines.extend(_entry_line(depth + 1, key, value) for key, value in entries)
    lines.append(f"{INDENT * depth}</map>")
    return lines


def _write(stream, text: str) -> None:
    if isinstance(stream, io.TextIOBase):
        stream.write(text)
    else:
        stream.write(text.encode("utf-8"))


# Export

@dataclass
class _Frame:
    """One node element to emit: depth below <root>, name, own entries."""
    depth: int
    name: str
    entries: List[Tuple[str, str]]


def _render_preferences(scope: Scope, frames: Iterable[_Frame]) -> str:
    """Render pre-ordered frames as a preferences document.

    Depth 0 is the <root> element. Element indent is one level deeper
    than <preferences> for the root and one more per tree level.
    """
    lines = [
        XML_DECLARATION,
        f'<!DOCTYPE preferences SYSTEM "{PREFS_DTD_URI}">',
        f'<preferences EXTERNAL_XML_VERSION="{EXTERNAL_XML_VERSION}">',
    ]
    open_depths: List[int] = []

    def close_until(depth: int) -> None:
        while open_depths and open_depths[-1] >= depth:
            closed = open_depths.pop()
            tag = "root" if closed == 0 else "node"
            lines.append(f"{INDENT * (closed + 1)}</{tag}>")

    for frame in frames:
        close_until(frame.depth)
        indent = INDENT * (frame.depth + 1)
        if frame.depth == 0:
            lines.append(f'{indent}<root type="{scope.value}">')
        else:
            lines.append(f'{indent}<node name="{quote_attribute(frame.name)}">')
        lines.extend(_map_lines(frame.depth + 2, frame.entries))
        open_depths.append(frame.depth)

    close_until(0)
    lines.append("</preferences>")
    return "\n".join(lines) + "\n"


def _ancestor_frames(node) -> List[_Frame]:
    # Ancestors are emitted with empty maps so import recreates node at its own path
    adapter = PreferenceAdapter()
    return [
        _Frame(depth, ancestor.name(), [])
        for depth, ancestor in enumerate(adapter.get_ancestors(node))
    ]


def export_node(node, stream) -> None:
    """Export a node's own key/value pairs.

    Args:
        node: Active PreferenceNode
        stream: Binary stream (UTF-8 bytes written) or text stream

    Raises:
        InvalidStateError: If node has been removed
        NullInputError: If stream is None
    """
    with node.tree.lock:
        state = require_active(node, "export_node")
        if stream is None:
            raise NullInputError("stream must not be None")
        frames = _ancestor_frames(node)
        frames.append(_Frame(len(frames), node.name(), list(state.values.items())))
        document = _render_preferences(node.scope, frames)
    _write(stream, document)


def export_subtree(node, stream) -> None:
    """Export a node and all of its descendants, children ordered by name.

    Args:
        node: Active PreferenceNode
        stream: Binary stream (UTF-8 bytes written) or text stream

    Raises:
        InvalidStateError: If node has been removed
        NullInputError: If stream is None
    """
    with node.tree.lock:
        require_active(node, "export_subtree")
        if stream is None:
            raise NullInputError("stream must not be None")
        frames = _ancestor_frames(node)
        offset = len(frames)
        traverser = DepthFirstPreOrderTraverser(PreferenceAdapter())
        for descendant, depth in traverser.traverse(node):
            frames.append(_Frame(
                offset + depth,
                descendant.name(),
                list(descendant.state.values.items()),
            ))
        document = _render_preferences(node.scope, frames)
    _write(stream, document)


def export_map(values: Mapping[str, str], stream) -> None:
    """Write a bare map document holding values (used for on-disk storage)."""
    lines = [
        XML_DECLARATION,
        f'<!DOCTYPE map SYSTEM "{PREFS_DTD_URI}">',
    ]
    if values:
        lines.append(f'<map MAP_XML_VERSION="{MAP_XML_VERSION}">')
        lines.extend(_entry_line(1, key, value) for key, value in values.items())
        lines.append("</map>")
    else:
        lines.append(f'<map MAP_XML_VERSION="{MAP_XML_VERSION}"/>')
    _write(stream, "\n".join(lines) + "\n")


# Import

@dataclass
class ParsedNode:
    """A validated node element of an import document."""
    name: str
    entries: List[Tuple[str, str]] = field(default_factory=list)
    children: List['ParsedNode'] = field(default_factory=list)


def _read_document(stream) -> ET.Element:
    if stream is None:
        raise NullInputError("stream must not be None")
    data = stream.read()
    if isinstance(data, str):
        data = data.encode("utf-8")
    if not data or not data.strip():
        raise InvalidFormatError("Document is empty")
    try:
        return ET.fromstring(data)
    except ET.ParseError as exc:
        raise InvalidFormatError(f"Malformed preferences document: {exc}") from exc


def _check_version(element: ET.Element, attribute: str, supported: str) -> None:
    version = element.get(attribute)
    if version is None:
        raise InvalidFormatError(f"Missing {attribute} attribute")
    match = _VERSION_RE.fullmatch(version.strip())
    if match is None:
        raise InvalidFormatError(f"Unrecognized {attribute}: {version!r}")
    found = (int(match.group(1)), int(match.group(2)))
    limit = tuple(int(part) for part in supported.split("."))
    if found > limit:
        raise InvalidFormatError(
            f"Preferences document version {version} is not supported (max {supported})"
        )


def _parse_entries(map_element: ET.Element) -> List[Tuple[str, str]]:
    entries = []
    for entry in map_element:
        if entry.tag != "entry":
            raise InvalidFormatError(f"Unexpected <{entry.tag}> inside <map>")
        key = entry.get("key")
        value = entry.get("value")
        if key is None or value is None:
            raise InvalidFormatError("<entry> requires both key and value attributes")
        try:
            codec.check_key(key)
            codec.check_value(value)
        except (NullInputError, InvalidArgumentError) as exc:
            raise InvalidFormatError(f"Invalid entry {key[:20]!r}: {exc}") from exc
        entries.append((key, value))
    return entries


def _parse_node(element: ET.Element, name: str) -> ParsedNode:
    children = list(element)
    if not children or children[0].tag != "map":
        raise InvalidFormatError(f"<{element.tag}> must start with a <map> element")
    parsed = ParsedNode(name, _parse_entries(children[0]))
    for child in children[1:]:
        if child.tag != "node":
            raise InvalidFormatError(f"Unexpected <{child.tag}> inside <{element.tag}>")
        child_name = child.get("name")
        try:
            validate_name(child_name)
        except (NullInputError, InvalidArgumentError) as exc:
            raise InvalidFormatError(f"Invalid node name: {exc}") from exc
        parsed.children.append(_parse_node(child, child_name))
    return parsed


def parse_preferences(stream) -> Tuple[Scope, ParsedNode]:
    """Parse and validate a preferences document without touching any tree.

    Returns:
        (scope, parsed root)

    Raises:
        NullInputError: If stream is None
        InvalidFormatError: On any structural, version or content violation
    """
    document = _read_document(stream)
    if document.tag != "preferences":
        raise InvalidFormatError(f"Expected <preferences> document, found <{document.tag}>")
    _check_version(document, "EXTERNAL_XML_VERSION", EXTERNAL_XML_VERSION)

    roots = list(document)
    if len(roots) != 1 or roots[0].tag != "root":
        raise InvalidFormatError("<preferences> must contain exactly one <root> element")
    root = roots[0]
    root_type = root.get("type")
    try:
        scope = Scope(root_type)
    except ValueError:
        raise InvalidFormatError(f"Unknown root type: {root_type!r}") from None
    return scope, _parse_node(root, "")


def _apply(node, parsed: ParsedNode) -> Tuple[int, int]:
    # Caller holds the tree lock; node is active
    state = node.state
    for key, value in parsed.entries:
        state.values[key] = value
    nodes, entries = 1, len(parsed.entries)
    for child in parsed.children:
        child_nodes, child_entries = _apply(node._child(child.name, create=True), child)
        nodes += child_nodes
        entries += child_entries
    return nodes, entries


def import_preferences(tree, stream) -> Scope:
    """Import a preferences document into the tree of its declared scope.

    Existing keys are overwritten and missing nodes created; nothing is
    removed. Nothing is persisted: call sync() or flush() afterwards.

    Args:
        tree: PreferenceTree to import into
        stream: Binary or text stream holding the document

    Returns:
        The scope the document was imported into

    Raises:
        NullInputError: If stream is None
        InvalidFormatError: If the document is empty, malformed, truncated,
            of an unsupported version or of an unknown root type
    """
    scope, parsed = parse_preferences(stream)
    with tree.lock:
        nodes, entries = _apply(tree.root(scope), parsed)
    logger.info("Imported %d node(s), %d entr%s into %s tree",
                nodes, entries, "y" if entries == 1 else "ies", scope.value)
    return scope


def import_map(stream) -> Dict[str, str]:
    """Parse a bare map document into an insertion-ordered dict.

    Raises:
        InvalidFormatError: If the document is not a valid map document
    """
    document = _read_document(stream)
    if document.tag != "map":
        raise InvalidFormatError(f"Expected <map> document, found <{document.tag}>")
    _check_version(document, "MAP_XML_VERSION", MAP_XML_VERSION)
    return dict(_parse_entries(document))
