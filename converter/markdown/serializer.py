# converter/markdown/serializer.py
"""
Final serializer: turns the document tree back into a markup string.

Opaque nodes are emitted exactly as stored. Everything else is escaped and
quoted normally. Void elements are written self-closed (<br />) as the
storage format is XHTML.
"""

import html
import logging
import re
from typing import Iterable, Optional

from .config import DEFAULT_STORAGE_CONFIG
from .errors import check_depth
from .nodes import VOID_TAGS, Element, Node, Opaque, Root, Text

logger = logging.getLogger(__name__)

_BLANK_LINE_RUN = re.compile(r"\n\s*\n")
_EXCESS_NEWLINES = re.compile(r"\n{3,}")

# Text below these keeps its whitespace exactly
_PREFORMATTED_TAGS = frozenset({"pre", "code", "textarea"})


def serialize(node: Node, preformatted: bool = False, max_depth: Optional[int] = None) -> str:
    """
    Serialize node and everything below it.

    Raises:
        NestingDepthError: the tree is deeper than max_depth (defaults to
            the max_nesting_depth default)
    """
    return _serialize(node, preformatted, 0, _limit(max_depth))


def serialize_nodes(nodes: Iterable[Node], preformatted: bool = False, max_depth: Optional[int] = None) -> str:
    return _serialize_nodes(nodes, preformatted, 0, _limit(max_depth))


def serialize_element(element: Element, preformatted: bool = False, max_depth: Optional[int] = None) -> str:
    return _serialize_element(element, preformatted, 0, _limit(max_depth))


def _limit(max_depth):
    return DEFAULT_STORAGE_CONFIG["max_nesting_depth"] if max_depth is None else max_depth


def _serialize(node, preformatted, depth, max_depth):
    if isinstance(node, Opaque):
        return node.value
    if isinstance(node, Text):
        value = html.escape(node.value, quote=False)
        if preformatted:
            return value
        return _BLANK_LINE_RUN.sub("\n", value)
    if isinstance(node, Element):
        return _serialize_element(node, preformatted, depth, max_depth)
    if isinstance(node, Root):
        return _serialize_nodes(node.children, preformatted, depth, max_depth)
    raise TypeError(f"Cannot serialize {type(node).__name__}")


def _serialize_nodes(nodes, preformatted, depth, max_depth):
    parts = []
    for node in nodes:
        parts.append(_serialize(node, preformatted, depth, max_depth))
    return "".join(parts)


def _serialize_element(element, preformatted, depth, max_depth):
    check_depth(depth + 1, max_depth)
    tag = element.tag
    attrs = serialize_attributes(element.attributes)
    if tag in VOID_TAGS:
        return f"<{tag}{attrs} />"
    inner = _serialize_nodes(
        element.children, preformatted or tag in _PREFORMATTED_TAGS, depth + 1, max_depth
    )
    return f"<{tag}{attrs}>{inner}</{tag}>"


def serialize_attributes(attributes: dict) -> str:
    """
    Render attributes in insertion order.

    True renders as a bare attribute, False/None are omitted, lists are
    space-joined. Values of any other type are dropped rather than written
    out malformed.
    """
    parts = []
    for name, value in attributes.items():
        if value is True:
            parts.append(f" {name}")
        elif value is False or value is None:
            continue
        elif isinstance(value, str):
            parts.append(f' {name}="{html.escape(value)}"')
        elif isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value):
            parts.append(f' {name}="{html.escape(" ".join(value))}"')
        else:
            logger.debug(f"Dropping attribute '{name}' with unsupported value {value!r}")
    return "".join(parts)


def normalize_blank_lines(text: str) -> str:
    """Collapse runs of three or more newlines to a single blank line."""
    return _EXCESS_NEWLINES.sub("\n\n", text)
