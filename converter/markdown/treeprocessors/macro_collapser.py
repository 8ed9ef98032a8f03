# converter/markdown/treeprocessors/macro_collapser.py
"""
Macro region collapser: folds each block directive region into one Opaque node.

Block directives do not line up with anything the markup parser knows about.
After isolation the open token is a sibling of the content it wraps, while
the close token may be a later sibling or hide anywhere inside one (the
lazy-continuation line of a list item, say):

    {{#confluence-info title="Note"}}
    <p>Intro</p>
    <ul><li>one</li><li>two {{/confluence-info}}</li></ul>

becomes a single Opaque node

    {{#confluence-info title="Note"}}
    <p>Intro</p><ul><li>one</li><li>two</li></ul>
    {{/confluence-info}}

Pairing rules:

- siblings are scanned left to right at every nesting level
- an open token named X pairs with the first following close token named
  exactly X, found depth-first through the following siblings; close tokens
  with other names are ordinary content
- regions nested inside a span are collapsed before the span is serialized,
  so the innermost region always resolves first
- an open token without a close stays where it is, as text

Tokens may be vault placeholders; the vault is asked what they stand for
and the Opaque value carries the original open token verbatim.
"""

import logging
from typing import List, Optional, Tuple

from ..config import get_storage_config
from ..directives import close_token, find_close, parse_close, parse_open
from ..errors import check_depth
from ..nodes import Element, Node, Opaque, Root, Text, is_blank, is_element, sole_text
from ..serializer import serialize_nodes
from .isolator import INLINE_CONTAINERS

logger = logging.getLogger(__name__)


def _reveal(text: str, vault) -> str:
    return vault.restore(text) if vault is not None else text


def open_marker(node: Node, vault) -> Optional[Tuple[str, str]]:
    """
    Return (open token, name) if node is an isolated open directive.

    Isolated means a bare Text node, or a paragraph holding nothing but text,
    whose stripped text is exactly one open token.
    """
    if not (isinstance(node, Text) or is_element(node, *INLINE_CONTAINERS)):
        return None
    text = sole_text(node)
    if not text:
        return None
    head = _reveal(text, vault).strip()
    name = parse_open(head)
    return (head, name) if name else None


def _close_span(text: str, name: str, vault) -> Optional[Tuple[int, int]]:
    """Earliest span in text holding the close token for name, literal or placeholder."""
    spans = []
    literal = find_close(text, name)
    if literal is not None:
        spans.append(literal)
    if vault is not None:
        for match, original in vault.tokens_in(text):
            if parse_close(original) == name:
                spans.append(match.span())
                break
    return min(spans) if spans else None


def strip_close(node: Node, name: str, vault) -> Tuple[bool, Optional[Node]]:
    """
    Depth-first search for the close token of name, removing the first one found.

    Returns (found, replacement). A replacement of None means the node held
    nothing but the close token and should disappear. The node itself is
    never modified; the path to the token is rebuilt.
    """
    if isinstance(node, Text):
        span = _close_span(node.value, name, vault)
        if span is None:
            return False, node
        start, end = span
        value = (node.value[:start] + node.value[end:]).rstrip()
        return True, (Text(value) if value.strip() else None)

    if isinstance(node, Element):
        for index, child in enumerate(node.children):
            found, replacement = strip_close(child, name, vault)
            if not found:
                continue
            children = node.children[:index] + ([replacement] if replacement is not None else []) \
                + node.children[index + 1:]
            if node.tag in INLINE_CONTAINERS and all(is_blank(c) for c in children):
                return True, None
            return True, Element(node.tag, dict(node.attributes), children)

    return False, node


def _find_close(nodes: List[Node], start: int, name: str, vault):
    """Index of the sibling holding the close token, and that sibling with the token removed."""
    for index in range(start + 1, len(nodes)):
        found, replacement = strip_close(nodes[index], name, vault)
        if found:
            return index, replacement
    return None, None


def _collapse_level(nodes: List[Node], vault, depth: int, max_depth: int) -> List[Node]:
    check_depth(depth, max_depth)

    result: List[Node] = []
    index = 0
    while index < len(nodes):
        node = nodes[index]
        marker = open_marker(node, vault)
        if marker is None:
            result.append(node)
            index += 1
            continue

        head, name = marker
        close_index, remainder = _find_close(nodes, index, name, vault)
        if close_index is None:
            logger.debug(f"No closing directive for '{name}', leaving the open token as text")
            result.append(node)
            index += 1
            continue

        span = nodes[index + 1 : close_index]
        if remainder is not None:
            span.append(remainder)
        span = _collapse_level(span, vault, depth + 1, max_depth)

        body = serialize_nodes(span, max_depth=max_depth).strip()
        result.append(Opaque(f"{head}\n{body}\n{close_token(name)}"))
        logger.debug(f"Collapsed directive region '{name}'")
        index = close_index + 1

    return result


def _collapse_children(children: List[Node], vault, depth: int, max_depth: int) -> List[Node]:
    check_depth(depth, max_depth)
    nodes = []
    for child in children:
        if isinstance(child, Element):
            child = Element(
                child.tag,
                dict(child.attributes),
                _collapse_children(child.children, vault, depth + 1, max_depth),
            )
        nodes.append(child)
    return _collapse_level(nodes, vault, depth, max_depth)


def collapse_siblings(children: List[Node], context: dict) -> List[Node]:
    """
    Collapse every directive region in a sibling list and below it.

    Regions wholly inside a child are collapsed first; then regions spanning
    the siblings themselves.
    """
    max_depth = get_storage_config(context)["max_nesting_depth"]
    return _collapse_children(children, context.get("vault"), 0, max_depth)


def collapse_macro_regions(root: Root, context: dict) -> Root:
    """
    Replace each {{#name}} ... {{/name}} region with one Opaque node.

    Args:
        root: Document tree
        context: Conversion context (uses "vault" when present)

    Returns:
        New document tree
    """
    return Root(collapse_siblings(root.children, context))
