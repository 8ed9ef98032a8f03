# converter/markdown/treeprocessors/isolator.py
"""
Structural Isolator: lifts block directive tokens out of their paragraphs.

The parser wraps a line like {{#confluence-info}} in a <p>. Pairing open and
close tokens needs them to sit on sibling boundaries, not inside inline
containers, so a paragraph that holds nothing but block directive tokens is
replaced by bare Text markers, one per token, at the paragraph's position:

    <p>{{#confluence-info}}</p>   ->   {{#confluence-info}}

Paragraphs holding a stashed verbatim region (see
preprocessors/verbatim_regions.py) are lifted the same way so the region is
not wrapped in <p> in the output.

Tokens may already be vault placeholders at this point; the vault is asked
what they stand for.
"""

import logging
from typing import List, Optional

from ..directives import is_block_token, parse_close, parse_open
from ..nodes import Element, Node, Root, Text

logger = logging.getLogger(__name__)

# Inline containers a directive line can end up in
INLINE_CONTAINERS = frozenset({"p"})


def _is_stashed_region(text: str) -> bool:
    lines = text.strip().split("\n")
    if len(lines) < 2:
        return False
    name = parse_open(lines[0])
    return name is not None and parse_close(lines[-1]) == name


def marker_lines(element: Element, vault) -> Optional[List[str]]:
    """
    Return the stripped lines of an isolated paragraph, or None.

    A paragraph qualifies when its only child is text and every non-empty
    line of that text is a block directive token or a stashed region.
    """
    if element.tag not in INLINE_CONTAINERS or len(element.children) != 1:
        return None
    child = element.children[0]
    if not isinstance(child, Text):
        return None

    lines = [line.strip() for line in child.value.split("\n") if line.strip()]
    if not lines:
        return None
    for line in lines:
        revealed = vault.restore(line) if vault is not None else line
        if not (is_block_token(revealed) or _is_stashed_region(revealed)):
            return None
    return lines


def _isolate(node: Node, vault) -> List[Node]:
    if not isinstance(node, Element):
        return [node]

    lines = marker_lines(node, vault)
    if lines is not None:
        markers = []
        for line in lines:
            if markers:
                markers.append(Text("\n"))
            markers.append(Text(line))
        return markers

    children = [new for child in node.children for new in _isolate(child, vault)]
    return [Element(node.tag, dict(node.attributes), children)]


def isolate_directives(root: Root, context: dict) -> Root:
    """
    Replace directive-only paragraphs with block-level Text markers.

    Args:
        root: Document tree
        context: Conversion context (uses "vault" when present)

    Returns:
        New document tree
    """
    vault = context.get("vault")
    children = [new for child in root.children for new in _isolate(child, vault)]
    return Root(children)
