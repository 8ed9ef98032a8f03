# converter/markdown/treeprocessors/footnotes.py
"""
Footnote resolver: turns footnote links into anchor/cross-reference directives.

The HTML writer renders footnotes as links plus a definitions container:

    <p>Claim<a href="#user-content-fn1" id="user-content-fnref1"><sup>1</sup></a></p>
    <section class="footnotes">
      <ol>
        <li id="user-content-fn1"><p>Source.<a href="#user-content-fnref1">↩︎</a></p></li>
      </ol>
    </section>

Both the GFM spelling (user-content-fn-1) and pandoc's (user-content-fn1) are
understood. The storage format has no footnotes, so:

- a reference link becomes an anchor named footnote-ref-<id> followed by a link
  to the anchor footnote-<id>, labelled with the link text
- a back-reference link becomes a link to footnote-ref-<id> labelled "↩"
- the container becomes a "Footnotes" heading followed by each definition,
  preceded by an anchor named footnote-<id>

An id is only rewritten when the document has both a definition and a
reference for it. Anything else is passed through unchanged.

Reference and back-reference links are rewritten by the element mapper (they
can sit inside regions the mapper collapses); resolve_footnotes() then
rewrites the containers.
"""

import html
import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Set

from ..config import ID_PREFIX, get_storage_config
from ..directives import anchor_directive, anchor_link_directive
from ..nodes import Element, Node, Opaque, Root, has_class, iter_elements, text_content
from ..serializer import serialize_nodes

logger = logging.getLogger(__name__)

_PREFIX = re.escape(ID_PREFIX)
BACKREF_HREF_RE = re.compile(rf"^#{_PREFIX}fnref-?(?P<id>\S+)$")
REF_HREF_RE = re.compile(rf"^#{_PREFIX}fn-?(?!ref)(?P<id>\S+)$")
DEFINITION_ID_RE = re.compile(rf"^{_PREFIX}fn-?(?!ref)(?P<id>\S+)$")

BACKREF_LABEL = "↩"
BACKREF_TOOLTIP = "Back to reference"


@dataclass
class FootnoteIndex:
    """Footnote ids defined and referenced in one document."""

    definitions: Set[str] = field(default_factory=set)
    references: Set[str] = field(default_factory=set)

    def is_resolved(self, footnote_id: str) -> bool:
        return footnote_id in self.definitions and footnote_id in self.references


def is_footnote_container(element: Element) -> bool:
    """GFM marks the container with data-footnotes, pandoc with class/role."""
    return (
        "data-footnotes" in element.attributes
        or has_class(element, "footnotes")
        or element.attributes.get("role") == "doc-endnotes"
    )


def definition_id(element: Element) -> Optional[str]:
    if element.tag != "li":
        return None
    value = element.attributes.get("id")
    match = DEFINITION_ID_RE.match(value) if isinstance(value, str) else None
    return match.group("id") if match else None


def build_footnote_index(root: Root) -> FootnoteIndex:
    index = FootnoteIndex()
    for element in iter_elements(root):
        if is_footnote_container(element):
            for item in iter_elements(element):
                footnote_id = definition_id(item)
                if footnote_id is not None:
                    index.definitions.add(footnote_id)
        elif element.tag == "a":
            href = element.attributes.get("href")
            match = REF_HREF_RE.match(href) if isinstance(href, str) else None
            if match:
                index.references.add(match.group("id"))
    return index


def footnote_index(root: Root, context: dict) -> FootnoteIndex:
    """Return the document's FootnoteIndex, building and caching it on first use."""
    index = context.get("footnotes")
    if index is None:
        index = build_footnote_index(root)
        context["footnotes"] = index
        logger.debug(
            f"Indexed {len(index.definitions)} footnote definition(s) and "
            f"{len(index.references)} reference(s)"
        )
    return index


def rewrite_footnote_link(element: Element, index: FootnoteIndex) -> Optional[List[Node]]:
    """
    Return the replacement for a footnote (back-)reference link.

    Returns None when the element is not a footnote link or its id cannot be
    resolved; the caller keeps the element as it is.
    """
    href = element.attributes.get("href")
    if not isinstance(href, str):
        return None

    match = BACKREF_HREF_RE.match(href)
    if match:
        footnote_id = match.group("id")
        if not index.is_resolved(footnote_id):
            logger.debug(f"Leaving back-reference to unresolved footnote '{footnote_id}'")
            return None
        return [
            Opaque(
                anchor_link_directive(
                    BACKREF_LABEL, f"footnote-ref-{footnote_id}", tooltip=BACKREF_TOOLTIP
                )
            )
        ]

    match = REF_HREF_RE.match(href)
    if match:
        footnote_id = match.group("id")
        if not index.is_resolved(footnote_id):
            logger.debug(f"Leaving reference to unresolved footnote '{footnote_id}'")
            return None
        label = text_content(element).strip()
        return [
            Opaque(
                anchor_directive(f"footnote-ref-{footnote_id}")
                + anchor_link_directive(label, f"footnote-{footnote_id}")
            )
        ]

    return None


def render_footnote_section(
    container: Element, index: FootnoteIndex, heading: str, max_depth: Optional[int] = None
) -> str:
    parts = [f"<h2>{html.escape(heading, quote=False)}</h2>\n"]
    for item in iter_elements(container):
        footnote_id = definition_id(item)
        if footnote_id is None:
            continue
        if index.is_resolved(footnote_id):
            parts.append(anchor_directive(f"footnote-{footnote_id}"))
        else:
            logger.debug(f"Footnote '{footnote_id}' has no reference, emitting it without an anchor")
        parts.append(serialize_nodes(item.children, max_depth=max_depth).strip())
        parts.append("\n\n")
    return "".join(parts)


def _resolve(node: Node, index: FootnoteIndex, heading: str, max_depth: int) -> Node:
    if not isinstance(node, Element):
        return node
    if is_footnote_container(node):
        return Opaque(render_footnote_section(node, index, heading, max_depth))
    return Element(
        node.tag,
        dict(node.attributes),
        [_resolve(child, index, heading, max_depth) for child in node.children],
    )


def resolve_footnotes(root: Root, context: dict) -> Root:
    """
    Rewrite footnote containers into anchored definition blocks.

    Args:
        root: Document tree
        context: Conversion context (reads "footnotes" index and "config")

    Returns:
        New document tree
    """
    index = footnote_index(root, context)
    config = get_storage_config(context)
    heading = config["footnotes_heading"]
    max_depth = config["max_nesting_depth"]
    return Root([_resolve(child, index, heading, max_depth) for child in root.children])
