# converter/markdown/tree_builder.py
"""
Builds the document tree from markdown source.

Markdown is rendered to HTML5 with pypandoc (GFM reader, tables, footnotes,
raw HTML passthrough), the HTML is parsed with BeautifulSoup and the soup is
converted into the pipeline's own node types (see nodes.py).

Raw HTML written in the markdown source (for example <details> sections)
comes through as ordinary elements, so later passes can restructure it.
"""

import logging

import pypandoc
from bs4 import BeautifulSoup, CData, Comment, Declaration, Doctype, NavigableString, ProcessingInstruction, Tag

from .config import get_pandoc_config, get_storage_config
from .errors import MarkdownParseError, check_depth
from .nodes import Element, Opaque, Root, Text

logger = logging.getLogger(__name__)

_SKIPPED_STRINGS = (Doctype, Declaration, ProcessingInstruction)


def markdown_to_html(text: str) -> str:
    """
    Render markdown to an HTML fragment with pandoc.

    Raises:
        MarkdownParseError: pandoc failed or is not installed
    """
    pandoc_config = get_pandoc_config()
    try:
        return pypandoc.convert_text(
            text,
            to=pandoc_config["to"],
            format=pandoc_config["format"],
            extra_args=pandoc_config["extra_args"],
            filters=pandoc_config.get("filters", []),
        )
    except (RuntimeError, OSError) as e:
        logger.error(f"Pandoc could not convert markdown: {e}")
        raise MarkdownParseError(f"Could not parse markdown: {e}") from e


def html_to_tree(html: str, context=None) -> Root:
    """Parse an HTML fragment into a Root node."""
    max_depth = get_storage_config(context)["max_nesting_depth"]
    soup = BeautifulSoup(html, "html.parser")
    return Root(_convert_children(soup, 1, max_depth))


def parse_markdown(text: str, context=None) -> Root:
    """Markdown source to document tree."""
    html = markdown_to_html(text)
    logger.debug(f"Pandoc produced {len(html)} characters of HTML")
    return html_to_tree(html, context)


def _convert_children(tag, depth, max_depth):
    check_depth(depth, max_depth)
    children = []
    for child in tag.children:
        node = _convert(child, depth, max_depth)
        if node is not None:
            children.append(node)
    return children


def _convert(item, depth, max_depth):
    if isinstance(item, Tag):
        attributes = {}
        for name, value in item.attrs.items():
            # bs4 hands back multi-valued attributes (class, rel, ...) as lists
            attributes[name] = list(value) if isinstance(value, list) else value
        return Element(item.name, attributes, _convert_children(item, depth + 1, max_depth))
    if isinstance(item, Comment):
        return Opaque(f"<!--{item}-->")
    if isinstance(item, CData):
        return Opaque(f"<![CDATA[{item}]]>")
    if isinstance(item, _SKIPPED_STRINGS):
        return None
    if isinstance(item, NavigableString):
        return Text(str(item))
    return None
