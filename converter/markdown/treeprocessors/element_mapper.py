# converter/markdown/treeprocessors/element_mapper.py
"""
Dialect element mapper: rewrites generic HTML elements into storage-format syntax.

Rules, keyed by tag:

    img         -> {{confluence-image src=... alt=...}}
    a           -> footnote links handed to the footnote resolver, others kept
    pre > code  -> {{#confluence-code language=... linenumbers=true}}...{{/confluence-code}}
    th, td      -> align attribute becomes a text-align style, th gets scope="col"
    details     -> {{#confluence-expand title=...}}...{{/confluence-expand}}
    div         -> pandoc's div.sourceCode wrapper around a code block is dropped

The tree is rebuilt bottom-up: an element's children are mapped before the
element itself, so nested <details> are already directives when their
ancestor is serialized. Elements without a rule are kept with their
attributes.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from ..config import get_storage_config
from ..directives import code_directive, expand_directive, image_directive
from ..errors import check_depth
from ..nodes import Element, Node, Opaque, Root, class_list, has_class, is_blank, is_element, text_content
from ..serializer import serialize_nodes
from .footnotes import FootnoteIndex, footnote_index, rewrite_footnote_link
from .macro_collapser import collapse_siblings

logger = logging.getLogger(__name__)

# Classes highlighters put on code blocks that are not a language name
_CODE_CLASS_NOISE = frozenset({"sourceCode", "numberSource", "numberLines", "hljs"})


@dataclass
class MappingState:
    context: dict
    config: dict
    footnotes: FootnoteIndex
    max_depth: int


Rule = Callable[[Element, MappingState], List[Node]]
ELEMENT_RULES: Dict[str, Rule] = {}


def rule(*tags: str):
    """Register a mapping rule for the given tags."""

    def register(func: Rule) -> Rule:
        for tag in tags:
            ELEMENT_RULES[tag] = func
        return func

    return register


@rule("img")
def map_image(element: Element, state: MappingState) -> List[Node]:
    src = element.attributes.get("src")
    if not isinstance(src, str) or not src:
        return [element]
    alt = element.attributes.get("alt")
    return [
        Opaque(
            image_directive(
                src,
                alt if isinstance(alt, str) else "",
                width=element.attributes.get("width"),
                height=element.attributes.get("height"),
            )
        )
    ]


@rule("a")
def map_link(element: Element, state: MappingState) -> List[Node]:
    replacement = rewrite_footnote_link(element, state.footnotes)
    return replacement if replacement is not None else [element]


def code_language(code: Element, pre: Element) -> Optional[str]:
    """Language of a code block: language-* first, then the first plain class."""
    classes = class_list(code) + class_list(pre)
    for name in classes:
        if name.startswith("language-") and len(name) > len("language-"):
            return name[len("language-"):]
    for name in classes:
        if name not in _CODE_CLASS_NOISE:
            return name
    return None


@rule("pre")
def map_code_block(element: Element, state: MappingState) -> List[Node]:
    content = [child for child in element.children if not is_blank(child)]
    if len(content) != 1 or not is_element(content[0], "code"):
        return [element]

    code = content[0]
    language = code_language(code, element) or state.config["code_default_language"]
    return [
        Opaque(
            code_directive(
                text_content(code),
                language,
                line_numbers=state.config["code_line_numbers"],
            )
        )
    ]


@rule("div")
def map_source_code_wrapper(element: Element, state: MappingState) -> List[Node]:
    if not has_class(element, "sourceCode"):
        return [element]
    content = [child for child in element.children if not is_blank(child)]
    if content and all(isinstance(child, Opaque) for child in content):
        return content
    return [element]


@rule("th", "td")
def map_table_cell(element: Element, state: MappingState) -> List[Node]:
    # element is the copy built by _map, so its attributes can be edited here
    align = element.attributes.pop("align", None)
    if isinstance(align, str) and align.strip():
        style = f"text-align: {align.strip()};"
        existing = element.attributes.get("style")
        if isinstance(existing, str) and existing.strip():
            style = f"{style} {existing.strip()}"
        element.attributes["style"] = style
    if element.tag == "th":
        element.attributes["scope"] = "col"
    return [element]


@rule("details")
def map_details(element: Element, state: MappingState) -> List[Node]:
    summary = next((child for child in element.children if is_element(child, "summary")), None)
    title = text_content(summary).strip() if summary is not None else ""

    body = [child for child in element.children if child is not summary]
    # Directive regions wholly inside the section are collapsed before it is flattened
    body = collapse_siblings(body, state.context)
    content = serialize_nodes(body, max_depth=state.max_depth).strip()

    return [Opaque(expand_directive(title or state.config["expand_default_title"], content))]


def _map(node: Node, state: MappingState, depth: int) -> List[Node]:
    if not isinstance(node, Element):
        return [node]
    check_depth(depth, state.max_depth)

    children = [new for child in node.children for new in _map(child, state, depth + 1)]
    element = Element(node.tag, dict(node.attributes), children)

    mapping_rule = ELEMENT_RULES.get(element.tag)
    if mapping_rule is None:
        return [element]
    return mapping_rule(element, state)


def map_elements(root: Root, context: dict) -> Root:
    """
    Rewrite generic elements into storage-format directives and conventions.

    Args:
        root: Document tree
        context: Conversion context (reads "config", caches "footnotes")

    Returns:
        New document tree
    """
    config = get_storage_config(context)
    state = MappingState(
        context=context,
        config=config,
        footnotes=footnote_index(root, context),
        max_depth=config["max_nesting_depth"],
    )
    return Root([new for child in root.children for new in _map(child, state, 1)])
