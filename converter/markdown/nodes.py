# converter/markdown/nodes.py
"""
Document tree used by every conversion pass.

The tree is a closed set of four node types:

    Root      the document, owns its children
    Element   a tagged element with attributes and children
    Text      character data, escaped by the serializer
    Opaque    an already-final string, emitted verbatim and never re-entered

Attribute values (AttrValue) are one of:
    True            bare attribute
    False / None    omitted
    str             quoted value
    list[str]       space-joined value (class-like attributes)

Passes build new trees instead of mutating the ones they are given.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Union

AttrValue = Union[bool, None, str, List[str]]

VOID_TAGS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)


@dataclass
class Root:
    children: List["Node"] = field(default_factory=list)


@dataclass
class Element:
    tag: str
    attributes: Dict[str, AttrValue] = field(default_factory=dict)
    children: List["Node"] = field(default_factory=list)


@dataclass
class Text:
    value: str


@dataclass(frozen=True)
class Opaque:
    value: str


Node = Union[Root, Element, Text, Opaque]


def is_element(node: Node, *tags: str) -> bool:
    """Return True if node is an Element, optionally restricted to the given tags."""
    if not isinstance(node, Element):
        return False
    return not tags or node.tag in tags


def class_list(element: Element) -> List[str]:
    """Return the element's classes as a list, whatever form the attribute is stored in."""
    classes = element.attributes.get("class")
    if isinstance(classes, str):
        return classes.split()
    if isinstance(classes, list):
        return list(classes)
    return []


def has_class(element: Element, name: str) -> bool:
    return name in class_list(element)


def text_content(node: Node) -> str:
    """
    Concatenate the Text values below node.

    Opaque nodes contribute nothing: their value belongs to the serializer.
    """
    if isinstance(node, Text):
        return node.value
    if isinstance(node, (Root, Element)):
        return "".join(text_content(child) for child in node.children)
    return ""


def is_blank(node: Node) -> bool:
    """True for whitespace-only Text nodes (inter-element formatting)."""
    return isinstance(node, Text) and not node.value.strip()


def sole_text(node: Node) -> Optional[str]:
    """
    Return the stripped text of a node that holds nothing but text.

    Matches a bare Text node, or an Element whose only child is a Text node
    (the shape a paragraph containing a single line takes).
    """
    if isinstance(node, Text):
        return node.value.strip()
    if isinstance(node, Element) and len(node.children) == 1:
        child = node.children[0]
        if isinstance(child, Text):
            return child.value.strip()
    return None


def iter_elements(node: Node) -> Iterator[Element]:
    """Depth-first walk over the Elements below (and including) node."""
    if isinstance(node, Element):
        yield node
    if isinstance(node, (Root, Element)):
        for child in node.children:
            yield from iter_elements(child)


def tree_depth(node: Node) -> int:
    """
    Deepest Element nesting below node, counted without recursion.

    A Root holding one paragraph has depth 1.
    """
    deepest = 0
    stack = [(node, 0)]
    while stack:
        current, depth = stack.pop()
        if isinstance(current, Element):
            depth += 1
            deepest = max(deepest, depth)
        if isinstance(current, (Root, Element)):
            stack.extend((child, depth) for child in current.children)
    return deepest
