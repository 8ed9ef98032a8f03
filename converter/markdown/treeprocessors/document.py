# converter/markdown/treeprocessors/document.py
"""
Treeprocessor that strips document-level wrappers.

The storage format is a body fragment: <html> and <body> wrappers (present
when raw HTML in the source carries them) are replaced by their children,
<head> is dropped, and XML namespace declarations are removed from every
element.
"""

from typing import List

from ..nodes import Element, Node, Root

_UNWRAP_TAGS = frozenset({"html", "body"})
_DROP_TAGS = frozenset({"head"})
_NAMESPACE_ATTRIBUTES = frozenset({"xmlns", "xmlns:ac", "xmlns:ri"})


def _unwrap(node: Node) -> List[Node]:
    if not isinstance(node, Element):
        return [node]
    if node.tag in _DROP_TAGS:
        return []

    children = [new for child in node.children for new in _unwrap(child)]
    if node.tag in _UNWRAP_TAGS:
        return children

    attributes = {
        name: value for name, value in node.attributes.items() if name not in _NAMESPACE_ATTRIBUTES
    }
    return [Element(node.tag, attributes, children)]


def unwrap_document(root: Root, context: dict) -> Root:
    """
    Remove html/head/body wrappers and namespace attributes.

    Args:
        root: Document tree
        context: Context dictionary (unused but required for treeprocessor signature)

    Returns:
        New document tree
    """
    return Root([new for child in root.children for new in _unwrap(child)])
