# converter/markdown/treeprocessors/protect.py
"""
Treeprocessor that moves directive text into the placeholder vault.

Directives written in the source are already placeholders by now (see
preprocessors/protect_source.py). This pass catches the ones that only
appear once the HTML is parsed, such as directives spelled with character
references in raw HTML, and directives inside attribute values.
"""

from typing import List

from ..nodes import Element, Node, Root, Text


def _protect_value(value, vault):
    if isinstance(value, str):
        return vault.protect(value)
    if isinstance(value, list):
        return [vault.protect(item) if isinstance(item, str) else item for item in value]
    return value


def _protect(node: Node, vault) -> Node:
    if isinstance(node, Text):
        return Text(vault.protect(node.value))
    if isinstance(node, Element):
        attributes = {name: _protect_value(value, vault) for name, value in node.attributes.items()}
        return Element(node.tag, attributes, [_protect(child, vault) for child in node.children])
    return node


def protect_directives(root: Root, context: dict) -> Root:
    """
    Replace directive text in Text nodes and attribute values with placeholders.

    Args:
        root: Document tree
        context: Conversion context; must hold the document's "vault"

    Returns:
        New document tree
    """
    vault = context["vault"]
    children: List[Node] = [_protect(child, vault) for child in root.children]
    return Root(children)
