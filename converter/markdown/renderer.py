# converter/markdown/renderer.py

import logging
from pathlib import Path

from .config import get_storage_config
from .errors import check_depth
from .nodes import tree_depth
from .placeholders import PlaceholderVault
from .postprocessors import apply_postprocessors
from .preprocessors import apply_preprocessors
from .serializer import serialize
from .tree_builder import parse_markdown
from .treeprocessors import apply_treeprocessors

logger = logging.getLogger(__name__)


def _new_context(context):
    # Each document gets its own vault; placeholders must never leak between documents
    context = dict(context or {})
    context["vault"] = PlaceholderVault()
    return context


def convert_tree(root, context=None):
    """
    Run the tree passes, serializer and postprocessors over a prebuilt tree.

    Args:
        root: Root node produced by tree_builder (or built by hand)
        context: Optional dict; "config" overrides conversion options

    Returns:
        Storage-format string
    """
    if context is None or "vault" not in context:
        context = _new_context(context)
    else:
        # Keep the caller's vault (it holds the source placeholders) but never
        # a footnote index cached for another tree
        context = dict(context)
    context.pop("footnotes", None)

    # Hand-built trees have not been through the tree builder's depth check
    max_depth = get_storage_config(context)["max_nesting_depth"]
    check_depth(tree_depth(root), max_depth)

    root = apply_treeprocessors(root, context)
    output = serialize(root, max_depth=max_depth)
    return apply_postprocessors(output, context)


def render_storage_format(text, context=None):
    """
    Main rendering function: markdown with directives -> storage format.

    Pipeline:
        preprocessors (source text) -> pandoc + BeautifulSoup tree ->
        treeprocessors -> serializer -> postprocessors (output string)

    Args:
        text: Markdown source, may contain {{...}} directives anywhere
        context: Optional dict for processors that need additional data

    Raises:
        MarkdownParseError: the markdown could not be parsed
        NestingDepthError: the document nests too deeply to convert
    """
    context = _new_context(context)

    # Pre-processing: Before markdown conversion
    text = apply_preprocessors(text or "", context)

    root = parse_markdown(text, context)

    output = convert_tree(root, context)
    logger.debug(f"Rendered {len(output)} characters of storage format")
    return output


def render_storage_format_file(input_path, output_path=None, context=None):
    """
    Convert a UTF-8 markdown file.

    Writes the result to output_path when given, otherwise returns it.
    """
    source = Path(input_path).read_text(encoding="utf-8")
    output = render_storage_format(source, context)
    if output_path is None:
        return output
    Path(output_path).write_text(output, encoding="utf-8")
    logger.info(f"Wrote {output_path}")
    return None
