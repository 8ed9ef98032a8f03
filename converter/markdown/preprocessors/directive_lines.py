# converter/markdown/preprocessors/directive_lines.py
"""
Preprocessor that gives block directive lines a paragraph of their own.

In CommonMark a line directly after a list item or paragraph is swallowed by
it ("lazy continuation"), so

    - first item
    - second item
    {{/confluence-info}}

would put the close token inside the second list item. Surrounding every line
that is solely a block directive token with blank lines makes the parser
close lists and paragraphs before the token. Indentation is kept, so a token
indented under a list item still belongs to that item.

Fenced code is left alone.
"""

from ..directives import is_block_token
from .utils import iter_lines_with_fence_state


def isolate_directive_lines(text: str, context: dict) -> str:
    """
    Surround block directive lines with blank lines.

    Args:
        text: Markdown source
        context: Conversion context (unused but required for preprocessor signature)

    Returns:
        Markdown where every block directive line stands alone
    """
    if "{{" not in text:
        return text

    lines = text.split("\n")
    out = []
    pending_blank = False

    for _, line, in_fence in iter_lines_with_fence_state(lines):
        is_token = not in_fence and is_block_token(line)

        if pending_blank and line.strip():
            out.append("")
        pending_blank = False

        if is_token:
            if out and out[-1].strip():
                out.append("")
            out.append(line)
            pending_blank = True
        else:
            out.append(line)

    return "\n".join(out)


def isolate_directive_lines_default(text: str, context: dict) -> str:
    """
    Default configuration for isolate_directive_lines.

    Register this in PREPROCESSORS.
    """
    return isolate_directive_lines(text, context)
