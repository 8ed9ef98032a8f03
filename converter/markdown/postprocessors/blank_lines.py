# converter/markdown/postprocessors/blank_lines.py

from ..serializer import normalize_blank_lines


def blank_line_normalizer(html: str, context: dict) -> str:
    """
    Collapse three or more consecutive newlines into one blank line.

    Idempotent: normalizing twice gives the same string as normalizing once.
    """
    return normalize_blank_lines(html)
