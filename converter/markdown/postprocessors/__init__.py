# converter/markdown/postprocessors/__init__.py

from .blank_lines import blank_line_normalizer
from .restore_placeholders import restore_placeholders_default

POSTPROCESSORS = [
    restore_placeholders_default,  # Must run after serialization, never before
    blank_line_normalizer,
    # Order matters - they run sequentially
]


def apply_postprocessors(html, context):
    """Apply all postprocessors in order"""
    for processor in POSTPROCESSORS:
        html = processor(html, context)
    return html
