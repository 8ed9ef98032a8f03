# converter/markdown/preprocessors/__init__.py

from .directive_lines import isolate_directive_lines_default
from .protect_source import protect_source_directives_default
from .verbatim_regions import stash_verbatim_regions_default

PREPROCESSORS = [
    stash_verbatim_regions_default,  # Must run before any other pass touches directive lines
    isolate_directive_lines_default,  # Give block directive lines their own paragraph
    protect_source_directives_default,  # Swap remaining directives for placeholders
    # Order matters - they run sequentially
]


def apply_preprocessors(text, context):
    """Apply all preprocessors in order"""
    for processor in PREPROCESSORS:
        text = processor(text, context)
    return text
