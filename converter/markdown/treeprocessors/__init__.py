# converter/markdown/treeprocessors/__init__.py

from .document import unwrap_document
from .element_mapper import map_elements
from .footnotes import resolve_footnotes
from .isolator import isolate_directives
from .macro_collapser import collapse_macro_regions
from .protect import protect_directives

TREEPROCESSORS = [
    unwrap_document,  # Drop html/body wrappers and namespace attributes
    isolate_directives,  # Lift directive-only paragraphs to block-level markers
    protect_directives,  # Move any remaining directive text into the vault
    map_elements,  # Images, links, code, tables, details -> storage format
    collapse_macro_regions,  # Fold {{#x}} ... {{/x}} regions into opaque nodes
    resolve_footnotes,  # Footnote containers -> anchored definitions
    # Order matters - they run sequentially
]


def apply_treeprocessors(root, context):
    """Apply all treeprocessors in order"""
    for processor in TREEPROCESSORS:
        root = processor(root, context)
    return root
