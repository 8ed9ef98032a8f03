# converter/markdown/preprocessors/protect_source.py
"""
Preprocessor that hides directive tokens from the markdown parser.

Left in the source, a directive can be mangled before any tree pass sees it:
'*' and '_' inside parameters start emphasis, '<b>' in a parameter becomes
raw HTML, and braces inside link targets get percent-encoded. Each token is
swapped for a vault placeholder here and restored after serialization.
"""


def protect_source_directives(text: str, context: dict) -> str:
    """
    Replace every directive token in the markdown source with a placeholder.

    Args:
        text: Markdown source
        context: Conversion context; must hold the document's "vault"

    Returns:
        Markdown with directive tokens replaced by placeholders
    """
    return context["vault"].protect(text)


def protect_source_directives_default(text: str, context: dict) -> str:
    """
    Default configuration for protect_source_directives.

    Register this in PREPROCESSORS.
    """
    return protect_source_directives(text, context)
