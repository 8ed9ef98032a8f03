# converter/markdown/postprocessors/restore_placeholders.py
"""
Postprocessor that puts directive text back in place of vault placeholders.

Runs after serialization, so restored directives are never escaped: quotes,
ampersands and angle brackets inside a directive come out exactly as they
were written.
"""

import logging

logger = logging.getLogger(__name__)


def restore_placeholders(html: str, context: dict) -> str:
    """
    Replace vault placeholders with the directive text they stand for.

    Args:
        html: Serialized storage-format string
        context: Conversion context; reads the document's "vault"

    Returns:
        Output with every directive restored
    """
    vault = context.get("vault")
    if vault is None:
        return html
    logger.debug(f"Restoring {len(vault)} protected directive(s)")
    return vault.restore(html)


def restore_placeholders_default(html: str, context: dict) -> str:
    """
    Default configuration for restore_placeholders.

    This is the function that should be registered in POSTPROCESSORS.
    """
    return restore_placeholders(html, context)
