"""
Celery tasks for converting documents outside the request cycle.

Every task call renders its document with its own placeholder vault (see
converter.markdown.renderer), so any number of workers can convert
documents at the same time.

To use Celery, you need to:
1. Install celery: pip install celery redis
2. Configure celery in settings.py
3. Run celery worker: celery -A publishsite worker -l info
"""

import logging

from celery import group, shared_task

from .markdown.errors import ConversionError
from .markdown.renderer import render_storage_format

logger = logging.getLogger(__name__)


@shared_task
def convert_document_async(text, context=None):
    """
    Convert one markdown document to storage format.

    Args:
        text: Markdown source
        context: Optional processor context (e.g. {"config": {...}})

    Returns:
        Dict with conversion results
    """
    try:
        content = render_storage_format(text, context)
    except ConversionError as e:
        logger.error(f"Document conversion failed: {e}")
        return {"success": False, "error": str(e)}

    logger.info(f"Converted document ({len(text or '')} -> {len(content)} characters)")
    return {
        "success": True,
        "content": content,
    }


def convert_documents_async(texts, context=None):
    """
    Convert several documents in parallel, one task per document.

    Returns:
        The GroupResult; .get() yields one result dict per document, in order
    """
    job = group(convert_document_async.s(text, context) for text in texts)
    return job.apply_async()
