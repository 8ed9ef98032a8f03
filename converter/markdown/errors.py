# converter/markdown/errors.py
"""Exceptions raised by the storage-format conversion pipeline."""


class ConversionError(Exception):
    """Base class for failures that abort a document conversion."""


class MarkdownParseError(ConversionError):
    """The markup parser (pandoc) could not turn the source into HTML."""


class NestingDepthError(ConversionError):
    """The document nests elements or directive regions too deeply to convert."""

    def __init__(self, depth: int, limit: int):
        self.depth = depth
        self.limit = limit
        super().__init__(f"Document is too deeply nested ({depth} levels, limit {limit})")


def check_depth(depth: int, limit: int) -> None:
    if depth > limit:
        raise NestingDepthError(depth, limit)
