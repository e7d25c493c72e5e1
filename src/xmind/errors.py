"""
Document-level conversion errors. Each one aborts the whole conversion.
"""
from __future__ import annotations


class ConversionError(Exception):
    """Base class for fatal XMind -> canvas conversion failures."""


class ArchiveError(ConversionError):
    """The .xmind container is not a readable ZIP archive."""


class UnsupportedFormatError(ConversionError):
    """The archive holds no content we understand (legacy XML or nothing at all)."""


class EmptyDocumentError(ConversionError):
    """The content parsed but yielded zero usable sheets."""


class LayoutError(ConversionError):
    """The layout engine could not position the graph, or there was nothing to lay out."""
