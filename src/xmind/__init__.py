"""XMind: parse .xmind archives (content.json + resources/) into a typed workbook."""
from .errors import (
    ConversionError,
    ArchiveError,
    UnsupportedFormatError,
    EmptyDocumentError,
    LayoutError,
)
from .resources import ImageResource, extract_images, get_mime_type
from .parse import (
    TopicImage,
    TopicNode,
    Sheet,
    Workbook,
    IdAllocator,
    extract_topic_tree,
    extract_sheets,
    iter_topics,
    parse_xmind,
    parse_xmind_file,
)

__all__ = [
    "ConversionError",
    "ArchiveError",
    "UnsupportedFormatError",
    "EmptyDocumentError",
    "LayoutError",
    "ImageResource",
    "extract_images",
    "get_mime_type",
    "TopicImage",
    "TopicNode",
    "Sheet",
    "Workbook",
    "IdAllocator",
    "extract_topic_tree",
    "extract_sheets",
    "iter_topics",
    "parse_xmind",
    "parse_xmind_file",
]
