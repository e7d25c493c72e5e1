"""
Parse .xmind archives (XMind Zen / 2020+ content.json) into a typed workbook.
"""
from __future__ import annotations

import io
import json
import logging
import uuid
import zipfile
import zlib
from dataclasses import dataclass, field
from itertools import count
from pathlib import Path
from typing import Any

from .errors import ArchiveError, EmptyDocumentError, UnsupportedFormatError
from .resources import ImageResource, extract_images
from .shapes import match_children, match_image, match_labels, match_markers, match_notes, match_title

logger = logging.getLogger(__name__)

CONTENT_JSON = "content.json"
CONTENT_XML = "content.xml"
DEFAULT_SHEET_TITLE = "Untitled Sheet"
DEFAULT_TOPIC_TITLE = "Untitled"


@dataclass
class TopicImage:
    """Image attached to a topic; src is the key into Workbook.images."""
    src: str
    width: float | None = None
    height: float | None = None


@dataclass
class TopicNode:
    id: str
    title: str
    children: list["TopicNode"] = field(default_factory=list)
    notes: str | None = None
    labels: list[str] | None = None
    markers: list[str] | None = None
    image: TopicImage | None = None


@dataclass
class Sheet:
    id: str
    title: str
    root_topic: TopicNode


@dataclass
class Workbook:
    sheets: list[Sheet] = field(default_factory=list)
    images: dict[str, ImageResource] = field(default_factory=dict)


class IdAllocator:
    """Ids unique within one parse: a random per-call token plus a counter."""

    def __init__(self, prefix: str = "node") -> None:
        self._prefix = f"{prefix}-{uuid.uuid4().hex[:8]}"
        self._counter = count(1)

    def __call__(self) -> str:
        return f"{self._prefix}-{next(self._counter)}"


def _dimension(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def _topic_from_dict(topic: dict[str, Any], new_id: IdAllocator) -> TopicNode:
    """Build one TopicNode (without children) from a raw topic dict."""
    node = TopicNode(
        id=str(topic.get("id") or new_id()),
        title=match_title(topic, DEFAULT_TOPIC_TITLE),
        notes=match_notes(topic),
        labels=match_labels(topic),
        markers=match_markers(topic),
    )
    image = match_image(topic)
    if image is not None:
        src, width, height = image
        node.image = TopicImage(src=src, width=_dimension(width), height=_dimension(height))
    return node


def _claim_id(node: TopicNode, seen: set[str], new_id: IdAllocator) -> None:
    """Give node a fresh id if another topic in the tree already uses its id."""
    if node.id in seen:
        fresh = new_id()
        logger.warning("Duplicate topic id %r (%r), using %r instead", node.id, node.title, fresh)
        node.id = fresh
    seen.add(node.id)


def extract_topic_tree(root: dict[str, Any], new_id: IdAllocator | None = None) -> TopicNode:
    """
    Convert a raw rootTopic dict into a TopicNode tree, preserving child order.
    Walks with an explicit stack, so tree depth is not limited by recursion.
    Topic ids are unique within the tree; a repeated id is replaced.
    """
    new_id = new_id or IdAllocator()
    root_node = _topic_from_dict(root, new_id)
    seen: set[str] = set()
    _claim_id(root_node, seen, new_id)
    stack: list[tuple[dict[str, Any], TopicNode]] = [
        (child, root_node) for child in reversed(match_children(root))
    ]
    while stack:
        raw, parent = stack.pop()
        node = _topic_from_dict(raw, new_id)
        _claim_id(node, seen, new_id)
        parent.children.append(node)
        for child in reversed(match_children(raw)):
            stack.append((child, node))
    return root_node


def extract_sheets(content: list[Any], new_id: IdAllocator | None = None) -> list[Sheet]:
    """Sheets that have a rootTopic; other entries are skipped."""
    new_id = new_id or IdAllocator()
    sheets: list[Sheet] = []
    for i, raw in enumerate(content):
        if not isinstance(raw, dict) or not isinstance(raw.get("rootTopic"), dict):
            logger.debug("Skipping sheet %d: no rootTopic", i)
            continue
        sheets.append(
            Sheet(
                id=str(raw.get("id") or new_id()),
                title=str(raw.get("title") or DEFAULT_SHEET_TITLE),
                root_topic=extract_topic_tree(raw["rootTopic"], new_id),
            )
        )
    return sheets


def _read_content(zf: zipfile.ZipFile) -> list[Any]:
    names = set(zf.namelist())
    if CONTENT_JSON not in names:
        if CONTENT_XML in names:
            raise UnsupportedFormatError(
                "Legacy XML format (content.xml) is not supported. "
                "Re-save the file with XMind Zen / XMind 2020 or later."
            )
        raise UnsupportedFormatError("No content.json or content.xml found in XMind file")
    try:
        raw = zf.read(CONTENT_JSON)
    except (zipfile.BadZipFile, OSError, RuntimeError, zlib.error) as e:
        raise ArchiveError(f"Failed to read {CONTENT_JSON}: {e}") from e
    try:
        content = json.loads(raw.decode("utf-8-sig"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise UnsupportedFormatError(f"{CONTENT_JSON} is not valid JSON: {e}") from e
    if not isinstance(content, list):
        raise UnsupportedFormatError(
            f"{CONTENT_JSON} must contain an array of sheets, got {type(content).__name__}"
        )
    return content


def parse_xmind(data: bytes) -> Workbook:
    """
    Parse raw .xmind bytes into a Workbook (all sheets + image table).
    Raises ArchiveError, UnsupportedFormatError or EmptyDocumentError.
    """
    try:
        zf = zipfile.ZipFile(io.BytesIO(data))
    except (zipfile.BadZipFile, OSError, ValueError, TypeError) as e:
        raise ArchiveError(f"Failed to open XMind archive: {e}") from e
    with zf:
        content = _read_content(zf)
        images = extract_images(zf)
    sheets = extract_sheets(content)
    if not sheets:
        raise EmptyDocumentError(
            f"No valid sheets found in XMind file ({len(content)} sheet entries, none with a rootTopic)"
        )
    logger.debug("Parsed %d sheet(s), %d image(s)", len(sheets), len(images))
    return Workbook(sheets=sheets, images=images)


def parse_xmind_file(path: Path | str) -> Workbook:
    """Read an .xmind file from disk and parse it."""
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise ArchiveError(f"Failed to read {path}: {e}") from e
    return parse_xmind(data)


def iter_topics(root: TopicNode):
    """Yield every topic in depth-first pre-order."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))
