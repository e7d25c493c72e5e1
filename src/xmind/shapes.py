"""
Shape matchers for the loosely specified XMind JSON topic format.

Different XMind versions (and third-party writers) encode the same thing in
several ways. Each matcher looks at a raw topic dict and returns the value in
normalized form, or None when the topic does not use that shape. Matchers are
tried in the order listed; the first non-None result wins.
"""
from __future__ import annotations

import re
from typing import Any, Callable, Optional

Matcher = Callable[[dict[str, Any]], Optional[Any]]

IMAGE_SRC_RE = re.compile(r"(?:xap:)?resources/(.+)$")


# Children

def children_attached(topic: dict[str, Any]) -> list | None:
    """XMind Zen: {"children": {"attached": [...]}}."""
    children = topic.get("children")
    if isinstance(children, dict) and isinstance(children.get("attached"), list):
        return children["attached"]
    return None


def children_list(topic: dict[str, Any]) -> list | None:
    """{"children": [...]}"""
    children = topic.get("children")
    return children if isinstance(children, list) else None


def attached_list(topic: dict[str, Any]) -> list | None:
    """{"attached": [...]}"""
    attached = topic.get("attached")
    return attached if isinstance(attached, list) else None


def topics_list(topic: dict[str, Any]) -> list | None:
    """{"topics": [...]}"""
    topics = topic.get("topics")
    return topics if isinstance(topics, list) else None


CHILD_MATCHERS: tuple[Matcher, ...] = (
    children_attached,
    children_list,
    attached_list,
    topics_list,
)


# Notes

def notes_plain_text(topic: dict[str, Any]) -> str | None:
    """{"notes": {"plain": "text"}}"""
    notes = topic.get("notes")
    if isinstance(notes, dict) and isinstance(notes.get("plain"), str):
        return notes["plain"]
    return None


def notes_plain_content(topic: dict[str, Any]) -> str | None:
    """XMind Zen: {"notes": {"plain": {"content": "text"}}}."""
    notes = topic.get("notes")
    if not isinstance(notes, dict):
        return None
    plain = notes.get("plain")
    if isinstance(plain, dict) and isinstance(plain.get("content"), str):
        return plain["content"]
    return None


def notes_string(topic: dict[str, Any]) -> str | None:
    """{"notes": "text"}"""
    notes = topic.get("notes")
    return notes if isinstance(notes, str) else None


NOTES_MATCHERS: tuple[Matcher, ...] = (
    notes_plain_text,
    notes_plain_content,
    notes_string,
)


# Labels

def labels_list(topic: dict[str, Any]) -> list[str] | None:
    labels = topic.get("labels")
    if isinstance(labels, list):
        return [str(label) for label in labels]
    return None


def labels_string(topic: dict[str, Any]) -> list[str] | None:
    labels = topic.get("labels")
    return [labels] if isinstance(labels, str) else None


LABELS_MATCHERS: tuple[Matcher, ...] = (
    labels_list,
    labels_string,
)


def first_match(topic: dict[str, Any], matchers: tuple[Matcher, ...]) -> Any | None:
    """Return the result of the first matcher that recognizes the topic, else None."""
    for matcher in matchers:
        value = matcher(topic)
        if value is not None:
            return value
    return None


def match_children(topic: dict[str, Any]) -> list[dict[str, Any]]:
    """
    Raw child topics in document order. Topics using an unknown child shape get
    no children; non-dict entries inside a recognized list are dropped.
    """
    children = first_match(topic, CHILD_MATCHERS)
    if children is None:
        return []
    return [child for child in children if isinstance(child, dict)]


def match_notes(topic: dict[str, Any]) -> str | None:
    return first_match(topic, NOTES_MATCHERS)


def match_labels(topic: dict[str, Any]) -> list[str] | None:
    return first_match(topic, LABELS_MATCHERS)


def match_markers(topic: dict[str, Any]) -> list[str] | None:
    """Markers as plain ids, or XMind Zen {"markerId": ...} objects."""
    markers = topic.get("markers")
    if not isinstance(markers, list):
        return None
    out: list[str] = []
    for marker in markers:
        if isinstance(marker, dict):
            marker_id = marker.get("markerId")
            if marker_id:
                out.append(str(marker_id))
        elif marker is not None:
            out.append(str(marker))
    return out


def match_title(topic: dict[str, Any], default: str = "Untitled") -> str:
    """title > label > name > default; empty values fall through."""
    title = topic.get("title") or topic.get("label") or topic.get("name") or default
    return str(title)


def match_image(topic: dict[str, Any]) -> tuple[str, Any, Any] | None:
    """
    (resource key, width, height) when the image src contains
    "resources/<name>" or "xap:resources/<name>" anywhere, so a URL such as
    "https://host/resources/x.png" also resolves to the archive key "x.png".
    """
    image = topic.get("image")
    if not isinstance(image, dict):
        return None
    src = image.get("src")
    if not isinstance(src, str):
        return None
    m = IMAGE_SRC_RE.search(src)
    if not m:
        return None
    return m.group(1), image.get("width"), image.get("height")
