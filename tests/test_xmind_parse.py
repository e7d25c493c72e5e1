"""Tests for src.xmind.parse: archive handling, sheet/topic extraction, error taxonomy."""
from __future__ import annotations

from pathlib import Path

import pytest

from src.xmind import (
    ArchiveError,
    ConversionError,
    EmptyDocumentError,
    IdAllocator,
    UnsupportedFormatError,
    extract_topic_tree,
    iter_topics,
    parse_xmind,
    parse_xmind_file,
)


def test_parse_simple_workbook(make_xmind, simple_content) -> None:
    """Sheet and topic tree come out with ids, titles and child order intact."""
    wb = parse_xmind(make_xmind(simple_content))
    assert len(wb.sheets) == 1
    sheet = wb.sheets[0]
    assert sheet.id == "sheet-1"
    assert sheet.title == "Sheet 1"
    root = sheet.root_topic
    assert root.id == "root"
    assert root.title == "Root"
    assert [c.title for c in root.children] == ["Child A", "Child B"]
    assert wb.images == {}


def test_parse_accepts_bytearray(make_xmind, simple_content) -> None:
    wb = parse_xmind(bytearray(make_xmind(simple_content)))
    assert wb.sheets[0].root_topic.id == "root"


def test_parse_not_a_zip_raises_archive_error() -> None:
    with pytest.raises(ArchiveError, match="Failed to open XMind archive"):
        parse_xmind(b"definitely not a zip file")


def test_parse_legacy_xml_is_reported_distinctly(make_xmind) -> None:
    """content.xml without content.json -> unsupported legacy format, not a generic error."""
    data = make_xmind(None, entries={"content.xml": "<xmap-content/>"})
    with pytest.raises(UnsupportedFormatError, match="Legacy XML format"):
        parse_xmind(data)


def test_parse_no_content_raises_unsupported(make_xmind) -> None:
    data = make_xmind(None, entries={"metadata.json": "{}"})
    with pytest.raises(UnsupportedFormatError, match="No content.json or content.xml"):
        parse_xmind(data)


def test_parse_prefers_json_over_xml(make_xmind, simple_content) -> None:
    """XMind Zen files ship a content.xml stub too; content.json wins."""
    data = make_xmind(simple_content, entries={"content.xml": "<xmap-content/>"})
    assert parse_xmind(data).sheets[0].title == "Sheet 1"


def test_parse_invalid_json_raises_unsupported_with_cause(make_xmind) -> None:
    with pytest.raises(UnsupportedFormatError, match="not valid JSON") as exc_info:
        parse_xmind(make_xmind("{not json"))
    assert exc_info.value.__cause__ is not None


def test_parse_non_array_content_raises_unsupported(make_xmind) -> None:
    with pytest.raises(UnsupportedFormatError, match="array of sheets"):
        parse_xmind(make_xmind({"rootTopic": {"title": "x"}}))


def test_parse_zero_valid_sheets_raises_empty_document(make_xmind) -> None:
    with pytest.raises(EmptyDocumentError, match="No valid sheets"):
        parse_xmind(make_xmind([{"id": "s", "title": "no root"}, "junk"]))


def test_parse_empty_array_raises_empty_document(make_xmind) -> None:
    with pytest.raises(EmptyDocumentError):
        parse_xmind(make_xmind([]))


def test_errors_share_base_class() -> None:
    for cls in (ArchiveError, UnsupportedFormatError, EmptyDocumentError):
        assert issubclass(cls, ConversionError)


def test_sheet_defaults_and_skipped_entries(make_xmind) -> None:
    """Missing sheet id/title are defaulted; sheets without rootTopic are dropped."""
    content = [
        {"rootTopic": {"title": "First"}},
        {"id": "no-root"},
        {"id": "s3", "title": "Third", "rootTopic": {"id": "t3", "title": "Third root"}},
    ]
    wb = parse_xmind(make_xmind(content))
    assert [s.title for s in wb.sheets] == ["Untitled Sheet", "Third"]
    assert wb.sheets[0].id.startswith("node-")
    assert wb.sheets[1].id == "s3"


def test_topic_title_precedence_and_default(make_xmind) -> None:
    content = [{"rootTopic": {
        "id": "r",
        "children": [
            {"id": "1", "title": "T", "label": "L", "name": "N"},
            {"id": "2", "label": "L", "name": "N"},
            {"id": "3", "name": "N"},
            {"id": "4"},
            {"id": "5", "title": "", "label": "fallback"},
            {"id": "6", "title": 42},
        ],
    }}]
    root = parse_xmind(make_xmind(content)).sheets[0].root_topic
    assert root.title == "Untitled"
    assert [c.title for c in root.children] == ["T", "L", "N", "Untitled", "fallback", "42"]


def test_topic_notes_labels_markers(make_xmind) -> None:
    content = [{"rootTopic": {
        "id": "r",
        "title": "Root",
        "notes": {"plain": "plain notes"},
        "labels": "solo",
        "markers": ["priority-1", {"markerId": "task-done"}],
        "children": [
            {"id": "c1", "title": "C1", "notes": "bare notes", "labels": ["a", "b"]},
            {"id": "c2", "title": "C2", "notes": {"plain": {"content": "zen notes"}}},
            {"id": "c3", "title": "C3", "notes": {"realHTML": {}}},
        ],
    }}]
    root = parse_xmind(make_xmind(content)).sheets[0].root_topic
    assert root.notes == "plain notes"
    assert root.labels == ["solo"]
    assert root.markers == ["priority-1", "task-done"]
    c1, c2, c3 = root.children
    assert c1.notes == "bare notes"
    assert c1.labels == ["a", "b"]
    assert c2.notes == "zen notes"
    assert c2.labels is None
    assert c3.notes is None


def test_topic_image_reference(make_xmind) -> None:
    """Only resources/ sources are kept, reduced to the file name; size passes through."""
    content = [{"rootTopic": {
        "id": "r",
        "title": "Root",
        "children": [
            {"id": "xap", "title": "A", "image": {"src": "xap:resources/a.png", "width": 100, "height": 80}},
            {"id": "plain", "title": "B", "image": {"src": "resources/b.jpg"}},
            {"id": "web", "title": "C", "image": {"src": "https://example.com/c.png"}},
            {"id": "nosrc", "title": "D", "image": {"width": 10}},
        ],
    }}]
    root = parse_xmind(make_xmind(content)).sheets[0].root_topic
    a, b, c, d = root.children
    assert a.image.src == "a.png"
    assert (a.image.width, a.image.height) == (100, 80)
    assert b.image.src == "b.jpg"
    assert b.image.width is None and b.image.height is None
    assert c.image is None
    assert d.image is None


def test_child_shapes_all_recognized(make_xmind) -> None:
    content = [{"rootTopic": {
        "id": "r",
        "title": "Root",
        "children": {"attached": [
            {"id": "zen", "title": "zen", "children": [{"id": "arr", "title": "array"}]},
            {"id": "att", "title": "att", "attached": [{"id": "att-c", "title": "attached child"}]},
            {"id": "top", "title": "top", "topics": [{"id": "top-c", "title": "topics child"}]},
            {"id": "odd", "title": "odd", "subtopics": [{"id": "lost", "title": "never seen"}]},
        ]},
    }}]
    root = parse_xmind(make_xmind(content)).sheets[0].root_topic
    zen, att, top, odd = root.children
    assert [c.id for c in zen.children] == ["arr"]
    assert [c.id for c in att.children] == ["att-c"]
    assert [c.id for c in top.children] == ["top-c"]
    # unknown child shapes are treated as childless
    assert odd.children == []


def test_generated_ids_unique_within_parse(make_xmind) -> None:
    content = [{"rootTopic": {"children": [{"title": f"n{i}"} for i in range(50)]}}]
    root = parse_xmind(make_xmind(content)).sheets[0].root_topic
    ids = [t.id for t in iter_topics(root)]
    assert len(ids) == 51
    assert len(set(ids)) == 51


def test_id_allocator_sequence() -> None:
    new_id = IdAllocator()
    first, second = new_id(), new_id()
    assert first != second
    assert first.rsplit("-", 1)[0] == second.rsplit("-", 1)[0]
    assert IdAllocator()() != first


def test_extract_topic_tree_deep_chain() -> None:
    """A very deep tree parses without hitting the recursion limit."""
    depth = 5000
    raw: dict = {"id": f"n{depth - 1}", "title": "leaf"}
    for i in range(depth - 2, -1, -1):
        raw = {"id": f"n{i}", "title": f"t{i}", "children": [raw]}
    root = extract_topic_tree(raw)
    assert sum(1 for _ in iter_topics(root)) == depth


def test_iter_topics_pre_order(make_xmind) -> None:
    content = [{"rootTopic": {"id": "r", "children": [
        {"id": "a", "children": [{"id": "a1"}, {"id": "a2"}]},
        {"id": "b"},
    ]}}]
    root = parse_xmind(make_xmind(content)).sheets[0].root_topic
    assert [t.id for t in iter_topics(root)] == ["r", "a", "a1", "a2", "b"]


def test_parse_xmind_file(tmp_path: Path, make_xmind, simple_content) -> None:
    path = tmp_path / "map.xmind"
    path.write_bytes(make_xmind(simple_content))
    assert parse_xmind_file(path).sheets[0].root_topic.title == "Root"


def test_parse_xmind_file_missing(tmp_path: Path) -> None:
    with pytest.raises(ArchiveError, match="Failed to read"):
        parse_xmind_file(tmp_path / "missing.xmind")


def test_duplicate_topic_ids_are_replaced(make_xmind, caplog) -> None:
    """Repeated ids inside one tree get a fresh id at parse time; the first holder keeps its id."""
    content = [{"rootTopic": {"id": "r", "title": "Root", "children": [
        {"id": "c", "title": "First"},
        {"id": "c", "title": "Second", "children": [{"id": "r", "title": "Grandchild"}]},
    ]}}]
    with caplog.at_level("WARNING", logger="src.xmind.parse"):
        root = parse_xmind(make_xmind(content)).sheets[0].root_topic
    first, second = root.children
    assert first.id == "c"
    assert second.id != "c"
    assert second.children[0].id != "r"
    ids = [t.id for t in iter_topics(root)]
    assert len(set(ids)) == len(ids)
    assert "Duplicate topic id 'c'" in caplog.text
