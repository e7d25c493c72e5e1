"""Pytest configuration and shared fixtures."""
from __future__ import annotations

import io
import json
import zipfile
from typing import Any, Callable

import pytest
from PIL import Image


@pytest.fixture(autouse=True)
def isolate_env(monkeypatch):
    """Avoid picking up developer settings from the environment in tests."""
    for key in (
        "DATA_DIR",
        "OUTPUT_DIR",
        "VAULT_ROOT",
        "XMIND_LAYOUT_ALGORITHM",
        "XMIND_LAYOUT_DIRECTION",
        "XMIND_NODE_SPACING",
        "XMIND_LAYER_SPACING",
        "XMIND_NODE_WIDTH",
        "XMIND_NODE_HEIGHT",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def make_xmind() -> Callable[..., bytes]:
    """
    Build an in-memory .xmind archive.
    content: sheets list (serialized to content.json) or a raw str/bytes payload; None omits content.json.
    entries: extra archive entries, e.g. {"resources/a.png": b"..."} or {"content.xml": "<xmap/>"}.
    """
    def _make(content: Any = None, entries: dict[str, bytes | str] | None = None) -> bytes:
        buf = io.BytesIO()
        with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
            if content is not None:
                payload = content if isinstance(content, (str, bytes)) else json.dumps(content)
                zf.writestr("content.json", payload)
            for name, data in (entries or {}).items():
                zf.writestr(name, data)
        return buf.getvalue()

    return _make


@pytest.fixture
def png_bytes() -> bytes:
    """A real 120x90 PNG."""
    buf = io.BytesIO()
    Image.new("RGB", (120, 90), (200, 40, 40)).save(buf, "PNG")
    return buf.getvalue()


@pytest.fixture
def simple_content() -> list[dict]:
    """One sheet: Root with two children in XMind Zen shape."""
    return [{
        "id": "sheet-1",
        "title": "Sheet 1",
        "rootTopic": {
            "id": "root",
            "title": "Root",
            "children": {"attached": [
                {"id": "a", "title": "Child A"},
                {"id": "b", "title": "Child B"},
            ]},
        },
    }]


@pytest.fixture
def image_content() -> list[dict]:
    """Root with one image-bearing child (xap:resources/photo.png, 100x80) and one plain child."""
    return [{
        "id": "sheet-1",
        "title": "Pictures",
        "rootTopic": {
            "id": "root",
            "title": "Root",
            "children": {"attached": [
                {
                    "id": "pic",
                    "title": "Photo",
                    "image": {"src": "xap:resources/photo.png", "width": 100, "height": 80},
                },
                {"id": "txt", "title": "Text only"},
            ]},
        },
    }]
