"""
JSON Canvas 1.0 document shape (https://jsoncanvas.org/spec/1.0/).
"""
from __future__ import annotations

from typing import TypedDict

NODE_TYPES = ("text", "file", "link", "group")
SIDES = ("top", "right", "bottom", "left")


class CanvasNode(TypedDict, total=False):
    id: str
    type: str
    x: int
    y: int
    width: int
    height: int
    text: str
    file: str
    url: str
    color: str


class CanvasEdge(TypedDict, total=False):
    id: str
    fromNode: str
    toNode: str
    fromSide: str
    toSide: str
    color: str
    label: str


class CanvasData(TypedDict):
    nodes: list[CanvasNode]
    edges: list[CanvasEdge]
