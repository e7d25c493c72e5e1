"""
Positioned layout graph -> JSON Canvas document.
"""
from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any, Callable

from ..layout import LayoutEdge, PositionedGraph, PositionedNode
from .schema import NODE_TYPES, SIDES, CanvasData, CanvasEdge, CanvasNode

# Maps an image resource name to the path written into file nodes.
ImagePathResolver = Callable[[str], str]

DEFAULT_TITLE = "Untitled"
CAPTION_GAP = 10
CAPTION_HEIGHT = 40
CAPTION_SUFFIX = "-title"


def _round(value: float) -> int:
    """Nearest integer, halves rounded up (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


def _heading(title: str) -> str:
    return f"### {title}"


def default_image_path(image_name: str, folder: str | None = None) -> str:
    """<folder>/<image name>, or the bare name without a folder."""
    if not folder:
        return image_name
    return f"{folder.rstrip('/')}/{image_name}"


def _caption_id(node_id: str, used_ids: set[str] | None) -> str:
    """<id>-title, or <id>-title-2, -3, ... when that id is already taken."""
    caption_id = f"{node_id}{CAPTION_SUFFIX}"
    if used_ids is None:
        return caption_id
    n = 2
    while caption_id in used_ids:
        caption_id = f"{node_id}{CAPTION_SUFFIX}-{n}"
        n += 1
    used_ids.add(caption_id)
    return caption_id


def convert_node(
    node: PositionedNode,
    image_path: ImagePathResolver | None = None,
    image_folder: str | None = None,
    used_ids: set[str] | None = None,
) -> list[CanvasNode]:
    """
    One canvas node for a plain topic. An image topic gives a file node plus,
    when it has a real title, a caption text node just below it.
    used_ids holds every id already in the canvas; the caption id is picked
    to avoid them and then added.
    """
    title = node.label or DEFAULT_TITLE
    x, y = _round(node.x), _round(node.y)
    width, height = _round(node.width), _round(node.height)

    if not (node.has_image and node.image_src):
        return [{"id": node.id, "type": "text", "x": x, "y": y, "width": width, "height": height,
                 "text": _heading(title)}]

    if image_path is not None:
        file_path = image_path(node.image_src)
    else:
        file_path = default_image_path(node.image_src, image_folder)
    out: list[CanvasNode] = [
        {"id": node.id, "type": "file", "x": x, "y": y, "width": width, "height": height, "file": file_path},
    ]
    if title != DEFAULT_TITLE:
        out.append({
            "id": _caption_id(node.id, used_ids),
            "type": "text",
            "x": x,
            "y": y + height + CAPTION_GAP,
            "width": width,
            "height": CAPTION_HEIGHT,
            "text": _heading(title),
        })
    return out


def convert_edge(edge: LayoutEdge) -> CanvasEdge:
    """Edges always leave the right side and enter the left side."""
    return {
        "id": edge.id,
        "fromNode": edge.source,
        "toNode": edge.target,
        "fromSide": "right",
        "toSide": "left",
    }


def generate_canvas(
    graph: PositionedGraph,
    *,
    image_path: ImagePathResolver | None = None,
    image_folder: str | None = None,
) -> CanvasData:
    """Canvas nodes in layout node order (image nodes may add a caption), edges in engine order."""
    nodes: list[CanvasNode] = []
    used_ids = {node.id for node in graph.nodes}
    for node in graph.nodes:
        nodes.extend(convert_node(node, image_path, image_folder, used_ids))
    edges = [convert_edge(edge) for edge in graph.edges]
    return {"nodes": nodes, "edges": edges}


def dumps_canvas(canvas: CanvasData) -> str:
    """Serialize with tab indentation, like .canvas files written by Obsidian."""
    return json.dumps(canvas, ensure_ascii=False, indent="\t")


def load_canvas(text: str | bytes) -> CanvasData:
    """Parse a serialized canvas document; missing lists become empty."""
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError("Canvas document must be a JSON object")
    return {"nodes": list(data.get("nodes") or []), "edges": list(data.get("edges") or [])}


def write_canvas(canvas: CanvasData, out_path: Path | str) -> Path:
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(dumps_canvas(canvas), encoding="utf-8")
    return out_path


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_canvas(canvas: CanvasData) -> list[str]:
    """Invariant violations in a canvas document; empty list means valid."""
    problems: list[str] = []
    ids: set[str] = set()
    for node in canvas.get("nodes", []):
        nid = node.get("id")
        if nid in ids:
            problems.append(f"duplicate node id {nid!r}")
        ids.add(nid)
        if node.get("type") not in NODE_TYPES:
            problems.append(f"node {nid!r} has unknown type {node.get('type')!r}")
        for key in ("x", "y", "width", "height"):
            if not _is_int(node.get(key)):
                problems.append(f"node {nid!r} {key} is not an integer")
        for key in ("width", "height"):
            if _is_int(node.get(key)) and node[key] <= 0:
                problems.append(f"node {nid!r} {key} must be positive")
    for edge in canvas.get("edges", []):
        eid = edge.get("id")
        src, dst = edge.get("fromNode"), edge.get("toNode")
        if src not in ids or dst not in ids:
            problems.append(f"edge {eid!r} references a missing node")
        if src == dst:
            problems.append(f"edge {eid!r} is a self-loop")
        for key in ("fromSide", "toSide"):
            if key in edge and edge[key] not in SIDES:
                problems.append(f"edge {eid!r} has unknown {key} {edge[key]!r}")
    return problems
