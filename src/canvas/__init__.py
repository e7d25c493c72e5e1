"""Canvas: positioned graph -> JSON Canvas document (text/file nodes, right->left edges)."""
from .schema import CanvasNode, CanvasEdge, CanvasData, NODE_TYPES, SIDES
from .generate import (
    ImagePathResolver,
    default_image_path,
    convert_node,
    convert_edge,
    generate_canvas,
    dumps_canvas,
    load_canvas,
    write_canvas,
    validate_canvas,
)

__all__ = [
    "CanvasNode",
    "CanvasEdge",
    "CanvasData",
    "NODE_TYPES",
    "SIDES",
    "ImagePathResolver",
    "default_image_path",
    "convert_node",
    "convert_edge",
    "generate_canvas",
    "dumps_canvas",
    "load_canvas",
    "write_canvas",
    "validate_canvas",
]
