"""
Flatten a topic tree into a layout request: sized nodes plus parent -> child edges.

Node size is a fixed heuristic on title length and image size (no text
measurement), so the same tree and options always give the same request.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from ..xmind import ImageResource, TopicNode
from .options import ConversionOptions

CHAR_WIDTH = 8
MAX_TEXT_WIDTH = 400
MAX_IMAGE_NODE_WIDTH = 500
CAPTION_HEIGHT = 40
DEFAULT_IMAGE_WIDTH = 200
DEFAULT_IMAGE_HEIGHT = 150

# Keys of LayoutGraph.options; values are always strings.
ALGORITHM_KEY = "algorithm"
DIRECTION_KEY = "direction"
NODE_SPACING_KEY = "spacing.nodeNode"
LAYER_SPACING_KEY = "spacing.nodeNodeBetweenLayers"


@dataclass
class LayoutNode:
    id: str
    width: float
    height: float
    label: str
    has_image: bool = False
    image_src: str | None = None
    # Dimensions as given on the topic (None when absent there).
    image_width: float | None = None
    image_height: float | None = None


@dataclass
class PositionedNode(LayoutNode):
    """LayoutNode after layout; x, y is the top-left corner."""
    x: float = 0.0
    y: float = 0.0


@dataclass
class LayoutEdge:
    id: str
    source: str
    target: str


@dataclass
class LayoutGraph:
    root_id: str
    options: dict[str, str]
    nodes: list[LayoutNode] = field(default_factory=list)
    edges: list[LayoutEdge] = field(default_factory=list)


@dataclass
class PositionedGraph:
    root_id: str
    nodes: list[PositionedNode] = field(default_factory=list)
    edges: list[LayoutEdge] = field(default_factory=list)


def edge_id(parent_id: str, child_id: str) -> str:
    return f"edge-{parent_id}-{child_id}"


def estimate_node_size(
    title: str,
    options: ConversionOptions,
    image_size: tuple[float, float] | None = None,
) -> tuple[float, float]:
    """
    width = max(default width, min(len(title) * 8, 400)), height = default height.
    With an image: width = min(max(width, image width), 500) and
    height = max(height, image height + 40) to leave a caption row.
    """
    width = max(options.default_node_width, min(len(title) * CHAR_WIDTH, MAX_TEXT_WIDTH))
    height = options.default_node_height
    if image_size is not None:
        img_width, img_height = image_size
        width = min(max(width, img_width), MAX_IMAGE_NODE_WIDTH)
        height = max(height, img_height + CAPTION_HEIGHT)
    return width, height


def _image_size(topic: TopicNode, images: Mapping[str, ImageResource] | None) -> tuple[float, float]:
    """Topic dimensions, then the resource's pixel size, then 200x150."""
    image = topic.image
    resource = images.get(image.src) if images else None
    width = image.width
    if width is None:
        width = resource.width if resource and resource.width else DEFAULT_IMAGE_WIDTH
    height = image.height
    if height is None:
        height = resource.height if resource and resource.height else DEFAULT_IMAGE_HEIGHT
    return width, height


def to_layout_node(
    topic: TopicNode,
    options: ConversionOptions,
    images: Mapping[str, ImageResource] | None = None,
) -> LayoutNode:
    if topic.image is None:
        width, height = estimate_node_size(topic.title, options)
        return LayoutNode(id=topic.id, width=width, height=height, label=topic.title)
    width, height = estimate_node_size(topic.title, options, _image_size(topic, images))
    return LayoutNode(
        id=topic.id,
        width=width,
        height=height,
        label=topic.title,
        has_image=True,
        image_src=topic.image.src,
        image_width=topic.image.width,
        image_height=topic.image.height,
    )


def flatten_topic_tree(
    root: TopicNode,
    options: ConversionOptions,
    images: Mapping[str, ImageResource] | None = None,
) -> tuple[list[LayoutNode], list[LayoutEdge]]:
    """
    Depth-first pre-order list of nodes and one edge per parent -> child link.
    Uses an explicit stack; deep trees do not hit the recursion limit.
    """
    nodes: list[LayoutNode] = []
    edges: list[LayoutEdge] = []
    stack: list[tuple[TopicNode, str | None]] = [(root, None)]
    while stack:
        topic, parent_id = stack.pop()
        nodes.append(to_layout_node(topic, options, images))
        if parent_id is not None:
            edges.append(LayoutEdge(id=edge_id(parent_id, topic.id), source=parent_id, target=topic.id))
        for child in reversed(topic.children):
            stack.append((child, topic.id))
    return nodes, edges


def layout_options(options: ConversionOptions) -> dict[str, str]:
    """Textual engine options for a layout request."""
    return {
        ALGORITHM_KEY: str(options.layout_algorithm),
        DIRECTION_KEY: str(options.direction),
        NODE_SPACING_KEY: str(options.node_spacing),
        LAYER_SPACING_KEY: str(options.layer_spacing),
    }


def build_layout_graph(
    root: TopicNode,
    options: ConversionOptions,
    images: Mapping[str, ImageResource] | None = None,
) -> LayoutGraph:
    nodes, edges = flatten_topic_tree(root, options, images)
    return LayoutGraph(root_id=root.id, options=layout_options(options), nodes=nodes, edges=edges)
