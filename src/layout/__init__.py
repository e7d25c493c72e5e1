"""Layout: topic tree -> sized layout graph -> positioned graph (pluggable engine)."""
from .options import ConversionOptions, LAYOUT_ALGORITHMS, LAYOUT_DIRECTIONS
from .graph import (
    LayoutNode,
    PositionedNode,
    LayoutEdge,
    LayoutGraph,
    PositionedGraph,
    edge_id,
    estimate_node_size,
    flatten_topic_tree,
    layout_options,
    build_layout_graph,
)
from .engine import LayoutEngine, TreeLayoutEngine
from .calculate import calculate_layout

__all__ = [
    "ConversionOptions",
    "LAYOUT_ALGORITHMS",
    "LAYOUT_DIRECTIONS",
    "LayoutNode",
    "PositionedNode",
    "LayoutEdge",
    "LayoutGraph",
    "PositionedGraph",
    "edge_id",
    "estimate_node_size",
    "flatten_topic_tree",
    "layout_options",
    "build_layout_graph",
    "LayoutEngine",
    "TreeLayoutEngine",
    "calculate_layout",
]
