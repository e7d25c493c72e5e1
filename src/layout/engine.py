"""
Layout engines: anything with layout(LayoutGraph) -> PositionedGraph.

TreeLayoutEngine is the default. It uses networkx for graph checks and
traversal and places nodes in layers by depth:
  - mrtree: tidy tree, each parent centred on the block of its children;
  - layered: nodes grouped by depth in pre-order, each layer centred.
Directions RIGHT/LEFT grow the tree along x, DOWN/UP along y.
"""
from __future__ import annotations

import logging
from dataclasses import fields
from typing import Protocol

import networkx as nx

from .graph import (
    ALGORITHM_KEY,
    DIRECTION_KEY,
    LAYER_SPACING_KEY,
    NODE_SPACING_KEY,
    LayoutGraph,
    LayoutNode,
    PositionedGraph,
    PositionedNode,
)
from .options import LAYOUT_ALGORITHMS, LAYOUT_DIRECTIONS

logger = logging.getLogger(__name__)


class LayoutEngine(Protocol):
    def layout(self, graph: LayoutGraph) -> PositionedGraph:
        ...


def _spacing(options: dict[str, str], key: str, default: float) -> float:
    raw = options.get(key)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"Invalid {key} value: {raw!r}") from None
    if value < 0:
        raise ValueError(f"{key} must not be negative, got {raw!r}")
    return value


def _to_digraph(graph: LayoutGraph) -> nx.DiGraph:
    g = nx.DiGraph()
    for node in graph.nodes:
        if node.id in g:
            raise ValueError(f"Duplicate node id: {node.id!r}")
        g.add_node(node.id, width=float(node.width), height=float(node.height))
    for edge in graph.edges:
        if edge.source not in g or edge.target not in g:
            raise ValueError(f"Edge {edge.id!r} references an unknown node")
        if edge.source == edge.target:
            raise ValueError(f"Edge {edge.id!r} is a self-loop")
        g.add_edge(edge.source, edge.target)
    if graph.root_id not in g:
        raise ValueError(f"Root node {graph.root_id!r} is not in the graph")
    if g.in_degree(graph.root_id) != 0 or not nx.is_arborescence(g):
        raise ValueError(f"Graph is not a tree rooted at {graph.root_id!r}")
    return g


class TreeLayoutEngine:
    """Deterministic tree layout on top of networkx."""

    algorithms = LAYOUT_ALGORITHMS
    directions = LAYOUT_DIRECTIONS

    def __init__(self, padding: float = 12.0) -> None:
        self.padding = padding

    def layout(self, graph: LayoutGraph) -> PositionedGraph:
        opts = graph.options
        algorithm = opts.get(ALGORITHM_KEY, "mrtree")
        if algorithm not in self.algorithms:
            raise ValueError(
                f"Unsupported layout algorithm {algorithm!r} (expected one of {', '.join(self.algorithms)})"
            )
        direction = opts.get(DIRECTION_KEY, "RIGHT").upper()
        if direction not in self.directions:
            raise ValueError(
                f"Unsupported direction {direction!r} (expected one of {', '.join(self.directions)})"
            )
        node_spacing = _spacing(opts, NODE_SPACING_KEY, 80.0)
        layer_spacing = _spacing(opts, LAYER_SPACING_KEY, 150.0)
        if not graph.nodes:
            return PositionedGraph(root_id=graph.root_id, nodes=[], edges=list(graph.edges))

        g = _to_digraph(graph)
        root = graph.root_id
        horizontal = direction in ("RIGHT", "LEFT")
        # depth axis runs along the layout direction, breadth across it
        depth_size = {n: d["width"] if horizontal else d["height"] for n, d in g.nodes(data=True)}
        breadth_size = {n: d["height"] if horizontal else d["width"] for n, d in g.nodes(data=True)}

        levels = nx.shortest_path_length(g, root)
        n_levels = max(levels.values()) + 1
        level_extent = [0.0] * n_levels
        for n, lv in levels.items():
            level_extent[lv] = max(level_extent[lv], depth_size[n])
        level_offset = [0.0] * n_levels
        for lv in range(1, n_levels):
            level_offset[lv] = level_offset[lv - 1] + level_extent[lv - 1] + layer_spacing
        total_depth = level_offset[-1] + level_extent[-1]

        if algorithm == "mrtree":
            breadth_pos = self._tidy_tree(g, root, breadth_size, node_spacing)
        else:
            breadth_pos = self._layered(g, root, levels, breadth_size, node_spacing)

        positions: dict[str, tuple[float, float]] = {}
        for n in g.nodes:
            depth_pos = level_offset[levels[n]]
            if direction in ("LEFT", "UP"):
                depth_pos = total_depth - depth_pos - depth_size[n]
            if horizontal:
                positions[n] = (depth_pos + self.padding, breadth_pos[n] + self.padding)
            else:
                positions[n] = (breadth_pos[n] + self.padding, depth_pos + self.padding)

        nodes = []
        for node in graph.nodes:
            x, y = positions[node.id]
            base = {f.name: getattr(node, f.name) for f in fields(LayoutNode)}
            nodes.append(PositionedNode(**base, x=x, y=y))
        logger.debug(
            "Laid out %d node(s) in %d level(s) (%s, %s)", len(nodes), n_levels, algorithm, direction
        )
        return PositionedGraph(root_id=root, nodes=nodes, edges=list(graph.edges))

    @staticmethod
    def _tidy_tree(
        g: nx.DiGraph,
        root: str,
        breadth_size: dict[str, float],
        spacing: float,
    ) -> dict[str, float]:
        """Breadth coordinate per node: subtrees side by side, parents centred on them."""
        block: dict[str, float] = {}
        span: dict[str, float] = {}
        for n in nx.dfs_postorder_nodes(g, root):
            kids = list(g.successors(n))
            span[n] = sum(block[k] for k in kids) + spacing * max(len(kids) - 1, 0)
            block[n] = max(breadth_size[n], span[n])

        start = {root: 0.0}
        pos: dict[str, float] = {}
        for n in nx.dfs_preorder_nodes(g, root):
            pos[n] = start[n] + (block[n] - breadth_size[n]) / 2
            cursor = start[n] + (block[n] - span[n]) / 2
            for k in g.successors(n):
                start[k] = cursor
                cursor += block[k] + spacing
        return pos

    @staticmethod
    def _layered(
        g: nx.DiGraph,
        root: str,
        levels: dict[str, int],
        breadth_size: dict[str, float],
        spacing: float,
    ) -> dict[str, float]:
        """Breadth coordinate per node: each depth level stacked in pre-order and centred."""
        rows: dict[int, list[str]] = {}
        for n in nx.dfs_preorder_nodes(g, root):
            rows.setdefault(levels[n], []).append(n)
        totals = {
            lv: sum(breadth_size[n] for n in row) + spacing * (len(row) - 1)
            for lv, row in rows.items()
        }
        widest = max(totals.values())
        pos: dict[str, float] = {}
        for lv, row in rows.items():
            cursor = (widest - totals[lv]) / 2
            for n in row:
                pos[n] = cursor
                cursor += breadth_size[n] + spacing
        return pos
