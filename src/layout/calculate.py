"""
Layout adapter: workbook + options -> layout request -> engine -> positioned graph.
Owns request shaping and error translation only; placement is the engine's job.
"""
from __future__ import annotations

import logging

from ..xmind import LayoutError, Workbook
from .engine import LayoutEngine, TreeLayoutEngine
from .graph import PositionedGraph, build_layout_graph
from .options import ConversionOptions

logger = logging.getLogger(__name__)


def calculate_layout(
    workbook: Workbook,
    options: ConversionOptions | None = None,
    *,
    engine: LayoutEngine | None = None,
) -> PositionedGraph:
    """
    Lay out the first sheet of the workbook. Raises LayoutError when the
    workbook has no sheets or the engine rejects the request.
    """
    if not workbook.sheets:
        raise LayoutError("No sheets found in XMind file")
    options = options or ConversionOptions()
    engine = engine or TreeLayoutEngine()

    sheet = workbook.sheets[0]
    graph = build_layout_graph(sheet.root_topic, options, workbook.images)
    logger.info(
        "Layout sheet '%s': %d node(s), %d edge(s), %s/%s",
        sheet.title, len(graph.nodes), len(graph.edges), options.layout_algorithm, options.direction,
    )
    try:
        return engine.layout(graph)
    except Exception as e:
        raise LayoutError(f"Failed to calculate layout: {e}") from e
