"""
One-call conversion: .xmind bytes -> workbook -> layout -> canvas document.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from ..canvas import CanvasData, ImagePathResolver, generate_canvas
from ..layout import ConversionOptions, LayoutEngine, calculate_layout
from ..xmind import ImageResource, Workbook, parse_xmind

logger = logging.getLogger(__name__)


@dataclass
class ConversionResult:
    canvas: CanvasData
    workbook: Workbook

    @property
    def images(self) -> dict[str, ImageResource]:
        return self.workbook.images


def convert_xmind_to_canvas(
    data: bytes,
    options: ConversionOptions | None = None,
    *,
    image_path: ImagePathResolver | None = None,
    image_folder: str | None = None,
    engine: LayoutEngine | None = None,
) -> ConversionResult:
    """
    Parse, lay out the first sheet and build the canvas. Any ConversionError
    aborts the whole conversion; nothing partial is returned.
    """
    t0 = time.perf_counter()
    options = options or ConversionOptions()
    workbook = parse_xmind(data)
    positioned = calculate_layout(workbook, options, engine=engine)
    canvas = generate_canvas(positioned, image_path=image_path, image_folder=image_folder)
    logger.debug(
        "Converted in %.2fs: %d canvas node(s), %d edge(s)",
        time.perf_counter() - t0, len(canvas["nodes"]), len(canvas["edges"]),
    )
    return ConversionResult(canvas=canvas, workbook=workbook)
