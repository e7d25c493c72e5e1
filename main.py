#!/usr/bin/env python3
"""
Root entry: convert XMind mind maps (.xmind) to JSON Canvas (.canvas).
With no inputs, converts every .xmind in the data dir (DATA_DIR, default data/xmind).
Embedded images are written to <name>_images/ next to the canvas.
"""
from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Callable

_ROOT = Path(__file__).resolve().parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from src.config import load_env, get_data_dir, get_output_dir, get_vault_root
from src.xmind import ArchiveError, ConversionError
from src.layout import ConversionOptions, LAYOUT_ALGORITHMS, LAYOUT_DIRECTIONS
from src.canvas import write_canvas, validate_canvas
from src.convert import (
    convert_xmind_to_canvas,
    canvas_path_for,
    image_folder_for,
    save_images,
    relative_file_path,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

XMIND_SUFFIX = ".xmind"


def _collect_inputs(inputs: list[Path]) -> tuple[list[Path], list[Path]]:
    """Expand directories to the .xmind files they contain. Returns (files, missing paths)."""
    files: list[Path] = []
    missing: list[Path] = []
    for p in inputs:
        if p.is_dir():
            files.extend(sorted(
                f for f in p.iterdir()
                if f.is_file() and f.suffix.lower() == XMIND_SUFFIX
            ))
        elif p.is_file():
            files.append(p)
        else:
            missing.append(p)
    return files, missing


def _int_at_least(minimum: int) -> Callable[[str], int]:
    """argparse type: integer >= minimum."""
    def parse(raw: str) -> int:
        try:
            value = int(raw)
        except ValueError:
            raise argparse.ArgumentTypeError(f"invalid integer: {raw!r}") from None
        if value < minimum:
            raise argparse.ArgumentTypeError(f"must be at least {minimum}, got {value}")
        return value
    return parse


def _image_path_resolver(images_dir: Path, base_dir: Path) -> Callable[[str], str]:
    """Canvas file path for an image: <images_dir>/<name>, relative to base_dir."""
    def resolve(name: str) -> str:
        return relative_file_path(images_dir / name, base_dir)
    return resolve


def convert_file(
    source: Path,
    options: ConversionOptions,
    *,
    output_dir: Path | None = None,
    vault_root: Path | None = None,
    write_images: bool = True,
) -> Path:
    """Convert one .xmind file; returns the written .canvas path. Raises ConversionError."""
    t0 = time.perf_counter()
    canvas_path = canvas_path_for(source, output_dir)
    images_dir = image_folder_for(source, output_dir)
    base_dir = vault_root if vault_root is not None else canvas_path.parent

    try:
        data = source.read_bytes()
    except OSError as e:
        raise ArchiveError(f"Failed to read {source}: {e}") from e
    result = convert_xmind_to_canvas(
        data,
        options,
        image_path=_image_path_resolver(images_dir, base_dir),
    )

    if write_images and result.images:
        saved = save_images(result.images, images_dir)
        logger.info("  Images: %d/%d saved to %s", len(saved), len(result.images), images_dir)
    for problem in validate_canvas(result.canvas):
        logger.warning("  Canvas check: %s", problem)
    write_canvas(result.canvas, canvas_path)
    logger.info(
        "  Canvas: %s (%d nodes, %d edges) in %.2fs",
        canvas_path, len(result.canvas["nodes"]), len(result.canvas["edges"]), time.perf_counter() - t0,
    )
    return canvas_path


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Convert XMind (.xmind) mind maps to JSON Canvas (.canvas) with auto layout."
    )
    parser.add_argument(
        "inputs",
        nargs="*",
        type=Path,
        metavar="PATH",
        help=".xmind files or folders containing them (default: DATA_DIR, i.e. data/xmind)",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Write .canvas files and image folders here instead of next to each source (env OUTPUT_DIR)",
    )
    parser.add_argument(
        "--vault-root",
        type=Path,
        default=None,
        help="Make image paths in the canvas relative to this folder, e.g. an Obsidian vault (env VAULT_ROOT)",
    )
    parser.add_argument("--algorithm", choices=LAYOUT_ALGORITHMS, default=None, help="Layout algorithm (default: mrtree)")
    parser.add_argument("--direction", choices=LAYOUT_DIRECTIONS, default=None, help="Layout direction (default: RIGHT)")
    parser.add_argument("--node-spacing", type=_int_at_least(0), default=None, help="Space between sibling nodes (default: 80)")
    parser.add_argument("--layer-spacing", type=_int_at_least(0), default=None, help="Space between tree levels (default: 150)")
    parser.add_argument("--node-width", type=_int_at_least(1), default=None, help="Minimum node width (default: 200)")
    parser.add_argument("--node-height", type=_int_at_least(1), default=None, help="Node height (default: 80)")
    parser.add_argument(
        "--no-images",
        action="store_true",
        help="Do not write embedded images (file nodes still point at <name>_images/)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    load_env()
    options = ConversionOptions.from_env().merged(
        layout_algorithm=args.algorithm,
        direction=args.direction,
        node_spacing=args.node_spacing,
        layer_spacing=args.layer_spacing,
        default_node_width=args.node_width,
        default_node_height=args.node_height,
    )
    output_dir = args.output_dir or get_output_dir()
    vault_root = args.vault_root or get_vault_root()

    inputs = list(args.inputs)
    if not inputs:
        data_dir = get_data_dir()
        if not data_dir.is_dir():
            data_dir.mkdir(parents=True, exist_ok=True)
            logger.info("Created data directory: %s", data_dir)
        inputs = [data_dir]

    files, missing = _collect_inputs(inputs)
    for p in missing:
        logger.error("Input not found: %s", p)
    if not files:
        logger.warning("No XMind files found")
        return 1 if missing else 0

    logger.info(
        "Converting %d file(s): %s, direction %s",
        len(files), options.layout_algorithm, options.direction,
    )
    failed = 0
    for idx, source in enumerate(files):
        logger.info("File %d/%d: %s", idx + 1, len(files), source)
        try:
            convert_file(
                source,
                options,
                output_dir=output_dir,
                vault_root=vault_root,
                write_images=not args.no_images,
            )
        except (ConversionError, OSError) as e:
            failed += 1
            logger.error("Failed to convert %s: %s", source.name, e)

    logger.info("Done. %d converted, %d failed", len(files) - failed, failed)
    return 1 if failed or missing else 0


if __name__ == "__main__":
    sys.exit(main())
