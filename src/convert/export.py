"""
Output-side file conventions: <stem>.canvas and a <stem>_images/ folder beside it.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping

from ..xmind import ImageResource

logger = logging.getLogger(__name__)

CANVAS_SUFFIX = ".canvas"
IMAGES_FOLDER_SUFFIX = "_images"


def canvas_path_for(source: Path | str, output_dir: Path | str | None = None) -> Path:
    """map.xmind -> map.canvas, next to the source or inside output_dir."""
    source = Path(source)
    parent = Path(output_dir) if output_dir is not None else source.parent
    return parent / f"{source.stem}{CANVAS_SUFFIX}"


def image_folder_for(source: Path | str, output_dir: Path | str | None = None) -> Path:
    """map.xmind -> map_images/, beside the canvas file."""
    source = Path(source)
    parent = Path(output_dir) if output_dir is not None else source.parent
    return parent / f"{source.stem}{IMAGES_FOLDER_SUFFIX}"


def save_images(images: Mapping[str, ImageResource], folder: Path | str) -> dict[str, Path]:
    """
    Write every image into folder (sub-paths in names are kept). Returns
    name -> written path; an image that fails to write is logged and skipped.
    """
    folder = Path(folder)
    saved: dict[str, Path] = {}
    if not images:
        return saved
    folder.mkdir(parents=True, exist_ok=True)
    root = folder.resolve()
    for name, image in images.items():
        target = folder / name
        if root not in target.resolve().parents:
            logger.warning("Skipping image with unsafe name: %s", name)
            continue
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(image.data)
        except OSError as e:
            logger.warning("Failed to save image %s: %s", name, e)
            continue
        saved[name] = target
    return saved


def relative_file_path(path: Path, base: Path) -> str:
    """POSIX path of path relative to base (as canvas viewers expect), or absolute if outside base."""
    path, base = Path(path).resolve(), Path(base).resolve()
    try:
        return path.relative_to(base).as_posix()
    except ValueError:
        return path.as_posix()
