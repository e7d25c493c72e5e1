"""
Extract embedded images from the resources/ folder of an .xmind archive.
"""
from __future__ import annotations

import io
import logging
import zipfile
import zlib
from dataclasses import dataclass
from pathlib import PurePosixPath

from PIL import Image

logger = logging.getLogger(__name__)

RESOURCES_PREFIX = "resources/"

MIME_TYPES = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "webp": "image/webp",
    "svg": "image/svg+xml",
    "bmp": "image/bmp",
}


@dataclass
class ImageResource:
    """One image from resources/, keyed by its name relative to that folder."""
    name: str
    data: bytes
    mime_type: str
    # Intrinsic pixel size when Pillow can decode the payload.
    width: int | None = None
    height: int | None = None


def get_mime_type(filename: str) -> str | None:
    """MIME type for a known image extension (case-insensitive), else None."""
    suffix = PurePosixPath(filename).suffix.lower().lstrip(".")
    return MIME_TYPES.get(suffix)


def probe_image_size(data: bytes) -> tuple[int, int] | None:
    """Pixel size of a raster image, or None if Pillow cannot identify it."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            return img.size
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        logger.debug("Could not probe image size: %s", e)
        return None


def extract_images(zf: zipfile.ZipFile) -> dict[str, ImageResource]:
    """
    Read every recognized image under resources/. Entries with unknown
    extensions are skipped; an entry that cannot be read is logged and skipped.
    """
    images: dict[str, ImageResource] = {}
    for info in zf.infolist():
        path = info.filename
        if not path.startswith(RESOURCES_PREFIX) or info.is_dir():
            continue
        name = path[len(RESOURCES_PREFIX):]
        mime_type = get_mime_type(name)
        if mime_type is None:
            logger.debug("Skipping non-image resource: %s", path)
            continue
        try:
            data = zf.read(info)
        except (zipfile.BadZipFile, OSError, RuntimeError, zlib.error) as e:
            logger.warning("Failed to extract image %s: %s", path, e)
            continue
        if not data:
            logger.warning("Skipping empty image resource: %s", path)
            continue
        size = None if mime_type == "image/svg+xml" else probe_image_size(data)
        images[name] = ImageResource(
            name=name,
            data=data,
            mime_type=mime_type,
            width=size[0] if size else None,
            height=size[1] if size else None,
        )
    return images
