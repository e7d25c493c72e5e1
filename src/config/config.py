"""
Load .env from project root; expose DATA_DIR, OUTPUT_DIR, VAULT_ROOT and XMIND_* layout defaults.
Call load_env() before using in main or other modules.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_LAYOUT_ALGORITHM = "mrtree"
DEFAULT_LAYOUT_DIRECTION = "RIGHT"
DEFAULT_NODE_SPACING = 80
DEFAULT_LAYER_SPACING = 150
DEFAULT_NODE_WIDTH = 200
DEFAULT_NODE_HEIGHT = 80


def _project_root() -> Path:
    """Project root (directory containing data/, src/)."""
    p = Path(__file__).resolve()
    # src/config/config.py -> two levels up
    for _ in range(3):
        p = p.parent
        if (p / "data").is_dir() or (p / "src").is_dir():
            return p
    return Path.cwd()


def load_env() -> None:
    """Load env vars from project root .env if present."""
    root = _project_root()
    env_file = root / ".env"
    if not env_file.is_file():
        return
    for line in env_file.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        k, _, v = line.partition("=")
        k, v = k.strip(), v.strip().strip("'\"")
        if k and v:
            os.environ.setdefault(k, v)


def _env_int(name: str, default: int, minimum: int = 0) -> int:
    """Integer env var; unset, non-integer or below-minimum values give the default."""
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r (not an integer), using %d", name, raw, default)
        return default
    if value < minimum:
        logger.warning("Ignoring %s=%r (must be at least %d), using %d", name, raw, minimum, default)
        return default
    return value


def _env_path(name: str) -> Path | None:
    raw = os.environ.get(name)
    return Path(raw) if raw else None


def get_data_dir() -> Path:
    """Folder scanned for .xmind files when no input is given; default <project_root>/data/xmind."""
    load_env()
    return _env_path("DATA_DIR") or _project_root() / "data" / "xmind"


def get_output_dir() -> Path | None:
    """Where .canvas files go (OUTPUT_DIR). None means next to each source file."""
    load_env()
    return _env_path("OUTPUT_DIR")


def get_vault_root() -> Path | None:
    """Directory that canvas file paths are made relative to (VAULT_ROOT)."""
    load_env()
    return _env_path("VAULT_ROOT")


def get_layout_algorithm() -> str:
    """Layout algorithm name (XMIND_LAYOUT_ALGORITHM). Default: mrtree."""
    load_env()
    return os.environ.get("XMIND_LAYOUT_ALGORITHM") or DEFAULT_LAYOUT_ALGORITHM


def get_layout_direction() -> str:
    """Layout direction RIGHT/LEFT/DOWN/UP (XMIND_LAYOUT_DIRECTION). Default: RIGHT."""
    load_env()
    return (os.environ.get("XMIND_LAYOUT_DIRECTION") or DEFAULT_LAYOUT_DIRECTION).upper()


def get_node_spacing() -> int:
    load_env()
    return _env_int("XMIND_NODE_SPACING", DEFAULT_NODE_SPACING)


def get_layer_spacing() -> int:
    load_env()
    return _env_int("XMIND_LAYER_SPACING", DEFAULT_LAYER_SPACING)


def get_default_node_width() -> int:
    load_env()
    return _env_int("XMIND_NODE_WIDTH", DEFAULT_NODE_WIDTH, minimum=1)


def get_default_node_height() -> int:
    load_env()
    return _env_int("XMIND_NODE_HEIGHT", DEFAULT_NODE_HEIGHT, minimum=1)
