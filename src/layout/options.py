"""
Conversion options: layout algorithm/direction, spacing, and default node size.
"""
from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any

from ..config import (
    get_default_node_height,
    get_default_node_width,
    get_layer_spacing,
    get_layout_algorithm,
    get_layout_direction,
    get_node_spacing,
)

LAYOUT_ALGORITHMS = ("mrtree", "layered")
LAYOUT_DIRECTIONS = ("RIGHT", "LEFT", "DOWN", "UP")


@dataclass(frozen=True)
class ConversionOptions:
    layout_algorithm: str = "mrtree"
    direction: str = "RIGHT"
    node_spacing: float = 80
    layer_spacing: float = 150
    default_node_width: float = 200
    default_node_height: float = 80

    def __post_init__(self) -> None:
        for name in ("default_node_width", "default_node_height"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)!r}")
        for name in ("node_spacing", "layer_spacing"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative, got {getattr(self, name)!r}")

    @classmethod
    def from_env(cls) -> "ConversionOptions":
        """Defaults taken from XMIND_* environment variables (see src.config)."""
        return cls(
            layout_algorithm=get_layout_algorithm(),
            direction=get_layout_direction(),
            node_spacing=get_node_spacing(),
            layer_spacing=get_layer_spacing(),
            default_node_width=get_default_node_width(),
            default_node_height=get_default_node_height(),
        )

    def merged(self, **overrides: Any) -> "ConversionOptions":
        """Copy with the given fields replaced; None values keep the current setting."""
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise TypeError(f"Unknown conversion option(s): {', '.join(sorted(unknown))}")
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self
