"""Configuration helpers for resolution and rendering."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Optional

ANGLE_ARC_POLICIES = ("minor", "oriented")


@dataclass
class RenderConfig:
    """Knobs shared by the resolver and both rendering back-ends."""

    padding_ratio: float = 0.1
    angle_radius: float = 0.6
    angle_arc: str = "minor"
    warn_unresolved: bool = False
    stroke_width_px: float = 2.0
    point_radius_ratio: float = 0.008
    font_size_ratio: float = 0.045
    arrow_size_ratio: float = 0.03
    label_offset_ratio: float = 0.02
    grid_target_cells: int = 10

    def __post_init__(self) -> None:
        if self.angle_arc not in ANGLE_ARC_POLICIES:
            raise ValueError(
                f"angle_arc must be one of {', '.join(ANGLE_ARC_POLICIES)} (got {self.angle_arc!r})"
            )


_RENDER_CONFIG = RenderConfig()


def get_render_config() -> RenderConfig:
    return copy.deepcopy(_RENDER_CONFIG)


def set_render_config(config: RenderConfig) -> None:
    global _RENDER_CONFIG
    _RENDER_CONFIG = copy.deepcopy(config)


def resolve_config(config: Optional[RenderConfig]) -> RenderConfig:
    return config if config is not None else get_render_config()
