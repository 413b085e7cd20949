"""Visual themes for the four application modes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Union, cast

from .scene import Mode, Scene

BACKGROUND = "#050505"
LABEL_COLOR = "#e5e7eb"
GRID_COLOR = "#374151"
AXIS_COLOR = "#6b7280"
FILL_OPACITY = 0.2

MODE_COLORS: Dict[str, str] = {
    "SOLVER": "#60a5fa",  # blue
    "DRILL": "#facc15",  # yellow
    "EXAM": "#c084fc",  # purple
    "CONCEPT": "#4ade80",  # green
}


@dataclass(frozen=True)
class Theme:
    stroke: str
    fill: str
    fill_opacity: float = FILL_OPACITY
    label: str = LABEL_COLOR
    background: str = BACKGROUND
    grid: str = GRID_COLOR
    axis: str = AXIS_COLOR


def normalize_mode(mode: Union[Mode, str]) -> Mode:
    key = str(mode).strip().upper()
    if key not in MODE_COLORS:
        raise ValueError(
            f"unknown visual mode {mode!r}; expected one of {', '.join(MODE_COLORS)}"
        )
    return cast(Mode, key)


def select_theme(mode: Union[Mode, str] = "SOLVER") -> Theme:
    """Return the stroke/fill pair for ``mode``.

    The fill is the stroke color itself; transparency comes from
    ``fill_opacity`` so exporters without 8-digit hex support render it too.
    """

    color = MODE_COLORS[normalize_mode(mode)]
    return Theme(stroke=color, fill=color)


def needs_grid(scene: Scene) -> bool:
    """Vectors get a coordinate frame; every other figure is drawn bare."""

    return scene.has_kind("vector")
