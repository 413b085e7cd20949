"""Interactive board back-end.

Instead of drawing primitives this back-end hands resolved coordinates to a
third-party interactive graphing board (JSXGraph-style ``board.create(type,
parents, attributes)``).  The board owns pan/zoom, grid and axes; only the
initial bounding box is supplied from here.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from .config import RenderConfig, resolve_config
from .geometry import (
    ResolvedAngle,
    ResolvedCircle,
    ResolvedGeometry,
    ResolvedPoint,
    ResolvedPolygon,
    ResolvedSegment,
    ResolvedVector,
)
from .labels import sanitize_label
from .resolver import SceneResolution, resolve_scene
from .scene import GeometryObject, Scene
from .theme import Theme, select_theme
from .viewport import CoordinateMapper

logger = logging.getLogger(__name__)


@dataclass
class BoardElement:
    type: str
    parents: List[Any]
    attributes: Dict[str, Any] = field(default_factory=dict)

    def as_command(self) -> str:
        payload = json.dumps(self.parents, separators=(",", ":"))
        return f"{self.type}:{payload}"


def board_options(scene: Scene, *, config: Optional[RenderConfig] = None) -> Dict[str, Any]:
    """Initial board options: padded bounding box as ``[left, top, right, bottom]``."""

    cfg = resolve_config(config)
    bounds = CoordinateMapper(scene.viewport, cfg.padding_ratio).padded_bounds()
    return {
        "boundingbox": [bounds.xmin, bounds.ymax, bounds.xmax, bounds.ymin],
        "keepaspectratio": True,
        "showCopyright": False,
    }


def _attributes(theme: Theme, obj: GeometryObject, *, filled: bool = False) -> Dict[str, Any]:
    attrs: Dict[str, Any] = {
        "id": obj.id,
        "strokeColor": theme.stroke,
        "fixed": True,
    }
    if filled:
        attrs["fillColor"] = theme.fill
        attrs["fillOpacity"] = theme.fill_opacity
    label = sanitize_label(obj.label)
    if label:
        attrs["name"] = label
        attrs["withLabel"] = True
    else:
        attrs["withLabel"] = False
    return attrs


def _pair(pt: Sequence[float]) -> List[float]:
    return [float(pt[0]), float(pt[1])]


def board_element(
    obj: GeometryObject, geom: ResolvedGeometry, theme: Theme, config: RenderConfig
) -> BoardElement:
    if isinstance(geom, ResolvedPoint):
        attrs = _attributes(theme, obj)
        attrs["fillColor"] = theme.stroke
        return BoardElement("point", _pair(geom.xy), attrs)
    if isinstance(geom, ResolvedSegment):
        return BoardElement("segment", [_pair(geom.start), _pair(geom.end)], _attributes(theme, obj))
    if isinstance(geom, ResolvedVector):
        return BoardElement("arrow", [_pair(geom.tail), _pair(geom.tip)], _attributes(theme, obj))
    if isinstance(geom, ResolvedCircle):
        return BoardElement("circle", [_pair(geom.center), float(geom.radius)], _attributes(theme, obj))
    if isinstance(geom, ResolvedPolygon):
        return BoardElement(
            "polygon", [_pair(v) for v in geom.vertices], _attributes(theme, obj, filled=True)
        )
    if isinstance(geom, ResolvedAngle):
        first, second = geom.ray1, geom.ray2
        # The board always sweeps counter-clockwise from the first ray.
        if config.angle_arc == "minor" and geom.orientation < 0.0:
            first, second = second, first
        attrs = _attributes(theme, obj, filled=True)
        attrs["radius"] = config.angle_radius
        return BoardElement("angle", [_pair(first), _pair(geom.vertex), _pair(second)], attrs)
    raise TypeError(f"cannot build a board element for {type(geom).__name__}")


def board_elements(
    scene: Scene,
    mode: str = "SOLVER",
    *,
    config: Optional[RenderConfig] = None,
    resolution: Optional[SceneResolution] = None,
) -> List[BoardElement]:
    """Return one board element per resolvable object, in scene order."""

    cfg = resolve_config(config)
    theme = select_theme(mode)
    if resolution is None:
        resolution = resolve_scene(scene, config=cfg)
    elements = [board_element(obj, geom, theme, cfg) for obj, geom in resolution.entries]
    logger.debug("Built %d board element(s) for %d object(s)", len(elements), len(scene.objects))
    return elements


def format_board_commands(elements: Sequence[BoardElement]) -> str:
    """Serialise elements as ``type:JSON`` commands joined by ``;``."""

    return ";".join(element.as_command() for element in elements)


def board_payload(
    scene: Scene,
    mode: str = "SOLVER",
    *,
    config: Optional[RenderConfig] = None,
    resolution: Optional[SceneResolution] = None,
) -> Dict[str, Any]:
    """JSON-ready bundle of board options and elements with their attributes."""

    cfg = resolve_config(config)
    return {
        "options": board_options(scene, config=cfg),
        "elements": [
            {"type": el.type, "parents": el.parents, "attributes": el.attributes}
            for el in board_elements(scene, mode, config=cfg, resolution=resolution)
        ],
    }
