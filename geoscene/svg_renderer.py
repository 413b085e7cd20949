"""SVG renderer for resolved scenes.

The drawing is laid out directly in device space: every math-space coordinate
goes through :class:`~geoscene.viewport.CoordinateMapper` (a vertical flip)
and the root ``viewBox`` covers the padded viewport.  Pixel scaling is left to
the viewer through ``preserveAspectRatio="xMidYMid meet"``.  Strokes use
``vector-effect: non-scaling-stroke`` so their width is in pixels, while disc
radii, arrowheads and fonts are fractions of the view span.  Numbers carry
as many decimals as the span needs (see :func:`~geoscene.utils.decimals_for_span`).

Layers, in paint order: ``background``, ``grid`` (only for scenes with a
vector), ``objects`` (scene order), ``labels``.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
import svgwrite

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
from .logging_utils import apply_debug_logging
from .resolver import SceneResolution, resolve_scene
from .scene import GeometryObject, Scene
from .theme import Theme, needs_grid, select_theme
from .utils import format_float
from .viewport import CoordinateMapper, PaddedBounds

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 480
DEFAULT_HEIGHT = 350
POINT_OUTLINE = "#f8fafc"
FONT_FAMILY = "ui-sans-serif, system-ui, sans-serif"
NON_SCALING = "non-scaling-stroke"

Point = Tuple[float, float]


@dataclass
class _Painter:
    drawing: svgwrite.Drawing
    mapper: CoordinateMapper
    theme: Theme
    config: RenderConfig
    objects: "svgwrite.container.Group"
    labels: "svgwrite.container.Group"
    span: float
    decimals: int = 4

    def num(self, value: float) -> str:
        return format_float(value, self.decimals)

    @property
    def label_offset(self) -> float:
        return self.span * self.config.label_offset_ratio

    def device(self, pt: Sequence[float]) -> Point:
        return self.mapper.to_device(pt[0], pt[1])

    def stroke_attrs(self) -> dict:
        return {
            "stroke": self.theme.stroke,
            "stroke_width": format_float(self.config.stroke_width_px),
            "vector_effect": NON_SCALING,
            "stroke_linecap": "round",
            "stroke_linejoin": "round",
        }

    def fill_attrs(self) -> dict:
        return {
            "fill": self.theme.fill,
            "fill_opacity": format_float(self.theme.fill_opacity),
        }

    def text(self, label: Optional[str], at: Sequence[float], *, anchor: str, owner: str) -> None:
        text = sanitize_label(label)
        if not text:
            return
        x, y = self.device(at)
        self.labels.add(
            self.drawing.text(
                text,
                insert=(self.num(x), self.num(y)),
                id=f"{owner}-label",
                fill=self.theme.label,
                font_size=self.num(self.span * self.config.font_size_ratio),
                font_family=FONT_FAMILY,
                text_anchor=anchor,
            )
        )


# ---------------------------------------------------------------------------
# Per-kind emitters
# ---------------------------------------------------------------------------

def _emit_point(p: _Painter, obj: GeometryObject, geom: ResolvedPoint) -> None:
    x, y = p.device(geom.xy)
    p.objects.add(
        p.drawing.circle(
            center=(p.num(x), p.num(y)),
            r=p.num(p.span * p.config.point_radius_ratio),
            id=obj.id,
            fill=p.theme.stroke,
            stroke=POINT_OUTLINE,
            stroke_opacity="0.8",
            stroke_width="1",
            vector_effect=NON_SCALING,
        )
    )
    off = p.label_offset
    p.text(obj.label, (geom.x + off, geom.y + off), anchor="start", owner=obj.id)


def _emit_segment(p: _Painter, obj: GeometryObject, geom: ResolvedSegment) -> None:
    x1, y1 = p.device(geom.start)
    x2, y2 = p.device(geom.end)
    p.objects.add(
        p.drawing.line(
            start=(p.num(x1), p.num(y1)),
            end=(p.num(x2), p.num(y2)),
            id=obj.id,
            **p.stroke_attrs(),
        )
    )
    mx, my = geom.midpoint
    p.text(obj.label, (mx, my + p.label_offset), anchor="middle", owner=obj.id)


def arrowhead_points(tail: Point, tip: Point, size: float) -> Optional[List[Point]]:
    """Return the triangle of an arrowhead at ``tip`` (device coordinates)."""

    direction = np.subtract(tip, tail).astype(float)
    length = float(np.hypot(*direction))
    if length <= 1e-12 or size <= 0.0:
        return None
    unit = direction / length
    normal = np.array([-unit[1], unit[0]])
    base = np.asarray(tip, dtype=float) - unit * size
    left = base + normal * (size * 0.5)
    right = base - normal * (size * 0.5)
    return [
        (float(tip[0]), float(tip[1])),
        (float(left[0]), float(left[1])),
        (float(right[0]), float(right[1])),
    ]


def _emit_vector(p: _Painter, obj: GeometryObject, geom: ResolvedVector) -> None:
    tail = p.device(geom.tail)
    tip = p.device(geom.tip)
    group = p.drawing.g(id=obj.id)
    group.add(
        p.drawing.line(
            start=(p.num(tail[0]), p.num(tail[1])),
            end=(p.num(tip[0]), p.num(tip[1])),
            **p.stroke_attrs(),
        )
    )
    head = arrowhead_points(tail, tip, p.span * p.config.arrow_size_ratio)
    if head is not None:
        group.add(
            p.drawing.path(
                d=_polyline_path(head, closed=True, decimals=p.decimals),
                class_="arrowhead",
                fill=p.theme.stroke,
                stroke="none",
            )
        )
    p.objects.add(group)
    mx, my = geom.midpoint
    p.text(obj.label, (mx, my + p.label_offset), anchor="middle", owner=obj.id)


def _emit_circle(p: _Painter, obj: GeometryObject, geom: ResolvedCircle) -> None:
    cx, cy = p.device(geom.center)
    p.objects.add(
        p.drawing.circle(
            center=(p.num(cx), p.num(cy)),
            r=p.num(p.mapper.scale_length(geom.radius)),
            id=obj.id,
            fill="none",
            **p.stroke_attrs(),
        )
    )
    if obj.label:
        top = (geom.center[0], geom.center[1] + geom.radius + p.label_offset)
        p.text(obj.label, top, anchor="middle", owner=obj.id)


def _emit_polygon(p: _Painter, obj: GeometryObject, geom: ResolvedPolygon) -> None:
    vertices = p.mapper.to_device_many(geom.vertices)
    p.objects.add(
        p.drawing.path(
            d=_polyline_path(vertices, closed=True, decimals=p.decimals),
            id=obj.id,
            **p.fill_attrs(),
            **p.stroke_attrs(),
        )
    )
    if obj.label:
        cx = sum(v[0] for v in geom.vertices) / len(geom.vertices)
        cy = sum(v[1] for v in geom.vertices) / len(geom.vertices)
        p.text(obj.label, (cx, cy), anchor="middle", owner=obj.id)


def angle_sweep(geom: ResolvedAngle, policy: str) -> float:
    """Signed math-space sweep of the drawn arc for the configured policy."""

    if policy == "oriented":
        return geom.oriented_sweep()
    return geom.minor_sweep()


def angle_sector_path(
    mapper: CoordinateMapper,
    geom: ResolvedAngle,
    radius: float,
    policy: str = "minor",
    decimals: Optional[int] = None,
) -> str:
    """Return the SVG path of the filled sector drawn for ``geom``."""

    if decimals is None:
        decimals = mapper.decimals
    sweep = angle_sweep(geom, policy)
    vx, vy = geom.vertex
    start = (vx + radius * math.cos(geom.start_bearing), vy + radius * math.sin(geom.start_bearing))
    end_angle = geom.start_bearing + sweep
    end = (vx + radius * math.cos(end_angle), vy + radius * math.sin(end_angle))

    dv, ds, de = mapper.to_device_many([geom.vertex, start, end])
    r = format_float(mapper.scale_length(radius), decimals)
    large_arc = 1 if abs(sweep) > math.pi else 0
    # The y-flip keeps the on-screen turning direction, and SVG's positive
    # sweep is clockwise on screen.
    sweep_flag = 0 if sweep > 0 else 1
    return (
        f"M {_pair(dv, decimals)} L {_pair(ds, decimals)} "
        f"A {r} {r} 0 {large_arc} {sweep_flag} {_pair(de, decimals)} Z"
    )


def _emit_angle(p: _Painter, obj: GeometryObject, geom: ResolvedAngle) -> None:
    radius = p.config.angle_radius
    p.objects.add(
        p.drawing.path(
            d=angle_sector_path(p.mapper, geom, radius, p.config.angle_arc, p.decimals),
            id=obj.id,
            **p.fill_attrs(),
            **p.stroke_attrs(),
        )
    )
    if obj.label:
        mid = geom.start_bearing + angle_sweep(geom, p.config.angle_arc) * 0.5
        reach = radius + p.label_offset * 2.0
        vx, vy = geom.vertex
        at = (vx + reach * math.cos(mid), vy + reach * math.sin(mid))
        p.text(obj.label, at, anchor="middle", owner=obj.id)


def _emit(p: _Painter, obj: GeometryObject, geom: ResolvedGeometry) -> None:
    if isinstance(geom, ResolvedPoint):
        _emit_point(p, obj, geom)
    elif isinstance(geom, ResolvedSegment):
        _emit_segment(p, obj, geom)
    elif isinstance(geom, ResolvedVector):
        _emit_vector(p, obj, geom)
    elif isinstance(geom, ResolvedCircle):
        _emit_circle(p, obj, geom)
    elif isinstance(geom, ResolvedPolygon):
        _emit_polygon(p, obj, geom)
    elif isinstance(geom, ResolvedAngle):
        _emit_angle(p, obj, geom)
    else:
        raise TypeError(f"cannot render geometry of type {type(geom).__name__}")


# ---------------------------------------------------------------------------
# Grid
# ---------------------------------------------------------------------------

def grid_step(extent: float, target_cells: int = 10) -> float:
    """Return a 1/2/5 x 10^k step giving roughly ``target_cells`` cells over ``extent``."""

    if extent <= 0.0 or not math.isfinite(extent) or target_cells <= 0:
        return 0.0
    raw = extent / target_cells
    magnitude = 10.0 ** math.floor(math.log10(raw))
    for factor in (1.0, 2.0, 5.0, 10.0):
        step = factor * magnitude
        if step >= raw:
            return step
    return 10.0 * magnitude


def _grid_ticks(lo: float, hi: float, step: float) -> np.ndarray:
    if step <= 0.0 or hi <= lo:
        return np.empty(0)
    first = math.ceil(lo / step) * step
    ticks = np.arange(first, hi + step * 1e-9, step)
    # Snap away floating residue such as 0.30000000000000004
    return np.round(ticks / step) * step


def _emit_grid(p: _Painter, bounds: PaddedBounds) -> None:
    group = p.drawing.g(id="grid")
    extent = max(bounds.xmax - bounds.xmin, bounds.ymax - bounds.ymin)
    step = grid_step(extent, p.config.grid_target_cells)
    line_attrs = {"stroke": p.theme.grid, "stroke_width": "1", "vector_effect": NON_SCALING}

    top = p.device((0.0, bounds.ymax))[1]
    bottom = p.device((0.0, bounds.ymin))[1]
    for x in _grid_ticks(bounds.xmin, bounds.xmax, step):
        group.add(
            p.drawing.line(
                start=(p.num(x), p.num(top)),
                end=(p.num(x), p.num(bottom)),
                **line_attrs,
            )
        )
    for y in _grid_ticks(bounds.ymin, bounds.ymax, step):
        dy = p.device((0.0, float(y)))[1]
        group.add(
            p.drawing.line(
                start=(p.num(bounds.xmin), p.num(dy)),
                end=(p.num(bounds.xmax), p.num(dy)),
                **line_attrs,
            )
        )

    axis_attrs = {"stroke": p.theme.axis, "stroke_width": "1.5", "vector_effect": NON_SCALING}
    if bounds.ymin <= 0.0 <= bounds.ymax:
        group.add(
            p.drawing.line(
                start=(p.num(bounds.xmin), "0"),
                end=(p.num(bounds.xmax), "0"),
                class_="axis",
                **axis_attrs,
            )
        )
    if bounds.xmin <= 0.0 <= bounds.xmax:
        group.add(
            p.drawing.line(
                start=("0", p.num(top)),
                end=("0", p.num(bottom)),
                class_="axis",
                **axis_attrs,
            )
        )
    p.drawing.add(group)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def render_svg(
    scene: Scene,
    mode: str = "SOLVER",
    *,
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    config: Optional[RenderConfig] = None,
    resolution: Optional[SceneResolution] = None,
) -> svgwrite.Drawing:
    """Render ``scene`` in ``mode`` into an SVG drawing of ``width`` x ``height`` pixels."""

    cfg = resolve_config(config)
    theme = select_theme(mode)
    if resolution is None:
        resolution = resolve_scene(scene, config=cfg)

    mapper = CoordinateMapper(scene.viewport, cfg.padding_ratio)
    box = mapper.view_box()
    span = mapper.span()
    if not (span > 0.0 and math.isfinite(span)):
        span = 1.0
    decimals = mapper.decimals

    drawing = svgwrite.Drawing(size=(str(width), str(height)), debug=False)
    drawing["viewBox"] = box.as_attribute(decimals)
    drawing.fit(horiz="center", vert="middle", scale="meet")

    drawing.add(
        drawing.rect(
            insert=(format_float(box.x0, decimals), format_float(box.y0, decimals)),
            size=(format_float(box.width, decimals), format_float(box.height, decimals)),
            id="background",
            fill=theme.background,
        )
    )

    painter = _Painter(
        drawing=drawing,
        mapper=mapper,
        theme=theme,
        config=cfg,
        objects=drawing.g(id="objects"),
        labels=drawing.g(id="labels"),
        span=span,
        decimals=decimals,
    )
    if needs_grid(scene):
        _emit_grid(painter, mapper.padded_bounds())

    for obj, geom in resolution.entries:
        _emit(painter, obj, geom)
    drawing.add(painter.objects)
    drawing.add(painter.labels)

    logger.debug(
        "Rendered %d of %d object(s) in %s mode (%d dropped)",
        len(resolution.entries),
        len(scene.objects),
        mode,
        len(resolution.unresolved),
    )
    return drawing


def render_svg_string(scene: Scene, mode: str = "SOLVER", **kwargs) -> str:
    return render_svg(scene, mode, **kwargs).tostring()


def save_svg(scene: Scene, path: Union[str, Path], mode: str = "SOLVER", **kwargs) -> Path:
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(render_svg_string(scene, mode, **kwargs), encoding="utf-8")
    return output_path


def _pair(pt: Sequence[float], decimals: int) -> str:
    return f"{format_float(pt[0], decimals)} {format_float(pt[1], decimals)}"


def _polyline_path(points: Sequence[Point], *, closed: bool, decimals: int = 4) -> str:
    parts = [f"M {_pair(points[0], decimals)}"]
    parts.extend(f"L {_pair(pt, decimals)}" for pt in points[1:])
    if closed:
        parts.append("Z")
    return " ".join(parts)


apply_debug_logging(globals(), logger=logger, skip={"grid_step", "_pair", "_polyline_path"})
