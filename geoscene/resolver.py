"""Resolve scene objects into concrete geometry.

Every object either resolves to one of the ``Resolved*`` types from
:mod:`geoscene.geometry` or is dropped.  Dropped objects never abort the rest
of the scene; they are collected as :class:`UnresolvedObject` records and
logged (DEBUG by default, WARNING when ``warn_unresolved`` is configured).

Parent references are looked up through an id table built once per scene and
resolved depth-first with memoisation, so an object may depend on any other
object regardless of list order.  A reference cycle makes the objects on it
unresolvable.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Optional, Set, Tuple, Union

from .config import RenderConfig, resolve_config
from .geometry import (
    ResolvedAngle,
    ResolvedCircle,
    ResolvedGeometry,
    ResolvedPoint,
    ResolvedPolygon,
    ResolvedSegment,
    ResolvedVector,
    bearing,
    distance,
)
from .logging_utils import apply_debug_logging
from .scene import GeometryObject, Scene

logger = logging.getLogger(__name__)


class ResolutionError(RuntimeError):
    """Raised internally when an object's rule cannot produce geometry."""


@dataclass(frozen=True)
class UnresolvedObject:
    id: str
    kind: str
    reason: str


@dataclass
class SceneResolution:
    """Outcome of resolving one scene, in scene (draw) order."""

    entries: List[Tuple[GeometryObject, ResolvedGeometry]] = field(default_factory=list)
    unresolved: List[UnresolvedObject] = field(default_factory=list)
    _by_id: Dict[str, ResolvedGeometry] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        for obj, geom in self.entries:
            self._by_id.setdefault(obj.id, geom)

    def add(self, obj: GeometryObject, geom: ResolvedGeometry) -> None:
        self.entries.append((obj, geom))
        self._by_id.setdefault(obj.id, geom)

    @property
    def geometries(self) -> Dict[str, ResolvedGeometry]:
        return dict(self._by_id)

    def get(self, object_id: str) -> Optional[ResolvedGeometry]:
        return self._by_id.get(object_id)

    @property
    def is_empty(self) -> bool:
        return not self.entries


def build_index(scene: Scene) -> Dict[str, GeometryObject]:
    """Return the id -> object table; the first object wins on a duplicate id."""

    index: Dict[str, GeometryObject] = {}
    for obj in scene.objects:
        index.setdefault(obj.id, obj)
    return index


class _Context:
    """Memoised depth-first resolution over the parent graph of one scene."""

    def __init__(self, index: Mapping[str, GeometryObject]) -> None:
        self.index = index
        self._results: Dict[GeometryObject, Union[ResolvedGeometry, ResolutionError]] = {}
        self._in_progress: Set[str] = set()

    def resolve(self, obj: GeometryObject) -> ResolvedGeometry:
        cached = self._results.get(obj)
        if cached is None:
            cached = self._compute(obj)
            self._results[obj] = cached
        if isinstance(cached, ResolutionError):
            raise cached
        return cached

    def _compute(self, obj: GeometryObject) -> Union[ResolvedGeometry, ResolutionError]:
        rule = _RULES.get(obj.kind)
        if rule is None:
            return ResolutionError(f"unsupported kind '{obj.kind}'")
        self._in_progress.add(obj.id)
        try:
            return rule(obj, self)
        except ResolutionError as exc:
            return exc
        finally:
            self._in_progress.discard(obj.id)

    def point(self, parent_id: str) -> Tuple[float, float]:
        parent = self.index.get(parent_id)
        if parent is None:
            raise ResolutionError(f"parent '{parent_id}' is not in the scene")
        if parent_id in self._in_progress:
            raise ResolutionError(f"cyclic reference through '{parent_id}'")
        try:
            geom = self.resolve(parent)
        except ResolutionError as exc:
            raise ResolutionError(f"parent '{parent_id}' is unresolvable ({exc})") from exc
        if not isinstance(geom, ResolvedPoint):
            raise ResolutionError(f"parent '{parent_id}' is a {parent.kind}, not a point")
        return geom.xy


# ---------------------------------------------------------------------------
# Per-kind rules
# ---------------------------------------------------------------------------

def _resolve_point(obj: GeometryObject, ctx: _Context) -> ResolvedGeometry:
    if len(obj.coords) < 2:
        raise ResolutionError("point needs 2 explicit coordinates")
    return ResolvedPoint(obj.coords[0], obj.coords[1])


def _resolve_segment(obj: GeometryObject, ctx: _Context) -> ResolvedGeometry:
    if len(obj.coords) >= 4:
        c = obj.coords
        return ResolvedSegment((c[0], c[1]), (c[2], c[3]), kind=obj.kind)
    if len(obj.parents) == 2:
        start = ctx.point(obj.parents[0])
        end = ctx.point(obj.parents[1])
        return ResolvedSegment(start, end, kind=obj.kind)
    raise ResolutionError(f"{obj.kind} needs 4 explicit coordinates or 2 point parents")


def _resolve_vector(obj: GeometryObject, ctx: _Context) -> ResolvedGeometry:
    c = obj.coords
    if len(c) == 4:
        return ResolvedVector((c[0], c[1]), (c[2], c[3]))
    if len(c) >= 2:
        return ResolvedVector((0.0, 0.0), (c[0], c[1]))
    if not c and len(obj.parents) == 2:
        return ResolvedVector(ctx.point(obj.parents[0]), ctx.point(obj.parents[1]))
    raise ResolutionError("vector needs 2 or 4 explicit coordinates or 2 point parents")


def _resolve_circle(obj: GeometryObject, ctx: _Context) -> ResolvedGeometry:
    if len(obj.parents) == 2:
        center = ctx.point(obj.parents[0])
        on_circle = ctx.point(obj.parents[1])
        return ResolvedCircle(center, distance(center, on_circle))
    if len(obj.parents) == 1:
        radius = obj.radius
        if radius is None or not math.isfinite(radius) or radius <= 0.0:
            raise ResolutionError("circle with a single parent needs a positive radius")
        return ResolvedCircle(ctx.point(obj.parents[0]), float(radius))
    raise ResolutionError("circle needs center + point parents or center parent + radius")


def _resolve_polygon(obj: GeometryObject, ctx: _Context) -> ResolvedGeometry:
    if len(obj.parents) < 3:
        raise ResolutionError("polygon needs at least 3 point parents")
    return ResolvedPolygon(tuple(ctx.point(pid) for pid in obj.parents))


def _resolve_angle(obj: GeometryObject, ctx: _Context) -> ResolvedGeometry:
    if len(obj.parents) != 3:
        raise ResolutionError("angle needs exactly 3 point parents")
    ray1, vertex, ray2 = (ctx.point(pid) for pid in obj.parents)
    return ResolvedAngle(
        ray1=ray1,
        vertex=vertex,
        ray2=ray2,
        start_bearing=bearing(vertex, ray1),
        end_bearing=bearing(vertex, ray2),
    )


_RULES: Dict[str, Callable[[GeometryObject, _Context], ResolvedGeometry]] = {
    "point": _resolve_point,
    "segment": _resolve_segment,
    "line": _resolve_segment,
    "vector": _resolve_vector,
    "circle": _resolve_circle,
    "polygon": _resolve_polygon,
    "angle": _resolve_angle,
}


def resolve_scene(scene: Scene, *, config: Optional[RenderConfig] = None) -> SceneResolution:
    """Resolve every object of ``scene``; unresolvable ones are dropped."""

    cfg = resolve_config(config)
    ctx = _Context(build_index(scene))
    result = SceneResolution()
    for obj in scene.objects:
        try:
            geom = ctx.resolve(obj)
        except ResolutionError as exc:
            record = UnresolvedObject(id=obj.id, kind=obj.kind, reason=str(exc))
            result.unresolved.append(record)
            if cfg.warn_unresolved:
                logger.warning("Dropping %s '%s': %s", obj.kind, obj.id, record.reason)
            else:
                logger.debug("Dropping %s '%s': %s", obj.kind, obj.id, record.reason)
            continue
        result.add(obj, geom)
    return result


apply_debug_logging(globals(), logger=logger)
