"""Resolved geometry produced by the object resolver.

Each resolved kind is its own frozen dataclass; ``ResolvedGeometry`` is the
union the renderers dispatch on.  Coordinates are plain float tuples in math
space (x right, y up).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence, Tuple, Union

Point = Tuple[float, float]
Vector = Tuple[float, float]


def _as_point(pt: Sequence[float]) -> Point:
    return (float(pt[0]), float(pt[1]))


def _sub(a: Sequence[float], b: Sequence[float]) -> Vector:
    return (float(a[0]) - float(b[0]), float(a[1]) - float(b[1]))


def _cross(a: Sequence[float], b: Sequence[float]) -> float:
    return float(a[0]) * float(b[1]) - float(a[1]) * float(b[0])


def distance(a: Sequence[float], b: Sequence[float]) -> float:
    dx, dy = _sub(b, a)
    return math.hypot(dx, dy)


def midpoint(a: Sequence[float], b: Sequence[float]) -> Point:
    ax, ay = _as_point(a)
    bx, by = _as_point(b)
    return ((ax + bx) * 0.5, (ay + by) * 0.5)


def bearing(origin: Sequence[float], target: Sequence[float]) -> float:
    """Return the direction of ``target`` seen from ``origin`` in radians."""

    dx, dy = _sub(target, origin)
    return math.atan2(dy, dx)


@dataclass(frozen=True)
class ResolvedPoint:
    x: float
    y: float

    @property
    def xy(self) -> Point:
        return (self.x, self.y)


@dataclass(frozen=True)
class ResolvedSegment:
    start: Point
    end: Point
    kind: str = "segment"  # "segment" or "line"

    @property
    def midpoint(self) -> Point:
        return midpoint(self.start, self.end)


@dataclass(frozen=True)
class ResolvedVector:
    tail: Point
    tip: Point

    @property
    def midpoint(self) -> Point:
        return midpoint(self.tail, self.tip)


@dataclass(frozen=True)
class ResolvedCircle:
    center: Point
    radius: float


@dataclass(frozen=True)
class ResolvedPolygon:
    vertices: Tuple[Point, ...]

    def edges(self) -> Tuple[Tuple[Point, Point], ...]:
        count = len(self.vertices)
        return tuple(
            (self.vertices[idx], self.vertices[(idx + 1) % count]) for idx in range(count)
        )


@dataclass(frozen=True)
class ResolvedAngle:
    ray1: Point
    vertex: Point
    ray2: Point
    start_bearing: float
    end_bearing: float

    @property
    def orientation(self) -> float:
        """Cross product of the two ray directions (positive = counter-clockwise)."""

        return _cross(_sub(self.ray1, self.vertex), _sub(self.ray2, self.vertex))

    def minor_sweep(self) -> float:
        """Signed sweep from ``start_bearing`` to ``end_bearing`` the short way around."""

        delta = (self.end_bearing - self.start_bearing) % (2.0 * math.pi)
        if delta > math.pi:
            delta -= 2.0 * math.pi
        return delta

    def oriented_sweep(self) -> float:
        """Counter-clockwise sweep from ray 1 to ray 2, in ``[0, 2*pi)``.

        The sweep exceeds pi exactly when the rays turn clockwise, i.e. when
        :attr:`orientation` is negative.
        """

        return (self.end_bearing - self.start_bearing) % (2.0 * math.pi)


ResolvedGeometry = Union[
    ResolvedPoint,
    ResolvedSegment,
    ResolvedVector,
    ResolvedCircle,
    ResolvedPolygon,
    ResolvedAngle,
]

__all__ = [
    "Point",
    "Vector",
    "ResolvedPoint",
    "ResolvedSegment",
    "ResolvedVector",
    "ResolvedCircle",
    "ResolvedPolygon",
    "ResolvedAngle",
    "ResolvedGeometry",
    "bearing",
    "distance",
    "midpoint",
]
