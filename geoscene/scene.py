"""Scene data model.

A scene is a math-space viewport plus an ordered tuple of declarative objects.
Objects are placed either by explicit coordinates or by referencing other
objects by id; turning those references into coordinates is the resolver's
job, so nothing here is validated beyond its type.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Literal, Optional, Tuple, get_args

ObjectKind = Literal["point", "segment", "line", "vector", "circle", "polygon", "angle"]
Mode = Literal["SOLVER", "EXAM", "DRILL", "CONCEPT"]

OBJECT_KINDS: Tuple[str, ...] = get_args(ObjectKind)


@dataclass(frozen=True)
class Viewport:
    xmin: float
    xmax: float
    ymin: float
    ymax: float

    @property
    def width(self) -> float:
        return self.xmax - self.xmin

    @property
    def height(self) -> float:
        return self.ymax - self.ymin


@dataclass(frozen=True)
class GeometryObject:
    kind: ObjectKind
    id: str
    coords: Tuple[float, ...] = ()
    parents: Tuple[str, ...] = ()
    label: Optional[str] = None
    radius: Optional[float] = None


@dataclass(frozen=True)
class Scene:
    viewport: Viewport
    objects: Tuple[GeometryObject, ...] = field(default_factory=tuple)

    def __iter__(self) -> Iterator[GeometryObject]:
        return iter(self.objects)

    def __len__(self) -> int:
        return len(self.objects)

    def has_kind(self, kind: ObjectKind) -> bool:
        return any(obj.kind == kind for obj in self.objects)
