"""Wire-format loading for scenes emitted by the content generator."""

from __future__ import annotations

import json
import math
import numbers
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .scene import OBJECT_KINDS, GeometryObject, Scene, Viewport

_VIEWPORT_KEYS = ("xmin", "xmax", "ymin", "ymax")


class SceneFormatError(ValueError):
    """Raised when a value is not a scene at all (as opposed to an unresolvable one)."""

    def __init__(self, message: str, *, index: Optional[int] = None):
        if index is not None:
            message = f"[object {index}] {message}"
        super().__init__(message)
        self.index = index


def _number(value: Any, what: str, index: Optional[int] = None) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise SceneFormatError(f"{what} must be a number (got {value!r})", index=index)
    result = float(value)
    if not math.isfinite(result):
        raise SceneFormatError(f"{what} must be finite (got {value!r})", index=index)
    return result


def _load_viewport(data: Mapping[str, Any]) -> Viewport:
    bounds: Dict[str, float] = {}
    for key in _VIEWPORT_KEYS:
        if key not in data:
            raise SceneFormatError(f"scene is missing viewport bound '{key}'")
        bounds[key] = _number(data[key], key)
    return Viewport(**bounds)


def _load_object(raw: Any, index: int) -> GeometryObject:
    if not isinstance(raw, Mapping):
        raise SceneFormatError("object must be a mapping", index=index)

    kind = raw.get("type", raw.get("kind"))
    if kind not in OBJECT_KINDS:
        raise SceneFormatError(
            f"unknown object type {kind!r}; expected one of {', '.join(OBJECT_KINDS)}",
            index=index,
        )

    ident = raw.get("id")
    if ident is None or ident == "":
        ident = f"obj-{index}"
    elif not isinstance(ident, str):
        raise SceneFormatError(f"id must be a string (got {ident!r})", index=index)

    coords_raw = raw.get("coords") or ()
    if not isinstance(coords_raw, (list, tuple)):
        raise SceneFormatError("coords must be a list of numbers", index=index)
    coords = tuple(_number(value, "coordinate", index) for value in coords_raw)

    parents_raw = raw.get("parents") or ()
    if not isinstance(parents_raw, (list, tuple)):
        raise SceneFormatError("parents must be a list of ids", index=index)
    for parent in parents_raw:
        if not isinstance(parent, str):
            raise SceneFormatError(f"parent id must be a string (got {parent!r})", index=index)
    parents: Tuple[str, ...] = tuple(parents_raw)

    label = raw.get("label")
    if label is not None and not isinstance(label, str):
        label = str(label)

    radius = raw.get("radius")
    if radius is not None:
        radius = _number(radius, "radius", index)

    return GeometryObject(
        kind=kind,
        id=ident,
        coords=coords,
        parents=parents,
        label=label,
        radius=radius,
    )


def load_scene(data: Mapping[str, Any]) -> Scene:
    """Build a :class:`Scene` from the generator's ``geometryConfig`` mapping."""

    if not isinstance(data, Mapping):
        raise SceneFormatError("scene must be a mapping")
    viewport = _load_viewport(data)

    raw_objects = data.get("objects", [])
    if not isinstance(raw_objects, (list, tuple)):
        raise SceneFormatError("objects must be a list")

    objects: List[GeometryObject] = []
    seen: Dict[str, int] = {}
    for index, raw in enumerate(raw_objects):
        obj = _load_object(raw, index)
        if obj.id in seen:
            raise SceneFormatError(
                f"duplicate id '{obj.id}' (first used by object {seen[obj.id]})", index=index
            )
        seen[obj.id] = index
        objects.append(obj)
    return Scene(viewport=viewport, objects=tuple(objects))


def parse_scene(text: str) -> Scene:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SceneFormatError(f"invalid JSON at line {exc.lineno}, col {exc.colno}: {exc.msg}") from exc
    return load_scene(data)


def dump_scene(scene: Scene) -> Dict[str, Any]:
    """Return the wire mapping for ``scene``; inverse of :func:`load_scene`."""

    vp = scene.viewport
    objects: List[Dict[str, Any]] = []
    for obj in scene.objects:
        entry: Dict[str, Any] = {"type": obj.kind, "id": obj.id}
        if obj.label is not None:
            entry["label"] = obj.label
        if obj.coords:
            entry["coords"] = list(obj.coords)
        if obj.parents:
            entry["parents"] = list(obj.parents)
        if obj.radius is not None:
            entry["radius"] = obj.radius
        objects.append(entry)
    return {"xmin": vp.xmin, "xmax": vp.xmax, "ymin": vp.ymin, "ymax": vp.ymax, "objects": objects}
