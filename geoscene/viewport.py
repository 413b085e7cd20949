"""Math-space <-> device-space mapping.

Math space is y-up and unbounded; device space is the y-down coordinate
system of the drawing surface.  The only transform applied here is the
vertical flip; pixel scaling is left to the surface's own aspect-preserving
"contain" fit of the view box.

Padding is proportional: ``padding_ratio`` of the viewport span is added on
both sides of each axis, independently for x and y.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

import numpy as np

from .scene import Viewport
from .utils import decimals_for_span, format_float

Point = Tuple[float, float]

_FLIP_Y = np.array(
    [
        [1.0, 0.0, 0.0],
        [0.0, -1.0, 0.0],
        [0.0, 0.0, 1.0],
    ]
)


@dataclass(frozen=True)
class ViewBox:
    x0: float
    y0: float
    width: float
    height: float

    def as_attribute(self, decimals: int = 4) -> str:
        return " ".join(format_float(v, decimals) for v in (self.x0, self.y0, self.width, self.height))


@dataclass(frozen=True)
class PaddedBounds:
    """Math-space bounds after padding (y still up)."""

    xmin: float
    xmax: float
    ymin: float
    ymax: float


class CoordinateMapper:
    """Affine map between math space and device space for one viewport."""

    def __init__(self, viewport: Viewport, padding_ratio: float = 0.1) -> None:
        self.viewport = viewport
        self.padding_ratio = float(padding_ratio)
        self._matrix = _FLIP_Y.copy()
        self._inverse = np.linalg.inv(self._matrix)

    @property
    def matrix(self) -> np.ndarray:
        return self._matrix.copy()

    @property
    def padding(self) -> Point:
        vp = self.viewport
        return (vp.width * self.padding_ratio, vp.height * self.padding_ratio)

    def padded_bounds(self) -> PaddedBounds:
        vp = self.viewport
        pad_x, pad_y = self.padding
        return PaddedBounds(
            xmin=vp.xmin - pad_x,
            xmax=vp.xmax + pad_x,
            ymin=vp.ymin - pad_y,
            ymax=vp.ymax + pad_y,
        )

    def view_box(self) -> ViewBox:
        bounds = self.padded_bounds()
        x0, y0 = self.to_device(bounds.xmin, bounds.ymax)
        return ViewBox(
            x0=x0,
            y0=y0,
            width=bounds.xmax - bounds.xmin,
            height=bounds.ymax - bounds.ymin,
        )

    def span(self) -> float:
        """Larger side of the padded view box, used to size glyphs."""

        box = self.view_box()
        return max(abs(box.width), abs(box.height))

    @property
    def decimals(self) -> int:
        """Decimal places used when writing device coordinates for this view."""

        return decimals_for_span(self.span())

    def to_device(self, x: float, y: float) -> Point:
        out = self._matrix @ np.array([float(x), float(y), 1.0])
        return (float(out[0]), float(out[1]))

    def to_math(self, dx: float, dy: float) -> Point:
        out = self._inverse @ np.array([float(dx), float(dy), 1.0])
        return (float(out[0]), float(out[1]))

    def to_device_many(self, points: Iterable[Sequence[float]]) -> List[Point]:
        pts = np.asarray([(float(p[0]), float(p[1])) for p in points], dtype=float)
        if pts.size == 0:
            return []
        homog = np.hstack([pts, np.ones((pts.shape[0], 1))])
        out = homog @ self._matrix.T
        return [(float(x), float(y)) for x, y in out[:, :2]]

    def scale_length(self, length: float) -> float:
        """Map a math-space length (e.g. a circle radius) to device units."""

        linear = self._matrix[:2, :2]
        return float(length) * float(np.sqrt(abs(np.linalg.det(linear))))
