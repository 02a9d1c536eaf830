"""Viewport scaling and fixed-point quantization of device-space points.

Coordinates are stored as signed 16-bit integers. Normal paths store whole
pixels; precise paths store eighths of a pixel (3 fractional bits). A value
that rounds outside the int16 range is a hard ``CoordinateOverflow``:
clamping would silently distort the drawing.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from svg2pdc.engine.segments import Point
from svg2pdc.engine.transform import Matrix, scaling, translation
from svg2pdc.errors import CoordinateOverflow


COORD_MIN = -32768
COORD_MAX = 32767

IntPoint = tuple[int, int]


class Precision(enum.Enum):
    NORMAL = 1
    # 3 fractional bits
    PRECISE = 8

    @property
    def factor(self) -> int:
        return self.value


@dataclass(frozen=True)
class Viewport:
    """Source coordinate window (the SVG viewBox)."""

    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0


def viewport_matrix(
    viewport: Viewport,
    canvas: tuple[float, float],
    non_uniform: bool = False,
) -> Matrix:
    """Map viewport space onto a canvas of the given size.

    Aspect ratio is preserved (the smaller ratio wins) unless ``non_uniform``.
    A degenerate viewport maps with scale 1.
    """
    sx = canvas[0] / viewport.width if viewport.width > 0 else 1.0
    sy = canvas[1] / viewport.height if viewport.height > 0 else 1.0
    if not non_uniform:
        sx = sy = min(sx, sy)
    return scaling(sx, sy) @ translation(-viewport.x, -viewport.y)


def round_half_up(values: NDArray[np.float64]) -> NDArray[np.float64]:
    return np.floor(values + 0.5)


def quantize_points(
    points: list[Point] | NDArray[np.float64],
    precision: Precision = Precision.NORMAL,
    element_id: str | None = None,
) -> NDArray[np.int64]:
    """Round device-space points to fixed-point integers. Returns Nx2 int array."""
    arr = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    scaled = round_half_up(arr * precision.factor)
    bad = (scaled < COORD_MIN) | (scaled > COORD_MAX) | ~np.isfinite(scaled)
    if bad.any():
        idx = np.argwhere(bad)[0]
        raise CoordinateOverflow(float(arr[idx[0], idx[1]]), (COORD_MIN, COORD_MAX), element_id)
    return scaled.astype(np.int64)


def quantize_coordinate(
    value: float,
    precision: Precision = Precision.NORMAL,
    element_id: str | None = None,
) -> int:
    """Quantize a single coordinate value."""
    return int(quantize_points([(value, 0.0)], precision, element_id)[0, 0])


def collapse_degenerate(points: NDArray[np.int64], closed: bool) -> list[IntPoint]:
    """Drop points equal to their predecessor; for closed paths, a final point equal to the first."""
    if len(points) == 0:
        return []
    keep = np.ones(len(points), dtype=bool)
    keep[1:] = np.any(points[1:] != points[:-1], axis=1)
    result = [(int(x), int(y)) for x, y in points[keep]]
    if closed:
        while len(result) > 1 and result[-1] == result[0]:
            result.pop()
    return result
