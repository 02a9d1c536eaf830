"""SVG transform lists → 3×3 affine matrices, and their application to segments."""

from __future__ import annotations

import math
import re

import numpy as np
from numpy.typing import NDArray

from svg2pdc.engine.flatten import expand_arcs
from svg2pdc.engine.segments import (
    ClosePath,
    CubicCurveTo,
    LineTo,
    MoveTo,
    Point,
    QuadraticCurveTo,
    Segment,
)
from svg2pdc.errors import InvalidAttribute

Matrix = NDArray[np.float64]

_TRANSFORM_RE = re.compile(r"\s*([a-zA-Z]+)\s*\(([^)]*)\)\s*,?")
_NUMBER_SPLIT_RE = re.compile(r"[\s,]+")

# Accepted argument counts per transform function
_TRANSFORM_ARGS = {
    "matrix": (6,),
    "translate": (1, 2),
    "scale": (1, 2),
    "rotate": (1, 3),
    "skewX": (1,),
    "skewY": (1,),
}


def identity() -> Matrix:
    return np.identity(3)


def parse_transform(value: str | None, element_id: str | None = None) -> Matrix:
    """Compose an SVG transform attribute into a single matrix."""
    mat = identity()
    if not value or not value.strip():
        return mat

    pos = 0
    text = value.strip()
    while pos < len(text):
        match = _TRANSFORM_RE.match(text, pos)
        if match is None:
            raise InvalidAttribute("transform", value, element_id)
        name, raw_args = match.group(1), match.group(2).strip()
        pos = match.end()
        try:
            nums = [float(x) for x in _NUMBER_SPLIT_RE.split(raw_args) if x]
        except ValueError:
            raise InvalidAttribute("transform", value, element_id) from None
        if name not in _TRANSFORM_ARGS or len(nums) not in _TRANSFORM_ARGS[name]:
            raise InvalidAttribute("transform", value, element_id)
        mat = mat @ _transform_matrix(name, nums)
    return mat


def _transform_matrix(name: str, nums: list[float]) -> Matrix:
    t = identity()
    if name == "matrix":
        # SVG matrix(a b c d e f): a c e / b d f / 0 0 1
        a, b, c, d, e, f = nums
        t = np.array([[a, c, e], [b, d, f], [0.0, 0.0, 1.0]])
    elif name == "translate":
        t[0, 2] = nums[0]
        t[1, 2] = nums[1] if len(nums) > 1 else 0.0
    elif name == "scale":
        t[0, 0] = nums[0]
        t[1, 1] = nums[1] if len(nums) > 1 else nums[0]
    elif name == "rotate":
        angle = math.radians(nums[0])
        cos_a, sin_a = math.cos(angle), math.sin(angle)
        t = np.array([[cos_a, -sin_a, 0.0], [sin_a, cos_a, 0.0], [0.0, 0.0, 1.0]])
        if len(nums) == 3:
            cx, cy = nums[1], nums[2]
            t = translation(cx, cy) @ t @ translation(-cx, -cy)
    elif name == "skewX":
        t[0, 1] = math.tan(math.radians(nums[0]))
    elif name == "skewY":
        t[1, 0] = math.tan(math.radians(nums[0]))
    return t


def translation(tx: float, ty: float) -> Matrix:
    t = identity()
    t[0, 2] = tx
    t[1, 2] = ty
    return t


def scaling(sx: float, sy: float) -> Matrix:
    t = identity()
    t[0, 0] = sx
    t[1, 1] = sy
    return t


def apply_point(matrix: Matrix, p: Point) -> Point:
    x, y, _ = matrix @ np.array([p[0], p[1], 1.0])
    return (float(x), float(y))


def apply_points(matrix: Matrix, points: NDArray[np.float64]) -> NDArray[np.float64]:
    """Transform an Nx2 array of points."""
    points = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    return points @ matrix[:2, :2].T + matrix[:2, 2]


def linear_scale(matrix: Matrix) -> float:
    """Geometric-mean scale of the linear part (for stroke widths)."""
    return math.sqrt(abs(float(np.linalg.det(matrix[:2, :2]))))


def is_similarity(matrix: Matrix, eps: float = 1e-9) -> bool:
    """True when the matrix maps circles to circles (uniform scale, rotation, translation)."""
    a, c = matrix[0, 0], matrix[0, 1]
    b, d = matrix[1, 0], matrix[1, 1]
    return abs(a * a + b * b - (c * c + d * d)) < eps and abs(a * c + b * d) < eps


def max_stretch(matrix: Matrix) -> float:
    """Largest factor by which the matrix lengthens any vector."""
    return float(np.linalg.norm(matrix[:2, :2], 2))


def transform_segments(
    segments: list[Segment],
    matrix: Matrix,
    max_error: float | None = None,
) -> list[Segment]:
    """Map every control point through the matrix.

    Arcs are turned into cubics first, each within ``max_error`` (source
    units) of the true arc when given.
    """
    out: list[Segment] = []
    for seg in expand_arcs(segments, max_error):
        if isinstance(seg, MoveTo):
            out.append(MoveTo(apply_point(matrix, seg.end)))
        elif isinstance(seg, LineTo):
            out.append(LineTo(apply_point(matrix, seg.end)))
        elif isinstance(seg, CubicCurveTo):
            out.append(
                CubicCurveTo(
                    apply_point(matrix, seg.c1),
                    apply_point(matrix, seg.c2),
                    apply_point(matrix, seg.end),
                )
            )
        elif isinstance(seg, QuadraticCurveTo):
            out.append(QuadraticCurveTo(apply_point(matrix, seg.control), apply_point(matrix, seg.end)))
        elif isinstance(seg, ClosePath):
            out.append(seg)
    return out
