"""Shape normalizers: every basic shape as canonical path segments.

Rects become a closed four-line path, circles and ellipses four cubic
quadrants (four arcs when one cubic per quadrant is too coarse for the
caller's error bound), polylines and polygons straight segments. Shapes
with a non-positive size draw nothing.
"""

from __future__ import annotations

import math
import re

from svg2pdc.engine.flatten import arc_piece_error
from svg2pdc.engine.registry import get_registry, normalizer
from svg2pdc.engine.segments import ArcTo, ClosePath, CubicCurveTo, LineTo, MoveTo, Segment
from svg2pdc.errors import ArityError, InvalidAttribute
from svg2pdc.svg.document import (
    CircleElement,
    Drawable,
    EllipseElement,
    LineElement,
    PathElement,
    PolygonElement,
    PolylineElement,
    RectElement,
)
from svg2pdc.svg.path_parser import parse_path
from svg2pdc.utils.units import parse_length

# Cubic control distance for a quarter circle of radius 1
KAPPA = 0.5522847498

_POINTS_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_POINTS_SEPARATOR_RE = re.compile(r"^[\s,]*$")


def normalize(element: Drawable, max_error: float | None = None) -> list[Segment]:
    """Segments for any registered element type.

    ``max_error`` bounds the distance between curved outlines and the true
    shape, in user units.
    """
    spec = get_registry().get(type(element))
    if spec is None:
        raise TypeError(f"No normalizer for {type(element).__name__}")
    if spec.bounded_error:
        return spec.fn(element, max_error=max_error)
    return spec.fn(element)


def _length(element: Drawable, name: str) -> float:
    return parse_length(getattr(element, name), name, element.element_id, default=0.0)


def ellipse_segments(
    cx: float, cy: float, rx: float, ry: float, max_error: float | None = None
) -> list[Segment]:
    """Closed four-quadrant outline, starting at (cx + rx, cy).

    Quadrants are single cubics unless that misses ``max_error``; they are
    then kept as arcs, which flattening splits finer.
    """
    if max_error is not None and arc_piece_error(max(rx, ry), math.pi / 2) > max_error:
        return [
            MoveTo((cx + rx, cy)),
            ArcTo(rx, ry, 0.0, False, True, (cx, cy + ry)),
            ArcTo(rx, ry, 0.0, False, True, (cx - rx, cy)),
            ArcTo(rx, ry, 0.0, False, True, (cx, cy - ry)),
            ArcTo(rx, ry, 0.0, False, True, (cx + rx, cy)),
            ClosePath(),
        ]
    kx, ky = KAPPA * rx, KAPPA * ry
    return [
        MoveTo((cx + rx, cy)),
        CubicCurveTo((cx + rx, cy + ky), (cx + kx, cy + ry), (cx, cy + ry)),
        CubicCurveTo((cx - kx, cy + ry), (cx - rx, cy + ky), (cx - rx, cy)),
        CubicCurveTo((cx - rx, cy - ky), (cx - kx, cy - ry), (cx, cy - ry)),
        CubicCurveTo((cx + kx, cy - ry), (cx + rx, cy - ky), (cx + rx, cy)),
        ClosePath(),
    ]


def parse_points(value: str, element_id: str | None = None) -> list[tuple[float, float]]:
    """Parse a polyline/polygon ``points`` list into coordinate pairs."""
    nums: list[float] = []
    pos = 0
    last = None
    for match in _POINTS_NUMBER_RE.finditer(value):
        if not _POINTS_SEPARATOR_RE.match(value[pos:match.start()]):
            raise InvalidAttribute("points", value, element_id)
        nums.append(float(match.group()))
        pos = match.end()
        last = match
    if not _POINTS_SEPARATOR_RE.match(value[pos:]):
        raise InvalidAttribute("points", value, element_id)
    if last is not None and len(nums) % 2:
        raise ArityError(
            f"points needs coordinate pairs, got {len(nums)} numbers",
            last.group(),
            last.start(),
            element_id,
        )
    return list(zip(nums[0::2], nums[1::2]))


def _polyline_segments(points: list[tuple[float, float]], closed: bool) -> list[Segment]:
    if not points:
        return []
    segs: list[Segment] = [MoveTo(points[0])]
    segs.extend(LineTo(p) for p in points[1:])
    if closed:
        segs.append(ClosePath())
    return segs


@normalizer(PathElement, description="path data → segments")
def normalize_path(element: PathElement) -> list[Segment]:
    return parse_path(element.d)


@normalizer(RectElement, description="rect → closed four-line path")
def normalize_rect(element: RectElement) -> list[Segment]:
    # Corner radii (rx/ry) are not drawn
    x, y = _length(element, "x"), _length(element, "y")
    w = _length(element, "width")
    h = _length(element, "height")
    if w <= 0 or h <= 0:
        return []
    return [
        MoveTo((x, y)),
        LineTo((x + w, y)),
        LineTo((x + w, y + h)),
        LineTo((x, y + h)),
        LineTo((x, y)),
        ClosePath(),
    ]


def circle_params(element: CircleElement) -> tuple[float, float, float]:
    """Center and radius in user units."""
    return _length(element, "cx"), _length(element, "cy"), _length(element, "r")


@normalizer(CircleElement, bounded_error=True, description="circle → four cubic quadrants")
def normalize_circle(element: CircleElement, max_error: float | None = None) -> list[Segment]:
    cx, cy, r = circle_params(element)
    if r <= 0:
        return []
    return ellipse_segments(cx, cy, r, r, max_error)


@normalizer(EllipseElement, bounded_error=True, description="ellipse → four cubic quadrants")
def normalize_ellipse(element: EllipseElement, max_error: float | None = None) -> list[Segment]:
    cx, cy = _length(element, "cx"), _length(element, "cy")
    rx = _length(element, "rx")
    ry = _length(element, "ry")
    if rx <= 0 or ry <= 0:
        return []
    return ellipse_segments(cx, cy, rx, ry, max_error)


@normalizer(LineElement, fillable=False, description="line → open two-point path")
def normalize_line(element: LineElement) -> list[Segment]:
    x1, y1 = _length(element, "x1"), _length(element, "y1")
    x2, y2 = _length(element, "x2"), _length(element, "y2")
    return [MoveTo((x1, y1)), LineTo((x2, y2))]


@normalizer(PolylineElement, description="polyline → open path")
def normalize_polyline(element: PolylineElement) -> list[Segment]:
    return _polyline_segments(parse_points(element.points, element.element_id), closed=False)


@normalizer(PolygonElement, description="polygon → closed path")
def normalize_polygon(element: PolygonElement) -> list[Segment]:
    return _polyline_segments(parse_points(element.points, element.element_id), closed=True)
