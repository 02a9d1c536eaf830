"""Curve flattening: Bézier and arc segments → polylines within a flatness tolerance.

Cubics are subdivided with de Casteljau on an explicit work stack. A piece is
accepted once both inner control points lie within ``tolerance`` of its chord
(the curve stays inside the control hull, so this bounds the true deviation),
or once ``max_depth`` halvings have been spent on it. Pathological curves are
never an error.

Quadratics are degree-elevated to cubics (exact). Arcs are parameterized by
svgpathtools and split into cubic pieces of at most 90°, fewer degrees when
an error bound asks for it.
"""

from __future__ import annotations

import math

from svgpathtools import Arc

from svg2pdc.engine.segments import (
    ArcTo,
    ClosePath,
    CubicCurveTo,
    LineTo,
    MoveTo,
    Point,
    QuadraticCurveTo,
    Segment,
)
from svg2pdc.utils.geometry import point_segment_distance

DEFAULT_TOLERANCE = 0.25
DEFAULT_MAX_DEPTH = 10

# Share of the flatness tolerance spent on approximating arcs with cubics.
# Flattening a circular cubic deviates at most 3/4 of the chord tolerance.
CURVE_ERROR_SHARE = 0.25

MAX_ARC_PIECES = 1024


def _mid(a: Point, b: Point) -> Point:
    return ((a[0] + b[0]) / 2, (a[1] + b[1]) / 2)


def _point(z: complex) -> Point:
    return (z.real, z.imag)


def flatten_cubic(
    p0: Point,
    p1: Point,
    p2: Point,
    p3: Point,
    tolerance: float = DEFAULT_TOLERANCE,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> list[Point]:
    """Polyline vertices approximating the cubic, excluding p0, ending at p3."""
    out: list[Point] = []
    stack = [(p0, p1, p2, p3, 0)]
    while stack:
        a, b, c, d, depth = stack.pop()
        chord_err = max(point_segment_distance(b, a, d), point_segment_distance(c, a, d))
        if chord_err <= tolerance or depth >= max_depth:
            out.append(d)
            continue
        ab, bc, cd = _mid(a, b), _mid(b, c), _mid(c, d)
        abc, bcd = _mid(ab, bc), _mid(bc, cd)
        abcd = _mid(abc, bcd)
        # Right half first so the left half is processed next
        stack.append((abcd, bcd, cd, d, depth + 1))
        stack.append((a, ab, abc, abcd, depth + 1))
    return out


def elevate_quadratic(p0: Point, quad: QuadraticCurveTo) -> CubicCurveTo:
    """The cubic identical to the quadratic p0 → quad.end."""
    q = quad.control
    c1 = (p0[0] + 2 / 3 * (q[0] - p0[0]), p0[1] + 2 / 3 * (q[1] - p0[1]))
    c2 = (quad.end[0] + 2 / 3 * (q[0] - quad.end[0]), quad.end[1] + 2 / 3 * (q[1] - quad.end[1]))
    return CubicCurveTo(c1, c2, quad.end)


def arc_piece_error(radius: float, angle: float) -> float:
    """Upper bound on how far one cubic spanning ``angle`` radians strays from its circle."""
    quarter = abs(angle) / 4
    return radius * 4 / 27 * math.sin(quarter) ** 6 / math.cos(quarter) ** 2


def arc_to_cubics(start: Point, arc: ArcTo, max_error: float | None = None) -> list[CubicCurveTo]:
    """Approximate an elliptical arc from ``start`` with cubics of at most 90° each.

    With ``max_error`` the pieces are halved until each stays within that
    distance of the true ellipse.
    """
    if start == arc.end:
        return []
    if arc.rx == 0 or arc.ry == 0:
        return [CubicCurveTo(start, arc.end, arc.end)]

    # svgpathtools does the endpoint → center conversion and scales radii
    # that are too small to span the endpoints
    ellipse = Arc(
        start=complex(*start),
        radius=complex(abs(arc.rx), abs(arc.ry)),
        rotation=arc.rotation,
        large_arc=arc.large_arc,
        sweep=arc.sweep,
        end=complex(*arc.end),
    )
    delta = math.radians(ellipse.delta)
    count = max(1, math.ceil(abs(delta) / (math.pi / 2) - 1e-9))
    if max_error is not None and max_error > 0:
        radius = max(ellipse.radius.real, ellipse.radius.imag)
        while count < MAX_ARC_PIECES and arc_piece_error(radius, delta / count) > max_error:
            count *= 2

    # derivative() is taken per unit of t, which spans the whole sweep
    handle = 4 / 3 * math.tan(delta / count / 4) / delta
    cubics = []
    for i in range(count):
        t0, t1 = i / count, (i + 1) / count
        p0, p1 = ellipse.point(t0), ellipse.point(t1)
        c1 = p0 + handle * ellipse.derivative(t0)
        c2 = p1 - handle * ellipse.derivative(t1)
        cubics.append(CubicCurveTo(_point(c1), _point(c2), _point(p1)))
    # Pin the last piece to the exact endpoint
    last = cubics[-1]
    cubics[-1] = CubicCurveTo(last.c1, last.c2, arc.end)
    return cubics


def expand_arcs(segments: list[Segment], max_error: float | None = None) -> list[Segment]:
    """Replace every ArcTo with its cubic approximation."""
    out: list[Segment] = []
    current: Point = (0.0, 0.0)
    start: Point = current
    for seg in segments:
        if isinstance(seg, ArcTo):
            out.extend(arc_to_cubics(current, seg, max_error))
        else:
            out.append(seg)
        if isinstance(seg, MoveTo):
            start = seg.end
        if isinstance(seg, ClosePath):
            current = start
        else:
            current = seg.end
    return out


def flatten_subpath(
    subpath: list[Segment],
    tolerance: float = DEFAULT_TOLERANCE,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> list[Point]:
    """Flatten one subpath (starting with MoveTo) into polyline vertices.

    ClosePath contributes no vertex; closing is expressed by the path's open flag.
    """
    points: list[Point] = []
    current: Point = (0.0, 0.0)
    for seg in subpath:
        if isinstance(seg, (MoveTo, LineTo)):
            points.append(seg.end)
        elif isinstance(seg, CubicCurveTo):
            points.extend(flatten_cubic(current, seg.c1, seg.c2, seg.end, tolerance, max_depth))
        elif isinstance(seg, QuadraticCurveTo):
            cubic = elevate_quadratic(current, seg)
            points.extend(flatten_cubic(current, cubic.c1, cubic.c2, cubic.end, tolerance, max_depth))
        elif isinstance(seg, ArcTo):
            for cubic in arc_to_cubics(current, seg, tolerance * CURVE_ERROR_SHARE):
                points.extend(
                    flatten_cubic(current, cubic.c1, cubic.c2, cubic.end, tolerance, max_depth)
                )
                current = cubic.end
        if not isinstance(seg, ClosePath):
            current = seg.end
    return points
