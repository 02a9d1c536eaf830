"""Tests for curve flattening and arc conversion."""

from __future__ import annotations

import math

import numpy as np
import pytest
import svgpathtools

from svg2pdc.engine.flatten import (
    arc_piece_error,
    arc_to_cubics,
    elevate_quadratic,
    expand_arcs,
    flatten_cubic,
    flatten_subpath,
)
from svg2pdc.engine.segments import ArcTo, ClosePath, CubicCurveTo, LineTo, MoveTo, QuadraticCurveTo
from svg2pdc.utils.geometry import point_segment_distance
from tests.conftest import cubic_points


def _distance_to_polyline(p, polyline):
    return min(point_segment_distance(p, a, b) for a, b in zip(polyline[:-1], polyline[1:]))


def _flatten_arc(start, arc, tolerance=0.25):
    points = [start]
    current = start
    for cubic in arc_to_cubics(start, arc):
        points.extend(flatten_cubic(current, cubic.c1, cubic.c2, cubic.end, tolerance))
        current = cubic.end
    return points


def test_straight_cubic_is_one_segment():
    assert flatten_cubic((0, 0), (1, 0), (2, 0), (3, 0)) == [(3, 0)]


def test_flatten_ends_at_endpoint():
    pts = flatten_cubic((0, 0), (0, 100), (100, 100), (100, 0), tolerance=0.1)
    assert pts[-1] == (100, 0)
    assert len(pts) > 8


def test_tighter_tolerance_gives_more_points():
    coarse = flatten_cubic((0, 0), (0, 100), (100, 100), (100, 0), tolerance=2.0)
    fine = flatten_cubic((0, 0), (0, 100), (100, 100), (100, 0), tolerance=0.05)
    assert len(fine) > len(coarse)


def test_flattened_cubic_within_tolerance():
    p = [(0, 0), (0, 100), (100, 100), (100, 0)]
    polyline = [p[0]] + flatten_cubic(*p, tolerance=0.25)
    samples = cubic_points(*p, np.linspace(0, 1, 400))
    assert max(_distance_to_polyline(tuple(s), polyline) for s in samples) <= 0.25


def test_max_depth_bounds_subdivision():
    pts = flatten_cubic((0, 0), (0, 100), (100, 100), (100, 0), tolerance=1e-12, max_depth=4)
    assert len(pts) == 16
    assert flatten_cubic((0, 0), (0, 100), (100, 100), (100, 0), max_depth=0) == [(100, 0)]


def test_quadratic_elevation_is_exact():
    p0, q, p2 = (0.0, 0.0), (5.0, 10.0), (10.0, 0.0)
    cubic = elevate_quadratic(p0, QuadraticCurveTo(q, p2))
    t = np.linspace(0, 1, 50)
    expected = (
        ((1 - t) ** 2)[:, None] * np.array(p0)
        + (2 * (1 - t) * t)[:, None] * np.array(q)
        + (t**2)[:, None] * np.array(p2)
    )
    actual = cubic_points(p0, cubic.c1, cubic.c2, cubic.end, t)
    assert np.allclose(actual, expected)


def test_semicircle_arc():
    arc = ArcTo(10, 10, 0, False, True, (20, 0))
    cubics = arc_to_cubics((0, 0), arc)
    assert len(cubics) == 2
    assert cubics[-1].end == (20, 0)
    points = np.array(_flatten_arc((0, 0), arc))
    radii = np.hypot(points[:, 0] - 10, points[:, 1])
    assert np.all(np.abs(radii - 10) <= 0.25)
    # Positive sweep passes through the top of the circle (y down)
    assert points[:, 1].min() == pytest.approx(-10, abs=0.01)


def test_arc_with_identical_endpoints_draws_nothing():
    assert arc_to_cubics((5, 5), ArcTo(10, 10, 0, True, True, (5, 5))) == []


def test_small_radii_are_scaled_up():
    cubics = arc_to_cubics((0, 0), ArcTo(1, 1, 0, False, True, (10, 0)))
    assert cubics[-1].end == (10, 0)
    points = np.array(_flatten_arc((0, 0), ArcTo(1, 1, 0, False, True, (10, 0))))
    # Radius grows to half the chord: a semicircle around (5, 0)
    assert np.all(np.abs(np.hypot(points[:, 0] - 5, points[:, 1]) - 5) <= 0.25)


def test_error_bound_splits_arc_finer():
    arc = ArcTo(1000, 1000, 0, False, True, (2000, 0))
    assert len(arc_to_cubics((0, 0), arc)) == 2
    cubics = arc_to_cubics((0, 0), arc, max_error=0.005)
    assert len(cubics) == 8
    assert arc_piece_error(1000, math.pi / 8) <= 0.005 < arc_piece_error(1000, math.pi / 4)
    assert cubics[-1].end == (2000, 0)


def test_cubic_pieces_stay_on_circle():
    arc = ArcTo(500, 500, 0, False, True, (1000, 0))
    current = (0.0, 0.0)
    worst = 0.0
    for cubic in arc_to_cubics(current, arc, max_error=0.005):
        samples = cubic_points(current, cubic.c1, cubic.c2, cubic.end, np.linspace(0, 1, 50))
        worst = max(worst, np.max(np.abs(np.hypot(samples[:, 0] - 500, samples[:, 1]) - 500)))
        current = cubic.end
    assert worst <= 0.005


@pytest.mark.parametrize(
    "start,arc",
    [
        ((0, 0), ArcTo(20, 10, 30, True, False, (30, 10))),
        ((0, 0), ArcTo(20, 10, 30, False, True, (30, 10))),
        ((5, 5), ArcTo(8, 12, -45, True, True, (12, -3))),
        ((0, 0), ArcTo(2, 2, 0, False, False, (0.709, -1.528))),
    ],
)
def test_arc_matches_reference(start, arc):
    reference = svgpathtools.Arc(
        start=complex(*start),
        radius=complex(arc.rx, arc.ry),
        rotation=arc.rotation,
        large_arc=arc.large_arc,
        sweep=arc.sweep,
        end=complex(*arc.end),
    )
    polyline = _flatten_arc(start, arc)
    for t in np.linspace(0, 1, 200):
        z = reference.point(t)
        assert _distance_to_polyline((z.real, z.imag), polyline) <= 0.25 + 0.01


def test_expand_arcs_replaces_arcs():
    segs = expand_arcs([MoveTo((0, 0)), ArcTo(10, 10, 0, False, True, (20, 0)), LineTo((20, 10))])
    assert not any(isinstance(s, ArcTo) for s in segs)
    assert isinstance(segs[1], CubicCurveTo)
    assert segs[-1] == LineTo((20, 10))


def test_flatten_subpath_close_adds_no_vertex():
    segs = [MoveTo((0, 0)), LineTo((10, 0)), LineTo((10, 10)), ClosePath()]
    assert flatten_subpath(segs) == [(0, 0), (10, 0), (10, 10)]


def test_flatten_subpath_full_circle_arc_pair():
    segs = [
        MoveTo((0, 0)),
        ArcTo(5, 5, 0, False, True, (10, 0)),
        ArcTo(5, 5, 0, False, True, (0, 0)),
        ClosePath(),
    ]
    points = np.array(flatten_subpath(segs))
    radii = np.hypot(points[:, 0] - 5, points[:, 1])
    assert np.all(np.abs(radii - 5) <= 0.25)
    assert math.isclose(points[:, 1].max(), 5, abs_tol=0.01)
