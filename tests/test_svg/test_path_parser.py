"""Tests for the path-data parser."""

from __future__ import annotations

import pytest
import svgpathtools

from svg2pdc.engine.segments import (
    ArcTo,
    ClosePath,
    CubicCurveTo,
    LineTo,
    MoveTo,
    QuadraticCurveTo,
)
from svg2pdc.errors import ArityError, PathSyntaxError, UnsupportedCommand
from svg2pdc.svg.path_parser import parse_path
from svg2pdc.svg.serializer import serialize_path
from tests.conftest import SETTINGS_PATH


def test_absolute_commands():
    assert parse_path("M0,0 L10,0 L10,10 Z") == [
        MoveTo((0, 0)),
        LineTo((10, 0)),
        LineTo((10, 10)),
        ClosePath(),
    ]


def test_relative_commands_resolve_against_current_point():
    assert parse_path("m10 10 l5 0 h5 v5 z") == [
        MoveTo((10, 10)),
        LineTo((15, 10)),
        LineTo((20, 10)),
        LineTo((20, 15)),
        ClosePath(),
    ]


def test_implicit_lineto_after_move():
    assert parse_path("M0 0 10 0 10 10") == [MoveTo((0, 0)), LineTo((10, 0)), LineTo((10, 10))]
    assert parse_path("m1 1 2 2") == [MoveTo((1, 1)), LineTo((3, 3))]


def test_implicit_repetition_of_curves():
    segs = parse_path("M0 0 Q5 5 10 0 15 -5 20 0")
    assert segs == [
        MoveTo((0, 0)),
        QuadraticCurveTo((5, 5), (10, 0)),
        QuadraticCurveTo((15, -5), (20, 0)),
    ]


def test_numbers_without_separators():
    assert parse_path("M10-5L.5.5") == [MoveTo((10, -5)), LineTo((0.5, 0.5))]
    assert parse_path("M1e1 2E-1") == [MoveTo((10.0, 0.2))]


def test_compact_arc_flags():
    assert parse_path("M0 0 a1 1 0 00 10 10") == [
        MoveTo((0, 0)),
        ArcTo(1, 1, 0, False, False, (10, 10)),
    ]
    assert parse_path("M0 0 A5,5,30,1,1,10,0") == [
        MoveTo((0, 0)),
        ArcTo(5, 5, 30, True, True, (10, 0)),
    ]


def test_smooth_cubic_reflects_previous_control():
    segs = parse_path("M0 0 C0 10 10 10 10 0 S20 -10 20 0")
    assert segs[2] == CubicCurveTo((10, -10), (20, -10), (20, 0))


def test_smooth_cubic_without_previous_cubic_uses_current_point():
    segs = parse_path("M0 0 L5 0 S10 10 20 0")
    assert segs[2] == CubicCurveTo((5, 0), (10, 10), (20, 0))


def test_smooth_quadratic_reflects_previous_control():
    segs = parse_path("M0 0 Q5 10 10 0 T20 0")
    assert segs[2] == QuadraticCurveTo((15, -10), (20, 0))


def test_drawing_after_close_starts_new_subpath_at_start():
    assert parse_path("M0 0 L10 0 L10 10 Z L0 10") == [
        MoveTo((0, 0)),
        LineTo((10, 0)),
        LineTo((10, 10)),
        ClosePath(),
        MoveTo((0, 0)),
        LineTo((0, 10)),
    ]


def test_relative_move_after_close_uses_subpath_start():
    segs = parse_path("M10 10 L20 10 Z m5 5 l1 0")
    assert segs[3] == MoveTo((15, 15))


def test_zero_radius_arc_becomes_line():
    assert parse_path("M0 0 A0 5 0 0 1 10 0") == [MoveTo((0, 0)), LineTo((10, 0))]


def test_empty_data():
    assert parse_path("") == []
    assert parse_path("  \n\t") == []


def test_must_start_with_move():
    with pytest.raises(PathSyntaxError) as exc:
        parse_path("L10 10")
    assert exc.value.kind == "SyntaxError"
    assert exc.value.token == "L"
    assert exc.value.offset == 0


def test_unknown_command_letter():
    with pytest.raises(UnsupportedCommand) as exc:
        parse_path("M0 0 X5 5")
    assert exc.value.token == "X"
    assert exc.value.offset == 5


def test_missing_arguments():
    with pytest.raises(ArityError):
        parse_path("M0 0 L10")
    with pytest.raises(ArityError):
        parse_path("M0 0 L10 10 20")
    with pytest.raises(ArityError):
        parse_path("M0 0 C1 1 2 2 L3 3")


def test_close_takes_no_arguments():
    with pytest.raises(ArityError):
        parse_path("M0 0 L1 1 Z 5")


def test_unexpected_character():
    with pytest.raises(PathSyntaxError) as exc:
        parse_path("M0 0 L10 #")
    assert exc.value.token == "#"
    assert exc.value.offset == 9


def test_exponent_without_digits():
    with pytest.raises(PathSyntaxError) as exc:
        parse_path("M0 0 L1e")
    assert exc.value.kind == "SyntaxError"
    assert exc.value.offset == 6


def test_comma_before_command_letter():
    with pytest.raises(PathSyntaxError) as exc:
        parse_path("M0,0,L1,1")
    assert exc.value.token == ","
    assert exc.value.offset == 4
    with pytest.raises(PathSyntaxError):
        parse_path("M0 0 L,1 1")


def test_bad_arc_flag():
    with pytest.raises(PathSyntaxError):
        parse_path("M0 0 a1 1 0 2 0 10 10")


@pytest.mark.parametrize(
    "d",
    [
        "M15 21v-8a1 1 0 0 0-1-1h-4a1 1 0 0 0-1 1v8",
        "M3 10a2 2 0 0 1 .709-1.528l7-5.999a2 2 0 0 1 2.582 0l7 5.999A2 2 0 0 1 21 10v9"
        "a2 2 0 0 1-2 2H5a2 2 0 0 1-2-2z",
        "M8 14s1.5 2 4 2 4-2 4-2",
        "M2 12c0-4 3-7 7-7s7 3 7 7-3 7-7 7",
        "M0 0q5 10 10 0t10 0 10 0",
        SETTINGS_PATH,
    ],
)
def test_matches_reference_parser(d):
    ours = svgpathtools.parse_path(serialize_path(parse_path(d)))
    assert ours == svgpathtools.parse_path(d)
