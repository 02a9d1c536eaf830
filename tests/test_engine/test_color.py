"""Tests for color parsing and palette quantization."""

from __future__ import annotations

import pytest

from svg2pdc.engine.color import TRANSPARENT, Color, ColorEntry, ColorMode, parse_color, to_palette
from svg2pdc.errors import InvalidColor


@pytest.mark.parametrize(
    "value,expected",
    [
        ("#f00", Color(255, 0, 0)),
        ("#FF0000", Color(255, 0, 0)),
        ("#ff000080", Color(255, 0, 0, 128)),
        ("rgb(0, 128, 255)", Color(0, 128, 255)),
        ("rgb(100%, 0%, 50%)", Color(255, 0, 128)),
        ("rgba(0,0,255,0.5)", Color(0, 0, 255, 128)),
        ("red", Color(255, 0, 0)),
        ("RebeccaPurple", Color(0x66, 0x33, 0x99)),
        ("currentColor", Color(0, 0, 0)),
        ("transparent", Color(0, 0, 0, 0)),
        ("  blue ", Color(0, 0, 255)),
    ],
)
def test_parse_color(value, expected):
    assert parse_color(value) == expected


def test_none_is_no_paint():
    assert parse_color("none") is None
    assert to_palette(None) == TRANSPARENT


@pytest.mark.parametrize("value", ["notacolor", "#12", "#ggg", "rgb(1,2)", "", "url(#grad)"])
def test_invalid_color(value):
    with pytest.raises(InvalidColor) as exc:
        parse_color(value, "el")
    assert exc.value.element_id == "el"
    assert exc.value.kind == "InvalidColor"


def test_palette_bytes():
    assert to_palette(Color(255, 0, 0)).value == 0xF0
    assert to_palette(Color(0, 0, 0)).value == 0xC0
    assert to_palette(Color(255, 255, 255)).value == 0xFF
    assert to_palette(Color(0, 0, 255)).value == 0xC3


def test_zero_alpha_is_transparent():
    assert to_palette(Color(255, 255, 255, 0)) == TRANSPARENT
    # Alpha 30 rounds to level 0
    assert to_palette(Color(255, 0, 0, 30)) == TRANSPARENT


def test_nearest_and_truncate_modes():
    gray = Color(128, 128, 128)
    assert to_palette(gray, ColorMode.NEAREST).value == 0b11101010
    assert to_palette(gray, ColorMode.TRUNCATE).value == 0b11010101
    # Exact levels agree in both modes
    assert to_palette(Color(170, 85, 0), ColorMode.TRUNCATE) == to_palette(Color(170, 85, 0))


def test_with_opacity():
    assert Color(255, 0, 0).with_opacity(0.5).a == 128
    assert Color(255, 0, 0).with_opacity(2.0).a == 255


def test_color_entry_channels():
    entry = ColorEntry(0b11100100)
    assert (entry.a, entry.r, entry.g, entry.b) == (3, 2, 1, 0)
    assert entry.to_hex() == "#aa5500ff"
    assert TRANSPARENT.is_transparent
