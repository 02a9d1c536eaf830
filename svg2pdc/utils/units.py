"""Numeric attribute parsing: lengths with absolute units, opacities."""

from __future__ import annotations

import re

from svg2pdc.errors import InvalidAttribute

# Absolute units relative to px (CSS reference pixel, 96 dpi)
_UNIT_SCALE = {
    "": 1.0,
    "px": 1.0,
    "pt": 96.0 / 72.0,
    "pc": 16.0,
    "in": 96.0,
    "cm": 96.0 / 2.54,
    "mm": 96.0 / 25.4,
}

_LENGTH_RE = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)\s*([a-z]*)\s*$")


def parse_length(
    value: str | None,
    name: str,
    element_id: str | None = None,
    default: float | None = None,
) -> float:
    """Parse a length attribute ("12", "12px", "3mm") into user units.

    Missing values return ``default`` when given, else raise InvalidAttribute.
    Percentages are not supported.
    """
    if value is None or not value.strip():
        if default is not None:
            return default
        raise InvalidAttribute(name, value or "", element_id)
    match = _LENGTH_RE.match(value)
    if match is None or match.group(2) not in _UNIT_SCALE:
        raise InvalidAttribute(name, value, element_id)
    return float(match.group(1)) * _UNIT_SCALE[match.group(2)]


def parse_fraction(value: str, name: str, element_id: str | None = None) -> float:
    """Parse an opacity-like value ("0.5" or "50%"), clamped to [0, 1]."""
    text = value.strip()
    try:
        v = float(text[:-1]) / 100 if text.endswith("%") else float(text)
    except ValueError:
        raise InvalidAttribute(name, value, element_id) from None
    return min(1.0, max(0.0, v))
