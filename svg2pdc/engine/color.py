"""Color parsing and quantization into the 8-bit ARGB2222 palette.

Palette byte layout::

    0bAARRGGBB   two bits per channel, alpha in the high bits

Every concrete color maps to exactly one palette entry: each channel is
reduced to the nearest of {0, 85, 170, 255} (or floored in truncate mode).
A color whose alpha reduces to 0 is ``TRANSPARENT`` (0x00).
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass

from svg2pdc.errors import InvalidColor

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_RGB_RE = re.compile(
    r"^rgba?\(\s*([^,\s]+)\s*,\s*([^,\s]+)\s*,\s*([^,\s)]+)\s*(?:,\s*([^,\s)]+)\s*)?\)$",
    re.IGNORECASE,
)

# Palette step between two adjacent 2-bit levels
_LEVEL = 85

# fmt: off
NAMED_COLORS = {
    "aliceblue": "#f0f8ff", "antiquewhite": "#faebd7", "aqua": "#00ffff",
    "aquamarine": "#7fffd4", "azure": "#f0ffff", "beige": "#f5f5dc",
    "bisque": "#ffe4c4", "black": "#000000", "blanchedalmond": "#ffebcd",
    "blue": "#0000ff", "blueviolet": "#8a2be2", "brown": "#a52a2a",
    "burlywood": "#deb887", "cadetblue": "#5f9ea0", "chartreuse": "#7fff00",
    "chocolate": "#d2691e", "coral": "#ff7f50", "cornflowerblue": "#6495ed",
    "cornsilk": "#fff8dc", "crimson": "#dc143c", "cyan": "#00ffff",
    "darkblue": "#00008b", "darkcyan": "#008b8b", "darkgoldenrod": "#b8860b",
    "darkgray": "#a9a9a9", "darkgrey": "#a9a9a9", "darkgreen": "#006400",
    "darkkhaki": "#bdb76b", "darkmagenta": "#8b008b", "darkolivegreen": "#556b2f",
    "darkorange": "#ff8c00", "darkorchid": "#9932cc", "darkred": "#8b0000",
    "darksalmon": "#e9967a", "darkseagreen": "#8fbc8f", "darkslateblue": "#483d8b",
    "darkslategray": "#2f4f4f", "darkslategrey": "#2f4f4f",
    "darkturquoise": "#00ced1", "darkviolet": "#9400d3", "deeppink": "#ff1493",
    "deepskyblue": "#00bfff", "dimgray": "#696969", "dimgrey": "#696969",
    "dodgerblue": "#1e90ff", "firebrick": "#b22222", "floralwhite": "#fffaf0",
    "forestgreen": "#228b22", "fuchsia": "#ff00ff", "gainsboro": "#dcdcdc",
    "ghostwhite": "#f8f8ff", "gold": "#ffd700", "goldenrod": "#daa520",
    "gray": "#808080", "grey": "#808080", "green": "#008000",
    "greenyellow": "#adff2f", "honeydew": "#f0fff0", "hotpink": "#ff69b4",
    "indianred": "#cd5c5c", "indigo": "#4b0082", "ivory": "#fffff0",
    "khaki": "#f0e68c", "lavender": "#e6e6fa", "lavenderblush": "#fff0f5",
    "lawngreen": "#7cfc00", "lemonchiffon": "#fffacd", "lightblue": "#add8e6",
    "lightcoral": "#f08080", "lightcyan": "#e0ffff",
    "lightgoldenrodyellow": "#fafad2", "lightgray": "#d3d3d3",
    "lightgrey": "#d3d3d3", "lightgreen": "#90ee90", "lightpink": "#ffb6c1",
    "lightsalmon": "#ffa07a", "lightseagreen": "#20b2aa", "lightskyblue": "#87cefa",
    "lightslategray": "#778899", "lightslategrey": "#778899",
    "lightsteelblue": "#b0c4de", "lightyellow": "#ffffe0", "lime": "#00ff00",
    "limegreen": "#32cd32", "linen": "#faf0e6", "magenta": "#ff00ff",
    "maroon": "#800000", "mediumaquamarine": "#66cdaa", "mediumblue": "#0000cd",
    "mediumorchid": "#ba55d3", "mediumpurple": "#9370db",
    "mediumseagreen": "#3cb371", "mediumslateblue": "#7b68ee",
    "mediumspringgreen": "#00fa9a", "mediumturquoise": "#48d1cc",
    "mediumvioletred": "#c71585", "midnightblue": "#191970", "mintcream": "#f5fffa",
    "mistyrose": "#ffe4e1", "moccasin": "#ffe4b5", "navajowhite": "#ffdead",
    "navy": "#000080", "oldlace": "#fdf5e6", "olive": "#808000",
    "olivedrab": "#6b8e23", "orange": "#ffa500", "orangered": "#ff4500",
    "orchid": "#da70d6", "palegoldenrod": "#eee8aa", "palegreen": "#98fb98",
    "paleturquoise": "#afeeee", "palevioletred": "#db7093", "papayawhip": "#ffefd5",
    "peachpuff": "#ffdab9", "peru": "#cd853f", "pink": "#ffc0cb", "plum": "#dda0dd",
    "powderblue": "#b0e0e6", "purple": "#800080", "rebeccapurple": "#663399",
    "red": "#ff0000", "rosybrown": "#bc8f8f", "royalblue": "#4169e1",
    "saddlebrown": "#8b4513", "salmon": "#fa8072", "sandybrown": "#f4a460",
    "seagreen": "#2e8b57", "seashell": "#fff5ee", "sienna": "#a0522d",
    "silver": "#c0c0c0", "skyblue": "#87ceeb", "slateblue": "#6a5acd",
    "slategray": "#708090", "slategrey": "#708090", "snow": "#fffafa",
    "springgreen": "#00ff7f", "steelblue": "#4682b4", "tan": "#d2b48c",
    "teal": "#008080", "thistle": "#d8bfd8", "tomato": "#ff6347",
    "turquoise": "#40e0d0", "violet": "#ee82ee", "wheat": "#f5deb3",
    "white": "#ffffff", "whitesmoke": "#f5f5f5", "yellow": "#ffff00",
    "yellowgreen": "#9acd32",
}
# fmt: on


class ColorMode(str, enum.Enum):
    NEAREST = "nearest"
    TRUNCATE = "truncate"


@dataclass(frozen=True)
class Color:
    """32-bit RGBA color parsed from markup."""

    r: int
    g: int
    b: int
    a: int = 255

    def with_opacity(self, opacity: float) -> Color:
        """Scale alpha by an opacity in [0, 1]."""
        opacity = min(1.0, max(0.0, opacity))
        return Color(self.r, self.g, self.b, int(self.a * opacity + 0.5))


@dataclass(frozen=True)
class ColorEntry:
    """One palette byte."""

    value: int

    @property
    def a(self) -> int:
        return (self.value >> 6) & 0b11

    @property
    def r(self) -> int:
        return (self.value >> 4) & 0b11

    @property
    def g(self) -> int:
        return (self.value >> 2) & 0b11

    @property
    def b(self) -> int:
        return self.value & 0b11

    @property
    def is_transparent(self) -> bool:
        return self.a == 0

    def to_hex(self) -> str:
        """#rrggbbaa of the palette entry."""
        return "#" + "".join(f"{c * _LEVEL:02x}" for c in (self.r, self.g, self.b, self.a))


TRANSPARENT = ColorEntry(0)


def parse_color(value: str, element_id: str | None = None) -> Color | None:
    """Parse a paint value. Returns None for ``none``; raises InvalidColor."""
    text = value.strip()
    lowered = text.lower()
    if lowered == "none":
        return None
    if lowered == "transparent":
        return Color(0, 0, 0, 0)
    if lowered == "currentcolor":
        return Color(0, 0, 0)
    if lowered in NAMED_COLORS:
        text = NAMED_COLORS[lowered]

    if text.startswith("#"):
        match = _HEX_RE.match(text)
        if match is None:
            raise InvalidColor(value, element_id)
        digits = match.group(1)
        if len(digits) == 3:
            digits = "".join(ch * 2 for ch in digits)
        r, g, b = (int(digits[i : i + 2], 16) for i in (0, 2, 4))
        a = int(digits[6:8], 16) if len(digits) == 8 else 255
        return Color(r, g, b, a)

    match = _RGB_RE.match(text)
    if match is not None:
        try:
            r, g, b = (_channel(match.group(i)) for i in (1, 2, 3))
            a = _alpha(match.group(4)) if match.group(4) else 255
        except ValueError:
            raise InvalidColor(value, element_id) from None
        return Color(r, g, b, a)

    raise InvalidColor(value, element_id)


def _channel(text: str) -> int:
    if text.endswith("%"):
        v = float(text[:-1]) * 255 / 100
    else:
        v = float(text)
    return int(min(255.0, max(0.0, v)) + 0.5)


def _alpha(text: str) -> int:
    if text.endswith("%"):
        v = float(text[:-1]) / 100
    else:
        v = float(text)
    return int(min(1.0, max(0.0, v)) * 255 + 0.5)


def _reduce(channel: int, mode: ColorMode) -> int:
    if mode is ColorMode.TRUNCATE:
        return channel // _LEVEL
    return (channel + _LEVEL // 2) // _LEVEL


def to_palette(color: Color | None, mode: ColorMode = ColorMode.NEAREST) -> ColorEntry:
    """Quantize a color to its palette entry; None (paint "none") is transparent."""
    if color is None:
        return TRANSPARENT
    a = _reduce(color.a, mode)
    if a == 0:
        return TRANSPARENT
    r, g, b = (_reduce(c, mode) for c in (color.r, color.g, color.b))
    return ColorEntry((a << 6) | (r << 4) | (g << 2) | b)
