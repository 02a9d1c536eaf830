"""Style resolution: inherited fill / stroke / stroke-width → palette entries.

Inheritance is explicit: the converter threads a ``StyleContext`` down the
document tree and each element derives its own context from its parent's.
The nearest explicitly set value of each property wins.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass

from svg2pdc.engine.color import TRANSPARENT, ColorEntry, ColorMode, parse_color, to_palette
from svg2pdc.errors import EncodingOverflow, InvalidAttribute
from svg2pdc.utils.units import parse_fraction, parse_length

STYLE_PROPERTIES = ("fill", "stroke", "stroke-width", "opacity", "fill-opacity", "stroke-opacity")

# Stroke width is a single unsigned byte
MAX_STROKE_WIDTH = 255


class StrokeWidthRule(str, enum.Enum):
    ROUND = "round"
    FLOOR = "floor"
    CEIL = "ceil"

    def apply(self, width: float) -> int:
        if self is StrokeWidthRule.FLOOR:
            return math.floor(width)
        if self is StrokeWidthRule.CEIL:
            return math.ceil(width)
        return math.floor(width + 0.5)


def parse_style_declarations(style: str | None) -> dict[str, str]:
    """Split an inline ``style`` attribute into lowercase property → value."""
    result: dict[str, str] = {}
    if not style:
        return result
    for decl in style.split(";"):
        if ":" not in decl:
            continue
        key, value = decl.split(":", 1)
        key, value = key.strip().lower(), value.strip()
        if key and value:
            result[key] = value
    return result


@dataclass(frozen=True)
class StyleAttributes:
    """Style properties set explicitly on one element (raw strings, None = unset)."""

    fill: str | None = None
    stroke: str | None = None
    stroke_width: str | None = None
    opacity: str | None = None
    fill_opacity: str | None = None
    stroke_opacity: str | None = None

    @classmethod
    def from_attributes(cls, attrs: dict[str, str]) -> StyleAttributes:
        """Presentation attributes, overridden by inline style declarations."""
        props = {k: v.strip() for k, v in attrs.items() if k in STYLE_PROPERTIES}
        props.update(
            {k: v for k, v in parse_style_declarations(attrs.get("style")).items() if k in STYLE_PROPERTIES}
        )
        return cls(**{k.replace("-", "_"): v for k, v in props.items()})


@dataclass(frozen=True)
class ResolvedStyle:
    fill: ColorEntry = TRANSPARENT
    stroke: ColorEntry = TRANSPARENT
    stroke_width: int = 0

    @property
    def fill_suppressed(self) -> bool:
        return self.fill.is_transparent

    @property
    def stroke_suppressed(self) -> bool:
        return self.stroke.is_transparent


@dataclass(frozen=True)
class StyleContext:
    """Effective style inherited at one point of the tree."""

    fill: str = "black"
    stroke: str = "none"
    stroke_width: str = "1"
    fill_opacity: str = "1"
    stroke_opacity: str = "1"
    # Group opacity multiplies down the tree
    opacity: float = 1.0

    def derive(self, style: StyleAttributes, element_id: str | None = None) -> StyleContext:
        opacity = self.opacity
        if style.opacity is not None:
            opacity *= parse_fraction(style.opacity, "opacity", element_id)
        return StyleContext(
            fill=style.fill if style.fill is not None else self.fill,
            stroke=style.stroke if style.stroke is not None else self.stroke,
            stroke_width=style.stroke_width if style.stroke_width is not None else self.stroke_width,
            fill_opacity=style.fill_opacity if style.fill_opacity is not None else self.fill_opacity,
            stroke_opacity=(
                style.stroke_opacity if style.stroke_opacity is not None else self.stroke_opacity
            ),
            opacity=opacity,
        )


def resolve_style(
    ctx: StyleContext,
    *,
    fillable: bool = True,
    scale: float = 1.0,
    color_mode: ColorMode = ColorMode.NEAREST,
    width_rule: StrokeWidthRule = StrokeWidthRule.ROUND,
    element_id: str | None = None,
) -> ResolvedStyle:
    """Turn an effective style into palette entries and a device stroke width.

    ``scale`` is the transform's linear scale, applied to the stroke width.
    Unfillable elements (lines) always get a transparent fill.
    """
    fill = TRANSPARENT
    if fillable:
        fill_color = parse_color(ctx.fill, element_id)
        if fill_color is not None:
            alpha = ctx.opacity * parse_fraction(ctx.fill_opacity, "fill-opacity", element_id)
            fill = to_palette(fill_color.with_opacity(alpha), color_mode)

    stroke = TRANSPARENT
    width = 0
    stroke_color = parse_color(ctx.stroke, element_id)
    if stroke_color is not None:
        alpha = ctx.opacity * parse_fraction(ctx.stroke_opacity, "stroke-opacity", element_id)
        stroke = to_palette(stroke_color.with_opacity(alpha), color_mode)
        raw_width = parse_length(ctx.stroke_width, "stroke-width", element_id)
        if raw_width < 0:
            raise InvalidAttribute("stroke-width", ctx.stroke_width, element_id)
        width = width_rule.apply(raw_width * scale)
        if width > MAX_STROKE_WIDTH:
            raise EncodingOverflow("stroke width", width, MAX_STROKE_WIDTH, element_id)

    # Either a zero width or a transparent stroke color suppresses the stroke
    if width == 0 or stroke.is_transparent:
        stroke, width = TRANSPARENT, 0

    return ResolvedStyle(fill=fill, stroke=stroke, stroke_width=width)
