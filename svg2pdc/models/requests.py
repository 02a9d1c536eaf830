"""API request models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from svg2pdc.engine.color import ColorMode
from svg2pdc.engine.config import ErrorPolicy
from svg2pdc.engine.style import StrokeWidthRule


class ConvertRequest(BaseModel):
    svg: str = Field(..., description="Raw SVG code")
    canvas_width: int | None = Field(default=None, gt=0, le=0xFFFF, description="Output width in px")
    canvas_height: int | None = Field(default=None, gt=0, le=0xFFFF, description="Output height in px")
    non_uniform_scale: bool = Field(default=False, description="Stretch to fill the canvas")
    flatness_tolerance: float | None = Field(
        default=None,
        gt=0,
        description="Max curve deviation in device px (server default when unset)",
    )
    max_subdivision_depth: int | None = Field(default=None, ge=0, le=32)
    error_policy: ErrorPolicy = Field(default=ErrorPolicy.ABORT, description="abort or skip")
    precise: bool = Field(default=False, description="Emit precise (1/8 px) paths")
    color_mode: ColorMode = ColorMode.NEAREST
    stroke_width_rule: StrokeWidthRule = StrokeWidthRule.ROUND
    native_circles: bool = Field(default=False, description="Encode <circle> as circle records")


class InspectRequest(ConvertRequest):
    pass
