"""Conversion configuration: output canvas, flattening and encoding knobs."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from svg2pdc.engine.color import ColorMode
from svg2pdc.engine.flatten import DEFAULT_MAX_DEPTH, DEFAULT_TOLERANCE
from svg2pdc.engine.quantize import Precision
from svg2pdc.engine.style import StrokeWidthRule


class ErrorPolicy(str, enum.Enum):
    ABORT = "abort"  # first element error fails the conversion
    SKIP = "skip"  # drop the element, log a warning, keep going


@dataclass
class ConversionConfig:
    """Controls how a document is mapped onto the output canvas."""

    # Output canvas; None means "use the viewport size"
    canvas_width: int | None = None
    canvas_height: int | None = None
    non_uniform_scale: bool = False

    # Curve flattening, in device pixels
    flatness_tolerance: float = DEFAULT_TOLERANCE
    max_subdivision_depth: int = DEFAULT_MAX_DEPTH

    error_policy: ErrorPolicy = ErrorPolicy.ABORT

    # Precise paths keep 3 fractional bits per coordinate
    precise: bool = False
    color_mode: ColorMode = ColorMode.NEAREST
    stroke_width_rule: StrokeWidthRule = StrokeWidthRule.ROUND

    # Encode <circle> as circle records when the transform allows it
    native_circles: bool = False

    def __post_init__(self) -> None:
        if self.flatness_tolerance <= 0:
            raise ValueError(f"flatness_tolerance must be positive, got {self.flatness_tolerance}")
        if self.max_subdivision_depth < 0:
            raise ValueError(
                f"max_subdivision_depth must be non-negative, got {self.max_subdivision_depth}"
            )
        for name in ("canvas_width", "canvas_height"):
            value = getattr(self, name)
            if value is not None and value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")

    @property
    def precision(self) -> Precision:
        return Precision.PRECISE if self.precise else Precision.NORMAL
