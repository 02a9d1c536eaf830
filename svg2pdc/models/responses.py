"""API response models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    normalizers_registered: int = 0


class ErrorResponse(BaseModel):
    error: str
    message: str
    element_id: str | None = None


class SkippedElement(BaseModel):
    element_id: str
    message: str


class CommandSummary(BaseModel):
    type: str
    stroke_color: str
    stroke_width: int
    fill_color: str
    hidden: bool = False
    # Device-pixel (xmin, ymin, xmax, ymax)
    bounds: tuple[float, float, float, float] = (0.0, 0.0, 0.0, 0.0)
    # Paths
    open: bool | None = None
    points: list[tuple[int, int]] = Field(default_factory=list)
    path_data: str | None = None
    # Circles
    center: tuple[int, int] | None = None
    radius: int | None = None


class InspectResponse(BaseModel):
    width: int
    height: int
    version: int
    payload_size: int
    byte_size: int
    command_count: int
    commands: list[CommandSummary] = Field(default_factory=list)
    skipped: list[SkippedElement] = Field(default_factory=list)
    processing_time_ms: float = 0.0
