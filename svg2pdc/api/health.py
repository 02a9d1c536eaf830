"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from svg2pdc import __version__
from svg2pdc.engine.registry import get_registry
from svg2pdc.models.responses import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(
        status="ok",
        version=__version__,
        normalizers_registered=get_registry().count,
    )
