"""POST /api/convert — SVG markup → draw command image bytes."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from svg2pdc.config import Settings
from svg2pdc.dependencies import get_settings
from svg2pdc.engine.config import ConversionConfig
from svg2pdc.engine.encoder import encode
from svg2pdc.engine.pipeline import create_converter
from svg2pdc.models.requests import ConvertRequest
from svg2pdc.models.responses import ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter()

PDC_MEDIA_TYPE = "application/pdc"


def build_config(req: ConvertRequest, settings: Settings) -> ConversionConfig:
    """Request options over server defaults."""
    return ConversionConfig(
        canvas_width=req.canvas_width,
        canvas_height=req.canvas_height,
        non_uniform_scale=req.non_uniform_scale,
        flatness_tolerance=(
            req.flatness_tolerance
            if req.flatness_tolerance is not None
            else settings.default_flatness_tolerance
        ),
        max_subdivision_depth=(
            req.max_subdivision_depth
            if req.max_subdivision_depth is not None
            else settings.default_max_subdivision_depth
        ),
        error_policy=req.error_policy,
        precise=req.precise,
        color_mode=req.color_mode,
        stroke_width_rule=req.stroke_width_rule,
        native_circles=req.native_circles,
    )


def check_size(svg: str, settings: Settings) -> None:
    size = len(svg.encode("utf-8"))
    if size > settings.max_svg_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"SVG is {size} bytes, limit is {settings.max_svg_bytes}",
        )


@router.post(
    "/convert",
    response_class=Response,
    responses={
        200: {"content": {PDC_MEDIA_TYPE: {}}},
        422: {"model": ErrorResponse},
    },
)
async def convert(req: ConvertRequest, settings: Settings = Depends(get_settings)) -> Response:
    check_size(req.svg, settings)
    command_list = create_converter(build_config(req, settings)).convert_svg(req.svg)
    data = encode(command_list)
    logger.info("Encoded %d commands into %d bytes", len(command_list.commands), len(data))
    return Response(
        content=data,
        media_type=PDC_MEDIA_TYPE,
        headers={
            "X-Command-Count": str(len(command_list.commands)),
            "X-Skipped-Count": str(len(command_list.skipped)),
        },
    )
