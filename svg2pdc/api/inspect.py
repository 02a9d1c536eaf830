"""POST /api/inspect — convert, then decode the image back into a JSON summary."""

from __future__ import annotations

import time

import numpy as np
from fastapi import APIRouter, Depends

from svg2pdc.api.convert import build_config, check_size
from svg2pdc.config import Settings
from svg2pdc.dependencies import get_settings
from svg2pdc.engine.encoder import CircleCommand, CommandList, DrawCommand, decode, encode
from svg2pdc.engine.pipeline import create_converter
from svg2pdc.engine.quantize import Precision
from svg2pdc.engine.segments import ClosePath, LineTo, MoveTo, Segment
from svg2pdc.models.requests import InspectRequest
from svg2pdc.models.responses import CommandSummary, ErrorResponse, InspectResponse, SkippedElement
from svg2pdc.svg.serializer import serialize_path
from svg2pdc.utils.geometry import bbox

router = APIRouter()


def _path_data(points: tuple[tuple[int, int], ...], closed: bool, factor: int) -> str:
    segs: list[Segment] = [MoveTo((points[0][0] / factor, points[0][1] / factor))]
    segs.extend(LineTo((x / factor, y / factor)) for x, y in points[1:])
    if closed:
        segs.append(ClosePath())
    return serialize_path(segs)


def _summarize(cmd: DrawCommand) -> CommandSummary:
    common = {
        "type": cmd.command_type.name.lower(),
        "stroke_color": cmd.stroke_color.to_hex(),
        "stroke_width": cmd.stroke_width,
        "fill_color": cmd.fill_color.to_hex(),
        "hidden": cmd.hidden,
    }
    if isinstance(cmd, CircleCommand):
        cx, cy, r = cmd.center[0], cmd.center[1], cmd.radius
        return CommandSummary(
            **common, center=cmd.center, radius=r, bounds=(cx - r, cy - r, cx + r, cy + r)
        )
    factor = (Precision.PRECISE if cmd.precise else Precision.NORMAL).factor
    return CommandSummary(
        **common,
        open=cmd.open,
        points=list(cmd.points),
        bounds=bbox(np.asarray(cmd.points, dtype=np.float64).reshape(-1, 2) / factor),
        path_data=_path_data(cmd.points, not cmd.open, factor) if cmd.points else None,
    )


def summarize(decoded: CommandList, original: CommandList, byte_size: int) -> InspectResponse:
    return InspectResponse(
        width=decoded.width,
        height=decoded.height,
        version=decoded.version,
        payload_size=decoded.payload_size,
        byte_size=byte_size,
        command_count=len(decoded.commands),
        commands=[_summarize(c) for c in decoded.commands],
        skipped=[SkippedElement(element_id=eid, message=msg) for eid, msg in original.skipped],
    )


@router.post("/inspect", response_model=InspectResponse, responses={422: {"model": ErrorResponse}})
async def inspect(req: InspectRequest, settings: Settings = Depends(get_settings)) -> InspectResponse:
    start = time.perf_counter()
    check_size(req.svg, settings)
    command_list = create_converter(build_config(req, settings)).convert_svg(req.svg)
    data = encode(command_list)
    response = summarize(decode(data), command_list, len(data))
    response.processing_time_ms = round((time.perf_counter() - start) * 1000, 1)
    return response
