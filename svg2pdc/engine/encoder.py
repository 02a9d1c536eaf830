"""Draw command list and its little-endian binary image format.

Layout::

    "PDCI"              magic
    u32                 payload size (bytes after this field)
    u8 version, u8 reserved, u16 width, u16 height
    u16                 command count
    commands...

Path record: type (1 path, 3 precise path), hidden, stroke color, stroke
width, fill color, open, reserved, u16 point count, then i16 x/y pairs.
Circle record: type 2, hidden, stroke color, stroke width, fill color,
u16 radius, i16 center x/y.

Every field is range-checked; values are never truncated to fit.
"""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass, field
from typing import Union

from svg2pdc.engine.color import TRANSPARENT, ColorEntry
from svg2pdc.engine.quantize import COORD_MAX, COORD_MIN, IntPoint
from svg2pdc.errors import CoordinateOverflow, EncodingOverflow, PdcDecodeError

MAGIC = b"PDCI"
VERSION = 1

U8_MAX = 0xFF
U16_MAX = 0xFFFF
U32_MAX = 0xFFFFFFFF

_FILE_HEADER = struct.Struct("<4sI")
_IMAGE_HEADER = struct.Struct("<BBHHH")
_PATH_HEADER = struct.Struct("<BBBBBBBH")
_CIRCLE = struct.Struct("<BBBBBHhh")
_POINT = struct.Struct("<hh")


class CommandType(enum.IntEnum):
    PATH = 1
    CIRCLE = 2
    PRECISE_PATH = 3


@dataclass(frozen=True)
class PathCommand:
    points: tuple[IntPoint, ...]
    open: bool = False
    stroke_color: ColorEntry = TRANSPARENT
    stroke_width: int = 0
    fill_color: ColorEntry = TRANSPARENT
    precise: bool = False
    hidden: bool = False
    element_id: str | None = field(default=None, compare=False)

    @property
    def command_type(self) -> CommandType:
        return CommandType.PRECISE_PATH if self.precise else CommandType.PATH

    @property
    def size(self) -> int:
        return _PATH_HEADER.size + len(self.points) * _POINT.size


@dataclass(frozen=True)
class CircleCommand:
    center: IntPoint
    radius: int
    stroke_color: ColorEntry = TRANSPARENT
    stroke_width: int = 0
    fill_color: ColorEntry = TRANSPARENT
    hidden: bool = False
    element_id: str | None = field(default=None, compare=False)

    @property
    def command_type(self) -> CommandType:
        return CommandType.CIRCLE

    @property
    def size(self) -> int:
        return _CIRCLE.size


DrawCommand = Union[PathCommand, CircleCommand]


@dataclass(frozen=True)
class CommandList:
    width: int
    height: int
    commands: tuple[DrawCommand, ...] = ()
    version: int = VERSION
    # (element_id, message) for elements dropped under the skip policy
    skipped: tuple[tuple[str, str], ...] = field(default=(), compare=False)

    @property
    def payload_size(self) -> int:
        return _IMAGE_HEADER.size + sum(c.size for c in self.commands)


def _check(name: str, value: int, maximum: int, element_id: str | None = None) -> int:
    if value < 0 or value > maximum:
        raise EncodingOverflow(name, value, maximum, element_id)
    return value


def _check_point(p: IntPoint, element_id: str | None) -> None:
    for v in p:
        if v < COORD_MIN or v > COORD_MAX:
            raise CoordinateOverflow(v, (COORD_MIN, COORD_MAX), element_id)


def _encode_path(cmd: PathCommand) -> bytes:
    eid = cmd.element_id
    count = _check("point count", len(cmd.points), U16_MAX, eid)
    header = _PATH_HEADER.pack(
        cmd.command_type,
        int(cmd.hidden),
        cmd.stroke_color.value,
        _check("stroke width", cmd.stroke_width, U8_MAX, eid),
        cmd.fill_color.value,
        int(cmd.open),
        0,
        count,
    )
    body = bytearray(header)
    for p in cmd.points:
        _check_point(p, eid)
        body.extend(_POINT.pack(*p))
    return bytes(body)


def _encode_circle(cmd: CircleCommand) -> bytes:
    eid = cmd.element_id
    _check_point(cmd.center, eid)
    return _CIRCLE.pack(
        CommandType.CIRCLE,
        int(cmd.hidden),
        cmd.stroke_color.value,
        _check("stroke width", cmd.stroke_width, U8_MAX, eid),
        cmd.fill_color.value,
        _check("radius", cmd.radius, U16_MAX, eid),
        cmd.center[0],
        cmd.center[1],
    )


def encode(command_list: CommandList) -> bytes:
    """Serialize a command list into a draw command image."""
    payload = bytearray(
        _IMAGE_HEADER.pack(
            _check("version", command_list.version, U8_MAX),
            0,
            _check("canvas width", command_list.width, U16_MAX),
            _check("canvas height", command_list.height, U16_MAX),
            _check("command count", len(command_list.commands), U16_MAX),
        )
    )
    for cmd in command_list.commands:
        if isinstance(cmd, CircleCommand):
            payload.extend(_encode_circle(cmd))
        else:
            payload.extend(_encode_path(cmd))

    _check("payload size", len(payload), U32_MAX)
    return _FILE_HEADER.pack(MAGIC, len(payload)) + bytes(payload)


def decode(data: bytes) -> CommandList:
    """Parse a draw command image back into a command list."""
    if len(data) < _FILE_HEADER.size:
        raise PdcDecodeError(f"image too short: {len(data)} bytes")
    magic, size = _FILE_HEADER.unpack_from(data, 0)
    if magic != MAGIC:
        raise PdcDecodeError(f"bad magic {magic!r}")
    if size != len(data) - _FILE_HEADER.size:
        raise PdcDecodeError(
            f"payload size {size} does not match {len(data) - _FILE_HEADER.size} bytes present"
        )

    ptr = _FILE_HEADER.size
    try:
        version, _, width, height, count = _IMAGE_HEADER.unpack_from(data, ptr)
        if version != VERSION:
            raise PdcDecodeError(f"unsupported version {version}")
        ptr += _IMAGE_HEADER.size

        commands: list[DrawCommand] = []
        for _ in range(count):
            kind = data[ptr]
            if kind in (CommandType.PATH, CommandType.PRECISE_PATH):
                _, hidden, stroke, width_px, fill, is_open, _, n = _PATH_HEADER.unpack_from(data, ptr)
                ptr += _PATH_HEADER.size
                points = tuple(_POINT.unpack_from(data, ptr + i * _POINT.size) for i in range(n))
                ptr += n * _POINT.size
                commands.append(
                    PathCommand(
                        points=points,
                        open=bool(is_open),
                        stroke_color=ColorEntry(stroke),
                        stroke_width=width_px,
                        fill_color=ColorEntry(fill),
                        precise=kind == CommandType.PRECISE_PATH,
                        hidden=bool(hidden),
                    )
                )
            elif kind == CommandType.CIRCLE:
                _, hidden, stroke, width_px, fill, radius, cx, cy = _CIRCLE.unpack_from(data, ptr)
                ptr += _CIRCLE.size
                commands.append(
                    CircleCommand(
                        center=(cx, cy),
                        radius=radius,
                        stroke_color=ColorEntry(stroke),
                        stroke_width=width_px,
                        fill_color=ColorEntry(fill),
                        hidden=bool(hidden),
                    )
                )
            else:
                raise PdcDecodeError(f"unknown command type {kind} at offset {ptr}")
    except (struct.error, IndexError) as e:
        raise PdcDecodeError(f"truncated image: {e}") from e

    if ptr != len(data):
        raise PdcDecodeError(f"{len(data) - ptr} trailing bytes after last command")
    return CommandList(width=width, height=height, commands=tuple(commands), version=version)
