"""Path-data parser: SVG path mini-language → canonical absolute segments.

The parser is an explicit state machine carrying the current point, the
subpath start point and the last cubic / quadratic control point (for
smooth-curve reflection). Relative commands are resolved against the
current point; H/V become LineTo; arcs with a non-positive radius become
LineTo.
"""

from __future__ import annotations

import re

from svg2pdc.engine.segments import (
    ArcTo,
    ClosePath,
    CubicCurveTo,
    LineTo,
    MoveTo,
    Point,
    QuadraticCurveTo,
    Segment,
)
from svg2pdc.errors import ArityError, PathSyntaxError, UnsupportedCommand

_COMMANDS = "MmZzLlHhVvCcSsQqTtAa"

# Argument count per command group
_ARITY = {"M": 2, "L": 2, "H": 1, "V": 1, "C": 6, "S": 4, "Q": 4, "T": 2, "A": 7, "Z": 0}

# Arc arguments 3 and 4 are single-character flags
_ARC_FLAG_INDEXES = (3, 4)

_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_NUMBER_START = frozenset("+-.0123456789")
_WHITESPACE = frozenset(" \t\r\n\f")


class _Scanner:
    """Character cursor over path data."""

    def __init__(self, data: str) -> None:
        self.data = data
        self.pos = 0

    def at_end(self) -> bool:
        return self.pos >= len(self.data)

    def peek(self) -> str:
        return self.data[self.pos] if self.pos < len(self.data) else ""

    def skip_whitespace(self) -> None:
        while self.pos < len(self.data) and self.data[self.pos] in _WHITESPACE:
            self.pos += 1

    def skip_separator(self) -> int:
        """Whitespace, at most one comma, whitespace. Returns the comma offset or -1."""
        self.skip_whitespace()
        comma = -1
        if self.peek() == ",":
            comma = self.pos
            self.pos += 1
            self.skip_whitespace()
        return comma

    def at_number(self) -> bool:
        return self.peek() in _NUMBER_START

    def read_number(self) -> float:
        match = _NUMBER_RE.match(self.data, self.pos)
        if match is None:
            raise PathSyntaxError("Malformed number", self.peek(), self.pos)
        if self.data[match.end() : match.end() + 1] in ("e", "E"):
            # Exponent marker without digits
            raise PathSyntaxError("Malformed exponent", self.data[self.pos : match.end() + 1], self.pos)
        self.pos = match.end()
        return float(match.group(0))

    def read_flag(self) -> float:
        ch = self.peek()
        if ch not in ("0", "1"):
            raise PathSyntaxError("Arc flag must be 0 or 1", ch, self.pos)
        self.pos += 1
        return float(ch)


def parse_path(data: str) -> list[Segment]:
    """Parse path data into absolute segments.

    Raises PathSyntaxError, UnsupportedCommand or ArityError.
    """
    return _PathParser(data).parse()


class _PathParser:
    def __init__(self, data: str) -> None:
        self._scan = _Scanner(data)
        self.segments: list[Segment] = []
        self.current: Point = (0.0, 0.0)
        self.start: Point = (0.0, 0.0)
        self.last_cubic: Point | None = None
        self.last_quad: Point | None = None
        # True after Z until the next explicit or implicit move
        self.needs_move = False

    def parse(self) -> list[Segment]:
        scan = self._scan
        scan.skip_whitespace()
        while not scan.at_end():
            ch = scan.peek()
            offset = scan.pos
            if ch in _COMMANDS:
                scan.pos += 1
                if not self.segments and ch not in "Mm":
                    raise PathSyntaxError("Path data must begin with a move command", ch, offset)
                self._run_command(ch, offset)
            else:
                self._raise_unexpected()
            scan.skip_whitespace()
        return self.segments

    def _run_command(self, command: str, offset: int) -> None:
        scan = self._scan
        scan.skip_whitespace()
        if command in "Zz":
            if scan.at_number():
                raise ArityError("Close path takes no arguments", scan.peek(), scan.pos)
            self._close()
            return

        args = self._read_group(command, offset)
        self._apply(command, args)

        # Implicit repetition; extra pairs after a move are lines
        repeat = {"M": "L", "m": "l"}.get(command, command)
        comma = scan.skip_separator()
        while scan.at_number():
            args = self._read_group(repeat, scan.pos)
            self._apply(repeat, args)
            comma = scan.skip_separator()
        if comma >= 0:
            raise PathSyntaxError("Comma must be followed by a number", ",", comma)

    def _read_group(self, command: str, offset: int) -> list[float]:
        scan = self._scan
        arity = _ARITY[command.upper()]
        args: list[float] = []
        for i in range(arity):
            if i:
                scan.skip_separator()
            if command in "Aa" and i in _ARC_FLAG_INDEXES:
                if scan.at_end() or scan.peek() in _COMMANDS:
                    self._raise_arity(command, offset, arity, len(args))
                args.append(scan.read_flag())
                continue
            if not scan.at_number():
                if scan.at_end() or scan.peek() in _COMMANDS:
                    self._raise_arity(command, offset, arity, len(args))
                self._raise_unexpected()
            args.append(scan.read_number())
        return args

    def _raise_arity(self, command: str, offset: int, arity: int, got: int) -> None:
        raise ArityError(
            f"Command {command!r} expects {arity} arguments per group, got {got}",
            command,
            offset,
        )

    def _raise_unexpected(self) -> None:
        scan = self._scan
        ch = scan.peek()
        if ch.isalpha():
            raise UnsupportedCommand(f"Unsupported path command {ch!r}", ch, scan.pos)
        raise PathSyntaxError("Unexpected character in path data", ch, scan.pos)

    # ── state machine ──

    def _resolve(self, x: float, y: float, relative: bool) -> Point:
        if relative:
            return (self.current[0] + x, self.current[1] + y)
        return (x, y)

    def _reflect(self, control: Point | None) -> Point:
        if control is None:
            return self.current
        cx, cy = self.current
        return (2 * cx - control[0], 2 * cy - control[1])

    def _begin_drawing(self) -> None:
        if self.needs_move:
            self.segments.append(MoveTo(self.start))
            self.needs_move = False

    def _apply(self, command: str, a: list[float]) -> None:
        rel = command.islower()
        op = command.upper()

        if op == "M":
            end = self._resolve(a[0], a[1], rel)
            self.segments.append(MoveTo(end))
            self.current = self.start = end
            self.needs_move = False
            self.last_cubic = self.last_quad = None
            return

        self._begin_drawing()
        cubic: Point | None = None
        quad: Point | None = None

        if op == "L":
            end = self._resolve(a[0], a[1], rel)
            self.segments.append(LineTo(end))
        elif op == "H":
            x = a[0] + self.current[0] if rel else a[0]
            end = (x, self.current[1])
            self.segments.append(LineTo(end))
        elif op == "V":
            y = a[0] + self.current[1] if rel else a[0]
            end = (self.current[0], y)
            self.segments.append(LineTo(end))
        elif op == "C":
            c1 = self._resolve(a[0], a[1], rel)
            cubic = self._resolve(a[2], a[3], rel)
            end = self._resolve(a[4], a[5], rel)
            self.segments.append(CubicCurveTo(c1, cubic, end))
        elif op == "S":
            c1 = self._reflect(self.last_cubic)
            cubic = self._resolve(a[0], a[1], rel)
            end = self._resolve(a[2], a[3], rel)
            self.segments.append(CubicCurveTo(c1, cubic, end))
        elif op == "Q":
            quad = self._resolve(a[0], a[1], rel)
            end = self._resolve(a[2], a[3], rel)
            self.segments.append(QuadraticCurveTo(quad, end))
        elif op == "T":
            quad = self._reflect(self.last_quad)
            end = self._resolve(a[0], a[1], rel)
            self.segments.append(QuadraticCurveTo(quad, end))
        else:  # A
            rx, ry, rotation = a[0], a[1], a[2]
            end = self._resolve(a[5], a[6], rel)
            if rx <= 0 or ry <= 0:
                self.segments.append(LineTo(end))
            else:
                self.segments.append(ArcTo(rx, ry, rotation, bool(a[3]), bool(a[4]), end))

        self.current = end
        self.last_cubic = cubic
        self.last_quad = quad

    def _close(self) -> None:
        # Repeated Z with nothing drawn in between is a no-op
        if self.segments and not isinstance(self.segments[-1], ClosePath):
            self.segments.append(ClosePath())
        self.current = self.start
        self.needs_move = True
        self.last_cubic = self.last_quad = None
