"""Write canonical segments back out as path data (absolute commands only)."""

from __future__ import annotations

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


def _num(value: float) -> str:
    # repr keeps full float precision; drop a trailing ".0"
    text = repr(float(value))
    return text[:-2] if text.endswith(".0") else text


def _pt(p: Point) -> str:
    return f"{_num(p[0])},{_num(p[1])}"


def serialize_path(segments: list[Segment]) -> str:
    """Generate path data equivalent to the given segments."""
    parts: list[str] = []
    for seg in segments:
        if isinstance(seg, MoveTo):
            parts.append(f"M{_pt(seg.end)}")
        elif isinstance(seg, LineTo):
            parts.append(f"L{_pt(seg.end)}")
        elif isinstance(seg, CubicCurveTo):
            parts.append(f"C{_pt(seg.c1)} {_pt(seg.c2)} {_pt(seg.end)}")
        elif isinstance(seg, QuadraticCurveTo):
            parts.append(f"Q{_pt(seg.control)} {_pt(seg.end)}")
        elif isinstance(seg, ArcTo):
            parts.append(
                f"A{_num(seg.rx)},{_num(seg.ry)} {_num(seg.rotation)} "
                f"{int(seg.large_arc)} {int(seg.sweep)} {_pt(seg.end)}"
            )
        elif isinstance(seg, ClosePath):
            parts.append("Z")
    return " ".join(parts)
