"""Canonical path segments: the single representation every drawable is normalized to.

All coordinates are absolute, in the element's own user space.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

Point = tuple[float, float]


@dataclass(frozen=True)
class MoveTo:
    end: Point


@dataclass(frozen=True)
class LineTo:
    end: Point


@dataclass(frozen=True)
class CubicCurveTo:
    c1: Point
    c2: Point
    end: Point


@dataclass(frozen=True)
class QuadraticCurveTo:
    control: Point
    end: Point


@dataclass(frozen=True)
class ArcTo:
    rx: float
    ry: float
    # Degrees, as written in path data
    rotation: float
    large_arc: bool
    sweep: bool
    end: Point


@dataclass(frozen=True)
class ClosePath:
    pass


Segment = Union[MoveTo, LineTo, CubicCurveTo, QuadraticCurveTo, ArcTo, ClosePath]


def split_subpaths(segments: list[Segment]) -> list[list[Segment]]:
    """Split a segment list at each MoveTo. Each sub-list starts with its MoveTo."""
    subpaths: list[list[Segment]] = []
    current: list[Segment] = []
    for seg in segments:
        if isinstance(seg, MoveTo) and current:
            subpaths.append(current)
            current = []
        current.append(seg)
    if current:
        subpaths.append(current)
    return subpaths


def is_closed(subpath: list[Segment]) -> bool:
    return bool(subpath) and isinstance(subpath[-1], ClosePath)
