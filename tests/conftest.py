"""Shared test fixtures."""

from __future__ import annotations

import numpy as np
import pytest


# Icon-style SVGs: presentation attributes on the root element

CIRCLE_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="24" height="24" viewBox="0 0 24 24" fill="none" stroke="currentColor" stroke-width="2" stroke-linecap="round" stroke-linejoin="round">
  <circle cx="12" cy="12" r="10"/>
</svg>'''

HOME_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="24" height="24" viewBox="0 0 24 24" fill="none" stroke="currentColor" stroke-width="2" stroke-linecap="round" stroke-linejoin="round">
  <path d="M15 21v-8a1 1 0 0 0-1-1h-4a1 1 0 0 0-1 1v8"/>
  <path d="M3 10a2 2 0 0 1 .709-1.528l7-5.999a2 2 0 0 1 2.582 0l7 5.999A2 2 0 0 1 21 10v9a2 2 0 0 1-2 2H5a2 2 0 0 1-2-2z"/>
</svg>'''

BAR_CHART_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="24" height="24" viewBox="0 0 24 24" fill="none" stroke="currentColor" stroke-width="2" stroke-linecap="round" stroke-linejoin="round">
  <line x1="18" x2="18" y1="20" y2="10"/>
  <line x1="12" x2="12" y1="20" y2="4"/>
  <line x1="6" x2="6" y1="20" y2="14"/>
</svg>'''

SETTINGS_PATH = (
    "M12.22 2h-.44a2 2 0 0 0-2 2v.18a2 2 0 0 1-1 1.73l-.43.25a2 2 0 0 1-2 0l-.15-.08"
    "a2 2 0 0 0-2.73.73l-.22.38a2 2 0 0 0 .73 2.73l.15.1a2 2 0 0 1 1 1.72v.51a2 2 0 0 1-1 1.74"
    "l-.15.09a2 2 0 0 0-.73 2.73l.22.38a2 2 0 0 0 2.73.73l.15-.08a2 2 0 0 1 2 0l.43.25"
    "a2 2 0 0 1 1 1.73V20a2 2 0 0 0 2 2h.44a2 2 0 0 0 2-2v-.18a2 2 0 0 1 1-1.73l.43-.25"
    "a2 2 0 0 1 2 0l.15.08a2 2 0 0 0 2.73-.73l.22-.39a2 2 0 0 0-.73-2.73l-.15-.08"
    "a2 2 0 0 1-1-1.74v-.5a2 2 0 0 1 1-1.74l.15-.09a2 2 0 0 0 .73-2.73l-.22-.38"
    "a2 2 0 0 0-2.73-.73l-.15.08a2 2 0 0 1-2 0l-.43-.25a2 2 0 0 1-1-1.73V4a2 2 0 0 0-2-2z"
)


# Filled shapes

RECT_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 10 10">
  <rect x="0" y="0" width="10" height="10" fill="#ff0000"/>
</svg>'''

TRIANGLE_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 10 10">
  <path d="M0,0 L10,0 L10,10 Z" stroke="#000000" fill="none"/>
</svg>'''

BAD_COLOR_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 20 20">
  <rect id="good" x="0" y="0" width="10" height="10" fill="blue"/>
  <path id="bad" d="M0 0 L5 5 L0 5 Z" fill="notacolor"/>
  <rect id="after" x="10" y="10" width="5" height="5" fill="green"/>
</svg>'''

GROUP_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="40" height="40">
  <g fill="red" stroke="black" stroke-width="2" transform="translate(10,10)">
    <rect id="inherits" width="10" height="10"/>
    <rect id="overrides" x="10" width="10" height="10" fill="blue" style="stroke:none"/>
    <g transform="scale(2)">
      <line id="doubled" x1="0" y1="0" x2="5" y2="0"/>
    </g>
  </g>
</svg>'''

EDITOR_SVG = '''<svg xmlns="http://www.w3.org/2000/svg"
     xmlns:sodipodi="http://sodipodi.sourceforge.net/DTD/sodipodi-0.0.dtd"
     viewBox="0 0 50 50">
  <title>editor export</title>
  <defs><linearGradient id="grad"/></defs>
  <sodipodi:namedview id="base"/>
  <!-- a comment -->
  <rect id="hidden" width="5" height="5" display="none"/>
  <rect id="hidden-style" width="5" height="5" style="display: none"/>
  <layer id="layer1">
    <rect id="shown" width="5" height="5"/>
  </layer>
  <text id="label" x="0" y="10">hi</text>
</svg>'''


@pytest.fixture
def rect_svg() -> str:
    return RECT_SVG


@pytest.fixture
def triangle_svg() -> str:
    return TRIANGLE_SVG


# Curve sampling helpers

def cubic_points(p0, p1, p2, p3, t):
    """Evaluate a cubic Bézier at parameters t. Returns Nx2."""
    t = np.asarray(t, dtype=np.float64)[:, None]
    mt = 1.0 - t
    ctrl = np.array([p0, p1, p2, p3], dtype=np.float64)
    return (
        mt**3 * ctrl[0]
        + 3 * mt**2 * t * ctrl[1]
        + 3 * mt * t**2 * ctrl[2]
        + t**3 * ctrl[3]
    )


def polyline_samples(points, per_edge: int = 16):
    """Densely sample every edge of a polyline (endpoints included)."""
    points = np.asarray(points, dtype=np.float64)
    if len(points) < 2:
        return points
    t = np.linspace(0.0, 1.0, per_edge + 1)[:, None]
    starts = points[:-1]
    ends = points[1:]
    samples = starts[:, None, :] + (ends - starts)[:, None, :] * t[None, :, :]
    return samples.reshape(-1, 2)


def max_radial_deviation(points, center, radius: float) -> float:
    """Largest | |p - center| - radius | over a densely sampled polyline."""
    samples = polyline_samples(points)
    dist = np.hypot(samples[:, 0] - center[0], samples[:, 1] - center[1])
    return float(np.max(np.abs(dist - radius)))
