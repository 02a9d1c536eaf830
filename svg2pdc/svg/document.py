"""SVG document driver: markup → immutable ``Document`` of drawables.

Geometry attributes are kept as raw strings; each is parsed by the shape
normalizer of its element, so a bad attribute fails only that element.
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Union

from svg2pdc.engine.quantize import Viewport
from svg2pdc.engine.style import StyleAttributes, parse_style_declarations
from svg2pdc.errors import DocumentError, InvalidAttribute
from svg2pdc.utils.units import parse_length

logger = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"

# Containers whose children are drawn in place
GROUP_TAGS = {"g", "layer", "a", "switch"}

# Non-graphic or referenced-only content
IGNORED_TAGS = {
    "defs", "title", "desc", "metadata", "style", "script",
    "symbol", "clipPath", "mask", "pattern", "marker",
    "linearGradient", "radialGradient", "filter",
}

_VIEWBOX_SPLIT_RE = re.compile(r"[\s,]+")


def _strip_ns(tag: str) -> tuple[str | None, str]:
    """Split '{ns}tag' into (ns, tag)."""
    if tag.startswith("{"):
        ns, _, local = tag[1:].partition("}")
        return ns, local
    return None, tag


@dataclass(frozen=True)
class Element:
    element_id: str
    tag: str
    style: StyleAttributes = field(default_factory=StyleAttributes)
    transform: str | None = None


@dataclass(frozen=True)
class PathElement(Element):
    d: str = ""


@dataclass(frozen=True)
class RectElement(Element):
    x: str | None = None
    y: str | None = None
    width: str | None = None
    height: str | None = None


@dataclass(frozen=True)
class CircleElement(Element):
    cx: str | None = None
    cy: str | None = None
    r: str | None = None


@dataclass(frozen=True)
class EllipseElement(Element):
    cx: str | None = None
    cy: str | None = None
    rx: str | None = None
    ry: str | None = None


@dataclass(frozen=True)
class LineElement(Element):
    x1: str | None = None
    y1: str | None = None
    x2: str | None = None
    y2: str | None = None


@dataclass(frozen=True)
class PolylineElement(Element):
    points: str = ""


@dataclass(frozen=True)
class PolygonElement(Element):
    points: str = ""


@dataclass(frozen=True)
class GroupElement(Element):
    children: tuple["Drawable", ...] = ()


@dataclass(frozen=True)
class ForeignElement(Element):
    """An element the converter cannot draw (image, text, use, ...)."""


Drawable = Union[
    PathElement,
    RectElement,
    CircleElement,
    EllipseElement,
    LineElement,
    PolylineElement,
    PolygonElement,
    GroupElement,
    ForeignElement,
]


@dataclass(frozen=True)
class Document:
    viewport: Viewport
    elements: tuple[Drawable, ...] = ()
    # Presentation attributes on the root <svg>, inherited by everything
    style: StyleAttributes = field(default_factory=StyleAttributes)

    def walk(self):
        """Yield every drawable in document order, groups before their children."""
        stack = list(reversed(self.elements))
        while stack:
            el = stack.pop()
            yield el
            if isinstance(el, GroupElement):
                stack.extend(reversed(el.children))


def parse_document(svg_text: str) -> Document:
    """Parse SVG markup into a Document."""
    try:
        root = ET.fromstring(svg_text)
    except ET.ParseError as e:
        raise DocumentError(f"malformed SVG markup: {e}") from e

    _, tag = _strip_ns(root.tag)
    if tag != "svg":
        raise DocumentError(f"root element is <{tag}>, expected <svg>")

    builder = _DocumentBuilder()
    elements = builder.children(root)
    doc = Document(
        viewport=_read_viewport(root),
        elements=tuple(elements),
        style=StyleAttributes.from_attributes(dict(root.attrib)),
    )
    logger.debug("Parsed document: %d elements, viewport %s", builder.counter, doc.viewport)
    return doc


def _read_viewport(root: ET.Element) -> Viewport:
    view_box = root.get("viewBox")
    if view_box is not None and view_box.strip():
        try:
            nums = [float(v) for v in _VIEWBOX_SPLIT_RE.split(view_box.strip())]
        except ValueError:
            raise DocumentError(f"invalid viewBox: {view_box!r}") from None
        if len(nums) != 4:
            raise DocumentError(f"invalid viewBox: {view_box!r}")
        return Viewport(*nums)

    return Viewport(0.0, 0.0, _root_length(root, "width"), _root_length(root, "height"))


def _root_length(root: ET.Element, name: str) -> float:
    value = root.get(name)
    if value is None or value.strip().endswith("%"):
        return 0.0
    try:
        return parse_length(value, name, default=0.0)
    except InvalidAttribute as e:
        raise DocumentError(str(e)) from e


def _is_hidden(attrs: dict[str, str]) -> bool:
    display = attrs.get("display")
    inline = parse_style_declarations(attrs.get("style")).get("display")
    if inline is not None:
        display = inline
    return display is not None and display.strip() == "none"


class _DocumentBuilder:
    """Assigns document-order ids while converting the element tree."""

    def __init__(self) -> None:
        self.counter = 0

    def children(self, parent: ET.Element) -> list[Drawable]:
        out: list[Drawable] = []
        for child in parent:
            el = self.element(child)
            if el is not None:
                out.append(el)
        return out

    def element(self, node: ET.Element) -> Drawable | None:
        if not isinstance(node.tag, str):
            # Comments and processing instructions
            return None
        ns, tag = _strip_ns(node.tag)
        if ns is not None and ns != SVG_NS:
            # Editor metadata (sodipodi, inkscape, ...)
            return None
        if tag in IGNORED_TAGS:
            return None

        attrs = dict(node.attrib)
        if _is_hidden(attrs):
            logger.debug("Skipping hidden <%s id=%s>", tag, attrs.get("id"))
            return None

        self.counter += 1
        base = {
            "element_id": attrs.get("id") or f"E{self.counter}",
            "tag": tag,
            "style": StyleAttributes.from_attributes(attrs),
            "transform": attrs.get("transform"),
        }

        if tag in GROUP_TAGS:
            return GroupElement(**base, children=tuple(self.children(node)))
        if tag == "path":
            return PathElement(**base, d=attrs.get("d", ""))
        if tag == "rect":
            return RectElement(
                **base,
                x=attrs.get("x"),
                y=attrs.get("y"),
                width=attrs.get("width"),
                height=attrs.get("height"),
            )
        if tag == "circle":
            return CircleElement(**base, cx=attrs.get("cx"), cy=attrs.get("cy"), r=attrs.get("r"))
        if tag == "ellipse":
            return EllipseElement(
                **base,
                cx=attrs.get("cx"),
                cy=attrs.get("cy"),
                rx=attrs.get("rx"),
                ry=attrs.get("ry"),
            )
        if tag == "line":
            return LineElement(
                **base,
                x1=attrs.get("x1"),
                y1=attrs.get("y1"),
                x2=attrs.get("x2"),
                y2=attrs.get("y2"),
            )
        if tag == "polyline":
            return PolylineElement(**base, points=attrs.get("points", ""))
        if tag == "polygon":
            return PolygonElement(**base, points=attrs.get("points", ""))
        return ForeignElement(**base)
