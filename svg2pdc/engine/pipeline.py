"""Converter: walks a document and turns every drawable into draw commands.

Style and transform context are passed down the recursion explicitly; no
state survives between conversions. Each element's commands are kept only
if the whole element converts, so the skip policy never leaves half an
element behind.
"""

from __future__ import annotations

import logging
import math
import time

from svg2pdc.engine.config import ConversionConfig, ErrorPolicy
from svg2pdc.engine.encoder import U16_MAX, CircleCommand, CommandList, DrawCommand, PathCommand, encode
from svg2pdc.engine.flatten import CURVE_ERROR_SHARE, flatten_subpath
from svg2pdc.engine.quantize import (
    Precision,
    Viewport,
    collapse_degenerate,
    quantize_points,
    viewport_matrix,
)
from svg2pdc.engine.registry import NormalizerRegistry, get_registry
from svg2pdc.engine.segments import Segment, is_closed, split_subpaths
from svg2pdc.engine.shapes import circle_params
from svg2pdc.engine.style import ResolvedStyle, StyleContext, resolve_style
from svg2pdc.engine.transform import (
    Matrix,
    apply_point,
    is_similarity,
    linear_scale,
    max_stretch,
    parse_transform,
    transform_segments,
    translation,
)
from svg2pdc.errors import ConversionError, EncodingOverflow, UnsupportedElement
from svg2pdc.svg.document import CircleElement, Document, Drawable, ForeignElement, GroupElement, parse_document

logger = logging.getLogger(__name__)


class Converter:
    """Converts documents into command lists under one configuration."""

    def __init__(
        self,
        config: ConversionConfig | None = None,
        registry: NormalizerRegistry | None = None,
    ) -> None:
        self.config = config or ConversionConfig()
        self.registry = registry or get_registry()

    def convert(self, document: Document) -> CommandList:
        """Convert a parsed document."""
        start = time.perf_counter()
        width, height = self._canvas_size(document.viewport)
        root = self._root_matrix(document.viewport, (width, height))

        commands: list[DrawCommand] = []
        skipped: list[tuple[str, str]] = []
        self._walk(document.elements, StyleContext().derive(document.style), root, commands, skipped)

        result = CommandList(
            width=width,
            height=height,
            commands=tuple(commands),
            skipped=tuple(skipped),
        )
        total = (time.perf_counter() - start) * 1000
        logger.info(
            "Converted %d elements into %d commands (%d skipped) in %.0fms",
            sum(1 for _ in document.walk()),
            len(commands),
            len(skipped),
            total,
        )
        return result

    def convert_svg(self, svg_text: str) -> CommandList:
        """Parse markup and convert it."""
        return self.convert(parse_document(svg_text))

    # ── Canvas ──────────────────────────────────────────────────────────

    def _canvas_size(self, viewport: Viewport) -> tuple[int, int]:
        """Configured canvas; a missing side keeps the viewport's aspect ratio."""
        w, h = self.config.canvas_width, self.config.canvas_height
        if w is not None and h is not None:
            return w, h
        if w is not None:
            ratio = viewport.height / viewport.width if viewport.width > 0 else 1.0
            return w, round(w * ratio)
        if h is not None:
            ratio = viewport.width / viewport.height if viewport.height > 0 else 1.0
            return round(h * ratio), h
        return round(viewport.width), round(viewport.height)

    def _root_matrix(self, viewport: Viewport, canvas: tuple[int, int]) -> Matrix:
        if self.config.canvas_width is None and self.config.canvas_height is None:
            # No canvas configured: draw at scale 1
            return translation(-viewport.x, -viewport.y)
        return viewport_matrix(viewport, canvas, self.config.non_uniform_scale)

    # ── Tree walk ───────────────────────────────────────────────────────

    def _walk(
        self,
        elements: tuple[Drawable, ...],
        style: StyleContext,
        matrix: Matrix,
        out: list[DrawCommand],
        skipped: list[tuple[str, str]],
    ) -> None:
        for element in elements:
            try:
                self._convert_element(element, style, matrix, out, skipped)
            except ConversionError as e:
                e.with_element(element.element_id)
                if self.config.error_policy is ErrorPolicy.ABORT:
                    raise
                logger.warning("Skipping <%s id=%s>: %s", element.tag, element.element_id, e.message)
                skipped.append((element.element_id, e.message))

    def _convert_element(
        self,
        element: Drawable,
        parent_style: StyleContext,
        parent_matrix: Matrix,
        out: list[DrawCommand],
        skipped: list[tuple[str, str]],
    ) -> None:
        eid = element.element_id
        style = parent_style.derive(element.style, eid)
        matrix = parent_matrix @ parse_transform(element.transform, eid)

        if isinstance(element, GroupElement):
            self._walk(element.children, style, matrix, out, skipped)
            return
        if isinstance(element, ForeignElement):
            raise UnsupportedElement(element.tag, eid)

        spec = self.registry.get(type(element))
        if spec is None:
            raise UnsupportedElement(element.tag, eid)

        scale = linear_scale(matrix)
        resolved = resolve_style(
            style,
            fillable=spec.fillable,
            scale=scale,
            color_mode=self.config.color_mode,
            width_rule=self.config.stroke_width_rule,
            element_id=eid,
        )

        t0 = time.perf_counter()
        if (
            self.config.native_circles
            and isinstance(element, CircleElement)
            and is_similarity(matrix)
        ):
            commands = self._circle_command(element, matrix, scale, resolved)
        else:
            budget = self._curve_budget(matrix)
            if spec.bounded_error:
                segments = spec.fn(element, max_error=budget)
            else:
                segments = spec.fn(element)
            commands = self._path_commands(segments, matrix, resolved, eid, budget)
        out.extend(commands)
        logger.debug(
            "  <%s id=%s> → %d commands in %.1fms",
            element.tag,
            eid,
            len(commands),
            (time.perf_counter() - t0) * 1000,
        )

    # ── Command building ────────────────────────────────────────────────

    def _curve_budget(self, matrix: Matrix) -> float | None:
        """Allowed arc approximation error in source units."""
        stretch = max_stretch(matrix)
        if stretch <= 0:
            return None
        return self.config.flatness_tolerance * CURVE_ERROR_SHARE / stretch

    def _path_commands(
        self,
        segments: list[Segment],
        matrix: Matrix,
        style: ResolvedStyle,
        element_id: str,
        max_error: float | None = None,
    ) -> list[DrawCommand]:
        precision = self.config.precision
        commands: list[DrawCommand] = []
        for subpath in split_subpaths(transform_segments(segments, matrix, max_error)):
            closed = is_closed(subpath)
            points = flatten_subpath(
                subpath,
                self.config.flatness_tolerance,
                self.config.max_subdivision_depth,
            )
            ints = collapse_degenerate(quantize_points(points, precision, element_id), closed)
            if closed and len(ints) == 2:
                closed = False
            if len(ints) < (3 if closed else 2):
                logger.debug("  %s: dropping degenerate subpath (%d points)", element_id, len(ints))
                continue
            commands.append(
                PathCommand(
                    points=tuple(ints),
                    open=not closed,
                    stroke_color=style.stroke,
                    stroke_width=style.stroke_width,
                    fill_color=style.fill,
                    precise=self.config.precise,
                    element_id=element_id,
                )
            )
        return commands

    def _circle_command(
        self,
        element: CircleElement,
        matrix: Matrix,
        scale: float,
        style: ResolvedStyle,
    ) -> list[DrawCommand]:
        cx, cy, r = circle_params(element)
        if r <= 0:
            return []
        eid = element.element_id
        center = quantize_points([apply_point(matrix, (cx, cy))], Precision.NORMAL, eid)[0]
        radius = math.floor(r * scale + 0.5)
        if radius > U16_MAX:
            raise EncodingOverflow("radius", radius, U16_MAX, eid)
        return [
            CircleCommand(
                center=(int(center[0]), int(center[1])),
                radius=radius,
                stroke_color=style.stroke,
                stroke_width=style.stroke_width,
                fill_color=style.fill,
                element_id=eid,
            )
        ]


def create_converter(config: ConversionConfig | None = None) -> Converter:
    """Factory function for creating a converter instance."""
    return Converter(config=config)


def svg_to_pdc(svg_text: str, config: ConversionConfig | None = None) -> bytes:
    """Convert SVG markup straight to a draw command image."""
    return encode(create_converter(config).convert_svg(svg_text))
