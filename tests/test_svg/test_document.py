"""Tests for the SVG document driver."""

from __future__ import annotations

import pytest

from svg2pdc.engine.quantize import Viewport
from svg2pdc.errors import DocumentError
from svg2pdc.svg.document import (
    ForeignElement,
    GroupElement,
    LineElement,
    RectElement,
    parse_document,
)
from tests.conftest import BAR_CHART_SVG, EDITOR_SVG, GROUP_SVG, RECT_SVG


def test_parse_rect():
    doc = parse_document(RECT_SVG)
    assert doc.viewport == Viewport(0, 0, 10, 10)
    assert len(doc.elements) == 1
    rect = doc.elements[0]
    assert isinstance(rect, RectElement)
    assert rect.element_id == "E1"
    assert rect.width == "10"
    assert rect.style.fill == "#ff0000"
    assert rect.style.stroke is None


def test_document_order_ids():
    doc = parse_document(GROUP_SVG)
    assert [el.element_id for el in doc.walk()] == ["E1", "inherits", "overrides", "E4", "doubled"]
    outer = doc.elements[0]
    assert isinstance(outer, GroupElement)
    assert outer.transform == "translate(10,10)"
    assert isinstance(outer.children[2].children[0], LineElement)


def test_viewport_from_width_height():
    doc = parse_document(GROUP_SVG)
    assert doc.viewport == Viewport(0, 0, 40, 40)
    doc = parse_document('<svg xmlns="http://www.w3.org/2000/svg" width="30px" height="15"/>')
    assert doc.viewport == Viewport(0, 0, 30, 15)


def test_viewbox_wins_over_size():
    doc = parse_document(BAR_CHART_SVG)
    assert doc.viewport == Viewport(0, 0, 24, 24)
    doc = parse_document('<svg xmlns="http://www.w3.org/2000/svg" width="100" viewBox="5,5 10,20"/>')
    assert doc.viewport == Viewport(5, 5, 10, 20)


def test_root_presentation_attributes():
    doc = parse_document(BAR_CHART_SVG)
    assert doc.style.fill == "none"
    assert doc.style.stroke == "currentColor"
    assert doc.style.stroke_width == "2"


def test_inline_style_wins():
    doc = parse_document(
        '<svg xmlns="http://www.w3.org/2000/svg">'
        '<rect fill="red" stroke-width="1" style="fill: blue; stroke-width:3"/></svg>'
    )
    style = doc.elements[0].style
    assert style.fill == "blue"
    assert style.stroke_width == "3"


def test_non_graphic_and_hidden_elements():
    doc = parse_document(EDITOR_SVG)
    ids = [el.element_id for el in doc.walk()]
    assert ids == ["layer1", "shown", "label"]
    assert isinstance(doc.elements[0], GroupElement)
    assert isinstance(doc.elements[1], ForeignElement)
    assert doc.elements[1].tag == "text"


def test_malformed_markup():
    with pytest.raises(DocumentError):
        parse_document("<svg><rect></svg>")


def test_root_must_be_svg():
    with pytest.raises(DocumentError):
        parse_document("<html/>")


def test_invalid_viewbox():
    with pytest.raises(DocumentError):
        parse_document('<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 10"/>')
    with pytest.raises(DocumentError):
        parse_document('<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 ten 10"/>')
