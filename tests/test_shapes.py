import logging

import pytest

from shapeslicer.model.geometry_primitives import Point2D
from shapeslicer.model.polygon import LoopDirection, area, loopwise
from shapeslicer.model.shapes import (
    ShapeDescriptor, ShapeKind, apply_transform_chain, extract_shape, extract_shapes,
    flatten_shape, parse_transform_chain, rect_polyline
)
from shapeslicer.model.styles import StyleAttributes, parse_style, serialize_style


# ------------------------------------------------------------------------------
# Styles
# ------------------------------------------------------------------------------
def test_parse_style_string():
    style = parse_style("fill:blue; stroke:none; stroke-width:3; foo:bar")
    assert style.fill is True
    assert style.fill_color == "blue"
    assert style.stroke is False
    assert style.stroke_color is None
    assert style.line_width == 3.0
    assert style.line_cap is None


def test_parse_style_mapping():
    style = parse_style({"fill": "none", "stroke-dasharray": "5, 2", "Stroke-Linecap": "round"})
    assert style.fill is False
    assert style.line_dash == (5.0, 2.0)
    assert style.line_cap == "round"


def test_unparsable_style_values_are_skipped():
    style = parse_style("stroke-width:abc;fill-opacity:0.5")
    assert style.line_width is None
    assert style.fill_opacity == 0.5


def test_style_merge_over_defaults():
    style = parse_style("fill:blue").merged_over(StyleAttributes.default())
    assert style.fill_color == "blue"
    assert style.stroke_color == "red"
    assert style.line_width == 2.0


def test_serialize_style_emits_set_fields_only():
    assert serialize_style(parse_style("fill:blue;stroke-width:3")) == "fill:blue;stroke-width:3;"
    assert serialize_style(StyleAttributes()) == ""


def test_style_serialization_parses_back():
    default = StyleAttributes.default()
    text = serialize_style(default)
    assert "stroke-dasharray:none;" in text
    assert parse_style(text) == default


# ------------------------------------------------------------------------------
# Primitives
# ------------------------------------------------------------------------------
def test_flatten_rect_is_clockwise_square():
    polygon = flatten_shape(ShapeDescriptor(ShapeKind.RECT, {"x": "0", "y": "0", "width": "10", "height": "10"}))
    assert len(polygon) == 4
    assert loopwise(polygon) == LoopDirection.CLOCKWISE
    assert area(polygon) == pytest.approx(100.0)


def test_rect_points():
    shape = extract_shape(ShapeDescriptor("rect", {"x": "1", "y": "2", "width": "3", "height": "4"}))
    assert shape.kind == ShapeKind.RECT
    assert shape.closed
    assert shape.polyline.points == (Point2D(1, 2), Point2D(4, 2), Point2D(4, 6), Point2D(1, 6))


def test_circle_points():
    shape = extract_shape(ShapeDescriptor(ShapeKind.CIRCLE, {"cx": "5", "cy": "5", "r": "10"}))
    assert len(shape.polyline) == 21
    for p in shape.polyline:
        assert abs(p.distance_to(Point2D(5, 5)) - 10) < 1e-6

    polygon = flatten_shape(ShapeDescriptor(ShapeKind.CIRCLE, {"cx": "5", "cy": "5", "r": "10"}))
    # The repeated closing point is dropped
    assert len(polygon) == 20
    assert loopwise(polygon) == LoopDirection.CLOCKWISE


def test_ellipse_points():
    shape = extract_shape(ShapeDescriptor(ShapeKind.ELLIPSE, {"cx": "0", "cy": "0", "rx": "20", "ry": "5"}),
                          ellipse_segments=4)
    assert shape.polyline.points == (
        Point2D(20, 0), Point2D(0, 5), Point2D(-20, 0), Point2D(0, -5), Point2D(20, 0)
    )


def test_counter_clockwise_path_is_normalized():
    polygon = flatten_shape(ShapeDescriptor(ShapeKind.PATH, {"d": "M0,0 L0,10 L10,10 L10,0 Z"}))
    assert loopwise(polygon) == LoopDirection.CLOCKWISE
    assert area(polygon) == pytest.approx(100.0)


def test_invalid_number_defaults_to_zero(caplog):
    with caplog.at_level(logging.WARNING, logger="shapeslicer"):
        shape = extract_shape(ShapeDescriptor(ShapeKind.RECT, {"x": "abc", "width": "2", "height": "2"}))
    assert shape.polyline[0] == Point2D(0, 0)
    assert "not a number" in caplog.text


def test_style_source_fallbacks():
    attrs = {"x": "0", "y": "0", "width": "1", "height": "1", "fill": "blue"}
    assert extract_shape(ShapeDescriptor(ShapeKind.RECT, attrs)).style.fill_color == "blue"

    attrs_with_style = dict(attrs, style="fill:yellow")
    assert extract_shape(ShapeDescriptor(ShapeKind.RECT, attrs_with_style)).style.fill_color == "yellow"

    explicit = ShapeDescriptor(ShapeKind.RECT, attrs_with_style, style={"fill": "black"})
    assert extract_shape(explicit).style.fill_color == "black"


def test_extract_shapes_keeps_order():
    shapes = extract_shapes([
        ShapeDescriptor(ShapeKind.CIRCLE, {"r": "1"}),
        ShapeDescriptor(ShapeKind.PATH, {"d": "M0,0 L1,0 L1,1 z"}),
    ])
    assert [s.kind for s in shapes] == [ShapeKind.CIRCLE, ShapeKind.PATH]


# ------------------------------------------------------------------------------
# Transforms
# ------------------------------------------------------------------------------
def test_parse_transform_chain():
    chain = parse_transform_chain("translate(10, 5) rotate(45 1 1),scale(2)")
    assert chain == [("translate", [10.0, 5.0]), ("rotate", [45.0, 1.0, 1.0]), ("scale", [2.0])]


@pytest.mark.parametrize("text, point, expected", [
    ("translate(10,5)", (0, 0), (10, 5)),
    ("translate(10)", (1, 1), (11, 1)),
    ("scale(2)", (1, 3), (2, 6)),
    ("scale(2, 3)", (1, 1), (2, 3)),
    ("rotate(90)", (1, 0), (0, 1)),
    ("rotate(90, 1, 1)", (2, 1), (1, 2)),
    ("skewX(45)", (0, 1), (1, 1)),
    ("skewY(45)", (1, 0), (1, 1)),
    ("matrix(1, 0, 0, 1, 5, 6)", (1, 1), (6, 7)),
    ("matrix(0 1 -1 0 0 0)", (1, 0), (0, 1)),
])
def test_single_transforms(text, point, expected):
    (result,) = apply_transform_chain(text, [Point2D(*point)])
    assert result == Point2D(*expected)


def test_transforms_apply_left_to_right():
    (result,) = apply_transform_chain("translate(10,0) scale(2)", [Point2D(1, 0)])
    assert result == Point2D(22, 0)


def test_unknown_transforms_are_ignored():
    (result,) = apply_transform_chain("wobble(3) translate(1,0) rotate(1,2)", [Point2D(1, 1)])
    assert result == Point2D(2, 1)


def test_transform_attribute_is_applied():
    shape = extract_shape(ShapeDescriptor(ShapeKind.RECT, {
        "width": "10", "height": "10", "transform": "translate(5,5)"
    }))
    assert shape.polyline[0] == Point2D(5, 5)
    assert shape.polyline.closed


def test_rect_polyline_is_closed():
    assert rect_polyline(0, 0, 1, 1).closed
