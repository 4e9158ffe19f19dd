import pytest

from shapeslicer.model.geometry_primitives import Point2D, Polygon
from shapeslicer.model.geometry_utils import bounding_box, centroid
from shapeslicer.model.polygon import (
    LoopDirection, area, convert_loopwise, intersections, is_parallel, line_bezier_intersections,
    line_intersects_segment, loopwise, omit_same_points, point_in_curved_region, point_in_polygon,
    point_in_triangle, segment_intersects_line, segments_intersect
)

SQUARE = Polygon.from_points([(0, 0), (10, 0), (10, 10), (0, 10)])
U_SHAPE = Polygon.from_points([(0, 0), (30, 0), (30, 30), (20, 30), (20, 10), (10, 10), (10, 30), (0, 30)])
VERTICAL = (Point2D(5, -5), Point2D(5, 15))


def test_area_and_winding():
    assert area(SQUARE) == pytest.approx(100.0)
    assert area(SQUARE, allow_negative=True) == pytest.approx(100.0)
    assert loopwise(SQUARE) == LoopDirection.CLOCKWISE

    reversed_square = SQUARE.reversed()
    assert area(reversed_square, allow_negative=True) == pytest.approx(-100.0)
    assert area(reversed_square) == pytest.approx(100.0)
    assert loopwise(reversed_square) == LoopDirection.COUNTERCLOCKWISE


def test_degenerate_winding():
    assert loopwise([Point2D(0, 0), Point2D(1, 1), Point2D(2, 2)]) == LoopDirection.DEGENERATE
    assert area([Point2D(0, 0), Point2D(1, 1)]) == 0.0


def test_convert_loopwise():
    converted = convert_loopwise(SQUARE.reversed())
    assert loopwise(converted) == LoopDirection.CLOCKWISE
    # Already clockwise polygons are kept in order
    assert convert_loopwise(SQUARE).points == SQUARE.points


def test_concave_area():
    assert area(U_SHAPE) == pytest.approx(700.0)


def test_omit_same_points_wraps_around():
    points = [Point2D(0, 0), Point2D(0, 0), Point2D(1, 0), Point2D(1, 1), Point2D(1e-9, 0)]
    assert omit_same_points(points) == (Point2D(0, 0), Point2D(1, 0), Point2D(1, 1))
    assert omit_same_points([Point2D(2, 2), Point2D(2, 2)]) == (Point2D(2, 2),)


def test_segments_intersect():
    a = (Point2D(0, 0), Point2D(10, 10))
    b = (Point2D(0, 10), Point2D(10, 0))
    assert segments_intersect(a, b)
    # Touching at an endpoint does not count
    assert not segments_intersect(a, (Point2D(10, 10), Point2D(20, 0)))
    # Neither do collinear overlaps
    assert not segments_intersect(a, (Point2D(5, 5), Point2D(15, 15)))
    assert not segments_intersect(a, (Point2D(20, 0), Point2D(30, 10)))


def test_parallel_and_line_side_tests():
    assert is_parallel((Point2D(0, 0), Point2D(1, 0)), (Point2D(0, 5), Point2D(7, 5)))
    assert line_intersects_segment(VERTICAL, (Point2D(0, 0), Point2D(10, 0)))
    assert not line_intersects_segment(VERTICAL, (Point2D(0, 0), Point2D(4, 0)))


def test_segment_intersects_line():
    assert segment_intersects_line((Point2D(0, 0), Point2D(10, 0)), VERTICAL) == Point2D(5, 0)
    # Endpoints on the line come back as they are
    endpoint = Point2D(5, 3)
    assert segment_intersects_line((endpoint, Point2D(10, 5)), VERTICAL) is endpoint
    assert segment_intersects_line((Point2D(0, 0), Point2D(4, 0)), VERTICAL) is None
    assert segment_intersects_line((Point2D(6, 0), Point2D(6, 5)), VERTICAL) is None


def test_intersections_in_edge_order():
    assert intersections(SQUARE, VERTICAL) == [Point2D(5, 0), Point2D(5, 10)]
    assert intersections(SQUARE, (Point2D(20, 0), Point2D(20, 1))) == []


def test_point_in_polygon_vertices_and_centroid():
    for vertex in SQUARE:
        assert point_in_polygon(SQUARE, vertex)
    assert point_in_polygon(SQUARE, centroid(SQUARE))
    # Close to the right edge
    assert point_in_polygon(SQUARE, Point2D(9.5, 5))


def test_point_far_outside_polygon():
    box = bounding_box(SQUARE)
    far = Point2D(box.max_x + box.diagonal + 1, box.max_y + box.diagonal + 1)
    assert not point_in_polygon(SQUARE, far)
    assert not point_in_polygon(SQUARE, Point2D(15, 5))
    assert not point_in_polygon(SQUARE, Point2D(-5, 5))


def test_point_in_concave_polygon():
    assert point_in_polygon(U_SHAPE, Point2D(5, 25))
    assert point_in_polygon(U_SHAPE, Point2D(25, 25))
    assert not point_in_polygon(U_SHAPE, Point2D(15, 25))
    assert point_in_polygon(U_SHAPE, Point2D(15, 5))


def test_point_in_triangle_is_inclusive():
    triangle = (Point2D(0, 0), Point2D(10, 0), Point2D(0, 10))
    assert point_in_triangle(triangle, Point2D(2, 2))
    assert point_in_triangle(triangle, Point2D(5, 0))
    assert point_in_triangle(triangle, Point2D(10, 0))
    assert not point_in_triangle(triangle, Point2D(6, 6))
    # Both windings
    assert point_in_triangle(triangle[::-1], Point2D(2, 2))


def test_line_bezier_intersections():
    hits = line_bezier_intersections(Point2D(0, 0), Point2D(10, 20), Point2D(20, 0), (Point2D(0, 5), Point2D(10, 5)))
    xs = sorted(p.x for p in hits)
    assert xs == pytest.approx([10 * (1 - 0.5 ** 0.5), 10 * (1 + 0.5 ** 0.5)])
    assert all(p.y == pytest.approx(5.0) for p in hits)

    assert line_bezier_intersections(Point2D(0, 0), Point2D(10, 20), Point2D(20, 0), (Point2D(0, 15), Point2D(1, 15))) == []


def test_point_in_curved_region():
    # Straight bottom edge (0,0)->(20,0), curved edge (20,0)->(0,0) bulging up to y = 10
    polygon = [Point2D(0, 0), Point2D(20, 0)]
    controls = [Point2D(10, 20), None]
    assert point_in_curved_region(polygon, controls, Point2D(10, 5))
    assert not point_in_curved_region(polygon, controls, Point2D(10, 15))
    assert not point_in_curved_region(polygon, controls, Point2D(1, 5))


def test_curved_region_with_straight_edges_matches_polygon():
    controls = [None] * len(U_SHAPE)
    for p in (Point2D(5, 25), Point2D(15, 25), Point2D(15, 5), Point2D(40, 5)):
        assert point_in_curved_region(U_SHAPE, controls, p) == point_in_polygon(U_SHAPE, p)


def test_curved_region_needs_one_control_per_vertex():
    with pytest.raises(ValueError):
        point_in_curved_region(SQUARE, [None], Point2D(1, 1))
