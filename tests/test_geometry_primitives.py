import math

import numpy as np
import pytest

from shapeslicer.model.exceptions import GeometryError, ZeroVectorError
from shapeslicer.model.geometry_primitives import (
    Point2D, Polygon, Polyline, SliceLine, Triangle, as_point, points_from_array, points_to_array
)
from shapeslicer.model.geometry_utils import (
    bounding_box, bounding_box_center, centroid, is_on_line, is_same_segment, pedal_point,
    radian_between, side_of_line, solve_quadratic, transform_array
)
from shapeslicer.utils import deg2rad, format_number


def test_point_equality_is_tolerant():
    assert Point2D(1.0, 2.0) == Point2D(1.0 + 1e-7, 2.0 - 1e-7)
    assert Point2D(1.0, 2.0) != Point2D(1.0 + 1e-5, 2.0)


def test_point_arithmetic():
    a = Point2D(1, 2)
    b = Point2D(3, -1)
    assert a + b == Point2D(4, 1)
    assert a - b == Point2D(-2, 3)
    assert a * 2 == Point2D(2, 4)
    assert 2 * a == Point2D(2, 4)
    assert a / 2 == Point2D(0.5, 1)
    assert -a == Point2D(-1, -2)
    assert a.dot(b) == pytest.approx(1.0)
    assert a.cross(b) == pytest.approx(-7.0)
    assert Point2D(3, 4).magnitude == pytest.approx(5.0)
    assert a.midpoint(b) == Point2D(2, 0.5)
    assert tuple(a) == (1, 2)


def test_division_by_zero_raises():
    with pytest.raises(ZeroDivisionError):
        Point2D(1, 1) / 0


def test_unit_vector():
    u = Point2D(3, 4).unit()
    assert u == Point2D(0.6, 0.8)
    assert u.magnitude == pytest.approx(1.0)


def test_unit_of_zero_vector_raises():
    with pytest.raises(ZeroVectorError):
        Point2D(0, 0).unit()
    # Callers may catch it as a plain division or geometry failure
    with pytest.raises(ZeroDivisionError):
        Point2D(1e-9, 0).unit()
    with pytest.raises(GeometryError):
        Point2D(0, 0).unit()


def test_reflect_and_rotate():
    assert Point2D(1, 1).reflect_about(Point2D(2, 2)) == Point2D(3, 3)
    assert Point2D(1, 0).rotate(math.pi / 2) == Point2D(0, 1)
    assert Point2D(2, 1).rotate(math.pi / 2, Point2D(1, 1)) == Point2D(1, 2)


def test_as_point_and_arrays():
    assert as_point((1, 2)) == Point2D(1, 2)
    p = Point2D(5, 6)
    assert as_point(p) is p

    arr = points_to_array([Point2D(0, 1), Point2D(2, 3)])
    assert arr.shape == (2, 2)
    assert points_from_array(arr) == (Point2D(0, 1), Point2D(2, 3))
    assert points_to_array([]).shape == (0, 2)


def test_polyline_closed_flag_is_explicit():
    line = Polyline([Point2D(0, 0), Point2D(1, 0), Point2D(0, 0)])
    assert not line.closed
    assert len(line) == 3


def test_polygon_from_points_removes_duplicates():
    polygon = Polygon.from_points([(0, 0), (0, 0), (10, 0), (10, 10), (0, 0)])
    assert len(polygon) == 3
    assert len(list(polygon.edges())) == 3
    assert polygon.reversed()[0] == Point2D(10, 10)


def test_triangle_must_not_be_degenerate():
    t = Triangle(Point2D(0, 0), Point2D(4, 0), Point2D(0, 3))
    assert t.area == pytest.approx(6.0)
    assert t.signed_area > 0
    with pytest.raises(ValueError):
        Triangle(Point2D(0, 0), Point2D(1, 1), Point2D(2, 2))


def test_slice_line():
    line = SliceLine.through((0, 0), (0, 5))
    assert line.direction == Point2D(0, 1)
    assert line.project(Point2D(3, 7)) == pytest.approx(7.0)
    assert SliceLine.through((1, 1), (1, 1)).is_degenerate


def test_solve_quadratic():
    assert sorted(solve_quadratic(1, -3, 2)) == pytest.approx([1.0, 2.0])
    assert solve_quadratic(1, 2, 1) == pytest.approx([-1.0])
    assert solve_quadratic(1, 0, 1) == []
    # Linear when the quadratic term vanishes
    assert solve_quadratic(0, 2, -4) == pytest.approx([2.0])
    assert solve_quadratic(0, 0, 1) == []


def test_bounding_box_and_centroids():
    points = [Point2D(0, 0), Point2D(10, 0), Point2D(10, 4), Point2D(0, 4), Point2D(2, 2)]
    box = bounding_box(points)
    assert (box.x, box.y, box.width, box.height) == (0, 0, 10, 4)
    assert box.max_x == 10
    assert box.diagonal == pytest.approx(math.hypot(10, 4))
    assert bounding_box_center(points) == Point2D(5, 2)
    # Vertex mean, not the area centroid
    assert centroid(points) == Point2D(4.4, 2)
    with pytest.raises(ValueError):
        bounding_box([])


def test_line_predicates():
    line = (Point2D(0, 0), Point2D(10, 10))
    assert pedal_point(Point2D(10, 0), line) == Point2D(5, 5)
    assert is_on_line(Point2D(-3, -3), line)
    assert not is_on_line(Point2D(1, 0), line)
    assert side_of_line(Point2D(0, 5), line) == 1
    assert side_of_line(Point2D(5, 0), line) == -1
    assert side_of_line(Point2D(7, 7), line) == 0


def test_is_same_segment_ignores_orientation():
    a, b = Point2D(0, 0), Point2D(1, 2)
    assert is_same_segment((a, b), (b, a))
    assert not is_same_segment((a, b), (a, Point2D(2, 1)))


def test_radian_between():
    assert radian_between(Point2D(1, 0), Point2D(0, 0)) == pytest.approx(0.0)
    assert radian_between(Point2D(0, -1), Point2D(0, 0)) == pytest.approx(1.5 * math.pi)


def test_transform_array_applies_homogeneous_matrix():
    matrix = np.array([[1.0, 0.0, 5.0], [0.0, 2.0, 1.0], [0.0, 0.0, 1.0]])
    out = transform_array(np.array([[1.0, 1.0], [0.0, 3.0]]), matrix)
    assert np.allclose(out, [[6.0, 3.0], [5.0, 7.0]])


def test_utils():
    assert deg2rad(180) == pytest.approx(math.pi)
    assert format_number(10.0) == "10"
    assert format_number(2.5) == "2.5"
    assert format_number(-0.0) == "0"
