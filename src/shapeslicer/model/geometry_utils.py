from __future__ import annotations

from typing import Sequence, Tuple, TYPE_CHECKING

from math import sqrt, atan2, pi
import numpy as np

from shapeslicer.config import EPSILON
from shapeslicer.model.geometry_primitives import Point2D, BoundingBox, points_to_array

if TYPE_CHECKING:
    from numpy import typing as npt


def solve_quadratic(a: float, b: float, c: float) -> list[float]:
    """
    Real roots of a * x^2 + b * x + c = 0.

    Args:
        a: Quadratic coefficient. If |a| < EPSILON the equation is solved as linear.
        b: Linear coefficient.
        c: Constant term.

    Returns:
        A list with 0, 1 or 2 roots. Complex roots are reported as no solution.
    """
    if abs(a) < EPSILON:
        return [] if b == 0 else [-c / b]

    disc = b * b - 4.0 * a * c
    if disc < 0:
        return []

    ia = 0.5 / a
    if disc == 0:
        return [-b * ia]

    sqrt_disc = sqrt(disc)
    return [(-b + sqrt_disc) * ia, (-b - sqrt_disc) * ia]


def bounding_box(points: Sequence[Point2D]) -> BoundingBox:
    """Axis-aligned bounding box of a non-empty point set."""
    arr = points_to_array(points)
    if arr.size == 0:
        raise ValueError("Bounding box of an empty point set is undefined.")
    mins = arr.min(axis=0)
    maxs = arr.max(axis=0)
    return BoundingBox(
        x=float(mins[0]),
        y=float(mins[1]),
        width=float(maxs[0] - mins[0]),
        height=float(maxs[1] - mins[1])
    )


def bounding_box_center(points: Sequence[Point2D]) -> Point2D:
    return bounding_box(points).center


def centroid(points: Sequence[Point2D]) -> Point2D:
    """Arithmetic mean of the vertices (not the area-weighted centroid)."""
    arr = points_to_array(points)
    if arr.size == 0:
        raise ValueError("Centroid of an empty point set is undefined.")
    mean = arr.mean(axis=0)
    return Point2D(float(mean[0]), float(mean[1]))


def pedal_point(point: Point2D, line: Tuple[Point2D, Point2D]) -> Point2D:
    """
    Foot of the perpendicular dropped from `point` onto the infinite line AB.

    If A == B the line is degenerate and A itself is returned.
    """
    a, b = line
    ab = b - a
    denom = ab.dot(ab)
    if denom == 0.0:
        return a
    rate = ab.dot(point - a) / denom
    return a + ab * rate


def is_on_line(point: Point2D, line: Tuple[Point2D, Point2D]) -> bool:
    """True if `point` lies on the infinite line (within EPSILON)."""
    return point == pedal_point(point, line)


def is_same_segment(ab: Tuple[Point2D, Point2D], cd: Tuple[Point2D, Point2D]) -> bool:
    """Segments with the same endpoints, in either orientation."""
    return (ab[0] == cd[0] and ab[1] == cd[1]) or (ab[1] == cd[0] and ab[0] == cd[1])


def radian_between(a: Point2D, b: Point2D) -> float:
    """Angle of the vector b -> a, normalized to [0, 2*pi)."""
    return (atan2(a.y - b.y, a.x - b.x) + 2 * pi) % (2 * pi)


def side_of_line(point: Point2D, line: Tuple[Point2D, Point2D]) -> int:
    """
    Which side of the directed line p0 -> p1 the point is on.

    Returns:
        1 or -1 for the two half-planes, 0 when the point lies on the line.
    """
    if is_on_line(point, line):
        return 0
    p0, p1 = line
    return 1 if (p1 - p0).cross(point - p0) > 0 else -1


def transform_array(
    arr: npt.NDArray[np.float64],
    matrix: npt.NDArray[np.float64]
) -> npt.NDArray[np.float64]:
    """
    Apply a 3x3 homogeneous affine matrix to an (N, 2) array of points.

    Args:
        arr: Points as rows (x, y).
        matrix: [[a, c, e], [b, d, f], [0, 0, 1]].

    Returns:
        Transformed (N, 2) array.
    """
    if arr.size == 0:
        return arr
    homogeneous = np.c_[arr, np.ones(len(arr))]
    return (homogeneous @ matrix.T)[:, :2]
