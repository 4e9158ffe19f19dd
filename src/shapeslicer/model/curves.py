"""
Curve Flattening
================
Approximates quadratic / cubic Bezier curves and elliptical arcs by polylines
with a fixed number of straight segments.

All samplers return both endpoints, i.e. `segment_count + 1` points.
"""
from __future__ import annotations

import logging
from math import atan2, sqrt, pi
from typing import Sequence, Tuple

import numpy as np

from shapeslicer.config import EPSILON, BEZIER_SPLIT_COUNT
from shapeslicer.model.exceptions import ArcGeometryError
from shapeslicer.model.geometry_primitives import (
    Point2D, Polyline, points_from_array, points_to_array
)

logger = logging.getLogger(__name__)


def approximate_bezier(
    control_points: Sequence[Point2D],
    segment_count: int = BEZIER_SPLIT_COUNT
) -> Polyline:
    """
    Flatten a Bezier curve with the closed-form Bernstein blend.

    Args:
        control_points: 3 points (quadratic) or 4 points (cubic).
        segment_count: Number of straight segments (>= 1). With 1 only the
            two end points are returned.

    Returns:
        Open polyline of `segment_count + 1` points sampled at evenly spaced t.
    """
    if segment_count < 1:
        raise ValueError(f"segment_count must be >= 1, got {segment_count}.")

    ctrl = points_to_array(control_points)
    t = np.linspace(0.0, 1.0, segment_count + 1)[:, np.newaxis]
    s = 1.0 - t

    match len(ctrl):
        case 3:
            weights = [s * s, 2.0 * s * t, t * t]
        case 4:
            weights = [s * s * s, 3.0 * s * s * t, 3.0 * s * t * t, t * t * t]
        case n:
            raise ValueError(f"Only quadratic (3) or cubic (4) control points are supported, got {n}.")

    samples = sum(w * ctrl[i] for i, w in enumerate(weights))
    return Polyline(points_from_array(samples))


def approximate_arc(
    rx: float,
    ry: float,
    start_angle: float,
    end_angle: float,
    center: Point2D,
    axis_rotation: float = 0.0,
    segment_count: int = BEZIER_SPLIT_COUNT
) -> Polyline:
    """
    Flatten an arc of the ellipse centred at `center`.

    The parametric ellipse (rx cos t, ry sin t) is sampled at evenly spaced
    angles from `start_angle` to `end_angle` (a negative range runs clockwise),
    every sample is rotated by `axis_rotation` about the origin and finally
    translated by `center`.

    Args:
        rx: Radius along the (unrotated) x axis.
        ry: Radius along the (unrotated) y axis.
        start_angle: Start parameter in radians.
        end_angle: End parameter in radians.
        center: Ellipse center.
        axis_rotation: Tilt of the ellipse x axis in radians.
        segment_count: Number of straight segments (>= 1).

    Returns:
        Open polyline of `segment_count + 1` points.
    """
    if segment_count < 1:
        raise ValueError(f"segment_count must be >= 1, got {segment_count}.")

    angles = np.linspace(start_angle, end_angle, segment_count + 1)
    pts = np.c_[rx * np.cos(angles), ry * np.sin(angles)]

    cos_r = np.cos(axis_rotation)
    sin_r = np.sin(axis_rotation)
    rotation = np.array([[cos_r, -sin_r], [sin_r, cos_r]])
    pts = pts @ rotation.T + np.array([center.x, center.y])

    return Polyline(points_from_array(pts))


def circle_centers(a: Point2D, b: Point2D, radius: float) -> Tuple[Point2D, Point2D]:
    """
    Centers of the two circles of the given radius passing through a and b.

    Raises:
        ArcGeometryError: If the points are further apart than the diameter.
    """
    u1 = (a.x + b.x) / 2
    u2 = (a.x - b.x) / 2
    v1 = (a.y + b.y) / 2
    v2 = (a.y - b.y) / 2
    half_distance = sqrt(u2 * u2 + v2 * v2)
    if half_distance == 0.0:
        raise ArcGeometryError("Arc endpoints coincide; the center is undefined.")

    ratio = radius / half_distance
    if ratio < 1.0 - EPSILON:
        raise ArcGeometryError(
            f"Arc radius {radius:.6g} is too small for endpoints {2 * half_distance:.6g} apart."
        )
    t = sqrt(max(ratio * ratio - 1.0, 0.0))

    return (
        Point2D(u1 + v2 * t, v1 - u2 * t),
        Point2D(u1 - v2 * t, v1 + u2 * t),
    )


def ellipse_centers(
    a: Point2D,
    b: Point2D,
    rx: float,
    ry: float,
) -> Tuple[Point2D, Point2D]:
    """
    Centers of the two axis-aligned ellipses with radii (rx, ry) through a and b.

    Scaling x by 1/rx and y by 1/ry turns the problem into the unit-circle case.
    """
    scaled = circle_centers(Point2D(a.x / rx, a.y / ry), Point2D(b.x / rx, b.y / ry), 1.0)
    return tuple(Point2D(c.x * rx, c.y * ry) for c in scaled)


def _angle_on_ellipse(p: Point2D, center: Point2D, rx: float, ry: float) -> float:
    """Parameter t in [0, 2*pi) of an (unrotated) ellipse point."""
    return atan2((p.y - center.y) / ry, (p.x - center.x) / rx) % (2 * pi)


def approximate_arc_with_endpoints(
    rx: float,
    ry: float,
    start_point: Point2D,
    end_point: Point2D,
    large_arc_flag: bool,
    sweep_flag: bool,
    axis_rotation: float = 0.0,
    segment_count: int = BEZIER_SPLIT_COUNT
) -> Polyline:
    """
    Flatten an SVG-style elliptical arc given by its two endpoints.

    Args:
        rx: Ellipse radius along its own x axis (sign ignored).
        ry: Ellipse radius along its own y axis (sign ignored).
        start_point: Where the arc starts.
        end_point: Where the arc ends.
        large_arc_flag: Take the arc spanning more than 180 degrees.
        sweep_flag: Run in the positive-angle direction.
        axis_rotation: Tilt of the ellipse x axis in radians.
        segment_count: Number of straight segments (>= 1).

    Returns:
        Open polyline from `start_point` to `end_point`.

    Raises:
        ArcGeometryError: If no ellipse with these radii passes through both points.
    """
    rx = abs(rx)
    ry = abs(ry)
    if rx < EPSILON or ry < EPSILON or start_point == end_point:
        # Zero radius or zero length: the arc degrades to a straight segment
        logger.debug(f"Degenerate arc from {start_point} to {end_point}, using a line.")
        return Polyline((start_point, end_point))

    # 1. Work in the frame where the ellipse axes are aligned with x / y
    local_start = start_point.rotate(-axis_rotation)
    local_end = end_point.rotate(-axis_rotation)

    # 2. Both candidate centers
    candidates = ellipse_centers(local_start, local_end, rx, ry)

    # 3. Winding of (start, end, center) picks the candidate
    winding = (local_end - local_start).cross(candidates[0] - local_start)
    if large_arc_flag == sweep_flag:
        local_center = candidates[0] if winding < 0 else candidates[1]
    else:
        local_center = candidates[0] if winding > 0 else candidates[1]

    # 4. Angles on the chosen ellipse, unwrapped along the sweep direction
    r1 = _angle_on_ellipse(local_start, local_center, rx, ry)
    r2 = _angle_on_ellipse(local_end, local_center, rx, ry)
    if sweep_flag:
        start_angle = r1 - 2 * pi if r1 > r2 else r1
        end_angle = r2
    else:
        start_angle = r1
        end_angle = r2 if r1 > r2 else r2 - 2 * pi

    # 5. Sample, rotating the local center back into place
    return approximate_arc(
        rx, ry,
        start_angle,
        end_angle,
        local_center.rotate(axis_rotation),
        axis_rotation,
        segment_count
    )
