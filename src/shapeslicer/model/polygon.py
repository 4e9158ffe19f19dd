"""
Polygon Geometry
================
Area / winding, containment tests and line intersections for polygons given
as point sequences (a `Polygon` or any sequence of `Point2D`).

Winding follows screen coordinates (y axis pointing down): a positive signed
area is reported as CLOCKWISE.
"""
from __future__ import annotations

from enum import StrEnum
from typing import List, Optional, Sequence, Tuple

from shapeslicer.config import EPSILON
from shapeslicer.model.geometry_primitives import Point2D, Polygon
from shapeslicer.model.geometry_utils import (
    bounding_box, is_on_line, solve_quadratic
)

Segment = Tuple[Point2D, Point2D]


class LoopDirection(StrEnum):
    CLOCKWISE = "clockwise"
    COUNTERCLOCKWISE = "counterclockwise"
    DEGENERATE = "degenerate"


def area(polygon: Sequence[Point2D], allow_negative: bool = False) -> float:
    """
    Shoelace area.

    Args:
        polygon: Vertices, closing edge implicit.
        allow_negative: Keep the sign, which encodes the winding order.

    Returns:
        The (signed) area, 0 for fewer than 3 vertices.
    """
    size = len(polygon)
    if size < 3:
        return 0.0

    total = 0.0
    for i in range(size):
        p = polygon[i]
        q = polygon[(i + 1) % size]
        total += (p.x - q.x) * (p.y + q.y)
    total /= 2

    return total if allow_negative else abs(total)


def loopwise(polygon: Sequence[Point2D]) -> LoopDirection:
    signed = area(polygon, allow_negative=True)
    if signed > 0:
        return LoopDirection.CLOCKWISE
    if signed < 0:
        return LoopDirection.COUNTERCLOCKWISE
    return LoopDirection.DEGENERATE


def convert_loopwise(polygon: Sequence[Point2D]) -> Polygon:
    """Copy of the polygon, reversed if needed so that it runs clockwise."""
    points = tuple(polygon)
    if loopwise(points) == LoopDirection.COUNTERCLOCKWISE:
        points = points[::-1]
    return Polygon(points)


def omit_same_points(points: Sequence[Point2D]) -> Tuple[Point2D, ...]:
    """
    Drop points equal to their successor, the last -> first pair included.
    """
    ret = list(points)
    i = 0
    while len(ret) > 1 and i < len(ret):
        if ret[i] == ret[(i + 1) % len(ret)]:
            del ret[i]
            # The predecessor now has a new successor
            i = max(i - 1, 0)
        else:
            i += 1
    return tuple(ret)


def segments_intersect(ab: Segment, cd: Segment) -> bool:
    """
    Strict crossing test between segments AB and CD.

    Touching endpoints and collinear / overlapping segments do not count.
    """
    (ax, ay), (bx, by) = ab
    (cx, cy), (dx, dy) = cd
    ta = (cx - dx) * (ay - cy) + (cy - dy) * (cx - ax)
    tb = (cx - dx) * (by - cy) + (cy - dy) * (cx - bx)
    tc = (ax - bx) * (cy - ay) + (ay - by) * (ax - cx)
    td = (ax - bx) * (dy - ay) + (ay - by) * (ax - dx)

    return tc * td < 0 and ta * tb < 0


def is_parallel(ab: Segment, cd: Segment) -> bool:
    return abs((ab[1] - ab[0]).cross(cd[1] - cd[0])) < EPSILON


def line_intersects_segment(line: Segment, segment: Segment) -> bool:
    """True if the segment endpoints lie strictly on opposite sides of the infinite line."""
    p0, p1 = line
    direction = p1 - p0
    c0 = direction.cross(segment[0] - p0)
    c1 = direction.cross(segment[1] - p0)
    return c0 * c1 < 0


def segment_intersects_line(segment: Segment, line: Segment) -> Optional[Point2D]:
    """
    Intersection of a segment with an infinite line.

    Args:
        segment: The finite segment AB.
        line: Two points on the infinite line.

    Returns:
        The crossing point, or None if the two are parallel or the crossing
        falls outside the segment. A segment endpoint lying on the line is
        returned as is.
    """
    a, b = segment
    c, d = line
    if is_parallel(segment, line):
        return None

    if is_on_line(a, line):
        return a
    if is_on_line(b, line):
        return b

    s1 = ((d.x - c.x) * (a.y - c.y) - (d.y - c.y) * (a.x - c.x)) / 2
    s2 = ((d.x - c.x) * (c.y - b.y) - (d.y - c.y) * (c.x - b.x)) / 2
    rate = s1 / (s1 + s2)

    if 0 < rate < 1:
        return Point2D(a.x + (b.x - a.x) * rate, a.y + (b.y - a.y) * rate)
    return None


def intersections(polygon: Sequence[Point2D], line: Segment) -> List[Point2D]:
    """Crossings of the line with every edge, in edge order."""
    ret = []
    size = len(polygon)
    for i in range(size):
        p = segment_intersects_line((polygon[i], polygon[(i + 1) % size]), line)
        if p is not None:
            ret.append(p)
    return ret


def _ray_end(polygon: Sequence[Point2D], point: Point2D) -> Point2D:
    """End of the rightward test ray, strictly beyond the polygon's bounding box."""
    box = bounding_box(polygon)
    return Point2D(max(box.max_x, point.x) + box.width + 1.0, point.y)


def point_in_polygon(polygon: Sequence[Point2D], point: Point2D) -> bool:
    """
    Ray casting containment test.

    A point equal to a vertex counts as inside. Other boundary points and a
    ray passing exactly through a vertex are not special-cased.
    """
    if len(polygon) < 3:
        return False
    if any(point == p for p in polygon):
        return True

    ray = (point, _ray_end(polygon, point))
    count = 0
    size = len(polygon)
    for i in range(size):
        p1 = polygon[i]
        p2 = polygon[(i + 1) % size]
        # Edges entirely left of the point cannot cross the ray
        if p1.x < point.x and p2.x < point.x:
            continue
        if segments_intersect(ray, (p1, p2)):
            count += 1

    return count % 2 == 1


def point_in_triangle(triangle: Sequence[Point2D], point: Point2D) -> bool:
    """Inclusive test: points on the boundary are inside."""
    a, b, c = triangle
    cross_abp = (b - a).cross(point - b)
    cross_bcp = (c - b).cross(point - c)
    cross_cap = (a - c).cross(point - a)

    return (
        (cross_abp >= 0 and cross_bcp >= 0 and cross_cap >= 0)
        or (cross_abp <= 0 and cross_bcp <= 0 and cross_cap <= 0)
    )


def line_bezier_intersections(
    p0: Point2D,
    p1: Point2D,
    p2: Point2D,
    line: Segment
) -> List[Point2D]:
    """
    Crossings of the quadratic Bezier curve (p0, p1, p2) with an infinite line.

    Substituting B(t) into the line equation gives a quadratic in t; only
    roots with 0 <= t <= 1 lie on the curve piece.
    """
    p, q = line
    vx = q.x - p.x
    vy = q.y - p.y
    a = p0.x - 2 * p1.x + p2.x
    b = 2 * (p1.x - p0.x)
    c = p0.x
    d = p0.y - 2 * p1.y + p2.y
    e = 2 * (p1.y - p0.y)
    f = p0.y

    roots = solve_quadratic(
        a * vy - vx * d,
        b * vy - vx * e,
        vy * c - vy * p.x - vx * f + vx * p.y
    )

    ret = []
    for t in roots:
        if 0 <= t <= 1:
            ret.append(Point2D(a * t * t + b * t + c, d * t * t + e * t + f))
    return ret


def point_in_curved_region(
    polygon: Sequence[Point2D],
    control_points: Sequence[Optional[Point2D]],
    point: Point2D
) -> bool:
    """
    Containment test for a region whose edges may be quadratic Bezier arcs.

    Args:
        polygon: Region vertices.
        control_points: Same length as `polygon`; `control_points[i]` is the
            control point of the edge ending at vertex i (the edge from vertex
            i-1), or None for a straight edge.
        point: The query point.

    Returns:
        True when the rightward ray from `point` crosses the boundary an odd
        number of times.
    """
    size = len(polygon)
    if size < 2:
        return False
    if len(control_points) != size:
        raise ValueError("control_points must have one entry per vertex.")

    ray_end = _ray_end(polygon, point)
    ray = (point, ray_end)

    count = 0
    for i in range(size):
        start = polygon[i]
        end = polygon[(i + 1) % size]
        control = control_points[(i + 1) % size]
        if control is None:
            if segments_intersect(ray, (start, end)):
                count += 1
        else:
            for crossing in line_bezier_intersections(start, control, end, ray):
                if crossing.x >= point.x:
                    count += 1

    return count % 2 == 1
