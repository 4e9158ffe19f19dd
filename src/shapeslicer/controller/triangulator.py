"""
Triangulation
=============
Decomposes a simple polygon into triangles with a farthest-vertex-first ear
heuristic.

The working vertex list is an index arena: the coordinates stay in one numpy
array and removed ear tips are only cleared from the `alive` mask, so a vertex
is always identified by its index and never by its (tolerant) value.
"""
from __future__ import annotations

import logging
from typing import List, Sequence, Union, TYPE_CHECKING

import numpy as np

from shapeslicer.config import EPSILON
from shapeslicer.model.exceptions import InvalidPolygonError
from shapeslicer.model.geometry_primitives import Point2D, PointLike, Polygon, Triangle
from shapeslicer.model.polygon import convert_loopwise, point_in_triangle

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


def _point(arena: npt.NDArray[np.float64], index: int) -> Point2D:
    return Point2D(float(arena[index, 0]), float(arena[index, 1]))


def _turn(arena: npt.NDArray[np.float64], order: npt.NDArray[np.int_], pos: int) -> float:
    """Cross product of the two edge vectors leaving the vertex at `pos`."""
    m = len(order)
    tip = arena[order[pos]]
    nxt = arena[order[(pos + 1) % m]]
    prv = arena[order[pos - 1]]
    a = nxt - tip
    b = prv - tip
    return float(a[0] * b[1] - a[1] * b[0])


def _is_ear(arena: npt.NDArray[np.float64], order: npt.NDArray[np.int_], pos: int) -> bool:
    """No other live vertex lies inside or on the boundary of the candidate triangle."""
    m = len(order)
    corners = (order[pos], order[(pos + 1) % m], order[pos - 1])
    triangle = [_point(arena, i) for i in corners]
    for index in order:
        if index in corners:
            continue
        if point_in_triangle(triangle, _point(arena, index)):
            return False
    return True


def _find_ear(arena: npt.NDArray[np.float64], order: npt.NDArray[np.int_]) -> int:
    """
    Position (in `order`) of the next ear tip.

    The farthest vertex from the origin is tried first. If its triangle holds
    another vertex, the remaining vertices are scanned forward for one turning
    the same way that forms an empty triangle.

    Raises:
        InvalidPolygonError: A full scan found no ear.
    """
    m = len(order)
    distances = np.hypot(arena[order, 0], arena[order, 1])
    start = int(np.argmax(distances))
    if _is_ear(arena, order, start):
        return start

    sign = _turn(arena, order, start)
    for step in range(1, m):
        pos = (start + step) % m
        if _turn(arena, order, pos) * sign > 0 and _is_ear(arena, order, pos):
            return pos

    raise InvalidPolygonError(f"No ear found among {m} remaining vertices; the polygon is not simple.")


def triangulate(polygon: Union[Polygon, Sequence[PointLike]]) -> List[Triangle]:
    """
    Split a simple polygon into triangles.

    Args:
        polygon: Vertices in either winding; normalized to clockwise first.

    Returns:
        Triangles whose areas sum to the polygon area. Collinear ear tips are
        removed without producing a triangle.

    Raises:
        InvalidPolygonError: No valid ear exists (e.g. a self-intersecting or
            fully collinear input).
    """
    if not isinstance(polygon, Polygon):
        polygon = Polygon.from_points(polygon)
    polygon = convert_loopwise(polygon)

    arena = polygon.to_array()
    alive = np.ones(len(arena), dtype=bool)
    triangles: List[Triangle] = []

    while np.count_nonzero(alive) >= 3:
        order = np.flatnonzero(alive)
        pos = _find_ear(arena, order)
        m = len(order)
        tip, nxt, prv = order[pos], order[(pos + 1) % m], order[pos - 1]

        if abs(_turn(arena, order, pos)) >= 2 * EPSILON * EPSILON:
            triangles.append(Triangle(_point(arena, tip), _point(arena, nxt), _point(arena, prv)))
        else:
            logger.debug(f"Dropping collinear vertex {_point(arena, tip)}.")
        alive[tip] = False

    logger.debug(f"Triangulated {len(polygon)} vertices into {len(triangles)} triangles.")
    return triangles
