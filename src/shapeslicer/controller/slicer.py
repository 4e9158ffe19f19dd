"""
Polygon Slicing
===============
Cuts a polygon along an infinite line into independent pieces.

Every single cut splits one polygon into exactly two. A concave polygon that
the line crosses more than twice is resolved by cutting the pieces again,
driven by an explicit worklist instead of native recursion.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

from shapeslicer.config import EPSILON
from shapeslicer.model.geometry_primitives import Point2D, PointLike, Polygon, SliceLine
from shapeslicer.model.geometry_utils import is_on_line, is_same_segment, side_of_line
from shapeslicer.model.polygon import area, omit_same_points, segment_intersects_line

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Crossing:
    """
    One place where the boundary passes through the line.

    `ends` holds (sequence index, point) pairs: a single entry for a crossing
    inside an edge or at a lone vertex, the two end vertices for a run of
    consecutive vertices lying on the line.
    """
    ends: Tuple[Tuple[int, Point2D], ...]
    # True when the point was inserted into an edge
    inserted: bool = False


def _on_line_runs(polygon: Polygon, line: SliceLine) -> List[List[int]]:
    """Maximal runs of consecutive vertex indices lying on the line, in ring order."""
    size = len(polygon)
    on_line = [is_on_line(p, line) for p in polygon]
    if all(on_line):
        return []
    # Start right after a vertex off the line so that no run wraps around
    start = on_line.index(False) + 1

    runs: List[List[int]] = []
    current: List[int] = []
    for step in range(size):
        i = (start + step) % size
        if on_line[i]:
            current.append(i)
        elif current:
            runs.append(current)
            current = []
    return runs


def _insert_crossings(
    polygon: Polygon,
    line: SliceLine
) -> Tuple[List[Point2D], List[_Crossing], List[Tuple[int, Point2D]]]:
    """
    Walk the edges, inserting every edge/line crossing into the vertex sequence.

    Vertices on the line are grouped into runs. A run counts as one crossing
    when the boundary passes to the other side of the line there, and as none
    when it only touches the line (both outer neighbours on the same side).

    Returns:
        The vertex sequence with insertions, the crossings found and the
        (sequence index, point) pairs of every vertex in a touching run.
    """
    points: List[Point2D] = []
    crossings: List[_Crossing] = []
    grazes: List[Tuple[int, Point2D]] = []
    vertex_position: List[int] = []
    size = len(polygon)

    for i in range(size):
        a = polygon[i]
        b = polygon[(i + 1) % size]

        vertex_position.append(len(points))
        points.append(a)

        p = segment_intersects_line((a, b), line)
        # Endpoint hits are handled by the runs below
        if p is not None and p != a and p != b:
            crossings.append(_Crossing(((len(points), p),), inserted=True))
            points.append(p)

    for run in _on_line_runs(polygon, line):
        before = polygon[run[0] - 1]
        after = polygon[(run[-1] + 1) % size]
        if side_of_line(before, line) == side_of_line(after, line):
            grazes.extend((vertex_position[i], polygon[i]) for i in run)
            continue
        ends = {run[0], run[-1]}
        crossings.append(_Crossing(tuple((vertex_position[i], polygon[i]) for i in sorted(ends))))

    return points, crossings, grazes


def _select_pair(
    polygon: Polygon,
    crossings: List[_Crossing],
    grazes: List[Tuple[int, Point2D]],
    line: SliceLine
) -> Optional[Tuple[Tuple[int, Point2D], Tuple[int, Point2D]]]:
    """
    Sort crossings along the line and return the first entry/exit pair whose
    connecting segment is not an existing edge.

    A run enters the pair through the end vertex facing its partner. When the
    segment passes over vertices that merely touch the line, it is shortened
    to end at the nearest of them; the rest is left to the next cut.
    """
    def key(end: Tuple[int, Point2D]) -> float:
        return line.project(end[1])

    ordered = sorted(crossings, key=lambda c: min(key(e) for e in c.ends))
    edges = list(polygon.edges())

    for k in range(0, len(ordered) - 1, 2):
        first = max(ordered[k].ends, key=key)
        second = min(ordered[k + 1].ends, key=key)
        low, high = key(first), key(second)
        between = [g for g in grazes if low + EPSILON < key(g) < high - EPSILON]
        if between:
            second = min(between, key=key)

        section = (first[1], second[1])
        if first[1] == second[1]:
            continue
        if any(is_same_segment(section, edge) for edge in edges):
            continue
        return first, second
    return None


def _finish(points: Sequence[Point2D]) -> Optional[Polygon]:
    """Clean up a candidate piece; None if it is degenerate."""
    cleaned = omit_same_points(points)
    if len(cleaned) < 3 or area(cleaned) < EPSILON * EPSILON:
        return None
    return Polygon(cleaned)


def slice_once(polygon: Polygon, line: SliceLine) -> List[Polygon]:
    """
    Cut a polygon at most once.

    Args:
        polygon: The polygon to cut. Never modified.
        line: The cutting line.

    Returns:
        Two new polygons, or `[polygon]` when there is no valid cut (no
        crossing, an odd number of crossings, or only edge-coincident pairs).
    """
    points, crossings, grazes = _insert_crossings(polygon, line)

    if not crossings:
        return [polygon]
    if len(crossings) % 2 != 0:
        logger.debug(f"Odd number of crossings ({len(crossings)}), not splitting.")
        return [polygon]

    pair = _select_pair(polygon, crossings, grazes, line)
    if pair is None:
        logger.debug("No crossing pair off the existing edges, not splitting.")
        return [polygon]

    # Crossings of the unused pairs are removed again; later cuts handle them
    keep = {pair[0][0], pair[1][0]}
    dropped = {c.ends[0][0] for c in crossings if c.inserted and c.ends[0][0] not in keep}
    sequence = []
    cut_positions = []
    for i, p in enumerate(points):
        if i in dropped:
            continue
        if i in keep:
            cut_positions.append(len(sequence))
        sequence.append(p)

    low, high = cut_positions
    pieces = [
        _finish(sequence[:low + 1] + sequence[high:]),
        _finish(sequence[low:high + 1]),
    ]
    pieces = [p for p in pieces if p is not None]
    if len(pieces) < 2:
        logger.debug("Cut produced a degenerate piece, not splitting.")
        return [polygon]
    return pieces


def slice_polygon(
    polygon: Union[Polygon, Sequence[PointLike]],
    p0: PointLike,
    p1: PointLike,
    max_depth: Optional[int] = None
) -> List[Polygon]:
    """
    Cut a polygon along the infinite line through p0 and p1 into all of its pieces.

    Args:
        polygon: Polygon (or points) to cut; consecutive duplicates are removed.
        p0: A point on the cutting line.
        p1: Another point on the cutting line.
        max_depth: Limit on successive cuts along one branch. Defaults to the
            polygon's edge count.

    Returns:
        The pieces; `[polygon]` if the line does not split it.
    """
    if not isinstance(polygon, Polygon):
        polygon = Polygon.from_points(polygon)
    line = SliceLine.through(p0, p1)
    if line.is_degenerate:
        logger.warning("Slice line endpoints coincide, nothing to cut.")
        return [polygon]

    limit = max_depth if max_depth is not None else len(polygon)
    results: List[Polygon] = []
    worklist: List[Tuple[Polygon, int]] = [(polygon, 0)]

    while worklist:
        current, depth = worklist.pop()
        pieces = slice_once(current, line)
        if len(pieces) == 1:
            results.append(current)
            continue
        if depth >= limit:
            logger.warning(f"Slice depth limit {limit} reached, keeping piece with {len(current)} vertices whole.")
            results.append(current)
            continue
        worklist.extend((piece, depth + 1) for piece in reversed(pieces))

    logger.debug(f"Slice produced {len(results)} piece(s).")
    return results
