"""
Fragments
=========
A fragment is one independent piece of a shape: its clockwise polygon, its
triangles (the pieces a physics body is assembled from) and its style.

Why is this file needed?
------------------------
1. Construction: `build_fragment` normalizes raw points and triangulates them
   once, when the fragment is created.
2. Slashing: `slash_fragment` cuts a fragment and rebuilds every piece with the
   parent's style.
3. Impulse: `slash_impulse` computes the push a cut gives to a piece. Applying
   it is left to the physics collaborator.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from shapeslicer.config import (
    SLASH_ALONG_BASE, SLASH_ALONG_SPAN, SLASH_AWAY_BASE, SLASH_AWAY_SPAN,
    SLASH_MOVEMENT_POWER
)
from shapeslicer.controller.slicer import slice_polygon
from shapeslicer.controller.triangulator import triangulate
from shapeslicer.model.exceptions import ZeroVectorError
from shapeslicer.model.geometry_primitives import Point2D, PointLike, Polygon, SliceLine, Triangle, as_point
from shapeslicer.model.geometry_utils import centroid, pedal_point
from shapeslicer.model.polygon import area, convert_loopwise
from shapeslicer.model.styles import StyleAttributes

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Fragment:
    polygon: Polygon
    triangles: Tuple[Triangle, ...]
    style: StyleAttributes
    centroid: Point2D

    @property
    def area(self) -> float:
        return area(self.polygon)


def build_fragment(points: Sequence[PointLike], style: Optional[StyleAttributes] = None) -> Fragment:
    """
    Create a fragment from raw points.

    Args:
        points: Outline in either winding; consecutive duplicates are removed.
        style: Style of the source shape. Unset fields take the fragment defaults.

    Returns:
        The clockwise, triangulated fragment.
    """
    polygon = convert_loopwise(Polygon.from_points(points))
    base = StyleAttributes.default()
    return Fragment(
        polygon=polygon,
        triangles=tuple(triangulate(polygon)),
        style=style.merged_over(base) if style is not None else base,
        centroid=centroid(polygon),
    )


def slash_fragment(fragment: Fragment, p0: PointLike, p1: PointLike) -> List[Fragment]:
    """Cut a fragment along the line p0-p1. An unsplit fragment is returned alone."""
    pieces = slice_polygon(fragment.polygon, p0, p1)
    if len(pieces) == 1:
        return [fragment]

    logger.info(f"Slash split a fragment into {len(pieces)} pieces.")
    return [build_fragment(piece, fragment.style) for piece in pieces]


def slash_impulse(
    polygon: Sequence[Point2D],
    line: SliceLine,
    mass: float,
    power: float = SLASH_MOVEMENT_POWER,
    rng: Optional[np.random.Generator] = None
) -> Optional[Point2D]:
    """
    Impulse a cut applies to one resulting piece.

    The impulse has a small component along the cut direction and a larger one
    pushing the piece away from the cut, both scaled by a random factor.

    Args:
        polygon: The piece.
        line: The cut.
        mass: Mass of the piece's body.
        power: Global strength multiplier.
        rng: Random generator; a fresh default generator when omitted.

    Returns:
        The impulse vector, or None when no direction is defined (degenerate
        cut or the piece's centroid lies on the cut).
    """
    rng = rng if rng is not None else np.random.default_rng()
    center = centroid(polygon)
    p0, p1 = as_point(line[0]), as_point(line[1])

    try:
        along = (p1 - p0).unit() * (SLASH_ALONG_BASE + SLASH_ALONG_SPAN * rng.random())
        away = (center - pedal_point(center, (p0, p1))).unit() * (
            SLASH_AWAY_BASE + SLASH_AWAY_SPAN * rng.random()
        )
    except ZeroVectorError:
        logger.debug("Slash impulse has no direction, skipping.")
        return None

    return (along + away) * (mass * power)
