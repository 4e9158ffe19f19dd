"""
Shape Extraction
================
Turns shape descriptors (tag kind + attribute strings, as handed over by the
markup traversal) into flattened polylines with their style.

Why is this file needed?
------------------------
1. Primitives: Rectangles, circles and ellipses are expanded into points;
   paths go through the command interpreter.
2. Transforms: The "translate(...) rotate(...)" chains attached to any shape
   are parsed and applied left to right.
3. Normalization: `flatten_shape` produces the clockwise Polygon the slicer
   and triangulator expect.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import StrEnum
from typing import List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from shapeslicer.config import BEZIER_SPLIT_COUNT, ELLIPSE_SPLIT_COUNT
from shapeslicer.model.curves import approximate_arc
from shapeslicer.model.geometry_primitives import (
    Point2D, Polygon, Polyline, points_from_array, points_to_array
)
from shapeslicer.model.geometry_utils import transform_array
from shapeslicer.model.path_commands import parse_path
from shapeslicer.model.polygon import convert_loopwise
from shapeslicer.model.styles import StyleAttributes, parse_style
from shapeslicer.utils import deg2rad

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------------------
# Data Structures
# ------------------------------------------------------------------------------
class ShapeKind(StrEnum):
    PATH = "path"
    RECT = "rect"
    ELLIPSE = "ellipse"
    CIRCLE = "circle"


@dataclass(frozen=True)
class ShapeDescriptor:
    """
    One shape as delivered by the markup traversal.

    `attributes` holds the raw attribute strings ("d", "x", "cx", "transform",
    "style", ...). `style` overrides the style source; when omitted the "style"
    attribute is used, or the attributes themselves if there is none.
    """
    kind: ShapeKind
    attributes: Mapping[str, str] = field(default_factory=dict)
    style: Optional[Union[str, Mapping[str, str]]] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", ShapeKind(self.kind))


@dataclass(frozen=True)
class Shape:
    """A flattened shape. Immutable once produced."""
    kind: ShapeKind
    polyline: Polyline
    closed: bool
    style: StyleAttributes = field(default_factory=StyleAttributes)


# ------------------------------------------------------------------------------
# Primitives
# ------------------------------------------------------------------------------
def rect_polyline(x: float, y: float, width: float, height: float) -> Polyline:
    return Polyline(
        (
            Point2D(x, y),
            Point2D(x + width, y),
            Point2D(x + width, y + height),
            Point2D(x, y + height),
        ),
        closed=True
    )


def ellipse_polyline(
    center: Point2D,
    rx: float,
    ry: float,
    n_segments: int = ELLIPSE_SPLIT_COUNT
) -> Polyline:
    """Full turn of the ellipse; the last point repeats the first."""
    arc = approximate_arc(rx, ry, 0.0, 2 * math.pi, center, 0.0, n_segments)
    return Polyline(arc.points, closed=True)


def circle_polyline(center: Point2D, radius: float, n_segments: int = ELLIPSE_SPLIT_COUNT) -> Polyline:
    return ellipse_polyline(center, radius, radius, n_segments)


# ------------------------------------------------------------------------------
# Transforms
# ------------------------------------------------------------------------------
def _translation(tx: float, ty: float) -> np.ndarray:
    return np.array([[1.0, 0.0, tx], [0.0, 1.0, ty], [0.0, 0.0, 1.0]])


def _transform_matrix(name: str, params: List[float]) -> Optional[np.ndarray]:
    """3x3 matrix for one transform, or None if it is unknown or malformed."""
    match name, len(params):
        case "matrix", 6:
            a, b, c, d, e, f = params
            return np.array([[a, c, e], [b, d, f], [0.0, 0.0, 1.0]])
        case "translate", 1 | 2:
            tx = params[0]
            ty = params[1] if len(params) > 1 else 0.0
            return _translation(tx, ty)
        case "scale", 1 | 2:
            sx = params[0]
            # Uniform scale when only one factor is given
            sy = params[1] if len(params) > 1 else sx
            return np.diag([sx, sy, 1.0])
        case "rotate", 1 | 3:
            rad = deg2rad(params[0])
            cos_a = math.cos(rad)
            sin_a = math.sin(rad)
            rotation = np.array([[cos_a, -sin_a, 0.0], [sin_a, cos_a, 0.0], [0.0, 0.0, 1.0]])
            if len(params) == 3:
                cx, cy = params[1], params[2]
                return _translation(cx, cy) @ rotation @ _translation(-cx, -cy)
            return rotation
        case "skewx", 1:
            return np.array([[1.0, math.tan(deg2rad(params[0])), 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0]])
        case "skewy", 1:
            return np.array([[1.0, 0.0, 0.0], [math.tan(deg2rad(params[0])), 1.0, 0.0], [0.0, 0.0, 1.0]])
        case _:
            return None


def parse_transform_chain(text: Optional[str]) -> List[Tuple[str, List[float]]]:
    """
    Split "name(args) name(args) ..." into (lowercase name, numbers) pairs.
    Arguments may be separated by commas and/or whitespace.
    """
    ret = []
    if not text:
        return ret

    for chunk in text.split(")"):
        if "(" not in chunk:
            continue
        name, args = chunk.split("(", 1)
        name = name.strip().strip(",").strip().lower()
        try:
            params = [float(v) for v in args.replace(",", " ").split()]
        except ValueError:
            logger.debug(f"Ignoring transform '{name}' with unparsable arguments {args!r}")
            continue
        ret.append((name, params))
    return ret


def apply_transform_chain(text: Optional[str], points: Sequence[Point2D]) -> Tuple[Point2D, ...]:
    """
    Apply a transform chain to points.

    Transforms are applied in the order listed, each to the result of the
    previous one. Unknown names and wrong argument counts are ignored.

    Args:
        text: The transform attribute, e.g. "translate(10,0) rotate(45)".
        points: Points to transform.

    Returns:
        New points; the input is left untouched.
    """
    arr = points_to_array(points)
    for name, params in parse_transform_chain(text):
        matrix = _transform_matrix(name, params)
        if matrix is None:
            logger.debug(f"Ignoring unknown or malformed transform {name}({params})")
            continue
        arr = transform_array(arr, matrix)
    return points_from_array(arr)


# ------------------------------------------------------------------------------
# Extraction
# ------------------------------------------------------------------------------
def _number(attributes: Mapping[str, str], key: str, default: float = 0.0) -> float:
    raw = attributes.get(key)
    if raw is None:
        return default
    try:
        return float(str(raw).strip())
    except ValueError:
        logger.warning(f"Attribute {key}={raw!r} is not a number, using {default}.")
        return default


def extract_shape(
    descriptor: ShapeDescriptor,
    bezier_segments: int = BEZIER_SPLIT_COUNT,
    ellipse_segments: int = ELLIPSE_SPLIT_COUNT
) -> Shape:
    """
    Flatten one descriptor into a Shape.

    Args:
        descriptor: Kind, attributes and optional style source.
        bezier_segments: Segments per curve command of a path.
        ellipse_segments: Segments per circle / ellipse.

    Returns:
        The shape with its transform chain applied and its style parsed.
    """
    attrs = descriptor.attributes

    match descriptor.kind:
        case ShapeKind.PATH:
            polyline = parse_path(attrs.get("d", ""), bezier_segments)
        case ShapeKind.RECT:
            polyline = rect_polyline(
                _number(attrs, "x"), _number(attrs, "y"),
                _number(attrs, "width"), _number(attrs, "height")
            )
        case ShapeKind.ELLIPSE:
            polyline = ellipse_polyline(
                Point2D(_number(attrs, "cx"), _number(attrs, "cy")),
                _number(attrs, "rx"), _number(attrs, "ry"),
                ellipse_segments
            )
        case ShapeKind.CIRCLE:
            polyline = circle_polyline(
                Point2D(_number(attrs, "cx"), _number(attrs, "cy")),
                _number(attrs, "r"),
                ellipse_segments
            )
        case _:
            raise ValueError(f"Unsupported shape kind: {descriptor.kind}")

    transform = attrs.get("transform")
    if transform:
        polyline = Polyline(apply_transform_chain(transform, polyline.points), polyline.closed)

    if descriptor.style is not None:
        style_source = descriptor.style
    else:
        style_source = attrs.get("style", attrs)

    logger.debug(f"Extracted {descriptor.kind} with {len(polyline)} points.")
    return Shape(
        kind=descriptor.kind,
        polyline=polyline,
        closed=polyline.closed,
        style=parse_style(style_source)
    )


def shape_polygon(shape: Shape) -> Polygon:
    """Clockwise polygon of an extracted shape, consecutive duplicate points removed."""
    return convert_loopwise(Polygon.from_points(shape.polyline.points))


def flatten_shape(descriptor: ShapeDescriptor) -> Polygon:
    return shape_polygon(extract_shape(descriptor))


def extract_shapes(descriptors: Sequence[ShapeDescriptor]) -> List[Shape]:
    return [extract_shape(d) for d in descriptors]
