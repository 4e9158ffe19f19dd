"""
Shape Slicer
============
A 2D geometry kernel that flattens vector shapes into polygons, cuts them along
lines and triangulates the resulting fragments.

Typical flow::

    polygon = flatten_shape(ShapeDescriptor("path", {"d": "M0,0 L10,0 L10,10 Z"}))
    pieces = slice_polygon(polygon, (5, -1), (5, 11))
    triangles = [triangulate(piece) for piece in pieces]
"""
from shapeslicer.controller.fragments import Fragment, build_fragment, slash_fragment, slash_impulse
from shapeslicer.controller.slicer import slice_once, slice_polygon
from shapeslicer.controller.triangulator import triangulate
from shapeslicer.model.curves import approximate_arc, approximate_arc_with_endpoints, approximate_bezier
from shapeslicer.model.exceptions import ArcGeometryError, GeometryError, InvalidPolygonError, ZeroVectorError
from shapeslicer.model.geometry_primitives import BoundingBox, Point2D, Polygon, Polyline, SliceLine, Triangle
from shapeslicer.model.geometry_utils import bounding_box, centroid, solve_quadratic
from shapeslicer.model.io import serialize_svg
from shapeslicer.model.path_commands import PathCommand, PathCommandKind, interpret, parse_commands, parse_path, serialize_polyline
from shapeslicer.model.polygon import (
    LoopDirection, area, convert_loopwise, intersections, line_intersects_segment, loopwise,
    point_in_curved_region, point_in_polygon, point_in_triangle, segment_intersects_line,
    segments_intersect
)
from shapeslicer.model.shapes import (
    Shape, ShapeDescriptor, ShapeKind, apply_transform_chain, extract_shape, extract_shapes, flatten_shape
)
from shapeslicer.model.styles import StyleAttributes, parse_style, serialize_style

__all__ = [
    "ArcGeometryError", "BoundingBox", "Fragment", "GeometryError", "InvalidPolygonError",
    "LoopDirection", "PathCommand", "PathCommandKind", "Point2D", "Polygon", "Polyline",
    "Shape", "ShapeDescriptor", "ShapeKind", "SliceLine", "StyleAttributes", "Triangle",
    "ZeroVectorError", "apply_transform_chain", "approximate_arc", "approximate_arc_with_endpoints",
    "approximate_bezier", "area", "bounding_box", "build_fragment", "centroid", "convert_loopwise",
    "extract_shape", "extract_shapes", "flatten_shape", "interpret", "intersections",
    "line_intersects_segment", "loopwise", "parse_commands", "parse_path", "parse_style",
    "point_in_curved_region", "point_in_polygon", "point_in_triangle", "segment_intersects_line",
    "segments_intersect", "serialize_polyline", "serialize_style", "serialize_svg",
    "slash_fragment", "slash_impulse", "slice_once", "slice_polygon", "solve_quadratic",
    "triangulate",
]
