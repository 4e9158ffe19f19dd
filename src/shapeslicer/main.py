"""
Command-Line Entry
==================
Flattens one shape, optionally cuts it along a line and triangulates the
pieces, then prints the result.

Why is this file needed?
------------------------
It is the orchestration root for running the kernel outside of a host
application. It:
1. Configures logging.
2. Turns the command line into a shape descriptor.
3. Runs flatten -> slice -> triangulate and writes an SVG document or one
   path string per line to stdout.

Usage:
    $ python -m shapeslicer rect x=0 y=0 width=100 height=50 --line 50 -10 50 60
    $ python -m shapeslicer path "M0,0 L40,0 L40,40 Z" --triangulate --format paths
"""
import argparse
import logging
import sys
from typing import Dict, List, Optional, Sequence

from shapeslicer.controller.fragments import build_fragment
from shapeslicer.controller.slicer import slice_polygon
from shapeslicer.logging_config import setup_logging
from shapeslicer.model.geometry_primitives import Polygon, Polyline
from shapeslicer.model.io import serialize_svg
from shapeslicer.model.path_commands import serialize_polyline
from shapeslicer.model.shapes import Shape, ShapeDescriptor, ShapeKind, extract_shape, shape_polygon
from shapeslicer.model.styles import StyleAttributes

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shapeslicer",
        description="Flatten, slice and triangulate 2D shapes.",
    )
    parser.add_argument("kind", choices=[k.value for k in ShapeKind], help="Shape kind")
    parser.add_argument(
        "attributes", nargs="*",
        help="Shape attributes as key=value (x=0 width=10 ...). "
             "For paths a bare argument is taken as the command string."
    )
    parser.add_argument("--style", help='Style string, e.g. "fill:blue;stroke-width:3"')
    parser.add_argument("--transform", help='Transform chain, e.g. "translate(10,0) rotate(45)"')
    parser.add_argument(
        "--line", nargs=4, type=float, metavar=("X0", "Y0", "X1", "Y1"),
        help="Cut along the infinite line through (X0, Y0) and (X1, Y1)"
    )
    parser.add_argument("--triangulate", action="store_true", help="Output triangles instead of pieces")
    parser.add_argument("--format", choices=["svg", "paths"], default="svg", help="Output format (default: svg)")
    parser.add_argument(
        "--log-level", default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)"
    )
    parser.add_argument("--log-file", help="Also write logs to this file")
    return parser


def parse_attributes(kind: str, raw: Sequence[str]) -> Dict[str, str]:
    """Split key=value arguments; a bare argument of a path is its "d" attribute."""
    attributes = {}
    for item in raw:
        if "=" in item:
            key, value = item.split("=", 1)
            attributes[key.strip()] = value.strip()
        elif kind == ShapeKind.PATH:
            attributes["d"] = item
        else:
            raise ValueError(f"Attribute '{item}' is not in key=value form.")
    return attributes


def _as_shape(points: Polygon, style: StyleAttributes) -> Shape:
    return Shape(ShapeKind.PATH, Polyline(points.points, closed=True), True, style)


def run(args: argparse.Namespace) -> List[Shape]:
    attributes = parse_attributes(args.kind, args.attributes)
    if args.transform:
        attributes["transform"] = args.transform
    descriptor = ShapeDescriptor(ShapeKind(args.kind), attributes, args.style)

    shape = extract_shape(descriptor)
    polygon = shape_polygon(shape)
    style = shape.style.merged_over(StyleAttributes.default())

    if args.line:
        x0, y0, x1, y1 = args.line
        pieces = slice_polygon(polygon, (x0, y0), (x1, y1))
    else:
        pieces = [polygon]
    logger.info(f"{len(pieces)} piece(s) after slicing.")

    if not args.triangulate:
        return [_as_shape(piece, style) for piece in pieces]

    shapes = []
    for piece in pieces:
        fragment = build_fragment(piece, shape.style)
        shapes.extend(_as_shape(Polygon(t.points), fragment.style) for t in fragment.triangles)
    return shapes


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=getattr(logging, args.log_level), log_file=args.log_file)

    try:
        shapes = run(args)
    except ValueError as e:  # GeometryError is a ValueError
        logger.error(f"Could not process shape: {e}")
        return 1

    if args.format == "svg":
        sys.stdout.write(serialize_svg(shapes) + "\n")
    else:
        for shape in shapes:
            sys.stdout.write(serialize_polyline(shape.polyline) + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
