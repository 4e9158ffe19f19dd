"""
Shape Export
Writes the current shapes (or fragments) back out as a standalone SVG document.
"""
import logging
import xml.etree.ElementTree as ET
from typing import Sequence

from shapeslicer.config import EXPORT_CANVAS_MARGIN, EXPORT_MIN_CANVAS
from shapeslicer.model.path_commands import serialize_polyline
from shapeslicer.model.shapes import Shape
from shapeslicer.model.styles import serialize_style
from shapeslicer.utils import format_number

logger = logging.getLogger(__name__)

_SVG_NS = "http://www.w3.org/2000/svg"


def canvas_size(shapes: Sequence[Shape]) -> float:
    """Square canvas edge: the largest coordinate (at least the minimum size) plus a margin."""
    largest = EXPORT_MIN_CANVAS
    for shape in shapes:
        for p in shape.polyline:
            largest = max(largest, p.x, p.y)
    return round(largest * EXPORT_CANVAS_MARGIN, 6)


def serialize_svg(shapes: Sequence[Shape]) -> str:
    """
    Build an SVG document with one <path> per shape.

    Curves are exported in their flattened form; the style attribute uses the
    same keys the style parser reads.
    """
    ET.register_namespace("", _SVG_NS)
    size = format_number(canvas_size(shapes))
    root = ET.Element(f"{{{_SVG_NS}}}svg", {
        "width": size,
        "height": size,
        "viewBox": f"0 0 {size} {size}",
    })

    for shape in shapes:
        ET.SubElement(root, f"{{{_SVG_NS}}}path", {
            "d": serialize_polyline(shape.polyline),
            "style": serialize_style(shape.style),
        })

    logger.info(f"Exported {len(shapes)} shape(s) on a {size}x{size} canvas.")
    ET.indent(root)
    return ET.tostring(root, encoding="unicode", xml_declaration=True)
