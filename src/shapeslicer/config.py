"""
Configuration & Kernel Constants
================================
This module serves as the central registry for the numeric tolerances and
sampling densities used across the geometry kernel.

Why is this file needed?
------------------------
1. Consistency: Every predicate compares floats against the same EPSILON, so
   slicing and triangulation agree on what "the same point" means.
2. Tuning: Flattening densities (Bezier / ellipse segment counts) and the
   slash impulse strengths live in one place instead of being hardcoded
   throughout the code.

Exports:
    EPSILON (float): Tolerance below which two floats are treated as equal.
    BEZIER_SPLIT_COUNT (int): Segments per flattened Bezier curve or arc command.
    ELLIPSE_SPLIT_COUNT (int): Segments per flattened circle / ellipse primitive.
    DEFAULT_STYLE (dict): Style values applied to fragments that do not set them.
"""
from typing import Any, Dict

# Global Constants
EPSILON: float = 1e-6

BEZIER_SPLIT_COUNT: int = 10
ELLIPSE_SPLIT_COUNT: int = 20

# Slash impulse: (base, random span) pairs for the component along the cut
# and the component pushing the fragment away from the cut.
SLASH_ALONG_BASE: float = 0.00002
SLASH_ALONG_SPAN: float = 0.0002
SLASH_AWAY_BASE: float = 0.0002
SLASH_AWAY_SPAN: float = 0.002
SLASH_MOVEMENT_POWER: float = 1.0

DEFAULT_STYLE: Dict[str, Any] = {
    "fill": True,
    "fill_color": "green",
    "stroke": True,
    "stroke_color": "red",
    "line_width": 2.0,
    "line_dash": (),
    "line_cap": "butt",
    "line_join": "miter",
    "stroke_opacity": 1.0,
    "fill_opacity": 1.0,
}

# Minimum canvas size used when exporting shapes as an SVG document.
EXPORT_MIN_CANVAS: float = 100.0
EXPORT_CANVAS_MARGIN: float = 1.1
