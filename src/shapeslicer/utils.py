import math

import numpy as np


def deg2rad(degrees: float) -> float:
    """Convert degrees to radians."""
    return degrees * math.pi / 180

def format_number(value: float) -> str:
    """Shortest round-tripping text for a coordinate (10.0 -> '10')."""
    # Adding 0.0 folds -0.0 into 0.0
    return np.format_float_positional(float(value) + 0.0, trim='-')
