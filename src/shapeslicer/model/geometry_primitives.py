"""
Geometric Primitives for flattening, slicing and triangulation.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence, Tuple, Union, TYPE_CHECKING
import math

import numpy as np

from shapeslicer.config import EPSILON
from shapeslicer.model.exceptions import ZeroVectorError

if TYPE_CHECKING:
    import numpy.typing as npt


@dataclass(frozen=True, eq=False)
class Point2D:
    """
    A point (or free vector) in the XY plane.

    Equality is tolerant: two points are equal when both coordinates differ
    by less than EPSILON. As a consequence points are not hashable.
    """
    x: float
    y: float

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Point2D):
            return NotImplemented
        return abs(self.x - other.x) < EPSILON and abs(self.y - other.y) < EPSILON

    def __add__(self, other: Point2D) -> Point2D:
        return Point2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point2D) -> Point2D:
        return Point2D(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Point2D:
        return Point2D(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Point2D:
        if scalar == 0.0: raise ZeroDivisionError
        return Point2D(self.x / scalar, self.y / scalar)

    def __neg__(self) -> Point2D:
        return Point2D(-self.x, -self.y)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def __repr__(self) -> str:
        return f"Point2D({self.x:.6g}, {self.y:.6g})"

    @property
    def magnitude(self) -> float:
        return math.hypot(self.x, self.y)

    def unit(self) -> Point2D:
        """Unit vector in the same direction. Raises ZeroVectorError for a zero vector."""
        mag = self.magnitude
        if mag < EPSILON:
            raise ZeroVectorError("Unit vector cannot be computed from a zero vector.")
        return self / mag

    def dot(self, other: Point2D) -> float:
        return self.x * other.x + self.y * other.y

    def cross(self, other: Point2D) -> float:
        """Z component of the 3D cross product (ax*by - ay*bx)."""
        return self.x * other.y - self.y * other.x

    def distance_to(self, other: Point2D) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def midpoint(self, other: Point2D) -> Point2D:
        return Point2D((self.x + other.x) / 2, (self.y + other.y) / 2)

    def reflect_about(self, pivot: Point2D) -> Point2D:
        """Point symmetric to this one with respect to `pivot`."""
        return Point2D(2 * pivot.x - self.x, 2 * pivot.y - self.y)

    def rotate(self, angle_rad: float, pivot: Optional[Point2D] = None) -> Point2D:
        """Rotate around `pivot` (origin when omitted)."""
        px, py = (pivot.x, pivot.y) if pivot is not None else (0.0, 0.0)
        dx = self.x - px
        dy = self.y - py
        cos_a = math.cos(angle_rad)
        sin_a = math.sin(angle_rad)
        return Point2D(
            cos_a * dx - sin_a * dy + px,
            sin_a * dx + cos_a * dy + py
        )

    def to_array(self) -> npt.NDArray[np.float64]:
        return np.array([self.x, self.y])


ORIGIN = Point2D(0.0, 0.0)

PointLike = Union[Point2D, Sequence[float]]


def as_point(value: PointLike) -> Point2D:
    """Accept a Point2D or any (x, y) pair."""
    if isinstance(value, Point2D):
        return value
    x, y = value
    return Point2D(float(x), float(y))


def points_from_array(arr: npt.NDArray[np.float64]) -> Tuple[Point2D, ...]:
    """Convert an (N, 2) array back into points."""
    return tuple(Point2D(float(x), float(y)) for x, y in arr)


def points_to_array(points: Sequence[Point2D]) -> npt.NDArray[np.float64]:
    if len(points) == 0:
        return np.empty((0, 2))
    return np.array([[p.x, p.y] for p in points], dtype=float)


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned rectangle enclosing a point set (boundary included)."""
    x: float
    y: float
    width: float
    height: float

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Point2D:
        return Point2D(self.x + self.width / 2, self.y + self.height / 2)

    @property
    def diagonal(self) -> float:
        return math.hypot(self.width, self.height)


@dataclass(frozen=True)
class Polyline:
    """
    An ordered list of points. Whether the polyline is closed is carried
    separately and is never inferred from the last point equaling the first.
    """
    points: Tuple[Point2D, ...] = ()
    closed: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "points", tuple(self.points))

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[Point2D]:
        return iter(self.points)

    def __getitem__(self, index: int) -> Point2D:
        return self.points[index]

    def to_array(self) -> npt.NDArray[np.float64]:
        return points_to_array(self.points)


@dataclass(frozen=True)
class Polygon:
    """
    A closed ring of points. The closing edge (last -> first) is implicit.

    Use `Polygon.from_points` to enforce the "no two consecutive points are
    equal" invariant; the plain constructor keeps the points as given.
    """
    points: Tuple[Point2D, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "points", tuple(self.points))

    @classmethod
    def from_points(cls, points: Sequence[PointLike]) -> Polygon:
        # Imported lazily: polygon.py depends on this module
        from shapeslicer.model.polygon import omit_same_points
        return cls(omit_same_points([as_point(p) for p in points]))

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[Point2D]:
        return iter(self.points)

    def __getitem__(self, index: int) -> Point2D:
        return self.points[index]

    def edges(self) -> Iterator[Tuple[Point2D, Point2D]]:
        """Yield every edge including the closing one."""
        size = len(self.points)
        for i in range(size):
            yield self.points[i], self.points[(i + 1) % size]

    def reversed(self) -> Polygon:
        return Polygon(self.points[::-1])

    def to_array(self) -> npt.NDArray[np.float64]:
        return points_to_array(self.points)


@dataclass(frozen=True)
class Triangle:
    """Three points with a non-zero signed area."""
    a: Point2D
    b: Point2D
    c: Point2D

    def __post_init__(self) -> None:
        if abs(self.signed_area) < EPSILON * EPSILON:
            raise ValueError(f"Degenerate triangle: {self.a}, {self.b}, {self.c}")

    @property
    def points(self) -> Tuple[Point2D, Point2D, Point2D]:
        return self.a, self.b, self.c

    @property
    def signed_area(self) -> float:
        return (self.b - self.a).cross(self.c - self.a) / 2

    @property
    def area(self) -> float:
        return abs(self.signed_area)

    def __iter__(self) -> Iterator[Point2D]:
        return iter(self.points)


@dataclass(frozen=True)
class SliceLine:
    """
    An infinite line through two points. Only the direction matters,
    the distance between p0 and p1 is discarded.
    """
    p0: Point2D
    p1: Point2D

    @classmethod
    def through(cls, p0: PointLike, p1: PointLike) -> SliceLine:
        return cls(as_point(p0), as_point(p1))

    @property
    def is_degenerate(self) -> bool:
        return self.p0 == self.p1

    @property
    def direction(self) -> Point2D:
        """Unit direction p0 -> p1. Raises ZeroVectorError if p0 == p1."""
        return (self.p1 - self.p0).unit()

    def project(self, point: Point2D) -> float:
        """Signed coordinate of `point` along the line axis."""
        return (point - self.p0).dot(self.direction)

    def __iter__(self) -> Iterator[Point2D]:
        yield self.p0
        yield self.p1

    def __getitem__(self, index: int) -> Point2D:
        return (self.p0, self.p1)[index]
