"""Error types raised by the geometry kernel."""


class GeometryError(ValueError):
    """Base class for geometry failures."""


class ZeroVectorError(GeometryError, ZeroDivisionError):
    """A direction was requested from a (near) zero-length vector."""


class ArcGeometryError(GeometryError):
    """An elliptical arc cannot pass through both endpoints at the given radii."""


class InvalidPolygonError(GeometryError):
    """The polygon is malformed (e.g. self-intersecting) and cannot be triangulated."""
