"""Polygon reduction to a single representative query point."""

from collections.abc import Sequence

from zonecast.errors import InvalidInput
from zonecast.models.geo import Coordinate, Polygon


def centroid(vertices: Sequence[Coordinate]) -> Coordinate:
    """Arithmetic mean of latitudes and longitudes, taken independently.

    This is a planar approximation, adequate for sub-regional polygons and
    kept as-is so results stay reproducible. Not geodesically exact, and
    not area-weighted.

    Raises:
        InvalidInput: if ``vertices`` is empty.
    """
    if not vertices:
        raise InvalidInput("Cannot compute centroid of an empty coordinate list")
    n = len(vertices)
    lat = sum(v.lat for v in vertices) / n
    lng = sum(v.lng for v in vertices) / n
    return Coordinate(lat, lng)


def polygon_centroid(polygon: Polygon) -> Coordinate:
    return centroid(polygon.vertices)
