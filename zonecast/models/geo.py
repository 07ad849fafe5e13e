"""Geographic models: coordinates and user-drawn polygons."""

import math
from dataclasses import dataclass, field
from datetime import datetime

from zonecast.errors import InvalidInput
from zonecast.models.common import DataSourceId, PolygonId
from zonecast.models.weather import HourlySeries

MIN_VERTICES = 3
MAX_VERTICES = 12


@dataclass(frozen=True)
class Coordinate:
    lat: float
    lng: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.lat) and math.isfinite(self.lng)):
            raise InvalidInput(f"Coordinate must be finite, got ({self.lat}, {self.lng})")
        if not -90.0 <= self.lat <= 90.0:
            raise InvalidInput(f"Latitude {self.lat} outside [-90, 90]")
        if not -180.0 <= self.lng <= 180.0:
            raise InvalidInput(f"Longitude {self.lng} outside [-180, 180]")

    @classmethod
    def from_pair(cls, pair: list[float] | tuple[float, float]) -> "Coordinate":
        if len(pair) != 2:
            raise InvalidInput(f"Expected [lat, lng] pair, got {pair!r}")
        try:
            return cls(float(pair[0]), float(pair[1]))
        except (TypeError, ValueError) as e:
            raise InvalidInput(f"Non-numeric coordinate {pair!r}") from e

    def as_pair(self) -> list[float]:
        return [self.lat, self.lng]


@dataclass(frozen=True)
class Polygon:
    id: PolygonId
    vertices: tuple[Coordinate, ...]
    data_source: DataSourceId
    label: str
    weather: HourlySeries | None = field(default=None, compare=False)
    last_updated: datetime | None = None

    def __post_init__(self) -> None:
        count = len(self.vertices)
        if not MIN_VERTICES <= count <= MAX_VERTICES:
            raise InvalidInput(
                f"Polygon {self.id!r} has {count} vertices, "
                f"expected {MIN_VERTICES}-{MAX_VERTICES}"
            )
