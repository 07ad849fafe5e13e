"""Codec for the persisted application state JSON blob.

Shape::

    {
      "polygons": [{"id", "coordinates": [[lat, lng], ...], "dataSource",
                    "label", "weatherData"?, "lastUpdated"?}],
      "colorRules": {"<source id>": [{"operator", "value", "color", "label"?}]},
      "selectedDataSource": "<source id>",
      "animationsEnabled": true
    }
"""

import json
import math

from pydantic import BaseModel, Field, ValidationError

from zonecast.config.schema import ColorRule
from zonecast.errors import InvalidInput
from zonecast.models.common import parse_timestamp
from zonecast.models.geo import Coordinate, Polygon
from zonecast.models.weather import Channel, HourlySeries
from zonecast.state.reducer import AppState, LoadFromStorage

_POINT_FIELDS: dict[Channel, str] = {
    Channel.TEMPERATURE: "temperature",
    Channel.HUMIDITY: "humidity",
    Channel.WIND_SPEED: "windSpeed",
    Channel.PRECIPITATION: "precipitation",
    Channel.PRESSURE: "pressure",
}


class WeatherPointRecord(BaseModel):
    model_config = {"extra": "ignore", "populate_by_name": True}

    timestamp: str
    temperature: float | None = None
    humidity: float | None = None
    wind_speed: float | None = Field(default=None, alias="windSpeed")
    precipitation: float | None = None
    pressure: float | None = None


class PolygonRecord(BaseModel):
    model_config = {"extra": "ignore", "populate_by_name": True}

    id: str
    coordinates: list[tuple[float, float]]
    data_source: str = Field(alias="dataSource")
    label: str = ""
    weather_data: list[WeatherPointRecord] | None = Field(default=None, alias="weatherData")
    last_updated: str | None = Field(default=None, alias="lastUpdated")


class PersistedState(BaseModel):
    model_config = {"extra": "ignore", "populate_by_name": True}

    polygons: list[PolygonRecord] = []
    color_rules: dict[str, list[ColorRule]] = Field(default_factory=dict, alias="colorRules")
    selected_data_source: str | None = Field(default=None, alias="selectedDataSource")
    animations_enabled: bool = Field(default=True, alias="animationsEnabled")


def parse_snapshot(text: str) -> PersistedState:
    try:
        return PersistedState.model_validate_json(text)
    except ValidationError as e:
        raise InvalidInput(f"Malformed persisted state: {e}") from e


def to_polygon(record: PolygonRecord) -> Polygon:
    weather = points_to_series(record.weather_data) if record.weather_data else None
    return Polygon(
        id=record.id,
        vertices=tuple(Coordinate.from_pair(pair) for pair in record.coordinates),
        data_source=record.data_source,
        label=record.label,
        weather=weather,
        last_updated=parse_timestamp(record.last_updated),
    )


def load_action(text: str) -> LoadFromStorage:
    """Decode a persisted blob into the action that restores it."""
    snapshot = parse_snapshot(text)
    return LoadFromStorage(
        polygons=tuple(to_polygon(r) for r in snapshot.polygons),
        color_rules=snapshot.color_rules,
        selected_data_source=snapshot.selected_data_source,
        animations_enabled=snapshot.animations_enabled,
    )


def dump_snapshot(state: AppState) -> str:
    data = {
        "polygons": [_polygon_dict(p) for p in state.polygons],
        "colorRules": {
            source_id: [r.model_dump(by_alias=True, exclude_none=True) for r in rules]
            for source_id, rules in state.color_rules.items()
        },
        "selectedDataSource": state.selected_data_source,
        "animationsEnabled": state.animations_enabled,
    }
    return json.dumps(data)


def _polygon_dict(polygon: Polygon) -> dict:
    out: dict = {
        "id": polygon.id,
        "coordinates": [v.as_pair() for v in polygon.vertices],
        "dataSource": polygon.data_source,
        "label": polygon.label,
    }
    if polygon.weather is not None:
        out["weatherData"] = series_to_points(polygon.weather)
    if polygon.last_updated is not None:
        out["lastUpdated"] = polygon.last_updated.isoformat()
    return out


def series_to_points(series: HourlySeries) -> list[dict]:
    points = []
    for i, ts in enumerate(series.timestamps):
        point: dict = {"timestamp": ts.isoformat()}
        for channel, key in _POINT_FIELDS.items():
            value = series.values(channel)[i]
            point[key] = None if math.isnan(value) else value
        points.append(point)
    return points


def points_to_series(points: list[WeatherPointRecord]) -> HourlySeries:
    rows = {}
    for point in points:
        ts = parse_timestamp(point.timestamp)
        if ts is None:
            raise InvalidInput(f"Unparseable weather timestamp {point.timestamp!r}")
        rows[ts] = point
    timestamps = sorted(rows)
    channels = {
        channel: tuple(_nan_if_none(getattr(rows[ts], channel.value)) for ts in timestamps)
        for channel in _POINT_FIELDS
    }
    return HourlySeries(timestamps=tuple(timestamps), channels=channels)


def _nan_if_none(value: float | None) -> float:
    return math.nan if value is None else float(value)
