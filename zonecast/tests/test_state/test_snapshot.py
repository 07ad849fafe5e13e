"""Tests for the persisted state codec."""

import json
import math
from datetime import UTC, datetime

import pytest

from zonecast.errors import InvalidInput
from zonecast.models.weather import Channel
from zonecast.state.reducer import initial_state, reduce
from zonecast.state.snapshot import (
    WeatherPointRecord,
    dump_snapshot,
    load_action,
    parse_snapshot,
    points_to_series,
    series_to_points,
)

BLOB = {
    "polygons": [
        {
            "id": "poly-1",
            "coordinates": [[51.5, -0.2], [51.6, -0.2], [51.6, 0.0], [51.5, 0.0]],
            "dataSource": "open-meteo",
            "label": "London",
            "weatherData": [
                {"timestamp": "2026-02-10T01:00:00Z", "temperature": 3.8, "windSpeed": 10.8},
                {"timestamp": "2026-02-10T00:00:00Z", "temperature": 4.1, "humidity": 88},
            ],
            "lastUpdated": "2026-02-10T01:05:00Z",
            "isAnimating": True,
        }
    ],
    "colorRules": {
        "open-meteo": [{"operator": ">=", "value": 10, "color": "#10b981", "label": "Mild"}]
    },
    "selectedDataSource": "open-meteo",
    "animationsEnabled": False,
}


class TestParse:
    def test_parses_camel_case_blob(self):
        snapshot = parse_snapshot(json.dumps(BLOB))
        record = snapshot.polygons[0]
        assert record.data_source == "open-meteo"
        assert record.weather_data[0].wind_speed == 10.8
        assert snapshot.color_rules["open-meteo"][0].threshold == 10
        assert snapshot.animations_enabled is False

    def test_empty_object_is_valid(self):
        snapshot = parse_snapshot("{}")
        assert snapshot.polygons == []
        assert snapshot.selected_data_source is None

    @pytest.mark.parametrize("text", ["not json", '{"polygons": [{"id": 1}]}', "[]"])
    def test_malformed_raises_invalid_input(self, text):
        with pytest.raises(InvalidInput):
            parse_snapshot(text)


class TestLoadAction:
    def test_restores_polygons_with_weather(self):
        action = load_action(json.dumps(BLOB))
        polygon = action.polygons[0]
        assert len(polygon.vertices) == 4
        assert polygon.last_updated == datetime(2026, 2, 10, 1, 5, tzinfo=UTC)
        # Points are reordered by timestamp.
        assert polygon.weather.values(Channel.TEMPERATURE) == (4.1, 3.8)
        assert math.isnan(polygon.weather.values(Channel.PRESSURE)[0])

    def test_invalid_polygon_rejected(self):
        blob = {"polygons": [{"id": "x", "coordinates": [[0, 0], [1, 1]], "dataSource": "s"}]}
        with pytest.raises(InvalidInput):
            load_action(json.dumps(blob))

    def test_bad_weather_timestamp_rejected(self):
        points = [WeatherPointRecord(timestamp="yesterday")]
        with pytest.raises(InvalidInput):
            points_to_series(points)


class TestDump:
    def test_dump_then_load(self, default_config):
        state = reduce(initial_state(default_config), load_action(json.dumps(BLOB)))
        data = json.loads(dump_snapshot(state))
        assert data["selectedDataSource"] == "open-meteo"
        assert data["animationsEnabled"] is False
        assert data["colorRules"]["open-meteo"][0] == {
            "operator": ">=", "value": 10.0, "color": "#10b981", "label": "Mild",
        }
        polygon = data["polygons"][0]
        assert polygon["coordinates"][0] == [51.5, -0.2]
        assert polygon["weatherData"][0]["pressure"] is None
        assert "isAnimating" not in polygon

    def test_series_to_points_uses_wire_names(self, make_series):
        points = series_to_points(make_series(wind_speed=[5.0], temperature=[None]))
        assert points[0]["windSpeed"] == 5.0
        assert points[0]["temperature"] is None
