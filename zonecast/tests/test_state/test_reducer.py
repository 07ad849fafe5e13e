"""Tests for AppState transitions."""

import dataclasses
from datetime import UTC, datetime, timedelta

import pytest

from zonecast.config.schema import ColorRule, DataSource
from zonecast.errors import InvalidInput
from zonecast.models.geo import Coordinate, Polygon
from zonecast.models.weather import TimeRange
from zonecast.state.reducer import (
    AddDataSource,
    AddPolygon,
    AppState,
    DeletePolygon,
    FocusPolygon,
    LoadFromStorage,
    SetColorRules,
    SetDataSource,
    SetTime,
    SetWeatherData,
    ToggleAnimations,
    UpdatePolygon,
    initial_state,
    reduce,
)

NOW = datetime(2026, 2, 10, 12, 0, tzinfo=UTC)


def _polygon(pid: str, source: str = "open-meteo") -> Polygon:
    return Polygon(
        id=pid,
        vertices=(Coordinate(0, 0), Coordinate(0, 1), Coordinate(1, 1)),
        data_source=source,
        label=pid.upper(),
    )


def _rule(op: str, value: float, color: str) -> ColorRule:
    return ColorRule.model_validate({"operator": op, "value": value, "color": color})


@pytest.fixture
def state(default_config) -> AppState:
    return initial_state(default_config, now=NOW)


class TestInitialState:
    def test_last_hour_selected(self, state: AppState):
        assert state.selected_time == TimeRange(NOW - timedelta(hours=1), NOW)

    def test_sources_and_rules_from_config(self, state: AppState):
        assert state.selected_data_source == "open-meteo"
        assert len(state.rules_for("mock-tropical")) == 3
        assert state.rules_for("missing") == ()
        assert state.polygons == ()
        assert state.animations_enabled is True


class TestPolygonActions:
    def test_add(self, state: AppState):
        new = reduce(state, AddPolygon(_polygon("a")))
        assert [p.id for p in new.polygons] == ["a"]
        assert state.polygons == ()

    def test_add_duplicate_rejected(self, state: AppState):
        new = reduce(state, AddPolygon(_polygon("a")))
        with pytest.raises(InvalidInput, match="Duplicate polygon"):
            reduce(new, AddPolygon(_polygon("a")))

    def test_delete_clears_focus(self, state: AppState):
        s = reduce(state, AddPolygon(_polygon("a")))
        s = reduce(s, AddPolygon(_polygon("b")))
        s = reduce(s, FocusPolygon("a"))
        s = reduce(s, DeletePolygon("a"))
        assert [p.id for p in s.polygons] == ["b"]
        assert s.focused_polygon_id is None

    def test_delete_keeps_other_focus(self, state: AppState):
        s = reduce(state, AddPolygon(_polygon("a")))
        s = reduce(s, AddPolygon(_polygon("b")))
        s = reduce(s, FocusPolygon("b"))
        s = reduce(s, DeletePolygon("a"))
        assert s.focused_polygon_id == "b"

    def test_update_label_and_source(self, state: AppState):
        s = reduce(state, AddPolygon(_polygon("a")))
        s = reduce(s, UpdatePolygon("a", label="Harbour", data_source="mock-temperate"))
        assert s.polygon("a").label == "Harbour"
        assert s.polygon("a").data_source == "mock-temperate"

    def test_update_unknown_id_is_noop(self, state: AppState):
        s = reduce(state, AddPolygon(_polygon("a")))
        assert reduce(s, UpdatePolygon("zzz", label="x")).polygons == s.polygons

    def test_set_weather_data(self, state: AppState, make_series):
        s = reduce(state, AddPolygon(_polygon("a")))
        series = make_series(temperature=[1.0, 2.0])
        s = reduce(s, SetWeatherData("a", series, updated_at=NOW))
        assert s.polygon("a").weather is series
        assert s.polygon("a").last_updated == NOW


class TestSelectionActions:
    def test_set_time(self, state: AppState):
        window = TimeRange(NOW - timedelta(hours=6), NOW)
        assert reduce(state, SetTime(window)).selected_time == window

    def test_set_data_source(self, state: AppState):
        assert reduce(state, SetDataSource("mock-tropical")).selected_data_source == "mock-tropical"

    def test_toggle_animations(self, state: AppState):
        s = reduce(state, ToggleAnimations())
        assert s.animations_enabled is False
        assert reduce(s, ToggleAnimations()).animations_enabled is True

    def test_add_data_source(self, state: AppState):
        source = DataSource(id="mock-arctic", name="Arctic")
        s = reduce(state, AddDataSource(source))
        assert s.data_sources[-1] is source

    def test_add_duplicate_data_source_rejected(self, state: AppState):
        with pytest.raises(InvalidInput):
            reduce(state, AddDataSource(DataSource(id="open-meteo", name="again")))


class TestRuleActions:
    def test_set_color_rules_merges(self, state: AppState):
        rules = [_rule(">", 0, "#ffffff")]
        s = reduce(state, SetColorRules({"open-meteo": rules}))
        assert s.rules_for("open-meteo") == tuple(rules)
        assert len(s.rules_for("mock-tropical")) == 3

    def test_set_color_rules_keeps_order(self, state: AppState):
        rules = [_rule(">=", 32, "#ef4444"), _rule(">=", 25, "#f59e0b")]
        s = reduce(state, SetColorRules({"mock-tropical": rules}))
        assert [r.threshold for r in s.rules_for("mock-tropical")] == [32, 25]

    def test_load_from_storage_replaces_rules(self, state: AppState):
        s = reduce(
            state,
            LoadFromStorage(
                polygons=(_polygon("p"),),
                color_rules={"mock-tropical": [_rule("<", 0, "#000000")]},
                selected_data_source="mock-tropical",
                animations_enabled=False,
            ),
        )
        assert [p.id for p in s.polygons] == ["p"]
        assert set(s.color_rules) == {"mock-tropical"}
        assert s.selected_data_source == "mock-tropical"
        assert s.animations_enabled is False

    def test_load_from_storage_partial(self, state: AppState):
        s = reduce(state, LoadFromStorage(animations_enabled=False))
        assert s.color_rules == state.color_rules
        assert s.selected_data_source == state.selected_data_source


def test_state_is_immutable(state: AppState):
    with pytest.raises(dataclasses.FrozenInstanceError):
        state.animations_enabled = False
