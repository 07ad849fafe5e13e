"""Application state snapshot and its pure transition function.

The UI owns when actions are dispatched; this module only defines what each
action does to an immutable AppState. Every action returns a new snapshot
and leaves the old one untouched.
"""

import dataclasses
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import TypeAlias

from zonecast.config.schema import ColorRule, DataSource, ZonecastConfig
from zonecast.errors import InvalidInput
from zonecast.models.common import PolygonId, utc_now
from zonecast.models.geo import Polygon
from zonecast.models.weather import HourlySeries, TimeRange


@dataclass(frozen=True)
class AppState:
    polygons: tuple[Polygon, ...] = ()
    selected_time: TimeRange = TimeRange()
    color_rules: Mapping[str, tuple[ColorRule, ...]] = field(default_factory=dict)
    data_sources: tuple[DataSource, ...] = ()
    selected_data_source: str = ""
    focused_polygon_id: PolygonId | None = None
    animations_enabled: bool = True

    def polygon(self, polygon_id: PolygonId) -> Polygon | None:
        for p in self.polygons:
            if p.id == polygon_id:
                return p
        return None

    def rules_for(self, source_id: str) -> tuple[ColorRule, ...]:
        return self.color_rules.get(source_id, ())


@dataclass(frozen=True)
class AddPolygon:
    polygon: Polygon


@dataclass(frozen=True)
class DeletePolygon:
    polygon_id: PolygonId


@dataclass(frozen=True)
class UpdatePolygon:
    polygon_id: PolygonId
    label: str | None = None
    data_source: str | None = None


@dataclass(frozen=True)
class FocusPolygon:
    polygon_id: PolygonId | None


@dataclass(frozen=True)
class SetTime:
    time_range: TimeRange


@dataclass(frozen=True)
class SetColorRules:
    """Replace the rule lists of the given sources; other sources keep theirs."""

    rules: Mapping[str, Sequence[ColorRule]]


@dataclass(frozen=True)
class SetDataSource:
    source_id: str


@dataclass(frozen=True)
class AddDataSource:
    source: DataSource


@dataclass(frozen=True)
class SetWeatherData:
    polygon_id: PolygonId
    series: HourlySeries
    updated_at: datetime | None = None


@dataclass(frozen=True)
class ToggleAnimations:
    pass


@dataclass(frozen=True)
class LoadFromStorage:
    polygons: tuple[Polygon, ...] | None = None
    color_rules: Mapping[str, Sequence[ColorRule]] | None = None
    selected_data_source: str | None = None
    animations_enabled: bool | None = None


Action: TypeAlias = (
    AddPolygon
    | DeletePolygon
    | UpdatePolygon
    | FocusPolygon
    | SetTime
    | SetColorRules
    | SetDataSource
    | AddDataSource
    | SetWeatherData
    | ToggleAnimations
    | LoadFromStorage
)


def initial_state(config: ZonecastConfig, now: datetime | None = None) -> AppState:
    """Defaults from config, with the last hour selected."""
    if now is None:
        now = utc_now()
    sources = tuple(config.data_sources)
    return AppState(
        selected_time=TimeRange(now - timedelta(hours=1), now),
        color_rules={k: tuple(v) for k, v in config.color_rules.items()},
        data_sources=sources,
        selected_data_source=sources[0].id if sources else "",
    )


def reduce(state: AppState, action: Action) -> AppState:
    if isinstance(action, AddPolygon):
        if state.polygon(action.polygon.id) is not None:
            raise InvalidInput(f"Duplicate polygon id {action.polygon.id!r}")
        return dataclasses.replace(state, polygons=state.polygons + (action.polygon,))

    if isinstance(action, DeletePolygon):
        focused = None if state.focused_polygon_id == action.polygon_id else state.focused_polygon_id
        return dataclasses.replace(
            state,
            polygons=tuple(p for p in state.polygons if p.id != action.polygon_id),
            focused_polygon_id=focused,
        )

    if isinstance(action, UpdatePolygon):
        changes = {}
        if action.label is not None:
            changes["label"] = action.label
        if action.data_source is not None:
            changes["data_source"] = action.data_source
        return _map_polygon(state, action.polygon_id, changes)

    if isinstance(action, FocusPolygon):
        return dataclasses.replace(state, focused_polygon_id=action.polygon_id)

    if isinstance(action, SetTime):
        return dataclasses.replace(state, selected_time=action.time_range)

    if isinstance(action, SetColorRules):
        merged = dict(state.color_rules)
        merged.update({k: tuple(v) for k, v in action.rules.items()})
        return dataclasses.replace(state, color_rules=merged)

    if isinstance(action, SetDataSource):
        return dataclasses.replace(state, selected_data_source=action.source_id)

    if isinstance(action, AddDataSource):
        if any(s.id == action.source.id for s in state.data_sources):
            raise InvalidInput(f"Duplicate data source id {action.source.id!r}")
        return dataclasses.replace(state, data_sources=state.data_sources + (action.source,))

    if isinstance(action, SetWeatherData):
        updated_at = action.updated_at or utc_now()
        return _map_polygon(
            state, action.polygon_id, {"weather": action.series, "last_updated": updated_at}
        )

    if isinstance(action, ToggleAnimations):
        return dataclasses.replace(state, animations_enabled=not state.animations_enabled)

    if isinstance(action, LoadFromStorage):
        changes = {}
        if action.polygons is not None:
            changes["polygons"] = tuple(action.polygons)
        if action.color_rules is not None:
            changes["color_rules"] = {k: tuple(v) for k, v in action.color_rules.items()}
        if action.selected_data_source is not None:
            changes["selected_data_source"] = action.selected_data_source
        if action.animations_enabled is not None:
            changes["animations_enabled"] = action.animations_enabled
        return dataclasses.replace(state, **changes)

    return state


def _map_polygon(state: AppState, polygon_id: PolygonId, changes: dict) -> AppState:
    if not changes:
        return state
    return dataclasses.replace(
        state,
        polygons=tuple(
            dataclasses.replace(p, **changes) if p.id == polygon_id else p
            for p in state.polygons
        ),
    )
