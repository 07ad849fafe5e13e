"""Shared test fixtures."""

import json
import math
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
import yaml

from zonecast.config.defaults import DEFAULT_COLOR_RULES, DEFAULT_DATA_SOURCES
from zonecast.config.schema import ZonecastConfig
from zonecast.models.weather import Channel, HourlySeries

T0 = datetime(2026, 2, 10, 0, 0, 0, tzinfo=UTC)


class FakeClock:
    """Settable clock for cache TTL and generator tests."""

    def __init__(self, now: datetime = T0):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_series() -> Callable[..., HourlySeries]:
    """Build an hourly series starting at T0 from per-channel value lists.

    ``None`` entries become NaN; channels not given are all-NaN.
    """

    def _make(start: datetime = T0, **channels: list[float | None]) -> HourlySeries:
        n = max((len(v) for v in channels.values()), default=0)
        timestamps = tuple(start + timedelta(hours=i) for i in range(n))
        data = {
            Channel(name): tuple(math.nan if v is None else float(v) for v in values)
            for name, values in channels.items()
        }
        return HourlySeries(timestamps=timestamps, channels=data)

    return _make


@pytest.fixture
def default_config() -> ZonecastConfig:
    """Return default ZonecastConfig with default sources and rules."""
    return ZonecastConfig(data_sources=DEFAULT_DATA_SOURCES, color_rules=DEFAULT_COLOR_RULES)


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "cache": {"ttl_minutes": 15},
        "aggregation": {"empty_window_policy": "first_valid"},
        "synthetic": {"default_style": "temperate", "hour_count": 48},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def openmeteo_payload(fixtures_dir: Path) -> dict:
    with open(fixtures_dir / "openmeteo_hourly.json") as f:
        return json.load(f)
