"""Aggregation, classification and per-polygon reading models."""

from dataclasses import dataclass
from enum import StrEnum

from zonecast.models.common import Color, DataSourceId, PolygonId
from zonecast.models.geo import Coordinate
from zonecast.models.weather import Channel, FetchOrigin


class WindowReason(StrEnum):
    WINDOW_MEAN = "WINDOW_MEAN"
    FIRST_VALID_FALLBACK = "FIRST_VALID_FALLBACK"
    CONSTANT_FALLBACK = "CONSTANT_FALLBACK"
    LATEST_VALID = "LATEST_VALID"
    NO_VALID_SAMPLES = "NO_VALID_SAMPLES"


class ClassifyReason(StrEnum):
    MATCHED = "MATCHED"
    NO_MATCH = "NO_MATCH"
    NO_RULES = "NO_RULES"


@dataclass(frozen=True)
class WindowSummary:
    value: float
    channel: Channel
    sample_count: int  # valid in-window samples that fed the mean
    reason: WindowReason

    @property
    def is_data_gap(self) -> bool:
        return self.reason not in (WindowReason.WINDOW_MEAN, WindowReason.LATEST_VALID)


@dataclass(frozen=True)
class Classification:
    color: Color
    reason: ClassifyReason
    rule_index: int | None = None
    label: str | None = None


@dataclass(frozen=True)
class PolygonReading:
    polygon_id: PolygonId
    data_source: DataSourceId
    centroid: Coordinate
    value: float  # rounded for display
    color: Color
    origin: FetchOrigin
    summary: WindowSummary
    classification: Classification
