"""Hourly weather series and time window models."""

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

from zonecast.errors import InvalidInput
from zonecast.models.common import parse_timestamp


class Channel(StrEnum):
    TEMPERATURE = "temperature"
    HUMIDITY = "humidity"
    WIND_SPEED = "wind_speed"
    PRESSURE = "pressure"
    PRECIPITATION = "precipitation"


class FetchOrigin(StrEnum):
    CACHE = "CACHE"
    LIVE = "LIVE"
    MOCK = "MOCK"
    STALE_CACHE = "STALE_CACHE"
    SYNTHETIC_FALLBACK = "SYNTHETIC_FALLBACK"


@dataclass(frozen=True)
class HourlySeries:
    """Parallel arrays over an hourly time axis.

    Every channel in ``Channel`` is present and has the same length as
    ``timestamps``; absent readings are NaN. Timestamps ascend strictly.
    """

    timestamps: tuple[datetime, ...]
    channels: dict[Channel, tuple[float, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        n = len(self.timestamps)
        filled: dict[Channel, tuple[float, ...]] = {}
        for channel in Channel:
            values = self.channels.get(channel)
            if values is None:
                filled[channel] = (math.nan,) * n
                continue
            if len(values) != n:
                raise InvalidInput(
                    f"Channel {channel} has {len(values)} values for {n} timestamps"
                )
            filled[channel] = tuple(values)
        for ts in self.timestamps:
            if ts.tzinfo is None:
                raise InvalidInput(f"Series timestamp {ts.isoformat()} is not timezone-aware")
        for prev, cur in zip(self.timestamps, self.timestamps[1:]):
            if cur <= prev:
                raise InvalidInput(f"Timestamps not ascending at {cur.isoformat()}")
        object.__setattr__(self, "timestamps", tuple(self.timestamps))
        object.__setattr__(self, "channels", filled)

    def __len__(self) -> int:
        return len(self.timestamps)

    def values(self, channel: Channel) -> tuple[float, ...]:
        return self.channels[channel]

    @property
    def start(self) -> datetime | None:
        return self.timestamps[0] if self.timestamps else None

    @property
    def end(self) -> datetime | None:
        return self.timestamps[-1] if self.timestamps else None

    def covers(self, time_range: "TimeRange | None") -> bool:
        """True when the series spans the whole window, or no window is selected."""
        if time_range is None or time_range.is_open:
            return True
        if not self.timestamps:
            return False
        return self.start <= time_range.start and time_range.end <= self.end


@dataclass(frozen=True)
class TimeRange:
    start: datetime | None = None
    end: datetime | None = None

    def __post_init__(self) -> None:
        if (self.start is None) != (self.end is None):
            raise InvalidInput("Time range needs both start and end, or neither")
        if self.start is not None and self.end is not None:
            if self.start.tzinfo is None or self.end.tzinfo is None:
                raise InvalidInput("Time range instants must be timezone-aware")
            if self.start > self.end:
                raise InvalidInput(
                    f"Time range start {self.start.isoformat()} is after end "
                    f"{self.end.isoformat()}"
                )

    @property
    def is_open(self) -> bool:
        """True when no window is selected."""
        return self.start is None

    @classmethod
    def from_iso(cls, start: str | None, end: str | None) -> "TimeRange":
        return cls(_parse_bound(start, "start"), _parse_bound(end, "end"))


def _parse_bound(value: str | None, name: str) -> datetime | None:
    if value is None:
        return None
    parsed = parse_timestamp(value)
    if parsed is None:
        raise InvalidInput(f"Unparseable time range {name}: {value!r}")
    return parsed


@dataclass(frozen=True)
class FetchResult:
    series: HourlySeries
    origin: FetchOrigin
    cache_key: str
