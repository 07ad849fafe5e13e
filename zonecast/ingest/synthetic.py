"""Synthetic hourly weather generator for mock sources and fetch fallback."""

import logging
import math
import random
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta

from zonecast.errors import InvalidInput
from zonecast.models.common import floor_to_hour, utc_now
from zonecast.models.geo import Coordinate
from zonecast.models.weather import Channel, HourlySeries

logger = logging.getLogger(__name__)

DEFAULT_STYLE = "temperate"

# Physically plausible bounds applied after noise.
TEMPERATURE_RANGE = (-90.0, 60.0)
HUMIDITY_RANGE = (0.0, 100.0)
PRESSURE_RANGE = (870.0, 1085.0)


@dataclass(frozen=True)
class ClimateStyle:
    temp_base: float
    temp_amplitude: float
    temp_noise: float  # half-width of uniform noise
    humidity_base: float
    humidity_amplitude: float
    humidity_period: float  # hours
    humidity_noise: float
    wind_base: float
    wind_spread: float
    precip_chance: float
    precip_max: float
    pressure_base: float
    pressure_amplitude: float
    pressure_noise: float


STYLES: dict[str, ClimateStyle] = {
    "tropical": ClimateStyle(
        temp_base=28.0, temp_amplitude=5.0, temp_noise=2.0,
        humidity_base=75.0, humidity_amplitude=15.0, humidity_period=16.0, humidity_noise=5.0,
        wind_base=8.0, wind_spread=4.0,
        precip_chance=0.3, precip_max=5.0,
        pressure_base=1010.0, pressure_amplitude=2.0, pressure_noise=1.5,
    ),
    "temperate": ClimateStyle(
        temp_base=15.0, temp_amplitude=8.0, temp_noise=3.0,
        humidity_base=55.0, humidity_amplitude=20.0, humidity_period=12.0, humidity_noise=7.5,
        wind_base=6.0, wind_spread=5.0,
        precip_chance=0.2, precip_max=3.0,
        pressure_base=1015.0, pressure_amplitude=3.0, pressure_noise=3.0,
    ),
}


def resolve_style(style_id: str | None) -> tuple[str, ClimateStyle]:
    """Map a style or data source id ("tropical", "mock-tropical") to a style.

    Unknown ids fall back to DEFAULT_STYLE.
    """
    name = (style_id or "").strip().lower().removeprefix("mock-")
    if name not in STYLES:
        logger.debug("Unknown synthetic style %r, using %s", style_id, DEFAULT_STYLE)
        name = DEFAULT_STYLE
    return name, STYLES[name]


def location_offset(coordinate: Coordinate) -> float:
    """Small, bounded, deterministic temperature offset for a location."""
    lat_term = _clamp((coordinate.lat - 20.0) * 0.1, -3.0, 3.0)
    lng_term = math.sin(math.radians(coordinate.lng))
    return lat_term + lng_term


class SyntheticGenerator:
    def __init__(
        self,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.rng = rng if rng is not None else random.Random()
        self._clock = clock

    def generate(self, style_id: str | None, coordinate: Coordinate, hour_count: int = 24) -> HourlySeries:
        """Produce ``hour_count`` hourly samples ending at the current hour, oldest first."""
        if hour_count < 0:
            raise InvalidInput(f"hour_count must be non-negative, got {hour_count}")
        _, style = resolve_style(style_id)
        end = floor_to_hour(self._clock())
        offset = location_offset(coordinate)

        timestamps: list[datetime] = []
        channels: dict[Channel, list[float]] = {c: [] for c in Channel}
        for i in range(hour_count):
            ts = end - timedelta(hours=hour_count - 1 - i)
            timestamps.append(ts)
            sample = self._sample(style, ts.hour, offset)
            for channel, value in sample.items():
                channels[channel].append(value)

        return HourlySeries(
            timestamps=tuple(timestamps),
            channels={c: tuple(v) for c, v in channels.items()},
        )

    def _sample(self, style: ClimateStyle, hour: int, offset: float) -> dict[Channel, float]:
        rng = self.rng
        # Diurnal cycle peaks mid-afternoon (15:00).
        phase = 2 * math.pi * (hour - 9) / 24
        temperature = (
            style.temp_base
            + style.temp_amplitude * math.sin(phase)
            + rng.uniform(-style.temp_noise, style.temp_noise)
            + offset
        )
        humidity = (
            style.humidity_base
            + style.humidity_amplitude * math.sin(2 * math.pi * hour / style.humidity_period)
            + rng.uniform(-style.humidity_noise, style.humidity_noise)
        )
        wind = style.wind_base + rng.random() * style.wind_spread
        precipitation = rng.random() * style.precip_max if rng.random() < style.precip_chance else 0.0
        pressure = (
            style.pressure_base
            - style.pressure_amplitude * math.sin(phase)
            + rng.uniform(-style.pressure_noise, style.pressure_noise)
        )
        return {
            Channel.TEMPERATURE: round(_clamp(temperature, *TEMPERATURE_RANGE), 1),
            Channel.HUMIDITY: float(round(_clamp(humidity, *HUMIDITY_RANGE))),
            Channel.WIND_SPEED: round(max(0.0, wind), 1),
            Channel.PRESSURE: round(_clamp(pressure, *PRESSURE_RANGE), 1),
            Channel.PRECIPITATION: round(max(0.0, precipitation), 1),
        }


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
