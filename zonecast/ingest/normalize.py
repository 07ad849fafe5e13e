"""Normalization of provider hourly responses into HourlySeries."""

import logging
import math
from typing import Any

from zonecast.errors import UpstreamUnavailable
from zonecast.models.common import parse_timestamp
from zonecast.models.weather import Channel, HourlySeries

logger = logging.getLogger(__name__)

# Provider field names accepted for each channel, in order of preference.
FIELD_ALIASES: dict[Channel, tuple[str, ...]] = {
    Channel.TEMPERATURE: ("temperature_2m", "temperature"),
    Channel.HUMIDITY: ("relative_humidity_2m", "humidity"),
    Channel.WIND_SPEED: ("wind_speed_10m", "windspeed_10m", "wind_speed"),
    Channel.PRESSURE: ("surface_pressure", "pressure_msl", "pressure"),
    Channel.PRECIPITATION: ("precipitation",),
}


def normalize_hourly(raw: Any) -> HourlySeries:
    """Map an Open-Meteo style document onto the fixed internal schema.

    Missing channel arrays degrade to all-NaN, short arrays are padded with
    NaN, and null or non-numeric entries become NaN. Rows whose timestamp
    cannot be parsed are dropped. Only a non-object document is rejected.
    """
    if not isinstance(raw, dict):
        raise UpstreamUnavailable(f"Unexpected response type {type(raw).__name__}")

    hourly = raw.get("hourly")
    if not isinstance(hourly, dict):
        hourly = {}
    offset = raw.get("utc_offset_seconds")
    offset = offset if isinstance(offset, int) and not isinstance(offset, bool) else 0

    times = _as_list(hourly.get("time"))
    arrays = {channel: _pick_array(hourly, aliases) for channel, aliases in FIELD_ALIASES.items()}

    rows: dict = {}
    dropped = 0
    for i, time_str in enumerate(times):
        ts = parse_timestamp(time_str, offset) if isinstance(time_str, str) else None
        if ts is None:
            dropped += 1
            continue
        rows[ts] = {channel: _value_at(values, i) for channel, values in arrays.items()}
    if dropped:
        logger.warning("Dropped %d hourly rows with unparseable timestamps", dropped)

    timestamps = sorted(rows)
    channels = {
        channel: tuple(rows[ts][channel] for ts in timestamps) for channel in FIELD_ALIASES
    }
    return HourlySeries(timestamps=tuple(timestamps), channels=channels)


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _pick_array(hourly: dict, aliases: tuple[str, ...]) -> list:
    for key in aliases:
        if key in hourly:
            return _as_list(hourly[key])
    return []


def _value_at(values: list, index: int) -> float:
    if index >= len(values):
        return math.nan
    return to_float(values[index])


def to_float(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return math.nan
    result = float(value)
    return result if math.isfinite(result) else math.nan
