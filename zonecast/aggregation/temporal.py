"""Temporal aggregation: reduce an hourly series over a window to one scalar."""

import math

from zonecast.config.schema import EmptyWindowPolicy
from zonecast.models.readings import WindowReason, WindowSummary
from zonecast.models.weather import Channel, HourlySeries, TimeRange

PARAMETER_ALIASES: dict[str, Channel] = {
    "temperature": Channel.TEMPERATURE,
    "temperature_2m": Channel.TEMPERATURE,
    "humidity": Channel.HUMIDITY,
    "relative_humidity_2m": Channel.HUMIDITY,
    "wind_speed": Channel.WIND_SPEED,
    "windSpeed": Channel.WIND_SPEED,
    "wind_speed_10m": Channel.WIND_SPEED,
    "pressure": Channel.PRESSURE,
    "surface_pressure": Channel.PRESSURE,
    "pressure_msl": Channel.PRESSURE,
    "precipitation": Channel.PRECIPITATION,
}


def select_channel(parameter: str | None) -> Channel:
    """Map a logical parameter name to a channel; unknown names mean temperature."""
    if parameter is None:
        return Channel.TEMPERATURE
    return PARAMETER_ALIASES.get(parameter, Channel.TEMPERATURE)


def is_valid(value: float) -> bool:
    return isinstance(value, (int, float)) and not math.isnan(value)


def summarize_window(
    series: HourlySeries,
    time_range: TimeRange | None,
    parameter: str | None = None,
    policy: EmptyWindowPolicy = EmptyWindowPolicy.FIRST_VALID,
    fallback_value: float = 0.0,
) -> WindowSummary:
    """Aggregate one channel of ``series`` and report how the value was obtained.

    With a window, the mean of valid samples whose timestamps fall in
    [start, end] inclusive. An empty window falls back per ``policy``:
    the first valid sample of the whole series (then ``fallback_value``),
    or ``fallback_value`` directly. Without a window, the latest valid
    sample. Pure: the same inputs always give the same summary.
    """
    channel = select_channel(parameter)
    values = series.values(channel)

    if time_range is None or time_range.is_open:
        for value in reversed(values):
            if is_valid(value):
                return WindowSummary(float(value), channel, 0, WindowReason.LATEST_VALID)
        return WindowSummary(fallback_value, channel, 0, WindowReason.NO_VALID_SAMPLES)

    in_window = [
        v
        for ts, v in zip(series.timestamps, values)
        if time_range.start <= ts <= time_range.end and is_valid(v)
    ]
    if in_window:
        mean = math.fsum(in_window) / len(in_window)
        return WindowSummary(mean, channel, len(in_window), WindowReason.WINDOW_MEAN)

    if policy == EmptyWindowPolicy.FIRST_VALID:
        for value in values:
            if is_valid(value):
                return WindowSummary(float(value), channel, 0, WindowReason.FIRST_VALID_FALLBACK)
        return WindowSummary(fallback_value, channel, 0, WindowReason.NO_VALID_SAMPLES)

    return WindowSummary(fallback_value, channel, 0, WindowReason.CONSTANT_FALLBACK)


def aggregate(
    series: HourlySeries,
    time_range: TimeRange | None,
    parameter: str | None = None,
    policy: EmptyWindowPolicy = EmptyWindowPolicy.FIRST_VALID,
    fallback_value: float = 0.0,
) -> float:
    """Unrounded representative value of ``parameter`` over ``time_range``."""
    return summarize_window(series, time_range, parameter, policy, fallback_value).value


def round_for_display(value: float) -> float:
    """One-decimal rounding applied once, where a value is surfaced."""
    return round(value, 1)
