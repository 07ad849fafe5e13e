"""Common types and helpers shared across models."""

from datetime import UTC, datetime, timedelta, timezone
from typing import TypeAlias

PolygonId: TypeAlias = str
DataSourceId: TypeAlias = str
Color: TypeAlias = str


def utc_now() -> datetime:
    return datetime.now(UTC)


def parse_timestamp(iso_str: str | None, utc_offset_seconds: int = 0) -> datetime | None:
    """Parse an ISO timestamp into an aware datetime.

    Naive timestamps are interpreted at the given UTC offset (UTC by default).
    Returns None for anything unparseable.
    """
    if not iso_str:
        return None
    try:
        dt = datetime.fromisoformat(iso_str)
    except (ValueError, TypeError):
        return None
    if dt.tzinfo is None:
        tz = UTC if utc_offset_seconds == 0 else timezone(timedelta(seconds=utc_offset_seconds))
        dt = dt.replace(tzinfo=tz)
    return dt


def floor_to_hour(dt: datetime) -> datetime:
    return dt.replace(minute=0, second=0, microsecond=0)
