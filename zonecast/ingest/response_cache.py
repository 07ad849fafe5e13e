"""TTL response cache for fetched hourly series."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta

from zonecast.models.common import utc_now
from zonecast.models.geo import Coordinate
from zonecast.models.weather import HourlySeries

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(minutes=30)
DEFAULT_PRECISION = 3


def cache_key(
    source_id: str,
    coordinate: Coordinate,
    parameter: str | None = None,
    precision: int = DEFAULT_PRECISION,
) -> str:
    """Key on source, rounded coordinate and (optionally) parameter."""
    key = f"{source_id}:{coordinate.lat:.{precision}f}:{coordinate.lng:.{precision}f}"
    if parameter:
        key = f"{key}:{parameter}"
    return key


@dataclass(frozen=True)
class CacheEntry:
    key: str
    series: HourlySeries
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    def age_minutes(self, now: datetime) -> float:
        return (now - self.created_at).total_seconds() / 60


@dataclass(frozen=True)
class CacheStats:
    total: int
    valid: int
    expired: int
    keys: list[str]


class ResponseCache:
    """Key to CacheEntry map with an explicit TTL.

    Reads never evict; expired entries stay available as a last resort until
    ``clear_expired`` is called by whoever owns eviction timing. Concurrent
    writers for a key resolve as last-writer-wins.
    """

    def __init__(self, ttl: timedelta = DEFAULT_TTL, clock: Callable[[], datetime] = utc_now):
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def now(self) -> datetime:
        return self._clock()

    def get(self, key: str) -> CacheEntry | None:
        """Return the entry for key, expired or not."""
        return self._entries.get(key)

    def get_fresh(self, key: str) -> CacheEntry | None:
        entry = self._entries.get(key)
        if entry is None or entry.is_expired(self.now()):
            return None
        return entry

    def put(self, key: str, series: HourlySeries) -> CacheEntry:
        created = self.now()
        entry = CacheEntry(key=key, series=series, created_at=created, expires_at=created + self.ttl)
        self._entries[key] = entry
        return entry

    def clear_expired(self) -> int:
        """Drop expired entries. Returns how many were removed."""
        now = self.now()
        expired = [k for k, e in self._entries.items() if e.is_expired(now)]
        for k in expired:
            del self._entries[k]
        if expired:
            logger.info("Evicted %d expired cache entries", len(expired))
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()

    def stats(self) -> CacheStats:
        now = self.now()
        valid = sum(1 for e in self._entries.values() if not e.is_expired(now))
        return CacheStats(
            total=len(self._entries),
            valid=valid,
            expired=len(self._entries) - valid,
            keys=list(self._entries),
        )

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries
