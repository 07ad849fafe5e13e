"""Weather fetcher: cache, live provider and synthetic fallback chain."""

import logging
from datetime import date, timedelta

import httpx

from zonecast.config.schema import DataSource
from zonecast.errors import UpstreamUnavailable
from zonecast.ingest.normalize import normalize_hourly
from zonecast.ingest.openmeteo_client import OpenMeteoClient
from zonecast.ingest.response_cache import DEFAULT_PRECISION, ResponseCache, cache_key
from zonecast.ingest.synthetic import DEFAULT_STYLE, SyntheticGenerator
from zonecast.models.geo import Coordinate
from zonecast.models.weather import FetchOrigin, FetchResult, HourlySeries, TimeRange

logger = logging.getLogger(__name__)

OPEN_METEO_SOURCE_ID = "open-meteo"


class WeatherFetcher:
    def __init__(
        self,
        client: OpenMeteoClient,
        cache: ResponseCache,
        generator: SyntheticGenerator,
        fallback_style: str = DEFAULT_STYLE,
        hour_count: int = 24,
        past_days: int = 15,
        future_days: int = 15,
        precision: int = DEFAULT_PRECISION,
    ):
        self.cache = cache
        self.generator = generator
        self.fallback_style = fallback_style
        self.hour_count = hour_count
        self.past_days = past_days
        self.future_days = future_days
        self.precision = precision
        self.providers: dict[str, OpenMeteoClient] = {OPEN_METEO_SOURCE_ID: client}

    async def fetch(
        self,
        source: DataSource,
        coordinate: Coordinate,
        time_range: TimeRange | None = None,
    ) -> HourlySeries:
        """Return an hourly series for the coordinate, from cache, provider or generator.

        Network and parse failures never propagate: they resolve to a stale
        cache entry or a freshly generated synthetic series.
        """
        result = await self.fetch_with_origin(source, coordinate, time_range)
        return result.series

    async def fetch_with_origin(
        self,
        source: DataSource,
        coordinate: Coordinate,
        time_range: TimeRange | None = None,
    ) -> FetchResult:
        key = cache_key(source.id, coordinate, precision=self.precision)
        fresh = self.cache.get_fresh(key)
        if fresh is not None and (not source.is_live or fresh.series.covers(time_range)):
            return FetchResult(fresh.series, FetchOrigin.CACHE, key)

        if not source.is_live:
            series = self.generator.generate(source.id, coordinate, self.hour_count)
            self.cache.put(key, series)
            return FetchResult(series, FetchOrigin.MOCK, key)

        try:
            series = await self._fetch_live(source, coordinate, time_range)
        except (httpx.HTTPError, httpx.InvalidURL, UpstreamUnavailable, ValueError) as e:
            logger.error("Failed to fetch weather for %s at %s: %s", source.id, key, e)
            return self._fallback(key, coordinate)

        self.cache.put(key, series)
        return FetchResult(series, FetchOrigin.LIVE, key)

    async def _fetch_live(
        self, source: DataSource, coordinate: Coordinate, time_range: TimeRange | None
    ) -> HourlySeries:
        client = self.providers.get(source.id)
        if client is None:
            raise UpstreamUnavailable(f"No provider registered for live source {source.id!r}")
        start_date, end_date = self.date_span(time_range)
        raw = await client.get_hourly(coordinate, start_date, end_date)
        return normalize_hourly(raw)

    def _fallback(self, key: str, coordinate: Coordinate) -> FetchResult:
        stale = self.cache.get(key)
        if stale is not None:
            logger.warning(
                "Using expired cache entry %s (%.0f min old) after fetch error",
                key, stale.age_minutes(self.cache.now()),
            )
            return FetchResult(stale.series, FetchOrigin.STALE_CACHE, key)

        logger.warning("Falling back to synthetic %s data for %s", self.fallback_style, key)
        series = self.generator.generate(self.fallback_style, coordinate, self.hour_count)
        self.cache.put(key, series)
        return FetchResult(series, FetchOrigin.SYNTHETIC_FALLBACK, key)

    def date_span(self, time_range: TimeRange | None) -> tuple[date, date]:
        """Provider date span: today -past_days .. +future_days, widened to the window."""
        today = self.cache.now().date()
        start = today - timedelta(days=self.past_days)
        end = today + timedelta(days=self.future_days)
        if time_range is not None and not time_range.is_open:
            start = min(start, time_range.start.date())
            end = max(end, time_range.end.date())
        return start, end
