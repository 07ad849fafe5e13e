"""Polygon pipeline: centroid, fetch, aggregate and classify for each polygon."""

import asyncio
import logging
import random
from collections.abc import Mapping, Sequence
from datetime import timedelta

from zonecast.aggregation.temporal import round_for_display, summarize_window
from zonecast.classify.rules import evaluate_rules
from zonecast.config.schema import ColorRule, DataSource, ZonecastConfig
from zonecast.geometry.centroid import polygon_centroid
from zonecast.ingest.openmeteo_client import OpenMeteoClient
from zonecast.ingest.response_cache import ResponseCache
from zonecast.ingest.synthetic import SyntheticGenerator
from zonecast.ingest.weather_fetcher import WeatherFetcher
from zonecast.models.common import PolygonId
from zonecast.models.geo import Polygon
from zonecast.models.readings import PolygonReading
from zonecast.models.weather import TimeRange

logger = logging.getLogger(__name__)


def build_fetcher(
    config: ZonecastConfig,
    cache: ResponseCache | None = None,
    rng: random.Random | None = None,
) -> WeatherFetcher:
    """Wire a WeatherFetcher from config. Pass ``cache`` to share one across fetchers."""
    p = config.provider
    client = OpenMeteoClient(
        base_url=p.base_url,
        timeout=p.timeout_seconds,
        max_retries=p.max_retries,
        retry_base_delay=p.retry_base_delay,
        hourly_fields=p.hourly_fields,
        timezone=p.timezone,
    )
    if cache is None:
        cache = ResponseCache(ttl=timedelta(minutes=config.cache.ttl_minutes))
    if rng is None and config.synthetic.seed is not None:
        rng = random.Random(config.synthetic.seed)
    return WeatherFetcher(
        client=client,
        cache=cache,
        generator=SyntheticGenerator(rng=rng),
        fallback_style=config.synthetic.default_style,
        hour_count=config.synthetic.hour_count,
        past_days=p.past_days,
        future_days=p.future_days,
        precision=config.cache.coordinate_precision,
    )


class PolygonEvaluator:
    def __init__(self, config: ZonecastConfig, fetcher: WeatherFetcher):
        self.config = config
        self.fetcher = fetcher

    @classmethod
    def from_config(
        cls,
        config: ZonecastConfig,
        cache: ResponseCache | None = None,
        rng: random.Random | None = None,
    ) -> "PolygonEvaluator":
        return cls(config, build_fetcher(config, cache, rng))

    def resolve_source(self, source_id: str) -> DataSource:
        source = self.config.data_source(source_id)
        if source is None:
            logger.warning("Unknown data source %r, treating it as a mock source", source_id)
            source = DataSource(id=source_id, name=source_id, is_live=False)
        return source

    async def evaluate(
        self,
        polygon: Polygon,
        rules: Sequence[ColorRule],
        time_range: TimeRange | None = None,
        parameter: str | None = None,
    ) -> PolygonReading:
        """Compute the display value and color of one polygon."""
        point = polygon_centroid(polygon)
        source = self.resolve_source(polygon.data_source)
        fetched = await self.fetcher.fetch_with_origin(source, point, time_range)

        agg = self.config.aggregation
        summary = summarize_window(
            fetched.series, time_range, parameter, agg.empty_window_policy, agg.fallback_value
        )
        value = round_for_display(summary.value)
        classification = evaluate_rules(value, rules, self.config.classifier.default_color)
        logger.debug(
            "Polygon %s [%s] value=%.1f reason=%s color=%s origin=%s",
            polygon.id, source.id, value, summary.reason, classification.color, fetched.origin,
        )
        return PolygonReading(
            polygon_id=polygon.id,
            data_source=source.id,
            centroid=point,
            value=value,
            color=classification.color,
            origin=fetched.origin,
            summary=summary,
            classification=classification,
        )

    async def refresh_all(
        self,
        polygons: Sequence[Polygon],
        rules_by_source: Mapping[str, Sequence[ColorRule]],
        time_range: TimeRange | None = None,
        parameter: str | None = None,
    ) -> dict[PolygonId, PolygonReading]:
        """Evaluate all polygons concurrently and join on every one of them.

        A polygon whose evaluation raises is logged and left out of the
        result; the others are unaffected.
        """
        results = await asyncio.gather(
            *(
                self.evaluate(p, rules_by_source.get(p.data_source, []), time_range, parameter)
                for p in polygons
            ),
            return_exceptions=True,
        )
        readings: dict[PolygonId, PolygonReading] = {}
        for polygon, result in zip(polygons, results):
            if isinstance(result, BaseException):
                logger.error("Failed to evaluate polygon %s: %s", polygon.id, result)
                continue
            readings[polygon.id] = result
        return readings
