"""Polygon weather API: FastAPI backend serving evaluations, rules and cache controls."""

import math
from datetime import timedelta
from pathlib import Path

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from zonecast.config.loader import load_config
from zonecast.config.schema import ColorRule, ZonecastConfig
from zonecast.errors import InvalidInput
from zonecast.ingest.response_cache import ResponseCache
from zonecast.models.weather import TimeRange
from zonecast.pipeline.polygon_pipeline import PolygonEvaluator
from zonecast.state.snapshot import PolygonRecord, to_polygon

CONFIG_PATH = Path(__file__).parent.parent / "configs" / "default.yaml"


class TimeRangeBody(BaseModel):
    start: str | None = None
    end: str | None = None


class EvaluateRequest(BaseModel):
    model_config = {"populate_by_name": True}

    polygons: list[PolygonRecord]
    time_range: TimeRangeBody = Field(default_factory=TimeRangeBody, alias="timeRange")
    parameter: str | None = None


def create_app(config: ZonecastConfig) -> FastAPI:
    app = FastAPI(title="Zonecast", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    cache = ResponseCache(ttl=timedelta(minutes=config.cache.ttl_minutes))
    evaluator = PolygonEvaluator.from_config(config, cache=cache)
    rules: dict[str, list[ColorRule]] = {k: list(v) for k, v in config.color_rules.items()}

    # ── Data endpoints ──────────────────────────────────────────────

    @app.get("/api/sources")
    def get_sources():
        return [s.model_dump(by_alias=True) for s in config.data_sources]

    @app.get("/api/rules")
    def get_rules():
        return {
            source_id: [r.model_dump(by_alias=True, exclude_none=True) for r in source_rules]
            for source_id, source_rules in rules.items()
        }

    @app.put("/api/rules/{source_id}")
    def put_rules(source_id: str, new_rules: list[ColorRule]):
        """Replace one source's ordered rule list. Order is kept as given."""
        rules[source_id] = list(new_rules)
        return {"status": "updated", "source": source_id, "count": len(new_rules)}

    @app.post("/api/evaluate")
    async def evaluate(req: EvaluateRequest):
        try:
            polygons = [to_polygon(r) for r in req.polygons]
            time_range = TimeRange.from_iso(req.time_range.start, req.time_range.end)
        except InvalidInput as e:
            raise HTTPException(422, str(e)) from e

        readings = await evaluator.refresh_all(polygons, rules, time_range, req.parameter)
        out = []
        for polygon in polygons:
            r = readings.get(polygon.id)
            if r is None:
                continue
            out.append({
                "polygonId": r.polygon_id,
                "dataSource": r.data_source,
                "centroid": r.centroid.as_pair(),
                "value": r.value if math.isfinite(r.value) else None,
                "color": r.color,
                "label": r.classification.label,
                "origin": r.origin.value,
                "reason": r.summary.reason.value,
                "sampleCount": r.summary.sample_count,
            })
        return {"readings": out}

    # ── Cache endpoints ─────────────────────────────────────────────

    @app.get("/api/cache")
    def get_cache_stats():
        stats = cache.stats()
        return {"total": stats.total, "valid": stats.valid, "expired": stats.expired, "keys": stats.keys}

    @app.post("/api/cache/clear-expired")
    def clear_expired():
        return {"removed": cache.clear_expired()}

    @app.get("/api/health")
    def get_health():
        return {"status": "ok", "sources": len(config.data_sources), "cached": len(cache)}

    return app


app = create_app(load_config(CONFIG_PATH))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8777)
