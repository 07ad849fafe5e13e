"""CLI entry point for the polygon weather classification engine."""

import argparse
import asyncio
import json
import logging
import random
import uuid
from pathlib import Path

from zonecast.config.loader import get_config_value, load_config, set_config_value
from zonecast.config.schema import ZonecastConfig
from zonecast.errors import InvalidInput
from zonecast.ingest.synthetic import SyntheticGenerator
from zonecast.models.geo import Coordinate, Polygon
from zonecast.models.weather import TimeRange
from zonecast.pipeline.polygon_pipeline import PolygonEvaluator
from zonecast.state.reducer import initial_state, reduce
from zonecast.state.snapshot import load_action, series_to_points

DEFAULT_CONFIG = "configs/default.yaml"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="zonecast",
        description="Color map polygons by aggregated weather and threshold rules",
    )
    parser.add_argument("--config", default=DEFAULT_CONFIG, help="Config YAML path")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command")

    # evaluate
    eval_p = sub.add_parser("evaluate", help="Evaluate one polygon")
    eval_p.add_argument(
        "--coords", required=True, help='Vertices as "lat,lng;lat,lng;lat,lng"'
    )
    eval_p.add_argument("--source", default=None, help="Data source id")
    eval_p.add_argument("--parameter", default=None, help="Parameter name")
    eval_p.add_argument("--start", default=None, help="Window start (ISO)")
    eval_p.add_argument("--end", default=None, help="Window end (ISO)")

    # refresh
    refresh_p = sub.add_parser("refresh", help="Evaluate every polygon of a saved state")
    refresh_p.add_argument("state", help="Persisted state JSON path")
    refresh_p.add_argument("--parameter", default=None)
    refresh_p.add_argument("--start", default=None)
    refresh_p.add_argument("--end", default=None)

    # generate
    gen_p = sub.add_parser("generate", help="Print a synthetic hourly series")
    gen_p.add_argument("--style", default="temperate")
    gen_p.add_argument("--lat", type=float, required=True)
    gen_p.add_argument("--lng", type=float, required=True)
    gen_p.add_argument("--hours", type=int, default=None, help="Defaults to synthetic.hour_count")

    # sources / rules
    sub.add_parser("sources", help="List data sources")
    rules_p = sub.add_parser("rules", help="List color rules")
    rules_p.add_argument("--source", default=None)

    # config show / config set
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")
    set_p = config_sub.add_parser("set", help="Set a config value")
    set_p.add_argument("keyvalue", help="key=value to set")

    # serve
    serve_p = sub.add_parser("serve", help="Run the HTTP API")
    serve_p.add_argument("--host", default="127.0.0.1")
    serve_p.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)

    try:
        if args.command == "evaluate":
            return _cmd_evaluate(config, args)
        elif args.command == "refresh":
            return _cmd_refresh(config, args)
        elif args.command == "generate":
            return _cmd_generate(config, args)
        elif args.command == "sources":
            return _cmd_sources(config)
        elif args.command == "rules":
            return _cmd_rules(config, args)
        elif args.command == "config":
            return _cmd_config(config, args)
        elif args.command == "serve":
            return _cmd_serve(config, args)
    except InvalidInput as e:
        print(f"Error: {e}")
        return 2

    parser.print_help()
    return 1


def _parse_coords(text: str) -> tuple[Coordinate, ...]:
    vertices = []
    for chunk in text.split(";"):
        chunk = chunk.strip()
        if not chunk:
            continue
        parts = chunk.split(",")
        if len(parts) != 2:
            raise InvalidInput(f"Bad vertex {chunk!r}, expected lat,lng")
        try:
            lat, lng = float(parts[0]), float(parts[1])
        except ValueError as e:
            raise InvalidInput(f"Bad vertex {chunk!r}") from e
        vertices.append(Coordinate(lat, lng))
    return tuple(vertices)


def _cmd_evaluate(config: ZonecastConfig, args) -> int:
    source_id = args.source or (config.data_sources[0].id if config.data_sources else "")
    polygon = Polygon(
        id=str(uuid.uuid4()),
        vertices=_parse_coords(args.coords),
        data_source=source_id,
        label="cli",
    )
    time_range = TimeRange.from_iso(args.start, args.end)
    evaluator = PolygonEvaluator.from_config(config)
    reading = asyncio.run(
        evaluator.evaluate(polygon, config.color_rules.get(source_id, []), time_range, args.parameter)
    )
    c = reading.centroid
    print(f"Source: {reading.data_source} | Origin: {reading.origin}")
    print(f"Centroid: {c.lat:.4f}, {c.lng:.4f}")
    print(f"Value: {reading.value:.1f} ({reading.summary.reason}, {reading.summary.channel})")
    label = f" [{reading.classification.label}]" if reading.classification.label else ""
    print(f"Color: {reading.color}{label}")
    return 0


def _cmd_refresh(config: ZonecastConfig, args) -> int:
    state = reduce(initial_state(config), load_action(Path(args.state).read_text()))
    time_range = TimeRange.from_iso(args.start, args.end)
    evaluator = PolygonEvaluator.from_config(config)
    readings = asyncio.run(
        evaluator.refresh_all(state.polygons, state.color_rules, time_range, args.parameter)
    )
    for polygon in state.polygons:
        r = readings.get(polygon.id)
        if r is None:
            print(f"  {polygon.label or polygon.id}: unavailable")
            continue
        print(f"  {polygon.label or polygon.id}: {r.value:.1f} -> {r.color} ({r.origin})")
    return 0 if len(readings) == len(state.polygons) else 1


def _cmd_generate(config: ZonecastConfig, args) -> int:
    seed = config.synthetic.seed
    generator = SyntheticGenerator(rng=random.Random(seed) if seed is not None else None)
    hours = args.hours if args.hours is not None else config.synthetic.hour_count
    series = generator.generate(args.style, Coordinate(args.lat, args.lng), hours)
    print(json.dumps(series_to_points(series), indent=2))
    return 0


def _cmd_sources(config: ZonecastConfig) -> int:
    for s in config.data_sources:
        kind = "live" if s.is_live else "mock"
        print(f"{s.id:<16} {kind:<5} {s.name} ({', '.join(s.parameters)})")
    return 0


def _cmd_rules(config: ZonecastConfig, args) -> int:
    for source_id, rules in config.color_rules.items():
        if args.source and source_id != args.source:
            continue
        print(source_id)
        for r in rules:
            label = f"  {r.label}" if r.label else ""
            print(f"  {r.operator:<2} {r.threshold:g} {r.color}{label}")
    return 0


def _cmd_config(config: ZonecastConfig, args) -> int:
    if args.config_command == "show":
        print(config.model_dump_json(indent=2))
        return 0
    elif args.config_command == "set":
        kv = args.keyvalue
        if "=" not in kv:
            print("Error: use key=value format")
            return 1
        key, value = kv.split("=", 1)
        try:
            new_config = set_config_value(config, key.strip(), value.strip())
            print(f"Set {key} = {get_config_value(new_config, key.strip())}")
            return 0
        except Exception as e:
            print(f"Error: {e}")
            return 1
    else:
        print("Use: config show | config set key=value")
        return 1


def _cmd_serve(config: ZonecastConfig, args) -> int:
    import uvicorn

    from zonecast.dashboard import create_app

    uvicorn.run(create_app(config), host=args.host, port=args.port)
    return 0
