"""YAML config loader with hashing and runtime get/set."""

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from zonecast.config.defaults import DEFAULT_COLOR_RULES, DEFAULT_DATA_SOURCES
from zonecast.config.schema import ZonecastConfig


def load_config(path: str | Path | None = None) -> ZonecastConfig:
    """Load and validate config from a YAML file.

    A missing path or file yields the defaults. Data sources and color rules
    absent from the YAML are filled from DEFAULT_DATA_SOURCES and
    DEFAULT_COLOR_RULES.
    """
    raw: dict[str, Any] = {}
    if path is not None and Path(path).exists():
        with open(path) as f:
            raw = yaml.safe_load(f) or {}

    if not raw.get("data_sources"):
        raw["data_sources"] = [s.model_dump() for s in DEFAULT_DATA_SOURCES]
    if not raw.get("color_rules"):
        raw["color_rules"] = {
            source_id: [r.model_dump() for r in rules]
            for source_id, rules in DEFAULT_COLOR_RULES.items()
        }

    return ZonecastConfig(**raw)


def config_hash(config: ZonecastConfig) -> str:
    """Compute a deterministic SHA256 hash of the config."""
    data = config.model_dump_json(indent=None)
    return hashlib.sha256(data.encode()).hexdigest()[:16]


def get_config_value(config: ZonecastConfig, dotted_key: str) -> Any:
    """Get a config value by dotted key path. E.g. 'cache.ttl_minutes'."""
    parts = dotted_key.split(".")
    obj: Any = config
    for part in parts:
        if isinstance(obj, list):
            obj = obj[int(part)]
        elif isinstance(obj, dict):
            obj = obj[part]
        elif hasattr(obj, part):
            obj = getattr(obj, part)
        else:
            raise KeyError(f"Config key not found: {dotted_key}")
    return obj


def set_config_value(config: ZonecastConfig, dotted_key: str, value: Any) -> ZonecastConfig:
    """Set a config value by dotted key path and re-validate.

    Returns a new ZonecastConfig instance.
    """
    data = json.loads(config.model_dump_json())
    parts = dotted_key.split(".")
    target = data
    for part in parts[:-1]:
        target = target[int(part)] if isinstance(target, list) else target[part]
    old_value = target.get(parts[-1])
    if isinstance(old_value, bool) and isinstance(value, str):
        value = value.lower() in ("1", "true", "yes", "on")
    elif isinstance(old_value, int) and isinstance(value, str):
        value = int(value)
    elif isinstance(old_value, float) and isinstance(value, str):
        value = float(value)
    target[parts[-1]] = value
    return ZonecastConfig(**data)
