"""YAML config loader with environment overrides and runtime get/set."""

import hashlib
import json
import os
from pathlib import Path
from typing import Any

import yaml

from skycast.config.defaults import API_KEY_ENV
from skycast.config.schema import DashboardConfig


def load_config(path: str | Path | None = None) -> DashboardConfig:
    """Load and validate config from a YAML file.

    A missing or empty file yields the defaults. If no API key is set in
    the YAML, the OPENWEATHER_API_KEY environment variable is used.
    """
    raw: dict[str, Any] = {}
    if path is not None:
        path = Path(path)
        if path.exists():
            with open(path) as f:
                raw = yaml.safe_load(f) or {}

    provider = raw.setdefault("provider", {}) or {}
    raw["provider"] = provider
    if not provider.get("api_key"):
        env_key = os.environ.get(API_KEY_ENV, "")
        if env_key:
            provider["api_key"] = env_key

    return DashboardConfig(**raw)


def config_hash(config: DashboardConfig) -> str:
    """Compute a deterministic SHA256 hash of the config, api key excluded."""
    data = config.model_dump(mode="json")
    data["provider"].pop("api_key", None)
    encoded = json.dumps(data, sort_keys=True).encode()
    return hashlib.sha256(encoded).hexdigest()[:16]


def get_config_value(config: DashboardConfig, dotted_key: str) -> Any:
    """Get a config value by dotted key path. E.g. 'retry.max_retries'."""
    obj: Any = config
    for part in dotted_key.split("."):
        if hasattr(obj, part):
            obj = getattr(obj, part)
        elif isinstance(obj, dict) and part in obj:
            obj = obj[part]
        else:
            raise KeyError(f"Config key not found: {dotted_key}")
    return obj


def set_config_value(
    config: DashboardConfig, dotted_key: str, value: Any
) -> DashboardConfig:
    """Set a config value by dotted key path and re-validate.

    Returns a new DashboardConfig instance.
    """
    data = json.loads(config.model_dump_json())
    parts = dotted_key.split(".")
    target = data
    for part in parts[:-1]:
        if part not in target:
            raise KeyError(f"Config key not found: {dotted_key}")
        target = target[part]
    if parts[-1] not in target:
        raise KeyError(f"Config key not found: {dotted_key}")

    old_value = target[parts[-1]]
    if isinstance(value, str):
        if isinstance(old_value, bool):
            value = value.lower() in ("true", "1", "yes", "on")
        elif isinstance(old_value, int):
            value = int(value)
        elif isinstance(old_value, float):
            value = float(value)
    target[parts[-1]] = value
    return DashboardConfig(**data)


def save_config(config: DashboardConfig, path: str | Path) -> None:
    """Write config back to YAML.

    An API key that came from the environment is not written to the file.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = config.model_dump(mode="json")
    if data["provider"].get("api_key") == os.environ.get(API_KEY_ENV):
        data["provider"].pop("api_key", None)
    with open(path, "w") as f:
        yaml.safe_dump(data, f, sort_keys=False)
