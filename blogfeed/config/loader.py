"""YAML configuration loader with environment variable overrides.

Configuration is loaded in layers (later layers override earlier):

  1. config/config.yaml  — static defaults checked into the repo
  2. .env file           — local developer overrides (not committed)
  3. Environment vars    — set at deploy time

``load_config`` reads the YAML file first, then deep-merges the
Settings-derived values on top.
"""

from pathlib import Path

import yaml

from blogfeed.config.settings import Settings


def load_config(path: str = "config/config.yaml", settings: Settings | None = None) -> dict:
    """Load YAML config and merge with environment-based Settings.

    Environment variables (via Settings) override YAML values where keys overlap.

    Args:
        path: Path to the YAML configuration file.
        settings: Settings to merge; a fresh ``Settings()`` when omitted.

    Returns:
        Fully resolved configuration dictionary.
    """
    config_path = Path(path)
    if config_path.exists():
        with open(config_path) as f:
            yaml_config = yaml.safe_load(f) or {}
    else:
        yaml_config = {}

    settings = settings or Settings()
    env_overrides = {
        "app": {
            "host": settings.app_host,
            "port": settings.app_port,
            "env": settings.app_env,
        },
        "provider": {
            "base_url": settings.posts_api_base_url,
            "path": settings.posts_api_path,
            "http_timeout": settings.http_timeout_seconds,
        },
        "aggregation": {
            "cache_ttl": settings.cache_ttl_seconds,
            "fetch_timeout": settings.fetch_timeout_seconds,
            "deadline": settings.aggregate_deadline_seconds,
            "max_concurrent_fetches": settings.max_concurrent_fetches,
        },
        "logging": {
            "level": settings.log_level,
        },
    }

    _deep_merge(yaml_config, env_overrides)
    return yaml_config


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
