# src/arnav/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/arnav/config/defaults.yaml`, then optionally overridden by:
- an external YAML file via `ARNAV_CONFIG_PATH` (replaces the packaged defaults)
- environment variables (e.g., `FOURSQUARE_CLIENT_ID`, `FOURSQUARE_CLIENT_SECRET`)

Design rule:
- Search radius, marker palette and API credentials live in config and are handed to
  the places client / planner at construction time, never read as globals by the core.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from arnav.core.env import load_dotenv_if_present


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `arnav.config`."""
    text = resources.files("arnav.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "ARNav"
    http_timeout_seconds: float = 15
    log_level: str = "INFO"


class CacheSettings(BaseModel):
    enabled: bool = True
    dir: str = ".cache/arnav"
    default_ttl_seconds: int = 60 * 60


class FoursquareSettings(BaseModel):
    base_url: str = "https://api.foursquare.com/v2/venues/search"
    version: str = "20300101"
    intent: str = "checkin"
    limit: int = Field(10, ge=1, le=50)
    cache_ttl_seconds: int = 300
    client_id: str | None = None
    client_secret: str | None = None


class PlacesSettings(BaseModel):
    foursquare: FoursquareSettings = Field(default_factory=FoursquareSettings)


class ArSettings(BaseModel):
    search_radius_m: int = Field(300, gt=0)
    gps_min_distance_m: float = 5
    position_min_accuracy_m: float = 100
    marker_colors: list[str] = Field(
        default_factory=lambda: ["#FF0000", "#00FF00", "#0000FF", "#FFFF00", "#FF00FF", "#00FFFF"],
        min_length=1,
    )


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    places: PlacesSettings = Field(default_factory=PlacesSettings)
    ar: ArSettings = Field(default_factory=ArSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload.

    Note: the whitelist is kept small on purpose; everything else goes through YAML.
    """
    load_dotenv_if_present()
    data = dict(data)
    cache_dir = os.getenv("ARNAV_CACHE_DIR")
    if cache_dir:
        data.setdefault("cache", {})["dir"] = cache_dir

    log_level = os.getenv("ARNAV_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    fsq_id = os.getenv("FOURSQUARE_CLIENT_ID")
    fsq_secret = os.getenv("FOURSQUARE_CLIENT_SECRET")
    if fsq_id:
        data.setdefault("places", {}).setdefault("foursquare", {})["client_id"] = fsq_id
    if fsq_secret:
        data.setdefault("places", {}).setdefault("foursquare", {})["client_secret"] = fsq_secret

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("ARNAV_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
