# src/gofloaters/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/gofloaters/config/defaults.yaml`, then optionally overridden by:
- an external YAML file via `GOFLOATERS_CONFIG_PATH`
- a small whitelist of environment variables (see `_apply_env_overrides`)

Design rule:
- Filter sentinels, the default location and upstream URLs live in YAML, not in
  business logic.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field

from gofloaters.core.env import load_dotenv_if_present
from gofloaters.domain.models import FilterCriteria, FilterLimits, ReferencePoint


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `gofloaters.config`."""
    text = resources.files("gofloaters.config").joinpath(filename).read_text(encoding="utf-8")
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
    name: str = "GoFloaters Search"
    http_timeout_seconds: float = 15
    log_level: str = "INFO"


class CacheSettings(BaseModel):
    enabled: bool = True
    dir: str = ".cache/gofloaters"
    default_ttl_seconds: int = 300


class UpstreamSettings(BaseModel):
    base_url: str = "https://gofloaters.web.app/spaces/nearby"
    user_agent: str = "GoFloaters-Search-App/1.0"
    space_sub_type: str = "meetingSpace"
    cache_ttl_seconds: int = 300


class LocationSettings(BaseModel):
    default_name: str = "Koramangala, Bengaluru"
    default_lat: float = Field(12.9304278, ge=-90, le=90)
    default_lng: float = Field(77.678404, ge=-180, le=180)

    def default_reference_point(self) -> ReferencePoint:
        return ReferencePoint(
            lat=self.default_lat, lng=self.default_lng, name=self.default_name, source="default"
        )


class FacilityOption(BaseModel):
    id: str
    label: str


class FilterSettings(BaseModel):
    max_price: float = Field(5000, gt=0)
    max_capacity: int = Field(20, gt=0)
    max_distance_km: float = Field(50, gt=0)
    price_step: int = 50
    default_min_capacity: int = Field(1, ge=0)
    default_sort_by: Literal["distance", "price", "rating", "capacity"] = "distance"
    default_sort_order: Literal["asc", "desc"] = "asc"
    facility_options: list[FacilityOption] = Field(default_factory=list)

    def limits(self) -> FilterLimits:
        return FilterLimits(
            max_price=float(self.max_price),
            max_capacity=int(self.max_capacity),
            max_distance_km=float(self.max_distance_km),
        )

    def default_criteria(self) -> FilterCriteria:
        """Criteria the UI starts with: every range at its "unbounded" sentinel."""
        return FilterCriteria(
            price_range=(0, float(self.max_price)),
            capacity_range=(int(self.default_min_capacity), int(self.max_capacity)),
            max_distance_km=float(self.max_distance_km),
            sort_key=self.default_sort_by,
            sort_direction=self.default_sort_order,
        )


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    upstream: UpstreamSettings = Field(default_factory=UpstreamSettings)
    location: LocationSettings = Field(default_factory=LocationSettings)
    filters: FilterSettings = Field(default_factory=FilterSettings)


# env var -> (section, field)
_ENV_OVERRIDES = {
    "GOFLOATERS_CACHE_DIR": ("cache", "dir"),
    "GOFLOATERS_LOG_LEVEL": ("app", "log_level"),
    "GOFLOATERS_UPSTREAM_URL": ("upstream", "base_url"),
}


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay the whitelisted environment variables onto a raw settings mapping."""
    load_dotenv_if_present()
    data = dict(data)
    for env_name, (section, field) in _ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value:
            data[section] = {**(data.get(section) or {}), field: value}
    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("GOFLOATERS_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
