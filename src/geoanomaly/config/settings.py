# src/geoanomaly/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/geoanomaly/config/defaults.yaml`, then optionally overridden by:
- an external YAML file via `GEOANOMALY_CONFIG_PATH`
- environment variables (`GEOANOMALY_LOG_LEVEL`, `GEOANOMALY_THRESHOLD`, `GEOANOMALY_UNIT`)

Design rule:
- Tuning knobs live in YAML, not hard-coded in detector logic.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field

from geoanomaly.core.env import load_dotenv_if_present
from geoanomaly.core.geo import normalize_unit


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `geoanomaly.config`."""
    text = resources.files("geoanomaly.config").joinpath(filename).read_text(encoding="utf-8")
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
    name: str = "geoanomaly"
    log_level: str = "INFO"


class DetectorSettings(BaseModel):
    threshold: float = Field(3.0, gt=0)
    unit: Literal["kilometers", "miles"] = "kilometers"
    std_convention: Literal["population", "sample"] = "population"
    coordinate_bounds: Literal["loose", "strict"] = "loose"


class LoaderSettings(BaseModel):
    csv_delimiter: str = Field(",", min_length=1, max_length=1)
    encoding: str = "utf-8"


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    detector: DetectorSettings = Field(default_factory=DetectorSettings)
    loader: LoaderSettings = Field(default_factory=LoaderSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload.

    Note: the whitelist is small on purpose; anything else belongs in YAML.
    """
    load_dotenv_if_present()
    data = dict(data)

    log_level = os.getenv("GEOANOMALY_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    threshold = os.getenv("GEOANOMALY_THRESHOLD")
    if threshold:
        data.setdefault("detector", {})["threshold"] = threshold

    unit = os.getenv("GEOANOMALY_UNIT")
    if unit:
        # Unknown names pass through so validation reports them.
        data.setdefault("detector", {})["unit"] = normalize_unit(unit) or unit.strip().lower()

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("GEOANOMALY_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
