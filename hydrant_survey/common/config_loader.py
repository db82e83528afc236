"""Configuration loading and validation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from hydrant_survey.common.errors import ConfigError
from hydrant_survey.common.fs import read_yaml
from hydrant_survey.common.schema import validate_survey_config

CONFIG_FILENAME = "survey.yml"


@dataclass(frozen=True)
class AreaSuffix:
    locality: str
    region: str
    country: str


@dataclass(frozen=True)
class SurveyConfig:
    station_id: str
    dispatch_number: str | None
    default_area_label: str
    suffix: AreaSuffix
    storage_key: str
    location_provider: str
    location_timeout_seconds: float
    location_endpoint: str | None
    location_source_epsg: int
    dispatch_channel: str
    webhook_url: str | None


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _load_yaml_with_overlay(path: Path, overlay_path: Path | None) -> dict:
    if not path.exists():
        raise ConfigError(f"Missing config file: {path}")
    base = read_yaml(path)
    if overlay_path is None or not overlay_path.exists():
        return base
    overlay = read_yaml(overlay_path)
    return _deep_merge(base, overlay)


def build_survey_config(cfg: dict) -> SurveyConfig:
    station = cfg["station"]
    area = cfg["area"]
    location = cfg["location"]
    dispatch = cfg["dispatch"]
    return SurveyConfig(
        station_id=station["id"].strip(),
        dispatch_number=station.get("dispatch_number"),
        default_area_label=area["default_label"].strip(),
        suffix=AreaSuffix(
            locality=area["locality"].strip(),
            region=area["region"].strip(),
            country=area["country"].strip(),
        ),
        storage_key=cfg["storage"]["key"].strip(),
        location_provider=location["provider"],
        location_timeout_seconds=float(location["timeout_seconds"]),
        location_endpoint=location.get("endpoint"),
        location_source_epsg=int(location.get("source_epsg") or 4326),
        dispatch_channel=dispatch["channel"],
        webhook_url=dispatch.get("webhook_url"),
    )


def load_survey_config(
    config_dir: Path,
    *,
    allow_unknown: bool = False,
    overlay_config_dir: Path | None = None,
) -> SurveyConfig:
    overlay_path = None
    if overlay_config_dir is not None:
        overlay_path = overlay_config_dir / CONFIG_FILENAME
    cfg = _load_yaml_with_overlay(config_dir / CONFIG_FILENAME, overlay_path)
    return build_survey_config(validate_survey_config(cfg, allow_unknown=allow_unknown))
