"""Minimal strict schemas for YAML config validation."""

from __future__ import annotations

from hydrant_survey.common.constants import DISPATCH_CHANNELS, LOCATION_PROVIDERS
from hydrant_survey.common.errors import ConfigError

SECTION_KEYS = {
    "station": {"id", "dispatch_number"},
    "area": {"default_label", "locality", "region", "country"},
    "storage": {"key"},
    "location": {"provider", "timeout_seconds", "endpoint", "source_epsg"},
    "dispatch": {"channel", "webhook_url"},
}
REQUIRED_SECTION_KEYS = {
    "station": {"id"},
    "area": {"default_label", "locality", "region", "country"},
    "storage": {"key"},
    "location": {"provider", "timeout_seconds"},
    "dispatch": {"channel"},
}


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _assert_non_empty_text(value, ctx: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{ctx} must be a non-empty string")


def validate_survey_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    if not isinstance(cfg, dict):
        raise ConfigError("survey config must be a mapping")

    top_required = set(SECTION_KEYS)
    _assert_required_keys(cfg, top_required, "survey config")
    _assert_no_unknown_keys(cfg, top_required, "survey config", allow_unknown)

    for section, known in SECTION_KEYS.items():
        if not isinstance(cfg[section], dict):
            raise ConfigError(f"{section} must be a mapping")
        _assert_required_keys(cfg[section], REQUIRED_SECTION_KEYS[section], section)
        _assert_no_unknown_keys(cfg[section], known, section, allow_unknown)

    _assert_non_empty_text(cfg["station"]["id"], "station.id")
    for key in ("default_label", "locality", "region", "country"):
        _assert_non_empty_text(cfg["area"][key], f"area.{key}")
    _assert_non_empty_text(cfg["storage"]["key"], "storage.key")

    location = cfg["location"]
    if location["provider"] not in LOCATION_PROVIDERS:
        raise ConfigError(f"location.provider must be one of: {', '.join(LOCATION_PROVIDERS)}")
    timeout = location["timeout_seconds"]
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        raise ConfigError("location.timeout_seconds must be a positive number")
    if location["provider"] == "http":
        _assert_non_empty_text(location.get("endpoint"), "location.endpoint")

    dispatch = cfg["dispatch"]
    if dispatch["channel"] not in DISPATCH_CHANNELS:
        raise ConfigError(f"dispatch.channel must be one of: {', '.join(DISPATCH_CHANNELS)}")
    if dispatch["channel"] == "whatsapp":
        _assert_non_empty_text(cfg["station"].get("dispatch_number"), "station.dispatch_number")
    if dispatch["channel"] == "webhook":
        _assert_non_empty_text(dispatch.get("webhook_url"), "dispatch.webhook_url")

    return cfg
