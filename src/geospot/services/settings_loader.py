"""YAML parsing and serialization for map view settings."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from geospot.models.entities import Position
from geospot.models.settings import MapSettings


class SettingsError(Exception):
    """Raised when a settings document fails validation."""


def load_settings(yaml_path: Path) -> MapSettings:
    """Load and validate a settings YAML file.

    Missing keys keep their defaults, so an empty file yields
    :meth:`MapSettings.default`.
    """
    if not yaml_path.exists():
        raise SettingsError(f"Settings file does not exist: {yaml_path}")

    with yaml_path.open("r", encoding="utf-8") as handle:
        parsed = yaml.safe_load(handle)

    if parsed is None:
        return MapSettings.default()
    return settings_from_dict(parsed)


def settings_from_dict(parsed: Any) -> MapSettings:
    if not isinstance(parsed, dict):
        raise SettingsError("Settings YAML must be a mapping at the top level")

    defaults = MapSettings.default()
    values: Dict[str, Any] = {}

    tiles = parsed.get("tiles", {})
    if not isinstance(tiles, dict):
        raise SettingsError("tiles section must be a mapping")
    values["tile_url"] = _expect_str(tiles, "url", defaults.tile_url)
    values["attribution"] = _expect_str(tiles, "attribution", defaults.attribution)
    values["user_agent"] = _expect_str(tiles, "user_agent", defaults.user_agent)

    camera = parsed.get("camera", {})
    if not isinstance(camera, dict):
        raise SettingsError("camera section must be a mapping")
    if "center" in camera:
        center = _expect_sequence(camera, "center", length=2)
        values["default_center"] = _parse_position(center, "camera.center")
    values["default_zoom"] = _expect_int(camera, "zoom", defaults.default_zoom)
    values["min_zoom"] = _expect_int(camera, "min_zoom", defaults.min_zoom)
    values["max_zoom"] = _expect_int(camera, "max_zoom", defaults.max_zoom)
    values["focus_min_zoom"] = _expect_int(camera, "focus_min_zoom", defaults.focus_min_zoom)
    values["position_tolerance"] = _expect_float(camera, "tolerance", defaults.position_tolerance)
    values["fly_duration_ms"] = _expect_int(camera, "fly_duration_ms", defaults.fly_duration_ms)

    popups = parsed.get("popups", {})
    if not isinstance(popups, dict):
        raise SettingsError("popups section must be a mapping")
    values["description_limit"] = _expect_int(popups, "description_limit", defaults.description_limit)

    nearby = parsed.get("nearby", {})
    if not isinstance(nearby, dict):
        raise SettingsError("nearby section must be a mapping")
    values["nearby_radius_m"] = _expect_int(nearby, "radius_m", defaults.nearby_radius_m)
    values["nearby_limit"] = _expect_int(nearby, "limit", defaults.nearby_limit)

    settings = MapSettings(**values)
    _validate(settings)
    return settings


def settings_to_dict(settings: MapSettings) -> Dict[str, Any]:
    """Convert settings back into a serializable mapping."""
    return {
        "tiles": {
            "url": settings.tile_url,
            "attribution": settings.attribution,
            "user_agent": settings.user_agent,
        },
        "camera": {
            "center": [settings.default_center.lat, settings.default_center.lng],
            "zoom": settings.default_zoom,
            "min_zoom": settings.min_zoom,
            "max_zoom": settings.max_zoom,
            "focus_min_zoom": settings.focus_min_zoom,
            "tolerance": settings.position_tolerance,
            "fly_duration_ms": settings.fly_duration_ms,
        },
        "popups": {"description_limit": settings.description_limit},
        "nearby": {"radius_m": settings.nearby_radius_m, "limit": settings.nearby_limit},
    }


def dump_settings(settings: MapSettings, destination: Optional[Path] = None) -> str:
    """Serialize settings to YAML, optionally writing to disk."""
    yaml_text = yaml.safe_dump(settings_to_dict(settings), sort_keys=False, allow_unicode=True)

    if destination is not None:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(yaml_text, encoding="utf-8")

    return yaml_text


def _validate(settings: MapSettings) -> None:
    if not settings.default_center.is_valid:
        raise SettingsError("camera.center is outside the valid latitude/longitude range")
    if not 0 <= settings.min_zoom <= settings.max_zoom:
        raise SettingsError("camera.min_zoom must be between 0 and camera.max_zoom")
    if not settings.min_zoom <= settings.default_zoom <= settings.max_zoom:
        raise SettingsError("camera.zoom must lie within [min_zoom, max_zoom]")
    if settings.position_tolerance < 0:
        raise SettingsError("camera.tolerance must not be negative")
    if settings.fly_duration_ms < 0:
        raise SettingsError("camera.fly_duration_ms must not be negative")
    if settings.description_limit <= 0:
        raise SettingsError("popups.description_limit must be positive")
    for placeholder in ("{z}", "{x}", "{y}"):
        if placeholder not in settings.tile_url:
            raise SettingsError(f"tiles.url must contain the {placeholder} placeholder")


def _expect_str(mapping: Dict[str, Any], key: str, default: str) -> str:
    if key not in mapping:
        return default
    value = mapping[key]
    if not isinstance(value, str):
        raise SettingsError(f"Field '{key}' must be a string")
    return value


def _expect_int(mapping: Dict[str, Any], key: str, default: int) -> int:
    if key not in mapping:
        return default
    value = mapping[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise SettingsError(f"Field '{key}' must be an integer")
    return value


def _expect_float(mapping: Dict[str, Any], key: str, default: float) -> float:
    if key not in mapping:
        return default
    value = mapping[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SettingsError(f"Field '{key}' must be a number")
    return float(value)


def _expect_sequence(mapping: Dict[str, Any], key: str, length: Optional[int] = None) -> List[Any]:
    value = mapping[key]
    if not isinstance(value, (list, tuple)):
        raise SettingsError(f"Field '{key}' must be a sequence")
    sequence = list(value)
    if length is not None and len(sequence) < length:
        raise SettingsError(f"Field '{key}' must contain at least {length} values")
    return sequence


def _parse_position(raw: List[Any], field_name: str) -> Position:
    lat, lng = raw[0], raw[1]
    if not all(isinstance(value, (int, float)) and not isinstance(value, bool) for value in (lat, lng)):
        raise SettingsError(f"{field_name} values must be numeric")
    return Position(float(lat), float(lng))


__all__ = [
    "SettingsError",
    "dump_settings",
    "load_settings",
    "settings_from_dict",
    "settings_to_dict",
]
