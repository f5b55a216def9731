"""Tests for map settings YAML load/save."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from geospot.models.entities import Position
from geospot.models.settings import MapSettings
from geospot.services.settings_loader import (
    SettingsError,
    dump_settings,
    load_settings,
    settings_from_dict,
)


def test_save_then_load_preserves_settings(tmp_path: Path):
    settings = MapSettings(
        tile_url="https://{s}.tile.example.org/{z}/{x}/{y}.png",
        attribution="Example tiles",
        default_center=Position(51.5074, -0.1278),
        default_zoom=11,
        focus_min_zoom=16,
        position_tolerance=1e-4,
        fly_duration_ms=750,
        description_limit=120,
        nearby_radius_m=5000,
        nearby_limit=10,
    )
    destination = tmp_path / "nested" / "geospot.yaml"

    dump_settings(settings, destination)
    loaded = load_settings(destination)

    assert loaded == settings


def test_empty_file_yields_defaults(tmp_path: Path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")

    assert load_settings(path) == MapSettings.default()


def test_partial_document_keeps_other_defaults():
    settings = settings_from_dict({"camera": {"zoom": 9}})

    assert settings.default_zoom == 9
    assert settings.tile_url == MapSettings.default().tile_url
    assert settings.focus_min_zoom == 15


def test_missing_file_raises(tmp_path: Path):
    with pytest.raises(SettingsError, match="does not exist"):
        load_settings(tmp_path / "nope.yaml")


@pytest.mark.parametrize(
    "document, message",
    [
        ({"camera": {"center": [95.0, 0.0]}}, "camera.center"),
        ({"camera": {"zoom": 30}}, "camera.zoom"),
        ({"camera": {"zoom": "13"}}, "'zoom' must be an integer"),
        ({"camera": {"tolerance": -1}}, "tolerance"),
        ({"tiles": {"url": "https://tiles.example.org/{z}/{x}.png"}}, "{y}"),
        ({"popups": {"description_limit": 0}}, "description_limit"),
        (["not", "a", "mapping"], "mapping"),
    ],
)
def test_invalid_documents_are_rejected(document, message):
    with pytest.raises(SettingsError, match=message.replace("{", r"\{").replace("}", r"\}")):
        settings_from_dict(document)


def test_dump_is_plain_yaml():
    text = dump_settings(MapSettings.default())
    parsed = yaml.safe_load(text)

    assert parsed["camera"]["center"] == [48.8566, 2.3522]
    assert parsed["tiles"]["url"] == "https://tile.openstreetmap.org/{z}/{x}/{y}.png"
