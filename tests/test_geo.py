"""Unit tests for projection and distance helpers."""

from __future__ import annotations

import pytest

from geospot.models.entities import Position
from geospot.services.geo import haversine_m, project, tile_range, unproject, world_scale


def test_projection_round_trip():
    paris = Position(48.8566, 2.3522)

    x, y = project(paris)
    back = unproject(x, y)

    assert back.lat == pytest.approx(paris.lat, abs=1e-9)
    assert back.lng == pytest.approx(paris.lng, abs=1e-9)


def test_projection_corners():
    assert project(Position(0.0, 0.0)) == pytest.approx((128.0, 128.0))
    x, y = project(Position(89.9, -180.0))
    assert x == pytest.approx(0.0)
    assert y == pytest.approx(0.0, abs=1e-6)


def test_world_scale_doubles_per_level():
    assert world_scale(0) == 1.0
    assert world_scale(13) == 8192.0


def test_tile_range_clamps_to_world():
    columns, rows = tile_range(-10.0, -10.0, 300.0, 300.0, 1)

    assert list(columns) == [0, 1]
    assert list(rows) == [0, 1]


def test_tile_range_for_small_area():
    x, y = project(Position(48.8566, 2.3522))
    columns, rows = tile_range(x, y, x, y, 13)

    assert list(columns) == [4149]
    assert list(rows) == [2818]


def test_haversine_paris_to_london():
    distance = haversine_m(Position(48.8566, 2.3522), Position(51.5074, -0.1278))

    assert distance == pytest.approx(343_500, rel=0.01)
