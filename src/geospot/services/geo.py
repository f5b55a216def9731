"""Spherical Web Mercator projection and distance helpers."""

from __future__ import annotations

import math

from geospot.constants import TILE_SIZE
from geospot.models.entities import Position

EARTH_RADIUS_M = 6_371_008.8
MAX_MERCATOR_LAT = 85.0511287798066


def project(position: Position) -> tuple[float, float]:
    """Project a position onto the zoom-0 world square (0..TILE_SIZE pixels)."""
    lat = max(-MAX_MERCATOR_LAT, min(MAX_MERCATOR_LAT, position.lat))
    x = (position.lng + 180.0) / 360.0 * TILE_SIZE
    sin_lat = math.sin(math.radians(lat))
    y = (0.5 - math.log((1 + sin_lat) / (1 - sin_lat)) / (4 * math.pi)) * TILE_SIZE
    return x, y


def unproject(x: float, y: float) -> Position:
    """Inverse of :func:`project` for zoom-0 world pixel coordinates."""
    lng = x / TILE_SIZE * 360.0 - 180.0
    n = math.pi - 2.0 * math.pi * y / TILE_SIZE
    lat = math.degrees(math.atan(math.sinh(n)))
    return Position(lat, lng)


def world_scale(zoom: float) -> float:
    """Screen pixels per zoom-0 world pixel at ``zoom``."""
    return 2.0 ** zoom


def tile_range(x0: float, y0: float, x1: float, y1: float, zoom: int) -> tuple[range, range]:
    """Tile columns and rows covering a zoom-0 world rectangle at integer ``zoom``."""
    count = 2 ** zoom
    span = TILE_SIZE / count
    first_col = max(0, int(math.floor(x0 / span)))
    last_col = min(count - 1, int(math.floor(x1 / span)))
    first_row = max(0, int(math.floor(y0 / span)))
    last_row = min(count - 1, int(math.floor(y1 / span)))
    return range(first_col, last_col + 1), range(first_row, last_row + 1)


def haversine_m(a: Position, b: Position) -> float:
    """Great-circle distance between two positions in meters."""
    lat1, lat2 = math.radians(a.lat), math.radians(b.lat)
    dlat = lat2 - lat1
    dlng = math.radians(b.lng - a.lng)
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(h)))


__all__ = [
    "EARTH_RADIUS_M",
    "MAX_MERCATOR_LAT",
    "haversine_m",
    "project",
    "tile_range",
    "unproject",
    "world_scale",
]
