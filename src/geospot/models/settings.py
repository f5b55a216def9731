"""Configuration model for the map view."""

from __future__ import annotations

from dataclasses import dataclass, field

from geospot import constants
from geospot.models.camera import Camera
from geospot.models.entities import Position


@dataclass(frozen=True)
class MapSettings:
    """User-configurable options for the map view and its tile source."""

    tile_url: str = constants.DEFAULT_TILE_URL
    attribution: str = constants.DEFAULT_ATTRIBUTION
    user_agent: str = constants.DEFAULT_USER_AGENT
    default_center: Position = field(
        default_factory=lambda: Position(*constants.DEFAULT_CENTER)
    )
    default_zoom: int = constants.DEFAULT_ZOOM
    min_zoom: int = 0
    max_zoom: int = 19
    focus_min_zoom: int = constants.FOCUS_MIN_ZOOM  # floor applied when flying to a selection
    position_tolerance: float = constants.POSITION_TOLERANCE_DEG
    fly_duration_ms: int = constants.FLY_DURATION_MS
    description_limit: int = constants.POPUP_DESCRIPTION_LIMIT
    nearby_radius_m: int = 10_000
    nearby_limit: int = 20

    @classmethod
    def default(cls) -> "MapSettings":
        return cls()

    def default_camera(self) -> Camera:
        return Camera(self.default_center, self.default_zoom)

    def clamp_zoom(self, zoom: float) -> float:
        return max(float(self.min_zoom), min(float(self.max_zoom), zoom))


__all__ = ["MapSettings"]
