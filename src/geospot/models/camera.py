"""Camera state shared by the caller and the map widget."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Union

from geospot.models.entities import Position


@dataclass(frozen=True)
class Camera:
    """Map center and zoom level.

    Desired cameras always carry an integer zoom. The live camera reported by
    the widget may carry a fractional zoom while an animated move is running.
    """

    center: Position
    zoom: Union[int, float]

    def with_zoom(self, zoom: Union[int, float]) -> "Camera":
        return replace(self, zoom=zoom)

    def matches(self, other: "Camera", tolerance: float) -> bool:
        """Return True when ``other`` is within ``tolerance`` degrees and at the same zoom."""
        return (
            abs(self.center.lat - other.center.lat) <= tolerance
            and abs(self.center.lng - other.center.lng) <= tolerance
            and self.zoom == other.zoom
        )


__all__ = ["Camera"]
