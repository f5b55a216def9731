"""UI components for GeoSpot."""

__all__ = [
    "icons",
    "main_window",
    "map_panel",
    "map_widget",
    "markers",
    "tiles",
]
