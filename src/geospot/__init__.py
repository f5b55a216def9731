"""GeoSpot: a map view that keeps users and landmarks in sync with the camera."""

__version__ = "0.1.0"
