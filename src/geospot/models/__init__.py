"""Immutable value types shared by the controllers and the UI."""

from .camera import Camera
from .entities import Entity, EntityKind, Landmark, Position, Selection, User, resolve_position
from .settings import MapSettings

__all__ = [
    "Camera",
    "Entity",
    "EntityKind",
    "Landmark",
    "MapSettings",
    "Position",
    "Selection",
    "User",
    "resolve_position",
]
