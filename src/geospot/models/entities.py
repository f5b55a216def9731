"""Entity records rendered on the map: people and places."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


@dataclass(frozen=True)
class Position:
    """Geographic coordinate in degrees (WGS84)."""

    lat: float
    lng: float

    @property
    def is_valid(self) -> bool:
        """Return True when both coordinates are finite and in range."""
        return (
            math.isfinite(self.lat)
            and math.isfinite(self.lng)
            and -90.0 <= self.lat <= 90.0
            and -180.0 <= self.lng <= 180.0
        )


class EntityKind(Enum):
    USER = "user"
    LANDMARK = "landmark"


@dataclass(frozen=True)
class User:
    """A person shown on the map."""

    id: str
    name: str
    avatar: str = ""
    location: Optional[Position] = None
    following: bool = False

    kind = EntityKind.USER

    @property
    def identity(self) -> str:
        return self.id

    @property
    def position(self) -> Optional[Position]:
        return self.location


@dataclass(frozen=True)
class Landmark:
    """A place with a description and an optional reference page."""

    title: str
    description: str = ""
    url: Optional[str] = None
    position: Optional[Position] = None

    kind = EntityKind.LANDMARK

    @property
    def identity(self) -> str:
        return self.title


Entity = Union[User, Landmark]


def resolve_position(entity: Entity) -> Optional[Position]:
    """Return the entity's position, or None when missing or out of range."""
    position = entity.position
    if position is None or not position.is_valid:
        return None
    return position


@dataclass(frozen=True)
class Selection:
    """Currently selected entity, tagged by kind. ``Selection()`` selects nothing."""

    kind: Optional[EntityKind] = None
    entity: Optional[Entity] = None

    def __post_init__(self) -> None:
        if (self.kind is None) != (self.entity is None):
            raise ValueError("Selection kind and entity must both be set or both be empty")
        if self.entity is not None and self.entity.kind is not self.kind:
            raise ValueError(f"Selection kind {self.kind} does not match entity {self.entity!r}")

    @classmethod
    def none(cls) -> "Selection":
        return cls()

    @classmethod
    def of(cls, entity: Optional[Entity]) -> "Selection":
        if entity is None:
            return cls()
        return cls(kind=entity.kind, entity=entity)

    @property
    def is_empty(self) -> bool:
        return self.kind is None

    @property
    def key(self) -> Optional[tuple[EntityKind, str]]:
        """Stable identity of the selection, independent of other field values."""
        if self.entity is None or self.kind is None:
            return None
        return self.kind, self.entity.identity

    @property
    def user(self) -> Optional[User]:
        return self.entity if self.kind is EntityKind.USER else None  # type: ignore[return-value]

    @property
    def landmark(self) -> Optional[Landmark]:
        return self.entity if self.kind is EntityKind.LANDMARK else None  # type: ignore[return-value]


__all__ = [
    "Entity",
    "EntityKind",
    "Landmark",
    "Position",
    "Selection",
    "User",
    "resolve_position",
]
