"""Build marker and popup descriptions for users and landmarks."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Protocol

from geospot.constants import LINK_TEXT, NO_DESCRIPTION_TEXT, POPUP_DESCRIPTION_LIMIT
from geospot.controllers.lifecycle import MapLifecycle, MapWidget
from geospot.models.entities import Entity, EntityKind, Landmark, Position, User, resolve_position

log = logging.getLogger(__name__)

MarkerKey = tuple[EntityKind, str]


class SummaryLookup(Protocol):
    def get(self, identity: str) -> Optional[str]: ...


@dataclass(frozen=True)
class PopupContent:
    """Text shown in a marker's popup."""

    title: str
    body: str = ""
    link_url: Optional[str] = None
    link_text: str = LINK_TEXT


@dataclass(frozen=True)
class MarkerSpec:
    """Everything the widget needs to place one marker."""

    key: MarkerKey
    kind: EntityKind
    position: Position
    label: str
    popup: PopupContent
    entity: Entity = field(compare=False, repr=False)


def truncate_description(description: str, limit: int = POPUP_DESCRIPTION_LIMIT) -> str:
    if len(description) <= limit:
        return description
    return description[:limit] + "..."


def landmark_popup_body(
    landmark: Landmark,
    summary: Optional[str] = None,
    limit: int = POPUP_DESCRIPTION_LIMIT,
) -> str:
    """Cached summary, else the truncated description, else a placeholder."""
    if summary:
        return summary
    if landmark.description:
        return truncate_description(landmark.description, limit)
    return NO_DESCRIPTION_TEXT


def user_marker(user: User) -> Optional[MarkerSpec]:
    position = resolve_position(user)
    if position is None:
        return None
    return MarkerSpec(
        key=(EntityKind.USER, user.identity),
        kind=EntityKind.USER,
        position=position,
        label=user.name,
        popup=PopupContent(title=user.name),
        entity=user,
    )


def landmark_marker(
    landmark: Landmark,
    summaries: Optional[SummaryLookup] = None,
    limit: int = POPUP_DESCRIPTION_LIMIT,
) -> Optional[MarkerSpec]:
    position = resolve_position(landmark)
    if position is None:
        return None
    summary = summaries.get(landmark.identity) if summaries is not None else None
    return MarkerSpec(
        key=(EntityKind.LANDMARK, landmark.identity),
        kind=EntityKind.LANDMARK,
        position=position,
        label=landmark.title,
        popup=PopupContent(
            title=landmark.title,
            body=landmark_popup_body(landmark, summary, limit),
            link_url=landmark.url or None,
        ),
        entity=landmark,
    )


def build_marker_specs(
    users: Iterable[User],
    landmarks: Iterable[Landmark],
    summaries: Optional[SummaryLookup] = None,
    limit: int = POPUP_DESCRIPTION_LIMIT,
) -> List[MarkerSpec]:
    """Marker specs for every entity with a usable position.

    Entities without one are skipped; the rest still render. The first entity
    wins when two share a key.
    """
    specs: List[MarkerSpec] = []
    seen: set[MarkerKey] = set()
    candidates = [user_marker(user) for user in users]
    candidates += [landmark_marker(landmark, summaries, limit) for landmark in landmarks]
    for spec in candidates:
        if spec is None:
            continue
        if spec.key in seen:
            log.debug("Duplicate marker %s skipped", spec.key)
            continue
        seen.add(spec.key)
        specs.append(spec)
    return specs


class MarkerRenderer:
    """Pushes marker specs to the widget and routes marker clicks upward."""

    def __init__(
        self,
        lifecycle: MapLifecycle,
        on_entity_activated: Callable[[Entity], None],
        description_limit: int = POPUP_DESCRIPTION_LIMIT,
    ) -> None:
        self._lifecycle = lifecycle
        self._on_entity_activated = on_entity_activated
        self._limit = description_limit
        self._specs: List[MarkerSpec] = []
        self._entities: Dict[MarkerKey, Entity] = {}
        lifecycle.add_ready_hook(self._on_widget_ready)
        lifecycle.add_release_hook(self._on_widget_released)

    @property
    def specs(self) -> List[MarkerSpec]:
        return list(self._specs)

    def render(
        self,
        users: Iterable[User],
        landmarks: Iterable[Landmark],
        summaries: Optional[SummaryLookup] = None,
    ) -> List[MarkerSpec]:
        self._specs = build_marker_specs(users, landmarks, summaries, self._limit)
        self._entities = {spec.key: spec.entity for spec in self._specs}
        widget = self._lifecycle.widget
        if widget is not None:
            widget.set_markers(self._specs)
        return list(self._specs)

    def _on_widget_ready(self, widget: MapWidget) -> None:
        widget.markerActivated.connect(self._on_marker_activated)
        widget.set_markers(self._specs)

    def _on_widget_released(self, widget: MapWidget) -> None:
        try:
            widget.markerActivated.disconnect(self._on_marker_activated)
        except (RuntimeError, TypeError) as exc:
            log.debug("Marker signal already disconnected: %s", exc)

    def _on_marker_activated(self, key: MarkerKey) -> None:
        entity = self._entities.get(tuple(key))  # type: ignore[arg-type]
        if entity is None:
            log.debug("Click on unknown marker %s ignored", key)
            return
        self._on_entity_activated(entity)


__all__ = [
    "MarkerKey",
    "MarkerRenderer",
    "MarkerSpec",
    "PopupContent",
    "SummaryLookup",
    "build_marker_specs",
    "landmark_marker",
    "landmark_popup_body",
    "truncate_description",
    "user_marker",
]
