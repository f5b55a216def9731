"""Composition of the map view controllers around one widget lifecycle."""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional, Union

from geospot.controllers.camera import CameraReconciler
from geospot.controllers.focus import FocusFollowController
from geospot.controllers.gestures import GestureListener
from geospot.controllers.lifecycle import MapLifecycle, WidgetFactory
from geospot.controllers.markers import MarkerRenderer, SummaryLookup
from geospot.models.camera import Camera
from geospot.models.entities import Entity, Landmark, Position, Selection, User
from geospot.models.settings import MapSettings

log = logging.getLogger(__name__)


class MapViewEngine:
    """Caller-facing props and notifications of the map view.

    Props: desired center/zoom, users, landmarks, selection, summary cache.
    Notifications: ``on_camera_changed(center, zoom)`` after user gestures and
    ``on_entity_activated(entity)`` after marker clicks.
    """

    def __init__(
        self,
        factory: WidgetFactory,
        settings: Optional[MapSettings] = None,
        on_camera_changed: Optional[Callable[[Position, int], None]] = None,
        on_entity_activated: Optional[Callable[[Entity], None]] = None,
    ) -> None:
        self.settings = settings or MapSettings.default()
        self._on_camera_changed = on_camera_changed
        self._on_entity_activated = on_entity_activated
        self._users: List[User] = []
        self._landmarks: List[Landmark] = []
        self._summaries: Optional[SummaryLookup] = None

        self.lifecycle = MapLifecycle(factory)
        self.reconciler = CameraReconciler(self.lifecycle, self.settings.position_tolerance)
        self.gestures = GestureListener(self.lifecycle, self._camera_changed)
        self.focus = FocusFollowController(
            self.lifecycle,
            self.reconciler,
            min_zoom=self.settings.focus_min_zoom,
            duration_ms=self.settings.fly_duration_ms,
        )
        self.markers = MarkerRenderer(
            self.lifecycle,
            self._entity_activated,
            description_limit=self.settings.description_limit,
        )
        self.reconciler.set_desired(self.settings.default_camera())

    # Lifecycle ----------------------------------------------------------

    def mount(self, container: object) -> None:
        self.lifecycle.attach_container(container)
        self.lifecycle.activate()

    def unmount(self) -> None:
        self.lifecycle.deactivate()

    # Props --------------------------------------------------------------

    def set_desired_camera(
        self, center: Position, zoom: Optional[int] = None, force: bool = False
    ) -> bool:
        if not center.is_valid:
            log.warning("Ignoring desired center outside valid range: %s", center)
            return False
        if zoom is None:
            zoom = self.settings.default_zoom
        zoom = int(self.settings.clamp_zoom(zoom))
        return self.reconciler.set_desired(Camera(center, zoom), force=force)

    def set_users(self, users: Iterable[User]) -> None:
        self._users = list(users)
        self.render()

    def set_landmarks(self, landmarks: Iterable[Landmark]) -> None:
        self._landmarks = list(landmarks)
        self.render()

    def set_summaries(self, summaries: Optional[SummaryLookup]) -> None:
        self._summaries = summaries
        self.render()

    def set_selection(self, selection: Union[Selection, Entity, None]) -> bool:
        if not isinstance(selection, Selection):
            selection = Selection.of(selection)
        return self.focus.set_selection(selection)

    def render(self) -> None:
        self.markers.render(self._users, self._landmarks, self._summaries)

    @property
    def users(self) -> List[User]:
        return list(self._users)

    @property
    def landmarks(self) -> List[Landmark]:
        return list(self._landmarks)

    # Notifications -------------------------------------------------------

    def _camera_changed(self, center: Position, zoom: int) -> None:
        if self._on_camera_changed is not None:
            self._on_camera_changed(center, zoom)

    def _entity_activated(self, entity: Entity) -> None:
        if self._on_entity_activated is not None:
            self._on_entity_activated(entity)


__all__ = ["MapViewEngine"]
