"""Fly the camera to a newly selected entity."""

from __future__ import annotations

import logging
from typing import Optional

from geospot.constants import FLY_DURATION_MS, FOCUS_MIN_ZOOM
from geospot.controllers.camera import CameraReconciler
from geospot.controllers.lifecycle import MapLifecycle, MapWidget
from geospot.models.camera import Camera
from geospot.models.entities import EntityKind, Selection, resolve_position

log = logging.getLogger(__name__)


class FocusFollowController:
    """Animated move to the selected entity, once per distinct selection.

    The flight endpoint becomes the reconciler's target, so a caller that
    re-sends its unchanged desired camera does not snap the view away from
    the focused entity.
    """

    def __init__(
        self,
        lifecycle: MapLifecycle,
        reconciler: CameraReconciler,
        min_zoom: int = FOCUS_MIN_ZOOM,
        duration_ms: int = FLY_DURATION_MS,
    ) -> None:
        self._lifecycle = lifecycle
        self._reconciler = reconciler
        self._min_zoom = min_zoom
        self._duration_ms = duration_ms
        self._selection = Selection.none()
        self._focused_key: Optional[tuple[EntityKind, str]] = None
        lifecycle.add_ready_hook(self._on_widget_ready)

    @property
    def selection(self) -> Selection:
        return self._selection

    @property
    def focused_key(self) -> Optional[tuple[EntityKind, str]]:
        return self._focused_key

    def set_selection(self, selection: Selection) -> bool:
        """Returns True when an animated move was issued."""
        self._selection = selection
        key = selection.key
        if key is None:
            self._focused_key = None
            return False
        if key == self._focused_key:
            return False
        # The focused key only ever names the current selection.
        self._focused_key = None
        return self._focus()

    def _focus(self) -> bool:
        widget = self._lifecycle.widget
        entity = self._selection.entity
        if widget is None or entity is None:
            return False

        position = resolve_position(entity)
        if position is None:
            log.debug("Selected %s has no usable position; not focusing", entity.identity)
            return False

        zoom = max(int(round(widget.camera().zoom)), self._min_zoom)
        try:
            widget.fly_to(position, zoom, self._duration_ms)
        except Exception:
            log.exception("Error flying to %s", entity.identity)
            return False

        self._focused_key = self._selection.key
        self._reconciler.adopt(Camera(position, zoom))
        log.debug("Flying to %s at z%d", entity.identity, zoom)
        return True

    def _on_widget_ready(self, widget: MapWidget) -> None:
        key = self._selection.key
        if key is not None and key != self._focused_key:
            self._focus()


__all__ = ["FocusFollowController"]
