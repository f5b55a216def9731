"""Report user pan/zoom gestures upward as camera changes."""

from __future__ import annotations

import logging
from typing import Callable

from geospot.controllers.lifecycle import MapLifecycle, MapWidget
from geospot.models.entities import Position

log = logging.getLogger(__name__)

CameraCallback = Callable[[Position, int], None]


class GestureListener:
    """Read-only path from widget gestures to the caller.

    Never calls the widget's move methods; whether the reported camera
    becomes the new desired camera is up to the caller.
    """

    def __init__(self, lifecycle: MapLifecycle, on_camera_changed: CameraCallback) -> None:
        self._lifecycle = lifecycle
        self._on_camera_changed = on_camera_changed
        lifecycle.add_ready_hook(self._subscribe)
        lifecycle.add_release_hook(self._unsubscribe)

    def _subscribe(self, widget: MapWidget) -> None:
        widget.panFinished.connect(self._on_gesture_finished)
        widget.zoomFinished.connect(self._on_gesture_finished)

    def _unsubscribe(self, widget: MapWidget) -> None:
        for signal in (widget.panFinished, widget.zoomFinished):
            try:
                signal.disconnect(self._on_gesture_finished)
            except (RuntimeError, TypeError) as exc:
                log.debug("Gesture signal already disconnected: %s", exc)

    def _on_gesture_finished(self) -> None:
        widget = self._lifecycle.widget
        if widget is None:
            return
        camera = widget.camera()
        self._on_camera_changed(camera.center, int(round(camera.zoom)))


__all__ = ["GestureListener"]
