"""Reconcile the caller's desired camera against the widget's live camera."""

from __future__ import annotations

import logging
from typing import Optional

from geospot.constants import POSITION_TOLERANCE_DEG
from geospot.controllers.lifecycle import MapLifecycle, MapWidget
from geospot.models.camera import Camera

log = logging.getLogger(__name__)


class CameraReconciler:
    """Snap the widget to the desired camera when the two diverge.

    The comparison is re-evaluated against the widget's current state every
    time it runs, so a correction is never lost because an earlier move was
    still animating. Moves issued here use ``set_view``, which never raises
    the widget's gesture notifications.
    """

    def __init__(self, lifecycle: MapLifecycle, tolerance: float = POSITION_TOLERANCE_DEG) -> None:
        self._lifecycle = lifecycle
        self._tolerance = tolerance
        self._requested: Optional[Camera] = None
        self._desired: Optional[Camera] = None
        lifecycle.add_ready_hook(self._on_widget_ready)

    @property
    def desired(self) -> Optional[Camera]:
        """Camera the view is converging on."""
        return self._desired

    @property
    def requested(self) -> Optional[Camera]:
        """Last camera supplied by the caller."""
        return self._requested

    def set_desired(self, camera: Camera, force: bool = False) -> bool:
        """Record a caller-supplied camera; returns True when a move was issued.

        Re-sending the same camera is not a change and issues nothing unless
        ``force`` is set.
        """
        if camera == self._requested and not force:
            return False
        self._requested = camera
        self._desired = camera
        return self.reconcile()

    def adopt(self, camera: Camera) -> None:
        """Make ``camera`` the target without moving; used when a flight already heads there."""
        self._desired = camera

    def reconcile(self) -> bool:
        widget = self._lifecycle.widget
        desired = self._desired
        if widget is None or desired is None:
            return False

        live = widget.target_camera()
        if desired.matches(live, self._tolerance):
            return False

        try:
            widget.set_view(desired.center, desired.zoom)
        except Exception:
            log.exception("Error setting map view to %s", desired)
            return False
        log.debug(
            "Snapped map view to %.6f, %.6f @ z%s",
            desired.center.lat,
            desired.center.lng,
            desired.zoom,
        )
        return True

    def _on_widget_ready(self, widget: MapWidget) -> None:
        self.reconcile()


__all__ = ["CameraReconciler"]
