"""Slippy map widget: raster tiles, markers, popups and camera moves."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Union

from PySide6.QtCore import QEasingCurve, QPointF, QRectF, Qt, QVariantAnimation, Signal
from PySide6.QtGui import QColor, QPainter, QTransform, QWheelEvent
from PySide6.QtWidgets import QGraphicsScene, QGraphicsView, QLabel, QWidget

from geospot.constants import TILE_SIZE
from geospot.controllers.markers import MarkerKey, MarkerSpec
from geospot.models.camera import Camera
from geospot.models.entities import Position
from geospot.models.settings import MapSettings
from geospot.services.geo import project, unproject, world_scale
from geospot.ui.icons import resolve_icon
from geospot.ui.markers import MarkerItem, PopupLabel
from geospot.ui.tiles import TileLayer

log = logging.getLogger(__name__)


def _normalize_zoom(zoom: float) -> Union[int, float]:
    return int(zoom) if float(zoom).is_integer() else zoom


@dataclass(frozen=True)
class _Flight:
    start_x: float
    start_y: float
    start_zoom: float
    end_x: float
    end_y: float
    end_zoom: float
    center: Position


class SlippyMapView(QGraphicsView):
    """Web Mercator map view.

    The scene is the zoom-0 world square (``TILE_SIZE`` pixels wide); the view
    transform scales it by ``2**zoom``. The widget keeps its own camera state
    so that ``camera()`` reports exactly what ``set_view`` was given.

    ``panFinished`` and ``zoomFinished`` are emitted only at the end of user
    gestures (drag, wheel, keyboard). ``set_view`` and ``fly_to`` never emit
    them.
    """

    _KEY_PAN_PIXELS = 80

    panFinished = Signal()
    zoomFinished = Signal()
    markerActivated = Signal(object)
    popupLinkOpened = Signal(str)

    def __init__(
        self,
        settings: Optional[MapSettings] = None,
        parent: Optional[QWidget] = None,
        load_tiles: bool = True,
    ) -> None:
        super().__init__(parent)
        self._settings = settings or MapSettings.default()
        self._scene = QGraphicsScene(self)
        self.setScene(self._scene)
        self._scene.setSceneRect(QRectF(-TILE_SIZE, -TILE_SIZE, TILE_SIZE * 3, TILE_SIZE * 3))

        self._center: Position = self._settings.default_center
        self._zoom: float = float(self._settings.default_zoom)
        self._markers: Dict[MarkerKey, MarkerItem] = {}
        self._drag_origin: Optional[QPointF] = None
        self._drag_moved = False
        self._flight: Optional[_Flight] = None
        self._torn_down = False

        self._animation = QVariantAnimation(self)
        self._animation.setStartValue(0.0)
        self._animation.setEndValue(1.0)
        self._animation.setEasingCurve(QEasingCurve.Type.InOutCubic)
        self._animation.valueChanged.connect(self._on_flight_step)
        self._animation.finished.connect(self._on_flight_finished)

        self._tiles: Optional[TileLayer] = (
            TileLayer(self._scene, self._settings, self) if load_tiles else None
        )

        self._popup = PopupLabel(self.viewport())
        self._popup.linkOpened.connect(self.popupLinkOpened)

        self._attribution = QLabel(self._settings.attribution, self.viewport())
        self._attribution.setStyleSheet(
            "QLabel { background: rgba(255, 255, 255, 180); color: #374151;"
            " font-size: 10px; padding: 1px 4px; }"
        )
        self._attribution.adjustSize()

        self.setTransformationAnchor(QGraphicsView.ViewportAnchor.NoAnchor)
        self.setResizeAnchor(QGraphicsView.ViewportAnchor.NoAnchor)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setRenderHint(QPainter.RenderHint.Antialiasing, True)
        self.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform, True)
        self.setDragMode(QGraphicsView.DragMode.NoDrag)
        self.setBackgroundBrush(QColor("#dfe3e8"))
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)

        self._apply_camera()

    # Public API ---------------------------------------------------------

    def camera(self) -> Camera:
        """Live camera, including intermediate states of an animated move."""
        return Camera(self._center, _normalize_zoom(self._zoom))

    def target_camera(self) -> Camera:
        """Where the camera will settle: the flight endpoint while animating."""
        if self._flight is not None:
            return Camera(self._flight.center, _normalize_zoom(self._flight.end_zoom))
        return self.camera()

    @property
    def is_animating(self) -> bool:
        return self._flight is not None

    @property
    def is_torn_down(self) -> bool:
        return self._torn_down

    def set_view(self, center: Position, zoom: Union[int, float]) -> None:
        """Move immediately, cancelling any animated move."""
        self._stop_flight()
        self._center = center
        self._zoom = self._settings.clamp_zoom(float(zoom))
        self._apply_camera()

    def fly_to(self, center: Position, zoom: Union[int, float], duration_ms: int) -> None:
        """Animate to ``center``/``zoom``; a newer move re-targets from the current state."""
        self._stop_flight()
        end_zoom = self._settings.clamp_zoom(float(zoom))
        if duration_ms <= 0:
            self.set_view(center, end_zoom)
            return

        start_x, start_y = project(self._center)
        end_x, end_y = project(center)
        self._flight = _Flight(start_x, start_y, self._zoom, end_x, end_y, end_zoom, center)
        self._animation.setDuration(duration_ms)
        self._animation.start()
        log.debug("Flight to %.5f, %.5f @ z%s over %d ms", center.lat, center.lng, end_zoom, duration_ms)

    def set_markers(self, specs: Sequence[MarkerSpec]) -> None:
        """Replace all markers; an open popup is refreshed or closed."""
        open_key = self._popup.key if not self._popup.isHidden() else None
        for item in self._markers.values():
            self._scene.removeItem(item)
        self._markers.clear()

        for spec in specs:
            item = MarkerItem(spec, resolve_icon(spec.kind), self._on_marker_clicked)
            self._scene.addItem(item)
            self._markers[spec.key] = item

        if open_key is not None and not self.open_popup(open_key):
            self.close_popup()

    def marker_specs(self) -> List[MarkerSpec]:
        return [item.spec for item in self._markers.values()]

    def marker_item(self, key: MarkerKey) -> Optional[MarkerItem]:
        return self._markers.get(key)

    def open_popup(self, key: MarkerKey) -> bool:
        item = self._markers.get(key)
        if item is None:
            return False
        self._popup.show_content(key, item.spec.popup)
        self._position_popup()
        return True

    def close_popup(self) -> None:
        self._popup.dismiss()

    @property
    def popup(self) -> PopupLabel:
        return self._popup

    def teardown(self) -> None:
        """Release scene items, network requests and the widget itself."""
        if self._torn_down:
            return
        self._torn_down = True
        self._stop_flight()
        if self._tiles is not None:
            self._tiles.clear()
        self._popup.dismiss()
        self._markers.clear()
        self._scene.clear()
        self.hide()
        self.deleteLater()
        log.debug("Map view torn down")

    # Event overrides ----------------------------------------------------

    def wheelEvent(self, event: QWheelEvent) -> None:  # noqa: N802 (Qt naming)
        """Zoom one level in or out around the cursor."""
        delta = event.angleDelta().y()
        if delta == 0:
            delta = event.pixelDelta().y()
        if delta == 0:
            super().wheelEvent(event)
            return

        if self._zoom_around(event.position(), 1 if delta > 0 else -1):
            self.zoomFinished.emit()
        event.accept()

    def mousePressEvent(self, event):  # type: ignore[override]
        if event.button() == Qt.MouseButton.LeftButton and not isinstance(
            self.itemAt(event.position().toPoint()), MarkerItem
        ):
            self._stop_flight()
            self._drag_origin = event.position()
            self._drag_moved = False
            self.viewport().setCursor(Qt.CursorShape.ClosedHandCursor)
            event.accept()
            return
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event):  # type: ignore[override]
        if self._drag_origin is not None:
            position = event.position()
            delta = position - self._drag_origin
            self._drag_origin = position
            if delta.x() or delta.y():
                self._pan_pixels(delta.x(), delta.y())
                self._drag_moved = True
            event.accept()
            return
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event):  # type: ignore[override]
        if self._drag_origin is not None and event.button() == Qt.MouseButton.LeftButton:
            moved = self._drag_moved
            self._drag_origin = None
            self._drag_moved = False
            self.viewport().unsetCursor()
            if moved:
                self.panFinished.emit()
            else:
                self.close_popup()
            event.accept()
            return
        super().mouseReleaseEvent(event)

    def keyPressEvent(self, event):  # type: ignore[override]
        key = event.key()
        if key in (Qt.Key.Key_Plus, Qt.Key.Key_Equal, Qt.Key.Key_Minus):
            step = -1 if key == Qt.Key.Key_Minus else 1
            if self._zoom_around(QPointF(self.viewport().rect().center()), step):
                self.zoomFinished.emit()
            event.accept()
            return
        offsets = {
            Qt.Key.Key_Left: (self._KEY_PAN_PIXELS, 0),
            Qt.Key.Key_Right: (-self._KEY_PAN_PIXELS, 0),
            Qt.Key.Key_Up: (0, self._KEY_PAN_PIXELS),
            Qt.Key.Key_Down: (0, -self._KEY_PAN_PIXELS),
        }
        if key in offsets:
            self._stop_flight()
            self._pan_pixels(*offsets[key])
            self.panFinished.emit()
            event.accept()
            return
        if key == Qt.Key.Key_Escape and not self._popup.isHidden():
            self.close_popup()
            event.accept()
            return
        super().keyPressEvent(event)

    def resizeEvent(self, event):  # type: ignore[override]
        super().resizeEvent(event)
        self._apply_camera()
        self._position_attribution()

    # Internal helpers ---------------------------------------------------

    def _apply_camera(self) -> None:
        scale = world_scale(self._zoom)
        self.setTransform(QTransform.fromScale(scale, scale))
        x, y = project(self._center)
        self.centerOn(QPointF(x, y))
        if self._tiles is not None:
            self._tiles.update_view(self._visible_world_rect(), self._zoom)
        self._position_popup()

    def _visible_world_rect(self) -> QRectF:
        rect = self.mapToScene(self.viewport().rect()).boundingRect()
        return rect.intersected(QRectF(0, 0, TILE_SIZE, TILE_SIZE))

    def _pan_pixels(self, dx: float, dy: float) -> None:
        """Shift the camera so the map content moves by (dx, dy) screen pixels."""
        scale = world_scale(self._zoom)
        x, y = project(self._center)
        x = (x - dx / scale) % TILE_SIZE
        y = min(float(TILE_SIZE), max(0.0, y - dy / scale))
        self._center = unproject(x, y)
        self._apply_camera()

    def _zoom_around(self, view_pos: QPointF, step: int) -> bool:
        self._stop_flight()
        new_zoom = self._settings.clamp_zoom(float(round(self._zoom) + step))
        if new_zoom == self._zoom:
            return False

        anchor = self.mapToScene(view_pos.toPoint())
        x, y = project(self._center)
        ratio = world_scale(self._zoom) / world_scale(new_zoom)
        x = anchor.x() + (x - anchor.x()) * ratio
        y = anchor.y() + (y - anchor.y()) * ratio
        self._zoom = new_zoom
        self._center = unproject(x % TILE_SIZE, min(float(TILE_SIZE), max(0.0, y)))
        self._apply_camera()
        return True

    def _stop_flight(self) -> None:
        self._flight = None
        if self._animation.state() != QVariantAnimation.State.Stopped:
            self._animation.stop()

    def _on_flight_step(self, value) -> None:
        flight = self._flight
        if flight is None:
            return
        t = float(value)
        x = flight.start_x + (flight.end_x - flight.start_x) * t
        y = flight.start_y + (flight.end_y - flight.start_y) * t
        self._zoom = flight.start_zoom + (flight.end_zoom - flight.start_zoom) * t
        self._center = unproject(x, y)
        self._apply_camera()

    def _on_flight_finished(self) -> None:
        flight = self._flight
        self._flight = None
        if flight is None:
            return
        self._center = flight.center
        self._zoom = flight.end_zoom
        self._apply_camera()

    def _on_marker_clicked(self, item: MarkerItem) -> None:
        self.open_popup(item.key)
        self.markerActivated.emit(item.key)

    def _position_popup(self) -> None:
        if self._popup.isHidden() or self._popup.key is None:
            return
        item = self._markers.get(self._popup.key)
        if item is None:
            return
        anchor = self.mapFromScene(item.pos())
        offset_x, offset_y = item.icon.popup_anchor
        self._popup.adjustSize()
        self._popup.move(
            anchor.x() + offset_x - self._popup.width() // 2,
            anchor.y() + offset_y - self._popup.height() - 4,
        )

    def _position_attribution(self) -> None:
        rect = self.viewport().rect()
        self._attribution.move(
            rect.right() - self._attribution.width(),
            rect.bottom() - self._attribution.height(),
        )


__all__ = ["SlippyMapView"]
