"""Container widget that owns the map view and its placeholder."""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Union

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import QLabel, QStackedLayout, QVBoxLayout, QWidget

from geospot.controllers.engine import MapViewEngine
from geospot.models.entities import Entity, Landmark, Position, Selection, User
from geospot.models.settings import MapSettings
from geospot.services.summaries import SummaryCache
from geospot.ui.map_widget import SlippyMapView

log = logging.getLogger(__name__)


class MapPanel(QWidget):
    """Shows a loading skeleton until the map widget exists, then the map.

    The widget is created when the panel is first shown and destroyed when the
    panel is hidden or :meth:`unmount` is called; showing it again builds a
    fresh widget from the current props.
    """

    cameraChanged = Signal(object, int)
    entityActivated = Signal(object)

    def __init__(
        self,
        settings: Optional[MapSettings] = None,
        parent: Optional[QWidget] = None,
        load_tiles: bool = True,
    ) -> None:
        super().__init__(parent)
        self._settings = settings or MapSettings.default()
        self._load_tiles = load_tiles
        self._summary_cache: Optional[SummaryCache] = None

        self._placeholder = QLabel("Loading map…", self)
        self._placeholder.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._placeholder.setStyleSheet(
            "QLabel { background: #e5e7eb; color: #6b7280; font-size: 14px; }"
        )
        self._host = QWidget(self)
        self._host_layout = QVBoxLayout(self._host)
        self._host_layout.setContentsMargins(0, 0, 0, 0)

        self._stack = QStackedLayout(self)
        self._stack.setContentsMargins(0, 0, 0, 0)
        self._stack.addWidget(self._placeholder)
        self._stack.addWidget(self._host)
        self._stack.setCurrentWidget(self._placeholder)

        self._engine = MapViewEngine(
            self._create_view,
            settings=self._settings,
            on_camera_changed=self.cameraChanged.emit,
            on_entity_activated=self.entityActivated.emit,
        )
        self._engine.lifecycle.add_release_hook(self._on_view_released)

    # Public API ---------------------------------------------------------

    @property
    def engine(self) -> MapViewEngine:
        return self._engine

    @property
    def view(self) -> Optional[SlippyMapView]:
        widget = self._engine.lifecycle.widget
        return widget if isinstance(widget, SlippyMapView) else None

    def mount(self) -> None:
        self._engine.mount(self._host)

    def unmount(self) -> None:
        self._engine.unmount()

    def set_desired_camera(
        self, center: Position, zoom: Optional[int] = None, force: bool = False
    ) -> bool:
        return self._engine.set_desired_camera(center, zoom, force=force)

    def set_users(self, users: Iterable[User]) -> None:
        self._engine.set_users(users)

    def set_landmarks(self, landmarks: Iterable[Landmark]) -> None:
        self._engine.set_landmarks(landmarks)

    def set_selection(self, selection: Union[Selection, Entity, None]) -> bool:
        return self._engine.set_selection(selection)

    def set_summary_cache(self, cache: Optional[SummaryCache]) -> None:
        if self._summary_cache is not None:
            self._summary_cache.summaryChanged.disconnect(self._on_summary_changed)
        self._summary_cache = cache
        if cache is not None:
            cache.summaryChanged.connect(self._on_summary_changed)
        self._engine.set_summaries(cache)

    # Event overrides ----------------------------------------------------

    def showEvent(self, event):  # type: ignore[override]
        super().showEvent(event)
        self.mount()

    def hideEvent(self, event):  # type: ignore[override]
        super().hideEvent(event)
        if not event.spontaneous():
            self.unmount()

    # Internal helpers ---------------------------------------------------

    def _create_view(self, host: QWidget) -> SlippyMapView:
        view = SlippyMapView(self._settings, host, load_tiles=self._load_tiles)
        self._host_layout.addWidget(view)
        self._stack.setCurrentWidget(self._host)
        view.show()
        log.debug("Map view created")
        return view

    def _on_view_released(self, view: object) -> None:
        if isinstance(view, QWidget):
            self._host_layout.removeWidget(view)
        self._stack.setCurrentWidget(self._placeholder)

    def _on_summary_changed(self, _identity: str) -> None:
        self._engine.render()


__all__ = ["MapPanel"]
