"""Main window definition for GeoSpot."""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction
from PySide6.QtWidgets import (
    QDockWidget,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QStatusBar,
    QWidget,
)

from geospot.constants import DEFAULT_WINDOW_HEIGHT, DEFAULT_WINDOW_WIDTH
from geospot.models.entities import Entity, Landmark, Position, Selection, User
from geospot.models.settings import MapSettings
from geospot.services.landmarks import CatalogLandmarkSource
from geospot.services.summaries import SummaryCache, SummaryService
from geospot.services.tasks import TaskRunner
from geospot.ui.map_panel import MapPanel

log = logging.getLogger(__name__)


class LandmarkSource(Protocol):
    def fetch(self, center: Position, radius_m: int = ..., limit: int = ...) -> List[Landmark]: ...


def demo_users() -> List[User]:
    """A few users placed around central Paris."""
    return [
        User(id="u1", name="Alice", location=Position(48.8584, 2.2945), following=True),
        User(id="u2", name="Bob", location=Position(48.8606, 2.3376)),
        User(id="u3", name="Charlie", location=Position(48.8530, 2.3499), following=True),
    ]


class MainWindow(QMainWindow):
    """Top-level window that hosts the map panel and the entity list."""

    def __init__(
        self,
        settings: Optional[MapSettings] = None,
        source: Optional[LandmarkSource] = None,
        users: Optional[List[User]] = None,
        parent: Optional[QWidget] = None,
        load_tiles: bool = True,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("GeoSpot")
        self.resize(DEFAULT_WINDOW_WIDTH, DEFAULT_WINDOW_HEIGHT)

        self._settings = settings or MapSettings.default()
        self._source: LandmarkSource = source or CatalogLandmarkSource.bundled()
        self._users: List[User] = list(users) if users is not None else demo_users()
        self._landmarks: List[Landmark] = []
        self._center: Position = self._settings.default_center
        self._zoom: int = self._settings.default_zoom
        self._selection = Selection.none()

        self._runner = TaskRunner(parent=self)
        self._summary_cache = SummaryCache(self)
        self._summaries = SummaryService(self._summary_cache, runner=self._runner, parent=self)
        self._summaries.summaryFailed.connect(self._on_summary_failed)

        self._map_panel = MapPanel(self._settings, self, load_tiles=load_tiles)
        self._map_panel.set_summary_cache(self._summary_cache)
        self._map_panel.set_users(self._users)
        self._map_panel.cameraChanged.connect(self._on_camera_changed)
        self._map_panel.entityActivated.connect(self._on_entity_activated)
        self.setCentralWidget(self._map_panel)

        self._entity_list = QListWidget(self)
        self._entity_list.itemActivated.connect(self._on_list_item_activated)

        self._init_status_bar()
        self._create_actions()
        self._create_menus()
        self._create_docks()
        self._refresh_entity_list()

    @property
    def map_panel(self) -> MapPanel:
        return self._map_panel

    @property
    def selection(self) -> Selection:
        return self._selection

    @property
    def landmarks(self) -> List[Landmark]:
        return list(self._landmarks)

    def _init_status_bar(self) -> None:
        status = QStatusBar(self)
        status.showMessage("Ready")
        self.setStatusBar(status)

    def _create_actions(self) -> None:
        self._action_find = QAction("Find &Nearby Landmarks", self)
        self._action_find.setShortcut("Ctrl+F")
        self._action_find.triggered.connect(self.find_nearby_landmarks)
        self._action_find.setToolTip("Search for landmarks around the current map center.")

        self._action_clear_selection = QAction("&Clear Selection", self)
        self._action_clear_selection.triggered.connect(self.clear_selection)

        self._action_home = QAction("&Home View", self)
        self._action_home.setShortcut("Ctrl+H")
        self._action_home.triggered.connect(self.go_home)

        self._action_exit = QAction("E&xit", self)
        self._action_exit.setShortcut("Ctrl+Q")
        self._action_exit.triggered.connect(self.close)

    def _create_menus(self) -> None:
        file_menu = self.menuBar().addMenu("&File")
        file_menu.addAction(self._action_exit)

        map_menu = self.menuBar().addMenu("&Map")
        map_menu.addAction(self._action_find)
        map_menu.addAction(self._action_home)
        map_menu.addAction(self._action_clear_selection)

        toolbar = self.addToolBar("Map")
        toolbar.setObjectName("MapToolbar")
        toolbar.addAction(self._action_find)
        toolbar.addAction(self._action_home)

    def _create_docks(self) -> None:
        dock = QDockWidget("Nearby", self)
        dock.setObjectName("EntityDock")
        dock.setWidget(self._entity_list)
        dock.setAllowedAreas(Qt.DockWidgetArea.LeftDockWidgetArea | Qt.DockWidgetArea.RightDockWidgetArea)
        self.addDockWidget(Qt.DockWidgetArea.RightDockWidgetArea, dock)

    # Actions ------------------------------------------------------------

    def find_nearby_landmarks(self) -> None:
        center = self._center
        radius, limit = self._settings.nearby_radius_m, self._settings.nearby_limit
        self._action_find.setEnabled(False)
        self.statusBar().showMessage("Searching for landmarks…")
        log.info("Searching landmarks within %d m of %s", radius, center)
        self._runner.submit(
            lambda: self._source.fetch(center, radius_m=radius, limit=limit),
            self._on_landmarks_loaded,
            self._on_landmarks_failed,
        )

    def clear_selection(self) -> None:
        self._set_selection(Selection.none())

    def go_home(self) -> None:
        self._center = self._settings.default_center
        self._zoom = self._settings.default_zoom
        self._map_panel.set_desired_camera(self._center, self._zoom, force=True)

    # Callbacks ----------------------------------------------------------

    def _on_landmarks_loaded(self, landmarks: List[Landmark]) -> None:
        self._action_find.setEnabled(True)
        self._landmarks = list(landmarks)
        self._map_panel.set_landmarks(self._landmarks)
        queued = self._summaries.request(self._landmarks)
        log.debug("Queued %d summaries", queued)
        self._refresh_entity_list()
        self.statusBar().showMessage(f"Found {len(self._landmarks)} landmarks", 5000)

    def _on_landmarks_failed(self, error: Exception) -> None:
        self._action_find.setEnabled(True)
        log.warning("Landmark search failed: %s", error)
        self.statusBar().showMessage(f"Landmark search failed: {error}", 8000)

    def _on_summary_failed(self, identity: str, _message: str) -> None:
        self.statusBar().showMessage(f"No summary for {identity}", 3000)

    def _on_camera_changed(self, center: Position, zoom: int) -> None:
        self._center = center
        self._zoom = zoom
        self._map_panel.set_desired_camera(center, zoom)
        self.statusBar().showMessage(f"Lat {center.lat:.5f}, Lng {center.lng:.5f}, Zoom {zoom}")

    def _on_entity_activated(self, entity: Entity) -> None:
        self._set_selection(Selection.of(entity))

    def _on_list_item_activated(self, item: QListWidgetItem) -> None:
        entity = item.data(Qt.ItemDataRole.UserRole)
        if entity is not None:
            self._set_selection(Selection.of(entity))

    # Helpers ------------------------------------------------------------

    def _set_selection(self, selection: Selection) -> None:
        self._selection = selection
        self._map_panel.set_selection(selection)
        if selection.is_empty:
            self.statusBar().showMessage("Selection cleared", 3000)
            return
        label = selection.user.name if selection.user is not None else selection.landmark.title
        self.statusBar().showMessage(f"Selected {label}", 3000)

    def _refresh_entity_list(self) -> None:
        self._entity_list.clear()
        for user in self._users:
            item = QListWidgetItem(f"👤 {user.name}")
            item.setData(Qt.ItemDataRole.UserRole, user)
            self._entity_list.addItem(item)
        for landmark in self._landmarks:
            item = QListWidgetItem(f"🏛 {landmark.title}")
            item.setData(Qt.ItemDataRole.UserRole, landmark)
            self._entity_list.addItem(item)

    def closeEvent(self, event):  # type: ignore[override]
        self._runner.discard_pending()
        self._map_panel.unmount()
        super().closeEvent(event)


__all__ = ["MainWindow", "demo_users"]
