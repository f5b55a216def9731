"""Integration tests for the map panel and main window wiring."""

from __future__ import annotations

import os

from PySide6.QtWidgets import QApplication

from geospot.models.entities import EntityKind, Landmark, Position, Selection
from geospot.ui.main_window import MainWindow, demo_users
from geospot.ui.map_panel import MapPanel
from geospot.ui.map_widget import SlippyMapView

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
app = QApplication.instance() or QApplication([])

LONDON = Position(51.5074, -0.1278)
EIFFEL = Landmark(
    title="Eiffel Tower",
    description="Wrought-iron lattice tower on the Champ de Mars. Built in 1889.",
    url="https://en.wikipedia.org/wiki/Eiffel_Tower",
    position=Position(48.8584, 2.2945),
)


class StaticSource:
    def __init__(self, landmarks):
        self.landmarks = landmarks
        self.calls = []

    def fetch(self, center, radius_m=10_000, limit=20):
        self.calls.append((center, radius_m, limit))
        return list(self.landmarks)


def _drain(window) -> None:
    for _ in range(20):
        window._runner.wait_for_done(5000)
        app.processEvents()


def test_panel_builds_view_on_show_and_releases_on_hide():
    panel = MapPanel(load_tiles=False)
    assert panel.view is None

    panel.show()
    first = panel.view
    assert isinstance(first, SlippyMapView)

    panel.set_desired_camera(LONDON, 10)
    assert first.camera().center == LONDON

    panel.hide()
    assert panel.view is None
    assert first.is_torn_down

    panel.show()
    second = panel.view
    assert second is not None and second is not first
    assert second.camera().center == LONDON
    assert second.camera().zoom == 10
    panel.unmount()


def test_panel_forwards_gestures_and_marker_clicks():
    panel = MapPanel(load_tiles=False)
    cameras, entities = [], []
    panel.cameraChanged.connect(lambda center, zoom: cameras.append((center, zoom)))
    panel.entityActivated.connect(entities.append)
    panel.set_landmarks([EIFFEL])
    panel.show()
    view = panel.view

    view.zoomFinished.emit()
    view.markerActivated.emit((EntityKind.LANDMARK, "Eiffel Tower"))

    assert cameras == [(view.camera().center, 13)]
    assert entities == [EIFFEL]
    panel.unmount()


def test_window_finds_landmarks_and_selects_them():
    source = StaticSource([EIFFEL])
    window = MainWindow(source=source, load_tiles=False)
    window.show()
    view = window.map_panel.view

    window.find_nearby_landmarks()
    _drain(window)

    assert source.calls and source.calls[0][0] == Position(48.8566, 2.3522)
    assert window.landmarks == [EIFFEL]
    keys = {spec.key for spec in view.marker_specs()}
    assert (EntityKind.LANDMARK, "Eiffel Tower") in keys
    assert len(keys) == len(demo_users()) + 1

    spec = view.marker_item((EntityKind.LANDMARK, "Eiffel Tower")).spec
    assert spec.popup.body == "Wrought-iron lattice tower on the Champ de Mars."

    view.markerActivated.emit((EntityKind.LANDMARK, "Eiffel Tower"))
    assert window.selection == Selection.of(EIFFEL)
    assert view.target_camera().center == EIFFEL.position
    assert view.target_camera().zoom == 15
    window.close()
