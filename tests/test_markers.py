"""Tests for marker specs, popup text and marker click routing."""

from __future__ import annotations

import os

from PySide6.QtWidgets import QApplication

from fake_widget import FakeFactory
from geospot.controllers.lifecycle import MapLifecycle
from geospot.controllers.markers import (
    MarkerRenderer,
    build_marker_specs,
    landmark_popup_body,
    truncate_description,
)
from geospot.models.entities import EntityKind, Landmark, Position, User

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
app = QApplication.instance() or QApplication([])

ALICE = User(id="u1", name="Alice", location=Position(48.8584, 2.2945))
LOUVRE = Landmark(
    title="Louvre Museum",
    description="The world's most-visited museum.",
    url="https://en.wikipedia.org/wiki/Louvre",
    position=Position(48.8606, 2.3376),
)


def test_entities_without_usable_position_are_skipped():
    users = [
        ALICE,
        User(id="u2", name="Ghost"),
        User(id="u3", name="Lost", location=Position(float("nan"), 0.0)),
        User(id="u4", name="Pole", location=Position(95.0, 0.0)),
    ]
    landmarks = [LOUVRE, Landmark(title="Atlantis", description="Sunk.")]

    specs = build_marker_specs(users, landmarks)

    assert [spec.key for spec in specs] == [
        (EntityKind.USER, "u1"),
        (EntityKind.LANDMARK, "Louvre Museum"),
    ]


def test_user_marker_shows_name():
    (spec,) = build_marker_specs([ALICE], [])

    assert spec.label == "Alice"
    assert spec.popup.title == "Alice"
    assert spec.popup.link_url is None


def test_duplicate_keys_keep_first_entity():
    twin = Landmark(title="Louvre Museum", position=Position(1.0, 1.0))

    specs = build_marker_specs([], [LOUVRE, twin])

    assert len(specs) == 1
    assert specs[0].position == LOUVRE.position


def test_long_description_is_truncated_with_ellipsis():
    description = "x" * 200

    body = truncate_description(description, 150)

    assert body == "x" * 150 + "..."
    assert truncate_description("x" * 150, 150) == "x" * 150


def test_popup_prefers_summary_then_description_then_placeholder():
    assert landmark_popup_body(LOUVRE, "Former royal palace.") == "Former royal palace."
    assert landmark_popup_body(LOUVRE, None) == LOUVRE.description
    assert landmark_popup_body(Landmark(title="Empty"), None) == "No description available."


def test_summary_shown_once_available():
    summaries = {}

    (before,) = build_marker_specs([], [LOUVRE], summaries)
    summaries[LOUVRE.title] = "Art museum in Paris."
    (after,) = build_marker_specs([], [LOUVRE], summaries)

    assert before.popup.body == LOUVRE.description
    assert after.popup.body == "Art museum in Paris."
    assert after.popup.link_url == LOUVRE.url
    assert after.popup.link_text == "View on Wikipedia"


def test_renderer_pushes_specs_and_routes_clicks():
    activated = []
    factory = FakeFactory()
    lifecycle = MapLifecycle(factory)
    renderer = MarkerRenderer(lifecycle, activated.append)

    renderer.render([ALICE], [LOUVRE])
    lifecycle.attach_container(object())
    lifecycle.activate()
    widget = factory.last

    assert [spec.key for spec in widget.markers] == [spec.key for spec in renderer.specs]

    widget.markerActivated.emit((EntityKind.LANDMARK, "Louvre Museum"))
    widget.markerActivated.emit((EntityKind.LANDMARK, "Unknown"))

    assert activated == [LOUVRE]


def test_renderer_without_widget_only_records_specs():
    lifecycle = MapLifecycle(FakeFactory())
    renderer = MarkerRenderer(lifecycle, lambda entity: None)

    specs = renderer.render([ALICE], [])

    assert len(specs) == 1
    assert lifecycle.widget is None
