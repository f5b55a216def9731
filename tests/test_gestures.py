"""Tests for reporting user gestures as camera changes."""

from __future__ import annotations

import os

from PySide6.QtWidgets import QApplication

from fake_widget import FakeFactory
from geospot.controllers.gestures import GestureListener
from geospot.controllers.lifecycle import MapLifecycle
from geospot.models.entities import Position

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
app = QApplication.instance() or QApplication([])


def _build():
    reported = []
    factory = FakeFactory()
    lifecycle = MapLifecycle(factory)
    GestureListener(lifecycle, lambda center, zoom: reported.append((center, zoom)))
    lifecycle.attach_container(object())
    lifecycle.activate()
    return lifecycle, factory.last, reported


def test_pan_and_zoom_are_reported():
    _, widget, reported = _build()

    widget.user_pan(Position(48.86, 2.34))
    widget.user_zoom(14)

    assert reported == [(Position(48.86, 2.34), 13), (Position(48.86, 2.34), 14)]


def test_reported_zoom_is_integer():
    _, widget, reported = _build()

    widget.user_zoom(13.6)

    assert reported[-1][1] == 14
    assert isinstance(reported[-1][1], int)


def test_listener_never_moves_the_widget():
    _, widget, _ = _build()

    widget.user_pan(Position(48.0, 2.0))

    assert widget.set_view_calls == []
    assert widget.fly_to_calls == []


def test_released_widget_no_longer_reports():
    lifecycle, widget, reported = _build()

    lifecycle.deactivate()
    widget.user_pan(Position(10.0, 10.0))

    assert reported == []
