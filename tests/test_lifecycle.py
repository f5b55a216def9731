"""Tests for creating and releasing the map widget."""

from __future__ import annotations

import logging
import os

from PySide6.QtWidgets import QApplication

from fake_widget import FakeFactory
from geospot.controllers.lifecycle import MapLifecycle

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
app = QApplication.instance() or QApplication([])


def test_activation_waits_for_container():
    factory = FakeFactory()
    lifecycle = MapLifecycle(factory)

    lifecycle.activate()
    assert lifecycle.widget is None
    assert lifecycle.is_pending
    assert factory.created == []

    container = object()
    lifecycle.attach_container(container)
    assert lifecycle.widget is factory.last
    assert factory.containers == [container]
    assert not lifecycle.is_pending


def test_activate_is_idempotent():
    factory = FakeFactory()
    lifecycle = MapLifecycle(factory)
    lifecycle.attach_container(object())

    lifecycle.activate()
    lifecycle.activate()

    assert len(factory.created) == 1
    assert lifecycle.generation == 1


def test_attach_without_request_does_not_construct():
    factory = FakeFactory()
    lifecycle = MapLifecycle(factory)

    lifecycle.attach_container(object())

    assert factory.created == []
    assert not lifecycle.is_active


def test_deactivate_releases_and_remount_builds_fresh_instance():
    factory = FakeFactory()
    lifecycle = MapLifecycle(factory)
    lifecycle.attach_container(object())
    released = []
    lifecycle.add_release_hook(released.append)

    lifecycle.activate()
    first = lifecycle.widget
    lifecycle.deactivate()

    assert lifecycle.widget is None
    assert released == [first]
    assert first.teardown_calls == 1

    lifecycle.deactivate()
    assert first.teardown_calls == 1

    lifecycle.activate()
    assert lifecycle.widget is not None
    assert lifecycle.widget is not first
    assert lifecycle.generation == 2


def test_teardown_failure_is_logged_not_raised(caplog):
    factory = FakeFactory()
    lifecycle = MapLifecycle(factory)
    lifecycle.attach_container(object())
    lifecycle.activate()
    lifecycle.widget.fail_teardown = True

    with caplog.at_level(logging.ERROR, logger="geospot.controllers.lifecycle"):
        lifecycle.deactivate()

    assert lifecycle.widget is None
    assert "Error removing map widget" in caplog.text


def test_failing_ready_hook_tears_widget_down(caplog):
    factory = FakeFactory()
    lifecycle = MapLifecycle(factory)
    later_hook_calls = []

    def broken(widget):
        raise ValueError("setup exploded")

    lifecycle.add_ready_hook(broken)
    lifecycle.add_ready_hook(later_hook_calls.append)
    lifecycle.attach_container(object())

    with caplog.at_level(logging.ERROR, logger="geospot.controllers.lifecycle"):
        lifecycle.activate()

    assert lifecycle.widget is None
    assert factory.last.teardown_calls == 1
    assert later_hook_calls == []
    assert "setup failed" in caplog.text


def test_factory_failure_leaves_manager_inactive(caplog):
    def factory(container):
        raise RuntimeError("no GL context")

    lifecycle = MapLifecycle(factory)
    lifecycle.attach_container(object())

    with caplog.at_level(logging.ERROR, logger="geospot.controllers.lifecycle"):
        lifecycle.activate()

    assert lifecycle.widget is None
    assert not lifecycle.is_pending
    assert "construction failed" in caplog.text


def test_detach_container_releases_widget():
    factory = FakeFactory()
    lifecycle = MapLifecycle(factory)
    lifecycle.attach_container(object())
    lifecycle.activate()
    widget = lifecycle.widget

    lifecycle.detach_container()

    assert lifecycle.widget is None
    assert lifecycle.container is None
    assert widget.teardown_calls == 1
