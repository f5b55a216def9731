"""Tests for entity records, selections and cameras."""

from __future__ import annotations

import pytest

from geospot.models.camera import Camera
from geospot.models.entities import EntityKind, Landmark, Position, Selection, User, resolve_position


def test_position_validity():
    assert Position(48.8566, 2.3522).is_valid
    assert not Position(91.0, 0.0).is_valid
    assert not Position(0.0, -181.0).is_valid
    assert not Position(float("inf"), 0.0).is_valid


def test_resolve_position_filters_missing_and_invalid():
    assert resolve_position(User(id="a", name="A")) is None
    assert resolve_position(Landmark(title="X", position=Position(float("nan"), 1.0))) is None
    assert resolve_position(Landmark(title="Y", position=Position(1.0, 1.0))) == Position(1.0, 1.0)


def test_selection_keys_are_tagged_by_kind():
    user = User(id="same", name="Sam", location=Position(1.0, 1.0))
    landmark = Landmark(title="same", position=Position(1.0, 1.0))

    assert Selection.of(user).key == (EntityKind.USER, "same")
    assert Selection.of(landmark).key == (EntityKind.LANDMARK, "same")
    assert Selection.of(user).user is user
    assert Selection.of(user).landmark is None
    assert Selection.none().is_empty
    assert Selection.of(None).key is None


def test_selection_rejects_mismatched_kind():
    with pytest.raises(ValueError):
        Selection(kind=EntityKind.USER, entity=Landmark(title="X"))
    with pytest.raises(ValueError):
        Selection(kind=EntityKind.USER)


def test_camera_matches_within_tolerance():
    base = Camera(Position(48.8566, 2.3522), 13)

    assert base.matches(Camera(Position(48.856605, 2.352195), 13), 1e-5)
    assert not base.matches(Camera(Position(48.8567, 2.3522), 13), 1e-5)
    assert not base.matches(base.with_zoom(14), 1e-5)
