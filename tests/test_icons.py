"""Tests for the shared marker glyphs."""

from __future__ import annotations

import os

from PySide6.QtWidgets import QApplication

from geospot.models.entities import EntityKind
from geospot.ui.icons import glyph_svg, resolve_icon

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
app = QApplication.instance() or QApplication([])


def test_icon_is_built_once_per_kind():
    first = resolve_icon(EntityKind.LANDMARK)
    second = resolve_icon(EntityKind.LANDMARK)

    assert first is second
    assert resolve_icon(EntityKind.USER) is not first


def test_icon_geometry():
    icon = resolve_icon(EntityKind.USER)

    assert icon.pixmap.width() == 24
    assert icon.pixmap.height() == 24
    assert icon.anchor == (12, 24)
    assert icon.popup_anchor == (0, -24)


def test_glyphs_differ_by_kind():
    assert glyph_svg(EntityKind.USER) != glyph_svg(EntityKind.LANDMARK)
    assert "<svg" in glyph_svg(EntityKind.LANDMARK)
