"""Marker glyphs for each entity kind.

Glyphs are rasterized from SVG the first time a kind is requested and then
shared by every marker of that kind for the rest of the process.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from PySide6.QtCore import QByteArray, Qt
from PySide6.QtGui import QImage, QPainter, QPixmap
from PySide6.QtSvg import QSvgRenderer

from geospot.constants import ICON_ANCHOR, ICON_SIZE, POPUP_ANCHOR
from geospot.models.entities import EntityKind

_SVG_TEMPLATE = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="24" height="24" viewBox="0 0 24 24" '
    'fill="none" stroke="{color}" stroke-width="2" stroke-linecap="round" '
    'stroke-linejoin="round">{body}</svg>'
)

_GLYPHS = {
    EntityKind.USER: (
        "#2563eb",
        '<path d="M19 21v-2a4 4 0 0 0-4-4H9a4 4 0 0 0-4 4v2"/>'
        '<circle cx="12" cy="7" r="4"/>',
    ),
    EntityKind.LANDMARK: (
        "#e76f51",
        '<line x1="3" x2="21" y1="22" y2="22"/>'
        '<line x1="6" x2="6" y1="18" y2="11"/>'
        '<line x1="10" x2="10" y1="18" y2="11"/>'
        '<line x1="14" x2="14" y1="18" y2="11"/>'
        '<line x1="18" x2="18" y1="18" y2="11"/>'
        '<polygon points="12 2 20 7 4 7"/>',
    ),
}


@dataclass(frozen=True, eq=False)
class MarkerIcon:
    """Rasterized glyph plus the offsets used to place it and its popup."""

    kind: EntityKind
    pixmap: QPixmap
    anchor: tuple[int, int] = ICON_ANCHOR
    popup_anchor: tuple[int, int] = POPUP_ANCHOR


def glyph_svg(kind: EntityKind) -> str:
    color, body = _GLYPHS[kind]
    return _SVG_TEMPLATE.format(color=color, body=body)


@lru_cache(maxsize=None)
def resolve_icon(kind: EntityKind) -> MarkerIcon:
    """Return the shared icon for ``kind``. Requires a running QGuiApplication."""
    renderer = QSvgRenderer(QByteArray(glyph_svg(kind).encode("utf-8")))
    image = QImage(ICON_SIZE, ICON_SIZE, QImage.Format.Format_ARGB32_Premultiplied)
    image.fill(Qt.GlobalColor.transparent)
    painter = QPainter(image)
    painter.setRenderHint(QPainter.RenderHint.Antialiasing, True)
    renderer.render(painter)
    painter.end()
    return MarkerIcon(kind=kind, pixmap=QPixmap.fromImage(image))


__all__ = ["MarkerIcon", "glyph_svg", "resolve_icon"]
