"""Scene items for markers and the popup shown above an activated marker."""

from __future__ import annotations

import html
import logging
from typing import Callable, Optional

from PySide6.QtCore import QUrl, Qt, Signal
from PySide6.QtGui import QDesktopServices
from PySide6.QtWidgets import QGraphicsItem, QGraphicsPixmapItem, QLabel, QWidget

from geospot.controllers.markers import MarkerKey, MarkerSpec, PopupContent
from geospot.models.entities import EntityKind
from geospot.services.geo import project
from geospot.ui.icons import MarkerIcon

log = logging.getLogger(__name__)


def open_external_url(url: str) -> bool:
    return QDesktopServices.openUrl(QUrl(url))


def popup_html(content: PopupContent) -> str:
    parts = [f"<b>{html.escape(content.title)}</b>"]
    if content.body:
        parts.append(f"<p style='margin-top:4px'>{html.escape(content.body)}</p>")
    if content.link_url:
        href = html.escape(content.link_url, quote=True)
        parts.append(f"<a href=\"{href}\">{html.escape(content.link_text)}</a>")
    return "".join(parts)


class MarkerItem(QGraphicsPixmapItem):
    """Fixed-size marker glyph anchored at an entity's position."""

    _Z_VALUES = {EntityKind.LANDMARK: 10.0, EntityKind.USER: 11.0}

    def __init__(
        self,
        spec: MarkerSpec,
        icon: MarkerIcon,
        on_click: Callable[["MarkerItem"], None],
    ) -> None:
        super().__init__(icon.pixmap)
        self.spec = spec
        self.icon = icon
        self._on_click = on_click

        x, y = project(spec.position)
        self.setPos(x, y)
        self.setOffset(-icon.anchor[0], -icon.anchor[1])
        # Glyphs keep their pixel size at every zoom level.
        self.setFlag(QGraphicsItem.GraphicsItemFlag.ItemIgnoresTransformations, True)
        self.setShapeMode(QGraphicsPixmapItem.ShapeMode.BoundingRectShape)
        self.setZValue(self._Z_VALUES.get(spec.kind, 10.0))
        self.setToolTip(spec.label)
        self.setAcceptHoverEvents(True)
        self.setCursor(Qt.CursorShape.PointingHandCursor)

    @property
    def key(self) -> MarkerKey:
        return self.spec.key

    def mousePressEvent(self, event):  # type: ignore[override]
        if event.button() == Qt.MouseButton.LeftButton:
            event.accept()
            return
        event.ignore()

    def mouseReleaseEvent(self, event):  # type: ignore[override]
        if event.button() == Qt.MouseButton.LeftButton and self.contains(event.pos()):
            self._on_click(self)
            event.accept()
            return
        super().mouseReleaseEvent(event)


class PopupLabel(QLabel):
    """Rich-text popup for one marker.

    Mouse events stop here, so following the reference link never reaches the
    marker or the map underneath.
    """

    linkOpened = Signal(str)

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.key: Optional[MarkerKey] = None
        self.setTextFormat(Qt.TextFormat.RichText)
        self.setWordWrap(True)
        self.setTextInteractionFlags(Qt.TextInteractionFlag.LinksAccessibleByMouse)
        self.setOpenExternalLinks(False)
        self.setMaximumWidth(256)
        self.setMinimumWidth(90)
        self.setMargin(8)
        self.setStyleSheet(
            "QLabel { background: white; color: #1f2937; border: 1px solid #cbd5e1;"
            " border-radius: 6px; }"
        )
        self.linkActivated.connect(self._open_link)
        self.hide()

    def show_content(self, key: MarkerKey, content: PopupContent) -> None:
        self.key = key
        self.setText(popup_html(content))
        self.adjustSize()
        self.show()
        self.raise_()

    def dismiss(self) -> None:
        self.key = None
        self.hide()

    def _open_link(self, url: str) -> None:
        log.info("Opening %s", url)
        if not open_external_url(url):
            log.warning("No handler could open %s", url)
        self.linkOpened.emit(url)

    def mousePressEvent(self, event):  # type: ignore[override]
        super().mousePressEvent(event)
        event.accept()

    def mouseReleaseEvent(self, event):  # type: ignore[override]
        super().mouseReleaseEvent(event)
        event.accept()

    def mouseDoubleClickEvent(self, event):  # type: ignore[override]
        super().mouseDoubleClickEvent(event)
        event.accept()


__all__ = ["MarkerItem", "PopupLabel", "open_external_url", "popup_html"]
