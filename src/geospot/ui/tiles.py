"""Raster tile layer fetched asynchronously from a slippy-map tile server."""

from __future__ import annotations

import logging
from collections import OrderedDict
from functools import partial
from typing import Dict, Optional

from PySide6.QtCore import QObject, QRectF, Qt, QUrl
from PySide6.QtGui import QPixmap
from PySide6.QtNetwork import QNetworkAccessManager, QNetworkReply, QNetworkRequest
from PySide6.QtWidgets import QGraphicsPixmapItem, QGraphicsScene

from geospot.constants import TILE_SIZE
from geospot.models.settings import MapSettings
from geospot.services.geo import tile_range

log = logging.getLogger(__name__)

TileKey = tuple[int, int, int]  # (zoom, column, row)


class TileLayer(QObject):
    """Keeps the tiles covering the visible area in the scene.

    Tiles are placed in zoom-0 world coordinates, scaled down by ``2**zoom``,
    so the view transform alone decides how large they appear.
    """

    _TILE_Z = -10.0

    def __init__(
        self,
        scene: QGraphicsScene,
        settings: MapSettings,
        parent: Optional[QObject] = None,
        manager: Optional[QNetworkAccessManager] = None,
        cache_size: int = 512,
    ) -> None:
        super().__init__(parent)
        self._scene = scene
        self._settings = settings
        self._manager = manager or QNetworkAccessManager(self)
        self._cache_size = cache_size
        self._cache: "OrderedDict[TileKey, QPixmap]" = OrderedDict()
        self._items: Dict[TileKey, QGraphicsPixmapItem] = {}
        self._inflight: Dict[TileKey, QNetworkReply] = {}
        self._zoom: Optional[int] = None

    @property
    def zoom_level(self) -> Optional[int]:
        return self._zoom

    @property
    def inflight_count(self) -> int:
        return len(self._inflight)

    def update_view(self, world_rect: QRectF, zoom: float) -> None:
        """Request and place the tiles intersecting ``world_rect`` at ``zoom``."""
        level = int(round(self._settings.clamp_zoom(zoom)))
        if level != self._zoom:
            self._clear_items()
            self._abort_requests()
            self._zoom = level

        columns, rows = tile_range(
            world_rect.left(), world_rect.top(), world_rect.right(), world_rect.bottom(), level
        )
        for column in columns:
            for row in rows:
                key = (level, column, row)
                if key in self._items or key in self._inflight:
                    continue
                pixmap = self._cache.get(key)
                if pixmap is not None:
                    self._cache.move_to_end(key)
                    self._place(key, pixmap)
                else:
                    self._request(key)

    def clear(self) -> None:
        self._clear_items()
        self._abort_requests()
        self._zoom = None

    def tile_url(self, key: TileKey) -> str:
        zoom, column, row = key
        return self._settings.tile_url.format(z=zoom, x=column, y=row, s="a")

    # Internal helpers ---------------------------------------------------

    def _request(self, key: TileKey) -> None:
        request = QNetworkRequest(QUrl(self.tile_url(key)))
        request.setRawHeader(b"User-Agent", self._settings.user_agent.encode("utf-8"))
        reply = self._manager.get(request)
        self._inflight[key] = reply
        reply.finished.connect(partial(self._on_reply_finished, key, reply))

    def _on_reply_finished(self, key: TileKey, reply: QNetworkReply) -> None:
        if self._inflight.get(key) is reply:
            del self._inflight[key]
        try:
            if reply.error() != QNetworkReply.NetworkError.NoError:
                log.debug("Tile %s failed: %s", key, reply.errorString())
                return
            pixmap = QPixmap()
            if not pixmap.loadFromData(reply.readAll()):
                log.debug("Tile %s is not a readable image", key)
                return
            self._remember(key, pixmap)
            if key[0] == self._zoom and key not in self._items:
                self._place(key, pixmap)
        finally:
            reply.deleteLater()

    def _remember(self, key: TileKey, pixmap: QPixmap) -> None:
        self._cache[key] = pixmap
        self._cache.move_to_end(key)
        while len(self._cache) > self._cache_size:
            self._cache.popitem(last=False)

    def _place(self, key: TileKey, pixmap: QPixmap) -> None:
        zoom, column, row = key
        span = TILE_SIZE / (2 ** zoom)
        item = self._scene.addPixmap(pixmap)
        item.setTransformationMode(Qt.TransformationMode.SmoothTransformation)
        item.setPos(column * span, row * span)
        item.setScale(span / max(1, pixmap.width()))
        item.setZValue(self._TILE_Z)
        self._items[key] = item

    def _clear_items(self) -> None:
        for item in self._items.values():
            self._scene.removeItem(item)
        self._items.clear()

    def _abort_requests(self) -> None:
        inflight = list(self._inflight.values())
        self._inflight.clear()
        for reply in inflight:
            reply.abort()


__all__ = ["TileKey", "TileLayer"]
