"""Landmark sources: a bundled YAML catalog and Wikipedia geosearch.

Both sources are blocking and are meant to run on a background worker
(see :mod:`geospot.services.tasks`), never on the GUI thread.

Usage
-----
    source = CatalogLandmarkSource.bundled()
    for landmark in source.fetch(Position(48.8566, 2.3522), radius_m=5000):
        print(landmark.title, landmark.position)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import requests
import yaml

from geospot.constants import DEFAULT_USER_AGENT
from geospot.models.entities import Landmark, Position
from geospot.services.geo import haversine_m

log = logging.getLogger(__name__)

BUNDLED_CATALOG = Path(__file__).resolve().parent.parent / "data" / "paris_landmarks.yaml"

_WIKIPEDIA_API = "https://{lang}.wikipedia.org/w/api.php"
_WIKIPEDIA_MAX_RADIUS_M = 10_000
_WIKIPEDIA_MAX_LIMIT = 50


class LandmarkSourceError(Exception):
    """Raised when landmarks cannot be loaded or fetched."""


class CatalogLandmarkSource:
    """Landmarks from a static YAML catalog, filtered by distance."""

    def __init__(self, landmarks: Iterable[Landmark]) -> None:
        self._landmarks = list(landmarks)

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> "CatalogLandmarkSource":
        return cls(load_catalog(yaml_path))

    @classmethod
    def bundled(cls) -> "CatalogLandmarkSource":
        return cls.from_yaml(BUNDLED_CATALOG)

    @property
    def landmarks(self) -> list[Landmark]:
        return list(self._landmarks)

    def fetch(self, center: Position, radius_m: int = 10_000, limit: int = 20) -> List[Landmark]:
        """Return catalog landmarks within ``radius_m`` of ``center``, nearest first."""
        log.debug("Catalog lookup near %.5f, %.5f (radius %d m)", center.lat, center.lng, radius_m)
        ranked = []
        for landmark in self._landmarks:
            if landmark.position is None or not landmark.position.is_valid:
                continue
            distance = haversine_m(center, landmark.position)
            if distance <= radius_m:
                ranked.append((distance, landmark))
        ranked.sort(key=lambda item: item[0])
        return [landmark for _, landmark in ranked[:limit]]


class WikipediaLandmarkSource:
    """Nearby articles from the MediaWiki geosearch API."""

    def __init__(
        self,
        language: str = "en",
        session: Optional[requests.Session] = None,
        timeout: float = 15.0,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self._url = _WIKIPEDIA_API.format(lang=language)
        self._session = session or requests.Session()
        self._session.headers["User-Agent"] = user_agent
        self._timeout = timeout

    def fetch(self, center: Position, radius_m: int = 10_000, limit: int = 20) -> List[Landmark]:
        """Return landmarks near ``center``; raises :class:`LandmarkSourceError` on failure."""
        params = {
            "action": "query",
            "format": "json",
            "formatversion": 2,
            "generator": "geosearch",
            "ggscoord": f"{center.lat}|{center.lng}",
            "ggsradius": max(10, min(radius_m, _WIKIPEDIA_MAX_RADIUS_M)),
            "ggslimit": max(1, min(limit, _WIKIPEDIA_MAX_LIMIT)),
            "prop": "coordinates|extracts|info",
            "exintro": 1,
            "explaintext": 1,
            "exlimit": "max",
            "inprop": "url",
        }
        try:
            resp = self._session.get(self._url, params=params, timeout=self._timeout)
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as exc:
            raise LandmarkSourceError(f"Wikipedia geosearch failed: {exc}") from exc

        pages = data.get("query", {}).get("pages", [])
        landmarks = [lm for lm in (_parse_page(page) for page in pages) if lm is not None]
        log.info("Wikipedia returned %d landmark(s) near %.4f, %.4f", len(landmarks), center.lat, center.lng)
        return landmarks


def load_catalog(yaml_path: Path) -> List[Landmark]:
    """Load and validate a landmark catalog YAML file."""
    if not yaml_path.exists():
        raise LandmarkSourceError(f"Catalog file does not exist: {yaml_path}")

    with yaml_path.open("r", encoding="utf-8") as handle:
        parsed = yaml.safe_load(handle)

    if not isinstance(parsed, dict):
        raise LandmarkSourceError("Catalog YAML must be a mapping at the top level")
    entries = parsed.get("landmarks", [])
    if not isinstance(entries, list):
        raise LandmarkSourceError("landmarks must be a list")

    result: List[Landmark] = []
    for index, entry in enumerate(entries):
        result.append(_parse_entry(entry, index))
    return result


def _parse_entry(entry: Any, index: int) -> Landmark:
    if not isinstance(entry, dict):
        raise LandmarkSourceError(f"landmarks[{index}] must be a mapping")
    title = entry.get("title")
    if not isinstance(title, str) or not title:
        raise LandmarkSourceError(f"landmarks[{index}].title must be a non-empty string")
    description = entry.get("description") or ""
    url = entry.get("url")
    if url is not None and not isinstance(url, str):
        raise LandmarkSourceError(f"landmarks[{index}].url must be a string")

    position = None
    raw_position = entry.get("position")
    if raw_position is not None:
        if not isinstance(raw_position, (list, tuple)) or len(raw_position) < 2:
            raise LandmarkSourceError(f"landmarks[{index}].position must be a [lat, lng] array")
        lat, lng = raw_position[0], raw_position[1]
        if not isinstance(lat, (int, float)) or not isinstance(lng, (int, float)):
            raise LandmarkSourceError(f"landmarks[{index}].position values must be numeric")
        position = Position(float(lat), float(lng))

    return Landmark(title=title, description=str(description), url=url, position=position)


def _parse_page(page: Dict[str, Any]) -> Optional[Landmark]:
    try:
        coords = page.get("coordinates") or []
        position = None
        if coords:
            position = Position(float(coords[0]["lat"]), float(coords[0]["lon"]))
        return Landmark(
            title=page["title"],
            description=page.get("extract", "") or "",
            url=page.get("fullurl"),
            position=position,
        )
    except (KeyError, IndexError, TypeError, ValueError) as exc:
        log.debug("Failed to parse geosearch page: %s", exc)
        return None


__all__ = [
    "BUNDLED_CATALOG",
    "CatalogLandmarkSource",
    "LandmarkSourceError",
    "WikipediaLandmarkSource",
    "load_catalog",
]
