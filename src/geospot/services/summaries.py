"""Landmark summaries: the summarizer, its cache, and the request service."""

from __future__ import annotations

import logging
import re
from typing import Callable, Dict, Iterable, Optional, Protocol, Set

from PySide6.QtCore import QObject, Signal

from geospot.models.entities import Landmark
from geospot.services.tasks import TaskRunner

log = logging.getLogger(__name__)

_SENTENCE_END = re.compile(r"(?<=[.!?])\s+")


class SummaryError(Exception):
    """Raised when a summary cannot be produced."""


class Summarizer(Protocol):
    def summarize(self, title: str, description: str, url: Optional[str]) -> str: ...


class ExtractiveSummarizer:
    """One-sentence summary taken from the start of the description."""

    def __init__(self, max_length: int = 200) -> None:
        self.max_length = max_length

    def summarize(self, title: str, description: str, url: Optional[str] = None) -> str:
        text = " ".join(description.split())
        if not text:
            raise SummaryError(f"No description to summarize for '{title}'")
        sentence = _SENTENCE_END.split(text, maxsplit=1)[0]
        if len(sentence) > self.max_length:
            sentence = sentence[: self.max_length - 3].rstrip() + "..."
        return sentence


class SummaryCache(QObject):
    """Landmark identity -> summary text.

    Written by :class:`SummaryService`; the map view only reads it and
    re-renders popups on ``summaryChanged``.
    """

    summaryChanged = Signal(str)

    def __init__(self, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._summaries: Dict[str, str] = {}

    def get(self, identity: str) -> Optional[str]:
        return self._summaries.get(identity)

    def __contains__(self, identity: object) -> bool:
        return identity in self._summaries

    def __len__(self) -> int:
        return len(self._summaries)

    def store(self, identity: str, summary: str) -> None:
        if self._summaries.get(identity) == summary:
            return
        self._summaries[identity] = summary
        self.summaryChanged.emit(identity)

    def clear(self) -> None:
        self._summaries.clear()


class SummaryService(QObject):
    """Requests summaries for landmarks in the background and fills the cache."""

    summaryFailed = Signal(str, str)

    def __init__(
        self,
        cache: SummaryCache,
        summarizer: Optional[Summarizer] = None,
        runner: Optional[TaskRunner] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._cache = cache
        self._summarizer = summarizer or ExtractiveSummarizer()
        self._runner = runner or TaskRunner(parent=self)
        self._pending: Set[str] = set()
        self._failed: Set[str] = set()

    @property
    def cache(self) -> SummaryCache:
        return self._cache

    def is_pending(self, identity: str) -> bool:
        return identity in self._pending

    def request(self, landmarks: Iterable[Landmark]) -> int:
        """Queue summaries for landmarks without one; returns the number queued."""
        queued = 0
        for landmark in landmarks:
            identity = landmark.identity
            if identity in self._cache or identity in self._pending or identity in self._failed:
                continue
            self._pending.add(identity)
            self._runner.submit(
                self._make_job(landmark),
                self._on_done(identity),
                self._on_error(identity),
            )
            queued += 1
        return queued

    def _make_job(self, landmark: Landmark) -> Callable[[], str]:
        summarizer = self._summarizer

        def job() -> str:
            return summarizer.summarize(landmark.title, landmark.description, landmark.url)

        return job

    def _on_done(self, identity: str) -> Callable[[str], None]:
        def handle(summary: str) -> None:
            self._pending.discard(identity)
            self._cache.store(identity, summary)

        return handle

    def _on_error(self, identity: str) -> Callable[[Exception], None]:
        def handle(error: Exception) -> None:
            self._pending.discard(identity)
            self._failed.add(identity)
            log.warning("Summary for '%s' unavailable: %s", identity, error)
            self.summaryFailed.emit(identity, str(error))

        return handle


__all__ = [
    "ExtractiveSummarizer",
    "Summarizer",
    "SummaryCache",
    "SummaryError",
    "SummaryService",
]
