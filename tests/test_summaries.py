"""Tests for landmark summaries and the background task runner."""

from __future__ import annotations

import logging
import os

import pytest
from PySide6.QtWidgets import QApplication

from geospot.models.entities import Landmark, Position
from geospot.services.summaries import (
    ExtractiveSummarizer,
    SummaryCache,
    SummaryError,
    SummaryService,
)
from geospot.services.tasks import TaskRunner

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
app = QApplication.instance() or QApplication([])

LOUVRE = Landmark(
    title="Louvre Museum",
    description="The world's largest art museum. It sits on the Right Bank of the Seine.",
    position=Position(48.8606, 2.3376),
)
EMPTY = Landmark(title="Mystery", position=Position(48.85, 2.35))


class ImmediateRunner:
    """Runs submitted work synchronously."""

    def __init__(self):
        self.submitted = 0

    def submit(self, fn, on_success, on_failure=None):
        self.submitted += 1
        try:
            result = fn()
        except Exception as exc:
            on_failure(exc)
        else:
            on_success(result)
        return self.submitted


def test_extractive_summary_is_first_sentence():
    summary = ExtractiveSummarizer().summarize(LOUVRE.title, LOUVRE.description)

    assert summary == "The world's largest art museum."


def test_extractive_summary_is_capped():
    summary = ExtractiveSummarizer(max_length=20).summarize("Long", "word " * 40)

    assert len(summary) <= 20
    assert summary.endswith("...")


def test_extractive_summary_requires_description():
    with pytest.raises(SummaryError):
        ExtractiveSummarizer().summarize("Mystery", "   ")


def test_cache_emits_only_on_change():
    cache = SummaryCache()
    changes = []
    cache.summaryChanged.connect(changes.append)

    cache.store("Louvre Museum", "Museum.")
    cache.store("Louvre Museum", "Museum.")

    assert changes == ["Louvre Museum"]
    assert cache.get("Louvre Museum") == "Museum."
    assert "Louvre Museum" in cache
    assert len(cache) == 1


def test_service_fills_cache_and_skips_known_landmarks():
    cache = SummaryCache()
    runner = ImmediateRunner()
    service = SummaryService(cache, runner=runner)

    assert service.request([LOUVRE]) == 1
    assert service.request([LOUVRE]) == 0

    assert cache.get("Louvre Museum") == "The world's largest art museum."
    assert runner.submitted == 1


def test_failed_summary_leaves_cache_empty_and_is_not_retried(caplog):
    cache = SummaryCache()
    service = SummaryService(cache, runner=ImmediateRunner())
    failures = []
    service.summaryFailed.connect(lambda identity, message: failures.append(identity))

    with caplog.at_level(logging.WARNING, logger="geospot.services.summaries"):
        assert service.request([EMPTY]) == 1
    assert service.request([EMPTY]) == 0

    assert cache.get("Mystery") is None
    assert failures == ["Mystery"]
    assert "unavailable" in caplog.text


def test_task_runner_delivers_results_on_owner_thread():
    runner = TaskRunner()
    results, errors = [], []

    runner.submit(lambda: 6 * 7, results.append, errors.append)
    runner.submit(lambda: 1 / 0, results.append, errors.append)
    assert runner.wait_for_done(5000)
    for _ in range(10):
        app.processEvents()
        if runner.pending_count == 0:
            break

    assert results == [42]
    assert len(errors) == 1
    assert isinstance(errors[0], ZeroDivisionError)


def test_discarded_tasks_drop_their_results():
    runner = TaskRunner()
    results = []

    runner.submit(lambda: "late", results.append)
    runner.discard_pending()
    runner.wait_for_done(5000)
    app.processEvents()

    assert results == []
    assert runner.pending_count == 0
