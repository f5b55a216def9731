"""Run blocking collaborator calls on a worker pool and report back on the GUI thread."""

from __future__ import annotations

import itertools
import logging
from typing import Any, Callable, Dict, Optional, Tuple

from PySide6.QtCore import QObject, QRunnable, QThreadPool, Signal, Slot

log = logging.getLogger(__name__)

SuccessCallback = Callable[[Any], None]
FailureCallback = Callable[[Exception], None]


class _TaskSignals(QObject):
    succeeded = Signal(int, object)
    failed = Signal(int, object)


class _Task(QRunnable):
    def __init__(self, task_id: int, fn: Callable[[], Any], signals: _TaskSignals) -> None:
        super().__init__()
        self.setAutoDelete(False)
        self._task_id = task_id
        self._fn = fn
        self._signals = signals

    def run(self) -> None:
        try:
            result = self._fn()
        except Exception as exc:  # delivered to the failure callback on the GUI thread
            self._signals.failed.emit(self._task_id, exc)
            return
        self._signals.succeeded.emit(self._task_id, result)


class TaskRunner(QObject):
    """Submit callables to a ``QThreadPool``.

    Callbacks always run on the thread that owns the runner (the GUI thread),
    because the worker only emits queued signals.
    """

    def __init__(self, pool: Optional[QThreadPool] = None, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._pool = pool or QThreadPool.globalInstance()
        self._signals = _TaskSignals(self)
        self._signals.succeeded.connect(self._on_succeeded)
        self._signals.failed.connect(self._on_failed)
        self._ids = itertools.count(1)
        self._pending: Dict[int, Tuple[SuccessCallback, Optional[FailureCallback]]] = {}
        self._running: Dict[int, _Task] = {}  # keeps runnables alive until they report

    def submit(
        self,
        fn: Callable[[], Any],
        on_success: SuccessCallback,
        on_failure: Optional[FailureCallback] = None,
    ) -> int:
        task_id = next(self._ids)
        task = _Task(task_id, fn, self._signals)
        self._pending[task_id] = (on_success, on_failure)
        self._running[task_id] = task
        self._pool.start(task)
        return task_id

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def discard_pending(self) -> None:
        """Forget outstanding tasks; their results will be dropped when they arrive."""
        self._pending.clear()

    def wait_for_done(self, msecs: int = -1) -> bool:
        return self._pool.waitForDone(msecs)

    @Slot(int, object)
    def _on_succeeded(self, task_id: int, result: Any) -> None:
        self._running.pop(task_id, None)
        entry = self._pending.pop(task_id, None)
        if entry is None:
            return
        on_success, _ = entry
        on_success(result)

    @Slot(int, object)
    def _on_failed(self, task_id: int, error: Exception) -> None:
        self._running.pop(task_id, None)
        entry = self._pending.pop(task_id, None)
        if entry is None:
            return
        _, on_failure = entry
        if on_failure is None:
            log.warning("Background task %d failed: %s", task_id, error)
            return
        on_failure(error)


__all__ = ["TaskRunner"]
