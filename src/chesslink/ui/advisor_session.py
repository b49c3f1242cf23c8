"""Advisor consultation off the UI thread."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol

from PyQt6.QtCore import QObject, QThread, QTimer, pyqtSignal

from chesslink.advisor.base import (
    AdvisorCallback,
    AdvisorReply,
    AdvisorRequest,
    AdvisorRunner,
    MoveAdvisor,
)
from chesslink.advisor.qt_bridge import AdvisorWorker

_LOGGER = logging.getLogger(__name__)

# Worker threads still inside an advisor call when their session shut down.
# They stay referenced here until they stop.
_RETIRED: list[tuple[QThread, AdvisorWorker]] = []


def retired_thread_count() -> int:
    return len(_RETIRED)


def wait_for_retired_threads(timeout_ms: int) -> bool:
    """Block until retired worker threads stop; ``True`` if none is left."""
    for thread, _worker in list(_RETIRED):
        if thread.wait(timeout_ms):
            _forget(thread)
    return not _RETIRED


def _retire(thread: QThread, worker: AdvisorWorker) -> None:
    _RETIRED.append((thread, worker))
    thread.finished.connect(lambda: _forget(thread))
    if thread.isFinished():
        _forget(thread)


def _forget(thread: QThread) -> None:
    _RETIRED[:] = [entry for entry in _RETIRED if entry[0] is not thread]


class ConsultRequestSignal(Protocol):
    """Minimal signal interface used by :class:`AdvisorSession`."""

    def connect(self, slot: Callable[..., object]) -> object: ...

    def emit(self, advisor_obj: object, request_obj: object) -> object: ...


class _AdvisorCommandBus(QObject):
    """Signal bridge for issuing worker commands with queued delivery."""

    consult_requested = pyqtSignal(object, object)


class AdvisorSession(AdvisorRunner):
    """Runs advisor requests on a worker thread and reports on the UI thread.

    Requests are dispatched after a short delay so the board can repaint the
    human move first.  Answers are handed back to the callback that came with
    the request; deciding whether an answer is still wanted is the caller's
    business.
    """

    _REQUEST_DELAY_MS = 50
    _SHUTDOWN_WAIT_MS = 2000

    __slots__ = (
        "_consult_request",
        "_command_bus",
        "_dispatch_timer",
        "_thread",
        "_worker",
        "_queued",
        "_in_flight",
        "_is_shutting_down",
        "_is_started",
    )

    def __init__(
        self,
        *,
        consult_request: ConsultRequestSignal | None = None,
        parent: QObject | None = None,
    ) -> None:
        self._command_bus = _AdvisorCommandBus(parent)
        self._consult_request: ConsultRequestSignal = (
            consult_request
            if consult_request is not None
            else self._command_bus.consult_requested
        )

        self._dispatch_timer = QTimer(parent)
        self._dispatch_timer.setSingleShot(True)
        self._dispatch_timer.timeout.connect(self._emit_queued_request)

        # Not parented: the thread may outlive the window that owns the session.
        self._thread = QThread()
        self._worker = AdvisorWorker()
        self._queued: tuple[MoveAdvisor, AdvisorRequest] | None = None
        self._in_flight: dict[int, tuple[AdvisorRequest, AdvisorCallback]] = {}
        self._is_shutting_down = False
        self._is_started = False

    @property
    def is_started(self) -> bool:
        return self._is_started

    def setup(self) -> None:
        """Start the worker in a dedicated thread and connect callbacks."""
        if self._is_started:
            return
        self._is_shutting_down = False
        self._worker.moveToThread(self._thread)
        self._consult_request.connect(self._worker.consult)
        self._worker.reply_ready.connect(self._on_reply_ready)
        self._worker.consult_failed.connect(self._on_consult_failed)
        self._thread.start()
        self._is_started = True

    def shutdown(self) -> None:
        """Drop pending work and stop the worker thread."""
        if not self._is_started:
            return
        self._is_shutting_down = True
        self.discard_pending()
        self._in_flight.clear()
        self._thread.quit()
        if not self._thread.wait(self._SHUTDOWN_WAIT_MS):
            _LOGGER.warning(
                "Advisor thread still busy after %d ms; letting it finish in the background",
                self._SHUTDOWN_WAIT_MS,
            )
            _retire(self._thread, self._worker)
            self._thread = QThread()
            self._worker = AdvisorWorker()
        self._is_started = False

    # ── AdvisorRunner ────────────────────────────────────────────────────

    def submit(
        self,
        advisor: MoveAdvisor,
        request: AdvisorRequest,
        on_done: AdvisorCallback,
    ) -> None:
        if not self._is_started or self._is_shutting_down:
            on_done(request, None, "advisor session is not running")
            return

        self.discard_pending()
        self._in_flight[request.request_id] = (request, on_done)
        self._queued = (advisor, request)
        self._dispatch_timer.start(self._REQUEST_DELAY_MS)

    def discard_pending(self) -> None:
        """Cancel a request that has not reached the worker yet."""
        self._dispatch_timer.stop()
        if self._queued is not None:
            _, request = self._queued
            self._in_flight.pop(request.request_id, None)
        self._queued = None

    # ── Worker plumbing ──────────────────────────────────────────────────

    def _emit_queued_request(self) -> None:
        if self._is_shutting_down or self._queued is None:
            return
        advisor, request = self._queued
        self._queued = None
        self._consult_request.emit(advisor, request)

    def _on_reply_ready(self, request_id: int, reply_obj: object) -> None:
        entry = self._take(request_id)
        if entry is None:
            return
        request, on_done = entry
        if not isinstance(reply_obj, AdvisorReply):
            on_done(request, None, f"unexpected advisor reply: {reply_obj!r}")
            return
        on_done(request, reply_obj, None)

    def _on_consult_failed(self, request_id: int, message: str) -> None:
        entry = self._take(request_id)
        if entry is None:
            return
        request, on_done = entry
        on_done(request, None, message)

    def _take(
        self, request_id: int
    ) -> tuple[AdvisorRequest, AdvisorCallback] | None:
        if self._is_shutting_down:
            return None
        entry = self._in_flight.pop(request_id, None)
        if entry is None:
            _LOGGER.debug("No caller waiting for advisor answer #%d", request_id)
        return entry
