"""Regression tests for AdvisorSession wiring."""

from __future__ import annotations

import gc
import threading
import time
import weakref
from collections.abc import Callable, Sequence

import pytest

from chesslink.advisor.base import AdvisorReply, AdvisorRequest, MoveAdvisor
from chesslink.ui.advisor_session import (
    AdvisorSession,
    retired_thread_count,
    wait_for_retired_threads,
)

REQUEST = AdvisorRequest(1, "fen", ("e4",))


class _StubConsultRequest:
    def __init__(self) -> None:
        self.emitted: list[tuple[object, object]] = []

    def connect(self, _slot: Callable[..., object]) -> object:
        return object()

    def emit(self, advisor_obj: object, request_obj: object) -> object:
        self.emitted.append((advisor_obj, request_obj))
        return object()


class _Advisor(MoveAdvisor):
    @property
    def name(self) -> str:
        return "Stub"

    def suggest(self, fen: str, legal_moves: Sequence[str]) -> AdvisorReply:
        return AdvisorReply(legal_moves[0], "stub")


class _GatedAdvisor(MoveAdvisor):
    """Blocks inside ``suggest`` until the test opens the gate."""

    def __init__(self) -> None:
        self.entered = threading.Event()
        self.gate = threading.Event()

    @property
    def name(self) -> str:
        return "Gated"

    def suggest(self, fen: str, legal_moves: Sequence[str]) -> AdvisorReply:
        self.entered.set()
        self.gate.wait(10.0)
        return AdvisorReply(legal_moves[0], "late")


def _spin(qapp: object, done: Callable[[], bool], timeout_s: float = 5.0) -> None:
    deadline = time.monotonic() + timeout_s
    while not done() and time.monotonic() < deadline:
        qapp.processEvents()  # type: ignore[attr-defined]
        time.sleep(0.01)


class _Recorder:
    def __init__(self) -> None:
        self.calls: list[tuple[AdvisorRequest, AdvisorReply | None, str | None]] = []

    def __call__(
        self, request: AdvisorRequest, reply: AdvisorReply | None, error: str | None
    ) -> None:
        self.calls.append((request, reply, error))


class TestAdvisorSession:
    def test_shutdown_before_setup_is_noop(self) -> None:
        session = AdvisorSession()
        session.shutdown()
        assert session.is_started is False

    def test_setup_twice_keeps_started_state(self) -> None:
        session = AdvisorSession()
        session.setup()
        session.setup()
        assert session.is_started is True
        session.shutdown()
        assert session.is_started is False

    def test_setup_connects_slots_without_weakref_error(self) -> None:
        session = AdvisorSession()
        assert weakref.ref(session)() is session
        session.setup()
        session.shutdown()

    def test_submit_before_setup_fails_immediately(self) -> None:
        session = AdvisorSession()
        recorder = _Recorder()

        session.submit(_Advisor(), REQUEST, recorder)

        assert len(recorder.calls) == 1
        request, reply, error = recorder.calls[0]
        assert request is REQUEST
        assert reply is None
        assert error

    def test_queued_request_is_emitted_and_answered(self) -> None:
        stub = _StubConsultRequest()
        session = AdvisorSession(consult_request=stub)
        session.setup()
        recorder = _Recorder()
        advisor = _Advisor()

        session.submit(advisor, REQUEST, recorder)
        session._emit_queued_request()

        assert stub.emitted == [(advisor, REQUEST)]
        reply = AdvisorReply("e4", "ok")
        session._on_reply_ready(REQUEST.request_id, reply)
        assert recorder.calls == [(REQUEST, reply, None)]

        # A second answer for the same id has no caller left.
        session._on_reply_ready(REQUEST.request_id, reply)
        assert len(recorder.calls) == 1
        session.shutdown()

    def test_failure_is_reported(self) -> None:
        stub = _StubConsultRequest()
        session = AdvisorSession(consult_request=stub)
        session.setup()
        recorder = _Recorder()

        session.submit(_Advisor(), REQUEST, recorder)
        session._emit_queued_request()
        session._on_consult_failed(REQUEST.request_id, "boom")

        assert recorder.calls == [(REQUEST, None, "boom")]
        session.shutdown()

    def test_discard_before_dispatch_drops_request(self) -> None:
        stub = _StubConsultRequest()
        session = AdvisorSession(consult_request=stub)
        session.setup()
        recorder = _Recorder()

        session.submit(_Advisor(), REQUEST, recorder)
        session.discard_pending()
        session._emit_queued_request()
        session._on_reply_ready(REQUEST.request_id, AdvisorReply("e4"))

        assert stub.emitted == []
        assert recorder.calls == []
        session.shutdown()

    def test_non_reply_object_is_reported_as_failure(self) -> None:
        stub = _StubConsultRequest()
        session = AdvisorSession(consult_request=stub)
        session.setup()
        recorder = _Recorder()

        session.submit(_Advisor(), REQUEST, recorder)
        session._emit_queued_request()
        session._on_reply_ready(REQUEST.request_id, "e4")

        assert recorder.calls[0][1] is None
        assert recorder.calls[0][2]
        session.shutdown()

    def test_worker_thread_round_trip(self, qapp: object) -> None:
        session = AdvisorSession()
        session.setup()
        recorder = _Recorder()

        session.submit(_Advisor(), REQUEST, recorder)

        deadline = time.monotonic() + 5.0
        while not recorder.calls and time.monotonic() < deadline:
            qapp.processEvents()  # type: ignore[attr-defined]
            time.sleep(0.01)
        session.shutdown()

        assert recorder.calls == [(REQUEST, AdvisorReply("e4", "stub"), None)]

    def test_shutdown_during_slow_call_retires_thread(
        self, qapp: object, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(AdvisorSession, "_SHUTDOWN_WAIT_MS", 20)
        advisor = _GatedAdvisor()
        session = AdvisorSession()
        session.setup()
        recorder = _Recorder()

        session.submit(advisor, REQUEST, recorder)
        _spin(qapp, advisor.entered.is_set)
        assert advisor.entered.is_set()

        session.shutdown()
        assert retired_thread_count() == 1

        # Dropping the session must not tear down the busy thread.
        del session
        gc.collect()

        advisor.gate.set()
        assert wait_for_retired_threads(5000)
        assert retired_thread_count() == 0
        _spin(qapp, lambda: False, timeout_s=0.1)
        assert recorder.calls == []
