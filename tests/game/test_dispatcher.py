"""Tests for MoveDispatcher — turn coordination, advisor handoff and links."""

from __future__ import annotations

import random
from collections.abc import Sequence

import chess
import pytest

from chesslink.advisor.base import (
    AdvisorCallback,
    AdvisorReply,
    AdvisorRequest,
    AdvisorRunner,
    MoveAdvisor,
)
from chesslink.core import codec
from chesslink.core.enums import GameMode, GameStatus, Orientation
from chesslink.core.errors import AdvisorFailure
from chesslink.core.move import DropMove
from chesslink.core.rules import Rules
from chesslink.game.dispatcher import MoveDispatcher
from chesslink.game.interfaces import DispatchPhase
from chesslink.game.session import MoveRecord, Session
from chesslink.i18n import t

START_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"
AFTER_E4 = "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq - 0 1"
BASE = "chesslink://play"


class _ScriptedAdvisor(MoveAdvisor):
    """Returns queued replies in order; raises queued exceptions."""

    def __init__(self, *replies: AdvisorReply | Exception) -> None:
        self.replies: list[AdvisorReply | Exception] = list(replies)
        self.calls: list[tuple[str, list[str]]] = []

    @property
    def name(self) -> str:
        return "Scripted"

    def suggest(self, fen: str, legal_moves: Sequence[str]) -> AdvisorReply:
        self.calls.append((fen, list(legal_moves)))
        if not self.replies:
            raise AdvisorFailure("no scripted reply left")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class _DeferredRunner(AdvisorRunner):
    """Holds requests until the test delivers an answer."""

    def __init__(self) -> None:
        self.submitted: list[tuple[AdvisorRequest, AdvisorCallback]] = []
        self.discards = 0

    def submit(
        self,
        advisor: MoveAdvisor,
        request: AdvisorRequest,
        on_done: AdvisorCallback,
    ) -> None:
        self.submitted.append((request, on_done))

    def discard_pending(self) -> None:
        self.discards += 1

    @property
    def last_request(self) -> AdvisorRequest:
        return self.submitted[-1][0]

    def deliver(
        self,
        reply: AdvisorReply | None = None,
        error: str | None = None,
        *,
        index: int = -1,
    ) -> object:
        request, on_done = self.submitted[index]
        return on_done(request, reply, error)


class _Clock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


def _make(
    advisor: MoveAdvisor | None = None,
    runner: AdvisorRunner | None = None,
    *,
    ai_color: chess.Color = chess.BLACK,
    clock: _Clock | None = None,
) -> MoveDispatcher:
    dispatcher = MoveDispatcher(
        advisor if advisor is not None else _ScriptedAdvisor(),
        runner,
        ai_color=ai_color,
        rng=random.Random(1234),
        clock=clock if clock is not None else _Clock(),
    )
    dispatcher.load()
    return dispatcher


def _play(dispatcher: MoveDispatcher, *sans: str) -> None:
    for san in sans:
        assert dispatcher.submit_human_move(san), san


# ── Local play ───────────────────────────────────────────────────────────────


class TestLocalPlay:
    def test_initial_state(self) -> None:
        dispatcher = _make()
        session = dispatcher.session
        assert session.fen == START_FEN
        assert session.mode is GameMode.LOCAL
        assert session.phase == DispatchPhase.AWAITING_HUMAN_MOVE
        assert session.status_text == "White to move"
        assert dispatcher.active_notification() is None

    def test_e4(self) -> None:
        dispatcher = _make()
        assert dispatcher.submit_human_move(DropMove("e2", "e4"))
        session = dispatcher.session
        assert session.fen == AFTER_E4
        assert [r.san for r in session.move_history] == ["e4"]
        assert session.phase == DispatchPhase.AWAITING_HUMAN_MOVE
        assert session.status_text == "Black to move"

    def test_illegal_move_is_silent(self) -> None:
        dispatcher = _make()
        notes: list[str] = []
        dispatcher.events.on_notification.append(lambda text, _d: notes.append(text))

        assert not dispatcher.submit_human_move("Ke2")
        assert not dispatcher.submit_human_move(DropMove("e2", "e5"))

        assert dispatcher.session.fen == START_FEN
        assert dispatcher.session.move_history == []
        assert notes == []

    def test_move_event(self) -> None:
        dispatcher = _make()
        seen: list[tuple[str, bool]] = []

        def on_move(record: MoveRecord, _session: Session) -> None:
            seen.append((record.san, record.by_ai))

        dispatcher.events.on_move.append(on_move)
        _play(dispatcher, "e4", "e5")
        assert seen == [("e4", False), ("e5", False)]

    def test_fools_mate_ends_game(self) -> None:
        dispatcher = _make()
        results: list[GameStatus] = []
        dispatcher.events.on_game_over.append(results.append)

        _play(dispatcher, "f3", "e5", "g4", "Qh4#")

        session = dispatcher.session
        assert session.phase == DispatchPhase.GAME_OVER
        assert session.status == GameStatus.CHECKMATE
        assert session.status_text == "Checkmate! Black wins."
        assert results == [GameStatus.CHECKMATE]
        assert not dispatcher.submit_human_move("a3")

    def test_undo_leaves_game_over(self) -> None:
        dispatcher = _make()
        _play(dispatcher, "f3", "e5", "g4", "Qh4#")

        assert dispatcher.undo()

        session = dispatcher.session
        assert session.phase == DispatchPhase.AWAITING_HUMAN_MOVE
        assert session.side_to_move == chess.BLACK
        assert len(session.move_history) == 3

    def test_undo_restores_exact_fen(self) -> None:
        dispatcher = _make()
        _play(dispatcher, "e4", "c5", "Nf3")
        before = dispatcher.session.move_history[-1].fen_before

        assert dispatcher.undo()

        assert dispatcher.session.fen == before

    def test_undo_on_empty_history(self) -> None:
        dispatcher = _make()
        assert not dispatcher.undo()

    def test_reset_keeps_mode_and_notifies(self) -> None:
        clock = _Clock()
        dispatcher = _make(clock=clock)
        dispatcher.set_mode(GameMode.REMOTE_LINK)
        _play(dispatcher, "e4")

        dispatcher.reset()

        session = dispatcher.session
        assert session.fen == START_FEN
        assert session.move_history == []
        assert session.mode is GameMode.REMOTE_LINK
        assert dispatcher.active_notification() == t().notify_new_game
        clock.now += 2.5
        assert dispatcher.active_notification() is None

    def test_flip_orientation(self) -> None:
        dispatcher = _make()
        changes: list[Orientation] = []
        dispatcher.events.on_session_changed.append(
            lambda session: changes.append(session.orientation)
        )
        dispatcher.flip_orientation()
        dispatcher.flip_orientation()
        assert changes == [Orientation.BLACK, Orientation.WHITE]


# ── AI play ──────────────────────────────────────────────────────────────────


class TestAIPlay:
    def test_advisor_move_is_played(self) -> None:
        advisor = _ScriptedAdvisor(AdvisorReply("Nf3", "Developing the knight."))
        dispatcher = _make(advisor, ai_color=chess.WHITE)

        dispatcher.set_mode(GameMode.AI)

        session = dispatcher.session
        assert [r.san for r in session.move_history] == ["Nf3"]
        assert session.move_history[0].by_ai
        assert session.last_ai_commentary == "Developing the knight."
        assert session.phase == DispatchPhase.AWAITING_HUMAN_MOVE
        assert not session.ai_pending

    def test_request_carries_position_and_legal_moves(self) -> None:
        advisor = _ScriptedAdvisor(AdvisorReply("Nf3", ""))
        dispatcher = _make(advisor, ai_color=chess.WHITE)

        dispatcher.set_mode(GameMode.AI)

        fen, legal = advisor.calls[0]
        assert fen == START_FEN
        assert legal == Rules.legal_sans(Rules.starting_board())

    def test_illegal_advisor_move_falls_back(self) -> None:
        advisor = _ScriptedAdvisor(AdvisorReply("Qh5", "Scholar's mate!"))
        dispatcher = _make(advisor, ai_color=chess.WHITE)

        dispatcher.set_mode(GameMode.AI)

        session = dispatcher.session
        assert len(session.move_history) == 1
        record = session.move_history[0]
        assert record.by_ai
        assert record.san in Rules.legal_sans(Rules.starting_board())
        assert record.san != "Qh5"
        assert session.last_ai_commentary == t().ai_fallback_commentary

    def test_advisor_failure_falls_back(self) -> None:
        advisor = _ScriptedAdvisor(AdvisorFailure("network down"))
        dispatcher = _make(advisor)
        dispatcher.set_mode(GameMode.AI)

        _play(dispatcher, "e4")

        session = dispatcher.session
        assert len(session.move_history) == 2
        assert session.side_to_move == chess.WHITE
        assert session.last_ai_commentary == t().ai_fallback_commentary

    def test_unexpected_advisor_error_falls_back(self) -> None:
        advisor = _ScriptedAdvisor(KeyError("boom"))
        dispatcher = _make(advisor)
        dispatcher.set_mode(GameMode.AI)

        _play(dispatcher, "e4")

        assert len(dispatcher.session.move_history) == 2

    def test_human_blocked_while_ai_pending(self) -> None:
        runner = _DeferredRunner()
        dispatcher = _make(runner=runner)
        dispatcher.set_mode(GameMode.AI)
        _play(dispatcher, "e4")

        session = dispatcher.session
        assert session.ai_pending
        assert session.phase == DispatchPhase.AWAITING_AI_MOVE
        assert session.status_text == "Black to move"
        assert not dispatcher.submit_human_move("e5")
        assert session.fen == AFTER_E4
        assert len(runner.submitted) == 1

    def test_deferred_reply_is_applied(self) -> None:
        runner = _DeferredRunner()
        dispatcher = _make(runner=runner)
        dispatcher.set_mode(GameMode.AI)
        _play(dispatcher, "e4")

        assert runner.deliver(AdvisorReply("e5", "Symmetry."))

        session = dispatcher.session
        assert not session.ai_pending
        assert [r.san for r in session.move_history] == ["e4", "e5"]
        assert session.last_ai_commentary == "Symmetry."
        assert dispatcher.submit_human_move("Nf3")

    def test_resolve_ai_reply(self) -> None:
        runner = _DeferredRunner()
        dispatcher = _make(runner=runner)
        dispatcher.set_mode(GameMode.AI)
        _play(dispatcher, "d4")

        request = runner.last_request
        assert dispatcher.pending_request == request
        assert dispatcher.resolve_ai_reply(request, AdvisorReply("d5", ""))
        assert dispatcher.pending_request is None
        assert dispatcher.session.move_history[-1].san == "d5"

    def test_resolve_ai_failure(self) -> None:
        runner = _DeferredRunner()
        dispatcher = _make(runner=runner)
        dispatcher.set_mode(GameMode.AI)
        _play(dispatcher, "d4")

        assert dispatcher.resolve_ai_failure(runner.last_request, "timeout")
        assert dispatcher.session.last_ai_commentary == t().ai_fallback_commentary
        assert dispatcher.session.side_to_move == chess.WHITE

    def test_reply_for_other_position_is_discarded(self) -> None:
        runner = _DeferredRunner()
        dispatcher = _make(runner=runner)
        dispatcher.set_mode(GameMode.AI)
        _play(dispatcher, "e4")

        real = runner.last_request
        forged = AdvisorRequest(real.request_id, START_FEN, real.legal_moves)
        assert not dispatcher.resolve_ai_reply(forged, AdvisorReply("e5", ""))
        assert dispatcher.session.ai_pending
        assert dispatcher.session.fen == AFTER_E4

    def test_reset_discards_pending_reply(self) -> None:
        runner = _DeferredRunner()
        dispatcher = _make(runner=runner)
        dispatcher.set_mode(GameMode.AI)
        _play(dispatcher, "e4")

        dispatcher.reset()
        assert runner.discards == 1

        assert not runner.deliver(AdvisorReply("e5", "Too late."))
        session = dispatcher.session
        assert session.fen == START_FEN
        assert session.move_history == []
        assert session.last_ai_commentary is None
        assert not session.ai_pending

    def test_old_request_ignored_after_new_one(self) -> None:
        runner = _DeferredRunner()
        dispatcher = _make(runner=runner)
        dispatcher.set_mode(GameMode.AI)
        _play(dispatcher, "e4")
        dispatcher.undo()
        _play(dispatcher, "e4")

        assert len(runner.submitted) == 2
        assert not runner.deliver(AdvisorReply("e5", "old"), index=0)
        assert runner.deliver(AdvisorReply("c5", "new"), index=1)
        assert dispatcher.session.move_history[-1].san == "c5"

    def test_undo_in_ai_mode_returns_to_human_turn(self) -> None:
        runner = _DeferredRunner()
        dispatcher = _make(runner=runner)
        dispatcher.set_mode(GameMode.AI)
        _play(dispatcher, "e4")
        runner.deliver(AdvisorReply("e5", ""))

        assert dispatcher.undo()

        session = dispatcher.session
        assert session.fen == START_FEN
        assert session.move_history == []
        assert session.phase == DispatchPhase.AWAITING_HUMAN_MOVE

    def test_undo_while_pending_pops_human_move(self) -> None:
        runner = _DeferredRunner()
        dispatcher = _make(runner=runner)
        dispatcher.set_mode(GameMode.AI)
        _play(dispatcher, "e4")

        assert dispatcher.undo()

        session = dispatcher.session
        assert session.fen == START_FEN
        assert not session.ai_pending
        assert dispatcher.pending_request is None
        assert not runner.deliver(AdvisorReply("e5", ""))
        assert session.fen == START_FEN

    def test_leaving_ai_mode_discards_pending(self) -> None:
        runner = _DeferredRunner()
        dispatcher = _make(runner=runner)
        dispatcher.set_mode(GameMode.AI)
        _play(dispatcher, "e4")

        dispatcher.set_mode(GameMode.LOCAL)

        session = dispatcher.session
        assert not session.ai_pending
        assert session.phase == DispatchPhase.AWAITING_HUMAN_MOVE
        assert not runner.deliver(AdvisorReply("e5", ""))
        assert dispatcher.submit_human_move("c5")

    def test_entering_ai_mode_on_ai_turn_requests_move(self) -> None:
        runner = _DeferredRunner()
        dispatcher = _make(runner=runner)
        _play(dispatcher, "e4")
        assert runner.submitted == []

        dispatcher.set_mode(GameMode.AI)

        assert len(runner.submitted) == 1
        assert runner.last_request.fen == AFTER_E4
        assert dispatcher.session.phase == DispatchPhase.AWAITING_AI_MOVE

    def test_mode_switch_keeps_position(self) -> None:
        dispatcher = _make(_ScriptedAdvisor(AdvisorReply("e5", "")))
        dispatcher.set_mode(GameMode.AI)
        _play(dispatcher, "e4")
        fen = dispatcher.session.fen

        dispatcher.set_mode(GameMode.LOCAL)

        assert dispatcher.session.fen == fen
        assert len(dispatcher.session.move_history) == 2


# ── Links ────────────────────────────────────────────────────────────────────


class TestLinks:
    def test_load_valid_link(self) -> None:
        clock = _Clock()
        dispatcher = _make(clock=clock)
        board = Rules.apply(Rules.starting_board(), "e4")

        dispatcher.load(codec.link_for(BASE, board))

        session = dispatcher.session
        assert session.fen == AFTER_E4
        assert session.mode is GameMode.REMOTE_LINK
        assert session.move_history == []
        assert dispatcher.active_notification() == t().notify_game_loaded
        assert dispatcher.link(BASE) == codec.link_for(BASE, board)
        clock.now += 4.5
        assert dispatcher.active_notification() is None

    def test_load_invalid_link(self) -> None:
        dispatcher = _make()
        dispatcher.load(f"{BASE}#fen=definitely-not-a-position")

        session = dispatcher.session
        assert session.fen == START_FEN
        assert session.mode is GameMode.REMOTE_LINK
        assert session.link_token is None
        assert dispatcher.active_notification() == t().notify_link_invalid

    def test_load_without_link(self) -> None:
        dispatcher = _make()
        dispatcher.load(BASE)
        assert dispatcher.session.mode is GameMode.LOCAL
        assert dispatcher.active_notification() is None

    def test_load_checkmated_position(self) -> None:
        runner = _DeferredRunner()
        dispatcher = _make(runner=runner)
        mated = Rules.board_from_fen("R2k4/8/3K4/8/8/8/8/8 b - - 0 1")

        dispatcher.load(codec.link_for(BASE, mated))

        assert dispatcher.session.phase == DispatchPhase.GAME_OVER
        assert dispatcher.session.status_text == "Checkmate! White wins."
        assert runner.submitted == []

    def test_copy_link_writes_clipboard(self) -> None:
        dispatcher = _make()
        dispatcher.set_mode(GameMode.REMOTE_LINK)
        _play(dispatcher, "e4")
        copied: list[str] = []

        link = dispatcher.copy_link(BASE, copied.append)

        assert copied == [link]
        assert link == f"{BASE}#fen={codec.encode(dispatcher.session.board)}"
        assert dispatcher.session.link_token == codec.encode(dispatcher.session.board)
        assert dispatcher.active_notification() == t().notify_link_copied

    def test_copy_link_clipboard_failure_is_not_fatal(self) -> None:
        dispatcher = _make()

        def broken_clipboard(_text: str) -> None:
            raise RuntimeError("no clipboard")

        link = dispatcher.copy_link(BASE, broken_clipboard)

        assert dispatcher.link(BASE) == link
        assert dispatcher.active_notification() == t().notify_link_in_address_bar

    def test_copy_link_without_clipboard(self) -> None:
        dispatcher = _make()
        dispatcher.copy_link(BASE)
        assert dispatcher.active_notification() == t().notify_link_in_address_bar

    def test_move_invalidates_link(self) -> None:
        dispatcher = _make()
        dispatcher.copy_link(BASE)
        _play(dispatcher, "e4")
        assert dispatcher.session.link_token is None
        assert dispatcher.link(BASE) is None

    def test_link_round_trip_between_players(self) -> None:
        alice = _make()
        alice.set_mode(GameMode.REMOTE_LINK)
        _play(alice, "e4")
        link = alice.copy_link(BASE)

        bob = _make()
        bob.load(link)
        assert bob.session.fen == alice.session.fen
        assert bob.submit_human_move("e5")

    @pytest.mark.parametrize(
        ("mode", "expected"),
        [
            (GameMode.LOCAL, False),
            (GameMode.AI, False),
            (GameMode.REMOTE_LINK, True),
        ],
    )
    def test_can_copy_link(self, mode: GameMode, expected: bool) -> None:
        dispatcher = _make()
        dispatcher.set_mode(mode)
        assert dispatcher.can_copy_link is expected


class TestRandomPlaythrough:
    @pytest.mark.parametrize("seed", range(5))
    def test_ai_games_with_undo_keep_position_consistent(self, seed: int) -> None:
        rng = random.Random(seed)
        # Every consultation fails, so the AI plays its random fallback.
        dispatcher = _make()
        dispatcher.set_mode(GameMode.AI)

        for step in range(120):
            session = dispatcher.session
            if session.status.is_terminal:
                break
            legal = Rules.legal_moves(session.board)
            assert legal
            assert session.side_to_move == chess.WHITE

            before = session.fen
            assert dispatcher.submit_human_move(rng.choice(legal))
            session = dispatcher.session
            assert not session.ai_pending
            assert codec.decode(codec.encode(session.board)).fen() == session.fen

            if step % 7 == 6:
                assert dispatcher.undo()
                assert dispatcher.session.fen == before
