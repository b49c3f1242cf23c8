"""MoveDispatcher — the turn-coordination state machine.

Decides whose move it is, accepts or rejects human moves, consults the
advisor when the AI is to move and keeps the shared link in step with the
position.  Emits events via simple callbacks so the UI / tests can subscribe.
"""

from __future__ import annotations

import logging
import random
import time
from collections.abc import Callable
from dataclasses import dataclass, field

import chess

from chesslink.advisor.base import (
    AdvisorReply,
    AdvisorRequest,
    AdvisorRunner,
    MoveAdvisor,
)
from chesslink.advisor.runner import ImmediateRunner
from chesslink.core import codec
from chesslink.core.enums import GameMode, GameStatus
from chesslink.core.errors import InvalidMoveAttempt
from chesslink.core.rules import MoveLike, Rules
from chesslink.game.interfaces import (
    DispatchPhase,
    GameOverCallback,
    MoveCallback,
    NotificationCallback,
    PhaseCallback,
    SessionCallback,
)
from chesslink.game.session import MoveRecord, Session
from chesslink.i18n import t

_LOGGER = logging.getLogger(__name__)


@dataclass
class DispatcherEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_move: list[MoveCallback] = field(default_factory=list)
    on_phase_changed: list[PhaseCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)
    on_session_changed: list[SessionCallback] = field(default_factory=list)
    on_notification: list[NotificationCallback] = field(default_factory=list)


class MoveDispatcher:
    """Applies human and AI moves to the session, one transition at a time.

    Thread-safety: every method runs on a single thread (the UI thread).
    The advisor call is the only asynchronous step; its answer comes back
    through the runner's callback, and ``ai_pending`` blocks human input
    until then.  Answers computed for a position that is no longer current
    are discarded.

    Args:
        advisor: Picks the AI's moves.
        runner: Executes advisor requests (inline by default).
        ai_color: Side the AI plays in ``GameMode.AI``.
        rng: Source for fallback move choice.
        clock: Monotonic time source for notification expiry.
    """

    LOADED_NOTICE_S = 4.0
    NEW_GAME_NOTICE_S = 2.0
    LINK_NOTICE_S = 4.0

    __slots__ = (
        "_session",
        "_advisor",
        "_runner",
        "_ai_color",
        "_rng",
        "_clock",
        "_request_id",
        "_pending",
        "events",
    )

    def __init__(
        self,
        advisor: MoveAdvisor,
        runner: AdvisorRunner | None = None,
        *,
        ai_color: chess.Color = chess.BLACK,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._session = Session()
        self._advisor = advisor
        self._runner = runner if runner is not None else ImmediateRunner()
        self._ai_color = ai_color
        self._rng = rng if rng is not None else random.Random()
        self._clock = clock
        self._request_id = 0
        self._pending: AdvisorRequest | None = None
        self.events = DispatcherEvents()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def session(self) -> Session:
        return self._session

    @property
    def advisor(self) -> MoveAdvisor:
        return self._advisor

    @property
    def ai_color(self) -> chess.Color:
        return self._ai_color

    @property
    def pending_request(self) -> AdvisorRequest | None:
        return self._pending

    @property
    def can_copy_link(self) -> bool:
        return self._session.mode is GameMode.REMOTE_LINK

    def active_notification(self) -> str | None:
        return self._session.active_notification(self._clock())

    def link(self, base: str) -> str | None:
        """Link currently shown in the address bar, if any."""
        token = self._session.link_token
        if token is None:
            return None
        return f"{base.split('#', 1)[0]}#{codec.FRAGMENT_KEY}={token}"

    # ── Session lifecycle ────────────────────────────────────────────────

    def load(self, link: str | None = None) -> Session:
        """Start a session from *link* (or the starting position).

        A link carrying a ``fen=`` token switches to ``REMOTE_LINK`` mode and
        raises a one-time notification; an unusable token falls back to the
        starting position.
        """
        self._discard_pending()
        previous = self._session
        loaded = codec.load_link(link)

        session = Session(board=loaded.board, orientation=previous.orientation)
        session.mode = previous.mode
        self._session = session
        if loaded.token_present:
            session.mode = GameMode.REMOTE_LINK
            if loaded.valid:
                session.link_token = codec.encode(loaded.board)
                self._notify(t().notify_game_loaded, self.LOADED_NOTICE_S)
            else:
                self._notify(t().notify_link_invalid, self.LOADED_NOTICE_S)

        self._enter_turn(force=True)
        self._emit_session_changed()
        return session

    def reset(self) -> None:
        """New game from the starting position; mode is kept."""
        self._discard_pending()
        self._session.restart(Rules.starting_board())
        self._notify(t().notify_new_game, self.NEW_GAME_NOTICE_S)
        self._enter_turn(force=True)
        self._emit_session_changed()

    # ── Human input ──────────────────────────────────────────────────────

    def submit_human_move(self, move: MoveLike) -> bool:
        """Try *move* for the human side. Returns True if it was applied."""
        session = self._session
        if session.ai_pending or session.phase != DispatchPhase.AWAITING_HUMAN_MOVE:
            _LOGGER.debug("Ignoring %s while %s", move, session.phase.name)
            return False

        try:
            board_after, record = self._play(move, by_ai=False)
        except InvalidMoveAttempt as exc:
            _LOGGER.debug("Rejected human move: %s", exc)
            return False

        self._commit(board_after, record)
        return True

    def undo(self) -> bool:
        """Take back the last ply (in AI mode, back to the human's turn)."""
        session = self._session
        if not session.move_history:
            return False

        self._discard_pending()
        session.pop()
        if (
            session.mode is GameMode.AI
            and session.move_history
            and session.side_to_move == self._ai_color
        ):
            session.pop()

        self._invalidate_link()
        self._enter_turn(force=True)
        self._emit_session_changed()
        return True

    def set_mode(self, mode: GameMode) -> None:
        """Switch mode; the position and history are left untouched."""
        session = self._session
        if mode is session.mode:
            return
        session.mode = mode
        if mode is not GameMode.AI:
            self._discard_pending()
        if not session.is_game_over:
            self._enter_turn()
        self._emit_session_changed()

    def flip_orientation(self) -> None:
        self._session.orientation = self._session.orientation.opposite
        self._emit_session_changed()

    def copy_link(
        self,
        base: str,
        clipboard: Callable[[str], None] | None = None,
    ) -> str:
        """Put the current position in the address bar and the clipboard.

        A failing clipboard is not an error: the link stays in the address
        bar and the notification says so.
        """
        session = self._session
        link = codec.link_for(base, session.board)
        session.link_token = codec.encode(session.board)

        copied = False
        if clipboard is not None:
            try:
                clipboard(link)
                copied = True
            except Exception as exc:
                _LOGGER.warning("Failed to copy link to clipboard: %s", exc)

        text = t().notify_link_copied if copied else t().notify_link_in_address_bar
        self._notify(text, self.LINK_NOTICE_S)
        self._emit_session_changed()
        return link

    # ── Advisor ──────────────────────────────────────────────────────────

    def resolve_ai_reply(self, request: AdvisorRequest, reply: AdvisorReply) -> bool:
        """Apply the advisor's answer to *request*. Returns False if stale."""
        return self._on_advisor_done(request, reply, None)

    def resolve_ai_failure(self, request: AdvisorRequest, message: str) -> bool:
        """Record that *request* failed; a fallback move is played."""
        return self._on_advisor_done(request, None, message)

    def _request_ai_move(self) -> None:
        session = self._session
        legal = tuple(Rules.legal_sans(session.board))
        if not legal:
            self._set_phase(DispatchPhase.GAME_OVER)
            return

        self._request_id += 1
        request = AdvisorRequest(self._request_id, session.fen, legal)
        self._pending = request
        session.ai_pending = True
        _LOGGER.info(
            "Consulting %s (request #%d, %d legal moves)",
            self._advisor.name,
            request.request_id,
            len(legal),
        )
        self._emit_session_changed()
        self._runner.submit(self._advisor, request, self._on_advisor_done)

    def _on_advisor_done(
        self,
        request: AdvisorRequest,
        reply: AdvisorReply | None,
        error: str | None,
    ) -> bool:
        if not self._is_current(request):
            _LOGGER.info("Discarding stale advisor answer #%d", request.request_id)
            return False

        session = self._session
        self._pending = None
        session.ai_pending = False

        played: tuple[chess.Board, MoveRecord] | None = None
        commentary: str | None = None
        if reply is not None:
            try:
                played = self._play(reply.move, by_ai=True)
                commentary = reply.commentary
            except InvalidMoveAttempt as exc:
                _LOGGER.warning("Advisor proposed an illegal move (%s); falling back", exc)
        else:
            _LOGGER.warning("Advisor failed (%s); falling back", error)

        if played is None:
            played = self._play(self._rng.choice(request.legal_moves), by_ai=True)
            commentary = t().ai_fallback_commentary

        session.last_ai_commentary = commentary or None
        self._commit(*played)
        return True

    def _is_current(self, request: AdvisorRequest) -> bool:
        session = self._session
        return (
            self._pending is not None
            and request.request_id == self._pending.request_id
            and session.mode is GameMode.AI
            and session.phase == DispatchPhase.AWAITING_AI_MOVE
            and request.fen == session.fen
        )

    def _discard_pending(self) -> None:
        if self._pending is not None:
            _LOGGER.debug("Dropping advisor request #%d", self._pending.request_id)
            self._runner.discard_pending()
        self._pending = None
        self._session.ai_pending = False

    # ── Transitions ──────────────────────────────────────────────────────

    def _play(self, move: MoveLike, *, by_ai: bool) -> tuple[chess.Board, MoveRecord]:
        board = self._session.board
        resolved = Rules.parse_move(board, move)
        san = Rules.san(board, resolved)
        board_after = Rules.apply(board, resolved)
        record = MoveRecord(
            move=resolved,
            san=san,
            fen_before=board.fen(),
            fen_after=board_after.fen(),
            by_ai=by_ai,
        )
        return board_after, record

    def _commit(self, board_after: chess.Board, record: MoveRecord) -> None:
        self._session.push(record, board_after)
        self._invalidate_link()
        self._emit_move(record)
        self._enter_turn()

    def _enter_turn(self, *, force: bool = False) -> None:
        """Derive the next state from the position and the mode."""
        session = self._session
        status = session.status
        if status.is_terminal:
            changed = self._set_phase(DispatchPhase.GAME_OVER, force=force)
            if changed:
                self._emit_game_over(status)
            return

        if session.mode is GameMode.AI and session.side_to_move == self._ai_color:
            self._set_phase(DispatchPhase.AWAITING_AI_MOVE, force=force)
            if self._pending is None:
                self._request_ai_move()
            return

        self._set_phase(DispatchPhase.AWAITING_HUMAN_MOVE, force=force)

    def _set_phase(self, phase: DispatchPhase, *, force: bool = False) -> bool:
        session = self._session
        if session.phase == phase and not force:
            return False
        session.phase = phase
        for cb in list(self.events.on_phase_changed):
            cb(phase)
        return True

    def _invalidate_link(self) -> None:
        session = self._session
        if session.link_token is not None and session.link_token != codec.encode(
            session.board
        ):
            session.link_token = None

    def _notify(self, text: str, duration_s: float) -> None:
        self._session.notify(text, duration_s, self._clock())
        for cb in list(self.events.on_notification):
            cb(text, duration_s)

    # ── Event emission ───────────────────────────────────────────────────

    def _emit_move(self, record: MoveRecord) -> None:
        for cb in list(self.events.on_move):
            cb(record, self._session)

    def _emit_game_over(self, status: GameStatus) -> None:
        for cb in list(self.events.on_game_over):
            cb(status)

    def _emit_session_changed(self) -> None:
        for cb in list(self.events.on_session_changed):
            cb(self._session)
