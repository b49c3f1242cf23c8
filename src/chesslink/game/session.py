"""Session state — the in-memory record of one game on this board."""

from __future__ import annotations

from dataclasses import dataclass, field

import chess

from chesslink.core.enums import GameMode, GameStatus, Orientation
from chesslink.core.rules import Rules
from chesslink.game.interfaces import DispatchPhase
from chesslink.i18n import t


@dataclass
class MoveRecord:
    """A single entry in the move history."""

    move: chess.Move
    san: str
    fen_before: str
    fen_after: str
    by_ai: bool = False


@dataclass(frozen=True)
class Notification:
    """Transient message that disappears at *expires_at* (monotonic seconds)."""

    text: str
    expires_at: float

    def is_active(self, now: float) -> bool:
        return now < self.expires_at


@dataclass
class Session:
    """Current position, history, mode and UI-visible status.

    This is a pure data class — only the move dispatcher mutates it.
    """

    board: chess.Board = field(default_factory=Rules.starting_board)
    mode: GameMode = GameMode.LOCAL
    orientation: Orientation = Orientation.WHITE
    phase: DispatchPhase = DispatchPhase.AWAITING_HUMAN_MOVE
    ai_pending: bool = False
    last_ai_commentary: str | None = None
    notification: Notification | None = None
    link_token: str | None = None
    move_history: list[MoveRecord] = field(default_factory=list)

    # ── Mutation (dispatcher only) ───────────────────────────────────────

    def push(self, record: MoveRecord, board_after: chess.Board) -> None:
        """Adopt *board_after* and append *record*."""
        self.board = board_after
        self.move_history.append(record)

    def pop(self) -> MoveRecord | None:
        """Step back one ply. Returns the removed record, or None if empty."""
        if not self.move_history:
            return None
        record = self.move_history.pop()
        if self.board.move_stack:
            self.board = Rules.undo(self.board)
        else:
            self.board = Rules.board_from_fen(record.fen_before)
        return record

    def restart(self, board: chess.Board) -> None:
        """Forget the game and start over from *board*."""
        self.board = board
        self.move_history.clear()
        self.ai_pending = False
        self.last_ai_commentary = None
        self.link_token = None

    def notify(self, text: str, duration_s: float, now: float) -> Notification:
        self.notification = Notification(text, now + duration_s)
        return self.notification

    # ── Query helpers ────────────────────────────────────────────────────

    @property
    def fen(self) -> str:
        return self.board.fen()

    @property
    def side_to_move(self) -> chess.Color:
        return Rules.turn(self.board)

    @property
    def status(self) -> GameStatus:
        return Rules.status(self.board)

    @property
    def is_game_over(self) -> bool:
        return self.phase == DispatchPhase.GAME_OVER

    @property
    def ply_count(self) -> int:
        """Number of half-moves played in this session."""
        return len(self.move_history)

    @property
    def fullmove_display(self) -> int:
        return self.board.fullmove_number

    @property
    def last_move(self) -> chess.Move | None:
        return self.move_history[-1].move if self.move_history else None

    def active_notification(self, now: float) -> str | None:
        if self.notification is None or not self.notification.is_active(now):
            return None
        return self.notification.text

    @property
    def status_text(self) -> str:
        """Human-readable status: mate, draw, check or side to move."""
        s = t()
        status = self.status
        if status == GameStatus.CHECKMATE:
            winner = Rules.winner(self.board)
            name = s.winner_white if winner == chess.WHITE else s.winner_black
            return s.status_checkmate.format(winner=name)
        if status == GameStatus.DRAW:
            return s.status_draw
        if status == GameStatus.CHECK:
            return s.status_check
        side = s.color_white if self.side_to_move == chess.WHITE else s.color_black
        return s.status_to_move.format(side=side)
