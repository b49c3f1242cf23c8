"""Rules adapter over python-chess.

Legality, move generation and game-over detection are delegated to the
``chess`` package.  Every method treats its input board as read-only and
returns independent copies, so a rejected attempt leaves the caller's
position intact.
"""

from __future__ import annotations

from typing import Union

import chess

from chesslink.core.enums import GameStatus
from chesslink.core.errors import InvalidMoveAttempt
from chesslink.core.move import DropMove

MoveLike = Union[DropMove, chess.Move, str]


class Rules:
    """Static façade that operates on a :class:`chess.Board`."""

    # Draw policy mirrors what a board UI reports without a claim:
    # stalemate, insufficient material, threefold repetition, fifty moves.

    @staticmethod
    def starting_board() -> chess.Board:
        return chess.Board()

    @staticmethod
    def board_from_fen(fen: str) -> chess.Board:
        """Build a board from *fen*; raises ``ValueError`` if it is unusable."""
        board = chess.Board(fen)
        if not board.is_valid():
            raise ValueError(f"invalid position: {board.status()!r}")
        return board

    # ── Move generation ──────────────────────────────────────────────────

    @staticmethod
    def legal_moves(board: chess.Board) -> list[chess.Move]:
        return list(board.legal_moves)

    @staticmethod
    def legal_sans(board: chess.Board) -> list[str]:
        """Legal moves in SAN, in generation order."""
        return [board.san(move) for move in board.legal_moves]

    # ── Move application ─────────────────────────────────────────────────

    @staticmethod
    def parse_move(board: chess.Board, move: MoveLike) -> chess.Move:
        """Resolve *move* to a legal :class:`chess.Move` in *board*.

        Accepts a :class:`DropMove`, a SAN or UCI token, or a
        :class:`chess.Move`.  Pawns reaching the last rank without a piece
        promote to a queen; a promotion piece on an ordinary move is ignored.
        """
        if isinstance(move, DropMove):
            try:
                candidate = move.to_chess_move()
            except ValueError as exc:
                raise InvalidMoveAttempt(move, str(exc)) from exc
        elif isinstance(move, chess.Move):
            candidate = move
        elif isinstance(move, str):
            candidate = Rules._parse_token(board, move)
        else:
            raise InvalidMoveAttempt(move, "unsupported move type")

        normalized = Rules._normalize_promotion(board, candidate)
        if normalized is None:
            raise InvalidMoveAttempt(move)
        return normalized

    @staticmethod
    def apply(board: chess.Board, move: MoveLike) -> chess.Board:
        """Return a copy of *board* with *move* played.

        Raises :class:`InvalidMoveAttempt` when the move is not legal.
        """
        resolved = Rules.parse_move(board, move)
        trial = board.copy()
        trial.push(resolved)
        return trial

    @staticmethod
    def try_apply(board: chess.Board, move: MoveLike) -> chess.Board | None:
        """Like :meth:`apply` but returns ``None`` on rejection."""
        try:
            return Rules.apply(board, move)
        except InvalidMoveAttempt:
            return None

    @staticmethod
    def san(board: chess.Board, move: chess.Move) -> str:
        return board.san(move)

    @staticmethod
    def undo(board: chess.Board) -> chess.Board:
        """Return a copy of *board* stepped back one ply."""
        if not board.move_stack:
            raise InvalidMoveAttempt(None, "nothing to undo")
        previous = board.copy()
        previous.pop()
        return previous

    # ── Status ───────────────────────────────────────────────────────────

    @staticmethod
    def status(board: chess.Board) -> GameStatus:
        if board.is_checkmate():
            return GameStatus.CHECKMATE
        if Rules.is_draw(board):
            return GameStatus.DRAW
        if board.is_check():
            return GameStatus.CHECK
        return GameStatus.ONGOING

    @staticmethod
    def is_draw(board: chess.Board) -> bool:
        return (
            board.is_stalemate()
            or board.is_insufficient_material()
            or board.halfmove_clock >= 100
            or board.is_repetition(3)
        )

    @staticmethod
    def is_terminal(status: GameStatus) -> bool:
        return status.is_terminal

    @staticmethod
    def turn(board: chess.Board) -> chess.Color:
        return board.turn

    @staticmethod
    def winner(board: chess.Board) -> chess.Color | None:
        """Winning side after checkmate, else ``None``."""
        if board.is_checkmate():
            return not board.turn
        return None

    # ── Internal ─────────────────────────────────────────────────────────

    @staticmethod
    def _parse_token(board: chess.Board, token: str) -> chess.Move:
        text = token.strip()
        if not text:
            raise InvalidMoveAttempt(token, "empty move")
        try:
            return board.parse_san(text)
        except ValueError:
            pass
        try:
            return chess.Move.from_uci(text.lower())
        except ValueError as exc:
            raise InvalidMoveAttempt(token, "unparsable move") from exc

    @staticmethod
    def _normalize_promotion(
        board: chess.Board, move: chess.Move
    ) -> chess.Move | None:
        if board.is_legal(move):
            return move
        if move.promotion is None:
            queen = chess.Move(move.from_square, move.to_square, promotion=chess.QUEEN)
            return queen if board.is_legal(queen) else None
        plain = chess.Move(move.from_square, move.to_square)
        return plain if board.is_legal(plain) else None
