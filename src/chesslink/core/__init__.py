"""Core domain layer — rules adapter, position codec, move and status types.

Quick start::

    from chesslink.core import Rules, codec

    board = Rules.apply(Rules.starting_board(), "e4")
    token = codec.encode(board)
    assert codec.decode(token).fen() == board.fen()
"""

from chesslink.core import codec
from chesslink.core.enums import GameMode, GameStatus, Orientation
from chesslink.core.errors import (
    AdvisorFailure,
    ChessLinkError,
    InvalidMoveAttempt,
    MalformedPositionToken,
)
from chesslink.core.move import DropMove
from chesslink.core.rules import MoveLike, Rules

__all__ = [
    # Enums
    "GameMode",
    "GameStatus",
    "Orientation",
    # Errors
    "AdvisorFailure",
    "ChessLinkError",
    "InvalidMoveAttempt",
    "MalformedPositionToken",
    # Domain objects
    "DropMove",
    "MoveLike",
    "Rules",
    # Codec
    "codec",
]
