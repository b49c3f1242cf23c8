"""Core enumerations for the game layer."""

from __future__ import annotations

from enum import Enum, IntEnum, auto

import chess


class GameMode(Enum):
    """How the opponent's moves arrive."""

    LOCAL = "LOCAL"
    AI = "AI"
    REMOTE_LINK = "REMOTE_LINK"  # correspondence by shared link


class GameStatus(IntEnum):
    """Rules-derived status of a position."""

    ONGOING = 0
    CHECK = auto()
    CHECKMATE = auto()
    DRAW = auto()

    @property
    def is_terminal(self) -> bool:
        return self in (GameStatus.CHECKMATE, GameStatus.DRAW)


class Orientation(Enum):
    """Side shown at the bottom of the board."""

    WHITE = "white"
    BLACK = "black"

    @property
    def opposite(self) -> Orientation:
        return Orientation.BLACK if self is Orientation.WHITE else Orientation.WHITE

    @property
    def color(self) -> chess.Color:
        return chess.WHITE if self is Orientation.WHITE else chess.BLACK

    def __str__(self) -> str:
        return self.value
