"""Dispatcher state-machine states and event signatures."""

from __future__ import annotations

from collections.abc import Callable
from enum import IntEnum, auto
from typing import TYPE_CHECKING

from chesslink.core.enums import GameStatus

if TYPE_CHECKING:
    from chesslink.game.session import MoveRecord, Session


class DispatchPhase(IntEnum):
    """Finite-state-machine states of the move dispatcher."""

    AWAITING_HUMAN_MOVE = auto()
    AWAITING_AI_MOVE = auto()  # advisor consulted
    GAME_OVER = auto()


MoveCallback = Callable[["MoveRecord", "Session"], None]
PhaseCallback = Callable[[DispatchPhase], None]
GameOverCallback = Callable[[GameStatus], None]
SessionCallback = Callable[["Session"], None]
NotificationCallback = Callable[[str, float], None]  # text, duration seconds
