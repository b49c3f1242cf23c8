"""Game management layer — session state and the move dispatcher.

Quick start::

    from chesslink.advisor import OpenAIMoveAdvisor
    from chesslink.core import GameMode
    from chesslink.game import MoveDispatcher

    dispatcher = MoveDispatcher(OpenAIMoveAdvisor(api_key=None))
    dispatcher.load("chesslink://play#fen=...")
    dispatcher.set_mode(GameMode.AI)
    dispatcher.submit_human_move("e4")
"""

from chesslink.game.dispatcher import DispatcherEvents, MoveDispatcher
from chesslink.game.interfaces import DispatchPhase
from chesslink.game.session import MoveRecord, Notification, Session

__all__ = [
    "DispatchPhase",
    "DispatcherEvents",
    "MoveDispatcher",
    "MoveRecord",
    "Notification",
    "Session",
]
