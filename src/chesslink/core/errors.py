"""Error taxonomy for ChessLink.

Every kind is recovered locally; none of them ends a session.
"""

from __future__ import annotations


class ChessLinkError(Exception):
    """Base class for all ChessLink errors."""


class InvalidMoveAttempt(ChessLinkError, ValueError):
    """A human or the advisor proposed a move the rules reject."""

    def __init__(self, move: object, reason: str = "illegal move") -> None:
        super().__init__(f"{reason}: {move!r}")
        self.move = move
        self.reason = reason


class MalformedPositionToken(ChessLinkError, ValueError):
    """A shared-link token could not be decoded into a valid position."""

    def __init__(self, token: str, reason: str) -> None:
        super().__init__(f"{reason}: {str(token)[:80]!r}")
        self.token = token
        self.reason = reason


class AdvisorFailure(ChessLinkError, RuntimeError):
    """The move advisor could not produce a usable answer."""
