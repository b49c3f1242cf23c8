"""Advisor contract: who picks the AI's move, and how the call is run.

The dispatcher depends on these ABCs only, so tests can plug in a
deterministic advisor and a runner that delivers replies whenever they like.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class AdvisorRequest:
    """One advisor consultation, tagged so late answers can be recognised."""

    request_id: int
    fen: str
    legal_moves: tuple[str, ...]  # SAN, in generation order


@dataclass(frozen=True)
class AdvisorReply:
    """The advisor's chosen move token and a short commentary."""

    move: str
    commentary: str = ""


# request, reply (None on failure), error message (None on success)
AdvisorCallback = Callable[[AdvisorRequest, AdvisorReply | None, str | None], None]


class MoveAdvisor(ABC):
    """Chooses a move for a position.

    Implementations may be slow, may fail (raise
    :class:`~chesslink.core.errors.AdvisorFailure`) and may return a move
    that is not legal; the caller validates the answer.
    """

    @property
    @abstractmethod
    def name(self) -> str: ...

    @abstractmethod
    def suggest(self, fen: str, legal_moves: Sequence[str]) -> AdvisorReply:
        """Pick one of *legal_moves* for the position *fen*."""


class AdvisorRunner(ABC):
    """Executes advisor requests and reports back through a callback."""

    @abstractmethod
    def submit(
        self,
        advisor: MoveAdvisor,
        request: AdvisorRequest,
        on_done: AdvisorCallback,
    ) -> None:
        """Run *request* on *advisor* and eventually call *on_done*."""

    def discard_pending(self) -> None:
        """Forget queued work; answers still in flight may arrive later."""
