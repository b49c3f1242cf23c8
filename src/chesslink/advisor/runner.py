"""Synchronous advisor execution."""

from __future__ import annotations

import logging

from chesslink.advisor.base import (
    AdvisorCallback,
    AdvisorReply,
    AdvisorRequest,
    AdvisorRunner,
    MoveAdvisor,
)
from chesslink.core.errors import AdvisorFailure

_LOGGER = logging.getLogger(__name__)


def consult(
    advisor: MoveAdvisor, request: AdvisorRequest
) -> tuple[AdvisorReply | None, str | None]:
    """Call *advisor* for *request*; never raises.

    Returns ``(reply, None)`` on success and ``(None, message)`` on failure.
    """
    try:
        reply = advisor.suggest(request.fen, list(request.legal_moves))
    except AdvisorFailure as exc:
        _LOGGER.warning("%s failed on request #%d: %s", advisor.name, request.request_id, exc)
        return None, str(exc)
    except Exception as exc:
        _LOGGER.exception("%s crashed on request #%d", advisor.name, request.request_id)
        return None, str(exc) or type(exc).__name__

    if not isinstance(reply, AdvisorReply):
        return None, f"unexpected advisor reply: {reply!r}"
    return reply, None


class ImmediateRunner(AdvisorRunner):
    """Runs the advisor inline and reports before ``submit`` returns."""

    def submit(
        self,
        advisor: MoveAdvisor,
        request: AdvisorRequest,
        on_done: AdvisorCallback,
    ) -> None:
        reply, error = consult(advisor, request)
        on_done(request, reply, error)
