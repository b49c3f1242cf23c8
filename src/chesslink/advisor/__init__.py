"""AI move advisor — contract, runners and the OpenAI-backed implementation."""

from chesslink.advisor.base import (
    AdvisorCallback,
    AdvisorReply,
    AdvisorRequest,
    AdvisorRunner,
    MoveAdvisor,
)
from chesslink.advisor.openai_advisor import OpenAIMoveAdvisor
from chesslink.advisor.runner import ImmediateRunner, consult

__all__ = [
    "AdvisorCallback",
    "AdvisorReply",
    "AdvisorRequest",
    "AdvisorRunner",
    "ImmediateRunner",
    "MoveAdvisor",
    "OpenAIMoveAdvisor",
    "consult",
]
