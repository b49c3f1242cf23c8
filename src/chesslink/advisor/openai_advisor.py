"""Move advisor backed by an OpenAI-compatible chat completion API."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from openai import OpenAI, OpenAIError

from chesslink.advisor.base import AdvisorReply, MoveAdvisor
from chesslink.advisor.prompt import build_messages, parse_reply
from chesslink.config import DEFAULT_ADVISOR_TIMEOUT, DEFAULT_MODEL
from chesslink.core.errors import AdvisorFailure

if TYPE_CHECKING:
    from chesslink.config import Settings

_LOGGER = logging.getLogger(__name__)


class OpenAIMoveAdvisor(MoveAdvisor):
    """Asks a chat model for the best move in JSON mode.

    Without an API key no client is built and every call raises
    :class:`AdvisorFailure`, so the game keeps going on fallback moves.

    Args:
        api_key: Credential; ``None`` disables the network call.
        model: Chat model name.
        base_url: Optional OpenAI-compatible endpoint.
        timeout: Seconds per request.
        client: Pre-built client (tests inject a fake here).
    """

    __slots__ = ("_client", "_model", "_timeout")

    def __init__(
        self,
        api_key: str | None = None,
        *,
        model: str = DEFAULT_MODEL,
        base_url: str | None = None,
        timeout: float = DEFAULT_ADVISOR_TIMEOUT,
        client: Any | None = None,
    ) -> None:
        self._model = model
        self._timeout = timeout
        if client is not None:
            self._client = client
        elif api_key:
            self._client = OpenAI(
                api_key=api_key,
                base_url=base_url,
                timeout=timeout,
                max_retries=1,
            )
        else:
            _LOGGER.warning("No API key configured; the AI will play fallback moves")
            self._client = None

    @classmethod
    def from_settings(cls, settings: Settings) -> OpenAIMoveAdvisor:
        return cls(
            settings.api_key,
            model=settings.model,
            base_url=settings.base_url,
            timeout=settings.advisor_timeout,
        )

    @property
    def name(self) -> str:
        return f"OpenAI ({self._model})"

    @property
    def is_available(self) -> bool:
        return self._client is not None

    def suggest(self, fen: str, legal_moves: Sequence[str]) -> AdvisorReply:
        if self._client is None:
            raise AdvisorFailure("no API key configured")

        try:
            response = self._client.chat.completions.create(
                model=self._model,
                messages=build_messages(fen, legal_moves),
                response_format={"type": "json_object"},
                temperature=0.4,
                max_tokens=200,
            )
        except OpenAIError as exc:
            raise AdvisorFailure(f"advisor request failed: {exc}") from exc

        try:
            text = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as exc:
            raise AdvisorFailure("malformed advisor response") from exc

        reply = parse_reply(text)
        _LOGGER.info("%s chose %s", self.name, reply.move)
        return reply
