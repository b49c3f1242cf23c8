"""Runtime configuration read from the process environment.

A ``.env`` file in the working directory is loaded first (python-dotenv);
real environment variables win over it.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

from dotenv import load_dotenv

_LOGGER = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_LINK_BASE = "chesslink://play"
DEFAULT_ADVISOR_TIMEOUT = 20.0


@dataclass(frozen=True)
class Settings:
    """Application settings.

    Args:
        api_key: Advisor credential; ``None`` makes the AI play fallback moves.
        model: Chat model name.
        base_url: Optional OpenAI-compatible endpoint.
        advisor_timeout: Seconds allowed per advisor request.
        language: UI language name (see :data:`chesslink.i18n.LANGUAGES`).
        link_base: Prefix of shared links (the part before ``#fen=``).
        log_level: Root logging level name.
    """

    api_key: str | None = None
    model: str = DEFAULT_MODEL
    base_url: str | None = None
    advisor_timeout: float = DEFAULT_ADVISOR_TIMEOUT
    language: str = "English"
    link_base: str = DEFAULT_LINK_BASE
    log_level: str = "INFO"

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        load_dotenv_file: bool = True,
    ) -> Settings:
        """Build settings from *environ* (defaults to ``os.environ``)."""
        if environ is None:
            if load_dotenv_file:
                load_dotenv()
            environ = os.environ

        return cls(
            api_key=_non_empty(environ.get("OPENAI_API_KEY")),
            model=_non_empty(environ.get("CHESSLINK_MODEL")) or DEFAULT_MODEL,
            base_url=_non_empty(environ.get("CHESSLINK_BASE_URL")),
            advisor_timeout=_positive_float(
                environ.get("CHESSLINK_ADVISOR_TIMEOUT"), DEFAULT_ADVISOR_TIMEOUT
            ),
            language=_non_empty(environ.get("CHESSLINK_LANGUAGE")) or "English",
            link_base=_non_empty(environ.get("CHESSLINK_LINK_BASE"))
            or DEFAULT_LINK_BASE,
            log_level=(_non_empty(environ.get("CHESSLINK_LOG_LEVEL")) or "INFO").upper(),
        )


def _non_empty(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _positive_float(raw: str | None, default: float) -> float:
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        _LOGGER.warning("Ignoring non-numeric value %r, using %s", raw, default)
        return default
    if value <= 0:
        _LOGGER.warning("Ignoring non-positive value %r, using %s", raw, default)
        return default
    return value
