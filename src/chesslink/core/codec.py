"""Position codec — board ⇄ URL-fragment token.

A token is the position's FEN, percent-encoded so it can travel in a
``#fen=<token>`` link fragment.  Decoding always goes through the rules
adapter; a token that does not yield a structurally valid position is
never trusted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from urllib.parse import quote, unquote

import chess

from chesslink.core.errors import MalformedPositionToken
from chesslink.core.rules import Rules

_LOGGER = logging.getLogger(__name__)

FRAGMENT_KEY = "fen"
MAX_TOKEN_LENGTH = 256


@dataclass(frozen=True)
class LoadedLink:
    """Result of loading a link at session start."""

    board: chess.Board
    token_present: bool
    valid: bool


def encode(board: chess.Board) -> str:
    """Encode *board* into a URL-safe token."""
    return quote(board.fen(), safe="")


def parse_token(token: str) -> chess.Board:
    """Strictly decode *token*; raises :class:`MalformedPositionToken`."""
    if not isinstance(token, str) or not token.strip():
        raise MalformedPositionToken(token, "empty token")
    if len(token) > MAX_TOKEN_LENGTH:
        raise MalformedPositionToken(token, "token too long")
    fen = unquote(token).strip()
    try:
        return Rules.board_from_fen(fen)
    except ValueError as exc:
        raise MalformedPositionToken(token, str(exc)) from exc


def decode(token: str) -> chess.Board:
    """Decode *token*, falling back to the starting position on any failure."""
    try:
        return parse_token(token)
    except MalformedPositionToken as exc:
        _LOGGER.warning("Invalid position token, using start position: %s", exc)
        return Rules.starting_board()


def fragment_for(board: chess.Board) -> str:
    """``fen=<token>`` (without the leading ``#``)."""
    return f"{FRAGMENT_KEY}={encode(board)}"


def link_for(base: str, board: chess.Board) -> str:
    """Full shareable link for *board* rooted at *base*."""
    root = base.split("#", 1)[0]
    return f"{root}#{fragment_for(board)}"


def token_from_link(text: str | None) -> str | None:
    """Extract the raw token from a link, ``#fen=...`` or ``fen=...``.

    Returns ``None`` when *text* carries no ``fen=`` fragment.
    """
    if not text:
        return None
    text = text.strip()
    if "#" in text:
        text = text.split("#", 1)[1]
    prefix = f"{FRAGMENT_KEY}="
    if not text.startswith(prefix):
        return None
    return text[len(prefix) :]


def load_link(text: str | None) -> LoadedLink:
    """Build the starting board for a session opened from *text*."""
    token = token_from_link(text)
    if not token:
        return LoadedLink(Rules.starting_board(), token_present=False, valid=True)
    try:
        board = parse_token(token)
    except MalformedPositionToken as exc:
        _LOGGER.warning("Ignoring malformed shared link: %s", exc)
        return LoadedLink(Rules.starting_board(), token_present=True, valid=False)
    return LoadedLink(board, token_present=True, valid=True)
