"""Prompt construction and reply parsing for language-model advisors."""

from __future__ import annotations

import json
from collections.abc import Sequence

from chesslink.advisor.base import AdvisorReply
from chesslink.core.errors import AdvisorFailure

SYSTEM_PROMPT = (
    "You are a chess grandmaster. You answer with a JSON object of the form "
    '{"bestMove": "<SAN move>", "commentary": "<one sentence>"} and nothing else.'
)


def build_user_prompt(fen: str, legal_moves: Sequence[str]) -> str:
    return (
        "The current board state in FEN (Forsyth-Edwards Notation) is: "
        f'"{fen}".\n\n'
        "The valid legal moves in SAN (Standard Algebraic Notation) are: "
        f"{', '.join(legal_moves)}.\n\n"
        "Analyze the position and choose the absolute best move to win, or to "
        "draw if losing. The move must be one of the valid moves listed above. "
        "Provide a brief, witty or strategic commentary on why you chose this "
        "move (max 1 sentence)."
    )


def build_messages(fen: str, legal_moves: Sequence[str]) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": build_user_prompt(fen, legal_moves)},
    ]


def parse_reply(text: str | None) -> AdvisorReply:
    """Parse the model's JSON answer; raises :class:`AdvisorFailure`."""
    if not text or not text.strip():
        raise AdvisorFailure("empty response from advisor")

    payload = _strip_code_fence(text.strip())
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise AdvisorFailure(f"advisor response is not JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise AdvisorFailure("advisor response is not a JSON object")

    move = data.get("bestMove", data.get("move"))
    if not isinstance(move, str) or not move.strip():
        raise AdvisorFailure("advisor response has no move")

    commentary = data.get("commentary", "")
    if not isinstance(commentary, str):
        commentary = str(commentary)
    return AdvisorReply(move=move.strip(), commentary=commentary.strip())


def _strip_code_fence(text: str) -> str:
    # ```json\n{...}\n```
    if not text.startswith("```"):
        return text
    lines = text.splitlines()[1:]
    if lines and lines[-1].strip().startswith("```"):
        lines = lines[:-1]
    return "\n".join(lines)
