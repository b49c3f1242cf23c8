"""Structured move produced by board drag-and-drop."""

from __future__ import annotations

from dataclasses import dataclass

import chess


@dataclass(frozen=True, slots=True)
class DropMove:
    """Origin, destination and optional promotion piece.

    Squares use algebraic names (``"e2"``); *promotion* is a piece letter
    (``"q"``, ``"r"``, ``"b"``, ``"n"``) or ``None``.
    """

    from_square: str
    to_square: str
    promotion: str | None = None

    def __str__(self) -> str:
        return f"{self.from_square}{self.to_square}{self.promotion or ''}"

    @classmethod
    def from_squares(
        cls,
        from_sq: chess.Square,
        to_sq: chess.Square,
        promotion: chess.PieceType | None = None,
    ) -> DropMove:
        promo = chess.piece_symbol(promotion) if promotion else None
        return cls(chess.square_name(from_sq), chess.square_name(to_sq), promo)

    def to_chess_move(self) -> chess.Move:
        """Build a :class:`chess.Move`; raises ``ValueError`` on bad input."""
        from_sq = chess.parse_square(_field_text(self.from_square, "origin"))
        to_sq = chess.parse_square(_field_text(self.to_square, "destination"))
        promotion: chess.PieceType | None = None
        if self.promotion:
            symbol = _field_text(self.promotion, "promotion piece")
            if symbol not in ("q", "r", "b", "n"):
                raise ValueError(f"bad promotion piece: {self.promotion!r}")
            promotion = chess.PIECE_SYMBOLS.index(symbol)
        return chess.Move(from_sq, to_sq, promotion=promotion)


def _field_text(value: object, label: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"bad {label}: {value!r}")
    return value.strip().lower()
