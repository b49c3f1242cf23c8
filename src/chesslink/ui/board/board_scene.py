"""BoardScene — QGraphicsScene that draws the chessboard and pieces."""

from __future__ import annotations

import chess
from PyQt6.QtCore import QObject, QPointF, Qt, pyqtSignal
from PyQt6.QtGui import QBrush, QColor, QFont, QPen
from PyQt6.QtWidgets import (
    QGraphicsRectItem,
    QGraphicsScene,
    QGraphicsSceneMouseEvent,
    QGraphicsSimpleTextItem,
)

from chesslink.core.move import DropMove
from chesslink.ui.board.piece_item import PieceItem, board_cell
from chesslink.ui.styles.theme import BoardTheme


class BoardScene(QGraphicsScene):
    """Renders the board, coordinates, highlights, and piece items.

    The scene only proposes moves; legality is decided by the dispatcher.

    Signals:
        move_made(DropMove): Emitted when the user drops or clicks a piece
            onto a target square.
    """

    move_made = pyqtSignal(object)

    TILE = 80  # px per square

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._theme = BoardTheme.default()
        self._board: chess.Board | None = None
        self._flipped = False

        # Interaction state
        self._selected_sq: chess.Square | None = None
        self._dragging_item: PieceItem | None = None
        self._interactive = True

        # Visual layers
        self._square_items: dict[chess.Square, QGraphicsRectItem] = {}
        self._highlight_items: list[QGraphicsRectItem] = []
        self._check_items: list[QGraphicsRectItem] = []
        self._last_move_highlights: list[QGraphicsRectItem] = []
        self._legal_dot_items: list[QGraphicsRectItem] = []
        self._piece_items: dict[chess.Square, PieceItem] = {}
        self._coord_items: list[QGraphicsSimpleTextItem] = []

        self._draw_board()

    # ── Public API ───────────────────────────────────────────────────────

    def set_position(self, board: chess.Board) -> None:
        """Update the displayed position (full redraw of pieces)."""
        self._board = board
        self._clear_selection()
        self._sync_pieces()
        self.highlight_last_move(board.peek() if board.move_stack else None)
        self.highlight_check()

    def set_interactive(self, interactive: bool) -> None:
        """Enable / disable piece interaction."""
        self._interactive = interactive
        if not interactive:
            self._clear_selection()

    def is_interactive(self) -> bool:
        return self._interactive

    def set_flipped(self, flipped: bool) -> None:
        """Flip the board orientation (black at the bottom)."""
        if flipped == self._flipped:
            return
        self._flipped = flipped
        self._draw_board()
        if self._board is not None:
            self.set_position(self._board)

    def is_flipped(self) -> bool:
        return self._flipped

    def highlight_last_move(self, move: chess.Move | None) -> None:
        """Highlight origin/destination of the last played move."""
        self._clear_items(self._last_move_highlights)
        if move is None:
            return
        for sq in (move.from_square, move.to_square):
            rect = self._make_highlight(sq, self._theme.last_move)
            rect.setZValue(0.5)
            self._last_move_highlights.append(rect)

    def highlight_check(self) -> None:
        """Highlight the king that is in check."""
        self._clear_items(self._check_items)
        if self._board is None or not self._board.is_check():
            return
        king_sq = self._board.king(self._board.turn)
        if king_sq is None:
            return
        rect = self._make_highlight(king_sq, self._theme.highlight_check)
        rect.setZValue(0.6)
        self._check_items.append(rect)

    # ── Board drawing ────────────────────────────────────────────────────

    def _draw_board(self) -> None:
        """Draw or redraw the 64 squares and coordinates."""
        for sq_item in self._square_items.values():
            self.removeItem(sq_item)
        self._square_items.clear()
        for coord_item in self._coord_items:
            self.removeItem(coord_item)
        self._coord_items.clear()

        t = self.TILE
        font = QFont("Helvetica Neue", max(9, t // 8))

        for sq in chess.SQUARES:
            f, r = chess.square_file(sq), chess.square_rank(sq)
            vf, vr = self._visual_coords(f, r)
            is_dark = (f + r) % 2 == 0
            color = self._theme.dark_square if is_dark else self._theme.light_square
            rect = QGraphicsRectItem(vf * t, vr * t, t, t)
            rect.setBrush(QBrush(color))
            rect.setPen(QPen(Qt.PenStyle.NoPen))
            rect.setZValue(0)
            self.addItem(rect)
            self._square_items[sq] = rect

            coord_color = self._theme.coord_dark if is_dark else self._theme.coord_light
            # Rank numbers on the left edge, file letters on the bottom edge
            if vf == 0:
                self._add_coord(chess.RANK_NAMES[r], vf * t + 2, vr * t + 1, font, coord_color)
            if vr == 7:
                self._add_coord(
                    chess.FILE_NAMES[f], vf * t + t - 12, vr * t + t - 16, font, coord_color
                )

        self.setSceneRect(0, 0, 8 * t, 8 * t)

    def _add_coord(
        self, label: str, x: float, y: float, font: QFont, color: QColor
    ) -> None:
        txt = QGraphicsSimpleTextItem(label)
        txt.setFont(font)
        txt.setBrush(QBrush(color))
        txt.setPos(x, y)
        txt.setZValue(0.3)
        self.addItem(txt)
        self._coord_items.append(txt)

    # ── Piece synchronisation ────────────────────────────────────────────

    def _sync_pieces(self) -> None:
        """Re-create all piece items from the current position."""
        for item in self._piece_items.values():
            self.removeItem(item)
        self._piece_items.clear()

        if self._board is None:
            return

        for sq, piece in self._board.piece_map().items():
            item = PieceItem(piece, sq, self.TILE, flipped=self._flipped)
            self.addItem(item)
            self._piece_items[sq] = item

    # ── Mouse interaction ────────────────────────────────────────────────

    def mousePressEvent(self, event: QGraphicsSceneMouseEvent | None) -> None:
        if not self._interactive or self._board is None or event is None:
            return super().mousePressEvent(event)

        sq = self._pos_to_square(event.scenePos())
        if sq is None:
            self._clear_selection()
            return super().mousePressEvent(event)

        # Clicking a target after selecting a piece → propose the move
        if self._selected_sq is not None and sq != self._selected_sq:
            if self._is_target(self._selected_sq, sq):
                from_sq = self._selected_sq
                self._clear_selection()
                self.move_made.emit(DropMove.from_squares(from_sq, sq))
                return

        piece = self._board.piece_at(sq)
        if piece is not None and piece.color == self._board.turn:
            self._select_square(sq)
            item = self._piece_items.get(sq)
            if item is not None:
                item.lift()
                self._dragging_item = item
        else:
            self._clear_selection()

        super().mousePressEvent(event)

    def mouseReleaseEvent(self, event: QGraphicsSceneMouseEvent | None) -> None:
        if self._dragging_item is not None and event is not None:
            item = self._dragging_item
            self._dragging_item = None
            proposal = item.release(self._pos_to_square(event.scenePos()))
            if proposal is not None:
                self._clear_selection()
                self.move_made.emit(proposal)
                return

        super().mouseReleaseEvent(event)

    # ── Selection / highlights ───────────────────────────────────────────

    def _select_square(self, sq: chess.Square) -> None:
        self._clear_selection()
        self._selected_sq = sq
        self._highlight_items.append(self._make_highlight(sq, self._theme.highlight_from))

        if self._board is None:
            return
        for target in self._targets(sq):
            dot = self._make_highlight(target, self._theme.highlight_to)
            self._legal_dot_items.append(dot)

    def _targets(self, from_sq: chess.Square) -> set[chess.Square]:
        if self._board is None:
            return set()
        return {m.to_square for m in self._board.legal_moves if m.from_square == from_sq}

    def _is_target(self, from_sq: chess.Square, to_sq: chess.Square) -> bool:
        return to_sq in self._targets(from_sq)

    def _clear_selection(self) -> None:
        self._selected_sq = None
        self._clear_items(self._highlight_items)
        self._clear_items(self._legal_dot_items)

    def _clear_items(self, items: list[QGraphicsRectItem]) -> None:
        for item in items:
            self.removeItem(item)
        items.clear()

    # ── Coordinate helpers ───────────────────────────────────────────────

    def _visual_coords(self, file: int, rank: int) -> tuple[int, int]:
        """Convert board file/rank to visual column/row."""
        return board_cell(chess.square(file, rank), self._flipped)

    def _pos_to_square(self, pos: QPointF) -> chess.Square | None:
        """Scene position → board square."""
        t = self.TILE
        col = int(pos.x() // t)
        row = int(pos.y() // t)
        if not (0 <= col < 8 and 0 <= row < 8):
            return None
        if self._flipped:
            return chess.square(7 - col, row)
        return chess.square(col, 7 - row)

    def _make_highlight(self, sq: chess.Square, color: QColor) -> QGraphicsRectItem:
        """Create a coloured overlay rectangle on a square."""
        t = self.TILE
        vf, vr = self._visual_coords(chess.square_file(sq), chess.square_rank(sq))
        rect = QGraphicsRectItem(vf * t, vr * t, t, t)
        rect.setBrush(QBrush(color))
        rect.setPen(QPen(Qt.PenStyle.NoPen))
        rect.setZValue(0.8)
        self.addItem(rect)
        return rect
