"""PieceItem — SVG piece that rests on a square and proposes drops."""

from __future__ import annotations

import chess
from PyQt6.QtCore import QPointF, Qt
from PyQt6.QtGui import QCursor
from PyQt6.QtSvgWidgets import QGraphicsSvgItem
from PyQt6.QtWidgets import QGraphicsItem

from chesslink.core.move import DropMove
from chesslink.ui.resources import piece_renderer


def board_cell(square: chess.Square, flipped: bool) -> tuple[int, int]:
    """Visual (column, row) of *square*, row 0 at the top of the view."""
    file, rank = chess.square_file(square), chess.square_rank(square)
    if flipped:
        return 7 - file, rank
    return file, 7 - rank


class PieceItem(QGraphicsSvgItem):
    """A piece glyph bound to its home square.

    The item never changes square by itself.  ``release`` either turns the
    gesture into a :class:`DropMove` proposal or puts the piece back home;
    the scene is redrawn from the accepted position afterwards.
    """

    _INSET_RATIO = 0.03
    _RESTING_Z = 1.0
    _LIFTED_Z = 10.0
    _LIFTED_OPACITY = 0.85

    def __init__(
        self,
        piece: chess.Piece,
        square: chess.Square,
        tile: int,
        *,
        flipped: bool = False,
    ) -> None:
        super().__init__()
        self.piece = piece
        self.square = square
        self._tile = tile
        self._flipped = flipped
        self._lifted = False

        self.setSharedRenderer(piece_renderer(piece))
        self.setCacheMode(QGraphicsItem.CacheMode.NoCache)
        self._fit_to_tile()
        self._rest()
        self.move_home()

    @property
    def is_lifted(self) -> bool:
        return self._lifted

    def home_pos(self) -> QPointF:
        """Top-left scene position of the glyph on its own square."""
        col, row = board_cell(self.square, self._flipped)
        inset = self._tile * self._INSET_RATIO
        return QPointF(col * self._tile + inset, row * self._tile + inset)

    def move_home(self) -> None:
        self.setPos(self.home_pos())

    def lift(self) -> None:
        """Pick the piece up so the scene can drag it."""
        self._lifted = True
        self.setFlag(QGraphicsItem.GraphicsItemFlag.ItemIsMovable, True)
        self.setZValue(self._LIFTED_Z)
        self.setOpacity(self._LIFTED_OPACITY)
        self.setCursor(QCursor(Qt.CursorShape.ClosedHandCursor))

    def release(self, target: chess.Square | None) -> DropMove | None:
        """Put the piece down over *target*.

        Returns the proposed move, or ``None`` after snapping back when the
        piece left the board or landed on its own square.
        """
        self._rest()
        if target is None or target == self.square:
            self.move_home()
            return None
        return DropMove.from_squares(self.square, target)

    def _rest(self) -> None:
        self._lifted = False
        self.setFlag(QGraphicsItem.GraphicsItemFlag.ItemIsMovable, False)
        self.setZValue(self._RESTING_Z)
        self.setOpacity(1.0)
        self.setCursor(QCursor(Qt.CursorShape.OpenHandCursor))

    def _fit_to_tile(self) -> None:
        renderer = self.renderer()
        if renderer is None:
            return
        target = max(self._tile * (1.0 - 2.0 * self._INSET_RATIO), 1.0)
        native = renderer.defaultSize()
        longest = max(native.width(), native.height(), 1)
        self.setScale(target / longest)
