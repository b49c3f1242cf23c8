"""ControlPanel — mode selector and game action buttons."""

from __future__ import annotations

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtGui import QFont
from PyQt6.QtWidgets import (
    QButtonGroup,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from chesslink.core.enums import GameMode
from chesslink.i18n import t


class ControlPanel(QWidget):
    """Mode buttons (local / link / AI), reset, undo, flip and share link."""

    mode_selected = pyqtSignal(object)  # GameMode
    reset_clicked = pyqtSignal()
    undo_clicked = pyqtSignal()
    flip_clicked = pyqtSignal()
    copy_link_clicked = pyqtSignal()

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._mode = GameMode.LOCAL
        self._setup_ui()
        self.retranslate_ui()
        self.set_mode(GameMode.LOCAL)

    def _setup_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(4, 4, 4, 4)
        layout.setSpacing(6)

        btn_font = QFont("Helvetica Neue", 10)

        modes_row = QHBoxLayout()
        self._mode_group = QButtonGroup(self)
        self._mode_group.setExclusive(True)
        self._mode_buttons: dict[GameMode, QPushButton] = {}
        for mode in (GameMode.LOCAL, GameMode.REMOTE_LINK, GameMode.AI):
            btn = QPushButton()
            btn.setFont(btn_font)
            btn.setMinimumHeight(36)
            btn.setCheckable(True)
            btn.clicked.connect(lambda _checked=False, m=mode: self._on_mode_clicked(m))
            self._mode_group.addButton(btn)
            self._mode_buttons[mode] = btn
            modes_row.addWidget(btn)
        layout.addLayout(modes_row)

        actions_row = QHBoxLayout()
        self._btn_reset = QPushButton()
        self._btn_reset.setFont(btn_font)
        self._btn_reset.setMinimumHeight(36)
        self._btn_reset.setStyleSheet(
            "QPushButton { background-color: #6b2020; }"
            "QPushButton:hover { background-color: #8b2020; }"
        )
        self._btn_reset.clicked.connect(self.reset_clicked)
        actions_row.addWidget(self._btn_reset)

        self._btn_undo = QPushButton()
        self._btn_undo.setFont(btn_font)
        self._btn_undo.setMinimumHeight(36)
        self._btn_undo.clicked.connect(self.undo_clicked)
        actions_row.addWidget(self._btn_undo)

        self._btn_flip = QPushButton()
        self._btn_flip.setFont(btn_font)
        self._btn_flip.setMinimumHeight(36)
        self._btn_flip.clicked.connect(self.flip_clicked)
        actions_row.addWidget(self._btn_flip)
        layout.addLayout(actions_row)

        self._btn_copy_link = QPushButton()
        self._btn_copy_link.setFont(QFont("Helvetica Neue", 11, QFont.Weight.Bold))
        self._btn_copy_link.setMinimumHeight(40)
        self._btn_copy_link.clicked.connect(self.copy_link_clicked)
        layout.addWidget(self._btn_copy_link)

        self._lbl_hint = QLabel()
        self._lbl_hint.setWordWrap(True)
        self._lbl_hint.setStyleSheet("color: #64748b; font-size: 11px;")
        layout.addWidget(self._lbl_hint)

    def retranslate_ui(self) -> None:
        s = t()
        self._mode_buttons[GameMode.LOCAL].setText(s.mode_local)
        self._mode_buttons[GameMode.REMOTE_LINK].setText(s.mode_link)
        self._mode_buttons[GameMode.AI].setText(s.mode_ai)
        self._btn_reset.setText(s.btn_reset)
        self._btn_undo.setText(s.btn_undo)
        self._btn_flip.setText(s.btn_flip)
        self._btn_copy_link.setText(s.btn_copy_link)
        self._lbl_hint.setText(s.copy_link_hint)

    # ── State ────────────────────────────────────────────────────────────

    @property
    def mode(self) -> GameMode:
        return self._mode

    def set_mode(self, mode: GameMode) -> None:
        """Reflect *mode* without emitting ``mode_selected``."""
        self._mode = mode
        self._mode_buttons[mode].setChecked(True)
        self.set_copy_link_visible(mode is GameMode.REMOTE_LINK)

    def set_copy_link_visible(self, visible: bool) -> None:
        self._btn_copy_link.setVisible(visible)
        self._lbl_hint.setVisible(visible)

    def is_copy_link_visible(self) -> bool:
        return not self._btn_copy_link.isHidden()

    def set_undo_enabled(self, enabled: bool) -> None:
        self._btn_undo.setEnabled(enabled)

    def _on_mode_clicked(self, mode: GameMode) -> None:
        if mode is self._mode:
            return
        self._mode = mode
        self.mode_selected.emit(mode)
