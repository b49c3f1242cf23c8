"""RecoveryView — shown in place of the game after an unexpected fault."""

from __future__ import annotations

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QFont
from PyQt6.QtWidgets import QLabel, QPushButton, QVBoxLayout, QWidget

from chesslink.i18n import t


class RecoveryView(QWidget):
    """Error message with a button to rebuild the game window.

    Signals:
        reload_clicked(): The user asked to start over from the last link.
    """

    reload_clicked = pyqtSignal()

    def __init__(self, message: str = "", parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setObjectName("central")

        layout = QVBoxLayout(self)
        layout.setContentsMargins(40, 40, 40, 40)
        layout.setSpacing(12)
        layout.addStretch(1)

        s = t()
        self._lbl_title = QLabel(s.recovery_title)
        self._lbl_title.setFont(QFont("Helvetica Neue", 18, QFont.Weight.Bold))
        self._lbl_title.setStyleSheet("color: #f87171;")
        self._lbl_title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._lbl_title)

        self._lbl_message = QLabel(message)
        self._lbl_message.setWordWrap(True)
        self._lbl_message.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._lbl_message.setTextInteractionFlags(
            Qt.TextInteractionFlag.TextSelectableByMouse
        )
        self._lbl_message.setStyleSheet("color: #94a3b8; font-family: Consolas, monospace;")
        layout.addWidget(self._lbl_message)

        self._lbl_hint = QLabel(s.recovery_hint)
        self._lbl_hint.setWordWrap(True)
        self._lbl_hint.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._lbl_hint)

        self._btn_reload = QPushButton(s.recovery_reload)
        self._btn_reload.setMinimumHeight(36)
        self._btn_reload.clicked.connect(self.reload_clicked)
        layout.addWidget(self._btn_reload, alignment=Qt.AlignmentFlag.AlignCenter)

        layout.addStretch(1)

    def message(self) -> str:
        return self._lbl_message.text()
