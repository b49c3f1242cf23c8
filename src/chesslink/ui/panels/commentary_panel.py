"""CommentaryPanel — the AI's latest remark about its move."""

from __future__ import annotations

from PyQt6.QtWidgets import QFrame, QLabel, QVBoxLayout, QWidget

from chesslink.i18n import t


class CommentaryPanel(QFrame):
    """Shows the last AI commentary; hidden while there is none."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setObjectName("commentary")

        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 8, 12, 8)
        layout.setSpacing(4)

        self._lbl_title = QLabel()
        self._lbl_title.setStyleSheet(
            "color: #a5b4fc; font-size: 11px; font-weight: bold;"
        )
        layout.addWidget(self._lbl_title)

        self._lbl_text = QLabel()
        self._lbl_text.setWordWrap(True)
        self._lbl_text.setStyleSheet("color: #e0e7ff; font-style: italic;")
        layout.addWidget(self._lbl_text)

        self.retranslate_ui()
        self.set_commentary(None)

    def retranslate_ui(self) -> None:
        self._lbl_title.setText(t().commentary_title)

    def set_commentary(self, text: str | None) -> None:
        if not text:
            self._lbl_text.clear()
            self.hide()
            return
        self._lbl_text.setText(f"“{text}”")
        self.show()

    def commentary(self) -> str:
        return self._lbl_text.text()
