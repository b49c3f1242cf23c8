"""Visual theme constants and QSS styles for ChessLink."""

from __future__ import annotations

from dataclasses import dataclass

from PyQt6.QtGui import QColor


@dataclass(frozen=True)
class BoardTheme:
    """Colour scheme for the chessboard."""

    light_square: QColor
    dark_square: QColor
    highlight_from: QColor  # selected piece origin
    highlight_to: QColor  # legal move targets
    highlight_check: QColor  # king in check
    last_move: QColor  # last move origin and destination
    coord_light: QColor  # coordinate text on dark squares
    coord_dark: QColor  # coordinate text on light squares

    @classmethod
    def default(cls) -> BoardTheme:
        return cls(
            light_square=QColor(148, 163, 184),  # slate-400
            dark_square=QColor(51, 65, 85),  # slate-700
            highlight_from=QColor(255, 255, 0, 100),
            highlight_to=QColor(0, 0, 0, 50),
            highlight_check=QColor(255, 0, 0, 120),
            last_move=QColor(99, 102, 241, 110),  # indigo
            coord_light=QColor(51, 65, 85),
            coord_dark=QColor(148, 163, 184),
        )


# ── Application-wide QSS ────────────────────────────────────────────────────

APP_STYLE = """
QMainWindow, QWidget#central {
    background: #020617;
}

QLabel {
    color: #cbd5e1;
    font-family: "Helvetica Neue", sans-serif;
}

QLabel#title {
    color: #818cf8;
    font-size: 28px;
    font-weight: bold;
}

QLabel#tagline {
    color: #94a3b8;
    font-size: 12px;
}

QLabel#status {
    background: #1e293b;
    border: 1px solid #334155;
    border-radius: 6px;
    padding: 8px;
    font-family: "Consolas", monospace;
    font-size: 16px;
    font-weight: bold;
}

QLabel#status[state="check"] {
    background: #450a0a;
    border-color: #ef4444;
    color: #fecaca;
}

QLabel#status[state="over"] {
    background: #422006;
    border-color: #eab308;
    color: #fef08a;
}

QLabel#notification {
    background: #4f46e5;
    color: white;
    border: 1px solid #818cf8;
    border-radius: 14px;
    padding: 6px 18px;
    font-weight: bold;
}

QLabel#thinking {
    background: rgba(15, 23, 42, 190);
    color: #a5b4fc;
    font-size: 16px;
    font-weight: bold;
}

QFrame#commentary {
    background: #1e1b4b;
    border: 1px solid #4338ca;
    border-radius: 8px;
}

QLineEdit {
    background: #0f172a;
    color: #e2e8f0;
    border: 1px solid #334155;
    border-radius: 4px;
    padding: 4px 8px;
    font-family: "Consolas", monospace;
}

QPushButton {
    background: #334155;
    color: #e2e8f0;
    border: 1px solid #475569;
    border-radius: 6px;
    padding: 6px 14px;
    font-size: 13px;
}
QPushButton:hover {
    background: #475569;
}
QPushButton:checked {
    background: #4f46e5;
}
QPushButton:disabled {
    color: #64748b;
    background: #1e293b;
}

QMenuBar {
    background: #0f172a;
    color: #e2e8f0;
}
QMenuBar::item:selected {
    background: #334155;
}
QMenu {
    background: #0f172a;
    color: #e2e8f0;
    border: 1px solid #334155;
}
QMenu::item:selected {
    background: #4f46e5;
}
"""
