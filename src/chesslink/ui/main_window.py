"""MainWindow — top-level window assembling all UI components."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeVar

from PyQt6.QtCore import Qt, QTimer, pyqtSignal
from PyQt6.QtGui import QAction, QCloseEvent, QGuiApplication
from PyQt6.QtWidgets import (
    QHBoxLayout,
    QInputDialog,
    QLabel,
    QLineEdit,
    QMainWindow,
    QVBoxLayout,
    QWidget,
)

from chesslink.advisor.base import AdvisorRunner, MoveAdvisor
from chesslink.advisor.openai_advisor import OpenAIMoveAdvisor
from chesslink.config import Settings
from chesslink.core import codec
from chesslink.core.enums import GameMode
from chesslink.game.dispatcher import MoveDispatcher
from chesslink.i18n import t
from chesslink.ui.advisor_session import AdvisorSession
from chesslink.ui.board.board_view import BoardView
from chesslink.ui.game_sync import GameSync
from chesslink.ui.panels.commentary_panel import CommentaryPanel
from chesslink.ui.panels.control_panel import ControlPanel
from chesslink.ui.recovery import RecoveryView

_LOGGER = logging.getLogger(__name__)

TCallback = TypeVar("TCallback", bound=Callable[..., None])


class MainWindow(QMainWindow):
    """Main application window for ChessLink.

    Args:
        settings: Runtime configuration; read from the environment if omitted.
        advisor: AI move source; an :class:`OpenAIMoveAdvisor` by default.
        runner: Executes advisor requests; a threaded
            :class:`AdvisorSession` by default.
        initial_link: Link to open at start-up (``None`` for a new game).

    Signals:
        reload_requested(str): Emitted from the recovery screen with the last
            link the window showed.
    """

    reload_requested = pyqtSignal(str)

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        advisor: MoveAdvisor | None = None,
        runner: AdvisorRunner | None = None,
        initial_link: str | None = None,
    ) -> None:
        super().__init__()
        self._settings = settings if settings is not None else Settings.from_env()
        self.setWindowTitle(t().app_title)
        self.setMinimumSize(640, 760)
        self.resize(720, 900)

        self._advisor_session: AdvisorSession | None = None
        if runner is None:
            self._advisor_session = AdvisorSession(parent=self)
            runner = self._advisor_session
        if advisor is None:
            advisor = OpenAIMoveAdvisor.from_settings(self._settings)

        self._dispatcher = MoveDispatcher(advisor, runner)
        self._recovery_link = ""
        self._is_recovering = False

        self._setup_ui()
        self._setup_menu()
        self._game_sync = GameSync(
            dispatcher=self._dispatcher,
            board_view=self._board_view,
            control_panel=self._control_panel,
            commentary_panel=self._commentary_panel,
            status_label=self._status_label,
            notification_label=self._notification_label,
            notification_timer=QTimer(self),
            address_bar=self._address_bar,
            copy_link_action=self._act_copy_link,
            link_base=self._settings.link_base,
        )
        self._connect_signals()
        self._connect_game_events()
        if self._advisor_session is not None:
            self._advisor_session.setup()

        self._dispatcher.load(initial_link)

    # ── Accessors ────────────────────────────────────────────────────────

    @property
    def dispatcher(self) -> MoveDispatcher:
        return self._dispatcher

    @property
    def board_view(self) -> BoardView:
        return self._board_view

    @property
    def control_panel(self) -> ControlPanel:
        return self._control_panel

    @property
    def address_bar(self) -> QLineEdit:
        return self._address_bar

    # ── UI setup ─────────────────────────────────────────────────────────

    def _setup_ui(self) -> None:
        central = QWidget()
        central.setObjectName("central")
        self.setCentralWidget(central)
        root = QVBoxLayout(central)
        root.setContentsMargins(16, 12, 16, 12)
        root.setSpacing(8)

        s = t()
        self._title_label = QLabel(s.app_title)
        self._title_label.setObjectName("title")
        self._title_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.addWidget(self._title_label)

        self._tagline_label = QLabel(s.app_tagline)
        self._tagline_label.setObjectName("tagline")
        self._tagline_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.addWidget(self._tagline_label)

        self._address_bar = QLineEdit()
        self._address_bar.setPlaceholderText(s.address_placeholder)
        self._address_bar.setClearButtonEnabled(True)
        root.addWidget(self._address_bar)

        banner_row = QHBoxLayout()
        self._notification_label = QLabel()
        self._notification_label.setObjectName("notification")
        self._notification_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._notification_label.hide()
        banner_row.addStretch(1)
        banner_row.addWidget(self._notification_label)
        banner_row.addStretch(1)
        root.addLayout(banner_row)

        self._board_view = BoardView()
        root.addWidget(self._board_view, stretch=1)

        self._status_label = QLabel()
        self._status_label.setObjectName("status")
        self._status_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.addWidget(self._status_label)

        self._commentary_panel = CommentaryPanel()
        root.addWidget(self._commentary_panel)

        self._control_panel = ControlPanel()
        root.addWidget(self._control_panel)

    def _setup_menu(self) -> None:
        menu_bar = self.menuBar()
        assert menu_bar is not None
        s = t()

        self._menu_game = menu_bar.addMenu(s.menu_game)
        assert self._menu_game is not None

        self._act_open_link = QAction(s.menu_open_link, self)
        self._act_open_link.setShortcut("Ctrl+O")
        self._act_open_link.triggered.connect(self._on_open_link_dialog)
        self._menu_game.addAction(self._act_open_link)

        self._act_copy_link = QAction(s.menu_copy_link, self)
        self._act_copy_link.setShortcut("Ctrl+L")
        self._act_copy_link.triggered.connect(self._on_copy_link)
        self._menu_game.addAction(self._act_copy_link)

        self._menu_game.addSeparator()

        self._act_flip = QAction(s.menu_flip_board, self)
        self._act_flip.setShortcut("F")
        self._act_flip.triggered.connect(self._on_flip)
        self._menu_game.addAction(self._act_flip)

        self._menu_game.addSeparator()

        self._act_quit = QAction(s.menu_quit, self)
        self._act_quit.setShortcut("Ctrl+Q")
        self._act_quit.triggered.connect(self.close)
        self._menu_game.addAction(self._act_quit)

    # ── Signal wiring ────────────────────────────────────────────────────

    def _connect_signals(self) -> None:
        """Connect Qt widget signals."""
        self._board_view.move_made.connect(self._on_user_move)
        self._address_bar.returnPressed.connect(self._on_address_entered)
        self._control_panel.mode_selected.connect(self._on_mode_selected)
        self._control_panel.reset_clicked.connect(self._on_reset)
        self._control_panel.undo_clicked.connect(self._on_undo)
        self._control_panel.flip_clicked.connect(self._on_flip)
        self._control_panel.copy_link_clicked.connect(self._on_copy_link)

    def _connect_game_events(self) -> None:
        """Subscribe to dispatcher callbacks (idempotent)."""
        events = self._dispatcher.events
        sync = self._game_sync
        self._replace_callback(events.on_move, sync.on_game_move)
        self._replace_callback(events.on_phase_changed, sync.on_phase_changed)
        self._replace_callback(events.on_game_over, sync.on_game_over)
        self._replace_callback(events.on_session_changed, sync.on_session_changed)
        self._replace_callback(events.on_notification, sync.on_notification)

    def _disconnect_game_events(self) -> None:
        """Detach this window from dispatcher callbacks."""
        events = self._dispatcher.events
        sync = self._game_sync
        self._remove_callback(events.on_move, sync.on_game_move)
        self._remove_callback(events.on_phase_changed, sync.on_phase_changed)
        self._remove_callback(events.on_game_over, sync.on_game_over)
        self._remove_callback(events.on_session_changed, sync.on_session_changed)
        self._remove_callback(events.on_notification, sync.on_notification)

    @staticmethod
    def _replace_callback(
        callbacks: list[TCallback],
        callback: TCallback,
    ) -> None:
        callbacks[:] = [cb for cb in callbacks if cb != callback]
        callbacks.append(callback)

    @staticmethod
    def _remove_callback(callbacks: list[TCallback], callback: TCallback) -> None:
        callbacks[:] = [cb for cb in callbacks if cb != callback]

    # ── User actions ─────────────────────────────────────────────────────

    def open_link(self, link: str | None) -> None:
        """Load *link* as if it had been opened in the browser."""
        self._dispatcher.load(link.strip() if link else None)

    def _on_user_move(self, move: object) -> None:
        """Handle a move from the board UI."""
        if not self._dispatcher.submit_human_move(move):  # type: ignore[arg-type]
            # Snap the dragged piece back.
            self._board_view.board_scene.set_position(self._dispatcher.session.board)

    def _on_address_entered(self) -> None:
        self._open_typed_link(self._address_bar.text())

    def _open_typed_link(self, text: str) -> None:
        """Open *text* only if it carries a position; the game is kept otherwise."""
        if codec.token_from_link(text.strip()) is None:
            _LOGGER.debug("Ignoring address without a position: %r", text)
            self._game_sync.update_address_bar()
            return
        self.open_link(text)

    def _on_open_link_dialog(self) -> None:
        text, ok = QInputDialog.getText(
            self,
            t().open_link_title,
            t().open_link_label,
            QLineEdit.EchoMode.Normal,
            self._address_bar.text(),
        )
        if ok:
            self._open_typed_link(text)

    def _on_mode_selected(self, mode: object) -> None:
        if isinstance(mode, GameMode):
            self._dispatcher.set_mode(mode)

    def _on_reset(self) -> None:
        self._dispatcher.reset()

    def _on_undo(self) -> None:
        self._dispatcher.undo()

    def _on_flip(self) -> None:
        self._dispatcher.flip_orientation()

    def _on_copy_link(self) -> None:
        self._dispatcher.copy_link(self._settings.link_base, self._copy_to_clipboard)

    @staticmethod
    def _copy_to_clipboard(text: str) -> None:
        clipboard = QGuiApplication.clipboard()
        if clipboard is None:
            raise RuntimeError("system clipboard is unavailable")
        clipboard.setText(text)

    # ── Recovery ─────────────────────────────────────────────────────────

    @property
    def is_recovering(self) -> bool:
        return self._is_recovering

    def show_recovery(self, message: str) -> None:
        """Swap the game UI for a :class:`RecoveryView`."""
        if self._is_recovering:
            return
        self._is_recovering = True
        self._recovery_link = self._address_bar.text()
        self._game_sync.hide_notification()
        self._shutdown_game()

        view = RecoveryView(message)
        view.reload_clicked.connect(self._on_reload_clicked)
        self.setCentralWidget(view)
        self._menu_game.setEnabled(False)

    def _on_reload_clicked(self) -> None:
        self.reload_requested.emit(self._recovery_link)

    # ── Lifecycle ────────────────────────────────────────────────────────

    def _shutdown_game(self) -> None:
        self._disconnect_game_events()
        if self._advisor_session is not None:
            self._advisor_session.shutdown()

    def closeEvent(self, event: QCloseEvent | None) -> None:
        self._shutdown_game()
        super().closeEvent(event)
