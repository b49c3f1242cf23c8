"""UI/session synchronisation helpers for MainWindow."""

from __future__ import annotations

from PyQt6.QtCore import QTimer
from PyQt6.QtGui import QAction
from PyQt6.QtWidgets import QLabel, QLineEdit

from chesslink.core.enums import GameMode, GameStatus, Orientation
from chesslink.game.dispatcher import MoveDispatcher
from chesslink.game.interfaces import DispatchPhase
from chesslink.game.session import MoveRecord, Session
from chesslink.i18n import t
from chesslink.ui.board.board_view import BoardView
from chesslink.ui.panels.commentary_panel import CommentaryPanel
from chesslink.ui.panels.control_panel import ControlPanel


class GameSync:
    """Applies session changes to UI widgets."""

    __slots__ = (
        "__weakref__",
        "_dispatcher",
        "_board_view",
        "_control_panel",
        "_commentary_panel",
        "_status_label",
        "_notification_label",
        "_notification_timer",
        "_address_bar",
        "_copy_link_action",
        "_link_base",
    )

    def __init__(
        self,
        *,
        dispatcher: MoveDispatcher,
        board_view: BoardView,
        control_panel: ControlPanel,
        commentary_panel: CommentaryPanel,
        status_label: QLabel,
        notification_label: QLabel,
        notification_timer: QTimer,
        address_bar: QLineEdit,
        copy_link_action: QAction,
        link_base: str,
    ) -> None:
        self._dispatcher = dispatcher
        self._board_view = board_view
        self._control_panel = control_panel
        self._commentary_panel = commentary_panel
        self._status_label = status_label
        self._notification_label = notification_label
        self._notification_timer = notification_timer
        self._address_bar = address_bar
        self._copy_link_action = copy_link_action
        self._link_base = link_base

        self._notification_timer.setSingleShot(True)
        self._notification_timer.timeout.connect(self.hide_notification)

    # ── Dispatcher events ────────────────────────────────────────────────

    def on_session_changed(self, session: Session) -> None:
        """Full re-sync: position, orientation, mode, overlay and texts."""
        scene = self._board_view.board_scene
        scene.set_flipped(session.orientation is Orientation.BLACK)
        scene.set_position(session.board)
        self._control_panel.set_mode(session.mode)
        can_copy = self._dispatcher.can_copy_link
        self._copy_link_action.setEnabled(can_copy)
        self._copy_link_action.setVisible(can_copy)
        self._control_panel.set_undo_enabled(bool(session.move_history))
        self._commentary_panel.set_commentary(
            session.last_ai_commentary if session.mode is GameMode.AI else None
        )
        self.update_address_bar()
        self.sync_board_interactivity()
        self.update_status()

    def on_game_move(self, _record: MoveRecord, session: Session) -> None:
        """Sync UI after a human or AI move."""
        self.on_session_changed(session)

    def on_phase_changed(self, _phase: DispatchPhase) -> None:
        self.sync_board_interactivity()
        self.update_status()

    def on_game_over(self, _status: GameStatus) -> None:
        self._board_view.board_scene.set_interactive(False)
        self.update_status()

    def on_notification(self, text: str, duration_s: float) -> None:
        """Show *text* in the banner for *duration_s* seconds."""
        self._notification_label.setText(text)
        self._notification_label.show()
        self._notification_timer.start(max(int(duration_s * 1000), 1))

    def hide_notification(self) -> None:
        self._notification_timer.stop()
        self._notification_label.hide()

    # ── Widgets ──────────────────────────────────────────────────────────

    def sync_board_interactivity(self) -> None:
        """Enable board input only while a human move is awaited."""
        session = self._dispatcher.session
        interactive = (
            session.phase == DispatchPhase.AWAITING_HUMAN_MOVE and not session.ai_pending
        )
        self._board_view.board_scene.set_interactive(interactive)

        if session.ai_pending:
            name = t().ai_name
            self._board_view.show_thinking(t().status_thinking.format(name=name))
        else:
            self._board_view.show_thinking(None)

    def update_status(self) -> None:
        """Update the status line from the session."""
        session = self._dispatcher.session
        status = session.status
        if status.is_terminal:
            state = "over"
        elif status == GameStatus.CHECK:
            state = "check"
        else:
            state = ""
        self._status_label.setText(session.status_text)
        self._status_label.setProperty("state", state)
        style = self._status_label.style()
        if style is not None:
            style.unpolish(self._status_label)
            style.polish(self._status_label)

    def update_address_bar(self) -> None:
        """Show the shared link while it still matches the position."""
        link = self._dispatcher.link(self._link_base)
        text = link or ""
        if self._address_bar.text() != text:
            self._address_bar.setText(text)

