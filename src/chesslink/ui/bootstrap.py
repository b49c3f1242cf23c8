"""Qt application bootstrap helpers."""

from __future__ import annotations

import logging
import sys
import traceback
from types import TracebackType
from typing import TYPE_CHECKING

from chesslink.config import Settings

if TYPE_CHECKING:
    from PyQt6.QtWidgets import QApplication

    from chesslink.advisor.base import MoveAdvisor
    from chesslink.ui.main_window import MainWindow

_LOGGER = logging.getLogger(__name__)


def _configure_application(app: QApplication) -> None:
    """Apply app-wide settings and theme."""
    from chesslink.ui.styles.theme import APP_STYLE

    app.setApplicationName("ChessLink")
    app.setStyle("Fusion")
    app.setStyleSheet(APP_STYLE)


def _link_from_argv(argv: list[str]) -> str | None:
    """First positional argument, like a browser opening a URL."""
    for arg in argv[1:]:
        if not arg.startswith("-"):
            return arg
    return None


class WindowHost:
    """Owns the main window and rebuilds it after a fault.

    Installed as ``sys.excepthook``: an exception escaping a Qt slot is
    logged and the window switches to its recovery screen instead of the
    process aborting.
    """

    __slots__ = ("__weakref__", "_settings", "_advisor", "_window", "_previous_hook")

    def __init__(self, settings: Settings, *, advisor: MoveAdvisor | None = None) -> None:
        self._settings = settings
        self._advisor = advisor
        self._window: MainWindow | None = None
        self._previous_hook = sys.excepthook

    @property
    def window(self) -> MainWindow | None:
        return self._window

    def open(self, link: str | None = None) -> MainWindow:
        """Create and show a fresh main window on *link*."""
        from chesslink.ui.main_window import MainWindow

        window = MainWindow(self._settings, advisor=self._advisor, initial_link=link)
        window.reload_requested.connect(self._on_reload_requested)
        window.show()
        self._window = window
        return window

    def install(self) -> None:
        sys.excepthook = self.handle_exception

    def uninstall(self) -> None:
        if sys.excepthook == self.handle_exception:
            sys.excepthook = self._previous_hook

    def handle_exception(
        self,
        exc_type: type[BaseException],
        exc: BaseException,
        tb: TracebackType | None,
    ) -> None:
        if issubclass(exc_type, KeyboardInterrupt):
            self._previous_hook(exc_type, exc, tb)
            return

        _LOGGER.error("Unhandled exception", exc_info=(exc_type, exc, tb))
        window = self._window
        if window is None:
            return
        message = "".join(traceback.format_exception_only(exc_type, exc)).strip()
        window.show_recovery(message)

    def _on_reload_requested(self, link: str) -> None:
        old = self._window
        self.open(link or None)
        if old is not None:
            old.close()
            old.deleteLater()


def run_application(argv: list[str] | None = None, settings: Settings | None = None) -> int:
    """Create and run the main Qt application."""
    from PyQt6.QtWidgets import QApplication

    from chesslink.ui.advisor_session import wait_for_retired_threads

    args = sys.argv if argv is None else argv
    app = QApplication(args)
    _configure_application(app)

    resolved = settings if settings is not None else Settings.from_env()
    host = WindowHost(resolved)
    host.install()
    try:
        host.open(_link_from_argv(args))
        return app.exec()
    finally:
        host.uninstall()
        # One retry per request, each bounded by the advisor timeout.
        if not wait_for_retired_threads(int(resolved.advisor_timeout * 2000)):
            _LOGGER.warning("Advisor threads still running at exit")
