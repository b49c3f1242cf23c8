"""Application entry point."""

from __future__ import annotations

import logging
import sys

from chesslink.config import Settings
from chesslink.i18n import set_language


def main() -> None:
    """Launch the ChessLink application."""
    settings = Settings.from_env()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    set_language(settings.language)

    from chesslink.ui.bootstrap import run_application

    sys.exit(run_application(sys.argv, settings))


if __name__ == "__main__":
    main()
