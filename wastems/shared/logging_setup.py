"""Logging configuration for the application."""

import logging
import sys

from wastems.core.config import get_settings


def setup_logging() -> None:
    """Configure application-wide logging.

    Level is DEBUG when settings.debug is True, otherwise INFO.
    Output goes to stdout. Stack traces of failed requests are logged
    here and never sent to clients.
    """
    settings = get_settings()
    log_level = logging.DEBUG if settings.debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    # httpx logs every Firestore round-trip at INFO.
    logging.getLogger("httpx").setLevel(logging.WARNING)
