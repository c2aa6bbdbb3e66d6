"""Logging configuration for the application."""

import logging
import sys

from app.core.config import get_settings

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s"


def setup_logging() -> None:
    """Configure application-wide logging.

    Level is DEBUG when settings.debug is True, otherwise LOG_LEVEL
    (default info). Output goes to stdout; each line carries the request id
    set by RequestIDMiddleware ("-" outside a request).
    """
    from app.middleware.request_id import RequestIdLogFilter

    settings = get_settings()
    if settings.debug:
        log_level = logging.DEBUG
    else:
        log_level = _LEVELS.get(settings.log_level.lower(), logging.INFO)
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIdLogFilter())
    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        handlers=[handler],
    )


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given module name.

    Args:
        name: Usually __name__ of the calling module.

    Returns:
        Logger instance.
    """
    return logging.getLogger(name)
