"""Logging configuration for the application."""

import logging
import sys

from fedisearch.core.config import Settings, get_settings

# Client libraries that log every request at INFO.
_NOISY_LOGGERS = ("httpx", "httpcore")


def setup_logging(level: int | None = None, settings: Settings | None = None) -> None:
    """Configure application-wide logging.

    Level is DEBUG when settings.debug is True, otherwise INFO, unless an
    explicit level is passed. Output goes to stdout. HTTP client loggers are
    held at WARNING so index round-trips do not flood the log; SQL echo is
    controlled by DATABASE_ECHO instead of the root level.

    Args:
        level: Optional logging level overriding the settings-derived one.
        settings: Settings to read; defaults to get_settings().
    """
    settings = settings or get_settings()
    if level is None:
        level = logging.DEBUG if settings.debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
    if not settings.database_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given module name.

    Args:
        name: Usually __name__ of the calling module.
    """
    return logging.getLogger(name)
