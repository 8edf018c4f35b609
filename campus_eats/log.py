"""Logging configuration.

The TUI owns the terminal, so records go to a rotating file instead of stdout.
"""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

import structlog

from campus_eats.config import LOG_LEVEL, LOG_PATH


def setup_stdlib_logging(log_path: str = LOG_PATH, level: str = LOG_LEVEL) -> None:
    """Route standard library logging to a rotating file."""
    log_file = Path(log_path)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(level.upper())
    root_logger.handlers = []

    file_handler = logging.handlers.RotatingFileHandler(
        filename=log_file,
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    file_handler.setLevel(level.upper())
    file_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(file_handler)

    logging.getLogger("asyncio").setLevel(logging.WARNING)


def setup_structlog() -> None:
    """Configure structlog on top of the stdlib handlers."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.KeyValueRenderer(key_order=["timestamp", "level", "event"]),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(log_path: str = LOG_PATH, level: str = LOG_LEVEL) -> None:
    """Configure all logging for the application."""
    setup_stdlib_logging(log_path, level)
    setup_structlog()
