"""
Logging configuration for the application.

Sets up structured logging with a consistent format.
Every record carries the trace id of the request that emitted it.
Logging must not change program behavior.
Never logs sensitive data (credentials, cookies, raw bodies).
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from app.shared.trace_context import get_trace_id

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(trace_id)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5


class TraceIdFilter(logging.Filter):
    """Attach the current trace id (or ``-``) to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.trace_id = get_trace_id() or "-"
        return True


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Configure structured logging for the application.

    Args:
        level: The log level string (DEBUG, INFO, WARNING, ERROR).
        log_file: Optional path; when set, records are also written to a
            size-rotated file.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(
            RotatingFileHandler(
                log_file,
                maxBytes=LOG_FILE_MAX_BYTES,
                backupCount=LOG_FILE_BACKUPS,
                encoding="utf-8",
            )
        )

    trace_filter = TraceIdFilter()
    for handler in handlers:
        handler.addFilter(trace_filter)

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        handlers=handlers,
        force=True,
    )

    # Suppress noisy third-party loggers
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.error").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
