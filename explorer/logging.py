"""
Logging configuration for car-explorer.

Two destinations:

File:
  - One log file per session under <data_dir>/logs/
  - Always DEBUG level, full detail
  - Format: "timestamp | level | name | tag | message"

Console:
  - DEBUG if --verbose, WARNING+ otherwise
  - Config console_format options:
    - "simple": (default) bare messages for DEBUG/INFO, [LEVEL] prefix for WARNING+
    - "full":   same structured format as the file handler
    - "tagged": only records tagged with a key in VISIBLE_TAGS
    - "clean":  no console output at all (file logging still active)

Tag a record with ``extra=tagged("load")`` to make it visible in "tagged" mode.
"""

import logging
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Optional

from config import get_data_dir

LOGGER_NAME = "car-explorer"

# Log directory
LOG_DIR = get_data_dir() / "logs"

# Tags shown by the "tagged" console format.
VISIBLE_TAGS = frozenset({
    "load",       # dataset loaded: columns and sample record
    "selection",  # record selected / cleared
    "export",     # figure written to disk
    "error",      # log_error(): real errors with context/stack traces
})


def tagged(tag: str) -> dict:
    """Return ``extra`` dict for logger calls: ``logger.info("...", extra=tagged("x"))``."""
    return {"log_tag": tag}


_current_log_file: Optional[Path] = None


class _TagFilter(logging.Filter):
    """Makes sure every record has a ``log_tag`` attribute for the formatter."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "log_tag"):
            record.log_tag = ""
        return True


class _ConsoleFormatter(logging.Formatter):
    """Console formatter: shows [LEVEL] prefix only for WARNING and above."""

    def format(self, record: logging.LogRecord) -> str:
        if record.levelno >= logging.WARNING:
            return f"  [{record.levelname}] {record.getMessage()}"
        return f"  {record.getMessage()}"


class _VisibleTagFilter(logging.Filter):
    """Pass only records tagged with a key in VISIBLE_TAGS."""

    def filter(self, record: logging.LogRecord) -> bool:
        tag = getattr(record, "log_tag", "")
        return tag in VISIBLE_TAGS


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Configure logging for the explorer.

    Args:
        verbose: If True, show DEBUG level on console; otherwise WARNING+ only

    Returns:
        Configured logger instance
    """
    global _current_log_file
    LOG_DIR.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)  # Capture everything, filter at handler level

    # Clear existing handlers (in case of re-init)
    logger.handlers.clear()
    for f in list(logger.filters):
        if isinstance(f, _TagFilter):
            logger.removeFilter(f)
    logger.addFilter(_TagFilter())

    # File handler - one log file per session
    session_timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = LOG_DIR / f"explorer_{session_timestamp}.log"
    _current_log_file = log_file
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_format = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s | %(log_tag)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    file_handler.setFormatter(file_format)
    logger.addHandler(file_handler)

    import config as _config
    console_format = _config.get("console_format", "simple")

    if console_format != "clean":
        console_handler = logging.StreamHandler(sys.stderr)

        if console_format == "tagged":
            console_handler.setLevel(logging.DEBUG)
            console_handler.addFilter(_VisibleTagFilter())
            console_handler.setFormatter(_ConsoleFormatter())
        elif console_format == "full":
            console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
            console_handler.setFormatter(file_format)
        else:
            # "simple" (default)
            console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
            console_handler.setFormatter(_ConsoleFormatter())

        logger.addHandler(console_handler)

    logger.info("=" * 60)
    logger.info(f"Session started at {datetime.now().isoformat()}")
    logger.info(f"Log file: {log_file}")

    return logger


def get_logger() -> logging.Logger:
    """Get the explorer logger instance (configured with defaults on first use)."""
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        return setup_logging(verbose=False)
    return logger


def get_current_log_file() -> Optional[Path]:
    return _current_log_file


def log_error(
    message: str,
    exc: Optional[Exception] = None,
    context: Optional[dict] = None,
) -> None:
    """Log an error with full details including stack trace.

    Emits exactly one ERROR record so each failure is reported once.

    Args:
        message: Error description
        exc: Optional exception to include details from
        context: Optional dict of additional context (path, attribute, etc.)
    """
    logger = get_logger()

    lines = [message]

    if context:
        lines.append("Context:")
        for key, value in context.items():
            lines.append(f"  {key}: {value}")

    if exc:
        lines.append(f"Exception type: {type(exc).__name__}")
        lines.append(f"Exception message: {exc}")
        if exc.__cause__ is not None:
            cause = exc.__cause__
            lines.append(f"Caused by: {type(cause).__name__}: {cause}")
        tb = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        lines.append("Stack trace:")
        lines.append(tb)

    logger.error("\n".join(lines), extra=tagged("error"))
