"""Logging configuration for Resume Builder.

Module loggers come from `logging.getLogger(__name__)` and are children of
the `resume_builder` logger configured here. Embedding and storage
libraries log every request, so they are held at WARNING unless the
application runs at DEBUG.
"""

import logging
import sys

LOGGER_NAME = "resume_builder"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Libraries that log per embedding request or per SQL statement
NOISY_LOGGERS = ("LiteLLM", "httpx", "httpcore", "aiosqlite")

_configured = False


def _quiet_libraries(log_level: int) -> None:
    library_level = log_level if log_level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)


def configure_logging(
    level: str | None = None,
    format_string: str = LOG_FORMAT,
    date_format: str = DATE_FORMAT,
) -> logging.Logger:
    """Configure and return the `resume_builder` logger.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               Defaults to INFO if not specified.
        format_string: Format string for log messages.
        date_format: Format string for timestamps.

    Returns:
        The package logger. Calling again only updates the level.
    """
    global _configured

    logger = logging.getLogger(LOGGER_NAME)

    log_level = getattr(logging, (level or "INFO").upper(), logging.INFO)
    logger.setLevel(log_level)
    _quiet_libraries(log_level)

    if _configured:
        for handler in logger.handlers:
            handler.setLevel(log_level)
        return logger

    logger.handlers.clear()

    # stdout carries CLI output (JSON requirements, written paths)
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(format_string, datefmt=date_format))
    logger.addHandler(console_handler)
    logger.propagate = False

    _configured = True
    return logger


def reset_logging() -> None:
    """Reset logging configuration (useful for testing)."""
    global _configured

    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.NOTSET)

    _configured = False
