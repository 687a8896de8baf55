"""
Logging utilities for covdist.

Module loggers are children of the ``covdist`` package logger, so a single
``setup_logger()`` call configures output for the whole library.
"""

import logging
import sys
from typing import Optional


# Default format
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

ROOT_LOGGER_NAME = "covdist"

# Module-level logger cache
_loggers: dict = {}


def setup_logger(
    name: str = ROOT_LOGGER_NAME,
    level: str = "WARNING",
    format_string: Optional[str] = None,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Set up and configure a logger.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_string: Custom format string
        log_file: Optional file path for logging

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers
    logger.handlers.clear()

    formatter = logging.Formatter(
        format_string or DEFAULT_FORMAT,
        datefmt=DEFAULT_DATE_FORMAT,
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    _loggers[name] = logger

    return logger


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """
    Get a logger by name.

    Names inside the ``covdist`` namespace return a plain child logger
    that propagates to the package logger; other names get a configured
    logger of their own.

    Args:
        name: Logger name (usually ``__name__``)

    Returns:
        Logger instance
    """
    if name in _loggers:
        return _loggers[name]

    if name.startswith(ROOT_LOGGER_NAME + "."):
        logger = logging.getLogger(name)
        _loggers[name] = logger
        return logger

    return setup_logger(name)


def set_level(level: str, name: str = ROOT_LOGGER_NAME) -> None:
    """Change the level of an already configured logger."""
    get_logger(name).setLevel(getattr(logging, level.upper()))


class LogContext:
    """Context manager for temporary log level changes."""

    def __init__(self, logger: logging.Logger, level: str):
        self.logger = logger
        self.new_level = getattr(logging, level.upper())
        self.old_level = logger.level

    def __enter__(self):
        self.logger.setLevel(self.new_level)
        return self.logger

    def __exit__(self, *args):
        self.logger.setLevel(self.old_level)
