"""
Centralized logging configuration for debup.

Messages are printed the way the update front-end has always printed them:
a colored ``::`` marker followed by the message. Informational and warning
messages go to stdout, errors go to stderr.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional


# Global logger instance
_logger: Optional[logging.Logger] = None

LOGGER_NAME = "debup"


class _MaxLevelFilter(logging.Filter):
    """Pass only records strictly below a level."""

    def __init__(self, max_level: int):
        super().__init__()
        self.max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.max_level


def color_enabled(stream) -> bool:
    """Whether ANSI colors should be written to a stream."""
    if os.environ.get("DEBUP_COLOR", "1") == "0":
        return False
    return hasattr(stream, "isatty") and stream.isatty()


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    verbose: bool = False,
    quiet: bool = False,
    propagate: bool = False,
) -> logging.Logger:
    """
    Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path for log output
        verbose: Enable verbose (DEBUG) output
        quiet: Suppress console output (file only)
        propagate: Allow log propagation (useful for testing)

    Returns:
        Configured logger instance
    """
    global _logger

    if verbose:
        effective_level = "DEBUG"
    elif quiet:
        effective_level = "WARNING"
    else:
        effective_level = level.upper()

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, effective_level))
    logger.handlers.clear()

    if not quiet:
        # info/warn on stdout, err on stderr
        stdout_handler = logging.StreamHandler(sys.stdout)
        stdout_handler.setLevel(getattr(logging, effective_level))
        stdout_handler.addFilter(_MaxLevelFilter(logging.ERROR))
        stdout_handler.setFormatter(
            ColoredFormatter("%(marker)s %(message)s", use_colors=color_enabled(sys.stdout))
        )
        logger.addHandler(stdout_handler)

        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setLevel(logging.ERROR)
        stderr_handler.setFormatter(
            ColoredFormatter("%(marker)s %(message)s", use_colors=color_enabled(sys.stderr))
        )
        logger.addHandler(stderr_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)  # Always log everything to file

        file_formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

    logger.propagate = propagate

    _logger = logger
    return logger


def setup_logging_from_env() -> logging.Logger:
    """Configure logging from DEBUP_DEBUG and DEBUP_LOG_FILE."""
    return setup_logging(
        verbose=os.environ.get("DEBUP_DEBUG", "0") == "1",
        log_file=os.environ.get("DEBUP_LOG_FILE") or None,
    )


def get_logger() -> logging.Logger:
    """
    Get the configured logger instance.

    If logging hasn't been set up, initializes with defaults.
    """
    global _logger
    if _logger is None:
        _logger = setup_logging()
    return _logger


class ColoredFormatter(logging.Formatter):
    """
    Formatter that renders a ``::`` marker colored by log level.
    """

    COLORS = {
        'DEBUG': '\033[1;36m',
        'INFO': '\033[1;34m',
        'WARNING': '\033[1;33m',
        'ERROR': '\033[1;31m',
        'CRITICAL': '\033[1;31m',
    }
    MESSAGE_COLOR = '\033[1;37m'
    RESET = '\033[0m'

    def __init__(self, fmt: str, use_colors: bool = True):
        super().__init__(fmt)
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        if self.use_colors:
            color = self.COLORS.get(record.levelname, '')
            record.marker = f"{color}::{self.MESSAGE_COLOR}"
            return super().format(record) + self.RESET
        record.marker = "::"
        return super().format(record)
