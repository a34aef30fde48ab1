"""Verbosity-gated logging for critpath.

The CLI's ``-v`` flag picks one of four verbosity levels. Engine code logs
through semantic methods so that each message appears at the right level:

- 0: errors and warnings only (negative float, failed checks)
- 1: ``changes()`` - dates assigned by auto-scheduling, schedule summaries
- 2: ``checks()`` - input validation, per-dependency window checks
- 3: ``debug()`` - every forward/backward pass step
"""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

CHANGES_LEVEL = 25  # Between INFO (20) and WARNING (30)
CHECKS_LEVEL = 15  # Between DEBUG (10) and INFO (20)

logging.addLevelName(CHANGES_LEVEL, "CHANGES")
logging.addLevelName(CHECKS_LEVEL, "CHECKS")

VERBOSITY_SILENT = 0
VERBOSITY_CHANGES = 1
VERBOSITY_CHECKS = 2
VERBOSITY_DEBUG = 3

# Indexed by verbosity
_VERBOSITY_LEVELS = (logging.WARNING, CHANGES_LEVEL, CHECKS_LEVEL, logging.DEBUG)

LOGGER_NAME = "critpath"


class CritpathLogger(logging.Logger):
    """Logger with one method per verbosity level."""

    def changes(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log a date change or summary (verbosity 1)."""
        if self.isEnabledFor(CHANGES_LEVEL):
            self._log(CHANGES_LEVEL, msg, args, **kwargs)

    def checks(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log a validation check (verbosity 2)."""
        if self.isEnabledFor(CHECKS_LEVEL):
            self._log(CHECKS_LEVEL, msg, args, **kwargs)


class _PlainFormatter(logging.Formatter):
    """Bare messages, with a lowercase level prefix for warnings and errors."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if record.levelno >= logging.WARNING:
            return f"{record.levelname.lower()}: {message}"
        return message


def get_logger() -> CritpathLogger:
    """Return the shared critpath logger.

    Configure it with setup_logger(); until then only warnings and errors
    reach the root handlers.
    """
    logging.setLoggerClass(CritpathLogger)
    logger = logging.getLogger(LOGGER_NAME)
    assert isinstance(logger, CritpathLogger)
    return logger


def setup_logger(verbosity: int, stream: TextIO | None = None) -> None:
    """Send critpath log output to a stream at the given verbosity.

    Safe to call repeatedly; each call replaces the previous handler.

    Args:
        verbosity: 0-3, values outside the range are clamped
        stream: Output stream (defaults to sys.stderr)
    """
    verbosity = min(max(verbosity, VERBOSITY_SILENT), VERBOSITY_DEBUG)
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(_VERBOSITY_LEVELS[verbosity])

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(_PlainFormatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False


def reset_logger() -> None:
    """Drop handlers and return to the silent level."""
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(_VERBOSITY_LEVELS[VERBOSITY_SILENT])
    logger.propagate = True


def debug_enabled() -> bool:
    """Check whether per-step pass details are being logged (verbosity 3)."""
    return get_logger().isEnabledFor(logging.DEBUG)
