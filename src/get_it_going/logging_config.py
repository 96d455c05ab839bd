# get_it_going/logging_config.py
"""
Logging setup for the launcher.

Log lines go to stderr as `[<identity> <LEVEL>]: <message>` so they can't
be mistaken for the wrapped tool's own output. The level comes from the
GIG_LOG environment variable (default: warnings and errors only).
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TextIO

LOG_ENV_VAR = "GIG_LOG"
PACKAGE_LOGGER = "get_it_going"
DEFAULT_LEVEL = logging.WARNING

# "off" is above CRITICAL so nothing gets through
_LEVELS = {
    "off": logging.CRITICAL + 10,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": logging.DEBUG,
}

_COLOURS = {
    logging.ERROR: "\x1b[31m",
    logging.CRITICAL: "\x1b[31m",
    logging.WARNING: "\x1b[33m",
    logging.DEBUG: "\x1b[2m",
}
_RESET = "\x1b[0m"

_handler: logging.Handler | None = None


def parse_level(value: str | None) -> int | None:
    """Map a GIG_LOG value to a logging level; None if unset or unrecognised."""
    if not value:
        return None
    return _LEVELS.get(value.strip().lower())


class IdentityFormatter(logging.Formatter):
    """Formats records as `[<identity> <LEVEL>]: <message>`, optionally coloured."""

    def __init__(self, identity: str, colour: bool = False):
        super().__init__()
        self.identity = identity
        self.colour = colour

    def format(self, record: logging.LogRecord) -> str:
        level = record.levelname
        if self.colour and record.levelno in _COLOURS:
            level = f"{_COLOURS[record.levelno]}{level}{_RESET}"
        message = record.getMessage()
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return f"[{self.identity} {level}]: {message}"


def setup_logging(
    identity: str,
    level: int | str | None = None,
    stream: TextIO | None = None,
) -> logging.Logger:
    """
    Configure the package logger. Safe to call more than once.

    Args:
        identity: Shown in every log line
        level: Explicit level (name or number); defaults to GIG_LOG, then WARNING
        stream: Where to write (default: sys.stderr)

    Returns:
        The configured package logger
    """
    global _handler

    env_value = os.environ.get(LOG_ENV_VAR)
    bad_env_value = False
    if level is None:
        resolved = parse_level(env_value)
        bad_env_value = env_value is not None and resolved is None
        level = resolved if resolved is not None else DEFAULT_LEVEL
    elif isinstance(level, str):
        level = parse_level(level) or DEFAULT_LEVEL

    stream = stream or sys.stderr
    colour = hasattr(stream, "isatty") and stream.isatty()

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if _handler is not None:
        package_logger.removeHandler(_handler)

    _handler = logging.StreamHandler(stream)
    _handler.setFormatter(IdentityFormatter(identity, colour=colour))
    package_logger.addHandler(_handler)
    package_logger.setLevel(level)
    package_logger.propagate = False

    if bad_env_value:
        package_logger.warning(f"ignoring unrecognised {LOG_ENV_VAR} value {env_value!r}")
    return package_logger


def disable_logging() -> None:
    """Remove the handler installed by setup_logging() (useful in tests)."""
    global _handler

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if _handler is not None:
        package_logger.removeHandler(_handler)
        _handler = None
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)
