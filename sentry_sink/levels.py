# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Severity levels and their mapping to Sentry severities."""

import logging
from enum import IntEnum


class Level(IntEnum):
    """Log severity, ordered by increasing severity."""

    DEBUG = -1
    INFO = 0
    WARNING = 1
    ERROR = 2
    DPANIC = 3
    PANIC = 4
    FATAL = 5


_ALIASES = {
    "WARN": Level.WARNING,
    "CRITICAL": Level.FATAL,
}

# Sentry severity vocabulary
_SENTRY_SEVERITY = {
    Level.DEBUG: "info",
    Level.INFO: "info",
    Level.WARNING: "warning",
    Level.ERROR: "error",
    Level.DPANIC: "fatal",
    Level.PANIC: "fatal",
    Level.FATAL: "fatal",
}

_STDLIB_LEVEL = {
    Level.DEBUG: logging.DEBUG,
    Level.INFO: logging.INFO,
    Level.WARNING: logging.WARNING,
    Level.ERROR: logging.ERROR,
    Level.DPANIC: logging.CRITICAL,
    Level.PANIC: logging.CRITICAL,
    Level.FATAL: logging.CRITICAL,
}


def parse_level(value: "str | int | Level") -> Level:
    """Convert a level name or number to a Level.

    Args:
        value: Level instance, integer value, or case-insensitive name
            (DEBUG, INFO, WARNING/WARN, ERROR, DPANIC, PANIC, FATAL/CRITICAL)

    Returns:
        The matching Level

    Raises:
        ValueError: If the value does not name a known level
    """
    if isinstance(value, Level):
        return value
    if isinstance(value, int):
        return Level(value)

    name = str(value).strip().upper()
    if name in _ALIASES:
        return _ALIASES[name]
    try:
        return Level[name]
    except KeyError:
        raise ValueError(
            f"Invalid log level: {value}. Must be one of {[lvl.name for lvl in Level]}"
        ) from None


def sentry_severity(level: int) -> str:
    """Map a level to the Sentry severity name.

    Unrecognized levels are treated as fatal.
    """
    return _SENTRY_SEVERITY.get(level, "fatal")


def stdlib_level(level: int) -> int:
    """Map a level to the equivalent stdlib ``logging`` level."""
    return _STDLIB_LEVEL.get(level, logging.CRITICAL)


class MinLevel:
    """Level gate admitting every level at or above a minimum."""

    def __init__(self, minimum: "str | int | Level"):
        self.minimum = parse_level(minimum)

    def enabled(self, level: int) -> bool:
        return level >= self.minimum

    def __repr__(self) -> str:
        return f"MinLevel({self.minimum.name})"
