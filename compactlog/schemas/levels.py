"""
Severity Levels
===============

Bounded Context: Event Classification

Ordered severity levels for log events, plus the mapping to Python's
logging module levels.

Design:
- IntEnum (levels compare by importance)
- display_name is the exact name written to the `_l` field
- VERBOSE is registered with the logging module as level 5
"""

import logging
from enum import IntEnum


VERBOSE_LOGGING_LEVEL = 5
logging.addLevelName(VERBOSE_LOGGING_LEVEL, "VERBOSE")


class LogEventLevel(IntEnum):
    """
    Severity of a log event, from least to most important.

    Example:
        >>> LogEventLevel.WARNING > LogEventLevel.INFORMATION
        True
        >>> LogEventLevel.WARNING.display_name
        'Warning'
    """

    VERBOSE = 0
    DEBUG = 1
    INFORMATION = 2
    WARNING = 3
    ERROR = 4
    FATAL = 5

    @property
    def display_name(self) -> str:
        """Level name as written in encoded output (e.g. "Warning")."""
        return self.name.capitalize()

    def to_logging_level(self) -> int:
        """Equivalent level number in the logging module."""
        return _TO_LOGGING[self]

    @classmethod
    def from_logging_level(cls, levelno: int) -> 'LogEventLevel':
        """
        Map a logging module level number to a LogEventLevel.

        Numbers between two known levels round down; anything below DEBUG
        is VERBOSE.
        """
        result = cls.VERBOSE
        for level, number in _TO_LOGGING.items():
            if levelno >= number:
                result = level
        return result

    @classmethod
    def from_name(cls, name: str) -> 'LogEventLevel':
        """
        Parse a level name.

        Accepts LogEventLevel names ("Warning", "INFORMATION") and the
        logging module names ("INFO", "CRITICAL", "WARN").

        Raises:
            ValueError: If the name is not a known level
        """
        key = name.strip().upper()
        if key in cls.__members__:
            return cls[key]
        if key in _ALIASES:
            return _ALIASES[key]
        raise ValueError(
            f"Unknown level: {name!r}. "
            f"Must be one of {[level.display_name for level in cls]}"
        )


_TO_LOGGING = {
    LogEventLevel.VERBOSE: VERBOSE_LOGGING_LEVEL,
    LogEventLevel.DEBUG: logging.DEBUG,
    LogEventLevel.INFORMATION: logging.INFO,
    LogEventLevel.WARNING: logging.WARNING,
    LogEventLevel.ERROR: logging.ERROR,
    LogEventLevel.FATAL: logging.CRITICAL,
}

_ALIASES = {
    "TRACE": LogEventLevel.VERBOSE,
    "INFO": LogEventLevel.INFORMATION,
    "WARN": LogEventLevel.WARNING,
    "CRITICAL": LogEventLevel.FATAL,
}
