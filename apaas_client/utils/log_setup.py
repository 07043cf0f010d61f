"""
Logging helpers: the client's level names and an optional rich console handler.
"""

import logging
from enum import IntEnum
from typing import Union

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "apaas_client"

TRACE = 5
logging.addLevelName(TRACE, "TRACE")


class LoggerLevel(IntEnum):
    """Verbosity levels, from least to most verbose."""

    fatal = 0
    error = 1
    warn = 2
    info = 3
    debug = 4
    trace = 5


_LEVEL_MAP = {
    LoggerLevel.fatal: logging.CRITICAL,
    LoggerLevel.error: logging.ERROR,
    LoggerLevel.warn: logging.WARNING,
    LoggerLevel.info: logging.INFO,
    LoggerLevel.debug: logging.DEBUG,
    LoggerLevel.trace: TRACE,
}


def to_logging_level(level: Union[LoggerLevel, int, str]) -> int:
    """
    Translates a LoggerLevel, its integer value, or a level name such as
    "debug" into a standard logging level.
    """
    if isinstance(level, str):
        try:
            return _LEVEL_MAP[LoggerLevel[level.lower()]]
        except KeyError:
            raise ValueError(f"Unknown log level: {level}") from None
    try:
        return _LEVEL_MAP[LoggerLevel(level)]
    except ValueError:
        raise ValueError(f"Unknown log level: {level}") from None


def set_level(level: Union[LoggerLevel, int, str]) -> None:
    """Sets the verbosity of every logger in the package."""
    logging.getLogger(LOGGER_NAME).setLevel(to_logging_level(level))


def setup_logging(
    level: Union[LoggerLevel, int, str] = LoggerLevel.info,
    console: Console | None = None,
) -> logging.Logger:
    """
    Attaches a RichHandler to the package logger.

    Library code never calls this; applications and scripts opt in.
    Calling it again replaces the handler instead of stacking a second one.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        rich_tracebacks=True,
        show_path=False,
        markup=True,
        log_time_format="[%X]",
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(to_logging_level(level))
    return logger
