"""
Logging building blocks shared by :mod:`argomatic.environment`.

* The level vocabulary accepted on the command line (``DEBUG`` … ``OFF``).
* The compact and the verbose multi-line message patterns.
* Handler classes that mark the handlers argomatic installs on the root
  logger, so they can be found and removed again without touching handlers
  somebody else attached.
* The structlog configuration that routes ``structlog.get_logger()`` calls
  through those same stdlib handlers.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import structlog
from structlog.dev import ConsoleRenderer as StructlogConsoleRenderer
from structlog.stdlib import LoggerFactory

from ..errors import ArgumentException

__all__ = [
    "LOGGING_LEVELS",
    "OFF",
    "PATTERN",
    "DEBUG_PATTERN",
    "resolve_level",
    "make_formatter",
    "ConsoleHandler",
    "FileSinkHandler",
    "configure_structlog",
]

# Above CRITICAL so that nothing passes.
OFF = logging.CRITICAL + 10

LOGGING_LEVELS: dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "FATAL": logging.CRITICAL,
    "OFF": OFF,
}

PATTERN = "%(levelname)-5s %(asctime)s,%(msecs)03d %(name)s - %(message)s"
DEBUG_PATTERN = (
    "\n[level] %(levelname)s"
    "\n[date]\t\t %(asctime)s,%(msecs)03d"
    "\n[class]\t\t %(name)s"
    "\n[location]\t %(pathname)s:%(funcName)s"
    "\n[line number]\t %(lineno)d"
    "\n[message]\t %(message)s"
)

_DATE_FORMATS = {
    PATTERN: "%H:%M:%S",
    DEBUG_PATTERN: "%d %b %Y %H:%M:%S",
}


def resolve_level(name: str) -> int:
    """Map a command-line level name to a stdlib level, case-insensitively.

    Raises:
        ArgumentException: When *name* is not one of :data:`LOGGING_LEVELS`.
    """
    try:
        return LOGGING_LEVELS[str(name).strip().upper()]
    except KeyError:
        raise ArgumentException(
            f"Unable to match: {name} to a logging level, make sure it's a valid "
            f"level ({', '.join(LOGGING_LEVELS)})"
        ) from None


def make_formatter(pattern: str) -> logging.Formatter:
    return logging.Formatter(pattern, datefmt=_DATE_FORMATS.get(pattern))


# --------------------------------------------------------------------------- #
# Handlers                                                                    #
# --------------------------------------------------------------------------- #
class ConsoleHandler(logging.StreamHandler):
    """Stream handler bound to whatever ``sys.stderr`` is at emit time."""

    @property
    def stream(self):  # type: ignore[override]
        return sys.stderr

    @stream.setter
    def stream(self, value) -> None:
        pass


class FileSinkHandler(logging.FileHandler):
    """Append-mode file handler for ``--log_to_file``.

    The file is opened eagerly so that an unusable destination fails at
    startup rather than on the first record.
    """

    def __init__(self, path: Path, pattern: Optional[str] = None) -> None:
        super().__init__(path, mode="a", encoding="utf-8", delay=False)
        self.setFormatter(make_formatter(pattern or PATTERN))


# --------------------------------------------------------------------------- #
# structlog                                                                   #
# --------------------------------------------------------------------------- #
def configure_structlog() -> None:
    """Render structlog events as plain text and hand them to stdlib logging.

    Level filtering and the message pattern are left to the root logger and
    its handlers.
    """
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            StructlogConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        cache_logger_on_first_use=False,
    )
