"""
Owner of the process-wide state touched during startup.

Two pieces of global state are involved: the numeric locale and the root
logger. :class:`ProcessEnvironment` is the only object in argomatic that
changes either, and it does so in a fixed order:

1. :meth:`ProcessEnvironment.prepare` before any parsing: force the numeric
   locale and install a console handler at INFO with the compact pattern.
2. :meth:`ProcessEnvironment.apply_logging` after every load of the program
   object: level and pattern derived from the program's logging options.
3. :meth:`ProcessEnvironment.add_file_sink` / :meth:`suppress_console` once
   resolution succeeded.
4. :meth:`ProcessEnvironment.release_sinks` after dispatch.
"""

from __future__ import annotations

import locale
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Optional

import structlog

from .config import BootstrapSettings
from .errors import InternalError, SinkOpenError
from .utils.logging import (
    DEBUG_PATTERN,
    PATTERN,
    ConsoleHandler,
    FileSinkHandler,
    configure_structlog,
    make_formatter,
    resolve_level,
)

if TYPE_CHECKING:  # pragma: no cover
    from .program import CommandLineProgram

__all__ = ["ProcessEnvironment"]

log = structlog.get_logger(__name__)


class ProcessEnvironment:
    """Locale and root-logging state for one process.

    Args:
        settings: Bootstrap settings; the defaults are used when omitted.

    Attributes:
        locale: Locale name applied to ``LC_NUMERIC`` by :meth:`prepare`.
        level: Current root logger level.
        pattern: Current message pattern of every argomatic handler.
        console_handler: Console handler, ``None`` once suppressed.
        file_sinks: File handlers added by :meth:`add_file_sink`.
    """

    def __init__(self, settings: Optional[BootstrapSettings] = None) -> None:
        self.settings = settings or BootstrapSettings()
        self.locale: Optional[str] = None
        self.level: int = logging.INFO
        self.pattern: str = PATTERN
        self.console_handler: Optional[ConsoleHandler] = None
        self.file_sinks: list[FileSinkHandler] = []

    @property
    def root(self) -> logging.Logger:
        return logging.getLogger()

    # ------------------------------------------------------------------ #
    # Before parsing                                                     #
    # ------------------------------------------------------------------ #
    def prepare(self) -> None:
        """Force the numeric locale and install baseline console logging."""
        self.force_locale()

        for handler in list(self.root.handlers):
            if isinstance(handler, ConsoleHandler):
                self.root.removeHandler(handler)
        self.console_handler = ConsoleHandler()
        self.root.addHandler(self.console_handler)
        self.set_pattern(PATTERN)
        self.set_level(logging.INFO)
        configure_structlog()

    def force_locale(self) -> str:
        """Apply the first accepted locale candidate to ``LC_NUMERIC``.

        Raises:
            InternalError: When the platform accepts none of the candidates.
        """
        for candidate in self.settings.locale_candidates:
            try:
                locale.setlocale(locale.LC_NUMERIC, candidate)
            except locale.Error:
                continue
            self.locale = candidate
            return candidate
        raise InternalError(
            "None of the configured locales is available: "
            + ", ".join(self.settings.locale_candidates)
        )

    # ------------------------------------------------------------------ #
    # Logging service                                                    #
    # ------------------------------------------------------------------ #
    def _handlers(self) -> list[logging.Handler]:
        handlers: list[logging.Handler] = list(self.file_sinks)
        if self.console_handler is not None:
            handlers.insert(0, self.console_handler)
        return handlers

    def set_level(self, level: int) -> None:
        self.level = level
        self.root.setLevel(level)

    def set_pattern(self, pattern: str) -> None:
        self.pattern = pattern
        formatter = make_formatter(pattern)
        for handler in self._handlers():
            handler.setFormatter(formatter)

    def apply_logging(self, program: "CommandLineProgram") -> None:
        """Derive level and pattern from *program*'s logging options.

        The verbose pattern is chosen when debug mode is on or the level is
        DEBUG.

        Raises:
            ArgumentException: When ``logging_level`` is not a known level.
        """
        level = resolve_level(program.logging_level)
        self.set_level(level)
        verbose = bool(program.debug_mode) or level == logging.DEBUG
        self.set_pattern(DEBUG_PATTERN if verbose else PATTERN)

    def add_file_sink(self, path: Path) -> FileSinkHandler:
        """Append log output to *path* in addition to the console.

        Raises:
            SinkOpenError: When the file cannot be opened.
        """
        try:
            handler = FileSinkHandler(Path(path), self.pattern)
        except OSError as exc:
            raise SinkOpenError(
                f"Unable to re-route log output to {path} make sure the destination exists"
            ) from exc
        self.root.addHandler(handler)
        self.file_sinks.append(handler)
        log.debug("file sink attached", path=str(path))
        return handler

    def suppress_console(self) -> None:
        """Detach the console handler; file sinks keep receiving records."""
        if self.console_handler is None:
            return
        self.root.removeHandler(self.console_handler)
        self.console_handler.close()
        self.console_handler = None

    def release_sinks(self) -> None:
        """Detach and close every file sink."""
        for handler in self.file_sinks:
            self.root.removeHandler(handler)
            handler.close()
        self.file_sinks.clear()
