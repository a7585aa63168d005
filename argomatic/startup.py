"""
Process entry point for argomatic tools.

:class:`StartupSequencer` is the single boundary where faults are caught,
classified and reported. :func:`run` wraps it for ``__main__`` blocks::

    if __name__ == "__main__":
        run(MyTool())
"""

from __future__ import annotations

import sys
from typing import Optional, Sequence

import structlog

from .config import load_settings
from .details import log_header_information
from .environment import ProcessEnvironment
from .program import CommandLineProgram
from .protocol import Fault, Help, ResolutionProtocol, Session, State, Success
from .reporting import EXIT_SUCCESS, FailureReporter, classify

__all__ = ["StartupSequencer", "run"]

log = structlog.get_logger(__name__)


class StartupSequencer:
    """Prepare the process, resolve arguments, dispatch and report.

    Args:
        environment: Owner of locale and root logging. Built from the loaded
            settings on the first :meth:`start` when omitted.
        reporter: Failure reporter. Built from the loaded settings on the
            first :meth:`start` when omitted.

    Attributes:
        result: Exit status of the last :meth:`start`, ``None`` before.
        session: Resolution session of the last :meth:`start`.
    """

    def __init__(
        self,
        environment: Optional[ProcessEnvironment] = None,
        reporter: Optional[FailureReporter] = None,
    ) -> None:
        self.environment = environment
        self.reporter = reporter
        self.result: Optional[int] = None
        self.session: Optional[Session] = None

    def _prepare(self) -> None:
        if self.environment is None or self.reporter is None:
            settings = load_settings()
            self.environment = self.environment or ProcessEnvironment(settings)
            self.reporter = self.reporter or FailureReporter(settings)
        self.environment.prepare()

    def _report_exception(self, exc: Exception, version: str) -> int:
        kind, error = classify(exc)
        reporter = self.reporter or FailureReporter()
        return reporter.report(Fault(kind, str(error), error), version)

    def start(self, program: CommandLineProgram, argv: Sequence[str]) -> int:
        """Run *program* with *argv* and return the exit status.

        Never raises for faults while loading settings, preparing the
        process, resolving or inside ``execute()``; those are reported and
        turned into :data:`~argomatic.reporting.EXIT_FAILURE`.
        """
        argv = list(argv)
        version = program.get_application_details().version
        try:
            self._prepare()
        except Exception as exc:  # settings or locale; reported below
            self.result = self._report_exception(exc, version)
            return self.result

        protocol = ResolutionProtocol(program, on_loaded=self.environment.apply_logging)
        resolution = protocol.resolve(argv)
        self.session = protocol.session

        if isinstance(resolution, Help):
            self.result = self.reporter.report_help(resolution.text)
            return self.result
        if isinstance(resolution, Fault):
            self.result = self.reporter.report(resolution, version)
            return self.result

        try:
            self.result = self._dispatch(resolution, argv)
        except Exception as exc:  # reported below, never re-raised
            self.result = self._report_exception(exc, version)
        finally:
            self.environment.release_sinks()
        return self.result

    def _dispatch(self, resolution: Success, argv: list[str]) -> int:
        program = resolution.program
        if program.quiet_output_mode:
            self.environment.suppress_console()
        if program.log_to_file is not None:
            self.environment.add_file_sink(program.log_to_file)

        log_header_information(program.get_application_details(), argv)
        resolution.session.advance(State.DISPATCHED)

        code = program.execute()
        log.debug("execute finished", result=code)
        return EXIT_SUCCESS if code is None else int(code)


def run(program: CommandLineProgram, argv: Optional[Sequence[str]] = None) -> None:
    """Start *program* and exit the interpreter with its status."""
    sys.exit(StartupSequencer().start(program, sys.argv[1:] if argv is None else argv))
