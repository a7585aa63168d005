"""
Fault classification and the reports printed before the process exits.

Every failure ends up here, classified as either

* :attr:`FaultKind.USER` – :class:`~argomatic.errors.UserError` and its
  subclasses (including every ``ArgumentException``). Reported without a
  stack trace and with a hint to rerun with ``-h``.
* :attr:`FaultKind.INTERNAL` – anything else. Reported with a rich stack
  trace and a request to report the problem.

Both exit with :data:`EXIT_FAILURE`; help exits with :data:`EXIT_SUCCESS`.
"""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING, Optional

import click
from rich.console import Console
from rich.traceback import Traceback

from . import __version__
from .config import BootstrapSettings
from .errors import InternalError, UserError
from .utils.display import echo_error, echo_error_rule

if TYPE_CHECKING:  # pragma: no cover
    from .protocol import Fault

__all__ = [
    "EXIT_SUCCESS",
    "EXIT_FAILURE",
    "FaultKind",
    "classify",
    "FailureReporter",
]

EXIT_SUCCESS = 0
EXIT_FAILURE = 1

_NO_MESSAGE = "Code exception (see stack trace for error itself)"


class FaultKind(enum.Enum):
    USER = "user"
    INTERNAL = "internal"


def classify(exc: BaseException) -> tuple[FaultKind, BaseException]:
    """Return the fault kind of *exc* and the exception to report.

    A user fault must explain itself; one without a message is reported as
    an internal fault instead, chained to the original exception.
    """
    if isinstance(exc, UserError):
        if str(exc).strip():
            return FaultKind.USER, exc
        error = InternalError("UserError found with no message!")
        error.__cause__ = exc
        error.__traceback__ = exc.__traceback__
        return FaultKind.INTERNAL, error
    return FaultKind.INTERNAL, exc


class FailureReporter:
    """Print help, user-fault and internal-fault reports.

    Args:
        settings: Supplies the toolkit name, documentation references and the
            banner width.
    """

    def __init__(self, settings: Optional[BootstrapSettings] = None) -> None:
        self.settings = settings or BootstrapSettings()

    # ------------------------------------------------------------------ #
    def _rule(self) -> None:
        echo_error_rule(self.settings.rule_width)

    def _documentation_reference(self) -> None:
        if self.settings.documentation_url:
            echo_error(f"Visit the documentation at {self.settings.documentation_url}")
        if self.settings.forum_url:
            echo_error(
                f"Visit the forum to view answers to commonly asked questions "
                f"{self.settings.forum_url}"
            )

    # ------------------------------------------------------------------ #
    def report_help(self, text: str) -> int:
        click.echo(text, nl=not text.endswith("\n"))
        return EXIT_SUCCESS

    def report_user_error(
        self, message: str, help_text: Optional[str] = None, version: str = __version__
    ) -> int:
        """Print the tool help (when known) followed by the user-error banner."""
        toolkit = self.settings.toolkit_name
        if help_text:
            click.echo(help_text.rstrip("\n"), err=True)
        self._rule()
        echo_error(f"A USER ERROR has occurred (version {version}): ")
        echo_error(f"The invalid arguments or inputs must be corrected before {toolkit} can proceed")
        echo_error(f"Please do not post this error to the {toolkit} forum")
        echo_error()
        echo_error(
            "See the documentation (rerun with -h) for this tool to view allowable "
            "command-line arguments."
        )
        self._documentation_reference()
        echo_error()
        echo_error(f"MESSAGE: {message.strip()}")
        self._rule()
        return EXIT_FAILURE

    def report_internal_error(
        self,
        error: BaseException,
        message: Optional[str] = None,
        version: str = __version__,
    ) -> int:
        """Print the stack trace of *error* followed by the runtime-error banner."""
        toolkit = self.settings.toolkit_name
        self._rule()
        echo_error("stack trace ")
        Console(stderr=True).print(
            Traceback.from_exception(type(error), error, error.__traceback__)
        )
        self._rule()
        echo_error(f"A RUNTIME ERROR has occurred (version {version}):")
        echo_error()
        echo_error("Please check the documentation to see if this is a known problem")
        echo_error(f"If not, please post the error, with stack trace, to the {toolkit} forum")
        self._documentation_reference()
        text = message if message is not None else str(error)
        echo_error()
        echo_error(f"MESSAGE: {(text or _NO_MESSAGE).strip()}")
        self._rule()
        return EXIT_FAILURE

    def report(self, fault: "Fault", version: str = __version__) -> int:
        """Dispatch *fault* to the report matching its kind."""
        if fault.kind is FaultKind.USER:
            return self.report_user_error(fault.message, fault.help_text, version)
        return self.report_internal_error(fault.error, fault.message, version)
