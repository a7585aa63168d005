"""Exception taxonomy shared by the argument-resolution layer.

Two families matter to the failure reporter:

* :class:`UserError` and its subclasses mark faults whose message is meant
  for the person typing the command line (bad flags, bad values, bad input
  files). They are reported without a stack trace.
* Everything else, including :class:`DuplicateSourceError` and
  :class:`SinkOpenError`, is an internal fault and is reported with one.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:  # pragma: no cover
    from .store import Violation

__all__ = [
    "ArgomaticError",
    "UserError",
    "ArgumentException",
    "ArgumentConversionError",
    "DuplicateSourceError",
    "DuplicateArgumentError",
    "SinkOpenError",
    "InternalError",
]


class ArgomaticError(Exception):
    """Base class for every error raised by argomatic."""


class UserError(ArgomaticError):
    """Fault caused by user input; the message is shown to the user verbatim."""


class ArgumentException(UserError):
    """Raised when the command line is malformed.

    Attributes:
        violations: Validation violations that triggered the error. Empty when
            the error was raised outside of validation (e.g. an unknown
            logging level).
    """

    def __init__(self, message: str, violations: Iterable["Violation"] = ()) -> None:
        super().__init__(message)
        self.violations: tuple["Violation", ...] = tuple(violations)

    @classmethod
    def from_violations(cls, violations: Iterable["Violation"]) -> "ArgumentException":
        """Build an exception whose message lists every violation."""
        found = tuple(violations)
        lines = [v.message for v in found]
        return cls("Invalid command line: " + "\n".join(lines), found)


class ArgumentConversionError(ArgumentException):
    """A supplied value could not be coerced to the declared field type."""

    def __init__(self, full_name: str, value: str, type_name: str, reason: str = "") -> None:
        message = (
            f"Argument '--{full_name}' has value '{value}' which cannot be "
            f"converted to {type_name}"
        )
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.full_name = full_name
        self.value = value


class DuplicateSourceError(ArgomaticError):
    """Two argument sources were registered under the same name."""


class DuplicateArgumentError(DuplicateSourceError):
    """Two declarations share a full or short name within one session."""


class SinkOpenError(ArgomaticError):
    """The requested log file could not be opened."""


class InternalError(ArgomaticError):
    """Programming error inside argomatic or a tool built on it."""
