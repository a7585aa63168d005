"""
Argument store: tokenizing, querying, validating and populating.

The store owns the registered :class:`~argomatic.declarations.ArgumentSource`
objects of one session and the most recent :class:`ParsedArguments`
snapshot. Tokenizing never fails and never validates:

* an option token must spell a declared option exactly (``--name``,
  ``-short`` or ``--name=value``); anything else is kept as unmatched, so
  ``-limit`` is never read as ``-l imit`` while plugin options are not yet
  registered,
* a flag spelled with an explicit value is recorded as rejected instead of
  aborting,
* absent options leave no trace in the snapshot, and
* every occurrence of an option is kept, so that validation can later tell
  "missing", "value missing" and "too many values" apart.

Validation and type conversion run as separate steps on the immutable
snapshot. The resolution protocol decides which validation rules apply.
argparse renders help and usage.
"""

from __future__ import annotations

import argparse
import enum
import logging
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Iterable, Mapping, Optional, Sequence

from .declarations import ArgumentDeclaration, ArgumentSource
from .descriptors import DEFAULT_DESCRIPTORS, ArgumentTypeDescriptor, convert
from .errors import (
    ArgumentConversionError,
    ArgumentException,
    DuplicateArgumentError,
    DuplicateSourceError,
    InternalError,
)

if TYPE_CHECKING:  # pragma: no cover
    from .details import ApplicationDetails

__all__ = [
    "ArgumentStore",
    "ParsedArguments",
    "ValidationRule",
    "Violation",
    "ValidationOutcome",
    "ALL_RULES",
]

log = logging.getLogger(__name__)

# Flags are stored with this raw value so the boolean descriptor can parse them.
_FLAG_VALUE = "true"

# Negative numbers are values, not options.
_NEGATIVE_NUMBER = re.compile(r"^-\d+$|^-\d*\.\d+$")


def _looks_like_option(token: str) -> bool:
    return (
        token.startswith("-")
        and token != "-"
        and " " not in token
        and not _NEGATIVE_NUMBER.match(token)
    )


# --------------------------------------------------------------------------- #
# Validation vocabulary                                                       #
# --------------------------------------------------------------------------- #
class ValidationRule(enum.Enum):
    """Individual checks that :meth:`ArgumentStore.validate` can run."""

    INVALID_ARGUMENT = "invalid_argument"
    MISSING_REQUIRED_ARGUMENT = "missing_required_argument"
    VALUE_MISSING = "value_missing"
    TOO_MANY_VALUES = "too_many_values"
    INVALID_ARGUMENT_VALUE = "invalid_argument_value"


ALL_RULES: frozenset[ValidationRule] = frozenset(ValidationRule)


@dataclass(frozen=True, slots=True)
class Violation:
    """A single broken rule.

    Attributes:
        rule: The rule that failed.
        name: Full name of the offending declaration, or the raw token for
            :attr:`ValidationRule.INVALID_ARGUMENT`.
        message: Human readable explanation.
    """

    rule: ValidationRule
    name: str
    message: str


@dataclass(frozen=True, slots=True)
class ValidationOutcome:
    """Result of one validation run against one snapshot."""

    violations: tuple[Violation, ...] = ()
    rules: frozenset[ValidationRule] = ALL_RULES
    generation: int = 0

    @property
    def ok(self) -> bool:
        return not self.violations

    def raise_for_violations(self) -> None:
        """Raise :class:`ArgumentException` when any violation was found."""
        if self.violations:
            raise ArgumentException.from_violations(self.violations)


# --------------------------------------------------------------------------- #
# Snapshot                                                                    #
# --------------------------------------------------------------------------- #
@dataclass(frozen=True, slots=True)
class ParsedArguments:
    """Immutable result of tokenizing one argument vector.

    Attributes:
        raw: The argument vector exactly as received.
        values: Full name → raw values, one entry per occurrence. ``None``
            marks an occurrence that carried no value.
        unmatched: Tokens no registered declaration recognised.
        rejected: ``(token, reason)`` pairs for tokens that name a
            declaration in a form it does not accept.
        generation: Increases by one for every parse within a store.
    """

    raw: tuple[str, ...]
    values: Mapping[str, tuple[Optional[str], ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    unmatched: tuple[str, ...] = ()
    rejected: tuple[tuple[str, str], ...] = ()
    generation: int = 0

    def __contains__(self, full_name: object) -> bool:
        return full_name in self.values

    def positions(self) -> list[tuple[int, str]]:
        """Return ``(index, token)`` pairs locating unmatched tokens in ``raw``."""
        found: list[tuple[int, str]] = []
        start = 0
        for token in self.unmatched:
            try:
                idx = self.raw.index(token, start)
            except ValueError:
                idx = -1
            else:
                start = idx + 1
            found.append((idx, token))
        return found


# --------------------------------------------------------------------------- #
# Store                                                                       #
# --------------------------------------------------------------------------- #
class ArgumentStore:
    """Registry of argument sources plus the latest parsed snapshot.

    Args:
        descriptors: Tool-supplied type descriptors, consulted before the
            defaults.
    """

    def __init__(self, descriptors: Iterable[ArgumentTypeDescriptor] = ()) -> None:
        self._sources: dict[str, ArgumentSource] = {}
        self._descriptors: tuple[ArgumentTypeDescriptor, ...] = (
            *tuple(descriptors),
            *DEFAULT_DESCRIPTORS,
        )
        self._snapshot: Optional[ParsedArguments] = None
        self._generation = 0

    # ------------------------------------------------------------------ #
    # Registration                                                       #
    # ------------------------------------------------------------------ #
    @property
    def sources(self) -> tuple[ArgumentSource, ...]:
        return tuple(self._sources.values())

    @property
    def declarations(self) -> tuple[ArgumentDeclaration, ...]:
        return tuple(d for s in self._sources.values() for d in s.declarations)

    @property
    def snapshot(self) -> Optional[ParsedArguments]:
        """The most recent parse result, ``None`` before the first parse."""
        return self._snapshot

    def register_source(self, name: str, source_type: type) -> ArgumentSource:
        """Register *source_type* under *name*.

        Raises:
            DuplicateSourceError: When *name* is already registered, even if
                the earlier registration used the very same type.
            DuplicateArgumentError: When a declaration reuses a full or short
                name already claimed by another source.
        """
        if name in self._sources:
            raise DuplicateSourceError(f"An argument source named '{name}' is already registered")

        source = ArgumentSource.build(name, source_type)

        taken_full = {d.full_name: s.name for s in self._sources.values() for d in s.declarations}
        taken_short = {
            d.short_name: s.name
            for s in self._sources.values()
            for d in s.declarations
            if d.short_name
        }
        for decl in source.declarations:
            if decl.full_name in taken_full:
                raise DuplicateArgumentError(
                    f"Argument --{decl.full_name} of source '{name}' is already declared "
                    f"by source '{taken_full[decl.full_name]}'"
                )
            if decl.short_name and decl.short_name in taken_short:
                raise DuplicateArgumentError(
                    f"Short name -{decl.short_name} of source '{name}' is already declared "
                    f"by source '{taken_short[decl.short_name]}'"
                )

        self._sources[name] = source
        log.debug("Registered argument source %s with %d declaration(s)", name, len(source.declarations))
        return source

    # ------------------------------------------------------------------ #
    # Parsing                                                            #
    # ------------------------------------------------------------------ #
    def _option_index(self) -> dict[str, ArgumentDeclaration]:
        return {opt: decl for decl in self.declarations for opt in decl.option_strings}

    def parse(self, raw_args: Sequence[str]) -> ParsedArguments:
        """Tokenize *raw_args* against every currently registered declaration.

        A valued option takes the next token unless that token looks like an
        option itself. Everything after a bare ``--`` is unmatched.

        Returns:
            A new snapshot, which also becomes :attr:`snapshot`.
        """
        raw = tuple(str(a) for a in raw_args)
        options = self._option_index()
        values: dict[str, list[Optional[str]]] = {}
        unmatched: list[str] = []
        rejected: list[tuple[str, str]] = []

        pos = 0
        while pos < len(raw):
            token = raw[pos]
            pos += 1
            if token == "--":
                unmatched.extend(raw[pos:])
                break

            decl = options.get(token)
            inline: Optional[str] = None
            if decl is None and "=" in token:
                head, _, tail = token.partition("=")
                if head in options:
                    decl, inline = options[head], tail
            if decl is None:
                unmatched.append(token)
                continue

            if decl.is_flag:
                if inline is not None:
                    rejected.append(
                        (token, f"Flag '{decl.display_name}' does not take a value ('{token}').")
                    )
                    continue
                values.setdefault(decl.full_name, []).append(_FLAG_VALUE)
                continue

            if inline is None and pos < len(raw) and not _looks_like_option(raw[pos]):
                inline = raw[pos]
                pos += 1
            values.setdefault(decl.full_name, []).append(inline)

        self._generation += 1
        self._snapshot = ParsedArguments(
            raw=raw,
            values=MappingProxyType({name: tuple(found) for name, found in values.items()}),
            unmatched=tuple(unmatched),
            rejected=tuple(rejected),
            generation=self._generation,
        )
        log.debug(
            "Parse #%d matched %s, unmatched %s, rejected %s",
            self._generation,
            sorted(values),
            unmatched,
            [token for token, _ in rejected],
        )
        return self._snapshot

    def _require_snapshot(self) -> ParsedArguments:
        if self._snapshot is None:
            raise InternalError("Arguments must be parsed before they can be queried")
        return self._snapshot

    def is_present(self, full_name: str) -> bool:
        """Return ``True`` when *full_name* occurred in the latest parse."""
        return full_name in self._require_snapshot()

    # ------------------------------------------------------------------ #
    # Validation                                                         #
    # ------------------------------------------------------------------ #
    def validate(self, rules: Optional[Iterable[ValidationRule]] = None) -> ValidationOutcome:
        """Check the latest snapshot against *rules* (all rules when ``None``)."""
        active = ALL_RULES if rules is None else frozenset(rules)
        snapshot = self._require_snapshot()
        violations: list[Violation] = []

        if ValidationRule.INVALID_ARGUMENT in active:
            for idx, token in snapshot.positions():
                if token.startswith("-") and len(token) > 1:
                    message = f"Argument with name '{token.lstrip('-')}' isn't defined."
                else:
                    message = f"Invalid argument value '{token}' at position {idx}."
                violations.append(Violation(ValidationRule.INVALID_ARGUMENT, token, message))
            for token, reason in snapshot.rejected:
                violations.append(Violation(ValidationRule.INVALID_ARGUMENT, token, reason))

        for decl in self.declarations:
            found = snapshot.values.get(decl.full_name)
            if found is None:
                if decl.required and ValidationRule.MISSING_REQUIRED_ARGUMENT in active:
                    violations.append(
                        Violation(
                            ValidationRule.MISSING_REQUIRED_ARGUMENT,
                            decl.full_name,
                            f"Argument with name '{decl.display_name}' is missing.",
                        )
                    )
                continue

            if ValidationRule.VALUE_MISSING in active and any(v is None for v in found):
                violations.append(
                    Violation(
                        ValidationRule.VALUE_MISSING,
                        decl.full_name,
                        f"Argument '{decl.display_name}' requires a value.",
                    )
                )

            if (
                ValidationRule.TOO_MANY_VALUES in active
                and not decl.multiple
                and not decl.is_flag
                and len(found) > 1
            ):
                violations.append(
                    Violation(
                        ValidationRule.TOO_MANY_VALUES,
                        decl.full_name,
                        f"Argument '{decl.display_name}' was given {len(found)} values "
                        "but accepts only one.",
                    )
                )

            if ValidationRule.INVALID_ARGUMENT_VALUE in active and decl.choices:
                for value in found:
                    if value is not None and value not in decl.choices:
                        violations.append(
                            Violation(
                                ValidationRule.INVALID_ARGUMENT_VALUE,
                                decl.full_name,
                                f"Argument '{decl.display_name}' has value '{value}'; "
                                f"allowed values are: {', '.join(decl.choices)}.",
                            )
                        )

        return ValidationOutcome(tuple(violations), active, snapshot.generation)

    # ------------------------------------------------------------------ #
    # Population                                                         #
    # ------------------------------------------------------------------ #
    def load_into(self, target: Any, *, lenient: bool = False) -> list[str]:
        """Populate *target* from the latest snapshot.

        Only declarations supplied on the command line are written; absent
        ones keep whatever default the target already carries.

        Args:
            target: Instance of one or more registered source types.
            lenient: Skip value-less occurrences and conversion failures
                instead of raising. Used while the argument set may still be
                incomplete.

        Returns:
            Full names of the declarations that were written.

        Raises:
            ArgumentConversionError: When a value cannot be converted and
                *lenient* is ``False``.
            InternalError: When *target* belongs to no registered source.
        """
        snapshot = self._require_snapshot()
        owners = [s for s in self._sources.values() if s.owns(target)]
        if not owners:
            raise InternalError(
                f"{type(target).__qualname__} is not a registered argument source"
            )

        written: list[str] = []
        for source in owners:
            for decl in source.declarations:
                if decl.full_name in written:
                    continue
                found = snapshot.values.get(decl.full_name)
                if found is None:
                    continue
                supplied = [v for v in found if v is not None]
                if not supplied:
                    if lenient:
                        continue
                    raise ArgumentException(f"Argument '{decl.display_name}' requires a value.")
                try:
                    value = convert(decl, supplied, self._descriptors)
                except ArgumentConversionError as exc:
                    if lenient:
                        log.debug("Deferred conversion of --%s: %s", decl.full_name, exc)
                        continue
                    raise
                decl.assign(target, value)
                written.append(decl.full_name)
        return written

    def current_values(self, target: Any) -> dict[str, Any]:
        """Return full name → current field value for everything *target* declares."""
        return {
            decl.full_name: decl.current(target)
            for source in self._sources.values()
            if source.owns(target)
            for decl in source.declarations
        }

    def restore_unsupplied(self, target: Any, saved: Mapping[str, Any]) -> list[str]:
        """Put *saved* values back for declarations the latest snapshot lacks.

        Undoes what an earlier lenient load wrote from a parse the final
        argument set no longer agrees with.

        Returns:
            Full names of the fields that were restored.
        """
        snapshot = self._require_snapshot()
        restored: list[str] = []
        for decl in self.declarations:
            if decl.full_name not in saved or decl.full_name in snapshot:
                continue
            if decl.current(target) is not saved[decl.full_name]:
                decl.assign(target, saved[decl.full_name])
                restored.append(decl.full_name)
        return restored

    # ------------------------------------------------------------------ #
    # Help                                                               #
    # ------------------------------------------------------------------ #
    def _help_parser(self, details: "ApplicationDetails") -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog=details.program_name,
            usage=details.running_instructions or None,
            add_help=False,
            allow_abbrev=False,
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        for source in self._sources.values():
            group = parser.add_argument_group(source.name)
            for decl in source.declarations:
                text = decl.doc.replace("%", "%%")
                default = decl.current(source.source_type)
                if default not in (None, False, [], ()):
                    text = f"{text} (default: {str(default).replace('%', '%%')})".strip()
                kwargs: dict[str, Any] = {"help": text, "dest": decl.full_name}
                if decl.is_flag:
                    kwargs["action"] = "store_true"
                else:
                    kwargs["metavar"] = decl.metavar or (
                        "{" + ",".join(decl.choices) + "}" if decl.choices else decl.full_name.upper()
                    )
                    kwargs["required"] = decl.required
                    if decl.multiple:
                        kwargs["action"] = "append"
                group.add_argument(*decl.option_strings, **kwargs)
        return parser

    def render_usage(self, details: "ApplicationDetails") -> str:
        """Return the one-paragraph usage line for the registered arguments."""
        return self._help_parser(details).format_usage()

    def render_help(self, details: "ApplicationDetails") -> str:
        """Return the complete help text for the registered arguments."""
        parts = [*details.header, ""]
        parts.append(self._help_parser(details).format_help().rstrip())
        if details.additional_help:
            parts.extend(["", *details.additional_help])
        return "\n".join(parts) + "\n"
