"""
Argument resolution as an explicit state machine.

:class:`ResolutionProtocol` drives one :class:`Session` from ``INIT`` to a
terminal result and never touches the process: it neither prints nor exits.
The caller receives one of

* :class:`Help` – the help flag was present once the declaration set was
  final; carries the rendered help text.
* :class:`Fault` – something raised; carries the classified fault kind, the
  message, the exception itself and, for command-line errors, the full help
  text.
* :class:`Success` – the program object is fully populated and may be
  dispatched.

Static tools:  parse → help check → strict validate → load → logging hook.

Dynamic tools: parse → partial validate → lenient load → logging hook →
register dynamic sources → re-parse → restore fields the re-parse no longer
supplies → help check → strict validate → full load → logging hook. Errors
raised by the logging hook after the lenient load are deferred to the final
pass.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Sequence, Union

import structlog

from .errors import ArgumentException, InternalError
from .program import CommandLineProgram
from .reporting import FaultKind, classify
from .store import ALL_RULES, ArgumentStore, ValidationRule

__all__ = [
    "State",
    "Session",
    "Help",
    "Fault",
    "Success",
    "Resolution",
    "ResolutionProtocol",
    "PARTIAL_RULES",
]

log = structlog.get_logger(__name__)

# Rules that can already be judged before dynamic sources are registered.
PARTIAL_RULES: frozenset[ValidationRule] = ALL_RULES - {
    ValidationRule.MISSING_REQUIRED_ARGUMENT,
    ValidationRule.INVALID_ARGUMENT,
}


class State(enum.Enum):
    INIT = "init"
    PARSED = "parsed"
    PARTIALLY_VALIDATED = "partially_validated"
    FULLY_VALIDATED = "fully_validated"
    LOADED = "loaded"
    DYNAMIC_EXPANSION = "dynamic_expansion"
    DISPATCHED = "dispatched"
    HELP = "help"
    FAULT = "fault"


_TRANSITIONS: dict[State, frozenset[State]] = {
    State.INIT: frozenset({State.PARSED, State.FAULT}),
    State.PARSED: frozenset(
        {State.PARTIALLY_VALIDATED, State.FULLY_VALIDATED, State.HELP, State.FAULT}
    ),
    State.PARTIALLY_VALIDATED: frozenset({State.LOADED, State.FAULT}),
    State.FULLY_VALIDATED: frozenset({State.LOADED, State.FAULT}),
    State.LOADED: frozenset({State.DYNAMIC_EXPANSION, State.DISPATCHED, State.FAULT}),
    State.DYNAMIC_EXPANSION: frozenset({State.PARSED, State.FAULT}),
    State.DISPATCHED: frozenset(),
    State.HELP: frozenset(),
    State.FAULT: frozenset(),
}


@dataclass
class Session:
    """Store, program and state history of one resolution cycle."""

    store: ArgumentStore
    program: CommandLineProgram
    history: list[State] = field(default_factory=lambda: [State.INIT])

    @property
    def state(self) -> State:
        return self.history[-1]

    def advance(self, new: State) -> None:
        """Move to *new*; raise :class:`InternalError` on an illegal transition."""
        if new not in _TRANSITIONS[self.state]:
            raise InternalError(f"Illegal resolution transition {self.state.name} -> {new.name}")
        log.debug("resolution state", previous=self.state.name, current=new.name)
        self.history.append(new)


# --------------------------------------------------------------------------- #
# Terminal results                                                            #
# --------------------------------------------------------------------------- #
@dataclass(frozen=True)
class Help:
    text: str


@dataclass(frozen=True)
class Fault:
    kind: FaultKind
    message: str
    error: BaseException
    help_text: Optional[str] = None


@dataclass(frozen=True)
class Success:
    program: CommandLineProgram
    session: Session


Resolution = Union[Help, Fault, Success]


# --------------------------------------------------------------------------- #
# Protocol                                                                    #
# --------------------------------------------------------------------------- #
class ResolutionProtocol:
    """Resolve an argument vector into a populated *program*.

    Args:
        program: Tool instance; doubles as the configuration object.
        on_loaded: Called with the program after every load. The startup
            sequencer uses it to re-derive logging settings; exceptions it
            raises end resolution with a :class:`Fault`.
    """

    def __init__(
        self,
        program: CommandLineProgram,
        on_loaded: Optional[Callable[[CommandLineProgram], None]] = None,
    ) -> None:
        self.program = program
        self.on_loaded = on_loaded
        self.session: Optional[Session] = None

    def resolve(self, argv: Sequence[str]) -> Resolution:
        program = self.program
        store = ArgumentStore(program.get_argument_type_descriptors())
        session = Session(store=store, program=program)
        self.session = session
        program.argument_store = store

        try:
            store.register_source(program.get_argument_source_name(program), type(program))
            if program.can_add_arguments_dynamically():
                return self._resolve_dynamic(session, argv)
            return self._resolve_static(session, argv)
        except Exception as exc:  # every fault ends resolution
            return self._fault(session, exc)

    # ------------------------------------------------------------------ #
    def _resolve_static(self, session: Session, argv: Sequence[str]) -> Resolution:
        self._parse(session, argv)
        help_result = self._check_help(session)
        if help_result is not None:
            return help_result
        self._validate_strict(session)
        self._load(session, [session.program])
        return Success(session.program, session)

    def _resolve_dynamic(self, session: Session, argv: Sequence[str]) -> Resolution:
        store, program = session.store, session.program

        self._parse(session, argv)
        outcome = store.validate(PARTIAL_RULES)
        for violation in outcome.violations:
            log.debug("deferred violation", rule=violation.rule.name, detail=violation.message)
        session.advance(State.PARTIALLY_VALIDATED)
        saved = store.current_values(program)
        self._load(session, [program], lenient=True)

        session.advance(State.DYNAMIC_EXPANSION)
        sources = list(program.get_argument_sources())
        for source in sources:
            store.register_source(program.get_argument_source_name(source), type(source))

        self._parse(session, argv)
        restored = store.restore_unsupplied(program, saved)
        if restored:
            log.debug("restored first-pass fields", fields=restored)
        help_result = self._check_help(session)
        if help_result is not None:
            return help_result
        self._validate_strict(session)
        self._load(session, [program, *sources])
        return Success(program, session)

    # ------------------------------------------------------------------ #
    def _parse(self, session: Session, argv: Sequence[str]) -> None:
        session.store.parse(argv)
        session.advance(State.PARSED)

    def _check_help(self, session: Session) -> Optional[Help]:
        if not session.store.is_present("help"):
            return None
        session.advance(State.HELP)
        details = session.program.get_application_details()
        return Help(session.store.render_help(details))

    def _validate_strict(self, session: Session) -> None:
        session.store.validate().raise_for_violations()
        session.advance(State.FULLY_VALIDATED)

    def _load(self, session: Session, targets: list[Any], lenient: bool = False) -> None:
        for target in targets:
            session.store.load_into(target, lenient=lenient)
        session.advance(State.LOADED)
        if self.on_loaded is None:
            return
        try:
            self.on_loaded(session.program)
        except ArgumentException as exc:
            if not lenient:
                raise
            log.debug("deferred logging setup", detail=str(exc))

    def _fault(self, session: Session, exc: Exception) -> Fault:
        kind, error = classify(exc)
        help_text = None
        if isinstance(error, ArgumentException):
            details = session.program.get_application_details()
            help_text = session.store.render_help(details)
        if State.FAULT in _TRANSITIONS[session.state]:
            session.advance(State.FAULT)
        return Fault(kind, str(error), error, help_text)
