"""
Base class for every argomatic command-line tool.

A tool subclasses :class:`CommandLineProgram`, lists its own options in an
``arguments`` tuple, gives each option a class-level default and implements
:meth:`CommandLineProgram.execute`. The universal options declared here
(logging level, log file, quiet and debug mode, help) are inherited and
always listed first.

Plugin-style tools additionally override
:meth:`CommandLineProgram.can_add_arguments_dynamically` and
:meth:`CommandLineProgram.get_argument_sources`; the resolution protocol then
parses twice, the second time with the returned sources registered.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Optional

from .declarations import ArgumentDeclaration
from .descriptors import ArgumentTypeDescriptor
from .details import ApplicationDetails

__all__ = ["CommandLineProgram", "UNIVERSAL_ARGUMENTS"]


UNIVERSAL_ARGUMENTS: tuple[ArgumentDeclaration, ...] = (
    ArgumentDeclaration(
        "logging_level",
        "l",
        doc="Verbosity: DEBUG, INFO, WARN, ERROR, FATAL or OFF.",
        metavar="LEVEL",
    ),
    ArgumentDeclaration(
        "log_to_file",
        "log",
        doc="Also append log output to this file.",
        type=Path,
        metavar="PATH",
    ),
    ArgumentDeclaration(
        "quiet_output_mode",
        "quiet",
        doc="Suppress console log output.",
        type=bool,
    ),
    ArgumentDeclaration(
        "debug_mode",
        "debug",
        doc="Use the verbose multi-line log pattern.",
        type=bool,
    ),
    ArgumentDeclaration(
        "help",
        "h",
        doc="Show this help message and exit.",
        type=bool,
    ),
)


class CommandLineProgram:
    """Configuration object and entry point of one tool.

    The resolution protocol writes parsed values straight onto the instance,
    so instance attributes double as the resolved configuration.

    Attributes:
        argument_store: Store of the running session; set by the protocol
            before the first load.
    """

    arguments = UNIVERSAL_ARGUMENTS

    logging_level: str = "INFO"
    log_to_file: Optional[Path] = None
    quiet_output_mode: bool = False
    debug_mode: bool = False
    help: bool = False

    def __init__(self) -> None:
        self.argument_store: Any = None

    # ------------------------------------------------------------------ #
    # Hooks                                                              #
    # ------------------------------------------------------------------ #
    def get_application_details(self) -> ApplicationDetails:
        cls = type(self)
        return ApplicationDetails(
            header=ApplicationDetails.create_default_header(cls),
            running_instructions=ApplicationDetails.create_default_running_instructions(cls),
            program_name=cls.__name__,
        )

    def get_argument_type_descriptors(self) -> Iterable[ArgumentTypeDescriptor]:
        """Extra descriptors consulted before the built-in ones."""
        return ()

    def can_add_arguments_dynamically(self) -> bool:
        return False

    def get_argument_sources(self) -> Iterable[Any]:
        """Return objects whose types contribute further declarations.

        Called once, after the lenient first load. Each returned object is
        registered under :meth:`get_argument_source_name` and populated by the
        final load.
        """
        return ()

    @staticmethod
    def get_argument_source_name(source: Any) -> str:
        return type(source).__qualname__

    def load_arguments_into_object(self, obj: Any) -> list[str]:
        """Populate *obj* from the current parse; see ``ArgumentStore.load_into``."""
        return self.argument_store.load_into(obj)

    def execute(self) -> Optional[int]:
        """Run the tool; the return value becomes the exit status."""
        raise NotImplementedError
