"""
argomatic package initialisation.

Bootstrap and argument-resolution layer for command-line tools. A tool
subclasses :class:`CommandLineProgram`, declares its options and calls
:func:`run`::

    from argomatic import ArgumentDeclaration, CommandLineProgram, run

    class Greet(CommandLineProgram):
        arguments = (ArgumentDeclaration("name", "n", doc="Who to greet", required=True),)
        name = None

        def execute(self):
            print(f"Hello {self.name}")

    if __name__ == "__main__":
        run(Greet())

Module attributes
-----------------
__version__ : str
    Version of the installed distribution, ``"0.0.0"`` in a bare checkout.
"""

from importlib.metadata import PackageNotFoundError, version

# --------------------------------------------------------------------------- #
# Version resolution
# --------------------------------------------------------------------------- #
try:
    __version__: str = version("argomatic")
except PackageNotFoundError:
    __version__ = "0.0.0"

# --------------------------------------------------------------------------- #
# Public re-exports
# --------------------------------------------------------------------------- #
# Submodules import ``__version__`` from here, so these come last.
from .declarations import ArgumentDeclaration, ArgumentSource  # noqa: E402
from .details import ApplicationDetails  # noqa: E402
from .errors import (  # noqa: E402
    ArgomaticError,
    ArgumentConversionError,
    ArgumentException,
    DuplicateArgumentError,
    DuplicateSourceError,
    InternalError,
    SinkOpenError,
    UserError,
)
from .program import CommandLineProgram  # noqa: E402
from .startup import StartupSequencer, run  # noqa: E402

__all__: list[str] = [
    "__version__",
    "ArgumentDeclaration",
    "ArgumentSource",
    "ApplicationDetails",
    "ArgomaticError",
    "ArgumentConversionError",
    "ArgumentException",
    "DuplicateArgumentError",
    "DuplicateSourceError",
    "InternalError",
    "SinkOpenError",
    "UserError",
    "CommandLineProgram",
    "StartupSequencer",
    "run",
]
