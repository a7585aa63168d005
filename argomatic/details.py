"""Descriptive text shown around help output and at program start."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Sequence

import structlog

from . import __version__

__all__ = ["ApplicationDetails", "log_header_information"]

log = structlog.get_logger(__name__)

_RULE = "-" * 90


@dataclass
class ApplicationDetails:
    """Identity and help text of one command-line tool.

    Attributes:
        header: Lines printed above the help text and in the start banner.
        additional_help: Lines printed below the argument listing.
        running_instructions: Usage line replacing argparse's generated one.
        program_name: Name used as ``prog`` in help and usage output.
        version: Version reported in failure banners.
    """

    header: list[str]
    additional_help: list[str] = field(default_factory=list)
    running_instructions: str = ""
    program_name: str = "argomatic"
    version: str = __version__

    @staticmethod
    def create_default_header(program_type: type) -> list[str]:
        """Return program-name and version lines for *program_type*."""
        return [
            f"Program Name: {program_type.__name__}",
            f"argomatic version {__version__}",
        ]

    @staticmethod
    def create_default_running_instructions(program_type: type) -> str:
        return f"{program_type.__name__} [arguments]"


def log_header_information(details: ApplicationDetails, argv: Sequence[str]) -> None:
    """Log the banner that opens every run: header, arguments and start time."""
    log.info(_RULE)
    for line in details.header:
        log.info(line)
    log.info("Program Args: " + " ".join(argv))
    log.info("Date/Time: " + datetime.now().strftime("%Y/%m/%d %H:%M:%S"))
    log.info(_RULE)
