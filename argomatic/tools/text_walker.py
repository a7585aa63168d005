"""
``walk`` – run a pluggable walker over text files.

The tool only knows ``--walker`` and ``--input_file`` up front. Options of
the selected walker (``--pattern`` for ``FindPattern``, ``--min_word_length``
for ``CountWords``) become known after the first parse, which is why this
tool resolves its arguments in two passes.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click
import structlog

from ..declarations import ArgumentDeclaration
from ..details import ApplicationDetails
from ..errors import UserError
from ..program import CommandLineProgram
from .walkers import WALKERS, Walker

log = structlog.get_logger(__name__)


class WalkText(CommandLineProgram):
    """Apply one walker plugin to every input file."""

    arguments = (
        ArgumentDeclaration(
            "walker",
            "W",
            doc="Walker to run.",
            required=True,
            choices=tuple(WALKERS),
        ),
        ArgumentDeclaration(
            "input_file",
            "I",
            doc="Text file to walk; repeat for several files.",
            type=Path,
            required=True,
            multiple=True,
            metavar="FILE",
        ),
    )

    walker: Optional[str] = None
    input_file: Optional[list[Path]] = None

    def __init__(self) -> None:
        super().__init__()
        self.selected: Optional[Walker] = None

    def get_application_details(self) -> ApplicationDetails:
        details = super().get_application_details()
        details.program_name = "walk"
        details.running_instructions = "walk -W WALKER -I FILE [-I FILE ...] [walker options]"
        details.additional_help = [
            "Walkers: " + ", ".join(WALKERS),
            "Pass -W <walker> together with -h to list the walker's own options.",
        ]
        return details

    def can_add_arguments_dynamically(self) -> bool:
        return True

    def get_argument_sources(self) -> list[Walker]:
        walker_type = WALKERS.get(self.walker or "")
        if walker_type is None:
            return []
        self.selected = walker_type()
        log.debug("walker selected", walker=self.walker)
        return [self.selected]

    def execute(self) -> int:
        if self.selected is None:  # pragma: no cover - strict validation prevents this
            raise UserError("No walker selected")
        for path in self.input_file or []:
            if not path.is_file():
                raise UserError(f"Input file {path} does not exist or is not a file")
            text = path.read_text(encoding="utf-8", errors="replace")
            for line in self.selected.walk(path, text):
                click.echo(line)
        log.info(f"{self.walker} walked {len(self.input_file or [])} file(s)")
        return 0
