"""``count-lines`` – count the lines of one or more text files."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click
import structlog

from ..declarations import ArgumentDeclaration
from ..details import ApplicationDetails
from ..errors import UserError
from ..program import CommandLineProgram

log = structlog.get_logger(__name__)


def count_lines(path: Path, skip_blank: bool = False) -> int:
    """Return the number of lines in *path*.

    Raises:
        UserError: When *path* is not a readable file.
    """
    if not path.is_file():
        raise UserError(f"Input file {path} does not exist or is not a file")
    with path.open(encoding="utf-8", errors="replace") as fh:
        if skip_blank:
            return sum(1 for line in fh if line.strip())
        return sum(1 for _ in fh)


class CountLines(CommandLineProgram):
    """Count lines per input file and print a tab-separated summary."""

    arguments = (
        ArgumentDeclaration(
            "input_file",
            "I",
            doc="Text file to count; repeat for several files.",
            type=Path,
            required=True,
            multiple=True,
            metavar="FILE",
        ),
        ArgumentDeclaration(
            "skip_blank_lines",
            "skip",
            doc="Do not count lines that contain only whitespace.",
            type=bool,
        ),
    )

    input_file: Optional[list[Path]] = None
    skip_blank_lines: bool = False

    def get_application_details(self) -> ApplicationDetails:
        details = super().get_application_details()
        details.program_name = "count-lines"
        details.running_instructions = "count-lines -I FILE [-I FILE ...] [-skip]"
        details.additional_help = [
            "Example:",
            "  argomatic-cli count-lines -I notes.txt -I todo.txt --skip_blank_lines",
        ]
        return details

    def execute(self) -> int:
        total = 0
        for path in self.input_file or []:
            n = count_lines(path, self.skip_blank_lines)
            log.debug("counted", path=str(path), lines=n)
            click.echo(f"{path}\t{n}")
            total += n
        click.echo(f"total\t{total}")
        log.info(f"Counted {total} line(s) in {len(self.input_file or [])} file(s)")
        return 0
