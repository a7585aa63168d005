"""
Walker plugins for the ``walk`` tool.

Each walker is an argument source of its own: its options only exist once
``--walker`` has selected it, so ``walk`` registers them during dynamic
expansion.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Optional

from ..declarations import ArgumentDeclaration
from ..errors import UserError

__all__ = ["Walker", "CountWords", "FindPattern", "WALKERS"]


class Walker:
    """Base class: :meth:`walk` returns the lines to print for one file."""

    arguments: tuple[ArgumentDeclaration, ...] = ()

    def walk(self, path: Path, text: str) -> list[str]:  # pragma: no cover - interface
        raise NotImplementedError


class CountWords(Walker):
    """Count whitespace-separated words, optionally ignoring short ones."""

    arguments = (
        ArgumentDeclaration(
            "min_word_length",
            "minlen",
            doc="Ignore words shorter than this many characters.",
            type=int,
            metavar="N",
        ),
    )

    min_word_length: int = 1

    def walk(self, path: Path, text: str) -> list[str]:
        words = [w for w in text.split() if len(w) >= self.min_word_length]
        return [f"{path}\t{len(words)}"]


class FindPattern(Walker):
    """Print ``path:line:text`` for every line matching a regular expression."""

    arguments = (
        ArgumentDeclaration(
            "pattern",
            "P",
            doc="Regular expression to search for.",
            required=True,
            metavar="REGEX",
        ),
        ArgumentDeclaration(
            "ignore_case",
            "ic",
            doc="Match case-insensitively.",
            type=bool,
        ),
    )

    pattern: Optional[str] = None
    ignore_case: bool = False

    def _compiled(self) -> re.Pattern:
        try:
            return re.compile(self.pattern or "", re.IGNORECASE if self.ignore_case else 0)
        except re.error as exc:
            raise UserError(f"Invalid regular expression '{self.pattern}': {exc}") from exc

    def walk(self, path: Path, text: str) -> list[str]:
        regex = self._compiled()
        return [
            f"{path}:{lineno}:{line}"
            for lineno, line in enumerate(text.splitlines(), start=1)
            if regex.search(line)
        ]


WALKERS: dict[str, type[Walker]] = {
    "CountWords": CountWords,
    "FindPattern": FindPattern,
}
