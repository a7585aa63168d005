"""
Argument declarations and the sources that contribute them.

A *source* is any class carrying an ``arguments`` tuple of
:class:`ArgumentDeclaration` objects. Declarations are collected once, when
the source is registered, by walking the class hierarchy from the most
generic base to the most derived class. Nothing is discovered by scanning
attributes or annotations at parse time.

Example::

    class Sample:
        arguments = (
            ArgumentDeclaration("input_file", "I", doc="Input", type=Path, required=True),
        )
        input_file = None
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from .errors import DuplicateArgumentError

__all__ = ["ArgumentDeclaration", "ArgumentSource", "build_declarations"]


# --------------------------------------------------------------------------- #
# Single declaration                                                          #
# --------------------------------------------------------------------------- #
@dataclass(frozen=True, slots=True)
class ArgumentDeclaration:
    """One recognised command-line option.

    Attributes:
        full_name: Long name, matched as ``--<full_name>``.
        short_name: Optional short name, matched as ``-<short_name>``. Multi
            character short names (``-log``) are allowed.
        doc: Help text.
        required: Whether strict validation demands the option.
        type: Target type handed to the argument type descriptors. ``bool``
            turns the declaration into a value-less flag.
        field: Attribute written on the target object; defaults to
            ``full_name``.
        multiple: Accept the option several times and collect a list.
        choices: Optional closed set of accepted raw values.
        metavar: Placeholder shown in help output.
    """

    full_name: str
    short_name: Optional[str] = None
    doc: str = ""
    required: bool = False
    type: Any = str
    field: str = ""
    multiple: bool = False
    choices: Optional[tuple[str, ...]] = None
    metavar: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.full_name or self.full_name.startswith("-"):
            raise ValueError(f"Invalid full name for an argument: {self.full_name!r}")
        if self.short_name is not None and (
            not self.short_name or self.short_name.startswith("-")
        ):
            raise ValueError(f"Invalid short name for --{self.full_name}: {self.short_name!r}")
        if not self.field:
            object.__setattr__(self, "field", self.full_name)
        if self.choices is not None:
            object.__setattr__(self, "choices", tuple(self.choices))

    # ------------------------------------------------------------------ #
    @property
    def is_flag(self) -> bool:
        """``True`` for boolean declarations that take no value."""
        return self.type is bool

    @property
    def option_strings(self) -> list[str]:
        """Option spellings in the order argparse should register them."""
        names = [f"--{self.full_name}"]
        if self.short_name:
            names.append(f"-{self.short_name}")
        return names

    @property
    def display_name(self) -> str:
        """``--full_name (-short)`` label used in violation messages."""
        if self.short_name:
            return f"--{self.full_name} (-{self.short_name})"
        return f"--{self.full_name}"

    # ------------------------------------------------------------------ #
    def assign(self, target: Any, value: Any) -> None:
        """Write *value* into the declared field of *target*."""
        setattr(target, self.field, value)

    def current(self, target: Any) -> Any:
        """Return the declared field of *target* (``None`` when unset)."""
        return getattr(target, self.field, None)


# --------------------------------------------------------------------------- #
# Registration-time collection                                                #
# --------------------------------------------------------------------------- #
def build_declarations(source_type: type) -> tuple[ArgumentDeclaration, ...]:
    """Collect the ``arguments`` tuples declared along *source_type*'s MRO.

    Base classes contribute first so that universal options keep their
    position in help output. A derived class may not redeclare a name that a
    base already declares.

    Raises:
        TypeError: When an ``arguments`` entry is not a declaration.
        DuplicateArgumentError: When two entries share a full or short name.
    """
    collected: list[ArgumentDeclaration] = []
    full_names: set[str] = set()
    short_names: set[str] = set()

    for klass in reversed(source_type.__mro__):
        for decl in vars(klass).get("arguments", ()):
            if not isinstance(decl, ArgumentDeclaration):
                raise TypeError(
                    f"{klass.__qualname__}.arguments must contain ArgumentDeclaration "
                    f"objects, got {type(decl).__name__}"
                )
            if decl.full_name in full_names:
                raise DuplicateArgumentError(
                    f"Argument --{decl.full_name} is declared twice in {source_type.__qualname__}"
                )
            if decl.short_name and decl.short_name in short_names:
                raise DuplicateArgumentError(
                    f"Short name -{decl.short_name} is declared twice in {source_type.__qualname__}"
                )
            full_names.add(decl.full_name)
            if decl.short_name:
                short_names.add(decl.short_name)
            collected.append(decl)
    return tuple(collected)


@dataclass(frozen=True, slots=True)
class ArgumentSource:
    """A named type contributing declarations to a resolution session."""

    name: str
    source_type: type
    declarations: tuple[ArgumentDeclaration, ...] = field(default_factory=tuple)

    @classmethod
    def build(cls, name: str, source_type: type) -> "ArgumentSource":
        """Create a source, collecting declarations from *source_type*."""
        return cls(name=name, source_type=source_type, declarations=build_declarations(source_type))

    def owns(self, target: Any) -> bool:
        """Return ``True`` when *target* is an instance of this source's type."""
        return isinstance(target, self.source_type)
