"""String-to-value coercion for declared argument types.

Each :class:`ArgumentTypeDescriptor` claims a set of Python types and turns a
raw command-line string into a value of that type. Tools contribute their own
descriptors through
:meth:`argomatic.program.CommandLineProgram.get_argument_type_descriptors`;
those are consulted before the defaults listed in
:data:`DEFAULT_DESCRIPTORS`.
"""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Any, Callable, Iterable, Sequence

from .declarations import ArgumentDeclaration
from .errors import ArgumentConversionError, InternalError

__all__ = [
    "ArgumentTypeDescriptor",
    "SimpleTypeDescriptor",
    "BooleanDescriptor",
    "EnumDescriptor",
    "DEFAULT_DESCRIPTORS",
    "convert",
]

_TRUE = {"true", "t", "yes", "y", "1", "on"}
_FALSE = {"false", "f", "no", "n", "0", "off"}


class ArgumentTypeDescriptor:
    """Base class: subclasses implement :meth:`supports` and :meth:`parse`."""

    def supports(self, target_type: Any) -> bool:  # pragma: no cover - interface
        raise NotImplementedError

    def parse(self, declaration: ArgumentDeclaration, value: str) -> Any:  # pragma: no cover
        raise NotImplementedError


class SimpleTypeDescriptor(ArgumentTypeDescriptor):
    """Call a one-argument constructor such as ``int`` or ``Path``."""

    def __init__(self, target_type: type, factory: Callable[[str], Any] | None = None) -> None:
        self.target_type = target_type
        self.factory = factory or target_type

    def supports(self, target_type: Any) -> bool:
        return target_type is self.target_type

    def parse(self, declaration: ArgumentDeclaration, value: str) -> Any:
        return self.factory(value)


class BooleanDescriptor(ArgumentTypeDescriptor):
    """Accept the usual spellings of true/false, case-insensitively."""

    def supports(self, target_type: Any) -> bool:
        return target_type is bool

    def parse(self, declaration: ArgumentDeclaration, value: str) -> bool:
        lowered = value.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
        raise ValueError("expected true or false")


class EnumDescriptor(ArgumentTypeDescriptor):
    """Match enum member names case-insensitively."""

    def supports(self, target_type: Any) -> bool:
        return isinstance(target_type, type) and issubclass(target_type, enum.Enum)

    def parse(self, declaration: ArgumentDeclaration, value: str) -> enum.Enum:
        members = declaration.type.__members__
        for name, member in members.items():
            if name.upper() == value.upper():
                return member
        raise ValueError("expected one of " + ", ".join(members))


DEFAULT_DESCRIPTORS: tuple[ArgumentTypeDescriptor, ...] = (
    BooleanDescriptor(),
    EnumDescriptor(),
    SimpleTypeDescriptor(str),
    SimpleTypeDescriptor(int),
    SimpleTypeDescriptor(float),
    SimpleTypeDescriptor(Path, lambda raw: Path(raw).expanduser()),
)


def _type_name(target_type: Any) -> str:
    return getattr(target_type, "__name__", repr(target_type))


def convert(
    declaration: ArgumentDeclaration,
    values: Sequence[str],
    descriptors: Iterable[ArgumentTypeDescriptor] = DEFAULT_DESCRIPTORS,
) -> Any:
    """Convert raw *values* for *declaration*.

    Args:
        declaration: Declaration whose ``type`` selects the descriptor.
        values: Raw strings in command-line order; must not be empty.
        descriptors: Descriptors in priority order.

    Returns:
        A list for ``multiple`` declarations, otherwise the value converted
        from the last occurrence.

    Raises:
        ArgumentConversionError: When a descriptor rejects a value.
        InternalError: When no descriptor supports the declared type.
    """
    descriptor = next((d for d in descriptors if d.supports(declaration.type)), None)
    if descriptor is None:
        raise InternalError(
            f"No argument type descriptor available for --{declaration.full_name} "
            f"of type {_type_name(declaration.type)}"
        )

    converted = []
    for raw in values:
        try:
            converted.append(descriptor.parse(declaration, raw))
        except (TypeError, ValueError) as exc:
            raise ArgumentConversionError(
                declaration.full_name, raw, _type_name(declaration.type), str(exc)
            ) from exc

    if declaration.multiple:
        return converted
    return converted[-1]
