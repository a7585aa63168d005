from pathlib import Path

import pytest

from argomatic.declarations import ArgumentDeclaration, ArgumentSource, build_declarations
from argomatic.errors import DuplicateArgumentError, DuplicateSourceError


class Base:
    arguments = (ArgumentDeclaration("alpha", "a", doc="First"),)


class Derived(Base):
    arguments = (ArgumentDeclaration("beta", "b", type=int),)


def test_declaration_defaults():
    """Verify field and display defaults of a declaration."""
    decl = ArgumentDeclaration("input_file", "I", type=Path)
    assert decl.field == "input_file"
    assert decl.option_strings == ["--input_file", "-I"]
    assert decl.display_name == "--input_file (-I)"
    assert not decl.is_flag
    assert ArgumentDeclaration("verbose", type=bool).is_flag
    assert ArgumentDeclaration("plain").display_name == "--plain"


@pytest.mark.parametrize("full, short", [("", None), ("--x", None), ("x", "-y"), ("x", "")])
def test_declaration_rejects_bad_names(full, short):
    """Verify malformed names are rejected at declaration time."""
    with pytest.raises(ValueError):
        ArgumentDeclaration(full, short)


def test_choices_are_frozen_to_tuple():
    """Verify choices given as a list are stored as a tuple."""
    decl = ArgumentDeclaration("mode", choices=["fast", "slow"])
    assert decl.choices == ("fast", "slow")


def test_assign_and_current_use_declared_field():
    """Verify the setter/getter pair writes the declared field."""
    decl = ArgumentDeclaration("out", field="output_path")

    class Target:
        pass

    target = Target()
    assert decl.current(target) is None
    decl.assign(target, "x.txt")
    assert target.output_path == "x.txt"
    assert decl.current(target) == "x.txt"


def test_build_declarations_walks_bases_first():
    """Verify base class declarations precede derived ones."""
    names = [d.full_name for d in build_declarations(Derived)]
    assert names == ["alpha", "beta"]


def test_build_declarations_rejects_redeclared_name():
    """Verify a derived class cannot redeclare a base option."""

    class Clash(Base):
        arguments = (ArgumentDeclaration("other", "a"),)

    with pytest.raises(DuplicateArgumentError) as info:
        build_declarations(Clash)
    assert isinstance(info.value, DuplicateSourceError)


def test_build_declarations_rejects_foreign_entries():
    """Verify non-declaration entries raise TypeError."""

    class Broken:
        arguments = ("alpha",)

    with pytest.raises(TypeError):
        build_declarations(Broken)


def test_argument_source_build_and_owns():
    """Verify sources collect declarations and recognise their instances."""
    source = ArgumentSource.build("derived", Derived)
    assert [d.full_name for d in source.declarations] == ["alpha", "beta"]
    assert source.owns(Derived())
    assert not source.owns(Base())
