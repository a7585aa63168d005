"""Echo helpers for the ``##### ERROR`` banners written on failure."""

from __future__ import annotations

import click

__all__ = ["ERROR_PREFIX", "echo_error", "echo_error_rule"]

ERROR_PREFIX = "##### ERROR"


def echo_error(text: str = "") -> None:
    """Print *text* to stderr, prefixing every line with ``##### ERROR``.

    Args:
        text: Message; may span several lines. An empty message prints the
            bare prefix.
    """
    if not text.strip():
        click.echo(ERROR_PREFIX, err=True)
        return
    for part in text.splitlines():
        click.echo(f"{ERROR_PREFIX} {part}", err=True)


def echo_error_rule(width: int) -> None:
    """Print a dashed separator line inside an error banner."""
    echo_error("-" * width)
