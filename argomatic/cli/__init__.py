"""Expose the Click group behind the ``argomatic-cli`` script.

Each sub-command is a thin pass-through: Click neither parses nor validates
the tool's arguments (unknown options are allowed and ``--help`` is not
intercepted). The raw arguments are handed to
:class:`argomatic.startup.StartupSequencer`, whose exit status becomes the
process exit status.
"""

from __future__ import annotations

import importlib
from typing import Any, Dict

import click

from argomatic import __version__
from argomatic.program import CommandLineProgram
from argomatic.startup import StartupSequencer


class LazyGroup(click.Group):
    """Click group that imports tool classes on first use."""

    def __init__(self, *args, **kwargs):
        self._lazy: dict[str, str] = {}
        super().__init__(*args, **kwargs)

    def set_lazy_tool(self, name: str, target: str) -> None:
        """Register tool *name* to be imported from ``module:Class``."""
        self._lazy[name] = target

    def list_commands(self, ctx):
        return sorted({*super().list_commands(ctx), *self._lazy})

    def get_command(self, ctx, cmd_name):  # noqa: D401 - Click signature
        cmd = super().get_command(ctx, cmd_name)
        if cmd is not None:
            return cmd
        target = self._lazy.get(cmd_name)
        if not target:
            return None
        module_name, attr = target.split(":", 1)
        program_type = getattr(importlib.import_module(module_name), attr)
        cmd = tool_command(cmd_name, program_type)
        self.add_command(cmd, name=cmd_name)
        return cmd


# Tool arguments are forwarded untouched, including -h/--help.
_PASSTHROUGH: Dict[str, Any] = dict(
    ignore_unknown_options=True,
    allow_extra_args=True,
    help_option_names=[],
)


def tool_command(name: str, program_type: type[CommandLineProgram]) -> click.Command:
    """Wrap *program_type* in a Click command that forwards its arguments.

    Args:
        name: Sub-command name.
        program_type: Tool class; instantiated once per invocation.

    Returns:
        A Click command exiting with the tool's status.
    """
    summary = (program_type.__doc__ or "").strip().splitlines()
    short_help = summary[0] if summary else name

    @click.command(name=name, context_settings=_PASSTHROUGH, short_help=short_help)
    @click.pass_context
    def command(ctx: click.Context) -> None:
        code = StartupSequencer().start(program_type(), list(ctx.args))
        ctx.exit(code)

    return command


@click.group(
    cls=LazyGroup,
    context_settings={"help_option_names": ["-h", "--help"], "max_content_width": 120},
    help="""\b
argomatic-cli – command-line tools built on argomatic.

Run `argomatic-cli <tool> --help` for the options of a tool.
""",
)
@click.version_option(__version__)
def main() -> None:
    """Root command executed by *argomatic-cli*."""


main.set_lazy_tool("count-lines", "argomatic.tools.line_counter:CountLines")
main.set_lazy_tool("walk", "argomatic.tools.text_walker:WalkText")

cli = main
__all__: list[str] = ["main", "tool_command", "LazyGroup"]
