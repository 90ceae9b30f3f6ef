"""CLI subcommand registration."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all subcommands on the CLI group."""
    from toolgate.cli_commands.call import call
    from toolgate.cli_commands.models import classify, models
    from toolgate.cli_commands.serve import serve
    from toolgate.cli_commands.tools import tools

    cli.add_command(models)
    cli.add_command(classify)
    cli.add_command(tools)
    cli.add_command(call)
    cli.add_command(serve)
