"""``toolgate tools`` — list the built-in tools and their input schemas."""

from __future__ import annotations

import click

from toolgate.cli_commands._output import print_json, print_tools_table


@click.command()
@click.option("--json", "as_json", is_flag=True, help="Output the full tools/list payload.")
def tools(as_json: bool) -> None:
    """List the tools the server exposes."""
    from toolgate.builtin import build_registry

    entries = [tool.describe() for tool in build_registry()]

    if as_json:
        print_json({"tools": entries})
        return

    print_tools_table(entries)
