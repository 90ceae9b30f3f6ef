"""``toolgate models`` and ``toolgate classify`` — inspect the provider table."""

from __future__ import annotations

import click

from toolgate.cli_commands._output import console, print_json, print_models_table
from toolgate.core.interface.config import Provider


@click.command()
@click.option(
    "--provider",
    "-p",
    type=click.Choice([p.value for p in Provider]),
    default=None,
    help="Only list this provider's models.",
)
@click.option("--json", "as_json", is_flag=True, help="Output raw JSON.")
def models(provider: str | None, as_json: bool) -> None:
    """List the upstream models reachable through the gateway."""
    from toolgate.gateway.providers import list_external_models

    rows = [
        (prov, model)
        for prov, model in list_external_models()
        if provider is None or prov.value == provider
    ]

    if as_json:
        print_json([{"provider": prov.value, **model.model_dump()} for prov, model in rows])
        return

    print_models_table(rows)


@click.command()
@click.argument("model")
def classify(model: str) -> None:
    """Show how MODEL is routed: upstream provider or local."""
    from toolgate.core.interface.config import parse_external_model
    from toolgate.gateway.providers import get_external_model

    route = parse_external_model(model)
    if route is None:
        console.print(f"[yellow]{model}[/yellow] is a local model (not routed through the gateway)")
        return

    console.print(f"[green]{model}[/green] is external")
    console.print(f"  Provider: {route.provider}")
    console.print(f"  Model: {route.model}")

    config = get_external_model(route.provider, route.model)
    if config is None:
        console.print("  [dim]Not in the model table; max output tokens default to 4096[/dim]")
        return
    console.print(f"  Context window: {config.context_window:,}")
    console.print(f"  Max output tokens: {config.max_output_tokens:,}")
