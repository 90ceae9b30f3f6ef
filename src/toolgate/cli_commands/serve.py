"""``toolgate serve`` — run the HTTP server under uvicorn."""

from __future__ import annotations

import asyncio
import sys

import click

from toolgate.cli_commands._output import console


@click.command()
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True),
    default=None,
    help="toolgate YAML config.",
)
@click.option("--host", default=None, help="Override server.host.")
@click.option("--port", type=int, default=None, help="Override server.port.")
@click.option("--telemetry", is_flag=True, help="Enable telemetry.")
def serve(config_path: str | None, host: str | None, port: int | None, telemetry: bool) -> None:
    """Serve the built-in tools over JSON-RPC (and chat, when a gateway is configured)."""
    from toolgate.builtin import build_dispatcher
    from toolgate.gateway.errors import GatewayNotConfiguredError
    from toolgate.gateway.factory import create_gateway_client
    from toolgate.sdk.config import load_config
    from toolgate.sdk.errors import ConfigError
    from toolgate.transport.app import create_app
    from toolgate.transport.app import serve as run_server
    from toolgate.utils.logging import configure_logging

    try:
        config = load_config(config_path)
    except ConfigError as exc:
        console.print(f"[red]Config error:[/red] {exc}")
        sys.exit(1)

    if host is not None:
        config.server.host = host
    if port is not None:
        config.server.port = port

    configure_logging(config.logging.level, json_output=config.logging.json_output)

    if telemetry or config.telemetry.enabled:
        from toolgate.utils.telemetry import configure_telemetry

        try:
            configure_telemetry(
                service_name=config.telemetry.service_name,
                export_to_console=config.telemetry.export_to_console,
                otlp_endpoint=config.telemetry.otlp_endpoint,
            )
        except ImportError as exc:
            console.print(f"[yellow]Telemetry disabled:[/yellow] {exc}")

    try:
        gateway = create_gateway_client(config.gateway)
    except GatewayNotConfiguredError:
        gateway = None
        console.print("[dim]No gateway configured; chat relay and generate tool disabled[/dim]")

    app = create_app(build_dispatcher(config.server, gateway=gateway), config.server, gateway=gateway)
    console.print(
        f"Serving [cyan]{config.server.name}[/cyan] on "
        f"http://{config.server.host}:{config.server.port}{config.server.base_path}"
    )
    asyncio.run(run_server(app, config.server, log_level=config.logging.level))
