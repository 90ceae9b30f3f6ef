"""``toolgate call`` — dispatch one JSON-RPC request in-process."""

from __future__ import annotations

import asyncio
import json
import sys
from typing import Any

import click

from toolgate.cli_commands._output import console, print_json


@click.command()
@click.argument("method")
@click.option("--params", "-p", default=None, help="JSON object passed as request params.")
@click.option("--id", "request_id", default="1", help="Request id (omit with --notify).")
@click.option("--notify", is_flag=True, help="Send as a notification (no id).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True),
    default=None,
    help="toolgate YAML config (enables the generate tool when a gateway is configured).",
)
def call(
    method: str,
    params: str | None,
    request_id: str,
    notify: bool,
    config_path: str | None,
) -> None:
    """Dispatch METHOD against the built-in tools and print the response.

    Example: toolgate call tools/call -p '{"name": "echo", "arguments": {"text": "hi"}}'
    """
    from toolgate.builtin import build_dispatcher
    from toolgate.gateway.errors import GatewayNotConfiguredError
    from toolgate.gateway.factory import create_gateway_client
    from toolgate.sdk.config import load_config
    from toolgate.sdk.errors import ConfigError

    try:
        parsed_params: Any = json.loads(params) if params else None
    except json.JSONDecodeError as exc:
        console.print(f"[red]Invalid --params JSON:[/red] {exc}")
        sys.exit(1)

    try:
        config = load_config(config_path)
    except ConfigError as exc:
        console.print(f"[red]Config error:[/red] {exc}")
        sys.exit(1)

    payload: dict[str, Any] = {"jsonrpc": "2.0", "method": method}
    if parsed_params is not None:
        payload["params"] = parsed_params
    if not notify:
        payload["id"] = int(request_id) if request_id.isdigit() else request_id

    async def _call() -> dict[str, Any] | None:
        try:
            gateway = create_gateway_client(config.gateway) if config_path else None
        except GatewayNotConfiguredError:
            gateway = None
        dispatcher = build_dispatcher(config.server, gateway=gateway)
        try:
            return await dispatcher.handle(payload)
        finally:
            if gateway is not None:
                await gateway.aclose()

    response = asyncio.run(_call())
    if response is None:
        console.print("[dim](notification, no response)[/dim]")
        return
    print_json(response)
