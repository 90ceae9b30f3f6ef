"""Shared CLI output formatters."""

from __future__ import annotations

import json
from typing import Any

from rich.console import Console
from rich.table import Table

from toolgate.core.interface.config import Provider  # noqa: TC001
from toolgate.gateway.providers import ProviderModelConfig  # noqa: TC001

console = Console()


def print_models_table(models: list[tuple[Provider, ProviderModelConfig]]) -> None:
    """Pretty-print provider models as a table."""
    table = Table(title="Upstream Models")
    table.add_column("Model", style="cyan")
    table.add_column("Context", justify="right")
    table.add_column("Max Output", justify="right")
    table.add_column("Capabilities")
    table.add_column("Description")

    for provider, model in models:
        table.add_row(
            f"{provider.value}/{model.id}",
            f"{model.context_window:,}",
            f"{model.max_output_tokens:,}",
            _capabilities(model),
            _truncate(model.description, 40),
        )

    console.print(table)


def print_tools_table(tools: list[dict[str, Any]]) -> None:
    """Pretty-print ``tools/list`` entries as a table."""
    table = Table(title="Registered Tools")
    table.add_column("Name", style="cyan")
    table.add_column("Parameters")
    table.add_column("Description")

    for tool in tools:
        schema = tool.get("inputSchema", {})
        required = set(schema.get("required", []))
        params = ", ".join(
            name if name in required else f"{name}?" for name in schema.get("properties", {})
        )
        table.add_row(tool.get("name", "?"), params or "-", _truncate(tool.get("description", "")))

    console.print(table)


def print_json(data: Any) -> None:
    console.print_json(json.dumps(data, default=str))


def _capabilities(model: ProviderModelConfig) -> str:
    flags = [
        name
        for name, enabled in (
            ("stream", model.supports_streaming),
            ("vision", model.supports_vision),
            ("pdf", model.supports_pdf),
        )
        if enabled
    ]
    return ", ".join(flags) or "-"


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
