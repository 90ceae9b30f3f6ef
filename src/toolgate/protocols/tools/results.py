"""Builders for JSON-text tool results.

Every payload is a JSON object with a ``success`` flag, rendered into a
single text block so that agents can parse it back.
"""

from __future__ import annotations

import json
from typing import Any

from toolgate.core.interface.models import ToolResult


def success_response(data: dict[str, Any] | None = None) -> ToolResult:
    """Build a successful result: ``{"success": true, **data}``."""
    return ToolResult.from_text(_dumps({"success": True, **(data or {})}))


def error_response(error: str, **details: Any) -> ToolResult:
    """Build a failed result: ``{"success": false, "error": ..., **details}``."""
    return ToolResult.from_text(
        _dumps({"success": False, "error": error, **details}),
        is_error=True,
    )


def list_response(
    items: list[Any],
    *,
    item_key: str = "items",
    offset: int = 0,
    limit: int | None = None,
    total_count: int | None = None,
    query: str | None = None,
) -> ToolResult:
    """Build a list result with pagination metadata.

    With a known ``total_count`` the payload carries ``count``,
    ``totalCount``, ``offset``, ``limit`` and ``hasMore``; otherwise only
    ``count``.
    """
    payload: dict[str, Any] = {"success": True}
    if query is not None:
        payload["query"] = query

    if total_count is not None:
        payload.update(
            {
                "count": len(items),
                "totalCount": total_count,
                "offset": offset,
                "limit": limit if limit is not None else len(items),
                "hasMore": offset + len(items) < total_count,
            }
        )
    else:
        payload["count"] = len(items)

    payload[item_key] = items
    return ToolResult.from_text(_dumps(payload))


def _dumps(payload: dict[str, Any]) -> str:
    return json.dumps(payload, default=str, separators=(",", ":"))
