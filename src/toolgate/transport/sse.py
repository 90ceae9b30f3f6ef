"""Server-sent event side channel for JSON-RPC clients.

A client opens ``GET {base}/sse`` and receives the URL to POST requests to,
a session id, then a keep-alive ``ping`` every ``interval`` seconds until it
disconnects.  The session id is informational; requests are not tied to it.
"""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import AsyncIterator
from datetime import UTC, datetime

DEFAULT_KEEPALIVE_INTERVAL = 30.0


def format_event(event: str, data: str) -> str:
    """Render one named SSE event."""
    return f"event: {event}\ndata: {data}\n\n"


def iso_timestamp(moment: datetime | None = None) -> str:
    """UTC timestamp with millisecond precision and a ``Z`` suffix."""
    moment = moment or datetime.now(UTC)
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


async def session_events(
    endpoint_url: str,
    session_id: str | None = None,
    interval: float = DEFAULT_KEEPALIVE_INTERVAL,
) -> AsyncIterator[str]:
    """Yield ``endpoint``, ``session``, then ``ping`` events forever.

    The generator never ends on its own; the HTTP layer stops it when the
    client goes away.
    """
    yield format_event("endpoint", endpoint_url)
    yield format_event("session", session_id or str(uuid.uuid4()))
    while True:
        await asyncio.sleep(interval)
        yield format_event("ping", iso_timestamp())
