"""HTTP transport: Starlette app, SSE side channel and uvicorn runner."""

from toolgate.transport.app import ChatRequest, create_app, serve
from toolgate.transport.sse import format_event, session_events

__all__ = ["ChatRequest", "create_app", "format_event", "serve", "session_events"]
