"""Starlette application exposing the dispatcher (and optionally chat) over HTTP.

Routes, relative to ``ServerSettings.base_path``::

    GET  {base}           server info document
    GET  {base}/sse       SSE side channel (endpoint, session, pings)
    POST {base}/sse       JSON-RPC request or batch
    POST {base}/message   JSON-RPC request or batch
    POST {chat_path}      chat completion relay (only with a gateway client)

Notifications are acknowledged with ``202 Accepted`` and an empty body.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import BaseModel, Field, ValidationError
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, Response, StreamingResponse
from starlette.routing import Route

from toolgate.core.interface.config import ChatOptions, parse_external_model
from toolgate.core.interface.models import CanonicalChatMessage, ChatResult
from toolgate.gateway.binding import GatewayBindingClient
from toolgate.gateway.client import BaseGatewayClient
from toolgate.gateway.errors import (
    GatewayError,
    UnknownProviderError,
    UnsupportedContentError,
    UpstreamError,
)
from toolgate.gateway.providers import resolve_provider
from toolgate.gateway.stream import encode_sse, normalize_stream
from toolgate.protocols.jsonrpc.dispatcher import RpcDispatcher
from toolgate.protocols.jsonrpc.models import INVALID_REQUEST, JsonRpcResponse
from toolgate.sdk.models import ServerSettings
from toolgate.transport.sse import session_events

logger = logging.getLogger(__name__)

PARSE_ERROR = -32700


class ChatRequest(BaseModel):
    """Body of ``POST {chat_path}``."""

    model: str
    messages: list[CanonicalChatMessage] = Field(min_length=1)
    stream: bool = True
    max_tokens: int | None = Field(default=None, gt=0)
    temperature: float | None = Field(default=None, ge=0, le=2)


def create_app(
    dispatcher: RpcDispatcher,
    settings: ServerSettings | None = None,
    *,
    gateway: BaseGatewayClient | None = None,
    chat_path: str = "/api/chat",
) -> Starlette:
    """Build the ASGI app serving *dispatcher*."""
    settings = settings or ServerSettings()
    base = settings.base_path

    async def server_info(request: Request) -> Response:
        return JSONResponse(dispatcher.describe(base))

    async def sse(request: Request) -> Response:
        endpoint = f"{request.url.scheme}://{request.url.netloc}{base}/sse"
        return StreamingResponse(
            session_events(endpoint, interval=settings.keepalive_interval),
            media_type="text/event-stream",
            headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
        )

    async def message(request: Request) -> Response:
        try:
            payload = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            return JSONResponse(
                JsonRpcResponse.failure(None, PARSE_ERROR, "Parse error").to_wire(),
                status_code=400,
            )

        if isinstance(payload, list):
            if not payload:
                return JSONResponse(
                    JsonRpcResponse.failure(None, INVALID_REQUEST, "Invalid Request - empty batch").to_wire()
                )
            result: Any = await dispatcher.handle_batch(payload)
        else:
            result = await dispatcher.handle(payload)

        if result is None:
            return Response(status_code=202)
        return JSONResponse(result)

    routes = [
        Route(base or "/", server_info, methods=["GET"]),
        Route(f"{base}/sse", sse, methods=["GET"]),
        Route(f"{base}/sse", message, methods=["POST"]),
        Route(f"{base}/message", message, methods=["POST"]),
    ]
    if gateway is not None:
        routes.append(Route(chat_path, _chat_endpoint(gateway), methods=["POST"]))

    return Starlette(routes=routes)


# ---------------------------------------------------------------------------
# Chat relay
# ---------------------------------------------------------------------------


def _chat_endpoint(gateway: BaseGatewayClient) -> Any:
    async def chat(request: Request) -> Response:
        try:
            body = ChatRequest.model_validate(await request.json())
        except (json.JSONDecodeError, UnicodeDecodeError):
            return _error("Request body must be JSON", 400)
        except ValidationError as exc:
            return _error(str(exc), 422)

        route = parse_external_model(body.model)
        if route is None:
            return _error(f"Not an external model: {body.model}", 400)
        try:
            provider = resolve_provider(route.provider)
        except UnknownProviderError as exc:
            return _error(str(exc), 400)

        options = ChatOptions(
            provider=provider,
            model=route.model,
            max_tokens=body.max_tokens,
            temperature=body.temperature,
        )
        multimodal = any(msg.is_multimodal for msg in body.messages)

        try:
            if not body.stream:
                return JSONResponse(_chat_result_to_wire(await gateway.chat(body.messages, options)))
            if multimodal and isinstance(gateway, GatewayBindingClient):
                stream = await gateway.chat_multimodal_stream(body.messages, options)
            else:
                stream = await gateway.chat_stream(body.messages, options)
        except UnsupportedContentError as exc:
            return _error(str(exc), 400)
        except UpstreamError as exc:
            logger.warning("Chat relay upstream failure: %s", exc, extra={"status": exc.status_code})
            return _error(str(exc), 502)
        except GatewayError as exc:
            logger.warning("Chat relay failure: %s", exc)
            return _error(str(exc), 502)

        return StreamingResponse(
            encode_sse(normalize_stream(stream)),
            media_type="text/event-stream",
            headers={"Cache-Control": "no-cache"},
        )

    return chat


def _chat_result_to_wire(result: ChatResult) -> dict[str, Any]:
    wire: dict[str, Any] = {
        "response": result.response,
        "provider": result.provider,
        "model": result.model,
        "durationMs": result.duration_ms,
    }
    if result.usage is not None:
        wire["usage"] = result.usage.to_wire()
    if result.thinking is not None:
        wire["thinking"] = result.thinking
    return wire


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


# ---------------------------------------------------------------------------
# Serving
# ---------------------------------------------------------------------------


async def serve(app: Starlette, settings: ServerSettings, *, log_level: str = "info") -> None:
    """Run *app* under uvicorn until interrupted."""
    import uvicorn

    config = uvicorn.Config(
        app,
        host=settings.host,
        port=settings.port,
        log_level=log_level.lower(),
    )
    server = uvicorn.Server(config)
    await server.serve()
