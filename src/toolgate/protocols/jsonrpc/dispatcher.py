"""RpcDispatcher — maps one JSON-RPC request onto the tool registry.

Tool-level problems (unknown tool, bad arguments, a handler raising
:class:`~toolgate.protocols.errors.ToolError`) come back as ``isError`` tool
results inside a successful envelope.  Only envelope faults, unknown methods,
stub lookups and unexpected exceptions become JSON-RPC errors.

Usage::

    dispatcher = RpcDispatcher(registry, ServerInfo(name="demo", version="1.0.0"))
    response = await dispatcher.handle({"jsonrpc": "2.0", "method": "ping", "id": 1})
    # {"jsonrpc": "2.0", "result": {}, "id": 1}
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from pydantic import ValidationError

from toolgate.core.interface.models import ToolResult
from toolgate.protocols.errors import RpcError, ToolArgumentsError, ToolError, ToolNotFoundError
from toolgate.protocols.jsonrpc.models import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    JSONRPC_VERSION,
    METHOD_NOT_FOUND,
    PROTOCOL_VERSION,
    JsonRpcRequest,
    JsonRpcResponse,
    RequestId,
    ServerInfo,
)
from toolgate.protocols.tools.registry import ToolRegistry
from toolgate.protocols.tools.results import error_response
from toolgate.utils.telemetry import (
    ATTR_RPC_ERROR_CODE,
    ATTR_RPC_METHOD,
    ATTR_TOOL_IS_ERROR,
    ATTR_TOOL_NAME,
    get_tracer,
)

_tracer = get_tracer(__name__)

NOTIFICATION_METHODS = frozenset({"initialized", "notifications/cancelled"})

_Method = Callable[[dict[str, Any]], Awaitable[Any]]


class RpcDispatcher:
    """Stateless per-request JSON-RPC 2.0 dispatcher.

    The registry is frozen on construction; its contents are read-only from
    then on so concurrent requests need no locking.
    """

    def __init__(
        self,
        registry: ToolRegistry,
        server_info: ServerInfo,
        logger: logging.Logger | None = None,
    ) -> None:
        registry.freeze()
        self.registry = registry
        self.server_info = server_info
        self._logger = logger or logging.getLogger(__name__)
        self._methods: dict[str, _Method] = {
            "initialize": self._initialize,
            "tools/list": self._tools_list,
            "tools/call": self._tools_call,
            "resources/list": self._resources_list,
            "resources/read": self._resources_read,
            "prompts/list": self._prompts_list,
            "prompts/get": self._prompts_get,
            "ping": self._ping,
        }

    async def handle(self, payload: Any) -> dict[str, Any] | None:
        """Dispatch one decoded request.

        Returns the response envelope, or ``None`` for notifications.
        """
        request_id = _raw_id(payload)

        if not isinstance(payload, dict) or payload.get("jsonrpc") != JSONRPC_VERSION:
            return JsonRpcResponse.failure(
                request_id, INVALID_REQUEST, "Invalid Request - must be JSON-RPC 2.0"
            ).to_wire()

        try:
            request = JsonRpcRequest.model_validate(payload)
        except ValidationError:
            return JsonRpcResponse.failure(
                request_id, INVALID_REQUEST, "Invalid Request - malformed envelope"
            ).to_wire()

        if request.method in NOTIFICATION_METHODS:
            self._logger.debug("Notification %s", request.method)
            return None

        response = await self._dispatch(request)
        if "id" not in payload:
            # A request without an id is a notification: run it, answer nothing.
            return None
        return response.to_wire()

    async def handle_batch(self, payloads: list[Any]) -> list[dict[str, Any]] | None:
        """Dispatch each element in order, dropping notification results."""
        responses = []
        for payload in payloads:
            response = await self.handle(payload)
            if response is not None:
                responses.append(response)
        return responses or None

    def describe(self, base_path: str = "") -> dict[str, Any]:
        """Return the server info document served on ``GET {base_path}``."""
        base = base_path.rstrip("/")
        return {
            "name": self.server_info.name,
            "version": self.server_info.version,
            "description": f"MCP server for {self.server_info.name}",
            "transports": {
                "streamableHttp": f"{base}/message",
                "sse": f"{base}/sse",
            },
            "tools": [
                {"name": tool.name, "description": tool.description}
                for tool in self.registry
            ],
        }

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    async def _dispatch(self, request: JsonRpcRequest) -> JsonRpcResponse:
        with _tracer.start_as_current_span("rpc.dispatch") as span:
            span.set_attribute(ATTR_RPC_METHOD, request.method)

            method = self._methods.get(request.method)
            if method is None:
                span.set_attribute(ATTR_RPC_ERROR_CODE, METHOD_NOT_FOUND)
                return JsonRpcResponse.failure(
                    request.id, METHOD_NOT_FOUND, f"Method not found: {request.method}"
                )

            try:
                result = await method(request.params or {})
            except RpcError as exc:
                span.set_attribute(ATTR_RPC_ERROR_CODE, exc.code)
                return JsonRpcResponse.failure(request.id, exc.code, exc.message)
            except Exception as exc:
                self._logger.exception(
                    "%s method %s failed",
                    self.server_info.name,
                    request.method,
                    extra={"method": request.method, "request_id": request.id},
                )
                span.record_exception(exc)
                span.set_attribute(ATTR_RPC_ERROR_CODE, INTERNAL_ERROR)
                return JsonRpcResponse.failure(
                    request.id, INTERNAL_ERROR, str(exc) or "Internal error"
                )

            return JsonRpcResponse.success(request.id, result)

    # ------------------------------------------------------------------
    # Methods
    # ------------------------------------------------------------------

    async def _initialize(self, params: dict[str, Any]) -> dict[str, Any]:
        return {
            "protocolVersion": PROTOCOL_VERSION,
            "serverInfo": {
                "name": self.server_info.name,
                "version": self.server_info.version,
            },
            "capabilities": {
                "tools": {"listChanged": False},
                "resources": {"listChanged": False},
                "prompts": {"listChanged": False},
            },
            "instructions": self.server_info.instructions,
        }

    async def _tools_list(self, params: dict[str, Any]) -> dict[str, Any]:
        return {"tools": [tool.describe() for tool in self.registry]}

    async def _tools_call(self, params: dict[str, Any]) -> dict[str, Any]:
        name = params.get("name")
        arguments = params.get("arguments") or {}
        result = await self.call_tool(name if isinstance(name, str) else "", arguments)
        return result.to_wire()

    async def _resources_list(self, params: dict[str, Any]) -> dict[str, Any]:
        return {"resources": []}

    async def _resources_read(self, params: dict[str, Any]) -> dict[str, Any]:
        raise RpcError(INVALID_PARAMS, "Resource not found")

    async def _prompts_list(self, params: dict[str, Any]) -> dict[str, Any]:
        return {"prompts": []}

    async def _prompts_get(self, params: dict[str, Any]) -> dict[str, Any]:
        raise RpcError(INVALID_PARAMS, "Prompt not found")

    async def _ping(self, params: dict[str, Any]) -> dict[str, Any]:
        return {}

    # ------------------------------------------------------------------
    # Tool execution
    # ------------------------------------------------------------------

    async def call_tool(self, name: str, arguments: Any) -> ToolResult:
        """Validate *arguments* and run the named tool.

        Lookup, validation and :class:`ToolError` failures are returned as
        ``isError`` results; any other exception propagates.
        """
        with _tracer.start_as_current_span("tool.call") as span:
            span.set_attribute(ATTR_TOOL_NAME, name)
            try:
                tool = self.registry.require(name)
                parsed = tool.validator.validate(arguments)
                result = await tool.handler(parsed)
            except (ToolNotFoundError, ToolArgumentsError) as exc:
                self._logger.info("Tool call rejected: %s", exc, extra={"tool": name})
                result = error_response(str(exc))
            except ToolError as exc:
                self._logger.info("Tool %s reported an error: %s", name, exc, extra={"tool": name})
                result = error_response(str(exc), **exc.details)

            span.set_attribute(ATTR_TOOL_IS_ERROR, result.is_error)
            return result


def _raw_id(payload: Any) -> RequestId:
    """Best-effort id echo for envelopes that fail validation."""
    if isinstance(payload, dict):
        value = payload.get("id")
        if isinstance(value, int | str) and not isinstance(value, bool):
            return value
    return None
