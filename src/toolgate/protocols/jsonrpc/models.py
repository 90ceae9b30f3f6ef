"""JSON-RPC 2.0 envelope models and MCP-subset constants.

Requests arrive as plain dicts from the transport layer; the dispatcher
validates them into :class:`JsonRpcRequest` and renders
:class:`JsonRpcResponse` objects back with :meth:`JsonRpcResponse.to_wire`.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, StrictStr

PROTOCOL_VERSION = "2024-11-05"
JSONRPC_VERSION = "2.0"

# ---------------------------------------------------------------------------
# Error codes
# ---------------------------------------------------------------------------

INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

RequestId = int | str | None


# ---------------------------------------------------------------------------
# Envelope
# ---------------------------------------------------------------------------


class JsonRpcRequest(BaseModel):
    """A JSON-RPC 2.0 request or notification."""

    model_config = ConfigDict(extra="ignore")

    jsonrpc: StrictStr
    method: StrictStr
    params: dict[str, Any] | None = None
    id: RequestId = None


class JsonRpcError(BaseModel):
    """A JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None


class JsonRpcResponse(BaseModel):
    """A JSON-RPC 2.0 response carrying exactly one of result or error."""

    jsonrpc: str = JSONRPC_VERSION
    id: RequestId = None
    result: Any = None
    error: JsonRpcError | None = None

    @classmethod
    def success(cls, request_id: RequestId, result: Any) -> JsonRpcResponse:
        return cls(id=request_id, result=result)

    @classmethod
    def failure(
        cls,
        request_id: RequestId,
        code: int,
        message: str,
        data: Any = None,
    ) -> JsonRpcResponse:
        return cls(id=request_id, error=JsonRpcError(code=code, message=message, data=data))

    def to_wire(self) -> dict[str, Any]:
        """Serialize with ``result`` XOR ``error`` and an explicit ``id``."""
        wire: dict[str, Any] = {"jsonrpc": self.jsonrpc}
        if self.error is not None:
            wire["error"] = self.error.model_dump(exclude_none=True)
        else:
            wire["result"] = self.result
        wire["id"] = self.id
        return wire


# ---------------------------------------------------------------------------
# Server identity
# ---------------------------------------------------------------------------


class ServerInfo(BaseModel):
    """Identity reported by ``initialize`` and the server info endpoint."""

    name: str
    version: str
    instructions: str = ""
