"""Protocol layer — tool registry, schema translation and JSON-RPC dispatch."""

from toolgate.protocols.errors import (
    DuplicateToolError,
    ProtocolError,
    RegistryFrozenError,
    RpcError,
    ToolArgumentsError,
    ToolError,
    ToolNotFoundError,
)
from toolgate.protocols.jsonrpc import RpcDispatcher, ServerInfo
from toolgate.protocols.tools import ToolRegistry

__all__ = [
    "DuplicateToolError",
    "ProtocolError",
    "RegistryFrozenError",
    "RpcDispatcher",
    "RpcError",
    "ServerInfo",
    "ToolArgumentsError",
    "ToolError",
    "ToolNotFoundError",
    "ToolRegistry",
]
