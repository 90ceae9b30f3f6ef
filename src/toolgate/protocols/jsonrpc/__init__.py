"""JSON-RPC 2.0 envelope and dispatcher."""

from toolgate.protocols.jsonrpc.dispatcher import NOTIFICATION_METHODS, RpcDispatcher
from toolgate.protocols.jsonrpc.models import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PROTOCOL_VERSION,
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
    ServerInfo,
)

__all__ = [
    "INTERNAL_ERROR",
    "INVALID_PARAMS",
    "INVALID_REQUEST",
    "METHOD_NOT_FOUND",
    "NOTIFICATION_METHODS",
    "PROTOCOL_VERSION",
    "JsonRpcError",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "RpcDispatcher",
    "ServerInfo",
]
