"""toolgate — JSON-RPC tool gateway and streaming completion relay."""

from __future__ import annotations

from typing import TYPE_CHECKING

__version__ = "0.1.0"

if TYPE_CHECKING:
    from toolgate.protocols.jsonrpc.dispatcher import RpcDispatcher as RpcDispatcher
    from toolgate.protocols.tools.registry import ToolRegistry as ToolRegistry

_LAZY_EXPORTS = {
    "RpcDispatcher": "toolgate.protocols.jsonrpc.dispatcher",
    "ToolRegistry": "toolgate.protocols.tools.registry",
}


def __getattr__(name: str) -> object:
    module_path = _LAZY_EXPORTS.get(name)
    if module_path is not None:
        import importlib

        mod = importlib.import_module(module_path)
        return getattr(mod, name)
    raise AttributeError(f"module 'toolgate' has no attribute {name!r}")
