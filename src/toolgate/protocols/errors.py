"""Shared error types for the protocol layer."""


class ProtocolError(Exception):
    """Base error for all protocol-layer failures."""


class ToolNotFoundError(ProtocolError):
    """Requested tool does not exist in the registry."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Tool not found: {name}")


class ToolArgumentsError(ProtocolError):
    """Tool arguments failed schema validation."""

    def __init__(self, name: str, detail: str) -> None:
        self.name = name
        self.detail = detail
        super().__init__(f"Invalid arguments: {detail}")


class ToolError(ProtocolError):
    """A tool handler rejected the call for a business reason.

    Handlers raise this to report a tool-level failure; the dispatcher turns
    it into an ``isError`` result rather than a protocol error.
    """

    def __init__(self, message: str, **details: object) -> None:
        self.details = details
        super().__init__(message)


class DuplicateToolError(ProtocolError):
    """A tool name was registered twice."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Tool already registered: {name}")


class RegistryFrozenError(ProtocolError):
    """Registration was attempted after the registry started serving."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Cannot register {name}: registry is frozen")


class RpcError(ProtocolError):
    """A method failed with a specific JSON-RPC error code."""

    def __init__(self, code: int, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(message)
