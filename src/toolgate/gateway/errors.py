"""Error types for the provider adapter layer."""

from __future__ import annotations


class GatewayError(Exception):
    """Base error for all gateway failures."""


class UpstreamError(GatewayError):
    """The relay or provider answered with a non-2xx status.

    The body is read eagerly so the message is self-contained even after the
    response has been closed.
    """

    def __init__(self, status_code: int, body: str, *, streaming: bool = False) -> None:
        self.status_code = status_code
        self.body = body
        self.streaming = streaming
        kind = "streaming error" if streaming else "error"
        super().__init__(f"AI Gateway {kind} ({status_code}): {body}")


class GatewayConnectionError(GatewayError):
    """The upstream could not be reached at all (DNS, connect, timeout)."""


class UnsupportedContentError(GatewayError):
    """The client cannot carry the given message content.

    Raised by the direct client for multimodal part lists, before any I/O.
    """


class UnknownProviderError(GatewayError):
    """A provider identifier is not in the model table."""

    def __init__(self, provider: str) -> None:
        self.provider = provider
        super().__init__(f"Unknown provider: {provider}")


class GatewayNotConfiguredError(GatewayError):
    """Neither an API token nor a binding is available."""
