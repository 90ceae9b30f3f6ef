"""GatewayBindingClient — provider-native calls through a platform binding.

The binding is a capability handed to the process by the hosting platform:
it forwards ``{provider, endpoint, headers, query}`` to the relay, which
injects the credentials stored for that provider.  The client therefore
never holds an API key, and it speaks each provider's own wire format,
which is what makes images, documents and files possible.

Usage::

    binding = HttpGatewayBinding("http://relay.internal/v1/acc/default")
    client = GatewayBindingClient(binding)
    stream = await client.chat_multimodal_stream(messages, options)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

import httpx
from pydantic import BaseModel, Field

from toolgate.core.interface.config import ChatOptions, Provider
from toolgate.core.interface.models import CanonicalChatMessage
from toolgate.core.interface.transpiler import Transpiler
from toolgate.core.interface.transpilers import get_transpiler
from toolgate.gateway.client import (
    DEFAULT_TEMPERATURE,
    DEFAULT_TIMEOUT,
    BaseGatewayClient,
    ByteStream,
)
from toolgate.gateway.errors import GatewayConnectionError, GatewayNotConfiguredError
from toolgate.gateway.providers import DEFAULT_MAX_OUTPUT_TOKENS


class GatewayRunRequest(BaseModel):
    """One provider-native call routed through the binding."""

    provider: str
    endpoint: str
    headers: dict[str, str] = Field(default_factory=dict)
    query: dict[str, Any]


@runtime_checkable
class GatewayBinding(Protocol):
    """Platform capability that forwards a request to the relay.

    The returned response may still be unread; the caller reads or closes it.
    """

    async def run(self, request: GatewayRunRequest) -> httpx.Response: ...


class HttpGatewayBinding:
    """Binding implemented over plain HTTP.

    POSTs ``query`` as JSON to ``{base_url}/{provider}/{endpoint}``.  Any
    fixed ``headers`` (for example a relay-side credential for the whole
    deployment) are sent with every call.
    """

    def __init__(
        self,
        base_url: str,
        *,
        headers: dict[str, str] | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._headers = dict(headers or {})
        self._timeout = timeout
        self._client = http_client
        self._owns_client = http_client is None

    def url_for(self, request: GatewayRunRequest) -> str:
        return f"{self.base_url}/{request.provider}/{request.endpoint.lstrip('/')}"

    async def run(self, request: GatewayRunRequest) -> httpx.Response:
        client = self._http()
        http_request = client.build_request(
            "POST",
            self.url_for(request),
            json=request.query,
            headers={**self._headers, **request.headers},
        )
        try:
            return await client.send(http_request, stream=True)
        except httpx.TransportError as exc:
            raise GatewayConnectionError(str(exc)) from exc

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client


class GatewayBindingClient(BaseGatewayClient):
    """Adapter that speaks each provider's native API through a binding.

    Unlike :class:`~toolgate.gateway.client.GatewayClient` it accepts
    multimodal content on every call.
    """

    def __init__(
        self,
        binding: GatewayBinding | None,
        *,
        default_temperature: float = DEFAULT_TEMPERATURE,
        fallback_max_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(
            default_temperature=default_temperature,
            fallback_max_tokens=fallback_max_tokens,
            logger=logger,
        )
        self.binding = binding

    def is_configured(self) -> bool:
        return self.binding is not None

    async def chat_multimodal_stream(
        self, messages: Sequence[CanonicalChatMessage], options: ChatOptions
    ) -> ByteStream:
        """Stream a completion whose messages may carry images, documents or files."""
        return await self._open_stream(messages, options)

    async def aclose(self) -> None:
        closer = getattr(self.binding, "aclose", None)
        if closer is not None:
            await closer()

    def _transpiler(self, provider: Provider) -> Transpiler:
        return get_transpiler(provider)

    def _wire_format(self, provider: Provider) -> Provider:
        return provider

    async def _send(
        self,
        messages: Sequence[CanonicalChatMessage],
        options: ChatOptions,
        *,
        max_tokens: int,
        temperature: float,
        stream: bool,
    ) -> httpx.Response:
        if self.binding is None:
            msg = "No gateway binding is available"
            raise GatewayNotConfiguredError(msg)

        transpiler = get_transpiler(options.provider)
        request = GatewayRunRequest(
            provider=options.provider.value,
            endpoint=transpiler.endpoint(options.model, stream=stream),
            headers=transpiler.headers(),
            query=transpiler.to_provider(
                messages,
                model=options.model,
                max_tokens=max_tokens,
                temperature=temperature,
                stream=stream,
            ),
        )
        self._logger.debug(
            "Binding call %s %s",
            request.provider,
            request.endpoint,
            extra={"provider": request.provider, "stream": stream},
        )
        return await self.binding.run(request)
