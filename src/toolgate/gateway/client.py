"""GatewayClient — direct HTTP access to the relay's OpenAI-compatible endpoint.

Every provider is addressed through one ``/compat/chat/completions`` URL
with a ``provider/model`` model id; the relay authenticates with the
``cf-aig-authorization`` bearer token and forwards to the upstream.

Usage::

    async with GatewayClient(account_id="acc", gateway_id="default", api_token="...") as gateway:
        result = await gateway.generate(
            "Hello!", ChatOptions(provider=Provider.OPENAI, model="gpt-4o-mini")
        )
"""

from __future__ import annotations

import json
import logging
import time
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Sequence
from typing import Any

import httpx
from pydantic import ValidationError

from toolgate.core.interface.config import ChatOptions, Provider
from toolgate.core.interface.models import CanonicalChatMessage, ChatResult
from toolgate.core.interface.transpiler import Transpiler
from toolgate.core.interface.transpilers.openai import OpenAITranspiler
from toolgate.gateway.errors import (
    GatewayConnectionError,
    GatewayError,
    UnsupportedContentError,
    UpstreamError,
)
from toolgate.gateway.providers import DEFAULT_MAX_OUTPUT_TOKENS, get_external_model
from toolgate.gateway.thinking import extract_thinking
from toolgate.utils.telemetry import (
    ATTR_DURATION_MS,
    ATTR_HTTP_STATUS,
    ATTR_MODEL,
    ATTR_PROVIDER,
    get_tracer,
    record_usage,
)

_tracer = get_tracer(__name__)

DEFAULT_BASE_URL = "https://gateway.ai.cloudflare.com/v1"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_TIMEOUT = 60.0

# Shapes a decoder can trip over in a body that parsed but is not a completion.
_DECODE_ERRORS = (AttributeError, IndexError, KeyError, TypeError, ValueError, ValidationError)


# ---------------------------------------------------------------------------
# Streaming handle
# ---------------------------------------------------------------------------


class ByteStream:
    """Raw upstream stream body.

    Async-iterating yields the bytes exactly as the upstream sends them;
    ``wire_format`` names the provider whose event format they are in.
    Iteration closes the response when it finishes or is abandoned, and
    :meth:`aclose` may be called at any time.
    """

    def __init__(self, response: httpx.Response, wire_format: Provider) -> None:
        self.response = response
        self.wire_format = wire_format
        self._closed = False

    def __aiter__(self) -> AsyncIterator[bytes]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[bytes]:
        try:
            async for chunk in self.response.aiter_bytes():
                yield chunk
        finally:
            await self.aclose()

    async def aclose(self) -> None:
        if not self._closed:
            self._closed = True
            await self.response.aclose()

    @property
    def closed(self) -> bool:
        return self._closed


# ---------------------------------------------------------------------------
# Shared client behaviour
# ---------------------------------------------------------------------------


class BaseGatewayClient(ABC):
    """Option resolution, timing, tracing and response decoding.

    Subclasses decide where requests go (:meth:`_send`) and which wire
    format they speak (:meth:`_transpiler`, :meth:`_wire_format`).
    """

    def __init__(
        self,
        *,
        default_temperature: float = DEFAULT_TEMPERATURE,
        fallback_max_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS,
        logger: logging.Logger | None = None,
    ) -> None:
        self.default_temperature = default_temperature
        self.fallback_max_tokens = fallback_max_tokens
        self._logger = logger or logging.getLogger(__name__)

    @abstractmethod
    def is_configured(self) -> bool:
        """Return ``True`` when the client has what it needs to send requests."""
        ...

    async def generate(self, prompt: str, options: ChatOptions) -> ChatResult:
        """Single-prompt convenience over :meth:`chat`.

        ``options.system_prompt``, when set, is sent as a leading system turn.
        """
        messages: list[CanonicalChatMessage] = []
        if options.system_prompt:
            messages.append(CanonicalChatMessage.system(options.system_prompt))
        messages.append(CanonicalChatMessage.user(prompt))
        return await self.chat(messages, options)

    async def chat(
        self, messages: Sequence[CanonicalChatMessage], options: ChatOptions
    ) -> ChatResult:
        """Run a blocking chat completion.

        Raises:
            UpstreamError: If the upstream answers with a non-2xx status.
            GatewayConnectionError: If the upstream cannot be reached or the
                connection drops while the body is read.
            GatewayError: If the body is not a completion in the expected
                wire format.
        """
        self._check_messages(messages)
        max_tokens, temperature = self._resolve(options)
        transpiler = self._transpiler(options.provider)

        with _tracer.start_as_current_span("gateway.chat") as span:
            span.set_attribute(ATTR_PROVIDER, options.provider.value)
            span.set_attribute(ATTR_MODEL, options.model)

            started = time.perf_counter()
            response = await self._send(
                messages, options, max_tokens=max_tokens, temperature=temperature, stream=False
            )
            await _read_body(response)
            duration_ms = int((time.perf_counter() - started) * 1000)

            span.set_attribute(ATTR_HTTP_STATUS, response.status_code)
            span.set_attribute(ATTR_DURATION_MS, duration_ms)
            if not response.is_success:
                self._logger.warning(
                    "Upstream error %s for %s/%s",
                    response.status_code,
                    options.provider.value,
                    options.model,
                    extra={"provider": options.provider.value, "status": response.status_code},
                )
                raise UpstreamError(response.status_code, response.text)

            body = _json_body(response)
            try:
                completion = transpiler.from_provider(body)
            except _DECODE_ERRORS as exc:
                msg = f"Upstream returned an unexpected body ({response.status_code}): {exc}"
                raise GatewayError(msg) from exc
            record_usage(span, completion.usage)

        thinking, text = completion.thinking, completion.text
        if thinking is None:
            thinking, text = extract_thinking(text)

        self._logger.debug(
            "Chat completed in %d ms",
            duration_ms,
            extra={"provider": options.provider.value, "model": options.model},
        )
        return ChatResult(
            response=text,
            provider=options.provider.value,
            model=options.model,
            duration_ms=duration_ms,
            usage=completion.usage,
            thinking=thinking,
        )

    async def chat_stream(
        self, messages: Sequence[CanonicalChatMessage], options: ChatOptions
    ) -> ByteStream:
        """Open a streaming completion and return its raw body.

        Only the handshake is checked: a non-2xx status has its body read,
        the response closed and :class:`UpstreamError` raised.  Errors that
        arrive later are reported inside the stream.
        """
        self._check_messages(messages)
        return await self._open_stream(messages, options)

    async def aclose(self) -> None:
        """Release any HTTP resources the client owns."""

    async def __aenter__(self) -> BaseGatewayClient:
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Hooks and helpers
    # ------------------------------------------------------------------

    @abstractmethod
    def _transpiler(self, provider: Provider) -> Transpiler:
        """Decoder for blocking responses to *provider* requests."""
        ...

    @abstractmethod
    def _wire_format(self, provider: Provider) -> Provider:
        """Provider whose event format streamed bodies are in."""
        ...

    @abstractmethod
    async def _send(
        self,
        messages: Sequence[CanonicalChatMessage],
        options: ChatOptions,
        *,
        max_tokens: int,
        temperature: float,
        stream: bool,
    ) -> httpx.Response:
        """Issue the request and return the (possibly unread) response."""
        ...

    def _check_messages(self, messages: Sequence[CanonicalChatMessage]) -> None:
        """Reject content this transport cannot carry."""

    def _resolve(self, options: ChatOptions) -> tuple[int, float]:
        max_tokens = options.max_tokens
        if max_tokens is None:
            model = get_external_model(options.provider, options.model)
            max_tokens = model.max_output_tokens if model is not None else self.fallback_max_tokens
        temperature = (
            options.temperature if options.temperature is not None else self.default_temperature
        )
        return max_tokens, temperature

    async def _open_stream(
        self, messages: Sequence[CanonicalChatMessage], options: ChatOptions
    ) -> ByteStream:
        max_tokens, temperature = self._resolve(options)
        with _tracer.start_as_current_span("gateway.chat_stream") as span:
            span.set_attribute(ATTR_PROVIDER, options.provider.value)
            span.set_attribute(ATTR_MODEL, options.model)

            response = await self._send(
                messages, options, max_tokens=max_tokens, temperature=temperature, stream=True
            )
            span.set_attribute(ATTR_HTTP_STATUS, response.status_code)
            if not response.is_success:
                await _read_body(response)
                self._logger.warning(
                    "Upstream streaming error %s for %s/%s",
                    response.status_code,
                    options.provider.value,
                    options.model,
                    extra={"provider": options.provider.value, "status": response.status_code},
                )
                raise UpstreamError(response.status_code, response.text, streaming=True)

        return ByteStream(response, self._wire_format(options.provider))


async def _read_body(response: httpx.Response) -> None:
    try:
        await response.aread()
    except httpx.TransportError as exc:
        raise GatewayConnectionError(f"Connection lost while reading the upstream body: {exc}") from exc
    finally:
        await response.aclose()


def _json_body(response: httpx.Response) -> dict[str, Any]:
    try:
        body = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        msg = f"Upstream returned a non-JSON body ({response.status_code})"
        raise GatewayError(msg) from exc
    if not isinstance(body, dict):
        msg = f"Upstream returned an unexpected body ({response.status_code})"
        raise GatewayError(msg)
    return body


# ---------------------------------------------------------------------------
# Direct client
# ---------------------------------------------------------------------------


class GatewayClient(BaseGatewayClient):
    """Token-authenticated client for the relay's ``/compat`` endpoint.

    Text-only: message content must be a plain string.  Use
    :class:`~toolgate.gateway.binding.GatewayBindingClient` for images,
    documents and files.
    """

    def __init__(
        self,
        *,
        account_id: str,
        gateway_id: str,
        api_token: str | None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: httpx.AsyncClient | None = None,
        default_temperature: float = DEFAULT_TEMPERATURE,
        fallback_max_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(
            default_temperature=default_temperature,
            fallback_max_tokens=fallback_max_tokens,
            logger=logger,
        )
        self.api_token = api_token
        self.endpoint_url = f"{base_url.rstrip('/')}/{account_id}/{gateway_id}/compat/chat/completions"
        self._timeout = timeout
        self._client = http_client
        self._owns_client = http_client is None
        self._openai = OpenAITranspiler()

    def is_configured(self) -> bool:
        return bool(self.api_token)

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    def _transpiler(self, provider: Provider) -> Transpiler:
        return self._openai

    def _wire_format(self, provider: Provider) -> Provider:
        return Provider.OPENAI

    def _check_messages(self, messages: Sequence[CanonicalChatMessage]) -> None:
        for message in messages:
            if message.is_multimodal:
                msg = (
                    "The direct gateway client only accepts text content; "
                    "use the binding client for multimodal messages"
                )
                raise UnsupportedContentError(msg)

    async def _send(
        self,
        messages: Sequence[CanonicalChatMessage],
        options: ChatOptions,
        *,
        max_tokens: int,
        temperature: float,
        stream: bool,
    ) -> httpx.Response:
        payload = self._openai.to_provider(
            messages,
            model=options.full_model,
            max_tokens=max_tokens,
            temperature=temperature,
            stream=stream,
        )
        client = self._http()
        request = client.build_request(
            "POST",
            self.endpoint_url,
            json=payload,
            headers={"cf-aig-authorization": f"Bearer {self.api_token}"},
        )
        try:
            return await client.send(request, stream=True)
        except httpx.TransportError as exc:
            raise GatewayConnectionError(str(exc)) from exc
