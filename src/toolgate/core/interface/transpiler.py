"""Transpiler protocol — converts between canonical and provider-native formats.

Each provider family (OpenAI-compatible, Anthropic, Gemini) has a concrete
transpiler that encodes canonical chat messages into the provider's request
payload and decodes the provider's responses and stream events.
"""

from collections.abc import Sequence
from typing import Any, Protocol

from toolgate.core.interface.models import CanonicalChatMessage, Completion, StreamDelta


class Transpiler(Protocol):
    """Protocol for provider-specific request encoders and response decoders."""

    def endpoint(self, model: str, *, stream: bool) -> str:
        """Return the provider-native endpoint path for a chat call."""
        ...

    def headers(self) -> dict[str, str]:
        """Return provider-specific request headers (never credentials)."""
        ...

    def to_provider(
        self,
        messages: Sequence[CanonicalChatMessage],
        *,
        model: str,
        max_tokens: int,
        temperature: float,
        stream: bool = False,
    ) -> dict[str, Any]:
        """Convert canonical messages to the provider's request body."""
        ...

    def from_provider(self, response: dict[str, Any]) -> Completion:
        """Decode a provider's full (non-streaming) response body."""
        ...

    def decode_stream_event(self, event: dict[str, Any]) -> StreamDelta:
        """Decode one parsed ``data:`` payload of the provider's SSE stream.

        Returns an empty delta for events that carry nothing of interest.
        """
        ...
