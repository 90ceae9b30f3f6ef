"""OpenAI transpiler — the chat-completions shape used by most providers.

Groq, Mistral, DeepSeek, Perplexity, xAI, Hugging Face and OpenRouter all
speak this format, as does the relay's shared ``/compat`` endpoint.
"""

from collections.abc import Sequence
from typing import Any

from toolgate.core.interface.media import to_data_url
from toolgate.core.interface.models import (
    CanonicalChatMessage,
    Completion,
    ContentPart,
    DocumentContent,
    FileContent,
    ImageContent,
    StreamDelta,
    TextContent,
    Usage,
)


class OpenAITranspiler:
    """Converts between canonical messages and OpenAI's chat completion format."""

    def endpoint(self, model: str, *, stream: bool) -> str:
        return "chat/completions"

    def headers(self) -> dict[str, str]:
        return {}

    def to_provider(
        self,
        messages: Sequence[CanonicalChatMessage],
        *,
        model: str,
        max_tokens: int,
        temperature: float,
        stream: bool = False,
    ) -> dict[str, Any]:
        """Build a chat completion request body."""
        payload: dict[str, Any] = {
            "model": model,
            "messages": [self._message_to_openai(msg) for msg in messages],
            "max_tokens": max_tokens,
            "temperature": temperature,
        }
        if stream:
            payload["stream"] = True
        return payload

    def from_provider(self, response: dict[str, Any]) -> Completion:
        """Convert an OpenAI chat completion response to a Completion."""
        choices = response.get("choices") or [{}]
        choice = choices[0]
        message = choice.get("message") or {}

        return Completion(
            text=message.get("content") or "",
            thinking=message.get("reasoning_content") or message.get("reasoning") or None,
            usage=_parse_usage(response.get("usage")),
            finish_reason=choice.get("finish_reason"),
        )

    def decode_stream_event(self, event: dict[str, Any]) -> StreamDelta:
        """Decode one ``chat.completion.chunk`` event."""
        if event.get("error"):
            return StreamDelta(error=_error_message(event["error"]))

        delta: dict[str, Any] = {}
        choices = event.get("choices")
        if choices:
            delta = choices[0].get("delta") or {}

        return StreamDelta(
            text=delta.get("content") or None,
            thinking=delta.get("reasoning_content") or delta.get("reasoning") or None,
            usage=_parse_usage(event.get("usage")),
        )

    def _message_to_openai(self, msg: CanonicalChatMessage) -> dict[str, Any]:
        if isinstance(msg.content, str):
            return {"role": msg.role, "content": msg.content}
        return {
            "role": msg.role,
            "content": [self._content_part_to_openai(part) for part in msg.content],
        }

    def _content_part_to_openai(self, part: ContentPart) -> dict[str, Any]:
        """Convert a ContentPart to OpenAI's content array format."""
        if isinstance(part, TextContent):
            return {"type": "text", "text": part.text}
        if isinstance(part, ImageContent):
            url = part.url
            if part.data:
                url = to_data_url(part.media_type or "image/png", part.data)
            return {"type": "image_url", "image_url": {"url": url}}
        if isinstance(part, DocumentContent):
            return {
                "type": "file",
                "file": {
                    "filename": "document.pdf",
                    "file_data": to_data_url(part.media_type, part.data),
                },
            }
        # FileContent is the only remaining possibility
        file: FileContent = part
        return {
            "type": "file",
            "file": {"filename": file.filename, "file_data": file.data},
        }


def _parse_usage(raw: Any) -> Usage | None:
    """Map ``prompt_tokens``/``completion_tokens``/``total_tokens`` to Usage."""
    if not isinstance(raw, dict):
        return None
    return Usage(
        prompt_tokens=raw.get("prompt_tokens"),
        completion_tokens=raw.get("completion_tokens"),
        total_tokens=raw.get("total_tokens"),
    )


def _error_message(raw: Any) -> str:
    if isinstance(raw, dict):
        return str(raw.get("message") or raw)
    return str(raw)
