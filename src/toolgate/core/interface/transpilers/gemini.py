"""Gemini transpiler — maps assistant->model role and generationConfig.

Key differences from the canonical format:
- Role "assistant" becomes "model".
- System instructions are passed via a separate "system_instruction" field.
- The model id lives in the endpoint path, not the request body.
- Streams carry whole candidate snapshots with no terminal sentinel; reasoning
  arrives as parts flagged ``thought: true``.
"""

from collections.abc import Sequence
from typing import Any

from toolgate.core.interface.media import split_data_url
from toolgate.core.interface.models import (
    CanonicalChatMessage,
    Completion,
    ContentPart,
    DocumentContent,
    ImageContent,
    StreamDelta,
    TextContent,
    Usage,
)


class GeminiTranspiler:
    """Converts between canonical messages and Gemini's generateContent format."""

    def endpoint(self, model: str, *, stream: bool) -> str:
        if stream:
            return f"v1beta/models/{model}:streamGenerateContent?alt=sse"
        return f"v1beta/models/{model}:generateContent"

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
        """Build a generateContent request body.

        ``model`` and ``stream`` are carried by :meth:`endpoint` instead.
        """
        payload: dict[str, Any] = {}

        system_parts = [msg.text for msg in messages if msg.role == "system"]
        if system_parts:
            payload["system_instruction"] = {"parts": [{"text": text} for text in system_parts]}

        payload["contents"] = [
            self._message_to_gemini(msg) for msg in messages if msg.role != "system"
        ]
        payload["generationConfig"] = {
            "maxOutputTokens": max_tokens,
            "temperature": temperature,
        }
        return payload

    def from_provider(self, response: dict[str, Any]) -> Completion:
        """Convert a Gemini generateContent response to a Completion."""
        delta = self.decode_stream_event(response)
        finish_reason: str | None = None
        candidates = response.get("candidates") or []
        if candidates:
            finish_reason = candidates[0].get("finishReason")
        return Completion(
            text=delta.text or "",
            thinking=delta.thinking,
            usage=delta.usage,
            finish_reason=finish_reason,
        )

    def decode_stream_event(self, event: dict[str, Any]) -> StreamDelta:
        """Decode one streamed GenerateContentResponse."""
        if event.get("error"):
            error = event["error"]
            message = error.get("message") if isinstance(error, dict) else error
            return StreamDelta(error=str(message or error))

        texts: list[str] = []
        thoughts: list[str] = []
        candidates = event.get("candidates") or []
        if candidates:
            content = candidates[0].get("content") or {}
            for part in content.get("parts") or []:
                if "text" not in part:
                    continue
                if part.get("thought"):
                    thoughts.append(part["text"])
                else:
                    texts.append(part["text"])

        return StreamDelta(
            text="".join(texts) or None,
            thinking="".join(thoughts) or None,
            usage=_parse_usage(event.get("usageMetadata")),
        )

    def _message_to_gemini(self, msg: CanonicalChatMessage) -> dict[str, Any]:
        role = "model" if msg.role == "assistant" else msg.role
        if isinstance(msg.content, str):
            return {"role": role, "parts": [{"text": msg.content}]}
        return {"role": role, "parts": [self._content_part_to_gemini(p) for p in msg.content]}

    def _content_part_to_gemini(self, part: ContentPart) -> dict[str, Any]:
        """Convert a ContentPart to Gemini's parts format."""
        if isinstance(part, TextContent):
            return {"text": part.text}
        if isinstance(part, ImageContent):
            if part.data:
                media_type, data = split_data_url(part.data)
                return {
                    "inline_data": {
                        "mime_type": part.media_type or media_type or "image/png",
                        "data": data,
                    }
                }
            return {"text": f"[Image: {part.url}]"}
        if isinstance(part, DocumentContent):
            _, data = split_data_url(part.data)
            return {"inline_data": {"mime_type": part.media_type, "data": data}}
        media_type, data = split_data_url(part.data)
        return {
            "inline_data": {
                "mime_type": media_type or "application/octet-stream",
                "data": data,
            }
        }


def _parse_usage(raw: Any) -> Usage | None:
    """Map ``usageMetadata`` token counts to Usage."""
    if not isinstance(raw, dict):
        return None
    return Usage(
        prompt_tokens=raw.get("promptTokenCount"),
        completion_tokens=raw.get("candidatesTokenCount"),
        total_tokens=raw.get("totalTokenCount"),
    )
