"""Anthropic transpiler — handles system extraction, role alternation and events.

Key differences from the canonical format:
- System message is a separate top-level parameter, not in the messages array.
- Messages must strictly alternate between user and assistant roles.
- Consecutive same-role messages must be merged.
- Streams are typed events (``message_start``, ``content_block_delta``,
  ``message_delta``, ``message_stop``) and usage is split across them.
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

ANTHROPIC_VERSION = "2023-06-01"


class AnthropicTranspiler:
    """Converts between canonical messages and Anthropic's messages API."""

    def endpoint(self, model: str, *, stream: bool) -> str:
        return "v1/messages"

    def headers(self) -> dict[str, str]:
        return {"anthropic-version": ANTHROPIC_VERSION}

    def to_provider(
        self,
        messages: Sequence[CanonicalChatMessage],
        *,
        model: str,
        max_tokens: int,
        temperature: float,
        stream: bool = False,
    ) -> dict[str, Any]:
        """Build a messages API request body.

        The system prompt is lifted out of the message list and consecutive
        same-role messages are merged.
        """
        payload: dict[str, Any] = {
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
        }

        system_parts = [msg.text for msg in messages if msg.role == "system"]
        if system_parts:
            payload["system"] = "\n\n".join(system_parts)

        raw_messages = [
            {"role": msg.role, "content": self._content_to_anthropic(msg.content)}
            for msg in messages
            if msg.role != "system"
        ]
        payload["messages"] = _merge_consecutive_roles(raw_messages)

        if stream:
            payload["stream"] = True
        return payload

    def from_provider(self, response: dict[str, Any]) -> Completion:
        """Convert an Anthropic messages API response to a Completion."""
        texts: list[str] = []
        thoughts: list[str] = []
        for block in response.get("content", []):
            if block.get("type") == "text":
                texts.append(block.get("text", ""))
            elif block.get("type") == "thinking":
                thoughts.append(block.get("thinking", ""))

        return Completion(
            text="".join(texts),
            thinking="\n\n".join(thoughts) or None,
            usage=_parse_usage(response.get("usage")),
            finish_reason=response.get("stop_reason"),
        )

    def decode_stream_event(self, event: dict[str, Any]) -> StreamDelta:
        """Decode one typed event of the messages stream."""
        event_type = event.get("type")

        if event_type == "error":
            error = event.get("error") or {}
            return StreamDelta(error=str(error.get("message") or error or "Unknown error"))

        if event_type == "message_start":
            message = event.get("message") or {}
            return StreamDelta(usage=_parse_usage(message.get("usage")))

        if event_type == "content_block_delta":
            delta = event.get("delta") or {}
            if delta.get("type") == "text_delta":
                return StreamDelta(text=delta.get("text") or None)
            if delta.get("type") == "thinking_delta":
                return StreamDelta(thinking=delta.get("thinking") or None)
            return StreamDelta()

        if event_type == "message_delta":
            return StreamDelta(usage=_parse_usage(event.get("usage")))

        if event_type == "message_stop":
            return StreamDelta(done=True)

        # ping, content_block_start, content_block_stop
        return StreamDelta()

    def _content_to_anthropic(
        self, content: str | list[ContentPart]
    ) -> str | list[dict[str, Any]]:
        """Convert content to Anthropic format.

        Returns a plain string for simple text, or content blocks for multimodal.
        """
        if isinstance(content, str):
            return content

        blocks: list[dict[str, Any]] = []
        for part in content:
            if isinstance(part, TextContent):
                blocks.append({"type": "text", "text": part.text})
            elif isinstance(part, ImageContent):
                source: dict[str, Any]
                if part.data:
                    media_type, data = split_data_url(part.data)
                    source = {
                        "type": "base64",
                        "media_type": part.media_type or media_type or "image/png",
                        "data": data,
                    }
                else:
                    source = {"type": "url", "url": part.url}
                blocks.append({"type": "image", "source": source})
            elif isinstance(part, DocumentContent):
                _, data = split_data_url(part.data)
                blocks.append(
                    {
                        "type": "document",
                        "source": {"type": "base64", "media_type": part.media_type, "data": data},
                    }
                )
            else:
                media_type, data = split_data_url(part.data)
                blocks.append(
                    {
                        "type": "document",
                        "source": {
                            "type": "base64",
                            "media_type": media_type or "application/pdf",
                            "data": data,
                        },
                        "title": part.filename,
                    }
                )
        return blocks


def _parse_usage(raw: Any) -> Usage | None:
    """Map ``input_tokens``/``output_tokens`` to Usage."""
    if not isinstance(raw, dict):
        return None
    prompt = raw.get("input_tokens")
    completion = raw.get("output_tokens")
    total = prompt + completion if prompt is not None and completion is not None else None
    return Usage(prompt_tokens=prompt, completion_tokens=completion, total_tokens=total)


def _merge_consecutive_roles(
    messages: list[dict[str, Any]],
) -> list[dict[str, Any]]:
    """Merge consecutive messages with the same role.

    Anthropic requires strict user/assistant alternation. When multiple
    consecutive messages share a role, their content is merged into one message.
    """
    merged: list[dict[str, Any]] = []
    for msg in messages:
        if merged and merged[-1]["role"] == msg["role"]:
            merged[-1]["content"] = _merge_content(merged[-1]["content"], msg["content"])
        else:
            merged.append(msg)
    return merged


def _merge_content(
    existing: str | list[dict[str, Any]], new: str | list[dict[str, Any]]
) -> list[dict[str, Any]]:
    """Merge two content values (str or list of blocks) into a single list."""
    result: list[dict[str, Any]] = []
    for item in (existing, new):
        if isinstance(item, str):
            result.append({"type": "text", "text": item})
        else:
            result.extend(item)
    return result
