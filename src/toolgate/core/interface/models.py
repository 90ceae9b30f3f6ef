"""Canonical data model shared by the tool gateway and the completion relay.

Chat messages, tool results and streaming chunks are provider-agnostic.
Provider transpilers convert canonical messages to each upstream's native
payload and decode native responses and stream events back into these types.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Content Parts — multimodal content building blocks
# ---------------------------------------------------------------------------


class TextContent(BaseModel):
    """Plain text content part."""

    type: Literal["text"] = "text"
    text: str


class ImageContent(BaseModel):
    """Image content part (URL or inline base64)."""

    type: Literal["image"] = "image"
    url: str | None = None
    data: str | None = None
    media_type: str | None = None


class DocumentContent(BaseModel):
    """Inline base64 document, typically a PDF."""

    type: Literal["document"] = "document"
    data: str
    media_type: str = "application/pdf"


class FileContent(BaseModel):
    """Named file attachment; ``data`` is a data URL or raw base64."""

    type: Literal["file"] = "file"
    filename: str
    data: str


ContentPart = Annotated[
    TextContent | ImageContent | DocumentContent | FileContent,
    Field(discriminator="type"),
]


# ---------------------------------------------------------------------------
# Chat messages
# ---------------------------------------------------------------------------


class CanonicalChatMessage(BaseModel):
    """One turn of a conversation in the provider-agnostic format.

    ``content`` is either a plain string or an ordered list of content parts.
    Only the binding-mediated transport accepts part lists.
    """

    role: Literal["system", "user", "assistant"]
    content: str | list[ContentPart]

    @property
    def text(self) -> str:
        """Concatenated text of the message, ignoring non-text parts."""
        if isinstance(self.content, str):
            return self.content
        return "".join(part.text for part in self.content if isinstance(part, TextContent))

    @property
    def is_multimodal(self) -> bool:
        return not isinstance(self.content, str)

    @classmethod
    def system(cls, text: str) -> CanonicalChatMessage:
        """Create a system message."""
        return cls(role="system", content=text)

    @classmethod
    def user(cls, content: str | list[ContentPart]) -> CanonicalChatMessage:
        """Create a user message."""
        return cls(role="user", content=content)

    @classmethod
    def assistant(cls, text: str) -> CanonicalChatMessage:
        """Create an assistant message."""
        return cls(role="assistant", content=text)


# ---------------------------------------------------------------------------
# Tool results
# ---------------------------------------------------------------------------


class TextBlock(BaseModel):
    """A text block inside a tool result."""

    model_config = ConfigDict(frozen=True)

    type: Literal["text"] = "text"
    text: str


class ToolResult(BaseModel):
    """Outcome of a tool invocation, serialized as ``{"content", "isError"}``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    content: tuple[TextBlock, ...] = ()
    is_error: bool = Field(default=False, alias="isError")

    @classmethod
    def from_text(cls, text: str, *, is_error: bool = False) -> ToolResult:
        """Create a ToolResult with a single text block."""
        return cls(content=(TextBlock(text=text),), is_error=is_error)

    @property
    def text(self) -> str:
        return "\n".join(block.text for block in self.content)

    def to_wire(self) -> dict[str, Any]:
        """Return the JSON-RPC ``result`` payload."""
        return {
            "content": [block.model_dump() for block in self.content],
            "isError": self.is_error,
        }


# ---------------------------------------------------------------------------
# Usage accounting and chat results
# ---------------------------------------------------------------------------


class Usage(BaseModel):
    """Token usage normalized across providers."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    prompt_tokens: int | None = Field(default=None, alias="promptTokens")
    completion_tokens: int | None = Field(default=None, alias="completionTokens")
    total_tokens: int | None = Field(default=None, alias="totalTokens")

    def to_wire(self) -> dict[str, int]:
        return self.model_dump(by_alias=True, exclude_none=True)

    def merge(self, other: Usage) -> Usage:
        """Overlay the counts reported in *other* onto this one.

        Providers that split usage across several events (prompt tokens up
        front, completion tokens at the end) are folded into one record. A
        missing total is derived when both halves are known.
        """
        prompt = other.prompt_tokens if other.prompt_tokens is not None else self.prompt_tokens
        completion = (
            other.completion_tokens
            if other.completion_tokens is not None
            else self.completion_tokens
        )
        total = other.total_tokens if other.total_tokens is not None else self.total_tokens
        if other.total_tokens is None and prompt is not None and completion is not None:
            total = prompt + completion
        return Usage(prompt_tokens=prompt, completion_tokens=completion, total_tokens=total)


class Completion(BaseModel):
    """A provider's non-streaming response decoded to its essentials."""

    text: str = ""
    thinking: str | None = None
    usage: Usage | None = None
    finish_reason: str | None = None


class ChatResult(BaseModel):
    """A completed (non-streaming) chat response."""

    response: str
    provider: str
    model: str
    duration_ms: int
    usage: Usage | None = None
    thinking: str | None = None


# ---------------------------------------------------------------------------
# Streaming
# ---------------------------------------------------------------------------

ChunkType = Literal["start", "text", "thinking", "done", "error"]


class StreamingChunk(BaseModel):
    """One unit of the canonical stream sent to clients.

    Wire form::

        data: {"type":"text","data":"Hello"}
        data: {"type":"done","usage":{...}}
        data: {"type":"error","error":"..."}
    """

    model_config = ConfigDict(frozen=True)

    type: ChunkType
    data: str | None = None
    usage: Usage | None = None
    error: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.type in ("done", "error")

    @classmethod
    def start(cls) -> StreamingChunk:
        return cls(type="start")

    @classmethod
    def text(cls, data: str) -> StreamingChunk:
        return cls(type="text", data=data)

    @classmethod
    def thinking(cls, data: str) -> StreamingChunk:
        return cls(type="thinking", data=data)

    @classmethod
    def done(cls, usage: Usage | None = None) -> StreamingChunk:
        return cls(type="done", usage=usage)

    @classmethod
    def failure(cls, message: str) -> StreamingChunk:
        return cls(type="error", error=message)

    def to_wire(self) -> dict[str, Any]:
        """Return the JSON object for one ``data:`` line."""
        payload: dict[str, Any] = {"type": self.type}
        if self.data is not None:
            payload["data"] = self.data
        if self.usage is not None:
            payload["usage"] = self.usage.to_wire()
        if self.error is not None:
            payload["error"] = self.error
        return payload


class StreamDelta(BaseModel):
    """What a provider decoder extracted from one native stream event."""

    text: str | None = None
    thinking: str | None = None
    usage: Usage | None = None
    error: str | None = None
    done: bool = False
