"""Canonical message model, chat options and provider transpilation."""

from toolgate.core.interface.config import (
    ChatOptions,
    ModelRoute,
    Provider,
    is_external_model,
    parse_external_model,
)
from toolgate.core.interface.models import (
    CanonicalChatMessage,
    ChatResult,
    Completion,
    ContentPart,
    DocumentContent,
    FileContent,
    ImageContent,
    StreamDelta,
    StreamingChunk,
    TextBlock,
    TextContent,
    ToolResult,
    Usage,
)
from toolgate.core.interface.transpiler import Transpiler

__all__ = [
    "CanonicalChatMessage",
    "ChatOptions",
    "ChatResult",
    "Completion",
    "ContentPart",
    "DocumentContent",
    "FileContent",
    "ImageContent",
    "ModelRoute",
    "Provider",
    "StreamDelta",
    "StreamingChunk",
    "TextBlock",
    "TextContent",
    "ToolResult",
    "Transpiler",
    "Usage",
    "is_external_model",
    "parse_external_model",
]
