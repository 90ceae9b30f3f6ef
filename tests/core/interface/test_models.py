"""Tests for the canonical message, result and streaming models."""

import pytest
from pydantic import ValidationError

from toolgate.core.interface.models import (
    CanonicalChatMessage,
    ImageContent,
    StreamingChunk,
    TextContent,
    ToolResult,
    Usage,
)


class TestCanonicalChatMessage:
    def test_string_content(self) -> None:
        msg = CanonicalChatMessage.user("Hello")
        assert msg.role == "user"
        assert msg.text == "Hello"
        assert not msg.is_multimodal

    def test_part_list_text_ignores_media(self) -> None:
        msg = CanonicalChatMessage.user(
            [
                TextContent(text="What is "),
                ImageContent(url="https://example.com/cat.png"),
                TextContent(text="this?"),
            ]
        )
        assert msg.is_multimodal
        assert msg.text == "What is this?"

    def test_parts_parse_from_dicts(self) -> None:
        msg = CanonicalChatMessage.model_validate(
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": "hi"},
                    {"type": "document", "data": "JVBERi0="},
                    {"type": "file", "filename": "a.txt", "data": "aGk="},
                ],
            }
        )
        assert [part.type for part in msg.content] == ["text", "document", "file"]

    def test_rejects_unknown_role(self) -> None:
        with pytest.raises(ValidationError):
            CanonicalChatMessage.model_validate({"role": "tool", "content": "x"})


class TestToolResult:
    def test_from_text_wire(self) -> None:
        result = ToolResult.from_text("done")
        assert result.to_wire() == {
            "content": [{"type": "text", "text": "done"}],
            "isError": False,
        }

    def test_error_flag(self) -> None:
        result = ToolResult.from_text("bad", is_error=True)
        assert result.is_error
        assert result.to_wire()["isError"] is True

    def test_text_joins_blocks(self) -> None:
        result = ToolResult.model_validate(
            {"content": [{"text": "a"}, {"text": "b"}], "isError": False}
        )
        assert result.text == "a\nb"


class TestUsage:
    def test_wire_uses_camel_case_and_drops_missing(self) -> None:
        assert Usage(prompt_tokens=3, completion_tokens=4).to_wire() == {
            "promptTokens": 3,
            "completionTokens": 4,
        }

    def test_merge_derives_total(self) -> None:
        merged = Usage(prompt_tokens=10).merge(Usage(completion_tokens=5))
        assert merged == Usage(prompt_tokens=10, completion_tokens=5, total_tokens=15)

    def test_merge_keeps_reported_total(self) -> None:
        merged = Usage(prompt_tokens=10, completion_tokens=5).merge(Usage(total_tokens=99))
        assert merged.total_tokens == 99


class TestStreamingChunk:
    def test_text_wire(self) -> None:
        assert StreamingChunk.text("Hi").to_wire() == {"type": "text", "data": "Hi"}

    def test_done_wire_with_usage(self) -> None:
        chunk = StreamingChunk.done(Usage(prompt_tokens=1, completion_tokens=2, total_tokens=3))
        assert chunk.to_wire() == {
            "type": "done",
            "usage": {"promptTokens": 1, "completionTokens": 2, "totalTokens": 3},
        }

    def test_failure_wire(self) -> None:
        assert StreamingChunk.failure("boom").to_wire() == {"type": "error", "error": "boom"}

    def test_terminal_types(self) -> None:
        assert StreamingChunk.done().is_terminal
        assert StreamingChunk.failure("x").is_terminal
        assert not StreamingChunk.start().is_terminal
        assert not StreamingChunk.thinking("hmm").is_terminal
