"""Tests for provider-specific transpilers using recorded fixtures."""

from typing import Any

from toolgate.core.interface.config import Provider
from toolgate.core.interface.models import (
    CanonicalChatMessage,
    ContentPart,
    DocumentContent,
    ImageContent,
    TextContent,
)
from toolgate.core.interface.transpilers import get_transpiler
from toolgate.core.interface.transpilers.anthropic import AnthropicTranspiler
from toolgate.core.interface.transpilers.gemini import GeminiTranspiler
from toolgate.core.interface.transpilers.openai import OpenAITranspiler

# ---------------------------------------------------------------------------
# Fixtures: sample conversations
# ---------------------------------------------------------------------------


def _simple_messages() -> list[CanonicalChatMessage]:
    return [
        CanonicalChatMessage.system("You are helpful."),
        CanonicalChatMessage.user("Hello"),
        CanonicalChatMessage.assistant("Hi there!"),
    ]


def _multimodal_messages() -> list[CanonicalChatMessage]:
    parts: list[ContentPart] = [
        TextContent(text="What's in this image?"),
        ImageContent(data="data:image/jpeg;base64,AAAA"),
        DocumentContent(data="JVBERi0="),
    ]
    return [CanonicalChatMessage.user(parts)]


def _encode(transpiler: Any, messages: list[CanonicalChatMessage], **kwargs: Any) -> dict[str, Any]:
    return transpiler.to_provider(
        messages, model="m", max_tokens=256, temperature=0.5, **kwargs
    )


# ---------------------------------------------------------------------------
# OpenAI
# ---------------------------------------------------------------------------


class TestOpenAITranspiler:
    def test_simple_payload(self) -> None:
        payload = _encode(OpenAITranspiler(), _simple_messages())
        assert payload == {
            "model": "m",
            "messages": [
                {"role": "system", "content": "You are helpful."},
                {"role": "user", "content": "Hello"},
                {"role": "assistant", "content": "Hi there!"},
            ],
            "max_tokens": 256,
            "temperature": 0.5,
        }

    def test_stream_flag(self) -> None:
        assert _encode(OpenAITranspiler(), _simple_messages(), stream=True)["stream"] is True

    def test_multimodal_parts(self) -> None:
        payload = _encode(OpenAITranspiler(), _multimodal_messages())
        content = payload["messages"][0]["content"]
        assert content[0] == {"type": "text", "text": "What's in this image?"}
        assert content[1] == {
            "type": "image_url",
            "image_url": {"url": "data:image/jpeg;base64,AAAA"},
        }
        assert content[2]["file"]["file_data"] == "data:application/pdf;base64,JVBERi0="

    def test_from_provider(self) -> None:
        completion = OpenAITranspiler().from_provider(
            {
                "choices": [
                    {"message": {"content": "Hello!"}, "finish_reason": "stop"}
                ],
                "usage": {"prompt_tokens": 5, "completion_tokens": 2, "total_tokens": 7},
            }
        )
        assert completion.text == "Hello!"
        assert completion.thinking is None
        assert completion.finish_reason == "stop"
        assert completion.usage is not None
        assert completion.usage.total_tokens == 7

    def test_from_provider_reasoning_field(self) -> None:
        completion = OpenAITranspiler().from_provider(
            {"choices": [{"message": {"content": "4", "reasoning_content": "2+2"}}]}
        )
        assert completion.thinking == "2+2"

    def test_decode_content_delta(self) -> None:
        delta = OpenAITranspiler().decode_stream_event(
            {"choices": [{"delta": {"content": "Hel"}}]}
        )
        assert delta.text == "Hel"
        assert delta.usage is None

    def test_decode_usage_only_event(self) -> None:
        delta = OpenAITranspiler().decode_stream_event(
            {"choices": [], "usage": {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15}}
        )
        assert delta.text is None
        assert delta.usage is not None
        assert delta.usage.prompt_tokens == 10

    def test_decode_error(self) -> None:
        delta = OpenAITranspiler().decode_stream_event({"error": {"message": "rate limited"}})
        assert delta.error == "rate limited"


# ---------------------------------------------------------------------------
# Anthropic
# ---------------------------------------------------------------------------


class TestAnthropicTranspiler:
    def test_system_lifted_out(self) -> None:
        payload = _encode(AnthropicTranspiler(), _simple_messages())
        assert payload["system"] == "You are helpful."
        assert [m["role"] for m in payload["messages"]] == ["user", "assistant"]

    def test_consecutive_roles_merged(self) -> None:
        messages = [CanonicalChatMessage.user("one"), CanonicalChatMessage.user("two")]
        payload = _encode(AnthropicTranspiler(), messages)
        assert payload["messages"] == [
            {
                "role": "user",
                "content": [{"type": "text", "text": "one"}, {"type": "text", "text": "two"}],
            }
        ]

    def test_inline_image_becomes_base64_source(self) -> None:
        payload = _encode(AnthropicTranspiler(), _multimodal_messages())
        image = payload["messages"][0]["content"][1]
        assert image == {
            "type": "image",
            "source": {"type": "base64", "media_type": "image/jpeg", "data": "AAAA"},
        }

    def test_endpoint_and_headers(self) -> None:
        transpiler = AnthropicTranspiler()
        assert transpiler.endpoint("claude", stream=True) == "v1/messages"
        assert transpiler.headers() == {"anthropic-version": "2023-06-01"}

    def test_from_provider_with_thinking(self) -> None:
        completion = AnthropicTranspiler().from_provider(
            {
                "content": [
                    {"type": "thinking", "thinking": "Let me see"},
                    {"type": "text", "text": "Answer"},
                ],
                "usage": {"input_tokens": 8, "output_tokens": 3},
                "stop_reason": "end_turn",
            }
        )
        assert completion.text == "Answer"
        assert completion.thinking == "Let me see"
        assert completion.usage is not None
        assert completion.usage.total_tokens == 11

    def test_decode_stream_events(self) -> None:
        transpiler = AnthropicTranspiler()
        start = transpiler.decode_stream_event(
            {"type": "message_start", "message": {"usage": {"input_tokens": 12}}}
        )
        assert start.usage is not None
        assert start.usage.prompt_tokens == 12

        text = transpiler.decode_stream_event(
            {"type": "content_block_delta", "delta": {"type": "text_delta", "text": "Hi"}}
        )
        assert text.text == "Hi"

        thinking = transpiler.decode_stream_event(
            {"type": "content_block_delta", "delta": {"type": "thinking_delta", "thinking": "hmm"}}
        )
        assert thinking.thinking == "hmm"

        assert transpiler.decode_stream_event({"type": "message_stop"}).done
        assert transpiler.decode_stream_event({"type": "ping"}).text is None


# ---------------------------------------------------------------------------
# Gemini
# ---------------------------------------------------------------------------


class TestGeminiTranspiler:
    def test_roles_and_system_instruction(self) -> None:
        payload = _encode(GeminiTranspiler(), _simple_messages())
        assert payload["system_instruction"] == {"parts": [{"text": "You are helpful."}]}
        assert [c["role"] for c in payload["contents"]] == ["user", "model"]
        assert payload["generationConfig"] == {"maxOutputTokens": 256, "temperature": 0.5}
        assert "model" not in payload

    def test_endpoint_carries_model(self) -> None:
        transpiler = GeminiTranspiler()
        assert transpiler.endpoint("gemini-2.0-flash", stream=False) == (
            "v1beta/models/gemini-2.0-flash:generateContent"
        )
        assert transpiler.endpoint("gemini-2.0-flash", stream=True).endswith(
            ":streamGenerateContent?alt=sse"
        )

    def test_inline_data(self) -> None:
        payload = _encode(GeminiTranspiler(), _multimodal_messages())
        parts = payload["contents"][0]["parts"]
        assert parts[1] == {"inline_data": {"mime_type": "image/jpeg", "data": "AAAA"}}
        assert parts[2] == {"inline_data": {"mime_type": "application/pdf", "data": "JVBERi0="}}

    def test_decode_thought_parts(self) -> None:
        delta = GeminiTranspiler().decode_stream_event(
            {
                "candidates": [
                    {
                        "content": {
                            "parts": [
                                {"text": "pondering", "thought": True},
                                {"text": "Answer"},
                            ]
                        }
                    }
                ],
                "usageMetadata": {
                    "promptTokenCount": 4,
                    "candidatesTokenCount": 2,
                    "totalTokenCount": 6,
                },
            }
        )
        assert delta.thinking == "pondering"
        assert delta.text == "Answer"
        assert delta.usage is not None
        assert delta.usage.total_tokens == 6


class TestGetTranspiler:
    def test_native_formats(self) -> None:
        assert isinstance(get_transpiler(Provider.ANTHROPIC), AnthropicTranspiler)
        assert isinstance(get_transpiler(Provider.GOOGLE_AI_STUDIO), GeminiTranspiler)

    def test_everyone_else_speaks_openai(self) -> None:
        for provider in (Provider.OPENAI, Provider.GROQ, Provider.MISTRAL, Provider.OPENROUTER):
            assert isinstance(get_transpiler(provider), OpenAITranspiler)
