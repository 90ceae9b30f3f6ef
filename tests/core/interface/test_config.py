"""Tests for chat options and model-id routing."""

import pytest
from pydantic import ValidationError

from toolgate.core.interface.config import (
    ChatOptions,
    Provider,
    is_external_model,
    parse_external_model,
)


class TestIsExternalModel:
    @pytest.mark.parametrize(
        "model_id",
        ["openai/gpt-4o-mini", "anthropic/claude-3-5-sonnet-20241022", "openrouter/meta/llama"],
    )
    def test_external(self, model_id: str) -> None:
        assert is_external_model(model_id)

    @pytest.mark.parametrize(
        "model_id",
        ["@cf/meta/llama-3.1-8b-instruct", "@hf/thebloke/model", "llama-8b", ""],
    )
    def test_local(self, model_id: str) -> None:
        assert not is_external_model(model_id)


class TestParseExternalModel:
    def test_splits_on_first_slash(self) -> None:
        route = parse_external_model("openrouter/anthropic/claude-3.5-sonnet")
        assert route is not None
        assert route.provider == "openrouter"
        assert route.model == "anthropic/claude-3.5-sonnet"

    def test_local_is_none(self) -> None:
        assert parse_external_model("@cf/meta/llama-3.1-8b-instruct") is None


class TestChatOptions:
    def test_full_model(self) -> None:
        options = ChatOptions(provider=Provider.GROQ, model="llama-3.3-70b-versatile")
        assert options.full_model == "groq/llama-3.3-70b-versatile"

    def test_provider_from_string(self) -> None:
        assert ChatOptions(provider="google-ai-studio", model="x").provider is Provider.GOOGLE_AI_STUDIO

    def test_rejects_out_of_range_temperature(self) -> None:
        with pytest.raises(ValidationError):
            ChatOptions(provider=Provider.OPENAI, model="x", temperature=3)

    def test_rejects_zero_max_tokens(self) -> None:
        with pytest.raises(ValidationError):
            ChatOptions(provider=Provider.OPENAI, model="x", max_tokens=0)
