"""Tests for the static provider and model table."""

import pytest

from toolgate.core.interface.config import Provider
from toolgate.gateway.errors import UnknownProviderError
from toolgate.gateway.providers import (
    DEFAULT_MAX_OUTPUT_TOKENS,
    PROVIDER_REGISTRY,
    get_external_model,
    get_provider,
    list_external_models,
    list_providers,
    max_output_tokens,
    resolve_provider,
)


class TestTable:
    def test_every_provider_listed(self) -> None:
        assert set(PROVIDER_REGISTRY) == set(Provider)
        assert [config.provider for config in list_providers()] == list(PROVIDER_REGISTRY)

    def test_model_ids_unique_per_provider(self) -> None:
        for config in list_providers():
            ids = [model.id for model in config.models]
            assert len(ids) == len(set(ids)), config.provider

    def test_flattened_models(self) -> None:
        pairs = list_external_models()
        assert len(pairs) == sum(len(config.models) for config in list_providers())
        assert (Provider.OPENAI, get_external_model("openai", "gpt-4o-mini")) in pairs


class TestLookups:
    def test_known_model(self) -> None:
        model = get_external_model(Provider.ANTHROPIC, "claude-3-5-sonnet-20241022")
        assert model is not None
        assert model.max_output_tokens == 8192
        assert model.supports_pdf

    def test_o1_does_not_stream(self) -> None:
        model = get_external_model("openai", "o1")
        assert model is not None
        assert not model.supports_streaming

    def test_slashes_inside_model_ids(self) -> None:
        assert get_external_model("openrouter", "anthropic/claude-3.5-sonnet") is not None

    def test_unknown_model_is_none(self) -> None:
        assert get_external_model("openai", "gpt-99") is None

    def test_unknown_provider_lookup_is_none(self) -> None:
        assert get_external_model("acme", "x") is None

    def test_max_output_tokens_fallback(self) -> None:
        assert max_output_tokens("groq", "llama-3.3-70b-versatile") == 32_768
        assert max_output_tokens("groq", "unlisted") == DEFAULT_MAX_OUTPUT_TOKENS == 4096

    def test_resolve_provider(self) -> None:
        assert resolve_provider("google-ai-studio") is Provider.GOOGLE_AI_STUDIO
        assert resolve_provider(Provider.GROK) is Provider.GROK

    def test_unknown_provider_raises(self) -> None:
        with pytest.raises(UnknownProviderError, match="Unknown provider: acme"):
            get_provider("acme")
