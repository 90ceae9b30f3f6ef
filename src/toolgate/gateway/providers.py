"""Static provider and model table.

Every provider reachable through the relay, with per-model limits and
capability flags.  The table is read-only after import.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from toolgate.core.interface.config import Provider
from toolgate.gateway.errors import UnknownProviderError

DEFAULT_MAX_OUTPUT_TOKENS = 4096


class ProviderModelConfig(BaseModel):
    """Limits and capabilities of one upstream model."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    context_window: int
    max_output_tokens: int
    supports_streaming: bool = True
    supports_vision: bool = False
    supports_pdf: bool = False
    description: str = ""


class ProviderConfig(BaseModel):
    """A provider and the models it serves."""

    model_config = ConfigDict(frozen=True)

    provider: Provider
    name: str
    models: tuple[ProviderModelConfig, ...]


# ---------------------------------------------------------------------------
# Known providers
# ---------------------------------------------------------------------------

PROVIDER_REGISTRY: dict[Provider, ProviderConfig] = {
    Provider.OPENAI: ProviderConfig(
        provider=Provider.OPENAI,
        name="OpenAI",
        models=(
            ProviderModelConfig(
                id="gpt-4o",
                name="GPT-4o",
                context_window=128_000,
                max_output_tokens=16_384,
                supports_vision=True,
                description="Most capable GPT-4 model, multimodal",
            ),
            ProviderModelConfig(
                id="gpt-4o-mini",
                name="GPT-4o Mini",
                context_window=128_000,
                max_output_tokens=16_384,
                supports_vision=True,
                description="Fast and affordable GPT-4 model",
            ),
            ProviderModelConfig(
                id="gpt-4-turbo",
                name="GPT-4 Turbo",
                context_window=128_000,
                max_output_tokens=4096,
                supports_vision=True,
                description="GPT-4 Turbo with vision",
            ),
            ProviderModelConfig(
                id="o1",
                name="o1",
                context_window=200_000,
                max_output_tokens=100_000,
                supports_streaming=False,
                supports_vision=True,
                description="Advanced reasoning model",
            ),
            ProviderModelConfig(
                id="o1-mini",
                name="o1 Mini",
                context_window=128_000,
                max_output_tokens=65_536,
                supports_streaming=False,
                supports_vision=True,
                description="Faster reasoning model",
            ),
        ),
    ),
    Provider.ANTHROPIC: ProviderConfig(
        provider=Provider.ANTHROPIC,
        name="Anthropic",
        models=(
            ProviderModelConfig(
                id="claude-sonnet-4-20250514",
                name="Claude Sonnet 4",
                context_window=200_000,
                max_output_tokens=64_000,
                supports_vision=True,
                supports_pdf=True,
                description="Latest Claude model, excellent reasoning",
            ),
            ProviderModelConfig(
                id="claude-3-5-sonnet-20241022",
                name="Claude 3.5 Sonnet",
                context_window=200_000,
                max_output_tokens=8192,
                supports_vision=True,
                supports_pdf=True,
                description="Best balance of speed and capability",
            ),
            ProviderModelConfig(
                id="claude-3-5-haiku-20241022",
                name="Claude 3.5 Haiku",
                context_window=200_000,
                max_output_tokens=8192,
                supports_vision=True,
                supports_pdf=True,
                description="Fastest Claude model",
            ),
        ),
    ),
    Provider.GOOGLE_AI_STUDIO: ProviderConfig(
        provider=Provider.GOOGLE_AI_STUDIO,
        name="Google AI Studio",
        models=(
            ProviderModelConfig(
                id="gemini-2.0-flash",
                name="Gemini 2.0 Flash",
                context_window=1_048_576,
                max_output_tokens=8192,
                supports_vision=True,
                supports_pdf=True,
                description="Fast multimodal model",
            ),
            ProviderModelConfig(
                id="gemini-2.5-flash",
                name="Gemini 2.5 Flash",
                context_window=1_048_576,
                max_output_tokens=8192,
                supports_vision=True,
                supports_pdf=True,
                description="Latest fast model with thinking",
            ),
            ProviderModelConfig(
                id="gemini-2.5-pro",
                name="Gemini 2.5 Pro",
                context_window=2_097_152,
                max_output_tokens=8192,
                supports_vision=True,
                supports_pdf=True,
                description="Best for complex tasks",
            ),
        ),
    ),
    Provider.GROQ: ProviderConfig(
        provider=Provider.GROQ,
        name="Groq",
        models=(
            ProviderModelConfig(
                id="llama-3.3-70b-versatile",
                name="Llama 3.3 70B",
                context_window=128_000,
                max_output_tokens=32_768,
                description="Fast Llama 3.3 on Groq hardware",
            ),
            ProviderModelConfig(
                id="llama-3.1-8b-instant",
                name="Llama 3.1 8B Instant",
                context_window=128_000,
                max_output_tokens=8192,
                description="Ultra-fast small model",
            ),
        ),
    ),
    Provider.MISTRAL: ProviderConfig(
        provider=Provider.MISTRAL,
        name="Mistral AI",
        models=(
            ProviderModelConfig(
                id="mistral-large-latest",
                name="Mistral Large",
                context_window=128_000,
                max_output_tokens=8192,
                description="Most capable Mistral model",
            ),
            ProviderModelConfig(
                id="mistral-small-latest",
                name="Mistral Small",
                context_window=32_000,
                max_output_tokens=8192,
                description="Fast and efficient",
            ),
            ProviderModelConfig(
                id="codestral-latest",
                name="Codestral",
                context_window=32_000,
                max_output_tokens=8192,
                description="Code generation specialist",
            ),
        ),
    ),
    Provider.DEEPSEEK: ProviderConfig(
        provider=Provider.DEEPSEEK,
        name="DeepSeek",
        models=(
            ProviderModelConfig(
                id="deepseek-chat",
                name="DeepSeek Chat",
                context_window=64_000,
                max_output_tokens=8192,
                description="General chat model",
            ),
            ProviderModelConfig(
                id="deepseek-reasoner",
                name="DeepSeek R1",
                context_window=64_000,
                max_output_tokens=8192,
                description="Advanced reasoning model",
            ),
        ),
    ),
    Provider.PERPLEXITY: ProviderConfig(
        provider=Provider.PERPLEXITY,
        name="Perplexity",
        models=(
            ProviderModelConfig(
                id="llama-3.1-sonar-large-128k-online",
                name="Sonar Large Online",
                context_window=128_000,
                max_output_tokens=8192,
                description="Large model with web search",
            ),
        ),
    ),
    Provider.GROK: ProviderConfig(
        provider=Provider.GROK,
        name="xAI (Grok)",
        models=(
            ProviderModelConfig(
                id="grok-2",
                name="Grok 2",
                context_window=128_000,
                max_output_tokens=8192,
                supports_vision=True,
                description="Latest Grok model",
            ),
        ),
    ),
    Provider.HUGGINGFACE: ProviderConfig(
        provider=Provider.HUGGINGFACE,
        name="Hugging Face",
        models=(
            ProviderModelConfig(
                id="meta-llama/Llama-3.2-11B-Vision-Instruct",
                name="Llama 3.2 11B Vision",
                context_window=128_000,
                max_output_tokens=8192,
                supports_vision=True,
                description="Vision-capable Llama model",
            ),
        ),
    ),
    Provider.OPENROUTER: ProviderConfig(
        provider=Provider.OPENROUTER,
        name="OpenRouter",
        models=(
            ProviderModelConfig(
                id="openai/gpt-4o",
                name="GPT-4o (via OpenRouter)",
                context_window=128_000,
                max_output_tokens=16_384,
                supports_vision=True,
                description="GPT-4o through OpenRouter",
            ),
            ProviderModelConfig(
                id="anthropic/claude-3.5-sonnet",
                name="Claude 3.5 Sonnet (via OpenRouter)",
                context_window=200_000,
                max_output_tokens=8192,
                supports_vision=True,
                supports_pdf=True,
                description="Claude through OpenRouter",
            ),
            ProviderModelConfig(
                id="google/gemini-2.0-flash-exp:free",
                name="Gemini 2.0 Flash (Free)",
                context_window=1_048_576,
                max_output_tokens=8192,
                supports_vision=True,
                supports_pdf=True,
                description="Free Gemini model",
            ),
        ),
    ),
}


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


def resolve_provider(provider: Provider | str) -> Provider:
    """Coerce a provider identifier to :class:`Provider`.

    Raises:
        UnknownProviderError: If *provider* is not a known identifier.
    """
    try:
        return Provider(provider)
    except ValueError as exc:
        raise UnknownProviderError(str(provider)) from exc


def get_provider(provider: Provider | str) -> ProviderConfig:
    """Return the configuration for *provider*."""
    return PROVIDER_REGISTRY[resolve_provider(provider)]


def get_external_model(provider: Provider | str, model_id: str) -> ProviderModelConfig | None:
    """Look up a model by exact id; ``None`` when the provider does not list it."""
    try:
        config = get_provider(provider)
    except UnknownProviderError:
        return None
    return next((m for m in config.models if m.id == model_id), None)


def max_output_tokens(provider: Provider | str, model_id: str) -> int:
    """Output token ceiling for a model, falling back to 4096 when unknown."""
    model = get_external_model(provider, model_id)
    return model.max_output_tokens if model is not None else DEFAULT_MAX_OUTPUT_TOKENS


def list_providers() -> list[ProviderConfig]:
    """All providers in table order."""
    return list(PROVIDER_REGISTRY.values())


def list_external_models() -> list[tuple[Provider, ProviderModelConfig]]:
    """Flatten the table into ``(provider, model)`` pairs."""
    return [(provider, model) for provider, config in PROVIDER_REGISTRY.items() for model in config.models]
