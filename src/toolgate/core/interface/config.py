"""Chat options, provider identifiers and model-id routing."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

LOCAL_MODEL_PREFIX = "@cf/"


class Provider(str, Enum):
    """Upstream AI providers reachable through the gateway."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GOOGLE_AI_STUDIO = "google-ai-studio"
    GROQ = "groq"
    MISTRAL = "mistral"
    DEEPSEEK = "deepseek"
    PERPLEXITY = "perplexity"
    GROK = "grok"
    HUGGINGFACE = "huggingface"
    OPENROUTER = "openrouter"


class ChatOptions(BaseModel):
    """Per-call options for the provider adapter layer.

    ``max_tokens`` and ``temperature`` fall back to the model table and the
    client's configured default when left unset.
    """

    provider: Provider
    model: str
    max_tokens: int | None = Field(default=None, gt=0)
    temperature: float | None = Field(default=None, ge=0, le=2)
    system_prompt: str | None = None

    @property
    def full_model(self) -> str:
        """The ``provider/model`` identifier used by the compat endpoint."""
        return f"{self.provider.value}/{self.model}"


class ModelRoute(BaseModel):
    """A ``provider/model`` identifier split into its two halves."""

    provider: str
    model: str


def is_external_model(model_id: str) -> bool:
    """Return True when *model_id* names an upstream ``provider/model``.

    Local models use ``@cf/vendor/name`` identifiers or bare aliases and
    bypass the gateway entirely::

        is_external_model("openai/gpt-4o-mini")              # True
        is_external_model("@cf/meta/llama-3.1-8b-instruct")  # False
        is_external_model("llama-8b")                        # False
    """
    if model_id.startswith(LOCAL_MODEL_PREFIX):
        return False
    return "/" in model_id and not model_id.startswith("@")


def parse_external_model(model_id: str) -> ModelRoute | None:
    """Split an external model id on its first ``/``; None for local models.

    The model half may itself contain slashes (OpenRouter and Hugging Face
    model ids do).
    """
    if not is_external_model(model_id):
        return None
    provider, model = model_id.split("/", 1)
    return ModelRoute(provider=provider, model=model)
