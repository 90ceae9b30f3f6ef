"""Provider-specific transpiler implementations."""

from toolgate.core.interface.config import Provider
from toolgate.core.interface.transpiler import Transpiler
from toolgate.core.interface.transpilers.anthropic import AnthropicTranspiler
from toolgate.core.interface.transpilers.gemini import GeminiTranspiler
from toolgate.core.interface.transpilers.openai import OpenAITranspiler

__all__ = ["AnthropicTranspiler", "GeminiTranspiler", "OpenAITranspiler", "get_transpiler"]


def get_transpiler(provider: Provider) -> Transpiler:
    """Return the native-format transpiler for *provider*.

    Every provider without its own wire format speaks OpenAI's.
    """
    if provider is Provider.ANTHROPIC:
        return AnthropicTranspiler()
    if provider is Provider.GOOGLE_AI_STUDIO:
        return GeminiTranspiler()
    return OpenAITranspiler()
