"""Provider adapter layer — upstream clients, model table and stream normalization."""

from toolgate.gateway.binding import (
    GatewayBinding,
    GatewayBindingClient,
    GatewayRunRequest,
    HttpGatewayBinding,
)
from toolgate.gateway.client import BaseGatewayClient, ByteStream, GatewayClient
from toolgate.gateway.errors import (
    GatewayConnectionError,
    GatewayError,
    GatewayNotConfiguredError,
    UnknownProviderError,
    UnsupportedContentError,
    UpstreamError,
)
from toolgate.gateway.factory import create_gateway_client
from toolgate.gateway.providers import (
    PROVIDER_REGISTRY,
    ProviderConfig,
    ProviderModelConfig,
    get_external_model,
    get_provider,
    list_external_models,
    list_providers,
    max_output_tokens,
)
from toolgate.gateway.stream import (
    StreamNormalizer,
    StreamSummary,
    collect_stream,
    encode_chunk,
    encode_sse,
    normalize_stream,
)
from toolgate.gateway.thinking import ThinkingSplit, extract_thinking

__all__ = [
    "PROVIDER_REGISTRY",
    "BaseGatewayClient",
    "ByteStream",
    "GatewayBinding",
    "GatewayBindingClient",
    "GatewayClient",
    "GatewayConnectionError",
    "GatewayError",
    "GatewayNotConfiguredError",
    "GatewayRunRequest",
    "HttpGatewayBinding",
    "ProviderConfig",
    "ProviderModelConfig",
    "StreamNormalizer",
    "StreamSummary",
    "ThinkingSplit",
    "UnknownProviderError",
    "UnsupportedContentError",
    "UpstreamError",
    "collect_stream",
    "create_gateway_client",
    "encode_chunk",
    "encode_sse",
    "extract_thinking",
    "get_external_model",
    "get_provider",
    "list_external_models",
    "list_providers",
    "max_output_tokens",
    "normalize_stream",
]
