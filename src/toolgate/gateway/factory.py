"""Pick the gateway client that matches the deployment's settings."""

from __future__ import annotations

import logging

import httpx

from toolgate.gateway.binding import GatewayBinding, GatewayBindingClient, HttpGatewayBinding
from toolgate.gateway.client import BaseGatewayClient, GatewayClient
from toolgate.gateway.errors import GatewayNotConfiguredError
from toolgate.sdk.models import GatewaySettings


def create_gateway_client(
    settings: GatewaySettings,
    *,
    binding: GatewayBinding | None = None,
    http_client: httpx.AsyncClient | None = None,
    logger: logging.Logger | None = None,
) -> BaseGatewayClient:
    """Build the direct client when an API token is configured, else a binding client.

    An explicit *binding* wins over ``settings.binding_url``.

    Raises:
        GatewayNotConfiguredError: If there is neither a token nor a binding.
    """
    common = {
        "default_temperature": settings.default_temperature,
        "fallback_max_tokens": settings.default_max_tokens,
        "logger": logger,
    }
    if settings.api_token:
        return GatewayClient(
            account_id=settings.account_id,
            gateway_id=settings.gateway_id,
            api_token=settings.api_token,
            base_url=settings.base_url,
            timeout=settings.timeout,
            http_client=http_client,
            **common,
        )

    if binding is None and settings.binding_url:
        binding = HttpGatewayBinding(
            settings.binding_url, timeout=settings.timeout, http_client=http_client
        )
    if binding is None:
        msg = "Set gateway.api_token or gateway.binding_url to reach upstream providers"
        raise GatewayNotConfiguredError(msg)
    return GatewayBindingClient(binding, **common)
