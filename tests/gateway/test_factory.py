"""Tests for gateway client selection."""

import httpx
import pytest

from toolgate.gateway.binding import GatewayBindingClient, HttpGatewayBinding
from toolgate.gateway.client import GatewayClient
from toolgate.gateway.errors import GatewayNotConfiguredError
from toolgate.gateway.factory import create_gateway_client
from toolgate.sdk.models import GatewaySettings


class _Binding:
    async def run(self, request: object) -> httpx.Response:
        return httpx.Response(200)


class TestCreateGatewayClient:
    def test_token_selects_direct_client(self) -> None:
        client = create_gateway_client(
            GatewaySettings(account_id="acc", api_token="tok", default_temperature=0.1)
        )
        assert isinstance(client, GatewayClient)
        assert client.endpoint_url.endswith("/acc/default/compat/chat/completions")
        assert client.default_temperature == 0.1

    def test_explicit_binding(self) -> None:
        binding = _Binding()
        client = create_gateway_client(GatewaySettings(), binding=binding)
        assert isinstance(client, GatewayBindingClient)
        assert client.binding is binding

    def test_binding_url(self) -> None:
        client = create_gateway_client(GatewaySettings(binding_url="http://relay:8787"))
        assert isinstance(client, GatewayBindingClient)
        assert isinstance(client.binding, HttpGatewayBinding)
        assert client.binding.base_url == "http://relay:8787"

    def test_nothing_configured(self) -> None:
        with pytest.raises(GatewayNotConfiguredError):
            create_gateway_client(GatewaySettings())

    def test_unexpanded_token_counts_as_unset(self) -> None:
        with pytest.raises(GatewayNotConfiguredError):
            create_gateway_client(GatewaySettings(api_token="${CF_AIG_TOKEN}"))
