"""Tests for the Starlette application."""

import json
from collections.abc import Callable
from typing import Any

import httpx
from starlette.routing import Route

from toolgate.builtin import build_dispatcher
from toolgate.gateway.binding import GatewayBindingClient, GatewayRunRequest
from toolgate.gateway.client import GatewayClient
from toolgate.sdk.models import ServerSettings
from toolgate.transport.app import create_app

BASE = "http://testserver"

UPSTREAM_STREAM = (
    b'data: {"choices":[{"delta":{"content":"Hi"}}]}\n\n'
    b'data: {"choices":[],"usage":{"prompt_tokens":10,"completion_tokens":5,"total_tokens":15}}\n\n'
    b"data: [DONE]\n\n"
)


def _gateway(handler: Callable[[httpx.Request], httpx.Response]) -> GatewayClient:
    return GatewayClient(
        account_id="acc",
        gateway_id="gw",
        api_token="tok",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


def _open(**kwargs: Any) -> httpx.AsyncClient:
    settings = kwargs.pop("settings", ServerSettings(name="demo", version="9.9.9"))
    gateway = kwargs.pop("gateway", None)
    app = create_app(build_dispatcher(settings, gateway=gateway), settings, gateway=gateway)
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url=BASE)


def _sse_payloads(body: str) -> list[Any]:
    payloads: list[Any] = []
    for line in body.splitlines():
        if line.startswith("data: "):
            data = line[len("data: ") :]
            payloads.append(data if data == "[DONE]" else json.loads(data))
    return payloads


class TestRpcRoutes:
    async def test_server_info(self) -> None:
        client = _open()
        response = await client.get("/mcp")
        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "demo"
        assert body["transports"] == {"streamableHttp": "/mcp/message", "sse": "/mcp/sse"}
        assert [tool["name"] for tool in body["tools"]] == ["echo", "classify_model", "list_models"]

    async def test_message_request(self) -> None:
        client = _open()
        response = await client.post(
            "/mcp/message",
            json={
                "jsonrpc": "2.0",
                "method": "tools/call",
                "params": {"name": "echo", "arguments": {"text": "hi", "uppercase": True}},
                "id": 7,
            },
        )
        assert response.status_code == 200
        body = response.json()
        assert body["id"] == 7
        assert json.loads(body["result"]["content"][0]["text"]) == {"success": True, "text": "HI"}

    async def test_post_to_sse_path(self) -> None:
        client = _open()
        response = await client.post("/mcp/sse", json={"jsonrpc": "2.0", "method": "ping", "id": 1})
        assert response.json() == {"jsonrpc": "2.0", "result": {}, "id": 1}

    async def test_notification_accepted(self) -> None:
        client = _open()
        response = await client.post("/mcp/message", json={"jsonrpc": "2.0", "method": "initialized"})
        assert response.status_code == 202
        assert response.content == b""

    async def test_batch(self) -> None:
        client = _open()
        response = await client.post(
            "/mcp/message",
            json=[
                {"jsonrpc": "2.0", "method": "ping", "id": 1},
                {"jsonrpc": "2.0", "method": "initialized"},
                {"jsonrpc": "2.0", "method": "tools/list", "id": 2},
            ],
        )
        assert [item["id"] for item in response.json()] == [1, 2]

    async def test_empty_batch(self) -> None:
        client = _open()
        response = await client.post("/mcp/message", json=[])
        assert response.json()["error"]["code"] == -32600

    async def test_parse_error(self) -> None:
        client = _open()
        response = await client.post(
            "/mcp/message", content=b"{nope", headers={"content-type": "application/json"}
        )
        assert response.status_code == 400
        assert response.json() == {
            "jsonrpc": "2.0",
            "error": {"code": -32700, "message": "Parse error"},
            "id": None,
        }

    async def test_custom_base_path(self) -> None:
        client = _open(settings=ServerSettings(base_path="/tools"))
        response = await client.post(
            "/tools/message", json={"jsonrpc": "2.0", "method": "ping", "id": 1}
        )
        assert response.status_code == 200

    def test_sse_route_registered(self) -> None:
        app = create_app(build_dispatcher())
        sse_routes = [
            route for route in app.routes if isinstance(route, Route) and route.path == "/mcp/sse"
        ]
        assert {method for route in sse_routes for method in route.methods or ()} >= {"GET", "POST"}

    def test_no_chat_route_without_gateway(self) -> None:
        app = create_app(build_dispatcher())
        assert all(getattr(route, "path", None) != "/api/chat" for route in app.routes)


class TestChatRoute:
    async def test_blocking_chat(self) -> None:
        gateway = _gateway(
            lambda r: httpx.Response(
                200,
                json={
                    "choices": [{"message": {"content": "Hello"}}],
                    "usage": {"prompt_tokens": 1, "completion_tokens": 1, "total_tokens": 2},
                },
            )
        )
        client = _open(gateway=gateway)
        response = await client.post(
            "/api/chat",
            json={
                "model": "openai/gpt-4o-mini",
                "messages": [{"role": "user", "content": "Hi"}],
                "stream": False,
            },
        )
        assert response.status_code == 200
        body = response.json()
        assert body["response"] == "Hello"
        assert body["provider"] == "openai"
        assert body["usage"] == {"promptTokens": 1, "completionTokens": 1, "totalTokens": 2}

    async def test_streaming_chat(self) -> None:
        gateway = _gateway(lambda r: httpx.Response(200, content=UPSTREAM_STREAM))
        client = _open(gateway=gateway)
        response = await client.post(
            "/api/chat",
            json={"model": "openai/gpt-4o-mini", "messages": [{"role": "user", "content": "Hi"}]},
        )
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        assert _sse_payloads(response.text) == [
            {"type": "start"},
            {"type": "text", "data": "Hi"},
            {
                "type": "done",
                "usage": {"promptTokens": 10, "completionTokens": 5, "totalTokens": 15},
            },
            "[DONE]",
        ]

    async def test_multimodal_streams_through_binding(self) -> None:
        requests: list[GatewayRunRequest] = []

        class Binding:
            async def run(self, request: GatewayRunRequest) -> httpx.Response:
                requests.append(request)
                return httpx.Response(
                    200,
                    content=(
                        b'data: {"type":"content_block_delta",'
                        b'"delta":{"type":"text_delta","text":"A cat"}}\n\n'
                        b'data: {"type":"message_stop"}\n\n'
                    ),
                )

        client = _open(gateway=GatewayBindingClient(Binding()))
        response = await client.post(
            "/api/chat",
            json={
                "model": "anthropic/claude-3-5-haiku-20241022",
                "messages": [
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": "What is this?"},
                            {"type": "image", "data": "iVBO", "media_type": "image/png"},
                        ],
                    }
                ],
            },
        )
        assert requests[0].provider == "anthropic"
        assert [p["type"] for p in _sse_payloads(response.text)[:-1]] == ["start", "text", "done"]

    async def test_multimodal_rejected_by_direct_client(self) -> None:
        client = _open(gateway=_gateway(lambda r: httpx.Response(200)))
        response = await client.post(
            "/api/chat",
            json={
                "model": "openai/gpt-4o",
                "messages": [
                    {"role": "user", "content": [{"type": "image", "url": "https://x/a.png"}]}
                ],
            },
        )
        assert response.status_code == 400

    async def test_local_model_rejected(self) -> None:
        client = _open(gateway=_gateway(lambda r: httpx.Response(200)))
        response = await client.post(
            "/api/chat",
            json={"model": "@cf/meta/llama", "messages": [{"role": "user", "content": "Hi"}]},
        )
        assert response.status_code == 400
        assert "Not an external model" in response.json()["error"]

    async def test_unknown_provider(self) -> None:
        client = _open(gateway=_gateway(lambda r: httpx.Response(200)))
        response = await client.post(
            "/api/chat",
            json={"model": "acme/rocket", "messages": [{"role": "user", "content": "Hi"}]},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Unknown provider: acme"}

    async def test_upstream_failure_is_bad_gateway(self) -> None:
        client = _open(gateway=_gateway(lambda r: httpx.Response(503, text="down")))
        response = await client.post(
            "/api/chat",
            json={"model": "openai/gpt-4o", "messages": [{"role": "user", "content": "Hi"}]},
        )
        assert response.status_code == 502
        assert "503" in response.json()["error"]

    async def test_malformed_upstream_body_is_bad_gateway(self) -> None:
        client = _open(gateway=_gateway(lambda r: httpx.Response(200, json={"choices": [None]})))
        response = await client.post(
            "/api/chat",
            json={
                "model": "openai/gpt-4o",
                "messages": [{"role": "user", "content": "Hi"}],
                "stream": False,
            },
        )
        assert response.status_code == 502
        assert response.json()["error"].startswith("Upstream returned an unexpected body")

    async def test_invalid_body(self) -> None:
        client = _open(gateway=_gateway(lambda r: httpx.Response(200)))
        response = await client.post("/api/chat", json={"model": "openai/gpt-4o", "messages": []})
        assert response.status_code == 422
