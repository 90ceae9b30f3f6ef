"""Built-in tools served by ``toolgate serve`` and ``toolgate call``.

``echo``, ``classify_model`` and ``list_models`` are always present;
``generate`` is added when a gateway client is available and relays a
prompt to an upstream model.
"""

from __future__ import annotations

import logging
from typing import Any

from toolgate.core.interface.config import ChatOptions, Provider, is_external_model, parse_external_model
from toolgate.core.interface.models import ToolResult
from toolgate.gateway.client import BaseGatewayClient
from toolgate.gateway.errors import GatewayError, UnknownProviderError
from toolgate.gateway.providers import get_external_model, list_external_models, resolve_provider
from toolgate.protocols.errors import ToolError
from toolgate.protocols.jsonrpc.dispatcher import RpcDispatcher
from toolgate.protocols.jsonrpc.models import ServerInfo
from toolgate.protocols.tools.registry import ToolRegistry
from toolgate.protocols.tools.results import list_response, success_response
from toolgate.protocols.tools.schema import (
    BooleanSchema,
    EnumSchema,
    NumberSchema,
    ObjectSchema,
    StringSchema,
)
from toolgate.sdk.models import ServerSettings

logger = logging.getLogger(__name__)

PROVIDER_IDS = tuple(provider.value for provider in Provider)


def build_registry(gateway: BaseGatewayClient | None = None) -> ToolRegistry:
    """Return a registry holding the built-in tools."""
    registry = ToolRegistry()

    @registry.tool(
        schema=ObjectSchema(
            properties={
                "text": StringSchema(min_length=1).describe("Text to send back"),
                "uppercase": BooleanSchema().describe("Upper-case the reply").default(False),
            }
        )
    )
    async def echo(params: dict[str, Any]) -> ToolResult:
        """Return the given text unchanged, or upper-cased."""
        text: str = params["text"]
        return success_response({"text": text.upper() if params["uppercase"] else text})

    @registry.tool(
        schema=ObjectSchema(
            properties={"model": StringSchema(min_length=1).describe("Model identifier")}
        )
    )
    async def classify_model(params: dict[str, Any]) -> ToolResult:
        """Tell whether a model id is routed to an upstream provider and what is known about it."""
        model_id: str = params["model"]
        route = parse_external_model(model_id)
        data: dict[str, Any] = {"model": model_id, "external": is_external_model(model_id)}
        if route is not None:
            data["provider"] = route.provider
            data["modelId"] = route.model
            config = get_external_model(route.provider, route.model)
            data["known"] = config is not None
            if config is not None:
                data["details"] = _model_to_wire(route.provider, config)
        return success_response(data)

    @registry.tool(
        schema=ObjectSchema(
            properties={
                "provider": EnumSchema(values=PROVIDER_IDS).describe("Only this provider").optional(),
                "vision": BooleanSchema().describe("Only vision-capable models").optional(),
                "offset": NumberSchema(integer=True, minimum=0).default(0),
                "limit": NumberSchema(integer=True, minimum=1, maximum=100).default(20),
            }
        )
    )
    async def list_models(params: dict[str, Any]) -> ToolResult:
        """List upstream models from the provider table, with pagination."""
        models = [
            _model_to_wire(provider.value, model)
            for provider, model in list_external_models()
            if params.get("provider") in (None, provider.value)
            and params.get("vision") in (None, model.supports_vision)
        ]
        offset, limit = params["offset"], params["limit"]
        return list_response(
            models[offset : offset + limit],
            item_key="models",
            offset=offset,
            limit=limit,
            total_count=len(models),
        )

    if gateway is not None:
        _register_generate(registry, gateway)

    return registry


def _register_generate(registry: ToolRegistry, gateway: BaseGatewayClient) -> None:
    @registry.tool(
        schema=ObjectSchema(
            properties={
                "model": StringSchema(min_length=3).describe("External model id, provider/model"),
                "prompt": StringSchema(min_length=1),
                "system_prompt": StringSchema().optional(),
                "max_tokens": NumberSchema(integer=True, minimum=1).optional(),
                "temperature": NumberSchema(minimum=0, maximum=2).optional(),
            }
        )
    )
    async def generate(params: dict[str, Any]) -> ToolResult:
        """Send a prompt to an upstream model through the gateway."""
        route = parse_external_model(params["model"])
        if route is None:
            raise ToolError(f"Not an external model: {params['model']}")
        try:
            options = ChatOptions(
                provider=resolve_provider(route.provider),
                model=route.model,
                max_tokens=params.get("max_tokens"),
                temperature=params.get("temperature"),
                system_prompt=params.get("system_prompt"),
            )
            result = await gateway.generate(params["prompt"], options)
        except UnknownProviderError as exc:
            raise ToolError(str(exc), provider=exc.provider) from exc
        except GatewayError as exc:
            logger.warning("generate tool failed: %s", exc)
            raise ToolError(str(exc)) from exc

        data: dict[str, Any] = {
            "response": result.response,
            "provider": result.provider,
            "model": result.model,
            "durationMs": result.duration_ms,
        }
        if result.usage is not None:
            data["usage"] = result.usage.to_wire()
        if result.thinking is not None:
            data["thinking"] = result.thinking
        return success_response(data)


def build_dispatcher(
    settings: ServerSettings | None = None,
    *,
    gateway: BaseGatewayClient | None = None,
    logger: logging.Logger | None = None,
) -> RpcDispatcher:
    """Registry of built-in tools wrapped in a dispatcher for *settings*."""
    settings = settings or ServerSettings()
    info = ServerInfo(
        name=settings.name,
        version=settings.version,
        instructions=settings.instructions,
    )
    return RpcDispatcher(build_registry(gateway), info, logger=logger)


def _model_to_wire(provider: str, model: Any) -> dict[str, Any]:
    return {
        "provider": provider,
        "id": model.id,
        "name": model.name,
        "contextWindow": model.context_window,
        "maxOutputTokens": model.max_output_tokens,
        "supportsStreaming": model.supports_streaming,
        "supportsVision": model.supports_vision,
        "supportsPdf": model.supports_pdf,
        "description": model.description,
    }
