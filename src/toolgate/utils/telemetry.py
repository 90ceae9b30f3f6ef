"""OpenTelemetry tracing helpers for toolgate.

The rest of the codebase calls ``get_tracer()`` without caring whether the
SDK is installed.  Without a configured SDK the API hands out no-op spans.

Usage::

    from toolgate.utils.telemetry import ATTR_RPC_METHOD, get_tracer

    _tracer = get_tracer(__name__)

    with _tracer.start_as_current_span("rpc.dispatch") as span:
        span.set_attribute(ATTR_RPC_METHOD, "tools/list")

Real export is switched on by :func:`configure_telemetry` (requires the
``otel`` extra: ``pip install toolgate[otel]``).
"""

from __future__ import annotations

from typing import Any

from opentelemetry import trace

# ---------------------------------------------------------------------------
# Semantic attribute keys used throughout toolgate instrumentation
# ---------------------------------------------------------------------------

ATTR_RPC_METHOD = "toolgate.rpc.method"
ATTR_RPC_ERROR_CODE = "toolgate.rpc.error_code"
ATTR_TOOL_NAME = "toolgate.tool.name"
ATTR_TOOL_IS_ERROR = "toolgate.tool.is_error"
ATTR_PROVIDER = "toolgate.provider"
ATTR_MODEL = "toolgate.model"
ATTR_TOKENS_PROMPT = "toolgate.tokens.prompt"
ATTR_TOKENS_COMPLETION = "toolgate.tokens.completion"
ATTR_TOKENS_TOTAL = "toolgate.tokens.total"
ATTR_DURATION_MS = "toolgate.duration_ms"
ATTR_HTTP_STATUS = "toolgate.http.status_code"

_INSTRUMENTATION_NAME = "toolgate"


def get_tracer(name: str | None = None) -> trace.Tracer:
    """Return a :class:`~opentelemetry.trace.Tracer` for *name*."""
    return trace.get_tracer(name or _INSTRUMENTATION_NAME)


def record_usage(span: Any, usage: Any) -> None:
    """Copy token counts from a :class:`~toolgate.core.interface.models.Usage` onto *span*."""
    if usage is None:
        return
    for key, value in (
        (ATTR_TOKENS_PROMPT, usage.prompt_tokens),
        (ATTR_TOKENS_COMPLETION, usage.completion_tokens),
        (ATTR_TOKENS_TOTAL, usage.total_tokens),
    ):
        if value is not None:
            span.set_attribute(key, value)


def configure_telemetry(
    *,
    service_name: str = "toolgate",
    export_to_console: bool = True,
    otlp_endpoint: str | None = None,
) -> None:
    """Install a tracer provider (requires ``toolgate[otel]``).

    Parameters
    ----------
    service_name:
        The ``service.name`` resource attribute.
    export_to_console:
        If ``True``, export spans as JSON to stdout.
    otlp_endpoint:
        If set, export spans via OTLP/gRPC to this endpoint.

    Raises
    ------
    ImportError
        If the ``opentelemetry-sdk`` package is not installed.
    """
    try:
        from opentelemetry.sdk.resources import Resource  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace import TracerProvider  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace.export import (  # pyright: ignore[reportMissingImports]
            BatchSpanProcessor,
            SimpleSpanProcessor,
        )
    except ImportError as exc:
        msg = (
            "opentelemetry-sdk is required for configure_telemetry(). "
            "Install it with: pip install toolgate[otel]"
        )
        raise ImportError(msg) from exc

    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))

    if export_to_console:
        from opentelemetry.sdk.trace.export import ConsoleSpanExporter  # pyright: ignore[reportMissingImports]

        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))

    if otlp_endpoint:
        provider.add_span_processor(BatchSpanProcessor(_otlp_exporter(otlp_endpoint)))

    trace.set_tracer_provider(provider)


def _otlp_exporter(endpoint: str) -> Any:
    try:
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (  # pyright: ignore[reportMissingImports]
            OTLPSpanExporter,
        )
    except ImportError as exc:
        msg = (
            "opentelemetry-exporter-otlp is required for OTLP export. "
            "Install it with: pip install toolgate[otel]"
        )
        raise ImportError(msg) from exc
    return OTLPSpanExporter(endpoint=endpoint)
