"""Pydantic models for the ``toolgate.yaml`` configuration file."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator


class GatewaySettings(BaseModel):
    """Upstream relay settings.

    With ``api_token`` set the direct client is used; otherwise requests go
    through a binding at ``binding_url``.
    """

    account_id: str = ""
    gateway_id: str = "default"
    api_token: str | None = None
    base_url: str = "https://gateway.ai.cloudflare.com/v1"
    binding_url: str | None = None
    timeout: float = Field(default=60.0, gt=0)
    default_temperature: float = Field(default=0.7, ge=0, le=2)
    default_max_tokens: int = Field(default=4096, gt=0)

    @field_validator("api_token", "binding_url")
    @classmethod
    def _blank_is_unset(cls, value: str | None) -> str | None:
        # ``${VAR}`` of an unset variable survives expansion verbatim.
        if value is None or not value.strip() or value.startswith("${"):
            return None
        return value


class ServerSettings(BaseModel):
    """Identity and listening address of the JSON-RPC server."""

    name: str = "toolgate"
    version: str = "0.1.0"
    instructions: str = "Tools exposed by the toolgate server."
    base_path: str = "/mcp"
    host: str = "127.0.0.1"
    port: int = Field(default=8000, ge=0, le=65535)
    keepalive_interval: float = Field(default=30.0, gt=0)

    @field_validator("base_path")
    @classmethod
    def _normalize_base_path(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if value and not value.startswith("/"):
            value = "/" + value
        return value


class LoggingSettings(BaseModel):
    """Log level and output format."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    json_output: bool = False

    @field_validator("level", mode="before")
    @classmethod
    def _upper(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value


class TelemetrySettings(BaseModel):
    """Optional telemetry configuration."""

    enabled: bool = False
    service_name: str = "toolgate"
    export_to_console: bool = False
    otlp_endpoint: str | None = None


class ToolgateConfig(BaseModel):
    """Top-level configuration parsed from YAML."""

    gateway: GatewaySettings = Field(default_factory=GatewaySettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    telemetry: TelemetrySettings = Field(default_factory=TelemetrySettings)
