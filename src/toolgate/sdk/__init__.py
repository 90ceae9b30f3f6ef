"""toolgate SDK — configuration models and loading."""

from toolgate.sdk.config import ConfigLoader, load_config
from toolgate.sdk.errors import ConfigError
from toolgate.sdk.models import (
    GatewaySettings,
    LoggingSettings,
    ServerSettings,
    TelemetrySettings,
    ToolgateConfig,
)

__all__ = [
    "ConfigError",
    "ConfigLoader",
    "GatewaySettings",
    "LoggingSettings",
    "ServerSettings",
    "TelemetrySettings",
    "ToolgateConfig",
    "load_config",
]
