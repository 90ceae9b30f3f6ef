"""ConfigLoader — reads ``toolgate.yaml`` into a :class:`ToolgateConfig`."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from toolgate.sdk.errors import ConfigError
from toolgate.sdk.models import ToolgateConfig


class ConfigLoader:
    """Load and validate a YAML configuration file.

    Usage::

        config = ConfigLoader(Path("toolgate.yaml")).load()
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    def load(self) -> ToolgateConfig:
        """Read YAML, interpolate env vars, and validate.

        Environment variables in the form ``${VAR}`` or ``$VAR`` are expanded
        using :func:`os.path.expandvars` before YAML parsing.  An empty file
        yields the defaults.

        Raises:
            ConfigError: On read errors, YAML parse errors or validation failures.
        """
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Cannot read {self._path}: {exc}") from exc

        expanded = os.path.expandvars(raw)

        try:
            data: Any = yaml.safe_load(expanded)
        except yaml.YAMLError as exc:
            raise ConfigError(f"YAML parse error: {exc}") from exc

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError("Configuration YAML must be a mapping")

        try:
            return ToolgateConfig.model_validate(data)
        except ValidationError as exc:
            raise ConfigError(str(exc)) from exc


def load_config(path: Path | str | None) -> ToolgateConfig:
    """Load *path*, or return the defaults when no path is given."""
    if path is None:
        return ToolgateConfig()
    return ConfigLoader(path).load()
