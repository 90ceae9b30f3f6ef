"""Tests for the ``toolgate`` CLI."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import AsyncMock, patch

from click.testing import CliRunner

from toolgate.cli import main


class TestVersion:
    def test_version(self) -> None:
        result = CliRunner().invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestModels:
    def test_table(self) -> None:
        result = CliRunner().invoke(main, ["models"])
        assert result.exit_code == 0
        assert "Upstream Models" in result.output

    def test_json_filtered(self) -> None:
        result = CliRunner().invoke(main, ["models", "--provider", "deepseek", "--json"])
        assert result.exit_code == 0
        rows = json.loads(result.output)
        assert [row["id"] for row in rows] == ["deepseek-chat", "deepseek-reasoner"]
        assert {row["provider"] for row in rows} == {"deepseek"}

    def test_unknown_provider_choice(self) -> None:
        result = CliRunner().invoke(main, ["models", "--provider", "acme"])
        assert result.exit_code != 0


class TestClassify:
    def test_external(self) -> None:
        result = CliRunner().invoke(main, ["classify", "anthropic/claude-3-5-haiku-20241022"])
        assert result.exit_code == 0
        assert "is external" in result.output
        assert "Provider: anthropic" in result.output

    def test_local(self) -> None:
        result = CliRunner().invoke(main, ["classify", "@cf/meta/llama-3.1-8b-instruct"])
        assert result.exit_code == 0
        assert "local model" in result.output


class TestTools:
    def test_json(self) -> None:
        result = CliRunner().invoke(main, ["tools", "--json"])
        assert result.exit_code == 0
        names = [tool["name"] for tool in json.loads(result.output)["tools"]]
        assert names == ["echo", "classify_model", "list_models"]

    def test_table(self) -> None:
        result = CliRunner().invoke(main, ["tools"])
        assert result.exit_code == 0
        assert "echo" in result.output


class TestCall:
    def test_tools_call(self) -> None:
        params = json.dumps({"name": "echo", "arguments": {"text": "hey"}})
        result = CliRunner().invoke(main, ["call", "tools/call", "--params", params])
        assert result.exit_code == 0
        response = json.loads(result.output)
        assert response["id"] == 1
        assert json.loads(response["result"]["content"][0]["text"])["text"] == "hey"

    def test_notification(self) -> None:
        result = CliRunner().invoke(main, ["call", "initialized", "--notify"])
        assert result.exit_code == 0
        assert "no response" in result.output

    def test_bad_params(self) -> None:
        result = CliRunner().invoke(main, ["call", "ping", "--params", "{nope"])
        assert result.exit_code == 1
        assert "Invalid --params JSON" in result.output

    def test_bad_config(self, tmp_path: Path) -> None:
        config = tmp_path / "toolgate.yaml"
        config.write_text("- not a mapping\n")
        result = CliRunner().invoke(main, ["call", "ping", "--config", str(config)])
        assert result.exit_code == 1
        assert "Config error" in result.output


class TestServe:
    def test_serve_without_gateway(self, tmp_path: Path) -> None:
        config = tmp_path / "toolgate.yaml"
        config.write_text("server:\n  name: demo\n")
        with (
            patch("toolgate.transport.app.serve", new_callable=AsyncMock) as mock_serve,
            patch("toolgate.utils.logging.configure_logging") as mock_logging,
        ):
            result = CliRunner().invoke(main, ["serve", "--config", str(config), "--port", "9001"])

        assert result.exit_code == 0, result.output
        assert "chat relay and generate tool disabled" in result.output
        mock_logging.assert_called_once_with("INFO", json_output=False)
        app, settings = mock_serve.await_args.args
        assert settings.port == 9001
        assert settings.name == "demo"
