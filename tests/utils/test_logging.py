"""Tests for structured log output."""

from __future__ import annotations

import json
import logging
import sys

from toolgate.utils.logging import JsonFormatter, configure_logging


def _record(msg: str, *args: object, **extra: object) -> logging.LogRecord:
    record = logging.LogRecord("toolgate.test", logging.WARNING, __file__, 1, msg, args, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJsonFormatter:
    def test_basic_fields(self) -> None:
        entry = json.loads(JsonFormatter().format(_record("Upstream %s", "down")))
        assert entry["level"] == "warning"
        assert entry["message"] == "Upstream down"
        assert entry["logger"] == "toolgate.test"
        assert entry["ts"].endswith("+00:00")

    def test_extra_inlined(self) -> None:
        entry = json.loads(JsonFormatter().format(_record("x", provider="openai", status=429)))
        assert entry["provider"] == "openai"
        assert entry["status"] == 429
        assert "args" not in entry

    def test_exception_fields(self) -> None:
        try:
            raise ValueError("bad value")
        except ValueError:
            record = logging.LogRecord(
                "toolgate.test", logging.ERROR, __file__, 1, "failed", (), sys.exc_info()
            )
        entry = json.loads(JsonFormatter().format(record))
        assert entry["error"] == "bad value"
        assert "ValueError" in entry["stack"]


class TestConfigureLogging:
    def test_replaces_own_handler(self) -> None:
        logger = logging.getLogger("toolgate")
        before = list(logger.handlers)
        try:
            configure_logging("debug", json_output=True)
            configure_logging("info")
            ours = [h for h in logger.handlers if getattr(h, "_toolgate", False)]
            assert len(ours) == 1
            assert not isinstance(ours[0].formatter, JsonFormatter)
            assert logger.level == logging.INFO
        finally:
            for handler in list(logger.handlers):
                if handler not in before:
                    logger.removeHandler(handler)
            logger.setLevel(logging.NOTSET)

    def test_json_output(self) -> None:
        logger = logging.getLogger("toolgate")
        try:
            configure_logging("INFO", json_output=True)
            ours = [h for h in logger.handlers if getattr(h, "_toolgate", False)]
            assert isinstance(ours[0].formatter, JsonFormatter)
        finally:
            for handler in [h for h in logger.handlers if getattr(h, "_toolgate", False)]:
                logger.removeHandler(handler)
            logger.setLevel(logging.NOTSET)

