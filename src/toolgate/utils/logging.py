"""Structured JSON log output.

Modules log through ``logging.getLogger(__name__)`` with metadata passed in
``extra=``; :class:`JsonFormatter` renders each record as one JSON object::

    {"level": "info", "message": "...", "ts": "2024-01-01T00:00:00+00:00", ...}
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

# Attributes every LogRecord carries; anything else came from ``extra=``.
_RESERVED = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None)).keys()
) | {"message", "asctime", "taskName"}


class JsonFormatter(logging.Formatter):
    """Format records as single-line JSON with ``extra`` metadata inlined."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "level": record.levelname.lower(),
            "message": record.getMessage(),
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "logger": record.name,
        }
        for key, value in vars(record).items():
            if key not in _RESERVED and not key.startswith("_"):
                entry[key] = value

        if record.exc_info and record.exc_info[1] is not None:
            entry["error"] = str(record.exc_info[1])
            entry["stack"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def configure_logging(level: str | int = "INFO", *, json_output: bool = False) -> None:
    """Attach a stderr handler to the ``toolgate`` logger.

    Calling it again replaces the handler rather than stacking another one.
    """
    logger = logging.getLogger("toolgate")
    for handler in list(logger.handlers):
        if getattr(handler, "_toolgate", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler._toolgate = True  # type: ignore[attr-defined]
    if json_output:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))

    logger.addHandler(handler)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
