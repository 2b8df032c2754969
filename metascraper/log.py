from __future__ import annotations

import logging
import sys
from typing import Any, Mapping, Optional, TextIO

from .errors import InvalidConfig

LOGGER_NAME = "metascraper"


class KeyValueFormatter(logging.Formatter):
    """Renders `time level logger msg key=value ...`.

    Key/value pairs come from the `fields` mapping passed via `extra`."""

    def __init__(self) -> None:
        super().__init__(fmt="%(asctime)s %(levelname)s %(name)s %(message)s", datefmt="%Y-%m-%dT%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields: Optional[Mapping[str, Any]] = getattr(record, "fields", None)
        if fields:
            line += " " + " ".join(f"{k}={_quote(v)}" for k, v in fields.items())
        return line


def _quote(value: Any) -> str:
    text = str(value)
    if not text or any(c.isspace() for c in text) or '"' in text or "=" in text:
        return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'
    return text


def setup_logging(level: str = "INFO", stream: Optional[TextIO] = None) -> logging.Logger:
    """Attach a single key/value stream handler to the package logger."""
    numeric = logging.getLevelName(level.upper()) if isinstance(level, str) else level
    if not isinstance(numeric, int):
        raise InvalidConfig(f"unknown log level: {level!r}")

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric)
    logger.handlers.clear()
    handler = logging.StreamHandler(stream=stream or sys.stderr)
    handler.setFormatter(KeyValueFormatter())
    logger.addHandler(handler)
    logger.propagate = False
    return logger
