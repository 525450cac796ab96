"""Logging configuration shared by the explorer CLI and session."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

__all__ = ["JsonFormatter", "setup_logging", "LOGGER_NAMESPACES"]

LOGGER_NAMESPACES: tuple[str, ...] = ("exclurad_explorer", "exclurad_core")

_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_HANDLER_MARKER = "_exclurad_handler"

# Attributes present on every LogRecord; anything else came in via ``extra``.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """Render records as one JSON object per line, including ``extra`` fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key in _RESERVED_ATTRS or key.startswith("_"):
                continue
            payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, ensure_ascii=False, sort_keys=True)


def _resolve_level(raw: Any) -> int:
    if isinstance(raw, int):
        return raw
    name = str(raw or "info").strip().upper()
    level = logging.getLevelName(name)
    if isinstance(level, int):
        return level
    raise ValueError(f"Unknown logging level: {raw!r}")


def _build_handler(output: str) -> logging.Handler:
    target = (output or "stderr").strip()
    if target.lower() == "stderr":
        return logging.StreamHandler(sys.stderr)
    if target.lower() == "stdout":
        return logging.StreamHandler(sys.stdout)
    path = Path(target).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(path, encoding="utf-8")


def setup_logging(config: Mapping[str, Any] | None = None) -> logging.Handler:
    """Configure the package loggers from ``config['logging']``.

    Recognised keys are ``level`` (default ``info``), ``output`` (``stderr``,
    ``stdout`` or a file path) and ``format`` (``json`` or ``text``). Calling
    it again replaces the handler installed by a previous call.
    """

    section = dict((config or {}).get("logging", {}) or {})
    level = _resolve_level(section.get("level", "info"))
    fmt = str(section.get("format", "json")).lower()
    handler = _build_handler(str(section.get("output", "stderr")))
    handler.setFormatter(JsonFormatter() if fmt == "json" else logging.Formatter(_TEXT_FORMAT))
    setattr(handler, _HANDLER_MARKER, True)

    for name in LOGGER_NAMESPACES:
        logger = logging.getLogger(name)
        for existing in list(logger.handlers):
            if getattr(existing, _HANDLER_MARKER, False):
                logger.removeHandler(existing)
                existing.close()
        logger.addHandler(handler)
        logger.setLevel(level)
    return handler
