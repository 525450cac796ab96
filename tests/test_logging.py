from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from exclurad_explorer.logging import JsonFormatter, setup_logging


def _record(**extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        "exclurad_explorer.session", logging.INFO, __file__, 1, "Loaded %s", ("sample",), None
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_extra_fields() -> None:
    payload = json.loads(JsonFormatter().format(_record(event="dataset.loaded", rows=10)))

    assert payload["message"] == "Loaded sample"
    assert payload["level"] == "info"
    assert payload["logger"] == "exclurad_explorer.session"
    assert payload["event"] == "dataset.loaded"
    assert payload["rows"] == 10
    assert "timestamp" in payload


def test_json_formatter_serialises_unknown_types() -> None:
    payload = json.loads(JsonFormatter().format(_record(path=Path("data/meta.json"))))

    assert payload["path"] == str(Path("data/meta.json"))


def test_setup_logging_writes_json_lines_to_file(tmp_path: Path) -> None:
    target = tmp_path / "logs" / "explorer.jsonl"

    handler = setup_logging({"logging": {"level": "debug", "output": str(target), "format": "json"}})
    logging.getLogger("exclurad_core.mask").debug("masked", extra={"event": "mask.built"})
    handler.flush()

    lines = target.read_text(encoding="utf8").splitlines()
    assert json.loads(lines[-1])["event"] == "mask.built"
    assert logging.getLogger("exclurad_explorer").level == logging.DEBUG


def test_setup_logging_replaces_its_previous_handler() -> None:
    first = setup_logging({"logging": {"output": "stderr", "format": "text"}})
    second = setup_logging({"logging": {"output": "stdout"}})

    handlers = logging.getLogger("exclurad_explorer").handlers
    assert second in handlers
    assert first not in handlers
    assert isinstance(second.formatter, JsonFormatter)


def test_setup_logging_rejects_unknown_levels() -> None:
    with pytest.raises(ValueError, match="Unknown logging level"):
        setup_logging({"logging": {"level": "chatty"}})
