"""Optional ``meta.json`` sidecar with row-count summaries."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

__all__ = ["DatasetMetadata", "load_metadata"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DatasetMetadata:
    """Row counts published alongside the dataset files."""

    web_rows: int
    sample_rows: int
    extra: Mapping[str, Any]

    def status_line(self) -> str:
        return f"rows (dedup): {self.web_rows:,} • sample: {self.sample_rows:,}"


def _coerce_count(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        count = int(value)
    except (TypeError, ValueError):
        return None
    return count if count >= 0 else None


def load_metadata(path: Path | str) -> Optional[DatasetMetadata]:
    """Load the sidecar at ``path``.

    The sidecar is optional: a missing or malformed file is logged and
    yields ``None`` instead of failing the caller.
    """

    source = Path(path).expanduser()
    if not source.is_file():
        logger.debug(
            "Metadata sidecar not found",
            extra={"event": "metadata.missing", "path": str(source)},
        )
        return None
    try:
        with source.open("r", encoding="utf8") as handle:
            payload = json.load(handle)
    except (OSError, ValueError) as exc:
        logger.warning(
            "Metadata sidecar could not be read: %s",
            exc,
            extra={"event": "metadata.invalid", "path": str(source)},
        )
        return None

    counts = payload.get("counts") if isinstance(payload, dict) else None
    if not isinstance(counts, dict):
        logger.warning(
            "Metadata sidecar has no 'counts' table",
            extra={"event": "metadata.invalid", "path": str(source)},
        )
        return None
    web_rows = _coerce_count(counts.get("web_rows"))
    sample_rows = _coerce_count(counts.get("sample_rows"))
    if web_rows is None or sample_rows is None:
        logger.warning(
            "Metadata sidecar counts are incomplete",
            extra={"event": "metadata.invalid", "path": str(source)},
        )
        return None
    extra = {str(key): value for key, value in payload.items() if key != "counts"}
    return DatasetMetadata(web_rows=web_rows, sample_rows=sample_rows, extra=extra)
