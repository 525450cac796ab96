"""Read explorer settings from the ``[tool.exclurad_explorer]`` table."""

from __future__ import annotations

import logging
from collections.abc import Mapping as ABCMapping
from pathlib import Path
from typing import Any

try:  # Python 3.11+
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover - Python < 3.11 fallback
    import tomli as tomllib  # type: ignore

__all__ = ["CONFIG_SECTIONS", "load_project_config", "resolve_pyproject_path"]

logger = logging.getLogger(__name__)

PYPROJECT_NAME = "pyproject.toml"
TOOL_TABLE = "exclurad_explorer"

#: Sub-tables the explorer understands; anything else is ignored with a warning.
CONFIG_SECTIONS: tuple[str, ...] = ("datasets", "query", "tolerances", "logging")


def _plain(value: Any) -> Any:
    if isinstance(value, ABCMapping):
        return {str(key): _plain(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_plain(item) for item in value]
    return value


def resolve_pyproject_path(candidate: Path) -> Path | None:
    """Map a directory or ``pyproject.toml`` path to the file to read.

    Paths naming any other file yield ``None``.
    """

    candidate = candidate.expanduser()
    if candidate.name == PYPROJECT_NAME:
        return candidate
    if candidate.suffix:
        return None
    return candidate / PYPROJECT_NAME


def _read_toml(path: Path) -> ABCMapping[str, Any] | None:
    if not path.is_file():
        return None
    with path.open("rb") as handle:
        return tomllib.load(handle)


def _select_sections(table: ABCMapping[str, Any], source: Path) -> dict[str, Any]:
    sections: dict[str, Any] = {}
    for key, value in table.items():
        name = str(key)
        if name not in CONFIG_SECTIONS:
            logger.warning(
                "Ignoring unknown explorer config section %r",
                name,
                extra={"event": "config.unknown_section", "path": str(source)},
            )
            continue
        if not isinstance(value, ABCMapping):
            logger.warning(
                "Explorer config section %r must be a table",
                name,
                extra={"event": "config.invalid_section", "path": str(source)},
            )
            continue
        sections[name] = _plain(value)
    return sections


def load_project_config(path: Path) -> tuple[dict[str, Any], Path] | None:
    """Load ``[tool.exclurad_explorer]`` from the project file at ``path``.

    Returns the recognised sub-tables together with the resolved file path,
    or ``None`` when the file or the table is missing.
    """

    pyproject_path = resolve_pyproject_path(path)
    if pyproject_path is None:
        return None
    pyproject_path = pyproject_path.resolve(strict=False)

    document = _read_toml(pyproject_path)
    tool = document.get("tool") if document else None
    table = tool.get(TOOL_TABLE) if isinstance(tool, ABCMapping) else None
    if not isinstance(table, ABCMapping):
        return None

    sections = _select_sections(table, pyproject_path)
    logger.debug(
        "Loaded explorer config",
        extra={
            "event": "config.loaded",
            "path": str(pyproject_path),
            "sections": sorted(sections),
        },
    )
    return sections, pyproject_path
