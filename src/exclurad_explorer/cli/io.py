"""Configuration helpers for the EXCLURAD explorer CLI."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from exclurad_explorer.configuration import load_project_config, resolve_pyproject_path

CONFIG_ENV_VAR = "EXCLURAD_EXPLORER_CONFIG"

__all__ = ["CONFIG_ENV_VAR", "load_cli_config", "config_base_dir"]


def _normalise_cli_config(payload: Mapping[str, Any], source: Path) -> dict[str, Any]:
    data = {str(key): value for key, value in payload.items()}
    data["_config_path"] = str(source.expanduser().resolve())
    return data


def _iter_unique_paths(candidates: List[Path]) -> List[Path]:
    seen: Dict[Path, None] = {}
    ordered: List[Path] = []
    for candidate in candidates:
        resolved = candidate.expanduser().resolve(strict=False)
        if resolved in seen:
            continue
        seen[resolved] = None
        ordered.append(resolved)
    return ordered


def _candidates(base: Path) -> List[Path]:
    resolved = resolve_pyproject_path(base)
    return [resolved] if resolved is not None else []


def load_cli_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load CLI defaults from ``pyproject.toml`` files.

    Lookup order: the explicit ``path``, the ``EXCLURAD_EXPLORER_CONFIG``
    environment variable, then the current working directory.
    """

    env_config = os.environ.get(CONFIG_ENV_VAR)
    bases: List[Path] = []
    if path is not None:
        bases.append(Path(path))
    if env_config:
        bases.append(Path(env_config))
    bases.append(Path.cwd())

    for candidate in _iter_unique_paths([item for base in bases for item in _candidates(base)]):
        loaded = load_project_config(candidate)
        if not loaded:
            continue
        payload, resolved = loaded
        return _normalise_cli_config(payload, resolved)

    return {"_config_path": None}


def config_base_dir(config: Mapping[str, Any]) -> Path:
    """Directory relative dataset paths resolve against."""

    raw = config.get("_config_path")
    if raw:
        return Path(str(raw)).parent
    return Path.cwd()
