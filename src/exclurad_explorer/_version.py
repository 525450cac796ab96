"""Package version lookup with a CHANGELOG fallback for source checkouts."""

from __future__ import annotations

import os
import re
from importlib import metadata
from pathlib import Path

from packaging.version import InvalidVersion, Version

_PACKAGE_NAME = "exclurad-explorer"
_OVERRIDE_ENV_VAR = "EXCLURAD_EXPLORER_VERSION"


def _version_from_changelog() -> str:
    """Return the newest ``## vX.Y.Z`` heading of the repository CHANGELOG."""

    resolved = Path(__file__).resolve()
    candidates = [parent / "CHANGELOG.md" for parent in resolved.parents[1:3]]

    for changelog in candidates:
        if not changelog.is_file():
            continue
        for line in changelog.read_text(encoding="utf-8").splitlines():
            match = re.match(r"^## v(?P<version>\d+\.\d+\.\d+)\b", line)
            if match:
                return match.group("version")

    raise RuntimeError(
        f"Unable to determine the '{_PACKAGE_NAME}' version from package metadata or "
        "repository sources."
    )


def _load_version() -> str:
    """Return the validated ``MAJOR.MINOR.PATCH`` version string."""

    raw_version = os.environ.get(_OVERRIDE_ENV_VAR)
    if not raw_version:
        try:
            raw_version = metadata.version(_PACKAGE_NAME)
        except metadata.PackageNotFoundError:
            raw_version = _version_from_changelog()

    try:
        parsed = Version(raw_version)
    except InvalidVersion as exc:
        raise RuntimeError(
            f"Invalid version string for '{_PACKAGE_NAME}': "
            f"{raw_version!r}. Expected a semantic version."
        ) from exc

    if len(parsed.release) != 3:
        raise RuntimeError(
            f"The '{_PACKAGE_NAME}' version must follow the MAJOR.MINOR.PATCH format. "
            f"Found: {raw_version!r}."
        )

    return raw_version


__version__ = _load_version()

__all__ = ["__version__"]
