"""Tests for the package version metadata."""

import importlib

import pytest
from packaging.version import Version

import exclurad_explorer
from exclurad_explorer import _version as version_module


def test_version_is_semver_patch():
    version = Version(exclurad_explorer.__version__)

    assert len(version.release) == 3, (
        "exclurad_explorer.__version__ must contain exactly three release components"
    )


def test_version_override_from_environment(monkeypatch):
    monkeypatch.setenv("EXCLURAD_EXPLORER_VERSION", "9.8.7")
    importlib.reload(version_module)
    reloaded = importlib.reload(exclurad_explorer)

    assert reloaded.__version__ == "9.8.7"

    monkeypatch.setenv("EXCLURAD_EXPLORER_VERSION", "invalid-version")
    with pytest.raises(RuntimeError):
        importlib.reload(version_module)

    monkeypatch.setenv("EXCLURAD_EXPLORER_VERSION", "1.2")
    with pytest.raises(RuntimeError):
        importlib.reload(version_module)

    monkeypatch.delenv("EXCLURAD_EXPLORER_VERSION", raising=False)
    importlib.reload(version_module)
    importlib.reload(exclurad_explorer)


def test_changelog_fallback_reads_newest_heading():
    assert version_module._version_from_changelog() == "0.1.0"
