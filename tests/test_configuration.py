from __future__ import annotations

from pathlib import Path

import pytest

from exclurad_core.query import QueryOptions
from exclurad_explorer.cli import io as cli_io
from exclurad_explorer.configuration import load_project_config, resolve_pyproject_path

from tests.helpers import write_pyproject

PYPROJECT = """
    [project]
    name = "analysis"

    [tool.exclurad_explorer.datasets]
    root = "published"
    default = "full"

    [tool.exclurad_explorer.query]
    min_support = 5
    max_traces = 6

    [tool.exclurad_explorer.tolerances]
    phi = 0.01

    [tool.exclurad_explorer.logging]
    level = "debug"
"""


def test_resolve_pyproject_path(tmp_path: Path) -> None:
    assert resolve_pyproject_path(tmp_path) == tmp_path / "pyproject.toml"
    assert resolve_pyproject_path(tmp_path / "pyproject.toml") == tmp_path / "pyproject.toml"
    assert resolve_pyproject_path(tmp_path / "settings.yaml") is None


def test_load_project_config_returns_tool_section(tmp_path: Path) -> None:
    path = write_pyproject(tmp_path, PYPROJECT)

    loaded = load_project_config(path)

    assert loaded is not None
    section, resolved = loaded
    assert resolved == path.resolve()
    assert section["datasets"] == {"root": "published", "default": "full"}
    assert section["query"]["min_support"] == 5


def test_load_project_config_without_section(tmp_path: Path) -> None:
    path = write_pyproject(tmp_path, '[project]\nname = "other"\n')

    assert load_project_config(path) is None
    assert load_project_config(tmp_path / "missing" / "pyproject.toml") is None


@pytest.mark.parametrize("mode", ["explicit", "env", "cwd"])
def test_load_cli_config_lookup(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, mode: str
) -> None:
    project = tmp_path / "project"
    project.mkdir()
    path = write_pyproject(project, PYPROJECT)
    elsewhere = tmp_path / "elsewhere"
    elsewhere.mkdir()
    monkeypatch.chdir(elsewhere)
    monkeypatch.delenv(cli_io.CONFIG_ENV_VAR, raising=False)

    if mode == "explicit":
        config = cli_io.load_cli_config(path)
    elif mode == "env":
        monkeypatch.setenv(cli_io.CONFIG_ENV_VAR, str(project))
        config = cli_io.load_cli_config()
    else:
        monkeypatch.chdir(project)
        config = cli_io.load_cli_config()

    assert config["_config_path"] == str(path.resolve())
    assert cli_io.config_base_dir(config) == path.resolve().parent
    options = QueryOptions.from_config(config)
    assert (options.min_support, options.max_traces) == (5, 6)
    assert options.tolerances.phi == pytest.approx(0.01)


def test_load_cli_config_without_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(cli_io.CONFIG_ENV_VAR, raising=False)

    config = cli_io.load_cli_config()

    assert config == {"_config_path": None}
    assert cli_io.config_base_dir(config) == Path.cwd()


def test_load_project_config_drops_unknown_sections(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    path = write_pyproject(
        tmp_path,
        """
        [tool.exclurad_explorer]
        query = "not a table"

        [tool.exclurad_explorer.plots]
        theme = "dark"

        [tool.exclurad_explorer.tolerances]
        W = 0.001
        """,
    )

    with caplog.at_level("WARNING", logger="exclurad_explorer.configuration"):
        loaded = load_project_config(path)

    assert loaded is not None
    section, _ = loaded
    assert section == {"tolerances": {"W": 0.001}}
    events = {getattr(record, "event", None) for record in caplog.records}
    assert events == {"config.unknown_section", "config.invalid_section"}
