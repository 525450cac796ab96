from __future__ import annotations

import os
import subprocess
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Sequence

import pytest

from exclurad_core.errors import SimulationError
from exclurad_explorer.batch.driver import (
    OUTPUT_FILES,
    default_results_dir,
    discover_inputs,
    run_batch,
)


def _write_inputs(directory: Path, count: int) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    for index in range(count):
        (directory / f"input_{index}.dat").write_text(f"run {index}\n", encoding="utf8")
    return directory


class FakeExecutable:
    """Stands in for ``subprocess.run``: echoes ``input.dat`` into outputs."""

    def __init__(
        self,
        *,
        fail_on: Sequence[str] = (),
        outputs: Sequence[str] = ("all.dat", "radcor.dat"),
    ) -> None:
        self.fail_on = tuple(fail_on)
        self.outputs = tuple(outputs)
        self.calls: list[dict[str, Any]] = []

    def __call__(self, command: Sequence[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        cwd = Path(kwargs["cwd"])
        payload = (cwd / "input.dat").read_text(encoding="utf8")
        self.calls.append({"command": list(command), "input": payload, **kwargs})
        for name in self.outputs:
            (cwd / name).write_text(payload, encoding="utf8")
        code = 2 if payload.strip() in self.fail_on else 0
        return subprocess.CompletedProcess(list(command), code, stdout="", stderr="nag failure" if code else "")


def test_discover_inputs_orders_numerically(tmp_path: Path) -> None:
    directory = _write_inputs(tmp_path / "inputs", 12)
    (directory / "notes.txt").write_text("ignored", encoding="utf8")

    found = discover_inputs(directory)

    assert [index for index, _ in found] == list(range(12))


def test_discover_inputs_requires_a_directory(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        discover_inputs(tmp_path / "absent")


def test_default_results_dir_is_timestamped(tmp_path: Path) -> None:
    path = default_results_dir(tmp_path, datetime(2024, 1, 2, 3, 4, 5))

    assert path == tmp_path / "results_20240102_030405"


def test_run_batch_moves_outputs_per_index(tmp_path: Path) -> None:
    inputs = _write_inputs(tmp_path / "inputs", 3)
    work = tmp_path / "work"
    work.mkdir()
    runner = FakeExecutable()

    report = run_batch(
        inputs, executable="exclurad.exe", workdir=work, results_dir="results", runner=runner
    )

    assert report.results_dir == work.resolve() / "results"
    assert [call["input"] for call in runner.calls] == ["run 0\n", "run 1\n", "run 2\n"]
    assert all(call["cwd"] == str(work.resolve()) for call in runner.calls)
    produced = sorted(path.name for path in report.results_dir.iterdir())
    assert produced == sorted(f"{stem}_{n}.dat" for stem in ("all", "radcor") for n in range(3))
    assert (report.results_dir / "radcor_1.dat").read_text(encoding="utf8") == "run 1\n"
    assert not any((work / name).exists() for name in OUTPUT_FILES)
    assert report.failed == ()


def test_run_batch_stops_on_failure(tmp_path: Path) -> None:
    inputs = _write_inputs(tmp_path / "inputs", 3)
    runner = FakeExecutable(fail_on=("run 1",))

    with pytest.raises(SimulationError) as excinfo:
        run_batch(inputs, executable="exclurad.exe", workdir=tmp_path, results_dir="out", runner=runner)

    assert excinfo.value.returncode == 2
    assert excinfo.value.context["index"] == 1
    assert len(runner.calls) == 2


def test_run_batch_keep_going_records_failures(tmp_path: Path) -> None:
    inputs = _write_inputs(tmp_path / "inputs", 3)
    runner = FakeExecutable(fail_on=("run 1",))

    report = run_batch(
        inputs,
        executable="exclurad.exe",
        workdir=tmp_path,
        results_dir="out",
        keep_going=True,
        runner=runner,
    )

    assert [run.index for run in report.failed] == [1]
    assert len(report.runs) == 3
    assert report.as_dict()["failed"] == [1]


def test_run_batch_resolves_executable_inside_workdir(tmp_path: Path) -> None:
    inputs = _write_inputs(tmp_path / "inputs", 1)
    build = tmp_path / "build"
    build.mkdir()
    (build / "exclurad.exe").write_text("", encoding="utf8")
    runner = FakeExecutable()

    run_batch(inputs, executable="build/exclurad.exe", workdir=tmp_path, results_dir="out", runner=runner)

    assert runner.calls[0]["command"] == [str(tmp_path.resolve() / "build" / "exclurad.exe")]


def test_run_batch_launch_failure_is_a_simulation_error(tmp_path: Path) -> None:
    inputs = _write_inputs(tmp_path / "inputs", 1)

    with pytest.raises(SimulationError, match="Could not launch"):
        run_batch(inputs, executable=str(tmp_path / "missing.exe"), workdir=tmp_path, results_dir="out")


@pytest.mark.skipif(os.name != "posix", reason="uses an executable script")
def test_run_batch_with_real_process(tmp_path: Path) -> None:
    inputs = _write_inputs(tmp_path / "inputs", 2)
    script = tmp_path / "fake_exclurad.py"
    script.write_text(
        "import pathlib\n"
        "text = pathlib.Path('input.dat').read_text()\n"
        "pathlib.Path('radtot.dat').write_text(text.upper())\n",
        encoding="utf8",
    )

    report = run_batch(
        inputs,
        executable=[sys.executable, str(script)],
        workdir=tmp_path,
        results_dir="out",
    )

    assert (report.results_dir / "radtot_1.dat").read_text(encoding="utf8") == "RUN 1\n"
