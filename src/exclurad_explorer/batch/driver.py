"""Run the external EXCLURAD executable once per generated input file."""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from exclurad_core.errors import SimulationError

__all__ = [
    "OUTPUT_FILES",
    "RunRecord",
    "BatchReport",
    "discover_inputs",
    "default_results_dir",
    "run_batch",
]

logger = logging.getLogger(__name__)

OUTPUT_FILES: Tuple[str, ...] = (
    "all.dat",
    "radasm.dat",
    "radcor.dat",
    "radsigmi.dat",
    "radsigpl.dat",
    "radtot.dat",
)
INPUT_NAME = "input.dat"
_INPUT_PATTERN = re.compile(r"^input_(\d+)\.dat$")

Runner = Callable[..., "subprocess.CompletedProcess[str]"]


@dataclass(frozen=True, slots=True)
class RunRecord:
    """Outcome of a single executable invocation."""

    index: int
    input_path: Path
    returncode: int
    outputs: Tuple[Path, ...]

    @property
    def ok(self) -> bool:
        return self.returncode == 0


@dataclass(frozen=True, slots=True)
class BatchReport:
    results_dir: Path
    runs: Tuple[RunRecord, ...]

    @property
    def failed(self) -> Tuple[RunRecord, ...]:
        return tuple(run for run in self.runs if not run.ok)

    def as_dict(self) -> dict:
        return {
            "results_dir": str(self.results_dir),
            "runs": [
                {
                    "index": run.index,
                    "input": str(run.input_path),
                    "returncode": run.returncode,
                    "outputs": [str(path) for path in run.outputs],
                }
                for run in self.runs
            ],
            "failed": [run.index for run in self.failed],
        }


def discover_inputs(input_dir: Path | str) -> List[Tuple[int, Path]]:
    """Return ``(n, path)`` for every ``input_<n>.dat``, ordered by ``n``."""

    directory = Path(input_dir).expanduser()
    if not directory.is_dir():
        raise FileNotFoundError(f"Input directory {directory} does not exist")
    found: List[Tuple[int, Path]] = []
    for path in directory.iterdir():
        match = _INPUT_PATTERN.match(path.name)
        if match and path.is_file():
            found.append((int(match.group(1)), path))
    found.sort(key=lambda item: item[0])
    return found


def default_results_dir(base: Path, now: Optional[datetime] = None) -> Path:
    stamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    return base / f"results_{stamp}"


def _resolve_command(executable: str | Path | Sequence[str], workdir: Path) -> List[str]:
    if isinstance(executable, (str, Path)):
        candidate = Path(executable).expanduser()
        if not candidate.is_absolute() and (workdir / candidate).exists():
            candidate = workdir / candidate
        return [str(candidate)]
    command = [str(part) for part in executable]
    if not command:
        raise ValueError("Executable command must not be empty")
    return command


def run_batch(
    input_dir: Path | str,
    *,
    executable: str | Path | Sequence[str],
    workdir: Path | str = ".",
    results_dir: Path | str | None = None,
    keep_going: bool = False,
    runner: Runner = subprocess.run,
) -> BatchReport:
    """Process every input file in index order.

    Each input is copied to ``<workdir>/input.dat`` before the executable
    runs with ``workdir`` as its current directory. The outputs it leaves
    behind are moved to ``<results>/<stem>_<n>.dat``. A failing run raises
    :class:`SimulationError` unless ``keep_going`` is set, in which case it
    is recorded in the report and the loop continues.
    """

    work = Path(workdir).expanduser().resolve()
    inputs = discover_inputs(input_dir)
    if results_dir is None:
        target = default_results_dir(work)
    else:
        target = Path(results_dir).expanduser()
        if not target.is_absolute():
            target = work / target
    target.mkdir(parents=True, exist_ok=True)
    command = _resolve_command(executable, work)
    logger.info(
        "Starting batch",
        extra={"event": "batch.started", "inputs": len(inputs), "results_dir": str(target)},
    )

    runs: List[RunRecord] = []
    for index, input_path in inputs:
        shutil.copyfile(input_path, work / INPUT_NAME)
        try:
            completed = runner(command, cwd=str(work), capture_output=True, text=True, check=False)
        except OSError as exc:
            raise SimulationError(
                f"Could not launch {command[0]}: {exc}",
                context={"index": index, "command": " ".join(command)},
            ) from exc

        moved: List[Path] = []
        for name in OUTPUT_FILES:
            produced = work / name
            if produced.is_file():
                destination = target / f"{Path(name).stem}_{index}.dat"
                shutil.move(str(produced), str(destination))
                moved.append(destination)
        record = RunRecord(
            index=index,
            input_path=input_path,
            returncode=completed.returncode,
            outputs=tuple(moved),
        )
        runs.append(record)

        if record.ok:
            logger.info(
                "Processed input file",
                extra={"event": "batch.run", "index": index, "outputs": len(moved)},
            )
            continue
        context = {"index": index, "input": str(input_path), "stderr": (completed.stderr or "")[-500:]}
        if not keep_going:
            raise SimulationError(
                f"Executable exited with status {completed.returncode} on input_{index}.dat",
                returncode=completed.returncode,
                context=context,
            )
        logger.warning(
            "Executable failed; continuing",
            extra={"event": "batch.failed", "returncode": completed.returncode, **context},
        )

    report = BatchReport(results_dir=target, runs=tuple(runs))
    logger.info(
        "Batch finished",
        extra={"event": "batch.finished", "runs": len(runs), "failed": len(report.failed)},
    )
    return report
