"""Generate EXCLURAD ``input_<n>.dat`` files over a kinematic grid."""

from __future__ import annotations

import logging
from collections.abc import Mapping as ABCMapping
from dataclasses import dataclass, field, fields
from itertools import product
from pathlib import Path
from typing import Any, Iterable, Iterator, List, Mapping, Sequence, Tuple

import yaml

__all__ = [
    "DEFAULT_PHI_VALUES",
    "RunParameters",
    "KinematicGrid",
    "GridFile",
    "load_grid_file",
    "render_input",
    "generate_inputs",
]

logger = logging.getLogger(__name__)

DEFAULT_PHI_VALUES: Tuple[float, ...] = (18.0, 54.0, 90.0, 126.0, 162.0, 198.0, 234.0, 270.0, 306.0, 342.0)


@dataclass(frozen=True, slots=True)
class RunParameters:
    """Header of an input file: model and beam settings shared by every run."""

    model: int = 3
    mode: int = 0
    beam_momentum: float = 6.53
    target_momentum: float = 0.0
    lepton: int = 1
    hadron: int = 1
    vcut: float = 0.166

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "RunParameters":
        if not data:
            return cls()
        known = {item.name: item for item in fields(cls)}
        unknown = sorted(set(data) - set(known))
        if unknown:
            raise ValueError(f"Unknown run parameters: {', '.join(unknown)}")
        values: dict[str, Any] = {}
        for name, raw in data.items():
            caster = int if known[name].type in ("int", int) else float
            try:
                values[name] = caster(raw)
            except (TypeError, ValueError):
                raise ValueError(f"Run parameter {name!r} must be numeric, got {raw!r}") from None
        return cls(**values)

    def header_lines(self) -> List[str]:
        rows = (
            (self.model, "1: AO 2: maid98  3: maid2000"),
            (self.mode, "0: Full, 1: Factorizable and Leading log"),
            (_fmt(self.beam_momentum), "bmom - lepton momentum"),
            (_fmt(self.target_momentum), "tmom - momentum per nucleon"),
            (self.lepton, "lepton - 1 electron, 2 muon"),
            (self.hadron, "ivec - detected hadron (1) p, (2) pi+"),
            (_fmt(self.vcut), "vcut - cut on inelasticity (0.) if no cut, negative -- v"),
        )
        return [f"{str(value):<8}!  {comment}" for value, comment in rows]


def _fmt(value: float) -> str:
    return repr(float(value))


def _as_values(raw: Any, name: str) -> Tuple[float, ...]:
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        raw = [raw]
    if not isinstance(raw, Iterable) or isinstance(raw, (str, bytes)):
        raise ValueError(f"Grid entry {name!r} must be a number or a list of numbers")
    try:
        values = tuple(float(item) for item in raw)
    except (TypeError, ValueError):
        raise ValueError(f"Grid entry {name!r} contains a non-numeric value") from None
    if not values:
        raise ValueError(f"Grid entry {name!r} is empty")
    return values


@dataclass(frozen=True, slots=True)
class KinematicGrid:
    """Cartesian W × Q² × cosθ* grid; every point is sampled at all φ* values."""

    w_values: Tuple[float, ...]
    q2_values: Tuple[float, ...]
    cos_values: Tuple[float, ...]
    phi_values: Tuple[float, ...] = field(default=DEFAULT_PHI_VALUES)

    def __post_init__(self) -> None:
        for name in ("w_values", "q2_values", "cos_values", "phi_values"):
            object.__setattr__(self, name, _as_values(getattr(self, name), name))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "KinematicGrid":
        aliases = {
            "w_values": ("W", "w"),
            "q2_values": ("Q2", "q2"),
            "cos_values": ("cos", "cos_theta"),
            "phi_values": ("phi",),
        }
        values: dict[str, Any] = {}
        for name, keys in aliases.items():
            for key in keys:
                if key in data:
                    values[name] = _as_values(data[key], key)
                    break
        missing = [aliases[name][0] for name in ("w_values", "q2_values", "cos_values") if name not in values]
        if missing:
            raise ValueError(f"Grid is missing axes: {', '.join(missing)}")
        return cls(**values)

    def __len__(self) -> int:
        return len(self.w_values) * len(self.q2_values) * len(self.cos_values)

    def points(self) -> Iterator[Tuple[float, float, float]]:
        """Grid points in file order: W outermost, then Q², then cosθ*."""

        return product(self.w_values, self.q2_values, self.cos_values)


@dataclass(frozen=True, slots=True)
class GridFile:
    grid: KinematicGrid
    parameters: RunParameters = field(default_factory=RunParameters)


def load_grid_file(path: Path | str) -> GridFile:
    """Read a YAML document with a ``grid`` table and optional ``parameters``."""

    source = Path(path).expanduser()
    with source.open("r", encoding="utf8") as handle:
        payload = yaml.safe_load(handle)
    if not isinstance(payload, ABCMapping) or not isinstance(payload.get("grid"), ABCMapping):
        raise ValueError(f"{source} does not define a 'grid' mapping")
    parameters = payload.get("parameters")
    if parameters is not None and not isinstance(parameters, ABCMapping):
        raise ValueError(f"{source}: 'parameters' must be a mapping")
    return GridFile(
        grid=KinematicGrid.from_mapping(payload["grid"]),
        parameters=RunParameters.from_mapping(parameters),
    )


def render_input(
    w: float,
    q2: float,
    cos: float,
    *,
    phi_values: Sequence[float] = DEFAULT_PHI_VALUES,
    parameters: RunParameters | None = None,
) -> str:
    params = parameters or RunParameters()
    count = len(phi_values)
    lines = params.header_lines()
    lines.append("")
    lines.append(f"{count} ! no. of points")
    for value, label in ((w, "W"), (q2, "Q^2"), (cos, "Cos(Theta)")):
        lines.append(f"{_fmt(value)} " * count + f"! {label} values")
    lines.append(" ".join(_fmt(phi) for phi in phi_values) + " ! phi values")
    lines.append("")
    return "\n".join(lines) + "\n"


def generate_inputs(
    grid: KinematicGrid,
    output_dir: Path | str,
    *,
    parameters: RunParameters | None = None,
) -> List[Path]:
    """Write one ``input_<n>.dat`` per grid point and return their paths."""

    target = Path(output_dir).expanduser()
    target.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []
    for counter, (w, q2, cos) in enumerate(grid.points()):
        path = target / f"input_{counter}.dat"
        path.write_text(
            render_input(w, q2, cos, phi_values=grid.phi_values, parameters=parameters),
            encoding="utf8",
        )
        written.append(path)
    logger.info(
        "Generated input files",
        extra={"event": "batch.inputs_generated", "count": len(written), "directory": str(target)},
    )
    return written
