"""Row admission masks for a metric and a set of fixed-axis constraints."""

from __future__ import annotations

import math
from collections.abc import Mapping as ABCMapping
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

import numpy as np

from exclurad_core.axes import Axis, YMetric, parse_axis
from exclurad_core.table import KinematicTable

__all__ = [
    "AxisTolerances",
    "DEFAULT_TOLERANCE",
    "DEFAULT_PHI_TOLERANCE",
    "build_mask",
    "base_mask",
]

DEFAULT_TOLERANCE = 1e-6
DEFAULT_PHI_TOLERANCE = 1e-3


@dataclass(frozen=True, slots=True)
class AxisTolerances:
    """Per-axis absolute tolerance used for fixed and overlay matches.

    Stored coordinates are rounded representations of continuous simulation
    points, so matches are ``|row - value| <= eps`` rather than equality.
    """

    W: float = DEFAULT_TOLERANCE
    Q2: float = DEFAULT_TOLERANCE
    cos: float = DEFAULT_TOLERANCE
    phi: float = DEFAULT_PHI_TOLERANCE

    def for_axis(self, axis: Axis) -> float:
        return float(getattr(self, axis.value))

    @classmethod
    def from_config(cls, config: Mapping[str, Any] | None = None) -> "AxisTolerances":
        """Read a ``[tolerances]`` table; invalid entries keep their default."""

        if not isinstance(config, ABCMapping):
            return cls()
        resolved: dict[str, float] = {}
        for key, raw in config.items():
            try:
                axis = parse_axis(str(key))
                value = float(raw)
            except (TypeError, ValueError):
                continue
            if not math.isfinite(value) or value < 0:
                continue
            resolved[axis.value] = value
        return cls(**resolved)


def base_mask(table: KinematicTable, metric: YMetric) -> np.ndarray:
    """Rows that are kinematically valid and carry a usable ``metric`` value."""

    return table.kinematics_ok & table.flag(metric) & np.isfinite(table.values(metric))


def build_mask(
    table: KinematicTable,
    metric: YMetric,
    constraints: Iterable[tuple[Axis, float]],
    tolerances: AxisTolerances | None = None,
) -> np.ndarray:
    """Boolean admission vector of length ``table.row_count``.

    A row is admitted when it passes :func:`base_mask` and lies within the
    axis tolerance of every ``(axis, value)`` constraint.
    """

    eps = tolerances or AxisTolerances()
    mask = base_mask(table, metric)
    for axis, value in constraints:
        column = table.axis(axis)
        with np.errstate(invalid="ignore"):
            mask &= np.abs(column - float(value)) <= eps.for_axis(axis)
    return mask
