"""Rank overlay values by how many distinct x points they can draw."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

from exclurad_core.axes import Axis
from exclurad_core.table import KinematicTable

__all__ = [
    "CoverageGroup",
    "DEFAULT_MIN_SUPPORT",
    "DEFAULT_MAX_TRACES",
    "rank_coverage",
    "select_overlay_values",
]

DEFAULT_MIN_SUPPORT = 4
DEFAULT_MAX_TRACES = 8


@dataclass(frozen=True, slots=True)
class CoverageGroup:
    """Support of one overlay value: its count of distinct x values."""

    overlay_value: float
    support: int

    def as_dict(self) -> dict[str, float | int]:
        return {"overlay_value": self.overlay_value, "support": self.support}


def rank_coverage(
    table: KinematicTable,
    mask: np.ndarray,
    *,
    x_axis: Axis,
    overlay_axis: Axis,
    min_support: int = DEFAULT_MIN_SUPPORT,
) -> Tuple[CoverageGroup, ...]:
    """Group admitted rows by overlay value and rank them by support.

    Grouping is exact on the stored overlay value. Groups with fewer than
    ``min_support`` distinct x values are dropped; the rest are ordered by
    descending support, then ascending overlay value.
    """

    overlay = table.axis(overlay_axis)[mask]
    xs = table.axis(x_axis)[mask]
    finite = np.isfinite(overlay) & np.isfinite(xs)
    overlay = overlay[finite]
    xs = xs[finite]
    if overlay.size == 0:
        return ()

    pairs = np.unique(np.column_stack((overlay, xs)), axis=0)
    values, counts = np.unique(pairs[:, 0], return_counts=True)
    groups = [
        CoverageGroup(float(value), int(count))
        for value, count in zip(values, counts)
        if count >= min_support
    ]
    groups.sort(key=lambda group: (-group.support, group.overlay_value))
    return tuple(groups)


def select_overlay_values(
    groups: Sequence[CoverageGroup],
    max_traces: int = DEFAULT_MAX_TRACES,
) -> Tuple[float, ...]:
    """Overlay values of the best-covered groups, in ascending order."""

    limit = max(0, int(max_traces))
    picked = [group.overlay_value for group in groups[:limit]]
    return tuple(sorted(picked))
