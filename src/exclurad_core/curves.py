"""Build sorted, labelled (x, y) series for the selected overlay values."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

import numpy as np

from exclurad_core.axes import Axis, YMetric, format_axis_value
from exclurad_core.coverage import DEFAULT_MIN_SUPPORT
from exclurad_core.mask import AxisTolerances, build_mask
from exclurad_core.table import KinematicTable

__all__ = [
    "Curve",
    "PALETTE_SIZE",
    "Y_RANGE_PAD_FRACTION",
    "Y_RANGE_MIN_SPAN",
    "build_curves",
    "curve_label",
    "y_display_range",
]

PALETTE_SIZE = 8
Y_RANGE_PAD_FRACTION = 0.08
Y_RANGE_MIN_SPAN = 1e-3


@dataclass(frozen=True, slots=True)
class Curve:
    """One overlay trace: x non-decreasing, every coordinate finite."""

    label: str
    overlay_value: float
    color_index: int
    dash_index: int
    x: Tuple[float, ...]
    y: Tuple[float, ...]

    @property
    def points(self) -> Tuple[Tuple[float, float], ...]:
        return tuple(zip(self.x, self.y))

    def __len__(self) -> int:
        return len(self.x)

    def as_dict(self) -> dict:
        return {
            "label": self.label,
            "overlay_value": self.overlay_value,
            "color_index": self.color_index,
            "dash_index": self.dash_index,
            "points": [[x, y] for x, y in self.points],
        }


def curve_label(axis: Axis, value: float) -> str:
    return f"{axis.symbol}={format_axis_value(axis, value)}"


def build_curves(
    table: KinematicTable,
    *,
    x_axis: Axis,
    overlay_axis: Axis,
    y_metric: YMetric,
    fixed: Iterable[tuple[Axis, float]],
    overlay_values: Sequence[float],
    tolerances: AxisTolerances | None = None,
    min_support: int = DEFAULT_MIN_SUPPORT,
    palette_size: int = PALETTE_SIZE,
) -> Tuple[Curve, ...]:
    """Re-filter the table once per overlay value and extract its series.

    Curves with fewer than ``min_support`` usable points are skipped; their
    palette slot stays reserved so colours follow the overlay position.
    """

    constraints = tuple(fixed)
    xs_all = table.axis(x_axis)
    ys_all = table.values(y_metric)
    slots = max(1, int(palette_size))
    curves: list[Curve] = []

    for position, value in enumerate(overlay_values):
        mask = build_mask(
            table,
            y_metric,
            (*constraints, (overlay_axis, float(value))),
            tolerances,
        )
        xs = xs_all[mask]
        ys = ys_all[mask]
        usable = np.isfinite(xs) & np.isfinite(ys)
        xs = xs[usable]
        ys = ys[usable]
        if xs.size < min_support:
            continue
        order = np.argsort(xs, kind="stable")
        curves.append(
            Curve(
                label=curve_label(overlay_axis, float(value)),
                overlay_value=float(value),
                color_index=position % slots,
                dash_index=position % slots,
                x=tuple(float(item) for item in xs[order]),
                y=tuple(float(item) for item in ys[order]),
            )
        )
    return tuple(curves)


def y_display_range(curves: Sequence[Curve]) -> Optional[Tuple[float, float]]:
    """Padded ``(lo, hi)`` over the finite y values of ``curves``.

    The pad is 8% of the span, with the span floored at ``1e-3`` so a flat
    curve still gets a visible band.
    """

    finite = [value for curve in curves for value in curve.y if math.isfinite(value)]
    if not finite:
        return None
    lo = min(finite)
    hi = max(finite)
    pad = Y_RANGE_PAD_FRACTION * max(hi - lo, Y_RANGE_MIN_SPAN)
    return (lo - pad, hi + pad)
