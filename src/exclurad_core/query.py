"""Single entry point: ``query(table, selection) -> CurveSet``."""

from __future__ import annotations

from collections.abc import Mapping as ABCMapping
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple

from exclurad_core.axes import fixed_value_caption
from exclurad_core.coverage import (
    DEFAULT_MAX_TRACES,
    DEFAULT_MIN_SUPPORT,
    CoverageGroup,
    rank_coverage,
    select_overlay_values,
)
from exclurad_core.curves import PALETTE_SIZE, Curve, build_curves, y_display_range
from exclurad_core.errors import InvalidSelectionError
from exclurad_core.mask import AxisTolerances, build_mask
from exclurad_core.selection import OVERLAY_EQUALS_X_MESSAGE, Selection
from exclurad_core.table import KinematicTable

__all__ = ["QueryOptions", "CurveSet", "query"]


@dataclass(frozen=True, slots=True)
class QueryOptions:
    """Tunables of the query engine parsed from configuration."""

    min_support: int = DEFAULT_MIN_SUPPORT
    max_traces: int = DEFAULT_MAX_TRACES
    palette_size: int = PALETTE_SIZE
    tolerances: AxisTolerances = field(default_factory=AxisTolerances)

    @classmethod
    def from_config(cls, config: Mapping[str, Any] | None = None) -> "QueryOptions":
        """Coerce the ``query`` and ``tolerances`` sections of ``config``."""

        def _as_mapping(value: Any) -> Mapping[str, Any]:
            if isinstance(value, ABCMapping):
                return value
            return {}

        def _coerce_int(value: Any, fallback: int, minimum: int) -> int:
            if value is None or isinstance(value, bool):
                return fallback
            try:
                numeric = int(value)
            except (TypeError, ValueError):
                return fallback
            return max(minimum, numeric)

        query_cfg = _as_mapping(config.get("query")) if config else {}
        tolerances_cfg = _as_mapping(config.get("tolerances")) if config else {}
        return cls(
            min_support=_coerce_int(query_cfg.get("min_support"), DEFAULT_MIN_SUPPORT, 1),
            max_traces=_coerce_int(query_cfg.get("max_traces"), DEFAULT_MAX_TRACES, 0),
            palette_size=_coerce_int(query_cfg.get("palette_size"), PALETTE_SIZE, 1),
            tolerances=AxisTolerances.from_config(tolerances_cfg),
        )


@dataclass(frozen=True, slots=True)
class CurveSet:
    """Everything a render sink needs for one redraw."""

    selection: Selection
    curves: Tuple[Curve, ...]
    x_label: str
    y_label: str
    y_range: Optional[Tuple[float, float]]
    fixed_captions: Tuple[str, ...]
    coverage: Tuple[CoverageGroup, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.curves

    @property
    def title(self) -> str:
        return f"{self.y_label} vs {self.x_label}  |  fixed: {', '.join(self.fixed_captions)}"

    def as_dict(self) -> dict[str, Any]:
        return {
            "x_axis": self.selection.x_axis.value,
            "overlay_axis": self.selection.overlay_axis.value,
            "y_metric": self.selection.y_metric.value,
            "fixed": {axis.value: value for axis, value in self.selection.fixed},
            "x_label": self.x_label,
            "y_label": self.y_label,
            "y_range": list(self.y_range) if self.y_range is not None else None,
            "title": self.title,
            "curves": [curve.as_dict() for curve in self.curves],
            "coverage": [group.as_dict() for group in self.coverage],
        }


def query(
    table: KinematicTable,
    selection: Selection,
    options: QueryOptions | None = None,
) -> CurveSet:
    """Select, filter and format the curves for ``selection``.

    A pure function of its arguments: the table is only read. An empty
    curve set is a valid result, not an error.
    """

    opts = options or QueryOptions()
    if selection.x_axis is selection.overlay_axis:
        raise InvalidSelectionError(OVERLAY_EQUALS_X_MESSAGE)

    mask = build_mask(table, selection.y_metric, selection.fixed, opts.tolerances)
    ranking = rank_coverage(
        table,
        mask,
        x_axis=selection.x_axis,
        overlay_axis=selection.overlay_axis,
        min_support=opts.min_support,
    )
    picked = select_overlay_values(ranking, opts.max_traces)
    curves = build_curves(
        table,
        x_axis=selection.x_axis,
        overlay_axis=selection.overlay_axis,
        y_metric=selection.y_metric,
        fixed=selection.fixed,
        overlay_values=picked,
        tolerances=opts.tolerances,
        min_support=opts.min_support,
        palette_size=opts.palette_size,
    )
    return CurveSet(
        selection=selection,
        curves=curves,
        x_label=selection.x_axis.label,
        y_label=selection.y_metric.label,
        y_range=y_display_range(curves),
        fixed_captions=tuple(fixed_value_caption(axis, value) for axis, value in selection.fixed),
        coverage=ranking,
    )
