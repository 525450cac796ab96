"""Kinematic slice-and-curve selection engine.

Pure in-memory query logic over an immutable dataset snapshot: per-axis
value domains, slider controllers, row admission masks, coverage ranking
and curve building. Nothing here depends on a rendering library.
"""

from __future__ import annotations

from exclurad_core.axes import (
    AXIS_SPECS,
    CANONICAL_AXES,
    METRIC_SPECS,
    REQUIRED_COLUMNS,
    Axis,
    YMetric,
    fixed_value_caption,
    format_axis_value,
    parse_axis,
    parse_metric,
)
from exclurad_core.coverage import (
    DEFAULT_MAX_TRACES,
    DEFAULT_MIN_SUPPORT,
    CoverageGroup,
    rank_coverage,
    select_overlay_values,
)
from exclurad_core.curves import Curve, build_curves, curve_label, y_display_range
from exclurad_core.domain import AxisDomains, build_axis_domain, build_domains
from exclurad_core.errors import (
    ExplorerError,
    InvalidSelectionError,
    MissingColumnError,
    SimulationError,
    TransportError,
)
from exclurad_core.mask import AxisTolerances, base_mask, build_mask
from exclurad_core.query import CurveSet, QueryOptions, query
from exclurad_core.selection import AxisRole, AxisRoles, Selection
from exclurad_core.slider import AxisSlider, middle_index, nearest_index
from exclurad_core.table import KinematicTable, materialize

__all__ = [
    "AXIS_SPECS",
    "CANONICAL_AXES",
    "METRIC_SPECS",
    "REQUIRED_COLUMNS",
    "Axis",
    "YMetric",
    "fixed_value_caption",
    "format_axis_value",
    "parse_axis",
    "parse_metric",
    "DEFAULT_MAX_TRACES",
    "DEFAULT_MIN_SUPPORT",
    "CoverageGroup",
    "rank_coverage",
    "select_overlay_values",
    "Curve",
    "build_curves",
    "curve_label",
    "y_display_range",
    "AxisDomains",
    "build_axis_domain",
    "build_domains",
    "ExplorerError",
    "InvalidSelectionError",
    "MissingColumnError",
    "SimulationError",
    "TransportError",
    "AxisTolerances",
    "base_mask",
    "build_mask",
    "CurveSet",
    "QueryOptions",
    "query",
    "AxisRole",
    "AxisRoles",
    "Selection",
    "AxisSlider",
    "middle_index",
    "nearest_index",
    "KinematicTable",
    "materialize",
]
