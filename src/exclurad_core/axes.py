"""Kinematic axes, response metrics and their display conventions."""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from types import MappingProxyType
from typing import Mapping

__all__ = [
    "Axis",
    "AxisSpec",
    "AXIS_SPECS",
    "CANONICAL_AXES",
    "YMetric",
    "MetricSpec",
    "METRIC_SPECS",
    "KINEMATIC_FLAG_COLUMN",
    "REQUIRED_COLUMNS",
    "format_axis_value",
    "fixed_value_caption",
    "parse_axis",
    "parse_metric",
]


class Axis(str, Enum):
    """The four discretised kinematic coordinates of the dataset."""

    W = "W"
    Q2 = "Q2"
    COS = "cos"
    PHI = "phi"

    @property
    def spec(self) -> "AxisSpec":
        return AXIS_SPECS[self]

    @property
    def column(self) -> str:
        return AXIS_SPECS[self].column

    @property
    def symbol(self) -> str:
        return AXIS_SPECS[self].symbol

    @property
    def label(self) -> str:
        return AXIS_SPECS[self].label


class YMetric(str, Enum):
    """Response ratios available as plotting targets."""

    DELTA = "delta_xsec_ratio"
    ASYMMETRY = "A_ratio"

    @property
    def spec(self) -> "MetricSpec":
        return METRIC_SPECS[self]

    @property
    def value_column(self) -> str:
        return METRIC_SPECS[self].value_column

    @property
    def flag_column(self) -> str:
        return METRIC_SPECS[self].flag_column

    @property
    def label(self) -> str:
        return METRIC_SPECS[self].label


@dataclass(frozen=True, slots=True)
class AxisSpec:
    """Column binding and display metadata for one axis."""

    column: str
    symbol: str
    label: str
    decimals: int
    unit: str = ""


@dataclass(frozen=True, slots=True)
class MetricSpec:
    """Value/validity column pair and display label for one metric."""

    value_column: str
    flag_column: str
    label: str


CANONICAL_AXES: tuple[Axis, ...] = (Axis.W, Axis.Q2, Axis.COS, Axis.PHI)

AXIS_SPECS: Mapping[Axis, AxisSpec] = MappingProxyType(
    {
        Axis.W: AxisSpec("w_r", "W", "W [GeV]", 3, " GeV"),
        Axis.Q2: AxisSpec("q2_r", "Q²", "Q² [GeV²]", 3, " GeV²"),
        Axis.COS: AxisSpec("ct_r", "cosθ*", "cosθ*", 3),
        Axis.PHI: AxisSpec("phi_deg", "φ*", "φ* [deg]", 0, "°"),
    }
)

METRIC_SPECS: Mapping[YMetric, MetricSpec] = MappingProxyType(
    {
        YMetric.DELTA: MetricSpec("delta_xsec_ratio", "ok_delta", "δ = σ_obs/σ₀"),
        YMetric.ASYMMETRY: MetricSpec("A_ratio", "ok_asym", "A_RC / A_Born"),
    }
)

KINEMATIC_FLAG_COLUMN = "ok_kin"

REQUIRED_COLUMNS: tuple[str, ...] = (
    *(AXIS_SPECS[axis].column for axis in CANONICAL_AXES),
    KINEMATIC_FLAG_COLUMN,
    METRIC_SPECS[YMetric.DELTA].flag_column,
    METRIC_SPECS[YMetric.ASYMMETRY].flag_column,
    METRIC_SPECS[YMetric.DELTA].value_column,
    METRIC_SPECS[YMetric.ASYMMETRY].value_column,
)

_AXIS_ALIASES: Mapping[str, Axis] = MappingProxyType(
    {
        "w": Axis.W,
        "w_r": Axis.W,
        "q2": Axis.Q2,
        "q²": Axis.Q2,
        "q2_r": Axis.Q2,
        "cos": Axis.COS,
        "costheta": Axis.COS,
        "cosθ*": Axis.COS,
        "ct": Axis.COS,
        "ct_r": Axis.COS,
        "phi": Axis.PHI,
        "φ*": Axis.PHI,
        "phi_deg": Axis.PHI,
    }
)

_METRIC_ALIASES: Mapping[str, YMetric] = MappingProxyType(
    {
        "delta": YMetric.DELTA,
        "delta_xsec_ratio": YMetric.DELTA,
        "xsec": YMetric.DELTA,
        "a": YMetric.ASYMMETRY,
        "asym": YMetric.ASYMMETRY,
        "asymmetry": YMetric.ASYMMETRY,
        "a_ratio": YMetric.ASYMMETRY,
    }
)


def parse_axis(token: "str | Axis") -> Axis:
    """Resolve ``token`` to an :class:`Axis` (case-insensitive aliases)."""

    if isinstance(token, Axis):
        return token
    key = str(token).strip().lower().replace(" ", "")
    try:
        return _AXIS_ALIASES[key]
    except KeyError:
        raise ValueError(
            f"Unknown axis {token!r}; expected one of W, Q2, cos, phi"
        ) from None


def parse_metric(token: "str | YMetric") -> YMetric:
    """Resolve ``token`` to a :class:`YMetric`."""

    if isinstance(token, YMetric):
        return token
    key = str(token).strip().lower()
    try:
        return _METRIC_ALIASES[key]
    except KeyError:
        raise ValueError(f"Unknown metric {token!r}; expected 'delta' or 'asym'") from None


def format_axis_value(axis: Axis, value: float) -> str:
    """Format ``value`` with the precision used for ``axis`` labels.

    Rounding is half-up on the shortest decimal representation of the stored
    value so that ``1.6975`` renders as ``1.698`` regardless of binary error.
    """

    if not math.isfinite(value):
        return "–"
    decimals = AXIS_SPECS[axis].decimals
    quantum = Decimal(1).scaleb(-decimals)
    try:
        rounded = Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP)
    except InvalidOperation:  # pragma: no cover - finite floats always quantize
        return f"{value:.{decimals}f}"
    if rounded.is_zero():
        rounded = abs(rounded)
    return f"{rounded:.{decimals}f}"


def fixed_value_caption(axis: Axis, value: float) -> str:
    """Caption for a fixed axis, e.g. ``W=1.698 GeV`` or ``φ*=18°``."""

    spec = AXIS_SPECS[axis]
    return f"{spec.symbol}={format_axis_value(axis, value)}{spec.unit}"
