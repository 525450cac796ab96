"""Discrete per-axis value domains derived from a loaded table."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping

import numpy as np

from exclurad_core.axes import CANONICAL_AXES, Axis
from exclurad_core.table import KinematicTable

__all__ = ["AxisDomains", "build_axis_domain", "build_domains"]

AxisDomains = Mapping[Axis, np.ndarray]


def build_axis_domain(values: Any) -> np.ndarray:
    """Return the distinct finite values of ``values`` in ascending order.

    Uniqueness uses exact equality; no tolerance merging happens here.
    """

    array = np.asarray(values, dtype=float).ravel()
    finite = array[np.isfinite(array)]
    domain = np.unique(finite)
    domain.flags.writeable = False
    return domain


def build_domains(table: KinematicTable) -> AxisDomains:
    """Build the domain of every kinematic axis of ``table``."""

    return MappingProxyType(
        {axis: build_axis_domain(table.axis(axis)) for axis in CANONICAL_AXES}
    )
