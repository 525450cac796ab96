from __future__ import annotations

import math

import numpy as np
import pytest

from exclurad_core.axes import CANONICAL_AXES, Axis
from exclurad_core.domain import build_axis_domain, build_domains
from exclurad_core.table import KinematicTable


def test_build_axis_domain_sorts_deduplicates_and_drops_non_finite() -> None:
    domain = build_axis_domain([0.3, 0.1, math.nan, 0.3, math.inf, -0.75])

    assert domain.tolist() == [-0.75, 0.1, 0.3]
    with pytest.raises(ValueError):
        domain[0] = 1.0


def test_build_axis_domain_uses_exact_equality() -> None:
    domain = build_axis_domain([1.6975, 1.6975 + 1e-9])

    assert domain.size == 2


def test_build_axis_domain_of_empty_column_is_empty() -> None:
    assert build_axis_domain([]).size == 0
    assert build_axis_domain([math.nan]).size == 0


def test_build_domains_covers_every_axis(grid_table: KinematicTable) -> None:
    domains = build_domains(grid_table)

    assert tuple(domains) == CANONICAL_AXES
    np.testing.assert_allclose(domains[Axis.W], [1.4925, 1.5975, 1.6975, 1.7975])
    np.testing.assert_allclose(domains[Axis.Q2], [0.4105, 0.7085, 1.698])
    np.testing.assert_allclose(domains[Axis.COS], [-0.25, 0.25])
    assert domains[Axis.PHI].size == 10
    with pytest.raises(TypeError):
        domains[Axis.W] = np.array([1.0])  # type: ignore[index]
