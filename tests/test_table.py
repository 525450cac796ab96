from __future__ import annotations

import math

import numpy as np
import pytest

from exclurad_core.axes import Axis, YMetric
from exclurad_core.errors import ExplorerError, MissingColumnError, TransportError
from exclurad_core.table import materialize

from tests.helpers import columns_from_rows, row


def _two_rows() -> dict[str, list]:
    return columns_from_rows(
        [
            row(1.6975, 0.4105, 0.0, 18.0, delta=1.1, asym=0.9),
            row(1.6975, 0.4105, 0.0, 54.0, delta=1.2, asym=0.8, ok_asym=False),
        ]
    )


def test_materialize_builds_read_only_columns() -> None:
    table = materialize(_two_rows(), origin="memory")

    assert table.row_count == 2
    assert len(table) == 2
    assert table.source == "memory"
    np.testing.assert_allclose(table.axis(Axis.PHI), [18.0, 54.0])
    np.testing.assert_allclose(table.values(YMetric.DELTA), [1.1, 1.2])
    assert table.flag(YMetric.ASYMMETRY).tolist() == [True, False]
    with pytest.raises(ValueError):
        table.axis(Axis.W)[0] = 2.0


def test_materialize_reports_the_missing_column() -> None:
    columns = _two_rows()
    del columns["ok_asym"]

    with pytest.raises(MissingColumnError) as excinfo:
        materialize(columns)

    assert excinfo.value.column == "ok_asym"
    assert str(excinfo.value) == "Missing column: ok_asym"
    assert isinstance(excinfo.value, ExplorerError)


def test_materialize_ignores_extra_columns() -> None:
    columns = _two_rows()
    columns["sigma_born"] = [1.0, 2.0]

    table = materialize(columns)

    assert "sigma_born" not in table.columns


def test_materialize_coerces_numeric_and_missing_flags() -> None:
    columns = _two_rows()
    columns["ok_kin"] = [1, 0]
    columns["ok_delta"] = [math.nan, 1.0]
    columns["ok_asym"] = [None, "yes"]

    table = materialize(columns)

    assert table.kinematics_ok.tolist() == [True, False]
    assert table.flag(YMetric.DELTA).tolist() == [False, True]
    assert table.flag(YMetric.ASYMMETRY).tolist() == [False, True]


def test_materialize_rejects_mismatched_lengths() -> None:
    columns = _two_rows()
    columns["A_ratio"] = [0.9]

    with pytest.raises(TransportError, match="mismatched lengths"):
        materialize(columns)


def test_materialize_rejects_undecodable_values() -> None:
    columns = _two_rows()
    columns["w_r"] = ["heavy", "light"]

    with pytest.raises(TransportError):
        materialize(columns)


def test_materialize_accepts_dataframes_with_missing_values() -> None:
    pd = pytest.importorskip("pandas")
    frame = pd.DataFrame(_two_rows())
    frame["delta_xsec_ratio"] = pd.array([1.1, None], dtype="Float64")

    table = materialize(frame)

    values = table.values(YMetric.DELTA)
    assert values[0] == pytest.approx(1.1)
    assert math.isnan(values[1])
