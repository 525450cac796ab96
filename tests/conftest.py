from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest


ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = ROOT / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from exclurad_core import KinematicTable, materialize  # noqa: E402
from exclurad_explorer.logging.config import LOGGER_NAMESPACES  # noqa: E402

from tests.helpers import SCENARIO_POINT, grid_columns  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_package_loggers() -> Iterator[None]:
    """Drop handlers installed by CLI runs so each test starts clean."""

    yield
    for name in LOGGER_NAMESPACES:
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.setLevel(logging.NOTSET)


@pytest.fixture
def single_point_columns() -> dict[str, list]:
    """One (W, Q², cosθ*) triple sampled at the ten default φ* bins."""

    w, q2, cos = SCENARIO_POINT
    return grid_columns(w_values=(w,), q2_values=(q2,), cos_values=(cos,))


@pytest.fixture
def single_point_table(single_point_columns: dict[str, list]) -> KinematicTable:
    return materialize(single_point_columns, origin="single-point")


@pytest.fixture
def grid_table() -> KinematicTable:
    """Four W × three Q² × two cosθ* points, ten φ* bins each."""

    return materialize(
        grid_columns(
            w_values=(1.4925, 1.5975, 1.6975, 1.7975),
            q2_values=(0.4105, 0.7085, 1.698),
            cos_values=(-0.25, 0.25),
        ),
        origin="grid",
    )
