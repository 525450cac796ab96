"""Shared helpers for the test-suite."""

from .cli import run_cli_in_tmp, write_pyproject
from .tables import (
    PHI_BINS,
    SCENARIO_POINT,
    columns_from_rows,
    default_asym,
    default_delta,
    grid_columns,
    row,
    write_feather,
    write_meta,
)

__all__ = [
    "PHI_BINS",
    "SCENARIO_POINT",
    "columns_from_rows",
    "default_asym",
    "default_delta",
    "grid_columns",
    "row",
    "run_cli_in_tmp",
    "write_feather",
    "write_meta",
    "write_pyproject",
]
