"""Immutable columnar snapshot of a decoded dataset."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

import numpy as np

from exclurad_core.axes import (
    KINEMATIC_FLAG_COLUMN,
    METRIC_SPECS,
    REQUIRED_COLUMNS,
    Axis,
    YMetric,
)
from exclurad_core.errors import MissingColumnError, TransportError

__all__ = ["KinematicTable", "materialize"]

_FLAG_COLUMNS = frozenset(
    {KINEMATIC_FLAG_COLUMN, *(spec.flag_column for spec in METRIC_SPECS.values())}
)


@dataclass(frozen=True)
class KinematicTable:
    """Read-only column arrays for every required field plus the row count.

    Instances are snapshots: a dataset switch builds a new table rather than
    touching an existing one.
    """

    columns: Mapping[str, np.ndarray]
    row_count: int
    source: str | None = None
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def axis(self, axis: Axis) -> np.ndarray:
        return self.columns[axis.column]

    def values(self, metric: YMetric) -> np.ndarray:
        return self.columns[metric.value_column]

    def flag(self, metric: YMetric) -> np.ndarray:
        return self.columns[metric.flag_column]

    @property
    def kinematics_ok(self) -> np.ndarray:
        return self.columns[KINEMATIC_FLAG_COLUMN]

    def __len__(self) -> int:
        return self.row_count


def _column_names(source: Any) -> tuple[str, ...]:
    keys = source.keys() if hasattr(source, "keys") else ()
    return tuple(str(key) for key in keys)


def _truthy(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, float) and math.isnan(value):
        return False
    try:
        return bool(value)
    except (TypeError, ValueError):
        return False


def _as_flag_array(values: Any) -> np.ndarray:
    raw = np.asarray(values)
    if raw.dtype == np.bool_:
        return raw.astype(bool, copy=True)
    if np.issubdtype(raw.dtype, np.number):
        numeric = raw.astype(float)
        return np.isfinite(numeric) & (numeric != 0.0)
    return np.fromiter((_truthy(item) for item in raw.ravel()), dtype=bool, count=raw.size)


def _as_float_array(values: Any) -> np.ndarray:
    to_numpy = getattr(values, "to_numpy", None)
    if callable(to_numpy):
        try:
            return np.array(to_numpy(dtype=float, na_value=np.nan), dtype=float)
        except TypeError:
            pass
    return np.array(values, dtype=float)


def materialize(
    source: Mapping[str, Any],
    *,
    origin: str | None = None,
    metadata: Mapping[str, Any] | None = None,
) -> KinematicTable:
    """Turn a decoded tabular buffer into a :class:`KinematicTable`.

    ``source`` may be a plain mapping of column arrays or a pandas
    ``DataFrame``. Only the required columns are kept; every one of them must
    be present and all of them must share a length.
    """

    available = _column_names(source)
    present = set(available)
    for name in REQUIRED_COLUMNS:
        if name not in present:
            raise MissingColumnError(name, available=available)

    columns: dict[str, np.ndarray] = {}
    for name in REQUIRED_COLUMNS:
        try:
            if name in _FLAG_COLUMNS:
                array = _as_flag_array(source[name])
            else:
                array = _as_float_array(source[name])
        except (TypeError, ValueError) as exc:
            raise TransportError(
                f"Column {name!r} could not be decoded: {exc}",
                context={"column": name, "source": origin},
            ) from exc
        array = np.ravel(array)
        array.flags.writeable = False
        columns[name] = array

    lengths = {name: int(array.shape[0]) for name, array in columns.items()}
    if len(set(lengths.values())) > 1:
        raise TransportError(
            "Columns have mismatched lengths",
            context={"lengths": str(lengths), "source": origin},
        )
    row_count = next(iter(lengths.values()), 0)

    return KinematicTable(
        columns=MappingProxyType(columns),
        row_count=row_count,
        source=origin,
        metadata=MappingProxyType(dict(metadata or {})),
    )
