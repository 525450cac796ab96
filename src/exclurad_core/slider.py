"""Index-based slider controllers bound to an axis domain."""

from __future__ import annotations

import math
from typing import Any, List, Sequence, Tuple

import numpy as np

from exclurad_core.axes import Axis, format_axis_value

__all__ = ["AxisSlider", "nearest_index", "middle_index"]


def middle_index(size: int) -> int:
    """Initial slider position for a domain with ``size`` entries."""

    return max(0, int(size) // 2)


def nearest_index(domain: Sequence[float] | np.ndarray, value: float) -> int:
    """Index of the domain entry closest to ``value``.

    Ties resolve to the lower index. ``domain`` must be non-empty and
    ``value`` finite.
    """

    array = np.asarray(domain, dtype=float)
    if array.size == 0:
        raise ValueError("Cannot snap to an empty domain")
    target = float(value)
    if not math.isfinite(target):
        raise ValueError(f"Cannot snap to non-finite value {value!r}")
    return int(np.argmin(np.abs(array - target)))


class AxisSlider:
    """Discrete slider over the domain of one axis.

    The slider stores an integer index, never a free value, so ``get`` can
    only return something present in the table.
    """

    __slots__ = ("axis", "_domain", "_index", "enabled")

    def __init__(self, axis: Axis, domain: Sequence[float] | np.ndarray, *, enabled: bool = True) -> None:
        self.axis = axis
        self._domain = np.asarray(domain, dtype=float)
        self._index = middle_index(self._domain.size)
        self.enabled = enabled

    @property
    def domain(self) -> np.ndarray:
        return self._domain

    @property
    def index(self) -> int:
        return self._index

    @property
    def max_index(self) -> int:
        return max(0, self._domain.size - 1)

    def set_by_index(self, index: Any) -> int:
        """Clamp ``index`` into the domain and make it current."""

        try:
            position = int(index)
        except (TypeError, ValueError):
            raise ValueError(f"Slider index must be an integer, got {index!r}") from None
        self._index = min(max(0, position), self.max_index)
        return self._index

    def set_by_nearest_value(self, value: float) -> int:
        """Move to the domain entry closest to ``value``."""

        if self._domain.size == 0:
            self._index = 0
            return self._index
        self._index = nearest_index(self._domain, value)
        return self._index

    def get(self) -> float:
        """Current domain value (NaN when the domain is empty)."""

        if self._domain.size == 0:
            return math.nan
        return float(self._domain[self._index])

    def rebind(self, domain: Sequence[float] | np.ndarray) -> int:
        """Attach a new domain, keeping the closest value to the current one."""

        previous = self.get()
        self._domain = np.asarray(domain, dtype=float)
        if self._domain.size == 0:
            self._index = 0
        elif math.isfinite(previous):
            self._index = nearest_index(self._domain, previous)
        else:
            self._index = middle_index(self._domain.size)
        return self._index

    def label(self) -> str:
        return format_axis_value(self.axis, self.get())

    def ticks(self, limit: int = 10) -> List[Tuple[int, str]]:
        """Evenly spaced ``(index, label)`` pairs for a slider scale."""

        size = self._domain.size
        if size == 0 or limit <= 0:
            return []
        count = min(limit, size)
        if count == 1:
            return [(0, format_axis_value(self.axis, float(self._domain[0])))]
        positions = sorted(
            {int(round(step * (size - 1) / (count - 1))) for step in range(count)}
        )
        return [
            (position, format_axis_value(self.axis, float(self._domain[position])))
            for position in positions
        ]

    def __repr__(self) -> str:
        state = "enabled" if self.enabled else "disabled"
        return (
            f"AxisSlider(axis={self.axis.value}, index={self._index}, "
            f"value={self.get()!r}, size={self._domain.size}, {state})"
        )
