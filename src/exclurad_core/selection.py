"""Axis role assignment and the validated query selection."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping, Tuple

from exclurad_core.axes import CANONICAL_AXES, Axis, YMetric, parse_axis, parse_metric
from exclurad_core.errors import InvalidSelectionError

__all__ = [
    "AxisRole",
    "AxisRoles",
    "FixedConstraint",
    "Selection",
    "OVERLAY_EQUALS_X_MESSAGE",
]

OVERLAY_EQUALS_X_MESSAGE = "Overlay variable must differ from x-axis."

FixedConstraint = Tuple[Axis, float]


class AxisRole(str, Enum):
    X = "x"
    OVERLAY = "overlay"
    FIXED = "fixed"


def _first_other(axis: Axis) -> Axis:
    return next(candidate for candidate in CANONICAL_AXES if candidate is not axis)


@dataclass(frozen=True, slots=True)
class AxisRoles:
    """Assignment of exactly one role to each of the four axes.

    Transitions return new instances; an invalid assignment cannot be built.
    """

    x: Axis = Axis.W
    overlay: Axis = Axis.Q2

    def __post_init__(self) -> None:
        if self.x is self.overlay:
            raise InvalidSelectionError(
                OVERLAY_EQUALS_X_MESSAGE,
                context={"x": self.x.value, "overlay": self.overlay.value},
            )

    @property
    def roles(self) -> Mapping[Axis, AxisRole]:
        assignment = {axis: AxisRole.FIXED for axis in CANONICAL_AXES}
        assignment[self.x] = AxisRole.X
        assignment[self.overlay] = AxisRole.OVERLAY
        return MappingProxyType(assignment)

    @property
    def fixed_axes(self) -> tuple[Axis, ...]:
        return tuple(axis for axis in CANONICAL_AXES if axis is not self.x and axis is not self.overlay)

    def role_of(self, axis: Axis) -> AxisRole:
        return self.roles[axis]

    def with_x(self, axis: "Axis | str") -> "AxisRoles":
        """Make ``axis`` the x axis, moving the overlay away if they collide."""

        target = parse_axis(axis)
        overlay = self.overlay
        if overlay is target:
            overlay = _first_other(target)
        return AxisRoles(x=target, overlay=overlay)

    def with_overlay(self, axis: "Axis | str") -> "AxisRoles":
        """Make ``axis`` the overlay; rejected when it equals the x axis."""

        target = parse_axis(axis)
        if target is self.x:
            raise InvalidSelectionError(
                OVERLAY_EQUALS_X_MESSAGE,
                context={"x": self.x.value, "overlay": target.value},
            )
        return AxisRoles(x=self.x, overlay=target)


@dataclass(frozen=True, slots=True)
class Selection:
    """Everything the query engine needs besides the table itself."""

    x_axis: Axis
    overlay_axis: Axis
    y_metric: YMetric
    fixed: Tuple[FixedConstraint, ...]

    def __post_init__(self) -> None:
        if self.x_axis is self.overlay_axis:
            raise InvalidSelectionError(
                OVERLAY_EQUALS_X_MESSAGE,
                context={"x": self.x_axis.value, "overlay": self.overlay_axis.value},
            )
        expected = {axis for axis in CANONICAL_AXES if axis not in (self.x_axis, self.overlay_axis)}
        provided = [axis for axis, _ in self.fixed]
        if len(provided) != len(set(provided)) or set(provided) != expected:
            raise InvalidSelectionError(
                "Fixed axes must be exactly the two axes not used for x or overlay.",
                context={
                    "expected": ",".join(sorted(axis.value for axis in expected)),
                    "provided": ",".join(axis.value for axis in provided),
                },
            )

    @classmethod
    def build(
        cls,
        x_axis: "Axis | str",
        overlay_axis: "Axis | str",
        y_metric: "YMetric | str",
        fixed_values: Mapping[Axis, float] | Iterable[FixedConstraint],
    ) -> "Selection":
        """Normalise loose inputs into a validated selection.

        Only the values of the two fixed axes are read from ``fixed_values``;
        values supplied for the x or overlay axis are ignored.
        """

        x = parse_axis(x_axis)
        overlay = parse_axis(overlay_axis)
        metric = parse_metric(y_metric)
        items = fixed_values.items() if isinstance(fixed_values, Mapping) else fixed_values
        values = {parse_axis(axis): float(value) for axis, value in items}
        fixed = tuple(
            (axis, values[axis])
            for axis in CANONICAL_AXES
            if axis is not x and axis is not overlay and axis in values
        )
        return cls(x_axis=x, overlay_axis=overlay, y_metric=metric, fixed=fixed)

    @classmethod
    def from_roles(
        cls,
        roles: AxisRoles,
        y_metric: "YMetric | str",
        fixed_values: Mapping[Axis, float],
    ) -> "Selection":
        return cls.build(roles.x, roles.overlay, y_metric, fixed_values)

    @property
    def fixed_axes(self) -> tuple[Axis, ...]:
        return tuple(axis for axis, _ in self.fixed)
