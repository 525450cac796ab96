from __future__ import annotations

import pytest

from exclurad_core.axes import Axis, YMetric
from exclurad_core.errors import InvalidSelectionError
from exclurad_core.selection import OVERLAY_EQUALS_X_MESSAGE, AxisRole, AxisRoles, Selection


def test_default_roles_fix_cos_and_phi() -> None:
    roles = AxisRoles()

    assert roles.x is Axis.W
    assert roles.overlay is Axis.Q2
    assert roles.fixed_axes == (Axis.COS, Axis.PHI)
    assert roles.role_of(Axis.PHI) is AxisRole.FIXED


def test_roles_reject_overlay_equal_to_x() -> None:
    with pytest.raises(InvalidSelectionError) as excinfo:
        AxisRoles(x=Axis.PHI, overlay=Axis.PHI)

    assert excinfo.value.message == OVERLAY_EQUALS_X_MESSAGE
    assert isinstance(excinfo.value, ValueError)


def test_with_x_moves_a_colliding_overlay_to_the_first_free_axis() -> None:
    roles = AxisRoles(x=Axis.W, overlay=Axis.Q2).with_x("Q2")

    assert (roles.x, roles.overlay) == (Axis.Q2, Axis.W)
    assert roles.fixed_axes == (Axis.COS, Axis.PHI)


def test_with_x_keeps_a_distinct_overlay() -> None:
    roles = AxisRoles().with_x(Axis.PHI)

    assert (roles.x, roles.overlay) == (Axis.PHI, Axis.Q2)
    assert roles.fixed_axes == (Axis.W, Axis.COS)


def test_with_overlay_equal_to_x_is_rejected() -> None:
    roles = AxisRoles(x=Axis.PHI, overlay=Axis.W)

    with pytest.raises(InvalidSelectionError, match="must differ"):
        roles.with_overlay("phi")


def test_selection_build_orders_fixed_axes_and_ignores_extra_values() -> None:
    selection = Selection.build(
        "phi",
        "W",
        "delta",
        {Axis.COS: 0.0, Axis.Q2: 0.4105, Axis.W: 9.0, Axis.PHI: 18.0},
    )

    assert selection.y_metric is YMetric.DELTA
    assert selection.fixed == ((Axis.Q2, 0.4105), (Axis.COS, 0.0))
    assert selection.fixed_axes == (Axis.Q2, Axis.COS)


def test_selection_requires_both_fixed_axes() -> None:
    with pytest.raises(InvalidSelectionError, match="Fixed axes"):
        Selection.build(Axis.PHI, Axis.W, YMetric.DELTA, {Axis.Q2: 0.4105})


def test_selection_rejects_duplicate_fixed_axes() -> None:
    with pytest.raises(InvalidSelectionError):
        Selection(
            x_axis=Axis.PHI,
            overlay_axis=Axis.W,
            y_metric=YMetric.DELTA,
            fixed=((Axis.Q2, 0.4105), (Axis.Q2, 0.7085)),
        )


def test_selection_rejects_overlay_equal_to_x() -> None:
    with pytest.raises(InvalidSelectionError, match="must differ"):
        Selection.build(Axis.W, Axis.W, YMetric.DELTA, {Axis.COS: 0.0, Axis.PHI: 18.0})


def test_selection_from_roles() -> None:
    roles = AxisRoles(x=Axis.PHI, overlay=Axis.W)

    selection = Selection.from_roles(roles, "asym", {Axis.Q2: 0.4105, Axis.COS: 0.0})

    assert selection.x_axis is Axis.PHI
    assert selection.overlay_axis is Axis.W
    assert selection.y_metric is YMetric.ASYMMETRY
