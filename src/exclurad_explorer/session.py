"""Interactive explorer state: dataset snapshot, sliders, roles and redraws."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Mapping, Optional

from exclurad_core.axes import CANONICAL_AXES, Axis, YMetric, parse_axis, parse_metric
from exclurad_core.domain import AxisDomains, build_domains
from exclurad_core.errors import ExplorerError, InvalidSelectionError
from exclurad_core.query import CurveSet, QueryOptions, query
from exclurad_core.selection import AxisRole, AxisRoles, Selection
from exclurad_core.slider import AxisSlider
from exclurad_core.table import KinematicTable
from exclurad_explorer.ingestion.datasets import DatasetSettings, load_table
from exclurad_explorer.ingestion.metadata import DatasetMetadata, load_metadata

__all__ = ["ExplorerSession", "SelectionOutcome", "TableLoader"]

logger = logging.getLogger(__name__)

TableLoader = Callable[..., KinematicTable]


@dataclass(frozen=True, slots=True)
class SelectionOutcome:
    """Result of a user-facing role change: accepted, or rejected with a reason."""

    accepted: bool
    message: Optional[str] = None


@dataclass(frozen=True, slots=True)
class _Snapshot:
    table: KinematicTable
    domains: AxisDomains
    sliders: Mapping[Axis, AxisSlider]
    source: str
    metadata: Optional[DatasetMetadata]


class ExplorerSession:
    """Controller around one immutable table snapshot at a time.

    Loads are atomic: the new table, its domains and the re-snapped sliders
    replace the previous ones together, and only after decoding and column
    validation succeeded.
    """

    def __init__(
        self,
        settings: DatasetSettings | None = None,
        *,
        options: QueryOptions | None = None,
        roles: AxisRoles | None = None,
        y_metric: YMetric | str = YMetric.DELTA,
        loader: TableLoader = load_table,
    ) -> None:
        self.settings = settings or DatasetSettings()
        self.options = options or QueryOptions()
        self._roles = roles or AxisRoles()
        self._y_metric = parse_metric(y_metric)
        self._loader = loader
        self._snapshot: Optional[_Snapshot] = None
        self.last_result: Optional[CurveSet] = None

    # ------------------------------------------------------------------ state
    @property
    def table(self) -> Optional[KinematicTable]:
        return self._snapshot.table if self._snapshot else None

    @property
    def domains(self) -> Optional[AxisDomains]:
        return self._snapshot.domains if self._snapshot else None

    @property
    def sliders(self) -> Mapping[Axis, AxisSlider]:
        return self._snapshot.sliders if self._snapshot else {}

    @property
    def source(self) -> Optional[str]:
        return self._snapshot.source if self._snapshot else None

    @property
    def metadata(self) -> Optional[DatasetMetadata]:
        return self._snapshot.metadata if self._snapshot else None

    @property
    def roles(self) -> AxisRoles:
        return self._roles

    @property
    def y_metric(self) -> YMetric:
        return self._y_metric

    def _require_snapshot(self) -> _Snapshot:
        if self._snapshot is None:
            raise ExplorerError("No dataset loaded")
        return self._snapshot

    # ------------------------------------------------------------------- load
    def load(self, dataset: str | Path) -> KinematicTable:
        """Load a dataset variant (``full``/``sample``) or an explicit path.

        On failure the exception propagates and the current snapshot stays.
        """

        kind: Optional[str]
        if isinstance(dataset, str) and dataset in self.settings.files:
            kind = dataset
            path = self.settings.path_for(dataset)
        else:
            kind = None
            path = Path(dataset)

        table = self._loader(path, kind=kind)
        domains = build_domains(table)
        previous = self._snapshot.sliders if self._snapshot else {}
        sliders: Dict[Axis, AxisSlider] = {}
        for axis in CANONICAL_AXES:
            prior = previous.get(axis)
            if prior is None:
                slider = AxisSlider(axis, domains[axis])
            else:
                # Fresh slider; the live one is untouched until the swap.
                slider = AxisSlider(axis, prior.domain)
                slider.set_by_index(prior.index)
                slider.rebind(domains[axis])
            sliders[axis] = slider
        metadata = load_metadata(self.settings.meta_path)

        self._snapshot = _Snapshot(
            table=table,
            domains=domains,
            sliders=sliders,
            source=kind or str(path),
            metadata=metadata,
        )
        self._sync_enabled()
        logger.info(
            "Session switched dataset",
            extra={"event": "session.loaded", "source": self._snapshot.source, "rows": table.row_count},
        )
        return table

    # ------------------------------------------------------------------ roles
    def _sync_enabled(self) -> None:
        roles = self._roles.roles
        for axis, slider in self.sliders.items():
            slider.enabled = roles[axis] is AxisRole.FIXED

    def set_x_axis(self, axis: Axis | str) -> AxisRoles:
        """Assign the x axis; a colliding overlay moves to the first free axis."""

        self._roles = self._roles.with_x(axis)
        self._sync_enabled()
        return self._roles

    def set_overlay_axis(self, axis: Axis | str) -> AxisRoles:
        """Assign the overlay axis; raises when it equals the x axis."""

        self._roles = self._roles.with_overlay(axis)
        self._sync_enabled()
        return self._roles

    def request_overlay(self, axis: Axis | str) -> SelectionOutcome:
        """Validation boundary for overlay changes coming from the user.

        A rejected request leaves roles and ``last_result`` untouched.
        """

        try:
            self.set_overlay_axis(axis)
        except InvalidSelectionError as exc:
            logger.warning(
                exc.message,
                extra={"event": "selection.rejected", **exc.context},
            )
            return SelectionOutcome(accepted=False, message=exc.message)
        return SelectionOutcome(accepted=True)

    def set_y_metric(self, metric: YMetric | str) -> YMetric:
        self._y_metric = parse_metric(metric)
        return self._y_metric

    # ---------------------------------------------------------------- sliders
    def slider(self, axis: Axis | str) -> AxisSlider:
        resolved = parse_axis(axis)
        snapshot = self._require_snapshot()
        return snapshot.sliders[resolved]

    def move_slider(self, axis: Axis | str, index: int) -> float:
        slider = self.slider(axis)
        slider.set_by_index(index)
        return slider.get()

    def snap_slider(self, axis: Axis | str, value: float) -> float:
        slider = self.slider(axis)
        slider.set_by_nearest_value(value)
        return slider.get()

    def fixed_values(self) -> Dict[Axis, float]:
        """Current slider values of the axes holding the fixed role."""

        sliders = self._require_snapshot().sliders
        return {axis: sliders[axis].get() for axis in self._roles.fixed_axes}

    def selection(self) -> Selection:
        return Selection.from_roles(self._roles, self._y_metric, self.fixed_values())

    # ----------------------------------------------------------------- redraw
    def redraw(self) -> CurveSet:
        """Recompute the curve set for the current state."""

        snapshot = self._require_snapshot()
        result = query(snapshot.table, self.selection(), self.options)
        self.last_result = result
        logger.debug(
            "Redraw complete",
            extra={
                "event": "session.redraw",
                "curves": len(result.curves),
                "x": self._roles.x.value,
                "overlay": self._roles.overlay.value,
                "metric": self._y_metric.value,
            },
        )
        return result

    def status_line(self) -> str:
        snapshot = self._require_snapshot()
        if snapshot.metadata is not None:
            return snapshot.metadata.status_line()
        sampled = "yes" if snapshot.source == "sample" else "no"
        return f"rows (dedup): {snapshot.table.row_count:,} • sample: {sampled}"
