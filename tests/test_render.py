from __future__ import annotations

from pathlib import Path

import pytest

from exclurad_core import Axis, KinematicTable, QueryOptions, Selection, YMetric, query
from exclurad_explorer.render.text import render_curve_set, render_sparkline


def _grid_result(grid_table: KinematicTable, **options: int):
    selection = Selection.build(Axis.PHI, Axis.Q2, YMetric.DELTA, {Axis.W: 1.6975, Axis.COS: 0.25})
    return query(grid_table, selection, QueryOptions(**options))


def test_render_sparkline_spans_the_block_palette() -> None:
    assert render_sparkline([0.0, 0.5, 1.0]) == "▁▅█"
    assert render_sparkline([2.0, 2.0, 2.0]) == "▁▁▁"
    assert render_sparkline([]) == ""
    assert render_sparkline([1.0, 2.0], width=0) == ""


def test_render_sparkline_resamples_to_width() -> None:
    spark = render_sparkline(range(100), width=10)

    assert len(spark) == 10
    assert spark[0] == "▁"
    assert spark[-1] == "█"


def test_render_sparkline_with_shared_bounds() -> None:
    assert render_sparkline([0.0, 0.0], bounds=(0.0, 1.0)) == "▁▁"
    assert render_sparkline([1.0], bounds=(0.0, 1.0)) == "█"


def test_render_curve_set_lists_each_curve(grid_table: KinematicTable) -> None:
    result = _grid_result(grid_table)

    text = render_curve_set(result)

    lines = text.splitlines()
    assert lines[0] == result.title
    assert len(lines) == 1 + len(result.curves) + 1
    assert lines[1].strip().startswith("Q²=0.411")
    assert "n=10" in lines[1]
    assert lines[-1].strip().startswith("δ = σ_obs/σ₀: [")


def test_render_curve_set_without_curves(grid_table: KinematicTable) -> None:
    result = _grid_result(grid_table, min_support=50)

    text = render_curve_set(result)

    assert "no curves" in text


def test_build_figure_styles_traces(grid_table: KinematicTable) -> None:
    pytest.importorskip("plotly")
    from exclurad_explorer.render.plotly_figure import DASHES, PALETTE, SYMBOLS, build_figure

    result = _grid_result(grid_table)
    figure = build_figure(result)

    assert [trace.name for trace in figure.data] == [curve.label for curve in result.curves]
    first, second = figure.data[0], figure.data[1]
    assert first.mode == "lines+markers"
    assert first.line.color == PALETTE[0]
    assert second.line.color == PALETTE[1]
    assert second.line.dash == DASHES[1]
    assert second.marker.symbol == SYMBOLS[1]
    assert first.line.width == 2
    assert first.marker.size == 6
    assert figure.layout.title.text == result.title
    assert figure.layout.height == 640
    assert figure.layout.legend.orientation == "h"
    assert tuple(figure.layout.yaxis.range) == pytest.approx(result.y_range)
    assert figure.layout.xaxis.title.text == "φ* [deg]"


def test_build_figure_for_empty_result(grid_table: KinematicTable) -> None:
    pytest.importorskip("plotly")
    from exclurad_explorer.render.plotly_figure import build_figure

    figure = build_figure(_grid_result(grid_table, min_support=50))

    assert len(figure.data) == 0
    assert figure.layout.annotations[0].text.startswith("No curves")


def test_write_figure_html(grid_table: KinematicTable, tmp_path: Path) -> None:
    pytest.importorskip("plotly")
    from exclurad_explorer.render.plotly_figure import write_figure_html

    path = write_figure_html(_grid_result(grid_table), tmp_path / "out" / "curves.html")

    assert path.is_file()
    assert "plotly" in path.read_text(encoding="utf8").lower()


def test_palette_has_eight_slots() -> None:
    pytest.importorskip("plotly")
    from exclurad_explorer.render.plotly_figure import DASHES, PALETTE, SYMBOLS

    assert len(PALETTE) == len(DASHES) == len(SYMBOLS) == 8
    assert PALETTE[0] == "#0072B2"
