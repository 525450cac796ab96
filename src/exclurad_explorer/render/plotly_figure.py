"""Plotly rendering of a :class:`~exclurad_core.query.CurveSet`."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import plotly.graph_objects as go

from exclurad_core.query import CurveSet

__all__ = [
    "PALETTE",
    "DASHES",
    "SYMBOLS",
    "FIGURE_HEIGHT",
    "build_figure",
    "write_figure_html",
]

# Okabe-Ito, colour-blind safe.
PALETTE: Sequence[str] = (
    "#0072B2",
    "#D55E00",
    "#009E73",
    "#CC79A7",
    "#E69F00",
    "#56B4E9",
    "#000000",
    "#F0E442",
)
DASHES: Sequence[str] = (
    "solid",
    "dash",
    "dot",
    "dashdot",
    "longdash",
    "longdashdot",
    "solid",
    "dash",
)
SYMBOLS: Sequence[str] = (
    "circle",
    "triangle-up",
    "square",
    "diamond",
    "x",
    "star",
    "cross",
    "hexagram",
)

FIGURE_HEIGHT = 640
LINE_WIDTH = 2
MARKER_SIZE = 6
EMPTY_MESSAGE = "No curves with enough points for this selection"


def _pick(styles: Sequence[str], index: int) -> str:
    return styles[index % len(styles)]


def build_figure(result: CurveSet, *, height: int = FIGURE_HEIGHT) -> go.Figure:
    """Translate ``result`` into a line-and-marker figure.

    An empty curve set still yields a figure with axis titles and a note,
    so callers never special-case the no-data branch.
    """

    fig = go.Figure()
    for curve in result.curves:
        fig.add_trace(
            go.Scatter(
                x=list(curve.x),
                y=list(curve.y),
                mode="lines+markers",
                name=curve.label,
                line=dict(
                    color=_pick(PALETTE, curve.color_index),
                    dash=_pick(DASHES, curve.dash_index),
                    width=LINE_WIDTH,
                ),
                marker=dict(
                    symbol=_pick(SYMBOLS, curve.color_index),
                    size=MARKER_SIZE,
                ),
            )
        )

    fig.update_layout(
        title_text=result.title,
        template="plotly_white",
        height=int(height),
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="left", x=0.0),
        xaxis_title=result.x_label,
        yaxis_title=result.y_label,
    )
    if result.y_range is not None:
        fig.update_yaxes(range=list(result.y_range))
    if result.is_empty:
        fig.add_annotation(
            text=EMPTY_MESSAGE,
            xref="paper",
            yref="paper",
            x=0.5,
            y=0.5,
            showarrow=False,
        )
    return fig


def write_figure_html(result: CurveSet, savepath: str | Path, *, height: int = FIGURE_HEIGHT) -> Path:
    """Write an interactive HTML page for ``result`` and return its path."""

    fig = build_figure(result, height=height)
    path = Path(savepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.write_html(str(path), include_plotlyjs="cdn")
    return path
