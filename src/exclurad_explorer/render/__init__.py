"""Render sinks for curve sets."""

from exclurad_explorer.render.plotly_figure import (
    DASHES,
    PALETTE,
    SYMBOLS,
    build_figure,
    write_figure_html,
)
from exclurad_explorer.render.text import render_curve_set, render_sparkline

__all__ = [
    "DASHES",
    "PALETTE",
    "SYMBOLS",
    "build_figure",
    "write_figure_html",
    "render_curve_set",
    "render_sparkline",
]
