"""Plain-text rendering of curve sets for terminals and logs."""

from __future__ import annotations

import math
from typing import Iterable, Sequence

from exclurad_core.query import CurveSet

DEFAULT_SPARKLINE_BLOCKS: Sequence[str] = "▁▂▃▄▅▆▇█"

__all__ = ["DEFAULT_SPARKLINE_BLOCKS", "render_sparkline", "render_curve_set"]


def render_sparkline(
    values: Iterable[float],
    *,
    width: int | None = None,
    blocks: Sequence[str] = DEFAULT_SPARKLINE_BLOCKS,
    bounds: tuple[float, float] | None = None,
) -> str:
    """Render ``values`` as a Unicode block-character sparkline.

    Parameters
    ----------
    values:
        Numeric samples, already ordered along the x axis.
    width:
        Optional maximum number of samples; longer series are resampled by
        stride so both ends stay visible.
    blocks:
        Characters representing increasing magnitudes.
    bounds:
        Optional shared ``(lo, hi)`` scale. Curves of one set rendered with
        the same bounds are visually comparable.
    """

    data = [float(value) for value in values if math.isfinite(float(value))]
    if width is not None:
        width = int(width)
        if width <= 0:
            return ""
        if len(data) > width:
            step = (len(data) - 1) / max(width - 1, 1)
            data = [data[int(round(i * step))] for i in range(width)]
    palette = tuple(blocks)
    if not data or not palette:
        return ""

    minimum, maximum = bounds if bounds is not None else (min(data), max(data))
    buckets = len(palette) - 1
    if buckets <= 0 or math.isclose(maximum, minimum):
        return palette[0] * len(data)

    span = maximum - minimum
    rendered: list[str] = []
    for value in data:
        index = int(round((value - minimum) / span * buckets))
        rendered.append(palette[max(0, min(buckets, index))])
    return "".join(rendered)


def render_curve_set(result: CurveSet, *, width: int = 40) -> str:
    """Summarise ``result``: title, one line per curve and the y range."""

    lines = [result.title]
    if result.is_empty:
        lines.append("  (no curves with enough points)")
        return "\n".join(lines)

    label_width = max(len(curve.label) for curve in result.curves)
    for curve in result.curves:
        spark = render_sparkline(curve.y, width=width, bounds=result.y_range)
        lines.append(
            f"  {curve.label:<{label_width}}  n={len(curve):<3d} "
            f"y=[{min(curve.y):.4g}, {max(curve.y):.4g}]  {spark}"
        )
    if result.y_range is not None:
        lo, hi = result.y_range
        lines.append(f"  {result.y_label}: [{lo:.4g}, {hi:.4g}]")
    return "\n".join(lines)
