from __future__ import annotations

from typing import Any, Sequence
import xml.etree.ElementTree as ET

import numpy as np

from vectorchart import svg
from vectorchart.axes import AxisContribution
from vectorchart.errors import DataGapError
from vectorchart.renderers.base import (
    BaseRenderer,
    RenderContext,
    category_position,
    default_contributions,
    point_markers,
)
from vectorchart.series import DataSet, Series


class AreaRenderer(BaseRenderer):
    """Filled areas down to the zero baseline, optionally stacked per X index."""

    kind = "area"

    def axis_contributions(self, group: Sequence[Series], data: DataSet, horizontal: bool) -> list[AxisContribution]:
        out: list[AxisContribution] = []
        for series, (lower, upper) in zip(group, stack_bounds(group, data)):
            d = data.series_data(series)
            contributions = default_contributions(series, d, horizontal)
            if series.options.stacked:
                value = contributions[1]
                contributions[1] = AxisContribution(
                    kind=value.kind,
                    axis_id=value.axis_id,
                    values=np.concatenate((lower, upper)),
                )
            out.extend(contributions)
        return out

    def prepare_group(self, group: Sequence[Series], ctx: RenderContext) -> Any:
        return stack_bounds(group, ctx.data)

    def render_series(self, series: Series, index: int, state: Any, ctx: RenderContext) -> list[ET.Element]:
        d = ctx.data.series_data(series)
        opts = series.options
        color = ctx.color_of(series)
        lower, upper = state[index]
        cat_axis = ctx.category_axis(series)
        val_axis = ctx.value_axis(series)

        top: list[svg.Point] = []
        bottom: list[svg.Point] = []
        for i in range(len(d)):
            if np.isnan(upper[i]):
                continue
            c = category_position(cat_axis, d, i)
            if c is None:
                continue
            hi = val_axis.to_pixel(float(upper[i]))
            lo = val_axis.to_pixel(float(lower[i])) if opts.stacked else val_axis.baseline_pixel()
            top.append((hi, c) if ctx.horizontal else (c, hi))
            bottom.append((lo, c) if ctx.horizontal else (c, lo))
        if len(top) < 2:
            raise DataGapError(series.name, "area needs at least 2 points")

        outline = top + bottom[::-1]
        parts = [f"M {svg.num(outline[0][0])} {svg.num(outline[0][1])}"]
        parts.extend(f"L {svg.num(x)} {svg.num(y)}" for x, y in outline[1:])
        parts.append("Z")
        return [
            svg.path(" ".join(parts), fill=ctx.fill_for(series, color), opacity=opts.area.fill_opacity),
            svg.polyline(top, stroke=color, stroke_width=opts.area.stroke_width, dash_array=opts.line.dash_array),
            *point_markers(top, opts.point, color),
        ]


def stack_bounds(group: Sequence[Series], data: DataSet) -> list[tuple[np.ndarray, np.ndarray]]:
    """(lower, upper) value bounds per series; stacked series accumulate per index."""
    running: dict[tuple[str, int], np.ndarray] = {}
    out: list[tuple[np.ndarray, np.ndarray]] = []
    for series in group:
        y = data.series_data(series).y
        if not series.options.stacked:
            out.append((np.zeros_like(y), y))
            continue
        key = (series.options.stack_group, series.options.y_axis_id)
        base = running.get(key, np.zeros(0, dtype=np.float64))
        lower = np.zeros(y.size, dtype=np.float64)
        n = min(base.size, y.size)
        lower[:n] = base[:n]
        upper = lower + np.nan_to_num(y, nan=0.0)
        upper[np.isnan(y)] = np.nan
        grown = np.zeros(max(base.size, y.size), dtype=np.float64)
        grown[: base.size] = base
        grown[: y.size] = np.where(np.isnan(y), lower, upper)
        running[key] = grown
        out.append((lower, upper))
    return out
