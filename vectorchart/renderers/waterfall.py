from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Any, Sequence
import xml.etree.ElementTree as ET

import numpy as np

from vectorchart import svg
from vectorchart.axes import AxisContribution
from vectorchart.config import WaterfallOptions
from vectorchart.errors import ConfigurationError, DataGapError
from vectorchart.renderers.base import BaseRenderer, RenderContext, category_position, data_label, default_contributions
from vectorchart.series import DataSet, Series

BAR_KINDS = ("positive", "negative", "total", "subtotal")


@dataclass(frozen=True)
class WaterfallStep:
    index: int
    kind: str
    start: float
    end: float


class WaterfallRenderer(BaseRenderer):
    """Bars floating on a running total; totals and subtotals drop back to zero."""

    kind = "waterfall"

    def axis_contributions(self, group: Sequence[Series], data: DataSet, horizontal: bool) -> list[AxisContribution]:
        out: list[AxisContribution] = []
        for series in group:
            d = data.series_data(series)
            category, value = default_contributions(series, d, horizontal)
            steps = waterfall_steps(d.y, series.options.waterfall)
            bounds = np.asarray([v for s in steps for v in (s.start, s.end)], dtype=np.float64)
            out.append(category)
            out.append(AxisContribution(kind=value.kind, axis_id=value.axis_id, values=bounds))
        return out

    def render_series(self, series: Series, index: int, state: Any, ctx: RenderContext) -> list[ET.Element]:
        d = ctx.data.series_data(series)
        opts = series.options
        wf = opts.waterfall
        steps = waterfall_steps(d.y, wf)
        if not steps:
            raise DataGapError(series.name, "no numeric waterfall values")
        cat_axis = ctx.category_axis(series)
        val_axis = ctx.value_axis(series)
        if cat_axis.is_category:
            band = cat_axis.band
        else:
            band = abs(cat_axis.pixel_end - cat_axis.pixel_start) / max(1, len(d))
        bar_w = band * 0.8
        colors = {
            "positive": wf.positive_color,
            "negative": wf.negative_color,
            "total": wf.total_color,
            "subtotal": wf.subtotal_color,
        }

        bars: list[ET.Element] = []
        connectors: list[ET.Element] = []
        labels: list[ET.Element] = []
        previous: tuple[float, float] | None = None
        for step in steps:
            c = category_position(cat_axis, d, step.index)
            if c is None:
                continue
            p0 = val_axis.to_pixel(step.start)
            p1 = val_axis.to_pixel(step.end)
            length = max(abs(p1 - p0), 1.0)
            edge = (c - bar_w / 2.0, c + bar_w / 2.0)
            fill = ctx.fill_for(series, colors[step.kind], 0.0 if ctx.horizontal else 90.0)
            if ctx.horizontal:
                bars.append(svg.rect(min(p0, p1), edge[0], length, bar_w, fill=fill, opacity=opts.fill_opacity))
            else:
                bars.append(svg.rect(edge[0], min(p0, p1), bar_w, length, fill=fill, opacity=opts.fill_opacity))
            if wf.connectors and previous is not None:
                prev_edge, prev_level = previous
                if ctx.horizontal:
                    connectors.append(svg.line(prev_level, prev_edge, prev_level, edge[0], stroke=wf.connector_color, dash_array=wf.connector_dash_array))
                else:
                    connectors.append(svg.line(prev_edge, prev_level, edge[0], prev_level, stroke=wf.connector_color, dash_array=wf.connector_dash_array))
            previous = (edge[1], p1)
            if opts.data_labels.enabled:
                shown = step.end if step.kind in ("total", "subtotal") else step.end - step.start
                at = (p1, c) if ctx.horizontal else (c, min(p0, p1))
                labels.append(data_label(opts.data_labels, d.x_raw[step.index], shown, at[0], at[1], ctx))
        return connectors + bars + labels


def waterfall_steps(values: np.ndarray, options: WaterfallOptions) -> list[WaterfallStep]:
    running = float(options.initial_value)
    steps: list[WaterfallStep] = []
    for i, raw in enumerate(values.tolist()):
        kind = options.bar_kinds[i] if i < len(options.bar_kinds) else None
        if kind is not None and kind not in BAR_KINDS:
            raise ConfigurationError(f"unknown waterfall bar kind: {kind}")
        if kind in ("total", "subtotal"):
            steps.append(WaterfallStep(index=i, kind=kind, start=0.0, end=running))
            continue
        if math.isnan(raw):
            continue
        if kind is None:
            kind = "positive" if raw >= 0 else "negative"
        steps.append(WaterfallStep(index=i, kind=kind, start=running, end=running + raw))
        running += raw
    return steps
