from __future__ import annotations

import math
from typing import Any, Sequence
import xml.etree.ElementTree as ET

import numpy as np

from vectorchart import svg
from vectorchart.axes import category_label
from vectorchart.colors import contrast_color
from vectorchart.errors import DataGapError
from vectorchart.numeric import format_number, format_template
from vectorchart.renderers.base import BaseRenderer, RenderContext
from vectorchart.series import Series

# A sweep of exactly 360 degrees collapses the arc's start and end points.
FULL_SWEEP = 359.99


class PieRenderer(BaseRenderer):
    """Pie and donut slices. Several pie series share the chart area side by side."""

    kind = "pie"
    uses_axes = False

    def prepare_group(self, group: Sequence[Series], ctx: RenderContext) -> Any:
        return len(group)

    def render_series(self, series: Series, index: int, state: Any, ctx: RenderContext) -> list[ET.Element]:
        cell_w = ctx.area.width / state
        cx = ctx.area.x + cell_w * (index + 0.5)
        cy = ctx.area.y + ctx.area.height / 2.0
        pie = series.options.pie
        radius = pie.radius if pie.radius is not None else 0.45 * min(cell_w, ctx.area.height)
        inner = pie.inner_radius * radius if pie.inner_radius <= 1 else pie.inner_radius
        return pie_slices(series, ctx, cx, cy, radius, min(inner, radius))


def pie_slices(series: Series, ctx: RenderContext, cx: float, cy: float, radius: float, inner: float) -> list[ET.Element]:
    """Slice paths followed by their labels for one series around (cx, cy)."""
    d = ctx.data.series_data(series)
    pie = series.options.pie
    values = np.where(np.isfinite(d.y) & (d.y > 0), d.y, 0.0)
    total = float(np.sum(values))
    if total <= 0:
        raise DataGapError(series.name, "pie values must sum to a positive number")

    sweep_total = pie.end_angle - pie.start_angle
    out: list[ET.Element] = []
    labels: list[ET.Element] = []
    angle = pie.start_angle
    nf = ctx.config.number_format
    for i, value in enumerate(values.tolist()):
        if value <= 0:
            continue
        sweep = value / total * sweep_total
        start = angle + pie.pad_angle / 2.0
        end = angle + sweep - pie.pad_angle / 2.0
        angle += sweep
        if end <= start:
            continue
        end = min(end, start + FULL_SWEEP)
        color = pie.colors[i % len(pie.colors)] if pie.colors else ctx.color_of(series)
        out.append(
            svg.path(
                slice_path(cx, cy, radius, inner, start, end),
                fill=ctx.fill_for(series, color),
                stroke=pie.stroke_color or None,
                stroke_width=pie.stroke_width,
            )
        )
        if pie.show_labels:
            mid = math.radians((start + end) / 2.0)
            label_r = (radius + inner) / 2.0 if inner > 0 else radius * 0.7
            content = format_template(
                pie.label_format,
                value=format_number(value, decimal_point=nf.decimal_point, thousands_sep=nf.thousands_sep),
                percentage=format_number(value / total * 100.0, 1, decimal_point=nf.decimal_point, thousands_sep=nf.thousands_sep),
                category=category_label(d.x_raw[i]) if d.has_x else str(i + 1),
            )
            labels.append(
                svg.text(
                    cx + label_r * math.cos(mid),
                    cy + label_r * math.sin(mid),
                    content,
                    font_family=ctx.config.font_family,
                    font_size=pie.label_font_size,
                    fill=contrast_color(color),
                    anchor="middle",
                    baseline="middle",
                )
            )
    return out + labels


def slice_path(cx: float, cy: float, radius: float, inner: float, start_deg: float, end_deg: float) -> str:
    """Arc path for one slice; angles are degrees clockwise from 3 o'clock."""
    a0 = math.radians(start_deg)
    a1 = math.radians(end_deg)
    large = 1 if end_deg - start_deg > 180 else 0
    sx, sy = cx + radius * math.cos(a0), cy + radius * math.sin(a0)
    ex, ey = cx + radius * math.cos(a1), cy + radius * math.sin(a1)
    n = svg.num
    if inner <= 0:
        return f"M {n(cx)} {n(cy)} L {n(sx)} {n(sy)} A {n(radius)} {n(radius)} 0 {large} 1 {n(ex)} {n(ey)} Z"
    isx, isy = cx + inner * math.cos(a0), cy + inner * math.sin(a0)
    iex, iey = cx + inner * math.cos(a1), cy + inner * math.sin(a1)
    return (
        f"M {n(sx)} {n(sy)} A {n(radius)} {n(radius)} 0 {large} 1 {n(ex)} {n(ey)} "
        f"L {n(iex)} {n(iey)} A {n(inner)} {n(inner)} 0 {large} 0 {n(isx)} {n(isy)} Z"
    )
