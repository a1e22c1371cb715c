from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Any, Sequence
import xml.etree.ElementTree as ET

import numpy as np

from vectorchart import svg
from vectorchart.axes import category_label
from vectorchart.config import RadarOptions
from vectorchart.errors import DataGapError
from vectorchart.renderers.base import BaseRenderer, RenderContext, data_label, point_markers
from vectorchart.series import Series, SeriesData

RADIUS_FILL = 0.85
# Labels further than this share of the radius from the center axis get a side anchor.
ANCHOR_BAND = 0.1


@dataclass(frozen=True)
class RadarLayout:
    categories: tuple[str, ...]
    scale: float
    bounds: dict[str, tuple[np.ndarray, np.ndarray]]


class RadarRenderer(BaseRenderer):
    """Spider charts: one spoke per category starting at 12 o'clock.

    Categories are the distinct X values of the group in first-seen order (or
    the sample positions when no X collection is bound). Stacked series add up
    per category within their stack group and are drawn as bands.
    """

    kind = "radar"
    uses_axes = False

    def render(self, group: Sequence[Series], ctx: RenderContext) -> ET.Element:
        g = super().render(group, ctx)
        layout = radar_layout(group, ctx)
        options = group[0].options.radar
        if layout.categories and (options.grid or options.labels):
            g.insert(0, radar_grid(ctx, layout.categories, options))
        return g

    def prepare_group(self, group: Sequence[Series], ctx: RenderContext) -> Any:
        return radar_layout(group, ctx)

    def render_series(self, series: Series, index: int, state: Any, ctx: RenderContext) -> list[ET.Element]:
        layout: RadarLayout = state
        if len(layout.categories) < 3:
            raise DataGapError(series.name, f"radar needs at least 3 categories, got {len(layout.categories)}")
        opts = series.options
        radar = opts.radar
        color = ctx.color_of(series)
        lower, upper = layout.bounds[series.name]
        top = spoke_points(ctx, upper, layout.scale)

        out: list[ET.Element] = []
        if radar.area:
            fill = ctx.fill_for(series, color)
            if opts.stacked:
                bottom = spoke_points(ctx, lower, layout.scale)
                band = f"{_closed_path(top)} {_closed_path(bottom[::-1])}"
                out.append(svg.path(band, fill=fill, opacity=radar.fill_opacity, fill_rule="evenodd"))
            else:
                out.append(svg.polygon(top, fill=fill, opacity=radar.fill_opacity))
        out.append(svg.polygon(top, fill="none", stroke=color, stroke_width=radar.line_width))
        out.extend(point_markers(top, opts.point, color))
        if opts.data_labels.enabled:
            shown = upper - lower
            for i, (x, y) in enumerate(top):
                out.append(data_label(opts.data_labels, layout.categories[i], float(shown[i]), x, y, ctx))
        return out


def radar_categories(group: Sequence[Series], ctx: RenderContext) -> tuple[str, ...]:
    seen: dict[str, None] = {}
    for series in group:
        d = ctx.data.series_data(series)
        for raw in d.x_raw if d.has_x else range(1, len(d) + 1):
            seen.setdefault(category_label(raw), None)
    return tuple(seen)


def category_values(d: SeriesData, categories: Sequence[str]) -> np.ndarray:
    """Value per category: the first sample at that category, 0 when absent or null."""
    labels = [category_label(raw) for raw in d.x_raw] if d.has_x else [str(i + 1) for i in range(len(d))]
    first: dict[str, float] = {}
    for label, value in zip(labels, d.y.tolist()):
        first.setdefault(label, value)
    return np.nan_to_num(np.asarray([first.get(c, 0.0) for c in categories], dtype=np.float64), nan=0.0)


def radar_layout(group: Sequence[Series], ctx: RenderContext) -> RadarLayout:
    categories = radar_categories(group, ctx)
    running: dict[str, np.ndarray] = {}
    bounds: dict[str, tuple[np.ndarray, np.ndarray]] = {}
    for series in group:
        values = category_values(ctx.data.series_data(series), categories)
        if series.options.stacked:
            base = running.get(series.options.stack_group, np.zeros(len(categories), dtype=np.float64))
            upper = base + np.maximum(values, 0.0)
            running[series.options.stack_group] = upper
            bounds[series.name] = (base, upper)
        else:
            bounds[series.name] = (np.zeros(len(categories), dtype=np.float64), values)
    peak = max((float(upper.max()) for _, upper in bounds.values() if upper.size), default=0.0)
    return RadarLayout(categories=categories, scale=peak if peak > 0 else 1.0, bounds=bounds)


def _closed_path(points: Sequence[svg.Point]) -> str:
    (x0, y0), *rest = points
    parts = [f"M {svg.num(x0)} {svg.num(y0)}"]
    parts.extend(f"L {svg.num(x)} {svg.num(y)}" for x, y in rest)
    parts.append("Z")
    return " ".join(parts)


def _radius(ctx: RenderContext) -> float:
    return min(ctx.area.width, ctx.area.height) / 2.0 * RADIUS_FILL


def _spoke_angle(i: int, n: int) -> float:
    return 2.0 * math.pi * i / n - math.pi / 2.0


def spoke_points(ctx: RenderContext, values: np.ndarray, scale: float) -> list[svg.Point]:
    cx, cy = ctx.area.center
    radius = _radius(ctx)
    n = values.size
    out: list[svg.Point] = []
    for i, value in enumerate(values.tolist()):
        r = max(0.0, value) / scale * radius
        a = _spoke_angle(i, n)
        out.append((cx + r * math.cos(a), cy + r * math.sin(a)))
    return out


def radar_grid(ctx: RenderContext, categories: Sequence[str], options: RadarOptions) -> ET.Element:
    """Level rings, one spoke per category and the category labels."""
    config = ctx.config
    cx, cy = ctx.area.center
    radius = _radius(ctx)
    n = len(categories)
    g = svg.group(css_class="radar-grid")
    if options.grid:
        levels = options.levels
        for k in range(1, max(0, levels) + 1):
            g.append(
                svg.circle(cx, cy, radius * k / levels, fill="none", stroke=config.grid.color, stroke_width=config.grid.width)
            )
        for i in range(n):
            a = _spoke_angle(i, n)
            g.append(
                svg.line(
                    cx,
                    cy,
                    cx + radius * math.cos(a),
                    cy + radius * math.sin(a),
                    stroke=config.grid.color,
                    stroke_width=config.grid.width,
                    dash_array=config.grid.dash_array,
                )
            )
    if options.labels:
        label_r = radius + options.label_offset
        band = radius * ANCHOR_BAND
        for i, category in enumerate(categories):
            a = _spoke_angle(i, n)
            x = cx + label_r * math.cos(a)
            y = cy + label_r * math.sin(a)
            anchor = "end" if x < cx - band else "start" if x > cx + band else "middle"
            baseline = "auto" if y < cy - band else "hanging" if y > cy + band else "middle"
            g.append(
                svg.text(
                    x,
                    y,
                    category,
                    font_family=config.font_family,
                    font_size=options.label_font_size,
                    fill=options.label_color,
                    anchor=anchor,
                    baseline=baseline,
                )
            )
    return g
