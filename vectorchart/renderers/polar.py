from __future__ import annotations

import math
from typing import Any, Sequence
import xml.etree.ElementTree as ET

from vectorchart import svg
from vectorchart.errors import DataGapError
from vectorchart.numeric import find_max
from vectorchart.renderers.base import BaseRenderer, RenderContext, point_markers
from vectorchart.series import Series

RADIUS_FILL = 0.85


class PolarRenderer(BaseRenderer):
    """Radial plots around the chart-area center.

    Radius scales with the largest value in the group; the angle comes from the X
    values in degrees (0 at 12 o'clock, clockwise) or, without X values, from an
    even split of the full circle.
    """

    kind = "polar"
    uses_axes = False

    def render(self, group: Sequence[Series], ctx: RenderContext) -> ET.Element:
        g = super().render(group, ctx)
        options = group[0].options.polar
        if options.grid:
            # Grid sits underneath the series of the group.
            g.insert(0, polar_grid(ctx, options.rings, options.spokes))
        return g

    def prepare_group(self, group: Sequence[Series], ctx: RenderContext) -> Any:
        peak = find_max(*(ctx.data.series_data(s).y for s in group))
        return peak if peak is not None and peak > 0 else None

    def render_series(self, series: Series, index: int, state: Any, ctx: RenderContext) -> list[ET.Element]:
        if state is None:
            raise DataGapError(series.name, "polar series needs a positive value")
        d = ctx.data.series_data(series)
        opts = series.options
        color = ctx.color_of(series)
        cx, cy = ctx.area.center
        max_radius = min(ctx.area.width, ctx.area.height) / 2.0 * RADIUS_FILL

        points: list[svg.Point] = []
        n = len(d)
        for i in range(n):
            value = float(d.y[i])
            if math.isnan(value):
                continue
            degrees = float(d.x[i]) if d.has_x else i * 360.0 / n
            if math.isnan(degrees):
                continue
            r = max(0.0, value) / state * max_radius
            a = math.radians(degrees - 90.0)
            points.append((cx + r * math.cos(a), cy + r * math.sin(a)))
        if len(points) < 2:
            raise DataGapError(series.name, "polar series needs at least 2 points")

        if opts.polar.area:
            shape = svg.polygon(points, fill=ctx.fill_for(series, color), opacity=opts.polar.fill_opacity, stroke=color, stroke_width=opts.polar.line_width)
        else:
            shape = svg.polygon(points, fill="none", stroke=color, stroke_width=opts.polar.line_width)
        return [shape, *point_markers(points, opts.point, color)]


def polar_grid(ctx: RenderContext, rings: int, spokes: int) -> ET.Element:
    grid = ctx.config.grid
    cx, cy = ctx.area.center
    max_radius = min(ctx.area.width, ctx.area.height) / 2.0 * RADIUS_FILL
    g = svg.group(css_class="polar-grid")
    for k in range(1, max(0, rings) + 1):
        g.append(svg.circle(cx, cy, max_radius * k / rings, fill="none", stroke=grid.color, stroke_width=grid.width))
    for k in range(max(0, spokes)):
        a = math.radians(k * 360.0 / spokes - 90.0)
        g.append(
            svg.line(cx, cy, cx + max_radius * math.cos(a), cy + max_radius * math.sin(a), stroke=grid.color, stroke_width=grid.width)
        )
    return g
