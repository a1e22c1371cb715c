from __future__ import annotations

from typing import Any
import xml.etree.ElementTree as ET

from vectorchart import svg
from vectorchart.errors import DataGapError
from vectorchart.renderers.base import BaseRenderer, RenderContext, cartesian_point, data_label, marker
from vectorchart.series import Series


class ScatterRenderer(BaseRenderer):
    kind = "scatter"

    def render_series(self, series: Series, index: int, state: Any, ctx: RenderContext) -> list[ET.Element]:
        d = ctx.data.series_data(series)
        opts = series.options
        color = ctx.color_of(series)
        point = opts.point
        scatter = opts.scatter

        placed: list[tuple[int, svg.Point]] = []
        for i in range(len(d)):
            p = cartesian_point(series, d, i, ctx)
            if p is not None:
                placed.append((i, p))
        if not placed:
            raise DataGapError(series.name, "no numeric points")

        out: list[ET.Element] = []
        if scatter.connect_points and len(placed) > 1:
            out.append(svg.polyline([p for _, p in placed], stroke=color, stroke_width=scatter.line_width))
        for i, (x, y) in placed:
            size = scatter.point_sizes[i] if i < len(scatter.point_sizes) else point.size
            fill = scatter.point_colors[i] if i < len(scatter.point_colors) else (point.color or color)
            out.append(marker(point.shape, x, y, size, fill=ctx.fill_for(series, fill), stroke=point.stroke_color, stroke_width=point.stroke_width))
            if opts.data_labels.enabled:
                out.append(data_label(opts.data_labels, d.x_raw[i], float(d.y[i]), x, y, ctx))
        return out
