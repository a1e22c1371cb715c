from __future__ import annotations

from typing import Any, Sequence
import xml.etree.ElementTree as ET

from vectorchart import svg
from vectorchart.errors import DataGapError
from vectorchart.renderers.base import BaseRenderer, RenderContext, cartesian_point, data_label, point_markers
from vectorchart.series import Series


class LineRenderer(BaseRenderer):
    """Polylines (or cubic splines) through the samples of each series."""

    def __init__(self, *, smooth: bool = False) -> None:
        self.smooth = smooth
        self.kind = "spline" if smooth else "line"

    def render_series(self, series: Series, index: int, state: Any, ctx: RenderContext) -> list[ET.Element]:
        d = ctx.data.series_data(series)
        opts = series.options
        color = ctx.color_of(series)

        segments: list[list[svg.Point]] = [[]]
        labelled: list[tuple[int, svg.Point]] = []
        for i in range(len(d)):
            p = cartesian_point(series, d, i, ctx)
            if p is None:
                if not opts.line.connect_nulls and segments[-1]:
                    segments.append([])
                continue
            segments[-1].append(p)
            labelled.append((i, p))
        if not labelled:
            raise DataGapError(series.name, "no drawable points")

        out: list[ET.Element] = []
        for segment in segments:
            if len(segment) < 2:
                continue
            if opts.line.stepped:
                segment = stepped(segment, horizontal=ctx.horizontal)
            if self.smooth and not opts.line.stepped:
                out.append(
                    svg.path(
                        spline_path(segment),
                        stroke=color,
                        stroke_width=opts.line.width,
                        dash_array=opts.line.dash_array,
                    )
                )
            else:
                out.append(
                    svg.polyline(
                        segment,
                        stroke=color,
                        stroke_width=opts.line.width,
                        dash_array=opts.line.dash_array,
                    )
                )

        out.extend(point_markers([p for _, p in labelled], opts.point, color))
        if opts.data_labels.enabled:
            for i, (px, py) in labelled:
                out.append(data_label(opts.data_labels, d.x_raw[i], float(d.y[i]), px, py, ctx))
        return out


def stepped(points: Sequence[svg.Point], *, horizontal: bool = False) -> list[svg.Point]:
    out = [points[0]]
    for x, y in points[1:]:
        px, py = out[-1]
        # Hold the previous value until the next sample's category position.
        out.append((px, y) if horizontal else (x, py))
        out.append((x, y))
    return out


def spline_path(points: Sequence[svg.Point]) -> str:
    """Cubic Bezier path whose control points sit 1/3 along each point's tangent."""
    n = len(points)
    x0, y0 = points[0]
    if n == 2:
        x1, y1 = points[1]
        return f"M {svg.num(x0)} {svg.num(y0)} L {svg.num(x1)} {svg.num(y1)}"

    tangents: list[svg.Point] = []
    for i in range(n):
        if i == 0:
            tx, ty = points[1][0] - points[0][0], points[1][1] - points[0][1]
        elif i == n - 1:
            tx, ty = points[-1][0] - points[-2][0], points[-1][1] - points[-2][1]
        else:
            tx = (points[i + 1][0] - points[i - 1][0]) / 2.0
            ty = (points[i + 1][1] - points[i - 1][1]) / 2.0
        tangents.append((tx, ty))

    parts = [f"M {svg.num(x0)} {svg.num(y0)}"]
    for i in range(n - 1):
        (ax, ay), (bx, by) = points[i], points[i + 1]
        (tax, tay), (tbx, tby) = tangents[i], tangents[i + 1]
        parts.append(
            "C {} {}, {} {}, {} {}".format(
                svg.num(ax + tax / 3.0),
                svg.num(ay + tay / 3.0),
                svg.num(bx - tbx / 3.0),
                svg.num(by - tby / 3.0),
                svg.num(bx),
                svg.num(by),
            )
        )
    return " ".join(parts)
