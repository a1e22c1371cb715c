from __future__ import annotations

import math
from typing import Any
import xml.etree.ElementTree as ET

import numpy as np

from vectorchart import svg
from vectorchart.config import BubbleOptions
from vectorchart.errors import DataGapError
from vectorchart.numeric import format_number
from vectorchart.renderers.base import BaseRenderer, RenderContext, cartesian_point, data_label
from vectorchart.series import DataSet, Series


class BubbleRenderer(BaseRenderer):
    """Scatter circles whose diameter follows a third value per point.

    Size values come from the ``bubble.size_field`` collection or the inline
    ``bubble.sizes`` list and scale linearly onto ``min_size..max_size``.
    """

    kind = "bubble"

    def render_series(self, series: Series, index: int, state: Any, ctx: RenderContext) -> list[ET.Element]:
        d = ctx.data.series_data(series)
        opts = series.options
        bubble = opts.bubble
        color = ctx.color_of(series)
        fill = ctx.fill_for(series, color)
        z = size_values(series, ctx.data, len(d))
        diameters = bubble_diameters(z, bubble)
        nf = ctx.config.number_format

        circles: list[ET.Element] = []
        labels: list[ET.Element] = []
        for i in range(len(d)):
            p = cartesian_point(series, d, i, ctx)
            if p is None:
                continue
            x, y = p
            circles.append(
                svg.circle(
                    x,
                    y,
                    float(diameters[i]) / 2.0,
                    fill=fill,
                    opacity=bubble.fill_opacity,
                    stroke=bubble.border_color or color,
                    stroke_width=bubble.border_width,
                )
            )
            if opts.data_labels.enabled:
                z_text = "" if math.isnan(z[i]) else format_number(float(z[i]), decimal_point=nf.decimal_point, thousands_sep=nf.thousands_sep)
                labels.append(data_label(opts.data_labels, d.x_raw[i], float(d.y[i]), x, y, ctx, z=z_text))
        if not circles:
            raise DataGapError(series.name, "no numeric bubbles")
        return circles + labels


def size_values(series: Series, data: DataSet, count: int) -> np.ndarray:
    """Bubble size per sample, NaN where the sample has none."""
    bubble = series.options.bubble
    if bubble.size_field:
        source = data.collection(bubble.size_field).numeric
    else:
        source = np.asarray(bubble.sizes, dtype=np.float64)
    out = np.full(count, np.nan, dtype=np.float64)
    n = min(count, source.size)
    out[:n] = source[:n]
    return out


def bubble_diameters(z: np.ndarray, options: BubbleOptions) -> np.ndarray:
    """Linear min..max scaling of ``z``; missing sizes or a flat range use ``default_size``."""
    out = np.full(z.shape, options.default_size, dtype=np.float64)
    known = np.isfinite(z)
    if not known.any():
        return out
    lo = float(z[known].min())
    hi = float(z[known].max())
    if hi == lo:
        return out
    out[known] = options.min_size + (z[known] - lo) / (hi - lo) * (options.max_size - options.min_size)
    return out
