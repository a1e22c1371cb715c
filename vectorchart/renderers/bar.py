from __future__ import annotations

from dataclasses import dataclass
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
    data_label,
    default_contributions,
)
from vectorchart.series import DataSet, Series


@dataclass(frozen=True)
class BarLayout:
    slots: dict[str, int]
    slot_count: int
    bounds: dict[str, tuple[np.ndarray, np.ndarray]]


class BarRenderer(BaseRenderer):
    """Grouped, stacked and horizontal bars.

    Unstacked series get one slot each inside a category; stacked series share the
    slot of their stack group and grow from separate positive and negative totals.
    """

    kind = "bar"

    def axis_contributions(self, group: Sequence[Series], data: DataSet, horizontal: bool) -> list[AxisContribution]:
        layout = bar_layout(group, data)
        out: list[AxisContribution] = []
        for series in group:
            contributions = default_contributions(series, data.series_data(series), horizontal)
            if series.options.stacked:
                lower, upper = layout.bounds[series.name]
                value = contributions[1]
                contributions[1] = AxisContribution(
                    kind=value.kind,
                    axis_id=value.axis_id,
                    values=np.concatenate((lower, upper)),
                )
            out.extend(contributions)
        return out

    def prepare_group(self, group: Sequence[Series], ctx: RenderContext) -> Any:
        return bar_layout(group, ctx.data)

    def render_series(self, series: Series, index: int, state: Any, ctx: RenderContext) -> list[ET.Element]:
        layout: BarLayout = state
        d = ctx.data.series_data(series)
        opts = series.options
        fill = ctx.fill_for(series, ctx.color_of(series), 0.0 if ctx.horizontal else 90.0)
        cat_axis = ctx.category_axis(series)
        val_axis = ctx.value_axis(series)
        lower, upper = layout.bounds[series.name]

        if cat_axis.is_category:
            band = cat_axis.band
        else:
            band = abs(cat_axis.pixel_end - cat_axis.pixel_start) / max(1, len(d))
        bar_w = min(band * (1.0 - opts.bar.group_padding) / layout.slot_count, opts.bar.max_width)
        offset = -bar_w * layout.slot_count / 2.0 + layout.slots[series.name] * bar_w

        out: list[ET.Element] = []
        for i in range(len(d)):
            if np.isnan(upper[i]):
                continue
            c = category_position(cat_axis, d, i)
            if c is None:
                continue
            p_lo = val_axis.to_pixel(float(lower[i])) if opts.stacked else val_axis.baseline_pixel()
            p_hi = val_axis.to_pixel(float(upper[i]))
            length = max(abs(p_hi - p_lo), 1.0)
            if ctx.horizontal:
                out.append(
                    svg.rect(
                        min(p_lo, p_hi),
                        c + offset,
                        length,
                        bar_w,
                        fill=fill,
                        opacity=opts.fill_opacity,
                        rx=opts.bar.corner_radius,
                    )
                )
                label_at = (p_hi, c + offset + bar_w / 2.0)
            else:
                out.append(
                    svg.rect(
                        c + offset,
                        min(p_lo, p_hi),
                        bar_w,
                        length,
                        fill=fill,
                        opacity=opts.fill_opacity,
                        rx=opts.bar.corner_radius,
                    )
                )
                label_at = (c + offset + bar_w / 2.0, p_hi)
            if opts.data_labels.enabled:
                out.append(data_label(opts.data_labels, d.x_raw[i], float(d.y[i]), label_at[0], label_at[1], ctx))
        if not out:
            raise DataGapError(series.name, "no numeric bar values")
        return out


def bar_layout(group: Sequence[Series], data: DataSet) -> BarLayout:
    slots: dict[str, int] = {}
    slot_keys: dict[str, int] = {}
    positive: dict[str, np.ndarray] = {}
    negative: dict[str, np.ndarray] = {}
    bounds: dict[str, tuple[np.ndarray, np.ndarray]] = {}

    for series in group:
        opts = series.options
        key = f"stack:{opts.stack_group}" if opts.stacked else f"series:{series.name}"
        slots[series.name] = slot_keys.setdefault(key, len(slot_keys))

        y = data.series_data(series).y
        if not opts.stacked:
            bounds[series.name] = (np.zeros_like(y), y)
            continue
        pos = _resized(positive.get(key), y.size)
        neg = _resized(negative.get(key), y.size)
        clean = np.nan_to_num(y, nan=0.0)
        lower = np.where(clean >= 0, pos[: y.size], neg[: y.size])
        upper = lower + clean
        upper[np.isnan(y)] = np.nan
        pos[: y.size] += np.where(clean > 0, clean, 0.0)
        neg[: y.size] += np.where(clean < 0, clean, 0.0)
        positive[key] = pos
        negative[key] = neg
        bounds[series.name] = (lower, upper)

    return BarLayout(slots=slots, slot_count=max(1, len(slot_keys)), bounds=bounds)


def _resized(values: np.ndarray | None, size: int) -> np.ndarray:
    if values is None:
        return np.zeros(size, dtype=np.float64)
    if values.size >= size:
        return values.copy()
    out = np.zeros(size, dtype=np.float64)
    out[: values.size] = values
    return out
