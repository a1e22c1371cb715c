from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Any
import xml.etree.ElementTree as ET

import numpy as np

from vectorchart import svg
from vectorchart.config import BooleanOptions
from vectorchart.errors import DataGapError
from vectorchart.renderers.base import BaseRenderer, RenderContext
from vectorchart.scales import map_domain_to_range
from vectorchart.series import Series, SeriesData

TRUE_STRINGS = frozenset({"true", "1", "yes", "y", "on"})
LABEL_GAP = 10.0
LABEL_GAP_BELOW = 20.0


@dataclass(frozen=True)
class StateRun:
    """One contiguous interval of a constant boolean state."""

    state: bool
    start: float
    end: float


def coerce_bool(value: Any) -> bool:
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if isinstance(value, (int, float, np.integer, np.floating)):
        return not math.isnan(value) and value != 0
    if isinstance(value, str):
        return value.strip().lower() in TRUE_STRINGS
    return False


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def state_runs(d: SeriesData) -> list[StateRun]:
    """Compress a sample stream into the minimal list of constant-state runs.

    Samples are sorted by timestamp with a stable sort, so samples sharing a
    timestamp keep their input order. Each run ends at the timestamp of the sample
    that changes the state; a run started by the final sample closes at the final
    timestamp (zero width), which keeps the whole time span covered. Samples
    without a timestamp or without a value (None or an empty string) are dropped
    rather than read as false.
    """
    times = np.asarray(d.x, dtype=np.float64)
    present = np.asarray([not _is_missing(v) for v in d.y_raw], dtype=bool)
    valid = np.isfinite(times) & present
    times = times[valid]
    states = np.asarray([coerce_bool(v) for v, keep in zip(d.y_raw, valid) if keep], dtype=bool)
    if times.size < 2:
        raise DataGapError(d.name, f"state timeline needs at least 2 samples, got {times.size}")

    order = np.argsort(times, kind="stable")
    times = times[order]
    states = states[order]

    change = np.flatnonzero(states[1:] != states[:-1]) + 1
    starts = np.concatenate(([0], change))
    ends = np.concatenate((change, [times.size - 1]))
    return [
        StateRun(state=bool(states[s]), start=float(times[s]), end=float(times[e]))
        for s, e in zip(starts.tolist(), ends.tolist())
    ]


class BooleanRenderer(BaseRenderer):
    """State timelines: one colored rectangle per run of equal boolean samples.

    Time maps linearly onto the bar length, left to right for horizontal bars and
    bottom to top for vertical ones. ``position`` stacks several timelines.
    """

    kind = "boolean"
    uses_axes = False

    def render_series(self, series: Series, index: int, state: Any, ctx: RenderContext) -> list[ET.Element]:
        opts = series.options.boolean
        d = ctx.data.series_data(series)
        runs = state_runs(d)
        t0, t1 = runs[0].start, runs[-1].end
        if t1 == t0:
            raise DataGapError(series.name, "state timeline spans zero time")

        area = ctx.area
        rects: list[ET.Element] = []
        if opts.horizontal:
            length = opts.bar_width if opts.bar_width is not None else area.width
            bar_y = area.y + opts.position * (opts.bar_height + opts.bar_margin)
            for run in runs:
                x0 = map_domain_to_range(run.start, t0, t1, area.x, area.x + length)
                x1 = map_domain_to_range(run.end, t0, t1, area.x, area.x + length)
                rects.append(self._rect(run, opts, x0, bar_y, x1 - x0, opts.bar_height))
        else:
            length = opts.bar_width if opts.bar_width is not None else area.height
            bar_x = area.x + opts.position * (opts.bar_height + opts.bar_margin)
            for run in runs:
                y0 = map_domain_to_range(run.start, t0, t1, area.bottom, area.bottom - length)
                y1 = map_domain_to_range(run.end, t0, t1, area.bottom, area.bottom - length)
                rects.append(self._rect(run, opts, bar_x, y1, opts.bar_height, y0 - y1))

        label = self._label(series, opts, ctx, length)
        return rects + ([label] if label is not None else [])

    @staticmethod
    def _rect(run: StateRun, opts: BooleanOptions, x: float, y: float, w: float, h: float) -> ET.Element:
        return svg.rect(
            x,
            y,
            w,
            h,
            fill=opts.true_color if run.state else opts.false_color,
            css_class="state-true" if run.state else "state-false",
        )

    @staticmethod
    def _label(series: Series, opts: BooleanOptions, ctx: RenderContext, length: float) -> ET.Element | None:
        label = opts.label
        if not label.enabled:
            return None
        content = label.text or series.name
        area = ctx.area
        style = dict(font_family=label.font_family, font_size=label.font_size, font_weight=label.font_weight, fill=label.color)
        if opts.horizontal:
            y = area.y + opts.position * (opts.bar_height + opts.bar_margin) + opts.bar_height / 2.0
            if label.position == "left":
                return svg.text(area.x - LABEL_GAP, y, content, anchor="end", baseline="middle", **style)
            return svg.text(area.x + length + LABEL_GAP, y, content, anchor="start", baseline="middle", **style)
        x = area.x + opts.position * (opts.bar_height + opts.bar_margin) + opts.bar_height / 2.0
        if label.position != "bottom":
            return svg.text(x, area.bottom - length - LABEL_GAP, content, anchor="middle", **style)
        return svg.text(x, area.bottom + LABEL_GAP_BELOW, content, anchor="middle", baseline="hanging", **style)
