from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Any, Literal, Sequence
import xml.etree.ElementTree as ET

import numpy as np

from vectorchart import svg
from vectorchart.config import AxisOptions, NumberFormat
from vectorchart.errors import ConfigurationError
from vectorchart.numeric import find_max, find_min, format_date, format_number
from vectorchart.scales import NiceScale, compute_nice_scale, decimals_for_interval, map_domain_to_range

LOGGER = logging.getLogger(__name__)

AxisKind = Literal["x", "y"]

STACKED_AXIS_SPACING = 40.0


@dataclass(frozen=True)
class ChartArea:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + self.width / 2.0, self.y + self.height / 2.0)


@dataclass(frozen=True)
class AxisContribution:
    """Values (and category labels) one series contributes to one axis."""

    kind: AxisKind
    axis_id: int
    values: np.ndarray = field(default_factory=lambda: np.empty(0, dtype=np.float64))
    categories: tuple[Any, ...] = ()
    count: int = 0


@dataclass(frozen=True)
class Tick:
    value: float
    pixel: float
    label: str


@dataclass(frozen=True)
class Axis:
    kind: AxisKind
    id: int
    options: AxisOptions
    pixel_start: float
    pixel_end: float
    offset: float
    scale: NiceScale | None = None
    categories: tuple[str, ...] = ()

    @property
    def is_category(self) -> bool:
        return self.scale is None

    @property
    def band(self) -> float:
        """Pixel width of one category slot (or of one tick step on value axes)."""
        span = abs(self.pixel_end - self.pixel_start)
        if self.is_category:
            return span / max(1, len(self.categories))
        return span / max(1, self.scale.tick_count - 1)

    def to_pixel(self, value: float) -> float:
        if self.scale is None:
            return self.category_pixel(int(value))
        return map_domain_to_range(value, self.scale.min, self.scale.max, self.pixel_start, self.pixel_end)

    def category_pixel(self, index: int) -> float:
        step = (self.pixel_end - self.pixel_start) / max(1, len(self.categories))
        return self.pixel_start + (index + 0.5) * step

    def slot_of(self, label: Any, fallback: int) -> int:
        key = category_label(label)
        try:
            return self.categories.index(key)
        except ValueError:
            return fallback

    def baseline_pixel(self) -> float:
        """Pixel of zero clamped into the domain; bars and areas grow from here."""
        if self.scale is None:
            return self.pixel_start
        zero = min(max(0.0, self.scale.min), self.scale.max)
        return self.to_pixel(zero)

    def ticks(self, number_format: NumberFormat) -> list[Tick]:
        labels = self.options.labels
        if self.scale is None:
            return [Tick(value=float(i), pixel=self.category_pixel(i), label=c) for i, c in enumerate(self.categories)]
        decimals = labels.decimals
        if decimals is None:
            decimals = decimals_for_interval(self.scale.tick_interval)
        out: list[Tick] = []
        for value in self.scale.ticks().tolist():
            if self.options.type == "time":
                label = format_date(value, labels.date_format)
            else:
                label = format_number(
                    value,
                    decimals,
                    decimal_point=number_format.decimal_point,
                    thousands_sep=number_format.thousands_sep,
                )
            out.append(Tick(value=value, pixel=self.to_pixel(value), label=f"{labels.prefix}{label}{labels.suffix}"))
        return out


def category_label(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class AxisManager:
    """Owns every X and Y axis of one render pass.

    Axes are prepared once from the contributions of the series bound to them and
    are read-only afterwards.
    """

    def __init__(
        self,
        x_options: Sequence[AxisOptions],
        y_options: Sequence[AxisOptions],
        *,
        horizontal_bars: bool = False,
    ) -> None:
        if not x_options or not y_options:
            raise ConfigurationError("at least one x axis and one y axis are required")
        self._x_options = tuple(x_options)
        self._y_options = tuple(y_options)
        self.horizontal_bars = horizontal_bars
        self._x_axes: tuple[Axis, ...] = ()
        self._y_axes: tuple[Axis, ...] = ()

    @property
    def prepared(self) -> bool:
        return bool(self._x_axes)

    @property
    def x_axes(self) -> tuple[Axis, ...]:
        return self._x_axes

    @property
    def y_axes(self) -> tuple[Axis, ...]:
        return self._y_axes

    def x_axis(self, axis_id: int = 0) -> Axis:
        return self._lookup(self._x_axes, "x", axis_id)

    def y_axis(self, axis_id: int = 0) -> Axis:
        return self._lookup(self._y_axes, "y", axis_id)

    def check_binding(self, kind: AxisKind, axis_id: int, series_name: str) -> None:
        options = self._x_options if kind == "x" else self._y_options
        if not 0 <= axis_id < len(options):
            raise ConfigurationError(f"series `{series_name}` references undefined {kind} axis {axis_id}")

    def prepare(self, contributions: Sequence[AxisContribution], area: ChartArea) -> None:
        self._x_axes = tuple(
            self.prepare_axis("x", i, opts, [c for c in contributions if c.kind == "x" and c.axis_id == i], area)
            for i, opts in enumerate(self._x_options)
        )
        self._y_axes = tuple(
            self.prepare_axis("y", i, opts, [c for c in contributions if c.kind == "y" and c.axis_id == i], area)
            for i, opts in enumerate(self._y_options)
        )

    def prepare_axis(
        self,
        kind: AxisKind,
        axis_id: int,
        options: AxisOptions,
        bound: Sequence[AxisContribution],
        area: ChartArea,
    ) -> Axis:
        allowed = ("bottom", "top") if kind == "x" else ("left", "right")
        if options.position not in allowed:
            raise ConfigurationError(f"{kind} axis {axis_id} position must be one of {', '.join(allowed)}")
        if kind == "x":
            start, end = area.x, area.right
        elif self.horizontal_bars:
            # Category slots run top to bottom.
            start, end = area.y, area.bottom
        else:
            start, end = area.bottom, area.y
        offset = self._position_offset(kind, axis_id, options)

        if self._is_category(kind, options):
            categories = self._categories(options, bound)
            LOGGER.debug("%s axis %d: %d categories", kind, axis_id, len(categories))
            return Axis(kind=kind, id=axis_id, options=options, pixel_start=start, pixel_end=end, offset=offset, categories=categories)

        values = [c.values for c in bound]
        vmin = options.min if options.min is not None else find_min(*values)
        vmax = options.max if options.max is not None else find_max(*values)
        if vmin is None or vmax is None:
            if not bound:
                raise ConfigurationError(f"{kind} axis {axis_id} is bound to no series and has no explicit min/max")
            raise ConfigurationError(f"{kind} axis {axis_id} has no numeric data and no explicit min/max")
        include_zero = options.include_zero or (self.horizontal_bars and kind == "x")
        scale = compute_nice_scale(vmin, vmax, options.tick_amount, include_zero and options.type != "time")
        LOGGER.debug(
            "%s axis %d: domain [%s, %s] interval %s ticks %d",
            kind,
            axis_id,
            scale.min,
            scale.max,
            scale.tick_interval,
            scale.tick_count,
        )
        return Axis(kind=kind, id=axis_id, options=options, pixel_start=start, pixel_end=end, offset=offset, scale=scale)

    def render_grid(self, *, color: str, width: float, dash_array: str = "") -> ET.Element:
        g = svg.group(css_class="grid")
        for axis in (self._x_axes[:1] + self._y_axes[:1]):
            if axis.is_category or not axis.options.grid:
                continue
            for value in axis.scale.ticks().tolist():
                p = axis.to_pixel(value)
                if axis.kind == "x":
                    y0, y1 = self._extent("y")
                    g.append(svg.line(p, y0, p, y1, stroke=color, stroke_width=width, dash_array=dash_array))
                else:
                    x0, x1 = self._extent("x")
                    g.append(svg.line(x0, p, x1, p, stroke=color, stroke_width=width, dash_array=dash_array))
        return g

    def render(self, number_format: NumberFormat) -> ET.Element:
        g = svg.group(css_class="axes")
        for axis in self._x_axes + self._y_axes:
            g.append(self._render_axis(axis, number_format))
        return g

    def _render_axis(self, axis: Axis, number_format: NumberFormat) -> ET.Element:
        opts = axis.options
        g = svg.group(css_class=f"axis {axis.kind}-axis")
        horizontal = axis.kind == "x"
        lo, hi = sorted((axis.pixel_start, axis.pixel_end))
        anchor = self._anchor(axis)
        tick = opts.ticks.size if opts.ticks.enabled else 0.0
        # Outward direction: ticks and labels sit on the far side of the axis line.
        outward = 1.0 if opts.position in ("bottom", "right") else -1.0

        if opts.line.enabled:
            if horizontal:
                g.append(svg.line(lo, anchor, hi, anchor, stroke=opts.line.color, stroke_width=opts.line.width))
            else:
                g.append(svg.line(anchor, lo, anchor, hi, stroke=opts.line.color, stroke_width=opts.line.width))

        labels = opts.labels
        for t in axis.ticks(number_format):
            if opts.ticks.enabled:
                if horizontal:
                    g.append(svg.line(t.pixel, anchor, t.pixel, anchor + outward * tick, stroke=opts.ticks.color, stroke_width=opts.ticks.width))
                else:
                    g.append(svg.line(anchor, t.pixel, anchor + outward * tick, t.pixel, stroke=opts.ticks.color, stroke_width=opts.ticks.width))
            if not labels.enabled:
                continue
            if horizontal:
                y = anchor + tick + labels.font_size if outward > 0 else anchor - tick - 4.0
                g.append(
                    svg.text(
                        t.pixel,
                        y,
                        t.label,
                        font_family=labels.font_family,
                        font_size=labels.font_size,
                        fill=labels.color,
                        anchor="middle",
                        rotation=labels.rotation,
                    )
                )
            else:
                x = anchor + outward * (tick + 8.0)
                g.append(
                    svg.text(
                        x,
                        t.pixel,
                        t.label,
                        font_family=labels.font_family,
                        font_size=labels.font_size,
                        fill=labels.color,
                        anchor="start" if outward > 0 else "end",
                        baseline="middle",
                        rotation=labels.rotation,
                    )
                )

        title = opts.title
        if title.text:
            mid = (lo + hi) / 2.0
            if horizontal:
                tx = mid + title.offset_x
                ty = anchor + outward * abs(title.offset_y) if title.offset_y else anchor + outward * 35.0
                rotation = 0.0
            else:
                tx = anchor + outward * abs(title.offset_x) if title.offset_x else anchor + outward * 35.0
                ty = mid + title.offset_y
                rotation = -90.0 if outward < 0 else 90.0
            g.append(
                svg.text(
                    tx,
                    ty,
                    title.text,
                    font_family=title.font_family,
                    font_size=title.font_size,
                    font_weight=title.font_weight,
                    fill=title.color,
                    anchor="middle",
                    rotation=rotation,
                )
            )
        return g

    def _anchor(self, axis: Axis) -> float:
        """Pixel coordinate of the axis line across its own direction."""
        opts = axis.options
        if axis.kind == "x":
            top, bottom = self._extent("y")
            base = bottom if opts.position != "top" else top
            sign = 1.0 if opts.position != "top" else -1.0
            return base + sign * axis.offset + opts.offset_y
        left, right = self._extent("x")
        base = left if opts.position != "right" else right
        sign = -1.0 if opts.position != "right" else 1.0
        return base + sign * axis.offset + opts.offset_x

    def _extent(self, kind: AxisKind) -> tuple[float, float]:
        axis = (self._x_axes if kind == "x" else self._y_axes)[0]
        return tuple(sorted((axis.pixel_start, axis.pixel_end)))  # type: ignore[return-value]

    def _position_offset(self, kind: AxisKind, axis_id: int, options: AxisOptions) -> float:
        siblings = self._x_options if kind == "x" else self._y_options
        same_side = sum(1 for opts in siblings[:axis_id] if opts.position == options.position)
        return same_side * STACKED_AXIS_SPACING

    def _is_category(self, kind: AxisKind, options: AxisOptions) -> bool:
        if self.horizontal_bars:
            return kind == "y"
        return options.type == "category"

    @staticmethod
    def _categories(options: AxisOptions, bound: Sequence[AxisContribution]) -> tuple[str, ...]:
        if options.categories:
            return tuple(category_label(c) for c in options.categories)
        seen: dict[str, None] = {}
        count = 0
        for contribution in bound:
            count = max(count, contribution.count)
            for raw in contribution.categories:
                if raw is None:
                    continue
                seen.setdefault(category_label(raw), None)
        out = list(seen)
        while len(out) < count:
            out.append(str(len(out) + 1))
        return tuple(out)

    @staticmethod
    def _lookup(axes: tuple[Axis, ...], kind: str, axis_id: int) -> Axis:
        if not axes:
            raise RuntimeError("axes are not prepared")
        if not 0 <= axis_id < len(axes):
            raise ConfigurationError(f"undefined {kind} axis {axis_id}")
        return axes[axis_id]
