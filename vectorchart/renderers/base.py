from __future__ import annotations

from dataclasses import dataclass, field
import logging
import math
from typing import Any, Mapping, Protocol, Sequence
import xml.etree.ElementTree as ET

from vectorchart import svg
from vectorchart.axes import Axis, AxisContribution, AxisManager, ChartArea, category_label
from vectorchart.config import ChartConfig, DataLabelOptions, PointOptions
from vectorchart.errors import DataGapError
from vectorchart.gradients import GradientRegistry
from vectorchart.numeric import format_number, format_template
from vectorchart.series import DataSet, Series, SeriesData

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderContext:
    """State shared by every renderer during one render pass.

    Everything is read-only except ``gradients``, which collects the gradient
    definitions the series reference.
    """

    area: ChartArea
    config: ChartConfig
    data: DataSet
    axes: AxisManager | None
    colors: Mapping[str, str]
    gradients: GradientRegistry = field(default_factory=GradientRegistry)

    @property
    def horizontal(self) -> bool:
        return self.axes is not None and self.axes.horizontal_bars

    def color_of(self, series: Series) -> str:
        return self.colors[series.name]

    def fill_for(self, series: Series, color: str, default_angle: float = 90.0) -> str:
        """``color`` or a reference to the series gradient built from it."""
        return self.gradients.fill(series.options.gradient, color, series.name, default_angle)

    def x_axis(self, series: Series) -> Axis:
        return self._axes().x_axis(series.options.x_axis_id)

    def y_axis(self, series: Series) -> Axis:
        return self._axes().y_axis(series.options.y_axis_id)

    def category_axis(self, series: Series) -> Axis:
        return self.y_axis(series) if self.horizontal else self.x_axis(series)

    def value_axis(self, series: Series) -> Axis:
        return self.x_axis(series) if self.horizontal else self.y_axis(series)

    def _axes(self) -> AxisManager:
        if self.axes is None or not self.axes.prepared:
            raise RuntimeError("cartesian renderer used without prepared axes")
        return self.axes


class SeriesRenderer(Protocol):
    kind: str
    uses_axes: bool

    def axis_contributions(self, group: Sequence[Series], data: DataSet, horizontal: bool) -> list[AxisContribution]:
        ...

    def render(self, group: Sequence[Series], ctx: RenderContext) -> ET.Element:
        ...


class BaseRenderer:
    kind = ""
    uses_axes = True

    def axis_contributions(self, group: Sequence[Series], data: DataSet, horizontal: bool) -> list[AxisContribution]:
        if not self.uses_axes:
            return []
        out: list[AxisContribution] = []
        for series in group:
            out.extend(default_contributions(series, data.series_data(series), horizontal))
        return out

    def render(self, group: Sequence[Series], ctx: RenderContext) -> ET.Element:
        g = svg.group(css_class=f"series-group series-{self.kind}")
        state = self.prepare_group(group, ctx)
        for index, series in enumerate(group):
            try:
                elements = self.render_series(series, index, state, ctx)
            except DataGapError as exc:
                LOGGER.warning("skipping %s series: %s", self.kind, exc)
                continue
            g.append(svg.group(elements, css_class="series", data_name=series.name))
        return g

    def prepare_group(self, group: Sequence[Series], ctx: RenderContext) -> Any:
        return None

    def render_series(self, series: Series, index: int, state: Any, ctx: RenderContext) -> list[ET.Element]:
        raise NotImplementedError


def default_contributions(series: Series, d: SeriesData, horizontal: bool) -> list[AxisContribution]:
    opts = series.options
    if horizontal:
        cat_kind, cat_id, val_kind, val_id = "y", opts.y_axis_id, "x", opts.x_axis_id
    else:
        cat_kind, cat_id, val_kind, val_id = "x", opts.x_axis_id, "y", opts.y_axis_id
    return [
        AxisContribution(
            kind=cat_kind,
            axis_id=cat_id,
            values=d.x,
            categories=d.x_raw if d.has_x else (),
            count=len(d),
        ),
        AxisContribution(kind=val_kind, axis_id=val_id, values=d.y),
    ]


def category_position(axis: Axis, d: SeriesData, index: int) -> float | None:
    if axis.is_category:
        slot = axis.slot_of(d.x_raw[index], index) if d.has_x else index
        return axis.category_pixel(slot)
    value = float(d.x[index])
    if math.isnan(value):
        return None
    return axis.to_pixel(value)


def cartesian_point(series: Series, d: SeriesData, index: int, ctx: RenderContext, value: float | None = None) -> svg.Point | None:
    """Pixel position of sample ``index`` (``value`` overrides the Y sample)."""
    v = float(d.y[index]) if value is None else value
    if math.isnan(v):
        return None
    c = category_position(ctx.category_axis(series), d, index)
    if c is None:
        return None
    p = ctx.value_axis(series).to_pixel(v)
    return (p, c) if ctx.horizontal else (c, p)


def marker(
    shape: str,
    x: float,
    y: float,
    size: float,
    *,
    fill: str,
    stroke: str | None = None,
    stroke_width: float | None = None,
) -> ET.Element:
    half = size / 2.0
    if shape == "square":
        return svg.rect(x - half, y - half, size, size, fill=fill, stroke=stroke, stroke_width=stroke_width)
    if shape == "triangle":
        return svg.polygon(
            [(x, y - half), (x + half, y + half), (x - half, y + half)],
            fill=fill,
            stroke=stroke,
            stroke_width=stroke_width,
        )
    if shape == "diamond":
        return svg.polygon(
            [(x, y - half), (x + half, y), (x, y + half), (x - half, y)],
            fill=fill,
            stroke=stroke,
            stroke_width=stroke_width,
        )
    return svg.circle(x, y, half, fill=fill, stroke=stroke, stroke_width=stroke_width)


def point_markers(
    points: Sequence[svg.Point],
    opts: PointOptions,
    color: str,
) -> list[ET.Element]:
    if not opts.enabled:
        return []
    fill = opts.color or color
    return [
        marker(opts.shape, x, y, opts.size, fill=fill, stroke=opts.stroke_color, stroke_width=opts.stroke_width)
        for x, y in points
    ]


def data_label(
    opts: DataLabelOptions,
    x_raw: Any,
    y_value: float,
    px: float,
    py: float,
    ctx: RenderContext,
    **extra: str,
) -> ET.Element:
    """Text label for one sample; ``extra`` fills template fields beyond {x} and {y}."""
    nf = ctx.config.number_format
    content = format_template(
        opts.format,
        x=category_label(x_raw),
        y=format_number(y_value, opts.decimals, decimal_point=nf.decimal_point, thousands_sep=nf.thousands_sep),
        **extra,
    )
    return svg.text(
        px + opts.offset_x,
        py + opts.offset_y,
        content,
        font_family=opts.font_family,
        font_size=opts.font_size,
        fill=opts.color,
        anchor="middle",
    )
