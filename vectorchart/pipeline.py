from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
from typing import Mapping, Sequence

from vectorchart import svg
from vectorchart.axes import AxisContribution, AxisManager, ChartArea
from vectorchart.config import DEFAULT_X_AXIS, DEFAULT_Y_AXIS, AxisOptions, ChartConfig
from vectorchart.errors import ConfigurationError
from vectorchart.gradients import GradientRegistry
from vectorchart.legend import layout_legend, legend_entries, render_legend
from vectorchart.renderers import RENDERERS, RenderContext, SeriesRenderer
from vectorchart.series import DataSet, Series

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChartSnapshot:
    """Everything one render pass reads. Built by :class:`vectorchart.chart.Chart`."""

    config: ChartConfig
    data: DataSet
    series: tuple[Series, ...]
    x_axes: tuple[AxisOptions, ...] = ()
    y_axes: tuple[AxisOptions, ...] = ()


class PipelineStage(Enum):
    INIT = "init"
    CHART_AREA = "chart_area"
    ENSURE_AXES = "ensure_axes"
    PREPARE_AXES = "prepare_axes"
    BACKGROUND = "background"
    GROUP_SERIES = "group_series"
    SERIES = "series"
    AXES = "axes"
    LEGEND = "legend"
    FINALIZE = "finalize"
    DONE = "done"


_ORDER = tuple(PipelineStage)


def compute_chart_area(config: ChartConfig) -> ChartArea:
    m = config.margin
    width = config.width - m.left - m.right
    height = config.height - m.top - m.bottom
    if width <= 0 or height <= 0:
        raise ConfigurationError(f"margins leave no drawing area on a {config.width}x{config.height} canvas")
    return ChartArea(x=m.left, y=m.top, width=width, height=height)


def group_series(series: Sequence[Series]) -> list[tuple[str, list[Series]]]:
    """Group series by chart type, ordered by each type's first appearance."""
    groups: dict[str, list[Series]] = {}
    for s in series:
        groups.setdefault(s.type, []).append(s)
    return list(groups.items())


def resolve_colors(series: Sequence[Series], palette: Sequence[str]) -> dict[str, str]:
    out: dict[str, str] = {}
    for i, s in enumerate(series):
        out[s.name] = s.options.color or (palette[i % len(palette)] if palette else "#000000")
    return out


class RenderPipeline:
    """Single-shot render of one :class:`ChartSnapshot` into an SVG document.

    Stages run in a fixed order: chart area, axes defaults, axis preparation,
    background and grid, series groups, axes, legend, title. A pipeline instance
    renders exactly once; build a new one for another pass.
    """

    def __init__(self, snapshot: ChartSnapshot, renderers: Mapping[str, SeriesRenderer] | None = None) -> None:
        self.snapshot = snapshot
        self.renderers = RENDERERS if renderers is None else renderers
        self.stage = PipelineStage.INIT

    def render(self) -> str:
        snap = self.snapshot
        config = snap.config
        self._enter(PipelineStage.INIT)
        doc = svg.SvgDocument(config.width, config.height)

        self._enter(PipelineStage.CHART_AREA)
        area = compute_chart_area(config)

        self._enter(PipelineStage.ENSURE_AXES)
        x_axes = snap.x_axes or (DEFAULT_X_AXIS,)
        y_axes = snap.y_axes or (DEFAULT_Y_AXIS,)
        for s in snap.series:
            snap.data.series_data(s)
        groups = group_series(snap.series)
        renderers = {kind: self._renderer(kind) for kind, _ in groups}
        LOGGER.debug("rendering %d series in groups %s", len(snap.series), [kind for kind, _ in groups])
        horizontal = any(s.type == "bar" and s.options.bar.horizontal for s in snap.series)
        axes = AxisManager(x_axes, y_axes, horizontal_bars=horizontal)

        self._enter(PipelineStage.PREPARE_AXES)
        cartesian = any(renderers[kind].uses_axes for kind, _ in groups)
        if cartesian:
            contributions: list[AxisContribution] = []
            for kind, group in groups:
                renderer = renderers[kind]
                if not renderer.uses_axes:
                    continue
                for s in group:
                    axes.check_binding("x", s.options.x_axis_id, s.name)
                    axes.check_binding("y", s.options.y_axis_id, s.name)
                contributions.extend(renderer.axis_contributions(group, snap.data, horizontal))
            axes.prepare(contributions, area)

        self._enter(PipelineStage.BACKGROUND)
        if config.background.enabled:
            doc.append(
                svg.group(
                    [svg.rect(0, 0, config.width, config.height, fill=config.background.color, rx=config.background.border_radius)],
                    css_class="background",
                )
            )
        if cartesian and config.grid.enabled:
            doc.append(axes.render_grid(color=config.grid.color, width=config.grid.width, dash_array=config.grid.dash_array))

        self._enter(PipelineStage.GROUP_SERIES)
        colors = resolve_colors(snap.series, config.colors)
        ctx = RenderContext(
            area=area,
            config=config,
            data=snap.data,
            axes=axes if cartesian else None,
            colors=colors,
            gradients=GradientRegistry(),
        )

        self._enter(PipelineStage.SERIES)
        for kind, group in groups:
            doc.append(renderers[kind].render(group, ctx))
        for definition in ctx.gradients.elements:
            doc.define(definition)

        self._enter(PipelineStage.AXES)
        if cartesian:
            doc.append(axes.render(config.number_format))

        self._enter(PipelineStage.LEGEND)
        if config.legend.enabled:
            entries = legend_entries(snap.series, colors)
            if entries:
                layout = layout_legend(entries, config.legend, area, config)
                doc.append(render_legend(layout, config.legend))

        self._enter(PipelineStage.FINALIZE)
        title = config.title
        if title.enabled and title.text:
            doc.append(
                svg.group(
                    [
                        svg.text(
                            config.width / 2.0,
                            config.margin.top / 2.0,
                            title.text,
                            font_family=title.font_family,
                            font_size=title.font_size,
                            font_weight=title.font_weight,
                            fill=title.color,
                            anchor="middle",
                            baseline="middle",
                        )
                    ],
                    css_class="title",
                )
            )
        out = doc.to_string()
        self._enter(PipelineStage.DONE)
        return out

    def _renderer(self, kind: str) -> SeriesRenderer:
        try:
            return self.renderers[kind]
        except KeyError:
            raise ConfigurationError(f"unsupported chart type: {kind}") from None

    def _enter(self, stage: PipelineStage) -> None:
        if stage is PipelineStage.INIT:
            if self.stage is not PipelineStage.INIT:
                raise RuntimeError("render pipeline already ran; build a new RenderPipeline")
            return
        expected = _ORDER[_ORDER.index(self.stage) + 1]
        if stage is not expected:
            raise RuntimeError(f"render stage {stage.value} entered out of order (expected {expected.value})")
        self.stage = stage
