from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Any, Sequence
import xml.etree.ElementTree as ET

from vectorchart import svg
from vectorchart.axes import ChartArea
from vectorchart.renderers.base import BaseRenderer, RenderContext
from vectorchart.renderers.pie import pie_slices
from vectorchart.series import Series

RADIUS_FILL = 0.85
CELL_INSET = 0.1
TITLE_FONT_SIZE = 14.0


@dataclass(frozen=True)
class Ring:
    cx: float
    cy: float
    outer: float
    inner: float


@dataclass(frozen=True)
class MultiPieLayout:
    rings: dict[str, Ring]
    titles: tuple[tuple[str, float, float], ...]


class MultiPieRenderer(BaseRenderer):
    """Concentric rings, one series per ring.

    Series sharing ``multipie.group`` form one set of rings; groups are laid out
    on a grid. ``ring_position`` orders rings from the center outwards and the
    innermost ring is a full pie unless ``donut`` is set.
    """

    kind = "multipie"
    uses_axes = False

    def render(self, group: Sequence[Series], ctx: RenderContext) -> ET.Element:
        g = super().render(group, ctx)
        for text, x, y in multipie_layout(group, ctx.area).titles:
            g.append(
                svg.text(
                    x,
                    y,
                    text,
                    font_family=ctx.config.font_family,
                    font_size=TITLE_FONT_SIZE,
                    font_weight="bold",
                    fill=ctx.config.title.color,
                    anchor="middle",
                    baseline="middle",
                    css_class="multipie-title",
                )
            )
        return g

    def prepare_group(self, group: Sequence[Series], ctx: RenderContext) -> Any:
        return multipie_layout(group, ctx.area)

    def render_series(self, series: Series, index: int, state: Any, ctx: RenderContext) -> list[ET.Element]:
        ring = state.rings[series.name]
        return pie_slices(series, ctx, ring.cx, ring.cy, ring.outer, ring.inner)


def multipie_layout(group: Sequence[Series], area: ChartArea) -> MultiPieLayout:
    by_group: dict[str, list[Series]] = {}
    for series in group:
        by_group.setdefault(series.options.multipie.group, []).append(series)

    cols = math.ceil(math.sqrt(len(by_group)))
    rows = math.ceil(len(by_group) / cols)
    cell_w = area.width / cols
    cell_h = area.height / rows
    rings: dict[str, Ring] = {}
    titles: list[tuple[str, float, float]] = []
    for position, members in enumerate(by_group.values()):
        row, col = divmod(position, cols)
        x = area.x + col * cell_w + cell_w * CELL_INSET
        y = area.y + row * cell_h + cell_h * CELL_INSET
        w = cell_w * (1.0 - 2 * CELL_INSET)
        h = cell_h * (1.0 - 2 * CELL_INSET)
        opts = members[0].options.multipie
        if opts.title:
            titles.append((opts.title, x + w / 2.0, y + opts.title_height / 2.0))
            y += opts.title_height
            h -= opts.title_height
        rings.update(_concentric(members, x + w / 2.0, y + h / 2.0, max(0.0, min(w, h)) * RADIUS_FILL / 2.0))
    return MultiPieLayout(rings=rings, titles=tuple(titles))


def _concentric(members: Sequence[Series], cx: float, cy: float, max_radius: float) -> dict[str, Ring]:
    """Equal-width rings from the outside in; ``ring_position`` 0 is the center.

    A donut center takes the room of one more ring.
    """
    ordered = sorted(members, key=lambda s: s.options.multipie.ring_position, reverse=True)
    spacing = ordered[0].options.multipie.ring_spacing
    donut = ordered[-1].options.multipie.donut
    n = len(ordered)
    width = max(0.0, (max_radius - spacing * (n - 1)) / (n + 1 if donut else n))
    out: dict[str, Ring] = {}
    outer = max_radius
    for k, series in enumerate(ordered):
        inner = 0.0 if k == n - 1 and not donut else max(0.0, outer - width)
        out[series.name] = Ring(cx=cx, cy=cy, outer=outer, inner=inner)
        outer -= width + spacing
    return out
