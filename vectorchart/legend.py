from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Mapping, Sequence
import xml.etree.ElementTree as ET

from vectorchart import svg
from vectorchart.axes import ChartArea
from vectorchart.config import ChartConfig, LegendOptions
from vectorchart.renderers.base import marker
from vectorchart.series import Series
from vectorchart.text import text_width

LINE_TYPES = ("line", "spline")
CIRCLE_TYPES = ("pie", "multipie", "bubble")
ROW_GAP = 5.0


@dataclass(frozen=True)
class LegendEntry:
    label: str
    kind: str
    color: str
    dash_array: str = ""
    shape: str = "circle"
    line_width: float = 2.0
    fill_opacity: float | None = None


@dataclass(frozen=True)
class LegendItemLayout:
    entry: LegendEntry
    x: float
    y: float
    width: float


@dataclass(frozen=True)
class LegendLayout:
    items: tuple[LegendItemLayout, ...]
    x: float
    y: float
    width: float
    height: float


def legend_entries(series: Sequence[Series], colors: Mapping[str, str]) -> list[LegendEntry]:
    out: list[LegendEntry] = []
    for s in series:
        if not s.options.show_in_legend:
            continue
        opts = s.options
        color = opts.boolean.true_color if s.type == "boolean" else colors[s.name]
        entry = LegendEntry(label=opts.legend_text or s.name, kind=s.type, color=color, shape=opts.point.shape)
        if s.type in LINE_TYPES:
            entry = replace(entry, dash_array=opts.line.dash_array, line_width=opts.line.width)
        elif s.type == "area":
            entry = replace(entry, fill_opacity=opts.area.fill_opacity, line_width=opts.area.stroke_width)
        elif s.type == "bubble":
            entry = replace(entry, fill_opacity=opts.bubble.fill_opacity)
        out.append(entry)
    return out


def layout_legend(entries: Sequence[LegendEntry], options: LegendOptions, area: ChartArea, config: ChartConfig) -> LegendLayout:
    symbol = options.symbol_size
    row_h = max(symbol, options.font_size)
    widths = [
        symbol + options.symbol_spacing + text_width(e.label, font_family=options.font_family, font_size=options.font_size)
        for e in entries
    ]

    if options.layout == "vertical":
        box_w = max(widths, default=0.0)
        box_h = len(entries) * row_h + max(0, len(entries) - 1) * ROW_GAP
    else:
        box_w = sum(widths) + max(0, len(entries) - 1) * options.item_spacing
        box_h = row_h

    x, y = _origin(options, area, config, box_w, box_h)
    items: list[LegendItemLayout] = []
    cursor_x, cursor_y = x, y
    for entry, width in zip(entries, widths):
        items.append(LegendItemLayout(entry=entry, x=cursor_x, y=cursor_y, width=width))
        if options.layout == "vertical":
            cursor_y += row_h + ROW_GAP
        else:
            cursor_x += width + options.item_spacing
    return LegendLayout(items=tuple(items), x=x, y=y, width=box_w, height=box_h)


def render_legend(layout: LegendLayout, options: LegendOptions) -> ET.Element:
    g = svg.group(css_class="legend")
    if options.background or options.border_enabled:
        pad = options.padding
        g.append(
            svg.rect(
                layout.x - pad,
                layout.y - pad,
                layout.width + 2 * pad,
                layout.height + 2 * pad,
                fill=options.background or "none",
                stroke=options.border_color if options.border_enabled else None,
                stroke_width=options.border_width,
            )
        )
    symbol = options.symbol_size
    row_h = max(symbol, options.font_size)
    for item in layout.items:
        cy = item.y + row_h / 2.0
        g.extend(_symbol(item.entry, item.x, cy, symbol))
        g.append(
            svg.text(
                item.x + symbol + options.symbol_spacing,
                cy,
                item.entry.label,
                font_family=options.font_family,
                font_size=options.font_size,
                fill=options.color,
                baseline="middle",
            )
        )
    return g


def _origin(options: LegendOptions, area: ChartArea, config: ChartConfig, box_w: float, box_h: float) -> tuple[float, float]:
    if options.position == "custom":
        return options.x, options.y
    if options.position in ("left", "right"):
        if options.position == "left":
            x = options.padding
        else:
            x = config.width - options.padding - box_w
        return x, area.y + (area.height - box_h) / 2.0

    if options.align == "left":
        x = area.x
    elif options.align == "right":
        x = area.right - box_w
    else:
        x = area.x + (area.width - box_w) / 2.0
    if options.position == "top":
        return x, max(options.padding, area.y - options.padding - box_h)
    # Room below the plot is shared with x axis tick labels.
    axis_label_buffer = options.font_size * 2.0 + 10.0
    return x, min(area.bottom + axis_label_buffer, config.height - options.padding - box_h)


def _symbol(entry: LegendEntry, x: float, cy: float, symbol: float) -> list[ET.Element]:
    color = entry.color
    if entry.kind in LINE_TYPES:
        return [
            svg.line(x, cy, x + symbol, cy, stroke=color, stroke_width=entry.line_width, dash_array=entry.dash_array),
            marker(entry.shape, x + symbol / 2.0, cy, symbol / 2.0, fill=color),
        ]
    if entry.kind == "scatter":
        return [marker(entry.shape, x + symbol / 2.0, cy, symbol, fill=color)]
    if entry.kind in CIRCLE_TYPES:
        return [svg.circle(x + symbol / 2.0, cy, symbol / 2.0, fill=color, opacity=entry.fill_opacity)]
    if entry.kind == "area":
        rect = svg.rect(
            x,
            cy - symbol / 2.0,
            symbol,
            symbol,
            fill=color,
            opacity=entry.fill_opacity,
            stroke=color,
            stroke_width=entry.line_width,
        )
        return [rect]
    return [svg.rect(x, cy - symbol / 2.0, symbol, symbol, fill=color)]
