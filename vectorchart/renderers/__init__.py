from __future__ import annotations

from typing import Mapping

from vectorchart.renderers.area import AreaRenderer
from vectorchart.renderers.bar import BarRenderer
from vectorchart.renderers.base import BaseRenderer, RenderContext, SeriesRenderer
from vectorchart.renderers.boolean import BooleanRenderer, StateRun, coerce_bool, state_runs
from vectorchart.renderers.bubble import BubbleRenderer
from vectorchart.renderers.line import LineRenderer
from vectorchart.renderers.multipie import MultiPieRenderer
from vectorchart.renderers.pie import PieRenderer
from vectorchart.renderers.polar import PolarRenderer
from vectorchart.renderers.radar import RadarRenderer
from vectorchart.renderers.scatter import ScatterRenderer
from vectorchart.renderers.waterfall import WaterfallRenderer

RENDERERS: Mapping[str, SeriesRenderer] = {
    "bar": BarRenderer(),
    "line": LineRenderer(),
    "spline": LineRenderer(smooth=True),
    "area": AreaRenderer(),
    "pie": PieRenderer(),
    "multipie": MultiPieRenderer(),
    "polar": PolarRenderer(),
    "radar": RadarRenderer(),
    "scatter": ScatterRenderer(),
    "bubble": BubbleRenderer(),
    "waterfall": WaterfallRenderer(),
    "boolean": BooleanRenderer(),
}

__all__ = [
    "AreaRenderer",
    "BarRenderer",
    "BaseRenderer",
    "BooleanRenderer",
    "BubbleRenderer",
    "LineRenderer",
    "MultiPieRenderer",
    "PieRenderer",
    "PolarRenderer",
    "RENDERERS",
    "RadarRenderer",
    "RenderContext",
    "ScatterRenderer",
    "SeriesRenderer",
    "StateRun",
    "WaterfallRenderer",
    "coerce_bool",
    "state_runs",
]
