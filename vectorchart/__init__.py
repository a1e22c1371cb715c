from vectorchart.api import chart
from vectorchart.axes import Axis, AxisManager, ChartArea
from vectorchart.chart import Chart, chart_from_definition, load_chart_definition
from vectorchart.config import AxisOptions, ChartConfig, SeriesOptions, apply_override
from vectorchart.errors import ChartError, ConfigurationError, DataGapError
from vectorchart.pipeline import ChartSnapshot, RenderPipeline
from vectorchart.scales import NiceScale, compute_nice_scale, map_domain_to_range

__all__ = [
    "Axis",
    "AxisManager",
    "AxisOptions",
    "Chart",
    "ChartArea",
    "ChartConfig",
    "ChartError",
    "ChartSnapshot",
    "ConfigurationError",
    "DataGapError",
    "NiceScale",
    "RenderPipeline",
    "SeriesOptions",
    "apply_override",
    "chart",
    "chart_from_definition",
    "compute_nice_scale",
    "load_chart_definition",
    "map_domain_to_range",
]
