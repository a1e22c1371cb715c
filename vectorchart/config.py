from __future__ import annotations

from dataclasses import dataclass, field, fields, is_dataclass, replace
import re
from typing import Any, Mapping, TypeVar

from vectorchart.colors import is_hex_color
from vectorchart.errors import ConfigurationError

T = TypeVar("T")

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")

DEFAULT_FONT_FAMILY = "Arial, Helvetica, sans-serif"

DEFAULT_PALETTE: tuple[str, ...] = (
    "#4572A7",
    "#AA4643",
    "#89A54E",
    "#80699B",
    "#3D96AE",
    "#DB843D",
    "#92A8CD",
    "#A47D7C",
    "#B5CA92",
    "#5F9EB7",
)

PIE_PALETTE: tuple[str, ...] = (
    "#5BC9AD",
    "#DC5244",
    "#468DF3",
    "#A0A0A0",
    "#DDDDDD",
    "#90E1D2",
    "#E68C86",
    "#F8D871",
    "#7F7F7F",
    "#333438",
)


def _color(default: str) -> Any:
    return field(default=default, metadata={"color": True})


def _choice(default: str, *choices: str) -> Any:
    return field(default=default, metadata={"choices": (default,) + choices})


def _positive(default: float) -> Any:
    return field(default=default, metadata={"positive": True})


def _numbers() -> Any:
    return field(default=(), metadata={"numeric": True})


@dataclass(frozen=True)
class Margin:
    top: float = 50.0
    right: float = 50.0
    bottom: float = 50.0
    left: float = 50.0


@dataclass(frozen=True)
class BackgroundOptions:
    enabled: bool = True
    color: str = _color("#ffffff")
    border_radius: float = 0.0


@dataclass(frozen=True)
class GridOptions:
    enabled: bool = True
    color: str = _color("#e0e0e0")
    width: float = 1.0
    dash_array: str = ""


@dataclass(frozen=True)
class TitleOptions:
    enabled: bool = False
    text: str = ""
    font_family: str = DEFAULT_FONT_FAMILY
    font_size: float = _positive(18.0)
    font_weight: str = "bold"
    color: str = _color("#333333")


@dataclass(frozen=True)
class LegendOptions:
    enabled: bool = True
    position: str = _choice("bottom", "top", "left", "right", "custom")
    align: str = _choice("center", "left", "right")
    layout: str = _choice("horizontal", "vertical")
    x: float = 0.0
    y: float = 0.0
    font_family: str = DEFAULT_FONT_FAMILY
    font_size: float = _positive(12.0)
    color: str = _color("#333333")
    symbol_size: float = _positive(10.0)
    symbol_spacing: float = 5.0
    item_spacing: float = 20.0
    padding: float = 10.0
    background: str = _color("")
    border_enabled: bool = False
    border_color: str = _color("#cccccc")
    border_width: float = 1.0


@dataclass(frozen=True)
class NumberFormat:
    decimal_point: str = "."
    thousands_sep: str = ","


@dataclass(frozen=True)
class ChartConfig:
    width: float = _positive(800.0)
    height: float = _positive(500.0)
    font_family: str = DEFAULT_FONT_FAMILY
    margin: Margin = field(default_factory=Margin)
    background: BackgroundOptions = field(default_factory=BackgroundOptions)
    grid: GridOptions = field(default_factory=GridOptions)
    title: TitleOptions = field(default_factory=TitleOptions)
    legend: LegendOptions = field(default_factory=LegendOptions)
    number_format: NumberFormat = field(default_factory=NumberFormat)
    colors: tuple[str, ...] = field(default=DEFAULT_PALETTE, metadata={"color": True})


@dataclass(frozen=True)
class AxisLabelOptions:
    enabled: bool = True
    font_family: str = DEFAULT_FONT_FAMILY
    font_size: float = _positive(12.0)
    color: str = _color("#666666")
    rotation: float = 0.0
    decimals: int | None = None
    prefix: str = ""
    suffix: str = ""
    date_format: str = "%d/%m/%Y"


@dataclass(frozen=True)
class AxisTitleOptions:
    text: str = ""
    font_family: str = DEFAULT_FONT_FAMILY
    font_size: float = _positive(14.0)
    font_weight: str = "bold"
    color: str = _color("#333333")
    offset_x: float = 0.0
    offset_y: float = 0.0


@dataclass(frozen=True)
class AxisLineOptions:
    enabled: bool = True
    color: str = _color("#999999")
    width: float = 1.0


@dataclass(frozen=True)
class AxisTickOptions:
    enabled: bool = True
    size: float = 6.0
    color: str = _color("#999999")
    width: float = 1.0


@dataclass(frozen=True)
class AxisOptions:
    type: str = _choice("numeric", "category", "time")
    position: str = _choice("left", "right", "top", "bottom")
    min: float | None = None
    max: float | None = None
    tick_amount: int = 5
    include_zero: bool = True
    categories: tuple[Any, ...] = ()
    offset_x: float = 0.0
    offset_y: float = 0.0
    grid: bool = True
    labels: AxisLabelOptions = field(default_factory=AxisLabelOptions)
    title: AxisTitleOptions = field(default_factory=AxisTitleOptions)
    line: AxisLineOptions = field(default_factory=AxisLineOptions)
    ticks: AxisTickOptions = field(default_factory=AxisTickOptions)


DEFAULT_X_AXIS = AxisOptions(
    type="category",
    position="bottom",
    include_zero=False,
    title=AxisTitleOptions(offset_y=35.0),
)
DEFAULT_Y_AXIS = AxisOptions(
    type="numeric",
    position="left",
    include_zero=True,
    title=AxisTitleOptions(offset_x=-35.0),
)


@dataclass(frozen=True)
class PointOptions:
    enabled: bool = False
    size: float = _positive(5.0)
    shape: str = _choice("circle", "square", "triangle", "diamond")
    color: str = _color("")
    stroke_color: str = _color("#ffffff")
    stroke_width: float = 1.0


@dataclass(frozen=True)
class DataLabelOptions:
    enabled: bool = False
    font_family: str = DEFAULT_FONT_FAMILY
    font_size: float = _positive(11.0)
    color: str = _color("#333333")
    offset_x: float = 0.0
    offset_y: float = -15.0
    format: str = "{y}"
    decimals: int | None = None


@dataclass(frozen=True)
class BarOptions:
    max_width: float = _positive(50.0)
    corner_radius: float = 0.0
    horizontal: bool = False
    group_padding: float = 0.2


@dataclass(frozen=True)
class LineOptions:
    width: float = 2.0
    dash_array: str = ""
    stepped: bool = False
    connect_nulls: bool = False


@dataclass(frozen=True)
class AreaOptions:
    stroke_width: float = 2.0
    fill_opacity: float = 0.4


@dataclass(frozen=True)
class PieOptions:
    radius: float | None = None
    inner_radius: float = 0.0
    start_angle: float = 0.0
    end_angle: float = 360.0
    pad_angle: float = 0.0
    stroke_color: str = _color("#ffffff")
    stroke_width: float = 1.0
    colors: tuple[str, ...] = field(default=PIE_PALETTE, metadata={"color": True})
    show_labels: bool = True
    label_format: str = "{percentage}%"
    label_font_size: float = _positive(12.0)


@dataclass(frozen=True)
class PolarOptions:
    area: bool = False
    fill_opacity: float = 0.4
    line_width: float = 2.0
    grid: bool = True
    rings: int = 5
    spokes: int = 8


@dataclass(frozen=True)
class ScatterOptions:
    connect_points: bool = False
    line_width: float = 1.0
    point_sizes: tuple[float, ...] = _numbers()
    point_colors: tuple[str, ...] = field(default=(), metadata={"color": True})


@dataclass(frozen=True)
class WaterfallOptions:
    initial_value: float = 0.0
    bar_kinds: tuple[str, ...] = ()
    positive_color: str = _color("#4CAF50")
    negative_color: str = _color("#F44336")
    total_color: str = _color("#2196F3")
    subtotal_color: str = _color("#9C27B0")
    connectors: bool = True
    connector_color: str = _color("#999999")
    connector_dash_array: str = "3,3"


@dataclass(frozen=True)
class LabelOptions:
    enabled: bool = False
    text: str = ""
    position: str = _choice("right", "left", "top", "bottom")
    font_family: str = DEFAULT_FONT_FAMILY
    font_size: float = _positive(12.0)
    font_weight: str = "normal"
    color: str = _color("#333333")


@dataclass(frozen=True)
class BooleanOptions:
    horizontal: bool = True
    true_color: str = _color("#4CAF50")
    false_color: str = _color("#F44336")
    bar_height: float = _positive(30.0)
    bar_width: float | None = None
    position: int = 0
    bar_margin: float = 10.0
    label: LabelOptions = field(default_factory=LabelOptions)


@dataclass(frozen=True)
class GradientOptions:
    """Fill gradient. Without ``colors`` it runs from the series color to a lighter blend."""

    enabled: bool = False
    type: str = _choice("linear", "radial")
    colors: tuple[str, ...] = field(default=(), metadata={"color": True})
    stops: tuple[float, ...] = _numbers()
    start_color: str = _color("")
    end_color: str = _color("")
    angle: float | None = None


@dataclass(frozen=True)
class BubbleOptions:
    size_field: str = ""
    sizes: tuple[float, ...] = _numbers()
    min_size: float = _positive(5.0)
    max_size: float = _positive(50.0)
    default_size: float = _positive(20.0)
    fill_opacity: float = 0.7
    border_color: str = _color("")
    border_width: float = 1.0


@dataclass(frozen=True)
class RadarOptions:
    area: bool = True
    fill_opacity: float = 0.4
    line_width: float = 2.0
    grid: bool = True
    levels: int = 5
    labels: bool = True
    label_offset: float = 10.0
    label_font_size: float = _positive(12.0)
    label_color: str = _color("#333333")


@dataclass(frozen=True)
class MultiPieOptions:
    group: str = "default"
    ring_position: int = 0
    donut: bool = False
    ring_spacing: float = 2.0
    title: str = ""
    title_height: float = 30.0


@dataclass(frozen=True)
class SeriesOptions:
    x_axis_id: int = 0
    y_axis_id: int = 0
    color: str = _color("")
    fill_opacity: float = 0.8
    stacked: bool = False
    stack_group: str = "default"
    show_in_legend: bool = True
    legend_text: str = ""
    point: PointOptions = field(default_factory=PointOptions)
    data_labels: DataLabelOptions = field(default_factory=DataLabelOptions)
    bar: BarOptions = field(default_factory=BarOptions)
    line: LineOptions = field(default_factory=LineOptions)
    area: AreaOptions = field(default_factory=AreaOptions)
    pie: PieOptions = field(default_factory=PieOptions)
    polar: PolarOptions = field(default_factory=PolarOptions)
    scatter: ScatterOptions = field(default_factory=ScatterOptions)
    waterfall: WaterfallOptions = field(default_factory=WaterfallOptions)
    boolean: BooleanOptions = field(default_factory=BooleanOptions)
    gradient: GradientOptions = field(default_factory=GradientOptions)
    bubble: BubbleOptions = field(default_factory=BubbleOptions)
    radar: RadarOptions = field(default_factory=RadarOptions)
    multipie: MultiPieOptions = field(default_factory=MultiPieOptions)


def option_name(key: str) -> str:
    """Accept both ``fillOpacity`` and ``fill_opacity`` spellings."""
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def apply_override(base: T, overrides: Mapping[str, Any] | None = None, *, path: str = "") -> T:
    """Return a copy of ``base`` with ``overrides`` merged in. ``base`` is never mutated."""
    if not overrides:
        return base
    if not isinstance(overrides, Mapping):
        raise ConfigurationError(f"Options for `{path.rstrip('.') or type(base).__name__}` must be a mapping")

    known = {f.name: f for f in fields(base)}
    changes: dict[str, Any] = {}
    for key, value in overrides.items():
        name = option_name(str(key))
        if name not in known:
            raise ConfigurationError(f"Unknown option: {path}{key}")
        fdef = known[name]
        current = getattr(base, name)
        if is_dataclass(current):
            changes[name] = apply_override(current, value, path=f"{path}{key}.")
            continue
        changes[name] = _validate_value(fdef, current, value, f"{path}{key}")
    return replace(base, **changes)


def _validate_value(fdef: Any, current: Any, value: Any, label: str) -> Any:
    if isinstance(current, tuple) or isinstance(value, list):
        if not isinstance(value, (list, tuple)):
            raise ConfigurationError(f"Option `{label}` must be a list")
        value = tuple(value)
        if fdef.metadata.get("color"):
            for item in value:
                if not is_hex_color(item):
                    raise ConfigurationError(f"Option `{label}` must contain hex colors, got {item!r}")
        if fdef.metadata.get("numeric"):
            for item in value:
                if isinstance(item, bool) or not isinstance(item, (int, float)):
                    raise ConfigurationError(f"Option `{label}` must contain numbers, got {item!r}")
            value = tuple(float(item) for item in value)
        return value

    if isinstance(current, bool):
        if not isinstance(value, bool):
            raise ConfigurationError(f"Option `{label}` must be a boolean")
        return value

    if isinstance(current, str):
        if not isinstance(value, str):
            raise ConfigurationError(f"Option `{label}` must be a string")
        if fdef.metadata.get("color") and value and not is_hex_color(value):
            raise ConfigurationError(f"Option `{label}` must be a hex color (#RGB or #RRGGBB)")
        choices = fdef.metadata.get("choices")
        if choices and value not in choices:
            raise ConfigurationError(f"Option `{label}` must be one of {', '.join(choices)}")
        return value

    if value is None:
        if current is not None and fdef.default is not None:
            raise ConfigurationError(f"Option `{label}` cannot be null")
        return None

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"Option `{label}` must be a number")
    if fdef.metadata.get("positive") and float(value) <= 0:
        raise ConfigurationError(f"Option `{label}` must be a positive number")
    if isinstance(current, int) and not isinstance(current, bool):
        if float(value) != int(value):
            raise ConfigurationError(f"Option `{label}` must be an integer")
        return int(value)
    if fdef.type in ("int | None",):
        return int(value)
    return float(value)
