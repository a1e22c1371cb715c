from __future__ import annotations

import html
from pathlib import Path
import tomllib
from typing import Any, Mapping

from vectorchart.adapters.normalize import to_value_collection
from vectorchart.config import (
    DEFAULT_X_AXIS,
    DEFAULT_Y_AXIS,
    AxisOptions,
    ChartConfig,
    SeriesOptions,
    apply_override,
)
from vectorchart.errors import ConfigurationError
from vectorchart.pipeline import ChartSnapshot, RenderPipeline
from vectorchart.series import CHART_TYPES, DataSet, Series, ValueCollection

DEFAULT_X_COLLECTION = "default"


class Chart:
    """Fluent builder for one chart. ``render()`` snapshots the builder state."""

    def __init__(self, config: ChartConfig | None = None) -> None:
        self.config = config or ChartConfig()
        self._collections: dict[str, ValueCollection] = {}
        self._series: dict[str, Series] = {}
        self._x_axes: list[AxisOptions] = []
        self._y_axes: list[AxisOptions] = []

    @property
    def series(self) -> tuple[Series, ...]:
        return tuple(self._series.values())

    def update_config(self, overrides: Mapping[str, Any]) -> "Chart":
        self.config = apply_override(self.config, overrides)
        return self

    def set_title(self, text: str, **overrides: Any) -> "Chart":
        return self.update_config({"title": {"enabled": True, "text": text, **overrides}})

    def set_legend_options(self, overrides: Mapping[str, Any]) -> "Chart":
        return self.update_config({"legend": overrides})

    def add_values(self, name: str, values: Any) -> "Chart":
        self._collections[name] = to_value_collection(name, values)
        return self

    def add_x_values(self, values: Any, name: str = DEFAULT_X_COLLECTION) -> "Chart":
        return self.add_values(name, values)

    def add_series(
        self,
        name: str,
        y: str | None = None,
        *,
        x: str | None = None,
        type: str = "bar",
        options: Mapping[str, Any] | None = None,
    ) -> "Chart":
        if type not in CHART_TYPES:
            raise ConfigurationError(f"unsupported chart type: {type}")
        if name in self._series:
            raise ConfigurationError(f"duplicate series name: {name}")
        if x is None and DEFAULT_X_COLLECTION in self._collections:
            x = DEFAULT_X_COLLECTION
        self._series[name] = Series(
            name=name,
            y=y or name,
            x=x,
            type=type,  # type: ignore[arg-type]
            options=apply_override(SeriesOptions(), options),
        )
        return self

    def add_y_values(
        self,
        values: Any,
        name: str,
        *,
        type: str = "bar",
        x: str | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> "Chart":
        self.add_values(name, values)
        return self.add_series(name, name, x=x, type=type, options=options)

    def add_x_axis(self, options: Mapping[str, Any] | None = None) -> "Chart":
        self._x_axes.append(apply_override(DEFAULT_X_AXIS, options))
        return self

    def add_y_axis(self, options: Mapping[str, Any] | None = None) -> "Chart":
        self._y_axes.append(apply_override(DEFAULT_Y_AXIS, options))
        return self

    def snapshot(self) -> ChartSnapshot:
        return ChartSnapshot(
            config=self.config,
            data=DataSet(collections=dict(self._collections)),
            series=self.series,
            x_axes=tuple(self._x_axes),
            y_axes=tuple(self._y_axes),
        )

    def render(self) -> str:
        return RenderPipeline(self.snapshot()).render()

    def to_html(self, title: str = "Chart") -> str:
        document = self.render()
        body = document.split("?>", 1)[1].lstrip() if document.startswith("<?xml") else document
        return (
            "<!DOCTYPE html>\n"
            "<html>\n"
            "<head>\n"
            '  <meta charset="UTF-8">\n'
            f"  <title>{html.escape(title)}</title>\n"
            "</head>\n"
            "<body>\n"
            f"{body}"
            "</body>\n"
            "</html>\n"
        )

    def save(self, path: str | Path) -> Path:
        out = Path(path)
        out.write_text(self.render(), encoding="utf-8")
        return out

    def __str__(self) -> str:
        return self.render()


def chart_from_definition(definition: Mapping[str, Any]) -> Chart:
    """Build a chart from a parsed definition (the layout of a chart TOML file)."""
    known = {"chart", "values", "series", "x_axis", "y_axis"}
    unknown = sorted(set(definition) - known)
    if unknown:
        raise ConfigurationError(f"Unknown chart definition section: {unknown[0]}")

    chart = Chart(apply_override(ChartConfig(), definition.get("chart")))
    for name, values in definition.get("values", {}).items():
        chart.add_values(name, values)
    for options in definition.get("x_axis", []):
        chart.add_x_axis(options)
    for options in definition.get("y_axis", []):
        chart.add_y_axis(options)
    for entry in definition.get("series", []):
        entry = dict(entry)
        try:
            name = entry.pop("name")
        except KeyError:
            raise ConfigurationError("every [[series]] entry needs a name") from None
        chart.add_series(
            name,
            entry.pop("y", None),
            x=entry.pop("x", None),
            type=entry.pop("type", "bar"),
            options=entry,
        )
    return chart


def load_chart_definition(path: str | Path) -> Chart:
    with Path(path).open("rb") as f:
        definition = tomllib.load(f)
    return chart_from_definition(definition)
