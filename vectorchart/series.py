from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Mapping

import numpy as np

from vectorchart.config import SeriesOptions
from vectorchart.errors import ConfigurationError


ChartType = Literal[
    "bar", "line", "spline", "area", "pie", "multipie", "polar", "radar", "scatter", "bubble", "waterfall", "boolean"
]
CHART_TYPES: tuple[str, ...] = (
    "bar", "line", "spline", "area", "pie", "multipie", "polar", "radar", "scatter", "bubble", "waterfall", "boolean"
)


@dataclass(frozen=True)
class ValueCollection:
    """Named column of raw values plus its float64 view (NaN where not numeric)."""

    name: str
    raw: tuple[Any, ...]
    numeric: np.ndarray

    def __len__(self) -> int:
        return len(self.raw)


@dataclass(frozen=True)
class Series:
    name: str
    y: str
    x: str | None = None
    type: ChartType = "bar"
    options: SeriesOptions = field(default_factory=SeriesOptions)


@dataclass(frozen=True)
class SeriesData:
    """Index-aligned view of one series, truncated to the shorter collection."""

    name: str
    x_raw: tuple[Any, ...]
    y_raw: tuple[Any, ...]
    x: np.ndarray
    y: np.ndarray
    has_x: bool

    def __len__(self) -> int:
        return len(self.y_raw)

    @property
    def mask(self) -> np.ndarray:
        return np.isfinite(self.y)


@dataclass(frozen=True)
class DataSet:
    collections: Mapping[str, ValueCollection]

    def collection(self, name: str) -> ValueCollection:
        try:
            return self.collections[name]
        except KeyError:
            raise ConfigurationError(f"unknown value collection: {name}") from None

    def series_data(self, series: Series) -> SeriesData:
        y = self.collection(series.y)
        if series.x is None:
            n = len(y)
            return SeriesData(
                name=series.name,
                x_raw=tuple(range(n)),
                y_raw=y.raw,
                x=np.arange(n, dtype=np.float64),
                y=y.numeric,
                has_x=False,
            )
        x = self.collection(series.x)
        n = min(len(x), len(y))
        return SeriesData(
            name=series.name,
            x_raw=x.raw[:n],
            y_raw=y.raw[:n],
            x=x.numeric[:n],
            y=y.numeric[:n],
            has_x=True,
        )
