from __future__ import annotations

from typing import Any

from vectorchart.chart import Chart
from vectorchart.config import ChartConfig, apply_override


def chart(width: float | None = None, height: float | None = None, **overrides: Any) -> Chart:
    """Create a chart; ``overrides`` use the same keys as the ``[chart]`` TOML table."""
    if width is not None:
        overrides["width"] = width
    if height is not None:
        overrides["height"] = height
    return Chart(apply_override(ChartConfig(), overrides))
