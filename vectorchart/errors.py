from __future__ import annotations


class ChartError(Exception):
    pass


class ConfigurationError(ChartError, ValueError):
    """Invalid chart, axis or series configuration. Aborts the render."""


class DataGapError(ChartError):
    """A series has too little usable data for its renderer.

    The pipeline skips the offending series and keeps rendering the rest.
    """

    def __init__(self, series_name: str, message: str) -> None:
        super().__init__(f"series `{series_name}`: {message}")
        self.series_name = series_name
