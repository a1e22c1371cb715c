from __future__ import annotations

from dataclasses import dataclass
import math
import re
import xml.etree.ElementTree as ET

from vectorchart import svg
from vectorchart.colors import alpha_blend
from vectorchart.config import GradientOptions

_UNSAFE_ID_CHARS = re.compile(r"[^a-zA-Z0-9]")
END_COLOR_ALPHA = 0.5


@dataclass(frozen=True)
class GradientStop:
    offset: float
    color: str
    opacity: float = 1.0


def gradient_stops(options: GradientOptions, base_color: str) -> tuple[GradientStop, ...]:
    """Stops for one gradient fill.

    Explicit ``colors`` are spread evenly over 0..100 percent unless ``stops``
    gives their offsets. Without colors the gradient runs from ``start_color``
    (the series color by default) to ``end_color`` (the series color blended
    halfway to white by default).
    """
    if options.colors:
        step = 100.0 / max(1, len(options.colors) - 1)
        return tuple(
            GradientStop(offset=options.stops[i] if i < len(options.stops) else i * step, color=color)
            for i, color in enumerate(options.colors)
        )
    start = options.start_color or base_color
    end = options.end_color or alpha_blend(base_color, END_COLOR_ALPHA)
    return (GradientStop(0.0, start), GradientStop(100.0, end))


def angle_vector(angle: float) -> tuple[float, float, float, float]:
    """(x1, y1, x2, y2) in percent of the bounding box for a gradient at ``angle`` degrees.

    0 runs left to right, 90 top to bottom.
    """
    a = math.radians(angle)
    dx = math.cos(a) * 50.0
    dy = math.sin(a) * 50.0
    return (50.0 - dx, 50.0 - dy, 50.0 + dx, 50.0 + dy)


class GradientRegistry:
    """Gradient definitions used by one document.

    Identical definitions share one id; ids are numbered in first-use order so
    repeated renders produce the same document.
    """

    def __init__(self) -> None:
        self._ids: dict[tuple, str] = {}
        self._elements: list[ET.Element] = []

    def __len__(self) -> int:
        return len(self._elements)

    @property
    def elements(self) -> tuple[ET.Element, ...]:
        return tuple(self._elements)

    def fill(self, options: GradientOptions, base_color: str, owner: str, default_angle: float = 90.0) -> str:
        """Fill attribute for ``base_color``: the color itself or a ``url(#id)`` reference."""
        if not options.enabled:
            return base_color
        stops = gradient_stops(options, base_color)
        angle = options.angle if options.angle is not None else default_angle
        key = (options.type, stops, angle if options.type == "linear" else None)
        gradient_id = self._ids.get(key)
        if gradient_id is None:
            gradient_id = f"gradient_{_UNSAFE_ID_CHARS.sub('_', owner)}_{len(self._ids) + 1}"
            self._ids[key] = gradient_id
            self._elements.append(self._build(gradient_id, options.type, stops, angle))
        return f"url(#{gradient_id})"

    @staticmethod
    def _build(gradient_id: str, kind: str, stops: tuple[GradientStop, ...], angle: float) -> ET.Element:
        specs = [(s.offset, s.color, s.opacity) for s in stops]
        if kind == "radial":
            return svg.radial_gradient(gradient_id, specs)
        x1, y1, x2, y2 = angle_vector(angle)
        return svg.linear_gradient(gradient_id, specs, x1=x1, y1=y1, x2=x2, y2=y2)
