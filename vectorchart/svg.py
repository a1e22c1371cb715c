from __future__ import annotations

from typing import Iterable, Sequence
import xml.etree.ElementTree as ET

SVG_NS = "http://www.w3.org/2000/svg"
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'

Point = tuple[float, float]


def num(value: float) -> str:
    """Fixed two-decimal rendering of a coordinate with trailing zeros trimmed."""
    out = f"{float(value):.2f}".rstrip("0").rstrip(".")
    if out in ("-0", ""):
        return "0"
    return out


def points_attr(points: Sequence[Point]) -> str:
    return " ".join(f"{num(x)},{num(y)}" for x, y in points)


def _element(tag: str, attrs: dict[str, object]) -> ET.Element:
    clean: dict[str, str] = {}
    for key, value in attrs.items():
        if value is None or value == "":
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        if isinstance(value, (int, float)):
            clean[key] = num(value)
        else:
            clean[key] = str(value)
    return ET.Element(tag, clean)


def _opacity(value: float | None) -> float | None:
    if value is None or value >= 1:
        return None
    return value


def rect(
    x: float,
    y: float,
    width: float,
    height: float,
    *,
    fill: str = "#000000",
    stroke: str | None = None,
    stroke_width: float | None = None,
    rx: float = 0.0,
    opacity: float | None = None,
    css_class: str | None = None,
) -> ET.Element:
    return _element(
        "rect",
        {
            "x": x,
            "y": y,
            "width": max(0.0, width),
            "height": max(0.0, height),
            "rx": rx if rx > 0 else None,
            "fill": fill,
            "fill-opacity": _opacity(opacity),
            "stroke": stroke,
            "stroke-width": stroke_width if stroke else None,
            "class": css_class,
        },
    )


def circle(
    cx: float,
    cy: float,
    r: float,
    *,
    fill: str = "#000000",
    stroke: str | None = None,
    stroke_width: float | None = None,
    opacity: float | None = None,
    css_class: str | None = None,
) -> ET.Element:
    return _element(
        "circle",
        {
            "cx": cx,
            "cy": cy,
            "r": r,
            "fill": fill,
            "fill-opacity": _opacity(opacity),
            "stroke": stroke,
            "stroke-width": stroke_width if stroke else None,
            "class": css_class,
        },
    )


def line(
    x1: float,
    y1: float,
    x2: float,
    y2: float,
    *,
    stroke: str = "#000000",
    stroke_width: float = 1.0,
    dash_array: str = "",
    css_class: str | None = None,
) -> ET.Element:
    return _element(
        "line",
        {
            "x1": x1,
            "y1": y1,
            "x2": x2,
            "y2": y2,
            "stroke": stroke,
            "stroke-width": stroke_width,
            "stroke-dasharray": dash_array,
            "class": css_class,
        },
    )


def path(
    d: str,
    *,
    fill: str = "none",
    stroke: str | None = None,
    stroke_width: float | None = None,
    opacity: float | None = None,
    dash_array: str = "",
    fill_rule: str | None = None,
    css_class: str | None = None,
) -> ET.Element:
    return _element(
        "path",
        {
            "d": d,
            "fill": fill,
            "fill-opacity": _opacity(opacity),
            "fill-rule": fill_rule,
            "stroke": stroke,
            "stroke-width": stroke_width if stroke else None,
            "stroke-dasharray": dash_array,
            "class": css_class,
        },
    )


def polyline(
    points: Sequence[Point],
    *,
    stroke: str = "#000000",
    stroke_width: float = 1.0,
    dash_array: str = "",
    css_class: str | None = None,
) -> ET.Element:
    return _element(
        "polyline",
        {
            "points": points_attr(points),
            "fill": "none",
            "stroke": stroke,
            "stroke-width": stroke_width,
            "stroke-dasharray": dash_array,
            "stroke-linejoin": "round",
            "class": css_class,
        },
    )


def polygon(
    points: Sequence[Point],
    *,
    fill: str = "none",
    stroke: str | None = None,
    stroke_width: float | None = None,
    opacity: float | None = None,
    css_class: str | None = None,
) -> ET.Element:
    return _element(
        "polygon",
        {
            "points": points_attr(points),
            "fill": fill,
            "fill-opacity": _opacity(opacity),
            "stroke": stroke,
            "stroke-width": stroke_width if stroke else None,
            "class": css_class,
        },
    )


def text(
    x: float,
    y: float,
    content: str,
    *,
    font_family: str | None = None,
    font_size: float | None = None,
    font_weight: str | None = None,
    fill: str = "#000000",
    anchor: str = "start",
    baseline: str | None = None,
    rotation: float = 0.0,
    css_class: str | None = None,
) -> ET.Element:
    el = _element(
        "text",
        {
            "x": x,
            "y": y,
            "font-family": font_family,
            "font-size": font_size,
            "font-weight": font_weight if font_weight != "normal" else None,
            "fill": fill,
            "text-anchor": anchor if anchor != "start" else None,
            "dominant-baseline": baseline,
            "transform": f"rotate({num(rotation)} {num(x)} {num(y)})" if rotation else None,
            "class": css_class,
        },
    )
    el.text = content
    return el


GradientStopSpec = tuple[float, str, float]


def _percent(value: float) -> str:
    return f"{num(value)}%"


def _gradient(tag: str, gradient_id: str, attrs: dict[str, object], stops: Sequence[GradientStopSpec], units: str, spread: str) -> ET.Element:
    el = _element(
        tag,
        {
            "id": gradient_id,
            **attrs,
            "gradientUnits": units if units != "objectBoundingBox" else None,
            "spreadMethod": spread if spread != "pad" else None,
        },
    )
    for offset, color, opacity in stops:
        el.append(_element("stop", {"offset": _percent(offset), "stop-color": color, "stop-opacity": _opacity(opacity)}))
    return el


def linear_gradient(
    gradient_id: str,
    stops: Sequence[GradientStopSpec],
    *,
    x1: float = 0.0,
    y1: float = 0.0,
    x2: float = 0.0,
    y2: float = 100.0,
    units: str = "objectBoundingBox",
    spread: str = "pad",
) -> ET.Element:
    """``<linearGradient>`` with coordinates in percent; default units and spread stay implicit."""
    coords = {"x1": _percent(x1), "y1": _percent(y1), "x2": _percent(x2), "y2": _percent(y2)}
    return _gradient("linearGradient", gradient_id, coords, stops, units, spread)


def radial_gradient(
    gradient_id: str,
    stops: Sequence[GradientStopSpec],
    *,
    cx: float = 50.0,
    cy: float = 50.0,
    r: float = 50.0,
    fx: float | None = None,
    fy: float | None = None,
    units: str = "objectBoundingBox",
    spread: str = "pad",
) -> ET.Element:
    coords = {
        "cx": _percent(cx),
        "cy": _percent(cy),
        "r": _percent(r),
        "fx": _percent(cx if fx is None else fx),
        "fy": _percent(cy if fy is None else fy),
    }
    return _gradient("radialGradient", gradient_id, coords, stops, units, spread)


def defs(children: Iterable[ET.Element]) -> ET.Element:
    el = ET.Element("defs")
    for child in children:
        el.append(child)
    return el


def group(children: Iterable[ET.Element] = (), *, css_class: str | None = None, **attrs: object) -> ET.Element:
    el = _element("g", {"class": css_class, **{k.replace("_", "-"): v for k, v in attrs.items()}})
    for child in children:
        el.append(child)
    return el


class SvgDocument:
    """Append-only sequence of top-level fragments inside one ``<svg>`` root.

    Definitions (gradients) are collected separately and emitted as a leading
    ``<defs>`` element only when there is at least one.
    """

    def __init__(self, width: float, height: float) -> None:
        self.width = width
        self.height = height
        self._fragments: list[ET.Element] = []
        self._definitions: list[ET.Element] = []

    @property
    def fragments(self) -> tuple[ET.Element, ...]:
        return tuple(self._fragments)

    @property
    def definitions(self) -> tuple[ET.Element, ...]:
        return tuple(self._definitions)

    def append(self, fragment: ET.Element) -> None:
        self._fragments.append(fragment)

    def define(self, element: ET.Element) -> None:
        self._definitions.append(element)

    def to_string(self) -> str:
        root = _element(
            "svg",
            {
                "xmlns": SVG_NS,
                "width": self.width,
                "height": self.height,
                "viewBox": f"0 0 {num(self.width)} {num(self.height)}",
            },
        )
        if self._definitions:
            root.append(defs(self._definitions))
        for fragment in self._fragments:
            root.append(fragment)
        ET.indent(root, space="  ")
        return XML_DECLARATION + ET.tostring(root, encoding="unicode") + "\n"
