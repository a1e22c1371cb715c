from __future__ import annotations

from dataclasses import dataclass
import re

from vectorchart.errors import ConfigurationError

_HEX_COLOR = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")
_CSS_HEX = re.compile(r"^#([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


@dataclass(frozen=True)
class RGBA:
    r: int
    g: int
    b: int
    a: float = 1.0


def is_hex_color(value: object) -> bool:
    return isinstance(value, str) and bool(_CSS_HEX.match(value))


def hex_to_rgb(hex_color: str, alpha: float = 1.0) -> RGBA:
    match = _HEX_COLOR.match(hex_color.strip()) if isinstance(hex_color, str) else None
    if match is None:
        raise ConfigurationError(f"not a 3- or 6-digit hex color: {hex_color!r}")
    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return RGBA(
        r=int(digits[0:2], 16),
        g=int(digits[2:4], 16),
        b=int(digits[4:6], 16),
        a=float(alpha),
    )


def rgb_to_css(color: RGBA) -> str:
    if color.a != 1:
        return f"rgba({color.r}, {color.g}, {color.b}, {color.a:g})"
    return f"rgb({color.r}, {color.g}, {color.b})"


def rgb_to_hex(color: RGBA) -> str:
    return "#{:02x}{:02x}{:02x}".format(_clamp_channel(color.r), _clamp_channel(color.g), _clamp_channel(color.b))


def interpolate_color(start: str, end: str, factor: float) -> str:
    """Linear blend in RGB space; ``factor`` 0 yields ``start``, 1 yields ``end``."""
    c1 = hex_to_rgb(start)
    c2 = hex_to_rgb(end)
    return rgb_to_hex(
        RGBA(
            r=_clamp_channel(c1.r + factor * (c2.r - c1.r)),
            g=_clamp_channel(c1.g + factor * (c2.g - c1.g)),
            b=_clamp_channel(c1.b + factor * (c2.b - c1.b)),
        )
    )


def contrast_color(background: str) -> str:
    c = hex_to_rgb(background)
    brightness = (c.r * 299 + c.g * 587 + c.b * 114) / 1000
    return "#000000" if brightness > 128 else "#ffffff"


def alpha_blend(color: str, alpha: float) -> str:
    """Composite ``color`` at ``alpha`` over a white background."""
    c = hex_to_rgb(color)
    alpha = min(1.0, max(0.0, float(alpha)))
    return rgb_to_hex(
        RGBA(
            r=_clamp_channel(c.r * alpha + 255 * (1 - alpha)),
            g=_clamp_channel(c.g * alpha + 255 * (1 - alpha)),
            b=_clamp_channel(c.b * alpha + 255 * (1 - alpha)),
        )
    )


def _clamp_channel(value: float) -> int:
    return int(min(255, max(0, round(value))))
