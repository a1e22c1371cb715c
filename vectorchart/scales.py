from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
import math

import numpy as np

from vectorchart.errors import ConfigurationError


@dataclass(frozen=True)
class NiceScale:
    min: float
    max: float
    tick_interval: float
    tick_count: int

    def ticks(self) -> np.ndarray:
        ticks = self.min + np.arange(self.tick_count, dtype=np.float64) * self.tick_interval
        # Normalize floating-point drift so values like -4.44e-16 become 0.
        ticks = np.rint(ticks / self.tick_interval) * self.tick_interval
        ticks[np.isclose(ticks, 0.0, rtol=0.0, atol=self.tick_interval * 1e-9)] = 0.0
        return ticks


def compute_nice_scale(
    vmin: float,
    vmax: float,
    tick_count: int = 5,
    include_zero: bool = True,
) -> NiceScale:
    if tick_count <= 1:
        raise ConfigurationError(f"tick count must be > 1, got {tick_count}")
    if not (math.isfinite(vmin) and math.isfinite(vmax)):
        raise ConfigurationError(f"scale bounds must be finite, got ({vmin}, {vmax})")
    if vmin > vmax:
        raise ConfigurationError(f"scale min {vmin} is greater than max {vmax}")

    vmin = float(vmin)
    vmax = float(vmax)
    if vmin == vmax:
        vmin -= 1.0
        vmax += 1.0
    if include_zero and vmin > 0:
        vmin = 0.0
    elif include_zero and vmax < 0:
        vmax = 0.0

    interval = _nice_number((vmax - vmin) / (tick_count - 1))
    lo = math.floor(vmin / interval)
    hi = math.ceil(vmax / interval)
    # Division can land one step short when the bound sits on a multiple.
    while lo * interval > vmin:
        lo -= 1
    while hi * interval < vmax:
        hi += 1
    return NiceScale(
        min=lo * interval,
        max=hi * interval,
        tick_interval=interval,
        tick_count=hi - lo + 1,
    )


def map_domain_to_range(
    value: float,
    domain_min: float,
    domain_max: float,
    range_start: float,
    range_end: float,
) -> float:
    """Linear interpolation of ``value`` from the domain onto the pixel range.

    A zero-width domain cannot be mapped and raises instead of clamping.
    """
    if domain_max == domain_min:
        raise ConfigurationError(f"cannot map onto a zero-width domain [{domain_min}, {domain_max}]")
    ratio = (value - domain_min) / (domain_max - domain_min)
    return range_start + ratio * (range_end - range_start)


def decimals_for_interval(interval: float) -> int:
    if interval <= 0 or not math.isfinite(interval):
        return 0
    d = Decimal(repr(interval)).normalize()
    exp = d.as_tuple().exponent
    return min(10, max(0, -int(exp)))


def _nice_number(raw: float) -> float:
    exp = math.floor(math.log10(raw))
    frac = raw / (10**exp)

    if frac < 1.5:
        nice_frac = 1.0
    elif frac < 3.0:
        nice_frac = 2.0
    elif frac < 7.0:
        nice_frac = 5.0
    else:
        nice_frac = 10.0

    if exp < 0:
        # Dividing keeps 0.1/0.2/0.5 intervals as exact as binary floats allow.
        return nice_frac / (10 ** (-exp))
    return nice_frac * (10**exp)
