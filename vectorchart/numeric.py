from __future__ import annotations

from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
import logging
import math
from typing import Any, Iterable

import numpy as np

LOGGER = logging.getLogger(__name__)

_ZERO_EPSILON = 1e-7
_MAX_AUTO_DECIMALS = 10


def to_float(value: Any) -> float | None:
    """Numeric view of one raw value, or ``None`` when it cannot take part in aggregation."""
    if value is None:
        return None
    if isinstance(value, (bool, np.bool_)):
        return 1.0 if value else 0.0
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        out = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(out):
        return None
    return out


def valid_values(*collections: Iterable[Any]) -> np.ndarray:
    """Flatten collections into one float array holding only the numeric entries."""
    kept: list[float] = []
    skipped = 0
    for collection in collections:
        if isinstance(collection, np.ndarray) and collection.dtype.kind in {"i", "u", "f", "b"}:
            arr = collection.astype(np.float64, copy=False).ravel()
            finite = arr[~np.isnan(arr)]
            skipped += int(arr.size - finite.size)
            kept.extend(finite.tolist())
            continue
        for raw in collection:
            value = to_float(raw)
            if value is None:
                skipped += 1
                continue
            kept.append(value)
    if skipped:
        LOGGER.debug("skipped %d non-numeric values during aggregation", skipped)
    return np.asarray(kept, dtype=np.float64)


def find_min(*collections: Iterable[Any]) -> float | None:
    """Smallest numeric value, or ``None`` when no valid value exists."""
    values = valid_values(*collections)
    if values.size == 0:
        return None
    return float(np.min(values))


def find_max(*collections: Iterable[Any]) -> float | None:
    """Largest numeric value, or ``None`` when no valid value exists."""
    values = valid_values(*collections)
    if values.size == 0:
        return None
    return float(np.max(values))


def total(*collections: Iterable[Any]) -> float:
    values = valid_values(*collections)
    return float(np.sum(values)) if values.size else 0.0


def average(*collections: Iterable[Any]) -> float:
    """Mean of the numeric values.

    An empty input averages to 0, unlike :func:`find_min`/:func:`find_max`
    which return ``None``. Callers that must tell "no data" apart use those.
    """
    values = valid_values(*collections)
    if values.size == 0:
        return 0.0
    return float(np.mean(values))


def auto_decimals(value: float) -> int:
    magnitude = abs(value)
    if magnitude >= 100:
        return 0
    if magnitude >= 10:
        return 1
    if magnitude >= 1:
        return 2
    decimals = 2
    temp = magnitude
    while temp < 0.1 and decimals < _MAX_AUTO_DECIMALS:
        temp *= 10
        decimals += 1
    return decimals


def format_number(
    value: Any,
    decimals: int | None = None,
    *,
    decimal_point: str = ".",
    thousands_sep: str = ",",
    prefix: str = "",
    suffix: str = "",
) -> str:
    number = to_float(value)
    if number is None:
        return ""
    if number == 0 or abs(number) < _ZERO_EPSILON:
        return f"{prefix}0{suffix}"
    if decimals is None:
        decimals = auto_decimals(number)
    decimals = max(0, int(decimals))

    try:
        q = Decimal(repr(number)).quantize(Decimal("1").scaleb(-decimals), rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return f"{prefix}{number}{suffix}"
    text = format(abs(q), "f")
    int_part, _, frac_part = text.partition(".")
    groups: list[str] = []
    while len(int_part) > 3:
        groups.insert(0, int_part[-3:])
        int_part = int_part[:-3]
    groups.insert(0, int_part)
    out = thousands_sep.join(groups)
    if frac_part:
        out = f"{out}{decimal_point}{frac_part}"
    if q < 0 and any(ch not in "0" for ch in text.replace(".", "")):
        out = "-" + out
    return f"{prefix}{out}{suffix}"


def format_date(timestamp: Any, fmt: str = "%d/%m/%Y") -> str:
    """Format epoch seconds in UTC so output does not depend on the host timezone."""
    seconds = to_float(timestamp)
    if seconds is None:
        return ""
    return datetime.fromtimestamp(seconds, tz=timezone.utc).strftime(fmt)


def format_template(template: str, **fields: str) -> str:
    out = template
    for key, text in fields.items():
        out = out.replace("{" + key + "}", text)
    return out
