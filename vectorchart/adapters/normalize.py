from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime, timezone
from decimal import Decimal
import logging
from typing import Any

import numpy as np

from vectorchart.errors import ConfigurationError
from vectorchart.numeric import to_float
from vectorchart.series import ValueCollection

LOGGER = logging.getLogger(__name__)


try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]

try:
    import torch
except Exception:  # pragma: no cover - optional dependency
    torch = None  # type: ignore[assignment]


def to_value_collection(name: str, values: Any) -> ValueCollection:
    raw = _coerce_1d_raw(values, label=name)
    numeric = _coerce_numeric(raw, label=name)
    return ValueCollection(name=name, raw=raw, numeric=numeric)


def _coerce_1d_raw(value: Any, *, label: str) -> tuple[Any, ...]:
    if torch is not None and isinstance(value, torch.Tensor):
        tensor = value.detach()
        if tensor.ndim != 1:
            raise ConfigurationError(f"{label} must be 1-D")
        if tensor.is_cuda:
            tensor = tensor.cpu()
        return tuple(tensor.tolist())

    if pd is not None and isinstance(value, pd.Series):
        return tuple(None if _is_missing(v) else v for v in value.tolist())

    if isinstance(value, np.ndarray):
        if value.ndim != 1:
            raise ConfigurationError(f"{label} must be 1-D")
        return tuple(value.tolist())

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return tuple(value)

    raise ConfigurationError(f"unsupported {label} input type: {type(value)!r}")


def _coerce_numeric(raw: tuple[Any, ...], *, label: str) -> np.ndarray:
    out = np.empty(len(raw), dtype=np.float64)
    skipped = 0
    for i, item in enumerate(raw):
        if isinstance(item, datetime):
            if item.tzinfo is None:
                item = item.replace(tzinfo=timezone.utc)
            out[i] = item.timestamp()
            continue
        if isinstance(item, date):
            out[i] = datetime(item.year, item.month, item.day, tzinfo=timezone.utc).timestamp()
            continue
        if isinstance(item, Decimal):
            out[i] = float(item)
            continue
        value = to_float(item)
        if value is None:
            if item is not None:
                skipped += 1
            out[i] = np.nan
            continue
        out[i] = value
    if skipped:
        LOGGER.debug("collection `%s`: %d non-numeric values treated as missing", label, skipped)
    return out


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False
