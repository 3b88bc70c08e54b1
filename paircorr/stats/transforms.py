# paircorr/stats/transforms.py
from __future__ import annotations
import math
from typing import Iterable, Optional, Sequence, Tuple
import numpy as np
import pandas as pd

__all__ = [
    "effective_window",
    "as_float_array",
    "overlap",
    "is_missing",
    "finite_values",
    "population_moments",
]

def effective_window(window, minimum: int = 1) -> int:
    """
    Floor a requested span and clamp it to `minimum`.
    Non-numeric or non-finite requests collapse to `minimum` instead of raising.
    """
    try:
        w = float(window)
    except (TypeError, ValueError):
        return int(minimum)
    if not math.isfinite(w):
        return int(minimum)
    return max(int(math.floor(w)), int(minimum))

def as_float_array(values) -> np.ndarray:
    """1-D float64 view of `values`; None and pd.NA become NaN."""
    if values is None:
        return np.empty(0, dtype=np.float64)
    if isinstance(values, (pd.Series, pd.Index, pd.api.extensions.ExtensionArray)):
        return np.asarray(values.to_numpy(dtype=np.float64, na_value=np.nan)).reshape(-1)
    return np.asarray(values, dtype=np.float64).reshape(-1)

def overlap(series_a, series_b) -> Tuple[np.ndarray, np.ndarray]:
    """Both series as float arrays, cut to the common prefix."""
    a = as_float_array(series_a)
    b = as_float_array(series_b)
    n = min(a.size, b.size)
    return a[:n], b[:n]

def is_missing(value) -> bool:
    """True for the undefined markers: None in lists, pd.NA in nullable columns."""
    return value is None or value is pd.NA

def finite_values(values: Iterable[Optional[float]]) -> list[float]:
    return [float(v) for v in values if not is_missing(v) and math.isfinite(v)]

def population_moments(values: Sequence[float]) -> Tuple[float, float]:
    """
    Mean and population std (divisor = count), accumulated left to right.
    Caller guarantees len(values) >= 1.
    """
    n = len(values)
    total = 0.0
    for v in values:
        total += v
    mean = total / n
    sq = 0.0
    for v in values:
        d = v - mean
        sq += d * d
    return mean, math.sqrt(sq / n)
