# paircorr/stats/correlation.py
"""
Sliding-window Pearson correlation between two index-aligned series.

The window for output index i covers the W samples *before* i
(indices i-W .. i-1); the current sample never sits in its own window.
Positions without a full window, or whose window is constant in either
series, are None.

Known limitation: non-finite samples are not skipped; a NaN/inf inside a
window propagates into that position's result. Pass strict=True to turn
such windows into None instead.
"""
from __future__ import annotations
from typing import List, Optional
import numpy as np

from paircorr.stats.transforms import effective_window, overlap

__all__ = ["sliding_correlation", "window_correlation"]


def _running_sum(values: np.ndarray) -> float:
    total = 0.0
    for v in values.tolist():
        total += v
    return total


def window_correlation(xa, xb) -> Optional[float]:
    """
    Population Pearson correlation of two equal-length windows.
    None when either window has exactly zero spread.
    Sums accumulate left to right.
    """
    xa = np.asarray(xa, dtype=np.float64)
    xb = np.asarray(xb, dtype=np.float64)
    w = xa.size
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        da = xa - _running_sum(xa) / w
        db = xb - _running_sum(xb) / w

        cov = _running_sum(da * db) / w
        std_a = np.sqrt(np.float64(_running_sum(da * da) / w))
        std_b = np.sqrt(np.float64(_running_sum(db * db) / w))
        if std_a == 0 or std_b == 0:
            return None

        r = np.float64(cov) / (std_a * std_b)
    if np.isfinite(r):
        # last-ulp rounding can push |r| a hair past 1
        r = min(max(r, -1.0), 1.0)
    return float(r)


def sliding_correlation(
    series_a,
    series_b,
    window,
    *,
    strict: bool = False,
) -> List[Optional[float]]:
    """
    Rolling correlation over the common prefix of `series_a` and `series_b`.

    Parameters
    ----------
    window : requested span; floored and clamped to >= 1.
    strict : if True, any window holding a non-finite sample yields None.

    Returns a list of length min(len(series_a), len(series_b)) holding
    floats in [-1, 1] or None.
    """
    a, b = overlap(series_a, series_b)
    w = effective_window(window, 1)
    n = int(a.size)
    out: List[Optional[float]] = [None] * n

    for i in range(w, n):
        xa = a[i - w:i]
        xb = b[i - w:i]
        if strict and not (np.isfinite(xa).all() and np.isfinite(xb).all()):
            continue
        out[i] = window_correlation(xa, xb)

    return out
