# paircorr/stats/smoothing.py
from __future__ import annotations
import math
from typing import List, Optional, Sequence

from paircorr.stats.transforms import effective_window, is_missing

__all__ = ["smooth_series"]


def smooth_series(values: Sequence[Optional[float]], radius) -> List[Optional[float]]:
    """
    Symmetric moving average that tolerates gaps.

    Each defined position becomes the mean of the defined, finite values in
    [idx - radius, idx + radius] (clipped at both ends, no wraparound).
    Undefined positions (None or pd.NA) come back as None; they are never
    filled from neighbours.
    radius is floored and clamped to >= 0; radius 0 returns a plain copy.
    """
    r = effective_window(radius, 0)
    vals = list(values)
    if r == 0:
        return vals

    n = len(vals)
    out: List[Optional[float]] = [None] * n
    for idx, value in enumerate(vals):
        if is_missing(value):
            continue
        total = 0.0
        count = 0
        for j in range(max(0, idx - r), min(n, idx + r + 1)):
            v = vals[j]
            if is_missing(v) or not math.isfinite(v):
                continue
            total += v
            count += 1
        # count is 0 only for a NaN/inf centre with no finite neighbours
        out[idx] = total / count if count > 0 else None
    return out
