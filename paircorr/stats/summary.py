# paircorr/stats/summary.py
from __future__ import annotations
from typing import Any, Dict
import numpy as np
import pandas as pd

__all__ = ["summarize_series"]

def summarize_series(values) -> Dict[str, Any]:
    """
    Descriptive snapshot of one series:
      count, mean, median (upper median: sorted[n // 2]), population std,
      min, max, current (last sample), trend ("rising" / "falling" / "stable",
      last sample vs first).

    Non-finite samples are dropped first. Raises ValueError if none remain.
    """
    s = pd.to_numeric(pd.Series(values), errors="coerce")
    arr = s.to_numpy(dtype=np.float64, na_value=np.nan)
    arr = arr[np.isfinite(arr)]
    if arr.size == 0:
        raise ValueError("No data values available.")

    ordered = np.sort(arr)
    first, current = float(arr[0]), float(arr[-1])
    if current > first:
        trend = "rising"
    elif current < first:
        trend = "falling"
    else:
        trend = "stable"

    return {
        "count": int(arr.size),
        "mean": float(arr.mean()),
        "median": float(ordered[arr.size // 2]),
        "std": float(arr.std(ddof=0)),
        "min": float(ordered[0]),
        "max": float(ordered[-1]),
        "current": current,
        "trend": trend,
    }
