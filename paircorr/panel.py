# paircorr/panel.py
"""
Frame-level pipeline for one pair of series.

Takes a DataFrame on a time axis, picks the first two numeric columns and
derives:
    corr_raw : sliding correlation
    corr     : corr_raw smoothed with radius max(1, window // 8)
    resid    : residual of the global OLS fit of the first column on the second
    coint_z  : rolling z-score of resid

Derived columns use the nullable "Float64" dtype, so undefined slots are
pd.NA rather than NaN.
"""
from __future__ import annotations
from dataclasses import dataclass
import logging
import math
from typing import Optional, Tuple
import pandas as pd
from pandas.api.types import is_bool_dtype, is_datetime64_any_dtype, is_numeric_dtype

from paircorr.stats.correlation import sliding_correlation
from paircorr.stats.smoothing import smooth_series
from paircorr.stats.transforms import effective_window
from paircorr.stats.cointegration import (
    fit_global_ols,
    regression_residuals,
    rolling_residual_zscore,
)

__all__ = [
    "DEFAULT_WINDOW",
    "PanelOptions",
    "select_series_pair",
    "pair_relationships",
    "compute_correlation_panel",
]

logger = logging.getLogger(__name__)

DEFAULT_WINDOW = 30
DERIVED_COLUMNS = ["corr_raw", "corr", "resid", "coint_z"]


@dataclass(frozen=True)
class PanelOptions:
    """
    window_size: points per rolling window. 0/None/NaN fall back to DEFAULT_WINDOW;
                 other values are passed through and normalized downstream.
    strict:      skip correlation windows that contain non-finite samples.
    """
    window_size: Optional[float] = DEFAULT_WINDOW
    strict: bool = False

    def __post_init__(self) -> None:
        if not self.window_size or not math.isfinite(self.window_size):
            object.__setattr__(self, "window_size", DEFAULT_WINDOW)

    @property
    def smoothing_radius(self) -> int:
        return effective_window(self.window_size / 8, 1)


def select_series_pair(frame: pd.DataFrame) -> Tuple[pd.DataFrame, str, str]:
    """
    Resolve the time axis and the first two numeric columns.

    The time axis is the DatetimeIndex if present, else the first datetime
    column (moved into the index). Returns (frame_on_time_axis, col_a, col_b).
    """
    if isinstance(frame.index, pd.DatetimeIndex):
        data = frame
    else:
        time_cols = [c for c in frame.columns if is_datetime64_any_dtype(frame[c])]
        if not time_cols:
            raise ValueError("No time field found.")
        data = frame.set_index(time_cols[0])

    numeric = [
        c for c in data.columns
        if is_numeric_dtype(data[c]) and not is_bool_dtype(data[c])
    ]
    if len(numeric) < 2:
        raise ValueError("At least 2 numeric series are required.")
    return data, numeric[0], numeric[1]


def pair_relationships(
    a: pd.Series,
    b: pd.Series,
    *,
    window=DEFAULT_WINDOW,
    smoothing_radius: Optional[int] = None,
    strict: bool = False,
) -> pd.DataFrame:
    """
    Derived columns for two aligned series sharing one index.
    Returns a DataFrame with DERIVED_COLUMNS on the common-prefix index of a.
    """
    n = min(len(a), len(b))
    if smoothing_radius is None:
        smoothing_radius = PanelOptions(window_size=window).smoothing_radius

    raw = sliding_correlation(a, b, window, strict=strict)
    params = fit_global_ols(a, b)
    resid = regression_residuals(a, b, params)
    cols = {
        "corr_raw": raw,
        "corr": smooth_series(raw, smoothing_radius),
        "resid": resid,
        "coint_z": rolling_residual_zscore(resid, window),
    }
    out = pd.DataFrame(
        {k: pd.array(v, dtype="Float64") for k, v in cols.items()},
        index=a.index[:n],
    )
    out.attrs["regression"] = params
    return out


def compute_correlation_panel(
    frame: pd.DataFrame,
    options: Optional[PanelOptions] = None,
) -> pd.DataFrame:
    """
    Correlation + cointegration view of the first two numeric columns of `frame`.

    Returns the two source columns (cut to their common length) joined with
    corr_raw / corr / resid / coint_z. The global fit is kept in
    `result.attrs["regression"]`.
    """
    options = options or PanelOptions()
    data, col_a, col_b = select_series_pair(frame)
    logger.debug(
        "correlation panel: %s vs %s, window=%s, radius=%d",
        col_a, col_b, options.window_size, options.smoothing_radius,
    )

    derived = pair_relationships(
        data[col_a],
        data[col_b],
        window=options.window_size,
        smoothing_radius=options.smoothing_radius,
        strict=options.strict,
    )
    out = data[[col_a, col_b]].iloc[:len(derived)].copy()
    for c in DERIVED_COLUMNS:
        out[c] = derived[c].array
    out.attrs["regression"] = derived.attrs["regression"]
    return out
