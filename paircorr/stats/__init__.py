# paircorr/stats/__init__.py
"""
Statistics for paired series:
- Sliding Pearson correlation (trailing window, current sample excluded)
- Gap-tolerant neighbour smoothing
- Global-OLS cointegration residuals and their rolling z-score
- Single-series summary
"""

from .correlation import sliding_correlation, window_correlation
from .smoothing import smooth_series
from .cointegration import (
    RegressionParams,
    fit_global_ols,
    regression_residuals,
    rolling_residual_zscore,
    cointegration_zscore,
)
from .summary import summarize_series
from .transforms import effective_window

__all__ = [
    "sliding_correlation",
    "window_correlation",
    "smooth_series",
    "RegressionParams",
    "fit_global_ols",
    "regression_residuals",
    "rolling_residual_zscore",
    "cointegration_zscore",
    "summarize_series",
    "effective_window",
]
