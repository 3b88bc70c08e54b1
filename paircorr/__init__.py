# paircorr/__init__.py
"""
Rolling relationships between paired numeric series: sliding Pearson
correlation, gap-tolerant smoothing and a rolling cointegration z-score.
"""

from .stats import (
    sliding_correlation,
    smooth_series,
    cointegration_zscore,
    fit_global_ols,
    regression_residuals,
    rolling_residual_zscore,
    RegressionParams,
    summarize_series,
)
from .panel import PanelOptions, compute_correlation_panel, select_series_pair

__version__ = "0.1.0"

__all__ = [
    "sliding_correlation",
    "smooth_series",
    "cointegration_zscore",
    "fit_global_ols",
    "regression_residuals",
    "rolling_residual_zscore",
    "RegressionParams",
    "summarize_series",
    "PanelOptions",
    "compute_correlation_panel",
    "select_series_pair",
]
