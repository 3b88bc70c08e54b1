# paircorr/stats/cointegration.py
"""
Rolling cointegration z-score for a pair of index-aligned series.

Two stages:
  1) a single global OLS fit of A on B over every finite (a, b) pair,
       a_t = alpha + beta * b_t + e_t
  2) residuals e_t against that fit, standardized by a trailing window
     (current index included) with population mean/std.

The global fit captures the long-run relationship; the rolling z-score
flags short-term departures from it. Undefined positions are None.
"""
from __future__ import annotations
from dataclasses import dataclass
import logging
import math
from typing import List, Optional, Sequence
import numpy as np

from paircorr.stats.transforms import (
    effective_window,
    finite_values,
    is_missing,
    overlap,
    population_moments,
)

__all__ = [
    "RegressionParams",
    "fit_global_ols",
    "regression_residuals",
    "rolling_residual_zscore",
    "cointegration_zscore",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegressionParams:
    """Result of the global fit a = intercept + slope * b."""
    intercept: float = 0.0
    slope: float = 0.0
    n_obs: int = 0
    valid: bool = False

    def predict(self, b: float) -> float:
        return self.intercept + self.slope * b


def fit_global_ols(series_a, series_b) -> RegressionParams:
    """
    OLS of `series_a` on `series_b` over the overlapping prefix.

    Pairs where either value is non-finite are dropped entirely. Fewer than
    two surviving pairs gives an invalid fit. If B is constant across the
    surviving pairs (zero denominator) the fit falls back to slope 0 and
    intercept mean(A).
    """
    a, b = overlap(series_a, series_b)
    mask = np.isfinite(a) & np.isfinite(b)
    a, b = a[mask], b[mask]
    n = int(a.size)
    if n < 2:
        logger.debug("global OLS skipped: %d finite pairs", n)
        return RegressionParams(n_obs=n, valid=False)

    sum_a = sum_b = sum_ab = sum_bb = 0.0
    for x, y in zip(a.tolist(), b.tolist()):
        sum_a += x
        sum_b += y
        sum_ab += x * y
        sum_bb += y * y

    denom = n * sum_bb - sum_b * sum_b
    if denom == 0:
        logger.debug("global OLS: zero variance in B over %d pairs, slope set to 0", n)
        return RegressionParams(intercept=sum_a / n, slope=0.0, n_obs=n, valid=True)

    slope = (n * sum_ab - sum_a * sum_b) / denom
    intercept = (sum_a - slope * sum_b) / n
    return RegressionParams(intercept=intercept, slope=slope, n_obs=n, valid=True)


def regression_residuals(series_a, series_b, params: RegressionParams) -> List[Optional[float]]:
    """a_t - (alpha + beta * b_t) wherever both inputs are finite and the fit is valid."""
    a, b = overlap(series_a, series_b)
    n = int(a.size)
    if not params.valid:
        return [None] * n

    out: List[Optional[float]] = []
    for x, y in zip(a.tolist(), b.tolist()):
        if math.isfinite(x) and math.isfinite(y):
            out.append(x - params.predict(y))
        else:
            out.append(None)
    return out


def rolling_residual_zscore(residuals: Sequence[Optional[float]], window) -> List[Optional[float]]:
    """
    Trailing z-score of each residual against the finite residuals in
    [i - (W - 1), i]. W is floored and clamped to >= 2.
    """
    w = effective_window(window, 2)
    resid = list(residuals)
    out: List[Optional[float]] = [None] * len(resid)

    for i, r in enumerate(resid):
        if i < w - 1 or is_missing(r) or not math.isfinite(r):
            continue
        sample = finite_values(resid[max(0, i - (w - 1)):i + 1])
        if len(sample) < 2:
            continue
        mean, std = population_moments(sample)
        if std == 0 or not math.isfinite(std):
            continue
        out[i] = (r - mean) / std
    return out


def cointegration_zscore(series_a, series_b, window) -> List[Optional[float]]:
    """
    Global OLS fit, residuals, then rolling residual z-score.
    Output length is min(len(series_a), len(series_b)).
    """
    params = fit_global_ols(series_a, series_b)
    resid = regression_residuals(series_a, series_b, params)
    return rolling_residual_zscore(resid, window)
