import math

import numpy as np
import pandas as pd
import pytest

from paircorr.stats.cointegration import (
    RegressionParams,
    cointegration_zscore,
    fit_global_ols,
    regression_residuals,
    rolling_residual_zscore,
)


def test_self_regression_gives_unit_slope_and_no_zscores():
    a = [3.0, 1.5, 4.0, 1.0, 5.5, 9.0, 2.0, 6.0]
    params = fit_global_ols(a, a)

    assert params.valid
    assert params.slope == 1.0
    assert params.intercept == 0.0
    assert regression_residuals(a, a, params) == [0.0] * len(a)
    assert cointegration_zscore(a, a, 3) == [None] * len(a)


def test_exact_linear_relationship():
    b = [0.0, 1.0, 2.0, 3.0, 4.0]
    a = [2.0 + 3.0 * x for x in b]
    params = fit_global_ols(a, b)

    assert params.valid
    assert params.n_obs == 5
    assert params.slope == pytest.approx(3.0)
    assert params.intercept == pytest.approx(2.0)
    assert params.predict(10.0) == pytest.approx(32.0)


def test_constant_b_falls_back_to_mean():
    params = fit_global_ols([1.0, 2.0, 3.0, 6.0], [2.0, 2.0, 2.0, 2.0])

    assert params.valid
    assert params.slope == 0.0
    assert params.intercept == pytest.approx(3.0)
    assert regression_residuals([1.0, 2.0, 3.0, 6.0], [2.0] * 4, params) == [-2.0, -1.0, 0.0, 3.0]


def test_non_finite_pairs_are_dropped_from_fit_and_residuals():
    a = [1.0, 2.0, float("nan"), 4.0]
    b = [1.0, 2.0, 3.0, 4.0]
    params = fit_global_ols(a, b)

    assert params.n_obs == 3
    assert params.slope == pytest.approx(1.0)
    assert params.intercept == pytest.approx(0.0)
    resid = regression_residuals(a, b, params)
    assert resid[2] is None
    assert [resid[i] for i in (0, 1, 3)] == pytest.approx([0.0, 0.0, 0.0])


def test_none_samples_count_as_non_finite():
    params = fit_global_ols([1.0, None, 3.0, 5.0], [1.0, 2.0, None, 3.0])
    assert params.n_obs == 2
    assert params.slope == pytest.approx(2.0)


def test_too_few_finite_pairs_is_all_undefined():
    a = [1.0, float("nan"), 3.0]
    b = [float("nan"), 2.0, float("inf")]
    params = fit_global_ols(a, b)

    assert not params.valid
    assert regression_residuals(a, b, params) == [None, None, None]
    assert cointegration_zscore(a, b, 2) == [None, None, None]
    assert cointegration_zscore([1.0], [2.0], 2) == [None]
    assert cointegration_zscore([], [], 5) == []


def test_invalid_params_default():
    p = RegressionParams()
    assert not p.valid
    assert regression_residuals([1.0, 2.0], [1.0, 2.0], p) == [None, None]


def test_rolling_zscore_two_point_window():
    out = rolling_residual_zscore([1.0, 2.0, 3.0, 4.0], 2)
    assert out[0] is None
    assert out[1:] == pytest.approx([1.0, 1.0, 1.0])


def test_rolling_zscore_window_clamped_to_two():
    resid = [1.0, 2.0, 3.0, 4.0]
    assert rolling_residual_zscore(resid, 1) == rolling_residual_zscore(resid, 2)
    assert rolling_residual_zscore(resid, 0) == rolling_residual_zscore(resid, 2.9)


def test_rolling_zscore_includes_current_and_needs_two_finite():
    out = rolling_residual_zscore([None, 1.0, 3.0], 2)
    assert out == [None, None, pytest.approx(1.0)]


def test_rolling_zscore_skips_gaps_inside_window():
    # window [0, 2] holds 1.0, None, 3.0 -> sample {1, 3}
    out = rolling_residual_zscore([1.0, None, 3.0, None], 3)
    assert out[:2] == [None, None]
    assert out[2] == pytest.approx(1.0)
    assert out[3] is None


def test_rolling_zscore_population_moments():
    resid = [2.0, 4.0, 4.0, 4.0, 5.0, 5.0, 7.0, 9.0]
    out = rolling_residual_zscore(resid, 8)
    # mean 5, population std 2
    assert out[:7] == [None] * 7
    assert out[7] == pytest.approx(2.0)


def test_cointegration_zscore_is_composition():
    rng = np.random.default_rng(11)
    b = np.cumsum(rng.normal(size=120)) + 50.0
    a = 1.7 * b + 4.0 + rng.normal(scale=0.5, size=120)
    a[17] = np.nan

    params = fit_global_ols(a, b)
    expected = rolling_residual_zscore(regression_residuals(a, b, params), 20)
    out = cointegration_zscore(a, b, 20)

    assert out == expected
    assert len(out) == 120
    assert out[:19] == [None] * 19
    assert out[17] is None
    assert all(math.isfinite(v) for v in out if v is not None)
    assert params.slope == pytest.approx(1.7, abs=0.1)


def test_two_point_window_z_is_unit_magnitude():
    a = [1.0, 3.0, 2.0, 5.0, 4.0, 6.0]
    b = [1.0, 2.0, 3.0, 4.0, 5.0, 6.0]
    for v in cointegration_zscore(a, b, 2):
        assert v is None or abs(abs(v) - 1.0) < 1e-9


def test_output_length_is_overlap():
    assert len(cointegration_zscore([1.0, 2.0, 4.0, 3.0, 5.0], [1.0, 2.0, 3.0], 2)) == 3


def test_rolling_zscore_accepts_nullable_column():
    resid = pd.Series([1.0, 2.0, pd.NA, 4.0, 3.0, 5.0], dtype="Float64")
    out = rolling_residual_zscore(resid, 5)

    assert out[:4] == [None] * 4
    # window [0, 4] -> {1, 2, 4, 3}
    sample = [1.0, 2.0, 4.0, 3.0]
    mean = sum(sample) / 4
    std = math.sqrt(sum((v - mean) ** 2 for v in sample) / 4)
    assert out[4] == pytest.approx((3.0 - mean) / std)
    assert out[5] is not None

    assert rolling_residual_zscore(pd.Series([pd.NA, pd.NA], dtype="Float64"), 2) == [None, None]
