# paircorr/models/rolling.py
"""
Rolling pair relationships for many ticker pairs (joblib-parallel).
Designed for a MultiIndex (ticker, datetime) DataFrame with a 'close' column.

Per pair (P1 = first ticker, P2 = second ticker) the output frame holds:
    P1, P2     aligned closes (inner join on datetime)
    corr_raw   sliding correlation of P1 and P2
    corr       smoothed corr_raw
    resid      P1 - (alpha + beta * P2) from one global OLS fit
    coint_z    rolling z-score of resid

Public API:
- rolling_relationships_joblib(...)
- align_pair(...)
"""

from __future__ import annotations
from itertools import combinations
from typing import Dict, List, Optional, Tuple
import logging
import os
import numpy as np
import pandas as pd
from joblib import Parallel, delayed
from threadpoolctl import threadpool_limits
from tqdm import tqdm

from paircorr.panel import DEFAULT_WINDOW, pair_relationships

__all__ = [
    "rolling_relationships_joblib",
    "align_pair",
]

logger = logging.getLogger(__name__)

# ---------- helpers ----------
def _normalize_multiindex(data: pd.DataFrame) -> pd.DataFrame:
    """Check shape, name levels ('ticker', 'datetime') and sort."""
    if "close" not in data.columns:
        raise ValueError("data must include a 'close' column.")
    if not isinstance(data.index, pd.MultiIndex) or data.index.nlevels < 2:
        raise ValueError("data must have a MultiIndex with levels (ticker, datetime).")

    names = list(data.index.names)
    if names[0] != "ticker" or names[1] != "datetime":
        data = data.copy()
        names[0], names[1] = "ticker", "datetime"
        data.index = data.index.set_names(names)
    return data.sort_index(level=["ticker", "datetime"])

def _close_series(data: pd.DataFrame, k: str) -> pd.Series:
    s = data.loc[(k,), "close"]
    if isinstance(s.index, pd.MultiIndex):
        s = s.droplevel(0)
    if not isinstance(s.index, pd.DatetimeIndex):
        s = s.copy()
        s.index = pd.to_datetime(s.index, errors="coerce")
    return s.sort_index()

def align_pair(data: pd.DataFrame, k1: str, k2: str) -> pd.DataFrame:
    """
    Inner-join the closes of k1 and k2 on datetime.
    Returns a float64 DataFrame with columns ['P1', 'P2']. Rows where only one
    leg has a timestamp are dropped; NaN closes are kept (the statistics
    decide how to treat them).
    """
    s1 = _close_series(data, k1)
    s2 = _close_series(data, k2)
    df = pd.concat([s1.rename("P1"), s2.rename("P2")], axis=1, join="inner")
    return df.astype(np.float64)

def _pair_task(
    k1: str,
    k2: str,
    df: pd.DataFrame,
    *,
    window,
    smoothing_radius: Optional[int],
    strict: bool,
):
    with threadpool_limits(limits=1):
        derived = pair_relationships(
            df["P1"], df["P2"],
            window=window, smoothing_radius=smoothing_radius, strict=strict,
        )
    out = df.copy()
    for c in derived.columns:
        out[c] = derived[c].array
    out.attrs["regression"] = derived.attrs["regression"]
    return k1, k2, out

# ---------- main API ----------
def rolling_relationships_joblib(
    data: pd.DataFrame,
    pairs: Optional[List[Tuple[str, str]]] = None,
    *,
    window=DEFAULT_WINDOW,
    smoothing_radius: Optional[int] = None,
    strict: bool = False,
    require_full_span: bool = False,
    n_workers: Optional[int] = None,
    chunksize: int = 100,
    show_progress: bool = True,
) -> Dict[Tuple[str, str], pd.DataFrame]:
    """
    Returns dict[(k1, k2)] -> DataFrame indexed by datetime with
    ['P1', 'P2', 'corr_raw', 'corr', 'resid', 'coint_z'].

    pairs=None runs every ticker combination. Pairs naming an unknown ticker
    are skipped with a warning. `smoothing_radius=None` uses max(1, window // 8).
    """
    # Avoid BLAS oversubscription
    os.environ.setdefault("OPENBLAS_NUM_THREADS", "1")
    os.environ.setdefault("MKL_NUM_THREADS",      "1")
    os.environ.setdefault("NUMEXPR_NUM_THREADS",  "1")

    data = _normalize_multiindex(data)
    tickers: List[str] = [str(k) for k in data.index.get_level_values("ticker").unique().tolist()]

    if pairs is None:
        idx_pairs: List[Tuple[str, str]] = list(combinations(tickers, 2))
    else:
        known = set(tickers)
        idx_pairs = []
        for a, b in pairs:
            a, b = str(a), str(b)
            if a not in known or b not in known:
                logger.warning("skipping pair (%s, %s): ticker not in data", a, b)
                continue
            idx_pairs.append((a, b))

    if require_full_span:
        dt = data.index.get_level_values("datetime")
        full_start, full_end = dt.min(), dt.max()

        def _full_span_ok(k: str) -> bool:
            s = _close_series(data, k)
            return len(s) > 0 and s.index.min() == full_start and s.index.max() == full_end

        before = len(idx_pairs)
        idx_pairs = [(a, b) for (a, b) in idx_pairs if _full_span_ok(a) and _full_span_ok(b)]
        logger.debug("full-span filter kept %d of %d pairs", len(idx_pairs), before)

    if not idx_pairs:
        return {}

    n_workers = n_workers or os.cpu_count() or 1
    logger.debug("rolling relationships: %d pairs, window=%s, workers=%d", len(idx_pairs), window, n_workers)

    iterator = (
        delayed(_pair_task)(
            k1, k2, align_pair(data, k1, k2),
            window=window, smoothing_radius=smoothing_radius, strict=strict,
        )
        for (k1, k2) in idx_pairs
    )

    results = Parallel(
        n_jobs=n_workers, prefer="processes", batch_size=chunksize, return_as="generator",
    )(iterator)
    if show_progress:
        results = tqdm(results, total=len(idx_pairs), desc="Rolling corr / coint z", leave=False)

    return {(k1, k2): df_res for k1, k2, df_res in results}
