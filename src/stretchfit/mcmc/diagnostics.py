"""
Sampler Diagnostics.

Post-run reductions used to de-correlate the chains:
- ensemble_proxy_series: Per-dimension sum over one walker group at each step
- autocorrelation_times: Autocorrelation time of each proxy series
- choose_skip: Thinning interval from the autocorrelation times, with fallback
- log_acceptance_summary: Report the stretch-move acceptance fraction
"""

import math
from typing import Optional, Sequence

import numpy as np

from ..autocorr import MAX_LAG, integrated_autocorr_time
from ..error_handling import AutocorrelationError
from .types import DEFAULT_SKIP

import logging
logger = logging.getLogger('stretchfit')


def ensemble_proxy_series(group_history: np.ndarray) -> np.ndarray:
    """
    Sum walker positions across one group at every step.

    A per-dimension constant is subtracted before summing. This shifts each
    series by a constant, which leaves its autocorrelation time unchanged,
    and keeps full precision for parameters with a large common offset.

    Args:
        group_history: (n_steps, n_walkers, n_params)

    Returns:
        series: (n_params, n_steps)
    """
    offset = group_history[0].mean(axis=0)
    return np.sum(group_history - offset, axis=1).T


def autocorrelation_times(group_history: np.ndarray, max_lag: int = MAX_LAG) -> np.ndarray:
    """
    Autocorrelation time of each dimension's ensemble-summed series.

    Dimensions the estimator rejects get NaN, so that the caller can decide
    how to fall back.
    """
    series = ensemble_proxy_series(group_history)
    taus = np.full(series.shape[0], np.nan)
    for i, s in enumerate(series):
        try:
            taus[i] = integrated_autocorr_time(s, max_lag)
        except AutocorrelationError as e:
            logger.warning(f"Autocorrelation time of parameter {i} unavailable: {e}")
    return taus


def choose_skip(taus: Sequence[float], default: int = DEFAULT_SKIP) -> int:
    """
    Thinning interval: ceil of the largest autocorrelation time.

    Falls back to `default` when no usable estimate exists or the result
    is not positive.
    """
    taus = np.asarray(taus, dtype=np.float64)
    finite = taus[np.isfinite(taus)]

    if finite.size < taus.size or finite.size == 0:
        logger.warning(f"Unusable autocorrelation times {taus.tolist()}; using skip={default}")
        return default

    skip = int(math.ceil(finite.max()))
    if skip <= 0:
        logger.warning(f"Non-positive autocorrelation time {finite.max():.3g}; using skip={default}")
        return default
    return skip


def acceptance_fraction(n_accepted: int, n_attempted: int) -> Optional[float]:
    """Fraction of accepted moves, or None before any move was attempted."""
    if n_attempted == 0:
        return None
    return n_accepted / n_attempted


def log_acceptance_summary(n_accepted: int, n_attempted: int) -> None:
    """Report the acceptance fraction, warning if it is unusually low or high."""
    rate = acceptance_fraction(n_accepted, n_attempted)
    if rate is None:
        return

    logger.info(f"--- Stretch-Move Acceptance: {rate:.1%} ({n_accepted}/{n_attempted}) ---")
    if rate < 0.10:
        logger.warning("  Acceptance fraction < 10% - walkers barely move")
    elif rate > 0.90:
        logger.warning("  Acceptance fraction > 90% - the posterior may be unconstrained")
