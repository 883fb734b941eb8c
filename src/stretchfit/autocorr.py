"""
Integrated autocorrelation time of a scalar series.

Windowed self-consistent estimator: the autocovariance is summed over a short
fixed lag window. If the resulting time is long compared to that window, the
series is coarse-grained by summing adjacent pairs and the estimate is
repeated on the shorter series, then rescaled back to the original spacing.
Each coarse-graining halves the series, so the recursion depth is bounded
by log2 of the input length.
"""

from typing import NamedTuple

import numpy as np

from .error_handling import AutocorrelationError


# Lag window used for the autocovariance sum
MAX_LAG = 10
# An estimate is accepted once tau * WIN_MULT < max_lag
WIN_MULT = 5
# A series must hold at least MIN_FAC * max_lag points
MIN_FAC = 5


class AutocorrelationEstimate(NamedTuple):
    mean: float   # Sample mean of the series
    sigma: float  # Standard error of the mean, accounting for correlation
    tau: float    # Integrated autocorrelation time, in steps


def _estimate(x: np.ndarray, max_lag: int):
    """Returns (sigma, tau) for a centered copy of x."""
    x = x - x.mean()
    n = x.size
    i_max = n - max_lag

    cov = np.array([np.dot(x[:i_max], x[s:s + i_max]) for s in range(max_lag + 1)])
    cov /= i_max

    if cov[0] <= 0.0:
        raise AutocorrelationError("Series has zero variance; autocorrelation time is undefined")

    d = cov[0] + 2.0 * np.sum(cov[1:])
    sigma = np.sqrt(max(d, 0.0) / n)
    tau = d / cov[0]

    if tau * WIN_MULT < max_lag:
        return sigma, tau

    half = n // 2
    if half < MIN_FAC * max_lag:
        # Cannot coarse-grain any further; keep the windowed estimate.
        return sigma, tau

    paired = x[0:2 * half:2] + x[1:2 * half:2]
    sigma_paired, _ = _estimate(paired, max_lag)

    d = 0.25 * sigma_paired * sigma_paired * n
    return np.sqrt(d / n), d / cov[0]


def autocorrelation(series, max_lag: int = MAX_LAG) -> AutocorrelationEstimate:
    """
    Estimate mean, error on the mean and autocorrelation time of a series.

    Args:
        series: 1-D sequence of floats
        max_lag: Lag window for the autocovariance sum

    Returns:
        AutocorrelationEstimate(mean, sigma, tau)

    Raises:
        AutocorrelationError: If the series is too short, non-finite or constant
    """
    if max_lag < 1:
        raise ValueError(f"max_lag must be >= 1, got {max_lag}")

    x = np.asarray(series, dtype=np.float64)
    if x.ndim != 1:
        raise ValueError(f"series must be 1-D, got shape {x.shape}")

    if x.size < MIN_FAC * max_lag:
        raise AutocorrelationError(
            f"Series of length {x.size} is too short for max_lag={max_lag} "
            f"(need at least {MIN_FAC * max_lag} points)"
        )
    if not np.all(np.isfinite(x)):
        raise AutocorrelationError("Series contains NaN or Inf values")

    mean = float(x.mean())
    sigma, tau = _estimate(x, max_lag)
    return AutocorrelationEstimate(mean=mean, sigma=float(sigma), tau=float(tau))


def integrated_autocorr_time(series, max_lag: int = MAX_LAG) -> float:
    """Integrated autocorrelation time of a 1-D series, in steps."""
    return autocorrelation(series, max_lag).tau
