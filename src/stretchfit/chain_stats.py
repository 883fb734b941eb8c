"""
Chain statistics: mean, covariance and standard errors of thinned samples.

Both the mean and the covariance are computed in forms that survive a large
common offset in the samples (e.g. values near 1e13 that differ only in the
last few digits):
- The mean is refined around a first-pass estimate.
- The covariance sums products of values already centered on that mean.
  The shortcut sum(x*y)/n - mean_x*mean_y is never used; it cancels
  catastrophically for such data.
"""

from typing import NamedTuple

import numpy as np

from .error_handling import DegenerateChainError, PreconditionError


class FitResult(NamedTuple):
    mean: np.ndarray        # (n_params,)
    error: np.ndarray       # (n_params,) square root of the covariance diagonal
    covariance: np.ndarray  # (n_params, n_params), symmetric


def _as_chains(chains) -> np.ndarray:
    try:
        arr = np.asarray(chains, dtype=np.float64)
    except ValueError as e:
        raise PreconditionError(f"Chains must all have the same length: {e}") from e

    if arr.ndim != 2:
        raise PreconditionError(
            f"Chains must be a (n_params, n_samples) array, got shape {arr.shape}"
        )
    if arr.shape[0] == 0:
        raise PreconditionError("Chains must contain at least one parameter")
    if arr.shape[1] == 0:
        raise DegenerateChainError("Chains contain no samples")
    return arr


def chain_mean(chains) -> np.ndarray:
    """Per-parameter mean, offset-corrected against precision loss."""
    chains = _as_chains(chains)
    offset = chains.mean(axis=1)
    return offset + (chains - offset[:, None]).mean(axis=1)


def chain_covariance(chains, mean=None) -> np.ndarray:
    """
    Population covariance sum((x_a - m_a)(x_b - m_b)) / n of centered samples.

    The upper triangle is computed and mirrored, so the result is exactly
    symmetric. Diagonal entries are sums of squares and never negative.
    """
    chains = _as_chains(chains)
    if mean is None:
        mean = chain_mean(chains)
    mean = np.asarray(mean, dtype=np.float64)

    n_params, n = chains.shape
    centered = chains - mean[:, None]

    cov = np.zeros((n_params, n_params))
    for a in range(n_params):
        cov[a, a] = np.dot(centered[a], centered[a]) / n
        for b in range(a + 1, n_params):
            cov[a, b] = np.dot(centered[a], centered[b]) / n
            cov[b, a] = cov[a, b]
    return cov


def chain_stats(chains) -> FitResult:
    """Mean, standard error and covariance of (n_params, n_samples) chains."""
    chains = _as_chains(chains)
    mean = chain_mean(chains)
    cov = chain_covariance(chains, mean)
    return FitResult(mean=mean, error=np.sqrt(np.diag(cov)), covariance=cov)


def chain_percentiles(chains, q) -> np.ndarray:
    """
    Per-parameter percentiles of the samples.

    Args:
        chains: (n_params, n_samples)
        q: Percentile or sequence of percentiles in [0, 100]

    Returns:
        (n_params,) for scalar q, otherwise (n_params, len(q))
    """
    chains = _as_chains(chains)
    return np.percentile(chains, q, axis=1).T
