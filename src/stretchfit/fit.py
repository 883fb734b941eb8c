"""
Curve-fit entry points.

Each entry point builds a log-posterior from the data, runs an
EnsembleSampler for a fixed number of steps, reduces the chains and returns
FitResult(mean, error, covariance).

- constant_error_fit: unknown noise shared by all points (noise appended last)
- error_fit: known per-point errors
- scatter_error_fit: known per-point errors plus unknown scatter (scatter appended last)
"""

from typing import Any, Dict, Optional, Sequence, Union

from .chain_stats import FitResult, chain_stats
from .mcmc.sampler import EnsembleSampler
from .mcmc.types import Parameter, SamplerConfig
from .pdf import (
    Func1D,
    constant_error_log_pdf,
    known_error_log_pdf,
    scatter_error_log_pdf,
)
from .terminators import steps

import logging
logger = logging.getLogger('stretchfit')


# Steps run by every fit entry point unless overridden
DEFAULT_FIT_STEPS = 20000

# Initial guess for an appended noise or scatter parameter
DEFAULT_NUISANCE = Parameter(value=1.0, scale=0.1)

ConfigLike = Union[SamplerConfig, Dict[str, Any], None]


def _run_fit(log_pdf, params: Sequence[Parameter], config: ConfigLike, n_steps: int) -> FitResult:
    sampler = EnsembleSampler(config)
    sampler.run(log_pdf, params, [steps(n_steps)])
    result = chain_stats(sampler.chains())
    logger.info(f"Fit mean: {result.mean.tolist()}")
    logger.info(f"Fit error: {result.error.tolist()}")
    return result


def constant_error_fit(
    x, y,
    p0: Sequence[Parameter],
    model: Func1D,
    noise: Optional[Parameter] = None,
    config: ConfigLike = None,
    n_steps: int = DEFAULT_FIT_STEPS,
) -> FitResult:
    """
    Fit model(p, x) to y with an unknown, constant Gaussian noise level.

    Args:
        x, y: Data arrays of equal length
        p0: Initial guesses for the model parameters
        model: model(params, x) -> float
        noise: Initial guess for the noise parameter (default value 1.0, scale 0.1)
        config: SamplerConfig, config dict, or None for defaults
        n_steps: Number of sampler steps

    Returns:
        FitResult over [model params..., noise]
    """
    log_pdf = constant_error_log_pdf(x, y, model)
    params = list(p0) + [noise if noise is not None else DEFAULT_NUISANCE]
    return _run_fit(log_pdf, params, config, n_steps)


def error_fit(
    x, y, yerr,
    p0: Sequence[Parameter],
    model: Func1D,
    config: ConfigLike = None,
    n_steps: int = DEFAULT_FIT_STEPS,
) -> FitResult:
    """
    Fit model(p, x) to y with known per-point Gaussian errors yerr.

    Returns:
        FitResult over the model parameters
    """
    log_pdf = known_error_log_pdf(x, y, yerr, model)
    return _run_fit(log_pdf, list(p0), config, n_steps)


def scatter_error_fit(
    x, y, yerr,
    p0: Sequence[Parameter],
    model: Func1D,
    scatter: Optional[Parameter] = None,
    config: ConfigLike = None,
    n_steps: int = DEFAULT_FIT_STEPS,
) -> FitResult:
    """
    Fit model(p, x) to y with known errors yerr plus unknown intrinsic scatter.

    Returns:
        FitResult over [model params..., scatter]
    """
    log_pdf = scatter_error_log_pdf(x, y, yerr, model)
    params = list(p0) + [scatter if scatter is not None else DEFAULT_NUISANCE]
    return _run_fit(log_pdf, params, config, n_steps)
