"""
stretchfit - Curve fitting with an affine-invariant ensemble MCMC sampler

Public API:
    Fitting:
        constant_error_fit - Fit with one unknown noise level (appended as last param)
        error_fit - Fit with known per-point errors
        scatter_error_fit - Fit with known errors plus unknown scatter (appended as last param)
        FitResult - (mean, error, covariance) named tuple

    Sampling:
        EnsembleSampler - Stretch-move sampler with two walker groups
        Parameter - Initial guess and scatter scale for one parameter
        SamplerConfig - Immutable sampler settings (walkers, stretch scale, seed)
        clean_config - Build a SamplerConfig from a plain dict

    Log-posteriors:
        constant_error_log_pdf, known_error_log_pdf, scatter_error_log_pdf

    Stopping rules:
        Terminator - Base class for stopping rules
        steps - Stop after a fixed number of steps

    Statistics:
        chain_stats, chain_mean, chain_covariance, chain_percentiles
        autocorrelation, integrated_autocorr_time

    Errors:
        StretchFitError, PreconditionError, DegenerateChainError, AutocorrelationError

Example:
    from stretchfit import constant_error_fit, Parameter

    def line(p, x):
        return p[0] + p[1] * x

    mean, err, cov = constant_error_fit(
        x, y, [Parameter(2.0, 0.1), Parameter(0.0, 0.1)], line,
    )
"""
# CRITICAL: Import jax_config FIRST to enable float64 before any arrays are built
from . import jax_config  # noqa: F401

from .error_handling import (
    StretchFitError,
    PreconditionError,
    DegenerateChainError,
    AutocorrelationError,
)
from .autocorr import autocorrelation, integrated_autocorr_time, AutocorrelationEstimate
from .pdf import constant_error_log_pdf, known_error_log_pdf, scatter_error_log_pdf
from .terminators import Terminator, StepsTerminator, steps
from .chain_stats import (
    FitResult,
    chain_stats,
    chain_mean,
    chain_covariance,
    chain_percentiles,
)
from .mcmc import (
    EnsembleSampler,
    Parameter,
    SamplerConfig,
    SamplerState,
    clean_config,
)

# Main fit entry points
from .fit import (
    constant_error_fit,
    error_fit,
    scatter_error_fit,
)
