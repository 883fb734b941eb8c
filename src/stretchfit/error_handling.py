"""
Error Handling and Validation Utilities for the Ensemble Sampler

This module provides the exception taxonomy, input validation and
post-run diagnostic tools for stretch-move sampling.

Exceptions:
    StretchFitError      - Base class for every error raised by stretchfit
    PreconditionError    - Caller passed something the sampler cannot run with
    DegenerateChainError - The run finished but its chains cannot be reduced
    AutocorrelationError - The autocorrelation estimator could not produce a value
"""

from typing import Any, Dict, Sequence

import numpy as np

import logging
logger = logging.getLogger('stretchfit')


class StretchFitError(Exception):
    """Base class for stretchfit errors."""


class PreconditionError(StretchFitError, ValueError):
    """Invalid configuration or call sequence. Not recoverable by the sampler."""


class DegenerateChainError(StretchFitError, RuntimeError):
    """Chains exist but are unusable, e.g. every step was burned away."""


class AutocorrelationError(DegenerateChainError):
    """The autocorrelation estimator rejected its input."""


def validate_sampler_config(config) -> None:
    """
    Validates that a SamplerConfig is sensible.

    Args:
        config: SamplerConfig instance

    Raises:
        PreconditionError: If configuration is invalid
    """
    errors = []

    num_walkers = config.num_walkers
    if not isinstance(num_walkers, (int, np.integer)) or isinstance(num_walkers, bool):
        errors.append(f"num_walkers must be an integer, got {type(num_walkers).__name__}")
    else:
        if num_walkers < 2:
            errors.append(f"num_walkers must be >= 2, got {num_walkers}")
        if num_walkers % 2 != 0:
            errors.append(f"num_walkers must be even for the two walker groups, got {num_walkers}")

    if not np.isfinite(config.stretch_scale) or config.stretch_scale <= 1.0:
        errors.append(f"stretch_scale must be a finite value > 1, got {config.stretch_scale}")

    if config.rng_seed is not None and config.rng_seed < 0:
        errors.append(f"rng_seed must be >= 0, got {config.rng_seed}")

    if errors:
        raise PreconditionError("Invalid sampler configuration:\n  " + "\n  ".join(errors))


def validate_parameters(params: Sequence) -> None:
    """
    Validates the initial parameter guesses passed to a run.

    Raises:
        PreconditionError: If the list is empty or any entry is unusable
    """
    if len(params) == 0:
        raise PreconditionError("At least one Parameter is required, got an empty list")

    errors = []
    for i, p in enumerate(params):
        if not np.isfinite(p.value):
            errors.append(f"param {i}: initial value must be finite, got {p.value}")
        if not np.isfinite(p.scale) or p.scale < 0:
            errors.append(f"param {i}: scale must be finite and >= 0, got {p.scale}")

    if errors:
        raise PreconditionError("Invalid parameters:\n  " + "\n  ".join(errors))


def diagnose_sampler_issues(history: np.ndarray) -> Dict[str, Any]:
    """
    Analyzes a chain history to identify common issues.

    Args:
        history: Step history array (n_steps, n_walkers, n_params)

    Returns:
        diagnostics: Dictionary with issues, warnings, and info
    """
    diagnostics = {
        'issues': [],
        'warnings': [],
        'info': []
    }

    if not np.all(np.isfinite(history)):
        diagnostics['issues'].append(
            "History contains NaN or Inf values - sampler became unstable"
        )

    # Walkers that never moved after initialization
    if history.shape[0] > 1:
        moved = np.any(history[1:] != history[0], axis=(0, 2))
        stuck_walkers = int(np.sum(~moved))
        if stuck_walkers > 0:
            diagnostics['warnings'].append(
                f"{stuck_walkers} walker(s) never left their starting position"
            )

    diagnostics['info'].append(f"Steps: {history.shape[0]}")
    diagnostics['info'].append(f"Number of walkers: {history.shape[1]}")
    diagnostics['info'].append(f"Number of parameters: {history.shape[2]}")

    return diagnostics


def log_diagnostics(diagnostics: Dict[str, Any]) -> None:
    """Report diagnostics from diagnose_sampler_issues through the package logger."""
    for issue in diagnostics['issues']:
        logger.error(f"[ERROR] {issue}")

    for warning in diagnostics['warnings']:
        logger.warning(f"[WARN] {warning}")

    for info in diagnostics['info']:
        logger.debug(f"[INFO] {info}")

    if not diagnostics['issues'] and not diagnostics['warnings']:
        logger.debug("[OK] No issues detected")
