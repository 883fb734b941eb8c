"""
Sampler Configuration and Initialization.

This module handles setting up and validating sampler configurations:
- clean_config: Turn a plain config dict into a validated SamplerConfig
- resolve_config: Accept a SamplerConfig, a dict, or None
- gen_rng_keys: Generate JAX random keys
- initialize_walkers: Place walkers around the initial guesses

Config dict keys use lowercase with underscores (e.g., 'num_walkers', 'rng_seed').
"""

from typing import Any, Dict, Optional, Sequence, Tuple, Union

import jax
import jax.numpy as jnp
import jax.random as random
import numpy as np

from ..error_handling import PreconditionError, validate_sampler_config
from .types import (
    DEFAULT_NUM_WALKERS,
    DEFAULT_STRETCH_SCALE,
    Parameter,
    SamplerConfig,
)

import logging
logger = logging.getLogger('stretchfit')


_CONFIG_KEYS = ('num_walkers', 'stretch_scale', 'rng_seed')


def clean_config(sampler_config: Dict[str, Any]) -> SamplerConfig:
    """
    Cleans a config dict, sets defaults and returns a validated SamplerConfig.
    The input dict is not modified.
    """
    sampler_config = dict(sampler_config)

    unknown = sorted(set(sampler_config) - set(_CONFIG_KEYS))
    if unknown:
        raise PreconditionError(
            f"Unknown sampler config keys: {unknown}. Valid keys: {list(_CONFIG_KEYS)}"
        )

    sampler_config.setdefault('num_walkers', DEFAULT_NUM_WALKERS)
    sampler_config.setdefault('stretch_scale', DEFAULT_STRETCH_SCALE)
    sampler_config.setdefault('rng_seed', None)

    config = SamplerConfig(
        num_walkers=sampler_config['num_walkers'],
        stretch_scale=float(sampler_config['stretch_scale']),
        rng_seed=sampler_config['rng_seed'],
    )
    validate_sampler_config(config)
    return config


def resolve_config(config: Union[SamplerConfig, Dict[str, Any], None]) -> SamplerConfig:
    """Build a fresh default config for None, clean dicts, validate the rest."""
    if config is None:
        return SamplerConfig()
    if isinstance(config, dict):
        return clean_config(config)
    if not isinstance(config, SamplerConfig):
        raise PreconditionError(
            f"config must be a SamplerConfig, dict or None, got {type(config).__name__}"
        )
    validate_sampler_config(config)
    return config


def gen_rng_keys(rng_seed: Optional[int]) -> Tuple[Any, int]:
    """Generate the master JAX key for a sampler.

    Returns:
        (master_key, seed): The key and the seed actually used, so that runs
        started without a seed can still be reproduced.
    """
    if rng_seed is None:
        rng_seed = int(np.random.SeedSequence().generate_state(1)[0])
    return random.PRNGKey(rng_seed), rng_seed


def initialize_walkers(
    key,
    params: Sequence[Parameter],
    num_walkers: int,
    log_pdf,
) -> Tuple[jnp.ndarray, jnp.ndarray]:
    """
    Scatter walkers uniformly in [value - scale, value + scale] per dimension.

    Returns:
        positions: (num_walkers, n_params); the first half is group 0
        log_probs: (num_walkers,) log-density of each starting position
    """
    values = jnp.asarray([p.value for p in params], dtype=jnp.float64)
    scales = jnp.asarray([p.scale for p in params], dtype=jnp.float64)

    offsets = random.uniform(
        key, (num_walkers, len(params)), dtype=jnp.float64, minval=-1.0, maxval=1.0
    )
    positions = values + offsets * scales
    log_probs = jax.jit(jax.vmap(log_pdf))(positions)

    n_nan = int(jnp.sum(jnp.isnan(log_probs)))
    if n_nan > 0:
        logger.warning(f"{n_nan}/{num_walkers} walkers start at a NaN log-density; stored as -inf")
        log_probs = jnp.where(jnp.isnan(log_probs), -jnp.inf, log_probs)

    n_bad = int(jnp.sum(~jnp.isfinite(log_probs)))
    if n_bad > 0:
        logger.warning(
            f"{n_bad}/{num_walkers} walkers start at a non-finite log-density; "
            f"they move only once a proposal lands in the allowed region"
        )

    return positions, log_probs
