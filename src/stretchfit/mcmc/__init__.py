"""
MCMC Subpackage - Core ensemble sampling implementation.

This package contains the stretch-move sampler:
- sampler: EnsembleSampler, the run loop and post-run reduction
- sampling: JAX stretch-move kernels
- config: Configuration cleaning, RNG keys and walker initialization
- history: Chain history buffer and burn-in/thinning extraction
- diagnostics: Autocorrelation reduction, skip choice and acceptance summary
- types: Parameter, SamplerConfig, SamplerState
"""

# Import types first (needed by other modules)
from .types import (
    Parameter,
    SamplerConfig,
    SamplerState,
    DEFAULT_SKIP,
    BURN_IN_SKIPS,
)

# Import main entry point
from .sampler import EnsembleSampler

# Import commonly used functions
from .config import clean_config, resolve_config, gen_rng_keys, initialize_walkers
from .sampling import stretch_factor, stretch_move, group_update, ensemble_sweep
from .history import ChainHistory, apply_burnin_and_thin
from .diagnostics import (
    ensemble_proxy_series,
    autocorrelation_times,
    choose_skip,
    acceptance_fraction,
)

__all__ = [
    # Main entry point
    'EnsembleSampler',
    # Types
    'Parameter',
    'SamplerConfig',
    'SamplerState',
    'DEFAULT_SKIP',
    'BURN_IN_SKIPS',
    # Config
    'clean_config',
    'resolve_config',
    'gen_rng_keys',
    'initialize_walkers',
    # Kernels
    'stretch_factor',
    'stretch_move',
    'group_update',
    'ensemble_sweep',
    # History
    'ChainHistory',
    'apply_burnin_and_thin',
    # Diagnostics
    'ensemble_proxy_series',
    'autocorrelation_times',
    'choose_skip',
    'acceptance_fraction',
]
