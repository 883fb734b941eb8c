"""
Sampler Data Structures and Type Definitions.

This module contains the core value types used by the ensemble sampler:
- Parameter: Initial guess and scatter scale for one model parameter
- SamplerConfig: Immutable sampler settings with documented defaults
- SamplerState: Lifecycle of an EnsembleSampler
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional


# Defaults for SamplerConfig
DEFAULT_NUM_WALKERS = 100
DEFAULT_STRETCH_SCALE = 2.0

# Skip used when the autocorrelation estimate is unusable
DEFAULT_SKIP = 50
# Burn-in length, in units of the thinning interval
BURN_IN_SKIPS = 20


@dataclass(frozen=True)
class Parameter:
    """
    Initial guess for one parameter.

    Fields:
        value: Initial value. Walkers start scattered around it.
        scale: Half-width of the uniform initial scatter.
        frozen: Reserved for fixing a dimension. Currently not enforced.
    """
    value: float
    scale: float
    frozen: bool = False


@dataclass(frozen=True)
class SamplerConfig:
    """
    Immutable sampler settings.

    Fields:
        num_walkers: Total walkers, split into two equal groups. Must be even.
        stretch_scale: Stretch-move scale a > 1. Proposals stretch by z in [1/a, a].
        rng_seed: Seed for the random stream. None draws a fresh seed per sampler.
    """
    num_walkers: int = DEFAULT_NUM_WALKERS
    stretch_scale: float = DEFAULT_STRETCH_SCALE
    rng_seed: Optional[int] = None

    @property
    def walkers_per_group(self) -> int:
        return self.num_walkers // 2


class SamplerState(IntEnum):
    """Lifecycle of an EnsembleSampler."""
    UNINITIALIZED = 0  # Constructed, never run
    INITIALIZED = 1    # Walkers placed, no steps taken yet
    RUNNING = 2        # Inside the step loop
    FINALIZED = 3      # Skip and burn-in computed, chains can be extracted

    def __str__(self):
        return self.name.title()
