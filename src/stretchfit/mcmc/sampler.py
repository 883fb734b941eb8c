"""
Ensemble Sampler - affine-invariant stretch-move MCMC.

EnsembleSampler owns the walker state and the chain history. run() is a
single blocking call that:
1. Validates its inputs
2. Scatters walkers around the initial guesses
3. Steps until any terminator fires
4. Computes autocorrelation times, the thinning interval and burn-in

After run(), chains() returns thinned, de-correlated samples for the chain
statistics.

Only walker group 0 is used for the autocorrelation proxy and for sample
extraction.
"""

import time
from datetime import timedelta
from typing import Any, Dict, Optional, Sequence, Union

import jax
import numpy as np

from ..error_handling import (
    PreconditionError,
    diagnose_sampler_issues,
    log_diagnostics,
    validate_parameters,
)
from ..terminators import Terminator, should_stop, step_budget
from .config import gen_rng_keys, initialize_walkers, resolve_config
from .diagnostics import (
    acceptance_fraction,
    autocorrelation_times,
    choose_skip,
    log_acceptance_summary,
)
from .history import ChainHistory, apply_burnin_and_thin
from .sampling import ensemble_sweep
from .types import BURN_IN_SKIPS, Parameter, SamplerConfig, SamplerState

import logging
logger = logging.getLogger('stretchfit')

# Walker group used for the autocorrelation proxy and sample extraction
SAMPLE_GROUP = 0


class EnsembleSampler:
    """
    Affine-invariant ensemble sampler with two walker groups.

    Example:
        sampler = EnsembleSampler(SamplerConfig(num_walkers=50, rng_seed=1))
        sampler.run(log_pdf, [Parameter(0.0, 1.0), Parameter(1.0, 0.5)], [steps(5000)])
        samples = sampler.chains()   # (n_params, n_samples)
    """

    def __init__(self, config: Union[SamplerConfig, Dict[str, Any], None] = None):
        self.config = resolve_config(config)
        self._key, self.rng_seed = gen_rng_keys(self.config.rng_seed)

        self.state = SamplerState.UNINITIALIZED
        self.dim = 0
        self.n_accepted = 0
        self.n_attempted = 0
        self.skip: Optional[int] = None
        self._history: Optional[ChainHistory] = None
        self._positions = None
        self._log_probs = None

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def num_walkers(self) -> int:
        return self.config.num_walkers

    @property
    def n_steps(self) -> int:
        """Number of recorded steps, including the initial positions."""
        return 0 if self._history is None else len(self._history)

    @property
    def history(self) -> np.ndarray:
        """Read-only step history (n_steps, n_walkers, n_params)."""
        if self._history is None:
            raise PreconditionError("Sampler has no history yet; call run() first")
        return self._history.view()

    @property
    def log_probs(self) -> np.ndarray:
        """Current log-density of every walker (n_walkers,)."""
        if self._log_probs is None:
            raise PreconditionError("Sampler has no walkers yet; call run() first")
        return np.asarray(self._log_probs)

    @property
    def acceptance_fraction(self) -> Optional[float]:
        return acceptance_fraction(self.n_accepted, self.n_attempted)

    @property
    def burn_in(self) -> Optional[int]:
        """Number of leading steps discarded by chains()."""
        return None if self.skip is None else BURN_IN_SKIPS * self.skip

    # ------------------------------------------------------------------
    # Sampling
    # ------------------------------------------------------------------

    def run(self, log_pdf, params: Sequence[Parameter], terminators: Sequence[Terminator]) -> None:
        """
        Sample log_pdf until any terminator fires, then compute skip and burn-in.

        Args:
            log_pdf: Function mapping a parameter vector to a log-density (JAX-traceable)
            params: Initial guess and scatter scale for each parameter
            terminators: Non-empty sequence of stopping rules

        Raises:
            PreconditionError: Empty params or no terminators
        """
        if not terminators:
            raise PreconditionError(
                "run() needs at least one Terminator; pass e.g. [steps(20000)]"
            )
        validate_parameters(params)
        if any(p.frozen for p in params):
            logger.warning("Parameter.frozen is not enforced; frozen parameters are sampled normally")

        self._initialize(log_pdf, params, step_budget(terminators))

        logger.info(
            f"--- Stretch-move run: {self.num_walkers} walkers, {self.dim} params, "
            f"a={self.config.stretch_scale}, seed={self.rng_seed} ---"
        )
        start = time.perf_counter()

        self.state = SamplerState.RUNNING
        history = self._history
        while not should_stop(terminators, history.view()):
            self._step(log_pdf)

        wall_time = time.perf_counter() - start
        logger.info(
            f"Stopped after {len(history) - 1} steps in "
            f"{timedelta(seconds=int(wall_time))} ({wall_time:.2f}s)"
        )
        log_acceptance_summary(self.n_accepted, self.n_attempted)
        log_diagnostics(diagnose_sampler_issues(history.view()))

        self._finalize()

    def _initialize(self, log_pdf, params: Sequence[Parameter], budget: Optional[int]) -> None:
        self.dim = len(params)
        self.n_accepted = 0
        self.n_attempted = 0
        self.skip = None

        self._key, init_key = jax.random.split(self._key)
        self._positions, self._log_probs = initialize_walkers(
            init_key, params, self.num_walkers, log_pdf
        )

        capacity = None if budget is None else budget + 1
        self._history = ChainHistory(self.num_walkers, self.dim, capacity)
        self._history.append(self._positions)
        self.state = SamplerState.INITIALIZED

    def _step(self, log_pdf) -> None:
        """Advance every walker by one stretch move and record the result."""
        self._key, self._positions, self._log_probs, n_accepted = ensemble_sweep(
            self._key, self._positions, self._log_probs, log_pdf,
            self.config.stretch_scale,
        )
        self._history.append(self._positions)
        self.n_accepted += int(n_accepted)
        self.n_attempted += self.num_walkers

    def _finalize(self) -> None:
        taus = self.autocorrelation_times()
        self.skip = choose_skip(taus)
        logger.info(
            f"Autocorrelation times: {np.array2string(taus, precision=2)}; "
            f"skip={self.skip}, burn-in={self.burn_in} steps"
        )
        if self.burn_in >= self.n_steps:
            logger.warning(
                f"Burn-in ({self.burn_in}) covers the whole chain ({self.n_steps} steps); "
                f"chains() will have no samples"
            )
        self.state = SamplerState.FINALIZED

    # ------------------------------------------------------------------
    # Post-run reduction
    # ------------------------------------------------------------------

    def autocorrelation_times(self) -> np.ndarray:
        """Per-parameter autocorrelation time of the group-0 ensemble sum (NaN if unavailable)."""
        if self._history is None:
            raise PreconditionError("Sampler has no history yet; call run() first")
        return autocorrelation_times(self._history.group(SAMPLE_GROUP))

    def chains(self) -> np.ndarray:
        """
        Thinned post-burn-in samples of walker group 0.

        Returns:
            samples: (n_params, n_samples), ordered by step and then by walker

        Raises:
            PreconditionError: If run() has not completed
            DegenerateChainError: If burn-in covers the whole chain
        """
        if self.state != SamplerState.FINALIZED:
            raise PreconditionError(f"chains() needs a finished run; sampler is {self.state}")
        return apply_burnin_and_thin(
            self._history.group(SAMPLE_GROUP), self.burn_in, self.skip
        )
