"""
Pytest configuration and shared fixtures for stretchfit tests.
"""

import pytest
import numpy as np
import jax.numpy as jnp

from stretchfit import SamplerConfig
from stretchfit import test_posteriors


@pytest.fixture
def rng_seed():
    """Default RNG seed for reproducible tests."""
    return 42


@pytest.fixture
def small_config(rng_seed):
    """Small, seeded sampler configuration for quick runs."""
    return SamplerConfig(num_walkers=20, stretch_scale=2.0, rng_seed=rng_seed)


@pytest.fixture
def fit_config(rng_seed):
    """Full-size seeded configuration for end-to-end fits."""
    return SamplerConfig(num_walkers=100, stretch_scale=2.0, rng_seed=rng_seed)


@pytest.fixture
def line_model():
    return test_posteriors.line


@pytest.fixture
def standard_normal_log_pdf():
    """Independent unit normals in every dimension."""
    def log_pdf(params):
        return -0.5 * jnp.sum(params * params)
    return log_pdf


def flat_log_pdf(params):
    """Improper uniform density: every proposal is accepted in one dimension."""
    return jnp.zeros(())


def point_log_pdf(params):
    """Density supported only at the origin: every proposal away from it is rejected."""
    return jnp.where(jnp.all(params == 0.0), 0.0, -jnp.inf)


def make_ar1_series(phi, n, seed=0):
    """AR(1) series x_t = phi x_{t-1} + e_t; its autocorrelation time is (1+phi)/(1-phi)."""
    rng = np.random.default_rng(seed)
    noise = rng.normal(size=n)
    x = np.empty(n)
    x[0] = noise[0] / np.sqrt(1.0 - phi * phi)
    for t in range(1, n):
        x[t] = phi * x[t - 1] + noise[t]
    return x


def make_group_history(n_steps, n_walkers, n_params, seed=0, offset=0.0):
    """Random (n_steps, n_walkers, n_params) history for reduction tests."""
    rng = np.random.default_rng(seed)
    return offset + rng.normal(size=(n_steps, n_walkers, n_params))
