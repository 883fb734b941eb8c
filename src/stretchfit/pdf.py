"""
Log-posterior builders for one-dimensional curve fits.

Each builder closes over fixed data arrays and returns a LogPDF: a function
from a parameter vector to a scalar log-density. Densities are only defined
up to an additive constant, which is all the stretch-move acceptance test
and the chain statistics need.

Hard constraints (negative noise or scatter) are encoded by returning -inf.
The builders never raise for such parameter vectors; the sampler rejects
those proposals through the acceptance test.

The model function has the signature model(params, x) -> float and is
evaluated one point at a time. Inside the sampler it is traced by JAX, so it
must be built from jax.numpy operations or plain arithmetic.
"""

from typing import Callable

import jax
import jax.numpy as jnp

from .error_handling import PreconditionError


LogPDF = Callable[[jnp.ndarray], jnp.ndarray]
Func1D = Callable[[jnp.ndarray, float], float]


def _as_data(name, values):
    arr = jnp.asarray(values, dtype=jnp.float64)
    if arr.ndim != 1:
        raise PreconditionError(f"{name} must be 1-D, got shape {arr.shape}")
    return arr


def _check_lengths(**arrays):
    lengths = {name: arr.shape[0] for name, arr in arrays.items()}
    if len(set(lengths.values())) != 1:
        raise PreconditionError(f"Data arrays must have equal lengths, got {lengths}")


def _predict(model: Func1D, params, x):
    """Evaluate model(params, x_i) for every data point."""
    return jax.vmap(model, in_axes=(None, 0))(params, x)


def constant_error_log_pdf(x, y, model: Func1D) -> LogPDF:
    """
    Gaussian likelihood with one unknown noise level shared by all points.

    Parameter vector: [model_params..., sigma]. sigma < 0 gives -inf.
    """
    x, y = _as_data('x', x), _as_data('y', y)
    _check_lengths(x=x, y=y)

    def log_pdf(params):
        params = jnp.asarray(params)
        model_params, sigma = params[:-1], params[-1]
        dy = _predict(model, model_params, x) - y
        total = jnp.sum(-dy * dy / (2.0 * sigma * sigma) - jnp.log(sigma))
        return jnp.where(sigma < 0, -jnp.inf, total)

    return log_pdf


def known_error_log_pdf(x, y, yerr, model: Func1D) -> LogPDF:
    """
    Gaussian likelihood with known per-point errors.

    Parameter vector: model_params only. The normalization term is omitted,
    so the result is not suitable for evidence computations.
    """
    x, y, yerr = _as_data('x', x), _as_data('y', y), _as_data('yerr', yerr)
    _check_lengths(x=x, y=y, yerr=yerr)

    def log_pdf(params):
        dy = _predict(model, jnp.asarray(params), x) - y
        return jnp.sum(-dy * dy / (2.0 * yerr * yerr))

    return log_pdf


def scatter_error_log_pdf(x, y, yerr, model: Func1D) -> LogPDF:
    """
    Known per-point errors plus one unknown intrinsic scatter.

    Parameter vector: [model_params..., scatter]. The two error sources add
    in quadrature. scatter < 0 gives -inf.
    """
    x, y, yerr = _as_data('x', x), _as_data('y', y), _as_data('yerr', yerr)
    _check_lengths(x=x, y=y, yerr=yerr)
    data_var = yerr * yerr

    def log_pdf(params):
        params = jnp.asarray(params)
        model_params, scatter = params[:-1], params[-1]
        dy = _predict(model, model_params, x) - y
        var = data_var + scatter * scatter
        total = jnp.sum(-dy * dy / (2.0 * var) - jnp.log(jnp.sqrt(var)))
        return jnp.where(scatter < 0, -jnp.inf, total)

    return log_pdf
