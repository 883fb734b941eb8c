"""
Stretch-Move Sampling Functions.

Core kernels of the affine-invariant ensemble sampler (Goodman & Weare 2010):
- stretch_factor: Map u ~ U(0, 1) to z with density g(z) ∝ 1/sqrt(z) on [1/a, a]
- stretch_move: Propose and accept/reject a move for one walker
- group_update: Vmapped stretch moves for every walker in one group
- ensemble_sweep: One full step, group 0 then group 1

Random streams are partitioned per walker: each step key is split into one
key per walker, so the walkers of a group are updated in parallel. Same-seed
runs reproduce exactly, but do not match a single serial stream.
"""

from functools import partial

import jax
import jax.numpy as jnp
import jax.random as random


def stretch_factor(u, stretch_scale):
    """
    Stretch factor z for u in [0, 1).

    z = (1 + (a - 1) u)^2 / a, which has density ∝ 1/sqrt(z) on [1/a, a].
    """
    zf = (stretch_scale - 1.0) * u
    return (1.0 + zf) * (1.0 + zf) / stretch_scale


def stretch_move(key, walker, log_prob, partners, log_pdf, stretch_scale):
    """
    One stretch move for a single walker.

    Args:
        key: JAX random key for this walker
        walker: Current position (n_params,)
        log_prob: Log-density at the current position
        partners: Current positions of the complementary group (n_partners, n_params)
        log_pdf: Log-density function
        stretch_scale: Stretch-move scale a > 1

    Returns:
        new_position: Proposal if accepted, otherwise a copy of walker
        new_log_prob: Log-density at new_position
        accepted: Boolean acceptance flag
    """
    partner_key, z_key, accept_key = random.split(key, 3)
    dim = walker.shape[0]

    # Partner drawn uniformly, with replacement
    j = random.randint(partner_key, (), 0, partners.shape[0])
    partner = partners[j]

    zr = stretch_factor(random.uniform(z_key, dtype=walker.dtype), stretch_scale)
    proposal = partner + zr * (walker - partner)
    # A NaN density counts as outside the support, here and at the current position
    log_prob_new = log_pdf(proposal)
    log_prob_new = jnp.where(jnp.isnan(log_prob_new), -jnp.inf, log_prob_new)
    log_prob = jnp.where(jnp.isnan(log_prob), -jnp.inf, log_prob)

    log_ratio = (dim - 1) * jnp.log(zr) + log_prob_new - log_prob
    # -inf - (-inf) is NaN; never accept on it
    log_ratio = jnp.where(jnp.isnan(log_ratio), -jnp.inf, log_ratio)

    log_u = jnp.log(random.uniform(accept_key, dtype=walker.dtype))
    accept = log_u < log_ratio

    new_position = jnp.where(accept, proposal, walker)
    new_log_prob = jnp.where(accept, log_prob_new, log_prob)
    return new_position, new_log_prob, accept


def group_update(key, walkers, log_probs, partners, log_pdf, stretch_scale):
    """
    Stretch moves for every walker in one group against a fixed partner group.

    Args:
        key: JAX random key, split into one key per walker
        walkers: Positions of the active group (n_group, n_params)
        log_probs: Log-densities of the active group (n_group,)
        partners: Positions of the other group (n_partners, n_params)

    Returns:
        new_walkers, new_log_probs, accepted (n_group,)
    """
    keys = random.split(key, walkers.shape[0])
    move = partial(stretch_move, partners=partners, log_pdf=log_pdf,
                   stretch_scale=stretch_scale)
    return jax.vmap(move)(keys, walkers, log_probs)


@partial(jax.jit, static_argnames=('log_pdf',))
def ensemble_sweep(key, positions, log_probs, log_pdf, stretch_scale):
    """
    One full sampler step.

    Group 0 (first half of positions) is updated against group 1. Group 1 is
    then updated against the NEW group 0 positions. The two phases must stay
    in this order.

    Args:
        key: JAX random key for this step
        positions: All walker positions (n_walkers, n_params)
        log_probs: All walker log-densities (n_walkers,)
        log_pdf: Log-density function (static)
        stretch_scale: Stretch-move scale

    Returns:
        next_key, new_positions, new_log_probs, n_accepted
    """
    next_key, key_0, key_1 = random.split(key, 3)
    half = positions.shape[0] // 2

    states_0, states_1 = positions[:half], positions[half:]
    lps_0, lps_1 = log_probs[:half], log_probs[half:]

    states_0, lps_0, acc_0 = group_update(key_0, states_0, lps_0, states_1,
                                          log_pdf, stretch_scale)
    states_1, lps_1, acc_1 = group_update(key_1, states_1, lps_1, states_0,
                                          log_pdf, stretch_scale)

    new_positions = jnp.concatenate([states_0, states_1], axis=0)
    new_log_probs = jnp.concatenate([lps_0, lps_1], axis=0)
    n_accepted = jnp.sum(acc_0) + jnp.sum(acc_1)
    return next_key, new_positions, new_log_probs, n_accepted
