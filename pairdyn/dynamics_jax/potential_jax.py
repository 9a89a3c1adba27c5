# pairdyn/dynamics_jax/potential_jax.py
"""JAX implementation of the total pairwise potential.

This module provides a JIT-compiled function to calculate the total potential
energy of a particle configuration. The pair indices are fixed NumPy arrays
derived from the (static) number of particles, so the reduction order matches
the NumPy backend and the function can be differentiated with `jax.grad`.
"""
from functools import partial
from typing import Any, Callable

import jax
import jax.numpy as jnp
import numpy as np
from jax import jit


def as_columns_jax(positions: jax.Array) -> jax.Array:
    """Returns positions as a `(d, N)` array (see `as_columns`)."""
    if positions.ndim == 0:
        return positions.reshape(1, 1)
    if positions.ndim == 1:
        return positions.reshape(1, -1)
    return positions


@jax.custom_jvp
def _pair_distance(r2: jax.Array) -> jax.Array:
    """sqrt(r2) whose derivative is taken as zero at coincident pairs.

    The zero is a multiplicative factor, so a dV/dr that is itself NaN or
    Inf at r = 0 (a singular potential) still poisons the gradient.
    """
    return jnp.sqrt(r2)


@_pair_distance.defjvp
def _pair_distance_jvp(primals, tangents):
    (r2,), (r2_dot,) = primals, tangents
    r = jnp.sqrt(r2)
    nonzero = r2 > 0
    scale = jnp.where(nonzero, 0.5 / jnp.where(nonzero, r, 1.0), 0.0)
    return r, scale * r2_dot


@partial(jit, static_argnums=(0,))
def total_potential_jax(
    pairwise_fn: Callable[[Any], Any], positions: jax.Array
) -> jax.Array:
    """Calculates the total potential energy of a configuration (JAX version).

    Args:
        pairwise_fn (Callable): Elementwise pair potential written with
            operators or `jax.numpy` functions. It is a static argument for
            the JIT compiler and must therefore be hashable.
        positions (jax.Array): Particle positions, shape `(d, N)`, `(N,)` or
            scalar.

    Returns:
        jax.Array: The total scalar potential energy (0-d array).
    """
    x = as_columns_jax(positions)
    n_particles = x.shape[1]
    if n_particles < 2:
        return jnp.zeros((), dtype=x.dtype)

    i, j = np.triu_indices(n_particles, k=1)
    displacement = x[:, i] - x[:, j]
    r = _pair_distance(jnp.sum(displacement**2, axis=0))
    return jnp.sum(pairwise_fn(r))
