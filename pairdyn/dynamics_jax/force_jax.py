# pairdyn/dynamics_jax/force_jax.py
"""JAX implementation of the force field using automatic differentiation.

This module leverages JAX's `grad` transformation to compute the force on
every particle as the exact negative gradient of the total potential, without
finite differences or hand-written derivatives.
"""
from functools import partial
from typing import Any, Callable

import jax
import jax.numpy as jnp
from jax import grad, jit

from .potential_jax import total_potential_jax


@partial(jit, static_argnums=(0,))
def _force_field_jax(pairwise_fn: Callable[[Any], Any], positions: jax.Array) -> jax.Array:
    grad_vec: jax.Array = grad(lambda x: total_potential_jax(pairwise_fn, x))(positions)
    return -grad_vec


def force_field_jax(pairwise_fn: Callable[[Any], Any], positions: Any) -> jax.Array:
    """Calculates the force field F = -grad(total_potential) with `jax.grad`.

    Args:
        pairwise_fn (Callable): Elementwise, hashable pair potential.
        positions (ArrayLike): Particle positions, shape `(d, N)`, `(N,)` or
            scalar.

    Returns:
        jax.Array: The force on every particle, same shape as positions.
    """
    return _force_field_jax(pairwise_fn, jnp.asarray(positions, dtype=jnp.float64))


def make_force_fn_jax(energy_fn: Callable[[Any], Any]) -> Callable[[Any], jax.Array]:
    """Turns an energy of the positions into a JIT-compiled force `x -> -dE/dx`.

    The output of `energy_fn` is summed, mirroring `make_force_fn`.
    """

    @jit
    def force_fn(x: jax.Array) -> jax.Array:
        return -grad(lambda y: jnp.sum(energy_fn(y)))(x)

    def wrapped(x: Any) -> jax.Array:
        return force_fn(jnp.asarray(x, dtype=jnp.float64))

    return wrapped
