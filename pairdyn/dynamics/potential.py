# pairdyn/dynamics/potential.py
"""NumPy implementation of the total pairwise potential.

This module provides the function to calculate the total potential energy of
a particle configuration as the sum of a radial pair potential over every
unordered pair of particles.
"""
from typing import Any, Callable, Tuple

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.spatial.distance import pdist

PairwiseFn = Callable[[Any], Any]


def as_columns(positions: ArrayLike) -> NDArray[np.float64]:
    """Returns positions as a `(d, N)` array.

    A 1-D array of length N is read as N particles in one dimension, and a
    scalar as a single particle in one dimension.
    """
    x: NDArray[np.float64] = np.asarray(positions, dtype=float)
    if x.ndim == 0:
        return x.reshape(1, 1)
    if x.ndim == 1:
        return x.reshape(1, -1)
    if x.ndim != 2:
        raise ValueError(
            f"positions must be a scalar, a 1-D array or a (d, N) array, "
            f"but received an array with shape {x.shape}."
        )
    return x


def pair_indices(n_particles: int) -> Tuple[NDArray[np.intp], NDArray[np.intp]]:
    """Indices (i, j) of all unordered pairs i < j, in `pdist` order."""
    i, j = np.triu_indices(n_particles, k=1)
    return i, j


def pair_distances(positions: ArrayLike) -> NDArray[np.float64]:
    """Euclidean distances of all unordered pairs, in condensed `pdist` order."""
    x = as_columns(positions)
    if x.shape[1] < 2:
        return np.zeros(0)
    return pdist(x.T, metric="euclidean")


def total_potential(pairwise_fn: PairwiseFn, positions: ArrayLike) -> float:
    """Calculates the total potential energy of a configuration (NumPy).

    The total potential is the sum of `pairwise_fn(|x_i - x_j|)` over all
    unordered pairs i < j. Each pair contributes exactly once and particles
    never interact with themselves.

    Args:
        pairwise_fn (Callable): Elementwise function mapping an array of
            distances to an array of pair energies, e.g. a `PairPotential`.
        positions (ArrayLike): Particle positions, shape `(d, N)`, `(N,)` or
            scalar. The input is never modified.

    Returns:
        float: The total scalar potential energy. Coincident particles under a
            potential singular at r = 0 yield inf or nan; this is not masked.
    """
    distances = pair_distances(positions)
    if distances.size == 0:
        return 0.0

    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        pair_energies = np.asarray(pairwise_fn(distances), dtype=float)
        # np.sum uses pairwise summation over a fixed order, so the result is
        # reproducible.
        return float(np.sum(pair_energies))
