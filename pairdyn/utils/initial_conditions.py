# pairdyn/utils/initial_conditions.py
"""
Helpers for building initial particle configurations.

Positions are returned as `(d, N)` arrays. Velocities default to zero, as in
the classic "particles released at rest" setup.
"""
import warnings
from typing import Literal, Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray
from scipy.spatial.distance import pdist
from scipy.stats import qmc

from ..core.exceptions import InvalidParameterError
from ..core.state import ParticleState


def _box_bounds(
    box: Union[float, Tuple[float, float]], dimension: int
) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
    if np.ndim(box) == 0:
        low, high = 0.0, float(box)
    else:
        low, high = float(box[0]), float(box[1])
    if high <= low:
        raise InvalidParameterError(
            f"box must describe a non-empty interval, but received {box!r}."
        )
    return np.full(dimension, low), np.full(dimension, high)


def _sample_unit(
    n_particles: int,
    dimension: int,
    sampling: str,
    rng: np.random.Generator,
) -> NDArray[np.float64]:
    if sampling == "sobol":
        sampler = qmc.Sobol(d=dimension, scramble=True, seed=rng)
        n_power_of_2 = 1 << (max(n_particles, 1) - 1).bit_length()
        return sampler.random(n=n_power_of_2)[:n_particles]
    if sampling == "uniform":
        return rng.random((n_particles, dimension))
    raise InvalidParameterError(
        f"Unsupported sampling: '{sampling}'. Please choose 'uniform' or 'sobol'."
    )


def random_positions(
    n_particles: int,
    dimension: int = 2,
    box: Union[float, Tuple[float, float]] = 1.0,
    min_separation: float = 0.0,
    sampling: Literal["uniform", "sobol"] = "uniform",
    seed: Optional[int] = None,
    max_attempts: int = 100,
) -> NDArray[np.float64]:
    """Draws random particle positions inside an axis-aligned box.

    Args:
        n_particles (int): Number of particles N.
        dimension (int): Spatial dimension d.
        box (float | Tuple[float, float]): Either the edge length L (the box
            is [0, L]^d) or a (low, high) pair.
        min_separation (float): Minimum pairwise distance. Candidates are
            redrawn until it is satisfied or `max_attempts` is exhausted, in
            which case the best candidate is returned with a warning.
        sampling (str): 'uniform' (pseudo-random) or 'sobol' (scrambled
            low-discrepancy sequence, better spread for small N).
        seed (int, optional): Seed for reproducible draws.
        max_attempts (int): Maximum number of redraws.

    Returns:
        NDArray[np.float64]: Positions of shape `(dimension, n_particles)`.
    """
    if n_particles < 1 or dimension < 1:
        raise InvalidParameterError(
            f"n_particles and dimension must be positive, but received "
            f"{n_particles} and {dimension}."
        )
    low, high = _box_bounds(box, dimension)
    rng = np.random.default_rng(seed)

    best: Optional[NDArray[np.float64]] = None
    best_separation = -np.inf
    for _ in range(max(max_attempts, 1)):
        unit = _sample_unit(n_particles, dimension, sampling, rng)
        candidate = low + unit * (high - low)
        separation = float(np.min(pdist(candidate))) if n_particles > 1 else np.inf
        if separation > best_separation:
            best, best_separation = candidate, separation
        if separation >= min_separation:
            break
    else:
        warnings.warn(
            f"Could not place {n_particles} particles with a minimum separation "
            f"of {min_separation} after {max_attempts} attempts; the closest "
            f"pair is {best_separation:.3g} apart.",
            UserWarning,
        )

    return np.ascontiguousarray(best.T)


def lattice_positions(
    counts: Sequence[int], spacing: float = 1.0, jitter: float = 0.0, seed: Optional[int] = None
) -> NDArray[np.float64]:
    """Places particles on a regular grid, optionally perturbed.

    Args:
        counts (Sequence[int]): Number of particles along each axis; its
            length is the spatial dimension.
        spacing (float): Distance between neighbouring grid points.
        jitter (float): Standard deviation of a Gaussian perturbation added
            to every coordinate.
        seed (int, optional): Seed for the perturbation.

    Returns:
        NDArray[np.float64]: Positions of shape `(len(counts), prod(counts))`.
    """
    axes = [np.arange(n) * spacing for n in counts]
    grid = np.stack([g.reshape(-1) for g in np.meshgrid(*axes, indexing="ij")])
    if jitter > 0:
        rng = np.random.default_rng(seed)
        grid = grid + rng.normal(scale=jitter, size=grid.shape)
    return grid


def random_state(
    n_particles: int,
    dimension: int = 2,
    box: Union[float, Tuple[float, float]] = 1.0,
    min_separation: float = 0.0,
    sampling: Literal["uniform", "sobol"] = "uniform",
    seed: Optional[int] = None,
) -> ParticleState:
    """Random positions released at rest (zero velocities)."""
    positions = random_positions(
        n_particles,
        dimension=dimension,
        box=box,
        min_separation=min_separation,
        sampling=sampling,
        seed=seed,
    )
    return ParticleState.at_rest(positions)
