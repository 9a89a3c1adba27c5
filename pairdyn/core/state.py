# pairdyn/core/state.py
"""The ParticleState class, the (positions, velocities) pair of a system.

Positions and velocities are stored as `d x N` arrays where column `i` holds
particle `i`. A plain scalar pair describes a single particle in one
dimension, and a 1-D array of length `N` describes `N` particles on a line.
The state is immutable: integrators produce a new state at every step instead
of mutating the previous one.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Tuple

import numpy as np
from numpy.typing import ArrayLike

from .exceptions import ShapeMismatchError


def check_same_shape(x: Any, v: Any, what: str = "velocities") -> None:
    """Raises ShapeMismatchError unless x and v have identical shapes.

    Broadcasting between the two is never allowed.
    """
    shape_x, shape_v = np.shape(x), np.shape(v)
    if shape_x != shape_v:
        raise ShapeMismatchError(
            f"positions have shape {shape_x} but {what} have shape {shape_v}; "
            "they must be identical."
        )


@dataclass(frozen=True)
class ParticleState:
    """An immutable snapshot of particle positions and velocities.

    Attributes:
        positions (ArrayLike): Particle positions, shape `(d, N)`, `(N,)` or
            scalar.
        velocities (ArrayLike): Particle velocities, same shape as positions.
    """

    positions: Any
    velocities: Any

    def __post_init__(self) -> None:
        positions = _as_float(self.positions)
        velocities = _as_float(self.velocities)
        check_same_shape(positions, velocities)
        # Use object.__setattr__ because the dataclass is frozen
        object.__setattr__(self, "positions", positions)
        object.__setattr__(self, "velocities", velocities)

    @classmethod
    def at_rest(cls, positions: ArrayLike) -> ParticleState:
        """Creates a state with the given positions and zero velocities."""
        positions = _as_float(positions)
        return cls(positions, np.zeros_like(positions))

    @property
    def shape(self) -> Tuple[int, ...]:
        return np.shape(self.positions)

    @property
    def n_particles(self) -> int:
        """Number of particles; a scalar state holds one particle."""
        shape = self.shape
        if len(shape) == 0:
            return 1
        return shape[-1]

    @property
    def dimension(self) -> int:
        """Spatial dimension d."""
        shape = self.shape
        return shape[0] if len(shape) == 2 else 1

    def is_finite(self) -> bool:
        return bool(
            np.all(np.isfinite(self.positions)) and np.all(np.isfinite(self.velocities))
        )

    def __repr__(self) -> str:
        return f"ParticleState(n_particles={self.n_particles}, dimension={self.dimension})"


def _as_float(x: Any) -> Any:
    """Converts array-likes to float arrays while leaving Python scalars alone."""
    if np.ndim(x) == 0 and not isinstance(x, np.ndarray):
        return float(x)
    return np.asarray(x, dtype=float)
