# pairdyn/dynamics/force.py
"""NumPy implementation of the force field calculation.

This module provides functions to calculate the force on every particle as
the negative gradient of the total pairwise potential, either analytically
(through the chain rule and the potential's `derivative`) or numerically
(central differences of the total potential).
"""
from typing import Any, Callable, Literal

import numpy as np
from numpy.typing import ArrayLike, NDArray

from ..core.exceptions import InvalidParameterError
from .potential import PairwiseFn, as_columns, pair_indices, total_potential

ForceMethod = Literal["auto", "analytic", "numeric"]
ForceFn = Callable[[Any], Any]

_METHODS = ("auto", "analytic", "numeric")


def _resolve_method(fn: Any, method: str) -> str:
    if method not in _METHODS:
        raise InvalidParameterError(
            f"Unsupported force method: '{method}'. Please choose one of {_METHODS}."
        )
    if method == "auto":
        return "analytic" if callable(getattr(fn, "derivative", None)) else "numeric"
    if method == "analytic" and not callable(getattr(fn, "derivative", None)):
        raise InvalidParameterError(
            f"Analytic forces require a potential with a `derivative` method; "
            f"{fn!r} has none. Use method='numeric' instead."
        )
    return method


def force_field_analytic(
    pairwise_fn: PairwiseFn, positions: ArrayLike
) -> NDArray[np.float64]:
    """Calculates the forces using the analytic derivative of the potential.

    For every pair (i, j) with displacement d = x_i - x_j and r = |d|, the
    gradient contribution dV/dr * d / r is added to particle i and subtracted
    from particle j. Contributions are accumulated in a fixed pair order.

    Args:
        pairwise_fn (PairwiseFn): A potential exposing `derivative(r)`.
        positions (ArrayLike): Particle positions, shape `(d, N)`, `(N,)` or
            scalar.

    Returns:
        NDArray[np.float64]: The force on every particle, same shape as
            positions.
    """
    x = as_columns(positions)
    grad: NDArray[np.float64] = np.zeros_like(x)
    n_particles = x.shape[1]

    if n_particles >= 2:
        i, j = pair_indices(n_particles)
        displacement = x[:, i] - x[:, j]
        r = np.linalg.norm(displacement, axis=0)
        # Coincident particles have no direction; only a singular dV/dr survives.
        unit = np.divide(displacement, r, out=np.zeros_like(displacement), where=r > 0)
        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            dv_dr = np.asarray(pairwise_fn.derivative(r), dtype=float)
            pair_grad = dv_dr * unit
        np.add.at(grad, (slice(None), i), pair_grad)
        np.add.at(grad, (slice(None), j), -pair_grad)

    return (-grad).reshape(np.shape(positions))


def force_field_numeric(
    pairwise_fn: PairwiseFn, positions: ArrayLike, h: float = 1e-6
) -> NDArray[np.float64]:
    """Calculates the forces using a central-difference gradient.

    Args:
        pairwise_fn (PairwiseFn): Any elementwise pair potential.
        positions (ArrayLike): Particle positions, shape `(d, N)`, `(N,)` or
            scalar.
        h (float): The step size used for the finite difference calculation.
            Defaults to 1e-6.

    Returns:
        NDArray[np.float64]: The force on every particle, same shape as
            positions.
    """
    x: NDArray[np.float64] = np.array(positions, dtype=float)
    flat = x.reshape(-1)
    grad: NDArray[np.float64] = np.zeros_like(flat)

    for k in range(flat.size):
        x_fwd = flat.copy()
        x_bwd = flat.copy()
        x_fwd[k] += h
        x_bwd[k] -= h

        potential_fwd = total_potential(pairwise_fn, x_fwd.reshape(x.shape))
        potential_bwd = total_potential(pairwise_fn, x_bwd.reshape(x.shape))
        grad[k] = (potential_fwd - potential_bwd) / (2 * h)

    return (-grad).reshape(x.shape)


def force_field(
    pairwise_fn: PairwiseFn,
    positions: ArrayLike,
    method: ForceMethod = "auto",
    h: float = 1e-6,
) -> NDArray[np.float64]:
    """Calculates the force field F = -grad(total_potential) (NumPy).

    Args:
        pairwise_fn (PairwiseFn): The radial pair potential.
        positions (ArrayLike): Particle positions, shape `(d, N)`, `(N,)` or
            scalar.
        method (str): 'analytic', 'numeric' or 'auto'. 'auto' picks the
            analytic path whenever the potential exposes `derivative`.
        h (float): Finite difference step for the numeric path.

    Returns:
        NDArray[np.float64]: The force on every particle, same shape as
            positions.
    """
    resolved = _resolve_method(pairwise_fn, method)
    if resolved == "analytic":
        return force_field_analytic(pairwise_fn, positions)
    return force_field_numeric(pairwise_fn, positions, h=h)


def pair_force_fn(
    pairwise_fn: PairwiseFn, method: ForceMethod = "auto", h: float = 1e-6
) -> ForceFn:
    """Binds a pair potential into a force callable `x -> F(x)`."""
    resolved = _resolve_method(pairwise_fn, method)

    def force_fn(positions: Any) -> NDArray[np.float64]:
        return force_field(pairwise_fn, positions, method=resolved, h=h)

    return force_fn


def make_force_fn(
    energy_fn: Callable[[Any], Any], method: ForceMethod = "auto", h: float = 1e-6
) -> ForceFn:
    """Turns an energy of the positions into a force callable `x -> -dE/dx`.

    Unlike `pair_force_fn`, `energy_fn` is applied to the positions directly,
    e.g. an external potential acting on a single particle on a line. Its
    output is summed, so an elementwise energy acts independently on every
    coordinate. The returned callable accepts scalars and arrays alike.

    Args:
        energy_fn (Callable): The energy function. When it exposes a
            `derivative` method (as every `PairPotential` does) and method is
            'auto' or 'analytic', that derivative is used directly.
        method (str): 'analytic', 'numeric' or 'auto'.
        h (float): Finite difference step for the numeric path.

    Returns:
        Callable: The force function.
    """
    resolved = _resolve_method(energy_fn, method)

    if resolved == "analytic":

        def analytic_force(x: Any) -> Any:
            return -energy_fn.derivative(x)

        return analytic_force

    def energy(x: Any) -> float:
        return float(np.sum(energy_fn(x)))

    def numeric_force(x: Any) -> Any:
        if np.ndim(x) == 0:
            return -(energy(x + h) - energy(x - h)) / (2 * h)
        x_arr: NDArray[np.float64] = np.array(x, dtype=float)
        flat = x_arr.reshape(-1)
        grad: NDArray[np.float64] = np.zeros_like(flat)
        for k in range(flat.size):
            x_fwd = flat.copy()
            x_bwd = flat.copy()
            x_fwd[k] += h
            x_bwd[k] -= h
            grad[k] = (
                energy(x_fwd.reshape(x_arr.shape)) - energy(x_bwd.reshape(x_arr.shape))
            ) / (2 * h)
        return (-grad).reshape(x_arr.shape)

    return numeric_force
