# pairdyn/dynamics/solvers.py
"""Core simulation loop for pairdyn dynamics.

This module provides:
- run: The fixed-step integration loop. It applies an integrator exactly
  `n_steps` times and returns the final state or a recorded trajectory.
- TrajectorySimulator: A small object wrapper around `run` that binds a force
  function, a potential and a `SimulationConfig`.
"""
from __future__ import annotations

from typing import Any, Callable, Optional, Union

import numpy as np

from ..core.config import SimulationConfig, validate_run_parameters
from ..core.exceptions import ShapeMismatchError, SingularConfigurationError
from ..core.state import ParticleState, check_same_shape
from .integrators import Integrator, get_integrator
from .trajectory import Trajectory, TrajectoryRecorder

ForceFn = Callable[[Any], Any]
EnergyFn = Callable[[Any], float]


def _all_finite(*values: Any) -> bool:
    return all(bool(np.all(np.isfinite(value))) for value in values)


def _initial_force(force_fn: ForceFn, x: Any, check_finite: bool) -> Any:
    f = force_fn(x)
    check_same_shape(x, f, what="forces")
    if check_finite and not _all_finite(f):
        raise SingularConfigurationError(
            "Singular configuration: the force on the initial state is not "
            "finite (coincident particles under a singular potential?).",
            step=0,
        )
    return f


def run(
    force_fn: ForceFn,
    dt: float,
    n_steps: int,
    x0: Any,
    v0: Any,
    integrator: Union[str, Integrator] = "verlet",
    *,
    record: bool = False,
    record_every: int = 1,
    potential_fn: Optional[EnergyFn] = None,
    check_finite: bool = True,
) -> Union[ParticleState, Trajectory]:
    """Integrates the equations of motion for exactly `n_steps` steps.

    The state is threaded explicitly through the integrator: every step takes
    (x, v, F(x)) and returns the next triple, so no variable is mutated behind
    the caller's back.

    Args:
        force_fn (Callable): Maps positions to forces of the same shape.
        dt (float): The timestep. Must be positive.
        n_steps (int): Number of steps. Must be non-negative; 0 returns the
            initial state.
        x0 (ArrayLike): Initial positions (scalar, `(N,)` or `(d, N)`).
        v0 (ArrayLike): Initial velocities, same shape as `x0`.
        integrator (str | Integrator): 'euler', 'verlet' or an instance.
        record (bool): If True, return a `Trajectory` instead of the final
            state.
        record_every (int): Stride between recorded frames.
        potential_fn (Callable, optional): Total potential of a position
            array. When given, each recorded frame stores its potential
            energy.
        check_finite (bool): If True, raise `SingularConfigurationError` as
            soon as a force or state becomes NaN or Inf.

    Returns:
        ParticleState | Trajectory: The final state, or the trajectory if
            `record` is True.

    Raises:
        InvalidParameterError: On a non-positive `dt`, a negative `n_steps`
            or an invalid `record_every`.
        ShapeMismatchError: If `x0` and `v0` (or the forces) differ in shape.
        SingularConfigurationError: If `check_finite` is set and a non-finite
            force or state is produced.
    """
    validate_run_parameters(dt, n_steps, record_every)
    stepper = get_integrator(integrator)
    state = ParticleState(x0, v0)
    x, v = state.positions, state.velocities

    if check_finite and not state.is_finite():
        raise SingularConfigurationError(
            "The initial state contains NaN or Inf values.", step=0
        )
    f = _initial_force(force_fn, x, check_finite)

    recorder: Optional[TrajectoryRecorder] = None
    if record:
        recorder = TrajectoryRecorder(
            n_steps=n_steps,
            record_every=record_every,
            state_shape=np.shape(x),
            dt=float(dt),
            integrator=stepper.name,
            potential_fn=potential_fn,
        )
        recorder.record(x, v)

    for step in range(1, n_steps + 1):
        x, v, f = stepper.advance(force_fn, dt, x, v, f)
        if np.shape(f) != np.shape(x):
            raise ShapeMismatchError(
                f"force_fn returned shape {np.shape(f)} for positions of shape "
                f"{np.shape(x)} at step {step}."
            )
        if check_finite and not _all_finite(x, v, f):
            raise SingularConfigurationError(
                f"Singular configuration at step {step} (t={step * dt:.6g}): "
                "non-finite force or state. Particles may have collided under "
                "a singular potential, or dt is too large.",
                step=step,
            )
        if recorder is not None and recorder.wants(step):
            recorder.record(x, v)

    if recorder is not None:
        return recorder.finish()
    return ParticleState(x, v)


class TrajectorySimulator:
    """Simulates the trajectory of a set of particles under a force field.

    Args:
        force_fn (Callable): Maps positions to forces.
        config (SimulationConfig): The run parameters.
        potential_fn (Callable, optional): Total potential of a position
            array, recorded alongside every frame.
    """

    def __init__(
        self,
        force_fn: ForceFn,
        config: SimulationConfig,
        potential_fn: Optional[EnergyFn] = None,
    ):
        self.force_fn: ForceFn = force_fn
        self.config: SimulationConfig = config
        self.potential_fn: Optional[EnergyFn] = potential_fn

    def simulate(self, state: ParticleState) -> Union[ParticleState, Trajectory]:
        """Runs the simulation from `state`."""
        config = self.config
        return run(
            self.force_fn,
            config.dt,
            config.n_steps,
            state.positions,
            state.velocities,
            config.integrator,
            record=config.record,
            record_every=config.record_every,
            potential_fn=self.potential_fn,
            check_finite=config.check_finite,
        )
