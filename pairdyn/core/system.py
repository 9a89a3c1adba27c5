# pairdyn/core/system.py
"""The ParticleSystem class, a container for the physics of a simulation.

This module defines the ParticleSystem class, which encapsulates the pair
potential, the way forces are derived from it, and the computational backend
(NumPy or JAX) used to run simulations.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, List, Literal, Optional, Sequence, Union

import numpy as np
from joblib import Parallel, delayed
from numpy.typing import ArrayLike, NDArray

from .config import SimulationConfig
from .exceptions import InvalidParameterError
from .state import ParticleState

if TYPE_CHECKING:
    from ..dynamics.trajectory import Trajectory

SimulationResult = Union[ParticleState, "Trajectory"]


@dataclass
class ParticleSystem:
    """A set of point particles interacting through a radial pair potential.

    The ParticleSystem is the primary entry point of pairdyn. It binds a pair
    potential to a backend and offers energy bookkeeping and simulation
    methods. All particles have unit mass.

    Attributes:
        potential (Callable): The pair potential V(r). Either a
            `PairPotential` (with an analytic derivative) or any elementwise
            callable. With the 'jax' backend it must be written with
            operators or `jax.numpy` functions and be hashable.
        backend (Literal['numpy', 'jax']): The computational backend. 'numpy'
            is the default; 'jax' computes forces with automatic
            differentiation and compiles the whole simulation loop. Selecting it
            imports `pairdyn.dynamics_jax`, which enables `jax_enable_x64`
            process-wide.
        force_method (Literal['auto', 'analytic', 'numeric']): How the NumPy
            backend obtains forces. Ignored by the JAX backend.
    """

    potential: Callable[[Any], Any]
    backend: Literal["numpy", "jax"] = "numpy"
    force_method: Literal["auto", "analytic", "numeric"] = "auto"

    _potential_impl: Callable[..., Any] = field(init=False, repr=False)
    _force_impl: Callable[..., Any] = field(init=False, repr=False)
    _simulate_impl: Callable[..., Any] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Validates the settings and dynamically binds the backend."""
        if not callable(self.potential):
            raise InvalidParameterError(
                f"potential must be callable, but received {self.potential!r}."
            )

        if self.backend == "jax":
            try:
                from ..dynamics_jax import (
                    force_field_jax,
                    simulate_jax,
                    total_potential_jax,
                )
            except ImportError as e:
                raise ImportError(
                    "Could not load the JAX backend. Please ensure JAX is "
                    "installed: `pip install 'jax[cpu]'` or `pip install "
                    "'jax[cuda]'` (for GPU)."
                ) from e
            self._potential_impl = lambda x: float(
                total_potential_jax(self.potential, np.asarray(x, dtype=float))
            )
            self._force_impl = lambda x: np.asarray(force_field_jax(self.potential, x))
            self._simulate_impl = self._simulate_jax(simulate_jax)
        elif self.backend == "numpy":
            from ..dynamics.force import pair_force_fn
            from ..dynamics.potential import total_potential
            from ..dynamics.solvers import run

            force_fn = pair_force_fn(self.potential, method=self.force_method)
            self._potential_impl = lambda x: total_potential(self.potential, x)
            self._force_impl = force_fn
            self._simulate_impl = self._simulate_numpy(run)
        else:
            raise ValueError(
                f"Unsupported backend: '{self.backend}'. Please choose "
                "'numpy' or 'jax'."
            )

    def _simulate_numpy(self, run: Callable[..., Any]) -> Callable[..., Any]:
        def simulate(state: ParticleState, config: SimulationConfig) -> Any:
            return run(
                self._force_impl,
                config.dt,
                config.n_steps,
                state.positions,
                state.velocities,
                config.integrator,
                record=config.record,
                record_every=config.record_every,
                potential_fn=self._potential_impl,
                check_finite=config.check_finite,
            )

        return simulate

    def _simulate_jax(self, simulate_jax: Callable[..., Any]) -> Callable[..., Any]:
        def simulate(state: ParticleState, config: SimulationConfig) -> Any:
            return simulate_jax(
                self.potential,
                config.dt,
                config.n_steps,
                state.positions,
                state.velocities,
                config.integrator,
                record=config.record,
                record_every=config.record_every,
                check_finite=config.check_finite,
            )

        return simulate

    # --- Energies and forces ---

    def total_potential(self, positions: ArrayLike) -> float:
        """Total pair potential of a configuration."""
        return self._potential_impl(positions)

    def forces(self, positions: ArrayLike) -> NDArray[np.float64]:
        """Force on every particle, same shape as positions."""
        return np.asarray(self._force_impl(positions))

    @property
    def force_fn(self) -> Callable[[Any], Any]:
        """The bound force callable `x -> F(x)` of this system."""
        return self._force_impl

    def kinetic_energy(self, state: ParticleState) -> float:
        """Kinetic energy of a state (unit masses)."""
        v = np.asarray(state.velocities, dtype=float)
        return float(0.5 * np.sum(v * v))

    def total_energy(self, state: ParticleState) -> float:
        """Kinetic plus potential energy of a state."""
        return self.kinetic_energy(state) + self.total_potential(state.positions)

    def energies(self, trajectory: "Trajectory") -> NDArray[np.float64]:
        """Total energy of every frame of a trajectory."""
        if trajectory.potential_energy is not None:
            return trajectory.total_energy
        potential = np.array([self.total_potential(x) for x in trajectory.positions])
        return trajectory.kinetic_energy + potential

    # --- Simulation ---

    def simulate(
        self,
        state: ParticleState,
        config: Optional[SimulationConfig] = None,
        **overrides: Any,
    ) -> SimulationResult:
        """Simulates the system from an initial state.

        Args:
            state (ParticleState): The initial positions and velocities.
            config (SimulationConfig, optional): The run parameters. May be
                omitted if at least `dt` and `n_steps` are given as overrides.
            **overrides: Individual `SimulationConfig` fields (e.g. `dt`,
                `n_steps`, `integrator`, `record`) that replace those of
                `config`.

        Returns:
            ParticleState | Trajectory: The final state, or the trajectory if
                recording was requested.
        """
        run_config = self._resolve_config(config, overrides)
        return self._simulate_impl(state, run_config)

    def simulate_ensemble(
        self,
        states: Sequence[ParticleState],
        config: Optional[SimulationConfig] = None,
        n_jobs: int = -1,
        **overrides: Any,
    ) -> List[SimulationResult]:
        """Simulates many independent initial states in parallel.

        Each member runs sequentially; parallelism is only across members, so
        every result is identical to a standalone `simulate` call.

        Args:
            states (Sequence[ParticleState]): The initial states.
            config (SimulationConfig, optional): The shared run parameters.
            n_jobs (int): The number of CPU cores to use for parallel
                execution. -1 means using all available cores.
            **overrides: Individual `SimulationConfig` fields.

        Returns:
            List[ParticleState | Trajectory]: One result per state, in input
                order.
        """
        run_config = self._resolve_config(config, overrides)
        if n_jobs == -1:
            n_jobs = os.cpu_count() or 1
        results = Parallel(n_jobs=n_jobs)(
            delayed(self._simulate_impl)(state, run_config) for state in states
        )
        return list(results)

    @staticmethod
    def _resolve_config(
        config: Optional[SimulationConfig], overrides: dict
    ) -> SimulationConfig:
        if config is None:
            return SimulationConfig.from_dict(overrides)
        if overrides:
            return config.replace(**overrides)
        return config

    def __repr__(self) -> str:
        return (
            f"ParticleSystem(potential={self.potential!r}, backend='{self.backend}', "
            f"force_method='{self.force_method}')"
        )
