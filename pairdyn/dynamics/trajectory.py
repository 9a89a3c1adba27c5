# pairdyn/dynamics/trajectory.py
"""Recorded simulation output.

A `Trajectory` holds pre-sized arrays of snapshots. `TrajectoryRecorder`
fills them during a run. The recorder allocates every buffer up front from
the known step count, so recording never reallocates inside the loop.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional, Tuple

import numpy as np
from numpy.typing import NDArray

from ..core.state import ParticleState
from .potential import as_columns

if TYPE_CHECKING:
    import pandas as pd


def recorded_steps(n_steps: int, record_every: int) -> NDArray[np.int64]:
    """Step indices that get a snapshot: 0, every `record_every`-th, and the last."""
    steps = np.arange(0, n_steps + 1, record_every, dtype=np.int64)
    if steps[-1] != n_steps:
        steps = np.append(steps, np.int64(n_steps))
    return steps


@dataclass
class Trajectory:
    """An ordered sequence of recorded states.

    Attributes:
        steps (NDArray[np.int64]): Step index of every frame, shape `(F,)`.
        times (NDArray[np.float64]): Simulation time of every frame, shape `(F,)`.
        positions (NDArray[np.float64]): Positions, shape `(F, *state_shape)`.
        velocities (NDArray[np.float64]): Velocities, shape `(F, *state_shape)`.
        potential_energy (Optional[NDArray[np.float64]]): Total potential at
            every frame, shape `(F,)`, or None if no potential was supplied.
        dt (float): The timestep of the run.
        integrator (str): Name of the integrator that produced the frames.
    """

    steps: NDArray[np.int64]
    times: NDArray[np.float64]
    positions: NDArray[np.float64]
    velocities: NDArray[np.float64]
    potential_energy: Optional[NDArray[np.float64]]
    dt: float
    integrator: str

    def __len__(self) -> int:
        return len(self.times)

    def __getitem__(self, frame: int) -> ParticleState:
        return self.state(frame)

    def state(self, frame: int) -> ParticleState:
        """Returns the recorded state at a given frame index."""
        return ParticleState(self.positions[frame], self.velocities[frame])

    @property
    def initial_state(self) -> ParticleState:
        return self.state(0)

    @property
    def final_state(self) -> ParticleState:
        return self.state(-1)

    @property
    def kinetic_energy(self) -> NDArray[np.float64]:
        """Kinetic energy (unit masses) of every frame."""
        n_frames = len(self.times)
        v = self.velocities.reshape(n_frames, -1)
        return 0.5 * np.sum(v * v, axis=1)

    @property
    def total_energy(self) -> NDArray[np.float64]:
        """Kinetic plus potential energy of every frame.

        Raises:
            ValueError: If the trajectory was recorded without a potential.
        """
        if self.potential_energy is None:
            raise ValueError(
                "This trajectory was recorded without a potential; pass "
                "`potential_fn` to the simulation to record potential energies."
            )
        return self.kinetic_energy + self.potential_energy

    def to_dataframe(self) -> "pd.DataFrame":
        """Flattens the trajectory into a long-format DataFrame.

        One row per (frame, particle), with columns `step`, `time`,
        `particle`, `x0..x{d-1}`, `v0..v{d-1}` and, when recorded,
        `potential_energy` (the total potential of the frame).
        """
        import pandas as pd

        n_frames = len(self.times)
        x_frames = np.stack([as_columns(x) for x in self.positions])
        v_frames = np.stack([as_columns(v) for v in self.velocities])
        _, dimension, n_particles = x_frames.shape

        data: Dict[str, Any] = {
            "step": np.repeat(self.steps, n_particles),
            "time": np.repeat(self.times, n_particles),
            "particle": np.tile(np.arange(n_particles), n_frames),
        }
        for axis in range(dimension):
            data[f"x{axis}"] = x_frames[:, axis, :].reshape(-1)
        for axis in range(dimension):
            data[f"v{axis}"] = v_frames[:, axis, :].reshape(-1)
        if self.potential_energy is not None:
            data["potential_energy"] = np.repeat(self.potential_energy, n_particles)
        return pd.DataFrame(data)

    def __repr__(self) -> str:
        return (
            f"Trajectory(frames={len(self)}, integrator='{self.integrator}', "
            f"dt={self.dt}, t_final={self.times[-1] if len(self) else 0.0})"
        )


class TrajectoryRecorder:
    """Fills the pre-sized buffers of a `Trajectory` during a run."""

    def __init__(
        self,
        n_steps: int,
        record_every: int,
        state_shape: Tuple[int, ...],
        dt: float,
        integrator: str,
        potential_fn: Optional[Callable[[Any], float]] = None,
    ):
        self.steps = recorded_steps(n_steps, record_every)
        n_frames = len(self.steps)
        self.record_every = record_every
        self.n_steps = n_steps
        self.dt = dt
        self.integrator = integrator
        self.potential_fn = potential_fn
        self.positions: NDArray[np.float64] = np.empty((n_frames, *state_shape))
        self.velocities: NDArray[np.float64] = np.empty((n_frames, *state_shape))
        self.potential_energy: Optional[NDArray[np.float64]] = (
            np.empty(n_frames) if potential_fn is not None else None
        )
        self._frame = 0

    def wants(self, step: int) -> bool:
        return step % self.record_every == 0 or step == self.n_steps

    def record(self, x: Any, v: Any) -> None:
        frame = self._frame
        self.positions[frame] = x
        self.velocities[frame] = v
        if self.potential_energy is not None:
            self.potential_energy[frame] = self.potential_fn(x)
        self._frame += 1

    def finish(self) -> Trajectory:
        return Trajectory(
            steps=self.steps,
            times=self.steps * self.dt,
            positions=self.positions,
            velocities=self.velocities,
            potential_energy=self.potential_energy,
            dt=self.dt,
            integrator=self.integrator,
        )
