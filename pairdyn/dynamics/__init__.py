"""
pairdyn.dynamics

NumPy engine: pairwise potential, force field, integrators and the
simulation loop.
"""

from .force import force_field, make_force_fn, pair_force_fn
from .integrators import (
    EulerIntegrator,
    Integrator,
    VerletIntegrator,
    euler_step,
    get_integrator,
    verlet_step,
)
from .potential import pair_distances, total_potential
from .solvers import TrajectorySimulator, run
from .trajectory import Trajectory

__all__ = [
    "total_potential",
    "pair_distances",
    "force_field",
    "pair_force_fn",
    "make_force_fn",
    "Integrator",
    "EulerIntegrator",
    "VerletIntegrator",
    "euler_step",
    "verlet_step",
    "get_integrator",
    "run",
    "TrajectorySimulator",
    "Trajectory",
]
