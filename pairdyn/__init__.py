# pairdyn/__init__.py
"""
pairdyn

Time stepping for point particles interacting through a pairwise radial
potential: potential and force evaluation, explicit Euler and velocity Verlet
integrators, and a fixed-step simulation loop with trajectory recording.
"""
__version__ = "1.0.0"

# 1. Core objects - the state, the physics and the run parameters
from .core import (
    InvalidParameterError,
    PairdynError,
    ParticleState,
    ParticleSystem,
    ShapeMismatchError,
    SimulationConfig,
    SingularConfigurationError,
)

# 2. Pair potentials
from .potentials import (
    HarmonicPotential,
    LennardJonesPotential,
    MorsePotential,
    PairPotential,
    get_potential,
)

# 3. The NumPy engine
from .dynamics import (
    EulerIntegrator,
    Trajectory,
    VerletIntegrator,
    force_field,
    get_integrator,
    make_force_fn,
    run,
    total_potential,
)

# 4. Helpers and workflows
from .utils import random_positions, random_state
from .workflows import compare_integrators

__all__ = [
    # === Core objects ===
    "ParticleState",
    "ParticleSystem",
    "SimulationConfig",
    "Trajectory",
    # === Potentials ===
    "PairPotential",
    "HarmonicPotential",
    "LennardJonesPotential",
    "MorsePotential",
    "get_potential",
    # === Engine ===
    "total_potential",
    "force_field",
    "make_force_fn",
    "EulerIntegrator",
    "VerletIntegrator",
    "get_integrator",
    "run",
    # === Helpers & workflows ===
    "random_positions",
    "random_state",
    "compare_integrators",
    # === Errors ===
    "PairdynError",
    "ShapeMismatchError",
    "InvalidParameterError",
    "SingularConfigurationError",
]
