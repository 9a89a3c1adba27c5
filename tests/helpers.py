from typing import Tuple
import numpy as np
from pairdyn.core.state import ParticleState
from pairdyn.core.system import ParticleSystem
from pairdyn.potentials import HarmonicPotential, LennardJonesPotential
def two_body_line(separation: float = 2.0, speed: float = 0.0) -> ParticleState:
    """Two particles on a line, symmetric about the origin, moving apart at `speed`."""
    half = separation / 2.0
    return ParticleState(np.array([-half, half]), np.array([-speed, speed]))
def two_body_orbit(speed: float = 1.0) -> ParticleState:
    """Two particles at (-1, 0) and (1, 0) with equal and opposite vertical velocities."""
    positions = np.array([[-1.0, 1.0], [0.0, 0.0]])
    velocities = np.array([[0.0, 0.0], [-speed, speed]])
    return ParticleState(positions, velocities)
def harmonic_system(a: float = 1.0, k: float = 1.0, backend: str = 'numpy', force_method: str = 'auto') -> ParticleSystem:
    return ParticleSystem(HarmonicPotential(a=a, k=k), backend=backend, force_method=force_method)
def lj_cluster(n_particles: int = 5, seed: int = 7) -> Tuple[LennardJonesPotential, np.ndarray]:
    """A small 2-D Lennard-Jones configuration with no close contacts."""
    rng = np.random.default_rng(seed)
    grid = np.stack(np.meshgrid(np.arange(3), np.arange(2), indexing='ij')).reshape(2, -1)[:, :n_particles]
    positions = 1.2 * grid + rng.normal(scale=0.05, size=(2, n_particles))
    return LennardJonesPotential(epsilon=1.0, sigma=1.0), positions
