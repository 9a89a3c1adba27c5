"""
pairdyn.core

Core data structures: particle state, run configuration, the particle
system and the exception hierarchy.
"""

from .config import SimulationConfig
from .exceptions import (
    InvalidParameterError,
    PairdynError,
    ShapeMismatchError,
    SingularConfigurationError,
)
from .state import ParticleState
from .system import ParticleSystem

__all__ = [
    "ParticleState",
    "ParticleSystem",
    "SimulationConfig",
    "PairdynError",
    "ShapeMismatchError",
    "InvalidParameterError",
    "SingularConfigurationError",
]
