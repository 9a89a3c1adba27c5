"""
pairdyn.utils

Initial-condition builders and backend helpers.
"""

from .backend import JAX_AVAILABLE, array_module
from .initial_conditions import lattice_positions, random_positions, random_state

__all__ = [
    "random_positions",
    "random_state",
    "lattice_positions",
    "array_module",
    "JAX_AVAILABLE",
]
