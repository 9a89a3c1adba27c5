"""
pairdyn.potentials

Radial pair potentials with analytic derivatives.
"""

from .pairwise import (
    POTENTIALS,
    HarmonicPotential,
    LennardJonesPotential,
    MorsePotential,
    PairPotential,
    get_potential,
)

__all__ = [
    "PairPotential",
    "HarmonicPotential",
    "LennardJonesPotential",
    "MorsePotential",
    "POTENTIALS",
    "get_potential",
]
