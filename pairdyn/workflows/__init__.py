"""
pairdyn.workflows

High-level analysis recipes built on the core objects.
"""

from .energy import EnergyReport, best_integrator, compare_integrators, relative_energy_drift

__all__ = ["compare_integrators", "best_integrator", "relative_energy_drift", "EnergyReport"]
