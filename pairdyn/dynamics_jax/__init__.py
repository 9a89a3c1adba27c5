# pairdyn/dynamics_jax/__init__.py
"""
pairdyn.dynamics_jax

JAX backend: autodiff forces and a JIT-compiled simulation loop.

Importing this package sets `jax_enable_x64` for the whole process, so any
other JAX code in the same interpreter also defaults to 64-bit arrays.
"""
import jax

# Energy conservation checks need double precision.
jax.config.update("jax_enable_x64", True)

from .force_jax import force_field_jax, make_force_fn_jax  # noqa: E402
from .potential_jax import total_potential_jax  # noqa: E402
from .solvers_jax import simulate_jax  # noqa: E402

__all__ = ["total_potential_jax", "force_field_jax", "make_force_fn_jax", "simulate_jax"]
