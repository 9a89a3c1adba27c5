# pairdyn/utils/backend.py
"""Helpers for choosing between the NumPy and JAX array namespaces."""
from typing import Any

import numpy as np

try:
    import jax
    import jax.numpy as jnp

    JAX_AVAILABLE = True
except (ImportError, ModuleNotFoundError):
    jax = None
    jnp = None
    JAX_AVAILABLE = False


def array_module(x: Any) -> Any:
    """Returns `jax.numpy` for JAX arrays and tracers, `numpy` otherwise."""
    if JAX_AVAILABLE and isinstance(x, jax.Array):
        return jnp
    return np

