# pairdyn/core/config.py
"""The SimulationConfig class, the run parameters of a simulation."""
from __future__ import annotations

import math
import numbers
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Mapping

from .exceptions import InvalidParameterError

INTEGRATOR_NAMES = ("euler", "verlet")


def validate_run_parameters(dt: Any, n_steps: Any, record_every: Any = 1) -> None:
    """Rejects non-positive timesteps, negative step counts and bad strides.

    Raises:
        InvalidParameterError: If any parameter is outside of its valid range.
    """
    if isinstance(dt, bool) or not isinstance(dt, numbers.Real):
        raise InvalidParameterError(f"dt must be a real number, but received {dt!r}.")
    if not math.isfinite(dt) or dt <= 0:
        raise InvalidParameterError(
            f"dt must be positive and finite, but received {dt}."
        )
    if isinstance(n_steps, bool) or not isinstance(n_steps, numbers.Integral):
        raise InvalidParameterError(
            f"n_steps must be an integer, but received {n_steps!r}."
        )
    if n_steps < 0:
        raise InvalidParameterError(
            f"n_steps must be non-negative, but received {n_steps}."
        )
    if (
        isinstance(record_every, bool)
        or not isinstance(record_every, numbers.Integral)
        or record_every < 1
    ):
        raise InvalidParameterError(
            f"record_every must be a positive integer, but received {record_every!r}."
        )


@dataclass
class SimulationConfig:
    """Run parameters of a fixed-step simulation.

    Attributes:
        dt (float): The timestep. Must be positive.
        n_steps (int): Exact number of steps to perform. Must be non-negative.
        integrator (str): 'euler' or 'verlet'. Defaults to 'verlet'.
        record (bool): If True, the run returns a full `Trajectory` instead of
            only the final state. Defaults to False.
        record_every (int): Stride between recorded frames. The initial and
            the final state are always recorded. Defaults to 1.
        check_finite (bool): If True, a NaN or Inf force or state aborts the
            run with a `SingularConfigurationError`. Defaults to True.
    """

    dt: float
    n_steps: int
    integrator: str = "verlet"
    record: bool = False
    record_every: int = 1
    check_finite: bool = True

    def __post_init__(self) -> None:
        validate_run_parameters(self.dt, self.n_steps, self.record_every)
        self.integrator = str(self.integrator).lower()
        if self.integrator not in INTEGRATOR_NAMES:
            raise InvalidParameterError(
                f"Unsupported integrator: '{self.integrator}'. Please choose "
                "'euler' or 'verlet'."
            )

    @classmethod
    def from_dict(cls, mapping: Mapping[str, Any]) -> SimulationConfig:
        """Builds a config from a plain mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(mapping) - known)
        if unknown:
            raise InvalidParameterError(
                f"Unknown simulation parameter(s) {unknown}. Valid keys are "
                f"{sorted(known)}."
            )
        missing = [name for name in ("dt", "n_steps") if name not in mapping]
        if missing:
            raise InvalidParameterError(
                f"Missing required simulation parameter(s) {missing}."
            )
        return cls(**dict(mapping))

    def replace(self, **overrides: Any) -> SimulationConfig:
        """Returns a copy with some parameters overridden (and re-validated)."""
        values: Dict[str, Any] = asdict(self)
        values.update(overrides)
        return SimulationConfig.from_dict(values)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
