# pairdyn/dynamics/integrators.py
"""Time-stepping schemes for Newtonian particle dynamics (unit masses).

Both integrators are stateless and interchangeable. They share the contract

    step(force_fn, dt, x, v) -> (x_next, v_next)

and rely on nothing but elementwise arithmetic, so the same step works for a
scalar single-particle state and for a `(d, N)` multi-particle state.

Each integrator also offers `advance(force_fn, dt, x, v, f)`, which takes the
force already known at `x` and returns the force at `x_next` as a third
element. The simulation loop threads that force from one step to the next, so
velocity Verlet costs one force evaluation per step instead of two.

Available integrators:
- EulerIntegrator: explicit (forward) Euler, first order, not symplectic. Its
  total energy drifts over long runs; this is expected.
- VerletIntegrator: velocity Verlet, second order and symplectic. Its total
  energy oscillates within a bounded band.
"""
from typing import Any, Callable, Dict, Tuple, Type, Union

from ..core.exceptions import InvalidParameterError

ForceFn = Callable[[Any], Any]


class Integrator:
    """Base class for the step functions."""

    name: str = ""

    def step(self, force_fn: ForceFn, dt: float, x: Any, v: Any) -> Tuple[Any, Any]:
        x_next, v_next, _ = self.advance(force_fn, dt, x, v, force_fn(x))
        return x_next, v_next

    def advance(
        self, force_fn: ForceFn, dt: float, x: Any, v: Any, f: Any
    ) -> Tuple[Any, Any, Any]:
        raise NotImplementedError

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other)

    def __hash__(self) -> int:
        # Stateless: all instances of one class are interchangeable.
        return hash(type(self))

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class EulerIntegrator(Integrator):
    """Explicit Euler: x' = x + v dt, v' = v + F(x) dt."""

    name = "euler"

    def step(self, force_fn: ForceFn, dt: float, x: Any, v: Any) -> Tuple[Any, Any]:
        x_next = x + v * dt
        v_next = v + force_fn(x) * dt
        return x_next, v_next

    def advance(
        self, force_fn: ForceFn, dt: float, x: Any, v: Any, f: Any
    ) -> Tuple[Any, Any, Any]:
        x_next = x + v * dt
        v_next = v + f * dt
        return x_next, v_next, force_fn(x_next)


class VerletIntegrator(Integrator):
    """Velocity Verlet.

    x' = x + v dt + F(x) / 2 dt^2
    v' = v + (F(x) + F(x')) / 2 dt
    """

    name = "verlet"

    def advance(
        self, force_fn: ForceFn, dt: float, x: Any, v: Any, f: Any
    ) -> Tuple[Any, Any, Any]:
        x_next = x + v * dt + f / 2 * dt**2
        f_next = force_fn(x_next)
        v_next = v + (f + f_next) / 2 * dt
        return x_next, v_next, f_next


def euler_step(force_fn: ForceFn, dt: float, x: Any, v: Any) -> Tuple[Any, Any]:
    """Advances (x, v) by one explicit Euler step."""
    return EulerIntegrator().step(force_fn, dt, x, v)


def verlet_step(force_fn: ForceFn, dt: float, x: Any, v: Any) -> Tuple[Any, Any]:
    """Advances (x, v) by one velocity Verlet step."""
    return VerletIntegrator().step(force_fn, dt, x, v)


INTEGRATORS: Dict[str, Type[Integrator]] = {
    "euler": EulerIntegrator,
    "verlet": VerletIntegrator,
}


def get_integrator(integrator: Union[str, Integrator]) -> Integrator:
    """Resolves an integrator name ('euler' or 'verlet') to an instance."""
    if isinstance(integrator, Integrator):
        return integrator
    key = str(integrator).lower()
    if key not in INTEGRATORS:
        raise InvalidParameterError(
            f"Unsupported integrator: '{integrator}'. Please choose "
            f"{' or '.join(repr(k) for k in INTEGRATORS)}."
        )
    return INTEGRATORS[key]()
