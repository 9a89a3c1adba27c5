# pairdyn/potentials/pairwise.py
"""Radial pair potentials V(r).

Every potential in this module is an immutable dataclass that can be called on
a distance (scalar, NumPy array or JAX array) to obtain the pair energy, and
exposes `derivative(r)` returning dV/dr. The arithmetic is elementwise, so the
same object can be handed to the NumPy backend (which uses `derivative` for
analytic forces) or to the JAX backend (which differentiates `__call__`
directly).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..core.exceptions import InvalidParameterError
from ..utils.backend import array_module


@dataclass(frozen=True)
class PairPotential:
    """Base class for radial pair potentials."""

    def __call__(self, r: Any) -> Any:
        raise NotImplementedError

    def derivative(self, r: Any) -> Any:
        """Returns dV/dr evaluated at distance r."""
        raise NotImplementedError


@dataclass(frozen=True)
class HarmonicPotential(PairPotential):
    """A spring between two particles: V(r) = k * (r - a)^2.

    Attributes:
        a (float): The rest length of the spring.
        k (float): The spring constant. Defaults to 1.0, giving the plain
            (r - a)^2 form.
    """

    a: float = 0.0
    k: float = 1.0

    def __call__(self, r: Any) -> Any:
        return self.k * (r - self.a) ** 2

    def derivative(self, r: Any) -> Any:
        return 2.0 * self.k * (r - self.a)


@dataclass(frozen=True)
class LennardJonesPotential(PairPotential):
    """The 12-6 Lennard-Jones potential.

    V(r) = 4 * epsilon * ((sigma / r)^12 - (sigma / r)^6)

    The potential is singular at r = 0; evaluating it there yields inf/nan,
    which is left for the caller to detect.

    Attributes:
        epsilon (float): Depth of the potential well.
        sigma (float): Distance at which the potential crosses zero. The
            minimum sits at r = 2^(1/6) * sigma.
    """

    epsilon: float = 1.0
    sigma: float = 1.0

    def __post_init__(self) -> None:
        if self.sigma <= 0:
            raise InvalidParameterError(
                f"sigma must be positive, but received {self.sigma}."
            )

    def __call__(self, r: Any) -> Any:
        sr6 = (self.sigma / r) ** 6
        return 4.0 * self.epsilon * (sr6 * sr6 - sr6)

    def derivative(self, r: Any) -> Any:
        sr6 = (self.sigma / r) ** 6
        return -24.0 * self.epsilon * (2.0 * sr6 * sr6 - sr6) / r

    @property
    def r_min(self) -> float:
        """Location of the potential minimum."""
        return 2.0 ** (1.0 / 6.0) * self.sigma


@dataclass(frozen=True)
class MorsePotential(PairPotential):
    """The Morse potential V(r) = D * (1 - exp(-alpha * (r - r0)))^2 - D.

    It is shifted so that V(r0) = -D and V(inf) = 0.

    Attributes:
        depth (float): Well depth D.
        alpha (float): Controls the width of the well.
        r0 (float): Equilibrium distance.
    """

    depth: float = 1.0
    alpha: float = 1.0
    r0: float = 1.0

    def __call__(self, r: Any) -> Any:
        xp = array_module(r)
        decay = xp.exp(-self.alpha * (r - self.r0))
        return self.depth * (1.0 - decay) ** 2 - self.depth

    def derivative(self, r: Any) -> Any:
        xp = array_module(r)
        decay = xp.exp(-self.alpha * (r - self.r0))
        return 2.0 * self.depth * self.alpha * decay * (1.0 - decay)


POTENTIALS = {
    "harmonic": HarmonicPotential,
    "lennard_jones": LennardJonesPotential,
    "morse": MorsePotential,
}


def get_potential(name: str, **params: float) -> PairPotential:
    """Builds a pair potential by name (e.g. 'harmonic', 'lennard_jones')."""
    key = name.lower().replace("-", "_")
    if key not in POTENTIALS:
        raise InvalidParameterError(
            f"Unknown potential '{name}'. Available: {sorted(POTENTIALS)}."
        )
    return POTENTIALS[key](**params)
