import pytest
import numpy as np
from pairdyn.core.exceptions import InvalidParameterError
from pairdyn.potentials import (
    HarmonicPotential,
    LennardJonesPotential,
    MorsePotential,
    get_potential,
)

R_VALUES = np.linspace(0.8, 3.0, 12)
POTENTIALS = [
    HarmonicPotential(a=1.0, k=2.5),
    LennardJonesPotential(epsilon=0.7, sigma=1.1),
    MorsePotential(depth=1.3, alpha=1.7, r0=1.2),
]

@pytest.mark.consistency
@pytest.mark.parametrize("potential", POTENTIALS)
def test_derivative_matches_central_difference(potential):
    h = 1e-6
    numeric = (potential(R_VALUES + h) - potential(R_VALUES - h)) / (2 * h)
    np.testing.assert_allclose(potential.derivative(R_VALUES), numeric, rtol=1e-6, atol=1e-7)

@pytest.mark.core
def test_harmonic_closed_form():
    potential = HarmonicPotential(a=0.5)
    assert potential(2.5) == pytest.approx(4.0)
    assert potential.derivative(2.5) == pytest.approx(4.0)
    assert potential(0.5) == 0.0

@pytest.mark.core
def test_lennard_jones_minimum_and_zero_crossing():
    lj = LennardJonesPotential(epsilon=2.0, sigma=1.0)
    assert lj(1.0) == pytest.approx(0.0)
    assert lj(lj.r_min) == pytest.approx(-2.0)
    assert lj.derivative(lj.r_min) == pytest.approx(0.0, abs=1e-12)

@pytest.mark.core
def test_morse_well_depth():
    morse = MorsePotential(depth=1.5, alpha=2.0, r0=1.0)
    assert morse(1.0) == pytest.approx(-1.5)
    assert morse(50.0) == pytest.approx(0.0, abs=1e-12)

@pytest.mark.core
def test_lennard_jones_is_singular_at_zero():
    lj = LennardJonesPotential()
    with np.errstate(divide="ignore", invalid="ignore"):
        value = lj(np.array([0.0]))
    assert not np.isfinite(value).all()

@pytest.mark.core
def test_potentials_are_hashable_and_comparable():
    assert HarmonicPotential(a=1.0) == HarmonicPotential(a=1.0)
    assert hash(HarmonicPotential(a=1.0)) == hash(HarmonicPotential(a=1.0))
    assert HarmonicPotential(a=1.0) != HarmonicPotential(a=2.0)

@pytest.mark.core
@pytest.mark.parametrize("name, cls", [
    ("harmonic", HarmonicPotential),
    ("lennard-jones", LennardJonesPotential),
    ("Morse", MorsePotential),
])
def test_get_potential_by_name(name, cls):
    assert isinstance(get_potential(name), cls)

@pytest.mark.validation
def test_get_potential_unknown_name():
    with pytest.raises(InvalidParameterError, match="Unknown potential"):
        get_potential("yukawa")

@pytest.mark.validation
def test_lennard_jones_rejects_non_positive_sigma():
    with pytest.raises(InvalidParameterError, match="sigma must be positive"):
        LennardJonesPotential(sigma=0.0)
