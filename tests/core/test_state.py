"""
Unit tests for the ParticleState class in pairdyn.core.state.
"""
import pytest
import numpy as np

from pairdyn.core.exceptions import ShapeMismatchError
from pairdyn.core.state import ParticleState, check_same_shape


@pytest.mark.core
@pytest.mark.parametrize("positions, n_particles, dimension", [
    (1.5, 1, 1),
    (np.array([0.0, 1.0, 2.0]), 3, 1),
    (np.zeros((2, 4)), 4, 2),
    (np.zeros((3, 2)), 2, 3),
])
def test_state_shape_properties(positions, n_particles, dimension):
    state = ParticleState.at_rest(positions)
    assert state.n_particles == n_particles
    assert state.dimension == dimension
    assert np.all(state.velocities == 0)
    assert state.shape == np.shape(positions)


@pytest.mark.core
def test_state_keeps_python_scalars():
    state = ParticleState(1.0, -0.5)
    assert isinstance(state.positions, float)
    assert isinstance(state.velocities, float)
    assert state.is_finite()


@pytest.mark.core
def test_state_converts_lists_to_float_arrays():
    state = ParticleState([[0, 1]], [[2, 3]])
    assert state.positions.dtype == np.float64
    assert state.positions.shape == (1, 2)


@pytest.mark.core
def test_state_is_immutable():
    state = ParticleState.at_rest([0.0, 1.0])
    with pytest.raises(AttributeError):
        state.positions = np.zeros(2)


@pytest.mark.validation
@pytest.mark.parametrize("positions, velocities", [
    (np.zeros(2), np.zeros(3)),
    (np.zeros((1, 2)), np.zeros(2)),  # broadcastable, still rejected
    (np.zeros((2, 3)), np.zeros((3, 2))),
    (0.0, np.zeros(1)),
])
def test_state_rejects_shape_mismatch(positions, velocities):
    with pytest.raises(ShapeMismatchError, match="must be identical"):
        ParticleState(positions, velocities)


@pytest.mark.validation
def test_shape_mismatch_is_a_value_error():
    with pytest.raises(ValueError):
        check_same_shape(np.zeros(2), np.zeros(4))


@pytest.mark.core
def test_state_detects_non_finite_values():
    state = ParticleState(np.array([0.0, np.nan]), np.zeros(2))
    assert not state.is_finite()
