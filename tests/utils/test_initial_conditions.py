import pytest
import numpy as np
from scipy.spatial.distance import pdist
from pairdyn.core.exceptions import InvalidParameterError
from pairdyn.utils import lattice_positions, random_positions, random_state

@pytest.mark.core
@pytest.mark.parametrize("sampling", ["uniform", "sobol"])
def test_random_positions_shape_and_bounds(sampling):
    positions = random_positions(6, dimension=2, box=(-2.0, 3.0), sampling=sampling, seed=1)
    assert positions.shape == (2, 6)
    assert np.all(positions >= -2.0)
    assert np.all(positions <= 3.0)

@pytest.mark.core
def test_random_positions_is_reproducible_with_seed():
    np.testing.assert_array_equal(random_positions(5, seed=42), random_positions(5, seed=42))

@pytest.mark.core
def test_random_positions_respects_min_separation():
    positions = random_positions(8, dimension=2, box=10.0, min_separation=1.0, seed=3)
    assert pdist(positions.T).min() >= 1.0

@pytest.mark.core
def test_random_positions_warns_when_separation_is_impossible():
    with pytest.warns(UserWarning, match="minimum separation"):
        positions = random_positions(30, dimension=1, box=1.0, min_separation=0.5,
                                     seed=0, max_attempts=3)
    assert positions.shape == (1, 30)

@pytest.mark.validation
def test_random_positions_invalid_inputs():
    with pytest.raises(InvalidParameterError, match="Unsupported sampling"):
        random_positions(3, sampling="halton")
    with pytest.raises(InvalidParameterError, match="non-empty interval"):
        random_positions(3, box=(1.0, 1.0))
    with pytest.raises(InvalidParameterError, match="must be positive"):
        random_positions(0)

@pytest.mark.core
def test_random_state_starts_at_rest():
    state = random_state(4, dimension=3, seed=5)
    assert state.positions.shape == (3, 4)
    assert np.all(state.velocities == 0.0)

@pytest.mark.core
def test_lattice_positions():
    positions = lattice_positions([2, 3], spacing=0.5)
    assert positions.shape == (2, 6)
    assert pdist(positions.T).min() == pytest.approx(0.5)
    jittered = lattice_positions([2, 3], spacing=0.5, jitter=0.01, seed=0)
    assert not np.array_equal(positions, jittered)
