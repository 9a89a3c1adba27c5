"""
Unit tests for the SimulationConfig class in pairdyn.core.config.
"""
import pytest
import numpy as np

from pairdyn.core.config import SimulationConfig
from pairdyn.core.exceptions import InvalidParameterError


@pytest.mark.core
def test_config_defaults():
    config = SimulationConfig(dt=0.01, n_steps=100)
    assert config.integrator == "verlet"
    assert config.record is False
    assert config.record_every == 1
    assert config.check_finite is True


@pytest.mark.core
def test_config_normalizes_integrator_name():
    config = SimulationConfig(dt=0.1, n_steps=1, integrator="Euler")
    assert config.integrator == "euler"


@pytest.mark.core
def test_config_accepts_numpy_numbers():
    config = SimulationConfig(dt=np.float64(0.1), n_steps=np.int64(3))
    assert config.n_steps == 3


@pytest.mark.validation
@pytest.mark.parametrize("kwargs, expected_error", [
    ({"dt": 0.0, "n_steps": 1}, "dt must be positive"),
    ({"dt": -0.1, "n_steps": 1}, "dt must be positive"),
    ({"dt": float("nan"), "n_steps": 1}, "dt must be positive"),
    ({"dt": float("inf"), "n_steps": 1}, "dt must be positive"),
    ({"dt": "0.1", "n_steps": 1}, "dt must be a real number"),
    ({"dt": 0.1, "n_steps": -1}, "n_steps must be non-negative"),
    ({"dt": 0.1, "n_steps": 2.5}, "n_steps must be an integer"),
    ({"dt": 0.1, "n_steps": True}, "n_steps must be an integer"),
    ({"dt": 0.1, "n_steps": 1, "record_every": 0}, "record_every must be a positive integer"),
    ({"dt": 0.1, "n_steps": 1, "integrator": "rk4"}, "Unsupported integrator"),
])
def test_config_validation(kwargs, expected_error):
    with pytest.raises(InvalidParameterError, match=expected_error):
        SimulationConfig(**kwargs)


@pytest.mark.core
def test_config_from_dict_round_trip():
    config = SimulationConfig(dt=0.05, n_steps=10, integrator="euler", record=True)
    assert SimulationConfig.from_dict(config.to_dict()) == config


@pytest.mark.validation
def test_config_from_dict_rejects_unknown_keys():
    with pytest.raises(InvalidParameterError, match="Unknown simulation parameter"):
        SimulationConfig.from_dict({"dt": 0.1, "n_steps": 1, "timestep": 0.1})


@pytest.mark.validation
def test_config_from_dict_requires_dt_and_n_steps():
    with pytest.raises(InvalidParameterError, match="Missing required"):
        SimulationConfig.from_dict({"integrator": "euler"})


@pytest.mark.core
def test_config_replace_revalidates():
    config = SimulationConfig(dt=0.1, n_steps=5)
    assert config.replace(n_steps=7).n_steps == 7
    assert config.n_steps == 5
    with pytest.raises(InvalidParameterError):
        config.replace(dt=-1.0)
