# tests/dynamics/test_solvers.py
import pytest
import numpy as np
from pairdyn.core.config import SimulationConfig
from pairdyn.core.exceptions import (
    InvalidParameterError,
    ShapeMismatchError,
    SingularConfigurationError,
)
from pairdyn.core.state import ParticleState
from pairdyn.dynamics.force import pair_force_fn
from pairdyn.dynamics.integrators import VerletIntegrator, euler_step, verlet_step
from pairdyn.dynamics.potential import total_potential
from pairdyn.dynamics.solvers import TrajectorySimulator, run
from pairdyn.dynamics.trajectory import Trajectory
from pairdyn.potentials import HarmonicPotential, LennardJonesPotential

SPRING = HarmonicPotential(a=1.0)
FORCE_FN = pair_force_fn(SPRING)
X0 = np.array([[-1.0, 1.0], [0.0, 0.0]])
V0 = np.array([[0.0, 0.0], [-0.5, 0.5]])


@pytest.mark.core
@pytest.mark.parametrize("integrator, step", [("euler", euler_step), ("verlet", verlet_step)])
def test_run_matches_repeated_steps(integrator, step):
    x, v = X0, V0
    for _ in range(25):
        x, v = step(FORCE_FN, 0.02, x, v)
    final = run(FORCE_FN, 0.02, 25, X0, V0, integrator)
    assert isinstance(final, ParticleState)
    np.testing.assert_array_equal(final.positions, x)
    np.testing.assert_array_equal(final.velocities, v)


@pytest.mark.core
def test_run_zero_steps_returns_initial_state():
    final = run(FORCE_FN, 0.1, 0, X0, V0)
    np.testing.assert_array_equal(final.positions, X0)
    np.testing.assert_array_equal(final.velocities, V0)


@pytest.mark.core
def test_run_counts_force_evaluations():
    calls = []

    def counting_force(x):
        calls.append(1)
        return FORCE_FN(x)

    run(counting_force, 0.01, 40, X0, V0, VerletIntegrator())
    # One evaluation for the initial state, then one per step thanks to reuse
    assert len(calls) == 41


@pytest.mark.core
def test_run_accepts_scalar_state():
    final = run(lambda x: -x, 0.01, 100, 1.0, 0.0, "verlet")
    # Harmonic oscillator with omega = 1: x(t) = cos(t)
    assert final.positions == pytest.approx(np.cos(1.0), abs=1e-4)


@pytest.mark.core
def test_run_records_trajectory_frames():
    trajectory = run(FORCE_FN, 0.01, 10, X0, V0, record=True, record_every=3,
                     potential_fn=lambda x: total_potential(SPRING, x))
    assert isinstance(trajectory, Trajectory)
    np.testing.assert_array_equal(trajectory.steps, [0, 3, 6, 9, 10])
    np.testing.assert_allclose(trajectory.times, [0.0, 0.03, 0.06, 0.09, 0.1])
    assert trajectory.positions.shape == (5, 2, 2)
    np.testing.assert_array_equal(trajectory.positions[0], X0)

    final = run(FORCE_FN, 0.01, 10, X0, V0)
    np.testing.assert_array_equal(trajectory.final_state.positions, final.positions)
    assert trajectory.potential_energy[-1] == total_potential(SPRING, final.positions)


@pytest.mark.validation
@pytest.mark.parametrize("dt, n_steps", [(0.0, 10), (-0.01, 10), (0.01, -1)])
def test_run_rejects_invalid_parameters(dt, n_steps):
    with pytest.raises(InvalidParameterError):
        run(FORCE_FN, dt, n_steps, X0, V0)


@pytest.mark.validation
def test_run_rejects_shape_mismatch():
    with pytest.raises(ShapeMismatchError):
        run(FORCE_FN, 0.01, 10, X0, V0[:, :1])


@pytest.mark.validation
def test_run_rejects_force_of_wrong_shape():
    with pytest.raises(ShapeMismatchError, match="forces"):
        run(lambda x: np.zeros(3), 0.01, 10, X0, V0)


@pytest.mark.validation
def test_run_detects_coincident_particles():
    x0 = np.array([[0.0, 0.0], [1.0, 1.0]])
    with pytest.raises(SingularConfigurationError) as excinfo:
        run(pair_force_fn(LennardJonesPotential()), 0.01, 10, x0, np.zeros_like(x0))
    assert excinfo.value.step == 0


@pytest.mark.core
def test_run_passes_through_coincidence_for_smooth_potential():
    # Euler with dt=0.5 puts both particles exactly on the origin after two steps
    final = run(pair_force_fn(HarmonicPotential(a=0.0)), 0.5, 3, np.array([-1.0, 1.0]),
                np.zeros(2), "euler")
    np.testing.assert_allclose(final.positions, [2.0, -2.0])
    np.testing.assert_allclose(final.velocities, [4.0, -4.0])


@pytest.mark.validation
def test_run_reports_step_of_blow_up():
    # Two Lennard-Jones particles fired at each other far too fast for dt
    x0 = np.array([-1.0, 1.0])
    v0 = np.array([200.0, -200.0])
    with pytest.raises(SingularConfigurationError, match="step") as excinfo:
        run(pair_force_fn(LennardJonesPotential()), 0.005, 100, x0, v0, "euler")
    assert excinfo.value.step is not None and excinfo.value.step >= 1


@pytest.mark.core
def test_run_without_finite_check_propagates_nans():
    x0 = np.array([[0.0, 0.0], [1.0, 1.0]])
    final = run(pair_force_fn(LennardJonesPotential()), 0.01, 3, x0, np.zeros_like(x0),
                check_finite=False)
    assert not final.is_finite()


@pytest.mark.core
def test_trajectory_simulator_uses_config():
    config = SimulationConfig(dt=0.01, n_steps=12, integrator="euler", record=True, record_every=4)
    simulator = TrajectorySimulator(FORCE_FN, config)
    trajectory = simulator.simulate(ParticleState(X0, V0))
    assert trajectory.integrator == "euler"
    assert len(trajectory) == 4
    assert trajectory.potential_energy is None
