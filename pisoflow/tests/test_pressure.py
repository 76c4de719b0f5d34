"""
Pytest tests for the pressure corrector and the pressure/velocity updater.
"""

import logging

import numpy as np
import pytest
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from pisoflow.src import (
    GasProperties, Mesh1D, FlowState, FixedValueBC, ZeroGradientBC, FaceInterpolation,
    refresh_pressure_ghosts, PisoController, SodiumVapor, CompositeSourceTerm, ZoneSourceTerm,
    MASS
)
from pisoflow.src.momentum import boundary_momentum_diagonal
from pisoflow.src.pressure import (
    mass_imbalance, assemble_pressure_correction, solve_pressure_correction,
    correct_pressure_velocity
)

DT = 1e-3
P_OUT = 50000.0


@pytest.fixture
def gas():
    return GasProperties(R=361.8)


@pytest.fixture
def mesh():
    return Mesh1D.uniform(1.0, 20)


@pytest.fixture
def pressure_bcs():
    return ZeroGradientBC(), FixedValueBC(P_OUT)


@pytest.fixture
def velocity_bcs():
    return FixedValueBC(0.01), FixedValueBC(0.01)


@pytest.fixture
def state(gas, mesh, pressure_bcs):
    state = FlowState.uniform(mesh.n_cells, u=0.01, p=P_OUT, T=1000.0, gas=gas)
    state.b_U[:] = boundary_momentum_diagonal(state.rho, 2e-5, mesh.dx, DT)
    refresh_pressure_ghosts(state, *pressure_bcs)
    return state


class TestMassImbalance:
    """Tests for the discrete continuity residual."""

    def test_uniform_flow_balanced(self, state, mesh):
        imbalance = mass_imbalance(state, mesh, DT, FaceInterpolation())
        assert len(imbalance) == mesh.n_cells - 2
        assert np.all(imbalance == 0.0)

    def test_storage_term(self, state, mesh):
        state.rho_old = state.rho - 1e-4
        imbalance = mass_imbalance(state, mesh, DT, FaceInterpolation())
        assert np.allclose(imbalance, 1e-4 * mesh.dx / DT)

    def test_converging_flow(self, state, mesh):
        """Flow into a cell from both sides is a positive accumulation deficit."""
        state.u[:] = 0.0
        state.u[:10] = 0.01
        state.u[10:] = -0.01
        imbalance = mass_imbalance(state, mesh, DT, FaceInterpolation(rhie_chow=False))
        assert np.all(imbalance[9:10] < 0.0)


class TestZeroField:
    """Exactly conserving fields need no correction."""

    def test_zero_correction(self, state, mesh, gas, pressure_bcs):
        p_prime = solve_pressure_correction(state, mesh, gas, np.zeros(mesh.n_cells), DT,
                                            FaceInterpolation(), *pressure_bcs)
        assert np.all(p_prime == 0.0)

    def test_converged_source_sink_state(self, mesh, gas, pressure_bcs):
        """After a converged inner loop with zoned mass sources the corrector is idle."""
        fluid = SodiumVapor()
        faces = FaceInterpolation()
        sources = CompositeSourceTerm([ZoneSourceTerm(MASS, 0.1, 0.2, 0.2)]).fields(mesh)
        Sm = sources.Sm

        state = FlowState.uniform(mesh.n_cells, u=0.0, p=P_OUT, T=1000.0, gas=gas)
        state.b_U[:] = boundary_momentum_diagonal(state.rho, fluid.viscosity(state.T),
                                                  mesh.dx, DT)
        state.snapshot()
        refresh_pressure_ghosts(state, *pressure_bcs)
        p_prime_initial = solve_pressure_correction(state, mesh, gas, Sm, DT, faces,
                                                    *pressure_bcs)

        controller = PisoController(mesh, gas, fluid, DT, faces,
                                    velocity_bcs=(FixedValueBC(0.0), FixedValueBC(0.0)),
                                    pressure_bcs=pressure_bcs, max_iterations=2000)
        result = controller.run(state, sources)
        assert result.converged

        p_prime = solve_pressure_correction(state, mesh, gas, Sm, DT, faces, *pressure_bcs)

        assert np.max(np.abs(p_prime_initial)) > 1e-3
        assert np.max(np.abs(p_prime)) < 1e-5 * np.max(np.abs(p_prime_initial))

    def test_boundary_rows(self, state, mesh, gas, pressure_bcs):
        Sm = np.zeros(mesh.n_cells)
        Sm[1:5] = 0.1
        system = assemble_pressure_correction(state, mesh, gas, Sm, DT,
                                              FaceInterpolation(), *pressure_bcs)
        p_prime = system.solve()
        assert p_prime[0] == pytest.approx(p_prime[1])
        assert p_prime[-1] == 0.0

    def test_mass_source_raises_pressure(self, state, mesh, gas, pressure_bcs):
        Sm = np.zeros(mesh.n_cells)
        Sm[1:5] = 0.1
        p_prime = solve_pressure_correction(state, mesh, gas, Sm, DT,
                                            FaceInterpolation(), *pressure_bcs)
        assert np.all(p_prime[:-1] > 0.0)
        # Pressure falls from the source zone towards the fixed outlet
        assert np.all(np.diff(p_prime[4:]) < 0.0)


class TestUpdater:
    """Tests for the pressure/velocity update."""

    def test_velocity_correction(self, state, mesh, gas, pressure_bcs, velocity_bcs):
        p_prime = 2.0 * mesh.x_cells
        u_before = state.u.copy()
        b_U = state.b_U.copy()

        max_err = correct_pressure_velocity(state, p_prime, mesh, gas, pressure_bcs,
                                            velocity_bcs)

        du = 2.0 * 2.0 * mesh.dx / (2.0 * mesh.dx * b_U[1:-1])
        assert np.allclose(state.u[1:-1], u_before[1:-1] - du)
        assert max_err == pytest.approx(np.max(du))
        # Boundary velocities are not touched by the correction
        assert state.u[0] == u_before[0] and state.u[-1] == u_before[-1]

    def test_pressure_ghosts_and_density_refreshed(self, state, mesh, gas, pressure_bcs,
                                                   velocity_bcs):
        p_prime = np.full(mesh.n_cells, 100.0)
        correct_pressure_velocity(state, p_prime, mesh, gas, pressure_bcs, velocity_bcs)

        assert np.allclose(state.p, P_OUT + 100.0)
        assert np.array_equal(state.p_padded.interior, state.p)
        assert state.p_padded.at(-1) == state.p[0]
        assert state.p_padded.at(mesh.n_cells) == P_OUT
        assert np.array_equal(state.rho, gas.density(state.p, state.T))

    def test_enforce_boundaries(self, state, mesh, gas, pressure_bcs, velocity_bcs):
        state.u[0] = 5.0
        p_prime = np.linspace(10.0, 0.0, mesh.n_cells) + 1.0
        correct_pressure_velocity(state, p_prime, mesh, gas, pressure_bcs, velocity_bcs,
                                  enforce_boundaries=True)
        assert state.u[0] == 0.01
        assert state.p[-1] == P_OUT

    def test_correction_logged(self, state, mesh, gas, pressure_bcs, velocity_bcs, caplog):
        p_prime = np.linspace(10.0, 0.0, mesh.n_cells)
        with caplog.at_level(logging.DEBUG, logger='pisoflow.src.pressure'):
            correct_pressure_velocity(state, p_prime, mesh, gas, pressure_bcs, velocity_bcs)
        assert any("max |du|" in record.message for record in caplog.records)
