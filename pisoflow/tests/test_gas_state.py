"""
Pytest tests for the state relation, the mesh, the padded pressure field
and the boundary conditions.
"""

import numpy as np
import pytest
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from pisoflow.src import (
    GasProperties, update_density, Mesh1D, FlowState, PaddedField,
    refresh_pressure_ghosts, FixedValueBC, ZeroGradientBC, TridiagonalSystem
)


@pytest.fixture
def gas():
    """Sodium vapour state relation."""
    return GasProperties(R=361.8)


class TestEquationOfState:
    """Tests for the ideal-gas state relation."""

    def test_ideal_gas(self, gas):
        rho = gas.density(np.array([50000.0]), np.array([1000.0]))
        assert np.isclose(rho[0], 50000.0 / (361.8 * 1000.0))

    def test_temperature_floor(self, gas):
        """Temperatures below the floor are clamped before dividing."""
        rho_cold = gas.density(np.array([1e5]), np.array([10.0]))
        rho_floor = gas.density(np.array([1e5]), np.array([200.0]))
        assert rho_cold[0] == rho_floor[0]

    def test_zero_temperature_is_finite(self, gas):
        rho = gas.density(np.array([1e5]), np.array([0.0]))
        assert np.all(np.isfinite(rho))

    def test_density_floor(self, gas):
        rho = gas.density(np.array([0.0, -10.0]), np.array([1000.0, 1000.0]))
        assert np.all(rho == gas.rho_floor)

    def test_compressibility(self, gas):
        T = np.array([100.0, 1000.0])
        psi = gas.compressibility(T)
        assert np.allclose(psi, [1.0 / (361.8 * 200.0), 1.0 / (361.8 * 1000.0)])

    def test_update_idempotent(self, gas):
        """Updating twice with unchanged (p, T) gives identical density."""
        state = FlowState.uniform(10, u=0.0, p=50000.0, T=1000.0, gas=gas)
        state.p[:] = np.linspace(4e4, 6e4, 10)
        state.T[:] = np.linspace(900.0, 1100.0, 10)

        first = update_density(state, gas).copy()
        second = update_density(state, gas).copy()

        assert np.array_equal(first, second)

    def test_update_in_place(self, gas):
        state = FlowState.uniform(5, u=0.0, p=50000.0, T=1000.0, gas=gas)
        rho = state.rho
        state.T[:] = 500.0
        update_density(state, gas)
        assert rho is state.rho
        assert np.allclose(rho, 50000.0 / (361.8 * 500.0))


class TestMesh:
    """Tests for the uniform mesh."""

    def test_uniform(self):
        mesh = Mesh1D.uniform(1.0, 100)
        assert mesh.n_cells == 100
        assert mesh.dx == pytest.approx(0.01)
        assert mesh.x_cells[0] == pytest.approx(0.005)
        assert mesh.length == pytest.approx(1.0)

    def test_too_few_cells(self):
        with pytest.raises(ValueError):
            Mesh1D.uniform(1.0, 2)

    def test_non_positive_length(self):
        with pytest.raises(ValueError):
            Mesh1D.uniform(0.0, 10)

    def test_non_uniform_rejected(self):
        with pytest.raises(ValueError):
            Mesh1D(x_faces=np.array([0.0, 0.1, 0.3, 0.6]))


class TestPaddedField:
    """Tests for the ghost-padded field."""

    def test_index_mapping(self):
        field = PaddedField(4).refresh(np.array([1.0, 2.0, 3.0, 4.0]), 0.5, 9.0)
        assert len(field.data) == 6
        assert field.at(-1) == 0.5
        assert field.at(0) == 1.0
        assert field.at(3) == 4.0
        assert field.at(4) == 9.0
        assert np.array_equal(field.interior, [1.0, 2.0, 3.0, 4.0])

    def test_span(self):
        field = PaddedField(4).refresh(np.array([1.0, 2.0, 3.0, 4.0]), 0.0, 5.0)
        assert np.array_equal(field.span(-1, 3), [0.0, 1.0, 2.0, 3.0])
        assert np.array_equal(field.span(2, 5), [3.0, 4.0, 5.0])

    def test_span_out_of_range(self):
        field = PaddedField(4)
        with pytest.raises(IndexError):
            field.span(-2, 3)
        with pytest.raises(IndexError):
            field.span(0, 6)

    def test_ghost_refresh_from_boundary_conditions(self, gas):
        state = FlowState.uniform(5, u=0.0, p=50000.0, T=1000.0, gas=gas)
        state.p[:] = [5.0, 4.0, 3.0, 2.0, 1.0]

        refresh_pressure_ghosts(state, ZeroGradientBC(), FixedValueBC(0.5))

        assert state.p_padded.at(-1) == 5.0
        assert state.p_padded.at(5) == 0.5
        assert np.array_equal(state.p_padded.interior, state.p)


class TestFlowState:
    """Tests for the state aggregate."""

    def test_uniform_density_consistent(self, gas):
        state = FlowState.uniform(8, u=0.01, p=50000.0, T=1000.0, gas=gas)
        assert np.allclose(state.rho, gas.density(state.p, state.T))
        assert np.all(state.mu_t == 0.0)

    def test_length_mismatch(self):
        with pytest.raises(ValueError):
            FlowState(u=np.zeros(4), p=np.zeros(4), T=np.zeros(3),
                      rho=np.zeros(4), b_U=np.ones(4))

    def test_snapshot(self, gas):
        state = FlowState.uniform(4, u=0.0, p=50000.0, T=1000.0, gas=gas)
        state.T[:] = 1200.0
        state.snapshot()
        state.T[:] = 1300.0
        assert np.all(state.T_old == 1200.0)

    def test_copy_is_deep(self, gas):
        state = FlowState.uniform(4, u=0.0, p=50000.0, T=1000.0, gas=gas)
        other = state.copy()
        other.u[:] = 1.0
        other.p_padded.data[:] = 0.0
        assert np.all(state.u == 0.0)
        assert state.p_padded.at(0) == 50000.0


class TestBoundaryConditions:
    """Tests for the boundary rows."""

    def test_fixed_value_rows(self):
        system = TridiagonalSystem(a=np.full(4, -1.0), b=np.full(4, 3.0),
                                   c=np.full(4, -1.0), d=np.ones(4))
        FixedValueBC(2.5).apply(system, 'left')
        FixedValueBC(-1.5).apply(system, 'right')
        x = system.solve()
        assert x[0] == 2.5
        assert x[-1] == -1.5

    def test_zero_gradient_rows(self):
        system = TridiagonalSystem(a=np.full(5, -1.0), b=np.full(5, 3.0),
                                   c=np.full(5, -1.0), d=np.ones(5))
        ZeroGradientBC().apply(system, 'left')
        ZeroGradientBC().apply(system, 'right')
        x = system.solve()
        assert x[0] == pytest.approx(x[1])
        assert x[-1] == pytest.approx(x[-2])

    def test_fixed_value_correction_is_zero(self):
        system = TridiagonalSystem.zeros(3)
        FixedValueBC(7.0).apply_correction(system, 'right')
        assert system.b[-1] == 1.0 and system.d[-1] == 0.0

    def test_enforce(self):
        values = np.array([1.0, 2.0, 3.0])
        FixedValueBC(0.0).enforce(values, 'left')
        ZeroGradientBC().enforce(values, 'right')
        assert np.array_equal(values, [0.0, 2.0, 2.0])

    def test_unknown_side(self):
        with pytest.raises(ValueError):
            FixedValueBC(1.0).apply(TridiagonalSystem.zeros(3), 'middle')
