"""
Pytest tests for Rhie-Chow face velocity reconstruction.
"""

import numpy as np
import pytest
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from pisoflow.src import PaddedField, FaceInterpolation, FaceStencil, face_velocities
from pisoflow.src.reconstruction import pressure_third_difference, stencil_kinds, upwind


N_CELLS = 12
DX = 0.1


def linear_pressure(n=N_CELLS):
    """Padded pressure p[i] = 1000 - 10 i with linearly extrapolated ghosts."""
    p = 1000.0 - 10.0 * np.arange(n)
    return PaddedField(n).refresh(p, p[0] + 10.0, p[-1] - 10.0)


class TestAveraging:
    """Tests for the plain face average."""

    def test_without_correction(self):
        u = np.linspace(0.0, 1.1, N_CELLS)
        u_f = face_velocities(u, linear_pressure(), np.ones(N_CELLS), DX, rhie_chow=False)
        assert np.allclose(u_f, 0.5 * (u[:-1] + u[1:]))
        assert len(u_f) == N_CELLS - 1

    def test_linear_pressure_gives_no_correction(self):
        """The third difference vanishes for smooth (linear) pressure."""
        u = np.full(N_CELLS, 0.3)
        u_f = face_velocities(u, linear_pressure(), np.full(N_CELLS, 2.0), DX)
        assert np.allclose(u_f, 0.3, rtol=0.0, atol=1e-12)


class TestCheckerboard:
    """The correction must see odd-even pressure modes."""

    def test_checkerboard_detected(self):
        p = 1000.0 + 50.0 * (-1.0) ** np.arange(N_CELLS)
        p_padded = PaddedField(N_CELLS).refresh(p, p[1], p[-2])
        u = np.zeros(N_CELLS)

        u_f = face_velocities(u, p_padded, np.ones(N_CELLS), DX)

        interior = u_f[1:-1]
        assert np.all(np.abs(interior) > 0.0)
        # Alternating pressure gives alternating face corrections
        assert np.all(np.sign(interior[1:]) == -np.sign(interior[:-1]))

    def test_correction_magnitude(self):
        """D3 = -8 s for p = s (-1)^i, so u_f = 2 s / (b dx) on even faces."""
        s = 50.0
        p = s * (-1.0) ** np.arange(N_CELLS)
        p_padded = PaddedField(N_CELLS).refresh(p, -s, p[-1] * -1.0)
        b = 4.0

        u_f = face_velocities(np.zeros(N_CELLS), p_padded, np.full(N_CELLS, b), DX)

        assert u_f[2] == pytest.approx(2.0 * s / (b * DX))


class TestStencilPolicy:
    """Tests for the boundary-adjacent face stencils."""

    def test_kinds(self):
        kinds = stencil_kinds(6, FaceStencil.ONE_SIDED)
        assert kinds[0] is FaceStencil.ONE_SIDED
        assert kinds[-1] is FaceStencil.ONE_SIDED
        assert all(k is FaceStencil.FULL for k in kinds[1:-1])
        assert all(k is FaceStencil.FULL for k in stencil_kinds(6))

    def test_one_sided_ignores_ghosts(self):
        p_padded = linear_pressure()
        p_padded.data[0] = 1e9
        p_padded.data[-1] = -1e9

        D3_full = pressure_third_difference(p_padded, FaceStencil.FULL)
        D3_one_sided = pressure_third_difference(p_padded, FaceStencil.ONE_SIDED)

        assert abs(D3_full[0]) > 1.0
        assert abs(D3_full[-1]) > 1.0
        assert D3_one_sided[0] == pytest.approx(0.0, abs=1e-9)
        assert D3_one_sided[-1] == pytest.approx(0.0, abs=1e-9)
        assert np.allclose(D3_full[1:-1], D3_one_sided[1:-1])

    def test_one_sided_faces_follow_kinds(self):
        """p = i², exact ghosts: the full stencil vanishes, the 3-point one does not."""
        p = np.arange(N_CELLS, dtype=float)**2
        p_padded = PaddedField(N_CELLS).refresh(p, 1.0, float(N_CELLS**2))
        kinds = stencil_kinds(N_CELLS, FaceStencil.ONE_SIDED)

        D3 = pressure_third_difference(p_padded, FaceStencil.ONE_SIDED)

        expected = np.zeros(N_CELLS - 1)
        expected[0] = -2.0
        expected[-1] = 2.0
        assert np.allclose(D3, expected)
        changed = np.abs(D3) > 1e-9
        assert list(changed) == [kind is FaceStencil.ONE_SIDED for kind in kinds]

    def test_policy_from_string(self):
        faces = FaceInterpolation(stencil='one_sided')
        assert faces.stencil is FaceStencil.ONE_SIDED

    def test_unknown_policy(self):
        with pytest.raises(ValueError):
            FaceInterpolation(stencil='two_sided')


class TestUpwind:
    """Tests for donor-cell selection."""

    def test_direction(self):
        face_u = np.array([1.0, 0.0, -1.0])
        left = np.array([10.0, 20.0, 30.0])
        right = np.array([11.0, 21.0, 31.0])
        assert np.array_equal(upwind(face_u, left, right), [10.0, 20.0, 31.0])
