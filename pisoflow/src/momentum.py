"""
Momentum predictor.

Per interior cell i the predictor assembles

    a_i u_{i-1} + b_i u_i + c_i u_{i+1} = d_i

from upwind convection of the face mass flux, central diffusion with the
longitudinal viscous coefficient 4/3 mu, an explicit central-difference
pressure gradient, an inertia term rho dx/dt and the momentum source.
The diagonal b is kept as b_U: the pressure corrector and the face
reconstruction both use 1/b_U as the cell compliance.
"""

import numpy as np

from .mesh import Mesh1D
from .state import FlowState
from .boundary import BoundaryCondition
from .reconstruction import FaceInterpolation
from .tridiagonal import TridiagonalSystem

LONGITUDINAL_VISCOSITY_FACTOR = 4.0 / 3.0


def boundary_momentum_diagonal(rho: float, mu: float, dx: float, dt: float) -> float:
    """Compliance of a boundary cell: inertia plus two half-cell viscous links."""
    return rho * dx / dt + 2.0 * LONGITUDINAL_VISCOSITY_FACTOR * mu / dx


def assemble_momentum(state: FlowState, mesh: Mesh1D, mu: np.ndarray, Su: np.ndarray,
                      dt: float, faces: FaceInterpolation,
                      bc_left: BoundaryCondition, bc_right: BoundaryCondition):
    """
    Assemble the momentum system for the current pressure, density and viscosity.

    Args:
        state: Current flow state (not modified)
        mesh: Computational mesh
        mu: Dynamic viscosity per cell [Pa·s]
        Su: Momentum source per cell [N/m³]
        dt: Time step [s]
        faces: Face velocity reconstruction
        bc_left, bc_right: Velocity boundary conditions

    Returns:
        system: Assembled tridiagonal system
        b_U: Momentum diagonal per cell (n_cells)
    """
    n = mesh.n_cells
    dx = mesh.dx
    rho = state.rho
    system = TridiagonalSystem.zeros(n)

    # Face quantities: west face of cell i is face i-1, east face is face i
    _, F = faces.mass_fluxes(state, dx)
    F_w = F[:-1]
    F_e = F[1:]

    mu_face = 0.5 * (mu[:-1] + mu[1:])
    D = LONGITUDINAL_VISCOSITY_FACTOR * mu_face / dx
    D_w = D[:-1]
    D_e = D[1:]

    inertia = rho[1:-1] * dx / dt

    system.a[1:-1] = -D_w - np.maximum(F_w, 0.0)
    system.c[1:-1] = -D_e - np.maximum(-F_e, 0.0)
    system.b[1:-1] = D_w + D_e + np.maximum(F_e, 0.0) + np.maximum(-F_w, 0.0) + inertia
    system.d[1:-1] = (-0.5 * (state.p[2:] - state.p[:-2])
                      + inertia * state.u[1:-1]
                      + Su[1:-1] * dx)

    b_U = system.b.copy()
    b_U[0] = boundary_momentum_diagonal(rho[0], mu[0], dx, dt)
    b_U[-1] = boundary_momentum_diagonal(rho[-1], mu[-1], dx, dt)

    bc_left.apply(system, 'left')
    bc_right.apply(system, 'right')

    return system, b_U


def predict_velocity(state: FlowState, mesh: Mesh1D, mu: np.ndarray, Su: np.ndarray,
                     dt: float, faces: FaceInterpolation,
                     bc_left: BoundaryCondition, bc_right: BoundaryCondition):
    """
    Solve the momentum predictor.

    Returns:
        u_star: Predicted velocity (n_cells)
        b_U: Momentum diagonal to be held fixed through the correctors
    """
    system, b_U = assemble_momentum(state, mesh, mu, Su, dt, faces, bc_left, bc_right)
    return system.solve(), b_U
