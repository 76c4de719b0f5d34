"""
Energy solver.

Implicit temperature equation per interior cell: upwind convection of the
face mass flux times the upwinded specific heat, central diffusion with the
effective conductivity k + mu_t cp / Pr_t, a transient term on the old
density, pressure work and the external energy source.
"""

import numpy as np

from .mesh import Mesh1D
from .state import FlowState
from .boundary import BoundaryCondition
from .reconstruction import FaceInterpolation, upwind
from .tridiagonal import TridiagonalSystem


def effective_conductivity(state: FlowState, fluid, turbulent_prandtl: float) -> np.ndarray:
    """Molecular plus turbulent conductivity per cell [W/(m·K)]."""
    k = np.broadcast_to(fluid.conductivity(state.T, state.p), state.T.shape)
    cp = fluid.specific_heat(state.T)
    return k + state.mu_t * cp / turbulent_prandtl


def assemble_energy(state: FlowState, mesh: Mesh1D, fluid, St: np.ndarray, dt: float,
                    faces: FaceInterpolation, bc_left: BoundaryCondition,
                    bc_right: BoundaryCondition,
                    turbulent_prandtl: float = 0.01) -> TridiagonalSystem:
    """
    Assemble the temperature system.

    Args:
        state: Flow state after the PISO loop (T_old, rho_old, p_old hold the
            previous time step)
        mesh: Computational mesh
        fluid: Property provider (conductivity, specific heat)
        St: Energy source per cell [W/m³]
        dt: Time step [s]
        faces: Face velocity reconstruction
        bc_left, bc_right: Temperature boundary conditions
        turbulent_prandtl: Turbulent Prandtl number Pr_t

    Returns:
        Assembled tridiagonal system for T
    """
    if turbulent_prandtl <= 0.0:
        raise ValueError(f"turbulent_prandtl must be positive, got {turbulent_prandtl}")

    n = mesh.n_cells
    dx = mesh.dx
    system = TridiagonalSystem.zeros(n)

    cp = np.broadcast_to(fluid.specific_heat(state.T), state.T.shape)
    k_eff = effective_conductivity(state, fluid, turbulent_prandtl)

    u_f, F = faces.mass_fluxes(state, dx)
    C = F * upwind(u_f, cp[:-1], cp[1:])
    C_w = C[:-1]
    C_e = C[1:]

    D = 0.5 * (k_eff[:-1] + k_eff[1:]) / dx
    D_w = D[:-1]
    D_e = D[1:]

    transient = state.rho_old[1:-1] * cp[1:-1] * dx / dt

    system.a[1:-1] = -D_w - np.maximum(C_w, 0.0)
    system.c[1:-1] = -D_e - np.maximum(-C_e, 0.0)
    system.b[1:-1] = D_w + D_e + np.maximum(C_e, 0.0) + np.maximum(-C_w, 0.0) + transient
    system.d[1:-1] = (transient * state.T_old[1:-1]
                      + (state.p[1:-1] - state.p_old[1:-1]) / dt * dx
                      + St[1:-1] * dx)

    bc_left.apply(system, 'left')
    bc_right.apply(system, 'right')

    return system


def solve_energy(state: FlowState, mesh: Mesh1D, fluid, St: np.ndarray, dt: float,
                 faces: FaceInterpolation, bc_left: BoundaryCondition,
                 bc_right: BoundaryCondition, turbulent_prandtl: float = 0.01) -> np.ndarray:
    """Solve the energy equation and return the new temperature (n_cells)."""
    system = assemble_energy(state, mesh, fluid, St, dt, faces, bc_left, bc_right,
                             turbulent_prandtl)
    return system.solve()
