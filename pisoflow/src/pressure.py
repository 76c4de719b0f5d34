"""
Pressure corrector and pressure/velocity updater.

The corrector solves for an increment p' that removes the discrete mass
imbalance of the starred velocity field:

    -E_w p'_{i-1} + (E_w + E_e + psi_i dx/dt) p'_i - E_e p'_{i+1}
        = Sm_i dx - [(rho_i - rho_old_i) dx/dt + mdot_e - mdot_w]

where E is the face conductance rho_f * avg(1/b_U) / dx and psi the ideal-gas
compressibility. The updater adds p' to p without relaxation and corrects
the cell velocities with the central difference of p'.
"""

import logging

import numpy as np

from .mesh import Mesh1D
from .gas import GasProperties, update_density
from .state import FlowState, refresh_pressure_ghosts
from .boundary import BoundaryCondition
from .reconstruction import FaceInterpolation
from .tridiagonal import TridiagonalSystem

logger = logging.getLogger(__name__)


def mass_imbalance(state: FlowState, mesh: Mesh1D, dt: float,
                   faces: FaceInterpolation) -> np.ndarray:
    """
    Discrete continuity residual of every interior cell [kg/(m²·s)].

    (rho - rho_old) dx/dt + mdot_e - mdot_w, without the mass source.

    Returns:
        Array of length n_cells - 2 (cells 1..N-2)
    """
    _, F = faces.mass_fluxes(state, mesh.dx)
    storage = (state.rho[1:-1] - state.rho_old[1:-1]) * mesh.dx / dt
    return storage + (F[1:] - F[:-1])


def assemble_pressure_correction(state: FlowState, mesh: Mesh1D, gas: GasProperties,
                                 Sm: np.ndarray, dt: float, faces: FaceInterpolation,
                                 bc_left: BoundaryCondition,
                                 bc_right: BoundaryCondition) -> TridiagonalSystem:
    """
    Assemble the pressure-correction system.

    Args:
        state: Flow state holding the starred velocity and b_U
        mesh: Computational mesh
        gas: State relation (compressibility)
        Sm: Mass source per cell [kg/(m³·s)]
        dt: Time step [s]
        faces: Face velocity reconstruction
        bc_left, bc_right: Pressure boundary conditions

    Returns:
        Assembled tridiagonal system for p'
    """
    n = mesh.n_cells
    dx = mesh.dx
    rho = state.rho
    system = TridiagonalSystem.zeros(n)

    inv_b = 1.0 / state.b_U
    rho_face = 0.5 * (rho[:-1] + rho[1:])
    d_face = 0.5 * (inv_b[:-1] + inv_b[1:])
    E = rho_face * d_face / dx
    E_w = E[:-1]
    E_e = E[1:]

    psi = gas.compressibility(state.T[1:-1])

    system.a[1:-1] = -E_w
    system.c[1:-1] = -E_e
    system.b[1:-1] = E_w + E_e + psi * dx / dt
    system.d[1:-1] = Sm[1:-1] * dx - mass_imbalance(state, mesh, dt, faces)

    bc_left.apply_correction(system, 'left')
    bc_right.apply_correction(system, 'right')

    return system


def solve_pressure_correction(state: FlowState, mesh: Mesh1D, gas: GasProperties,
                              Sm: np.ndarray, dt: float, faces: FaceInterpolation,
                              bc_left: BoundaryCondition,
                              bc_right: BoundaryCondition) -> np.ndarray:
    """Solve for the pressure correction p' (n_cells)."""
    system = assemble_pressure_correction(state, mesh, gas, Sm, dt, faces,
                                          bc_left, bc_right)
    return system.solve()


def correct_pressure_velocity(state: FlowState, p_prime: np.ndarray, mesh: Mesh1D,
                              gas: GasProperties, pressure_bcs, velocity_bcs,
                              enforce_boundaries: bool = False) -> float:
    """
    Apply a pressure correction to p and u in place.

    Args:
        state: Flow state (p, p_padded, rho and u are updated)
        p_prime: Pressure correction (n_cells)
        mesh: Computational mesh
        gas: State relation
        pressure_bcs: (left, right) pressure boundary conditions
        velocity_bcs: (left, right) velocity boundary conditions
        enforce_boundaries: Overwrite boundary values after the correction

    Returns:
        max_err: Largest absolute velocity change over the interior cells
    """
    p_left, p_right = pressure_bcs
    u_left, u_right = velocity_bcs

    state.p += p_prime
    if enforce_boundaries:
        p_left.enforce(state.p, 'left')
        p_right.enforce(state.p, 'right')
    refresh_pressure_ghosts(state, p_left, p_right)
    update_density(state, gas)

    du = (p_prime[2:] - p_prime[:-2]) / (2.0 * mesh.dx * state.b_U[1:-1])
    state.u[1:-1] -= du

    if enforce_boundaries:
        u_left.enforce(state.u, 'left')
        u_right.enforce(state.u, 'right')

    max_err = float(np.max(np.abs(du))) if len(du) else 0.0
    logger.debug(f"Pressure correction: max |p'| = {np.max(np.abs(p_prime)):.3e} Pa, "
                 f"max |du| = {max_err:.3e} m/s")
    return max_err
