"""
Turbulence closures.

A turbulence model only supplies the eddy viscosity mu_t used by the energy
equation's effective conductivity. It never feeds back into the pressure
equation.
"""

import logging

import numpy as np
from abc import ABC, abstractmethod

from .mesh import Mesh1D
from .state import FlowState
from .boundary import FixedValueBC
from .tridiagonal import TridiagonalSystem

logger = logging.getLogger(__name__)


class TurbulenceModel(ABC):
    """Abstract base class for eddy-viscosity models."""

    @abstractmethod
    def compute_eddy_viscosity(self, state: FlowState, mu: np.ndarray,
                               mesh: Mesh1D, dt: float) -> np.ndarray:
        """
        Advance the model by one time step and return the eddy viscosity.

        Args:
            state: Flow state after the PISO loop
            mu: Molecular viscosity per cell [Pa·s]
            mesh: Computational mesh
            dt: Time step [s]

        Returns:
            mu_t: Eddy viscosity per cell [Pa·s]
        """
        pass

    def reset(self, n_cells: int):
        """Discard any transported turbulence state ahead of a new run."""
        pass


class NoTurbulence(TurbulenceModel):
    """Laminar flow: the eddy viscosity is identically zero."""

    def compute_eddy_viscosity(self, state, mu, mesh, dt):
        return np.zeros(state.n_cells)

    def __repr__(self):
        return "NoTurbulence()"


class KOmegaModel(TurbulenceModel):
    """
    Wilcox k-omega model in 1D implicit form.

    Both transport equations use central diffusion with mu + mu_t, production
    P_k = mu_t (du/dx)² from the previous eddy viscosity, and fixed values of
    k and omega at both boundaries (the inflow turbulence state).
    """

    sigma_k = 0.85
    sigma_omega = 0.5
    beta_star = 0.09
    beta = 0.075
    alpha = 5.0 / 9.0
    omega_floor = 1e-6
    viscosity_ratio_limit = 1000.0

    def __init__(self, intensity: float = 0.05, length_scale: float = 0.07,
                 reference_velocity: float = 0.01):
        """
        Args:
            intensity: Turbulence intensity I [-]
            length_scale: Turbulence length scale L_t [m]
            reference_velocity: Velocity scale for the initial k [m/s]
        """
        if intensity < 0.0 or length_scale <= 0.0:
            raise ValueError("Turbulence intensity must be non-negative and the "
                             "length scale positive")
        self.intensity = intensity
        self.length_scale = length_scale
        self.reference_velocity = reference_velocity

        self.k0 = 1.5 * (intensity * reference_velocity)**2
        self.omega0 = np.sqrt(self.k0) / (self.beta_star * length_scale)

        self.k = None
        self.omega = None

    def initialize(self, n_cells: int):
        """Reset k and omega to the inflow turbulence state."""
        self.k = np.full(n_cells, self.k0)
        self.omega = np.full(n_cells, self.omega0)

    def reset(self, n_cells: int):
        self.initialize(n_cells)

    def _transport(self, phi: np.ndarray, rho: np.ndarray, mu_eff: np.ndarray,
                   sigma: float, destruction: np.ndarray, production: np.ndarray,
                   dx: float, dt: float) -> np.ndarray:
        n = len(phi)
        system = TridiagonalSystem.zeros(n)
        D = mu_eff[1:-1] / (sigma * dx**2)
        system.a[1:-1] = -D
        system.c[1:-1] = -D
        system.b[1:-1] = rho[1:-1] / dt + 2.0 * D + destruction[1:-1]
        system.d[1:-1] = rho[1:-1] / dt * phi[1:-1] + production[1:-1]
        FixedValueBC(phi[0]).apply(system, 'left')
        FixedValueBC(phi[-1]).apply(system, 'right')
        return system.solve()

    def compute_eddy_viscosity(self, state, mu, mesh, dt):
        n = state.n_cells
        if self.k is None or len(self.k) != n:
            self.initialize(n)

        dx = mesh.dx
        rho = state.rho
        mu = np.broadcast_to(mu, (n,))
        mu_eff = mu + state.mu_t

        dudx = np.zeros(n)
        dudx[1:-1] = (state.u[2:] - state.u[:-2]) / (2.0 * dx)
        P_k = state.mu_t * dudx**2

        omega_prev = self.omega
        self.k = self._transport(self.k, rho, mu_eff, self.sigma_k,
                                 self.beta_star * rho * omega_prev, P_k, dx, dt)
        self.omega = self._transport(omega_prev, rho, mu_eff, self.sigma_omega,
                                     self.beta * rho * omega_prev,
                                     self.alpha * omega_prev / np.maximum(self.k, 1e-30) * P_k,
                                     dx, dt)

        mu_t = rho * self.k / np.maximum(self.omega, self.omega_floor)
        limit = self.viscosity_ratio_limit * mu
        if np.any(mu_t > limit):
            logger.debug("Eddy viscosity limited to %g times the molecular value",
                         self.viscosity_ratio_limit)
        return np.minimum(mu_t, limit)

    def __repr__(self):
        return (f"KOmegaModel(intensity={self.intensity!r}, "
                f"length_scale={self.length_scale!r}, "
                f"reference_velocity={self.reference_velocity!r})")
