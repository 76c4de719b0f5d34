"""
Per-step diagnostics reported by the time-stepping driver.
"""

import numpy as np
from dataclasses import dataclass


def courant_number(u: np.ndarray, dt: float, dx: float) -> float:
    """Largest convective Courant number max|u| dt / dx."""
    return float(np.max(np.abs(u)) * dt / dx)


def reynolds_number(u: np.ndarray, rho: np.ndarray, mu, diameter: float) -> float:
    """Pipe Reynolds number from the largest velocity and density."""
    mu = float(np.min(mu))
    if mu <= 0.0:
        raise ValueError(f"Viscosity must be positive, got {mu}")
    return float(np.max(np.abs(u)) * diameter * np.max(rho) / mu)


@dataclass
class StepDiagnostics:
    """Summary of one completed time step."""
    step: int
    time: float
    courant: float
    reynolds: float
    inner_iterations: int
    residual: float
    converged: bool
    u_max: float
    T_min: float
    T_max: float
    p_min: float
    p_max: float

    @classmethod
    def from_state(cls, step, time, state, result, dt, dx, mu, diameter):
        return cls(step=step, time=time,
                   courant=courant_number(state.u, dt, dx),
                   reynolds=reynolds_number(state.u, state.rho, mu, diameter),
                   inner_iterations=result.iterations,
                   residual=result.residual,
                   converged=result.converged,
                   u_max=float(np.max(np.abs(state.u))),
                   T_min=float(np.min(state.T)), T_max=float(np.max(state.T)),
                   p_min=float(np.min(state.p)), p_max=float(np.max(state.p)))

    def summary(self) -> str:
        return (f"Step {self.step:6d}, t = {self.time:.4e}, CFL = {self.courant:.3e}, "
                f"Re = {self.reynolds:.3e}, inner = {self.inner_iterations}, "
                f"res = {self.residual:.4e}, |u|max = {self.u_max:.4e}, "
                f"T = [{self.T_min:.2f}, {self.T_max:.2f}] K")
