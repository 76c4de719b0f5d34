"""
Ideal-gas state relation with temperature and density floors.
"""

import numpy as np
from dataclasses import dataclass


@dataclass
class GasProperties:
    """State relation parameters for the working gas."""
    R: float = 361.8            # Specific gas constant [J/(kg·K)]
    T_floor: float = 200.0      # Temperature clamp before division [K]
    rho_floor: float = 1e-6     # Minimum density [kg/m³]

    def density(self, p: np.ndarray, T: np.ndarray) -> np.ndarray:
        """Density from the ideal-gas law [kg/m³]."""
        T_safe = np.maximum(self.T_floor, T)
        return np.maximum(self.rho_floor, p / (self.R * T_safe))

    def compressibility(self, T: np.ndarray) -> np.ndarray:
        """psi = d(rho)/dp at constant temperature [s²/m²]."""
        return 1.0 / (self.R * np.maximum(self.T_floor, T))


def update_density(state, gas: GasProperties):
    """
    Recompute state.rho in place from the current (p, T).

    Must be called after every mutation of pressure or temperature.
    """
    state.rho[:] = gas.density(state.p, state.T)
    return state.rho
