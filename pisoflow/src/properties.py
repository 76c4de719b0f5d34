"""
Thermophysical property providers.

All functions accept temperature in K (scalar or numpy array) and return SI
values. Inputs outside a correlation's validity range produce a best-effort
extrapolated value and a logged warning. Non-physical inputs to the
heat-transfer correlations raise InvalidPhysicalInputError.
"""

import logging

import numpy as np
from abc import ABC, abstractmethod
from scipy.interpolate import RegularGridInterpolator

from .errors import InvalidPhysicalInputError

logger = logging.getLogger(__name__)

# Sodium constants
T_CRIT_NA = 2509.46      # K
MOLAR_MASS_NA = 23e-3    # kg/mol


class FluidProperties(ABC):
    """Abstract base class for property providers."""

    R = None  # Specific gas constant [J/(kg·K)], None for liquids

    @abstractmethod
    def density(self, T):
        """Density [kg/m³]."""
        pass

    @abstractmethod
    def viscosity(self, T):
        """Dynamic viscosity [Pa·s]."""
        pass

    @abstractmethod
    def conductivity(self, T, p=None):
        """Thermal conductivity [W/(m·K)]."""
        pass

    @abstractmethod
    def specific_heat(self, T):
        """Isobaric specific heat [J/(kg·K)]."""
        pass

    def saturation_pressure(self, T):
        """Saturation pressure [Pa] (condensing fluids only)."""
        raise NotImplementedError(f"{type(self).__name__} has no saturation curve")

    def latent_heat(self, T):
        """Enthalpy of vaporization [J/kg] (condensing fluids only)."""
        raise NotImplementedError(f"{type(self).__name__} has no saturation curve")

    def prandtl_number(self, T, p=None):
        return self.viscosity(T) * self.specific_heat(T) / self.conductivity(T, p)


class ConstantProperties(FluidProperties):
    """Temperature-independent properties, e.g. water vapour near 370 K."""

    def __init__(self, R: float, cp: float, mu: float, k: float, rho: float = None):
        self.R = R
        self.cp = cp
        self.mu = mu
        self.k = k
        self.rho = rho

    def _const(self, T, value):
        return np.full(np.shape(T), value, dtype=float) if np.ndim(T) else float(value)

    def density(self, T):
        if self.rho is None:
            raise ValueError("ConstantProperties has no fixed density; use the state relation")
        return self._const(T, self.rho)

    def viscosity(self, T):
        return self._const(T, self.mu)

    def conductivity(self, T, p=None):
        return self._const(T, self.k)

    def specific_heat(self, T):
        return self._const(T, self.cp)

    def __repr__(self):
        return (f"ConstantProperties(R={self.R!r}, cp={self.cp!r}, mu={self.mu!r}, "
                f"k={self.k!r}, rho={self.rho!r})")


def sodium_latent_heat(T):
    """Enthalpy of vaporization of sodium [J/kg]."""
    r = 1.0 - np.asarray(T, dtype=float) / T_CRIT_NA
    return (393.37 * r + 4398.6 * np.power(r, 0.29302)) * 1e3


def sodium_saturation_pressure(T):
    """Saturation pressure of sodium [Pa]."""
    T = np.asarray(T, dtype=float)
    return np.exp(11.9463 - 12633.7 / T - 0.4672 * np.log(T)) * 1e6


def sodium_saturation_pressure_derivative(T):
    """dP_sat/dT of sodium [Pa/K]."""
    T = np.asarray(T, dtype=float)
    return ((12633.73 / T**2 - 0.4672 / T)
            * np.exp(11.9463 - 12633.73 / T - 0.4672 * np.log(T)) * 1e6)


class LiquidSodium(FluidProperties):
    """Liquid sodium correlations, viscosity after Shpilrain et al."""

    T_min = 371.0
    T_max = 2500.0

    def _check_range(self, T, name):
        T = np.asarray(T, dtype=float)
        if np.any((T < self.T_min) | (T > self.T_max)):
            logger.warning(f"Liquid sodium {name}: T outside [{self.T_min}, {self.T_max}] K, "
                           "extrapolating correlation")
        return T

    def density(self, T):
        tau = 1.0 - np.asarray(T, dtype=float) / T_CRIT_NA
        return 219.0 + 275.32 * tau + 511.58 * np.sqrt(tau)

    def viscosity(self, T):
        T = self._check_range(T, 'viscosity')
        return np.exp(-6.4406 - 0.3958 * np.log(T) + 556.835 / T)

    def conductivity(self, T, p=None):
        T = np.asarray(T, dtype=float)
        return 124.67 - 0.11381 * T + 5.5226e-5 * T**2 - 1.1842e-8 * T**3

    def specific_heat(self, T):
        dT = np.asarray(T, dtype=float) - 273.15
        return 1436.72 - 0.58 * dT + 4.627e-4 * dT**2

    def saturation_pressure(self, T):
        return sodium_saturation_pressure(T)

    def latent_heat(self, T):
        return sodium_latent_heat(T)

    def __repr__(self):
        return "LiquidSodium()"


class SodiumVapor(FluidProperties):
    """
    Saturated sodium vapour.

    Specific heats are tabulated every 100 K from 400 to 2400 K (linear
    interpolation, clamped at the ends, the near-critical value from
    2500 K up). Conductivity is tabulated on a (T, p) grid and interpolated
    bilinearly; outside 900-1500 K it is scaled with sqrt(T) from the
    nearest table temperature, outside 981-98066 Pa the nearest tabulated
    pressure is used.
    """

    R = 361.8

    T_table = np.arange(400.0, 2401.0, 100.0)
    cp_table = np.array([860, 1250, 1800, 2280, 2590, 2720, 2700, 2620, 2510, 2430, 2390,
                         2360, 2340, 2410, 2460, 2530, 2660, 2910, 3400, 4470, 8030],
                        dtype=float)
    cv_table = np.array([490, 840, 1310, 1710, 1930, 1980, 1920, 1810, 1680, 1580, 1510,
                         1440, 1390, 1380, 1360, 1330, 1300, 1300, 1340, 1440, 1760],
                        dtype=float)
    cp_critical = 417030.0
    cv_critical = 17030.0
    T_critical_table = 2500.0

    k_T_grid = np.array([900.0, 1000.0, 1100.0, 1200.0, 1300.0, 1400.0, 1500.0])
    k_p_grid = np.array([981.0, 4903.0, 9807.0, 49033.0, 98066.0])
    k_table = np.array([
        # p = 981    4903      9807      49033     98066 Pa
        [0.035796, 0.0379,   0.0392,   0.0415,   0.0422],    # 900 K
        [0.034053, 0.043583, 0.049627, 0.0511,   0.0520],    # 1000 K
        [0.036029, 0.039399, 0.043002, 0.060900, 0.0620],    # 1100 K
        [0.039051, 0.040445, 0.042189, 0.052881, 0.061133],  # 1200 K
        [0.042189, 0.042886, 0.043816, 0.049859, 0.055554],  # 1300 K
        [0.045443, 0.045908, 0.046373, 0.049859, 0.054508],  # 1400 K
        [0.048930, 0.049162, 0.049511, 0.051603, 0.054043],  # 1500 K
    ])

    def __init__(self):
        self._interp_k = RegularGridInterpolator(
            (self.k_T_grid, self.k_p_grid),
            self.k_table,
            method='linear',
        )
        self._warned = set()

    def _warn(self, key, message):
        # Repeated extrapolation of the same kind is only logged once at WARNING
        if key in self._warned:
            logger.debug(message)
        else:
            self._warned.add(key)
            logger.warning(message)

    def density(self, T):
        """Saturated-vapour density from Clausius-Clapeyron [kg/m³]."""
        T = np.asarray(T, dtype=float)
        h_vap = sodium_latent_heat(T)
        dPdT = sodium_saturation_pressure_derivative(T)
        rho_l = LiquidSodium().density(T)
        return 1.0 / (h_vap / (T * dPdT) + 1.0 / rho_l)

    def viscosity(self, T):
        return 6.083e-9 * np.asarray(T, dtype=float) + 1.2606e-5

    def _tabulated(self, T, table, critical):
        T = np.asarray(T, dtype=float)
        values = np.interp(T, self.T_table, table)
        return np.where(T >= self.T_critical_table, critical, values)

    def specific_heat(self, T):
        return self._tabulated(T, self.cp_table, self.cp_critical)

    def specific_heat_cv(self, T):
        """Isochoric specific heat [J/(kg·K)]."""
        return self._tabulated(T, self.cv_table, self.cv_critical)

    def conductivity(self, T, p=None):
        """
        Thermal conductivity [W/(m·K)].

        Args:
            T: Temperature [K]
            p: Pressure [Pa]; the saturation pressure at T when omitted
        """
        T = np.asarray(T, dtype=float)
        p = sodium_saturation_pressure(T) if p is None else np.asarray(p, dtype=float)
        T, p = np.broadcast_arrays(T, p)

        T_min, T_max = self.k_T_grid[0], self.k_T_grid[-1]
        p_min, p_max = self.k_p_grid[0], self.k_p_grid[-1]

        if np.any(T < T_min):
            self._warn('T_low', f"Sodium vapour conductivity: T < {T_min} K, "
                                "using sqrt(T) extrapolation")
        if np.any(T > T_max):
            self._warn('T_high', f"Sodium vapour conductivity: T > {T_max} K, "
                                 "using sqrt(T) extrapolation")
        if np.any((p < p_min) | (p > p_max)):
            self._warn('p', f"Sodium vapour conductivity: p outside [{p_min}, {p_max}] Pa, "
                            "using constant-pressure approximation")

        T_ref = np.clip(T, T_min, T_max)
        p_ref = np.clip(p, p_min, p_max)
        points = np.column_stack([T_ref.ravel(), p_ref.ravel()])
        k_ref = self._interp_k(points).reshape(T.shape)

        k = k_ref * np.sqrt(T / T_ref)
        return k if k.ndim else float(k)

    def saturation_pressure(self, T):
        return sodium_saturation_pressure(T)

    def saturation_pressure_derivative(self, T):
        return sodium_saturation_pressure_derivative(T)

    def latent_heat(self, T):
        return sodium_latent_heat(T)

    def __repr__(self):
        return "SodiumVapor()"


# Heat-transfer correlations (Gnielinski)

LAMINAR_REYNOLDS = 1000.0
LAMINAR_NUSSELT = 4.36


def friction_factor(Re: float) -> float:
    """Darcy friction factor for smooth pipes, 1 / (0.79 ln Re - 1.64)²."""
    if Re <= 0.0:
        raise InvalidPhysicalInputError(f"Reynolds number must be positive, got {Re}")
    t = 0.79 * np.log(Re) - 1.64
    return 1.0 / t**2


def nusselt_number(Re: float, Pr: float) -> float:
    """Gnielinski Nusselt number, constant 4.36 for Re < 1000."""
    if Re <= 0.0 or Pr <= 0.0:
        raise InvalidPhysicalInputError(f"Reynolds and Prandtl numbers must be positive, "
                                        f"got Re={Re}, Pr={Pr}")
    if Re < LAMINAR_REYNOLDS:
        return LAMINAR_NUSSELT

    f8 = friction_factor(Re) / 8.0
    num = f8 * (Re - 1000.0) * Pr
    den = 1.0 + 12.7 * np.sqrt(f8) * (np.cbrt(Pr * Pr) - 1.0)
    return num / den


def heat_transfer_coefficient(Re: float, Pr: float, k: float, Dh: float) -> float:
    """Convective heat transfer coefficient Nu k / Dh [W/(m²·K)]."""
    if k <= 0.0 or Dh <= 0.0:
        raise InvalidPhysicalInputError(f"Conductivity and hydraulic diameter must be "
                                        f"positive, got k={k}, Dh={Dh}")
    return nusselt_number(Re, Pr) * k / Dh
