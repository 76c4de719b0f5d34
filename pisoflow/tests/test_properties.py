"""
Pytest tests for the property providers and heat-transfer correlations.
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
    ConstantProperties, LiquidSodium, SodiumVapor, InvalidPhysicalInputError,
    friction_factor, nusselt_number, heat_transfer_coefficient
)


@pytest.fixture
def vapor():
    return SodiumVapor()


class TestLiquidSodium:

    def test_density_near_melting_point(self):
        rho = LiquidSodium().density(371.0)
        assert 900.0 < rho < 950.0

    def test_density_decreases_with_temperature(self):
        rho = LiquidSodium().density(np.array([400.0, 800.0, 1200.0]))
        assert np.all(np.diff(rho) < 0.0)

    def test_properties_positive(self):
        liquid = LiquidSodium()
        T = np.linspace(400.0, 1500.0, 12)
        assert np.all(liquid.viscosity(T) > 0.0)
        assert np.all(liquid.conductivity(T) > 0.0)
        assert np.all(liquid.specific_heat(T) > 0.0)

    def test_viscosity_extrapolation_warns(self, caplog):
        with caplog.at_level(logging.WARNING):
            mu = LiquidSodium().viscosity(300.0)
        assert np.isfinite(mu)
        assert any("extrapolating" in record.message for record in caplog.records)


class TestSodiumVapor:

    def test_specific_heat_table(self, vapor):
        assert vapor.specific_heat(1000.0) == pytest.approx(2700.0)
        assert vapor.specific_heat(1050.0) == pytest.approx(2660.0)

    def test_specific_heat_clamped(self, vapor):
        assert vapor.specific_heat(300.0) == pytest.approx(860.0)
        assert vapor.specific_heat(2450.0) == pytest.approx(8030.0)
        assert vapor.specific_heat(2600.0) == pytest.approx(417030.0)
        assert vapor.specific_heat_cv(2600.0) == pytest.approx(17030.0)

    def test_viscosity(self, vapor):
        assert vapor.viscosity(1000.0) == pytest.approx(6.083e-9 * 1000.0 + 1.2606e-5)

    def test_conductivity_table_point(self, vapor):
        assert vapor.conductivity(1000.0, 4903.0) == pytest.approx(0.043583)

    def test_conductivity_bilinear(self, vapor):
        k = vapor.conductivity(1050.0, 4903.0)
        assert k == pytest.approx(0.5 * (0.043583 + 0.039399))

    def test_conductivity_vectorised(self, vapor):
        T = np.array([950.0, 1000.0, 1250.0])
        p = np.array([2000.0, 50000.0, 90000.0])
        k = vapor.conductivity(T, p)
        assert k.shape == (3,)
        assert np.all(k > 0.0)

    def test_temperature_extrapolation(self, vapor, caplog):
        with caplog.at_level(logging.WARNING):
            k = vapor.conductivity(1600.0, 4903.0)
        assert k == pytest.approx(0.049162 * np.sqrt(1600.0 / 1500.0))
        assert any("sqrt(T)" in record.message for record in caplog.records)

    def test_pressure_extrapolation(self, vapor, caplog):
        with caplog.at_level(logging.WARNING):
            k = vapor.conductivity(1000.0, 2e5)
        assert k == pytest.approx(0.0520)
        assert any("constant-pressure" in record.message for record in caplog.records)

    def test_saturation_curve(self, vapor):
        p_sat = vapor.saturation_pressure(1000.0)
        assert 1e4 < p_sat < 3e4
        assert vapor.saturation_pressure(1100.0) > p_sat
        assert vapor.saturation_pressure_derivative(1000.0) > 0.0

    def test_latent_heat(self, vapor):
        assert 3.9e6 < vapor.latent_heat(1000.0) < 4.2e6

    def test_saturated_density(self, vapor):
        rho = vapor.density(1000.0)
        ideal = vapor.saturation_pressure(1000.0) / (vapor.R * 1000.0)
        assert 0.0 < rho < LiquidSodium().density(1000.0)
        assert rho == pytest.approx(ideal, rel=0.2)


class TestConstantProperties:

    def test_values(self):
        fluid = ConstantProperties(R=461.5, cp=2010.0, mu=1.3e-5, k=0.028)
        T = np.full(4, 370.0)
        assert np.all(fluid.specific_heat(T) == 2010.0)
        assert np.all(fluid.conductivity(T, T) == 0.028)
        assert fluid.viscosity(370.0) == 1.3e-5
        assert fluid.prandtl_number(370.0) == pytest.approx(1.3e-5 * 2010.0 / 0.028)

    def test_no_density_without_rho(self):
        with pytest.raises(ValueError):
            ConstantProperties(R=461.5, cp=2010.0, mu=1.3e-5, k=0.028).density(370.0)

    def test_no_saturation_curve(self):
        with pytest.raises(NotImplementedError):
            ConstantProperties(R=461.5, cp=2010.0, mu=1.3e-5, k=0.028).saturation_pressure(370.0)


class TestCorrelations:

    def test_friction_factor(self):
        expected = 1.0 / (0.79 * np.log(1e4) - 1.64)**2
        assert friction_factor(1e4) == pytest.approx(expected)

    def test_laminar_nusselt(self):
        assert nusselt_number(500.0, 0.7) == 4.36

    def test_gnielinski(self):
        Re, Pr = 1e4, 0.7
        f8 = friction_factor(Re) / 8.0
        expected = f8 * (Re - 1000.0) * Pr / (1.0 + 12.7 * np.sqrt(f8) * (Pr**(2.0 / 3.0) - 1.0))
        assert nusselt_number(Re, Pr) == pytest.approx(expected)

    def test_heat_transfer_coefficient(self):
        assert heat_transfer_coefficient(500.0, 1.0, 0.05, 0.1) == pytest.approx(2.18)

    @pytest.mark.parametrize("Re, Pr", [(0.0, 0.7), (-10.0, 0.7), (500.0, 0.0), (5e4, -1.0)])
    def test_invalid_dimensionless_numbers(self, Re, Pr):
        with pytest.raises(InvalidPhysicalInputError):
            nusselt_number(Re, Pr)

    def test_invalid_friction_factor(self):
        with pytest.raises(InvalidPhysicalInputError):
            friction_factor(0.0)

    def test_invalid_geometry(self):
        with pytest.raises(InvalidPhysicalInputError):
            heat_transfer_coefficient(5e4, 0.7, 0.05, 0.0)
        with pytest.raises(ValueError):
            heat_transfer_coefficient(5e4, 0.7, -1.0, 0.1)
