"""
Built-in cases and the wiring from a CaseConfig to a ready Solver1D.
"""

import logging
from dataclasses import replace

from .config import (CaseConfig, DomainConfig, InitialConfig, BoundaryConfig,
                     SourcesConfig, ZoneConfig, FluidConfig, OutputConfig)
from .solver import Solver1D, SolverConfig
from .mesh import Mesh1D
from .gas import GasProperties
from .state import FlowState
from .boundary import FixedValueBC, ZeroGradientBC
from .sources import ZoneSourceTerm, MASS, MOMENTUM, ENERGY
from .properties import ConstantProperties, LiquidSodium, SodiumVapor
from .turbulence import KOmegaModel, NoTurbulence

logger = logging.getLogger(__name__)


def sodium_loop_case() -> CaseConfig:
    """
    Sodium vapour in a 1 m pipe driven by source and sink zones.

    Mass (±0.1 kg/(m³·s)) and energy (±5e5 W/m³) are added over the first
    20 % of the pipe and removed over the last 20 %; temperature is
    zero-gradient at both ends and both end velocities are held at rest.
    """
    return CaseConfig(
        name='sodium_loop',
        domain=DomainConfig(length=1.0, n_cells=100),
        initial=InitialConfig(u=0.01, p=50000.0, T=1000.0),
        boundary=BoundaryConfig(u_inlet=0.0, u_outlet=0.0, p_outlet=50000.0,
                                temperature='zero_gradient'),
        sources=SourcesConfig(mass=ZoneConfig(rate=0.1),
                              energy=ZoneConfig(rate=5e5)),
        fluid=FluidConfig(model='sodium_vapor', R=361.8),
        output=OutputConfig(profiles='output/sodium_loop.csv'),
        solver=SolverConfig(dt=1e-3, t_max=1.0, max_inner_iter=200, n_correctors=2,
                            tolerance=1e-8),
    )


def vapor_channel_case() -> CaseConfig:
    """
    Water vapour between an evaporator at 390 K and a condenser at 350 K.
    """
    return CaseConfig(
        name='vapor_channel',
        domain=DomainConfig(length=1.0, n_cells=100),
        initial=InitialConfig(u=0.01, p=50000.0, T=370.0),
        boundary=BoundaryConfig(u_inlet=0.0, u_outlet=0.0, p_outlet=50000.0,
                                temperature='fixed', T_inlet=390.0, T_outlet=350.0),
        sources=SourcesConfig(mass=ZoneConfig(rate=0.1)),
        fluid=FluidConfig(model='constant', R=461.5, cp=2010.0, mu=1.3e-5, k=0.028),
        output=OutputConfig(profiles='output/vapor_channel.csv'),
        solver=SolverConfig(dt=1e-3, t_max=1.0, max_inner_iter=200, n_correctors=2,
                            tolerance=1e-8, enforce_boundaries=True),
    )


BUILTIN_CASES = {
    'sodium_loop': sodium_loop_case,
    'vapor_channel': vapor_channel_case,
}


def make_fluid(fluid: FluidConfig):
    """Property provider for the configured fluid model."""
    if fluid.model == 'sodium_vapor':
        return SodiumVapor()
    elif fluid.model == 'liquid_sodium':
        return LiquidSodium()
    elif fluid.model == 'constant':
        return ConstantProperties(R=fluid.R, cp=fluid.cp, mu=fluid.mu, k=fluid.k)
    else:
        raise ValueError(f"Unknown fluid model: {fluid.model}. "
                         "Options: 'sodium_vapor', 'liquid_sodium', 'constant'")


def make_boundary_conditions(boundary: BoundaryConfig):
    """
    Velocity, pressure and temperature boundary condition pairs.

    Returns:
        (velocity, pressure, temperature), each a (left, right) tuple
    """
    if boundary.outlet_velocity == 'fixed':
        u_right = FixedValueBC(boundary.u_outlet)
    elif boundary.outlet_velocity == 'zero_gradient':
        u_right = ZeroGradientBC()
    else:
        raise ValueError(f"Unknown outlet velocity condition: {boundary.outlet_velocity}. "
                         "Options: 'fixed', 'zero_gradient'")
    velocity = (FixedValueBC(boundary.u_inlet), u_right)

    pressure = (ZeroGradientBC(), FixedValueBC(boundary.p_outlet))

    if boundary.temperature == 'zero_gradient':
        temperature = (ZeroGradientBC(), ZeroGradientBC())
    elif boundary.temperature == 'fixed':
        if boundary.T_inlet is None or boundary.T_outlet is None:
            raise ValueError("Fixed temperature boundaries need T_inlet and T_outlet")
        temperature = (FixedValueBC(boundary.T_inlet), FixedValueBC(boundary.T_outlet))
    else:
        raise ValueError(f"Unknown temperature condition: {boundary.temperature}. "
                         "Options: 'zero_gradient', 'fixed'")

    return velocity, pressure, temperature


def build_solver(case: CaseConfig) -> Solver1D:
    """Create a solver with mesh, fluid, boundaries, sources and initial state."""
    mesh = Mesh1D.uniform(case.domain.length, case.domain.n_cells)
    gas = GasProperties(R=case.fluid.R, T_floor=case.fluid.T_floor,
                        rho_floor=case.fluid.rho_floor)
    fluid = make_fluid(case.fluid)

    if case.turbulence.enabled:
        turbulence = KOmegaModel(intensity=case.turbulence.intensity,
                                 length_scale=case.turbulence.length_scale,
                                 reference_velocity=case.turbulence.reference_velocity)
    else:
        turbulence = NoTurbulence()

    solver = Solver1D(mesh, gas, fluid, replace(case.solver), turbulence=turbulence)

    velocity, pressure, temperature = make_boundary_conditions(case.boundary)
    solver.set_boundary_conditions(velocity=velocity, pressure=pressure,
                                   temperature=temperature)

    for row, zone in ((MASS, case.sources.mass), (MOMENTUM, case.sources.momentum),
                      (ENERGY, case.sources.energy)):
        if zone.rate != 0.0:
            solver.add_source_term(ZoneSourceTerm(row, zone.rate, zone.source_zone,
                                                  zone.sink_zone))

    state = FlowState.uniform(mesh.n_cells, u=case.initial.u, p=case.initial.p,
                              T=case.initial.T, gas=gas)
    solver.set_initial_condition(state)

    logger.info(f"Built case '{case.name}': {mesh.n_cells} cells, fluid {fluid!r}, "
                f"turbulence {turbulence!r}")
    return solver


def run_case(case: CaseConfig, max_time: float = None):
    """
    Build and run a case, writing the profiles when configured.

    Returns:
        (solver, info) with the run statistics of Solver1D.solve
    """
    solver = build_solver(case)
    info = solver.solve(max_time=max_time)
    if case.output.profiles:
        path = solver.write_profiles(case.output.profiles)
        logger.info(f"Wrote profiles to {path}")
    return solver, info
