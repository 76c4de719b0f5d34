"""
1D Compressible PISO Solver Package
===================================

A segregated pressure-based solver for time-dependent compressible flow in
a pipe.

Features:
- Collocated grid with Rhie-Chow face velocities
- Momentum predictor and repeated pressure corrections (PISO)
- Ideal-gas state relation with temperature and density floors
- Implicit energy equation with pressure work and optional k-omega eddy
  conductivity
- Sodium and constant-property fluid models
- JSON case files with physical units

State representation (cell-centered):
    u    - velocity [m/s]
    p    - pressure [Pa]
    T    - temperature [K]
    rho  - density [kg/m³], derived from (p, T)
    b_U  - momentum matrix diagonal

Source rates use symbols Sm (mass), Su (momentum) and St (energy).

Example:
    case = sodium_loop_case()
    solver = build_solver(case)
    info = solver.solve(max_time=0.1)
    solver.write_profiles('profiles.csv')
"""

from .errors import PisoflowError, SingularSystemError, InvalidPhysicalInputError
from .tridiagonal import solve_tridiagonal, TridiagonalSystem
from .gas import GasProperties, update_density
from .mesh import Mesh1D
from .state import FlowState, PaddedField, refresh_pressure_ghosts
from .boundary import BoundaryCondition, FixedValueBC, ZeroGradientBC
from .reconstruction import FaceInterpolation, FaceStencil, face_velocities
from .sources import (SourceTerm, ZoneSourceTerm, CellSourceTerm, CompositeSourceTerm,
                      SourceFields, MASS, MOMENTUM, ENERGY)
from .properties import (FluidProperties, ConstantProperties, LiquidSodium, SodiumVapor,
                         friction_factor, nusselt_number, heat_transfer_coefficient)
from .turbulence import TurbulenceModel, NoTurbulence, KOmegaModel
from .piso import PisoController, PisoResult
from .solver import Solver1D, SolverConfig
from .config import CaseConfig, load_case, save_case
from .cases import sodium_loop_case, vapor_channel_case, build_solver, run_case
from .output import write_profiles, read_profiles
from .log import setup_logging

__all__ = [
    # Errors
    'PisoflowError',
    'SingularSystemError',
    'InvalidPhysicalInputError',

    # Linear algebra
    'solve_tridiagonal',
    'TridiagonalSystem',

    # Gas properties
    'GasProperties',
    'update_density',

    # Mesh and state
    'Mesh1D',
    'FlowState',
    'PaddedField',
    'refresh_pressure_ghosts',

    # Boundary conditions
    'BoundaryCondition',
    'FixedValueBC',
    'ZeroGradientBC',

    # Face reconstruction
    'FaceInterpolation',
    'FaceStencil',
    'face_velocities',

    # Source terms
    'SourceTerm',
    'ZoneSourceTerm',
    'CellSourceTerm',
    'CompositeSourceTerm',
    'SourceFields',
    'MASS',
    'MOMENTUM',
    'ENERGY',

    # Fluid properties
    'FluidProperties',
    'ConstantProperties',
    'LiquidSodium',
    'SodiumVapor',
    'friction_factor',
    'nusselt_number',
    'heat_transfer_coefficient',

    # Turbulence
    'TurbulenceModel',
    'NoTurbulence',
    'KOmegaModel',

    # Solver
    'PisoController',
    'PisoResult',
    'Solver1D',
    'SolverConfig',

    # Cases and I/O
    'CaseConfig',
    'load_case',
    'save_case',
    'sodium_loop_case',
    'vapor_channel_case',
    'build_solver',
    'run_case',
    'write_profiles',
    'read_profiles',
    'setup_logging',
]

__version__ = '1.0.0'
