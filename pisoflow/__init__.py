"""
pisoflow - 1D Compressible PISO Solver
======================================

Re-exports all public components from pisoflow.src
"""

from pisoflow.src import (
    # Errors
    PisoflowError,
    SingularSystemError,
    InvalidPhysicalInputError,
    # Gas properties
    GasProperties,
    # Mesh and state
    Mesh1D,
    FlowState,
    # Boundary conditions
    BoundaryCondition,
    FixedValueBC,
    ZeroGradientBC,
    # Source terms
    SourceTerm,
    ZoneSourceTerm,
    CellSourceTerm,
    CompositeSourceTerm,
    # Fluid properties
    FluidProperties,
    ConstantProperties,
    LiquidSodium,
    SodiumVapor,
    # Turbulence
    TurbulenceModel,
    NoTurbulence,
    KOmegaModel,
    # Solver
    PisoResult,
    Solver1D,
    SolverConfig,
    # Cases
    CaseConfig,
    load_case,
    save_case,
    sodium_loop_case,
    vapor_channel_case,
    build_solver,
    run_case,
    setup_logging,
    __version__,
)

__all__ = [
    'PisoflowError',
    'SingularSystemError',
    'InvalidPhysicalInputError',
    'GasProperties',
    'Mesh1D',
    'FlowState',
    'BoundaryCondition',
    'FixedValueBC',
    'ZeroGradientBC',
    'SourceTerm',
    'ZoneSourceTerm',
    'CellSourceTerm',
    'CompositeSourceTerm',
    'FluidProperties',
    'ConstantProperties',
    'LiquidSodium',
    'SodiumVapor',
    'TurbulenceModel',
    'NoTurbulence',
    'KOmegaModel',
    'PisoResult',
    'Solver1D',
    'SolverConfig',
    'CaseConfig',
    'load_case',
    'save_case',
    'sodium_loop_case',
    'vapor_channel_case',
    'build_solver',
    'run_case',
    'setup_logging',
]
