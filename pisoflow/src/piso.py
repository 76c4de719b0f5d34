"""
PISO inner-iteration controller.

One inner iteration is one momentum predictor solve followed by a fixed
number of pressure corrector passes. The momentum diagonal b_U computed by
the predictor is held fixed through all corrector passes of that iteration.
The loop stops when the largest velocity correction of the last corrector
pass drops to the tolerance or when the iteration cap is exhausted.
"""

import logging
from dataclasses import dataclass

import numpy as np

from .mesh import Mesh1D
from .gas import GasProperties
from .state import FlowState, refresh_pressure_ghosts
from .reconstruction import FaceInterpolation
from .sources import SourceFields
from .momentum import predict_velocity
from .pressure import solve_pressure_correction, correct_pressure_velocity

logger = logging.getLogger(__name__)


@dataclass
class PisoResult:
    """Outcome of one inner loop."""
    converged: bool
    residual: float
    iterations: int


class PisoController:
    """Runs the predictor/corrector loop of a single time step."""

    def __init__(self, mesh: Mesh1D, gas: GasProperties, fluid, dt: float,
                 faces: FaceInterpolation, velocity_bcs, pressure_bcs,
                 max_iterations: int = 200, n_correctors: int = 2,
                 tolerance: float = 1e-8, enforce_boundaries: bool = False):
        """
        Args:
            mesh: Computational mesh
            gas: State relation
            fluid: Property provider (molecular viscosity)
            dt: Time step [s]
            faces: Face velocity reconstruction shared with the other assemblers
            velocity_bcs: (left, right) velocity boundary conditions
            pressure_bcs: (left, right) pressure boundary conditions
            max_iterations: Inner iteration cap
            n_correctors: Corrector passes per predictor solve
            tolerance: Convergence threshold on the velocity correction [m/s]
            enforce_boundaries: Overwrite boundary values after each correction
        """
        if max_iterations < 1:
            raise ValueError(f"max_iterations must be at least 1, got {max_iterations}")
        if n_correctors < 1:
            raise ValueError(f"n_correctors must be at least 1, got {n_correctors}")

        self.mesh = mesh
        self.gas = gas
        self.fluid = fluid
        self.dt = dt
        self.faces = faces
        self.velocity_bcs = tuple(velocity_bcs)
        self.pressure_bcs = tuple(pressure_bcs)
        self.max_iterations = max_iterations
        self.n_correctors = n_correctors
        self.tolerance = tolerance
        self.enforce_boundaries = enforce_boundaries

    def predict(self, state: FlowState, sources: SourceFields):
        """Momentum predictor: store u* and b_U on the state."""
        mu = self.fluid.viscosity(state.T)
        u_star, b_U = predict_velocity(state, self.mesh, mu, sources.Su, self.dt,
                                       self.faces, *self.velocity_bcs)
        state.u[:] = u_star
        state.b_U[:] = b_U

    def correct(self, state: FlowState, sources: SourceFields) -> float:
        """One pressure corrector pass; returns the largest velocity change."""
        p_prime = solve_pressure_correction(state, self.mesh, self.gas, sources.Sm,
                                            self.dt, self.faces, *self.pressure_bcs)
        return correct_pressure_velocity(state, p_prime, self.mesh, self.gas,
                                         self.pressure_bcs, self.velocity_bcs,
                                         enforce_boundaries=self.enforce_boundaries)

    def run(self, state: FlowState, sources: SourceFields) -> PisoResult:
        """
        Iterate predictor and correctors on the state in place.

        Returns:
            PisoResult with the convergence flag, the final residual and the
            number of inner iterations performed
        """
        refresh_pressure_ghosts(state, *self.pressure_bcs)

        iteration = 0
        max_err = np.inf
        while iteration < self.max_iterations and max_err > self.tolerance:
            self.predict(state, sources)
            for _ in range(self.n_correctors):
                max_err = self.correct(state, sources)
            iteration += 1
            logger.debug(f"PISO iteration {iteration}: max velocity correction {max_err:.4e}")

        converged = bool(max_err <= self.tolerance)
        if not converged:
            logger.warning(f"PISO loop not converged after {iteration} iterations "
                           f"(residual {max_err:.4e} > tolerance {self.tolerance:.1e})")

        return PisoResult(converged=converged, residual=float(max_err), iterations=iteration)
