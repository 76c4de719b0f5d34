"""
Time-stepping driver for the 1D compressible PISO solver.
"""

import logging

import numpy as np
import matplotlib.pyplot as plt
from dataclasses import dataclass, field
from typing import Dict

from .gas import GasProperties, update_density
from .state import FlowState, refresh_pressure_ghosts
from .mesh import Mesh1D
from .sources import CompositeSourceTerm, SourceTerm
from .boundary import BoundaryCondition
from .reconstruction import FaceInterpolation, FaceStencil
from .momentum import boundary_momentum_diagonal
from .piso import PisoController, PisoResult
from .energy import solve_energy
from .turbulence import TurbulenceModel, NoTurbulence
from .diagnostics import StepDiagnostics
from . import output

logger = logging.getLogger(__name__)


@dataclass
class SolverConfig:
    """Configuration for the 1D PISO solver."""
    dt: float = field(default=1e-3, metadata={'unit': 's'})
    t_max: float = field(default=1.0, metadata={'unit': 's'})
    max_inner_iter: int = 200
    n_correctors: int = 2
    tolerance: float = field(default=1e-8, metadata={'unit': 'm/s'})
    rhie_chow: bool = True
    face_stencil: str = 'full'  # Options: 'full', 'one_sided'
    enforce_boundaries: bool = False  # Overwrite boundary values after each correction
    turbulent_prandtl: float = 0.01
    print_interval: int = 100
    pipe_diameter: float = field(default=0.1, metadata={'unit': 'm'})  # Reynolds number diagnostic only


class Solver1D:
    """
    1D Compressible PISO Solver.

    Features:
    - Collocated grid with Rhie-Chow face velocities
    - Implicit momentum predictor with repeated pressure corrections
    - Ideal-gas state relation with temperature and density floors
    - Implicit energy equation with pressure work
    - Optional k-omega eddy viscosity in the effective conductivity
    - Fixed-in-time mass, momentum and energy sources
    """

    def __init__(self, mesh: Mesh1D, gas: GasProperties, fluid,
                 config: SolverConfig = None, turbulence: TurbulenceModel = None):
        """
        Initialize the solver.

        Args:
            mesh: Computational mesh
            gas: State relation
            fluid: Property provider (viscosity, conductivity, specific heat)
            config: Solver configuration
            turbulence: Eddy-viscosity model (laminar when omitted)
        """
        self.mesh = mesh
        self.gas = gas
        self.fluid = fluid
        self.config = config if config is not None else SolverConfig()
        self.turbulence = turbulence if turbulence is not None else NoTurbulence()

        if self.config.dt <= 0.0:
            raise ValueError(f"Time step must be positive, got {self.config.dt}")

        try:
            stencil = FaceStencil(self.config.face_stencil)
        except ValueError:
            raise ValueError(f"Unknown face stencil: {self.config.face_stencil}. "
                             "Options: 'full', 'one_sided'") from None
        self.faces = FaceInterpolation(rhie_chow=self.config.rhie_chow, stencil=stencil)

        self.source_terms = CompositeSourceTerm()

        # Boundary conditions (must be set before solving)
        self.velocity_bcs = None
        self.pressure_bcs = None
        self.temperature_bcs = None

        # Solution storage
        self.state = None
        self.sources = None
        self.controller = None
        self.time = 0.0
        self.iteration = 0
        self.history = []
        self.diagnostics = []

    def set_boundary_conditions(self, velocity, pressure, temperature):
        """
        Set boundary conditions.

        Args:
            velocity: (left, right) velocity boundary conditions
            pressure: (left, right) pressure boundary conditions
            temperature: (left, right) temperature boundary conditions
        """
        for name, pair in (('velocity', velocity), ('pressure', pressure),
                           ('temperature', temperature)):
            if len(pair) != 2 or not all(isinstance(bc, BoundaryCondition) for bc in pair):
                raise ValueError(f"{name} boundary conditions must be a (left, right) "
                                 "pair of BoundaryCondition")
        self.velocity_bcs = tuple(velocity)
        self.pressure_bcs = tuple(pressure)
        self.temperature_bcs = tuple(temperature)
        self.controller = None

    def add_source_term(self, source: SourceTerm):
        """Add a source term to the solver."""
        self.source_terms.add(source)
        self.sources = None

    def set_initial_condition(self, state: FlowState, initialize_momentum_diagonal: bool = True):
        """
        Set the initial flow state.

        Args:
            state: Initial fields (copied)
            initialize_momentum_diagonal: Replace b_U by the inertia plus
                viscous estimate rho dx/dt + 2 (4/3) mu / dx

        Time, step count, history and the turbulence model's transported
        fields all restart from scratch.
        """
        if state.n_cells != self.mesh.n_cells:
            raise ValueError(f"Initial state has {state.n_cells} cells, "
                             f"mesh has {self.mesh.n_cells}")
        self.state = state.copy()
        update_density(self.state, self.gas)
        if initialize_momentum_diagonal:
            mu = self.fluid.viscosity(self.state.T)
            self.state.b_U[:] = boundary_momentum_diagonal(self.state.rho, mu,
                                                           self.mesh.dx, self.config.dt)
        self.state.snapshot()
        self.turbulence.reset(self.mesh.n_cells)
        self.time = 0.0
        self.iteration = 0
        self.history = []
        self.diagnostics = []

    def get_state(self) -> FlowState:
        """Get a copy of the current flow state."""
        return self.state.copy()

    def _check_ready(self):
        if self.velocity_bcs is None or self.pressure_bcs is None or self.temperature_bcs is None:
            raise ValueError("Boundary conditions must be set before solving")
        if self.state is None:
            raise ValueError("Initial condition must be set before solving")

    def _prepare(self):
        if self.sources is None:
            self.sources = self.source_terms.fields(self.mesh)
        if self.controller is None:
            self.controller = PisoController(
                self.mesh, self.gas, self.fluid, self.config.dt, self.faces,
                self.velocity_bcs, self.pressure_bcs,
                max_iterations=self.config.max_inner_iter,
                n_correctors=self.config.n_correctors,
                tolerance=self.config.tolerance,
                enforce_boundaries=self.config.enforce_boundaries)
            refresh_pressure_ghosts(self.state, *self.pressure_bcs)

    def step(self) -> PisoResult:
        """
        Perform one time step.

        Returns:
            Result of the PISO inner loop
        """
        self._check_ready()
        self._prepare()

        dt = self.config.dt
        state = self.state
        state.snapshot()

        # Pressure-velocity coupling
        result = self.controller.run(state, self.sources)
        update_density(state, self.gas)

        # Eddy viscosity for the effective conductivity
        mu = self.fluid.viscosity(state.T)
        state.mu_t[:] = self.turbulence.compute_eddy_viscosity(state, mu, self.mesh, dt)

        # Energy
        state.T[:] = solve_energy(state, self.mesh, self.fluid, self.sources.St, dt,
                                  self.faces, *self.temperature_bcs,
                                  turbulent_prandtl=self.config.turbulent_prandtl)
        update_density(state, self.gas)

        # Update time and iteration
        self.time += dt
        self.iteration += 1
        self.history.append(result)

        if self.iteration % self.config.print_interval == 0:
            diag = StepDiagnostics.from_state(self.iteration, self.time, state, result, dt,
                                              self.mesh.dx, mu, self.config.pipe_diameter)
            self.diagnostics.append(diag)
            logger.info(diag.summary())

        return result

    def solve(self, max_time: float = None) -> Dict:
        """
        Advance the solution to t_max (or max_time).

        Args:
            max_time: Simulation end time overriding config.t_max (optional)

        Returns:
            Dictionary with run statistics
        """
        self._check_ready()

        t_end = self.config.t_max if max_time is None else max_time
        n_steps = int(round((t_end - self.time) / self.config.dt))

        logger.info("Starting 1D compressible PISO solver")
        logger.info(f"Cells: {self.mesh.n_cells}, dx: {self.mesh.dx:.4e} m, "
                    f"dt: {self.config.dt:.4e} s, steps: {n_steps}")
        logger.info(f"Inner iterations: {self.config.max_inner_iter}, "
                    f"correctors: {self.config.n_correctors}, "
                    f"tolerance: {self.config.tolerance:.1e}, "
                    f"Rhie-Chow: {self.config.rhie_chow}, turbulence: {self.turbulence!r}")

        start = len(self.history)
        for _ in range(max(n_steps, 0)):
            self.step()

        results = self.history[start:]
        n_converged = sum(1 for r in results if r.converged)
        if n_converged < len(results):
            logger.warning(f"{len(results) - n_converged} of {len(results)} time steps "
                           "ended without inner convergence")
        logger.info(f"Reached t = {self.time:.4e} s after {self.iteration} steps")

        return {
            'steps': len(results),
            'time': self.time,
            'converged_steps': n_converged,
            'nonconverged_steps': len(results) - n_converged,
            'final_residual': results[-1].residual if results else None,
        }

    def write_profiles(self, path):
        """Write the current u, p, T profiles as comma-separated text."""
        return output.write_profiles(path, self.state.u, self.state.p, self.state.T)

    def plot_solution(self, filename: str = None, show: bool = True):
        """Plot the current solution."""
        state = self.state
        x = self.mesh.x_cells

        fig, axes = plt.subplots(2, 2, figsize=(10, 8))
        fig.suptitle(f'1D PISO Solution (t = {self.time:.4e} s, step = {self.iteration})')

        panels = [
            (state.u, 'r-', 'Velocity [m/s]', 'Velocity'),
            (state.p / 1000, 'g-', 'Pressure [kPa]', 'Pressure'),
            (state.T, 'm-', 'Temperature [K]', 'Temperature'),
            (state.rho, 'b-', 'Density [kg/m³]', 'Density'),
        ]
        for ax, (values, style, ylabel, title) in zip(axes.flat, panels):
            ax.plot(x, values, style, linewidth=2)
            ax.set_xlabel('x [m]')
            ax.set_ylabel(ylabel)
            ax.set_title(title)
            ax.grid(True)

        plt.tight_layout()

        if filename:
            plt.savefig(filename, dpi=150, bbox_inches='tight')
            logger.info(f"Saved plot to {filename}")

        if show:
            plt.show()
        return fig

    def plot_convergence(self, filename: str = None, show: bool = True):
        """Plot the final inner residual and inner iteration count of every step."""
        residuals = np.array([max(r.residual, 1e-300) for r in self.history])
        iterations = [r.iterations for r in self.history]

        fig, (ax_res, ax_it) = plt.subplots(2, 1, figsize=(8, 7), sharex=True)
        ax_res.semilogy(residuals, 'b-', linewidth=1)
        ax_res.axhline(self.config.tolerance, color='k', linestyle='--', linewidth=1)
        ax_res.set_ylabel('Residual [m/s]')
        ax_res.set_title('Convergence History')
        ax_res.grid(True)

        ax_it.plot(iterations, 'r-', linewidth=1)
        ax_it.set_xlabel('Time step')
        ax_it.set_ylabel('Inner iterations')
        ax_it.grid(True)

        plt.tight_layout()

        if filename:
            plt.savefig(filename, dpi=150, bbox_inches='tight')

        if show:
            plt.show()
        return fig
