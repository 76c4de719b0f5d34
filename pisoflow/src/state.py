"""
Simulation state for the 1D PISO solver.

All fields are cell-centered on a collocated grid:
    u    - velocity [m/s]
    p    - pressure [Pa]
    T    - temperature [K]
    rho  - density [kg/m³], always derived from (p, T)
    b_U  - momentum-matrix diagonal, the inverse of the cell compliance
    mu_t - eddy viscosity [Pa·s]

Snapshots of the previous time step (T_old, rho_old, p_old) are written
only by the time-stepping driver.
"""

import numpy as np
from dataclasses import dataclass, field

from .gas import GasProperties


class PaddedField:
    """
    Cell field with one ghost cell on each side.

    Cell i of the interior lives at index i + 1 of the backing array, so
    at(-1) and at(n) are the ghosts.
    """

    def __init__(self, n: int, fill: float = 0.0):
        self.n = n
        self.data = np.full(n + 2, float(fill))

    def at(self, i: int) -> float:
        return self.data[i + 1]

    def span(self, start: int, stop: int) -> np.ndarray:
        """Values of cells start..stop-1 (start >= -1, stop <= n + 1)."""
        if start < -1 or stop > self.n + 1 or stop < start:
            raise IndexError(f"span({start}, {stop}) outside padded range [-1, {self.n + 1})")
        return self.data[start + 1:stop + 1]

    @property
    def interior(self) -> np.ndarray:
        return self.data[1:-1]

    def refresh(self, values: np.ndarray, left_ghost: float, right_ghost: float):
        """Copy the interior values and set both ghosts."""
        self.data[1:-1] = values
        self.data[0] = left_ghost
        self.data[-1] = right_ghost
        return self

    def copy(self) -> 'PaddedField':
        other = PaddedField(self.n)
        other.data[:] = self.data
        return other


@dataclass
class FlowState:
    """Mutable field aggregate owned by the time-stepping driver."""
    u: np.ndarray
    p: np.ndarray
    T: np.ndarray
    rho: np.ndarray
    b_U: np.ndarray
    mu_t: np.ndarray = None
    T_old: np.ndarray = None
    rho_old: np.ndarray = None
    p_old: np.ndarray = None
    p_padded: PaddedField = field(default=None, repr=False)

    def __post_init__(self):
        self.u = np.asarray(self.u, dtype=float).copy()
        self.p = np.asarray(self.p, dtype=float).copy()
        self.T = np.asarray(self.T, dtype=float).copy()
        self.rho = np.asarray(self.rho, dtype=float).copy()
        self.b_U = np.asarray(self.b_U, dtype=float).copy()

        n = len(self.u)
        for name in ('p', 'T', 'rho', 'b_U'):
            if len(getattr(self, name)) != n:
                raise ValueError(f"Field {name} has length {len(getattr(self, name))}, expected {n}")

        if self.mu_t is None:
            self.mu_t = np.zeros(n)
        if self.T_old is None:
            self.T_old = self.T.copy()
        if self.rho_old is None:
            self.rho_old = self.rho.copy()
        if self.p_old is None:
            self.p_old = self.p.copy()
        if self.p_padded is None:
            # Mirror ghosts until the driver refreshes them from the BCs
            self.p_padded = PaddedField(n).refresh(self.p, self.p[0], self.p[-1])

    @property
    def n_cells(self) -> int:
        return len(self.u)

    @classmethod
    def uniform(cls, n_cells: int, u: float, p: float, T: float,
                gas: GasProperties, b_U: float = 1.0) -> 'FlowState':
        """
        Create a uniform state with a density consistent with (p, T).

        Args:
            n_cells: Number of cells
            u: Velocity [m/s]
            p: Pressure [Pa]
            T: Temperature [K]
            gas: State relation
            b_U: Initial momentum diagonal
        """
        p_arr = np.full(n_cells, float(p))
        T_arr = np.full(n_cells, float(T))
        return cls(u=np.full(n_cells, float(u)), p=p_arr, T=T_arr,
                   rho=gas.density(p_arr, T_arr),
                   b_U=np.broadcast_to(np.asarray(b_U, dtype=float), (n_cells,)))

    def snapshot(self):
        """Store the previous-step copies of T, rho and p."""
        self.T_old = self.T.copy()
        self.rho_old = self.rho.copy()
        self.p_old = self.p.copy()

    def copy(self) -> 'FlowState':
        return FlowState(u=self.u, p=self.p, T=self.T, rho=self.rho, b_U=self.b_U,
                         mu_t=self.mu_t.copy(), T_old=self.T_old.copy(),
                         rho_old=self.rho_old.copy(), p_old=self.p_old.copy(),
                         p_padded=self.p_padded.copy())


def refresh_pressure_ghosts(state: FlowState, bc_left, bc_right) -> PaddedField:
    """Copy p into the padded buffer and refresh its ghosts from the BCs."""
    return state.p_padded.refresh(state.p,
                                  bc_left.ghost(state.p, 'left'),
                                  bc_right.ghost(state.p, 'right'))
