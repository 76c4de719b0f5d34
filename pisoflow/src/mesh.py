"""
Uniform 1D mesh for pipe flow.
"""

import numpy as np
from dataclasses import dataclass


@dataclass
class Mesh1D:
    """
    Uniform cell-centered finite volume mesh.

    - x_faces: Face locations (n_cells + 1)
    - x_cells: Cell centers (n_cells)
    - dx: Cell width (uniform)
    """
    x_faces: np.ndarray

    def __post_init__(self):
        self.x_faces = np.asarray(self.x_faces, dtype=float)
        self.n_cells = len(self.x_faces) - 1
        if self.n_cells < 3:
            raise ValueError(f"At least 3 cells are required, got {self.n_cells}")
        widths = np.diff(self.x_faces)
        if not np.allclose(widths, widths[0]):
            raise ValueError("Mesh1D only supports uniform spacing")
        self.dx = float(self.x_faces[-1] - self.x_faces[0]) / self.n_cells
        self.x_cells = 0.5 * (self.x_faces[:-1] + self.x_faces[1:])

    @property
    def length(self) -> float:
        return float(self.x_faces[-1] - self.x_faces[0])

    @classmethod
    def uniform(cls, length: float, n_cells: int, x_min: float = 0.0) -> 'Mesh1D':
        """
        Create a uniform mesh.

        Args:
            length: Domain length [m]
            n_cells: Number of cells
            x_min: Position of the inlet face [m]
        """
        if length <= 0:
            raise ValueError(f"Domain length must be positive, got {length}")
        x_faces = np.linspace(x_min, x_min + length, n_cells + 1)
        return cls(x_faces=x_faces)
