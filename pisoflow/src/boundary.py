"""
Boundary conditions for the 1D PISO solver.

Boundary values are imposed through the first and last rows of each
assembled tridiagonal system, never by patching the solution afterwards.
Pressure-like fields additionally need ghost values for the padded
face-reconstruction stencil.
"""

import numpy as np
from abc import ABC, abstractmethod

from .tridiagonal import TridiagonalSystem


def _check_side(side: str):
    if side not in ('left', 'right'):
        raise ValueError(f"Unknown boundary side: {side!r}. Options: 'left', 'right'")


class BoundaryCondition(ABC):
    """Abstract base class for boundary conditions."""

    @abstractmethod
    def apply(self, system: TridiagonalSystem, side: str) -> TridiagonalSystem:
        """
        Write the boundary row for the field itself.

        Args:
            system: Assembled system (modified in place)
            side: 'left' or 'right'

        Returns:
            The same system
        """
        pass

    @abstractmethod
    def apply_correction(self, system: TridiagonalSystem, side: str) -> TridiagonalSystem:
        """Write the homogeneous boundary row for an increment of the field."""
        pass

    @abstractmethod
    def ghost(self, values: np.ndarray, side: str) -> float:
        """Value of the ghost cell beyond the given side."""
        pass

    def enforce(self, values: np.ndarray, side: str) -> np.ndarray:
        """
        Overwrite the boundary value in place.

        Only used as a second enforcement layer after explicit corrections.
        """
        _check_side(side)
        return values


class FixedValueBC(BoundaryCondition):
    """Dirichlet condition: the boundary cell holds a prescribed value."""

    def __init__(self, value: float):
        self.value = float(value)

    def _set_row(self, system: TridiagonalSystem, side: str, value: float):
        _check_side(side)
        if side == 'left':
            system.b[0] = 1.0
            system.c[0] = 0.0
            system.d[0] = value
        else:
            system.a[-1] = 0.0
            system.b[-1] = 1.0
            system.d[-1] = value
        return system

    def apply(self, system, side):
        return self._set_row(system, side, self.value)

    def apply_correction(self, system, side):
        # The field is pinned, so its increment is zero
        return self._set_row(system, side, 0.0)

    def ghost(self, values, side):
        _check_side(side)
        return self.value

    def enforce(self, values, side):
        _check_side(side)
        values[0 if side == 'left' else -1] = self.value
        return values

    def __repr__(self):
        return f"FixedValueBC({self.value!r})"


class ZeroGradientBC(BoundaryCondition):
    """Neumann condition: the boundary cell copies its interior neighbour."""

    def _set_row(self, system: TridiagonalSystem, side: str):
        _check_side(side)
        if side == 'left':
            system.b[0] = 1.0
            system.c[0] = -1.0
            system.d[0] = 0.0
        else:
            system.a[-1] = -1.0
            system.b[-1] = 1.0
            system.d[-1] = 0.0
        return system

    def apply(self, system, side):
        return self._set_row(system, side)

    def apply_correction(self, system, side):
        return self._set_row(system, side)

    def ghost(self, values, side):
        _check_side(side)
        return float(values[0] if side == 'left' else values[-1])

    def enforce(self, values, side):
        _check_side(side)
        if side == 'left':
            values[0] = values[1]
        else:
            values[-1] = values[-2]
        return values

    def __repr__(self):
        return "ZeroGradientBC()"
