"""
Source term classes for the 1D PISO solver.

Sources are fixed in time: they are evaluated once when the solver is set up
and consumed read-only by the assemblers.

Notation:
    Sm - mass source per volume [kg/(m³·s)]
    Su - momentum source per volume [N/m³]
    St - energy source per volume [W/m³]
"""

import numpy as np
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Union

from .mesh import Mesh1D

# Row indices of the source array
MASS = 0
MOMENTUM = 1
ENERGY = 2
N_EQUATIONS = 3

_FIELD_NAMES = {'mass': MASS, 'momentum': MOMENTUM, 'energy': ENERGY}


def field_index(field: Union[int, str]) -> int:
    """Resolve a source row from its index or name ('mass', 'momentum', 'energy')."""
    if isinstance(field, str):
        try:
            return _FIELD_NAMES[field.lower()]
        except KeyError:
            raise ValueError(f"Unknown source field: {field!r}. "
                             "Options: 'mass', 'momentum', 'energy'") from None
    if field not in (MASS, MOMENTUM, ENERGY):
        raise ValueError(f"Unknown source row: {field!r}")
    return int(field)


@dataclass
class SourceFields:
    """Per-cell source rates consumed by the assemblers."""
    Sm: np.ndarray
    Su: np.ndarray
    St: np.ndarray

    @classmethod
    def from_array(cls, S: np.ndarray) -> 'SourceFields':
        return cls(Sm=S[MASS].copy(), Su=S[MOMENTUM].copy(), St=S[ENERGY].copy())

    @classmethod
    def zeros(cls, n_cells: int) -> 'SourceFields':
        return cls.from_array(np.zeros((N_EQUATIONS, n_cells)))

    def integral(self, mesh: Mesh1D) -> np.ndarray:
        """Volume integral of each source row [per unit area]."""
        return np.array([np.sum(self.Sm), np.sum(self.Su), np.sum(self.St)]) * mesh.dx


class SourceTerm(ABC):
    """Abstract base class for source terms."""

    @abstractmethod
    def compute(self, mesh: Mesh1D) -> np.ndarray:
        """
        Compute the source contribution.

        Args:
            mesh: Computational mesh

        Returns:
            S: Source rate array of shape (3, n_cells), rows MASS, MOMENTUM, ENERGY
        """
        pass


class ZoneSourceTerm(SourceTerm):
    """
    Uniform source near the inlet balanced by a sink near the outlet.

    +rate acts on the first floor(N * source_zone) interior cells after the
    inlet cell and -rate on the last floor(N * sink_zone) interior cells
    before the outlet cell. Boundary cells never carry a source.
    """

    def __init__(self, field: Union[int, str], rate: float,
                 source_zone: float = 0.2, sink_zone: float = None):
        self.field = field_index(field)
        self.rate = float(rate)
        self.source_zone = float(source_zone)
        self.sink_zone = self.source_zone if sink_zone is None else float(sink_zone)

        for name in ('source_zone', 'sink_zone'):
            if not 0.0 <= getattr(self, name) <= 1.0:
                raise ValueError(f"{name} must lie in [0, 1], got {getattr(self, name)}")

    def zones(self, n_cells: int):
        """
        Cell index ranges of the source and sink zones.

        Returns:
            (source_slice, sink_slice)
        """
        n_source = int(np.floor(n_cells * self.source_zone))
        n_sink = int(np.floor(n_cells * self.sink_zone))
        if n_source + n_sink > n_cells - 2:
            raise ValueError(f"Source ({n_source}) and sink ({n_sink}) zones overlap "
                             f"on a mesh of {n_cells} cells")
        return slice(1, 1 + n_source), slice(n_cells - 1 - n_sink, n_cells - 1)

    def compute(self, mesh: Mesh1D) -> np.ndarray:
        S = np.zeros((N_EQUATIONS, mesh.n_cells))
        source, sink = self.zones(mesh.n_cells)
        S[self.field, source] += self.rate
        S[self.field, sink] -= self.rate
        return S

    def __repr__(self):
        return (f"ZoneSourceTerm(field={self.field}, rate={self.rate!r}, "
                f"source_zone={self.source_zone!r}, sink_zone={self.sink_zone!r})")


class CellSourceTerm(SourceTerm):
    """Explicit per-cell rates, e.g. {10: 0.5, 90: -0.5}."""

    def __init__(self, field: Union[int, str], values: Dict[int, float]):
        self.field = field_index(field)
        self.values = {int(i): float(v) for i, v in values.items()}

    def compute(self, mesh: Mesh1D) -> np.ndarray:
        S = np.zeros((N_EQUATIONS, mesh.n_cells))
        for i, rate in self.values.items():
            if not 0 <= i < mesh.n_cells:
                raise IndexError(f"Source cell {i} outside mesh of {mesh.n_cells} cells")
            S[self.field, i] += rate
        return S


class CompositeSourceTerm(SourceTerm):
    """Combines multiple source terms."""

    def __init__(self, sources: List[SourceTerm] = None):
        self.sources = sources if sources is not None else []

    def add(self, source: SourceTerm):
        """Add a source term to the composite."""
        self.sources.append(source)

    def compute(self, mesh: Mesh1D) -> np.ndarray:
        S_total = np.zeros((N_EQUATIONS, mesh.n_cells))
        for source in self.sources:
            S_total += source.compute(mesh)
        return S_total

    def fields(self, mesh: Mesh1D) -> SourceFields:
        """Evaluate all sources into the fixed per-cell fields."""
        return SourceFields.from_array(self.compute(mesh))
