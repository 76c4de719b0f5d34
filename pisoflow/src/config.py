"""
Case configuration.

Cases are nested dataclasses stored as JSON. Numeric fields declare their SI
unit in the dataclass metadata; a JSON value may be a bare number (taken as
SI) or a string with units such as "10 mm", "1 ms" or "50 kPa", which is
converted with pint.
"""

import dataclasses
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from pint import DimensionalityError, Quantity, UndefinedUnitError, UnitRegistry

from .solver import SolverConfig

ureg = UnitRegistry()


class AdvancedJSONEncoder(json.JSONEncoder):
    def default(self, o):
        if dataclasses.is_dataclass(o):
            return dataclasses.asdict(o)
        if isinstance(o, Quantity):
            return o.to_base_units().magnitude
        return super().default(o)


def to_si(value, unit: str, name: str = 'value') -> float:
    """
    Convert a number or a quantity string to a float in the given SI unit.

    Raises:
        ValueError: if the string cannot be parsed or has incompatible units
    """
    if isinstance(value, Quantity):
        quantity = value
    elif isinstance(value, str):
        try:
            quantity = ureg.Quantity(value)
        except (UndefinedUnitError, ValueError, AttributeError) as e:
            raise ValueError(f"Cannot parse {name}={value!r} as a quantity") from e
    else:
        return value

    try:
        return float(quantity.to(unit).magnitude)
    except DimensionalityError as e:
        raise ValueError(f"{name}={value!r} is not compatible with unit {unit!r}") from e


def dataclass_from_dict(cls, dct):
    if dataclasses.is_dataclass(cls):
        if not isinstance(dct, dict):
            raise ValueError(f"Expected a mapping for {cls.__name__}, got {dct!r}")
        fields = {f.name: f for f in dataclasses.fields(cls)}
        unknown = set(dct) - set(fields)
        if unknown:
            raise ValueError(f"Unknown keys for {cls.__name__}: {sorted(unknown)}")
        kwargs = {}
        for name, value in dct.items():
            f = fields[name]
            if 'unit' in f.metadata and value is not None:
                kwargs[name] = to_si(value, f.metadata['unit'], f"{cls.__name__}.{name}")
            else:
                kwargs[name] = dataclass_from_dict(f.type, value)
        return cls(**kwargs)
    else:
        return dct


@dataclass
class DomainConfig:
    length: float = field(default=1.0, metadata={'unit': 'm'})
    n_cells: int = 100


@dataclass
class InitialConfig:
    u: float = field(default=0.01, metadata={'unit': 'm/s'})
    p: float = field(default=50000.0, metadata={'unit': 'Pa'})
    T: float = field(default=1000.0, metadata={'unit': 'K'})


@dataclass
class BoundaryConfig:
    """
    Boundary values.

    outlet_velocity is 'fixed' (u_outlet) or 'zero_gradient'; temperature is
    'zero_gradient' at both ends or 'fixed' at T_inlet and T_outlet.
    """
    u_inlet: float = field(default=0.0, metadata={'unit': 'm/s'})
    u_outlet: float = field(default=0.0, metadata={'unit': 'm/s'})
    outlet_velocity: str = 'fixed'
    p_outlet: float = field(default=50000.0, metadata={'unit': 'Pa'})
    temperature: str = 'zero_gradient'
    T_inlet: Optional[float] = field(default=None, metadata={'unit': 'K'})
    T_outlet: Optional[float] = field(default=None, metadata={'unit': 'K'})


@dataclass
class ZoneConfig:
    """Source of +rate near the inlet and -rate near the outlet (per volume, SI)."""
    rate: float = 0.0
    source_zone: float = 0.2
    sink_zone: float = 0.2


@dataclass
class SourcesConfig:
    mass: ZoneConfig = field(default_factory=ZoneConfig)
    momentum: ZoneConfig = field(default_factory=ZoneConfig)
    energy: ZoneConfig = field(default_factory=ZoneConfig)


@dataclass
class FluidConfig:
    """
    Fluid model.

    model is 'sodium_vapor', 'liquid_sodium' or 'constant'; cp, mu and k are
    only used by the constant model.
    """
    model: str = 'sodium_vapor'
    R: float = field(default=361.8, metadata={'unit': 'J/(kg*K)'})
    cp: float = field(default=2010.0, metadata={'unit': 'J/(kg*K)'})
    mu: float = field(default=1.3e-5, metadata={'unit': 'Pa*s'})
    k: float = field(default=0.028, metadata={'unit': 'W/(m*K)'})
    T_floor: float = field(default=200.0, metadata={'unit': 'K'})
    rho_floor: float = field(default=1e-6, metadata={'unit': 'kg/m^3'})


@dataclass
class TurbulenceConfig:
    enabled: bool = False
    intensity: float = 0.05
    length_scale: float = field(default=0.07, metadata={'unit': 'm'})
    reference_velocity: float = field(default=0.01, metadata={'unit': 'm/s'})


@dataclass
class OutputConfig:
    profiles: Optional[str] = 'output/profiles.csv'
    plot: Optional[str] = None


@dataclass
class CaseConfig:
    name: str = 'case'
    domain: DomainConfig = field(default_factory=DomainConfig)
    initial: InitialConfig = field(default_factory=InitialConfig)
    boundary: BoundaryConfig = field(default_factory=BoundaryConfig)
    sources: SourcesConfig = field(default_factory=SourcesConfig)
    fluid: FluidConfig = field(default_factory=FluidConfig)
    turbulence: TurbulenceConfig = field(default_factory=TurbulenceConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    solver: SolverConfig = field(default_factory=SolverConfig)


def load_case(path) -> CaseConfig:
    """Load a case from a JSON file; missing sections keep their defaults."""
    with open(path, 'r') as f:
        return dataclass_from_dict(CaseConfig, json.load(f))


def save_case(case: CaseConfig, path) -> Path:
    """Write a case as JSON (all values in SI)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        json.dump(case, f, cls=AdvancedJSONEncoder, indent=4)
    return path
