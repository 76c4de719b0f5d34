"""
Exceptions raised by the 1D PISO solver.

Inner-loop non-convergence is not an exception: it is reported through
PisoResult and a logged warning, never raised.
"""


class PisoflowError(Exception):
    """Base class for solver errors."""


class SingularSystemError(PisoflowError, ArithmeticError):
    """A tridiagonal system produced a zero or non-finite pivot."""


class InvalidPhysicalInputError(PisoflowError, ValueError):
    """A correlation received a physically meaningless argument."""
