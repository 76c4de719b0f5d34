"""
Tridiagonal linear systems and the Thomas algorithm.

Every implicit equation in the solver (momentum, pressure correction,
energy, turbulence) is assembled into a TridiagonalSystem and solved here.
"""

import numpy as np
from dataclasses import dataclass

from .errors import SingularSystemError


def solve_tridiagonal(a: np.ndarray, b: np.ndarray, c: np.ndarray,
                      d: np.ndarray) -> np.ndarray:
    """
    Solve a tridiagonal system with the Thomas algorithm.

    Args:
        a: Sub-diagonal (a[0] unused)
        b: Main diagonal
        c: Super-diagonal (c[-1] unused)
        d: Right-hand side

    Returns:
        x: Solution vector

    The inputs are not modified, so independent systems can be solved
    concurrently.
    """
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    c = np.asarray(c, dtype=float)
    d = np.asarray(d, dtype=float)

    n = len(b)
    if not (len(a) == len(c) == len(d) == n):
        raise ValueError(f"Tridiagonal bands must have equal length, got "
                         f"a={len(a)}, b={n}, c={len(c)}, d={len(d)}")
    if n == 0:
        return np.zeros(0)

    c_star = np.zeros(n)
    d_star = np.zeros(n)
    x = np.zeros(n)

    m = b[0]
    if m == 0.0 or not np.isfinite(m):
        raise SingularSystemError(f"Zero or non-finite pivot in row 0: {m}")
    c_star[0] = c[0] / m
    d_star[0] = d[0] / m

    # Forward sweep
    for i in range(1, n):
        m = b[i] - a[i] * c_star[i - 1]
        if m == 0.0 or not np.isfinite(m):
            raise SingularSystemError(f"Zero or non-finite pivot in row {i}: {m}")
        c_star[i] = c[i] / m
        d_star[i] = (d[i] - a[i] * d_star[i - 1]) / m

    # Back substitution
    x[n - 1] = d_star[n - 1]
    for i in range(n - 2, -1, -1):
        x[i] = d_star[i] - c_star[i] * x[i + 1]

    return x


@dataclass
class TridiagonalSystem:
    """
    Banded storage for one assembled equation.

    Row i reads: a[i] * x[i-1] + b[i] * x[i] + c[i] * x[i+1] = d[i]
    """
    a: np.ndarray
    b: np.ndarray
    c: np.ndarray
    d: np.ndarray

    @classmethod
    def zeros(cls, n: int) -> 'TridiagonalSystem':
        """Create an empty system with n rows."""
        return cls(a=np.zeros(n), b=np.zeros(n), c=np.zeros(n), d=np.zeros(n))

    @property
    def n(self) -> int:
        return len(self.b)

    def solve(self) -> np.ndarray:
        return solve_tridiagonal(self.a, self.b, self.c, self.d)

    def to_dense(self) -> np.ndarray:
        """Dense matrix form (for inspection and tests)."""
        A = np.diag(self.b)
        if self.n > 1:
            A += np.diag(self.a[1:], -1) + np.diag(self.c[:-1], 1)
        return A
