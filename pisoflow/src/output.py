"""
Comma-separated profile output.

A profile file holds three lines (velocity, pressure, temperature), one value
per cell, separated by blank lines.
"""

from pathlib import Path
from typing import Dict

import numpy as np

PROFILE_FIELDS = ('u', 'p', 'T')


def write_profiles(path, u: np.ndarray, p: np.ndarray, T: np.ndarray) -> Path:
    """
    Write the final velocity, pressure and temperature profiles.

    Returns:
        Path of the written file
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    lines = [", ".join(f"{v:.12g}" for v in np.asarray(field, dtype=float))
             for field in (u, p, T)]
    path.write_text("\n\n".join(lines) + "\n")
    return path


def read_profiles(path) -> Dict[str, np.ndarray]:
    """Read a profile file back into {'u', 'p', 'T'} arrays."""
    text = Path(path).read_text()
    blocks = [line for line in text.splitlines() if line.strip()]
    if len(blocks) != len(PROFILE_FIELDS):
        raise ValueError(f"Expected {len(PROFILE_FIELDS)} profile lines in {path}, "
                         f"found {len(blocks)}")
    return {name: np.array([float(v) for v in line.split(',')])
            for name, line in zip(PROFILE_FIELDS, blocks)}
