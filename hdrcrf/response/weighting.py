"""
Intensity weighting tables.

Weights express confidence in an observed 8-bit value: extremes are likely
clipped or noise dominated. Tables are built once per scheme and shared
read-only between channels.
"""

from __future__ import annotations

from functools import lru_cache

import numpy as np

from hdrcrf.core.config import WeightingScheme
from hdrcrf.core.errors import InvalidInputError, SingularSystemError

Z_MIN = 0
Z_MAX = 255
Z_MID = (Z_MIN + Z_MAX) // 2
LEVELS = Z_MAX - Z_MIN + 1


@lru_cache(maxsize=None)
def weight_table(scheme: WeightingScheme = WeightingScheme.HAT) -> np.ndarray:
    """
    Lookup table of weights for every intensity in ``[Zmin, Zmax]``.

    ``HAT`` rises as ``z - Zmin + 1`` up to ``Zmid`` and falls as
    ``Zmax - z + 1`` above it. ``RAMP`` keeps the rising branch over the
    whole range.
    """

    z = np.arange(Z_MIN, Z_MAX + 1, dtype=np.float64)
    rising = z - Z_MIN + 1

    if scheme == WeightingScheme.HAT:
        table = np.where(z <= Z_MID, rising, Z_MAX - z + 1)
    elif scheme == WeightingScheme.RAMP:
        table = rising
    else:
        raise ValueError(f"Unknown weighting scheme: {scheme}")

    table.setflags(write=False)
    return table


def validate_weights(weights: np.ndarray) -> np.ndarray:
    """
    Check a caller-supplied weight table and return it as float64.
    """

    table = np.asarray(weights, dtype=np.float64)

    if table.shape != (LEVELS,):
        raise InvalidInputError(f"Weight table must have shape ({LEVELS},), got {table.shape}")
    if not np.isfinite(table).all():
        raise InvalidInputError("Weight table contains NaN or Inf values")
    if np.any(table < 0):
        raise InvalidInputError("Weight table contains negative weights")
    if not np.any(table > 0):
        raise SingularSystemError("Weight table is identically zero")

    return table
