"""
Shared fixtures: a synthetic bracketed stack from a known camera.
"""

from __future__ import annotations

import numpy as np
import pytest

TIMES = (0.25, 1.0, 4.0)


def make_stack(rows: int = 24, cols: int = 32, times=TIMES):
    """Gamma-2.2 camera looking at a smooth irradiance ramp (BGR scaled)."""

    ramp = np.logspace(-2.5, 0.5, rows * cols).reshape(rows, cols)
    scene = np.stack([0.6 * ramp, ramp, 1.4 * ramp], axis=-1)
    images = [
        np.round(255.0 * np.clip(scene * t, 0.0, 1.0) ** (1.0 / 2.2)).astype(np.uint8)
        for t in times
    ]
    return images, list(times), scene


@pytest.fixture
def synthetic_stack():
    return make_stack
