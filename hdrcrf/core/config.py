"""
Configuration primitives for hdrcrf.

Defines the weighting-scheme enum and a dataclass collecting the tunable
parameters of camera response recovery.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import numpy as np


class WeightingScheme(Enum):
    """Confidence curve applied to 8-bit intensities."""

    HAT = "hat"    # Symmetric tent, peak at mid-range
    RAMP = "ramp"  # Increasing ramp over the whole range


@dataclass
class HDRCRFConfig:
    """
    Complete configuration for response recovery.

    All parameters have sensible defaults for 8-bit bracketed exposures.
    """

    # Solver
    smoothness: float = 10.0  # lambda, curvature penalty
    weighting: WeightingScheme = WeightingScheme.HAT
    normalization_intensity: int = 128  # pinned to CRF = 0
    rcond: float = 1e-10  # relative singular value cutoff

    # Channels, in storage order
    channel_names: Tuple[str, ...] = ("B", "G", "R")

    # Scheduling
    parallel: bool = True
    max_workers: Optional[int] = None

    def validate(self) -> None:
        """Validate configuration parameters."""

        if not (np.isfinite(self.smoothness) and self.smoothness > 0):
            raise ValueError(f"Smoothness {self.smoothness} must be a positive finite number")

        if not (1 <= self.normalization_intensity <= 254):
            raise ValueError(
                f"Normalization intensity {self.normalization_intensity} out of range [1, 254]"
            )

        if not (0 < self.rcond < 1):
            raise ValueError(f"rcond {self.rcond} out of range (0, 1)")

        if not self.channel_names or len(set(self.channel_names)) != len(self.channel_names):
            raise ValueError(f"Channel names {self.channel_names} must be non-empty and unique")

        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError(f"max_workers {self.max_workers} must be at least 1")
