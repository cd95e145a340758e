"""
Validated, read-only record of a bracketed exposure stack.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

from hdrcrf.core.errors import InvalidInputError


@dataclass(frozen=True, eq=False)
class ExposureSet:
    """
    N pixel-aligned LDR images and their exposure times.

    Images are ``uint8`` arrays of shape ``(rows, cols, channels)`` stored
    row-major with interleaved channels. Grayscale ``(rows, cols)`` inputs are
    promoted to a single channel. Alignment is assumed, not checked.
    """

    images: Tuple[np.ndarray, ...]
    exposure_times: np.ndarray

    def __post_init__(self) -> None:
        images = tuple(self.images)
        times = np.asarray(self.exposure_times, dtype=np.float64)

        if len(images) < 2:
            raise InvalidInputError(f"At least 2 exposures are required, got {len(images)}")

        if times.ndim != 1 or times.shape[0] != len(images):
            raise InvalidInputError(
                f"Expected {len(images)} exposure times, got shape {times.shape}"
            )

        if not np.isfinite(times).all() or np.any(times <= 0):
            raise InvalidInputError(f"Exposure times must be positive and finite, got {times}")

        normalized = []
        for index, img in enumerate(images):
            arr = np.asarray(img)
            if arr.dtype != np.uint8:
                raise InvalidInputError(f"Image {index} has dtype {arr.dtype}, expected uint8")
            if arr.ndim == 2:
                arr = arr[:, :, np.newaxis]
            if arr.ndim != 3 or arr.size == 0:
                raise InvalidInputError(
                    f"Image {index} must be a non-empty H×W or H×W×C array, got shape {arr.shape}"
                )
            if normalized and arr.shape != normalized[0].shape:
                raise InvalidInputError(
                    f"Image {index} has shape {arr.shape}, expected {normalized[0].shape}"
                )
            # Own a C-ordered copy so callers cannot mutate the stack later
            arr = np.array(arr, order="C", copy=True)
            arr.setflags(write=False)
            normalized.append(arr)

        times = times.copy()
        times.setflags(write=False)

        object.__setattr__(self, "images", tuple(normalized))
        object.__setattr__(self, "exposure_times", times)

    @classmethod
    def from_arrays(
        cls,
        images: Sequence[np.ndarray],
        exposure_times: Sequence[float],
    ) -> "ExposureSet":
        """Build an exposure set from any sequence of arrays and times."""

        return cls(tuple(images), np.asarray(exposure_times, dtype=np.float64))

    @property
    def count(self) -> int:
        return len(self.images)

    @property
    def rows(self) -> int:
        return int(self.images[0].shape[0])

    @property
    def cols(self) -> int:
        return int(self.images[0].shape[1])

    @property
    def channels(self) -> int:
        return int(self.images[0].shape[2])

    @property
    def pixel_count(self) -> int:
        return self.rows * self.cols

    @property
    def log_exposure_times(self) -> np.ndarray:
        """Natural log of each exposure time, in image order."""

        return np.log(self.exposure_times)
