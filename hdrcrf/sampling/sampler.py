"""
Spatially uniform pixel sampling for response recovery.

The response system has ``256 + samples`` unknowns, so the number of sampled
pixels is derived from the exposure count to keep it over-determined. Samples
are spread over the image with a fixed stride and always include the far
corner.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from hdrcrf.core.errors import DegenerateInputError, InvalidInputError
from hdrcrf.core.exposure import ExposureSet
from hdrcrf.utils.concurrency import run_in_thread_pool

logger = logging.getLogger(__name__)

Z_MIN = 0
Z_MAX = 255


def sample_count(n_exposures: int, pixel_count: int) -> int:
    """
    Number of pixels to sample for ``n_exposures`` images.

    ``2 * ceil(2 * (Zmax - Zmin) / (N - 1))``, capped at the pixel count.
    """

    if n_exposures < 2:
        raise DegenerateInputError(
            f"Sample count needs at least 2 exposures, got {n_exposures}"
        )

    samples = 2 * math.ceil(2 * (Z_MAX - Z_MIN) / (n_exposures - 1))
    if samples > pixel_count:
        logger.warning(
            "Image has only %d pixels, capping sample count %d", pixel_count, samples
        )
        samples = pixel_count

    if samples <= 0:
        raise DegenerateInputError(f"No pixels to sample (pixel count {pixel_count})")

    return samples


def sample_indices(pixel_count: int, samples: int) -> np.ndarray:
    """
    Linear pixel offsets spread over the image with a uniform stride.

    Walks ``0, step, 2*step, ...`` with ``step = ceil(pixel_count / samples)``.
    When the stride misses the last pixel it is appended if there is room,
    otherwise it replaces the final stride offset. The result is strictly
    ascending, holds at most ``samples`` entries and ends on
    ``pixel_count - 1``.
    """

    if samples <= 0 or samples > pixel_count:
        raise DegenerateInputError(
            f"Sample count {samples} invalid for {pixel_count} pixels"
        )

    step = math.ceil(pixel_count / samples)
    indices = np.arange(0, pixel_count, step, dtype=np.int64)

    last = pixel_count - 1
    if indices[-1] != last:
        if indices.shape[0] < samples:
            indices = np.append(indices, last)
        else:
            indices[-1] = last

    return indices


@dataclass(frozen=True, eq=False)
class SampleSet:
    """
    Per-channel intensity samples at shared pixel offsets.

    Row ``i`` of every channel matrix and of ``log_exposure`` refers to the
    pixel at ``indices[i]``.
    """

    indices: np.ndarray  # (samples,) int64
    channels: Tuple[np.ndarray, ...]  # each (samples, N) uint8
    log_exposure: np.ndarray  # (samples, N) float64
    channel_names: Tuple[str, ...]

    @property
    def size(self) -> int:
        return int(self.indices.shape[0])

    @property
    def exposures(self) -> int:
        return int(self.log_exposure.shape[1])

    def channel(self, name: str) -> np.ndarray:
        """Sample matrix for the named channel."""

        try:
            return self.channels[self.channel_names.index(name)]
        except ValueError:
            raise KeyError(f"Unknown channel {name!r}, expected one of {self.channel_names}") from None


def _freeze(arr: np.ndarray) -> np.ndarray:
    arr.setflags(write=False)
    return arr


class PixelSampler:
    """
    Choose sample offsets and gather per-channel intensity matrices.
    """

    def __init__(self, parallel: bool = True, max_workers: Optional[int] = None) -> None:
        self.parallel = parallel
        self.max_workers = max_workers

    def sample(
        self,
        exposures: ExposureSet,
        channel_names: Optional[Tuple[str, ...]] = None,
    ) -> SampleSet:
        """
        Build the :class:`SampleSet` for an exposure stack.
        """

        if channel_names is None:
            channel_names = tuple(str(c) for c in range(exposures.channels))
        if len(channel_names) != exposures.channels:
            raise InvalidInputError(
                f"Got {len(channel_names)} channel names for {exposures.channels}-channel images"
            )

        samples = sample_count(exposures.count, exposures.pixel_count)
        indices = _freeze(sample_indices(exposures.pixel_count, samples))

        logger.debug(
            "Sampling %d of %d pixels across %d exposures",
            indices.shape[0],
            exposures.pixel_count,
            exposures.count,
        )

        flat = [img.reshape(-1, exposures.channels) for img in exposures.images]

        def gather(channel: int) -> np.ndarray:
            return _freeze(np.stack([pixels[indices, channel] for pixels in flat], axis=1))

        matrices = run_in_thread_pool(
            gather,
            range(exposures.channels),
            parallel=self.parallel,
            max_workers=self.max_workers,
        )

        log_exposure = np.broadcast_to(
            exposures.log_exposure_times, (indices.shape[0], exposures.count)
        ).copy()

        return SampleSet(
            indices=indices,
            channels=tuple(matrices),
            log_exposure=_freeze(log_exposure),
            channel_names=tuple(channel_names),
        )
