"""
Main response recovery pipeline.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple

import numpy as np

from hdrcrf.core.config import HDRCRFConfig
from hdrcrf.core.errors import HDRCRFError, InvalidInputError
from hdrcrf.core.exposure import ExposureSet
from hdrcrf.radiance import assemble_radiance_map
from hdrcrf.response.solver import ResponseResult, ResponseSolver
from hdrcrf.response.weighting import weight_table
from hdrcrf.sampling.sampler import PixelSampler, SampleSet
from hdrcrf.utils.concurrency import run_in_thread_pool

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class RecoveryResult:
    """Per-channel responses recovered from one exposure stack."""

    channels: Dict[str, ResponseResult]
    sample_set: SampleSet
    weights: np.ndarray

    @property
    def channel_names(self) -> Tuple[str, ...]:
        return tuple(self.channels)

    def __getitem__(self, name: str) -> ResponseResult:
        return self.channels[name]

    def response_curves(self) -> np.ndarray:
        """Stacked log response curves, shape ``(channels, 256)``."""

        return np.stack([result.crf for result in self.channels.values()])

    def log_irradiance(self) -> np.ndarray:
        """Stacked sample log irradiances, shape ``(channels, samples)``."""

        return np.stack([result.log_irradiance for result in self.channels.values()])

    def radiance_map(self, exposures: ExposureSet, log_domain: bool = False) -> np.ndarray:
        """Merge ``exposures`` into a radiance map with the recovered curves."""

        return assemble_radiance_map(
            exposures,
            self.response_curves(),
            self.weights,
            log_domain=log_domain,
        )


class ChannelPipeline:
    """
    Camera response recovery for every colour channel of an exposure stack.

    Pipeline stages:
        1. Weight table (once, shared read-only)
        2. Pixel sampling (offsets once, gather per channel)
        3. Response solve per channel, dispatched concurrently and joined
    """

    def __init__(
        self,
        config: Optional[HDRCRFConfig] = None,
        solver: Optional[ResponseSolver] = None,
    ) -> None:
        self.config = config or HDRCRFConfig()
        self.config.validate()

        logger.info("Initializing response recovery")
        logger.info("  Weighting: %s", self.config.weighting.value)
        logger.info("  Smoothness: %s", self.config.smoothness)

        self.weights = weight_table(self.config.weighting)
        self.sampler = PixelSampler(
            parallel=self.config.parallel,
            max_workers=self.config.max_workers,
        )
        self.solver = solver or ResponseSolver(
            smoothness=self.config.smoothness,
            normalization_intensity=self.config.normalization_intensity,
            rcond=self.config.rcond,
        )

    def _channel_names(self, channels: int) -> Tuple[str, ...]:
        if channels == len(self.config.channel_names):
            return tuple(self.config.channel_names)
        if channels == 1:
            return ("L",)
        raise InvalidInputError(
            f"Images have {channels} channels but config names {self.config.channel_names}"
        )

    def process(self, exposures: ExposureSet) -> RecoveryResult:
        """
        Recover the response curve and sample irradiances for each channel.
        """

        logger.info(
            "Processing %d exposures: shape=%s, times=%s",
            exposures.count,
            exposures.images[0].shape,
            exposures.exposure_times.tolist(),
        )

        names = self._channel_names(exposures.channels)
        sample_set = self.sampler.sample(exposures, channel_names=names)
        logger.info("Sampled %d pixel locations", sample_set.size)

        def solve(channel_index: int) -> ResponseResult:
            name = names[channel_index]
            logger.debug("Solving response for channel %s", name)
            try:
                return self.solver.solve(
                    sample_set.channels[channel_index],
                    sample_set.log_exposure,
                    self.weights,
                    channel=name,
                )
            except HDRCRFError:
                logger.error("Response recovery failed for channel %s", name)
                raise

        results = run_in_thread_pool(
            solve,
            range(len(names)),
            parallel=self.config.parallel,
            max_workers=self.config.max_workers,
        )

        logger.info("Response recovery complete for channels %s", ", ".join(names))

        return RecoveryResult(
            channels=dict(zip(names, results)),
            sample_set=sample_set,
            weights=self.weights,
        )


def recover_response(
    images: Sequence[np.ndarray],
    exposure_times: Sequence[float],
    config: Optional[HDRCRFConfig] = None,
) -> RecoveryResult:
    """
    Convenience wrapper for quick response recovery.
    """

    exposures = ExposureSet.from_arrays(images, exposure_times)
    return ChannelPipeline(config).process(exposures)
