"""
Radiance map assembly from recovered response curves.
"""

from __future__ import annotations

import logging

import numpy as np

from hdrcrf.core.errors import InvalidInputError
from hdrcrf.core.exposure import ExposureSet
from hdrcrf.response.weighting import LEVELS, validate_weights

logger = logging.getLogger(__name__)


def assemble_radiance_map(
    exposures: ExposureSet,
    response_curves: np.ndarray,
    weights: np.ndarray,
    log_domain: bool = False,
) -> np.ndarray:
    """
    Merge an exposure stack into a per-pixel radiance map.

    For each pixel and channel, ``ln E = sum_j w(Z_j) (g(Z_j) - ln t_j) / sum_j w(Z_j)``.
    Pixels whose observations all carry zero weight fall back to the
    unweighted mean over exposures.

    Parameters
    ----------
    exposures : ExposureSet
        The stack the curves were recovered from (or another stack taken
        with the same camera).
    response_curves : np.ndarray
        Log response curves, shape ``(channels, 256)`` in storage order.
    weights : np.ndarray
        Weight table used during recovery.
    log_domain : bool
        Return ``ln E`` instead of ``E``.
    """

    curves = np.asarray(response_curves, dtype=np.float64)
    if curves.shape != (exposures.channels, LEVELS):
        raise InvalidInputError(
            f"Expected response curves of shape ({exposures.channels}, {LEVELS}), got {curves.shape}"
        )
    weights = validate_weights(weights)

    stack = np.stack(exposures.images, axis=0).astype(np.intp)  # N×H×W×C
    log_times = exposures.log_exposure_times.reshape(-1, 1, 1, 1)

    channel_axis = np.arange(exposures.channels).reshape(1, 1, 1, -1)
    log_exposure = curves[channel_axis, stack] - log_times
    pixel_weights = weights[stack]

    weight_sum = np.sum(pixel_weights, axis=0)
    weighted = np.sum(pixel_weights * log_exposure, axis=0)
    fallback = np.mean(log_exposure, axis=0)

    with np.errstate(invalid="ignore", divide="ignore"):
        log_radiance = np.where(weight_sum > 0, weighted / weight_sum, fallback)

    unweighted = int(np.count_nonzero(weight_sum == 0))
    if unweighted:
        logger.debug("%d pixel/channel entries had zero total weight", unweighted)

    if log_domain:
        return log_radiance

    return np.exp(log_radiance)
