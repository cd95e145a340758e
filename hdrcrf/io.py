"""
Image loading and alignment for exposure stacks.

OpenCV is an optional dependency (``pip install hdrcrf[io]``); it is imported
when these helpers are first used.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence, Union

import numpy as np

from hdrcrf.core.errors import InvalidInputError
from hdrcrf.core.exposure import ExposureSet
from hdrcrf.utils.concurrency import run_in_thread_pool

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _read_color(path: PathLike) -> np.ndarray:
    import cv2

    img = cv2.imread(str(path), cv2.IMREAD_COLOR)
    if img is None or img.size == 0:
        raise InvalidInputError(f"Could not read image {path}")
    return img


def align_exposures(exposures: ExposureSet) -> ExposureSet:
    """
    Align an exposure stack with median threshold bitmaps (MTB).
    """

    import cv2

    aligned = [np.array(img) for img in exposures.images]
    cv2.createAlignMTB().process(aligned, aligned)
    logger.debug("Aligned %d exposures with MTB", len(aligned))
    return ExposureSet.from_arrays(aligned, exposures.exposure_times)


def load_exposures(
    paths: Sequence[PathLike],
    exposure_times: Sequence[float],
    align: bool = False,
    max_workers: Optional[int] = None,
) -> ExposureSet:
    """
    Read a bracketed stack from disk as BGR ``uint8`` images.

    Files are decoded concurrently, one task per path. Decoded buffers are
    dropped once the :class:`ExposureSet` holds its own copies.
    """

    if len(paths) != len(exposure_times):
        raise InvalidInputError(
            f"Got {len(paths)} images but {len(exposure_times)} exposure times"
        )

    images = run_in_thread_pool(_read_color, paths, max_workers=max_workers)
    logger.info("Loaded %d exposures of shape %s", len(images), images[0].shape if images else None)

    exposures = ExposureSet.from_arrays(images, exposure_times)
    del images

    if align:
        exposures = align_exposures(exposures)

    return exposures
