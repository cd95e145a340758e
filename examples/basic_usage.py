"""
Basic usage examples for hdrcrf.
"""

from __future__ import annotations

import logging

import numpy as np

from hdrcrf import ExposureSet, HDRCRFConfig, WeightingScheme, recover_response


def synthetic_stack(times=(1 / 6.0, 1.3, 5.0)):
    """Render a bracketed stack from a gamma-2.2 camera."""

    rows, cols = 240, 320
    ramp = np.logspace(-3.0, 0.5, rows * cols).reshape(rows, cols)
    scene = np.stack([0.7 * ramp, ramp, 1.3 * ramp], axis=-1)
    images = [
        np.round(255.0 * np.clip(scene * t, 0.0, 1.0) ** (1.0 / 2.2)).astype(np.uint8)
        for t in times
    ]
    return images, list(times)


def example_simple():
    """Recover response curves with the default configuration."""

    images, times = synthetic_stack()
    result = recover_response(images, times)
    for name, channel in result.channels.items():
        print(f"{name}: g(64)={channel.crf[64]:0.3f}, g(192)={channel.crf[192]:0.3f}")
    return result


def example_radiance_map() -> np.ndarray:
    """Merge the stack into a radiance map with the recovered curves."""

    images, times = synthetic_stack()
    exposures = ExposureSet.from_arrays(images, times)
    result = recover_response(images, times)
    radiance = result.radiance_map(exposures)
    print(f"Radiance range: [{radiance.min():0.3e}, {radiance.max():0.3e}]")
    return radiance


def example_ramp_weighting():
    """Use the increasing ramp instead of the hat weighting."""

    images, times = synthetic_stack()
    config = HDRCRFConfig(weighting=WeightingScheme.RAMP, smoothness=50.0)
    result = recover_response(images, times, config)
    print(f"Ramp weighting: G response spans {np.ptp(result['G'].crf):0.3f} log units")
    return result


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    print("Running hdrcrf basic examples...")
    example_simple()
    example_radiance_map()
    example_ramp_weighting()
