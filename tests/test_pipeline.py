"""
Tests for the channel pipeline.
"""

from __future__ import annotations

import numpy as np
import pytest

from hdrcrf import (
    ChannelPipeline,
    ExposureSet,
    HDRCRFConfig,
    InvalidInputError,
    RecoveryResult,
    SingularSystemError,
    WeightingScheme,
    recover_response,
)


def test_basic_processing(synthetic_stack) -> None:
    images, times, _ = synthetic_stack()
    result = recover_response(images, times)

    assert isinstance(result, RecoveryResult)
    assert result.channel_names == ("B", "G", "R")
    assert result.response_curves().shape == (3, 256)
    assert result.log_irradiance().shape == (3, result.sample_set.size)
    assert np.isfinite(result.response_curves()).all()


def test_recovered_curve_tracks_camera_gamma(synthetic_stack) -> None:
    images, times, _ = synthetic_stack()
    green = recover_response(images, times)["G"]

    assert green.crf[60] < green.crf[128] < green.crf[200]
    # g(z) = 2.2 ln z + const for a gamma-2.2 camera
    assert green.crf[200] - green.crf[100] == pytest.approx(2.2 * np.log(2.0), abs=0.15)


def test_sample_rows_shared_across_channels(synthetic_stack) -> None:
    images, times, _ = synthetic_stack()
    result = recover_response(images, times)
    size = result.sample_set.size
    for name in result.channel_names:
        assert result[name].log_irradiance.shape == (size,)
        assert result.sample_set.channel(name).shape == (size, 3)


def test_uniform_single_channel_stack() -> None:
    images = [np.full((4, 4), value, dtype=np.uint8) for value in (50, 100, 150)]
    result = recover_response(images, [0.25, 1.0, 4.0])

    assert result.channel_names == ("L",)
    luminance = result["L"]
    assert luminance.log_irradiance.shape == (16,)
    np.testing.assert_allclose(luminance.log_irradiance, luminance.log_irradiance[0], atol=1e-8)
    assert (np.diff(luminance.crf[50:151]) >= -1e-9).all()


def test_single_exposure_raises(synthetic_stack) -> None:
    images, times, _ = synthetic_stack(times=(1.0,))
    with pytest.raises(InvalidInputError):
        recover_response(images, times)


def test_unchanged_exposures_raise_singular() -> None:
    rng = np.random.default_rng(7)
    img = rng.integers(0, 256, size=(16, 16, 3), dtype=np.uint8)
    with pytest.raises(SingularSystemError):
        recover_response([img, img.copy()], [0.5, 2.0])


def test_deterministic_results(synthetic_stack) -> None:
    images, times, _ = synthetic_stack()
    first = recover_response(images, times)
    second = recover_response(images, times)
    np.testing.assert_array_equal(first.response_curves(), second.response_curves())
    np.testing.assert_array_equal(first.log_irradiance(), second.log_irradiance())


def test_serial_matches_parallel(synthetic_stack) -> None:
    images, times, _ = synthetic_stack()
    parallel = recover_response(images, times, HDRCRFConfig(parallel=True, max_workers=3))
    serial = recover_response(images, times, HDRCRFConfig(parallel=False))
    np.testing.assert_allclose(parallel.response_curves(), serial.response_curves(), atol=1e-10)


def test_ramp_weighting_runs(synthetic_stack) -> None:
    images, times, _ = synthetic_stack()
    config = HDRCRFConfig(weighting=WeightingScheme.RAMP)
    result = recover_response(images, times, config)
    np.testing.assert_array_equal(result.weights, np.arange(1, 257))
    assert np.isfinite(result.response_curves()).all()


def test_custom_channel_names(synthetic_stack) -> None:
    images, times, _ = synthetic_stack()
    exposures = ExposureSet.from_arrays(images, times)
    result = ChannelPipeline(HDRCRFConfig(channel_names=("R", "G", "B"))).process(exposures)
    assert result.channel_names == ("R", "G", "B")


def test_channel_count_mismatch_raises() -> None:
    images = [np.zeros((4, 4, 2), dtype=np.uint8) + v for v in (10, 200)]
    with pytest.raises(InvalidInputError):
        recover_response(images, [1.0, 2.0])


def test_valid_config() -> None:
    HDRCRFConfig(smoothness=50.0, normalization_intensity=100).validate()


@pytest.mark.parametrize(
    "kwargs",
    [
        {"smoothness": 0.0},
        {"smoothness": float("nan")},
        {"normalization_intensity": 0},
        {"normalization_intensity": 255},
        {"rcond": 0.0},
        {"channel_names": ()},
        {"channel_names": ("G", "G", "B")},
        {"max_workers": 0},
    ],
)
def test_invalid_config(kwargs) -> None:
    config = HDRCRFConfig(**kwargs)
    with pytest.raises(ValueError):
        config.validate()
    with pytest.raises(ValueError):
        ChannelPipeline(config)
