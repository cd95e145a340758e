"""Pixel sampling."""

from hdrcrf.sampling.sampler import PixelSampler, SampleSet, sample_count, sample_indices

__all__ = ["PixelSampler", "SampleSet", "sample_count", "sample_indices"]
