"""
Advanced hdrcrf usage: files on disk, alignment, plots and the torch backend.
"""

from __future__ import annotations

import logging
import sys

from hdrcrf import ChannelPipeline, HDRCRFConfig
from hdrcrf.io import load_exposures
from hdrcrf.plotting import plot_response_curves


def example_from_files(paths, times, plot_path: str = "curvesCRF.png"):
    """Load, align and recover a stack, then plot its response curves."""

    exposures = load_exposures(paths, times, align=True)
    result = ChannelPipeline(HDRCRFConfig(max_workers=3)).process(exposures)
    plot_response_curves({name: r.crf for name, r in result.channels.items()}, path=plot_path)
    print(f"Saved response curves to {plot_path}")
    return result


def example_torch_backend(paths, times):
    """Solve the channel systems with torch when it is installed."""

    from hdrcrf import recover_response_torch

    if recover_response_torch is None:
        print("torch is not installed; skipping")
        return None

    exposures = load_exposures(paths, times)
    return recover_response_torch(exposures.images, exposures.exposure_times)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    if len(sys.argv) < 3 or len(sys.argv) % 2 == 0:
        print("usage: advanced_usage.py IMAGE TIME [IMAGE TIME ...]")
        sys.exit(1)
    args = sys.argv[1:]
    example_from_files(args[0::2], [float(t) for t in args[1::2]])
