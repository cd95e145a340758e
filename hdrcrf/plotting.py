"""
Response curve plots (requires ``matplotlib``).
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional, Union

import numpy as np

CHANNEL_COLORS: Dict[str, str] = {
    "B": "blue",
    "G": "green",
    "R": "red",
    "L": "black",
}


def plot_response_curves(
    curves: Dict[str, np.ndarray],
    path: Optional[Union[str, Path]] = None,
    title: str = "Response curves",
):
    """
    Plot ``exp(g(z))`` against pixel value for each channel.

    ``curves`` maps channel name to its 256-entry log response. The figure is
    returned and, when ``path`` is given, saved there.
    """

    from matplotlib.figure import Figure

    fig = Figure(figsize=(5, 5))
    ax = fig.add_subplot(1, 1, 1)

    z = np.arange(256)
    for name, crf in curves.items():
        ax.plot(z, np.exp(np.asarray(crf)), color=CHANNEL_COLORS.get(name), label=name)

    ax.set_title(title)
    ax.set_xlabel("Pixel value")
    ax.set_ylabel("Exposure exp(g(z))")
    ax.legend()

    if path is not None:
        fig.savefig(str(path))

    return fig
