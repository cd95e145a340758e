"""
Torch-powered response solver.

Assembles the same system as :mod:`hdrcrf.response.solver` and solves it in
float64 on the requested device.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np
import torch

from hdrcrf.core.config import HDRCRFConfig
from hdrcrf.core.errors import SingularSystemError
from hdrcrf.core.exposure import ExposureSet
from hdrcrf.core.pipeline import ChannelPipeline, RecoveryResult
from hdrcrf.response.solver import ResponseResult, ResponseSolver, build_system

logger = logging.getLogger(__name__)


class TorchResponseSolver(ResponseSolver):
    """
    Response solver running the least-squares step through ``torch.linalg``.
    """

    def __init__(
        self,
        smoothness: float = 10.0,
        normalization_intensity: int = 128,
        rcond: float = 1e-10,
        device: Optional[torch.device] = None,
    ) -> None:
        super().__init__(
            smoothness=smoothness,
            normalization_intensity=normalization_intensity,
            rcond=rcond,
        )

        if device is None:
            device = torch.device("cuda" if torch.cuda.is_available() else "cpu")
        self.device = device

        logger.info("Initializing TorchResponseSolver (%s)", self.device)

    def solve(
        self,
        Z: np.ndarray,
        B: np.ndarray,
        weights: np.ndarray,
        channel: Optional[str] = None,
    ) -> ResponseResult:
        A, b = build_system(
            Z,
            B,
            weights,
            smoothness=self.smoothness,
            normalization_intensity=self.normalization_intensity,
        )

        A_t = torch.as_tensor(A, dtype=torch.float64, device=self.device)
        b_t = torch.as_tensor(b, dtype=torch.float64, device=self.device).unsqueeze(1)

        logger.debug("Channel %s: solving %d×%d system on %s", channel, A.shape[0], A.shape[1], self.device)

        try:
            rank = int(torch.linalg.matrix_rank(A_t, rtol=self.rcond).item())
            # gelsd is CPU only; CUDA falls back to the QR-based default
            driver = "gelsd" if self.device.type == "cpu" else None
            x_t = torch.linalg.lstsq(A_t, b_t, driver=driver).solution
        except RuntimeError as exc:
            raise SingularSystemError(f"Least-squares solve failed for channel {channel}: {exc}") from exc

        x = x_t.squeeze(1).cpu().numpy()
        return self._finish(A, b, x, rank, channel)


def recover_response_torch(
    images: Sequence[np.ndarray],
    exposure_times: Sequence[float],
    config: Optional[HDRCRFConfig] = None,
    device: Optional[torch.device] = None,
) -> RecoveryResult:
    """
    Convenience wrapper running the channel pipeline with the torch solver.
    """

    config = config or HDRCRFConfig()
    solver = TorchResponseSolver(
        smoothness=config.smoothness,
        normalization_intensity=config.normalization_intensity,
        rcond=config.rcond,
        device=device,
    )
    exposures = ExposureSet.from_arrays(images, exposure_times)
    return ChannelPipeline(config, solver=solver).process(exposures)
