"""
Camera response recovery by regularised weighted least squares.

Implements the Debevec–Malik formulation. For one channel, the unknowns are
the 256-entry log response curve ``g`` followed by one log irradiance per
sampled pixel. Each observation contributes

    w(Z_ij) * (g(Z_ij) - ln E_i) = w(Z_ij) * ln t_j

one row pins ``g`` at the normalisation intensity to zero, and a second
difference penalty weighted by ``lambda * w(z)`` keeps the curve smooth.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
from scipy import linalg

from hdrcrf.core.errors import InvalidInputError, SingularSystemError
from hdrcrf.response.weighting import LEVELS, validate_weights

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class ResponseResult:
    """Recovered response curve and sample irradiances for one channel."""

    crf: np.ndarray  # (256,) natural-log response
    log_irradiance: np.ndarray  # (samples,)
    channel: Optional[str] = None
    rank: int = 0
    residual: float = 0.0

    def linear_response(self) -> np.ndarray:
        """Response curve exponentiated back to linear exposure."""

        return np.exp(self.crf)

    def irradiance(self) -> np.ndarray:
        """Sample irradiances in linear units."""

        return np.exp(self.log_irradiance)


def _check_samples(Z: np.ndarray, B: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    Z = np.asarray(Z)
    B = np.asarray(B, dtype=np.float64)

    if Z.ndim != 2 or Z.shape[0] == 0 or Z.shape[1] < 2:
        raise InvalidInputError(f"Expected samples×N sample matrix with N ≥ 2, got shape {Z.shape}")
    if B.shape != Z.shape:
        raise InvalidInputError(f"Log exposure shape {B.shape} does not match samples {Z.shape}")
    if not np.issubdtype(Z.dtype, np.integer):
        raise InvalidInputError(f"Sample matrix must hold integer intensities, got {Z.dtype}")
    if Z.min() < 0 or Z.max() >= LEVELS:
        raise InvalidInputError(f"Sample intensities must lie in [0, {LEVELS - 1}]")
    if not np.isfinite(B).all():
        raise InvalidInputError("Log exposure matrix contains NaN or Inf values")

    return Z.astype(np.intp), B


def build_system(
    Z: np.ndarray,
    B: np.ndarray,
    weights: np.ndarray,
    smoothness: float = 10.0,
    normalization_intensity: int = 128,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Assemble the dense system ``A x = b`` for one channel.

    ``A`` has ``samples*N + 256 + 1`` rows and ``256 + samples`` columns.
    Row order: data-fitting rows (sample-major), the normalisation row, then
    one smoothness row per interior intensity. Trailing rows stay zero.
    """

    Z, B = _check_samples(Z, B)
    weights = validate_weights(weights)

    n_samples, n_exposures = Z.shape
    n_data = n_samples * n_exposures

    A = np.zeros((n_data + LEVELS + 1, LEVELS + n_samples), dtype=np.float64)
    b = np.zeros(A.shape[0], dtype=np.float64)

    # Data-fitting rows
    rows = np.arange(n_data)
    z_flat = Z.ravel()
    w_flat = weights[z_flat]
    sample_of_row = np.repeat(np.arange(n_samples), n_exposures)
    A[rows, z_flat] = w_flat
    A[rows, LEVELS + sample_of_row] = -w_flat
    b[rows] = w_flat * B.ravel()

    # Fix the additive ambiguity: g(normalization_intensity) = 0
    k = n_data
    A[k, normalization_intensity] = 1.0
    k += 1

    # Second-difference smoothness over z = 1..254
    interior = np.arange(1, LEVELS - 1)
    rows = k + np.arange(interior.shape[0])
    scale = smoothness * weights[interior]
    A[rows, interior - 1] = scale
    A[rows, interior] = -2.0 * scale
    A[rows, interior + 1] = scale

    return A, b


class ResponseSolver:
    """
    Per-channel solver for the response curve and log irradiances.
    """

    def __init__(
        self,
        smoothness: float = 10.0,
        normalization_intensity: int = 128,
        rcond: float = 1e-10,
    ) -> None:
        self.smoothness = smoothness
        self.normalization_intensity = normalization_intensity
        self.rcond = rcond

    def solve(
        self,
        Z: np.ndarray,
        B: np.ndarray,
        weights: np.ndarray,
        channel: Optional[str] = None,
    ) -> ResponseResult:
        """
        Solve the channel system in the least-squares sense.

        Raises :class:`SingularSystemError` when the system is rank deficient
        (for instance, no sample changes intensity across exposures) or the
        solution is not finite.
        """

        A, b = build_system(
            Z,
            B,
            weights,
            smoothness=self.smoothness,
            normalization_intensity=self.normalization_intensity,
        )
        n_unknowns = A.shape[1]

        logger.debug("Channel %s: solving %d×%d system", channel, A.shape[0], n_unknowns)

        try:
            x, _, rank, _ = linalg.lstsq(A, b, cond=self.rcond)
        except (linalg.LinAlgError, ValueError) as exc:
            raise SingularSystemError(f"Least-squares solve failed for channel {channel}: {exc}") from exc

        return self._finish(A, b, x, int(rank), channel)

    def _finish(
        self,
        A: np.ndarray,
        b: np.ndarray,
        x: np.ndarray,
        rank: int,
        channel: Optional[str],
    ) -> ResponseResult:
        n_unknowns = A.shape[1]
        if rank < n_unknowns:
            raise SingularSystemError(
                f"Response system for channel {channel} is rank deficient ({rank} < {n_unknowns})"
            )
        if not np.isfinite(x).all():
            raise SingularSystemError(f"Response solve for channel {channel} produced NaN or Inf")

        residual = float(np.linalg.norm(A @ x - b))
        logger.debug("Channel %s: rank %d, residual %.3e", channel, rank, residual)

        crf = np.array(x[:LEVELS], dtype=np.float64)
        log_irradiance = np.array(x[LEVELS:], dtype=np.float64)
        crf.setflags(write=False)
        log_irradiance.setflags(write=False)

        return ResponseResult(
            crf=crf,
            log_irradiance=log_irradiance,
            channel=channel,
            rank=rank,
            residual=residual,
        )
