"""
Smoke tests for the torch-backed solver. Skipped automatically when torch is unavailable.
"""

from __future__ import annotations

import numpy as np
import pytest

torch = pytest.importorskip("torch")

from hdrcrf import ResponseSolver, SingularSystemError, weight_table  # noqa: E402
from hdrcrf.torch import TorchResponseSolver, recover_response_torch  # noqa: E402


def test_torch_solver_matches_scipy():
    Z = np.tile(np.array([50, 100, 150], dtype=np.uint8), (12, 1))
    B = np.tile(np.log([0.25, 1.0, 4.0]), (12, 1))

    expected = ResponseSolver().solve(Z, B, weight_table())
    result = TorchResponseSolver(device=torch.device("cpu")).solve(Z, B, weight_table())

    np.testing.assert_allclose(result.crf, expected.crf, atol=1e-6)
    np.testing.assert_allclose(result.log_irradiance, expected.log_irradiance, atol=1e-6)


def test_torch_solver_flags_singular_system():
    column = np.arange(0, 200, 5, dtype=np.uint8).reshape(-1, 1)
    Z = np.hstack([column, column])
    B = np.tile(np.log([0.5, 2.0]), (Z.shape[0], 1))
    with pytest.raises(SingularSystemError):
        TorchResponseSolver(device=torch.device("cpu")).solve(Z, B, weight_table())


def test_recover_response_torch_helper(synthetic_stack):
    images, times, _ = synthetic_stack()
    result = recover_response_torch(images, times, device=torch.device("cpu"))
    assert result.response_curves().shape == (3, 256)
    assert np.isfinite(result.response_curves()).all()
