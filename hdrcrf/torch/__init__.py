"""
PyTorch-backed response solver.
"""

from hdrcrf.torch.solver import TorchResponseSolver, recover_response_torch

__all__ = ["TorchResponseSolver", "recover_response_torch"]
