"""Weighting tables and the per-channel response solver."""

from hdrcrf.response.solver import ResponseResult, ResponseSolver, build_system
from hdrcrf.response.weighting import validate_weights, weight_table

__all__ = [
    "ResponseResult",
    "ResponseSolver",
    "build_system",
    "validate_weights",
    "weight_table",
]
