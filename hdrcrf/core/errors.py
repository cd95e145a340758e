"""
Exception hierarchy for response recovery.
"""

from __future__ import annotations


class HDRCRFError(Exception):
    """Base class for all hdrcrf errors."""


class InvalidInputError(HDRCRFError, ValueError):
    """Exposure inputs violate a precondition (count, shape, dtype, times)."""


class DegenerateInputError(InvalidInputError):
    """Inputs are valid in form but leave nothing to sample."""


class SingularSystemError(HDRCRFError, ArithmeticError):
    """The response system is rank deficient or produced non-finite values."""
