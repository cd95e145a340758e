"""
Tests for intensity weighting tables.
"""

from __future__ import annotations

import numpy as np
import pytest

from hdrcrf import InvalidInputError, SingularSystemError, WeightingScheme, weight_table
from hdrcrf.response import validate_weights


@pytest.mark.parametrize("scheme", list(WeightingScheme))
def test_tables_are_non_negative_and_not_zero(scheme: WeightingScheme) -> None:
    table = weight_table(scheme)
    assert table.shape == (256,)
    assert (table >= 0).all()
    assert (table > 0).any()


def test_hat_is_symmetric_tent() -> None:
    table = weight_table(WeightingScheme.HAT)
    assert table[0] == table[255] == 1.0
    assert table[127] == table[128] == 128.0
    np.testing.assert_array_equal(table, table[::-1])
    assert (np.diff(table[:128]) > 0).all()
    assert (np.diff(table[128:]) < 0).all()


def test_ramp_keeps_rising_branch() -> None:
    table = weight_table(WeightingScheme.RAMP)
    np.testing.assert_array_equal(table, np.arange(1, 257, dtype=np.float64))


def test_table_is_cached_and_read_only() -> None:
    table = weight_table(WeightingScheme.HAT)
    assert weight_table(WeightingScheme.HAT) is table
    with pytest.raises(ValueError):
        table[0] = 5.0


def test_zero_table_is_singular() -> None:
    with pytest.raises(SingularSystemError):
        validate_weights(np.zeros(256))


def test_malformed_tables_rejected() -> None:
    with pytest.raises(InvalidInputError):
        validate_weights(np.ones(255))
    negative = np.ones(256)
    negative[10] = -1.0
    with pytest.raises(InvalidInputError):
        validate_weights(negative)
    with pytest.raises(InvalidInputError):
        validate_weights(np.full(256, np.nan))
