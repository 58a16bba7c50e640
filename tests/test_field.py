"""Unit tests for the Goldilocks field helpers."""

import pytest

from primitives.field import FF, GOLDILOCKS_PRIME, batch_inverse, constant_array, field_array, to_ints


class TestBatchInverse:
    """Tests for Montgomery batch inversion."""

    def test_empty(self) -> None:
        assert len(batch_inverse(FF.Zeros(0))) == 0

    def test_single_element(self) -> None:
        val = FF([12345])
        assert batch_inverse(val)[0] * val[0] == FF(1)

    def test_matches_scalar_inversion(self) -> None:
        vals = field_array([i * 7 + 13 for i in range(50)])
        batch_results = batch_inverse(vals)
        for v, r in zip(vals, batch_results):
            assert r == v ** -1

    def test_zero_rejected(self) -> None:
        with pytest.raises(ZeroDivisionError):
            batch_inverse(field_array([3, 0, 5]))


def test_negative_values_reduce() -> None:
    assert to_ints(field_array([-1, 0, 1])) == [GOLDILOCKS_PRIME - 1, 0, 1]
    assert to_ints(constant_array(-2, 3)) == [GOLDILOCKS_PRIME - 2] * 3
