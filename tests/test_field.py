"""Tests for the Pallas field helpers."""

import numpy as np
import pytest

from primitives.field import FF, ONE, PALLAS_PRIME, ZERO, ff_ints, nonzero_rows, pow5, to_ff, to_ff_array


class TestField:
    """Field construction and conversions."""

    def test_field_order(self) -> None:
        """FF is the Pallas base field."""
        assert FF.order == PALLAS_PRIME

    def test_to_ff_reduces(self) -> None:
        """Values outside [0, p) are reduced, negatives wrap."""
        assert to_ff(PALLAS_PRIME + 7) == FF(7)
        assert to_ff(-1) == FF(PALLAS_PRIME - 1)
        assert to_ff(-1) + ONE == ZERO

    def test_to_ff_array_empty(self) -> None:
        """An empty input gives an empty field array."""
        empty = to_ff_array([])
        assert len(empty) == 0

    def test_ff_ints_roundtrip(self) -> None:
        values = [0, 1, 2 ** 128, PALLAS_PRIME - 1]
        assert ff_ints(to_ff_array(values)) == values

    @pytest.mark.parametrize("x", [0, 1, 2, 3, 2 ** 100 + 17])
    def test_pow5_scalar(self, x: int) -> None:
        """pow5 agrees with modular exponentiation."""
        assert int(pow5(FF(x))) == pow(x, 5, PALLAS_PRIME)

    def test_pow5_array(self) -> None:
        """pow5 works elementwise on arrays."""
        xs = to_ff_array([2, 3, 4])
        assert ff_ints(pow5(xs)) == [32, 243, 1024]

    def test_nonzero_rows(self) -> None:
        values = to_ff_array([0, 5, 0, 0, PALLAS_PRIME - 1])
        assert np.array_equal(nonzero_rows(values), [1, 4])
