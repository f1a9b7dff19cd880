"""Tests for Q64.64 sqrt-price math."""

import pytest

from sandwich.constants import MAX_SQRT_PRICE_X64, Q64
from sandwich.math.sqrt_price import (
    amount0_delta,
    amount1_delta,
    check_sqrt_price,
    mul_div,
    mul_div_ceil,
    next_sqrt_price_from_input,
    next_sqrt_price_from_output,
    virtual_reserves,
)
from sandwich.safe_int import DivisionByZero, Overflow, SafeIntError, Underflow

LIQUIDITY = 10**6


class TestMulDiv:
    """Tests for full-precision multiply/divide."""

    def test_rounding(self):
        """mul_div floors, mul_div_ceil rounds up."""
        assert mul_div(3, 5, 2) == 7
        assert mul_div_ceil(3, 5, 2) == 8
        assert mul_div_ceil(4, 5, 2) == 10

    def test_wide_intermediate(self):
        """Intermediates beyond 256 bits do not truncate."""
        assert mul_div(2**200, 2**200, 2**300) == 2**100

    def test_division_by_zero(self):
        """Zero denominator raises DivisionByZero."""
        with pytest.raises(DivisionByZero):
            mul_div(1, 1, 0)


class TestVirtualReserves:
    """Tests for virtual reserves of the active range."""

    def test_price_one(self):
        """At price 1 both virtual reserves equal the liquidity."""
        assert virtual_reserves(Q64, LIQUIDITY) == (LIQUIDITY, LIQUIDITY)

    def test_price_four(self):
        """At sqrt price 2, x = L/2 and y = 2L."""
        assert virtual_reserves(2 * Q64, LIQUIDITY) == (LIQUIDITY // 2, 2 * LIQUIDITY)


class TestNextSqrtPrice:
    """Tests for sqrt-price displacement."""

    def test_token1_in_moves_price_up(self):
        """Adding L of token1 at price 1 doubles the sqrt price."""
        assert next_sqrt_price_from_input(Q64, LIQUIDITY, LIQUIDITY, False) == 2 * Q64

    def test_token0_in_moves_price_down(self):
        """Adding L of token0 at price 1 halves the sqrt price."""
        assert next_sqrt_price_from_input(Q64, LIQUIDITY, LIQUIDITY, True) == Q64 // 2

    def test_zero_amount_keeps_price(self):
        """A zero amount leaves the price unchanged."""
        assert next_sqrt_price_from_input(Q64, LIQUIDITY, 0, True) == Q64
        assert next_sqrt_price_from_output(Q64, LIQUIDITY, 0, False) == Q64

    def test_token1_out_moves_price_down(self):
        """Removing L/2 of token1 at price 1 halves the sqrt price."""
        assert next_sqrt_price_from_output(Q64, LIQUIDITY, LIQUIDITY // 2, True) == Q64 // 2

    def test_draining_token1_underflows(self):
        """Removing all virtual token1 drives the price to zero."""
        with pytest.raises(Underflow):
            next_sqrt_price_from_output(Q64, LIQUIDITY, LIQUIDITY, True)

    def test_draining_token0_fails(self):
        """Removing all virtual token0 has no finite price."""
        with pytest.raises(SafeIntError):
            next_sqrt_price_from_output(Q64, LIQUIDITY, LIQUIDITY, False)

    def test_price_above_maximum(self):
        """Prices beyond the supported range raise Overflow."""
        with pytest.raises(Overflow):
            check_sqrt_price(MAX_SQRT_PRICE_X64 + 1)


class TestAmountDeltas:
    """Tests for amount deltas between two prices."""

    def test_amount1_delta(self):
        """Token1 between sqrt prices 1/2 and 1 is L/2."""
        assert amount1_delta(Q64 // 2, Q64, LIQUIDITY, False) == LIQUIDITY // 2

    def test_amount0_delta(self):
        """Token0 between sqrt prices 1 and 2 is L/2."""
        assert amount0_delta(Q64, 2 * Q64, LIQUIDITY, False) == LIQUIDITY // 2

    def test_argument_order_irrelevant(self):
        """Deltas only depend on the price interval."""
        assert amount0_delta(2 * Q64, Q64, LIQUIDITY, False) == amount0_delta(
            Q64, 2 * Q64, LIQUIDITY, False
        )

    def test_round_up_never_smaller(self):
        """Rounding up is at least the rounded-down amount."""
        lower, upper = Q64, Q64 + 12345
        assert amount1_delta(lower, upper, LIQUIDITY, True) >= amount1_delta(
            lower, upper, LIQUIDITY, False
        )
        assert amount0_delta(lower, upper, LIQUIDITY, True) >= amount0_delta(
            lower, upper, LIQUIDITY, False
        )
