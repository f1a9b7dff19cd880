"""Tests for the flat-fee constant product curve."""

import pytest

from sandwich.amm import ConstantProductCurve, Direction, FeeParams, quote_output
from sandwich.amm.base import fee_on, gross_up
from sandwich.errors import CalculationFailure


@pytest.fixture
def curve() -> ConstantProductCurve:
    """1000 / 1000 reserves with a 1% fee."""
    return ConstantProductCurve(reserve0=1_000, reserve1=1_000, fee_bps=100)


class TestFeeRounding:
    """Tests for fee helpers."""

    def test_fee_rounds_up(self):
        """A fractional fee is charged as a whole unit."""
        assert fee_on(1, 100) == 1
        assert fee_on(100, 100) == 1
        assert fee_on(101, 100) == 2

    def test_gross_up_covers_net(self):
        """gross_up returns the smallest input whose after-fee part covers net."""
        for net in (1, 99, 1234, 10**9):
            gross = gross_up(net, 30)
            assert gross - fee_on(gross, 30) >= net
            assert (gross - 1) - fee_on(gross - 1, 30) < net


class TestConstantProductExactInput:
    """Tests for selling an exact input."""

    def test_quote_with_fee(self, curve):
        """100 in at 1% fee prices 99 against 1000/1000."""
        assert curve.quote_output(100, Direction.ZERO_FOR_ONE) == 90

    def test_fee_leaves_pool(self, curve):
        """Only the after-fee input is added to the input reserve."""
        swap = curve.swap_exact_input(100, Direction.ZERO_FOR_ONE)
        assert swap.curve_after.reserve0 == 1_099
        assert swap.curve_after.reserve1 == 910

    def test_direction_selects_reserves(self):
        """ONE_FOR_ZERO sells token1 into token0."""
        curve = ConstantProductCurve(reserve0=100, reserve1=1_000, fee_bps=0)
        swap = curve.swap_exact_input(65, Direction.ONE_FOR_ZERO)
        assert swap.amount_out == 6
        assert (swap.curve_after.reserve0, swap.curve_after.reserve1) == (94, 1_065)

    def test_snapshot_untouched(self, curve):
        """Swapping never mutates the original curve."""
        curve.swap_exact_input(100, Direction.ZERO_FOR_ONE)
        assert (curve.reserve0, curve.reserve1) == (1_000, 1_000)

    def test_zero_amount(self, curve):
        """Zero input quotes zero and returns the same curve."""
        swap = curve.swap_exact_input(0, Direction.ZERO_FOR_ONE)
        assert swap.amount_out == 0
        assert swap.curve_after is curve

    def test_negative_amount(self, curve):
        """Negative amounts are a calculation failure."""
        with pytest.raises(CalculationFailure):
            curve.quote_output(-1, Direction.ZERO_FOR_ONE)

    def test_empty_reserves(self):
        """Empty reserves cannot be priced."""
        curve = ConstantProductCurve(reserve0=0, reserve1=1_000, fee_bps=0)
        with pytest.raises(CalculationFailure):
            curve.quote_output(10, Direction.ZERO_FOR_ONE)

    def test_u128_overflow(self):
        """Intermediate products beyond u128 are rejected."""
        curve = ConstantProductCurve(reserve0=1, reserve1=2**100, fee_bps=0)
        with pytest.raises(CalculationFailure):
            curve.quote_output(2**40, Direction.ZERO_FOR_ONE)

    def test_module_helper(self, curve):
        """quote_output helper delegates to the curve."""
        assert quote_output(curve, 100, Direction.ZERO_FOR_ONE) == 90


class TestConstantProductExactOutput:
    """Tests for buying an exact output."""

    def test_quote_input_rounds_up(self, curve):
        """Buying 90 costs 99 net, grossed up to 100."""
        assert curve.quote_input(90, Direction.ZERO_FOR_ONE) == 100

    def test_quote_input_covers_output(self, curve):
        """Selling the quoted input yields at least the requested output."""
        for amount_out in (1, 17, 250, 900):
            amount_in = curve.quote_input(amount_out, Direction.ONE_FOR_ZERO)
            assert curve.quote_output(amount_in, Direction.ONE_FOR_ZERO) >= amount_out

    def test_unattacked_victim_cost(self):
        """Buying 5 of 100 token0 against 1000 token1 costs 53."""
        curve = ConstantProductCurve(reserve0=100, reserve1=1_000, fee_bps=0)
        assert curve.quote_input(5, Direction.ONE_FOR_ZERO) == 53

    def test_draining_output(self, curve):
        """Buying the whole reserve is impossible."""
        with pytest.raises(CalculationFailure):
            curve.quote_input(1_000, Direction.ZERO_FOR_ONE)

    def test_full_fee_cannot_gross_up(self):
        """A 100% fee has no finite input for any output."""
        curve = ConstantProductCurve(reserve0=1_000, reserve1=1_000, fee_bps=10_000)
        with pytest.raises(CalculationFailure):
            curve.quote_input(1, Direction.ZERO_FOR_ONE)


class TestConstantProductFees:
    """Tests for fee configuration."""

    def test_with_fees_uses_total(self, curve):
        """Overriding fees collapses the split into one flat fee."""
        updated = curve.with_fees(FeeParams(trade_fee_bps=30, protocol_fee_bps=20))
        assert updated.fee_bps == 50
        assert updated.reserve0 == curve.reserve0

    def test_fee_out_of_range(self):
        """Fees above 100% are rejected."""
        with pytest.raises(ValueError):
            ConstantProductCurve(reserve0=1, reserve1=1, fee_bps=10_001)

    def test_fee_multiplier(self, curve):
        """fee_multiplier is 10000 minus the fee."""
        assert curve.fee_multiplier == 9_900

    def test_fee_params_reject_over_100_percent(self):
        """FeeParams totals above 10000 bps are invalid."""
        with pytest.raises(ValueError):
            FeeParams(trade_fee_bps=9_000, protocol_fee_bps=1_001)
