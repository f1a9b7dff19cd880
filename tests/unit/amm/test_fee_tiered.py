"""Tests for the fee-tiered (CPMM / PumpSwap) curve."""

import pytest

from sandwich.amm import Direction, FeeParams, FeeTieredCurve
from sandwich.errors import CalculationFailure


@pytest.fixture
def curve() -> FeeTieredCurve:
    """1M / 1M reserves with 20 / 5 / 5 bps trade / protocol / fund fees."""
    return FeeTieredCurve(
        reserve0=1_000_000,
        reserve1=1_000_000,
        trade_fee_bps=20,
        protocol_fee_bps=5,
        fund_fee_bps=5,
    )


class TestFeeTieredQuote:
    """Tests for quoting through the summed fee."""

    def test_total_fee_applied(self, curve):
        """100000 in pays 30 bps (300) before pricing."""
        assert curve.fees.total_bps == 30
        assert curve.quote_output(100_000, Direction.ZERO_FOR_ONE) == 90_661

    def test_trade_fee_stays_in_pool(self, curve):
        """Only protocol + fund fees leave the input reserve."""
        swap = curve.swap_exact_input(100_000, Direction.ZERO_FOR_ONE)
        assert curve.withdrawn_fee(100_000) == 100
        assert swap.curve_after.reserve0 == 1_099_900
        assert swap.curve_after.reserve1 == 909_339

    def test_fund_fee(self, curve):
        """fund_fee is the fund portion of an input, rounded down."""
        assert curve.fund_fee(100_000) == 50
        assert curve.fund_fee(1_999) == 0

    def test_exact_output_covers_request(self, curve):
        """The quoted input delivers at least the requested output."""
        for amount_out in (1, 500, 123_456):
            amount_in = curve.quote_input(amount_out, Direction.ONE_FOR_ZERO)
            assert curve.quote_output(amount_in, Direction.ONE_FOR_ZERO) >= amount_out

    def test_exact_output_updates_reserves(self, curve):
        """Exact-output swaps remove exactly the requested output."""
        swap = curve.swap_exact_output(1_000, Direction.ONE_FOR_ZERO)
        assert swap.curve_after.reserve0 == 999_000
        assert swap.curve_after.reserve1 == (
            1_000_000 + swap.amount_in - curve.withdrawn_fee(swap.amount_in)
        )


class TestFeeTieredConstruction:
    """Tests for building fee-tiered curves from venue state."""

    def test_from_vaults_excludes_accrued_fees(self):
        """Pricing reserves are vault balances net of unwithdrawn fees."""
        curve = FeeTieredCurve.from_vaults(
            1_000,
            2_000,
            FeeParams(trade_fee_bps=25, protocol_fee_bps=5),
            protocol_fees_token0=10,
            protocol_fees_token1=20,
            fund_fees_token0=5,
            fund_fees_token1=5,
        )
        assert (curve.reserve0, curve.reserve1) == (985, 1_975)
        assert curve.protocol_fee_bps == 5

    def test_from_vaults_accrued_exceeds_vault(self):
        """Accrued fees larger than the vault are inconsistent."""
        with pytest.raises(CalculationFailure):
            FeeTieredCurve.from_vaults(10, 2_000, FeeParams(), protocol_fees_token0=11)

    def test_from_pumpswap(self):
        """The coin-creator fee occupies the fund slot."""
        curve = FeeTieredCurve.from_pumpswap(1_000, 2_000, 20, 5, 5)
        assert (curve.reserve0, curve.reserve1) == (1_000, 2_000)
        assert curve.trade_fee_bps == 20
        assert curve.fund_fee_bps == 5

    def test_invalid_fee_split(self):
        """Negative fees or a total above 100% are rejected."""
        with pytest.raises(ValueError):
            FeeTieredCurve(reserve0=1, reserve1=1, trade_fee_bps=-1)
        with pytest.raises(ValueError):
            FeeTieredCurve(reserve0=1, reserve1=1, trade_fee_bps=10_000, fund_fee_bps=1)

    def test_with_fees_keeps_split(self, curve):
        """Overriding fees keeps the three-way split."""
        updated = curve.with_fees(FeeParams(trade_fee_bps=30, protocol_fee_bps=10))
        assert updated.trade_fee_bps == 30
        assert updated.protocol_fee_bps == 10
        assert updated.fund_fee_bps == 0
