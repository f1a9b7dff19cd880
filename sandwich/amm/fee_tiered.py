"""Fee-tiered constant product curve.

Generic AMM and CPMM / PumpSwap pools charge separate trade, protocol and
fund fees in basis points. They are summed into one input fee (rounded
up) before the constant product formula. The trade fee stays in the pool
and accrues to liquidity providers; the protocol and fund portions are
accounted separately and leave the pool's pricing reserves.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import ClassVar

import structlog

from sandwich.amm.base import (
    CurveFamily,
    CurveModel,
    CurveSwap,
    Direction,
    FeeParams,
    fee_on,
    gross_up,
)
from sandwich.amm.constant_product import check_reserves, cp_amount_in, cp_amount_out
from sandwich.constants import BPS_DENOMINATOR
from sandwich.errors import CalculationFailure
from sandwich.safe_int import S

logger = structlog.get_logger()


@dataclass(frozen=True)
class FeeTieredCurve(CurveModel):
    """Constant product curve with a trade / protocol / fund fee split.

    Attributes:
        reserve0: Pricing reserve of token0 (vault balance net of accrued fees)
        reserve1: Pricing reserve of token1
        trade_fee_bps: LP fee, retained in the pool
        protocol_fee_bps: Protocol fee, withdrawn from the pool
        fund_fee_bps: Fund (or coin-creator) fee, withdrawn from the pool
    """

    family: ClassVar[CurveFamily] = CurveFamily.FEE_TIERED

    reserve0: int
    reserve1: int
    trade_fee_bps: int = 25
    protocol_fee_bps: int = 0
    fund_fee_bps: int = 0

    def __post_init__(self) -> None:
        fees = (self.trade_fee_bps, self.protocol_fee_bps, self.fund_fee_bps)
        if min(fees) < 0 or sum(fees) > BPS_DENOMINATOR:
            raise ValueError(f"Invalid fee split: {fees}")

    @classmethod
    def from_vaults(
        cls,
        vault0_amount: int,
        vault1_amount: int,
        fees: FeeParams,
        protocol_fees_token0: int = 0,
        protocol_fees_token1: int = 0,
        fund_fees_token0: int = 0,
        fund_fees_token1: int = 0,
    ) -> FeeTieredCurve:
        """Build from raw vault balances, excluding fees not yet withdrawn.

        Raises:
            CalculationFailure: If accrued fees exceed a vault balance
        """
        accrued0 = protocol_fees_token0 + fund_fees_token0
        accrued1 = protocol_fees_token1 + fund_fees_token1
        if accrued0 > vault0_amount or accrued1 > vault1_amount:
            logger.warning(
                "accrued_fees_exceed_vault",
                vault0=vault0_amount,
                vault1=vault1_amount,
                accrued0=accrued0,
                accrued1=accrued1,
            )
            raise CalculationFailure("Accrued fees exceed vault balance")
        return cls(
            reserve0=vault0_amount - accrued0,
            reserve1=vault1_amount - accrued1,
            trade_fee_bps=fees.trade_fee_bps,
            protocol_fee_bps=fees.protocol_fee_bps,
            fund_fee_bps=fees.fund_fee_bps,
        )

    @classmethod
    def from_pumpswap(
        cls,
        base_reserve: int,
        quote_reserve: int,
        lp_fee_bps: int,
        protocol_fee_bps: int,
        coin_creator_fee_bps: int = 0,
    ) -> FeeTieredCurve:
        """Build from a PumpSwap pool: base is token0, quote is token1.

        The coin-creator fee takes the fund slot, so it is routed out of the
        pool like the protocol fee.
        """
        return cls(
            reserve0=base_reserve,
            reserve1=quote_reserve,
            trade_fee_bps=lp_fee_bps,
            protocol_fee_bps=protocol_fee_bps,
            fund_fee_bps=coin_creator_fee_bps,
        )

    @property
    def fees(self) -> FeeParams:
        return FeeParams(
            trade_fee_bps=self.trade_fee_bps,
            protocol_fee_bps=self.protocol_fee_bps,
            fund_fee_bps=self.fund_fee_bps,
        )

    def with_fees(self, fees: FeeParams) -> FeeTieredCurve:
        return replace(
            self,
            trade_fee_bps=fees.trade_fee_bps,
            protocol_fee_bps=fees.protocol_fee_bps,
            fund_fee_bps=fees.fund_fee_bps,
        )

    def reserves(self, direction: Direction) -> tuple[int, int]:
        if direction.zero_for_one:
            return self.reserve0, self.reserve1
        return self.reserve1, self.reserve0

    def withdrawn_fee(self, amount_in: int) -> int:
        """Protocol + fund portion of an input, which leaves the pool."""
        withdrawn_bps = self.protocol_fee_bps + self.fund_fee_bps
        return (S(amount_in) * S(withdrawn_bps) // BPS_DENOMINATOR).value

    def fund_fee(self, amount_in: int) -> int:
        """Fund (coin-creator) portion of an input."""
        return (S(amount_in) * S(self.fund_fee_bps) // BPS_DENOMINATOR).value

    def _after(
        self, direction: Direction, amount_in: int, amount_out: int
    ) -> FeeTieredCurve:
        reserve_in, reserve_out = self.reserves(direction)
        new_in = reserve_in + amount_in - self.withdrawn_fee(amount_in)
        new_out = (S(reserve_out) - S(amount_out)).value
        if direction.zero_for_one:
            return replace(self, reserve0=new_in, reserve1=new_out)
        return replace(self, reserve0=new_out, reserve1=new_in)

    def _exact_input(self, amount_in: int, direction: Direction) -> CurveSwap:
        reserve_in, reserve_out = self.reserves(direction)
        check_reserves(reserve_in, reserve_out)

        in_after_fee = amount_in - fee_on(amount_in, self.fees.total_bps)
        amount_out = cp_amount_out(in_after_fee, reserve_in, reserve_out)
        if amount_out >= reserve_out:
            raise CalculationFailure(f"Input {amount_in} drains reserve {reserve_out}")

        return CurveSwap(
            amount_in=amount_in,
            amount_out=amount_out,
            curve_after=self._after(direction, amount_in, amount_out),
        )

    def _exact_output(self, amount_out: int, direction: Direction) -> CurveSwap:
        reserve_in, reserve_out = self.reserves(direction)
        check_reserves(reserve_in, reserve_out)

        net_in = cp_amount_in(amount_out, reserve_in, reserve_out)
        amount_in = gross_up(net_in, self.fees.total_bps)

        return CurveSwap(
            amount_in=amount_in,
            amount_out=amount_out,
            curve_after=self._after(direction, amount_in, amount_out),
        )
