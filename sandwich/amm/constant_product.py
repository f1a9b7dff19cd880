"""Constant product curve with a flat input fee.

Used by virtual-reserve bonding curves: x * y = k over virtual reserves,
with a flat fee (reference 1%) taken from the input before pricing. The
fee is paid out of the pool, so only the after-fee input is added to the
input reserve.

    amount_out = (in_after_fee * reserve_out) / (reserve_in + in_after_fee)
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import ClassVar

from sandwich.amm.base import (
    CurveFamily,
    CurveModel,
    CurveSwap,
    Direction,
    FeeParams,
    fee_on,
    gross_up,
)
from sandwich.constants import BONDING_CURVE_FEE_BPS, BPS_DENOMINATOR
from sandwich.errors import CalculationFailure
from sandwich.safe_int import S


def cp_amount_out(amount_in: int, reserve_in: int, reserve_out: int) -> int:
    """Fee-free constant product output, rounded down.

    Raises:
        Overflow: If amount_in * reserve_out exceeds u128
    """
    numerator = (S(amount_in) * S(reserve_out)).checked_u128()
    denominator = (S(reserve_in) + S(amount_in)).checked_u128()
    return (numerator // denominator).value


def cp_amount_in(amount_out: int, reserve_in: int, reserve_out: int) -> int:
    """Fee-free constant product input for an exact output, rounded up.

    Raises:
        CalculationFailure: If amount_out would drain reserve_out
        Overflow: If reserve_in * amount_out exceeds u128
    """
    if amount_out >= reserve_out:
        raise CalculationFailure(f"Output {amount_out} drains reserve {reserve_out}")
    numerator = (S(reserve_in) * S(amount_out)).checked_u128()
    return numerator.ceiling_div(S(reserve_out) - S(amount_out)).value


def check_reserves(reserve_in: int, reserve_out: int) -> None:
    if reserve_in <= 0 or reserve_out <= 0:
        raise CalculationFailure(f"Empty reserves: in={reserve_in}, out={reserve_out}")


@dataclass(frozen=True)
class ConstantProductCurve(CurveModel):
    """Virtual-reserve constant product curve with a flat input fee.

    Attributes:
        reserve0: Virtual reserve of token0
        reserve1: Virtual reserve of token1
        fee_bps: Flat input fee in basis points (100 = 1%)
    """

    family: ClassVar[CurveFamily] = CurveFamily.CONSTANT_PRODUCT

    reserve0: int
    reserve1: int
    fee_bps: int = BONDING_CURVE_FEE_BPS

    def __post_init__(self) -> None:
        if not 0 <= self.fee_bps <= BPS_DENOMINATOR:
            raise ValueError(f"fee_bps out of range: {self.fee_bps}")

    @property
    def fees(self) -> FeeParams:
        return FeeParams(trade_fee_bps=self.fee_bps)

    @property
    def fee_multiplier(self) -> int:
        return BPS_DENOMINATOR - self.fee_bps

    def with_fees(self, fees: FeeParams) -> ConstantProductCurve:
        return replace(self, fee_bps=fees.total_bps)

    def reserves(self, direction: Direction) -> tuple[int, int]:
        if direction.zero_for_one:
            return self.reserve0, self.reserve1
        return self.reserve1, self.reserve0

    def with_reserves(
        self, direction: Direction, reserve_in: int, reserve_out: int
    ) -> ConstantProductCurve:
        if direction.zero_for_one:
            return replace(self, reserve0=reserve_in, reserve1=reserve_out)
        return replace(self, reserve0=reserve_out, reserve1=reserve_in)

    def _exact_input(self, amount_in: int, direction: Direction) -> CurveSwap:
        reserve_in, reserve_out = self.reserves(direction)
        check_reserves(reserve_in, reserve_out)

        in_after_fee = amount_in - fee_on(amount_in, self.fee_bps)
        amount_out = cp_amount_out(in_after_fee, reserve_in, reserve_out)
        if amount_out >= reserve_out:
            raise CalculationFailure(f"Input {amount_in} drains reserve {reserve_out}")

        after = self.with_reserves(direction, reserve_in + in_after_fee, reserve_out - amount_out)
        return CurveSwap(amount_in=amount_in, amount_out=amount_out, curve_after=after)

    def _exact_output(self, amount_out: int, direction: Direction) -> CurveSwap:
        reserve_in, reserve_out = self.reserves(direction)
        check_reserves(reserve_in, reserve_out)

        net_in = cp_amount_in(amount_out, reserve_in, reserve_out)
        amount_in = gross_up(net_in, self.fee_bps)
        in_after_fee = amount_in - fee_on(amount_in, self.fee_bps)

        after = self.with_reserves(direction, reserve_in + in_after_fee, reserve_out - amount_out)
        return CurveSwap(amount_in=amount_in, amount_out=amount_out, curve_after=after)
