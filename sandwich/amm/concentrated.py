"""Concentrated liquidity curve, single active range.

The pool is described by its Q64.64 sqrt price and the liquidity of the
current range. The fee is taken from the input; outputs come from the
sqrt-price displacement formulas in sandwich.math.sqrt_price.

Tick crossing is not modeled: the whole trade is priced against the
active range, so trades large enough to leave it are mis-quoted. The tick
is carried along unchanged as the active-range marker.
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
from sandwich.constants import BPS_DENOMINATOR, U128_MAX
from sandwich.errors import CalculationFailure
from sandwich.math.sqrt_price import (
    amount0_delta,
    amount1_delta,
    next_sqrt_price_from_input,
    next_sqrt_price_from_output,
    virtual_reserves,
)


@dataclass(frozen=True)
class ConcentratedLiquidityCurve(CurveModel):
    """Single-range concentrated liquidity curve.

    Attributes:
        sqrt_price_x64: sqrt(token1 / token0) in Q64.64
        liquidity: Active liquidity L
        tick: Current tick (informational)
        fee_bps: Input fee in basis points
    """

    family: ClassVar[CurveFamily] = CurveFamily.CONCENTRATED_LIQUIDITY

    sqrt_price_x64: int
    liquidity: int
    tick: int = 0
    fee_bps: int = 25

    def __post_init__(self) -> None:
        if not 0 <= self.fee_bps <= BPS_DENOMINATOR:
            raise ValueError(f"fee_bps out of range: {self.fee_bps}")

    @property
    def fees(self) -> FeeParams:
        return FeeParams(trade_fee_bps=self.fee_bps)

    def with_fees(self, fees: FeeParams) -> ConcentratedLiquidityCurve:
        return replace(self, fee_bps=fees.total_bps)

    def reserves(self, direction: Direction) -> tuple[int, int]:
        self._check_state()
        x, y = virtual_reserves(self.sqrt_price_x64, self.liquidity)
        if direction.zero_for_one:
            return x, y
        return y, x

    def _check_state(self) -> None:
        if not 0 < self.liquidity <= U128_MAX:
            raise CalculationFailure(f"Liquidity outside (0, u128]: {self.liquidity}")
        if not 0 < self.sqrt_price_x64 <= U128_MAX:
            raise CalculationFailure(f"Sqrt price outside (0, u128]: {self.sqrt_price_x64}")

    def _exact_input(self, amount_in: int, direction: Direction) -> CurveSwap:
        self._check_state()
        zero_for_one = direction.zero_for_one

        in_after_fee = amount_in - fee_on(amount_in, self.fee_bps)
        new_price = next_sqrt_price_from_input(
            self.sqrt_price_x64, self.liquidity, in_after_fee, zero_for_one
        )
        if zero_for_one:
            amount_out = amount1_delta(new_price, self.sqrt_price_x64, self.liquidity, False)
        else:
            amount_out = amount0_delta(self.sqrt_price_x64, new_price, self.liquidity, False)

        return CurveSwap(
            amount_in=amount_in,
            amount_out=amount_out,
            curve_after=replace(self, sqrt_price_x64=new_price),
        )

    def _exact_output(self, amount_out: int, direction: Direction) -> CurveSwap:
        self._check_state()
        zero_for_one = direction.zero_for_one

        new_price = next_sqrt_price_from_output(
            self.sqrt_price_x64, self.liquidity, amount_out, zero_for_one
        )
        if zero_for_one:
            net_in = amount0_delta(new_price, self.sqrt_price_x64, self.liquidity, True)
        else:
            net_in = amount1_delta(self.sqrt_price_x64, new_price, self.liquidity, True)
        amount_in = gross_up(net_in, self.fee_bps)

        return CurveSwap(
            amount_in=amount_in,
            amount_out=amount_out,
            curve_after=replace(self, sqrt_price_x64=new_price),
        )


def sqrt_price_of(curve: CurveModel) -> int | None:
    """Sqrt price of a concentrated liquidity curve; None for reserve-based curves."""
    if isinstance(curve, ConcentratedLiquidityCurve):
        return curve.sqrt_price_x64
    return None
