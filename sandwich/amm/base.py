"""Base classes for curve models.

Every supported pool family is a frozen curve value with forward and
inverse quoting. Swaps never mutate a curve; they return the curve the
pool would have afterwards so multi-leg sequences can be simulated
without touching the snapshot they started from.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

from sandwich.constants import BPS_DENOMINATOR
from sandwich.errors import CalculationFailure
from sandwich.safe_int import S, SafeIntError


class Direction(Enum):
    """Which token of the pool goes in."""

    ZERO_FOR_ONE = "zero_for_one"
    ONE_FOR_ZERO = "one_for_zero"

    @property
    def zero_for_one(self) -> bool:
        return self is Direction.ZERO_FOR_ONE

    @property
    def reverse(self) -> Direction:
        """The opposite direction (used by the back-run)."""
        if self is Direction.ZERO_FOR_ONE:
            return Direction.ONE_FOR_ZERO
        return Direction.ZERO_FOR_ONE


class CurveFamily(Enum):
    """Pricing model families; selects the optimization strategy."""

    CONSTANT_PRODUCT = "constant_product"
    FEE_TIERED = "fee_tiered"
    CONCENTRATED_LIQUIDITY = "concentrated_liquidity"


@dataclass(frozen=True)
class FeeParams:
    """Input fee schedule in basis points.

    Flat-fee curves use only the total; fee-tiered pools keep the split
    because the protocol and fund portions leave the pool.
    """

    trade_fee_bps: int = 0
    protocol_fee_bps: int = 0
    fund_fee_bps: int = 0

    def __post_init__(self) -> None:
        for name in ("trade_fee_bps", "protocol_fee_bps", "fund_fee_bps"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")
        if self.total_bps > BPS_DENOMINATOR:
            raise ValueError(f"Total fee exceeds 100%: {self.total_bps} bps")

    @property
    def total_bps(self) -> int:
        return self.trade_fee_bps + self.protocol_fee_bps + self.fund_fee_bps

    @property
    def fee_multiplier(self) -> int:
        """10000 - total fee, the share of input that is priced."""
        return BPS_DENOMINATOR - self.total_bps


@dataclass(frozen=True)
class CurveSwap:
    """Result of a simulated swap: amounts and the curve afterwards."""

    amount_in: int
    amount_out: int
    curve_after: CurveModel


class CurveModel(ABC):
    """Abstract pricing model for one pool.

    Subclasses implement _exact_input/_exact_output on positive amounts;
    the public methods handle zero and negative amounts, check that results
    fit in u64 and convert arithmetic errors to CalculationFailure.
    """

    family: ClassVar[CurveFamily]

    @property
    @abstractmethod
    def fees(self) -> FeeParams:
        """Fee schedule applied on input."""
        ...

    @abstractmethod
    def with_fees(self, fees: FeeParams) -> CurveModel:
        """Same curve state under a different fee schedule."""
        ...

    @abstractmethod
    def reserves(self, direction: Direction) -> tuple[int, int]:
        """(reserve_in, reserve_out) for a direction.

        Concentrated-liquidity curves return virtual reserves.
        """
        ...

    @abstractmethod
    def _exact_input(self, amount_in: int, direction: Direction) -> CurveSwap: ...

    @abstractmethod
    def _exact_output(self, amount_out: int, direction: Direction) -> CurveSwap: ...

    def swap_exact_input(self, amount_in: int, direction: Direction) -> CurveSwap:
        """Sell exactly amount_in.

        Raises:
            CalculationFailure: On negative input, a drained reserve,
                overflow, or division by zero
        """
        return self._checked("exact_input", amount_in, direction)

    def swap_exact_output(self, amount_out: int, direction: Direction) -> CurveSwap:
        """Buy exactly amount_out; amount_in is rounded up.

        Raises:
            CalculationFailure: If amount_out cannot be delivered
        """
        return self._checked("exact_output", amount_out, direction)

    def quote_output(self, amount_in: int, direction: Direction) -> int:
        return self.swap_exact_input(amount_in, direction).amount_out

    def quote_input(self, amount_out: int, direction: Direction) -> int:
        return self.swap_exact_output(amount_out, direction).amount_in

    def _checked(self, mode: str, amount: int, direction: Direction) -> CurveSwap:
        if amount < 0:
            raise CalculationFailure(f"Negative amount: {amount}")
        if amount == 0:
            return CurveSwap(amount_in=0, amount_out=0, curve_after=self)
        try:
            if mode == "exact_input":
                swap = self._exact_input(amount, direction)
            else:
                swap = self._exact_output(amount, direction)
            S(swap.amount_in).to_u64()
            S(swap.amount_out).to_u64()
        except SafeIntError as err:
            raise CalculationFailure(
                f"{self.family.value} {mode} quote failed for {amount}: {err}"
            ) from err
        return swap


def quote_output(curve: CurveModel, amount_in: int, direction: Direction) -> int:
    """Output amount for selling amount_in into curve."""
    return curve.quote_output(amount_in, direction)


def quote_input(curve: CurveModel, amount_out: int, direction: Direction) -> int:
    """Input amount required to buy amount_out from curve."""
    return curve.quote_input(amount_out, direction)


def fee_on(amount: int, fee_bps: int) -> int:
    """Fee charged on an input amount, rounded up."""
    return S(amount * fee_bps).ceiling_div(BPS_DENOMINATOR).value


def gross_up(net_amount: int, fee_bps: int) -> int:
    """Smallest input whose after-fee part covers net_amount.

    Raises:
        DivisionByZero: If fee_bps is 100%
    """
    return S(net_amount * BPS_DENOMINATOR).ceiling_div(BPS_DENOMINATOR - fee_bps).value
