"""Counterparty trade intent."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from sandwich.amm.base import Direction, gross_up
from sandwich.constants import BPS_DENOMINATOR, U128_MAX
from sandwich.safe_int import S


class SwapMode(Enum):
    """Which side of a swap is fixed."""

    EXACT_INPUT = "exact_input"
    EXACT_OUTPUT = "exact_output"


@dataclass(frozen=True)
class VictimIntent:
    """The counterparty's declared trade.

    Attributes:
        direction: Pool direction of the trade
        mode: EXACT_INPUT (amount is sold, limit is min-out) or
            EXACT_OUTPUT (amount is bought, limit is max-in)
        amount: The fixed side of the trade
        limit: Slippage bound, minimum out or maximum in
        transfer_fee_bps: Transfer fee of the fixed side's mint. It is
            withheld from an exact-input amount before it reaches the pool,
            and added on top of an exact-output amount the pool must deliver
        sqrt_price_limit_x64: Q64.64 sqrt price the victim's swap may not
            move past on a concentrated liquidity pool, or None
    """

    direction: Direction
    mode: SwapMode
    amount: int
    limit: int
    transfer_fee_bps: int = 0
    sqrt_price_limit_x64: int | None = None

    def __post_init__(self) -> None:
        if self.amount <= 0:
            raise ValueError(f"Victim amount must be positive: {self.amount}")
        if self.limit < 0:
            raise ValueError(f"Victim limit must be non-negative: {self.limit}")
        if not 0 <= self.transfer_fee_bps < BPS_DENOMINATOR:
            raise ValueError(f"transfer_fee_bps out of range: {self.transfer_fee_bps}")
        price_limit = self.sqrt_price_limit_x64
        if price_limit is not None and not 0 < price_limit <= U128_MAX:
            raise ValueError(f"sqrt_price_limit_x64 outside (0, u128]: {price_limit}")

    @property
    def is_exact_input(self) -> bool:
        return self.mode is SwapMode.EXACT_INPUT

    @property
    def pool_amount_in(self) -> int:
        """Exact-input amount that actually reaches the pool."""
        withheld = (S(self.amount) * S(self.transfer_fee_bps)).ceiling_div(BPS_DENOMINATOR)
        return (S(self.amount) - withheld).value

    @property
    def pool_amount_out(self) -> int:
        """Exact-output amount the pool must deliver so the victim nets amount."""
        return gross_up(self.amount, self.transfer_fee_bps)

    @property
    def pool_amount(self) -> int:
        """The fixed side of the trade as the pool sees it."""
        return self.pool_amount_in if self.is_exact_input else self.pool_amount_out
