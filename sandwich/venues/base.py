"""Venue adapter interface.

Venues execute swaps and move tokens; encoding a venue's instructions is
the adapter's business. The planner and coordinator only see the amounts
that actually moved.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from solders.pubkey import Pubkey

from sandwich.amm.base import Direction
from sandwich.models.intent import SwapMode


@dataclass(frozen=True)
class ActualAmounts:
    """Amounts a venue actually moved for one swap."""

    amount_in: int
    amount_out: int


@dataclass(frozen=True)
class VenueConfig:
    """Per-venue routing configuration.

    Creator-fee routing is optional: pools that pay a coin-creator fee
    need both the creator's fee vault and its authority, others leave them
    unset.

    Attributes:
        pool: Pool account the adapter trades against
        creator_fee_vault: Account receiving the creator fee portion
        creator_fee_authority: Owner of creator_fee_vault
    """

    pool: Pubkey | None = None
    creator_fee_vault: Pubkey | None = None
    creator_fee_authority: Pubkey | None = None

    def __post_init__(self) -> None:
        if (self.creator_fee_vault is None) != (self.creator_fee_authority is None):
            raise ValueError("creator_fee_vault and creator_fee_authority must be set together")

    @property
    def routes_creator_fee(self) -> bool:
        return self.creator_fee_vault is not None


class VenueAdapter(Protocol):
    """One adapter per supported AMM family."""

    def execute_swap(
        self,
        direction: Direction,
        amount: int,
        limit: int,
        mode: SwapMode = SwapMode.EXACT_INPUT,
    ) -> ActualAmounts:
        """Execute a swap.

        Args:
            direction: Pool direction
            amount: Input (exact input) or output (exact output) amount
            limit: Minimum out (exact input) or maximum in (exact output)
            mode: Which side is fixed

        Raises:
            ExceededSlippage: If the venue cannot honor limit
            VenueError: If the venue rejects the swap
        """
        ...

    def balance(self, mint: Pubkey) -> int:
        """Trader's current balance of a mint."""
        ...
