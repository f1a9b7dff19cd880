"""In-process venue executing swaps against a pool snapshot's curve."""

from __future__ import annotations

from collections import defaultdict

import structlog
from solders.pubkey import Pubkey

from sandwich.amm.base import CurveSwap, Direction
from sandwich.amm.fee_tiered import FeeTieredCurve
from sandwich.errors import ExceededSlippage, VenueError
from sandwich.models.intent import SwapMode, VictimIntent
from sandwich.pools.snapshot import PoolSnapshot
from sandwich.venues.base import ActualAmounts, VenueConfig

logger = structlog.get_logger()


class SimulatedVenue:
    """Venue adapter that settles against a local pool state.

    Holds the trader's balances, applies every executed swap to the pool,
    and credits the fund (coin-creator) fee portion to the creator vault
    when the config routes it.
    """

    def __init__(
        self,
        pool: PoolSnapshot,
        balances: dict[Pubkey, int] | None = None,
        config: VenueConfig | None = None,
    ) -> None:
        self.pool = pool
        self.config = config if config is not None else VenueConfig()
        self.balances: dict[Pubkey, int] = defaultdict(int, balances or {})
        self.creator_fees: dict[Pubkey, int] = defaultdict(int)

    def snapshot(self) -> PoolSnapshot:
        return self.pool

    def balance(self, mint: Pubkey) -> int:
        return self.balances[mint]

    def execute_swap(
        self,
        direction: Direction,
        amount: int,
        limit: int,
        mode: SwapMode = SwapMode.EXACT_INPUT,
    ) -> ActualAmounts:
        swap = self._swap(direction, amount, limit, mode)

        mint_in = self.pool.mint_in(direction)
        mint_out = self.pool.mint_out(direction)
        if self.balances[mint_in] < swap.amount_in:
            raise VenueError(
                f"Insufficient {mint_in} balance: have {self.balances[mint_in]}, "
                f"need {swap.amount_in}"
            )
        self.balances[mint_in] -= swap.amount_in
        self.balances[mint_out] += swap.amount_out
        self._settle(direction, swap)

        logger.debug(
            "venue_swap_executed",
            direction=direction.value,
            mode=mode.value,
            amount_in=swap.amount_in,
            amount_out=swap.amount_out,
        )
        return ActualAmounts(amount_in=swap.amount_in, amount_out=swap.amount_out)

    def apply_counterparty_swap(self, victim: VictimIntent) -> ActualAmounts:
        """Land a third party's trade on the pool without touching our balances.

        Raises:
            ExceededSlippage: If the trade would fail its own limit
        """
        swap = self._swap(victim.direction, victim.pool_amount, victim.limit, victim.mode)
        self._settle(victim.direction, swap)
        return ActualAmounts(amount_in=swap.amount_in, amount_out=swap.amount_out)

    def _swap(self, direction: Direction, amount: int, limit: int, mode: SwapMode) -> CurveSwap:
        curve = self.pool.curve
        if mode is SwapMode.EXACT_INPUT:
            swap = curve.swap_exact_input(amount, direction)
            if swap.amount_out < limit:
                raise ExceededSlippage(f"Swap output {swap.amount_out} below minimum {limit}")
        else:
            swap = curve.swap_exact_output(amount, direction)
            if swap.amount_in > limit:
                raise ExceededSlippage(f"Swap input {swap.amount_in} above maximum {limit}")
        return swap

    def _settle(self, direction: Direction, swap: CurveSwap) -> None:
        curve = self.pool.curve
        if self.config.routes_creator_fee and isinstance(curve, FeeTieredCurve):
            self.creator_fees[self.pool.mint_in(direction)] += curve.fund_fee(swap.amount_in)
        self.pool = self.pool.after(swap)
