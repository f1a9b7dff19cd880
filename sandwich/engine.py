"""End-to-end sandwich orchestration.

Ties planning, venue execution and coordination together:

    run_frontrun: plan_frontrun -> venue.execute_swap -> coordinator.begin
    run_backrun:  coordinator.finish -> plan_backrun -> venue.execute_swap
                  -> accountant.finalize

Ordering around the victim's transaction is the caller's scheduling
concern; the engine only guarantees that a failed plan never touches the
store and that finalization happens at most once per id.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from sandwich.config import DEFAULT_CONFIG, SandwichConfig
from sandwich.coordination.accountant import ProfitAccountant
from sandwich.coordination.coordinator import Clock, SandwichCoordinator, utc_timestamp
from sandwich.coordination.events import EventSink
from sandwich.coordination.store import InMemorySandwichStore, SandwichStore
from sandwich.models.intent import SwapMode, VictimIntent
from sandwich.models.plan import (
    TX_SIGNATURE_LEN,
    FrontrunOutcome,
    ProfitReport,
    SandwichPlan,
)
from sandwich.models.state import SandwichState
from sandwich.models.types import MintPair, VaultPair
from sandwich.pools.snapshot import PoolSnapshot
from sandwich.strategies.planner import plan_backrun, plan_frontrun
from sandwich.venues.base import ActualAmounts, VenueAdapter

logger = structlog.get_logger()


@dataclass(frozen=True)
class FrontrunExecution:
    """Result of an executed and recorded front-run."""

    plan: SandwichPlan
    amounts: ActualAmounts
    state: SandwichState

    @property
    def mints(self) -> MintPair:
        return self.state.mints


class SandwichEngine:
    """Runs both halves of a sandwich against one venue."""

    def __init__(
        self,
        venue: VenueAdapter,
        store: SandwichStore | None = None,
        config: SandwichConfig = DEFAULT_CONFIG,
        clock: Clock = utc_timestamp,
        event_sink: EventSink | None = None,
    ) -> None:
        self.venue = venue
        self.store = store if store is not None else InMemorySandwichStore()
        self.config = config
        self.coordinator = SandwichCoordinator(self.store, clock)
        self.accountant = ProfitAccountant(self.store, clock, event_sink)

    def run_frontrun(
        self,
        sandwich_id: int,
        pool: PoolSnapshot,
        victim: VictimIntent,
        target_tx_signature: bytes = bytes(TX_SIGNATURE_LEN),
        vaults: VaultPair | None = None,
    ) -> FrontrunExecution:
        """Plan, execute and record the front-run.

        Raises:
            InvalidVault / PlanError: Planning failed (store untouched)
            ExceededSlippage / VenueError: Execution failed (store untouched)
            SandwichAlreadyCompleted: The id was already finalized
        """
        plan = plan_frontrun(pool, victim, config=self.config, vaults=vaults)
        amounts = self.venue.execute_swap(
            plan.direction,
            plan.frontrun_amount_in,
            plan.frontrun_min_amount_out,
            SwapMode.EXACT_INPUT,
        )
        outcome = FrontrunOutcome(
            input_amount=amounts.amount_in,
            output_amount=amounts.amount_out,
            mints=pool.mints(plan.direction),
            target_tx_signature=target_tx_signature,
        )
        state = self.coordinator.begin(sandwich_id, outcome)
        return FrontrunExecution(plan=plan, amounts=amounts, state=state)

    def run_backrun(
        self,
        sandwich_id: int,
        pool: PoolSnapshot,
        mints: MintPair,
        vaults: VaultPair | None = None,
    ) -> ProfitReport:
        """Unwind a recorded front-run on a fresh snapshot and finalize.

        Args:
            sandwich_id: Record created by run_frontrun
            pool: Snapshot taken after the victim's trade landed
            mints: The front-run's (token_in, token_out) pair
            vaults: Pool-side (input, output) accounts of the back-run, if known

        Raises:
            SandwichNotFound / SandwichAlreadyCompleted / TokenMintMismatch /
            EmptySupply: Record is not usable
            InvalidVault: vaults do not belong to the pool or trade the other way
            UnprofitableSandwich: Back-run would miss min_profit_ratio
        """
        data = self.coordinator.finish(sandwich_id, mints)
        state = self.coordinator.load(sandwich_id)
        backrun = plan_backrun(state, pool, config=self.config, vaults=vaults)

        before = self.venue.balance(data.mints.token_in)
        self.venue.execute_swap(
            backrun.direction,
            backrun.amount_in,
            backrun.min_amount_out,
            SwapMode.EXACT_INPUT,
        )
        after = self.venue.balance(data.mints.token_in)

        return self.accountant.finalize(sandwich_id, before, after, data.input_amount)
