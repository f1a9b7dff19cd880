"""Two-phase sandwich coordination.

begin() records what the front-run moved; finish() hands the recorded
amounts to the back-run planner after checking the record is still
usable. Completion is set only by ProfitAccountant once the back-run has
executed.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

import structlog

from sandwich.coordination.store import SandwichStore
from sandwich.errors import (
    EmptySupply,
    SandwichAlreadyCompleted,
    SandwichNotFound,
    TokenMintMismatch,
)
from sandwich.models.plan import FrontrunData, FrontrunOutcome
from sandwich.models.state import SandwichState, SandwichStatus
from sandwich.models.types import MintPair

logger = structlog.get_logger()

Clock = Callable[[], int]


def utc_timestamp() -> int:
    """Current unix timestamp in seconds."""
    return int(datetime.now(UTC).timestamp())


class SandwichCoordinator:
    """Creates and validates SandwichState records.

    Args:
        store: Record persistence
        clock: Source of record timestamps
        bump: Coordination tag written into every record
    """

    def __init__(self, store: SandwichStore, clock: Clock = utc_timestamp, bump: int = 0) -> None:
        self.store = store
        self.clock = clock
        self.bump = bump

    def status(self, sandwich_id: int) -> SandwichStatus:
        state = self.store.get(sandwich_id)
        return SandwichStatus.UNINITIALIZED if state is None else state.status

    def load(self, sandwich_id: int) -> SandwichState:
        """Current record.

        Raises:
            SandwichNotFound: If the record is uninitialized
        """
        state = self.store.get(sandwich_id)
        if state is None:
            raise SandwichNotFound(f"No sandwich record for id {sandwich_id}")
        return state

    def begin(self, sandwich_id: int, outcome: FrontrunOutcome) -> SandwichState:
        """Record an executed front-run.

        A pending record for the same id is reused (overwritten with the new
        outcome); a complete one is terminal.

        Raises:
            SandwichAlreadyCompleted: If the id was already finalized
        """
        state = SandwichState(
            sandwich_id=sandwich_id,
            frontrun_input_amount=outcome.input_amount,
            frontrun_output_amount=outcome.output_amount,
            token_in_mint=outcome.mints.token_in,
            token_out_mint=outcome.mints.token_out,
            is_complete=False,
            timestamp=self.clock(),
            target_tx_signature=outcome.target_tx_signature,
            bump=self.bump,
        )
        try:
            previous = self.store.put_pending(state)
        except SandwichAlreadyCompleted:
            logger.warning("sandwich_begin_rejected", sandwich_id=sandwich_id, reason="complete")
            raise

        logger.info(
            "sandwich_state_reused" if previous is not None else "sandwich_state_created",
            sandwich_id=sandwich_id,
            input_amount=state.frontrun_input_amount,
            output_amount=state.frontrun_output_amount,
            token_in=str(state.token_in_mint),
            token_out=str(state.token_out_mint),
        )
        return state

    def finish(self, sandwich_id: int, observed_mints: MintPair) -> FrontrunData:
        """Validate the record for back-run planning without completing it.

        Args:
            sandwich_id: Record to read
            observed_mints: The front-run's (token_in, token_out) as presented
                at back-run time

        Raises:
            SandwichNotFound: No record for this id
            SandwichAlreadyCompleted: Record is already finalized
            TokenMintMismatch: Presented mints differ from the recorded ones
            EmptySupply: Recorded front-run output is zero
        """
        state = self.load(sandwich_id)
        if state.is_complete:
            raise SandwichAlreadyCompleted(f"Sandwich {sandwich_id} is already complete")
        if state.mints != observed_mints:
            logger.warning(
                "sandwich_mint_mismatch",
                sandwich_id=sandwich_id,
                recorded_in=str(state.token_in_mint),
                recorded_out=str(state.token_out_mint),
                observed_in=str(observed_mints.token_in),
                observed_out=str(observed_mints.token_out),
            )
            raise TokenMintMismatch(f"Mints presented for sandwich {sandwich_id} do not match")
        if state.frontrun_output_amount == 0:
            raise EmptySupply(f"Sandwich {sandwich_id} recorded zero front-run output")

        return FrontrunData(
            input_amount=state.frontrun_input_amount,
            output_amount=state.frontrun_output_amount,
            mints=state.mints,
        )
