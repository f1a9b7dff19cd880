"""Planner and coordination value objects.

Plans are transient: they are only valid against the snapshot they were
computed from and are never persisted.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from decimal import Decimal
from enum import Enum

from sandwich.amm.base import Direction
from sandwich.models.types import MintPair

TX_SIGNATURE_LEN = 64


class Strategy(Enum):
    """Front-run sizing strategy."""

    CLOSED_FORM = "closed_form"
    BISECTION = "bisection"


@dataclass(frozen=True)
class SandwichPlan:
    """Optimizer output for one victim trade.

    Attributes:
        strategy: Which optimizer produced the plan
        direction: Front-run direction (same as the victim's)
        frontrun_amount_in: Front-run input
        expected_frontrun_amount_out: Front-run output on the snapshot
        frontrun_min_amount_out: Our own min-out for the front-run
        min_backrun_amount_out: Back-run output needed to clear min_profit_ratio
        expected_backrun_amount_out: Simulated back-run output
        expected_profit: expected_backrun_amount_out - frontrun_amount_in
        profit_ratio: expected_profit / frontrun_amount_in
        victim_tolerance_bps: Victim's declared slippage tolerance
        victim_ceiling_bps: tolerance scaled by the safety fraction
        victim_impact_bps: Victim's realized impact after the front-run
        victim_realized_amount: Victim's simulated output (exact input) or
            input (exact output)
        frontrun_sqrt_price_limit_x64: Sqrt price limit for our own front-run
            on a concentrated liquidity pool, None for reserve-based pools
    """

    strategy: Strategy
    direction: Direction
    frontrun_amount_in: int
    expected_frontrun_amount_out: int
    frontrun_min_amount_out: int
    min_backrun_amount_out: int
    expected_backrun_amount_out: int
    expected_profit: int
    profit_ratio: Decimal
    victim_tolerance_bps: int
    victim_ceiling_bps: int
    victim_impact_bps: int
    victim_realized_amount: int
    frontrun_sqrt_price_limit_x64: int | None = None


@dataclass(frozen=True)
class BackrunPlan:
    """Back-run sale of the recorded front-run output."""

    direction: Direction
    amount_in: int
    expected_amount_out: int
    min_amount_out: int
    min_required_amount_out: int
    recorded_input: int

    @property
    def expected_profit(self) -> int:
        return max(0, self.expected_amount_out - self.recorded_input)


@dataclass(frozen=True)
class FrontrunOutcome:
    """What an executed front-run actually moved, as handed to begin()."""

    input_amount: int
    output_amount: int
    mints: MintPair
    target_tx_signature: bytes = bytes(TX_SIGNATURE_LEN)

    def __post_init__(self) -> None:
        if len(self.target_tx_signature) != TX_SIGNATURE_LEN:
            raise ValueError(
                f"target_tx_signature must be {TX_SIGNATURE_LEN} bytes, "
                f"got {len(self.target_tx_signature)}"
            )


@dataclass(frozen=True)
class FrontrunData:
    """Recorded front-run amounts returned by finish() for back-run planning."""

    input_amount: int
    output_amount: int
    mints: MintPair


@dataclass(frozen=True)
class ProfitReport:
    """Finalized sandwich result, also the completion event payload."""

    sandwich_id: int
    profit: int
    input_amount: int
    output_amount: int
    timestamp: int

    def as_event(self) -> dict[str, int]:
        return asdict(self)
