"""Three-leg sandwich simulation.

front-run (exact input) -> victim on the shifted curve -> back-run selling
exactly the front-run output in the reverse direction.
"""

from __future__ import annotations

from dataclasses import dataclass

from sandwich.amm.base import CurveModel, CurveSwap
from sandwich.amm.concentrated import sqrt_price_of
from sandwich.models.intent import VictimIntent


@dataclass(frozen=True)
class SandwichSimulation:
    """Every leg of a simulated sandwich."""

    frontrun: CurveSwap
    victim: CurveSwap
    backrun: CurveSwap
    victim_exact_input: bool

    @property
    def frontrun_amount_in(self) -> int:
        return self.frontrun.amount_in

    @property
    def frontrun_amount_out(self) -> int:
        return self.frontrun.amount_out

    @property
    def backrun_amount_out(self) -> int:
        return self.backrun.amount_out

    @property
    def victim_realized(self) -> int:
        """Victim's output (exact input) or required input (exact output)."""
        if self.victim_exact_input:
            return self.victim.amount_out
        return self.victim.amount_in

    @property
    def frontrun_sqrt_price_after(self) -> int | None:
        return sqrt_price_of(self.frontrun.curve_after)

    @property
    def victim_sqrt_price_after(self) -> int | None:
        """Sqrt price once the victim has traded; None off concentrated pools."""
        return sqrt_price_of(self.victim.curve_after)

    @property
    def profit(self) -> int:
        """backrun_output - frontrun_input; negative for a losing candidate."""
        return self.backrun.amount_out - self.frontrun.amount_in

    @property
    def final_curve(self) -> CurveModel:
        return self.backrun.curve_after


def simulate_sandwich(
    curve: CurveModel, victim: VictimIntent, frontrun_amount_in: int
) -> SandwichSimulation:
    """Simulate the full sandwich for one front-run size.

    Raises:
        CalculationFailure: If any leg cannot be quoted
    """
    direction = victim.direction
    frontrun = curve.swap_exact_input(frontrun_amount_in, direction)

    shifted = frontrun.curve_after
    if victim.is_exact_input:
        victim_swap = shifted.swap_exact_input(victim.pool_amount, direction)
    else:
        victim_swap = shifted.swap_exact_output(victim.pool_amount, direction)

    backrun = victim_swap.curve_after.swap_exact_input(frontrun.amount_out, direction.reverse)
    return SandwichSimulation(
        frontrun=frontrun,
        victim=victim_swap,
        backrun=backrun,
        victim_exact_input=victim.is_exact_input,
    )
