"""Base protocol and shared acceptance rules for front-run optimizers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

import structlog

from sandwich.amm.base import CurveModel
from sandwich.config import DEFAULT_CONFIG, SandwichConfig, ratio_parts
from sandwich.errors import CalculationFailure, InsufficientSandwichAmount, UnprofitableSandwich
from sandwich.models.intent import VictimIntent
from sandwich.models.plan import Strategy
from sandwich.strategies.simulation import SandwichSimulation, simulate_sandwich
from sandwich.strategies.slippage import SlippageCeiling

logger = structlog.get_logger()


@dataclass(frozen=True)
class SearchLimits:
    """Acceptance thresholds shared by both optimizers.

    min_profit_ratio is held as an exact fraction so acceptance is decided
    by cross-multiplication: profit * den >= num * amount_in.
    """

    min_profit_num: int
    min_profit_den: int
    dust_floor: int
    search_rounds: int
    search_range_divisor: int

    @classmethod
    def from_config(cls, config: SandwichConfig = DEFAULT_CONFIG) -> SearchLimits:
        num, den = ratio_parts(config.min_profit_ratio)
        return cls(
            min_profit_num=num,
            min_profit_den=den,
            dust_floor=config.dust_floor,
            search_rounds=config.search_rounds,
            search_range_divisor=config.search_range_divisor,
        )

    def clears_ratio(self, amount_in: int, profit: int) -> bool:
        """profit > 0 and profit / amount_in >= min_profit_ratio."""
        if profit <= 0 or amount_in <= 0:
            return False
        return profit * self.min_profit_den >= self.min_profit_num * amount_in

    def min_backrun_output(self, amount_in: int) -> int:
        """Smallest back-run output that clears the ratio, rounded up."""
        num, den = self.min_profit_num, self.min_profit_den
        return -(-amount_in * (den + num) // den)

    def accept(self, best: SandwichSimulation | None, strategy: Strategy) -> SandwichSimulation:
        """Apply the final acceptance rules to an optimizer's best candidate.

        Raises:
            UnprofitableSandwich: If there is no candidate or it misses the ratio
            InsufficientSandwichAmount: If the candidate is below the dust floor
        """
        if best is None or not self.clears_ratio(best.frontrun_amount_in, best.profit):
            logger.info(
                "sandwich_unprofitable",
                strategy=strategy.value,
                amount_in=best.frontrun_amount_in if best else None,
                profit=best.profit if best else None,
            )
            raise UnprofitableSandwich(f"{strategy.value}: no candidate meets min_profit_ratio")
        if best.frontrun_amount_in < self.dust_floor:
            logger.info(
                "sandwich_below_dust_floor",
                strategy=strategy.value,
                amount_in=best.frontrun_amount_in,
                dust_floor=self.dust_floor,
            )
            raise InsufficientSandwichAmount(
                f"{strategy.value}: best front-run {best.frontrun_amount_in} "
                f"below dust floor {self.dust_floor}"
            )
        return best


def evaluate_candidate(
    curve: CurveModel,
    victim: VictimIntent,
    ceiling: SlippageCeiling,
    amount_in: int,
) -> SandwichSimulation | None:
    """Simulate a candidate; None if it breaks the victim's ceiling.

    A candidate whose legs cannot be quoted (e.g. the victim's exact output
    no longer exists in the shifted pool) is infeasible, not an error.
    """
    try:
        sim = simulate_sandwich(curve, victim, amount_in)
    except CalculationFailure as err:
        logger.debug("candidate_unquotable", amount_in=amount_in, error=str(err))
        return None
    if not ceiling.allows(sim.victim_realized, sim.victim_sqrt_price_after):
        return None
    return sim


class FrontrunOptimizer(Protocol):
    """Sizes the front-run for one victim trade."""

    strategy: Strategy

    def optimize(
        self,
        curve: CurveModel,
        victim: VictimIntent,
        ceiling: SlippageCeiling,
    ) -> SandwichSimulation:
        """Return the accepted candidate's full simulation.

        Raises:
            UnprofitableSandwich: If no candidate clears min_profit_ratio
            InsufficientSandwichAmount: If the best candidate is dust
        """
        ...
