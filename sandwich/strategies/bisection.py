"""Bounded bisection search over front-run sizes.

Used for fee-tiered and concentrated-liquidity pools, where no closed form
is available. Candidates lie in [1, reserve_in // 10] and the search runs
for a fixed number of rounds. Each candidate is simulated end to end:

- victim pushed past the ceiling: search smaller sizes
- profit > 0: search larger sizes
- otherwise: search smaller sizes

The best candidate seen (by profit) that clears min_profit_ratio wins.
Profit is not known to be unimodal in the front-run size for these
curves, so this can settle on a local optimum.
"""

from __future__ import annotations

import structlog

from sandwich.amm.base import CurveModel
from sandwich.config import DEFAULT_CONFIG
from sandwich.models.intent import VictimIntent
from sandwich.models.plan import Strategy
from sandwich.strategies.base import SearchLimits, evaluate_candidate
from sandwich.strategies.simulation import SandwichSimulation
from sandwich.strategies.slippage import SlippageCeiling

logger = structlog.get_logger()


class BisectionOptimizer:
    """Fixed-budget search usable on any curve family."""

    strategy = Strategy.BISECTION

    def __init__(self, limits: SearchLimits | None = None) -> None:
        self.limits = limits if limits is not None else SearchLimits.from_config(DEFAULT_CONFIG)

    def optimize(
        self,
        curve: CurveModel,
        victim: VictimIntent,
        ceiling: SlippageCeiling,
    ) -> SandwichSimulation:
        reserve_in, _ = curve.reserves(victim.direction)
        low = 1
        high = reserve_in // self.limits.search_range_divisor
        best: SandwichSimulation | None = None
        rounds = 0

        while rounds < self.limits.search_rounds and low <= high:
            rounds += 1
            mid = (low + high) // 2
            sim = evaluate_candidate(curve, victim, ceiling, mid)
            if sim is None:
                high = mid - 1
                continue

            if sim.profit > 0:
                if self.limits.clears_ratio(mid, sim.profit) and (
                    best is None or sim.profit > best.profit
                ):
                    best = sim
                low = mid + 1
            else:
                high = mid - 1

        logger.debug(
            "bisection_finished",
            rounds=rounds,
            search_high=reserve_in // self.limits.search_range_divisor,
            amount_in=best.frontrun_amount_in if best else None,
            profit=best.profit if best else None,
        )
        return self.limits.accept(best, self.strategy)
