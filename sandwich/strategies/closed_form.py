"""Closed-form front-run sizing for flat-fee constant product curves.

The largest front-run is the one that moves the victim exactly onto its
effective limit M. With g = (10000 - fee) / 10000, k = R_in * R_out and
Y the input reserve after the front-run (the output reserve is then k / Y,
since the fee leaves the pool):

    exact-output victim buying T:          T*Y^2 + M*g*T*Y - M*g*k = 0
    exact-input victim selling A for >= m: m*Y^2 + m*A*g*Y - k*A*g = 0

Both are scaled by 10000 and solved with math.isqrt for the positive root.
The front-run input is (Y - R_in) / g. Integer rounding on the real legs
can leave the victim one unit past its limit, so the candidate is
re-simulated and, if needed, lowered to the largest size the ceiling
allows.
"""

from __future__ import annotations

import math

import structlog

from sandwich.amm.base import CurveModel
from sandwich.amm.constant_product import ConstantProductCurve
from sandwich.config import DEFAULT_CONFIG
from sandwich.constants import BPS_DENOMINATOR, U64_MAX
from sandwich.errors import UnprofitableSandwich
from sandwich.models.intent import VictimIntent
from sandwich.models.plan import Strategy
from sandwich.strategies.base import SearchLimits, evaluate_candidate
from sandwich.strategies.simulation import SandwichSimulation
from sandwich.strategies.slippage import SlippageCeiling

logger = structlog.get_logger()


def binding_reserve(curve: ConstantProductCurve, victim: VictimIntent, limit: int) -> int | None:
    """Input reserve at which the victim lands exactly on limit.

    Returns:
        The floored positive root Y, or None if the victim's limit does not
        bind (an exact-input victim accepting zero output).
    """
    reserve_in, reserve_out = curve.reserves(victim.direction)
    k = reserve_in * reserve_out
    g = curve.fee_multiplier
    d = BPS_DENOMINATOR

    if victim.is_exact_input:
        amount = victim.pool_amount
        a = limit * d
        b = limit * amount * g
        c = k * amount * g
    else:
        amount = victim.pool_amount
        a = amount * d
        b = limit * g * amount
        c = limit * g * k

    if a == 0:
        return None
    discriminant = b * b + 4 * a * c
    return (math.isqrt(discriminant) - b) // (2 * a)


class ClosedFormOptimizer:
    """Quadratic sizing for ConstantProductCurve pools."""

    strategy = Strategy.CLOSED_FORM

    def __init__(self, limits: SearchLimits | None = None) -> None:
        self.limits = limits if limits is not None else SearchLimits.from_config(DEFAULT_CONFIG)

    def optimize(
        self,
        curve: CurveModel,
        victim: VictimIntent,
        ceiling: SlippageCeiling,
    ) -> SandwichSimulation:
        if not isinstance(curve, ConstantProductCurve):
            raise TypeError(f"Closed form requires ConstantProductCurve, got {type(curve).__name__}")

        reserve_in, _ = curve.reserves(victim.direction)
        y = binding_reserve(curve, victim, ceiling.effective_limit)
        if y is None:
            # Victim accepts any output, bound the size like the search does
            amount_in = reserve_in // self.limits.search_range_divisor
        else:
            if y <= reserve_in:
                logger.info("closed_form_no_root", reserve_in=reserve_in, binding_reserve=y)
                raise UnprofitableSandwich("Victim limit binds before any front-run")
            if curve.fee_multiplier == 0:
                raise UnprofitableSandwich("Curve fee consumes the whole front-run")
            amount_in = (y - reserve_in) * BPS_DENOMINATOR // curve.fee_multiplier

        amount_in = min(amount_in, U64_MAX)
        best = self._largest_allowed(curve, victim, ceiling, amount_in)
        logger.debug(
            "closed_form_candidate",
            binding_reserve=y,
            root_amount_in=amount_in,
            amount_in=best.frontrun_amount_in if best else None,
            profit=best.profit if best else None,
        )
        return self.limits.accept(best, self.strategy)

    def _largest_allowed(
        self,
        curve: CurveModel,
        victim: VictimIntent,
        ceiling: SlippageCeiling,
        upper: int,
    ) -> SandwichSimulation | None:
        """Largest front-run <= upper the ceiling allows.

        Victim cost grows with the front-run, so the allowed set is a prefix
        of [0, upper] and a binary search finds its end.
        """
        if upper <= 0:
            return None
        sim = evaluate_candidate(curve, victim, ceiling, upper)
        if sim is not None:
            return sim

        # Verify and adjust for integer rounding
        low, high = 0, upper - 1
        best: SandwichSimulation | None = None
        while low < high:
            mid = (low + high + 1) // 2
            candidate = evaluate_candidate(curve, victim, ceiling, mid)
            if candidate is None:
                high = mid - 1
            else:
                low = mid
                best = candidate
        return best
