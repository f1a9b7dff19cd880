"""Victim slippage ceiling.

The victim declares a bound (min-out for exact input, max-in for exact
output). Against the unattacked pool that leaves some slack between the
expected amount and the bound. The front-run may consume only a safety
fraction of that slack:

    tolerance_bps = slack * 10000 / expected
    ceiling_bps   = tolerance_bps * safety_fraction
    allowed_slack = floor(slack * safety_fraction)

All values are integers; the safety fraction is used as an exact ratio.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

import structlog

from sandwich.amm.base import CurveFamily, CurveModel
from sandwich.amm.concentrated import sqrt_price_of
from sandwich.config import DEFAULT_CONFIG, ratio_parts
from sandwich.constants import BPS_DENOMINATOR
from sandwich.errors import CalculationFailure, ExceededSlippage
from sandwich.models.intent import SwapMode, VictimIntent
from sandwich.pools.snapshot import PoolSnapshot

logger = structlog.get_logger()


@dataclass(frozen=True)
class SlippageCeiling:
    """Safety-scaled bound on the victim's realized amount.

    Attributes:
        mode: Victim swap mode
        expected: Unattacked output (exact input) or input (exact output)
        limit: Victim's declared bound
        slack: |limit - expected|
        allowed_slack: Part of the slack the front-run may consume
        tolerance_bps: Victim's declared tolerance
        ceiling_bps: tolerance_bps scaled by the safety fraction
        sqrt_price_limit_x64: Victim's sqrt price limit, concentrated pools only
        zero_for_one: Victim direction, which side of the limit is allowed
    """

    mode: SwapMode
    expected: int
    limit: int
    slack: int
    allowed_slack: int
    tolerance_bps: int
    ceiling_bps: int
    sqrt_price_limit_x64: int | None = None
    zero_for_one: bool = True

    @property
    def effective_limit(self) -> int:
        """Bound the victim's realized amount must respect after the front-run."""
        if self.mode is SwapMode.EXACT_INPUT:
            return self.expected - self.allowed_slack
        return self.expected + self.allowed_slack

    def deviation(self, realized: int) -> int:
        """How much worse than expected the victim fares (0 if better)."""
        if self.mode is SwapMode.EXACT_INPUT:
            return max(0, self.expected - realized)
        return max(0, realized - self.expected)

    def impact_bps(self, realized: int) -> int:
        """Victim's price impact against the unattacked expectation."""
        return self.deviation(realized) * BPS_DENOMINATOR // self.expected

    def within_price_limit(self, sqrt_price_after: int | None) -> bool:
        """True unless the victim's swap ends past its sqrt price limit."""
        if self.sqrt_price_limit_x64 is None or sqrt_price_after is None:
            return True
        if self.zero_for_one:
            return sqrt_price_after >= self.sqrt_price_limit_x64
        return sqrt_price_after <= self.sqrt_price_limit_x64

    def allows(self, realized: int, sqrt_price_after: int | None = None) -> bool:
        """True if the realized amount stays within the safety ceiling.

        Also requires the victim's own limits (amount and, on concentrated
        pools, sqrt price) to hold, so an allowed candidate never makes the
        victim's transaction fail or stop short.
        """
        if self.deviation(realized) > self.allowed_slack:
            return False
        if not self.within_price_limit(sqrt_price_after):
            return False
        if self.mode is SwapMode.EXACT_INPUT:
            return realized >= self.limit
        return realized <= self.limit


class SlippageGuard:
    """Derives the victim's slippage ceiling from a pool snapshot."""

    def __init__(self, safety_fraction: Decimal = DEFAULT_CONFIG.safety_fraction) -> None:
        self.safety_fraction = safety_fraction
        self._num, self._den = ratio_parts(safety_fraction)
        if self._num > self._den:
            raise ValueError(f"safety_fraction must be <= 1: {safety_fraction}")

    def ceiling(self, pool: PoolSnapshot, victim: VictimIntent) -> SlippageCeiling:
        return self.ceiling_for_curve(pool.curve, victim)

    def ceiling_for_curve(self, curve: CurveModel, victim: VictimIntent) -> SlippageCeiling:
        """Compute the ceiling on an unattacked curve.

        Raises:
            ExceededSlippage: If the victim's trade already fails its bound
            CalculationFailure: If the expected amount is zero or unquotable
            ValueError: If a sqrt price limit is given for a reserve-based curve
        """
        price_limit = victim.sqrt_price_limit_x64
        if price_limit is not None and curve.family is not CurveFamily.CONCENTRATED_LIQUIDITY:
            raise ValueError("sqrt_price_limit_x64 only applies to concentrated liquidity pools")

        if victim.is_exact_input:
            swap = curve.swap_exact_input(victim.pool_amount, victim.direction)
            expected = swap.amount_out
            slack = expected - victim.limit
        else:
            swap = curve.swap_exact_output(victim.pool_amount, victim.direction)
            expected = swap.amount_in
            slack = victim.limit - expected

        if expected == 0:
            raise CalculationFailure("Victim trade quotes to zero")
        if slack < 0:
            logger.info(
                "victim_slippage_exceeded",
                mode=victim.mode.value,
                expected=expected,
                limit=victim.limit,
            )
            raise ExceededSlippage(
                f"Victim {victim.mode.value} trade fails unattacked: "
                f"expected {expected}, limit {victim.limit}"
            )

        ceiling = SlippageCeiling(
            mode=victim.mode,
            expected=expected,
            limit=victim.limit,
            slack=slack,
            allowed_slack=slack * self._num // self._den,
            tolerance_bps=slack * BPS_DENOMINATOR // expected,
            ceiling_bps=slack * BPS_DENOMINATOR * self._num // (self._den * expected),
            sqrt_price_limit_x64=price_limit,
            zero_for_one=victim.direction.zero_for_one,
        )
        if not ceiling.within_price_limit(sqrt_price_of(swap.curve_after)):
            logger.info(
                "victim_price_limit_exceeded",
                sqrt_price_limit=price_limit,
                sqrt_price_after=sqrt_price_of(swap.curve_after),
            )
            raise ExceededSlippage(
                f"Victim trade crosses its sqrt price limit {price_limit} unattacked"
            )
        logger.debug(
            "victim_ceiling_computed",
            expected=expected,
            limit=victim.limit,
            tolerance_bps=ceiling.tolerance_bps,
            ceiling_bps=ceiling.ceiling_bps,
        )
        return ceiling
