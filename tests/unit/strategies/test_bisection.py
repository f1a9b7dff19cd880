"""Tests for bisection front-run sizing on fee-tiered and concentrated pools."""

from decimal import Decimal

import pytest

from sandwich.amm import Direction
from sandwich.errors import ExceededSlippage, InsufficientSandwichAmount, UnprofitableSandwich
from sandwich.models import Strategy, SwapMode, VictimIntent
from sandwich.strategies import (
    BisectionOptimizer,
    SearchLimits,
    SlippageGuard,
    plan_frontrun,
    simulate_sandwich,
)
from tests.helpers import SQRT_PRICE_ONE, make_cl_pool, make_fee_tiered_pool, sell_exact_in


def victim_with_tolerance(pool, amount: int, percent: int):
    """Exact-input WSOL sale accepting percent% of its unattacked output."""
    expected = pool.curve.quote_output(amount, Direction.ONE_FOR_ZERO)
    return sell_exact_in(amount, expected * percent // 100)


class TestBisectionFeeTiered:
    """Victim sells 1e10 WSOL into a 1e12 / 1e12 pool with a 25 bps fee."""

    @pytest.fixture
    def pool(self):
        return make_fee_tiered_pool(10**12, 10**12, trade_fee_bps=25)

    def test_finds_profitable_plan(self, pool):
        """The search settles on a profitable front-run inside the ceiling."""
        victim = victim_with_tolerance(pool, 10**10, 90)
        plan = plan_frontrun(pool, victim)

        assert plan.strategy is Strategy.BISECTION
        assert plan.victim_realized_amount >= victim.limit
        assert plan.victim_impact_bps <= plan.victim_ceiling_bps
        assert plan.profit_ratio >= Decimal("0.005")
        assert plan.frontrun_amount_in <= 10**12 // 10

    def test_plan_matches_simulation(self, pool):
        """The plan reports the simulated legs of its front-run."""
        victim = victim_with_tolerance(pool, 10**10, 90)
        plan = plan_frontrun(pool, victim)
        sim = simulate_sandwich(pool.curve, victim, plan.frontrun_amount_in)

        assert sim.profit == plan.expected_profit
        assert sim.victim_realized == plan.victim_realized_amount

    def test_high_fees_unprofitable(self):
        """Round-trip fees larger than the victim's impact leave no profit."""
        pool = make_fee_tiered_pool(10**12, 10**12, trade_fee_bps=500)
        with pytest.raises(UnprofitableSandwich):
            plan_frontrun(pool, sell_exact_in(10**7, 0))

    def test_small_pool_is_dust(self):
        """Every candidate in a tiny pool falls below the dust floor."""
        pool = make_fee_tiered_pool(500, 500, trade_fee_bps=0)
        with pytest.raises(InsufficientSandwichAmount):
            plan_frontrun(pool, sell_exact_in(100, 0))


class TestBisectionConcentrated:
    """Victim sells 1e10 WSOL into a price-1 range with L = 1e12 and no fee."""

    @pytest.fixture
    def pool(self):
        return make_cl_pool(10**12, fee_bps=0)

    def test_finds_profitable_plan(self, pool):
        """Concentrated pools are sized by bisection."""
        victim = victim_with_tolerance(pool, 10**10, 90)
        plan = plan_frontrun(pool, victim)

        assert plan.strategy is Strategy.BISECTION
        assert plan.victim_realized_amount >= victim.limit
        assert plan.victim_impact_bps <= plan.victim_ceiling_bps
        assert plan.expected_profit > 0

    def test_frontrun_price_limit(self, pool):
        """The plan carries the front-run's simulated post-trade sqrt price."""
        victim = victim_with_tolerance(pool, 10**10, 90)
        plan = plan_frontrun(pool, victim)
        sim = simulate_sandwich(pool.curve, victim, plan.frontrun_amount_in)

        assert plan.frontrun_sqrt_price_limit_x64 == sim.frontrun_sqrt_price_after
        assert plan.frontrun_sqrt_price_limit_x64 > SQRT_PRICE_ONE

    def test_victim_price_limit_caps_frontrun(self, pool):
        """A tight sqrt price limit shrinks the front-run to stay inside it."""
        tolerant = victim_with_tolerance(pool, 10**10, 90)
        loose = plan_frontrun(pool, tolerant)
        unattacked = SQRT_PRICE_ONE + SQRT_PRICE_ONE // 100
        limit = unattacked + SQRT_PRICE_ONE // 10_000
        victim = VictimIntent(
            direction=Direction.ONE_FOR_ZERO,
            mode=SwapMode.EXACT_INPUT,
            amount=10**10,
            limit=tolerant.limit,
            sqrt_price_limit_x64=limit,
        )
        plan = plan_frontrun(pool, victim)
        sim = simulate_sandwich(pool.curve, victim, plan.frontrun_amount_in)

        assert plan.frontrun_amount_in < loose.frontrun_amount_in
        assert sim.victim_sqrt_price_after <= limit
        assert plan.frontrun_sqrt_price_limit_x64 <= limit

    def test_victim_crossing_own_limit(self, pool):
        """A limit the victim breaks unattacked leaves nothing to plan."""
        victim = VictimIntent(
            direction=Direction.ONE_FOR_ZERO,
            mode=SwapMode.EXACT_INPUT,
            amount=10**10,
            limit=0,
            sqrt_price_limit_x64=SQRT_PRICE_ONE + 1,
        )
        with pytest.raises(ExceededSlippage):
            plan_frontrun(pool, victim)

    def test_reserve_pools_have_no_price_limit(self):
        """Fee-tiered pools plan without a sqrt price limit."""
        pool = make_fee_tiered_pool(10**12, 10**12, trade_fee_bps=25)
        plan = plan_frontrun(pool, victim_with_tolerance(pool, 10**10, 90))
        assert plan.frontrun_sqrt_price_limit_x64 is None


class TestBisectionBudget:
    """Tests for the search budget."""

    def test_single_round_checks_midpoint(self):
        """With one round only the midpoint of [1, reserve_in // 10] is tried."""
        pool = make_fee_tiered_pool(500, 500, trade_fee_bps=0)
        victim = sell_exact_in(100, 0)
        ceiling = SlippageGuard().ceiling(pool, victim)
        limits = SearchLimits(
            min_profit_num=1,
            min_profit_den=200,
            dust_floor=1,
            search_rounds=1,
            search_range_divisor=10,
        )
        sim = BisectionOptimizer(limits).optimize(pool.curve, victim, ceiling)
        assert sim.frontrun_amount_in == 25
        assert sim.profit == 8
