"""Front-run and back-run planning.

plan_frontrun picks the optimizer by curve family (closed form for flat-fee
constant product curves, bisection otherwise). plan_backrun prices the
sale of the recorded front-run output on a fresh snapshot. Neither call
touches the coordination store.
"""

from __future__ import annotations

from dataclasses import replace
from decimal import Decimal

import structlog

from sandwich.amm.base import CurveFamily, CurveModel, FeeParams
from sandwich.config import DEFAULT_CONFIG, SandwichConfig
from sandwich.constants import BPS_DENOMINATOR, MAX_SQRT_PRICE_X64, MIN_SQRT_PRICE_X64
from sandwich.errors import (
    EmptySupply,
    InvalidVault,
    SandwichAlreadyCompleted,
    TokenMintMismatch,
    UnprofitableSandwich,
)
from sandwich.models.intent import VictimIntent
from sandwich.models.plan import BackrunPlan, SandwichPlan
from sandwich.models.state import SandwichState
from sandwich.models.types import VaultPair
from sandwich.pools.snapshot import PoolSnapshot
from sandwich.strategies.base import FrontrunOptimizer, SearchLimits
from sandwich.strategies.bisection import BisectionOptimizer
from sandwich.strategies.closed_form import ClosedFormOptimizer
from sandwich.strategies.simulation import SandwichSimulation
from sandwich.strategies.slippage import SlippageGuard

logger = structlog.get_logger()


def resolve_config(
    config: SandwichConfig,
    safety_fraction: Decimal | None = None,
    min_profit_ratio: Decimal | None = None,
) -> SandwichConfig:
    """Apply per-call overrides on top of a base config."""
    overrides: dict[str, Decimal] = {}
    if safety_fraction is not None:
        overrides["safety_fraction"] = safety_fraction
    if min_profit_ratio is not None:
        overrides["min_profit_ratio"] = min_profit_ratio
    return replace(config, **overrides) if overrides else config


def optimizer_for(curve: CurveModel, limits: SearchLimits) -> FrontrunOptimizer:
    if curve.family is CurveFamily.CONSTANT_PRODUCT:
        return ClosedFormOptimizer(limits)
    return BisectionOptimizer(limits)


def frontrun_sqrt_price_limit(sim: SandwichSimulation, victim: VictimIntent) -> int | None:
    """Sqrt price limit for our own front-run on a concentrated pool.

    The front-run stops at its simulated post-trade price, never past the
    victim's own limit and strictly inside the protocol's sqrt price range.
    """
    price = sim.frontrun_sqrt_price_after
    if price is None:
        return None
    victim_limit = victim.sqrt_price_limit_x64
    if victim.direction.zero_for_one:
        if victim_limit is not None:
            price = max(price, victim_limit)
        return max(price, MIN_SQRT_PRICE_X64 + 1)
    if victim_limit is not None:
        price = min(price, victim_limit)
    return min(price, MAX_SQRT_PRICE_X64 - 1)


def plan_frontrun(
    pool: PoolSnapshot,
    victim: VictimIntent,
    fee_params: FeeParams | None = None,
    safety_fraction: Decimal | None = None,
    min_profit_ratio: Decimal | None = None,
    config: SandwichConfig = DEFAULT_CONFIG,
    vaults: VaultPair | None = None,
) -> SandwichPlan:
    """Size a front-run around a victim trade.

    Args:
        pool: Snapshot the victim will trade against
        victim: The victim's declared trade
        fee_params: Overrides the curve's own fee schedule
        safety_fraction: Overrides config.safety_fraction
        min_profit_ratio: Overrides config.min_profit_ratio
        config: Base configuration
        vaults: Pool-side accounts the trade presents, checked before sizing

    Raises:
        InvalidVault: vaults do not belong to the pool or trade the other way
        ExceededSlippage: Victim already fails its bound unattacked
        UnprofitableSandwich: No candidate clears min_profit_ratio
        InsufficientSandwichAmount: Best candidate is below the dust floor
        CalculationFailure: The victim's trade cannot be quoted
    """
    if vaults is not None:
        pool.require_vaults(vaults, victim.direction)
    config = resolve_config(config, safety_fraction, min_profit_ratio)
    curve = pool.curve if fee_params is None else pool.curve.with_fees(fee_params)

    ceiling = SlippageGuard(config.safety_fraction).ceiling_for_curve(curve, victim)
    limits = SearchLimits.from_config(config)
    optimizer = optimizer_for(curve, limits)
    sim = optimizer.optimize(curve, victim, ceiling)

    amount_in = sim.frontrun_amount_in
    plan = SandwichPlan(
        strategy=optimizer.strategy,
        direction=victim.direction,
        frontrun_amount_in=amount_in,
        expected_frontrun_amount_out=sim.frontrun_amount_out,
        frontrun_min_amount_out=(
            sim.frontrun_amount_out
            * (BPS_DENOMINATOR - config.frontrun_slippage_bps)
            // BPS_DENOMINATOR
        ),
        min_backrun_amount_out=limits.min_backrun_output(amount_in),
        expected_backrun_amount_out=sim.backrun_amount_out,
        expected_profit=sim.profit,
        profit_ratio=Decimal(sim.profit) / Decimal(amount_in),
        victim_tolerance_bps=ceiling.tolerance_bps,
        victim_ceiling_bps=ceiling.ceiling_bps,
        victim_impact_bps=ceiling.impact_bps(sim.victim_realized),
        victim_realized_amount=sim.victim_realized,
        frontrun_sqrt_price_limit_x64=frontrun_sqrt_price_limit(sim, victim),
    )
    logger.info(
        "frontrun_planned",
        strategy=plan.strategy.value,
        family=curve.family.value,
        direction=plan.direction.value,
        amount_in=plan.frontrun_amount_in,
        expected_out=plan.expected_frontrun_amount_out,
        expected_profit=plan.expected_profit,
        victim_impact_bps=plan.victim_impact_bps,
        victim_ceiling_bps=plan.victim_ceiling_bps,
    )
    return plan


def validate_backrun_state(state: SandwichState, pool: PoolSnapshot) -> None:
    """Pre-conditions for unwinding a recorded front-run against pool.

    Raises:
        SandwichAlreadyCompleted: Record is already finalized
        EmptySupply: Front-run produced nothing to sell
        TokenMintMismatch: Pool does not trade the recorded mints
    """
    if state.is_complete:
        raise SandwichAlreadyCompleted(f"Sandwich {state.sandwich_id} is already complete")
    if state.frontrun_output_amount == 0:
        raise EmptySupply(f"Sandwich {state.sandwich_id} recorded zero front-run output")
    backrun_mints = state.mints.reversed()
    try:
        pool.direction_for(backrun_mints.token_in, backrun_mints.token_out)
    except InvalidVault as err:
        raise TokenMintMismatch(
            f"Pool does not trade recorded mints of sandwich {state.sandwich_id}"
        ) from err


def plan_backrun(
    state: SandwichState,
    pool: PoolSnapshot,
    min_profit_ratio: Decimal | None = None,
    config: SandwichConfig = DEFAULT_CONFIG,
    vaults: VaultPair | None = None,
) -> BackrunPlan:
    """Price the back-run sale of the recorded front-run output.

    Raises:
        SandwichAlreadyCompleted / EmptySupply / TokenMintMismatch: see
            validate_backrun_state
        InvalidVault: vaults do not belong to the pool or trade the other way
        UnprofitableSandwich: Expected output misses min_profit_ratio
        CalculationFailure: The sale cannot be quoted
    """
    config = resolve_config(config, min_profit_ratio=min_profit_ratio)
    validate_backrun_state(state, pool)

    backrun_mints = state.mints.reversed()
    direction = pool.direction_for(backrun_mints.token_in, backrun_mints.token_out)
    if vaults is not None:
        pool.require_vaults(vaults, direction)
    amount_in = state.frontrun_output_amount
    expected = pool.curve.quote_output(amount_in, direction)

    limits = SearchLimits.from_config(config)
    min_required = limits.min_backrun_output(state.frontrun_input_amount)
    if expected < min_required or expected <= state.frontrun_input_amount:
        logger.info(
            "backrun_unprofitable",
            sandwich_id=state.sandwich_id,
            expected_out=expected,
            min_required=min_required,
            recorded_input=state.frontrun_input_amount,
        )
        raise UnprofitableSandwich(
            f"Back-run of sandwich {state.sandwich_id} expects {expected}, needs {min_required}"
        )

    cushioned = expected * (BPS_DENOMINATOR - config.backrun_slippage_bps) // BPS_DENOMINATOR
    plan = BackrunPlan(
        direction=direction,
        amount_in=amount_in,
        expected_amount_out=expected,
        min_amount_out=max(cushioned, min_required),
        min_required_amount_out=min_required,
        recorded_input=state.frontrun_input_amount,
    )
    logger.info(
        "backrun_planned",
        sandwich_id=state.sandwich_id,
        direction=direction.value,
        amount_in=amount_in,
        expected_out=expected,
        min_out=plan.min_amount_out,
    )
    return plan
