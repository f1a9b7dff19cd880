"""API endpoints for the sandwich planner."""

from functools import lru_cache

import structlog
from fastapi import APIRouter, Depends

from sandwich.api.schemas import (
    BackrunPlanRequest,
    BackrunPlanResponse,
    BeginRequest,
    FinalizeRequest,
    FinishRequest,
    FrontrunDataResponse,
    FrontrunPlanRequest,
    ProfitReportResponse,
    SandwichPlanResponse,
    SandwichStateResponse,
)
from sandwich.config import SandwichConfig
from sandwich.coordination import (
    InMemorySandwichStore,
    ProfitAccountant,
    SandwichCoordinator,
    SandwichStore,
)
from sandwich.strategies.planner import plan_backrun, plan_frontrun

logger = structlog.get_logger()

router = APIRouter()

_default_store = InMemorySandwichStore()


@lru_cache(maxsize=1)
def get_config() -> SandwichConfig:
    """Dependency provider for the planner configuration (read once from env)."""
    return SandwichConfig.from_env()


def get_store() -> SandwichStore:
    """Dependency provider for the record store.

    Override this in tests to isolate state:
        app.dependency_overrides[get_store] = lambda: InMemorySandwichStore()
    """
    return _default_store


def get_coordinator(store: SandwichStore = Depends(get_store)) -> SandwichCoordinator:
    return SandwichCoordinator(store)


def get_accountant(store: SandwichStore = Depends(get_store)) -> ProfitAccountant:
    return ProfitAccountant(store)


@router.post("/frontrun/plan")
def frontrun_plan(
    request: FrontrunPlanRequest,
    config: SandwichConfig = Depends(get_config),
) -> SandwichPlanResponse:
    """Size a front-run around the victim trade.

    Error Handling:
        - ExceededSlippage / UnprofitableSandwich / InsufficientSandwichAmount /
          CalculationFailure / InvalidVault: 422 with the error code
    """
    pool = request.pool.to_snapshot()
    logger.info(
        "received_frontrun_plan",
        family=pool.curve.family.value,
        mode=request.victim.mode.value,
        amount=request.victim.amount,
    )
    plan = plan_frontrun(
        pool,
        request.victim.to_intent(),
        fee_params=request.fee_params.to_fee_params() if request.fee_params else None,
        safety_fraction=request.safety_fraction,
        min_profit_ratio=request.min_profit_ratio,
        config=config,
        vaults=request.to_vaults(),
    )
    return SandwichPlanResponse.from_plan(plan)


@router.post("/backrun/plan")
def backrun_plan(
    request: BackrunPlanRequest,
    coordinator: SandwichCoordinator = Depends(get_coordinator),
    config: SandwichConfig = Depends(get_config),
) -> BackrunPlanResponse:
    """Price the back-run for a recorded sandwich on a fresh snapshot."""
    state = coordinator.load(request.sandwich_id)
    plan = plan_backrun(
        state,
        request.pool.to_snapshot(),
        min_profit_ratio=request.min_profit_ratio,
        config=config,
        vaults=request.to_vaults(),
    )
    return BackrunPlanResponse.from_plan(plan)


@router.post("/sandwiches/{sandwich_id}/begin")
def begin(
    sandwich_id: int,
    request: BeginRequest,
    coordinator: SandwichCoordinator = Depends(get_coordinator),
) -> SandwichStateResponse:
    """Record an executed front-run (creates or reuses a pending record)."""
    state = coordinator.begin(sandwich_id, request.to_outcome())
    return SandwichStateResponse.from_state(state)


@router.post("/sandwiches/{sandwich_id}/finish")
def finish(
    sandwich_id: int,
    request: FinishRequest,
    coordinator: SandwichCoordinator = Depends(get_coordinator),
) -> FrontrunDataResponse:
    """Validate a pending record for back-run planning."""
    data = coordinator.finish(sandwich_id, request.to_mints())
    return FrontrunDataResponse.from_data(data)


@router.post("/sandwiches/{sandwich_id}/finalize")
def finalize(
    sandwich_id: int,
    request: FinalizeRequest,
    accountant: ProfitAccountant = Depends(get_accountant),
) -> ProfitReportResponse:
    """Complete a sandwich from observed balances (at most once per id)."""
    report = accountant.finalize(
        sandwich_id,
        request.output_balance_before,
        request.output_balance_after,
        request.recorded_input,
    )
    return ProfitReportResponse.from_report(report)


@router.get("/sandwiches/{sandwich_id}")
def get_sandwich(
    sandwich_id: int,
    coordinator: SandwichCoordinator = Depends(get_coordinator),
) -> SandwichStateResponse:
    """Current record for a sandwich id."""
    return SandwichStateResponse.from_state(coordinator.load(sandwich_id))
