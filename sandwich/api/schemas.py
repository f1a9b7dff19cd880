"""Pydantic request / response models for the sandwich service.

Amounts accept ints or decimal strings; public keys are base58 strings.
Request models convert themselves into domain values with to_*().
"""

from __future__ import annotations

from decimal import Decimal
from typing import Annotated, Literal

from pydantic import BaseModel, Field
from solders.signature import Signature

from sandwich.amm.base import CurveModel, Direction, FeeParams
from sandwich.amm.concentrated import ConcentratedLiquidityCurve
from sandwich.amm.constant_product import ConstantProductCurve
from sandwich.amm.fee_tiered import FeeTieredCurve
from sandwich.models.intent import SwapMode, VictimIntent
from sandwich.models.plan import (
    TX_SIGNATURE_LEN,
    BackrunPlan,
    FrontrunData,
    FrontrunOutcome,
    ProfitReport,
    SandwichPlan,
)
from sandwich.models.state import SandwichState
from sandwich.models.types import U64, U128, Bps, MintPair, PubkeyStr, VaultPair, parse_pubkey
from sandwich.pools.snapshot import PoolSnapshot

# Exact ratios in [0, 1]
Ratio = Annotated[Decimal, Field(ge=0, le=1)]


# =============================================================================
# Curves and pools
# =============================================================================


class ConstantProductCurveInput(BaseModel):
    """Virtual-reserve bonding curve."""

    family: Literal["constant_product"] = "constant_product"
    reserve0: U64
    reserve1: U64
    fee_bps: Bps = 100

    def to_curve(self) -> CurveModel:
        return ConstantProductCurve(
            reserve0=self.reserve0, reserve1=self.reserve1, fee_bps=self.fee_bps
        )


class FeeTieredCurveInput(BaseModel):
    """Constant product pool with a trade / protocol / fund fee split."""

    family: Literal["fee_tiered"] = "fee_tiered"
    reserve0: U64
    reserve1: U64
    trade_fee_bps: Bps = 25
    protocol_fee_bps: Bps = 0
    fund_fee_bps: Bps = 0

    def to_curve(self) -> CurveModel:
        return FeeTieredCurve(
            reserve0=self.reserve0,
            reserve1=self.reserve1,
            trade_fee_bps=self.trade_fee_bps,
            protocol_fee_bps=self.protocol_fee_bps,
            fund_fee_bps=self.fund_fee_bps,
        )


class ConcentratedCurveInput(BaseModel):
    """Single-range concentrated liquidity pool."""

    family: Literal["concentrated_liquidity"] = "concentrated_liquidity"
    sqrt_price_x64: U128
    liquidity: U128
    tick: int = 0
    fee_bps: Bps = 25

    def to_curve(self) -> CurveModel:
        return ConcentratedLiquidityCurve(
            sqrt_price_x64=self.sqrt_price_x64,
            liquidity=self.liquidity,
            tick=self.tick,
            fee_bps=self.fee_bps,
        )


CurveInput = Annotated[
    ConstantProductCurveInput | FeeTieredCurveInput | ConcentratedCurveInput,
    Field(discriminator="family"),
]


class PoolInput(BaseModel):
    """Pool snapshot as supplied by the caller."""

    mint0: PubkeyStr
    mint1: PubkeyStr
    curve: CurveInput
    vault0: PubkeyStr | None = None
    vault1: PubkeyStr | None = None
    address: PubkeyStr | None = None

    def to_snapshot(self) -> PoolSnapshot:
        return PoolSnapshot(
            mint0=parse_pubkey(self.mint0),
            mint1=parse_pubkey(self.mint1),
            curve=self.curve.to_curve(),
            vault0=parse_pubkey(self.vault0) if self.vault0 else None,
            vault1=parse_pubkey(self.vault1) if self.vault1 else None,
            address=parse_pubkey(self.address) if self.address else None,
        )


class FeeParamsInput(BaseModel):
    """Fee schedule override."""

    trade_fee_bps: Bps = 0
    protocol_fee_bps: Bps = 0
    fund_fee_bps: Bps = 0

    def to_fee_params(self) -> FeeParams:
        return FeeParams(
            trade_fee_bps=self.trade_fee_bps,
            protocol_fee_bps=self.protocol_fee_bps,
            fund_fee_bps=self.fund_fee_bps,
        )


class VictimInput(BaseModel):
    """The counterparty's declared trade."""

    direction: Direction
    mode: SwapMode
    amount: Annotated[U64, Field(gt=0)]
    limit: U64
    transfer_fee_bps: Annotated[int, Field(ge=0, lt=10_000)] = 0
    sqrt_price_limit_x64: U128 | None = None

    def to_intent(self) -> VictimIntent:
        return VictimIntent(
            direction=self.direction,
            mode=self.mode,
            amount=self.amount,
            limit=self.limit,
            transfer_fee_bps=self.transfer_fee_bps,
            sqrt_price_limit_x64=self.sqrt_price_limit_x64,
        )


# =============================================================================
# Planning
# =============================================================================


class VaultsMixin(BaseModel):
    """Pool-side (input, output) accounts the trade presents, both or neither."""

    input_vault: PubkeyStr | None = None
    output_vault: PubkeyStr | None = None

    def to_vaults(self) -> VaultPair | None:
        if self.input_vault is None and self.output_vault is None:
            return None
        if self.input_vault is None or self.output_vault is None:
            raise ValueError("input_vault and output_vault must be given together")
        return VaultPair(
            input_vault=parse_pubkey(self.input_vault),
            output_vault=parse_pubkey(self.output_vault),
        )


class FrontrunPlanRequest(VaultsMixin):
    pool: PoolInput
    victim: VictimInput
    fee_params: FeeParamsInput | None = None
    safety_fraction: Ratio | None = None
    min_profit_ratio: Ratio | None = None


class SandwichPlanResponse(BaseModel):
    strategy: str
    direction: Direction
    frontrun_amount_in: int
    expected_frontrun_amount_out: int
    frontrun_min_amount_out: int
    min_backrun_amount_out: int
    expected_backrun_amount_out: int
    expected_profit: int
    profit_ratio: str
    victim_tolerance_bps: int
    victim_ceiling_bps: int
    victim_impact_bps: int
    victim_realized_amount: int
    frontrun_sqrt_price_limit_x64: int | None = None

    @classmethod
    def from_plan(cls, plan: SandwichPlan) -> SandwichPlanResponse:
        return cls(
            strategy=plan.strategy.value,
            direction=plan.direction,
            frontrun_amount_in=plan.frontrun_amount_in,
            expected_frontrun_amount_out=plan.expected_frontrun_amount_out,
            frontrun_min_amount_out=plan.frontrun_min_amount_out,
            min_backrun_amount_out=plan.min_backrun_amount_out,
            expected_backrun_amount_out=plan.expected_backrun_amount_out,
            expected_profit=plan.expected_profit,
            profit_ratio=str(plan.profit_ratio),
            victim_tolerance_bps=plan.victim_tolerance_bps,
            victim_ceiling_bps=plan.victim_ceiling_bps,
            victim_impact_bps=plan.victim_impact_bps,
            victim_realized_amount=plan.victim_realized_amount,
            frontrun_sqrt_price_limit_x64=plan.frontrun_sqrt_price_limit_x64,
        )


class BackrunPlanRequest(VaultsMixin):
    sandwich_id: U64
    pool: PoolInput
    min_profit_ratio: Ratio | None = None


class BackrunPlanResponse(BaseModel):
    direction: Direction
    amount_in: int
    expected_amount_out: int
    min_amount_out: int
    min_required_amount_out: int
    recorded_input: int
    expected_profit: int

    @classmethod
    def from_plan(cls, plan: BackrunPlan) -> BackrunPlanResponse:
        return cls(
            direction=plan.direction,
            amount_in=plan.amount_in,
            expected_amount_out=plan.expected_amount_out,
            min_amount_out=plan.min_amount_out,
            min_required_amount_out=plan.min_required_amount_out,
            recorded_input=plan.recorded_input,
            expected_profit=plan.expected_profit,
        )


# =============================================================================
# Coordination
# =============================================================================


class BeginRequest(BaseModel):
    """Executed front-run outcome."""

    input_amount: U64
    output_amount: U64
    token_in: PubkeyStr
    token_out: PubkeyStr
    target_tx_signature: str | None = Field(
        default=None, description="Base58 signature of the victim transaction"
    )

    def to_outcome(self) -> FrontrunOutcome:
        signature = (
            bytes(Signature.from_string(self.target_tx_signature))
            if self.target_tx_signature
            else bytes(TX_SIGNATURE_LEN)
        )
        return FrontrunOutcome(
            input_amount=self.input_amount,
            output_amount=self.output_amount,
            mints=MintPair(
                token_in=parse_pubkey(self.token_in), token_out=parse_pubkey(self.token_out)
            ),
            target_tx_signature=signature,
        )


class FinishRequest(BaseModel):
    """Mints presented at back-run time (the front-run's pair)."""

    token_in: PubkeyStr
    token_out: PubkeyStr

    def to_mints(self) -> MintPair:
        return MintPair(token_in=parse_pubkey(self.token_in), token_out=parse_pubkey(self.token_out))


class FrontrunDataResponse(BaseModel):
    input_amount: int
    output_amount: int
    token_in: str
    token_out: str

    @classmethod
    def from_data(cls, data: FrontrunData) -> FrontrunDataResponse:
        return cls(
            input_amount=data.input_amount,
            output_amount=data.output_amount,
            token_in=str(data.mints.token_in),
            token_out=str(data.mints.token_out),
        )


class FinalizeRequest(BaseModel):
    output_balance_before: U64
    output_balance_after: U64
    recorded_input: U64


class ProfitReportResponse(BaseModel):
    sandwich_id: int
    profit: int
    input_amount: int
    output_amount: int
    timestamp: int

    @classmethod
    def from_report(cls, report: ProfitReport) -> ProfitReportResponse:
        return cls(**report.as_event())


class SandwichStateResponse(BaseModel):
    sandwich_id: int
    status: str
    frontrun_input_amount: int
    frontrun_output_amount: int
    token_in_mint: str
    token_out_mint: str
    is_complete: bool
    timestamp: int
    target_tx_signature: str
    bump: int

    @classmethod
    def from_state(cls, state: SandwichState) -> SandwichStateResponse:
        return cls(
            sandwich_id=state.sandwich_id,
            status=state.status.value,
            frontrun_input_amount=state.frontrun_input_amount,
            frontrun_output_amount=state.frontrun_output_amount,
            token_in_mint=str(state.token_in_mint),
            token_out_mint=str(state.token_out_mint),
            is_complete=state.is_complete,
            timestamp=state.timestamp,
            target_tx_signature=str(Signature(state.target_tx_signature)),
            bump=state.bump,
        )


class ErrorResponse(BaseModel):
    error: str
    detail: str
