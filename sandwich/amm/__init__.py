"""Curve models for the supported AMM families."""

from sandwich.amm.base import (
    CurveFamily,
    CurveModel,
    CurveSwap,
    Direction,
    FeeParams,
    quote_input,
    quote_output,
)
from sandwich.amm.concentrated import ConcentratedLiquidityCurve, sqrt_price_of
from sandwich.amm.constant_product import ConstantProductCurve
from sandwich.amm.fee_tiered import FeeTieredCurve

__all__ = [
    # Base
    "CurveFamily",
    "CurveModel",
    "CurveSwap",
    "Direction",
    "FeeParams",
    "quote_input",
    "quote_output",
    # Variants
    "ConstantProductCurve",
    "FeeTieredCurve",
    "ConcentratedLiquidityCurve",
    "sqrt_price_of",
]
