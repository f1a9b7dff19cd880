"""Mathematical utilities for the sandwich planner.

This package provides the fixed-point primitives for concentrated-liquidity quoting:
- Q64.64 sqrt-price displacement and full-precision mul_div
"""

from sandwich.math.sqrt_price import (
    amount0_delta,
    amount1_delta,
    mul_div,
    mul_div_ceil,
    next_sqrt_price_from_input,
    next_sqrt_price_from_output,
    virtual_reserves,
)

__all__ = [
    "mul_div",
    "mul_div_ceil",
    "amount0_delta",
    "amount1_delta",
    "next_sqrt_price_from_input",
    "next_sqrt_price_from_output",
    "virtual_reserves",
]
