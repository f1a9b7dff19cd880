"""Q64.64 sqrt-price math for single-range concentrated liquidity.

Prices are stored as sqrt(price) * 2^64 where price is token1 per token0.
Amount deltas and next-price computations follow the standard displacement
formulas:

    Δy = L * (√P_upper - √P_lower) / 2^64
    Δx = L * 2^64 * (√P_upper - √P_lower) / (√P_upper * √P_lower)

Python integers are unbounded, so mul_div is exact at any width; only the
results are range-checked (sqrt prices and liquidity to u128, amounts by
the caller to u64). Rounding always favors the pool.
"""

from __future__ import annotations

from sandwich.constants import MAX_SQRT_PRICE_X64, MIN_SQRT_PRICE_X64, Q64
from sandwich.safe_int import S, Overflow, Underflow

__all__ = [
    "mul_div",
    "mul_div_ceil",
    "amount0_delta",
    "amount1_delta",
    "next_sqrt_price_from_input",
    "next_sqrt_price_from_output",
    "virtual_reserves",
    "check_sqrt_price",
]


# =============================================================================
# Full-precision multiply/divide
# =============================================================================


def mul_div(a: int, b: int, denominator: int) -> int:
    """Compute floor(a * b / denominator) without intermediate truncation.

    Raises:
        DivisionByZero: If denominator is zero
    """
    return ((S(a) * S(b)) // S(denominator)).value


def mul_div_ceil(a: int, b: int, denominator: int) -> int:
    """Compute ceil(a * b / denominator) without intermediate truncation.

    Raises:
        DivisionByZero: If denominator is zero
    """
    return (S(a) * S(b)).ceiling_div(denominator).value


def check_sqrt_price(sqrt_price_x64: int) -> int:
    """Validate a sqrt price lies within the supported Q64.64 range.

    Raises:
        Underflow: If below MIN_SQRT_PRICE_X64
        Overflow: If above MAX_SQRT_PRICE_X64
    """
    if sqrt_price_x64 < MIN_SQRT_PRICE_X64:
        raise Underflow(f"Sqrt price below minimum: {sqrt_price_x64}")
    if sqrt_price_x64 > MAX_SQRT_PRICE_X64:
        raise Overflow(f"Sqrt price above maximum: {sqrt_price_x64}")
    return sqrt_price_x64


# =============================================================================
# Amount deltas
# =============================================================================


def amount0_delta(sqrt_a: int, sqrt_b: int, liquidity: int, round_up: bool) -> int:
    """Token0 amount between two sqrt prices for a given liquidity."""
    lower, upper = min(sqrt_a, sqrt_b), max(sqrt_a, sqrt_b)
    if lower <= 0:
        raise Underflow(f"Sqrt price must be positive: {lower}")
    numerator1 = liquidity * Q64
    numerator2 = upper - lower
    if round_up:
        return S(mul_div_ceil(numerator1, numerator2, upper)).ceiling_div(lower).value
    return mul_div(numerator1, numerator2, upper) // lower


def amount1_delta(sqrt_a: int, sqrt_b: int, liquidity: int, round_up: bool) -> int:
    """Token1 amount between two sqrt prices for a given liquidity."""
    lower, upper = min(sqrt_a, sqrt_b), max(sqrt_a, sqrt_b)
    if round_up:
        return mul_div_ceil(liquidity, upper - lower, Q64)
    return mul_div(liquidity, upper - lower, Q64)


# =============================================================================
# Next sqrt price
# =============================================================================


def next_sqrt_price_from_input(
    sqrt_price_x64: int, liquidity: int, amount_in: int, zero_for_one: bool
) -> int:
    """Sqrt price after adding amount_in (net of fee) to the pool.

    Token0 in pushes the price down, token1 in pushes it up. The result is
    rounded so the pool never gives out more than the exact formula.

    Raises:
        Underflow / Overflow: If the price leaves the supported range
        DivisionByZero: If liquidity is zero
    """
    if amount_in == 0:
        return sqrt_price_x64
    if zero_for_one:
        # √P' = L·2^64·√P / (L·2^64 + Δx·√P), rounded up
        numerator = liquidity * Q64
        denominator = S(numerator) + S(amount_in) * S(sqrt_price_x64)
        new_price = mul_div_ceil(numerator, sqrt_price_x64, denominator.value)
    else:
        # √P' = √P + Δy·2^64 / L, rounded down
        new_price = sqrt_price_x64 + mul_div(amount_in, Q64, liquidity)
    return check_sqrt_price(new_price)


def next_sqrt_price_from_output(
    sqrt_price_x64: int, liquidity: int, amount_out: int, zero_for_one: bool
) -> int:
    """Sqrt price after removing amount_out from the pool.

    zero_for_one removes token1 (price down), otherwise token0 (price up).

    Raises:
        Underflow: If the output drains the active range
        Overflow: If the price leaves the supported range
        DivisionByZero: If liquidity is zero
    """
    if amount_out == 0:
        return sqrt_price_x64
    if zero_for_one:
        # √P' = √P - Δy·2^64 / L, rounded down
        shift = mul_div_ceil(amount_out, Q64, liquidity)
        new_price = (S(sqrt_price_x64) - S(shift)).value
    else:
        # √P' = L·2^64·√P / (L·2^64 - Δx·√P), rounded up
        numerator = liquidity * Q64
        denominator = S(numerator) - S(amount_out) * S(sqrt_price_x64)
        new_price = mul_div_ceil(numerator, sqrt_price_x64, denominator.value)
    return check_sqrt_price(new_price)


def virtual_reserves(sqrt_price_x64: int, liquidity: int) -> tuple[int, int]:
    """Virtual (token0, token1) reserves of a single active range.

    x = L·2^64 / √P, y = L·√P / 2^64
    """
    return (
        mul_div(liquidity, Q64, sqrt_price_x64),
        mul_div(liquidity, sqrt_price_x64, Q64),
    )
