"""Protocol constants for the sandwich planner.

Centralizes numeric bounds and reference parameters shared by the curve
models, the optimizers and the coordination record.
"""

# Basis-point denominator (10000 bps = 100%)
BPS_DENOMINATOR = 10_000

# Integer widths used on-chain (amounts are u64, intermediates u128)
U64_MAX = 2**64 - 1
U128_MAX = 2**128 - 1

# Q64.64 fixed point: sqrt prices are stored as sqrt(price) * 2^64
Q64 = 2**64
MIN_SQRT_PRICE_X64 = 4295048016
MAX_SQRT_PRICE_X64 = 79226673521066979257578248091

# Optimizer reference parameters
# Best front-run below this many base units is not worth executing
DUST_FLOOR = 100
# Bisection budget and search range (candidates in [1, reserve_in // 10])
SEARCH_ROUNDS = 20
SEARCH_RANGE_DIVISOR = 10

# Reference curve fees
# Bonding curve charges a flat 1% on input
BONDING_CURVE_FEE_BPS = 100
