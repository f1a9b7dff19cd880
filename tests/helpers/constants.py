"""Shared mint and account constants for tests.

Usage:
    from tests.helpers import WSOL, TOKEN
    # or
    from tests.helpers.constants import WSOL, TOKEN
"""

from solders.pubkey import Pubkey

# =============================================================================
# Mints
# =============================================================================

WSOL = Pubkey.from_string("So11111111111111111111111111111111111111112")  # Wrapped SOL
USDC = Pubkey.from_string("EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v")  # USD Coin
TOKEN = Pubkey(bytes([7] * 32))  # Generic launch token

# =============================================================================
# Pool-side accounts
# =============================================================================

VAULT_A = Pubkey(bytes([1] * 32))
VAULT_B = Pubkey(bytes([2] * 32))
OTHER_VAULT = Pubkey(bytes([3] * 32))
CREATOR_VAULT = Pubkey(bytes([4] * 32))
CREATOR_AUTHORITY = Pubkey(bytes([5] * 32))

# =============================================================================
# Q64.64 reference values
# =============================================================================

Q64 = 2**64
# sqrt(1) in Q64.64: price of 1 token1 per token0
SQRT_PRICE_ONE = Q64

# =============================================================================
# Clock
# =============================================================================

FIXED_TIMESTAMP = 1_700_000_000
