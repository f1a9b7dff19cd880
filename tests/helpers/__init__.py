"""Test helpers module for shared test utilities.

This module consolidates common test utilities to reduce duplication:
- constants: Mints, vault accounts and Q64 reference values
- factories: Pool snapshot and victim intent factory functions
"""

from tests.helpers.constants import (
    CREATOR_AUTHORITY,
    CREATOR_VAULT,
    FIXED_TIMESTAMP,
    OTHER_VAULT,
    Q64,
    SQRT_PRICE_ONE,
    TOKEN,
    USDC,
    VAULT_A,
    VAULT_B,
    WSOL,
)
from tests.helpers.factories import (
    buy_exact_out,
    make_cl_pool,
    make_cp_pool,
    make_fee_tiered_pool,
    sell_exact_in,
)

__all__ = [
    # Constants
    "WSOL",
    "USDC",
    "TOKEN",
    "VAULT_A",
    "VAULT_B",
    "OTHER_VAULT",
    "CREATOR_VAULT",
    "CREATOR_AUTHORITY",
    "FIXED_TIMESTAMP",
    "Q64",
    "SQRT_PRICE_ONE",
    # Factories
    "make_cp_pool",
    "make_fee_tiered_pool",
    "make_cl_pool",
    "buy_exact_out",
    "sell_exact_in",
]
