"""Shared type definitions for sandwich models.

Mints and vaults are 32-byte Solana public keys (solders.pubkey.Pubkey).
The Annotated types validate wire values for the service layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any

from pydantic import BeforeValidator, Field
from solders.pubkey import Pubkey

from sandwich.constants import U64_MAX, U128_MAX


def parse_pubkey(value: Any) -> Pubkey:
    """Parse a base58 string, 32 raw bytes or a Pubkey.

    Raises:
        ValueError: If value is not a valid 32-byte public key
    """
    if isinstance(value, Pubkey):
        return value
    if isinstance(value, bytes | bytearray):
        if len(value) != 32:
            raise ValueError(f"Public key must be 32 bytes, got {len(value)}")
        return Pubkey(bytes(value))
    if not isinstance(value, str):
        raise ValueError(f"Public key must be a base58 string, got {type(value).__name__}")
    try:
        return Pubkey.from_string(value)
    except ValueError as err:
        raise ValueError(f"Invalid base58 public key: '{value}'") from err


def validate_pubkey_str(value: Any) -> str:
    """Validate a base58 public key and return its canonical string form."""
    return str(parse_pubkey(value))


def _validate_uint(value: Any, name: str, maximum: int) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{name} must be an integer, got bool")
    if isinstance(value, str):
        try:
            value = int(value)
        except ValueError as err:
            raise ValueError(f"{name} must be a decimal integer string: '{value}'") from err
    if not isinstance(value, int):
        raise ValueError(f"{name} must be int or string, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{name} cannot be negative: {value}")
    if value > maximum:
        raise ValueError(f"{name} overflow: {value} > {maximum}")
    return value


def validate_u64(value: Any) -> int:
    """Validate an unsigned 64-bit amount given as int or decimal string.

    Raises:
        ValueError: If value is not a non-negative integer within u64 range
    """
    return _validate_uint(value, "U64", U64_MAX)


def validate_u128(value: Any) -> int:
    """Validate an unsigned 128-bit value (sqrt price, liquidity)."""
    return _validate_uint(value, "U128", U128_MAX)


# Base58 Solana public key
PubkeyStr = Annotated[
    str,
    BeforeValidator(validate_pubkey_str),
    Field(description="Base58-encoded 32-byte public key"),
]

# Token amount in base units
U64 = Annotated[
    int,
    BeforeValidator(validate_u64),
    Field(description="Unsigned 64-bit amount (int or decimal string)"),
]

# Sqrt price or liquidity
U128 = Annotated[
    int,
    BeforeValidator(validate_u128),
    Field(description="Unsigned 128-bit value (int or decimal string)"),
]

# Basis points, 0..10000
Bps = Annotated[int, Field(ge=0, le=10_000)]


@dataclass(frozen=True)
class MintPair:
    """Ordered (token_in, token_out) mints of a sandwich's front-run."""

    token_in: Pubkey
    token_out: Pubkey

    def reversed(self) -> MintPair:
        return MintPair(token_in=self.token_out, token_out=self.token_in)


@dataclass(frozen=True)
class VaultPair:
    """Pool-side (input, output) token accounts presented for one swap."""

    input_vault: Pubkey
    output_vault: Pubkey
