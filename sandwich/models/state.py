"""Persisted sandwich coordination record.

The record has a fixed little-endian layout so any byte-oriented storage
backend can hold it:

    u64 frontrun_input_amount
    u64 frontrun_output_amount
    64B target transaction signature
    u64 sandwich_id
    bool is_complete
    32B token_in_mint
    32B token_out_mint
    i64 timestamp
    u8  bump (coordination tag)
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, replace
from enum import Enum

from solders.pubkey import Pubkey

from sandwich.constants import U64_MAX
from sandwich.models.plan import TX_SIGNATURE_LEN
from sandwich.models.types import MintPair

_LAYOUT = struct.Struct("<QQ64sQB32s32sqB")

# 8 + 8 + 64 + 8 + 1 + 32 + 32 + 8 + 1
SANDWICH_STATE_SIZE = _LAYOUT.size

I64_MIN = -(2**63)
I64_MAX = 2**63 - 1


class SandwichStatus(Enum):
    """Lifecycle: UNINITIALIZED -> PENDING -> COMPLETE (terminal)."""

    UNINITIALIZED = "uninitialized"
    PENDING = "pending"
    COMPLETE = "complete"


@dataclass(frozen=True)
class SandwichState:
    """Two-phase record linking a front-run to its back-run."""

    sandwich_id: int
    frontrun_input_amount: int
    frontrun_output_amount: int
    token_in_mint: Pubkey
    token_out_mint: Pubkey
    is_complete: bool = False
    timestamp: int = 0
    target_tx_signature: bytes = bytes(TX_SIGNATURE_LEN)
    bump: int = 0

    def __post_init__(self) -> None:
        for name in ("sandwich_id", "frontrun_input_amount", "frontrun_output_amount"):
            value = getattr(self, name)
            if not 0 <= value <= U64_MAX:
                raise ValueError(f"{name} outside u64: {value}")
        if not I64_MIN <= self.timestamp <= I64_MAX:
            raise ValueError(f"timestamp outside i64: {self.timestamp}")
        if not 0 <= self.bump <= 0xFF:
            raise ValueError(f"bump outside u8: {self.bump}")
        if len(self.target_tx_signature) != TX_SIGNATURE_LEN:
            raise ValueError(f"target_tx_signature must be {TX_SIGNATURE_LEN} bytes")

    @property
    def status(self) -> SandwichStatus:
        return SandwichStatus.COMPLETE if self.is_complete else SandwichStatus.PENDING

    @property
    def mints(self) -> MintPair:
        return MintPair(token_in=self.token_in_mint, token_out=self.token_out_mint)

    def completed(self) -> SandwichState:
        return replace(self, is_complete=True)

    def to_bytes(self) -> bytes:
        return _LAYOUT.pack(
            self.frontrun_input_amount,
            self.frontrun_output_amount,
            self.target_tx_signature,
            self.sandwich_id,
            int(self.is_complete),
            bytes(self.token_in_mint),
            bytes(self.token_out_mint),
            self.timestamp,
            self.bump,
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> SandwichState:
        """Decode a record.

        Raises:
            ValueError: If data has the wrong size or an invalid bool byte
        """
        if len(data) != SANDWICH_STATE_SIZE:
            raise ValueError(
                f"SandwichState record must be {SANDWICH_STATE_SIZE} bytes, got {len(data)}"
            )
        (
            input_amount,
            output_amount,
            signature,
            sandwich_id,
            is_complete,
            token_in,
            token_out,
            timestamp,
            bump,
        ) = _LAYOUT.unpack(data)
        if is_complete not in (0, 1):
            raise ValueError(f"Invalid is_complete byte: {is_complete}")
        return cls(
            sandwich_id=sandwich_id,
            frontrun_input_amount=input_amount,
            frontrun_output_amount=output_amount,
            token_in_mint=Pubkey(token_in),
            token_out_mint=Pubkey(token_out),
            is_complete=bool(is_complete),
            timestamp=timestamp,
            target_tx_signature=signature,
            bump=bump,
        )
