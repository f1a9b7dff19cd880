"""Immutable pool snapshot.

A snapshot pairs a curve with the pool's token identities. A new snapshot
must be fetched between front-run and back-run planning; swaps produce a
new snapshot via after().
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from solders.pubkey import Pubkey

from sandwich.amm.base import CurveModel, CurveSwap, Direction
from sandwich.errors import InvalidVault
from sandwich.models.types import MintPair, VaultPair


@dataclass(frozen=True)
class PoolSnapshot:
    """Point-in-time view of one pool.

    Attributes:
        mint0: Token0 mint
        mint1: Token1 mint
        curve: Pricing model holding reserves / liquidity and fees
        vault0: Pool-side token0 account, if known
        vault1: Pool-side token1 account, if known
        address: Pool account, if known
    """

    mint0: Pubkey
    mint1: Pubkey
    curve: CurveModel
    vault0: Pubkey | None = None
    vault1: Pubkey | None = None
    address: Pubkey | None = None

    def __post_init__(self) -> None:
        if self.mint0 == self.mint1:
            raise InvalidVault(f"Pool mints must differ: {self.mint0}")
        if self.vault0 is not None and self.vault0 == self.vault1:
            raise InvalidVault(f"Pool vaults must differ: {self.vault0}")

    def mint_in(self, direction: Direction) -> Pubkey:
        return self.mint0 if direction.zero_for_one else self.mint1

    def mint_out(self, direction: Direction) -> Pubkey:
        return self.mint1 if direction.zero_for_one else self.mint0

    def mints(self, direction: Direction) -> MintPair:
        return MintPair(token_in=self.mint_in(direction), token_out=self.mint_out(direction))

    def direction_for(self, mint_in: Pubkey, mint_out: Pubkey) -> Direction:
        """Direction of a swap from mint_in to mint_out.

        Raises:
            InvalidVault: If the pair is not this pool's pair
        """
        if (mint_in, mint_out) == (self.mint0, self.mint1):
            return Direction.ZERO_FOR_ONE
        if (mint_in, mint_out) == (self.mint1, self.mint0):
            return Direction.ONE_FOR_ZERO
        raise InvalidVault(
            f"Mints {mint_in} -> {mint_out} do not match pool pair {self.mint0}/{self.mint1}"
        )

    def validate_vaults(self, input_vault: Pubkey, output_vault: Pubkey) -> Direction:
        """Check presented pool-side accounts against the pool's vaults.

        Returns:
            Direction implied by the vault order

        Raises:
            InvalidVault: If the snapshot has no vaults or they do not match
        """
        if self.vault0 is None or self.vault1 is None:
            raise InvalidVault("Snapshot carries no vault accounts to validate against")
        if (input_vault, output_vault) == (self.vault0, self.vault1):
            return Direction.ZERO_FOR_ONE
        if (input_vault, output_vault) == (self.vault1, self.vault0):
            return Direction.ONE_FOR_ZERO
        raise InvalidVault(
            f"Vaults {input_vault}/{output_vault} do not match pool vaults "
            f"{self.vault0}/{self.vault1}"
        )

    def require_vaults(self, vaults: VaultPair, direction: Direction) -> None:
        """Check presented vaults belong to this pool and trade in direction.

        Raises:
            InvalidVault: If the vaults are unknown or ordered for the other direction
        """
        implied = self.validate_vaults(vaults.input_vault, vaults.output_vault)
        if implied is not direction:
            raise InvalidVault(
                f"Vaults {vaults.input_vault}/{vaults.output_vault} trade {implied.value}, "
                f"expected {direction.value}"
            )

    def after(self, swap: CurveSwap) -> PoolSnapshot:
        return replace(self, curve=swap.curve_after)
