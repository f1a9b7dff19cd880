"""Sandwich planner error classes.

Every failure a planning, coordination or accounting call can produce is
one of these types. None of them are retried internally; retrying with
adjusted parameters is the caller's decision.

Each class carries a stable ``code`` used by the service layer and in
structured logs.
"""


class SandwichError(Exception):
    """Base error for sandwich planning and coordination."""

    code = "sandwich_error"


class PlanError(SandwichError):
    """Base error for front-run / back-run planning failures."""

    code = "plan_error"


class CoordinationError(SandwichError):
    """Base error for SandwichState lifecycle violations."""

    code = "coordination_error"


class ExceededSlippage(PlanError):
    """Counterparty's trade already fails its own slippage bound before any attack."""

    code = "exceeded_slippage"


class UnprofitableSandwich(PlanError):
    """No candidate front-run meets the minimum profit ratio."""

    code = "unprofitable_sandwich"


class InsufficientSandwichAmount(PlanError):
    """Best candidate front-run is below the dust floor."""

    code = "insufficient_sandwich_amount"


class CalculationFailure(PlanError):
    """Overflow, division by zero, or curve inversion failure while quoting."""

    code = "calculation_failure"


class InvalidVault(PlanError):
    """Pool-side token accounts do not match the expected mint pairing."""

    code = "invalid_vault"


class EmptySupply(CoordinationError):
    """Back-run attempted with zero recorded front-run output."""

    code = "empty_supply"


class TokenMintMismatch(CoordinationError):
    """Mints presented at back-run do not match those recorded at front-run."""

    code = "token_mint_mismatch"


class SandwichAlreadyCompleted(CoordinationError):
    """Replay of a finalized sandwich record."""

    code = "sandwich_already_completed"


class SandwichNotFound(CoordinationError):
    """No record exists for the sandwich id (the record is uninitialized)."""

    code = "sandwich_not_found"


class VenueError(SandwichError):
    """Venue adapter could not execute a swap (e.g. insufficient balance)."""

    code = "venue_error"


__all__ = [
    "SandwichError",
    "PlanError",
    "CoordinationError",
    "ExceededSlippage",
    "UnprofitableSandwich",
    "InsufficientSandwichAmount",
    "CalculationFailure",
    "InvalidVault",
    "EmptySupply",
    "TokenMintMismatch",
    "SandwichAlreadyCompleted",
    "SandwichNotFound",
    "VenueError",
]
