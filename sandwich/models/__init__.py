"""Data models for sandwich planning and coordination."""

from sandwich.models.intent import SwapMode, VictimIntent
from sandwich.models.plan import (
    BackrunPlan,
    FrontrunData,
    FrontrunOutcome,
    ProfitReport,
    SandwichPlan,
    Strategy,
)
from sandwich.models.state import SANDWICH_STATE_SIZE, SandwichState, SandwichStatus
from sandwich.models.types import MintPair, VaultPair, parse_pubkey

__all__ = [
    # Intent
    "SwapMode",
    "VictimIntent",
    # Plans
    "Strategy",
    "SandwichPlan",
    "BackrunPlan",
    "FrontrunOutcome",
    "FrontrunData",
    "ProfitReport",
    # State
    "SANDWICH_STATE_SIZE",
    "SandwichState",
    "SandwichStatus",
    # Types
    "MintPair",
    "VaultPair",
    "parse_pubkey",
]
