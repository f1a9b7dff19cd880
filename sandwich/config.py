"""Planner configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from sandwich.constants import DUST_FLOOR, SEARCH_RANGE_DIVISOR, SEARCH_ROUNDS


def ratio_parts(value: Decimal) -> tuple[int, int]:
    """Exact (numerator, denominator) of a non-negative Decimal ratio.

    Ratios are configured as Decimal and compared by cross-multiplication,
    so no float ever reaches quoting or optimization.

    Raises:
        ValueError: If value is negative, NaN or infinite
    """
    if not value.is_finite() or value < 0:
        raise ValueError(f"Ratio must be a finite non-negative decimal: {value}")
    return value.as_integer_ratio()


@dataclass(frozen=True)
class SandwichConfig:
    """Centralized configuration for sandwich planning.

    Attributes:
        safety_fraction: Share of the counterparty's slippage tolerance the
            front-run may consume (default: 0.95)
        min_profit_ratio: Minimum profit / front-run input (default: 0.005)
        dust_floor: Smallest front-run worth executing, in base units
            (default: 100)
        search_rounds: Bisection iteration budget (default: 20)
        search_range_divisor: Search candidates in [1, reserve_in // divisor]
            (default: 10)
        frontrun_slippage_bps: Cushion on our own front-run min-out (default: 5%)
        backrun_slippage_bps: Cushion on the back-run expected output (default: 2%)
    """

    safety_fraction: Decimal = Decimal("0.95")
    min_profit_ratio: Decimal = Decimal("0.005")
    dust_floor: int = DUST_FLOOR
    search_rounds: int = SEARCH_ROUNDS
    search_range_divisor: int = SEARCH_RANGE_DIVISOR
    frontrun_slippage_bps: int = 500
    backrun_slippage_bps: int = 200

    def __post_init__(self) -> None:
        num, den = ratio_parts(self.safety_fraction)
        if num > den:
            raise ValueError(f"safety_fraction must be <= 1: {self.safety_fraction}")
        ratio_parts(self.min_profit_ratio)
        if self.dust_floor < 0:
            raise ValueError(f"dust_floor must be non-negative: {self.dust_floor}")
        if self.search_rounds <= 0 or self.search_range_divisor <= 0:
            raise ValueError("search_rounds and search_range_divisor must be positive")
        for name in ("frontrun_slippage_bps", "backrun_slippage_bps"):
            bps = getattr(self, name)
            if not 0 <= bps <= 10_000:
                raise ValueError(f"{name} must be within [0, 10000]: {bps}")

    @classmethod
    def from_env(cls, prefix: str = "SANDWICH_") -> SandwichConfig:
        """Build a config from environment variables, falling back to defaults.

        Recognized variables (with the default prefix):
        - SANDWICH_SAFETY_FRACTION
        - SANDWICH_MIN_PROFIT_RATIO
        - SANDWICH_DUST_FLOOR
        - SANDWICH_SEARCH_ROUNDS
        - SANDWICH_SEARCH_RANGE_DIVISOR
        - SANDWICH_FRONTRUN_SLIPPAGE_BPS
        - SANDWICH_BACKRUN_SLIPPAGE_BPS

        Raises:
            ValueError: If a variable is set but malformed
        """
        defaults = cls()
        try:
            return cls(
                safety_fraction=Decimal(
                    os.environ.get(f"{prefix}SAFETY_FRACTION", str(defaults.safety_fraction))
                ),
                min_profit_ratio=Decimal(
                    os.environ.get(f"{prefix}MIN_PROFIT_RATIO", str(defaults.min_profit_ratio))
                ),
                dust_floor=int(os.environ.get(f"{prefix}DUST_FLOOR", defaults.dust_floor)),
                search_rounds=int(os.environ.get(f"{prefix}SEARCH_ROUNDS", defaults.search_rounds)),
                search_range_divisor=int(
                    os.environ.get(f"{prefix}SEARCH_RANGE_DIVISOR", defaults.search_range_divisor)
                ),
                frontrun_slippage_bps=int(
                    os.environ.get(f"{prefix}FRONTRUN_SLIPPAGE_BPS", defaults.frontrun_slippage_bps)
                ),
                backrun_slippage_bps=int(
                    os.environ.get(f"{prefix}BACKRUN_SLIPPAGE_BPS", defaults.backrun_slippage_bps)
                ),
            )
        except InvalidOperation as err:
            raise ValueError(f"Malformed decimal in {prefix}* environment") from err


# Default configuration instance
DEFAULT_CONFIG = SandwichConfig()
