"""Sandwich planner - AMM front-run / back-run planning and coordination."""

from sandwich.engine import FrontrunExecution, SandwichEngine
from sandwich.strategies.planner import plan_backrun, plan_frontrun

__version__ = "0.1.0"
__all__ = [
    "SandwichEngine",
    "FrontrunExecution",
    "plan_frontrun",
    "plan_backrun",
    "__version__",
]
