"""Front-run sizing strategies and sandwich planning."""

from sandwich.strategies.base import FrontrunOptimizer, SearchLimits, evaluate_candidate
from sandwich.strategies.bisection import BisectionOptimizer
from sandwich.strategies.closed_form import ClosedFormOptimizer, binding_reserve
from sandwich.strategies.planner import (
    optimizer_for,
    plan_backrun,
    plan_frontrun,
    validate_backrun_state,
)
from sandwich.strategies.simulation import SandwichSimulation, simulate_sandwich
from sandwich.strategies.slippage import SlippageCeiling, SlippageGuard

__all__ = [
    # Slippage
    "SlippageCeiling",
    "SlippageGuard",
    # Simulation
    "SandwichSimulation",
    "simulate_sandwich",
    # Optimizers
    "FrontrunOptimizer",
    "SearchLimits",
    "evaluate_candidate",
    "ClosedFormOptimizer",
    "BisectionOptimizer",
    "binding_reserve",
    # Planning
    "optimizer_for",
    "plan_frontrun",
    "plan_backrun",
    "validate_backrun_state",
]
