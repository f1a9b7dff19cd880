"""Pytest configuration and fixtures."""

from decimal import Decimal

import pytest

from sandwich.config import SandwichConfig
from sandwich.coordination import (
    InMemorySandwichStore,
    ProfitAccountant,
    RecordingEventSink,
    SandwichCoordinator,
)
from sandwich.models import FrontrunOutcome, MintPair
from tests.helpers import FIXED_TIMESTAMP, TOKEN, WSOL


@pytest.fixture
def clock():
    """Deterministic clock returning a fixed unix timestamp."""
    return lambda: FIXED_TIMESTAMP


@pytest.fixture
def store() -> InMemorySandwichStore:
    """Fresh in-memory record store."""
    return InMemorySandwichStore()


@pytest.fixture
def event_sink() -> RecordingEventSink:
    """Event sink that keeps emitted reports."""
    return RecordingEventSink()


@pytest.fixture
def coordinator(store, clock) -> SandwichCoordinator:
    return SandwichCoordinator(store, clock=clock)


@pytest.fixture
def accountant(store, clock, event_sink) -> ProfitAccountant:
    return ProfitAccountant(store, clock=clock, event_sink=event_sink)


@pytest.fixture
def buy_mints() -> MintPair:
    """Front-run pair buying TOKEN with WSOL."""
    return MintPair(token_in=WSOL, token_out=TOKEN)


@pytest.fixture
def outcome(buy_mints) -> FrontrunOutcome:
    """Executed front-run: 1000 WSOL in, 5000 TOKEN out."""
    return FrontrunOutcome(input_amount=1_000, output_amount=5_000, mints=buy_mints)


@pytest.fixture
def exact_config() -> SandwichConfig:
    """Full slippage budget and no dust floor, for hand-checked scenarios."""
    return SandwichConfig(safety_fraction=Decimal(1), dust_floor=1)
