"""Sandwich coordination: persisted records, lifecycle and profit accounting."""

from sandwich.coordination.accountant import ProfitAccountant
from sandwich.coordination.coordinator import Clock, SandwichCoordinator, utc_timestamp
from sandwich.coordination.events import EventSink, LoggingEventSink, RecordingEventSink
from sandwich.coordination.store import InMemorySandwichStore, SandwichStore

__all__ = [
    "Clock",
    "utc_timestamp",
    "SandwichStore",
    "InMemorySandwichStore",
    "SandwichCoordinator",
    "ProfitAccountant",
    "EventSink",
    "LoggingEventSink",
    "RecordingEventSink",
]
