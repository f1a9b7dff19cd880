"""Completion event sinks."""

from __future__ import annotations

from typing import Protocol

import structlog

from sandwich.models.plan import ProfitReport

logger = structlog.get_logger()


class EventSink(Protocol):
    """Receives a ProfitReport once per finalized sandwich."""

    def emit(self, report: ProfitReport) -> None: ...


class LoggingEventSink:
    """Emits the completion event as a structured log line."""

    def emit(self, report: ProfitReport) -> None:
        logger.info("sandwich_complete", **report.as_event())


class RecordingEventSink:
    """Keeps emitted reports in memory.

    Useful for testing and for callers that forward events in batches.
    """

    def __init__(self) -> None:
        self.events: list[ProfitReport] = []

    def emit(self, report: ProfitReport) -> None:
        self.events.append(report)
