"""Realized profit accounting and record finalization."""

from __future__ import annotations

import structlog

from sandwich.coordination.coordinator import Clock, utc_timestamp
from sandwich.coordination.events import EventSink, LoggingEventSink
from sandwich.coordination.store import SandwichStore
from sandwich.models.plan import ProfitReport
from sandwich.safe_int import S

logger = structlog.get_logger()


class ProfitAccountant:
    """Computes realized profit from balance deltas and completes the record."""

    def __init__(
        self,
        store: SandwichStore,
        clock: Clock = utc_timestamp,
        event_sink: EventSink | None = None,
    ) -> None:
        self.store = store
        self.clock = clock
        self.event_sink = event_sink if event_sink is not None else LoggingEventSink()

    def finalize(
        self,
        sandwich_id: int,
        output_balance_before: int,
        output_balance_after: int,
        recorded_input: int,
    ) -> ProfitReport:
        """Finalize a sandwich after its back-run executed.

        Both differences saturate at zero: a back-run that lost value reports
        zero profit rather than a negative amount.

        Raises:
            SandwichNotFound: No record for this id
            SandwichAlreadyCompleted: Record was already finalized (it is
                left unchanged and no event is emitted)
        """
        realized = S(output_balance_after).saturating_sub(output_balance_before)
        profit = realized.saturating_sub(recorded_input)

        self.store.complete(sandwich_id)

        report = ProfitReport(
            sandwich_id=sandwich_id,
            profit=profit.value,
            input_amount=recorded_input,
            output_amount=realized.value,
            timestamp=self.clock(),
        )
        logger.info(
            "sandwich_finalized",
            sandwich_id=sandwich_id,
            profit=report.profit,
            realized_output=report.output_amount,
        )
        self.event_sink.emit(report)
        return report
