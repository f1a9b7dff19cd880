"""Keyed storage for SandwichState records.

Records are held in their fixed binary layout so the in-memory store
behaves like any byte-oriented backend. Completion is a compare-and-set
on is_complete: of two concurrent finalizations, exactly one succeeds.
"""

from __future__ import annotations

import threading
from typing import Protocol

from sandwich.errors import SandwichAlreadyCompleted, SandwichNotFound
from sandwich.models.state import SandwichState


class SandwichStore(Protocol):
    """Persistence for sandwich records, one per sandwich_id."""

    def get(self, sandwich_id: int) -> SandwichState | None:
        """Current record, or None if uninitialized."""
        ...

    def put_pending(self, state: SandwichState) -> SandwichState | None:
        """Create or overwrite a pending record.

        Returns:
            The pending record that was replaced, if any

        Raises:
            SandwichAlreadyCompleted: If the existing record is complete
        """
        ...

    def complete(self, sandwich_id: int) -> SandwichState:
        """Atomically flip is_complete from false to true.

        Raises:
            SandwichNotFound: If no record exists
            SandwichAlreadyCompleted: If the record is already complete
        """
        ...


class InMemorySandwichStore:
    """Thread-safe dict-backed store of encoded records."""

    def __init__(self) -> None:
        self._records: dict[int, bytes] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def get(self, sandwich_id: int) -> SandwichState | None:
        with self._lock:
            raw = self._records.get(sandwich_id)
        return SandwichState.from_bytes(raw) if raw is not None else None

    def put_pending(self, state: SandwichState) -> SandwichState | None:
        if state.is_complete:
            raise ValueError("put_pending only accepts pending records")
        encoded = state.to_bytes()
        with self._lock:
            raw = self._records.get(state.sandwich_id)
            previous = SandwichState.from_bytes(raw) if raw is not None else None
            if previous is not None and previous.is_complete:
                raise SandwichAlreadyCompleted(
                    f"Sandwich {state.sandwich_id} is already complete"
                )
            self._records[state.sandwich_id] = encoded
        return previous

    def complete(self, sandwich_id: int) -> SandwichState:
        with self._lock:
            raw = self._records.get(sandwich_id)
            if raw is None:
                raise SandwichNotFound(f"No sandwich record for id {sandwich_id}")
            state = SandwichState.from_bytes(raw)
            if state.is_complete:
                raise SandwichAlreadyCompleted(f"Sandwich {sandwich_id} is already complete")
            completed = state.completed()
            self._records[sandwich_id] = completed.to_bytes()
        return completed
