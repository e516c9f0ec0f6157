"""In-memory assignment tracking for batch runs and tests."""

from __future__ import annotations

from collections.abc import Iterable


class InMemoryAssignmentTracker:
    """Set of record ids whose suggestion has already been applied."""

    def __init__(self, applied: Iterable[int] | None = None):
        self._applied: set[int] = set(applied or ())

    def mark_applied(self, record_id: int) -> None:
        self._applied.add(record_id)

    def was_suggestion_applied(self, record_id: int) -> bool:
        return record_id in self._applied

    def __len__(self) -> int:
        return len(self._applied)
