"""Abstract interfaces (protocols) for collaborators outside the engine.

These protocols define the contracts that callers implement, keeping the
engine free of any storage or session code."""

from __future__ import annotations

from typing import Protocol


class AssignmentTracker(Protocol):
    """Knows which attendance records a reviewer already resolved"""

    def was_suggestion_applied(self, record_id: int) -> bool:
        """True if a suggestion was already applied to this record"""
        ...
