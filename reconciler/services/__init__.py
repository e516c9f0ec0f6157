"""Services that coordinate matchers over a batch of records."""

from __future__ import annotations

from .assignment_tracking import InMemoryAssignmentTracker
from .suggestion_coordinator import FILTER_KINDS, SuggestionCoordinator

__all__ = ["FILTER_KINDS", "InMemoryAssignmentTracker", "SuggestionCoordinator"]
