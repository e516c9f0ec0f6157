"""Core domain models, constants and collaborator interfaces."""

from __future__ import annotations

from .interfaces import AssignmentTracker
from .models import (
    ConfidenceLevel,
    DirectoryPerson,
    MatchCandidate,
    NameCandidate,
    RawIdentifier,
    Suggestion,
    SuggestionStatistics,
    SuggestionType,
)

__all__ = [
    "AssignmentTracker",
    "ConfidenceLevel",
    "DirectoryPerson",
    "MatchCandidate",
    "NameCandidate",
    "RawIdentifier",
    "Suggestion",
    "SuggestionStatistics",
    "SuggestionType",
]
