"""Attendance reconciler - matching engine for meeting attendance identifiers

Reconciles raw participant identifiers (display names or email addresses)
with exactly one person of a known directory, or with nobody when the
match would be a guess."""

from __future__ import annotations

from .core.models import DirectoryPerson, RawIdentifier, Suggestion, SuggestionType
from .services import SuggestionCoordinator

__all__ = [
    "DirectoryPerson",
    "RawIdentifier",
    "Suggestion",
    "SuggestionType",
    "SuggestionCoordinator",
]
