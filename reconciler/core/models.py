"""Core domain models for attendance reconciliation.

These models represent the inputs and outputs of one reconciliation run and
are independent of any storage or UI layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class SuggestionType(Enum):
    """Which matcher produced a suggestion"""

    NAME = "name"
    EMAIL = "email"


class ConfidenceLevel(Enum):
    """Coarse confidence shown to reviewers"""

    HIGH = "high"
    MEDIUM = "medium"


@dataclass(frozen=True)
class DirectoryPerson:
    """A person eligible for assignment (read-only during a run)"""

    id: int
    firstname: str
    lastname: str
    email: str = ""

    @property
    def full_name(self) -> str:
        """Return first and last name"""
        return f"{self.firstname} {self.lastname}".strip()


@dataclass(frozen=True)
class RawIdentifier:
    """Participant identifier reported by the meeting platform for one attendance record"""

    record_id: int
    text: str


@dataclass(frozen=True)
class NameCandidate:
    """One (firstname, lastname) interpretation of a display name or directory entry"""

    firstname: str
    lastname: str
    source_tag: str

    @property
    def dedup_key(self) -> str:
        return f"{self.firstname.lower()}|{self.lastname.lower()}"


@dataclass
class MatchCandidate:
    """Best score of one person within one email pattern tier"""

    person: DirectoryPerson
    score: float
    priority: int
    pattern_name: str
    is_ambiguous: bool
    confidence: float


@dataclass(frozen=True)
class Suggestion:
    """The single suggested person for an attendance record"""

    record_id: int
    person: DirectoryPerson
    type: SuggestionType
    priority: int
    confidence: ConfidenceLevel
    score: float = 0.0
    metadata: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)


@dataclass
class SuggestionStatistics:
    """Counts shown above the review list"""

    total: int = 0
    name_based: int = 0
    email_based: int = 0
    high_confidence: int = 0
    medium_confidence: int = 0

    def as_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "name_based": self.name_based,
            "email_based": self.email_based,
            "high_confidence": self.high_confidence,
            "medium_confidence": self.medium_confidence,
        }
