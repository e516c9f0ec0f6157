"""Interfaces for the identifier matching system.

Defines contracts for matchers and their results."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from ..core.models import DirectoryPerson


@dataclass
class MatchResult:
    """Result of a single identifier lookup"""

    person: DirectoryPerson | None = None
    confidence: float = 0.0
    method: str = "unknown"
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def is_resolved(self) -> bool:
        """Check if a person was found"""
        return self.person is not None

    @property
    def reason(self) -> str | None:
        """Why the lookup ended without a person, if it did"""
        return self.metadata.get("reason")


class IdentifierMatcher(ABC):
    """Base class for matchers that map one identifier to at most one person"""

    @property
    @abstractmethod
    def name(self) -> str:
        """Matcher name for logging and suggestion metadata"""
        pass

    @abstractmethod
    def find_best_match(self, identifier: str) -> MatchResult:
        """Attempt to match an identifier against the directory.

        Args:
            identifier: Raw or normalized identifier text

        Returns:
            MatchResult with the person, or an unresolved result with a reason
        """
        pass

    def _no_match(self, reason: str, **extra: Any) -> MatchResult:
        """Build a consistent unresolved result."""
        return MatchResult(confidence=0.0, method=self.name, metadata={"reason": reason, **extra})
