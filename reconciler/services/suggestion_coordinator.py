"""Suggestion coordinator.

Runs the name and email matchers over a batch of unassigned attendance
records and merges their outcomes into one suggestion per record."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from ..core.constants import EMAIL_SUGGESTION_PRIORITY, NAME_SUGGESTION_PRIORITY
from ..core.interfaces import AssignmentTracker
from ..core.models import (
    ConfidenceLevel,
    DirectoryPerson,
    NameCandidate,
    RawIdentifier,
    Suggestion,
    SuggestionStatistics,
    SuggestionType,
)
from ..resolution.email_matcher import EmailMatchSession, EmailPatternMatcher
from ..resolution.interfaces import MatchResult
from ..resolution.phased_matcher import PhasedIdentifierMatcher
from ..settings import ReconcilerSettings, get_settings
from ..shared.name_decomposer import decompose_display_name
from ..shared.text_normalizer import clean_identifier, is_email, names_match
from .assignment_tracking import InMemoryAssignmentTracker

logger = logging.getLogger(__name__)

FILTER_KINDS = ("all", "name", "email", "none")


class SuggestionCoordinator:
    """Coordinates name-based and email-based matching for one directory.

    Every call to generate_suggestions builds fresh matchers, so the email
    cache and the cross-identifier uniqueness check live exactly as long as
    one batch.
    """

    def __init__(
        self,
        directory: Sequence[DirectoryPerson],
        assignment_tracker: AssignmentTracker | None = None,
        settings: ReconcilerSettings | None = None,
    ):
        """Initialize the coordinator.

        Args:
            directory: Persons not yet assigned in this session
            assignment_tracker: Answers whether a record was already resolved by a reviewer
            settings: Matching thresholds; defaults to the process-wide settings
        """
        self.directory = list(directory)
        self.assignment_tracker = assignment_tracker or InMemoryAssignmentTracker()
        self.settings = settings or get_settings()

    def generate_suggestions(self, records: Sequence[RawIdentifier]) -> dict[int, Suggestion]:
        """Generate at most one suggestion per attendance record.

        Args:
            records: Unassigned attendance records of this batch

        Returns:
            Mapping of record_id to Suggestion
        """
        name_matcher = PhasedIdentifierMatcher(self.directory)
        email_matcher = EmailPatternMatcher(self.directory, self.settings, EmailMatchSession())

        name_results = self._name_based_results(records, name_matcher)
        email_results = self._email_based_results(records, name_results, email_matcher)
        suggestions = self._merge(name_results, email_results)

        logger.info(
            f"Generated {len(suggestions)} suggestions for {len(records)} records "
            f"({len(name_results)} name, {len(email_results)} email)"
        )
        return suggestions

    def _was_applied(self, record: RawIdentifier) -> bool:
        if self.assignment_tracker.was_suggestion_applied(record.record_id):
            logger.debug(f"Skipping record {record.record_id}: suggestion already applied")
            return True
        return False

    def _name_based_results(
        self, records: Sequence[RawIdentifier], matcher: PhasedIdentifierMatcher
    ) -> dict[int, tuple[MatchResult, NameCandidate | None]]:
        results: dict[int, tuple[MatchResult, NameCandidate | None]] = {}
        for record in records:
            text = record.text.strip()
            if not text or is_email(text) or self._was_applied(record):
                continue

            cleaned = clean_identifier(text)
            result = matcher.find_best_match(cleaned)
            if result.is_resolved:
                # Initials ("Rossi M") have no two-part reading; the tag is then omitted
                reading = self._reading_for(decompose_display_name(cleaned), result.person)
                results[record.record_id] = (result, reading)
        return results

    @staticmethod
    def _reading_for(candidates: list[NameCandidate], person: DirectoryPerson | None) -> NameCandidate | None:
        """The display-name reading that spells the matched person's stored name, if any."""
        if person is None:
            return None
        for candidate in candidates:
            if names_match(candidate.firstname, person.firstname) and names_match(candidate.lastname, person.lastname):
                return candidate
        return None

    def _email_based_results(
        self,
        records: Sequence[RawIdentifier],
        name_results: dict[int, Any],
        matcher: EmailPatternMatcher,
    ) -> dict[int, MatchResult]:
        results: dict[int, MatchResult] = {}
        claimed: dict[int, int] = {}
        for record in records:
            if record.record_id in name_results:
                continue
            text = record.text.strip()
            if not is_email(text) or self._was_applied(record):
                continue

            result = matcher.find_best_match(text)
            if not result.is_resolved or result.person is None:
                continue

            # The same address on two records resolves to the same cached person
            owner = claimed.get(result.person.id)
            if owner is not None and owner != record.record_id:
                logger.debug(
                    f"Record {record.record_id}: person {result.person.id} already suggested for record {owner}"
                )
                continue
            claimed[result.person.id] = record.record_id
            results[record.record_id] = result
        return results

    def _merge(
        self,
        name_results: dict[int, tuple[MatchResult, NameCandidate | None]],
        email_results: dict[int, MatchResult],
    ) -> dict[int, Suggestion]:
        merged: dict[int, Suggestion] = {}

        for record_id, (result, reading) in name_results.items():
            if result.person is None:
                continue
            metadata = dict(result.metadata)
            metadata["method"] = result.method
            if reading is not None:
                metadata["name_candidate"] = reading.source_tag
            merged[record_id] = Suggestion(
                record_id=record_id,
                person=result.person,
                type=SuggestionType.NAME,
                priority=NAME_SUGGESTION_PRIORITY,
                confidence=ConfidenceLevel.HIGH,
                score=result.confidence,
                metadata=metadata,
            )

        for record_id, result in email_results.items():
            # A name suggestion is never replaced by an email suggestion
            if record_id in merged or result.person is None:
                continue
            merged[record_id] = Suggestion(
                record_id=record_id,
                person=result.person,
                type=SuggestionType.EMAIL,
                priority=EMAIL_SUGGESTION_PRIORITY,
                confidence=ConfidenceLevel.MEDIUM,
                score=result.confidence,
                metadata={**result.metadata, "method": result.method},
            )

        return merged

    @staticmethod
    def statistics(suggestions: dict[int, Suggestion]) -> SuggestionStatistics:
        """Count suggestions by type and confidence."""
        stats = SuggestionStatistics(total=len(suggestions))
        for suggestion in suggestions.values():
            if suggestion.type is SuggestionType.NAME:
                stats.name_based += 1
            else:
                stats.email_based += 1

            if suggestion.confidence is ConfidenceLevel.HIGH:
                stats.high_confidence += 1
            else:
                stats.medium_confidence += 1
        return stats

    @staticmethod
    def sort_by_type(records: Sequence[RawIdentifier], suggestions: dict[int, Suggestion]) -> list[RawIdentifier]:
        """Name-matched records first, then email-matched, then unmatched.

        Relative order within each group is preserved.
        """
        name_suggested: list[RawIdentifier] = []
        email_suggested: list[RawIdentifier] = []
        not_suggested: list[RawIdentifier] = []

        for record in records:
            suggestion = suggestions.get(record.record_id)
            if suggestion is None:
                not_suggested.append(record)
            elif suggestion.type is SuggestionType.NAME:
                name_suggested.append(record)
            else:
                email_suggested.append(record)

        return name_suggested + email_suggested + not_suggested

    @staticmethod
    def filter_by_type(
        records: Sequence[RawIdentifier], suggestions: dict[int, Suggestion], kind: str = "all"
    ) -> list[RawIdentifier]:
        """Keep records whose suggestion matches kind ("all", "name", "email", "none").

        Unknown kinds keep every record.
        """
        wanted = {"name": SuggestionType.NAME, "email": SuggestionType.EMAIL}.get(kind)
        if wanted is not None:
            return [r for r in records if r.record_id in suggestions and suggestions[r.record_id].type is wanted]
        if kind == "none":
            return [r for r in records if r.record_id not in suggestions]
        return list(records)
