"""Email local-part matcher.

Scores every directory person against the local part of an email identifier
using a table of naming conventions, then refuses to answer whenever the
best person cannot be told apart from another one."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from ..core.models import DirectoryPerson, MatchCandidate
from ..logging_config import TRACE
from ..settings import ReconcilerSettings, get_settings
from ..shared.name_decomposer import decompose_person
from ..shared.text_normalizer import alphanumeric_only, normalize
from .email_patterns import (
    EMAIL_PATTERNS,
    best_similarity,
    derive_confidence,
    local_part_variants,
)
from .interfaces import IdentifierMatcher, MatchResult

logger = logging.getLogger(__name__)


@dataclass
class EmailMatchSession:
    """Run-scoped state of the email matcher.

    Holds the result of every identifier already looked up and which
    identifier each suggested person was given to. Create one per batch;
    it is not safe to share between threads.
    """

    results: dict[str, MatchResult] = field(default_factory=dict)
    owners: dict[int, str] = field(default_factory=dict)

    def cached(self, identifier: str) -> MatchResult | None:
        return self.results.get(identifier)

    def store(self, identifier: str, result: MatchResult) -> None:
        self.results[identifier] = result
        if result.person is not None:
            self.owners.setdefault(result.person.id, identifier)

    def owner_of(self, person_id: int) -> str | None:
        """Identifier the person was already suggested for, if any."""
        return self.owners.get(person_id)


class EmailPatternMatcher(IdentifierMatcher):
    """Match email identifiers by comparing local parts with name patterns.

    Each (person, tier) pair keeps its best weighted score. Pairs at or above
    the candidate floor take part in disambiguation; the winner must also
    reach the similarity threshold. The decision of which person wins never
    depends on the threshold, so raising it can only remove suggestions.
    """

    def __init__(
        self,
        directory: Sequence[DirectoryPerson],
        settings: ReconcilerSettings | None = None,
        session: EmailMatchSession | None = None,
    ):
        """Initialize the email matcher.

        Args:
            directory: Persons not yet assigned in this session
            settings: Thresholds; defaults to the process-wide settings
            session: Run-scoped cache; a fresh one is created when omitted
        """
        self.directory = list(directory)
        self.settings = settings or get_settings()
        self.session = session if session is not None else EmailMatchSession()
        self._name_pairs = {person.id: self._clean_name_pairs(person) for person in self.directory}

    @property
    def name(self) -> str:
        return "email_pattern_match"

    @staticmethod
    def _clean_name_pairs(person: DirectoryPerson) -> list[tuple[str, str]]:
        """Alphanumeric (firstname, lastname) pairs for every decomposition of a person."""
        pairs: list[tuple[str, str]] = []
        for candidate in decompose_person(person):
            pair = (alphanumeric_only(candidate.firstname), alphanumeric_only(candidate.lastname))
            if pair[0] and pair[1] and pair not in pairs:
                pairs.append(pair)
        return pairs

    def find_best_match(self, identifier: str) -> MatchResult:
        """Find the single person an email identifier most plausibly belongs to."""
        key = identifier.strip()
        cached = self.session.cached(key)
        if cached is not None:
            logger.debug(f"Email cache hit for '{key}'")
            return cached

        result = self._match(key)
        self.session.store(key, result)
        return result

    def _match(self, identifier: str) -> MatchResult:
        parts = identifier.split("@")
        if len(parts) != 2:
            return self._no_match("malformed_email")

        local_part = normalize(parts[0])
        if not local_part:
            return self._no_match("empty_local_part")

        pool = self.score_candidates(local_part)
        return self._disambiguate(identifier, pool)

    def score_candidates(self, local_part: str, floor: float | None = None) -> list[MatchCandidate]:
        """Best-scoring pattern per (person, tier) at or above the floor.

        Sorted by tier ascending, then score descending.
        """
        floor = self.settings.email_candidate_floor if floor is None else floor
        variants = local_part_variants(normalize(local_part))

        candidates: list[MatchCandidate] = []
        for person in self.directory:
            for candidate in self._best_per_tier(person, variants).values():
                if candidate.score >= floor:
                    candidates.append(candidate)

        candidates.sort(key=lambda c: (c.priority, -c.score))
        if logger.isEnabledFor(TRACE):
            for c in candidates:
                logger.log(
                    TRACE,
                    f"'{local_part}' person {c.person.id} tier {c.priority}: {c.pattern_name} score {c.score:.3f}",
                )
        return candidates

    def _best_per_tier(self, person: DirectoryPerson, variants: list[str]) -> dict[int, MatchCandidate]:
        best: dict[int, MatchCandidate] = {}
        for firstname, lastname in self._name_pairs.get(person.id, []):
            for pattern in EMAIL_PATTERNS:
                raw_similarity = best_similarity(variants, pattern.generate(firstname, lastname))
                score = raw_similarity * pattern.weight
                current = best.get(pattern.tier)
                if current is not None and score <= current.score:
                    continue
                best[pattern.tier] = MatchCandidate(
                    person=person,
                    score=score,
                    priority=pattern.tier,
                    pattern_name=pattern.name,
                    is_ambiguous=pattern.check_ambiguity,
                    confidence=derive_confidence(
                        raw_similarity, pattern, self.settings.non_ambiguous_confidence_boost
                    ),
                )
        return best

    def _disambiguate(self, identifier: str, pool: list[MatchCandidate]) -> MatchResult:
        """Pick the top candidate or refuse when it is not clearly the right person."""
        if not pool:
            return self._no_match("no_candidates")

        settings = self.settings
        top = pool[0]
        own = [c for c in pool if c.person.id == top.person.id]
        rivals = [c for c in pool if c.person.id != top.person.id]

        accepted = max(own, key=lambda c: c.score)
        if accepted.score < settings.email_similarity_threshold:
            return self._no_match("below_threshold", best_score=accepted.score)
        if top.score >= settings.email_similarity_threshold:
            accepted = top

        if not rivals:
            if top.is_ambiguous and top.confidence < settings.email_min_ambiguous_confidence:
                logger.debug(f"Rejecting '{identifier}': lone {top.pattern_name} hit below confidence floor")
                return self._no_match("low_confidence", pattern=top.pattern_name)
        else:
            same_tier = [c for c in rivals if c.priority == top.priority]
            if same_tier and top.score - same_tier[0].score < settings.email_score_gap:
                logger.debug(
                    f"Rejecting '{identifier}': persons {top.person.id} and {same_tier[0].person.id} "
                    f"too close in tier {top.priority}"
                )
                return self._no_match("score_gap", tier=top.priority)

            if top.is_ambiguous and any(
                c.pattern_name == top.pattern_name and abs(top.score - c.score) <= settings.email_pattern_tolerance
                for c in rivals
            ):
                logger.debug(f"Rejecting '{identifier}': pattern {top.pattern_name} shared by another person")
                return self._no_match("duplicate_pattern", pattern=top.pattern_name)

        owner = self.session.owner_of(top.person.id)
        if owner is not None and owner != identifier:
            logger.debug(f"Rejecting '{identifier}': person {top.person.id} already suggested for '{owner}'")
            return self._no_match("already_assigned", assigned_to=owner)

        return MatchResult(
            person=top.person,
            confidence=accepted.confidence,
            method=self.name,
            metadata={
                "pattern": accepted.pattern_name,
                "tier": accepted.priority,
                "score": accepted.score,
                "candidate_count": len(pool),
            },
        )

    def pattern_details(self, local_part: str, person: DirectoryPerson) -> list[dict[str, Any]]:
        """Score breakdown of every pattern for one person, for diagnostics."""
        variants = local_part_variants(normalize(local_part))
        details: list[dict[str, Any]] = []
        for firstname, lastname in self._clean_name_pairs(person):
            for pattern in EMAIL_PATTERNS:
                value = pattern.generate(firstname, lastname)
                raw_similarity = best_similarity(variants, value)
                weighted = raw_similarity * pattern.weight
                details.append(
                    {
                        "firstname": firstname,
                        "lastname": lastname,
                        "pattern_name": pattern.name,
                        "tier": pattern.tier,
                        "weight": pattern.weight,
                        "pattern_value": value,
                        "similarity": raw_similarity,
                        "weighted_score": weighted,
                        "ambiguity_check": pattern.check_ambiguity,
                        "would_suggest": weighted >= self.settings.email_similarity_threshold,
                    }
                )
        return details
