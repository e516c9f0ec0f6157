"""Phased matcher for display-name identifiers.

Runs an ordered sequence of whole-word strategies against a normalized
display name. The first phase that yields a person wins; phases that rely on
initials refuse to answer when the initial is shared by several people."""

from __future__ import annotations

import logging
import re
from collections import defaultdict
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from ..core.constants import PHASE_CONFIDENCE, STOP_WORDS
from ..core.models import DirectoryPerson
from ..shared.name_decomposer import decompose_person
from ..shared.text_normalizer import is_email, strip_punctuation
from .interfaces import IdentifierMatcher, MatchResult

logger = logging.getLogger(__name__)

PhaseFunction = Callable[[str, set[int]], DirectoryPerson | None]


@dataclass(frozen=True)
class _NameEntry:
    """One normalized reading of a directory person"""

    person: DirectoryPerson
    firstname: str
    lastname: str
    source_tag: str

    @property
    def first_initial(self) -> str:
        return self.firstname[:1]

    @property
    def last_initial(self) -> str:
        return self.lastname[:1]


class PhasedIdentifierMatcher(IdentifierMatcher):
    """Match display names to directory persons in ordered phases.

    Phases:
        1. full lastname and full firstname as whole words, looked up lastname first
        2. full firstname and full lastname as whole words, looked up firstname first
        3. reserved
        4. lastname + firstname initial, rejected when the pair is shared
        5. firstname + lastname initial, rejected when the pair is shared
        6. reserved

    The set of persons already claimed is created fresh for every
    find_best_match call and passed to each phase explicitly. It does not
    carry over between identifiers, so two identifiers in one batch may
    both match the same person.
    """

    def __init__(self, directory: Sequence[DirectoryPerson]):
        """Initialize the matcher.

        Args:
            directory: Persons not yet assigned in this session
        """
        self.directory = list(directory)
        self._entries = self._build_entries(self.directory)
        self._lastname_initial_index: dict[tuple[str, str], set[int]] = defaultdict(set)
        self._firstname_initial_index: dict[tuple[str, str], set[int]] = defaultdict(set)
        for entry in self._entries:
            self._lastname_initial_index[(entry.lastname, entry.first_initial)].add(entry.person.id)
            self._firstname_initial_index[(entry.firstname, entry.last_initial)].add(entry.person.id)

        self._phases: list[tuple[int, str, PhaseFunction]] = [
            (1, "lastname_firstname", self.phase1_lastname_firstname),
            (2, "firstname_lastname", self.phase2_firstname_lastname),
            # Phase 3 is reserved
            (4, "lastname_initial", self.phase4_lastname_initial),
            (5, "firstname_initial", self.phase5_firstname_initial),
            # Phase 6 is reserved
        ]

    @property
    def name(self) -> str:
        return "phased_match"

    @staticmethod
    def _build_entries(directory: Sequence[DirectoryPerson]) -> list[_NameEntry]:
        """Normalize every decomposition of every person.

        Stored readings of all persons come before derived readings, so a
        literal match is always preferred over a repaired one.
        """
        primary: list[_NameEntry] = []
        derived: list[_NameEntry] = []
        for person in directory:
            for candidate in decompose_person(person):
                entry = _NameEntry(
                    person=person,
                    firstname=strip_punctuation(candidate.firstname),
                    lastname=strip_punctuation(candidate.lastname),
                    source_tag=candidate.source_tag,
                )
                if not entry.firstname or not entry.lastname:
                    continue
                if candidate.source_tag == "original":
                    primary.append(entry)
                else:
                    derived.append(entry)
        return primary + derived

    def find_best_match(self, identifier: str) -> MatchResult:
        """Run phases 1, 2, 4 and 5 in order and return the first hit."""
        if is_email(identifier):
            return self._no_match("email_identifier")

        text = strip_punctuation(identifier)
        if not text:
            return self._no_match("empty_identifier")

        matched: set[int] = set()
        for number, phase_name, phase in self._phases:
            person = phase(text, matched)
            if person is not None:
                logger.debug(f"Phase {number} ({phase_name}) matched '{text}' -> person {person.id}")
                return MatchResult(
                    person=person,
                    confidence=PHASE_CONFIDENCE[number],
                    method=self.name,
                    metadata={"phase": number, "phase_name": phase_name},
                )

        logger.debug(f"No phase matched '{text}'")
        return self._no_match("no_phase_matched")

    def phase1_lastname_firstname(self, text: str, matched: set[int]) -> DirectoryPerson | None:
        """Full lastname, then full firstname, each as a whole word anywhere in text."""
        for entry in self._entries:
            if entry.person.id in matched:
                continue
            if self._word_position(text, entry.lastname) is None:
                continue
            if self._word_position(text, entry.firstname) is not None:
                matched.add(entry.person.id)
                return entry.person
        return None

    def phase2_firstname_lastname(self, text: str, matched: set[int]) -> DirectoryPerson | None:
        """Full firstname, then full lastname, each as a whole word anywhere in text."""
        for entry in self._entries:
            if entry.person.id in matched:
                continue
            if self._word_position(text, entry.firstname) is None:
                continue
            if self._word_position(text, entry.lastname) is not None:
                matched.add(entry.person.id)
                return entry.person
        return None

    def phase4_lastname_initial(self, text: str, matched: set[int]) -> DirectoryPerson | None:
        """Lastname plus firstname initial ("Rossi M.")."""
        for entry in self._entries:
            if entry.person.id in matched:
                continue
            if self._word_position(text, entry.lastname) is None:
                continue
            if not self._has_initial(text, entry.first_initial):
                continue
            if self._is_ambiguous(self._lastname_initial_index, entry.lastname, entry.first_initial):
                logger.debug(f"Phase 4 ambiguity: '{entry.lastname}' + '{entry.first_initial}' is shared")
                continue
            matched.add(entry.person.id)
            return entry.person
        return None

    def phase5_firstname_initial(self, text: str, matched: set[int]) -> DirectoryPerson | None:
        """Firstname plus lastname initial ("Mario R.")."""
        for entry in self._entries:
            if entry.person.id in matched:
                continue
            if self._word_position(text, entry.firstname) is None:
                continue
            if not self._has_initial(text, entry.last_initial):
                continue
            if self._is_ambiguous(self._firstname_initial_index, entry.firstname, entry.last_initial):
                logger.debug(f"Phase 5 ambiguity: '{entry.firstname}' + '{entry.last_initial}' is shared")
                continue
            matched.add(entry.person.id)
            return entry.person
        return None

    @staticmethod
    def _word_position(text: str, word: str) -> int | None:
        """Start of the first whole-word occurrence of word, or None.

        Articles and prepositions never count as a name on their own.
        """
        if not word or word in STOP_WORDS:
            return None
        match = re.search(r"\b" + re.escape(word) + r"\b", text)
        return match.start() if match else None

    @staticmethod
    def _has_initial(text: str, initial: str) -> bool:
        """Check for a standalone initial, optionally followed by a period."""
        if not initial:
            return False
        return re.search(r"\b" + re.escape(initial) + r"\.?(?!\w)", text) is not None

    @staticmethod
    def _is_ambiguous(index: dict[tuple[str, str], set[int]], name: str, initial: str) -> bool:
        return len(index.get((name, initial), ())) > 1
