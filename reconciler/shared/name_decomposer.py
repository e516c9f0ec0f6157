"""Name decomposition for display names and directory entries.

Produces every plausible (firstname, lastname) reading of an input so the
matchers can tolerate swapped fields, compound names and duplicated words."""

from __future__ import annotations

from collections.abc import Iterable

from ..core.constants import DISPLAY_NAME_SEPARATORS, MIN_NAME_PART_LENGTH
from ..core.models import DirectoryPerson, NameCandidate


def _finalize(candidates: Iterable[NameCandidate]) -> list[NameCandidate]:
    """Drop short/empty candidates and collapse case-insensitive duplicates.

    The first occurrence of a firstname|lastname pair wins, so callers list
    their most trusted reading first.
    """
    seen: set[str] = set()
    result: list[NameCandidate] = []
    for candidate in candidates:
        first = " ".join(candidate.firstname.split())
        last = " ".join(candidate.lastname.split())
        if len(first) < MIN_NAME_PART_LENGTH or len(last) < MIN_NAME_PART_LENGTH:
            continue
        cleaned = NameCandidate(firstname=first, lastname=last, source_tag=candidate.source_tag)
        if cleaned.dedup_key in seen:
            continue
        seen.add(cleaned.dedup_key)
        result.append(cleaned)
    return result


def decompose_display_name(raw: str) -> list[NameCandidate]:
    """Interpret a free-text display name as (firstname, lastname) pairs.

    Examples:
        "Rossi, Mario" -> [(Mario, Rossi), (Rossi, Mario)]
        "Mario Rossi" -> [(Mario, Rossi), (Rossi, Mario)]
        "Anna Maria Verdi" -> [(Anna, Verdi), (Verdi, Anna), (Anna Maria, Verdi)]
        "Mario" -> []
    """
    if not raw:
        return []

    flattened = " ".join(DISPLAY_NAME_SEPARATORS.sub(" ", raw).split())
    if not flattened:
        return []

    parts = flattened.split(" ")
    if len(parts) < 2:
        return []

    candidates: list[NameCandidate] = []

    # "LastName, FirstName" convention
    if "," in raw:
        segments = [segment.strip() for segment in raw.split(",")]
        if len(segments) >= 2:
            candidates.append(NameCandidate(firstname=segments[1], lastname=segments[0], source_tag="comma_format"))

    candidates.append(NameCandidate(firstname=parts[0], lastname=parts[-1], source_tag="first_last"))
    candidates.append(NameCandidate(firstname=parts[-1], lastname=parts[0], source_tag="last_first"))

    if len(parts) > 2:
        candidates.append(
            NameCandidate(firstname=f"{parts[0]} {parts[1]}", lastname=parts[-1], source_tag="compound_first")
        )

    return _finalize(candidates)


def _dedupe_words(words: list[str]) -> list[str]:
    seen: set[str] = set()
    unique: list[str] = []
    for word in words:
        if word.lower() in seen:
            continue
        seen.add(word.lower())
        unique.append(word)
    return unique


def decompose_person(person: DirectoryPerson) -> list[NameCandidate]:
    """Interpret a directory entry, compensating for data-entry defects.

    Besides the stored fields this yields:
    - the swapped reading (surname typed in the firstname column)
    - firstname without a trailing copy of the lastname
      ("Alberto Deimann Deimann" / "Deimann" -> "Alberto Deimann")
    - the first word of a multi-word firstname
    - a split of identical multi-word fields ("Mario Rossi" / "Mario Rossi")
    - a lastname without repeated words, and its first component only
    """
    firstname = " ".join((person.firstname or "").split())
    lastname = " ".join((person.lastname or "").split())
    first_words = firstname.split(" ") if firstname else []
    last_words = lastname.split(" ") if lastname else []

    candidates = [
        NameCandidate(firstname=firstname, lastname=lastname, source_tag="original"),
        NameCandidate(firstname=lastname, lastname=firstname, source_tag="inverted"),
    ]

    if len(first_words) > 1:
        if first_words[-1].lower() == lastname.lower():
            candidates.append(
                NameCandidate(
                    firstname=" ".join(first_words[:-1]),
                    lastname=lastname,
                    source_tag="trailing_lastname_removed",
                )
            )
        candidates.append(NameCandidate(firstname=first_words[0], lastname=lastname, source_tag="first_word_only"))

    if len(first_words) > 1 and firstname.lower() == lastname.lower():
        candidates.append(
            NameCandidate(
                firstname=first_words[0],
                lastname=" ".join(first_words[1:]),
                source_tag="identical_fields_split",
            )
        )

    if len(last_words) > 1:
        unique_words = _dedupe_words(last_words)
        if len(unique_words) < len(last_words):
            candidates.append(
                NameCandidate(firstname=firstname, lastname=" ".join(unique_words), source_tag="lastname_deduplicated")
            )
            candidates.append(
                NameCandidate(firstname=firstname, lastname=last_words[0], source_tag="lastname_first_component")
            )

    return _finalize(candidates)
