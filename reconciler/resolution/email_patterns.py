"""Email local-part pattern table and scoring.

Each pattern names an email naming convention, how to build the local part
it implies from a cleaned (firstname, lastname) pair, its priority tier and
its weight. Separators are never embedded in the generated value: local
parts are compared after separator normalization, so "cognome.nome" and
"cognomenome" generate the same string and differ only by weight."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from rapidfuzz.distance import Levenshtein


@dataclass(frozen=True)
class EmailPattern:
    """One email naming convention"""

    name: str
    tier: int
    weight: float
    check_ambiguity: bool
    build: Callable[[str, str], str]

    def generate(self, firstname: str, lastname: str) -> str:
        """Local part implied by this pattern for cleaned, non-empty names."""
        return self.build(firstname, lastname)


# Tier 1: lastname-first, tier 2: firstname-first, tier 3: initials and other
# low-signal constructions. Ordered by tier, then weight.
EMAIL_PATTERNS: tuple[EmailPattern, ...] = (
    EmailPattern("cognome.nome", 1, 1.0, False, lambda first, last: last + first),
    EmailPattern("cognome_nome", 1, 0.98, False, lambda first, last: last + first),
    EmailPattern("cognomenome", 1, 0.96, False, lambda first, last: last + first),
    EmailPattern("cognome.n", 1, 0.9, True, lambda first, last: last + first[0]),
    EmailPattern("cognome-n", 1, 0.88, True, lambda first, last: last + first[0]),
    EmailPattern("cognome", 1, 0.8, True, lambda first, last: last),
    EmailPattern("nome.cognome", 2, 1.0, False, lambda first, last: first + last),
    EmailPattern("nome_cognome", 2, 0.98, False, lambda first, last: first + last),
    EmailPattern("nomecognome", 2, 0.96, False, lambda first, last: first + last),
    EmailPattern("n.cognome", 2, 0.9, True, lambda first, last: first[0] + last),
    EmailPattern("n-cognome", 2, 0.88, True, lambda first, last: first[0] + last),
    EmailPattern("nome", 2, 0.75, True, lambda first, last: first),
    EmailPattern("nome.c", 3, 0.85, True, lambda first, last: first + last[0]),
    EmailPattern("c.nome", 3, 0.8, True, lambda first, last: last[0] + first),
    EmailPattern("nom.cog", 3, 0.7, True, lambda first, last: first[:3] + last[:3]),
    EmailPattern("n.c", 3, 0.65, True, lambda first, last: first[0] + last[0]),
    EmailPattern("c.n", 3, 0.6, True, lambda first, last: last[0] + first[0]),
)

PATTERNS_BY_NAME = {pattern.name: pattern for pattern in EMAIL_PATTERNS}


def similarity(left: str, right: str) -> float:
    """Normalized Levenshtein similarity: 1 - distance / max(len).

    Two empty strings are identical (1.0).
    """
    longest = max(len(left), len(right))
    if longest == 0:
        return 1.0
    return 1.0 - Levenshtein.distance(left, right) / longest


def local_part_variants(local_part: str) -> list[str]:
    """The local part plus its dot-collapsed, underscore-collapsed and separator-free forms."""
    variants = [
        local_part,
        local_part.replace(".", ""),
        local_part.replace("_", ""),
        "".join(c for c in local_part if c.isalnum()),
    ]
    unique: list[str] = []
    for variant in variants:
        if variant not in unique:
            unique.append(variant)
    return unique


def best_similarity(variants: list[str], generated: str) -> float:
    """Best similarity of a generated local part against any variant."""
    return max(similarity(variant, generated) for variant in variants)


def derive_confidence(
    raw_similarity: float,
    pattern: EmailPattern,
    non_ambiguous_boost: float = 1.1,
) -> float:
    """Confidence of a pattern hit, clamped to [0, 1].

    Distinctive patterns get their similarity boosted before weighting.
    """
    boosted = raw_similarity if pattern.check_ambiguity else raw_similarity * non_ambiguous_boost
    return max(0.0, min(1.0, boosted * pattern.weight))
