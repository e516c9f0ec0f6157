"""Text normalization for identifiers and names.

All comparison in the engine happens on normalized text: lowercase, no
accents, one apostrophe glyph, single spaces."""

from __future__ import annotations

import re
import unicodedata

from ..core.constants import (
    APOSTROPHE_PREFIXES,
    APOSTROPHE_VARIANTS,
    EMAIL_PATTERN,
    ORGANIZATIONAL_NOISE_PATTERNS,
)

_NON_NAME_CHARS = re.compile(r"[^a-z0-9\s-]")
_NON_ALNUM = re.compile(r"[^a-z0-9]")


def remove_accents(text: str) -> str:
    """Map accented letters to their unaccented base (à -> a, Ç -> C)."""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def unify_apostrophes(text: str) -> str:
    for variant in APOSTROPHE_VARIANTS:
        text = text.replace(variant, "'")
    return text


def normalize(text: str) -> str:
    """Canonical form used for every comparison.

    1. Unify apostrophe glyphs to "'"
    2. Strip accents
    3. Lowercase, trim and collapse whitespace

    Idempotent: normalize(normalize(x)) == normalize(x).
    """
    if not text:
        return ""
    text = remove_accents(unify_apostrophes(text))
    return " ".join(text.lower().split())


def clean_identifier(text: str) -> str:
    """Normalize an identifier and strip organizational noise.

    Title prefixes, "- Comune di ..." style suffixes and "(guest)" markers are
    removed in order.

    Examples:
        "Mario Bianchi - Comune di Milano" -> "mario bianchi"
        "Dott.ssa Anna Verdi (ospite)" -> "anna verdi"
    """
    cleaned = normalize(text)
    for pattern in ORGANIZATIONAL_NOISE_PATTERNS:
        cleaned = pattern.sub("", cleaned)
    return " ".join(cleaned.split())


def strip_punctuation(text: str) -> str:
    """Normalize, then drop everything except letters, digits, spaces and hyphens.

    Accents are removed before punctuation so "José" keeps its "e".
    """
    return " ".join(_NON_NAME_CHARS.sub("", normalize(text)).split())


def alphanumeric_only(text: str) -> str:
    """Normalize, then keep only [a-z0-9] (email local-part comparisons)."""
    return _NON_ALNUM.sub("", normalize(text))


def names_match(left: str, right: str) -> bool:
    """True iff both names have the same normalized form."""
    return normalize(left) == normalize(right)


def is_email(text: str) -> bool:
    """Check whether an identifier is shaped like an email address."""
    return bool(text) and EMAIL_PATTERN.match(text.strip()) is not None


def create_name_variations(name: str) -> set[str]:
    """Return spelling variations of a name for apostrophe-tolerant lookups.

    Includes the name itself, its normalized form and, for Italian elided
    prefixes, the form with the apostrophe removed or inserted:
        "D'Angelo" -> {"D'Angelo", "d'angelo", "dangelo"}
        "Dellacqua" -> {"Dellacqua", "dellacqua", "dell'acqua"}
    """
    variations = {name}
    base = normalize(name)
    if not base:
        return variations
    variations.add(base)

    for prefix in APOSTROPHE_PREFIXES:
        elided = f"{prefix}'"
        if base.startswith(elided) and len(base) > len(elided):
            variations.add(prefix + base[len(elided) :])
            break
        if base.startswith(prefix) and len(base) > len(prefix) + 1 and base[len(prefix)].isalpha():
            variations.add(elided + base[len(prefix) :])
            break

    return variations

