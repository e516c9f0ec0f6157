"""Language and matching constants for attendance reconciliation.

These constants describe Italian naming conventions and the noise that
meeting platforms append to display names."""

from __future__ import annotations

import re

# Articles and prepositions that are never accepted as a name token on their own
STOP_WORDS = frozenset(
    {
        "di",
        "da",
        "de",
        "del",
        "della",
        "delle",
        "dei",
        "degli",
        "lo",
        "la",
        "le",
        "il",
        "a",
        "in",
        "con",
        "su",
        "per",
        "tra",
        "fra",
    }
)

# Prefixes that take an elided apostrophe in Italian surnames (D'Angelo, Dell'Acqua).
# Longest first so "dell" wins over "del" and "d".
APOSTROPHE_PREFIXES = ("dell", "dal", "del", "d", "l")

# Apostrophe glyphs unified to a plain "'"
APOSTROPHE_VARIANTS = ("’", "‘", "ʼ", "´", "`", "′")

# Separators replaced by spaces before splitting a display name
DISPLAY_NAME_SEPARATORS = re.compile(r"[,;|]")

# Organizational noise removed from identifiers, applied in order on
# lowercased, accent-free text
ORGANIZATIONAL_NOISE_PATTERNS: tuple[re.Pattern[str], ...] = (
    # Title prefixes: "Dott.", "Dott.ssa", "Prof.", "Ing.", ...
    re.compile(r"^(?:(?:dott|dr|prof|ing|avv|arch|geom|rag|sig|sig\.ra|sig\.na)(?:\.?ssa)?\.?\s+)+"),
    # "- Comune di Milano", "- Provincia di ...", "- Regione ...", "- ASL ..."
    re.compile(r"\s*[-–]\s*(?:comune|provincia|regione|citta metropolitana|asl|ats|unione)\b.*$"),
    # Guest markers appended by the meeting platform
    re.compile(r"\s*\((?:guest|ospite|esterno|external)\)\s*$"),
)

EMAIL_PATTERN = re.compile(
    r"^(?!\.)(?!.*\.\.)[a-z0-9.!#$%&'*+/=?^_`{|}~-]+(?<!\.)"
    r"@[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?(?:\.[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?)+$",
    re.IGNORECASE,
)

# Minimum length of a firstname/lastname in a decomposition candidate
MIN_NAME_PART_LENGTH = 2

# Suggestion priorities as shown to reviewers
NAME_SUGGESTION_PRIORITY = 1
EMAIL_SUGGESTION_PRIORITY = 2

# Confidence attached to phased name matches, by phase
PHASE_CONFIDENCE = {
    1: 1.0,
    2: 1.0,
    4: 0.85,
    5: 0.8,
}
