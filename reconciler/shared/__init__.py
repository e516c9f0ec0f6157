"""Shared text and name utilities."""

from __future__ import annotations

from .name_decomposer import decompose_display_name, decompose_person
from .text_normalizer import (
    alphanumeric_only,
    clean_identifier,
    create_name_variations,
    is_email,
    names_match,
    normalize,
    strip_punctuation,
)

__all__ = [
    "alphanumeric_only",
    "clean_identifier",
    "create_name_variations",
    "decompose_display_name",
    "decompose_person",
    "is_email",
    "names_match",
    "normalize",
    "strip_punctuation",
]
