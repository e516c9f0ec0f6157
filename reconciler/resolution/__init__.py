"""Identifier matching system.

Provides the phased display-name matcher and the email local-part matcher."""

from __future__ import annotations

from .email_matcher import EmailMatchSession, EmailPatternMatcher
from .email_patterns import EMAIL_PATTERNS, EmailPattern
from .interfaces import IdentifierMatcher, MatchResult
from .phased_matcher import PhasedIdentifierMatcher

__all__ = [
    "EMAIL_PATTERNS",
    "EmailMatchSession",
    "EmailPattern",
    "EmailPatternMatcher",
    "IdentifierMatcher",
    "MatchResult",
    "PhasedIdentifierMatcher",
]
