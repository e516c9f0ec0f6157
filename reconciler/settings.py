"""
Matching settings using pydantic-settings for type-safe configuration.

Every tunable constant of the reconciliation engine lives here with a
sensible default. Values can be overridden with RECONCILER_* environment
variables or a .env file.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .logging_config import LEVELS_BY_NAME


class ReconcilerSettings(BaseSettings):
    """Thresholds and tolerances used by the email and name matchers."""

    model_config = SettingsConfigDict(
        env_prefix="RECONCILER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # === Email local-part matching ===
    email_similarity_threshold: float = Field(
        default=0.85,
        description="Minimum weighted score the suggested person must reach",
    )
    email_candidate_floor: float = Field(
        default=0.7,
        description="Minimum weighted score for a (person, tier) pair to take part in disambiguation",
    )
    email_score_gap: float = Field(
        default=0.15,
        description="Minimum score gap between the top two same-tier candidates",
    )
    email_pattern_tolerance: float = Field(
        default=0.1,
        description="Score tolerance under which two candidates sharing a pattern are indistinguishable",
    )
    email_min_ambiguous_confidence: float = Field(
        default=0.9,
        description="Minimum confidence for a lone candidate produced by an ambiguity-prone pattern",
    )
    non_ambiguous_confidence_boost: float = Field(
        default=1.1,
        description="Multiplier applied to the similarity of distinctive patterns when deriving confidence",
    )

    # === Logging ===
    log_level: str = Field(
        default="INFO",
        description="Log level for the batch entry point (TRACE, DEBUG, INFO, WARNING, ERROR)",
    )

    @field_validator(
        "email_similarity_threshold",
        "email_candidate_floor",
        "email_score_gap",
        "email_pattern_tolerance",
        "email_min_ambiguous_confidence",
        mode="after",
    )
    @classmethod
    def validate_probability(cls, v: float) -> float:
        """Probabilities and score deltas must stay within [0, 1]."""
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"Value {v} must be between 0 and 1")
        return v

    @field_validator("non_ambiguous_confidence_boost", mode="after")
    @classmethod
    def validate_boost(cls, v: float) -> float:
        if v < 1.0:
            raise ValueError(f"Confidence boost {v} must be >= 1.0")
        return v

    @field_validator("log_level", mode="after")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log_level."""
        v = v.upper()
        if v not in LEVELS_BY_NAME:
            raise ValueError(f"Invalid log level: {v}. Must be one of {', '.join(LEVELS_BY_NAME)}")
        return v


@lru_cache
def get_settings() -> ReconcilerSettings:
    """
    Get cached settings instance.

    Settings are loaded once and cached for the lifetime of the process.
    """
    return ReconcilerSettings()
