"""
Configuration settings for the quizcore assessment engine.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    # ========================================
    # Scoring
    # ========================================
    percentage_decimals: int = Field(
        default=2,
        ge=0,
        description="Decimal places kept when a score is turned into a percentage",
    )

    # ========================================
    # Authoring
    # ========================================
    default_option_count: int = Field(
        default=4,
        ge=1,
        description="Empty options created for a new multiple-choice question",
    )
    min_options: int = Field(
        default=2,
        ge=1,
        description="Minimum options for single and multi-select questions",
    )
    min_matching_pairs: int = Field(
        default=2,
        ge=1,
        description="Minimum pairs for a matching question",
    )
    blank_id_prefix: str = Field(
        default="b",
        min_length=1,
        description="Prefix for cloze blank identifiers (b1, b2, ...)",
    )
    pair_id_prefix: str = Field(
        default="p",
        min_length=1,
        description="Prefix for matching pair identifiers (p1, p2, ...)",
    )

    # ========================================
    # Matching
    # ========================================
    matching_shuffle_seed: int | None = Field(
        default=None,
        description="Fixed seed for the right-column permutation (None = random per attempt)",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
